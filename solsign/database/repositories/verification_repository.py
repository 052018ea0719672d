from datetime import datetime
from typing import Any

from psycopg import errors as pg_errors
from psycopg.rows import dict_row

from solsign.database.connection import get_connection
from solsign.verification.exceptions import DuplicateIdentityError
from solsign.verification.models import Phase, ProfileSubmission, VerificationRecord

_COLUMNS = """
    id, username, email, phone_number, wallet_address, consent_given, phase,
    code, code_expires_at, reward_granted, reward_transaction_signature,
    reward_claimed_at, rewarded_at, created_at
"""


def _to_record(row: dict[str, Any]) -> VerificationRecord:
    return VerificationRecord(
        id=row["id"],
        identity=row["wallet_address"],
        username=row["username"],
        email=row["email"],
        phase=Phase(row["phase"]),
        phone=row["phone_number"],
        consent_given=row["consent_given"],
        code=row["code"],
        code_expires_at=row["code_expires_at"],
        reward_granted=row["reward_granted"],
        reward_transaction_signature=row["reward_transaction_signature"],
        reward_claimed_at=row["reward_claimed_at"],
        rewarded_at=row["rewarded_at"],
        created_at=row["created_at"],
    )


class VerificationRepository:
    """Database operations for the user_verifications table.

    Every state change is a single UPDATE guarded on the expected current
    state; the returned bool tells whether this caller won the transition.
    """

    def find_conflict(self, username: str, email: str, wallet_address: str) -> str | None:
        """Return which identity field is already taken, if any."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT username = %s, email = %s, wallet_address = %s
                    FROM user_verifications
                    WHERE username = %s OR email = %s OR wallet_address = %s
                    """,
                    (username, email, wallet_address, username, email, wallet_address),
                )
                rows = cur.fetchall()

        for field_index, field_name in enumerate(("username", "email", "wallet_address")):
            if any(row[field_index] for row in rows):
                return field_name
        return None

    def create(
        self,
        submission: ProfileSubmission,
        phase: Phase,
        code: str | None = None,
        code_expires_at: datetime | None = None,
    ) -> VerificationRecord:
        """Insert a new verification record.

        Raises:
            DuplicateIdentityError: if a unique identity column collides.
        """
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"""
                        INSERT INTO user_verifications
                        (username, email, phone_number, wallet_address, consent_given,
                         phase, code, code_expires_at)
                        VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                        RETURNING {_COLUMNS}
                        """,
                        (
                            submission.username,
                            submission.email,
                            submission.phone,
                            submission.wallet_address,
                            submission.consent_given,
                            phase.value,
                            code,
                            code_expires_at,
                        ),
                    )
                    row = cur.fetchone()
                conn.commit()
        except pg_errors.UniqueViolation as exc:
            raise DuplicateIdentityError(
                "A record with this information already exists"
            ) from exc

        if row is None:
            raise RuntimeError("INSERT ... RETURNING produced no row")
        return _to_record(row)

    def delete(self, wallet_address: str) -> bool:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "DELETE FROM user_verifications WHERE wallet_address = %s",
                    (wallet_address,),
                )
                deleted = cur.rowcount > 0
            conn.commit()
        return deleted

    def find_by_wallet(self, wallet_address: str) -> VerificationRecord | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM user_verifications WHERE wallet_address = %s",
                    (wallet_address,),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return _to_record(row)

    def list_all(self) -> list[VerificationRecord]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM user_verifications ORDER BY created_at DESC"
                )
                rows = cur.fetchall()
        return [_to_record(row) for row in rows]

    def set_phase(
        self, wallet_address: str, phase: Phase, from_phases: tuple[Phase, ...]
    ) -> bool:
        return self._guarded_update(
            """
            UPDATE user_verifications
            SET phase = %s, updated_at = NOW()
            WHERE wallet_address = %s AND phase = ANY(%s)
            """,
            (phase.value, wallet_address, [p.value for p in from_phases]),
        )

    def issue_code(
        self,
        wallet_address: str,
        code: str,
        expires_at: datetime,
        from_phases: tuple[Phase, ...],
    ) -> bool:
        """Store a new code, replacing any previous one, and enter code_sent."""
        return self._guarded_update(
            """
            UPDATE user_verifications
            SET phase = %s, code = %s, code_expires_at = %s, updated_at = NOW()
            WHERE wallet_address = %s AND phase = ANY(%s)
            """,
            (
                Phase.CODE_SENT.value,
                code,
                expires_at,
                wallet_address,
                [p.value for p in from_phases],
            ),
        )

    def revoke_code(self, wallet_address: str, code: str) -> bool:
        """Clear the code only if it is still the one that was issued."""
        return self._guarded_update(
            """
            UPDATE user_verifications
            SET code = NULL, code_expires_at = NULL, updated_at = NOW()
            WHERE wallet_address = %s AND code = %s
            """,
            (wallet_address, code),
        )

    def consume_code(self, wallet_address: str, code: str, now: datetime) -> bool:
        """Move code_sent -> code_verified and take the reward claim in one step.

        Succeeds only if the code matches and is unexpired at ``now``; the
        claim token is ``now`` itself.
        """
        return self._guarded_update(
            """
            UPDATE user_verifications
            SET phase = %s, code = NULL, code_expires_at = NULL,
                reward_claimed_at = %s, updated_at = NOW()
            WHERE wallet_address = %s
              AND phase = %s
              AND code = %s
              AND code_expires_at >= %s
            """,
            (
                Phase.CODE_VERIFIED.value,
                now,
                wallet_address,
                Phase.CODE_SENT.value,
                code,
                now,
            ),
        )

    def claim_reward(
        self, wallet_address: str, claimed_at: datetime, stale_before: datetime
    ) -> bool:
        """Take the single dispatch claim for a verified, unrewarded identity."""
        return self._guarded_update(
            """
            UPDATE user_verifications
            SET reward_claimed_at = %s, updated_at = NOW()
            WHERE wallet_address = %s
              AND phase = %s
              AND NOT reward_granted
              AND (reward_claimed_at IS NULL OR reward_claimed_at <= %s)
            """,
            (claimed_at, wallet_address, Phase.CODE_VERIFIED.value, stale_before),
        )

    def grant_reward(
        self,
        wallet_address: str,
        claimed_at: datetime,
        signature: str,
        granted_at: datetime,
    ) -> bool:
        """Mark the reward granted; only the holder of the claim succeeds."""
        return self._guarded_update(
            """
            UPDATE user_verifications
            SET phase = %s,
                reward_granted = TRUE,
                reward_transaction_signature = %s,
                rewarded_at = %s,
                reward_claimed_at = NULL,
                updated_at = NOW()
            WHERE wallet_address = %s
              AND phase = %s
              AND NOT reward_granted
              AND reward_claimed_at = %s
            """,
            (
                Phase.REWARD_GRANTED.value,
                signature,
                granted_at,
                wallet_address,
                Phase.CODE_VERIFIED.value,
                claimed_at,
            ),
        )

    def release_claim(self, wallet_address: str, claimed_at: datetime) -> bool:
        return self._guarded_update(
            """
            UPDATE user_verifications
            SET reward_claimed_at = NULL, updated_at = NOW()
            WHERE wallet_address = %s AND reward_claimed_at = %s
            """,
            (wallet_address, claimed_at),
        )

    def _guarded_update(self, sql: str, params: tuple[Any, ...]) -> bool:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                changed = cur.rowcount == 1
            conn.commit()
        return changed
