from datetime import datetime

from psycopg.rows import dict_row

from solsign.database.connection import get_connection
from solsign.verification.models import LivenessResult


class LivenessRepository:
    """Database operations for the liveness_checks table."""

    def upsert(
        self,
        user_id: str,
        verified: bool,
        verified_at: datetime,
        snapshot_hash: str | None,
    ) -> LivenessResult:
        """Store the latest liveness outcome for a user, replacing any earlier one."""
        with get_connection() as conn:
            conn.execute(
                """
                INSERT INTO liveness_checks (user_id, verified, last_verified_at, snapshot_hash)
                VALUES (%s, %s, %s, %s)
                ON CONFLICT (user_id) DO UPDATE
                SET verified = EXCLUDED.verified,
                    last_verified_at = EXCLUDED.last_verified_at,
                    snapshot_hash = EXCLUDED.snapshot_hash
                """,
                (user_id, verified, verified_at, snapshot_hash),
            )
            conn.commit()
        return LivenessResult(
            user_id=user_id,
            verified=verified,
            last_verified_at=verified_at,
            snapshot_hash=snapshot_hash,
        )

    def find(self, user_id: str) -> LivenessResult | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT user_id, verified, last_verified_at, snapshot_hash
                    FROM liveness_checks
                    WHERE user_id = %s
                    """,
                    (user_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return LivenessResult(
            user_id=row["user_id"],
            verified=row["verified"],
            last_verified_at=row["last_verified_at"],
            snapshot_hash=row["snapshot_hash"],
        )

    def delete(self, user_id: str) -> None:
        with get_connection() as conn:
            conn.execute("DELETE FROM liveness_checks WHERE user_id = %s", (user_id,))
            conn.commit()
