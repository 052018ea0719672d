from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from solsign.config.settings import Settings
from solsign.database.repositories.liveness_repository import LivenessRepository
from solsign.database.repositories.verification_repository import VerificationRepository
from solsign.logging.logger import Log
from solsign.mail import templates
from solsign.mail.base import BaseMailer
from solsign.mail.exceptions import MailDeliveryError
from solsign.reward.base import BaseRewardDispatcher
from solsign.reward.exceptions import RewardDispatchError
from solsign.verification import codes
from solsign.verification.exceptions import (
    AlreadyRewardedError,
    DeliveryError,
    DuplicateIdentityError,
    InvalidPhaseError,
    RewardPendingError,
    VerificationNotFoundError,
)
from solsign.verification.models import (
    LivenessResult,
    Phase,
    ProfileSubmission,
    VerificationOutcome,
    VerificationRecord,
)
from solsign.verification.state_machine import (
    CODE_ISSUABLE_PHASES,
    Event,
    check_code,
    check_resendable,
    check_reward_retry,
    next_gate_phase,
    transition,
)

_CONFLICT_MESSAGES = {
    "username": "Username already exists. Please choose a different username.",
    "email": "Email address already exists. Please use a different email.",
    "wallet_address": (
        "Wallet address already verified. This wallet is already associated "
        "with a verified account."
    ),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VerificationService:
    """Drives a wallet identity from consent to the one-time token reward.

    Pipeline: consent + liveness -> code emailed -> code confirmed -> reward.
    """

    def __init__(
        self,
        *,
        verification_repo: VerificationRepository,
        liveness_repo: LivenessRepository,
        mailer: BaseMailer,
        reward_dispatcher: BaseRewardDispatcher,
        settings: Settings,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._repo = verification_repo
        self._liveness_repo = liveness_repo
        self._mailer = mailer
        self._reward_dispatcher = reward_dispatcher
        self._settings = settings
        self._clock = clock

    def submit(self, submission: ProfileSubmission) -> VerificationRecord:
        """Register a profile and issue a code if the liveness gate already passed.

        Raises:
            DuplicateIdentityError: if username, email or wallet is taken.
            DeliveryError: if the code email fails; the new record is removed.
        """
        conflict = self._repo.find_conflict(
            submission.username, submission.email, submission.wallet_address
        )
        if conflict is not None:
            raise DuplicateIdentityError(_CONFLICT_MESSAGES[conflict])

        liveness = self._liveness_repo.find(submission.wallet_address)
        blocking = next_gate_phase(
            submission.consent_given, liveness is not None and liveness.verified
        )
        if blocking is not None:
            record = self._repo.create(submission, blocking)
            Log.info(
                f"Verification {record.id} for {record.identity} waiting in {blocking.value}"
            )
            return record

        now = self._clock()
        code = codes.generate_code()
        expires_at = codes.code_expiry(now, self._settings.verification_code_ttl_minutes)
        record = self._repo.create(
            submission,
            transition(Phase.NOT_STARTED, Event.CODE_ISSUED),
            code,
            expires_at,
        )
        try:
            self._send_code(record, code)
        except DeliveryError:
            self._repo.delete(record.identity)
            raise
        Log.info(f"Verification {record.id} for {record.identity} submitted, code sent")
        return record

    def record_liveness(
        self,
        user_id: str,
        verified: bool,
        verified_at: datetime,
        snapshot_hash: str | None = None,
    ) -> VerificationRecord | None:
        """Store a liveness outcome and advance a waiting verification record.

        Returns the (possibly updated) record, or None if the user has not
        submitted a profile yet.
        """
        self._liveness_repo.upsert(user_id, verified, verified_at, snapshot_hash)
        Log.info(f"Liveness check for {user_id}: verified={verified}")

        record = self._repo.find_by_wallet(user_id)
        if record is None:
            return None

        if not verified:
            if record.phase not in (Phase.LIVENESS_PENDING, Phase.FAILED):
                return record
            target = transition(record.phase, Event.LIVENESS_FAILED)
            self._repo.set_phase(record.identity, target, (record.phase,))
            return replace(record, phase=target)

        if record.phase not in CODE_ISSUABLE_PHASES:
            return record
        if next_gate_phase(record.consent_given, True) is not None:
            return record
        return self._issue_code(record, Event.CODE_ISSUED)

    def get_liveness(self, user_id: str) -> LivenessResult | None:
        return self._liveness_repo.find(user_id)

    def clear_liveness(self, user_id: str) -> None:
        self._liveness_repo.delete(user_id)
        Log.info(f"Liveness data cleared for {user_id}")

    def resend_code(self, identity: str) -> VerificationRecord:
        """Issue a fresh code; the previous code stops being accepted immediately."""
        record = self.get_status(identity)
        check_resendable(record)
        return self._issue_code(record, Event.CODE_RESENT)

    def verify_code(self, identity: str, code: str) -> VerificationOutcome:
        """Confirm the emailed code and dispatch the one-time reward.

        Raises:
            InvalidCodeError, CodeExpiredError, NoActiveCodeError: code rejected,
                record stays in code_sent.
            AlreadyRewardedError: reward granted or being granted by another request.
            RewardPendingError: code accepted but the transfer failed.
        """
        record = self.get_status(identity)
        now = self._clock()
        stale_before = self._stale_before(now)
        check_code(record, code, now, stale_before)

        if not self._repo.consume_code(identity, code, now):
            latest = self.get_status(identity)
            check_code(latest, code, now, stale_before)
            raise InvalidPhaseError("Verification state changed, please retry")

        Log.info(f"Email verified for {identity}")
        verified = replace(
            record,
            phase=transition(record.phase, Event.CODE_CONFIRMED),
            code=None,
            code_expires_at=None,
            reward_claimed_at=now,
        )
        return self._dispatch_reward(verified, claimed_at=now)

    def retry_reward(self, identity: str) -> VerificationOutcome:
        """Re-attempt only the reward dispatch for a verified identity."""
        record = self.get_status(identity)
        now = self._clock()
        stale_before = self._stale_before(now)
        check_reward_retry(record, stale_before)

        if not self._repo.claim_reward(identity, now, stale_before):
            latest = self.get_status(identity)
            check_reward_retry(latest, stale_before)
            raise InvalidPhaseError("Verification state changed, please retry")

        Log.info(f"Retrying reward dispatch for {identity}")
        return self._dispatch_reward(replace(record, reward_claimed_at=now), claimed_at=now)

    def get_status(self, identity: str) -> VerificationRecord:
        record = self._repo.find_by_wallet(identity)
        if record is None:
            raise VerificationNotFoundError(
                "No verification record found for this wallet address"
            )
        return record

    def list_records(self) -> list[VerificationRecord]:
        return self._repo.list_all()

    def close(self) -> None:
        self._reward_dispatcher.close()

    def _issue_code(self, record: VerificationRecord, event: Event) -> VerificationRecord:
        target = transition(record.phase, event)
        now = self._clock()
        code = codes.generate_code()
        expires_at = codes.code_expiry(now, self._settings.verification_code_ttl_minutes)
        if not self._repo.issue_code(record.identity, code, expires_at, (record.phase,)):
            raise InvalidPhaseError("Verification state changed, please retry")

        issued = replace(record, phase=target, code=code, code_expires_at=expires_at)
        try:
            self._send_code(issued, code)
        except DeliveryError:
            self._repo.revoke_code(record.identity, code)
            raise
        Log.info(f"Verification code issued for {record.identity} ({event.value})")
        return issued

    def _send_code(self, record: VerificationRecord, code: str) -> None:
        message = templates.verification_code_message(
            sender=self._settings.mail_from,
            recipient=record.email,
            username=record.username,
            code=code,
            ttl_minutes=self._settings.verification_code_ttl_minutes,
            reward_amount=self._settings.reward_amount,
            symbol=self._settings.reward_token_symbol,
        )
        try:
            self._mailer.send(message)
        except MailDeliveryError as exc:
            Log.error(f"Verification email to {record.email} failed: {exc}")
            raise DeliveryError(
                "Failed to send verification email. Please try again later."
            ) from exc

    def _dispatch_reward(
        self, record: VerificationRecord, claimed_at: datetime
    ) -> VerificationOutcome:
        amount = self._settings.reward_amount
        try:
            receipt = self._reward_dispatcher.dispatch(record.identity, amount)
        except RewardDispatchError as exc:
            Log.error(f"Reward dispatch to {record.identity} failed: {exc}")
            self._repo.release_claim(record.identity, claimed_at)
            raise RewardPendingError(
                "Email verified but reward pending: the token transfer failed. "
                "Please retry later."
            ) from exc

        if not self._repo.grant_reward(
            record.identity, claimed_at, receipt.signature, self._clock()
        ):
            Log.error(
                f"Reward claim for {record.identity} was lost after transfer "
                f"{receipt.signature}; needs manual reconciliation"
            )
            raise AlreadyRewardedError("Reward already granted for this wallet")

        explorer_url = self._settings.explorer_url(receipt.signature)
        Log.info(f"Reward of {amount:g} granted to {record.identity}: {receipt.signature}")
        self._send_success(record, explorer_url)
        return VerificationOutcome(
            status="verified",
            reward_amount=amount,
            transaction_signature=receipt.signature,
            explorer_url=explorer_url,
        )

    def _send_success(self, record: VerificationRecord, explorer_url: str) -> None:
        message = templates.verification_success_message(
            sender=self._settings.mail_from,
            recipient=record.email,
            username=record.username,
            reward_amount=self._settings.reward_amount,
            symbol=self._settings.reward_token_symbol,
            explorer_url=explorer_url,
            client_url=self._settings.client_url,
        )
        try:
            self._mailer.send(message)
        except MailDeliveryError as exc:
            Log.warning(f"Success email to {record.email} failed: {exc}")

    def _stale_before(self, now: datetime) -> datetime:
        return now - timedelta(seconds=self._settings.reward_claim_ttl_seconds)
