"""Phase transitions of the identity verification lifecycle.

Consent is collected with the profile submission; the liveness gate may be
satisfied before or after it. A code is only issued once both gates hold.
The repository enforces each transition with a guarded UPDATE; this module
decides which transition applies and which error a caller sees.
"""

from datetime import datetime
from enum import Enum

from solsign.verification import codes
from solsign.verification.exceptions import (
    AlreadyRewardedError,
    CodeExpiredError,
    InvalidCodeError,
    InvalidPhaseError,
    NoActiveCodeError,
    RewardPendingError,
)
from solsign.verification.models import Phase, VerificationRecord


class Event(str, Enum):
    CONSENT_GIVEN = "consent_given"
    LIVENESS_FAILED = "liveness_failed"
    CODE_ISSUED = "code_issued"
    CODE_RESENT = "code_resent"
    CODE_CONFIRMED = "code_confirmed"
    REWARD_GRANTED = "reward_granted"


TRANSITIONS: dict[tuple[Phase, Event], Phase] = {
    (Phase.NOT_STARTED, Event.CONSENT_GIVEN): Phase.LIVENESS_PENDING,
    (Phase.CONSENT_PENDING, Event.CONSENT_GIVEN): Phase.LIVENESS_PENDING,
    (Phase.LIVENESS_PENDING, Event.LIVENESS_FAILED): Phase.FAILED,
    (Phase.FAILED, Event.LIVENESS_FAILED): Phase.FAILED,
    (Phase.NOT_STARTED, Event.CODE_ISSUED): Phase.CODE_SENT,
    (Phase.CONSENT_PENDING, Event.CODE_ISSUED): Phase.CODE_SENT,
    (Phase.LIVENESS_PENDING, Event.CODE_ISSUED): Phase.CODE_SENT,
    (Phase.FAILED, Event.CODE_ISSUED): Phase.CODE_SENT,
    (Phase.CODE_SENT, Event.CODE_RESENT): Phase.CODE_SENT,
    (Phase.CODE_SENT, Event.CODE_CONFIRMED): Phase.CODE_VERIFIED,
    (Phase.CODE_VERIFIED, Event.REWARD_GRANTED): Phase.REWARD_GRANTED,
}

CODE_ISSUABLE_PHASES: tuple[Phase, ...] = tuple(
    phase for (phase, event) in TRANSITIONS if event is Event.CODE_ISSUED
)


def transition(phase: Phase, event: Event) -> Phase:
    """Return the phase reached from ``phase`` on ``event``.

    Raises:
        InvalidPhaseError: if the event is not allowed in this phase.
    """
    target = TRANSITIONS.get((phase, event))
    if target is None:
        raise InvalidPhaseError(
            f"Action '{event.value}' is not allowed while verification is '{phase.value}'"
        )
    return target


def next_gate_phase(consent_given: bool, liveness_passed: bool) -> Phase | None:
    """Phase that still blocks code issuance, or None when both gates hold."""
    if not consent_given:
        return Phase.CONSENT_PENDING
    if not liveness_passed:
        return Phase.LIVENESS_PENDING
    return None


def check_resendable(record: VerificationRecord) -> None:
    if record.phase is Phase.REWARD_GRANTED:
        raise AlreadyRewardedError("Reward already granted for this wallet")
    if record.phase is not Phase.CODE_SENT:
        raise InvalidPhaseError(
            f"Cannot resend a code while verification is '{record.phase.value}'"
        )


def check_code(
    record: VerificationRecord,
    submitted: str,
    now: datetime,
    stale_before: datetime,
) -> None:
    """Validate a submitted code against the record without mutating it.

    Raises the error the caller should see; returns None when the code
    may be consumed.
    """
    if record.phase is Phase.REWARD_GRANTED or record.reward_granted:
        raise AlreadyRewardedError("Reward already granted for this wallet")
    if record.phase is Phase.CODE_VERIFIED:
        if record.has_live_claim(stale_before):
            raise AlreadyRewardedError("Reward already granted for this wallet")
        raise RewardPendingError(
            "Email already verified but the reward is pending. Retry the reward transfer."
        )
    if record.phase is not Phase.CODE_SENT:
        raise InvalidPhaseError(
            f"No code has been issued while verification is '{record.phase.value}'"
        )
    if record.code is None:
        raise NoActiveCodeError("No active verification code. Please request a new code.")
    if codes.is_expired(record.code_expires_at, now):
        raise CodeExpiredError("Verification code has expired. Please request a new code.")
    if not codes.codes_match(record.code, submitted):
        raise InvalidCodeError("Invalid verification code")


def check_reward_retry(record: VerificationRecord, stale_before: datetime) -> None:
    if record.phase is Phase.REWARD_GRANTED or record.reward_granted:
        raise AlreadyRewardedError("Reward already granted for this wallet")
    if record.phase is not Phase.CODE_VERIFIED:
        raise InvalidPhaseError(
            f"Reward can only be retried after email verification, not '{record.phase.value}'"
        )
    if record.has_live_claim(stale_before):
        raise AlreadyRewardedError("Reward transfer already in progress for this wallet")
