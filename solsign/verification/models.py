from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Phase(str, Enum):
    """Lifecycle phase of a wallet identity's verification."""

    NOT_STARTED = "not_started"
    CONSENT_PENDING = "consent_pending"
    LIVENESS_PENDING = "liveness_pending"
    CODE_SENT = "code_sent"
    CODE_VERIFIED = "code_verified"
    REWARD_GRANTED = "reward_granted"
    FAILED = "failed"


@dataclass(frozen=True)
class ProfileSubmission:
    """Sanitized profile data accepted by the verify endpoint."""

    username: str
    email: str
    wallet_address: str
    consent_given: bool
    phone: str | None = None


@dataclass
class VerificationRecord:
    """Verification state for one wallet identity."""

    id: int
    identity: str
    username: str
    email: str
    phase: Phase
    phone: str | None = None
    consent_given: bool = False
    code: str | None = None
    code_expires_at: datetime | None = None
    reward_granted: bool = False
    reward_transaction_signature: str | None = None
    reward_claimed_at: datetime | None = None
    rewarded_at: datetime | None = None
    created_at: datetime | None = None

    def has_live_claim(self, stale_before: datetime) -> bool:
        """True while another request holds the reward dispatch claim."""
        return self.reward_claimed_at is not None and self.reward_claimed_at > stale_before


@dataclass(frozen=True)
class LivenessResult:
    """Outcome of a camera liveness check for one user."""

    user_id: str
    verified: bool
    last_verified_at: datetime
    snapshot_hash: str | None = None


@dataclass(frozen=True)
class VerificationOutcome:
    """Successful code verification with the granted reward."""

    status: str
    reward_amount: float
    transaction_signature: str
    explorer_url: str
