class VerificationError(Exception):
    """Base exception for all profile verification errors."""


class VerificationValidationError(VerificationError):
    """Raised when submitted profile data is malformed."""


class DuplicateIdentityError(VerificationError):
    """Raised when username, email or wallet address is already registered."""


class VerificationNotFoundError(VerificationError):
    """Raised when no verification record exists for a wallet address."""


class InvalidPhaseError(VerificationError):
    """Raised when an action is not allowed in the record's current phase."""


class InvalidCodeError(VerificationError):
    """Raised when the submitted code does not match the active code."""


class CodeExpiredError(VerificationError):
    """Raised when the submitted code is past its expiry."""


class NoActiveCodeError(VerificationError):
    """Raised when the record has no code that could be verified."""


class AlreadyRewardedError(VerificationError):
    """Raised when the reward was already granted (or is being granted)."""


class RewardPendingError(VerificationError):
    """Raised when the code is verified but the reward transfer did not complete."""


class DeliveryError(VerificationError):
    """Raised when the verification code email could not be delivered."""
