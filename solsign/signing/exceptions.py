class SigningError(Exception):
    """Base exception for the document signing session."""


class SubmissionInProgressError(SigningError):
    """Raised when a submit is attempted while another one is pending."""


class AlreadySubmittedError(SigningError):
    """Raised when a submit is attempted after the session already completed."""


class HashAlreadyComputedError(SigningError):
    """Raised when the document digest would be recomputed for the same upload."""


class DuplicateTransactionError(SigningError):
    """Raised when a transaction reference was already recorded."""


class TransactionNotFoundError(SigningError):
    """Raised when no recorded transaction matches a reference."""
