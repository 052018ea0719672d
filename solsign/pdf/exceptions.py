class PdfError(Exception):
    """Base exception for PDF processing errors."""


class MalformedSourceError(PdfError):
    """Raised when the uploaded bytes are not a loadable PDF document."""


class ExportError(PdfError):
    """Raised when composing the signed document fails."""


class PdfExtractionError(PdfError):
    """Raised when text extraction from a PDF fails."""


class QrCodeError(PdfError):
    """Raised when a QR image cannot be produced or decoded."""


class ProofNotFoundError(PdfError):
    """Raised when a document carries no verification page."""


class InvalidDataUrlError(PdfError):
    """Raised when an embedded image is not a valid base64 data URL."""
