from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from solsign.api.rate_limit import RateLimitExceededError
from solsign.logging.logger import Log
from solsign.pdf.exceptions import (
    ExportError,
    InvalidDataUrlError,
    MalformedSourceError,
    PdfError,
    PdfExtractionError,
    ProofNotFoundError,
    QrCodeError,
)
from solsign.placement.exceptions import (
    ElementNotFoundError,
    NoRenderedPageError,
    OrphanedElementError,
    PlacementError,
    RendererNotReadyError,
)
from solsign.signing.exceptions import (
    AlreadySubmittedError,
    DuplicateTransactionError,
    HashAlreadyComputedError,
    SigningError,
    SubmissionInProgressError,
    TransactionNotFoundError,
)
from solsign.verification.exceptions import (
    AlreadyRewardedError,
    CodeExpiredError,
    DeliveryError,
    DuplicateIdentityError,
    InvalidCodeError,
    InvalidPhaseError,
    NoActiveCodeError,
    RewardPendingError,
    VerificationError,
    VerificationNotFoundError,
    VerificationValidationError,
)


class BadRequestError(Exception):
    """Raised by routes for malformed request input."""


STATUS_CODES: dict[type[Exception], int] = {
    BadRequestError: 400,
    VerificationValidationError: 400,
    InvalidCodeError: 400,
    CodeExpiredError: 400,
    NoActiveCodeError: 400,
    VerificationNotFoundError: 404,
    DuplicateIdentityError: 409,
    AlreadyRewardedError: 409,
    InvalidPhaseError: 409,
    RewardPendingError: 502,
    DeliveryError: 502,
    NoRenderedPageError: 400,
    OrphanedElementError: 400,
    ElementNotFoundError: 404,
    RendererNotReadyError: 409,
    MalformedSourceError: 400,
    PdfExtractionError: 400,
    ProofNotFoundError: 400,
    InvalidDataUrlError: 400,
    QrCodeError: 400,
    ExportError: 500,
    DuplicateTransactionError: 409,
    TransactionNotFoundError: 404,
    SubmissionInProgressError: 409,
    AlreadySubmittedError: 409,
    HashAlreadyComputedError: 409,
    RateLimitExceededError: 429,
}

INTERNAL_ERROR_MESSAGE = "Internal server error"


def status_for(exc: Exception) -> int:
    for cls in type(exc).__mro__:
        status = STATUS_CODES.get(cls)
        if status is not None:
            return status
    return 500


def register_exception_handlers(app: FastAPI, debug: bool = False) -> None:
    """Map domain exceptions to ``{"message": ...}`` JSON responses."""

    async def domain_error(request: Request, exc: Exception) -> JSONResponse:
        status = status_for(exc)
        if status >= 500:
            Log.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=status, content={"message": str(exc)})

    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"Invalid request: {location} {first.get('msg', '')}".strip()
        else:
            message = "Invalid request"
        return JSONResponse(status_code=400, content={"message": message})

    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = "Route not found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code, content={"message": message}, headers=exc.headers
        )

    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        Log.error(f"Unhandled error on {request.method} {request.url.path}: {exc!r}")
        content = {"message": INTERNAL_ERROR_MESSAGE}
        if debug:
            content["error"] = str(exc)
        return JSONResponse(status_code=500, content=content)

    for exc_class in (
        BadRequestError,
        VerificationError,
        PlacementError,
        PdfError,
        SigningError,
        RateLimitExceededError,
    ):
        app.add_exception_handler(exc_class, domain_error)
    app.add_exception_handler(RequestValidationError, validation_error)
    app.add_exception_handler(StarletteHTTPException, http_error)
    app.add_exception_handler(Exception, unhandled_error)
