from fastapi import Depends, Request, UploadFile

from solsign.api.container import Container
from solsign.api.errors import BadRequestError
from solsign.api.rate_limit import RateLimitExceededError
from solsign.config.settings import Settings
from solsign.logging.logger import Log


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_settings(container: Container = Depends(get_container)) -> Settings:
    return container.settings


def verify_rate_limit(
    request: Request, container: Container = Depends(get_container)
) -> None:
    """Per client address and path budget for the profile verification endpoints."""
    client = request.client.host if request.client else "unknown"
    if not container.verify_rate_limiter.hit(f"{request.url.path}:{client}"):
        Log.warning(f"Rate limit exceeded for {client} on {request.url.path}")
        raise RateLimitExceededError(
            "Too many verification attempts. Please try again later."
        )


def api_rate_limit(
    request: Request, container: Container = Depends(get_container)
) -> None:
    """Per client address budget shared by every API route."""
    client = request.client.host if request.client else "unknown"
    if not container.api_rate_limiter.hit(client):
        Log.warning(f"API rate limit exceeded for {client}")
        raise RateLimitExceededError("Too many requests from this IP, please try again later.")


async def read_upload(
    upload: UploadFile | None,
    *,
    field: str,
    max_bytes: int,
    content_types: tuple[str, ...],
    type_message: str,
) -> bytes:
    """Read a multipart file with the size and content-type checks applied.

    Raises:
        BadRequestError: missing, oversize or wrongly typed upload.
    """
    if upload is None:
        raise BadRequestError(f"Missing {field}")
    if upload.content_type not in content_types:
        raise BadRequestError(type_message)
    data = await upload.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise BadRequestError(
            f"File too large: {field} exceeds {max_bytes // (1024 * 1024)}MB"
        )
    if not data:
        raise BadRequestError(f"Empty {field}")
    return data
