from typing import Any

from fastapi import APIRouter, Depends, Header

from solsign.api.container import Container
from solsign.api.dependencies import get_container
from solsign.api.errors import BadRequestError
from solsign.api.schemas import (
    USER_ID_MAX_LENGTH,
    LivenessCompleteRequest,
    LivenessStatusResponse,
)

DEFAULT_USER_ID = "demo-user-1"

router = APIRouter(prefix="/verification", tags=["verification"])


@router.get("/status")
def liveness_status(
    x_user_id: str | None = Header(default=None, max_length=USER_ID_MAX_LENGTH),
    container: Container = Depends(get_container),
) -> LivenessStatusResponse:
    result = container.verification_service.get_liveness(x_user_id or DEFAULT_USER_ID)
    if result is None:
        return LivenessStatusResponse(verified=False)
    return LivenessStatusResponse(
        verified=result.verified,
        last_verified_at=result.last_verified_at,
        snapshot_hash=result.snapshot_hash,
    )


@router.post("/complete")
def liveness_complete(
    body: LivenessCompleteRequest,
    container: Container = Depends(get_container),
) -> dict[str, Any]:
    if not isinstance(body.verified, bool):
        raise BadRequestError("verified field is required and must be boolean")
    if body.timestamp is None:
        raise BadRequestError("timestamp field is required")

    record = container.verification_service.record_liveness(
        body.user_id or DEFAULT_USER_ID,
        body.verified,
        body.timestamp,
        body.snapshot_hash,
    )
    payload: dict[str, Any] = {"ok": True}
    if record is not None:
        payload["status"] = record.phase.value
    return payload


@router.get("/clear")
def liveness_clear(
    x_user_id: str | None = Header(default=None, max_length=USER_ID_MAX_LENGTH),
    container: Container = Depends(get_container),
) -> dict[str, Any]:
    container.verification_service.clear_liveness(x_user_id or DEFAULT_USER_ID)
    return {"ok": True, "message": "Verification data cleared"}
