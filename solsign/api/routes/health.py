from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict[str, str]:
    return {
        "status": "OK",
        "message": "SolSign API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
