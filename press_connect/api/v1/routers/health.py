from datetime import datetime, timezone

from fastapi import APIRouter

from press_connect.api.v1.schemas.base import ApiOut

router = APIRouter()


@router.get("/health")
async def health() -> ApiOut[dict[str, str]]:
    """Liveness only; does not touch the database."""
    return ApiOut[dict[str, str]](
        results={"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}
    )
