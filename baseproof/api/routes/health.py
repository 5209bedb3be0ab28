"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter

from baseproof.api.models.health import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness only: never touches the chain."""
    return HealthResponse(status="ok", timestamp=datetime.now(timezone.utc).isoformat())
