"""Liveness probe; never touches the database."""

from datetime import UTC, datetime

from fastapi import APIRouter

from filmbox.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health() -> HealthResponse:
    """Return fixed status plus current server time. Used by load balancers."""
    return HealthResponse(status="ok", timestamp=datetime.now(UTC))
