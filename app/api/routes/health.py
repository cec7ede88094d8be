"""Health check endpoint (no authentication)."""

import time
from datetime import UTC, datetime

from fastapi import APIRouter

from app.core.config import settings
from app.schemas.health import HealthResponse

router = APIRouter()

_STARTED_AT = time.monotonic()


@router.get("/health", response_model=HealthResponse)
def get_health() -> HealthResponse:
    """
    Return service status, uptime, and the configured storage backend.
    Used by load balancers and monitoring.
    """
    return HealthResponse(
        timestamp=datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        uptime=round(time.monotonic() - _STARTED_AT, 3),
        database=settings.DB_TYPE,
    )
