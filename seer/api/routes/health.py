"""
Liveness endpoint with component checks.
"""

import time
from datetime import datetime, timezone

import structlog
from fastapi import APIRouter

from seer import __version__
from seer.api import dependencies
from seer.api.models import ComponentHealth, HealthResponse

router = APIRouter()
logger = structlog.get_logger(__name__)


async def _check_database() -> ComponentHealth:
    """Check database connectivity and measure latency."""
    start = time.perf_counter()
    try:
        db = await dependencies.get_database()
        healthy = await db.health_check()
        latency_ms = (time.perf_counter() - start) * 1000
        return ComponentHealth(
            status="healthy" if healthy else "unhealthy",
            latency_ms=round(latency_ms, 2),
        )
    except Exception as e:
        latency_ms = (time.perf_counter() - start) * 1000
        logger.warning("Database health check failed", error=str(e))
        return ComponentHealth(
            status="unhealthy",
            latency_ms=round(latency_ms, 2),
            details={"error": str(e)},
        )


async def _check_scheduler() -> ComponentHealth:
    try:
        scheduler = await dependencies.get_scheduler()
    except Exception as e:
        return ComponentHealth(status="unhealthy", details={"error": str(e)})

    details: dict = {
        "running": scheduler.is_running,
        "fetching": scheduler.is_fetching,
    }
    if scheduler.last_summary is not None:
        details["last_status"] = scheduler.last_summary.status
    return ComponentHealth(status="healthy", details=details)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Always 200 while the process is serving; component states are informational.",
)
async def health_check() -> HealthResponse:
    components = {
        "database": await _check_database(),
        "scheduler": await _check_scheduler(),
    }
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        components=components,
    )
