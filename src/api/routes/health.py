"""
Service and database health.
"""

import time

import aiosqlite
from fastapi import APIRouter

from src.application.dto.responses import ComponentHealthResponse, HealthResponse
from src.config import get_logger, get_settings
from src.infrastructure.storage.sqlite import get_pool

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

_started_at = time.monotonic()


def _report(status: str, database: ComponentHealthResponse | None = None) -> HealthResponse:
    return HealthResponse(
        status=status,
        version=get_settings().app_version,
        uptime_seconds=round(time.monotonic() - _started_at, 3),
        database=database,
    )


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Process liveness; does not touch the database."""
    return _report("healthy")


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """
    Round-trip a query through the connection pool.

    An unreachable database is reported in the body with status "unhealthy"
    rather than as an HTTP error, so probes can tell the two apart.
    """
    try:
        pool = await get_pool()
        latency_ms = await pool.ping()
    except (aiosqlite.Error, OSError) as e:
        logger.warning("database_health_failed", error=str(e))
        return _report(
            "unhealthy",
            ComponentHealthResponse(name="sqlite", healthy=False, error=str(e)),
        )

    stats = pool.stats()
    return _report(
        "healthy",
        ComponentHealthResponse(
            name="sqlite",
            healthy=True,
            latency_ms=round(latency_ms, 3),
            pool_size=stats.size,
            idle_connections=stats.idle,
        ),
    )
