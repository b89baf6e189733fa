"""Health endpoints. Both are public."""

import time

from fastapi import APIRouter

from src.application.dto.responses import HealthResponse, ProviderHealthResponse
from src.config import get_logger, get_settings

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

_started = time.monotonic()


def _uptime() -> float:
    return round(time.monotonic() - _started, 3)


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness: the process is up and serving."""
    return HealthResponse(
        status="healthy",
        version=get_settings().app_version,
        uptime_seconds=_uptime(),
    )


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """Readiness: the database answers and its schema version is known."""
    from src.infrastructure.storage.sqlite import get_pool

    schema_version = None
    try:
        pool = await get_pool()
        latency = await pool.ping()
        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT MAX(version) FROM schema_migrations")
            schema_version = (await cursor.fetchone())[0]
        database = ProviderHealthResponse(
            name="sqlite",
            available=True,
            latency_ms=round(latency, 3),
            idle_connections=pool.idle,
        )
    except Exception as e:
        logger.warning("db_health_check_failed", error=str(e))
        database = ProviderHealthResponse(
            name="sqlite", available=False, error="database unavailable"
        )

    return HealthResponse(
        status="healthy" if database.available else "unhealthy",
        version=get_settings().app_version,
        uptime_seconds=_uptime(),
        schema_version=schema_version,
        database=database,
    )
