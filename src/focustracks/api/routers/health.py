# Hey future me - these are the Docker/Kubernetes probes.
#
# - /health       → full status (database + lock retry stats)
# - /health/live  → liveness (process is up, no dependency checks)
# - /health/ready → readiness (database answers), 503 otherwise
"""Health check endpoints for Docker/Kubernetes probes."""

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from focustracks import __version__
from focustracks.infrastructure.persistence.retry import DatabaseLockMetrics

router = APIRouter()


class HealthStatus(BaseModel):
    """Overall health status response."""

    status: str = Field(description="Overall status: healthy or unhealthy")
    timestamp: str = Field(description="ISO timestamp of health check")
    version: str = Field(default=__version__, description="Application version")
    checks: dict[str, Any] = Field(
        default_factory=dict, description="Individual component checks"
    )


class LivenessStatus(BaseModel):
    """Simple liveness probe response."""

    status: str = Field(description="alive")
    timestamp: str = Field(description="ISO timestamp")


class ReadinessStatus(BaseModel):
    """Readiness probe response."""

    status: str = Field(description="ready or not_ready")
    timestamp: str = Field(description="ISO timestamp")
    database: bool = Field(description="Database connection OK")


async def _database_ok(request: Request) -> bool:
    db = getattr(request.app.state, "db", None)
    if db is None:
        return False
    return bool(await db.ping())


@router.get("", response_model=HealthStatus)
async def health_check(request: Request) -> JSONResponse:
    """Full health check: database reachability plus SQLite lock retry counters."""
    database_ok = await _database_ok(request)
    health = HealthStatus(
        status="healthy" if database_ok else "unhealthy",
        timestamp=datetime.now(UTC).isoformat(),
        checks={
            "database": {"ok": database_ok},
            "database_locks": DatabaseLockMetrics.get_instance().get_stats(),
        },
    )
    return JSONResponse(
        status_code=status.HTTP_200_OK
        if database_ok
        else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=health.model_dump(),
    )


@router.get("/live", response_model=LivenessStatus)
async def liveness_probe() -> LivenessStatus:
    """Liveness probe: 200 while the process is running."""
    return LivenessStatus(status="alive", timestamp=datetime.now(UTC).isoformat())


@router.get("/ready", response_model=ReadinessStatus)
async def readiness_probe(request: Request) -> JSONResponse:
    """Readiness probe: 200 when the database answers, 503 otherwise."""
    database_ok = await _database_ok(request)
    readiness = ReadinessStatus(
        status="ready" if database_ok else "not_ready",
        timestamp=datetime.now(UTC).isoformat(),
        database=database_ok,
    )
    return JSONResponse(
        status_code=status.HTTP_200_OK
        if database_ok
        else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=readiness.model_dump(),
    )
