"""Health check endpoints for monitoring and orchestration."""

from datetime import UTC, datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel

from src.config import settings

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
    timestamp: datetime
    version: str
    environment: str


class LivenessResponse(BaseModel):
    """Response model for the liveness check."""

    status: str


class ReadinessResponse(BaseModel):
    """Readiness of the export service and where records are stored."""

    status: str
    checks: dict[str, str]
    export_table: str | None = None
    inline_jobs: bool | None = None


@router.get("/", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(UTC),
        version=settings.app_version,
        environment=settings.app_env,
    )


@router.get("/live", response_model=LivenessResponse)
async def liveness() -> LivenessResponse:
    """Liveness check: the process is up."""
    return LivenessResponse(status="alive")


@router.get("/ready", response_model=ReadinessResponse)
async def readiness(request: Request) -> ReadinessResponse:
    """Readiness check: exports can be requested.

    Ready once the database answers, the export table has been chosen
    and the job queue exists.
    """
    state = request.app.state
    checks: dict[str, str] = {"api": "ok"}

    db = getattr(state, "db", None)
    if db is None:
        checks["database"] = "not_configured"
    else:
        checks["database"] = "ok" if await db.ping() else "failed"

    export_repo = getattr(state, "export_repo", None)
    storage_known = export_repo is not None and export_repo.mode is not None
    checks["export_storage"] = "ok" if storage_known else "not_configured"

    queue = getattr(state, "job_queue", None)
    checks["job_queue"] = "ok" if queue is not None else "not_configured"

    return ReadinessResponse(
        status="ready" if set(checks.values()) == {"ok"} else "not_ready",
        checks=checks,
        export_table=export_repo.table if storage_known else None,
        inline_jobs=queue.inline if queue is not None else None,
    )
