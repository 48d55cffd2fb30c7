"""API router aggregation."""

from fastapi import APIRouter

from src.api.health import router as health_router
from src.api.job_status import router as job_status_router
from src.api.meeting_exports import router as meeting_exports_router

api_router = APIRouter()
api_router.include_router(health_router)
# Export dialog and start-export endpoints, scoped to a project's meetings
api_router.include_router(meeting_exports_router)
# Job status view and attachment downloads
api_router.include_router(job_status_router)
