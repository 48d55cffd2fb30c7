"""APScheduler-backed queue for export jobs.

Each export is scheduled as a one-shot ``date`` job on an
AsyncIOScheduler. Setting DISABLE_JOB_SCHEDULER (or run_jobs_inline)
runs jobs inside the request instead, which tests rely on.
"""

import os
from contextlib import asynccontextmanager
from datetime import UTC
from typing import TYPE_CHECKING

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from src.export.job import MarkdownExportJob
from src.export.options import ExportOptions
from src.models.export import ExportStatus

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = structlog.get_logger()

# Module-level scheduler instance
_scheduler: AsyncIOScheduler | None = None


def get_scheduler() -> AsyncIOScheduler:
    """Get or create the scheduler instance.

    Returns:
        AsyncIOScheduler instance
    """
    global _scheduler
    if _scheduler is None:
        _scheduler = AsyncIOScheduler(timezone=UTC)
    return _scheduler


def reset_scheduler() -> None:
    """Reset the scheduler instance (for testing)."""
    global _scheduler
    if _scheduler is not None and _scheduler.running:
        _scheduler.shutdown(wait=False)
    _scheduler = None


@asynccontextmanager
async def export_scheduler_lifespan() -> "AsyncGenerator[None, None]":
    """Run the export scheduler for the lifetime of the app.

    A no-op when DISABLE_JOB_SCHEDULER is set.
    """
    if os.environ.get("DISABLE_JOB_SCHEDULER"):
        yield
        return

    scheduler = get_scheduler()
    logger.info("Starting export scheduler")
    scheduler.start()
    try:
        yield
    finally:
        logger.info("Shutting down export scheduler")
        scheduler.shutdown(wait=False)


class ExportJobQueue:
    """Hands export jobs to the scheduler.

    Unexpected errors raised by a job are logged and the export record
    is marked failed, so a status view never waits forever.
    """

    def __init__(self, job: MarkdownExportJob, *, inline: bool = False):
        self.job = job
        self.inline = inline or bool(os.environ.get("DISABLE_JOB_SCHEDULER"))

    async def enqueue(
        self,
        job_id: str,
        meeting_id: int,
        user_id: int,
        options: ExportOptions,
    ) -> str:
        """Queue an export and return its job ID."""
        kwargs = {
            "job_id": job_id,
            "meeting_id": meeting_id,
            "user_id": user_id,
            "options": options,
        }
        if self.inline:
            await self.run(**kwargs)
        else:
            get_scheduler().add_job(
                self.run,
                "date",
                id=job_id,
                kwargs=kwargs,
                misfire_grace_time=None,
            )
            logger.info("queued export job", job_id=job_id, meeting_id=meeting_id)
        return job_id

    async def run(
        self,
        job_id: str,
        meeting_id: int,
        user_id: int,
        options: ExportOptions,
    ) -> None:
        """Perform a job, reporting unexpected errors as failures."""
        try:
            await self.job.perform(job_id, meeting_id, user_id, options)
        except Exception as e:
            logger.exception("export job crashed", job_id=job_id, error=str(e))
            record = await self.job.export_repo.get_by_job_id(job_id)
            if not record.status.is_terminal:
                await self.job.export_repo.transition(
                    job_id,
                    ExportStatus.FAILURE,
                    message=self.job.translator.t("export_failed", message=str(e)),
                )
