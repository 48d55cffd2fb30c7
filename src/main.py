"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import AsyncExitStack, asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from src.adapters.local_store import LocalAttachmentStore
from src.api.router import api_router
from src.config import settings
from src.db.turso import TursoClient
from src.export.i18n import CatalogTranslator
from src.export.job import MarkdownExportJob
from src.export.queue import ExportJobQueue, export_scheduler_lifespan
from src.export.registry import default_registry
from src.repositories.export_repo import ExportRepository
from src.repositories.meeting_repo import MeetingRepository

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def initialize_services(
    app: FastAPI,
    db: TursoClient,
    *,
    attachments_root: str | Path | None = None,
    run_jobs_inline: bool | None = None,
    run_plugin_migrations: bool | None = None,
) -> None:
    """Create repositories, the export job and its queue in app state.

    The export storage mode is detected here, once, before any request
    can create an export record.

    Args:
        app: Application whose state receives the services
        db: Connected database client
        attachments_root: Attachment directory override
        run_jobs_inline: Queue mode override, defaults to settings
        run_plugin_migrations: Migration override, defaults to settings
    """
    meeting_repo = MeetingRepository(db)
    await meeting_repo.init_schema()
    app.state.meeting_repo = meeting_repo

    export_repo = ExportRepository(db)
    await export_repo.init_schema()
    if run_plugin_migrations is None:
        run_plugin_migrations = settings.run_plugin_migrations
    if run_plugin_migrations:
        await export_repo.migrate()
    mode = await export_repo.detect_storage()
    app.state.export_repo = export_repo
    logger.info(f"Export records stored in {export_repo.table} ({mode.value})")

    attachment_store = LocalAttachmentStore(db, root=attachments_root)
    await attachment_store.init_schema()
    app.state.attachment_store = attachment_store

    translator = CatalogTranslator(locale=settings.default_locale)
    app.state.translator = translator

    registry = default_registry()
    app.state.exporter_registry = registry

    job = MarkdownExportJob(
        export_repo=export_repo,
        meeting_repo=meeting_repo,
        attachments=attachment_store,
        registry=registry,
        translator=translator,
    )
    app.state.job_queue = ExportJobQueue(
        job,
        inline=settings.run_jobs_inline if run_jobs_inline is None else run_jobs_inline,
    )
    logger.info("Export job queue initialized")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan management.

    Startup:
    - Initialize database connection
    - Initialize repositories, detect export storage
    - Start the export scheduler

    Shutdown:
    - Stop the scheduler
    - Close database connection
    """
    logger.info(f"Starting {settings.app_name}...")

    db = TursoClient()
    await db.connect()
    app.state.db = db
    logger.info(f"Database connected: {db.url}")

    await initialize_services(app, db)

    async with AsyncExitStack() as stack:
        await stack.enter_async_context(export_scheduler_lifespan())
        yield

    logger.info(f"Shutting down {settings.app_name}...")
    await db.close()
    logger.info("Database connection closed")


app = FastAPI(
    title=settings.app_name,
    description="Markdown export of meetings, delivered as background jobs",
    version=settings.app_version,
    lifespan=lifespan,
)

app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
