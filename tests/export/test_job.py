"""Tests for the Markdown export job and its queue."""

from dataclasses import dataclass
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from src.adapters.base import AttachmentResult
from src.adapters.local_store import LocalAttachmentStore
from src.db.turso import TursoClient
from src.export.i18n import CatalogTranslator
from src.export.job import MarkdownExportJob, attachment_content_path
from src.export.options import ExportOptions
from src.export.queue import ExportJobQueue
from src.export.registry import default_registry
from src.models.export import ExportStatus
from src.repositories.export_repo import PLUGIN_TABLE, ExportRepository
from src.repositories.meeting_repo import MeetingRepository


@dataclass
class Services:
    job: MarkdownExportJob
    exports: ExportRepository
    store: LocalAttachmentStore


@pytest.fixture
async def services(db: TursoClient, tmp_path: Path) -> Services:
    """Export job wired to a temp database and attachment directory."""
    exports = ExportRepository(db)
    await exports.init_schema()
    await exports.migrate()
    await exports.detect_storage()
    store = LocalAttachmentStore(db, root=tmp_path / "attachments")
    await store.init_schema()
    job = MarkdownExportJob(
        export_repo=exports,
        meeting_repo=MeetingRepository(db),
        attachments=store,
        registry=default_registry(),
        translator=CatalogTranslator(),
    )
    return Services(job=job, exports=exports, store=store)


async def read_attachment(store: LocalAttachmentStore, payload: dict) -> str:
    attachment_id = int(payload["download"].split("/")[-2])
    attachment = await store.get(attachment_id)
    assert attachment is not None
    return Path(attachment.disk_path).read_text(encoding="utf-8")


def test_attachment_content_path():
    assert attachment_content_path(12) == "/api/v3/attachments/12/content"


async def test_title(services: Services):
    assert services.job.title() == "Meeting Markdown export"


async def test_successful_export(services: Services, db, world):
    """A finished export links a text/markdown attachment named after the meeting."""
    record = await services.exports.create(user_id=world.user_id)

    done = await services.job.perform(record.job_id, world.meeting_id, world.user_id)

    assert done.status is ExportStatus.SUCCESS
    assert done.message == "The export has completed successfully."
    assert done.payload["mime_type"] == "text/markdown"
    assert done.payload["title"] == "Test Meeting.md"
    assert done.payload["download"].startswith("/api/v3/attachments/")

    rows = await db.execute(
        "SELECT filename, content_type FROM attachments"
        " WHERE container_type = ? AND container_id = ?",
        [PLUGIN_TABLE, record.id],
    )
    assert [tuple(row) for row in rows.rows] == [("Test Meeting.md", "text/markdown")]

    content = await read_attachment(services.store, done.payload)
    assert content.startswith("\ufeff\n# Test Meeting")


@pytest.mark.parametrize(("flag", "expected"), [(True, True), (False, False)])
async def test_outcomes_option(services: Services, seeder, world, flag, expected):
    """The outcomes flag decides whether outcome text lands in the file."""
    item = await seeder.agenda_item(world.meeting_id)
    await seeder.outcome(item, notes="Important decision made")
    record = await services.exports.create(user_id=world.user_id)

    done = await services.job.perform(
        record.job_id,
        world.meeting_id,
        world.user_id,
        ExportOptions(include_outcomes=flag),
    )

    content = await read_attachment(services.store, done.payload)
    assert ("Important decision made" in content) is expected
    assert ("**Outcomes:**" in content) is expected


async def test_attachment_failure_marks_export_failed(services: Services, world):
    """A failed attachment write is reported once with its error."""
    services.job.attachments = AsyncMock()
    services.job.attachments.create.return_value = AttachmentResult(
        success=False, error_message="disk full"
    )
    record = await services.exports.create(user_id=world.user_id)

    done = await services.job.perform(record.job_id, world.meeting_id, world.user_id)

    assert done.status is ExportStatus.FAILURE
    assert done.message == "The export has failed: disk full"
    services.job.attachments.create.assert_awaited_once()


async def test_deleted_meeting_marks_export_failed(services: Services, db, world):
    """A meeting removed after queueing fails the export."""
    record = await services.exports.create(user_id=world.user_id)
    await db.execute("DELETE FROM meetings WHERE id = ?", [world.meeting_id])

    done = await services.job.perform(record.job_id, world.meeting_id, world.user_id)

    assert done.status is ExportStatus.FAILURE
    assert done.message.startswith("The export has failed:")


async def test_unknown_user_marks_export_failed(services: Services, world):
    record = await services.exports.create(user_id=999)

    done = await services.job.perform(record.job_id, world.meeting_id, 999)

    assert done.status is ExportStatus.FAILURE


class TestExportJobQueue:
    """Queue wrapper around the job."""

    async def test_inline_enqueue_runs_job(self, services: Services, world):
        queue = ExportJobQueue(services.job, inline=True)
        record = await services.exports.create(user_id=world.user_id)

        job_id = await queue.enqueue(
            record.job_id, world.meeting_id, world.user_id, ExportOptions()
        )

        assert job_id == record.job_id
        stored = await services.exports.get_by_job_id(job_id)
        assert stored.status is ExportStatus.SUCCESS

    async def test_crash_marks_export_failed(self, services: Services, world):
        """Unexpected exceptions never leave a record in process."""
        services.job.registry = None  # type: ignore[assignment]
        queue = ExportJobQueue(services.job, inline=True)
        record = await services.exports.create(user_id=world.user_id)

        await queue.enqueue(record.job_id, world.meeting_id, world.user_id, ExportOptions())

        stored = await services.exports.get_by_job_id(record.job_id)
        assert stored.status is ExportStatus.FAILURE
        assert stored.message.startswith("The export has failed:")
