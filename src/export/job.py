"""Background job turning a meeting into a Markdown attachment.

One job handles one export record:
queued -> in_process -> success | failure, reported exactly once.
"""

from typing import Any

import structlog

from src.adapters.base import AttachmentStore
from src.export.i18n import Translator
from src.export.options import ExportOptions
from src.export.registry import ExporterRegistry
from src.models.export import ExportRecord, ExportResult, ExportStatus
from src.models.meeting import Meeting
from src.models.participant import User
from src.repositories.export_repo import ExportRepository
from src.repositories.meeting_repo import MeetingNotFoundError, MeetingRepository

logger = structlog.get_logger()

MIME_TYPE_KEY = "markdown"


def attachment_content_path(attachment_id: int) -> str:
    """API path serving an attachment's content."""
    return f"/api/v3/attachments/{attachment_id}/content"


def download_payload(
    download_url: str, mime_type: str, title: str
) -> dict[str, Any]:
    """Payload shown by the job status view for a finished export."""
    return {
        "title": title,
        "download": download_url,
        "mime_type": mime_type,
    }


class MarkdownExportJob:
    """Export one meeting to Markdown and attach the result.

    Retry policy is left to whatever schedules the job; a failed
    attachment write is reported once and not retried here.
    """

    def __init__(
        self,
        export_repo: ExportRepository,
        meeting_repo: MeetingRepository,
        attachments: AttachmentStore,
        registry: ExporterRegistry,
        translator: Translator,
    ):
        self.export_repo = export_repo
        self.meeting_repo = meeting_repo
        self.attachments = attachments
        self.registry = registry
        self.translator = translator

    def title(self) -> str:
        return self.translator.t("export_title")

    async def perform(
        self,
        job_id: str,
        meeting_id: int,
        user_id: int,
        options: ExportOptions | None = None,
    ) -> ExportRecord:
        """Run the export for a queued record.

        Args:
            job_id: Job identifier of the export record
            meeting_id: Meeting to export
            user_id: Requesting user (visibility and time zone)
            options: Which sections to include (defaults: everything)

        Returns:
            The export record in its terminal state
        """
        options = options or ExportOptions()
        log = logger.bind(
            export=self.title(),
            job_id=job_id,
            meeting_id=meeting_id,
            user_id=user_id,
        )

        record = await self.export_repo.transition(job_id, ExportStatus.IN_PROCESS)
        log.info("export started", **options.model_dump())

        user = await self.meeting_repo.get_user(user_id)
        meeting: Meeting | None = None
        if user is not None:
            try:
                meeting = await self.meeting_repo.find_visible(meeting_id, user)
            except MeetingNotFoundError:
                meeting = None

        if meeting is None:
            log.warning("meeting gone before export ran")
            return await self.export_repo.transition(
                job_id,
                ExportStatus.FAILURE,
                message=self.translator.t(
                    "export_failed",
                    message=self.translator.t("export_meeting_not_found"),
                ),
            )

        result = self._exporter(meeting, user, options).export()
        log.info(
            "rendered markdown",
            title=result.title,
            content_len=len(result.content),
        )

        return await self.store_attachment(record, result)

    def _exporter(self, meeting: Meeting, user: User | None, options: ExportOptions):
        exporter_class = self.registry.single_exporter(Meeting, MIME_TYPE_KEY)
        return exporter_class(
            meeting,
            current_user=user,
            participants=options.include_participants,
            outcomes=options.include_outcomes,
            translator=self.translator,
        )

    async def store_attachment(
        self, record: ExportRecord, result: ExportResult
    ) -> ExportRecord:
        """Attach the rendered file to the export record and report status.

        Args:
            record: Export record in process
            result: Rendered export

        Returns:
            The export record marked success or failure
        """
        stored = await self.attachments.create(
            container_type=record.table,
            container_id=record.id,
            filename=result.title,
            content=result.content.encode("utf-8"),
            content_type=result.mime_type,
        )

        if stored.success and stored.attachment_id is not None:
            download_url = attachment_content_path(stored.attachment_id)
            logger.info(
                "export succeeded",
                job_id=record.job_id,
                attachment_id=stored.attachment_id,
            )
            return await self.export_repo.transition(
                record.job_id,
                ExportStatus.SUCCESS,
                message=self.translator.t("export_succeeded"),
                payload=download_payload(
                    download_url, result.mime_type, stored.filename or result.title
                ),
            )

        logger.error(
            "export failed",
            job_id=record.job_id,
            error=stored.error_message,
        )
        return await self.export_repo.transition(
            record.job_id,
            ExportStatus.FAILURE,
            message=self.translator.t(
                "export_failed", message=stored.error_message or "unknown error"
            ),
        )
