"""Export record and export result models."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

MEETING_MARKDOWN_EXPORT_TYPE = "MeetingMarkdownExport"


class ExportStateError(Exception):
    """Raised when an export record is moved to a state it cannot reach."""


class ExportStatus(str, Enum):
    """Lifecycle of one export attempt."""

    QUEUED = "queued"
    IN_PROCESS = "in_process"
    SUCCESS = "success"
    FAILURE = "failure"

    @property
    def is_terminal(self) -> bool:
        return self in (ExportStatus.SUCCESS, ExportStatus.FAILURE)


_ALLOWED_TRANSITIONS: dict[ExportStatus, set[ExportStatus]] = {
    ExportStatus.QUEUED: {ExportStatus.IN_PROCESS, ExportStatus.FAILURE},
    ExportStatus.IN_PROCESS: {ExportStatus.SUCCESS, ExportStatus.FAILURE},
    ExportStatus.SUCCESS: set(),
    ExportStatus.FAILURE: set(),
}


def check_transition(current: ExportStatus, target: ExportStatus) -> None:
    """Validate an export status transition.

    Args:
        current: Status the record is in now
        target: Requested status

    Raises:
        ExportStateError: If the transition is not allowed
    """
    if target not in _ALLOWED_TRANSITIONS[current]:
        msg = f"Cannot move export from {current.value} to {target.value}"
        raise ExportStateError(msg)


class ExportRecord(BaseModel):
    """Durable marker of one export attempt.

    Holds the job identifier used by the status view, the terminal status
    and, on success, the download reference of the produced file.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Row ID within its table")
    type: str = Field(
        default=MEETING_MARKDOWN_EXPORT_TYPE,
        description="Export type discriminator",
    )
    table: str = Field(description="Table holding the record")
    job_id: str = Field(description="Background job identifier")
    user_id: int | None = Field(default=None, description="Requesting user")
    status: ExportStatus = Field(default=ExportStatus.QUEUED)
    message: str | None = Field(default=None, description="Human-readable status")
    payload: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ExportResult(BaseModel):
    """Output of an exporter, ready to be stored as an attachment."""

    model_config = ConfigDict(frozen=True)

    format: str = Field(default="markdown", description="Export format key")
    mime_type: str = Field(default="text/markdown", description="Content type")
    title: str = Field(description="Suggested filename")
    content: str = Field(description="Document text")
