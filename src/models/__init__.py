"""Data models for the meeting Markdown export.

This module exports the snapshot and export models:
- BaseEntity: Base class for host entities
- User, Participant: Meeting attendees
- Project, Meeting, AgendaItem: Meeting snapshot
- Outcome: Results recorded against agenda items
- WorkItemRef variants: Visibility state of linked work items
- ExportRecord, ExportStatus, ExportResult: Export bookkeeping
"""

from src.models.base import BaseEntity
from src.models.export import (
    MEETING_MARKDOWN_EXPORT_TYPE,
    ExportRecord,
    ExportResult,
    ExportStateError,
    ExportStatus,
)
from src.models.meeting import AgendaItem, AgendaItemType, Meeting, Project
from src.models.outcome import Outcome, OutcomeKind
from src.models.participant import Participant, User
from src.models.work_item import (
    DeletedWorkItem,
    UndisclosedWorkItem,
    UnresolvedWorkItem,
    VisibleWorkItem,
    WorkItemRef,
)

__all__ = [
    # Base
    "BaseEntity",
    # People
    "Participant",
    "User",
    # Meeting
    "AgendaItem",
    "AgendaItemType",
    "Meeting",
    "Project",
    # Outcomes
    "Outcome",
    "OutcomeKind",
    "DeletedWorkItem",
    "UndisclosedWorkItem",
    "UnresolvedWorkItem",
    "VisibleWorkItem",
    "WorkItemRef",
    # Export
    "MEETING_MARKDOWN_EXPORT_TYPE",
    "ExportRecord",
    "ExportResult",
    "ExportStateError",
    "ExportStatus",
]
