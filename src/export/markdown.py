"""Markdown rendering of a meeting snapshot."""

from typing import Any

from src.export.i18n import CatalogTranslator, Translator
from src.export.options import ExportOptions
from src.models.export import ExportResult
from src.models.meeting import AgendaItem, AgendaItemType, Meeting
from src.models.outcome import Outcome
from src.models.participant import User
from src.models.work_item import (
    DeletedWorkItem,
    UndisclosedWorkItem,
    UnresolvedWorkItem,
    VisibleWorkItem,
    WorkItemRef,
)

# Byte-order mark, emitted as the first line for content type detection
BOM = "\ufeff"

MARKDOWN_MIME_TYPE = "text/markdown"


def work_item_text(ref: WorkItemRef, translator: Translator) -> str:
    """Describe a work item reference for the exporting user.

    Args:
        ref: Resolved work item reference
        translator: Label lookup

    Returns:
        Display string, or a placeholder when the item is hidden or gone
    """
    match ref:
        case VisibleWorkItem():
            return str(ref)
        case UndisclosedWorkItem(id=work_item_id):
            return translator.t("label_agenda_item_undisclosed_wp", id=work_item_id)
        case DeletedWorkItem():
            return translator.t("label_agenda_item_deleted_wp")
        case UnresolvedWorkItem(id=work_item_id):
            return str(work_item_id)


def agenda_item_title(item: AgendaItem, translator: Translator) -> str:
    """Title shown in the agenda heading for an item."""
    if item.item_type is AgendaItemType.WORK_PACKAGE and item.work_item is not None:
        return work_item_text(item.work_item, translator)
    return item.title or ""


def outcome_lines(outcome: Outcome, translator: Translator) -> list[str]:
    """Bullet lines for one outcome; empty notes produce no bullet."""
    if outcome.is_work_item and outcome.work_item is not None:
        text = work_item_text(outcome.work_item, translator)
        return [f"- **{translator.t('label_task')}:** {text}"]
    if outcome.notes and outcome.notes.strip():
        return [f"- {outcome.notes}"]
    return []


def render_markdown(
    meeting: Meeting,
    options: ExportOptions,
    translator: Translator,
) -> str:
    """Render a meeting snapshot as a Markdown document.

    Sections, in order: title, details (project, date, time, location),
    participants, agenda with notes and outcomes. Empty sections are
    left out entirely.

    Args:
        meeting: Fully loaded meeting snapshot (never modified)
        options: Which optional sections to include
        translator: Label lookup

    Returns:
        Markdown text starting with a BOM line
    """
    t = translator.t
    lines: list[str] = [BOM]

    lines.append(f"# {meeting.title}")
    lines.append("")

    # Details block, fixed-width date and 24h time regardless of locale
    lines.append(f"**{t('label_project')}:** {meeting.project.name}")
    lines.append(f"**{t('label_date')}:** {meeting.start_time.strftime('%Y-%m-%d')}")
    lines.append(f"**{t('label_time')}:** {meeting.start_time.strftime('%H:%M')}")
    if meeting.has_location:
        lines.append(f"**{t('label_location')}:** {meeting.location}")
    lines.append("")

    if options.include_participants and meeting.participants:
        lines.append(f"## {t('label_participants')}")
        for participant in meeting.participants:
            lines.append(f"- {participant.name}")
        lines.append("")

    agenda_items = meeting.ordered_agenda_items
    if agenda_items:
        lines.append(f"## {t('label_agenda')}")
        for index, item in enumerate(agenda_items, start=1):
            lines.append(f"### {index}. {agenda_item_title(item, translator)}")

            if item.has_notes:
                lines.append("")
                lines.append(f"**{t('label_notes')}:**")
                lines.append(item.notes or "")

            if options.include_outcomes and item.outcomes:
                lines.append("")
                lines.append(f"**{t('label_outcomes')}:**")
                for outcome in item.outcomes:
                    lines.extend(outcome_lines(outcome, translator))

            lines.append("")

    return "\n".join(lines)


class MeetingMarkdownExporter:
    """Single-meeting exporter producing a Markdown attachment.

    Accepts the raw option values the job was queued with and casts them
    through ExportOptions, so "1"/"0" strings and booleans behave alike.
    """

    key = "markdown"

    def __init__(
        self,
        meeting: Meeting,
        current_user: User | None = None,
        participants: Any = True,
        outcomes: Any = True,
        translator: Translator | None = None,
    ):
        self.meeting = meeting
        self.current_user = current_user
        self.options = ExportOptions.from_raw(
            participants=participants, outcomes=outcomes
        )
        self.translator = translator or CatalogTranslator()

    def export(self) -> ExportResult:
        """Render the meeting and wrap it as an export result."""
        return ExportResult(
            format=self.key,
            mime_type=MARKDOWN_MIME_TYPE,
            title=f"{self.meeting.title}.md",
            content=render_markdown(self.meeting, self.options, self.translator),
        )
