"""Meeting snapshot models: project, agenda items and the meeting itself."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from src.models.base import BaseEntity
from src.models.outcome import Outcome
from src.models.participant import Participant
from src.models.work_item import WorkItemRef


class Project(BaseEntity):
    """Project owning a meeting. Only the name is displayed."""

    identifier: str = Field(description="URL identifier, e.g. 'demo-project'")
    name: str = Field(description="Display name")


class AgendaItemType(str, Enum):
    """Whether an agenda item is free text or a work item."""

    SIMPLE = "simple"
    WORK_PACKAGE = "work_package"


class AgendaItem(BaseEntity):
    """A titled sub-topic of a meeting, ordered by position."""

    position: int = Field(description="Sort key within the meeting")
    title: str | None = Field(default=None, description="Free-text title")
    item_type: AgendaItemType = Field(default=AgendaItemType.SIMPLE)
    work_item: WorkItemRef | None = Field(
        default=None,
        description="Work item shown as the title of work_package items",
    )
    notes: str | None = Field(default=None, description="Agenda item notes")
    outcomes: list[Outcome] = Field(
        default_factory=list,
        description="Outcomes in creation order",
    )

    @property
    def has_notes(self) -> bool:
        return bool(self.notes and self.notes.strip())


class Meeting(BaseEntity):
    """A fully loaded, read-only snapshot of one meeting.

    The snapshot holds:
    - Metadata (title, start time already in the viewer's time zone, location)
    - The owning project
    - Participants
    - Agenda items with their outcomes, loaded in the same pass
    """

    title: str = Field(description="Meeting title")
    start_time: datetime = Field(description="Start, in the viewer's time zone")
    duration: float = Field(default=1.0, ge=0, description="Duration in hours")
    location: str | None = Field(default=None, description="Where it takes place")
    project: Project = Field(description="Owning project")
    participants: list[Participant] = Field(default_factory=list)
    agenda_items: list[AgendaItem] = Field(default_factory=list)

    @property
    def has_location(self) -> bool:
        return bool(self.location and self.location.strip())

    @property
    def ordered_agenda_items(self) -> list[AgendaItem]:
        """Agenda items in ascending position order."""
        return sorted(self.agenda_items, key=lambda item: (item.position, item.id))
