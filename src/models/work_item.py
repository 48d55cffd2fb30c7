"""Work item references as seen by the exporting user.

A work item linked from an outcome or agenda item resolves to exactly one
of four states. The union is closed so that every consumer can match on
it exhaustively.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class _WorkItemState(BaseModel):
    model_config = ConfigDict(frozen=True)


class VisibleWorkItem(_WorkItemState):
    """Linked work item the viewer is allowed to see."""

    state: Literal["visible"] = "visible"
    id: int = Field(description="Work item ID")
    subject: str = Field(description="Work item subject")
    type_name: str = Field(default="Task", description="Work item type name")

    def __str__(self) -> str:
        return f"{self.type_name} #{self.id}: {self.subject}"


class UndisclosedWorkItem(_WorkItemState):
    """Linked work item that exists but is hidden from the viewer."""

    state: Literal["undisclosed"] = "undisclosed"
    id: int = Field(description="Work item ID")


class DeletedWorkItem(_WorkItemState):
    """Reference whose work item was deleted (link cleared)."""

    state: Literal["deleted"] = "deleted"


class UnresolvedWorkItem(_WorkItemState):
    """Stored identifier that matches no known work item."""

    state: Literal["unresolved"] = "unresolved"
    id: int = Field(description="Raw stored work item ID")


WorkItemRef = Annotated[
    VisibleWorkItem | UndisclosedWorkItem | DeletedWorkItem | UnresolvedWorkItem,
    Field(discriminator="state"),
]
