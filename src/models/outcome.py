"""Outcome model for results recorded against agenda items."""

from enum import Enum

from pydantic import Field, model_validator

from src.models.base import BaseEntity
from src.models.work_item import WorkItemRef


class OutcomeKind(str, Enum):
    """What an outcome records."""

    INFORMATION = "information"
    WORK_PACKAGE = "work_package"


class Outcome(BaseEntity):
    """A recorded result of discussing an agenda item.

    Either a free-text note (information) or a reference to a work item.
    """

    kind: OutcomeKind = Field(
        default=OutcomeKind.INFORMATION,
        description="Plain note or work item reference",
    )
    notes: str | None = Field(default=None, description="Free-text outcome notes")
    work_item: WorkItemRef | None = Field(
        default=None,
        description="Resolved work item reference (work_package kind only)",
    )

    @model_validator(mode="after")
    def work_item_matches_kind(self) -> "Outcome":
        """Work item references only belong to work_package outcomes."""
        if self.kind is OutcomeKind.WORK_PACKAGE and self.work_item is None:
            msg = "work_package outcomes need a work item reference"
            raise ValueError(msg)
        if self.kind is OutcomeKind.INFORMATION and self.work_item is not None:
            msg = "information outcomes cannot reference a work item"
            raise ValueError(msg)
        return self

    @property
    def is_work_item(self) -> bool:
        return self.kind is OutcomeKind.WORK_PACKAGE
