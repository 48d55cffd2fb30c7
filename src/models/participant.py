"""User and participant models for meeting attendees."""

from pydantic import Field

from src.models.base import BaseEntity


class User(BaseEntity):
    """A user of the host application.

    Only the display name, admin flag and time zone preference are
    consumed by the export.
    """

    name: str = Field(description="Display name")
    admin: bool = Field(default=False, description="Admins see every project")
    time_zone: str | None = Field(
        default=None,
        description="IANA time zone preference, None for the instance default",
    )


class Participant(BaseEntity):
    """A user invited to a meeting."""

    user: User = Field(description="The invited user")

    @property
    def name(self) -> str:
        return self.user.name
