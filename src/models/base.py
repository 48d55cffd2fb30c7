"""Base entity class for meeting snapshot models."""

from pydantic import BaseModel, ConfigDict, Field


class BaseEntity(BaseModel):
    """Base class for entities read from the host database.

    Snapshot entities are loaded once per export and never mutated,
    so instances are frozen.
    """

    model_config = ConfigDict(
        frozen=True,
        validate_default=True,
        from_attributes=True,
    )

    id: int = Field(description="Primary key in the host database")
