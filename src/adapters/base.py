"""Base types for attachment storage.

This module defines the AttachmentStore protocol and AttachmentResult
model used by the export job to persist produced files.
"""

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


class AttachmentResult(BaseModel):
    """Result of storing an attachment.

    Captures success/failure status along with the stored file's
    identity so callers can build a download reference.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    success: bool = Field(description="Whether the attachment was created")
    attachment_id: int | None = Field(default=None, description="Attachment ID")
    filename: str | None = Field(default=None, description="Stored filename")
    content_type: str | None = Field(default=None, description="MIME type")
    filesize: int = Field(default=0, description="Size in bytes")
    error_message: str | None = Field(
        default=None, description="Error message if failed"
    )
    duration_ms: int | None = Field(
        default=None, description="Operation duration in milliseconds"
    )


class StoredAttachment(BaseModel):
    """Metadata of a stored attachment, used for downloads."""

    id: int
    container_type: str
    container_id: int
    filename: str
    content_type: str
    filesize: int
    disk_path: str


@runtime_checkable
class AttachmentStore(Protocol):
    """Protocol for stores that keep files attached to a container record.

    Stores implement this protocol for structural subtyping -
    they don't need to inherit, just implement the methods.
    """

    async def create(
        self,
        *,
        container_type: str,
        container_id: int,
        filename: str,
        content: bytes,
        content_type: str,
    ) -> AttachmentResult:
        """Store a file for a container.

        Failures are reported in the result, not raised.
        """
        ...

    async def get(self, attachment_id: int) -> StoredAttachment | None:
        """Look up a stored attachment."""
        ...
