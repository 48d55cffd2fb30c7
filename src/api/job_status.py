"""Job status and attachment download endpoints."""

from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse
from pydantic import BaseModel

from src.adapters.local_store import LocalAttachmentStore
from src.api.deps import get_attachment_store, get_current_user, get_export_repo
from src.models.export import ExportStatus
from src.models.participant import User
from src.repositories.export_repo import ExportNotFoundError, ExportRepository

router = APIRouter(tags=["exports"])


class JobStatusResponse(BaseModel):
    """Response model for the job status view."""

    job_id: str
    status: ExportStatus
    message: str | None
    payload: dict[str, Any]


@router.get("/job_statuses/{job_id}", response_model=JobStatusResponse)
async def job_status(
    job_id: str,
    user: User = Depends(get_current_user),
    exports: ExportRepository = Depends(get_export_repo),
) -> JobStatusResponse:
    """Report the status of an export job.

    Raises:
        HTTPException: 404 for unknown jobs or jobs of other users
    """
    try:
        record = await exports.get_by_job_id(job_id)
    except ExportNotFoundError:
        raise HTTPException(status_code=404, detail="Job not found") from None

    if record.user_id is not None and record.user_id != user.id:
        raise HTTPException(status_code=404, detail="Job not found")

    return JobStatusResponse(
        job_id=record.job_id,
        status=record.status,
        message=record.message,
        payload=record.payload,
    )


@router.get("/api/v3/attachments/{attachment_id}/content")
async def attachment_content(
    attachment_id: int,
    user: User = Depends(get_current_user),
    store: LocalAttachmentStore = Depends(get_attachment_store),
) -> FileResponse:
    """Download a stored attachment.

    Raises:
        HTTPException: 404 if the attachment or its file is missing
    """
    attachment = await store.get(attachment_id)
    if attachment is None or not Path(attachment.disk_path).is_file():
        raise HTTPException(status_code=404, detail="Attachment not found")

    return FileResponse(
        attachment.disk_path,
        media_type=attachment.content_type,
        filename=attachment.filename,
    )
