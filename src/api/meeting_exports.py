"""Meeting Markdown export endpoints.

Two entry points per meeting:
- generate_markdown_dialog: HTML options dialog
- export_markdown: create an export record and queue the export job
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from src.api.deps import (
    get_current_user,
    get_export_repo,
    get_job_queue,
    get_meeting_repo,
    get_translator,
)
from src.export.dialog import ExportDialogRenderer
from src.export.i18n import Translator
from src.export.options import ExportOptions, markdown_export_options
from src.export.queue import ExportJobQueue
from src.models.meeting import Meeting
from src.models.participant import User
from src.repositories.export_repo import ExportRepository
from src.repositories.meeting_repo import MeetingNotFoundError, MeetingRepository

logger = structlog.get_logger()
router = APIRouter(prefix="/projects/{project_id}/meetings", tags=["meetings"])

_dialog_renderer = ExportDialogRenderer()


def job_status_path(job_id: str) -> str:
    """Path of the job status view."""
    return f"/job_statuses/{job_id}"


def query_params_dict(request: Request) -> dict[str, Any]:
    """Query parameters with repeated keys collected into lists.

    Array-style keys (``outcomes[]=1&outcomes[]=0``) are collected under
    the bare name, together with any plain ``outcomes`` values.
    """
    collected: dict[str, list[str]] = {}
    array_keys: set[str] = set()
    for key, value in request.query_params.multi_items():
        name = key.removesuffix("[]")
        if name != key:
            array_keys.add(name)
        collected.setdefault(name, []).append(value)

    params: dict[str, Any] = {}
    for name, values in collected.items():
        is_list = name in array_keys or len(values) > 1
        params[name] = values if is_list else values[0]
    return params


async def load_visible_meeting(
    project_id: str,
    meeting_id: int,
    user: User,
    meetings: MeetingRepository,
) -> Meeting:
    """Load a meeting the user may see or answer 404."""
    try:
        return await meetings.find_visible(
            meeting_id, user, project_identifier=project_id
        )
    except MeetingNotFoundError:
        raise HTTPException(status_code=404, detail="Meeting not found") from None


@router.get("/{meeting_id}/generate_markdown_dialog", response_class=HTMLResponse)
async def generate_markdown_dialog(
    project_id: str,
    meeting_id: int,
    user: User = Depends(get_current_user),
    meetings: MeetingRepository = Depends(get_meeting_repo),
    translator: Translator = Depends(get_translator),
) -> HTMLResponse:
    """Render the export options dialog for a meeting.

    Raises:
        HTTPException: 404 if the meeting is missing or not visible
    """
    meeting = await load_visible_meeting(project_id, meeting_id, user, meetings)
    return HTMLResponse(_dialog_renderer.render(meeting, translator))


@router.get("/{meeting_id}/export_markdown")
async def export_markdown(
    request: Request,
    project_id: str,
    meeting_id: int,
    user: User = Depends(get_current_user),
    meetings: MeetingRepository = Depends(get_meeting_repo),
    exports: ExportRepository = Depends(get_export_repo),
    queue: ExportJobQueue = Depends(get_job_queue),
):
    """Start a Markdown export of a meeting.

    Accepts ``participants``/``outcomes`` (or the dialog's
    ``md_include_participants``/``md_include_outcomes``), each as a
    single value or repeated checkbox values.

    Returns:
        {"job_id": ...} when the client accepts JSON, otherwise a
        redirect to the job status view

    Raises:
        HTTPException: 404 if the meeting is missing or not visible;
            no export record is created in that case
    """
    await load_visible_meeting(project_id, meeting_id, user, meetings)

    raw_options = markdown_export_options(query_params_dict(request))
    options = ExportOptions.from_raw(**raw_options)

    export = await exports.create(user_id=user.id)
    job_id = await queue.enqueue(
        export.job_id,
        meeting_id=meeting_id,
        user_id=user.id,
        options=options,
    )

    logger.info(
        "markdown export requested",
        job_id=job_id,
        meeting_id=meeting_id,
        user_id=user.id,
        raw_options=raw_options,
    )

    if "application/json" in request.headers.get("accept", ""):
        return JSONResponse({"job_id": job_id})
    return RedirectResponse(url=job_status_path(job_id), status_code=302)
