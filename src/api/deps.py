"""Shared FastAPI dependencies reading services from app state."""

from fastapi import Depends, Header, HTTPException, Request

from src.adapters.local_store import LocalAttachmentStore
from src.export.i18n import Translator
from src.export.queue import ExportJobQueue
from src.models.participant import User
from src.repositories.export_repo import ExportRepository
from src.repositories.meeting_repo import MeetingRepository


def get_meeting_repo(request: Request) -> MeetingRepository:
    """Dependency to get MeetingRepository from app state."""
    return request.app.state.meeting_repo


def get_export_repo(request: Request) -> ExportRepository:
    """Dependency to get ExportRepository from app state."""
    return request.app.state.export_repo


def get_attachment_store(request: Request) -> LocalAttachmentStore:
    """Dependency to get the attachment store from app state."""
    return request.app.state.attachment_store


def get_job_queue(request: Request) -> ExportJobQueue:
    """Dependency to get ExportJobQueue from app state."""
    return request.app.state.job_queue


def get_translator(request: Request) -> Translator:
    """Dependency to get the translator from app state."""
    return request.app.state.translator


async def get_current_user(
    x_user_id: int | None = Header(default=None),
    meetings: MeetingRepository = Depends(get_meeting_repo),
) -> User:
    """Resolve the requesting user from the X-User-Id header.

    Raises:
        HTTPException: 401 if the header is missing or names no user
    """
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    user = await meetings.get_user(x_user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Unknown user")
    return user
