"""Repository layer for data persistence.

MeetingRepository reads host meeting data; ExportRepository owns the
export records.
"""

from src.repositories.export_repo import ExportRepository
from src.repositories.meeting_repo import MeetingRepository

__all__ = [
    "ExportRepository",
    "MeetingRepository",
]
