"""Repository loading read-only meeting snapshots.

The meeting, project, agenda and work package tables belong to the host
application. This repository only reads them and resolves what the
requesting user may see. Agenda items and outcomes are fetched in one
statement so a snapshot never mixes two versions of the agenda.
"""

import logging
from datetime import UTC, datetime, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from src.config import settings
from src.db.turso import TursoClient
from src.models.meeting import AgendaItem, AgendaItemType, Meeting, Project
from src.models.outcome import Outcome, OutcomeKind
from src.models.participant import Participant, User
from src.models.work_item import (
    DeletedWorkItem,
    UndisclosedWorkItem,
    UnresolvedWorkItem,
    VisibleWorkItem,
    WorkItemRef,
)

logger = logging.getLogger(__name__)

HOST_SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS projects (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        identifier TEXT UNIQUE NOT NULL,
        name TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        admin INTEGER NOT NULL DEFAULT 0,
        time_zone TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS members (
        project_id INTEGER NOT NULL,
        user_id INTEGER NOT NULL,
        UNIQUE(project_id, user_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS work_packages (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        project_id INTEGER NOT NULL,
        subject TEXT NOT NULL,
        type_name TEXT NOT NULL DEFAULT 'Task'
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS meetings (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        project_id INTEGER NOT NULL,
        title TEXT NOT NULL,
        start_time TEXT NOT NULL,
        duration REAL NOT NULL DEFAULT 1.0,
        location TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS meeting_participants (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        meeting_id INTEGER NOT NULL,
        user_id INTEGER NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS meeting_agenda_items (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        meeting_id INTEGER NOT NULL,
        position INTEGER NOT NULL DEFAULT 1,
        title TEXT,
        item_type TEXT NOT NULL DEFAULT 'simple',
        work_package_id INTEGER,
        notes TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS meeting_outcomes (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        meeting_agenda_item_id INTEGER NOT NULL,
        kind TEXT NOT NULL DEFAULT 'information',
        notes TEXT,
        work_package_id INTEGER
    )
    """,
]

AGENDA_QUERY = """
    SELECT a.id, a.position, a.title, a.item_type, a.work_package_id, a.notes,
           awp.id, awp.project_id, awp.subject, awp.type_name,
           o.id, o.kind, o.notes, o.work_package_id,
           owp.id, owp.project_id, owp.subject, owp.type_name
    FROM meeting_agenda_items a
    LEFT JOIN work_packages awp ON awp.id = a.work_package_id
    LEFT JOIN meeting_outcomes o ON o.meeting_agenda_item_id = a.id
    LEFT JOIN work_packages owp ON owp.id = o.work_package_id
    WHERE a.meeting_id = ?
    ORDER BY a.position ASC, a.id ASC, o.id ASC
"""


class MeetingNotFoundError(LookupError):
    """Raised when a meeting does not exist or is hidden from the user."""


def resolve_work_item(
    work_package_id: int | None,
    row: tuple | None,
    visible_project_ids: set[int] | None,
) -> WorkItemRef:
    """Resolve a stored work item link into its visibility state.

    Args:
        work_package_id: Stored foreign key (None once the item was deleted)
        row: (id, project_id, subject, type_name) of the joined work item,
             or None when the join found nothing
        visible_project_ids: Projects the user can see, None for admins

    Returns:
        One of the four WorkItemRef variants
    """
    if work_package_id is None:
        return DeletedWorkItem()
    if row is None or row[0] is None:
        return UnresolvedWorkItem(id=work_package_id)
    if visible_project_ids is None or row[1] in visible_project_ids:
        return VisibleWorkItem(id=row[0], subject=row[2], type_name=row[3])
    return UndisclosedWorkItem(id=row[0])


def parse_timestamp(value: str) -> datetime:
    """Parse a stored ISO timestamp, treating naive values as UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def zone_for(user: User) -> tzinfo:
    """Time zone used to display meeting times to a user."""
    name = user.time_zone or settings.default_time_zone
    if name in ("UTC", "Etc/UTC"):
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown time zone {name!r} for user {user.id}, using UTC")
        return UTC


class MeetingRepository:
    """Read access to meetings and the users viewing them."""

    def __init__(self, db_client: TursoClient):
        """Initialize repository with database client.

        Args:
            db_client: TursoClient instance for database operations
        """
        self._db = db_client

    async def init_schema(self) -> None:
        """Create the host tables if they don't exist (local/dev databases)."""
        await self._db.execute_batch(HOST_SCHEMA)

    async def get_user(self, user_id: int) -> User | None:
        """Load a user by ID.

        Returns:
            User, or None if no such user
        """
        row = await self._db.fetch_one(
            "SELECT id, name, admin, time_zone FROM users WHERE id = ?",
            [user_id],
        )
        if row is None:
            return None
        return User(id=row[0], name=row[1], admin=bool(row[2]), time_zone=row[3])

    async def visible_project_ids(self, user: User) -> set[int] | None:
        """Projects the user is a member of; None means every project."""
        if user.admin:
            return None
        result = await self._db.execute(
            "SELECT project_id FROM members WHERE user_id = ?",
            [user.id],
        )
        return {row[0] for row in result.rows}

    async def _find_meeting_row(
        self,
        meeting_id: int,
        project_identifier: str | None,
    ) -> tuple | None:
        sql = """
            SELECT m.id, m.title, m.start_time, m.duration, m.location,
                   p.id, p.identifier, p.name
            FROM meetings m
            JOIN projects p ON p.id = m.project_id
            WHERE m.id = ?
        """
        params: list = [meeting_id]
        if project_identifier is not None:
            sql += " AND p.identifier = ?"
            params.append(project_identifier)
        return await self._db.fetch_one(sql, params)

    async def find_visible(
        self,
        meeting_id: int,
        user: User,
        project_identifier: str | None = None,
    ) -> Meeting:
        """Load a complete meeting snapshot as seen by a user.

        Args:
            meeting_id: Meeting ID
            user: Viewing user (decides visibility and time zone)
            project_identifier: Optional project scope from the URL

        Returns:
            Meeting with participants, agenda items and outcomes

        Raises:
            MeetingNotFoundError: If missing, out of scope, or not visible
        """
        row = await self._find_meeting_row(meeting_id, project_identifier)
        if row is None:
            raise MeetingNotFoundError(f"Meeting {meeting_id} not found")

        visible_projects = await self.visible_project_ids(user)
        project_id = row[5]
        if visible_projects is not None and project_id not in visible_projects:
            raise MeetingNotFoundError(f"Meeting {meeting_id} not found")

        participants = await self._load_participants(meeting_id)
        agenda_items = await self._load_agenda(meeting_id, visible_projects)

        return Meeting(
            id=row[0],
            title=row[1],
            start_time=parse_timestamp(row[2]).astimezone(zone_for(user)),
            duration=row[3],
            location=row[4],
            project=Project(id=row[5], identifier=row[6], name=row[7]),
            participants=participants,
            agenda_items=agenda_items,
        )

    async def _load_participants(self, meeting_id: int) -> list[Participant]:
        result = await self._db.execute(
            """SELECT mp.id, u.id, u.name, u.admin, u.time_zone
               FROM meeting_participants mp
               JOIN users u ON u.id = mp.user_id
               WHERE mp.meeting_id = ?
               ORDER BY mp.id ASC""",
            [meeting_id],
        )
        return [
            Participant(
                id=r[0],
                user=User(id=r[1], name=r[2], admin=bool(r[3]), time_zone=r[4]),
            )
            for r in result.rows
        ]

    async def _load_agenda(
        self,
        meeting_id: int,
        visible_projects: set[int] | None,
    ) -> list[AgendaItem]:
        result = await self._db.execute(AGENDA_QUERY, [meeting_id])

        # Group joined rows by agenda item, keeping query order
        items: dict[int, dict] = {}
        for raw in result.rows:
            r = tuple(raw)
            item_id = r[0]
            if item_id not in items:
                item_type = AgendaItemType(r[3])
                work_item = None
                if item_type is AgendaItemType.WORK_PACKAGE:
                    work_item = resolve_work_item(
                        r[4], tuple(r[6:10]), visible_projects
                    )
                items[item_id] = {
                    "id": item_id,
                    "position": r[1],
                    "title": r[2],
                    "item_type": item_type,
                    "work_item": work_item,
                    "notes": r[5],
                    "outcomes": [],
                }

            if r[10] is None:
                continue

            kind = OutcomeKind(r[11])
            outcome_work_item = None
            if kind is OutcomeKind.WORK_PACKAGE:
                outcome_work_item = resolve_work_item(
                    r[13], tuple(r[14:18]), visible_projects
                )
            items[item_id]["outcomes"].append(
                Outcome(
                    id=r[10],
                    kind=kind,
                    notes=r[12],
                    work_item=outcome_work_item,
                )
            )

        return [AgendaItem(**data) for data in items.values()]
