"""Pytest configuration and fixtures."""

from collections.abc import AsyncIterator
from dataclasses import dataclass
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from src.db.turso import TursoClient
from src.main import app, initialize_services
from src.repositories.meeting_repo import MeetingRepository


class DataSeeder:
    """Insert host rows (projects, users, meetings, ...) for tests."""

    def __init__(self, db: TursoClient):
        self.db = db

    async def _insert(self, sql: str, params: list) -> int:
        result = await self.db.execute(sql, params)
        return result.last_insert_rowid

    async def project(
        self, name: str = "Test Project", identifier: str = "test-project"
    ) -> int:
        return await self._insert(
            "INSERT INTO projects (identifier, name) VALUES (?, ?)",
            [identifier, name],
        )

    async def user(
        self,
        name: str = "Alice Example",
        admin: bool = False,
        time_zone: str | None = None,
    ) -> int:
        return await self._insert(
            "INSERT INTO users (name, admin, time_zone) VALUES (?, ?, ?)",
            [name, int(admin), time_zone],
        )

    async def member(self, project_id: int, user_id: int) -> None:
        await self.db.execute(
            "INSERT INTO members (project_id, user_id) VALUES (?, ?)",
            [project_id, user_id],
        )

    async def meeting(
        self,
        project_id: int,
        title: str = "Test Meeting",
        start_time: str = "2024-12-31T13:30:00Z",
        duration: float = 1.5,
        location: str | None = "Room 101",
    ) -> int:
        return await self._insert(
            """INSERT INTO meetings (project_id, title, start_time, duration, location)
               VALUES (?, ?, ?, ?, ?)""",
            [project_id, title, start_time, duration, location],
        )

    async def participant(self, meeting_id: int, user_id: int) -> int:
        return await self._insert(
            "INSERT INTO meeting_participants (meeting_id, user_id) VALUES (?, ?)",
            [meeting_id, user_id],
        )

    async def work_package(
        self, project_id: int, subject: str = "Fix login", type_name: str = "Task"
    ) -> int:
        return await self._insert(
            "INSERT INTO work_packages (project_id, subject, type_name) VALUES (?, ?, ?)",
            [project_id, subject, type_name],
        )

    async def agenda_item(
        self,
        meeting_id: int,
        title: str | None = "Agenda Item 1",
        position: int = 1,
        notes: str | None = None,
        item_type: str = "simple",
        work_package_id: int | None = None,
    ) -> int:
        return await self._insert(
            """INSERT INTO meeting_agenda_items
               (meeting_id, position, title, item_type, work_package_id, notes)
               VALUES (?, ?, ?, ?, ?, ?)""",
            [meeting_id, position, title, item_type, work_package_id, notes],
        )

    async def outcome(
        self,
        agenda_item_id: int,
        notes: str | None = None,
        kind: str = "information",
        work_package_id: int | None = None,
    ) -> int:
        return await self._insert(
            """INSERT INTO meeting_outcomes
               (meeting_agenda_item_id, kind, notes, work_package_id)
               VALUES (?, ?, ?, ?)""",
            [agenda_item_id, kind, notes, work_package_id],
        )


@dataclass
class World:
    """IDs of a project with one member and one meeting."""

    project_id: int
    user_id: int
    meeting_id: int


@pytest.fixture
async def db(tmp_path: Path) -> AsyncIterator[TursoClient]:
    """Create a temp file database client with the host schema."""
    db_path = tmp_path / "test.db"
    client = TursoClient(url=f"file:{db_path}")
    await client.connect()
    await MeetingRepository(client).init_schema()
    yield client
    await client.close()


@pytest.fixture
def seeder(db: TursoClient) -> DataSeeder:
    """Row factory bound to the test database."""
    return DataSeeder(db)


@pytest.fixture
async def world(seeder: DataSeeder) -> World:
    """A project, a member user and a meeting in that project."""
    project_id = await seeder.project()
    user_id = await seeder.user()
    await seeder.member(project_id, user_id)
    meeting_id = await seeder.meeting(project_id)
    return World(project_id=project_id, user_id=user_id, meeting_id=meeting_id)


@pytest.fixture
async def client(db: TursoClient, tmp_path: Path) -> AsyncIterator[AsyncClient]:
    """Create async test client for the FastAPI app with inline jobs."""
    app.state.db = db
    await initialize_services(
        app,
        db,
        attachments_root=tmp_path / "attachments",
        run_jobs_inline=True,
        run_plugin_migrations=True,
    )

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    del app.state.db
