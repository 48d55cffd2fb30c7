"""libSQL access shared by the meeting, export and attachment stores.

The host tables (meetings, projects, work packages) and the export
tables live in the same database. Local runs and tests point at a
``file:`` URL; deployments can point at a Turso ``libsql://`` URL.
"""

import logging
from typing import Any

from libsql_client import Client, ResultSet, create_client

from src.config import settings

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "file:meeting_exports.db"


class TursoClient:
    """Async libSQL client with the few helpers the stores need."""

    def __init__(
        self,
        url: str | None = None,
        auth_token: str | None = None,
    ):
        """Set up connection parameters; nothing is opened yet.

        Args:
            url: Database URL. Falls back to settings, then a local file.
            auth_token: Turso token, only sent for libsql:// URLs.
        """
        self.url = url or settings.turso_database_url or DEFAULT_DATABASE_URL
        self.auth_token = auth_token or settings.turso_auth_token
        self._client: Client | None = None

    @property
    def is_remote(self) -> bool:
        return self.url.startswith("libsql://")

    async def connect(self) -> None:
        """Open the connection. Calling it twice is harmless."""
        if self._client is not None:
            return

        token = self.auth_token if self.is_remote else None
        self._client = create_client(url=self.url, auth_token=token)
        logger.info(f"Connected to database: {self.url}")

    def _require_client(self) -> Client:
        if self._client is None:
            msg = "Not connected. Call connect() first."
            raise RuntimeError(msg)
        return self._client

    async def execute(
        self,
        sql: str,
        params: list[Any] | None = None,
    ) -> ResultSet:
        """Run one statement with ? placeholders.

        Returns:
            ResultSet with rows, rows_affected and last_insert_rowid
        """
        return await self._require_client().execute(sql, params or [])

    async def fetch_one(
        self,
        sql: str,
        params: list[Any] | None = None,
    ) -> tuple | None:
        """First row of a query as a plain tuple, or None."""
        result = await self.execute(sql, params)
        return tuple(result.rows[0]) if result.rows else None

    async def execute_batch(self, statements: list[str]) -> None:
        """Run schema statements in one batch."""
        await self._require_client().batch(statements)

    async def table_columns(self, name: str) -> set[str]:
        """Column names of a table; empty when the table is missing."""
        result = await self.execute(f"PRAGMA table_info({name})")
        # table_info rows: (cid, name, type, notnull, dflt_value, pk)
        return {row[1] for row in result.rows}

    async def close(self) -> None:
        """Close the connection if open."""
        if self._client is None:
            return
        await self._client.close()
        self._client = None
        logger.info("Database connection closed")

    async def ping(self) -> bool:
        """Round-trip a trivial query; False on any failure."""
        if self._client is None:
            return False
        try:
            row = await self.fetch_one("SELECT 1")
        except Exception as e:
            logger.warning(f"Database ping failed: {e}")
            return False
        return row == (1,)
