"""Repository for export records.

Meeting Markdown exports are stored in their own table,
meeting_markdown_exports. Deployments where that table was never
migrated keep working: the storage mode is detected once at startup and
records then go to the shared exports table with their type kept in the
discriminator column.
"""

import json
import logging
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from src.db.turso import TursoClient
from src.models.export import (
    MEETING_MARKDOWN_EXPORT_TYPE,
    ExportRecord,
    ExportStatus,
    check_transition,
)

logger = logging.getLogger(__name__)

PLUGIN_TABLE = "meeting_markdown_exports"
SHARED_TABLE = "exports"

_COLUMNS = "id, type, job_id, user_id, status, message, payload, created_at, updated_at"
REQUIRED_COLUMNS = frozenset(c.strip() for c in _COLUMNS.split(","))


def _table_sql(name: str) -> str:
    return f"""
        CREATE TABLE IF NOT EXISTS {name} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            type TEXT NOT NULL,
            job_id TEXT UNIQUE NOT NULL,
            user_id INTEGER,
            status TEXT NOT NULL,
            message TEXT,
            payload TEXT NOT NULL DEFAULT '{{}}',
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
    """


class StorageMode(str, Enum):
    """Where export records are written."""

    PLUGIN_TABLE = "plugin_table"
    SHARED_TABLE = "shared_table"


class ExportNotFoundError(LookupError):
    """Raised when no export record matches a job ID."""


class ExportRepository:
    """Create export records and move them through their lifecycle."""

    def __init__(self, db_client: TursoClient):
        """Initialize repository with database client.

        Args:
            db_client: TursoClient instance for database operations
        """
        self._db = db_client
        self.mode: StorageMode | None = None

    async def init_schema(self) -> None:
        """Create the shared exports table if it doesn't exist."""
        await self._db.execute(_table_sql(SHARED_TABLE))

    async def migrate(self) -> None:
        """Create the plugin's own export table."""
        await self._db.execute(_table_sql(PLUGIN_TABLE))
        logger.info(f"Migrated {PLUGIN_TABLE}")

    async def detect_storage(self) -> StorageMode:
        """Decide once which table new export records go to.

        Returns:
            PLUGIN_TABLE if meeting_markdown_exports has every record
            column, else SHARED_TABLE
        """
        columns = await self._db.table_columns(PLUGIN_TABLE)
        if REQUIRED_COLUMNS <= columns:
            self.mode = StorageMode.PLUGIN_TABLE
        else:
            self.mode = StorageMode.SHARED_TABLE
            logger.warning(
                f"Table {PLUGIN_TABLE} is missing or incomplete; "
                f"storing meeting exports in {SHARED_TABLE}"
            )
        return self.mode

    @property
    def table(self) -> str:
        if self.mode is None:
            msg = "Storage mode unknown. Call detect_storage() first."
            raise RuntimeError(msg)
        return PLUGIN_TABLE if self.mode is StorageMode.PLUGIN_TABLE else SHARED_TABLE

    def _row_to_record(self, row: tuple, table: str) -> ExportRecord:
        return ExportRecord(
            id=row[0],
            type=row[1],
            table=table,
            job_id=row[2],
            user_id=row[3],
            status=ExportStatus(row[4]),
            message=row[5],
            payload=json.loads(row[6] or "{}"),
            created_at=datetime.fromisoformat(row[7]),
            updated_at=datetime.fromisoformat(row[8]),
        )

    async def create(self, user_id: int | None = None) -> ExportRecord:
        """Create a queued export record with a fresh job ID.

        Args:
            user_id: Requesting user

        Returns:
            The stored ExportRecord
        """
        table = self.table
        now = datetime.now(UTC).isoformat()
        job_id = str(uuid4())
        result = await self._db.execute(
            f"""INSERT INTO {table}
                (type, job_id, user_id, status, message, payload,
                 created_at, updated_at)
                VALUES (?, ?, ?, ?, NULL, '{{}}', ?, ?)""",
            [
                MEETING_MARKDOWN_EXPORT_TYPE,
                job_id,
                user_id,
                ExportStatus.QUEUED.value,
                now,
                now,
            ],
        )
        logger.debug(f"Created export {job_id} in {table}")
        return ExportRecord(
            id=result.last_insert_rowid,
            table=table,
            job_id=job_id,
            user_id=user_id,
            status=ExportStatus.QUEUED,
            created_at=datetime.fromisoformat(now),
            updated_at=datetime.fromisoformat(now),
        )

    async def get_by_job_id(self, job_id: str) -> ExportRecord:
        """Look up an export record by job ID in either table.

        Raises:
            ExportNotFoundError: If no record has this job ID
        """
        tables = [self.table]
        if self.mode is StorageMode.PLUGIN_TABLE:
            # Records written before the plugin table was migrated
            tables.append(SHARED_TABLE)

        for table in tables:
            row = await self._db.fetch_one(
                f"SELECT {_COLUMNS} FROM {table} WHERE job_id = ? AND type = ?",
                [job_id, MEETING_MARKDOWN_EXPORT_TYPE],
            )
            if row is not None:
                return self._row_to_record(row, table)

        msg = f"Export job {job_id} not found"
        raise ExportNotFoundError(msg)

    async def transition(
        self,
        job_id: str,
        status: ExportStatus,
        message: str | None = None,
        payload: dict[str, Any] | None = None,
    ) -> ExportRecord:
        """Move an export record to a new status.

        Args:
            job_id: Job identifier of the record
            status: Target status
            message: Human-readable status message
            payload: Extra data for the status view (download link, ...)

        Returns:
            The updated ExportRecord

        Raises:
            ExportNotFoundError: If the record doesn't exist
            ExportStateError: If the transition is not allowed
        """
        record = await self.get_by_job_id(job_id)
        check_transition(record.status, status)

        now = datetime.now(UTC).isoformat()
        new_payload = payload if payload is not None else record.payload
        # Guard on the old status so a concurrent update can't double-report
        result = await self._db.execute(
            f"""UPDATE {record.table}
                SET status = ?, message = ?, payload = ?, updated_at = ?
                WHERE job_id = ? AND status = ?""",
            [
                status.value,
                message,
                json.dumps(new_payload, default=str),
                now,
                job_id,
                record.status.value,
            ],
        )
        if result.rows_affected == 0:
            return await self.transition(job_id, status, message, payload)

        return record.model_copy(
            update={
                "status": status,
                "message": message,
                "payload": new_payload,
                "updated_at": datetime.fromisoformat(now),
            }
        )
