"""Attachment store writing files to local disk.

File metadata is kept in the attachments table; file bodies live under
the configured attachments directory, one sub-directory per attachment.
"""

import asyncio
import re
import shutil
import time
from pathlib import Path
from uuid import uuid4

import structlog

from src.adapters.base import AttachmentResult, StoredAttachment
from src.config import settings
from src.db.turso import TursoClient

logger = structlog.get_logger()

_UNSAFE_FILENAME_CHARS = re.compile(r'[\x00-\x1f/\\?%*:|"<>]')


def clean_filename(filename: str, fallback: str = "export") -> str:
    """Make a filename safe for storage and Content-Disposition.

    Args:
        filename: Requested filename, e.g. "<meeting title>.md"
        fallback: Stem used when nothing usable is left

    Returns:
        Filename with path separators and control characters replaced
    """
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", filename).strip().strip(".")
    stem, dot, suffix = cleaned.rpartition(".")
    if dot and not stem.strip("_ "):
        cleaned = f"{fallback}.{suffix}"
    return cleaned or fallback


class LocalAttachmentStore:
    """Store attachments on the local filesystem.

    Follows the adapter pattern: failures are logged and returned as
    AttachmentResult(success=False) instead of being raised.
    """

    def __init__(self, db_client: TursoClient, root: str | Path | None = None):
        """Initialize with database client and storage directory.

        Args:
            db_client: TursoClient for attachment metadata
            root: Directory for file bodies. Defaults to settings.attachments_dir.
        """
        self._db = db_client
        self.root = Path(root or settings.attachments_dir)

    async def init_schema(self) -> None:
        """Create attachments table if not exists."""
        await self._db.execute("""
            CREATE TABLE IF NOT EXISTS attachments (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                container_type TEXT NOT NULL,
                container_id INTEGER NOT NULL,
                filename TEXT NOT NULL,
                content_type TEXT NOT NULL,
                filesize INTEGER NOT NULL,
                disk_path TEXT NOT NULL,
                created_at TEXT DEFAULT CURRENT_TIMESTAMP
            )
        """)

    async def create(
        self,
        *,
        container_type: str,
        container_id: int,
        filename: str,
        content: bytes,
        content_type: str,
    ) -> AttachmentResult:
        """Write the file and record its metadata.

        Args:
            container_type: Type of the owning record
            container_id: ID of the owning record
            filename: Download filename (cleaned before storing)
            content: File body
            content_type: MIME type

        Returns:
            AttachmentResult with the attachment ID on success
        """
        start_time = time.monotonic()
        filename = clean_filename(filename)

        # File first, row second: a row only exists for a written file
        disk_path = self.root / uuid4().hex / filename
        try:
            await asyncio.to_thread(self._write_file, disk_path, content)
            result = await self._db.execute(
                """INSERT INTO attachments
                   (container_type, container_id, filename, content_type,
                    filesize, disk_path)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                [
                    container_type,
                    container_id,
                    filename,
                    content_type,
                    len(content),
                    str(disk_path),
                ],
            )
            attachment_id = result.last_insert_rowid
        except Exception as e:
            await asyncio.to_thread(shutil.rmtree, disk_path.parent, ignore_errors=True)
            duration_ms = int((time.monotonic() - start_time) * 1000)
            logger.error(
                "failed to store attachment",
                filename=filename,
                container_type=container_type,
                container_id=container_id,
                error=str(e),
                duration_ms=duration_ms,
            )
            return AttachmentResult(
                success=False,
                filename=filename,
                content_type=content_type,
                error_message=str(e),
                duration_ms=duration_ms,
            )

        duration_ms = int((time.monotonic() - start_time) * 1000)
        logger.info(
            "stored attachment",
            attachment_id=attachment_id,
            filename=filename,
            content_type=content_type,
            filesize=len(content),
            duration_ms=duration_ms,
        )
        return AttachmentResult(
            success=True,
            attachment_id=attachment_id,
            filename=filename,
            content_type=content_type,
            filesize=len(content),
            duration_ms=duration_ms,
        )

    @staticmethod
    def _write_file(path: Path, content: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    async def get(self, attachment_id: int) -> StoredAttachment | None:
        """Look up attachment metadata by ID."""
        row = await self._db.fetch_one(
            """SELECT id, container_type, container_id, filename, content_type,
                      filesize, disk_path
               FROM attachments WHERE id = ?""",
            [attachment_id],
        )
        if row is None:
            return None
        return StoredAttachment(
            id=row[0],
            container_type=row[1],
            container_id=row[2],
            filename=row[3],
            content_type=row[4],
            filesize=row[5],
            disk_path=row[6],
        )

