"""Tests for LocalAttachmentStore."""

from pathlib import Path

import pytest

from src.adapters.base import AttachmentStore
from src.adapters.local_store import LocalAttachmentStore, clean_filename
from src.db.turso import TursoClient


@pytest.fixture
async def store(db: TursoClient, tmp_path: Path) -> LocalAttachmentStore:
    store = LocalAttachmentStore(db, root=tmp_path / "files")
    await store.init_schema()
    return store


class TestCleanFilename:
    """Filename sanitizing."""

    def test_plain_name_unchanged(self):
        assert clean_filename("Weekly Sync.md") == "Weekly Sync.md"

    def test_path_separators_replaced(self):
        assert clean_filename("Q1/Q2 review.md") == "Q1_Q2 review.md"
        assert "/" not in clean_filename("../../etc/passwd.md")

    def test_empty_stem_uses_fallback(self):
        assert clean_filename("/.md") == "export.md"

    def test_nothing_left_uses_fallback(self):
        assert clean_filename("") == "export"


def test_satisfies_protocol(tmp_path: Path):
    store = LocalAttachmentStore(db_client=None, root=tmp_path)  # type: ignore[arg-type]
    assert isinstance(store, AttachmentStore)


async def test_create_writes_file_and_metadata(store: LocalAttachmentStore):
    content = "\ufeff\n# Weekly Sync\n".encode()

    result = await store.create(
        container_type="meeting_markdown_exports",
        container_id=1,
        filename="Weekly Sync.md",
        content=content,
        content_type="text/markdown",
    )

    assert result.success is True
    assert result.attachment_id is not None
    assert result.filesize == len(content)

    stored = await store.get(result.attachment_id)
    assert stored is not None
    assert stored.filename == "Weekly Sync.md"
    assert stored.content_type == "text/markdown"
    assert Path(stored.disk_path).read_bytes() == content


async def test_get_unknown_returns_none(store: LocalAttachmentStore):
    assert await store.get(404) is None


async def test_attachments_get_separate_directories(store: LocalAttachmentStore):
    """Same filename twice does not overwrite the first file."""
    first = await store.create(
        container_type="exports",
        container_id=7,
        filename="a.md",
        content=b"first",
        content_type="text/markdown",
    )
    second = await store.create(
        container_type="exports",
        container_id=7,
        filename="a.md",
        content=b"second",
        content_type="text/markdown",
    )

    first_path = Path((await store.get(first.attachment_id)).disk_path)
    second_path = Path((await store.get(second.attachment_id)).disk_path)
    assert first_path != second_path
    assert first_path.read_bytes() == b"first"


async def test_write_failure_reported_not_raised(db: TursoClient, tmp_path: Path):
    """Storage errors come back as an unsuccessful result."""
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file in the way")
    store = LocalAttachmentStore(db, root=blocker)
    await store.init_schema()

    result = await store.create(
        container_type="exports",
        container_id=1,
        filename="x.md",
        content=b"x",
        content_type="text/markdown",
    )

    assert result.success is False
    assert result.error_message
    rows = await db.execute("SELECT id, disk_path FROM attachments")
    assert len(rows.rows) == 0


async def test_metadata_failure_removes_written_file(db: TursoClient, tmp_path: Path):
    """A failed metadata insert leaves no file behind."""
    root = tmp_path / "files"
    # attachments table never created, so the insert fails
    store = LocalAttachmentStore(db, root=root)

    result = await store.create(
        container_type="exports",
        container_id=1,
        filename="x.md",
        content=b"x",
        content_type="text/markdown",
    )

    assert result.success is False
    assert not any(root.rglob("*.md"))
