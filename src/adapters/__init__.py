"""Adapters for storing exported files.

This module provides:
- AttachmentStore: Protocol for attachment stores
- AttachmentResult: Result model for store operations
- LocalAttachmentStore: Store writing files to local disk
"""

from src.adapters.base import AttachmentResult, AttachmentStore, StoredAttachment
from src.adapters.local_store import LocalAttachmentStore

__all__ = [
    "AttachmentResult",
    "AttachmentStore",
    "LocalAttachmentStore",
    "StoredAttachment",
]
