"""
docstore/models.py -- Snapshot dataclass, sentinels and errors for the document store.

Pattern: Data class (pure data container, zero logic). The store hands back
DocumentSnapshot objects; repositories map them onto their own domain
dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class _ServerTimestamp:
    """Placeholder resolved to the store's current UTC time at write."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True)
class DocumentSnapshot:
    """One document as read from a collection.

    version is the store-managed write counter. Pass it back as if_version on
    update/delete to make the write conditional on nothing having changed
    since this snapshot was taken.
    """

    id: str
    version: int
    data: dict[str, Any] = field(default_factory=dict)


class StoreError(Exception):
    """Any failure raised by the underlying database."""


class VersionConflict(StoreError):
    """A conditional write found the document at a different version."""

    def __init__(self, collection: str, doc_id: str, expected: int, actual: int) -> None:
        super().__init__(
            f"Document {collection}/{doc_id} changed concurrently " f"(expected version {expected}, found {actual})."
        )
        self.collection = collection
        self.doc_id = doc_id
        self.expected = expected
        self.actual = actual
