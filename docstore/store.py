"""
docstore/store.py -- SQLAlchemy-backed document store gateway.

Every collection lives in one `documents` table keyed by (collection, id).
The document body is a JSON column; equality filters and ordering are pushed
down to the database through SQLAlchemy's JSON index operators, so swapping
SQLite for PostgreSQL is a connection string change.

Pattern: Gateway. DocumentStore owns the engine; Collection is a lightweight
handle that scopes every statement to one collection name. Repositories in
auth/ and tasks/ never touch SQL directly.

Timestamps:
  SERVER_TIMESTAMP placeholders and datetime values are written as ISO-8601
  UTC strings with microsecond precision, so ordering by a timestamp field is
  a plain string ordering. Reads return the stored strings; converting them
  back is the repository's job.

Concurrency:
  Each document carries an integer version, bumped on every write. update()
  and delete() accept if_version; when it no longer matches, VersionConflict
  is raised instead of silently overwriting.

Errors:
  Every SQLAlchemyError is re-raised as docstore.models.StoreError. Nothing is
  retried.

Usage:
    store = DocumentStore("sqlite:///:memory:")
    tasks = store.collection("tasks")
    doc_id = tasks.add({"title": "buy milk", "createdAt": SERVER_TIMESTAMP})
    snap = tasks.get(doc_id)
    tasks.update(doc_id, {"completed": True}, if_version=snap.version)
    store.close()
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from sqlalchemy import JSON, Column, Integer, MetaData, String, Table, and_, create_engine, event, select, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from docstore.models import SERVER_TIMESTAMP, DocumentSnapshot, StoreError, VersionConflict

logger = logging.getLogger("tasktrack.docstore")

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).parent / 'tasktrack_documents.db'}"

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_documents = Table(
    "documents",
    metadata,
    Column("collection", String(100), primary_key=True),
    Column("id", String(32), primary_key=True),
    Column("data", JSON, nullable=False),
    Column("version", Integer, nullable=False),
    Column("updated_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# WAL mode
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def _to_iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _encode(value: Any, now: str) -> Any:
    """Resolve SERVER_TIMESTAMP and datetime values into stored strings."""
    if value is SERVER_TIMESTAMP:
        return now
    if isinstance(value, datetime):
        return _to_iso(value)
    if isinstance(value, dict):
        return {k: _encode(v, now) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode(v, now) for v in value]
    return value


def _field_equals(name: str, value: Any):
    """Build a typed equality predicate on one top-level JSON field."""
    element = _documents.c.data[name]
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return element.as_boolean() == value
    if isinstance(value, int):
        return element.as_integer() == value
    if isinstance(value, float):
        return element.as_float() == value
    if isinstance(value, str):
        return element.as_string() == value
    raise TypeError(f"Unsupported filter value for field {name!r}: {type(value).__name__}")


# ---------------------------------------------------------------------------
# Gateway
# ---------------------------------------------------------------------------


class DocumentStore:
    """Owns the database engine. Hand out Collection handles with collection()."""

    def __init__(self, db_url: str = _DEFAULT_DB_URL) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            # FastAPI runs sync handlers in a threadpool; one pooled connection
            # may be used from several threads.
            connect_args["check_same_thread"] = False
        try:
            self.engine: Engine = create_engine(db_url, connect_args=connect_args)
            if db_url.startswith("sqlite"):
                event.listen(self.engine, "connect", _set_wal_mode)
            metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def collection(self, name: str) -> Collection:
        return Collection(self, name)

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        """Yield a connection inside one transaction; translate driver errors.

        engine.begin() commits on clean exit and rolls back on any exception,
        so a read-check-write sequence inside one block is applied atomically.
        """
        try:
            with self.engine.begin() as conn:
                yield conn
        except SQLAlchemyError as exc:
            logger.error("Document store failure: %s", exc)
            raise StoreError(str(exc)) from exc

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            logger.warning("Document store ping failed", exc_info=True)
            return False

    def close(self) -> None:
        self.engine.dispose()


class Collection:
    """All documents sharing one collection name."""

    def __init__(self, store: DocumentStore, name: str) -> None:
        self._store = store
        self.name = name

    def _key(self, doc_id: str):
        return and_(_documents.c.collection == self.name, _documents.c.id == doc_id)

    def _current_version(self, conn: Connection, doc_id: str) -> Optional[int]:
        return conn.execute(select(_documents.c.version).where(self._key(doc_id))).scalar()

    # ------------------------------------------------------------------
    # Create / read
    # ------------------------------------------------------------------

    def add(self, data: dict[str, Any]) -> str:
        """Insert a new document with a generated id and return the id."""
        doc_id = uuid.uuid4().hex
        now = _now_iso()
        with self._store.connect() as conn:
            conn.execute(
                _documents.insert().values(
                    collection=self.name,
                    id=doc_id,
                    data=_encode(data, now),
                    version=1,
                    updated_at=now,
                )
            )
        return doc_id

    def get(self, doc_id: str) -> Optional[DocumentSnapshot]:
        """Fetch one document by id. Returns None if it does not exist."""
        with self._store.connect() as conn:
            row = conn.execute(select(_documents).where(self._key(doc_id))).fetchone()
        return _row_to_snapshot(row) if row is not None else None

    def query(
        self,
        where: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[DocumentSnapshot]:
        """Return every document whose fields equal all of `where`.

        order_by names a string-valued field (timestamps qualify). Without it
        the result order is unspecified.
        """
        stmt = select(_documents).where(_documents.c.collection == self.name)
        for name, value in (where or {}).items():
            stmt = stmt.where(_field_equals(name, value))
        if order_by:
            column = _documents.c.data[order_by].as_string()
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        with self._store.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [_row_to_snapshot(r) for r in rows]

    # ------------------------------------------------------------------
    # Update / delete
    # ------------------------------------------------------------------

    def update(self, doc_id: str, fields: dict[str, Any], if_version: Optional[int] = None) -> bool:
        """Merge `fields` into a document's top level.

        Returns False if the document does not exist. Raises VersionConflict
        if if_version is given and the stored version differs, or if another
        writer got in between this method's own read and write.
        """
        with self._store.connect() as conn:
            row = conn.execute(
                select(_documents.c.data, _documents.c.version).where(self._key(doc_id))
            ).fetchone()
            if row is None:
                return False
            if if_version is not None and row.version != if_version:
                raise VersionConflict(self.name, doc_id, if_version, row.version)
            now = _now_iso()
            merged = {**row.data, **_encode(fields, now)}
            result = conn.execute(
                _documents.update()
                .where(and_(self._key(doc_id), _documents.c.version == row.version))
                .values(data=merged, version=row.version + 1, updated_at=now)
            )
            if result.rowcount == 0:
                current = self._current_version(conn, doc_id)
                if current is None:
                    return False
                raise VersionConflict(self.name, doc_id, row.version, current)
        return True

    def delete(self, doc_id: str, if_version: Optional[int] = None) -> bool:
        """Delete a document. Returns False if it does not exist.

        With if_version, raises VersionConflict instead of deleting a document
        that was modified after the caller read it.
        """
        stmt = _documents.delete().where(self._key(doc_id))
        if if_version is not None:
            stmt = stmt.where(_documents.c.version == if_version)
        with self._store.connect() as conn:
            result = conn.execute(stmt)
            if result.rowcount == 0:
                current = self._current_version(conn, doc_id)
                if current is None:
                    return False
                raise VersionConflict(self.name, doc_id, if_version, current)
        return True


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_snapshot(row) -> DocumentSnapshot:
    return DocumentSnapshot(id=row.id, version=row.version, data=dict(row.data or {}))
