"""
tests/conftest.py -- Shared test fixtures for TaskTrack.

This module provides:
  - documents / user_store / task_store: fresh in-memory stores per test
  - _make_test_store(): named shared-memory document store for API tests
  - _patch_lifespan(): wires a test store into app.state, bypassing real startup
  - api_client: module-scoped TestClient over the real FastAPI app
  - make_user: registers a user through the API and returns (user_id, token)

Design: Named shared-memory SQLite URIs (not plain :memory:) are used for the
API client because TestClient runs sync route handlers in a thread pool.
Plain :memory: DBs are per-connection and would present a blank schema to
each worker thread.

SECRET_KEY must be set before any application import: auth/tokens.py and
api/main.py read Settings at import time and Settings refuses to build
without a key.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Callable, Generator
from contextlib import asynccontextmanager

# CRITICAL: Set SECRET_KEY before any auth/core import.
os.environ.setdefault("SECRET_KEY", "tasktrack-test-secret-key-0123456789abcdef")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.store import UserStore
from docstore.store import DocumentStore
from tasks.store import TaskStore

# ---------------------------------------------------------------------------
# Unit-test stores -- one blank database per test
# ---------------------------------------------------------------------------


@pytest.fixture
def documents() -> Generator[DocumentStore, None, None]:
    store = DocumentStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def user_store(documents: DocumentStore) -> UserStore:
    return UserStore(documents)


@pytest.fixture
def task_store(documents: DocumentStore) -> TaskStore:
    return TaskStore(documents)


# ---------------------------------------------------------------------------
# API helpers
# ---------------------------------------------------------------------------


def _make_test_store(db_suffix: str) -> DocumentStore:
    """Create an isolated named shared-memory document store.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state.
    """
    return DocumentStore(f"sqlite:///file:test_docs_{db_suffix}?mode=memory&cache=shared&uri=true")


def _patch_lifespan(documents: DocumentStore):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.documents = documents
        app.state.user_store = UserStore(documents)
        app.state.task_store = TaskStore(documents)
        yield

    return test_lifespan


@pytest.fixture(scope="module")
def api_client(request: pytest.FixtureRequest) -> Generator[TestClient, None, None]:
    """Yield a TestClient bound to an isolated document store for this module."""
    documents = _make_test_store(request.module.__name__.rsplit(".", 1)[-1])
    app.router.lifespan_context = _patch_lifespan(documents)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client

    documents.close()


@pytest.fixture
def make_user(api_client: TestClient) -> Callable[..., tuple[str, str]]:
    """Return a factory that registers a fresh user and yields (user_id, token)."""

    def _make(email: str | None = None) -> tuple[str, str]:
        email = email or f"user-{uuid.uuid4().hex[:10]}@example.com"
        resp = api_client.post("/api/auth/register", json={"email": email})
        assert resp.status_code == 201, resp.text
        data = resp.json()
        return data["userId"], data["token"]

    return _make
