"""Unit tests for tasks/store.py -- owner-scoped TaskStore.

Covers:
- create_task() assigns id and server-side created_at, ignores caller values
- get_task() hides tasks owned by other users
- list_tasks() returns only the owner's tasks, newest first
- list_tasks_by_completion() is exactly the matching subset of list_tasks()
- update_task() ownership gate, immutable fields, due_date stamping
- delete_task() ownership gate
- races between the ownership check and the write
"""

from datetime import datetime, timedelta, timezone

import pytest

from docstore.models import VersionConflict
from docstore.store import DocumentStore
from tasks.models import Task
from tasks.store import TaskStore


def _task(user_id: str, title: str = "buy milk", completed: bool = False, **kwargs) -> Task:
    return Task(title=title, completed=completed, user_id=user_id, **kwargs)


# ---------------------------------------------------------------------------
# Create / get
# ---------------------------------------------------------------------------


class TestCreateAndGet:
    def test_create_then_get(self, task_store: TaskStore) -> None:
        task_id = task_store.create_task(_task("u1", description="2 litres"))
        task = task_store.get_task(task_id, "u1")
        assert task is not None
        assert task.id == task_id
        assert task.title == "buy milk"
        assert task.description == "2 litres"
        assert task.completed is False
        assert task.user_id == "u1"
        assert task.due_date is None

    def test_created_at_is_server_assigned(self, task_store: TaskStore) -> None:
        supplied = datetime(2000, 1, 1, tzinfo=timezone.utc)
        before = datetime.now(timezone.utc)
        task_id = task_store.create_task(_task("u1", created_at=supplied, id="chosen-id"))
        task = task_store.get_task(task_id, "u1")
        assert task_id != "chosen-id"
        assert task.created_at != supplied
        assert before <= task.created_at <= datetime.now(timezone.utc)

    def test_due_date_round_trips_as_aware_datetime(self, task_store: TaskStore) -> None:
        due = datetime(2031, 5, 17, 9, 30, tzinfo=timezone.utc)
        task_id = task_store.create_task(_task("u1", due_date=due))
        assert task_store.get_task(task_id, "u1").due_date == due

    def test_get_by_non_owner_returns_none(self, task_store: TaskStore, caplog: pytest.LogCaptureFixture) -> None:
        task_id = task_store.create_task(_task("u1"))
        with caplog.at_level("WARNING", logger="tasktrack.tasks"):
            assert task_store.get_task(task_id, "u2") is None
        assert "wrong user u2" in caplog.text

    def test_get_missing_returns_none(self, task_store: TaskStore) -> None:
        assert task_store.get_task("missing", "u1") is None


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------


class TestListing:
    @pytest.fixture
    def seeded(self, task_store: TaskStore) -> TaskStore:
        task_store.create_task(_task("u1", "first", completed=True))
        task_store.create_task(_task("u1", "second", completed=False))
        task_store.create_task(_task("u2", "other user", completed=True))
        task_store.create_task(_task("u1", "third", completed=True))
        return task_store

    def test_list_only_owner_tasks_newest_first(self, seeded: TaskStore) -> None:
        tasks = seeded.list_tasks("u1")
        assert [t.title for t in tasks] == ["third", "second", "first"]
        assert all(t.user_id == "u1" for t in tasks)
        created = [t.created_at for t in tasks]
        assert created == sorted(created, reverse=True)

    def test_list_by_completion_is_subset_of_list(self, seeded: TaskStore) -> None:
        everything = seeded.list_tasks("u1")
        done = seeded.list_tasks_by_completion(True, "u1")
        open_ = seeded.list_tasks_by_completion(False, "u1")
        assert [t.id for t in done] == [t.id for t in everything if t.completed]
        assert [t.id for t in open_] == [t.id for t in everything if not t.completed]

    def test_list_for_user_without_tasks(self, seeded: TaskStore) -> None:
        assert seeded.list_tasks("u3") == []
        assert seeded.list_tasks_by_completion(True, "u3") == []


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------


class TestUpdate:
    def test_owner_can_update(self, task_store: TaskStore) -> None:
        task_id = task_store.create_task(_task("u1"))
        assert task_store.update_task(task_id, "u1", {"completed": True, "title": "buy oat milk"}) is True
        task = task_store.get_task(task_id, "u1")
        assert task.completed is True
        assert task.title == "buy oat milk"

    def test_non_owner_update_fails_closed(self, task_store: TaskStore) -> None:
        task_id = task_store.create_task(_task("u1"))
        assert task_store.update_task(task_id, "u2", {"completed": True}) is False
        assert task_store.get_task(task_id, "u1").completed is False

    def test_update_missing_returns_false(self, task_store: TaskStore) -> None:
        assert task_store.update_task("missing", "u1", {"completed": True}) is False

    def test_user_id_and_created_at_are_immutable(self, task_store: TaskStore) -> None:
        task_id = task_store.create_task(_task("u1"))
        original = task_store.get_task(task_id, "u1")
        assert task_store.update_task(
            task_id,
            "u1",
            {"user_id": "u2", "created_at": datetime(1999, 1, 1, tzinfo=timezone.utc)},
        )
        after = task_store.get_task(task_id, "u1")
        assert after is not None
        assert after.user_id == "u1"
        assert after.created_at == original.created_at
        assert task_store.get_task(task_id, "u2") is None

    def test_unknown_fields_are_ignored(self, task_store: TaskStore) -> None:
        task_id = task_store.create_task(_task("u1"))
        assert task_store.update_task(task_id, "u1", {"priority": "high"}) is True
        assert task_store.get_task(task_id, "u1").title == "buy milk"

    def test_due_date_is_stamped_with_server_time(self, task_store: TaskStore) -> None:
        task_id = task_store.create_task(_task("u1"))
        requested = datetime.now(timezone.utc) + timedelta(days=30)
        before = datetime.now(timezone.utc)
        task_store.update_task(task_id, "u1", {"due_date": requested})
        due = task_store.get_task(task_id, "u1").due_date
        assert due != requested
        assert before <= due <= datetime.now(timezone.utc)

    def test_due_date_none_clears_it(self, task_store: TaskStore) -> None:
        task_id = task_store.create_task(_task("u1", due_date=datetime(2031, 1, 1, tzinfo=timezone.utc)))
        task_store.update_task(task_id, "u1", {"due_date": None})
        assert task_store.get_task(task_id, "u1").due_date is None

    def test_concurrent_modification_raises_conflict(
        self,
        task_store: TaskStore,
        documents: DocumentStore,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """A write landing between the ownership check and the update is reported, not overwritten."""
        task_id = task_store.create_task(_task("u1"))
        real_owned = task_store._owned

        def owned_then_raced(tid: str, requester: str):
            snap = real_owned(tid, requester)
            documents.collection("tasks").update(tid, {"title": "someone else"})
            return snap

        monkeypatch.setattr(task_store, "_owned", owned_then_raced)
        with pytest.raises(VersionConflict):
            task_store.update_task(task_id, "u1", {"completed": True})
        monkeypatch.undo()
        task = task_store.get_task(task_id, "u1")
        assert task.title == "someone else"
        assert task.completed is False

    def test_concurrent_delete_before_update_returns_false(
        self,
        task_store: TaskStore,
        documents: DocumentStore,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        task_id = task_store.create_task(_task("u1"))
        real_owned = task_store._owned

        def owned_then_deleted(tid: str, requester: str):
            snap = real_owned(tid, requester)
            documents.collection("tasks").delete(tid)
            return snap

        monkeypatch.setattr(task_store, "_owned", owned_then_deleted)
        assert task_store.update_task(task_id, "u1", {"completed": True}) is False
        monkeypatch.undo()
        assert task_store.get_task(task_id, "u1") is None


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


class TestDelete:
    def test_owner_can_delete(self, task_store: TaskStore) -> None:
        task_id = task_store.create_task(_task("u1"))
        assert task_store.delete_task(task_id, "u1") is True
        assert task_store.get_task(task_id, "u1") is None

    def test_non_owner_delete_fails_closed(self, task_store: TaskStore) -> None:
        task_id = task_store.create_task(_task("u1"))
        assert task_store.delete_task(task_id, "u2") is False
        assert task_store.get_task(task_id, "u1") is not None

    def test_delete_missing_returns_false(self, task_store: TaskStore) -> None:
        assert task_store.delete_task("missing", "u1") is False
