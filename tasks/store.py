"""
tasks/store.py -- Owner-scoped task repository on top of the document store.

Pattern: Repository + Data Mapper. TaskStore is the repository; _doc_to_task
is the mapper that turns stored documents (camelCase fields, ISO timestamp
strings) into Task dataclasses (snake_case, datetime). Routes never see raw
documents.

Ownership:
  Every read, update and delete compares the stored userId with the
  requester. A task owned by someone else is indistinguishable from a missing
  one: get_task() returns None, update_task()/delete_task() return False.
  Point lookups check ownership after the read; list queries filter on userId
  in the store.

Concurrency:
  update_task() and delete_task() read the task, check ownership, then write.
  The write is conditional on the version seen by the read:
    - task deleted in between   -> returns False
    - task modified in between  -> docstore.models.VersionConflict propagates
  There are no cross-document transactions.

Immutable fields:
  user_id and created_at are dropped from every update payload, whatever the
  caller sends.

Due dates on update:
  A due_date given as a datetime is written as the server's current time, not
  the supplied value. This is existing behaviour kept on purpose; see
  DESIGN.md. Passing None clears the due date.
"""

import logging
from datetime import datetime
from typing import Any, Optional

from docstore.models import SERVER_TIMESTAMP, DocumentSnapshot
from docstore.store import DocumentStore
from tasks.models import Task

logger = logging.getLogger("tasktrack.tasks")

_COLLECTION = "tasks"

# Domain attribute -> stored document field, for fields an owner may change.
_MUTABLE_FIELDS: dict[str, str] = {
    "title": "title",
    "description": "description",
    "completed": "completed",
    "due_date": "dueDate",
}

_IMMUTABLE_FIELDS = frozenset({"id", "user_id", "created_at"})


class TaskStore:
    """Repository for Task entities, scoped by owning user.

    Usage:
        store = TaskStore(DocumentStore())
        task_id = store.create_task(Task(title="buy milk", completed=False, user_id=uid))
        task = store.get_task(task_id, uid)
        store.update_task(task_id, uid, {"completed": True})
        store.delete_task(task_id, uid)
    """

    def __init__(self, documents: DocumentStore) -> None:
        self._tasks = documents.collection(_COLLECTION)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_task(self, task: Task) -> str:
        """Insert a new task and return its id. task.id and task.created_at are ignored."""
        data: dict[str, Any] = {
            "title": task.title,
            "completed": task.completed,
            "userId": task.user_id,
            "createdAt": SERVER_TIMESTAMP,
        }
        if task.description is not None:
            data["description"] = task.description
        if task.due_date is not None:
            data["dueDate"] = task.due_date
        task_id = self._tasks.add(data)
        logger.info("Task %s created for user %s", task_id, task.user_id)
        return task_id

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_task(self, task_id: str, requester_id: str) -> Optional[Task]:
        """Fetch a task by id. Returns None if missing or owned by someone else."""
        doc = self._owned(task_id, requester_id)
        return _doc_to_task(doc) if doc is not None else None

    def list_tasks(self, requester_id: str) -> list[Task]:
        """Return all of the requester's tasks, newest first."""
        docs = self._tasks.query(where={"userId": requester_id}, order_by="createdAt", descending=True)
        return [_doc_to_task(d) for d in docs]

    def list_tasks_by_completion(self, completed: bool, requester_id: str) -> list[Task]:
        """Return the requester's tasks with the given completion status, newest first."""
        docs = self._tasks.query(
            where={"userId": requester_id, "completed": completed},
            order_by="createdAt",
            descending=True,
        )
        return [_doc_to_task(d) for d in docs]

    # ------------------------------------------------------------------
    # Update / delete
    # ------------------------------------------------------------------

    def update_task(self, task_id: str, requester_id: str, fields: dict[str, Any]) -> bool:
        """Apply a partial update to an owned task.

        fields uses Task attribute names. Immutable keys are dropped and
        unknown keys are ignored. Returns False if the task is missing, owned
        by someone else, or deleted before the write lands.
        """
        doc = self._owned(task_id, requester_id)
        if doc is None:
            return False

        updates: dict[str, Any] = {}
        for key, value in fields.items():
            if key in _IMMUTABLE_FIELDS or key not in _MUTABLE_FIELDS:
                continue
            if key == "due_date" and isinstance(value, datetime):
                value = SERVER_TIMESTAMP
            updates[_MUTABLE_FIELDS[key]] = value

        updated = self._tasks.update(task_id, updates, if_version=doc.version)
        if updated:
            logger.info("Task %s updated (%s)", task_id, ", ".join(sorted(updates)) or "no fields")
        else:
            logger.warning("Task %s disappeared before update by user %s", task_id, requester_id)
        return updated

    def delete_task(self, task_id: str, requester_id: str) -> bool:
        """Delete an owned task. Returns False if missing or owned by someone else."""
        doc = self._owned(task_id, requester_id)
        if doc is None:
            return False
        deleted = self._tasks.delete(task_id, if_version=doc.version)
        if deleted:
            logger.info("Task %s deleted", task_id)
        else:
            logger.warning("Task %s disappeared before delete by user %s", task_id, requester_id)
        return deleted

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _owned(self, task_id: str, requester_id: str) -> Optional[DocumentSnapshot]:
        """Return the task document if it exists and belongs to requester_id."""
        doc = self._tasks.get(task_id)
        if doc is None:
            return None
        if doc.data.get("userId") != requester_id:
            logger.warning("Attempted to access task %s by wrong user %s", task_id, requester_id)
            return None
        return doc


# ---------------------------------------------------------------------------
# Document mapper (stored document -> domain dataclass)
# ---------------------------------------------------------------------------


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _doc_to_task(doc: DocumentSnapshot) -> Task:
    data = doc.data
    return Task(
        id=doc.id,
        title=data["title"],
        description=data.get("description"),
        completed=bool(data["completed"]),
        due_date=_parse_timestamp(data.get("dueDate")),
        user_id=data["userId"],
        created_at=_parse_timestamp(data.get("createdAt")),
    )
