"""
api/routes/tasks.py -- Task CRUD routes for the TaskTrack REST API.

Routes:
  POST   /api/tasks             -- create a task for the caller
  GET    /api/tasks             -- list caller's tasks (?completed=true|false)
  GET    /api/tasks/{task_id}   -- one task
  PUT    /api/tasks/{task_id}   -- partial update
  DELETE /api/tasks/{task_id}   -- delete

Ownership policy:
  A task that is missing and a task owned by another user produce the same
  404 on every route, so callers cannot probe for other users' task ids.

Conflicts:
  If a task changes between the ownership check and the write, the store
  raises VersionConflict, which api/main.py turns into a 409.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from api.models import (
    ErrorDetail,
    MessageResponse,
    TaskCreate,
    TaskCreatedResponse,
    TaskPatch,
    TaskResponse,
)
from auth.dependencies import get_current_user_id
from tasks.models import Task
from tasks.store import TaskStore

# Every task route requires authentication. FastAPI caches the dependency per
# request, so handlers that also take user_id do not verify the token twice.
router = APIRouter(dependencies=[Depends(get_current_user_id)])

_NOT_FOUND = ErrorDetail(code="not_found", message="Task not found.").model_dump()


# ---------------------------------------------------------------------------
# POST /tasks -- create
# ---------------------------------------------------------------------------


@router.post("/tasks", response_model=TaskCreatedResponse, status_code=201)
def create_task(
    request: Request,
    body: TaskCreate,
    user_id: str = Depends(get_current_user_id),
) -> TaskCreatedResponse:
    """Create a task owned by the authenticated user."""
    task_store: TaskStore = request.app.state.task_store
    task = Task(
        title=body.title,
        description=body.description,
        completed=body.completed,
        due_date=body.due_date,
        user_id=user_id,
    )
    task_id = task_store.create_task(task)
    return TaskCreatedResponse(id=task_id, message="Task created successfully.")


# ---------------------------------------------------------------------------
# GET /tasks -- list, optionally filtered by completion
# ---------------------------------------------------------------------------


@router.get("/tasks", response_model=list[TaskResponse])
def list_tasks(
    request: Request,
    completed: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
) -> list[TaskResponse]:
    """Return the caller's tasks, newest first.

    ?completed=true (any case) returns completed tasks; any other value
    returns incomplete ones. Without the parameter every task is returned.
    """
    task_store: TaskStore = request.app.state.task_store
    if completed is None:
        tasks = task_store.list_tasks(user_id)
    else:
        tasks = task_store.list_tasks_by_completion(completed.lower() == "true", user_id)
    return [TaskResponse.from_task(t) for t in tasks]


# ---------------------------------------------------------------------------
# GET /tasks/{task_id} -- detail
# ---------------------------------------------------------------------------


@router.get("/tasks/{task_id}", response_model=TaskResponse)
def get_task(
    request: Request,
    task_id: str,
    user_id: str = Depends(get_current_user_id),
) -> TaskResponse:
    task_store: TaskStore = request.app.state.task_store
    task = task_store.get_task(task_id, user_id)
    if task is None:
        raise HTTPException(status_code=404, detail=_NOT_FOUND)
    return TaskResponse.from_task(task)


# ---------------------------------------------------------------------------
# PUT /tasks/{task_id} -- partial update
# ---------------------------------------------------------------------------


@router.put("/tasks/{task_id}", response_model=MessageResponse)
def update_task(
    request: Request,
    task_id: str,
    body: TaskPatch,
    user_id: str = Depends(get_current_user_id),
) -> MessageResponse:
    """Apply the fields present in the body. userId and createdAt are ignored."""
    if not body.model_fields_set:
        raise HTTPException(
            status_code=400,
            detail=ErrorDetail(code="no_changes", message="No update data provided.").model_dump(),
        )
    task_store: TaskStore = request.app.state.task_store
    updated = task_store.update_task(task_id, user_id, body.model_dump(exclude_unset=True))
    if not updated:
        raise HTTPException(status_code=404, detail=_NOT_FOUND)
    return MessageResponse(message="Task updated successfully.")


# ---------------------------------------------------------------------------
# DELETE /tasks/{task_id}
# ---------------------------------------------------------------------------


@router.delete("/tasks/{task_id}", response_model=MessageResponse)
def delete_task(
    request: Request,
    task_id: str,
    user_id: str = Depends(get_current_user_id),
) -> MessageResponse:
    task_store: TaskStore = request.app.state.task_store
    if not task_store.delete_task(task_id, user_id):
        raise HTTPException(status_code=404, detail=_NOT_FOUND)
    return MessageResponse(message="Task deleted successfully.")
