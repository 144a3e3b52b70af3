"""
API request and response models for TaskTrack REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in tasks/models.py and
auth/models.py, which own the internal domain representation. Route handlers
map between the two.

Wire format: JSON keys are camelCase (userId, dueDate, createdAt). Models
accept either the camelCase alias or the Python field name on input.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from auth.models import User
from tasks.models import Task


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Auth -- request models
# ---------------------------------------------------------------------------


class CredentialsRequest(_CamelModel):
    """Request body for POST /api/auth/register and POST /api/auth/login.

    Email is the only credential. It is stored and matched exactly as sent.
    """

    email: str = Field(min_length=1, max_length=320)


# ---------------------------------------------------------------------------
# Auth -- response models
# ---------------------------------------------------------------------------


class AuthResponse(_CamelModel):
    """Issued token plus the id it is bound to."""

    model_config = ConfigDict(frozen=True)

    token: str
    user_id: str
    message: str


class MeResponse(_CamelModel):
    """Response for GET /api/auth/me."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "MeResponse":
        return cls(id=user.id, email=user.email, created_at=user.created_at)


# ---------------------------------------------------------------------------
# Tasks -- request models
# ---------------------------------------------------------------------------


class TaskCreate(_CamelModel):
    """Request body for POST /api/tasks. title and completed are required."""

    title: str = Field(min_length=1)
    completed: bool
    description: Optional[str] = None
    due_date: Optional[datetime] = None


class TaskPatch(_CamelModel):
    """Request body for PUT /api/tasks/{id}.

    Every field is optional; only fields present in the body are applied.
    user_id and created_at are accepted so a body containing only them is
    not rejected as empty, but the repository always discards them.
    Unrecognised keys are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    completed: Optional[bool] = None
    due_date: Optional[datetime] = None
    user_id: Optional[Any] = None
    created_at: Optional[Any] = None

    @field_validator("title", "completed")
    @classmethod
    def reject_null(cls, value):
        """title and completed may be omitted but never set to null."""
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


# ---------------------------------------------------------------------------
# Tasks -- response models
# ---------------------------------------------------------------------------


class TaskResponse(_CamelModel):
    """A single task as returned by GET /api/tasks and GET /api/tasks/{id}."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: Optional[str] = None
    completed: bool
    due_date: Optional[datetime] = None
    user_id: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        """Build a TaskResponse from a tasks.models.Task instance."""
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            completed=task.completed,
            due_date=task.due_date,
            user_id=task.user_id,
            created_at=task.created_at,
        )


class TaskCreatedResponse(BaseModel):
    """Response for POST /api/tasks."""

    model_config = ConfigDict(frozen=True)

    id: str
    message: str


class MessageResponse(BaseModel):
    """Plain acknowledgement for update and delete."""

    model_config = ConfigDict(frozen=True)

    message: str


# ---------------------------------------------------------------------------
# Errors and health
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str] = Field(default_factory=dict)
