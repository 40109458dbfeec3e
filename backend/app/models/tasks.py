"""Task request/response models."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from backend.app.models.common import Role, TaskPriority, TaskStatus

# Fields of a task that an update payload may carry
UPDATABLE_FIELDS = frozenset({"title", "description", "status", "priority", "assigned_to_id"})


class TaskCreate(BaseModel):
    """Request body for POST /tasks."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., max_length=5000)
    status: TaskStatus = TaskStatus.todo
    priority: TaskPriority = TaskPriority.medium
    assigned_to_id: UUID | None = None
    # Accepted for client compatibility; always replaced by the actor's organization
    organization_id: UUID | None = None


class TaskUpdate(BaseModel):
    """Request body for PATCH /tasks/{task_id}.

    Only explicitly provided fields are part of the update; unknown fields are
    rejected.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    assigned_to_id: UUID | None = None

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "TaskUpdate":
        """Only assigned_to_id may be explicitly cleared."""
        for name in ("title", "description", "status", "priority"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """Fields explicitly present in the payload."""
        return self.model_dump(exclude_unset=True)


class UserSummary(BaseModel):
    """Creator/assignee summary embedded in a task view."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    first_name: str
    last_name: str
    role: Role


class TaskView(BaseModel):
    """Task with creator and assignee resolved."""

    id: UUID
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    organization_id: UUID
    created_by_id: UUID
    assigned_to_id: UUID | None
    created_by: UserSummary | None = None
    assigned_to: UserSummary | None = None
    created_at: datetime
    updated_at: datetime


class DeleteResult(BaseModel):
    """Confirmation returned by DELETE /tasks/{task_id}."""

    message: str
