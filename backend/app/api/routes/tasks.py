"""Task endpoints - CRUD under /api/tasks."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status

from backend.app.api.auth import get_current_context
from backend.app.api.deps import get_task_service
from backend.app.db.context import RequestContext
from backend.app.models.tasks import DeleteResult, TaskCreate, TaskUpdate, TaskView
from backend.app.services.tasks import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post("", response_model=TaskView, status_code=status.HTTP_201_CREATED)
async def create_task(
    request: TaskCreate,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskView:
    """Create a task in the caller's organization.

    Returns:
        Created task with creator and assignee resolved
    """
    return await service.create(request, ctx)


@router.get("", response_model=list[TaskView])
async def list_tasks(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> list[TaskView]:
    """List tasks visible to the caller, newest first."""
    return await service.list(ctx)


@router.get("/{task_id}", response_model=TaskView)
async def get_task(
    task_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskView:
    """Get one task."""
    return await service.get_one(task_id, ctx)


@router.patch("/{task_id}", response_model=TaskView)
async def update_task(
    task_id: uuid.UUID,
    request: TaskUpdate,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskView:
    """Partially update a task. Members may only change the status of their own assignments."""
    return await service.update(task_id, request, ctx)


@router.delete("/{task_id}", response_model=DeleteResult)
async def delete_task(
    task_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> DeleteResult:
    """Delete a task (owners and org admins only)."""
    return await service.delete(task_id, ctx)
