"""Task service - orchestrates authorization, persistence and auditing.

Every operation takes the acting user's RequestContext. Authorization is
decided in full before anything is written; a denied request leaves no task
change and no audit entry behind.
"""

import uuid
from dataclasses import replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from backend.app.authz.engine import (
    Allow,
    AssigneeLookup,
    AuthzRequest,
    DenyReason,
    Operation,
    TaskSnapshot,
    decide,
    list_filter,
)
from backend.app.db.context import RequestContext
from backend.app.db.repositories import IdentityStore, TaskRecord, UserRecord
from backend.app.errors import ForbiddenError, InvalidAssigneeError, NotFoundError
from backend.app.models.common import TASK_ENTITY, AuditAction
from backend.app.models.tasks import DeleteResult, TaskCreate, TaskUpdate, TaskView, UserSummary
from backend.app.services.audit import AuditService
from backend.app.utils.logging import StructuredDecisionLogger
from backend.app.utils.metrics import PrometheusAuthzMetrics


def _json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, uuid.UUID):
        return str(value)
    return value


class TaskService:
    """Create, list, read, update and delete tasks on behalf of an actor."""

    def __init__(
        self,
        identity: IdentityStore,
        audit: AuditService,
        decision_logger: StructuredDecisionLogger | None = None,
        metrics: PrometheusAuthzMetrics | None = None,
    ) -> None:
        self._identity = identity
        self._audit = audit
        self._decision_logger = decision_logger or StructuredDecisionLogger()
        self._metrics = metrics or PrometheusAuthzMetrics()

    async def create(self, payload: TaskCreate, actor: RequestContext) -> TaskView:
        """Create a task in the actor's organization.

        Raises:
            InvalidAssigneeError: If the assignee is unknown or in another organization
        """
        assignee = await self._lookup_assignee(payload.assigned_to_id)
        allow = self._authorize(
            AuthzRequest(
                actor=actor,
                operation=Operation.create,
                fields=frozenset(payload.model_fields_set),
                assignee=assignee,
            )
        )

        now = datetime.now(timezone.utc)
        task = TaskRecord(
            id=uuid.uuid4(),
            title=payload.title,
            description=payload.description,
            status=payload.status,
            priority=payload.priority,
            # Any organization_id in the payload is ignored
            organization_id=allow.organization_id or actor.org_id,
            created_by_id=actor.user_id,
            assigned_to_id=payload.assigned_to_id,
            created_at=now,
            updated_at=now,
        )
        saved = await self._identity.save_task(task)

        await self._audit.log(
            AuditAction.CREATE,
            TASK_ENTITY,
            saved.id,
            actor,
            {"title": saved.title, "assigned_to_id": _json_value(saved.assigned_to_id)},
        )

        return await self._view(saved)

    async def list(self, actor: RequestContext) -> list[TaskView]:
        """List tasks visible to the actor, newest first."""
        self._authorize(AuthzRequest(actor=actor, operation=Operation.read_list))
        tasks = await self._identity.query_tasks(actor.org_id, list_filter(actor))

        users: dict[uuid.UUID, UserRecord | None] = {}
        return [await self._view(task, users) for task in tasks]

    async def get_one(self, task_id: uuid.UUID, actor: RequestContext) -> TaskView:
        """Get one task.

        Raises:
            NotFoundError: If the task does not exist
            ForbiddenError: If the actor may not read it
        """
        task = await self._load(task_id, actor)
        return await self._view(task)

    async def update(
        self, task_id: uuid.UUID, payload: TaskUpdate, actor: RequestContext
    ) -> TaskView:
        """Apply a partial update.

        The whole payload is accepted or rejected; a member payload carrying
        anything besides status is refused without writing any field.

        Raises:
            NotFoundError: If the task does not exist
            ForbiddenError: If the actor may not make this change
            InvalidAssigneeError: If the new assignee is unknown or in another organization
        """
        task = await self._load(task_id, actor)
        changes = payload.changes()

        assignee = await self._lookup_assignee(changes.get("assigned_to_id"))
        allow = self._authorize(
            AuthzRequest(
                actor=actor,
                operation=Operation.update,
                target=TaskSnapshot.of(task),
                fields=frozenset(changes),
                assignee=assignee,
            ),
            task.id,
        )
        applied = {name: value for name, value in changes.items() if name in allow.mutable_fields}

        diff = {
            "old": {name: _json_value(getattr(task, name)) for name in applied},
            "new": {name: _json_value(value) for name, value in applied.items()},
        }
        saved = await self._identity.save_task(replace(task, **applied))

        await self._audit.log(AuditAction.UPDATE, TASK_ENTITY, saved.id, actor, diff)

        return await self._view(saved)

    async def delete(self, task_id: uuid.UUID, actor: RequestContext) -> DeleteResult:
        """Delete a task.

        Raises:
            NotFoundError: If the task does not exist
            ForbiddenError: If the actor may not delete it
        """
        task = await self._load(task_id, actor)
        self._authorize(
            AuthzRequest(actor=actor, operation=Operation.delete, target=TaskSnapshot.of(task)),
            task.id,
        )

        await self._identity.delete_task(task)

        await self._audit.log(AuditAction.DELETE, TASK_ENTITY, task.id, actor, {"title": task.title})

        return DeleteResult(message="Task deleted successfully")

    async def _load(self, task_id: uuid.UUID, actor: RequestContext) -> TaskRecord:
        task = await self._identity.find_task_by_id(task_id)
        if task is None:
            raise NotFoundError("Task not found")

        self._authorize(
            AuthzRequest(actor=actor, operation=Operation.read_one, target=TaskSnapshot.of(task)),
            task.id,
        )
        return task

    async def _lookup_assignee(self, assignee_id: uuid.UUID | None) -> AssigneeLookup | None:
        if assignee_id is None:
            return None
        user = await self._identity.find_user_by_id(assignee_id)
        return AssigneeLookup(
            assignee_id=assignee_id,
            organization_id=user.organization_id if user else None,
        )

    def _authorize(self, request: AuthzRequest, task_id: uuid.UUID | None = None) -> Allow:
        decision = decide(request)
        self._decision_logger.log_decision(request, decision, task_id)
        self._metrics.record_decision(
            request.operation.value, "allow" if decision.allowed else "deny"
        )

        if isinstance(decision, Allow):
            return decision
        if decision.reason == DenyReason.invalid_assignee:
            raise InvalidAssigneeError(decision.message)
        raise ForbiddenError(decision.message, reason=decision.reason.value)

    async def _view(
        self, task: TaskRecord, users: dict[uuid.UUID, UserRecord | None] | None = None
    ) -> TaskView:
        cache = users if users is not None else {}

        async def resolve(user_id: uuid.UUID | None) -> UserSummary | None:
            if user_id is None:
                return None
            if user_id not in cache:
                cache[user_id] = await self._identity.find_user_by_id(user_id)
            user = cache[user_id]
            return UserSummary.model_validate(user) if user else None

        return TaskView(
            id=task.id,
            title=task.title,
            description=task.description,
            status=task.status,
            priority=task.priority,
            organization_id=task.organization_id,
            created_by_id=task.created_by_id,
            assigned_to_id=task.assigned_to_id,
            created_by=await resolve(task.created_by_id),
            assigned_to=await resolve(task.assigned_to_id),
            created_at=task.created_at,
            updated_at=task.updated_at,
        )
