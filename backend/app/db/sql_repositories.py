"""SQL implementations of repository interfaces."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.models import AuditLog, Organization, Task, User
from backend.app.db.queries import (
    select_entity_audit_logs,
    select_org_audit_logs,
    select_org_tasks,
)
from backend.app.db.repositories import (
    AuditLogRecord,
    OrganizationRecord,
    TaskFilter,
    TaskRecord,
    UserRecord,
)
from backend.app.models.common import AuditAction, Role, TaskPriority, TaskStatus


def _to_user_record(row: User) -> UserRecord:
    return UserRecord(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        first_name=row.first_name,
        last_name=row.last_name,
        role=Role(row.role),
        organization_id=row.organization_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_org_record(row: Organization) -> OrganizationRecord:
    return OrganizationRecord(
        id=row.id, name=row.name, parent_id=row.parent_id, created_at=row.created_at
    )


def _to_task_record(row: Task) -> TaskRecord:
    return TaskRecord(
        id=row.id,
        title=row.title,
        description=row.description,
        status=TaskStatus(row.status),
        priority=TaskPriority(row.priority),
        organization_id=row.organization_id,
        created_by_id=row.created_by_id,
        assigned_to_id=row.assigned_to_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_audit_record(row: AuditLog) -> AuditLogRecord:
    return AuditLogRecord(
        id=row.id,
        action=AuditAction(row.action),
        entity_type=row.entity_type,
        entity_id=row.entity_id,
        user_id=row.user_id,
        organization_id=row.organization_id,
        changes=row.changes,
        timestamp=row.timestamp,
    )


class SqlIdentityStore:
    """SQL implementation of IdentityStore."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_user_by_id(self, user_id: uuid.UUID) -> UserRecord | None:
        """Get user by ID."""
        row = await self._session.get(User, user_id)
        return _to_user_record(row) if row else None

    async def find_user_by_email(self, email: str) -> UserRecord | None:
        """Get user by email."""
        result = await self._session.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        row = result.scalar_one_or_none()
        return _to_user_record(row) if row else None

    async def save_user(self, user: UserRecord) -> UserRecord:
        """Insert or update a user."""
        row = await self._session.merge(
            User(
                id=user.id,
                email=user.email,
                password_hash=user.password_hash,
                first_name=user.first_name,
                last_name=user.last_name,
                role=user.role.value,
                organization_id=user.organization_id,
                created_at=user.created_at,
                updated_at=datetime.now(timezone.utc),
            )
        )
        await self._session.commit()
        return _to_user_record(row)

    async def find_organization(self, org_id: uuid.UUID) -> OrganizationRecord | None:
        """Get organization by ID."""
        row = await self._session.get(Organization, org_id)
        return _to_org_record(row) if row else None

    async def find_organization_by_name(self, name: str) -> OrganizationRecord | None:
        """Get organization by name."""
        result = await self._session.execute(
            select(Organization).where(Organization.name == name).limit(1)
        )
        row = result.scalar_one_or_none()
        return _to_org_record(row) if row else None

    async def save_organization(self, org: OrganizationRecord) -> OrganizationRecord:
        """Insert or update an organization."""
        row = await self._session.merge(
            Organization(
                id=org.id, name=org.name, parent_id=org.parent_id, created_at=org.created_at
            )
        )
        await self._session.commit()
        return _to_org_record(row)

    async def list_child_organizations(
        self, parent_id: uuid.UUID
    ) -> list[OrganizationRecord]:
        """List direct children of an organization."""
        result = await self._session.execute(
            select(Organization)
            .where(Organization.parent_id == parent_id)
            .order_by(Organization.name)
        )
        return [_to_org_record(row) for row in result.scalars().all()]

    async def delete_organization(self, org_id: uuid.UUID) -> None:
        """Delete an organization and its subtree, with their users and tasks.

        The subtree and its dependent rows are removed explicitly so the
        cascade holds even on backends that do not enforce foreign keys
        (SQLite).
        """
        doomed: list[uuid.UUID] = []
        frontier = [org_id]
        while frontier:
            doomed.extend(frontier)
            result = await self._session.execute(
                select(Organization.id).where(Organization.parent_id.in_(frontier))
            )
            frontier = [child for child in result.scalars().all() if child not in doomed]

        result = await self._session.execute(
            select(User.id).where(User.organization_id.in_(doomed))
        )
        gone_users = list(result.scalars().all())
        await self._session.execute(delete(Task).where(Task.organization_id.in_(doomed)))
        await self._session.execute(
            update(Task).where(Task.assigned_to_id.in_(gone_users)).values(assigned_to_id=None)
        )
        await self._session.execute(delete(User).where(User.organization_id.in_(doomed)))
        await self._session.execute(delete(Organization).where(Organization.id.in_(doomed)))
        await self._session.commit()

    async def save_task(self, task: TaskRecord) -> TaskRecord:
        """Insert or update a task."""
        row = await self._session.merge(
            Task(
                id=task.id,
                title=task.title,
                description=task.description,
                status=task.status.value,
                priority=task.priority.value,
                organization_id=task.organization_id,
                created_by_id=task.created_by_id,
                assigned_to_id=task.assigned_to_id,
                created_at=task.created_at,
                updated_at=datetime.now(timezone.utc),
            )
        )
        await self._session.commit()
        return _to_task_record(row)

    async def find_task_by_id(self, task_id: uuid.UUID) -> TaskRecord | None:
        """Get task by ID."""
        row = await self._session.get(Task, task_id, populate_existing=True)
        return _to_task_record(row) if row else None

    async def query_tasks(
        self, org_id: uuid.UUID, task_filter: TaskFilter
    ) -> list[TaskRecord]:
        """List tasks of an organization, newest first."""
        result = await self._session.execute(select_org_tasks(org_id, task_filter))
        return [_to_task_record(row) for row in result.scalars().all()]

    async def delete_task(self, task: TaskRecord) -> None:
        """Remove a task."""
        await self._session.execute(delete(Task).where(Task.id == task.id))
        await self._session.commit()


class SqlAuditLogStore:
    """SQL implementation of AuditLogStore."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def append(self, entry: AuditLogRecord) -> None:
        """Append an entry."""
        self._session.add(
            AuditLog(
                id=entry.id,
                action=entry.action.value,
                entity_type=entry.entity_type,
                entity_id=entry.entity_id,
                user_id=entry.user_id,
                organization_id=entry.organization_id,
                changes=entry.changes,
                timestamp=entry.timestamp,
            )
        )
        await self._session.commit()

    async def query_by_org(self, org_id: uuid.UUID, limit: int = 100) -> list[AuditLogRecord]:
        """Most recent entries of an organization."""
        result = await self._session.execute(select_org_audit_logs(org_id, limit))
        return [_to_audit_record(row) for row in result.scalars().all()]

    async def query_by_entity(
        self, entity_type: str, entity_id: uuid.UUID
    ) -> list[AuditLogRecord]:
        """All entries for one entity."""
        result = await self._session.execute(select_entity_audit_logs(entity_type, entity_id))
        return [_to_audit_record(row) for row in result.scalars().all()]
