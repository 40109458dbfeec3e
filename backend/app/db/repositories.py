"""Repository protocol interfaces for data access."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from backend.app.models.common import AuditAction, Role, TaskPriority, TaskStatus


@dataclass
class OrganizationRecord:
    """Organization data record. Hierarchy is expressed only through parent_id."""

    id: UUID
    name: str
    parent_id: UUID | None
    created_at: datetime


@dataclass
class UserRecord:
    """User account data record."""

    id: UUID
    email: str
    password_hash: str
    first_name: str
    last_name: str
    role: Role
    organization_id: UUID
    created_at: datetime
    updated_at: datetime


@dataclass
class TaskRecord:
    """Task data record."""

    id: UUID
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    organization_id: UUID
    created_by_id: UUID
    assigned_to_id: UUID | None
    created_at: datetime
    updated_at: datetime


@dataclass
class AuditLogRecord:
    """Audit log data record. Never updated once appended."""

    id: UUID
    action: AuditAction
    entity_type: str
    entity_id: UUID
    user_id: UUID
    organization_id: UUID
    changes: dict[str, Any] | None
    timestamp: datetime


@dataclass(frozen=True)
class TaskFilter:
    """Extra predicate applied on top of organization scoping.

    participant_id restricts results to tasks created by or assigned to that user.
    """

    participant_id: UUID | None = None


class IdentityStore(Protocol):
    """Store for users, organizations and tasks.

    Must guarantee read-after-write consistency within a single request.
    """

    async def find_user_by_id(self, user_id: UUID) -> UserRecord | None:
        """Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User record or None if not found
        """
        ...

    async def find_user_by_email(self, email: str) -> UserRecord | None:
        """Get user by (case-insensitive) email."""
        ...

    async def save_user(self, user: UserRecord) -> UserRecord:
        """Insert or update a user."""
        ...

    async def find_organization(self, org_id: UUID) -> OrganizationRecord | None:
        """Get organization by ID."""
        ...

    async def find_organization_by_name(self, name: str) -> OrganizationRecord | None:
        """Get organization by exact name."""
        ...

    async def save_organization(self, org: OrganizationRecord) -> OrganizationRecord:
        """Insert or update an organization."""
        ...

    async def list_child_organizations(self, parent_id: UUID) -> list[OrganizationRecord]:
        """List direct children of an organization, ordered by name."""
        ...

    async def delete_organization(self, org_id: UUID) -> None:
        """Delete an organization and, by cascade, its whole subtree."""
        ...

    async def save_task(self, task: TaskRecord) -> TaskRecord:
        """Insert or update a task.

        Args:
            task: Task record to persist

        Returns:
            Persisted task record
        """
        ...

    async def find_task_by_id(self, task_id: UUID) -> TaskRecord | None:
        """Get task by ID without any tenancy check.

        Authorization is decided by the caller from the returned snapshot.
        """
        ...

    async def query_tasks(self, org_id: UUID, task_filter: TaskFilter) -> list[TaskRecord]:
        """List tasks of an organization, newest first.

        Args:
            org_id: Organization ID (tenancy predicate)
            task_filter: Extra predicate

        Returns:
            Task records ordered by created_at descending
        """
        ...

    async def delete_task(self, task: TaskRecord) -> None:
        """Remove a task."""
        ...


class AuditLogStore(Protocol):
    """Append-only store for audit log entries."""

    async def append(self, entry: AuditLogRecord) -> None:
        """Append an entry. Failures propagate to the caller."""
        ...

    async def query_by_org(self, org_id: UUID, limit: int = 100) -> list[AuditLogRecord]:
        """Most recent entries of an organization, timestamp descending.

        Args:
            org_id: Organization ID
            limit: Maximum number of results

        Returns:
            Audit log records
        """
        ...

    async def query_by_entity(self, entity_type: str, entity_id: UUID) -> list[AuditLogRecord]:
        """All entries for one entity, timestamp descending, unbounded."""
        ...
