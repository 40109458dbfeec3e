"""In-memory implementations of repository interfaces."""

import itertools
import uuid
from dataclasses import replace
from datetime import datetime, timezone

from backend.app.db.repositories import (
    AuditLogRecord,
    OrganizationRecord,
    TaskFilter,
    TaskRecord,
    UserRecord,
)


class InMemoryIdentityStore:
    """In-memory implementation of IdentityStore.

    Records are copied on the way in and out so callers never share state with
    the store.
    """

    def __init__(self) -> None:
        self._users: dict[uuid.UUID, UserRecord] = {}
        self._orgs: dict[uuid.UUID, OrganizationRecord] = {}
        self._tasks: dict[uuid.UUID, TaskRecord] = {}
        # Insertion sequence breaks created_at ties when ordering
        self._task_seq: dict[uuid.UUID, int] = {}
        self._counter = itertools.count()

    async def find_user_by_id(self, user_id: uuid.UUID) -> UserRecord | None:
        """Get user by ID."""
        record = self._users.get(user_id)
        return replace(record) if record else None

    async def find_user_by_email(self, email: str) -> UserRecord | None:
        """Get user by email."""
        wanted = email.lower()
        for record in self._users.values():
            if record.email.lower() == wanted:
                return replace(record)
        return None

    async def save_user(self, user: UserRecord) -> UserRecord:
        """Insert or update a user."""
        self._users[user.id] = replace(user)
        return replace(user)

    async def find_organization(self, org_id: uuid.UUID) -> OrganizationRecord | None:
        """Get organization by ID."""
        record = self._orgs.get(org_id)
        return replace(record) if record else None

    async def find_organization_by_name(self, name: str) -> OrganizationRecord | None:
        """Get organization by name."""
        for record in self._orgs.values():
            if record.name == name:
                return replace(record)
        return None

    async def save_organization(self, org: OrganizationRecord) -> OrganizationRecord:
        """Insert or update an organization."""
        self._orgs[org.id] = replace(org)
        return replace(org)

    async def list_child_organizations(self, parent_id: uuid.UUID) -> list[OrganizationRecord]:
        """List direct children of an organization."""
        children = [replace(o) for o in self._orgs.values() if o.parent_id == parent_id]
        children.sort(key=lambda o: o.name)
        return children

    async def delete_organization(self, org_id: uuid.UUID) -> None:
        """Delete an organization and its subtree, with their users and tasks."""
        doomed: set[uuid.UUID] = set()
        pending = [org_id]
        while pending:
            current = pending.pop()
            if self._orgs.pop(current, None) is None:
                continue
            doomed.add(current)
            pending.extend(o.id for o in self._orgs.values() if o.parent_id == current)

        for task_id in [t.id for t in self._tasks.values() if t.organization_id in doomed]:
            del self._tasks[task_id]
            del self._task_seq[task_id]

        gone_users = {u.id for u in self._users.values() if u.organization_id in doomed}
        for user_id in gone_users:
            del self._users[user_id]

        # Mirrors ON DELETE SET NULL on task.assigned_to_id
        for task_id, task in self._tasks.items():
            if task.assigned_to_id in gone_users:
                self._tasks[task_id] = replace(task, assigned_to_id=None)

    async def save_task(self, task: TaskRecord) -> TaskRecord:
        """Insert or update a task."""
        if task.id not in self._task_seq:
            self._task_seq[task.id] = next(self._counter)
        stored = replace(task, updated_at=datetime.now(timezone.utc))
        self._tasks[task.id] = stored
        return replace(stored)

    async def find_task_by_id(self, task_id: uuid.UUID) -> TaskRecord | None:
        """Get task by ID."""
        record = self._tasks.get(task_id)
        return replace(record) if record else None

    async def query_tasks(self, org_id: uuid.UUID, task_filter: TaskFilter) -> list[TaskRecord]:
        """List tasks of an organization, newest first."""
        results: list[TaskRecord] = []

        for record in self._tasks.values():
            # Enforce tenancy
            if record.organization_id != org_id:
                continue

            participant = task_filter.participant_id
            if participant is not None and participant not in (
                record.created_by_id,
                record.assigned_to_id,
            ):
                continue

            results.append(replace(record))

        results.sort(key=lambda t: (t.created_at, self._task_seq[t.id]), reverse=True)
        return results

    async def delete_task(self, task: TaskRecord) -> None:
        """Remove a task."""
        self._tasks.pop(task.id, None)
        self._task_seq.pop(task.id, None)


class InMemoryAuditLogStore:
    """In-memory implementation of AuditLogStore."""

    def __init__(self) -> None:
        self._entries: list[AuditLogRecord] = []

    @property
    def entries(self) -> list[AuditLogRecord]:
        """All entries in append order."""
        return [replace(e) for e in self._entries]

    async def append(self, entry: AuditLogRecord) -> None:
        """Append an entry."""
        self._entries.append(replace(entry))

    async def query_by_org(self, org_id: uuid.UUID, limit: int = 100) -> list[AuditLogRecord]:
        """Most recent entries of an organization."""
        results = [e for e in self._newest_first() if e.organization_id == org_id]
        return results[:limit]

    async def query_by_entity(
        self, entity_type: str, entity_id: uuid.UUID
    ) -> list[AuditLogRecord]:
        """All entries for one entity."""
        return [
            e
            for e in self._newest_first()
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]

    def _newest_first(self) -> list[AuditLogRecord]:
        indexed = list(enumerate(self._entries))
        indexed.sort(key=lambda pair: (pair[1].timestamp, pair[0]), reverse=True)
        return [replace(e) for _, e in indexed]
