"""Common types and enums shared across all models."""

from enum import Enum


class Role(str, Enum):
    """User role within an organization."""

    owner = "owner"
    org_admin = "org_admin"
    member = "member"


class TaskStatus(str, Enum):
    """Task workflow status."""

    todo = "todo"
    in_progress = "in_progress"
    done = "done"


class TaskPriority(str, Enum):
    """Task priority."""

    low = "low"
    medium = "medium"
    high = "high"


class AuditAction(str, Enum):
    """Mutating action recorded in the audit log."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


# Entity type recorded on audit entries for tasks
TASK_ENTITY = "Task"

# Roles allowed to administer an organization (delete tasks, read audit logs)
ADMIN_ROLES = frozenset({Role.owner, Role.org_admin})
