"""Models package - re-exports for convenience."""

from backend.app.models.audit import AuditLogEntry, AuditLogListResponse
from backend.app.models.auth import LoginRequest, RegisterRequest, TokenResponse, UserProfile
from backend.app.models.common import (
    ADMIN_ROLES,
    TASK_ENTITY,
    AuditAction,
    Role,
    TaskPriority,
    TaskStatus,
)
from backend.app.models.organizations import CreateOrganizationRequest, OrganizationNode
from backend.app.models.tasks import (
    UPDATABLE_FIELDS,
    DeleteResult,
    TaskCreate,
    TaskUpdate,
    TaskView,
    UserSummary,
)

__all__ = [
    # Common
    "Role",
    "TaskStatus",
    "TaskPriority",
    "AuditAction",
    "TASK_ENTITY",
    "ADMIN_ROLES",
    # Tasks
    "TaskCreate",
    "TaskUpdate",
    "TaskView",
    "UserSummary",
    "DeleteResult",
    "UPDATABLE_FIELDS",
    # Audit
    "AuditLogEntry",
    "AuditLogListResponse",
    # Auth
    "RegisterRequest",
    "LoginRequest",
    "UserProfile",
    "TokenResponse",
    # Organizations
    "OrganizationNode",
    "CreateOrganizationRequest",
]
