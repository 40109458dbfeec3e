"""FastAPI dependency providers for stores and services."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.config import Settings, get_settings
from backend.app.db.engine import get_session
from backend.app.db.repositories import AuditLogStore, IdentityStore
from backend.app.db.sql_repositories import SqlAuditLogStore, SqlIdentityStore
from backend.app.services.audit import AuditService
from backend.app.services.auth import AuthService
from backend.app.services.organizations import OrganizationService
from backend.app.services.tasks import TaskService


def get_identity_store(session: Annotated[AsyncSession, Depends(get_session)]) -> IdentityStore:
    """Identity store bound to the request session."""
    return SqlIdentityStore(session)


def get_audit_store(session: Annotated[AsyncSession, Depends(get_session)]) -> AuditLogStore:
    """Audit log store bound to the request session."""
    return SqlAuditLogStore(session)


def get_audit_service(
    store: Annotated[AuditLogStore, Depends(get_audit_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuditService:
    return AuditService(store, org_limit=settings.audit_org_limit)


def get_task_service(
    identity: Annotated[IdentityStore, Depends(get_identity_store)],
    audit: Annotated[AuditService, Depends(get_audit_service)],
) -> TaskService:
    return TaskService(identity, audit)


def get_auth_service(
    identity: Annotated[IdentityStore, Depends(get_identity_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthService:
    return AuthService(identity, settings)


def get_organization_service(
    identity: Annotated[IdentityStore, Depends(get_identity_store)],
) -> OrganizationService:
    return OrganizationService(identity)
