"""Audit log endpoints - GET /api/audit-logs (owners and org admins)."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends

from backend.app.api.auth import get_current_context
from backend.app.api.deps import get_audit_service
from backend.app.db.context import RequestContext
from backend.app.errors import ForbiddenError
from backend.app.models.audit import AuditLogEntry, AuditLogListResponse
from backend.app.models.common import ADMIN_ROLES
from backend.app.services.audit import AuditService

router = APIRouter(prefix="/audit-logs", tags=["audit"])


def _require_admin(ctx: RequestContext) -> None:
    if ctx.role not in ADMIN_ROLES:
        raise ForbiddenError("Only owners and org admins can view audit logs", reason="not_admin")


@router.get("", response_model=AuditLogListResponse)
async def list_audit_logs(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[AuditService, Depends(get_audit_service)],
) -> AuditLogListResponse:
    """Most recent audit entries of the caller's organization."""
    _require_admin(ctx)
    entries = await service.by_organization(ctx.org_id)
    return AuditLogListResponse(entries=[AuditLogEntry.model_validate(e) for e in entries])


@router.get("/{entity_type}/{entity_id}", response_model=AuditLogListResponse)
async def list_entity_audit_logs(
    entity_type: str,
    entity_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[AuditService, Depends(get_audit_service)],
) -> AuditLogListResponse:
    """History of one entity, limited to entries written within the caller's organization."""
    _require_admin(ctx)
    entries = await service.by_entity(entity_type, entity_id)
    return AuditLogListResponse(
        entries=[AuditLogEntry.model_validate(e) for e in entries if e.organization_id == ctx.org_id]
    )
