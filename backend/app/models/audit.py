"""Audit log response models."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from backend.app.models.common import AuditAction


class AuditLogEntry(BaseModel):
    """Single immutable audit log entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    action: AuditAction
    entity_type: str
    entity_id: UUID
    user_id: UUID
    organization_id: UUID
    changes: dict[str, Any] | None
    timestamp: datetime


class AuditLogListResponse(BaseModel):
    """Response for GET /audit-logs."""

    entries: list[AuditLogEntry]
