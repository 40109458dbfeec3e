"""Tenancy-safe query helpers."""

import uuid

from sqlalchemy import Select, or_, select

from backend.app.db.models import AuditLog, Task
from backend.app.db.repositories import TaskFilter


def select_org_tasks(org_id: uuid.UUID, task_filter: TaskFilter) -> Select[tuple[Task]]:
    """Select tasks with organization scoping enforced.

    Args:
        org_id: Organization ID
        task_filter: Extra predicate (participant restriction)

    Returns:
        Select ordered newest first
    """
    query = select(Task).where(Task.organization_id == org_id)

    if task_filter.participant_id is not None:
        query = query.where(
            or_(
                Task.created_by_id == task_filter.participant_id,
                Task.assigned_to_id == task_filter.participant_id,
            )
        )

    return query.order_by(Task.created_at.desc(), Task.id.desc())


def select_org_audit_logs(org_id: uuid.UUID, limit: int) -> Select[tuple[AuditLog]]:
    """Select the most recent audit entries of an organization."""
    return (
        select(AuditLog)
        .where(AuditLog.organization_id == org_id)
        .order_by(AuditLog.timestamp.desc())
        .limit(limit)
    )


def select_entity_audit_logs(entity_type: str, entity_id: uuid.UUID) -> Select[tuple[AuditLog]]:
    """Select every audit entry recorded for one entity."""
    return (
        select(AuditLog)
        .where(AuditLog.entity_type == entity_type, AuditLog.entity_id == entity_id)
        .order_by(AuditLog.timestamp.desc())
    )
