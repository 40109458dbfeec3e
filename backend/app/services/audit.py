"""Audit log service - append-only trail of mutating actions."""

import uuid
from datetime import datetime, timezone
from typing import Any

from backend.app.db.context import RequestContext
from backend.app.db.repositories import AuditLogRecord, AuditLogStore
from backend.app.models.common import AuditAction
from backend.app.utils.logging import StructuredAuditLogger
from backend.app.utils.metrics import PrometheusAuthzMetrics

DEFAULT_ORG_LIMIT = 100


class AuditService:
    """Writes and reads audit log entries.

    Write failures propagate to the caller. Nothing here rolls back the
    mutation that was being audited.
    """

    def __init__(
        self,
        store: AuditLogStore,
        org_limit: int = DEFAULT_ORG_LIMIT,
        logger: StructuredAuditLogger | None = None,
        metrics: PrometheusAuthzMetrics | None = None,
    ) -> None:
        self._store = store
        self._org_limit = org_limit
        self._logger = logger or StructuredAuditLogger()
        self._metrics = metrics or PrometheusAuthzMetrics()

    async def log(
        self,
        action: AuditAction,
        entity_type: str,
        entity_id: uuid.UUID,
        actor: RequestContext,
        changes: dict[str, Any] | None = None,
    ) -> AuditLogRecord:
        """Append one entry attributed to the actor and the actor's organization.

        Args:
            action: Mutating action
            entity_type: Entity type name (e.g. "Task")
            entity_id: Entity ID
            actor: Acting user
            changes: JSON-serializable diff, if any

        Returns:
            The appended record
        """
        entry = AuditLogRecord(
            id=uuid.uuid4(),
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            user_id=actor.user_id,
            organization_id=actor.org_id,
            changes=changes,
            timestamp=datetime.now(timezone.utc),
        )

        try:
            await self._store.append(entry)
        except Exception as e:
            self._logger.log_failure(entry, e)
            self._metrics.inc_audit_error(action.value)
            raise

        self._logger.log_append(entry)
        self._metrics.inc_audit_entry(action.value)
        return entry

    async def by_organization(self, org_id: uuid.UUID) -> list[AuditLogRecord]:
        """Most recent entries of an organization, newest first."""
        return await self._store.query_by_org(org_id, limit=self._org_limit)

    async def by_entity(self, entity_type: str, entity_id: uuid.UUID) -> list[AuditLogRecord]:
        """Full history of one entity, newest first."""
        return await self._store.query_by_entity(entity_type, entity_id)
