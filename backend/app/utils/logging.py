"""Structured logging for authorization decisions and audit writes."""

import logging
from typing import Any

from backend.app.authz.engine import AuthzRequest, Decision, Deny
from backend.app.db.repositories import AuditLogRecord

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the application process."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


class StructuredDecisionLogger:
    """Structured logger for authorization decisions."""

    def log_decision(
        self, request: AuthzRequest, decision: Decision, task_id: Any | None = None
    ) -> None:
        """Log a decision; denials at WARNING, allows at INFO."""
        log_data: dict[str, Any] = {
            "operation": request.operation.value,
            "actor_id": str(request.actor.user_id),
            "actor_role": request.actor.role.value,
            "org_id": str(request.actor.org_id),
            "outcome": "allow" if decision.allowed else "deny",
        }

        if task_id is not None:
            log_data["task_id"] = str(task_id)

        log_msg = f"Authorization: {request.operation.value} - {log_data['outcome']}"

        if isinstance(decision, Deny):
            log_data["reason"] = decision.reason.value
            logger.warning(log_msg, extra={"structured": log_data})
        else:
            logger.info(log_msg, extra={"structured": log_data})


class StructuredAuditLogger:
    """Structured logger for audit log writes."""

    def log_append(self, entry: AuditLogRecord) -> None:
        log_data: dict[str, Any] = {
            "action": entry.action.value,
            "entity_type": entry.entity_type,
            "entity_id": str(entry.entity_id),
            "user_id": str(entry.user_id),
            "org_id": str(entry.organization_id),
        }
        logger.info(
            f"Audit: {entry.action.value} {entry.entity_type}", extra={"structured": log_data}
        )

    def log_failure(self, entry: AuditLogRecord, error: Exception) -> None:
        log_data: dict[str, Any] = {
            "action": entry.action.value,
            "entity_id": str(entry.entity_id),
            "error": type(error).__name__,
        }
        logger.error(
            f"Audit write failed: {entry.action.value} {entry.entity_type}",
            extra={"structured": log_data},
        )
