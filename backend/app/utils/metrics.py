"""Prometheus metrics for authorization and audit."""

from prometheus_client import Counter

authz_decisions_total = Counter(
    "authz_decisions_total",
    "Total authorization decisions",
    ["operation", "outcome"],
)

audit_entries_total = Counter(
    "audit_entries_total",
    "Total audit log entries written",
    ["action"],
)

audit_write_errors_total = Counter(
    "audit_write_errors_total",
    "Total failed audit log writes",
    ["action"],
)


class PrometheusAuthzMetrics:
    """Prometheus-based authorization/audit metrics implementation."""

    def record_decision(self, operation: str, outcome: str) -> None:
        """Count an authorization decision."""
        authz_decisions_total.labels(operation=operation, outcome=outcome).inc()

    def inc_audit_entry(self, action: str) -> None:
        """Count a written audit entry."""
        audit_entries_total.labels(action=action).inc()

    def inc_audit_error(self, action: str) -> None:
        """Count a failed audit write."""
        audit_write_errors_total.labels(action=action).inc()
