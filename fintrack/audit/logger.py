"""
Audit Logger

DESIGN DECISION: Every ledger change and every call out to a collaborator
is logged as a structured event. This provides:
1. Traceability of what the user did in a session
2. Debugging capability when storage or the AI model misbehaves

The audit logger:
- Is synchronous; ledger operations are synchronous too
- Only writes to the local structured log, never to the ledger blob
- Never raises; a logging problem must not break a ledger operation
"""

from typing import Optional

import structlog

from fintrack.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Keeps the last few events in memory so the UI can show recent
    activity without reading log files.
    """

    def __init__(self, history_size: int = 50):
        self._logger = structlog.get_logger("fintrack.audit")
        self._history_size = history_size
        self._recent: list[AuditEvent] = []
        self.failed_count = 0

    @property
    def recent_events(self) -> list[AuditEvent]:
        """Most recent events, newest first."""
        return list(reversed(self._recent))

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        The event is always kept in recent_events. Returns False if the
        structured log rejected it.
        """
        self._recent.append(event)
        if len(self._recent) > self._history_size:
            del self._recent[0]

        log_dict = event.to_log_dict()
        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            # logging is best-effort
            self.failed_count += 1
            return False
        return True

    def log_transaction_added(self, transaction_id: str, kind: str, amount: str) -> None:
        self.log(AuditEventBuilder.transaction_added(transaction_id, kind, amount))

    def log_transaction_updated(self, transaction_id: str) -> None:
        self.log(AuditEventBuilder.transaction_updated(transaction_id))

    def log_transaction_deleted(self, transaction_id: str) -> None:
        self.log(AuditEventBuilder.transaction_deleted(transaction_id))

    def log_debt_added(self, debt_id: str, direction: str, amount: str) -> None:
        self.log(AuditEventBuilder.debt_added(debt_id, direction, amount))

    def log_debt_updated(self, debt_id: str) -> None:
        self.log(AuditEventBuilder.debt_updated(debt_id))

    def log_debt_status_toggled(self, debt_id: str, new_status: str) -> None:
        self.log(AuditEventBuilder.debt_status_toggled(debt_id, new_status))

    def log_debt_deleted(self, debt_id: str) -> None:
        self.log(AuditEventBuilder.debt_deleted(debt_id))

    def log_delete_cancelled(self, entity_type: str, entity_id: str) -> None:
        self.log(AuditEventBuilder.delete_cancelled(entity_type, entity_id))

    def log_validation_failed(self, entity_type: str, issues: list[dict]) -> None:
        self.log(AuditEventBuilder.validation_failed(entity_type, issues))

    def log_data_loaded(self, transaction_count: int, debt_count: int) -> None:
        self.log(AuditEventBuilder.data_loaded(transaction_count, debt_count))

    def log_save_failed(self, error_message: str) -> None:
        self.log(AuditEventBuilder.save_failed(error_message))

    def log_export_generated(self, export_format: str, row_count: int) -> None:
        self.log(AuditEventBuilder.export_generated(export_format, row_count))

    def log_import_completed(self, transaction_count: int, debt_count: int) -> None:
        self.log(AuditEventBuilder.import_completed(transaction_count, debt_count))

    def log_import_cancelled(self, transaction_count: int, debt_count: int) -> None:
        self.log(AuditEventBuilder.import_cancelled(transaction_count, debt_count))

    def log_insights_requested(self, transaction_count: int, pending_debt_count: int) -> None:
        self.log(AuditEventBuilder.insights_requested(transaction_count, pending_debt_count))

    def log_insights_generated(self, response_length: int) -> None:
        self.log(AuditEventBuilder.insights_generated(response_length))

    def log_insights_failed(self, error_message: Optional[str]) -> None:
        self.log(AuditEventBuilder.insights_failed(error_message or "unknown error"))

    def log_insights_ignored(self) -> None:
        self.log(AuditEventBuilder.insights_ignored())
