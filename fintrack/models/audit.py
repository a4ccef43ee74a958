"""
Audit Models for FinTrack

Every ledger change and every call to a collaborator (storage, export,
advisory model) produces an AuditEvent that goes to the structured log.

DESIGN DECISION: Events are log lines only. Records themselves keep no
history; an edited transaction simply replaces the old value.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we log."""
    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"

    # Debts
    DEBT_ADDED = "debt_added"
    DEBT_UPDATED = "debt_updated"
    DEBT_STATUS_TOGGLED = "debt_status_toggled"
    DEBT_DELETED = "debt_deleted"

    # User decisions
    DELETE_CANCELLED = "delete_cancelled"
    VALIDATION_FAILED = "validation_failed"

    # Persistence
    DATA_LOADED = "data_loaded"
    SAVE_FAILED = "save_failed"

    # Reports
    EXPORT_GENERATED = "export_generated"
    IMPORT_COMPLETED = "import_completed"
    IMPORT_CANCELLED = "import_cancelled"

    # Advisory model
    INSIGHTS_REQUESTED = "insights_requested"
    INSIGHTS_GENERATED = "insights_generated"
    INSIGHTS_FAILED = "insights_failed"
    INSIGHTS_IGNORED = "insights_ignored"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single logged event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What record is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="'transaction', 'debt', 'ledger' or 'insights'"
    )
    entity_id: Optional[str] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    is_user_action: bool = False

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(transaction_id, "EXPENSE")
        audit_logger.log(event)
    """

    @staticmethod
    def transaction_added(transaction_id: str, kind: str, amount: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"{kind.title()} transaction added",
            details={"kind": kind, "amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def transaction_updated(transaction_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction edited",
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(transaction_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction deleted",
            is_user_action=True,
        )

    @staticmethod
    def debt_added(debt_id: str, direction: str, amount: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEBT_ADDED,
            entity_type="debt",
            entity_id=debt_id,
            description="Debt record added",
            details={"direction": direction, "amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def debt_updated(debt_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEBT_UPDATED,
            entity_type="debt",
            entity_id=debt_id,
            description="Debt record edited",
            is_user_action=True,
        )

    @staticmethod
    def debt_status_toggled(debt_id: str, new_status: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEBT_STATUS_TOGGLED,
            entity_type="debt",
            entity_id=debt_id,
            description=f"Debt marked {new_status.lower()}",
            details={"status": new_status},
            is_user_action=True,
        )

    @staticmethod
    def debt_deleted(debt_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEBT_DELETED,
            entity_type="debt",
            entity_id=debt_id,
            description="Debt record deleted",
            is_user_action=True,
        )

    @staticmethod
    def delete_cancelled(entity_type: str, entity_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DELETE_CANCELLED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"Delete of {entity_type} cancelled by user",
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(entity_type: str, issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            description=f"Rejected {entity_type} entry with {len(issues)} issue(s)",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def data_loaded(transaction_count: int, debt_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_LOADED,
            entity_type="ledger",
            description="Ledger loaded from storage",
            details={
                "transactions": transaction_count,
                "debts": debt_count,
            },
        )

    @staticmethod
    def save_failed(error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="ledger",
            description="Failed to save ledger, in-memory data kept",
            error_message=error_message,
        )

    @staticmethod
    def export_generated(export_format: str, row_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_GENERATED,
            entity_type="ledger",
            description=f"{export_format.upper()} export generated",
            details={"format": export_format, "records": row_count},
            is_user_action=True,
        )

    @staticmethod
    def import_completed(transaction_count: int, debt_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_COMPLETED,
            entity_type="ledger",
            description="Ledger replaced from imported file",
            details={
                "transactions": transaction_count,
                "debts": debt_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def import_cancelled(transaction_count: int, debt_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_CANCELLED,
            entity_type="ledger",
            description="Import not confirmed, ledger unchanged",
            details={
                "transactions": transaction_count,
                "debts": debt_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def insights_requested(transaction_count: int, pending_debt_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSIGHTS_REQUESTED,
            entity_type="insights",
            description="AI insights requested",
            details={
                "transactions_in_prompt": transaction_count,
                "pending_debts_in_prompt": pending_debt_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def insights_generated(response_length: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSIGHTS_GENERATED,
            entity_type="insights",
            description="AI insights generated",
            details={"response_length": response_length},
        )

    @staticmethod
    def insights_failed(error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSIGHTS_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="insights",
            description="AI insights unavailable, fallback message returned",
            error_message=error_message,
        )

    @staticmethod
    def insights_ignored() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSIGHTS_IGNORED,
            entity_type="insights",
            description="Insights request ignored, another request is in flight",
            is_user_action=True,
        )
