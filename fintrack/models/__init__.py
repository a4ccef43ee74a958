"""
Data Models Package

This package contains all Pydantic models used in FinTrack.
All records flowing through the ledger must conform to these schemas.
"""

from fintrack.models.records import (
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    MAX_AMOUNT_DIGITS,
    AppData,
    Debt,
    DebtDirection,
    DebtStatus,
    Transaction,
    TransactionKind,
    amount_to_json,
    format_amount,
    new_record_id,
)
from fintrack.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from fintrack.models.validation import (
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    # Record models
    "EXPENSE_CATEGORIES",
    "INCOME_CATEGORIES",
    "MAX_AMOUNT_DIGITS",
    "AppData",
    "Debt",
    "DebtDirection",
    "DebtStatus",
    "Transaction",
    "TransactionKind",
    "amount_to_json",
    "format_amount",
    "new_record_id",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
]
