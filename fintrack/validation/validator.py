"""
Two-Stage Record Validation

DESIGN DECISION: Form input passes two stages before it becomes a record.

STAGE 1 - SCHEMA VALIDATION:
- Required fields present (description, category, person, date)
- Amount numeric, non-negative, at most two decimal places
- Kind / direction one of the closed enum values
- Any failure here REJECTS the entry

STAGE 2 - SEMANTIC VALIDATION:
- Suspiciously large amounts
- Transaction dates far in the future
- Pending debts already past their due date
- These are WARNINGS only; the record is admitted

Records that reach the ledger are valid, so the aggregator and serializer
never re-validate.

IMPORTANT: Validation NEVER silently fixes values. It reports them.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from fintrack.config import get_settings
from fintrack.models.records import Debt, DebtStatus, Transaction
from fintrack.models.validation import ValidationIssue, ValidationResult


FIELD_LABELS = {
    "date": "Date",
    "description": "Description",
    "amount": "Amount",
    "category": "Category",
    "kind": "Type",
    "person": "Person",
    "direction": "Type",
    "dueDate": "Due date",
    "due_date": "Due date",
}

# Fields the form may never set directly
_TRANSACTION_PROTECTED = ("id",)
_DEBT_PROTECTED = ("id", "status")


class RecordValidationError(Exception):
    """Form input was rejected; the ledger is unchanged."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(issue.message for issue in result.issues)
        super().__init__(f"Invalid {result.entity_type}: {messages}")

    @property
    def issues(self) -> list[ValidationIssue]:
        return self.result.issues


def _issues_from_pydantic(error: ValidationError) -> list[ValidationIssue]:
    issues = []
    for err in error.errors():
        field = str(err["loc"][0]) if err["loc"] else "record"
        label = FIELD_LABELS.get(field, field.replace("_", " ").title())
        issues.append(ValidationIssue(
            field=field,
            issue_type=err["type"],
            message=f"{label}: {err['msg']}",
            severity="error",
        ))
    return issues


class RecordValidator:
    """
    Validates form input and builds records from it.

    Editing passes the existing record: its id is kept, and for debts
    its status is kept too.
    """

    def __init__(self):
        self._settings = get_settings().app

    def build_transaction(
        self,
        form: Mapping[str, Any],
        existing: Optional[Transaction] = None,
    ) -> tuple[Transaction, ValidationResult]:
        """
        Build a transaction from form input.

        Raises:
            RecordValidationError: If stage 1 finds any error
        """
        fields = {k: v for k, v in form.items() if k not in _TRANSACTION_PROTECTED}
        if existing is not None:
            fields["id"] = existing.id

        try:
            transaction = Transaction.model_validate(fields)
        except ValidationError as e:
            raise RecordValidationError(ValidationResult(
                entity_type="transaction",
                issues=_issues_from_pydantic(e),
            )) from e

        issues = self._check_amount(transaction.amount)
        issues += self._check_transaction_date(transaction.date)
        return transaction, ValidationResult(entity_type="transaction", issues=issues)

    def build_debt(
        self,
        form: Mapping[str, Any],
        existing: Optional[Debt] = None,
    ) -> tuple[Debt, ValidationResult]:
        """
        Build a debt from form input.

        New debts are always PENDING; edits keep the current status.

        Raises:
            RecordValidationError: If stage 1 finds any error
        """
        fields = {k: v for k, v in form.items() if k not in _DEBT_PROTECTED}
        if existing is not None:
            fields["id"] = existing.id
            fields["status"] = existing.status
        else:
            fields["status"] = DebtStatus.PENDING

        try:
            debt = Debt.model_validate(fields)
        except ValidationError as e:
            raise RecordValidationError(ValidationResult(
                entity_type="debt",
                issues=_issues_from_pydantic(e),
            )) from e

        issues = self._check_amount(debt.amount)
        issues += self._check_due_date(debt)
        return debt, ValidationResult(entity_type="debt", issues=issues)

    # =========================================================================
    # Stage 2 - semantic checks (warnings only)
    # =========================================================================

    def _check_amount(self, amount: Decimal) -> list[ValidationIssue]:
        limit = Decimal(str(self._settings.max_record_amount))
        if amount > limit:
            return [ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount {amount} is unusually large",
                severity="warning",
                suggested_fix="Check for an extra digit",
            )]
        return []

    def _check_transaction_date(self, txn_date: date) -> list[ValidationIssue]:
        tolerance = timedelta(days=self._settings.future_date_tolerance_days)
        if txn_date > date.today() + tolerance:
            return [ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Date {txn_date.isoformat()} is in the future",
                severity="warning",
                suggested_fix="Check the year",
            )]
        return []

    def _check_due_date(self, debt: Debt) -> list[ValidationIssue]:
        if debt.is_pending and debt.due_date and debt.due_date < date.today():
            return [ValidationIssue(
                field="dueDate",
                issue_type="overdue",
                message=f"Due date {debt.due_date.isoformat()} has already passed",
                severity="warning",
            )]
        return []
