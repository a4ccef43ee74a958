"""
Tests for FinTrack models

Test strategy:
1. Unit tests for individual components (models, aggregator, serializer)
2. Flow tests for the ledger book with in-memory storage
3. No real API calls in tests (summarizers are faked)
"""

import pytest
from datetime import date
from decimal import Decimal

from pydantic import ValidationError

from fintrack.models.records import (
    AppData,
    Debt,
    DebtDirection,
    DebtStatus,
    Transaction,
    TransactionKind,
    amount_to_json,
    format_amount,
)
from fintrack.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from fintrack.models.validation import ValidationIssue, ValidationResult


class TestTransactionModel:
    """Tests for the Transaction model."""

    def test_transaction_creation(self):
        """Test Transaction model creation."""
        txn = Transaction(
            date=date(2024, 1, 1),
            description="Salary",
            amount=Decimal("50000.00"),
            category="Salary",
            kind=TransactionKind.INCOME,
        )
        assert txn.description == "Salary"
        assert txn.amount == Decimal("50000.00")
        assert txn.is_income is True
        assert txn.id

    def test_ids_are_unique(self, make_transaction):
        """Test that each new transaction gets its own id."""
        assert make_transaction().id != make_transaction().id

    def test_strips_whitespace(self, make_transaction):
        """Test that whitespace is stripped from text fields."""
        txn = make_transaction(description="  Coffee  ")
        assert txn.description == "Coffee"

    def test_rejects_negative_amount(self, make_transaction):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValueError):
            make_transaction(amount="-100")

    def test_rejects_more_than_two_decimals(self, make_transaction):
        """Test that sub-cent amounts are rejected."""
        with pytest.raises(ValueError):
            make_transaction(amount="10.555")

    def test_rejects_too_many_digits(self, make_transaction, make_debt):
        """Test that amounts a JSON number cannot hold exactly are rejected."""
        with pytest.raises(ValueError):
            make_transaction(amount="98765432109876543.21")
        with pytest.raises(ValueError):
            make_debt(amount="10000000000000.00")
        assert make_transaction(amount="9999999999999.99").amount == Decimal("9999999999999.99")

    def test_rejects_empty_description(self, make_transaction):
        """Test that a blank description is rejected."""
        with pytest.raises(ValueError):
            make_transaction(description="   ")

    def test_rejects_unknown_kind(self):
        """Test that kind is a closed set."""
        with pytest.raises(ValueError):
            Transaction(
                date=date(2024, 1, 1),
                description="Transfer",
                amount=Decimal("10"),
                category="Other",
                kind="TRANSFER",
            )

    def test_transaction_is_frozen(self, make_transaction):
        """Test that records cannot be mutated in place."""
        txn = make_transaction()
        with pytest.raises(ValidationError):
            txn.amount = Decimal("1")

    def test_accepts_legacy_type_field(self):
        """Test that 'type' is read as kind."""
        txn = Transaction.model_validate({
            "id": "abc",
            "date": "2024-01-01",
            "description": "Rent",
            "amount": 15000,
            "category": "Rent",
            "type": "EXPENSE",
        })
        assert txn.kind == TransactionKind.EXPENSE
        assert txn.id == "abc"

    def test_json_amount_is_a_number(self, make_transaction):
        """Test that amounts serialize as JSON numbers."""
        assert make_transaction(amount="1000.00").model_dump(mode="json")["amount"] == 1000
        assert make_transaction(amount="12.50").model_dump(mode="json")["amount"] == 12.5


class TestDebtModel:
    """Tests for the Debt model."""

    def test_debt_defaults_to_pending(self):
        """Test that a new debt starts PENDING."""
        debt = Debt(person="Asha", amount=Decimal("200"), direction=DebtDirection.I_OWE_THEM)
        assert debt.status == DebtStatus.PENDING
        assert debt.is_pending is True
        assert debt.due_date is None

    def test_due_date_alias(self):
        """Test that dueDate and due_date both work."""
        by_alias = Debt(person="A", amount=Decimal("1"), direction="I_OWE_THEM", dueDate="2024-03-01")
        by_name = Debt(person="A", amount=Decimal("1"), direction="I_OWE_THEM", due_date=date(2024, 3, 1))
        assert by_alias.due_date == by_name.due_date == date(2024, 3, 1)
        assert "dueDate" in by_alias.model_dump(by_alias=True)

    def test_blank_optional_fields_become_none(self):
        """Test that empty strings from a form mean 'not set'."""
        debt = Debt(person="A", amount=Decimal("1"), direction="THEY_OWE_ME", dueDate="", description="")
        assert debt.due_date is None
        assert debt.description is None

    def test_accepts_legacy_values(self):
        """Test that OWES_ME / I_OWE / PAID are mapped."""
        owes_me = Debt.model_validate({"person": "A", "amount": 5, "type": "OWES_ME", "status": "PAID"})
        i_owe = Debt.model_validate({"person": "B", "amount": 5, "type": "I_OWE", "status": "PENDING"})
        assert owes_me.direction == DebtDirection.THEY_OWE_ME
        assert owes_me.status == DebtStatus.SETTLED
        assert i_owe.direction == DebtDirection.I_OWE_THEM

    def test_rejects_unknown_status(self):
        """Test that status is a closed set."""
        with pytest.raises(ValueError):
            Debt(person="A", amount=Decimal("1"), direction="I_OWE_THEM", status="FORGIVEN")

    def test_status_toggle(self):
        """Test DebtStatus.toggled."""
        assert DebtStatus.PENDING.toggled() == DebtStatus.SETTLED
        assert DebtStatus.SETTLED.toggled() == DebtStatus.PENDING


class TestAppData:
    """Tests for the persistence unit."""

    def test_empty_by_default(self):
        assert AppData().is_empty

    def test_accepts_legacy_expenses_key(self):
        data = AppData.model_validate({
            "expenses": [{
                "id": "1",
                "date": "2024-01-01",
                "description": "Tea",
                "amount": 20,
                "category": "Food & Dining",
                "type": "EXPENSE",
            }],
            "debts": [],
        })
        assert len(data.transactions) == 1


class TestAmountFormatting:
    """Tests for amount helpers."""

    def test_format_amount(self):
        assert format_amount(Decimal("1000.00")) == "1000"
        assert format_amount(Decimal("12.50")) == "12.5"
        assert format_amount(Decimal("0.75")) == "0.75"
        assert format_amount(Decimal("0")) == "0"

    def test_amount_to_json(self):
        assert amount_to_json(Decimal("300.00")) == 300
        assert isinstance(amount_to_json(Decimal("300.00")), int)
        assert amount_to_json(Decimal("99.99")) == 99.99


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.DATA_LOADED,
            description="Ledger loaded",
        )
        assert event.event_type == AuditEventType.DATA_LOADED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.transaction_added("t-1", "EXPENSE", "250.00")
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "transaction_added"
        assert log_dict["entity_id"] == "t-1"
        assert log_dict["details"]["amount"] == "250.00"
        assert log_dict["is_user_action"] is True

    def test_save_failed_is_an_error(self):
        """Test AuditEventBuilder.save_failed."""
        event = AuditEventBuilder.save_failed("disk full")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"

    def test_debt_status_toggled(self):
        """Test AuditEventBuilder.debt_status_toggled."""
        event = AuditEventBuilder.debt_status_toggled("d-1", "SETTLED")
        assert event.event_type == AuditEventType.DEBT_STATUS_TOGGLED
        assert event.details == {"status": "SETTLED"}


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            entity_type="transaction",
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="missing",
                    message="Amount required",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 1

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            entity_type="transaction",
            issues=[
                ValidationIssue(
                    field="date",
                    issue_type="future_date",
                    message="Date in future",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.error_count == 0
        assert result.warnings == ["Date in future"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
