"""Tests for form validation and record building."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from fintrack.models.records import DebtDirection, DebtStatus, TransactionKind
from fintrack.validation import RecordValidationError, RecordValidator


def transaction_form(**overrides) -> dict:
    form = {
        "date": "2024-01-15",
        "description": "Groceries",
        "amount": "250.00",
        "category": "Groceries",
        "kind": "EXPENSE",
    }
    form.update(overrides)
    return form


def debt_form(**overrides) -> dict:
    form = {
        "person": "Ravi",
        "amount": "500",
        "direction": "THEY_OWE_ME",
        "dueDate": "",
        "description": "",
    }
    form.update(overrides)
    return form


@pytest.fixture
def validator():
    return RecordValidator()


class TestTransactionValidation:
    """Tests for RecordValidator.build_transaction."""

    def test_valid_form(self, validator):
        transaction, result = validator.build_transaction(transaction_form())
        assert transaction.amount == Decimal("250.00")
        assert transaction.kind == TransactionKind.EXPENSE
        assert transaction.date == date(2024, 1, 15)
        assert result.issues == []

    def test_float_amount_from_form(self, validator):
        transaction, _ = validator.build_transaction(transaction_form(amount=19.99))
        assert transaction.amount == Decimal("19.99")

    def test_missing_description_rejected(self, validator):
        form = transaction_form()
        del form["description"]
        with pytest.raises(RecordValidationError) as exc_info:
            validator.build_transaction(form)
        fields = [issue.field for issue in exc_info.value.issues]
        assert "description" in fields

    def test_non_numeric_amount_rejected(self, validator):
        with pytest.raises(RecordValidationError) as exc_info:
            validator.build_transaction(transaction_form(amount="twelve"))
        issue = exc_info.value.issues[0]
        assert issue.field == "amount"
        assert issue.severity == "error"
        assert issue.message.startswith("Amount:")

    def test_negative_amount_rejected(self, validator):
        with pytest.raises(RecordValidationError):
            validator.build_transaction(transaction_form(amount="-5"))

    def test_oversized_amount_rejected(self, validator):
        with pytest.raises(RecordValidationError) as exc_info:
            validator.build_transaction(transaction_form(amount="98765432109876543.21"))
        assert exc_info.value.issues[0].field == "amount"

    def test_unknown_kind_rejected(self, validator):
        with pytest.raises(RecordValidationError) as exc_info:
            validator.build_transaction(transaction_form(kind="REFUND"))
        assert exc_info.value.result.entity_type == "transaction"

    def test_all_errors_reported(self, validator):
        """Test that every invalid field is reported, not just the first."""
        with pytest.raises(RecordValidationError) as exc_info:
            validator.build_transaction(transaction_form(amount="x", description="", category=""))
        fields = {issue.field for issue in exc_info.value.issues}
        assert fields == {"amount", "description", "category"}

    def test_form_cannot_set_id(self, validator):
        transaction, _ = validator.build_transaction(transaction_form(id="chosen-by-form"))
        assert transaction.id != "chosen-by-form"

    def test_edit_keeps_id(self, validator, make_transaction):
        existing = make_transaction()
        edited, _ = validator.build_transaction(
            transaction_form(description="Weekly groceries", id="other"),
            existing=existing,
        )
        assert edited.id == existing.id
        assert edited.description == "Weekly groceries"

    def test_future_date_warns(self, validator):
        """Test that a date beyond the tolerance is admitted with a warning."""
        far = (date.today() + timedelta(days=60)).isoformat()
        transaction, result = validator.build_transaction(transaction_form(date=far))
        assert transaction.date.isoformat() == far
        assert not result.has_errors
        assert [i.issue_type for i in result.issues] == ["future_date"]

    def test_near_future_date_is_fine(self, validator):
        soon = (date.today() + timedelta(days=2)).isoformat()
        _, result = validator.build_transaction(transaction_form(date=soon))
        assert result.issues == []

    def test_huge_amount_warns(self, validator):
        _, result = validator.build_transaction(transaction_form(amount="25000000"))
        assert [i.issue_type for i in result.issues] == ["suspicious_value"]
        assert result.warnings


class TestDebtValidation:
    """Tests for RecordValidator.build_debt."""

    def test_new_debt_is_pending(self, validator):
        debt, result = validator.build_debt(debt_form())
        assert debt.status == DebtStatus.PENDING
        assert debt.direction == DebtDirection.THEY_OWE_ME
        assert debt.due_date is None
        assert debt.description is None
        assert result.issues == []

    def test_form_cannot_create_settled_debt(self, validator):
        debt, _ = validator.build_debt(debt_form(status="SETTLED"))
        assert debt.status == DebtStatus.PENDING

    def test_edit_keeps_status_and_id(self, validator, make_debt):
        existing = make_debt(status=DebtStatus.SETTLED)
        edited, _ = validator.build_debt(
            debt_form(person="Ravi K", status="PENDING"),
            existing=existing,
        )
        assert edited.id == existing.id
        assert edited.status == DebtStatus.SETTLED
        assert edited.person == "Ravi K"

    def test_missing_person_rejected(self, validator):
        with pytest.raises(RecordValidationError) as exc_info:
            validator.build_debt(debt_form(person="  "))
        assert exc_info.value.issues[0].field == "person"
        assert exc_info.value.result.entity_type == "debt"

    def test_unknown_direction_rejected(self, validator):
        with pytest.raises(RecordValidationError):
            validator.build_debt(debt_form(direction="SIDEWAYS"))

    def test_overdue_pending_debt_warns(self, validator):
        past = (date.today() - timedelta(days=3)).isoformat()
        debt, result = validator.build_debt(debt_form(dueDate=past))
        assert debt.due_date.isoformat() == past
        assert [i.issue_type for i in result.issues] == ["overdue"]
        assert result.issues[0].field == "dueDate"

    def test_overdue_settled_debt_does_not_warn(self, validator, make_debt):
        past = (date.today() - timedelta(days=3)).isoformat()
        existing = make_debt(status=DebtStatus.SETTLED)
        _, result = validator.build_debt(debt_form(dueDate=past), existing=existing)
        assert result.issues == []


class TestRecordValidationError:

    def test_message_lists_issues(self, validator):
        with pytest.raises(RecordValidationError) as exc_info:
            validator.build_debt(debt_form(amount="abc"))
        assert "Invalid debt" in str(exc_info.value)
        assert "Amount" in str(exc_info.value)
