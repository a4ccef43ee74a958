"""
Core Record Models for FinTrack

Two entity types live in the ledger:
1. Transaction - a single income or expense event
2. Debt - an obligation between the user and a named counterparty

DESIGN DECISION: Records are frozen Pydantic models.
An edit never mutates a record in place; it builds a new value with the
same id and the ledger swaps it into the original position.

Direction is always carried by an enum (kind / direction), never by the
sign of the amount. Amounts are non-negative Decimals with at most two
decimal places and fifteen digits in total.
"""

import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)


# =============================================================================
# ENUMS - Closed sets, invalid values are rejected at entry
# =============================================================================

class TransactionKind(str, Enum):
    """Whether a transaction brings money in or sends it out."""
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class DebtDirection(str, Enum):
    """Who owes whom."""
    THEY_OWE_ME = "THEY_OWE_ME"  # receivable
    I_OWE_THEM = "I_OWE_THEM"    # payable


class DebtStatus(str, Enum):
    """
    Settlement status of a debt.

    Only an explicit toggle moves a debt between these states.
    Editing any other field keeps the current status.
    """
    PENDING = "PENDING"
    SETTLED = "SETTLED"

    def toggled(self) -> "DebtStatus":
        if self is DebtStatus.PENDING:
            return DebtStatus.SETTLED
        return DebtStatus.PENDING


# Suggested (not enforced) category names offered by the entry form
EXPENSE_CATEGORIES = (
    "Food & Dining",
    "Groceries",
    "Transportation",
    "Shopping",
    "Bills & Utilities",
    "Rent",
    "Entertainment",
    "Health",
    "Education",
    "Travel",
    "Other",
)

INCOME_CATEGORIES = (
    "Salary",
    "Freelance",
    "Investments",
    "Gifts",
    "Refunds",
    "Other Income",
)

# JSON stores amounts as doubles, which hold 15 significant digits exactly
MAX_AMOUNT_DIGITS = 15

# Values written by the earlier browser version of the app
_LEGACY_DEBT_DIRECTIONS = {
    "OWES_ME": DebtDirection.THEY_OWE_ME.value,
    "I_OWE": DebtDirection.I_OWE_THEM.value,
}
_LEGACY_DEBT_STATUSES = {
    "PAID": DebtStatus.SETTLED.value,
}


def new_record_id() -> str:
    """Generate an opaque unique record id."""
    return str(uuid4())


def amount_to_json(amount: Decimal) -> Union[int, float]:
    """
    Render an amount as a JSON number.

    Whole amounts become integers (1000, not 1000.0) so exported files
    match the ones the browser version produced.
    """
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


def format_amount(amount: Decimal) -> str:
    """Plain amount text without trailing zeros: 1000, 12.5, 0.75."""
    normalized = amount.normalize()
    if normalized == normalized.to_integral_value():
        return str(int(normalized))
    return format(normalized, "f")


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


# =============================================================================
# RECORDS
# =============================================================================

class Transaction(BaseModel):
    """
    A single recorded income or expense event.

    The id is assigned once at creation and survives every edit.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        frozen=True,
        populate_by_name=True,
    )

    id: str = Field(
        default_factory=new_record_id,
        min_length=1,
        description="Opaque unique identifier"
    )
    date: datetime.date = Field(
        ...,
        description="Calendar date of the transaction"
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Free-text label"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        max_digits=MAX_AMOUNT_DIGITS,
        decimal_places=2,
        description="Non-negative magnitude; direction comes from kind"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=60,
        description="Free-text category tag"
    )
    kind: TransactionKind = Field(
        ...,
        description="INCOME or EXPENSE"
    )

    @model_validator(mode="before")
    @classmethod
    def accept_legacy_type(cls, data: Any) -> Any:
        """Older exports stored the kind under 'type'."""
        if isinstance(data, dict) and "kind" not in data and "type" in data:
            data = dict(data)
            data["kind"] = data.pop("type")
        return data

    @field_serializer("amount", when_used="json")
    def serialize_amount(self, amount: Decimal) -> Union[int, float]:
        return amount_to_json(amount)

    @property
    def is_income(self) -> bool:
        return self.kind == TransactionKind.INCOME


class Debt(BaseModel):
    """
    A tracked obligation between the user and a counterparty.

    New debts start PENDING. The status is changed only by toggling.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        frozen=True,
        populate_by_name=True,
    )

    id: str = Field(
        default_factory=new_record_id,
        min_length=1,
        description="Opaque unique identifier"
    )
    person: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Counterparty name"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        max_digits=MAX_AMOUNT_DIGITS,
        decimal_places=2,
        description="Non-negative magnitude"
    )
    direction: DebtDirection = Field(
        ...,
        description="THEY_OWE_ME or I_OWE_THEM"
    )
    status: DebtStatus = Field(
        default=DebtStatus.PENDING,
        description="PENDING until explicitly settled"
    )
    due_date: Optional[datetime.date] = Field(
        default=None,
        alias="dueDate",
        description="Optional due date"
    )
    description: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Optional note"
    )

    @model_validator(mode="before")
    @classmethod
    def accept_legacy_fields(cls, data: Any) -> Any:
        """Map the browser version's 'type', OWES_ME/I_OWE and PAID values."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "direction" not in data and "type" in data:
            data["direction"] = data.pop("type")
        direction = data.get("direction")
        if isinstance(direction, str):
            data["direction"] = _LEGACY_DEBT_DIRECTIONS.get(direction, direction)
        status = data.get("status")
        if isinstance(status, str):
            data["status"] = _LEGACY_DEBT_STATUSES.get(status, status)
        return data

    @field_validator("due_date", "description", mode="before")
    @classmethod
    def blank_is_missing(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_serializer("amount", when_used="json")
    def serialize_amount(self, amount: Decimal) -> Union[int, float]:
        return amount_to_json(amount)

    @property
    def is_pending(self) -> bool:
        return self.status == DebtStatus.PENDING


class AppData(BaseModel):
    """
    The unit of persistence: both record collections, newest first.

    Saved and loaded as one blob. There are no partial writes.
    """
    model_config = ConfigDict(populate_by_name=True)

    transactions: list[Transaction] = Field(default_factory=list)
    debts: list[Debt] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def accept_legacy_layout(cls, data: Any) -> Any:
        """The browser version called the transaction list 'expenses'."""
        if isinstance(data, dict) and "transactions" not in data and "expenses" in data:
            data = dict(data)
            data["transactions"] = data.pop("expenses")
        return data

    @property
    def is_empty(self) -> bool:
        return not self.transactions and not self.debts
