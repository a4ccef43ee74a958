"""
Ledger Aggregation

Pure functions that turn the two record collections into the figures the
dashboard, the printable report and the exports show.

DESIGN DECISION: Nothing here is cached. Every render recomputes from the
current collections, so a figure can never be stale.

All sums accumulate Decimals starting from Decimal("0"), so totals are
exact, independent of record order, and reconcile with per-row values.
Empty input yields zero.
"""

from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from pydantic import BaseModel, Field

from fintrack.models.records import (
    Debt,
    DebtDirection,
    DebtStatus,
    Transaction,
    TransactionKind,
)


ZERO = Decimal("0")
CENT = Decimal("0.01")


def _sum_amounts(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, ZERO)


def total_income(transactions: Iterable[Transaction]) -> Decimal:
    """Sum of amounts over INCOME transactions."""
    return _sum_amounts(
        t.amount for t in transactions if t.kind == TransactionKind.INCOME
    )


def total_expense(transactions: Iterable[Transaction]) -> Decimal:
    """Sum of amounts over EXPENSE transactions."""
    return _sum_amounts(
        t.amount for t in transactions if t.kind == TransactionKind.EXPENSE
    )


def balance(transactions: Iterable[Transaction]) -> Decimal:
    """Income minus expense. May be negative."""
    transactions = list(transactions)
    return total_income(transactions) - total_expense(transactions)


def _pending_total(debts: Iterable[Debt], direction: DebtDirection) -> Decimal:
    return _sum_amounts(
        d.amount for d in debts
        if d.direction == direction and d.status == DebtStatus.PENDING
    )


def total_receivable(debts: Iterable[Debt]) -> Decimal:
    """What others still owe me: pending THEY_OWE_ME debts."""
    return _pending_total(debts, DebtDirection.THEY_OWE_ME)


def total_payable(debts: Iterable[Debt]) -> Decimal:
    """What I still owe others: pending I_OWE_THEM debts."""
    return _pending_total(debts, DebtDirection.I_OWE_THEM)


def pending_debts(debts: Iterable[Debt]) -> list[Debt]:
    """Pending debts in their existing order."""
    return [d for d in debts if d.status == DebtStatus.PENDING]


class LedgerSummary(BaseModel):
    """All dashboard figures, computed together from one snapshot."""

    total_income: Decimal = ZERO
    total_expense: Decimal = ZERO
    balance: Decimal = ZERO
    total_receivable: Decimal = ZERO
    total_payable: Decimal = ZERO
    transaction_count: int = Field(default=0, ge=0)
    pending_debt_count: int = Field(default=0, ge=0)


def summarize(
    transactions: Iterable[Transaction],
    debts: Iterable[Debt],
) -> LedgerSummary:
    """Compute every headline figure for the current collections."""
    transactions = list(transactions)
    debts = list(debts)
    income = total_income(transactions)
    expense = total_expense(transactions)
    return LedgerSummary(
        total_income=income,
        total_expense=expense,
        balance=income - expense,
        total_receivable=total_receivable(debts),
        total_payable=total_payable(debts),
        transaction_count=len(transactions),
        pending_debt_count=len(pending_debts(debts)),
    )


# =============================================================================
# CHART SERIES
# =============================================================================

def income_expense_series(transactions: Iterable[Transaction]) -> list[dict]:
    """
    Series for the income vs expense bar chart.

    A single "Summary" point, matching the dashboard's overview chart.
    """
    transactions = list(transactions)
    return [
        {
            "name": "Summary",
            "Income": total_income(transactions),
            "Expense": total_expense(transactions),
        }
    ]


def expense_by_category(transactions: Iterable[Transaction]) -> list[tuple[str, Decimal]]:
    """
    Expense totals per category, largest first.

    Ties are broken by category name so the chart order is stable.
    """
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for t in transactions:
        if t.kind == TransactionKind.EXPENSE:
            totals[t.category] += t.amount
    return sorted(totals.items(), key=lambda item: (-item[1], item[0]))


def format_currency(amount: Decimal, symbol: str = "") -> str:
    """
    Two-decimal display with thousands separators.

    Negative amounts keep the sign in front of the symbol: -₹1,200.50
    """
    quantized = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    sign = "-" if quantized < 0 else ""
    return f"{sign}{symbol}{abs(quantized):,.2f}"
