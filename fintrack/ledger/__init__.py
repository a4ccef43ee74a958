"""Ledger aggregation package."""

from fintrack.ledger.aggregator import (
    LedgerSummary,
    balance,
    expense_by_category,
    format_currency,
    income_expense_series,
    pending_debts,
    summarize,
    total_expense,
    total_income,
    total_payable,
    total_receivable,
)

__all__ = [
    "LedgerSummary",
    "balance",
    "expense_by_category",
    "format_currency",
    "income_expense_series",
    "pending_debts",
    "summarize",
    "total_expense",
    "total_income",
    "total_payable",
    "total_receivable",
]
