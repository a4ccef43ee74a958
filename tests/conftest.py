"""
Shared fixtures.

Every test runs with no Gemini key and a temporary data directory, so no
test can reach the network or the user's real ledger.
"""

from datetime import date
from decimal import Decimal

import pytest

from fintrack.config import get_settings
from fintrack.models.records import (
    Debt,
    DebtDirection,
    DebtStatus,
    Transaction,
    TransactionKind,
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    monkeypatch.setenv("FINTRACK_STORAGE_DATA_DIR", str(tmp_path / "data"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_transaction():
    def _make(
        amount="100",
        kind=TransactionKind.EXPENSE,
        description="Groceries",
        category="Groceries",
        txn_date=date(2024, 1, 15),
        **extra,
    ) -> Transaction:
        return Transaction(
            amount=Decimal(amount),
            kind=kind,
            description=description,
            category=category,
            date=txn_date,
            **extra,
        )
    return _make


@pytest.fixture
def make_debt():
    def _make(
        amount="500",
        direction=DebtDirection.THEY_OWE_ME,
        status=DebtStatus.PENDING,
        person="Ravi",
        **extra,
    ) -> Debt:
        return Debt(
            amount=Decimal(amount),
            direction=direction,
            status=status,
            person=person,
            **extra,
        )
    return _make
