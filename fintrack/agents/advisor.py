"""
Insight Advisor

Builds a bounded prompt from the most recent records and hands it to an
injected Summarizer (an LLM behind an interface).

CRITICAL BOUNDARIES:
- The advisor NEVER computes financial figures; the ledger does that
- The advisor NEVER mutates the record collections
- The advisor NEVER raises to the caller; every failure becomes the
  fixed fallback message
- Only ONE request may be in flight; overlapping requests are ignored,
  not queued, and a started request always runs to completion

The advisor depends on the Summarizer interface only, so the rest of the
app is testable without network access or an API key.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from fintrack.audit import AuditLogger
from fintrack.config import get_settings
from fintrack.ledger.aggregator import pending_debts
from fintrack.models.records import Debt, Transaction, format_amount


FALLBACK_MESSAGE = "Unable to generate AI insights. Please check your API configuration."


class Summarizer(ABC):
    """
    Text-generation capability: prompt in, advisory text out.

    Implementations may fail by raising; the advisor handles it.
    """

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """True when credentials are present and a call can be attempted."""
        pass

    @abstractmethod
    async def summarize(self, prompt: str) -> str:
        """Generate text for the prompt."""
        pass


class SummarizerError(Exception):
    """Base exception for summarizer failures."""
    pass


class SummarizerNotConfiguredError(SummarizerError):
    """No credentials available; no call was made."""
    pass


class InsightAdvisor:
    """
    Turns the ledger into a prompt and returns the model's advice.

    Usage:
        advisor = InsightAdvisor(GeminiSummarizer())
        text = await advisor.generate_insights(transactions, debts)
    """

    def __init__(
        self,
        summarizer: Optional[Summarizer] = None,
        audit_logger: Optional[AuditLogger] = None,
        transaction_limit: Optional[int] = None,
        currency_symbol: Optional[str] = None,
        currency_name: Optional[str] = None,
    ):
        app_settings = get_settings().app
        self._summarizer = summarizer
        self._audit = audit_logger or AuditLogger()
        self._transaction_limit = (
            transaction_limit if transaction_limit is not None
            else app_settings.insight_transaction_limit
        )
        self._currency_symbol = (
            currency_symbol if currency_symbol is not None else app_settings.currency_symbol
        )
        self._currency_name = currency_name or app_settings.currency_name
        self._busy = False

    @property
    def busy(self) -> bool:
        """True while a request is outstanding; the UI disables its button."""
        return self._busy

    @property
    def is_configured(self) -> bool:
        return self._summarizer is not None and self._summarizer.is_configured

    def select_transactions(self, transactions: Sequence[Transaction]) -> list[Transaction]:
        """The first N transactions in collection order (newest first)."""
        return list(transactions[: self._transaction_limit])

    def build_prompt(
        self,
        transactions: Sequence[Transaction],
        debts: Sequence[Debt],
    ) -> str:
        """Build the advisory prompt from recent transactions and pending debts."""
        symbol = self._currency_symbol

        transaction_lines = "\n".join(
            f"{t.date.isoformat()}: {t.kind.value} - {t.description} "
            f"({symbol}{format_amount(t.amount)}) [{t.category}]"
            for t in self.select_transactions(transactions)
        )
        debt_lines = "\n".join(
            f"{d.direction.value}: {symbol}{format_amount(d.amount)} involved with {d.person}"
            for d in pending_debts(debts)
        )

        return f"""Analyze the following financial data snippet (Currency: {self._currency_name} {symbol}).

Expenses/Income (Last {self._transaction_limit}):
{transaction_lines or "No transactions recorded."}

Active Debts:
{debt_lines or "No pending debts."}

Please provide 3 brief, actionable bullet points of financial advice or observation based on this data.
Keep the tone professional yet encouraging. Focus on spending habits or debt management.
Return plain text formatted with bullet points."""

    async def generate_insights(
        self,
        transactions: Sequence[Transaction],
        debts: Sequence[Debt],
    ) -> Optional[str]:
        """
        Ask the model for advice on the current ledger.

        Returns:
            The model's text verbatim, the fallback message on any failure,
            or None if another request is already in flight (ignored)
        """
        if self._busy:
            self._audit.log_insights_ignored()
            return None

        self._busy = True
        try:
            return await self._generate(transactions, debts)
        finally:
            self._busy = False

    async def _generate(
        self,
        transactions: Sequence[Transaction],
        debts: Sequence[Debt],
    ) -> str:
        # Missing credentials fail fast, before any network call
        if not self.is_configured:
            self._audit.log_insights_failed("API key not configured")
            return FALLBACK_MESSAGE

        self._audit.log_insights_requested(
            len(self.select_transactions(transactions)),
            len(pending_debts(debts)),
        )
        prompt = self.build_prompt(transactions, debts)

        try:
            text = await self._summarizer.summarize(prompt)
        except Exception as e:
            self._audit.log_insights_failed(f"{type(e).__name__}: {e}")
            return FALLBACK_MESSAGE

        if not text or not text.strip():
            self._audit.log_insights_failed("empty response")
            return FALLBACK_MESSAGE

        self._audit.log_insights_generated(len(text))
        return text
