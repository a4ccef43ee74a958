"""
Main Orchestrator for FinTrack

This module ties together all the components and defines the flows for:
1. Record changes (validate -> mutate collections -> save -> audit)
2. Exports (JSON / CSV / printable summary)
3. AI insights (prompt -> summarizer -> advice or fallback)

DESIGN DECISION: LedgerBook exclusively owns the in-memory collections for
the session. The store is read once at startup and overwritten wholesale
after every change. A failed save is logged and the in-memory ledger stays
authoritative.

New records are prepended (newest first). Edits replace the record in its
current position and keep its id. Deletes need explicit confirmation.
"""

from typing import Optional

from fintrack.agents.advisor import InsightAdvisor, Summarizer
from fintrack.audit import AuditLogger
from fintrack.ledger.aggregator import LedgerSummary, summarize
from fintrack.models.records import AppData, Debt, Transaction
from fintrack.models.validation import ValidationResult
from fintrack.reports.serializer import (
    PrintableReport,
    build_printable_report,
    from_json,
    to_csv,
    to_json,
)
from fintrack.services.storage import (
    InMemoryGateway,
    JsonFileGateway,
    PersistenceGateway,
)
from fintrack.validation import RecordValidationError, RecordValidator


class RecordNotFoundError(Exception):
    """No record with the given id exists in the ledger."""
    pass


def _index_of(records: list, record_id: str) -> int:
    for index, record in enumerate(records):
        if record.id == record_id:
            return index
    raise RecordNotFoundError(f"No record with id {record_id}")


class LedgerBook:
    """
    Owns the transaction and debt collections for one session.

    Every mutating method saves the full ledger afterwards.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        validator: Optional[RecordValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._gateway = gateway
        self._validator = validator or RecordValidator()
        self._audit = audit_logger or AuditLogger()

        data = self._gateway.load()
        self._transactions: list[Transaction] = list(data.transactions)
        self._debts: list[Debt] = list(data.debts)
        self._last_save_ok = True
        self._audit.log_data_loaded(len(self._transactions), len(self._debts))

    # =========================================================================
    # Read access (copies; callers never mutate the ledger directly)
    # =========================================================================

    @property
    def transactions(self) -> list[Transaction]:
        return list(self._transactions)

    @property
    def debts(self) -> list[Debt]:
        return list(self._debts)

    @property
    def data(self) -> AppData:
        return AppData(transactions=self.transactions, debts=self.debts)

    @property
    def last_save_ok(self) -> bool:
        """False if the most recent save failed (the UI shows a warning)."""
        return self._last_save_ok

    def summary(self) -> LedgerSummary:
        """Fresh dashboard figures for the current collections."""
        return summarize(self._transactions, self._debts)

    def get_transaction(self, transaction_id: str) -> Transaction:
        return self._transactions[_index_of(self._transactions, transaction_id)]

    def get_debt(self, debt_id: str) -> Debt:
        return self._debts[_index_of(self._debts, debt_id)]

    def _persist(self) -> None:
        self._last_save_ok = self._gateway.save(self.data)
        if not self._last_save_ok:
            self._audit.log_save_failed("storage write failed")

    def _validated(self, entity_type: str, build, *args):
        try:
            return build(*args)
        except RecordValidationError as e:
            self._audit.log_validation_failed(
                entity_type,
                [issue.model_dump() for issue in e.issues],
            )
            raise

    # =========================================================================
    # Transactions
    # =========================================================================

    def add_transaction(self, form: dict) -> tuple[Transaction, ValidationResult]:
        """
        Validate and prepend a new transaction.

        Raises:
            RecordValidationError: If the form is invalid (ledger unchanged)
        """
        transaction, result = self._validated(
            "transaction", self._validator.build_transaction, form
        )
        self._transactions.insert(0, transaction)
        self._persist()
        self._audit.log_transaction_added(
            transaction.id, transaction.kind.value, str(transaction.amount)
        )
        return transaction, result

    def update_transaction(
        self,
        transaction_id: str,
        form: dict,
    ) -> tuple[Transaction, ValidationResult]:
        """
        Replace a transaction's fields in place, keeping its id and position.

        Raises:
            RecordNotFoundError: If no transaction has this id
            RecordValidationError: If the form is invalid (ledger unchanged)
        """
        index = _index_of(self._transactions, transaction_id)
        transaction, result = self._validated(
            "transaction",
            self._validator.build_transaction,
            form,
            self._transactions[index],
        )
        self._transactions[index] = transaction
        self._persist()
        self._audit.log_transaction_updated(transaction.id)
        return transaction, result

    def delete_transaction(self, transaction_id: str, confirmed: bool = False) -> bool:
        """
        Remove exactly one transaction.

        Without confirmation, or for an unknown id, nothing changes.

        Returns:
            True if a transaction was removed
        """
        if not confirmed:
            self._audit.log_delete_cancelled("transaction", transaction_id)
            return False
        try:
            index = _index_of(self._transactions, transaction_id)
        except RecordNotFoundError:
            return False

        del self._transactions[index]
        self._persist()
        self._audit.log_transaction_deleted(transaction_id)
        return True

    # =========================================================================
    # Debts
    # =========================================================================

    def add_debt(self, form: dict) -> tuple[Debt, ValidationResult]:
        """
        Validate and prepend a new debt (always PENDING).

        Raises:
            RecordValidationError: If the form is invalid (ledger unchanged)
        """
        debt, result = self._validated("debt", self._validator.build_debt, form)
        self._debts.insert(0, debt)
        self._persist()
        self._audit.log_debt_added(debt.id, debt.direction.value, str(debt.amount))
        return debt, result

    def update_debt(self, debt_id: str, form: dict) -> tuple[Debt, ValidationResult]:
        """
        Replace a debt's fields in place. Its id and status are kept.

        Raises:
            RecordNotFoundError: If no debt has this id
            RecordValidationError: If the form is invalid (ledger unchanged)
        """
        index = _index_of(self._debts, debt_id)
        debt, result = self._validated(
            "debt", self._validator.build_debt, form, self._debts[index]
        )
        self._debts[index] = debt
        self._persist()
        self._audit.log_debt_updated(debt.id)
        return debt, result

    def toggle_debt_status(self, debt_id: str) -> Debt:
        """
        Flip a debt between PENDING and SETTLED.

        Raises:
            RecordNotFoundError: If no debt has this id
        """
        index = _index_of(self._debts, debt_id)
        current = self._debts[index]
        toggled = current.model_copy(update={"status": current.status.toggled()})
        self._debts[index] = toggled
        self._persist()
        self._audit.log_debt_status_toggled(toggled.id, toggled.status.value)
        return toggled

    def delete_debt(self, debt_id: str, confirmed: bool = False) -> bool:
        """
        Remove exactly one debt.

        Without confirmation, or for an unknown id, nothing changes.
        """
        if not confirmed:
            self._audit.log_delete_cancelled("debt", debt_id)
            return False
        try:
            index = _index_of(self._debts, debt_id)
        except RecordNotFoundError:
            return False

        del self._debts[index]
        self._persist()
        self._audit.log_debt_deleted(debt_id)
        return True

    # =========================================================================
    # Import / export
    # =========================================================================

    def export_json(self) -> str:
        """JSON export of the current ledger. Building it is not logged."""
        return to_json(self._transactions, self._debts)

    def export_csv(self) -> str:
        """CSV export of the current ledger. Building it is not logged."""
        return to_csv(self._transactions, self._debts)

    def record_export(self, export_format: str) -> None:
        """Log that an export was actually handed to the user."""
        self._audit.log_export_generated(
            export_format, len(self._transactions) + len(self._debts)
        )

    def printable_report(self) -> PrintableReport:
        return build_printable_report(self._transactions, self._debts)

    def import_json(self, text: str, confirmed: bool = False) -> bool:
        """
        Replace the whole ledger with the contents of a JSON export.

        Replacing discards current records, so it needs confirmation.

        Raises:
            ReportFormatError: If the text is not a valid export
        """
        data = from_json(text)
        if not confirmed:
            self._audit.log_import_cancelled(len(data.transactions), len(data.debts))
            return False

        self._transactions = list(data.transactions)
        self._debts = list(data.debts)
        self._persist()
        self._audit.log_import_completed(len(self._transactions), len(self._debts))
        return True


class InsightFlow:
    """
    Runs the advisor against the current ledger.

    The advisor enforces the single in-flight request rule; the UI reads
    `busy` to disable its button.
    """

    def __init__(self, ledger: LedgerBook, advisor: InsightAdvisor):
        self._ledger = ledger
        self._advisor = advisor

    @property
    def busy(self) -> bool:
        return self._advisor.busy

    @property
    def is_configured(self) -> bool:
        return self._advisor.is_configured

    async def analyze(self) -> Optional[str]:
        """Advice text, the fallback message, or None if a request is running."""
        return await self._advisor.generate_insights(
            self._ledger.transactions,
            self._ledger.debts,
        )


def create_app_components(
    use_storage: bool = True,
    summarizer: Optional[Summarizer] = None,
) -> tuple[LedgerBook, InsightFlow, AuditLogger]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Persist to the local data directory. When False the
                     ledger lives in memory only.
        summarizer: Text-generation capability. Defaults to Gemini.

    Returns:
        Tuple of (LedgerBook, InsightFlow, AuditLogger)
    """
    audit_logger = AuditLogger()

    gateway: PersistenceGateway
    if use_storage:
        gateway = JsonFileGateway()
    else:
        gateway = InMemoryGateway()

    if summarizer is None:
        from fintrack.agents.gemini import GeminiSummarizer
        summarizer = GeminiSummarizer()

    ledger = LedgerBook(gateway=gateway, audit_logger=audit_logger)
    advisor = InsightAdvisor(summarizer=summarizer, audit_logger=audit_logger)
    return ledger, InsightFlow(ledger, advisor), audit_logger
