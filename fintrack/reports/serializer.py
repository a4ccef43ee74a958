"""
Report Serializer

Deterministic text encodings of the ledger:
1. JSON export (and import of JSON exports, including legacy ones)
2. CSV export
3. Printable summary

DESIGN DECISION: Everything here is a pure function of the collections.
Triggering a download or a print dialog belongs to the UI.

The CSV and JSON layouts match the files the browser version of the app
wrote, so existing exports stay readable and new exports stay comparable.
"""

import csv
import io
import json
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from pydantic import BaseModel, Field, ValidationError

from fintrack.ledger.aggregator import CENT, balance, pending_debts, total_expense
from fintrack.models.records import (
    AppData,
    Debt,
    DebtDirection,
    Transaction,
    format_amount,
)


CSV_HEADER = [
    "TYPE",
    "DATE",
    "DESCRIPTION",
    "AMOUNT",
    "CATEGORY/PERSON",
    "STATUS/TYPE",
]

TRANSACTION_STATUS = "COMPLETED"
DEBT_ROW_TYPE = "DEBT"
MISSING_DUE_DATE = "N/A"
DEFAULT_DEBT_DESCRIPTION = "Debt"

EXPORT_FILE_PREFIX = "fintrack_export_"


class ReportFormatError(Exception):
    """Imported text is not a valid ledger export."""
    pass


# =============================================================================
# JSON
# =============================================================================

def _iso_timestamp(moment: datetime) -> str:
    """ISO 8601 in UTC with millisecond precision and a Z suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_json(
    transactions: Sequence[Transaction],
    debts: Sequence[Debt],
    exported_at: Optional[datetime] = None,
) -> str:
    """
    Encode both collections verbatim plus the capture time.

    Decoding the result with from_json gives back equal collections.
    """
    exported_at = exported_at or datetime.now(timezone.utc)
    payload = {
        "transactions": [
            t.model_dump(mode="json", by_alias=True) for t in transactions
        ],
        "debts": [
            d.model_dump(mode="json", by_alias=True) for d in debts
        ],
        "exportedAt": _iso_timestamp(exported_at),
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def from_json(text: str) -> AppData:
    """
    Decode a JSON export into AppData.

    Accepts both the current layout and the browser version's
    ('expenses', 'type', OWES_ME/I_OWE, PAID). The exportedAt field is
    ignored.

    Raises:
        ReportFormatError: If the text is not JSON or the records are invalid
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise ReportFormatError(f"Not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise ReportFormatError("Export must be a JSON object")

    try:
        return AppData.model_validate(payload)
    except ValidationError as e:
        raise ReportFormatError(
            f"Export contains invalid records: {e.error_count()} error(s)"
        ) from e


# =============================================================================
# CSV
# =============================================================================

def transaction_row(transaction: Transaction) -> list[str]:
    return [
        transaction.kind.value,
        transaction.date.isoformat(),
        transaction.description,
        format_amount(transaction.amount),
        transaction.category,
        TRANSACTION_STATUS,
    ]


def debt_row(debt: Debt) -> list[str]:
    return [
        DEBT_ROW_TYPE,
        debt.due_date.isoformat() if debt.due_date else MISSING_DUE_DATE,
        debt.description or DEFAULT_DEBT_DESCRIPTION,
        format_amount(debt.amount),
        debt.person,
        f"{debt.direction.value} - {debt.status.value}",
    ]


def to_csv(transactions: Sequence[Transaction], debts: Sequence[Debt]) -> str:
    """
    Encode both collections as one CSV table.

    Transactions come first in their order, then debts in theirs.
    Fields are quoted only when they hold a comma, a quote or a line
    break; embedded quotes are doubled.
    """
    buffer = io.StringIO()
    writer = csv.writer(
        buffer,
        quoting=csv.QUOTE_MINIMAL,
        lineterminator="\n",
    )
    writer.writerow(CSV_HEADER)
    for transaction in transactions:
        writer.writerow(transaction_row(transaction))
    for debt in debts:
        writer.writerow(debt_row(debt))
    return buffer.getvalue()


def export_filename(extension: str, now: Optional[datetime] = None) -> str:
    """Download name: fintrack_export_<epoch millis>.<extension>"""
    now = now or datetime.now(timezone.utc)
    millis = int(now.timestamp() * 1000)
    return f"{EXPORT_FILE_PREFIX}{millis}.{extension.lstrip('.')}"


# =============================================================================
# PRINTABLE SUMMARY
# =============================================================================

def _fixed_two(amount: Decimal) -> str:
    return f"{amount.quantize(CENT, rounding=ROUND_HALF_UP):.2f}"


class PrintableReport(BaseModel):
    """
    Content of the printable summary.

    Only pending debts are listed; settled ones are history.
    """

    generated_on: date
    balance: str = Field(description="Balance with two fixed decimals")
    total_expense: str = Field(description="Total expense with two fixed decimals")
    transactions: list[Transaction] = Field(default_factory=list)
    pending_debts: list[Debt] = Field(default_factory=list)


def build_printable_report(
    transactions: Sequence[Transaction],
    debts: Sequence[Debt],
    generated_on: Optional[date] = None,
) -> PrintableReport:
    """Collect the figures and rows for the print view."""
    return PrintableReport(
        generated_on=generated_on or date.today(),
        balance=_fixed_two(balance(transactions)),
        total_expense=_fixed_two(total_expense(transactions)),
        transactions=list(transactions),
        pending_debts=pending_debts(debts),
    )


def _cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def render_printable_text(report: PrintableReport, currency_symbol: str = "") -> str:
    """Render the printable summary as Markdown."""
    lines = [
        "# Financial Report",
        "",
        f"Generated on {report.generated_on.strftime('%d/%m/%Y')}",
        "",
        "## Summary",
        "",
        f"- Total Balance: {currency_symbol}{report.balance}",
        f"- Monthly Expenses: {currency_symbol}{report.total_expense}",
        "",
        "## Transactions",
        "",
        "| Date | Description | Amount |",
        "| --- | --- | --- |",
    ]
    for t in report.transactions:
        lines.append(
            f"| {t.date.isoformat()} | {_cell(t.description)} "
            f"| {currency_symbol}{format_amount(t.amount)} |"
        )

    lines += [
        "",
        "## Outstanding Debts",
        "",
        "| Person | Type | Amount |",
        "| --- | --- | --- |",
    ]
    for d in report.pending_debts:
        label = "Owes Me" if d.direction == DebtDirection.THEY_OWE_ME else "I Owe"
        lines.append(
            f"| {_cell(d.person)} | {label} "
            f"| {currency_symbol}{format_amount(d.amount)} |"
        )

    return "\n".join(lines) + "\n"
