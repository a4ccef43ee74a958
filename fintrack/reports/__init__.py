"""Report export package."""

from fintrack.reports.serializer import (
    CSV_HEADER,
    PrintableReport,
    ReportFormatError,
    build_printable_report,
    export_filename,
    from_json,
    render_printable_text,
    to_csv,
    to_json,
)

__all__ = [
    "CSV_HEADER",
    "PrintableReport",
    "ReportFormatError",
    "build_printable_report",
    "export_filename",
    "from_json",
    "render_printable_text",
    "to_csv",
    "to_json",
]
