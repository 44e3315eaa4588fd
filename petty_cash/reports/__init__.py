"""Report generation package."""

from petty_cash.reports.generator import ReportGenerator, transactions_in_range
from petty_cash.reports.periods import (
    InvalidPeriodError,
    MissingCustomRangeError,
    parse_period,
    resolve_date_range,
)
from petty_cash.reports.renderers import (
    export_filename,
    render_csv,
    render_report_html,
    report_filename,
)

__all__ = [
    "InvalidPeriodError",
    "MissingCustomRangeError",
    "ReportGenerator",
    "export_filename",
    "parse_period",
    "render_csv",
    "render_report_html",
    "report_filename",
    "resolve_date_range",
    "transactions_in_range",
]
