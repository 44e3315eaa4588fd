"""
Report Renderers

Two outputs:
1. A printable HTML document for a ReportData
2. A CSV export of the full transaction history

DESIGN DECISION: The CSV export always covers the whole ledger in store
order, independent of any report period or list filter. A report answers
"what happened in this period", an export is a backup of everything.

All user-entered text is HTML-escaped, and embedded quotes in CSV
fields are doubled.
"""

import csv
import io
from datetime import date, datetime
from decimal import Decimal
from html import escape
from typing import Iterable, Optional

from petty_cash.models.transaction import ReportData, Transaction


CSV_HEADERS = [
    "ID",
    "Borrow Date",
    "Borrower",
    "Amount",
    "Returned Amount",
    "Status",
    "Return Date",
    "Contact",
    "Description",
    "Return Notes",
]

REPORT_STYLE = """
    body { font-family: Arial, sans-serif; margin: 20px; }
    .header { text-align: center; margin-bottom: 30px; }
    .stats { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 20px; margin-bottom: 30px; }
    .stat-card { background: #f8f9fa; padding: 15px; border-radius: 8px; text-align: center; }
    .stat-value { font-size: 24px; font-weight: bold; color: #333; }
    .stat-label { font-size: 12px; color: #666; text-transform: uppercase; }
    table { width: 100%; border-collapse: collapse; margin-top: 20px; }
    th, td { border: 1px solid #ddd; padding: 8px; text-align: left; }
    th { background-color: #f2f2f2; font-weight: bold; }
    .status-borrowed { color: #dc3545; }
    .status-returned { color: #28a745; }
    @media print { body { margin: 0; } }
"""


def format_money(amount: Decimal, currency: str = "Rs") -> str:
    return f"{currency}{amount:,.2f}"


def format_day(value: date) -> str:
    """Jul 10, 2025"""
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def _transaction_row(t: Transaction, currency: str) -> str:
    return (
        "<tr>"
        f"<td>{format_day(t.borrow_date)}</td>"
        f"<td>{escape(t.borrower)}</td>"
        f"<td>{format_money(t.amount, currency)}</td>"
        f"<td>{format_money(t.returned_amount, currency)}</td>"
        f'<td class="status-{t.status.value}">{t.status.value.upper()}</td>'
        f"<td>{format_day(t.return_date) if t.return_date else '-'}</td>"
        f"<td>{escape(t.description) if t.description else '-'}</td>"
        "</tr>"
    )


def render_report_html(data: ReportData, currency: str = "Rs") -> str:
    """Render a self-contained printable HTML report."""
    stats = data.stats
    cards = [
        (str(stats.total_transactions), "Total Transactions"),
        (format_money(stats.total_borrowed, currency), "Total Borrowed"),
        (format_money(stats.total_returned, currency), "Total Returned"),
        (format_money(stats.pending_returns, currency), "Pending Returns"),
    ]
    cards_html = "\n".join(
        f'<div class="stat-card"><div class="stat-value">{value}</div>'
        f'<div class="stat-label">{label}</div></div>'
        for value, label in cards
    )
    rows_html = "\n".join(_transaction_row(t, currency) for t in data.transactions)
    if not rows_html:
        rows_html = '<tr><td colspan="7">No transactions in this period</td></tr>'

    start = data.date_range.start.strftime("%a %b %d %Y")
    end = data.date_range.end.strftime("%a %b %d %Y")
    generated = data.generated_at.strftime("%d/%m/%Y, %H:%M:%S")

    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>Petty Cash Report</title>
<style>{REPORT_STYLE}</style>
</head>
<body>
<div class="header">
<h1>Petty Cash Report</h1>
<p>Report Type: {escape(data.report_type.upper())}</p>
<p>Period: {escape(data.period.upper())}</p>
<p>From: {start} To: {end}</p>
<p>Generated on: {generated}</p>
</div>
<div class="stats">
{cards_html}
</div>
<table>
<thead>
<tr><th>Date</th><th>Borrower</th><th>Amount</th><th>Returned Amount</th><th>Status</th><th>Return Date</th><th>Description</th></tr>
</thead>
<tbody>
{rows_html}
</tbody>
</table>
</body>
</html>
"""


def transaction_to_csv_row(t: Transaction) -> list[str]:
    return [
        str(t.id),
        t.borrow_date.isoformat(),
        t.borrower,
        f"{t.amount:.2f}",
        f"{t.returned_amount:.2f}",
        t.status.value,
        t.return_date.isoformat() if t.return_date else "",
        t.contact or "",
        t.description or "",
        t.return_notes or "",
    ]


def render_csv(transactions: Iterable[Transaction]) -> str:
    """Header plus one fully quoted row per transaction, newline separated."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for t in transactions:
        writer.writerow(transaction_to_csv_row(t))
    return buffer.getvalue().rstrip("\n")


def export_filename(day: Optional[date] = None) -> str:
    day = day or datetime.now().date()
    return f"petty_cash_export_{day.isoformat()}.csv"


def report_filename(data: ReportData) -> str:
    return f"petty_cash_report_{data.period}_{data.generated_at.strftime('%Y%m%d_%H%M%S')}.html"
