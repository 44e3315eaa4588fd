"""Tests for report generation and rendering."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from petty_cash.ledger.sample_data import sample_transactions
from petty_cash.models.transaction import ReportType
from petty_cash.reports import (
    MissingCustomRangeError,
    ReportGenerator,
    export_filename,
    render_csv,
    render_report_html,
    report_filename,
)
from petty_cash.reports.renderers import format_day, format_money


NOW = datetime(2025, 7, 15, 9, 0)
TODAY = NOW.date()


@pytest.fixture
def generator():
    return ReportGenerator()


class TestReportGenerator:
    """Selecting and aggregating a period."""

    def test_month_report_over_sample_data(self, generator):
        data = generator.generate(sample_transactions(), "month", today=TODAY, now=NOW)
        assert data.period == "month"
        assert data.report_type == "summary"
        assert data.stats.total_transactions == 3
        assert data.stats.total_borrowed == Decimal("425.00")
        assert data.stats.returned_count == 1

    def test_report_table_is_latest_borrow_first(self, generator):
        data = generator.generate(sample_transactions(), "year", today=TODAY, now=NOW)
        assert [t.borrower for t in data.transactions] == [
            "John Smith",
            "Sarah Johnson",
            "Mike Wilson",
        ]

    def test_week_excludes_earlier_days(self, generator):
        # Week of Sun 13 Jul 2025 holds none of the samples
        data = generator.generate(sample_transactions(), "week", today=TODAY, now=NOW)
        assert data.stats.total_transactions == 0
        assert data.transactions == []

    def test_custom_range(self, generator):
        data = generator.generate(
            sample_transactions(),
            "custom",
            report_type=ReportType.DETAILED,
            date_from=date(2025, 7, 8),
            date_to=date(2025, 7, 9),
            now=NOW,
        )
        assert data.report_type == "detailed"
        assert sorted(t.id for t in data.transactions) == [2, 3]
        assert data.stats.pending_returns == Decimal("200.00")

    def test_custom_missing_bound(self, generator):
        with pytest.raises(MissingCustomRangeError):
            generator.generate(sample_transactions(), "custom", date_to=date(2025, 7, 9))

    def test_unknown_period_covers_everything(self, generator):
        data = generator.generate(sample_transactions(), "bogus", today=TODAY, now=NOW)
        assert data.period == "bogus"
        assert data.stats.total_transactions == 3
        assert data.date_range.end == NOW

    def test_input_is_not_mutated(self, generator):
        items = sample_transactions()
        before = [t.model_dump() for t in items]
        generator.generate(items, "year", today=TODAY, now=NOW)
        assert [t.model_dump() for t in items] == before


class TestHtmlReport:
    """Printable report output."""

    def test_contains_stats_and_rows(self, generator):
        data = generator.generate(sample_transactions(), "month", today=TODAY, now=NOW)
        html = render_report_html(data)
        assert "<h1>Petty Cash Report</h1>" in html
        assert "Rs425.00" in html
        assert "Jul 10, 2025" in html
        assert "RETURNED" in html
        assert "Period: MONTH" in html

    def test_user_text_is_escaped(self, generator, txn):
        items = [txn(borrower="<script>alert(1)</script>", borrow_date=date(2025, 7, 15))]
        data = generator.generate(items, "today", today=TODAY, now=NOW)
        html = render_report_html(data)
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_empty_period_message(self, generator):
        data = generator.generate([], "today", today=TODAY, now=NOW)
        assert "No transactions in this period" in render_report_html(data)

    def test_report_filename(self, generator):
        data = generator.generate([], "month", today=TODAY, now=NOW)
        assert report_filename(data) == "petty_cash_report_month_20250715_090000.html"


class TestCsvExport:
    """CSV backup of the whole ledger."""

    def test_header_plus_one_line_per_transaction(self):
        csv_text = render_csv(sample_transactions())
        lines = csv_text.split("\n")
        assert len(lines) == 4
        assert lines[0] == (
            '"ID","Borrow Date","Borrower","Amount","Returned Amount",'
            '"Status","Return Date","Contact","Description","Return Notes"'
        )
        assert lines[1] == (
            '"1","2025-07-10","John Smith","150.00","0.00","borrowed","",'
            '"john@example.com","Office supplies purchase",""'
        )
        assert lines[2].startswith('"2","2025-07-09","Sarah Johnson","75.00","75.00","returned","2025-07-11"')

    def test_empty_ledger_is_header_only(self):
        assert render_csv([]).count("\n") == 0

    def test_embedded_quotes_are_doubled(self, txn):
        csv_text = render_csv([txn(description='Bought "premium" paper')])
        assert '"Bought ""premium"" paper"' in csv_text

    def test_export_filename(self):
        assert export_filename(date(2025, 7, 15)) == "petty_cash_export_2025-07-15.csv"


class TestFormatting:
    def test_format_money(self):
        assert format_money(Decimal("1234.5")) == "Rs1,234.50"

    def test_format_day(self):
        assert format_day(date(2025, 7, 9)) == "Jul 9, 2025"
