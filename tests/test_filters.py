"""Tests for the transaction filter engine."""

from datetime import date, datetime, timezone

import pytest

from petty_cash.ledger.sample_data import sample_transactions
from petty_cash.models.transaction import StatusFilter, TransactionFilter
from petty_cash.queries import (
    describe_filter,
    filter_transactions,
    sort_for_display,
    sort_for_report,
)


def borrowers(transactions):
    return [t.borrower for t in transactions]


class TestFilterTransactions:
    """Conjunctive filtering over the sample ledger."""

    def test_no_criteria_returns_everything_in_order(self):
        items = sample_transactions()
        assert filter_transactions(items) == items
        assert filter_transactions(items, TransactionFilter()) == items

    def test_status_borrowed(self):
        result = filter_transactions(
            sample_transactions(), TransactionFilter(status=StatusFilter.BORROWED)
        )
        assert borrowers(result) == ["John Smith", "Mike Wilson"]

    def test_status_returned(self):
        result = filter_transactions(sample_transactions(), TransactionFilter(status="returned"))
        assert borrowers(result) == ["Sarah Johnson"]

    def test_date_bounds_are_inclusive(self):
        result = filter_transactions(
            sample_transactions(),
            TransactionFilter(date_from=date(2025, 7, 9), date_to=date(2025, 7, 10)),
        )
        assert borrowers(result) == ["John Smith", "Sarah Johnson"]

    def test_borrower_substring_is_case_insensitive(self):
        result = filter_transactions(sample_transactions(), TransactionFilter(borrower="SMI"))
        assert borrowers(result) == ["John Smith"]

    def test_criteria_combine(self):
        result = filter_transactions(
            sample_transactions(),
            TransactionFilter(status="borrowed", borrower="o", date_to=date(2025, 7, 9)),
        )
        assert borrowers(result) == ["Mike Wilson"]

    def test_malformed_date_is_no_constraint(self):
        result = filter_transactions(sample_transactions(), TransactionFilter(date_from="07/10"))
        assert len(result) == 3

    def test_no_match(self):
        assert filter_transactions(sample_transactions(), TransactionFilter(borrower="Zed")) == []

    @pytest.mark.parametrize("criteria", [
        TransactionFilter(),
        TransactionFilter(status=StatusFilter.BORROWED),
        TransactionFilter(status=StatusFilter.RETURNED),
        TransactionFilter(date_from=date(2025, 7, 9), date_to=date(2025, 7, 10)),
        TransactionFilter(borrower="jo"),
        TransactionFilter(status=StatusFilter.BORROWED, date_from=date(2025, 7, 10), borrower="smith"),
    ])
    def test_filtering_twice_changes_nothing(self, criteria):
        once = filter_transactions(sample_transactions(), criteria)
        assert filter_transactions(once, criteria) == once


class TestOrdering:
    """Display and report ordering."""

    def test_display_is_newest_created_first(self):
        assert borrowers(sort_for_display(sample_transactions())) == [
            "John Smith",
            "Sarah Johnson",
            "Mike Wilson",
        ]

    def test_report_ties_broken_by_creation_time(self, txn):
        early = txn(id=1, borrower="Early", created_at=datetime(2025, 7, 1, tzinfo=timezone.utc))
        late = txn(id=2, borrower="Late", created_at=datetime(2025, 7, 2, tzinfo=timezone.utc))
        older = txn(id=3, borrower="Older", borrow_date=date(2025, 6, 1))
        assert borrowers(sort_for_report([early, older, late])) == ["Late", "Early", "Older"]


class TestDescribeFilter:
    """Human-readable filter summaries."""

    def test_no_filter(self):
        assert describe_filter(TransactionFilter()) == "All transactions"

    def test_status_and_month(self):
        text = describe_filter(TransactionFilter(
            status="borrowed",
            date_from=date(2025, 7, 1),
            date_to=date(2025, 7, 31),
        ))
        assert text == "status: borrowed | in July 2025"
