"""Tests for the ledger calculator."""

from decimal import Decimal

from petty_cash.ledger.calculator import (
    calculate_report_stats,
    calculate_stats,
    pending_returns,
    total_borrowed,
    total_returned,
)
from petty_cash.ledger.sample_data import sample_transactions


class TestLedgerStats:
    """Dashboard figures."""

    def test_empty_ledger_reports_the_float(self):
        stats = calculate_stats([], Decimal("5000.00"))
        assert stats.total_borrowed == Decimal("0")
        assert stats.total_returned == Decimal("0")
        assert stats.pending_returns == Decimal("0")
        assert stats.current_balance == Decimal("5000.00")

    def test_sample_ledger(self):
        """150 + 75 + 200 borrowed, 75 back, 350 still out."""
        stats = calculate_stats(sample_transactions(), Decimal("5000.00"))
        assert stats.total_borrowed == Decimal("425.00")
        assert stats.total_returned == Decimal("75.00")
        assert stats.pending_returns == Decimal("350.00")
        assert stats.current_balance == Decimal("4650.00")

    def test_partial_repayment_counts_remaining(self, txn):
        items = [txn(amount="200", returned="50")]
        assert pending_returns(items) == Decimal("150")
        assert total_returned(items) == Decimal("50")

    def test_overpayment_does_not_make_pending_negative(self, txn):
        """Returned rows contribute nothing to pending."""
        items = [txn(id=1, amount="100", returned="130"), txn(id=2, amount="40")]
        assert pending_returns(items) == Decimal("40")
        assert total_returned(items) == Decimal("130")

    def test_balance_can_go_negative(self, txn):
        stats = calculate_stats([txn(amount="600")], Decimal("500"))
        assert stats.current_balance == Decimal("-100")

    def test_totals_accept_generators(self, txn):
        assert total_borrowed(t for t in [txn(amount="1.10"), txn(id=2, amount="2.20")]) == Decimal("3.30")


class TestReportStats:
    """Figures over a report subset."""

    def test_counts_by_status(self):
        stats = calculate_report_stats(sample_transactions())
        assert stats.total_transactions == 3
        assert stats.borrowed_count == 2
        assert stats.returned_count == 1
        assert stats.pending_returns == Decimal("350.00")

    def test_empty_subset(self):
        stats = calculate_report_stats([])
        assert stats.total_transactions == 0
        assert stats.total_borrowed == Decimal("0")
        assert stats.borrowed_count == 0
