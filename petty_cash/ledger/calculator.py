"""
Ledger Calculator

Pure functions turning a list of transactions into the aggregate figures
shown on the dashboard and in reports. Nothing here touches storage.
"""

from decimal import Decimal
from typing import Iterable

from petty_cash.models.transaction import (
    LedgerStats,
    ReportStats,
    Transaction,
    TransactionStatus,
)


ZERO = Decimal("0")


def total_borrowed(transactions: Iterable[Transaction]) -> Decimal:
    return sum((t.amount for t in transactions), ZERO)


def total_returned(transactions: Iterable[Transaction]) -> Decimal:
    return sum((t.returned_amount for t in transactions), ZERO)


def pending_returns(transactions: Iterable[Transaction]) -> Decimal:
    """Sum of what is still owed on advances that are not yet returned."""
    return sum(
        (
            t.amount - t.returned_amount
            for t in transactions
            if t.status == TransactionStatus.BORROWED
        ),
        ZERO,
    )


def calculate_stats(
    transactions: Iterable[Transaction],
    available_funds: Decimal,
) -> LedgerStats:
    """
    Compute the dashboard figures.

    current_balance is the administered float minus what is still out;
    an empty ledger therefore reports the float itself.
    """
    items = list(transactions)
    pending = pending_returns(items)
    return LedgerStats(
        total_borrowed=total_borrowed(items),
        total_returned=total_returned(items),
        pending_returns=pending,
        current_balance=available_funds - pending,
    )


def calculate_report_stats(transactions: Iterable[Transaction]) -> ReportStats:
    """Same figures restricted to a subset, plus status counts."""
    items = list(transactions)
    borrowed_count = sum(1 for t in items if t.status == TransactionStatus.BORROWED)
    return ReportStats(
        total_transactions=len(items),
        total_borrowed=total_borrowed(items),
        total_returned=total_returned(items),
        pending_returns=pending_returns(items),
        borrowed_count=borrowed_count,
        returned_count=len(items) - borrowed_count,
    )
