"""
Transaction Filter Engine

DESIGN DECISION: Filtering is a pure predicate over the in-memory list.
All criteria are conjunctive and an absent criterion never excludes
anything. Relative order of the input is preserved; display ordering is
a separate step (sort_for_display) so callers choose when to re-sort.
"""

from datetime import date
from typing import Iterable, Optional

from petty_cash.models.transaction import (
    StatusFilter,
    Transaction,
    TransactionFilter,
)


def matches(transaction: Transaction, criteria: TransactionFilter) -> bool:
    """Check a single transaction against every criterion."""
    if criteria.status != StatusFilter.ALL:
        if transaction.status.value != criteria.status.value:
            return False

    if criteria.date_from and transaction.borrow_date < criteria.date_from:
        return False

    if criteria.date_to and transaction.borrow_date > criteria.date_to:
        return False

    if criteria.borrower:
        if criteria.borrower.lower() not in transaction.borrower.lower():
            return False

    return True


def filter_transactions(
    transactions: Iterable[Transaction],
    criteria: Optional[TransactionFilter] = None,
) -> list[Transaction]:
    """
    Return the transactions satisfying all criteria, in input order.

    Args:
        transactions: Transactions to filter
        criteria: Filter criteria; None means no constraint

    Returns:
        List of matching transactions
    """
    if criteria is None:
        return list(transactions)
    return [t for t in transactions if matches(t, criteria)]


def sort_for_display(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Newest first by creation time."""
    return sorted(transactions, key=lambda t: t.created_at, reverse=True)


def sort_for_report(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Latest borrow date first; ties broken by creation time."""
    return sorted(
        transactions,
        key=lambda t: (t.borrow_date, t.created_at),
        reverse=True,
    )


def date_range_description(
    date_from: Optional[date],
    date_to: Optional[date],
) -> str:
    """Format date range for display above a filtered list."""
    if date_from and date_to:
        if date_from == date_to:
            return f"on {date_from.strftime('%d %b %Y')}"
        elif date_from.month == date_to.month and date_from.year == date_to.year:
            return f"in {date_from.strftime('%B %Y')}"
        elif date_from.year == date_to.year:
            return f"from {date_from.strftime('%b')} to {date_to.strftime('%b %Y')}"
        else:
            return f"from {date_from.strftime('%b %Y')} to {date_to.strftime('%b %Y')}"
    elif date_from:
        return f"from {date_from.strftime('%d %b %Y')}"
    elif date_to:
        return f"until {date_to.strftime('%d %b %Y')}"
    return ""


def describe_filter(criteria: TransactionFilter) -> str:
    """Human-readable summary of active criteria, e.g. for an empty-state hint."""
    parts = []
    if criteria.status != StatusFilter.ALL:
        parts.append(f"status: {criteria.status.value}")
    if criteria.borrower:
        parts.append(f"borrower: {criteria.borrower}")
    if criteria.date_from or criteria.date_to:
        parts.append(date_range_description(criteria.date_from, criteria.date_to))
    return " | ".join(parts) if parts else "All transactions"
