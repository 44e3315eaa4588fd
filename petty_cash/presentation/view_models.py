"""
View Models

Pure transforms from ledger data to what the UI draws. Nothing here
touches storage or Streamlit, so the dashboard can be tested without a
browser.
"""

from decimal import Decimal
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from petty_cash.models.transaction import (
    LedgerStats,
    Transaction,
    TransactionStatus,
)
from petty_cash.queries.filters import sort_for_display
from petty_cash.reports.renderers import format_day


def format_currency(amount: Decimal, currency: str = "Rs") -> str:
    """Rs 5,000.00"""
    return f"{currency} {amount:,.2f}"


def format_date(value) -> str:
    return format_day(value)


def borrower_initials(name: Optional[str]) -> str:
    """Up to two initials, "?" when there is no name."""
    if not name or not name.strip():
        return "?"
    letters = [word[0] for word in name.split(" ") if word]
    return "".join(letters).upper()[:2]


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value >= 0x80000000 else value


def avatar_color(name: Optional[str]) -> str:
    """
    Deterministic #rrggbb colour for a name.

    Same 32-bit rolling hash the browser front end used, so a borrower
    keeps the colour they already had. Operates on UTF-16 code units.
    """
    text = name or ""
    code_units = text.encode("utf-16-le")
    hash_value = 0
    for i in range(0, len(code_units), 2):
        unit = code_units[i] | (code_units[i + 1] << 8)
        hash_value = unit + _to_int32(_to_int32(hash_value) << 5) - hash_value

    hash_value = _to_int32(hash_value)
    channels = [(hash_value >> (i * 8)) & 0xFF for i in range(3)]
    return "#" + "".join(f"{c:02x}" for c in channels)


class TransactionCard(BaseModel):
    """One entry of the transaction list."""

    id: int
    borrower: str
    initials: str
    avatar_color: str
    amount_label: str
    status: TransactionStatus
    status_label: str
    borrow_date_label: str
    return_date_label: Optional[str] = None
    returned_amount_label: Optional[str] = Field(
        default=None,
        description="Only set once something was repaid"
    )
    contact: Optional[str] = None
    description: Optional[str] = None
    return_notes: Optional[str] = None
    attachment: Optional[str] = None
    can_return: bool = False


def build_transaction_card(transaction: Transaction, currency: str = "Rs") -> TransactionCard:
    is_borrowed = transaction.status == TransactionStatus.BORROWED
    return TransactionCard(
        id=transaction.id,
        borrower=transaction.borrower,
        initials=borrower_initials(transaction.borrower),
        avatar_color=avatar_color(transaction.borrower),
        amount_label=format_currency(transaction.amount, currency),
        status=transaction.status,
        status_label="Borrowed" if is_borrowed else "Returned",
        borrow_date_label=format_date(transaction.borrow_date),
        return_date_label=(
            format_date(transaction.return_date) if transaction.return_date else None
        ),
        returned_amount_label=(
            format_currency(transaction.returned_amount, currency)
            if transaction.returned_amount > 0
            else None
        ),
        contact=transaction.contact,
        description=transaction.description,
        return_notes=transaction.return_notes,
        attachment=transaction.attachment,
        can_return=is_borrowed,
    )


def build_transaction_cards(
    transactions: Iterable[Transaction],
    currency: str = "Rs",
) -> list[TransactionCard]:
    """Cards for the list, newest recorded first."""
    return [build_transaction_card(t, currency) for t in sort_for_display(transactions)]


class DashboardSummary(BaseModel):
    """The stat tiles at the top of the dashboard."""

    available_funds: str
    total_borrowed: str
    total_returned: str
    pending_returns: str
    current_balance: str
    transaction_count: int
    open_count: int


def build_dashboard_summary(
    stats: LedgerStats,
    transactions: Iterable[Transaction],
    currency: str = "Rs",
) -> DashboardSummary:
    items = list(transactions)
    # current_balance is available_funds less pending_returns
    available = stats.current_balance + stats.pending_returns
    return DashboardSummary(
        available_funds=format_currency(available, currency),
        total_borrowed=format_currency(stats.total_borrowed, currency),
        total_returned=format_currency(stats.total_returned, currency),
        pending_returns=format_currency(stats.pending_returns, currency),
        current_balance=format_currency(stats.current_balance, currency),
        transaction_count=len(items),
        open_count=sum(1 for t in items if t.status == TransactionStatus.BORROWED),
    )
