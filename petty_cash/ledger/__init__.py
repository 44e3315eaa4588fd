"""Ledger package: calculations, the transaction store and its errors."""

from petty_cash.ledger.calculator import (
    calculate_report_stats,
    calculate_stats,
    pending_returns,
    total_borrowed,
    total_returned,
)
from petty_cash.ledger.exceptions import (
    AdminAccessDeniedError,
    LedgerError,
    TransactionNotFoundError,
    TransactionValidationError,
)
from petty_cash.ledger.sample_data import sample_transactions
from petty_cash.ledger.store import TransactionStore

__all__ = [
    "AdminAccessDeniedError",
    "LedgerError",
    "TransactionNotFoundError",
    "TransactionStore",
    "TransactionValidationError",
    "calculate_report_stats",
    "calculate_stats",
    "pending_returns",
    "sample_transactions",
    "total_borrowed",
    "total_returned",
]
