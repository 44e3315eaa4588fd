"""Presentation helpers shared by the UI."""

from petty_cash.presentation.view_models import (
    DashboardSummary,
    TransactionCard,
    avatar_color,
    borrower_initials,
    build_dashboard_summary,
    build_transaction_card,
    build_transaction_cards,
    format_currency,
    format_date,
)

__all__ = [
    "DashboardSummary",
    "TransactionCard",
    "avatar_color",
    "borrower_initials",
    "build_dashboard_summary",
    "build_transaction_card",
    "build_transaction_cards",
    "format_currency",
    "format_date",
]
