"""Transaction filtering package."""

from petty_cash.queries.filters import (
    describe_filter,
    filter_transactions,
    matches,
    sort_for_display,
    sort_for_report,
)

__all__ = [
    "describe_filter",
    "filter_transactions",
    "matches",
    "sort_for_display",
    "sort_for_report",
]
