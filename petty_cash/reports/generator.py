"""
Report Generator

Selects the transactions whose borrow date falls inside a resolved
period and computes the report figures over that subset.
"""

from datetime import date, datetime
from typing import Iterable, Optional, Union

from petty_cash.ledger.calculator import calculate_report_stats
from petty_cash.models.transaction import (
    DateRange,
    ReportData,
    ReportPeriod,
    ReportType,
    Transaction,
)
from petty_cash.queries.filters import sort_for_report
from petty_cash.reports.periods import SUNDAY, resolve_date_range


def transactions_in_range(
    transactions: Iterable[Transaction],
    date_range: DateRange,
) -> list[Transaction]:
    """Transactions borrowed inside the range, in input order."""
    return [t for t in transactions if date_range.contains(t.borrow_date)]


class ReportGenerator:
    """
    Builds ReportData for a period.

    Pure request/response: the generator holds only the week-start
    preference and never mutates the transactions it is given.
    """

    def __init__(self, week_start: int = SUNDAY):
        self._week_start = week_start

    def generate(
        self,
        transactions: Iterable[Transaction],
        period: Union[str, ReportPeriod],
        report_type: Union[str, ReportType] = ReportType.SUMMARY,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        today: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> ReportData:
        """
        Generate report data for a period.

        Raises:
            MissingCustomRangeError: For a custom period without both bounds
        """
        date_range = resolve_date_range(
            period,
            date_from=date_from,
            date_to=date_to,
            today=today,
            now=now,
            week_start=self._week_start,
        )
        selected = transactions_in_range(transactions, date_range)

        return ReportData(
            report_type=_tag(report_type),
            period=_tag(period),
            date_range=date_range,
            stats=calculate_report_stats(selected),
            transactions=sort_for_report(selected),
            generated_at=now or datetime.now(),
        )


def _tag(value: object) -> str:
    if isinstance(value, (ReportPeriod, ReportType)):
        return value.value
    return str(value)
