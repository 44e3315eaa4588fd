"""
Report Period Resolution

Turns a period tag (today, week, month, quarter, year, custom) into a
concrete inclusive [start, end] range of local wall-clock instants.
Ranges end at 23:59:59 of their last day.

DESIGN DECISION: An unrecognized tag is recoverable. parse_period raises
InvalidPeriodError, and resolve_date_range catches it and falls back to
the all-time range [1970-01-01 00:00:00, now].
"""

import calendar
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

import structlog

from petty_cash.models.transaction import DateRange, ReportPeriod


logger = structlog.get_logger(__name__)

END_OF_DAY = time(23, 59, 59)
EPOCH = datetime(1970, 1, 1)

# Python weekday number of Sunday
SUNDAY = 6


class InvalidPeriodError(ValueError):
    """Unrecognized report period tag."""

    def __init__(self, period: object):
        self.period = period
        super().__init__(f"Unknown report period: {period!r}")


class MissingCustomRangeError(ValueError):
    """A custom period was requested without both bounds."""
    pass


def parse_period(period: Union[str, ReportPeriod]) -> ReportPeriod:
    """Parse a period tag, case-insensitively."""
    if isinstance(period, ReportPeriod):
        return period
    try:
        return ReportPeriod(str(period).strip().lower())
    except ValueError:
        raise InvalidPeriodError(period)


def _day_range(first: date, last: date) -> DateRange:
    return DateRange(
        start=datetime.combine(first, time.min),
        end=datetime.combine(last, END_OF_DAY),
    )


def _last_day_of_month(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def week_range(today: date, week_start: int = SUNDAY) -> DateRange:
    """Seven days starting on the most recent `week_start` weekday."""
    offset = (today.weekday() - week_start) % 7
    first = today - timedelta(days=offset)
    return _day_range(first, first + timedelta(days=6))


def month_range(today: date) -> DateRange:
    first = today.replace(day=1)
    return _day_range(first, _last_day_of_month(today.year, today.month))


def quarter_range(today: date) -> DateRange:
    first_month = (today.month - 1) // 3 * 3 + 1
    last_month = first_month + 2
    return _day_range(
        date(today.year, first_month, 1),
        _last_day_of_month(today.year, last_month),
    )


def year_range(today: date) -> DateRange:
    return _day_range(date(today.year, 1, 1), date(today.year, 12, 31))


def custom_range(date_from: Optional[date], date_to: Optional[date]) -> DateRange:
    """
    Both bounds are inclusive whole days.

    Raises:
        MissingCustomRangeError: If either bound is missing
    """
    if date_from is None or date_to is None:
        raise MissingCustomRangeError("Custom reports need both a from and a to date")
    return _day_range(date_from, date_to)


def all_time_range(now: Optional[datetime] = None) -> DateRange:
    return DateRange(start=EPOCH, end=now or datetime.now())


def resolve_date_range(
    period: Union[str, ReportPeriod],
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    today: Optional[date] = None,
    now: Optional[datetime] = None,
    week_start: int = SUNDAY,
) -> DateRange:
    """
    Resolve a period tag to a concrete range.

    Args:
        period: Period tag
        date_from: Start date, used only for custom periods
        date_to: End date, used only for custom periods
        today: Reference day (defaults to the local date)
        now: Reference instant for the all-time fallback
        week_start: Weekday number weeks start on (Monday is 0)

    Returns:
        The inclusive date range
    """
    try:
        resolved = parse_period(period)
    except InvalidPeriodError as e:
        logger.warning("unknown_report_period", period=str(e.period), fallback="all_time")
        return all_time_range(now)

    today = today or date.today()

    if resolved == ReportPeriod.TODAY:
        return _day_range(today, today)
    elif resolved == ReportPeriod.WEEK:
        return week_range(today, week_start)
    elif resolved == ReportPeriod.MONTH:
        return month_range(today)
    elif resolved == ReportPeriod.QUARTER:
        return quarter_range(today)
    elif resolved == ReportPeriod.YEAR:
        return year_range(today)
    elif resolved == ReportPeriod.CUSTOM:
        return custom_range(date_from, date_to)

    return all_time_range(now)
