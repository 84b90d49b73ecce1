"""Resolve a period selection into a concrete inclusive date range."""

from datetime import date

from training_ledger.models.period import DateRange, PeriodMode, PeriodSelection, RangeStatus
from training_ledger.utils.date_utils import (
    first_day_of_month,
    format_year_month,
    last_day_of_month,
)
from training_ledger.utils.logging_config import get_logger

logger = get_logger(__name__)


def month_range(year: int, month: int) -> DateRange:
    """Whole calendar month as an inclusive range."""
    return DateRange(first_day_of_month(year, month), last_day_of_month(year, month))


def month_span_range(start_month: tuple[int, int], end_month: tuple[int, int]) -> DateRange:
    """First day of start_month through last day of end_month.

    When end_month precedes start_month the bounds are kept as given but the
    range is marked INVERTED, which makes it contain no days.
    """
    start = first_day_of_month(*start_month)
    end = last_day_of_month(*end_month)
    if end_month < start_month:
        logger.warning(
            f"Inverted period {format_year_month(start_month)} .. "
            f"{format_year_month(end_month)}: treating as empty"
        )
        return DateRange(start, end, RangeStatus.INVERTED)
    return DateRange(start, end)


def resolve_period(selection: PeriodSelection) -> DateRange:
    """Turn a period selection into an inclusive [start, end] date range.

    Args:
        selection: Month or custom month-range selection.

    Returns:
        The resolved DateRange.

    Raises:
        ValueError: If the selection is missing the fields its mode needs.
    """
    if selection.mode is PeriodMode.MONTH:
        if selection.viewed_date is None:
            raise ValueError("Month selection requires a viewed date")
        return month_range(selection.viewed_date.year, selection.viewed_date.month)

    if selection.start_month is None or selection.end_month is None:
        raise ValueError("Custom selection requires both start and end month")
    return month_span_range(selection.start_month, selection.end_month)


def year_to_date_range(today: date) -> DateRange:
    """January 1st of today's year through today."""
    return DateRange(date(today.year, 1, 1), today)


def year_range(year: int) -> DateRange:
    return DateRange(date(year, 1, 1), date(year, 12, 31))
