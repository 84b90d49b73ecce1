"""Tests for turning period selections into date ranges."""

from datetime import date

import pytest

from training_ledger.models.period import PeriodMode, PeriodSelection, RangeStatus
from training_ledger.processing.period_resolver import (
    month_range,
    month_span_range,
    resolve_period,
    year_to_date_range,
)


class TestMonthRange:
    def test_covers_whole_month(self) -> None:
        date_range = month_range(2026, 2)

        assert date_range.start == date(2026, 2, 1)
        assert date_range.end == date(2026, 2, 28)
        assert date_range.status is RangeStatus.OK

    def test_leap_february(self) -> None:
        assert month_range(2024, 2).end == date(2024, 2, 29)

    def test_december(self) -> None:
        assert month_range(2026, 12).end == date(2026, 12, 31)


class TestResolvePeriod:
    def test_month_mode_uses_viewed_date_month(self) -> None:
        selection = PeriodSelection.for_month(date(2026, 3, 17))
        date_range = resolve_period(selection)

        assert date_range.start == date(2026, 3, 1)
        assert date_range.end == date(2026, 3, 31)

    def test_custom_mode_spans_whole_months(self) -> None:
        selection = PeriodSelection.custom((2026, 1), (2026, 6))
        date_range = resolve_period(selection)

        assert date_range.start == date(2026, 1, 1)
        assert date_range.end == date(2026, 6, 30)

    def test_custom_range_across_year_end(self) -> None:
        date_range = resolve_period(PeriodSelection.custom((2025, 11), (2026, 2)))

        assert date_range.start == date(2025, 11, 1)
        assert date_range.end == date(2026, 2, 28)

    def test_missing_viewed_date_raises(self) -> None:
        with pytest.raises(ValueError, match="viewed date"):
            resolve_period(PeriodSelection(mode=PeriodMode.MONTH))

    def test_missing_custom_bound_raises(self) -> None:
        with pytest.raises(ValueError):
            resolve_period(PeriodSelection(mode=PeriodMode.CUSTOM, start_month=(2026, 1)))


class TestInvertedRange:
    """An end month before the start month yields an empty range."""

    def test_marked_inverted(self) -> None:
        date_range = month_span_range((2026, 6), (2026, 3))

        assert date_range.status is RangeStatus.INVERTED
        assert date_range.is_empty

    def test_contains_nothing(self) -> None:
        date_range = month_span_range((2026, 6), (2026, 3))

        assert not date_range.contains(date(2026, 4, 15))
        assert not date_range.contains(date(2026, 6, 1))

    def test_display_mentions_empty(self) -> None:
        assert "(empty)" in month_span_range((2026, 6), (2026, 3)).display


class TestYearToDate:
    def test_starts_on_january_first(self) -> None:
        date_range = year_to_date_range(date(2026, 10, 18))

        assert date_range.start == date(2026, 1, 1)
        assert date_range.end == date(2026, 10, 18)
        assert date_range.contains(date(2026, 10, 18))
        assert not date_range.contains(date(2026, 10, 19))


class TestDescribe:
    def test_month(self) -> None:
        assert PeriodSelection.for_month(date(2026, 3, 5)).describe() == "2026-03"

    def test_custom(self) -> None:
        assert PeriodSelection.custom((2026, 1), (2026, 6)).describe() == "2026-01 .. 2026-06"
