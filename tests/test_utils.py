"""Tests for duration, date, amount and logging helpers."""

import logging
from datetime import date, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest

from training_ledger.utils.date_utils import (
    generate_month_range,
    month_label,
    parse_date,
    parse_year_month,
)
from training_ledger.utils.decimal_utils import format_currency, parse_amount, percent_of
from training_ledger.utils.duration_utils import (
    DurationStatus,
    format_duration,
    minutes_between,
    parse_duration,
    parse_time_of_day,
    split_time_range,
    whole_hours,
)
from training_ledger.utils.logging_config import setup_logging
from training_ledger.utils.sanitize import sanitize_for_csv


class TestParseDuration:
    def test_hours_suffix(self) -> None:
        result = parse_duration("2h")

        assert result.minutes == 120
        assert result.status is DurationStatus.OK

    def test_only_leading_integer_is_read(self) -> None:
        assert parse_duration("2.5h").minutes == 120
        assert parse_duration(" 9h ").minutes == 540

    @pytest.mark.parametrize("raw", ["", "h2", "two hours", None])
    def test_malformed_is_zero(self, raw: str | None) -> None:
        result = parse_duration(raw)

        assert result.minutes == 0
        assert result.is_malformed


class TestHours:
    def test_truncates(self) -> None:
        assert whole_hours(90) == 1
        assert whole_hours(59) == 0
        assert whole_hours(-90) == -1

    def test_format(self) -> None:
        assert format_duration(120) == "2h"
        assert format_duration(150) == "2h"


class TestTimeOfDay:
    def test_parse(self) -> None:
        assert parse_time_of_day("10:30") == 630
        assert parse_time_of_day("9:05") == 545

    @pytest.mark.parametrize("raw", ["24:00", "10:60", "1030", ""])
    def test_invalid(self, raw: str) -> None:
        with pytest.raises(ValueError):
            parse_time_of_day(raw)

    def test_minutes_between(self) -> None:
        assert minutes_between("13:30", "17:30") == 240
        assert minutes_between("12:00", "10:00") == -120

    def test_split_time_range(self) -> None:
        assert split_time_range("15:00 - 17:00") == ("15:00", "17:00")

    def test_split_time_range_rejects_single_time(self) -> None:
        with pytest.raises(ValueError):
            split_time_range("15:00")


class TestDates:
    @pytest.mark.parametrize(
        "raw",
        ["2026-02-03", "03/02/2026", "03.02.2026", "20260203", "2026-02-03T10:00:00"],
    )
    def test_parse_date_formats(self, raw: str) -> None:
        assert parse_date(raw) == date(2026, 2, 3)

    def test_utc_timestamp_in_utc(self) -> None:
        assert parse_date("2026-02-03T00:00:00.000Z", tz=timezone.utc) == date(2026, 2, 3)

    def test_timestamp_takes_day_of_target_timezone(self) -> None:
        # Local midnight of April 1st under UTC+1, written as UTC
        lisbon_summer = timezone(timedelta(hours=1))

        assert parse_date("2026-03-31T23:00:00.000Z", tz=lisbon_summer) == date(2026, 4, 1)
        assert parse_date("2026-03-31T23:00:00.000Z", tz=timezone.utc) == date(2026, 3, 31)

    def test_explicit_offset_is_honoured(self) -> None:
        assert parse_date("2026-04-01T00:00:00+01:00", tz=timezone.utc) == date(2026, 3, 31)

    def test_parse_date_invalid(self) -> None:
        with pytest.raises(ValueError):
            parse_date("next tuesday")

    def test_parse_year_month(self) -> None:
        assert parse_year_month("2026-03") == (2026, 3)

    @pytest.mark.parametrize("raw", ["2026-13", "2026/03", "March"])
    def test_parse_year_month_invalid(self, raw: str) -> None:
        with pytest.raises(ValueError):
            parse_year_month(raw)

    def test_month_label(self) -> None:
        assert month_label(2026, 3) == "Mar"
        assert month_label(2027, 1, reference_year=2026) == "Jan'27"

    def test_generate_month_range_across_year(self) -> None:
        months = generate_month_range(date(2025, 11, 15), date(2026, 2, 1))

        assert months == [(2025, 11), (2025, 12), (2026, 1), (2026, 2)]


class TestAmounts:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("400", Decimal("400")),
            ("-120.50", Decimal("-120.50")),
            ("400€", Decimal("400")),
            ("1.234,56", Decimal("1234.56")),
            ("12,5", Decimal("12.5")),
        ],
    )
    def test_parse_amount(self, raw: str, expected: Decimal) -> None:
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", ["", "abc", "NaN", "Infinity"])
    def test_parse_amount_invalid(self, raw: str) -> None:
        with pytest.raises(ValueError):
            parse_amount(raw)

    def test_percent_of(self) -> None:
        assert percent_of(Decimal("410"), Decimal("25")) == Decimal("102.5")

    def test_format_currency(self) -> None:
        assert format_currency(Decimal("307.5")) == "307.50€"
        assert format_currency(Decimal("-80"), symbol="$", decimal_places=0) == "-80$"


class TestSanitize:
    @pytest.mark.parametrize("raw", ["=SUM(A1)", "+1", "-2", "@cmd", "|calc"])
    def test_formula_prefixed(self, raw: str) -> None:
        assert sanitize_for_csv(raw) == "'" + raw

    def test_plain_text_unchanged(self) -> None:
        assert sanitize_for_csv("Formação Susana") == "Formação Susana"
        assert sanitize_for_csv(None) is None


class TestSetupLogging:
    def test_reconfiguring_closes_previous_file_handler(self, tmp_path: Path) -> None:
        logger = setup_logging(log_file=str(tmp_path / "first.log"), console_output=False)
        first = logger.handlers[0]
        try:
            setup_logging(log_file=str(tmp_path / "logs" / "second.log"), console_output=False)

            assert isinstance(first, logging.FileHandler)
            assert first.stream is None
            assert [type(h) for h in logger.handlers] == [logging.FileHandler]
            assert (tmp_path / "logs" / "second.log").exists()
        finally:
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()
