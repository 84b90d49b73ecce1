"""Tests for recurring schedule expansion."""

from datetime import date

import pytest

from training_ledger.processing.schedule_generator import (
    MAX_LOOKAHEAD_DAYS,
    generate_schedule_sessions,
    parse_weekdays,
)

MONDAY = date(2026, 3, 2)


class TestGenerateScheduleSessions:
    def test_monday_wednesday_pattern(self) -> None:
        sessions = generate_schedule_sessions(MONDAY, {0, 2}, "10:00", "12:00", 4, "excel")

        assert [s.date for s in sessions] == [
            date(2026, 3, 2),
            date(2026, 3, 4),
            date(2026, 3, 9),
            date(2026, 3, 11),
        ]
        assert [s.duration_label for s in sessions] == ["2h"] * 4
        assert all(s.time == "10:00 - 12:00" for s in sessions)
        assert [s.id for s in sessions] == ["excel-s0", "excel-s1", "excel-s2", "excel-s3"]
        assert not any(s.validated for s in sessions)

    def test_start_day_skipped_when_not_selected(self) -> None:
        sessions = generate_schedule_sessions(date(2026, 3, 3), {0}, "10:00", "12:00", 1)

        assert sessions[0].date == date(2026, 3, 9)
        assert sessions[0].id == "session-s0"

    def test_fractional_duration(self) -> None:
        sessions = generate_schedule_sessions(MONDAY, {0}, "10:30", "12:00", 1)

        assert sessions[0].duration_minutes == 90
        assert sessions[0].hours == 1

    def test_lookahead_limits_result(self) -> None:
        sessions = generate_schedule_sessions(MONDAY, {0}, "10:00", "12:00", 200)

        # Mondays among the first 365 days starting on a Monday
        assert len(sessions) == 53
        assert (sessions[-1].date - MONDAY).days < MAX_LOOKAHEAD_DAYS

    def test_no_weekdays_gives_nothing(self) -> None:
        assert generate_schedule_sessions(MONDAY, set(), "10:00", "12:00", 4) == []

    def test_zero_count_gives_nothing(self) -> None:
        assert generate_schedule_sessions(MONDAY, {0, 2}, "10:00", "12:00", 0) == []

    def test_end_before_start_gives_negative_duration(self) -> None:
        sessions = generate_schedule_sessions(MONDAY, {0}, "12:00", "10:00", 1)

        assert sessions[0].duration_minutes == -120

    def test_malformed_time_raises(self) -> None:
        with pytest.raises(ValueError):
            generate_schedule_sessions(MONDAY, {0}, "ten", "12:00", 1)


class TestParseWeekdays:
    def test_names(self) -> None:
        assert parse_weekdays("mon,wed") == {0, 2}

    def test_full_names_and_spaces(self) -> None:
        assert parse_weekdays("Monday, Friday") == {0, 4}

    def test_numbers(self) -> None:
        assert parse_weekdays("0,2,6") == {0, 2, 6}

    def test_unknown_name_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown weekday"):
            parse_weekdays("mon,funday")

    def test_out_of_range_number_raises(self) -> None:
        with pytest.raises(ValueError):
            parse_weekdays("7")
