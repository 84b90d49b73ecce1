"""Session duration and time-of-day helpers.

Durations are held as integer minutes. The "2h" text form only exists at the
edges (legacy stored data and display), and aggregation always counts whole,
truncated hours.
"""

import re
from dataclasses import dataclass
from enum import Enum

LEADING_INT_PATTERN = re.compile(r"^\s*(-?\d+)")
TIME_OF_DAY_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")

MINUTES_PER_HOUR = 60


class DurationStatus(Enum):
    """Outcome of parsing a duration string."""

    OK = "ok"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class DurationParseResult:
    """Parsed duration with an explicit status.

    Attributes:
        minutes: Duration in minutes (0 when malformed).
        status: Whether the raw value could be read.
        raw: The original text.
    """

    minutes: int
    status: DurationStatus
    raw: str

    @property
    def is_malformed(self) -> bool:
        return self.status is DurationStatus.MALFORMED


def parse_duration(raw: str | None) -> DurationParseResult:
    """Parse a legacy duration string such as "2h" into minutes.

    Only the leading integer is read, so "2.5h" counts as 2 hours. Anything
    without a leading integer parses to zero minutes with MALFORMED status.
    """
    text = "" if raw is None else str(raw)
    match = LEADING_INT_PATTERN.match(text)
    if not match:
        return DurationParseResult(0, DurationStatus.MALFORMED, text)
    return DurationParseResult(
        int(match.group(1)) * MINUTES_PER_HOUR, DurationStatus.OK, text
    )


def whole_hours(minutes: int) -> int:
    """Truncate a duration in minutes to whole hours (toward zero)."""
    return int(minutes / MINUTES_PER_HOUR)


def format_duration(minutes: int) -> str:
    """Display form of a duration, e.g. 120 -> "2h"."""
    return f"{whole_hours(minutes)}h"


def parse_time_of_day(raw: str) -> int:
    """Parse "HH:MM" into minutes after midnight.

    Raises:
        ValueError: If the value is not a valid time of day.
    """
    match = TIME_OF_DAY_PATTERN.match(raw or "")
    if not match:
        raise ValueError(f"Cannot parse time of day: '{raw}' (expected HH:MM)")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f"Time of day out of range: '{raw}'")
    return hours * MINUTES_PER_HOUR + minutes


def minutes_between(start_time: str, end_time: str) -> int:
    """Wall-clock difference end - start in minutes (negative if end is earlier)."""
    return parse_time_of_day(end_time) - parse_time_of_day(start_time)


def format_time_range(start_time: str, end_time: str) -> str:
    """Display form of a session's time slot, e.g. "10:00 - 12:00"."""
    return f"{start_time.strip()} - {end_time.strip()}"


def split_time_range(time_range: str) -> tuple[str, str]:
    """Split "HH:MM - HH:MM" into its two parts.

    Raises:
        ValueError: If the text is not a start/end pair.
    """
    parts = [p.strip() for p in (time_range or "").split("-")]
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"Cannot parse time range: '{time_range}'")
    return parts[0], parts[1]
