"""Date parsing and calendar-month helpers."""

import calendar
import re
from datetime import date, datetime, tzinfo

# Accepted session/adjustment date formats, ISO first.
#
# Slash-separated dates are read as day-first (DD/MM/YYYY), which is how the
# trainer's course schedules are written. Use ISO (2026-03-04) when in doubt.
DATE_PATTERNS = [
    (r"^(\d{4})-(\d{1,2})-(\d{1,2})$", "%Y-%m-%d"),
    (r"^(\d{1,2})/(\d{1,2})/(\d{4})$", "%d/%m/%Y"),
    (r"^(\d{1,2})\.(\d{1,2})\.(\d{4})$", "%d.%m.%Y"),
    (r"^(\d{8})$", "%Y%m%d"),
]

COMPILED_PATTERNS = [(re.compile(pattern), fmt) for pattern, fmt in DATE_PATTERNS]

YEAR_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})$")

MONTH_ABBREVIATIONS = [calendar.month_abbr[i] for i in range(1, 13)]


def parse_date(raw_date: str, tz: tzinfo | None = None) -> date:
    """Parse a raw date string into a date object.

    Handles ISO dates, full ISO timestamps, DD/MM/YYYY, DD.MM.YYYY and
    compact YYYYMMDD.

    Timestamps carrying an offset (such as the "Z" suffix written for a
    local midnight) are converted to tz, or to the local timezone when tz
    is None, before the calendar day is taken. Naive timestamps keep their
    own day.

    Args:
        raw_date: The raw date string to parse.
        tz: Timezone whose calendar day an offset timestamp falls on.

    Returns:
        Parsed date object.

    Raises:
        ValueError: If the date cannot be parsed.
    """
    if not raw_date:
        raise ValueError("Empty date string")

    date_str = raw_date.strip()
    if not date_str:
        raise ValueError("Empty date string after stripping whitespace")

    for pattern, fmt in COMPILED_PATTERNS:
        if pattern.match(date_str):
            try:
                return datetime.strptime(date_str, fmt).date()
            except ValueError:
                continue

    # Timestamps such as 2026-03-31T23:00:00.000Z
    try:
        parsed = datetime.fromisoformat(date_str.replace("Z", "+00:00"))
    except ValueError:
        raise ValueError(f"Cannot parse date: '{raw_date}'") from None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(tz)
    return parsed.date()


def date_to_iso(d: date) -> str:
    """Convert a date to ISO 8601 format (YYYY-MM-DD)."""
    return d.isoformat()


def parse_year_month(raw: str) -> tuple[int, int]:
    """Parse a YYYY-MM string into a (year, month) tuple.

    Raises:
        ValueError: If the value is not a valid year-month.
    """
    match = YEAR_MONTH_PATTERN.match(raw.strip()) if raw else None
    if not match:
        raise ValueError(f"Cannot parse year-month: '{raw}' (expected YYYY-MM)")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Month out of range in '{raw}'")
    return (year, month)


def format_year_month(year_month: tuple[int, int]) -> str:
    """Format a (year, month) tuple as YYYY-MM."""
    year, month = year_month
    return f"{year:04d}-{month:02d}"


def first_day_of_month(year: int, month: int) -> date:
    """First calendar day of the given month."""
    return date(year, month, 1)


def last_day_of_month(year: int, month: int) -> date:
    """Last calendar day of the given month."""
    return date(year, month, calendar.monthrange(year, month)[1])


def month_label(year: int, month: int, reference_year: int | None = None) -> str:
    """Short month label, e.g. "Mar" or "Mar'27" outside the reference year."""
    label = MONTH_ABBREVIATIONS[month - 1]
    if reference_year is not None and year != reference_year:
        label += f"'{str(year)[2:]}"
    return label


def is_date_in_range(
    d: date,
    start_date: date | None = None,
    end_date: date | None = None,
) -> bool:
    """Check if a date is within a range.

    Args:
        d: Date to check.
        start_date: Start of range (inclusive). None means no lower bound.
        end_date: End of range (inclusive). None means no upper bound.

    Returns:
        True if date is within range.
    """
    if start_date is not None and d < start_date:
        return False
    if end_date is not None and d > end_date:
        return False
    return True


def generate_month_range(start: date, end: date) -> list[tuple[int, int]]:
    """Generate a list of (year, month) tuples for a date range.

    Returns an empty list when end precedes start's month.
    """
    months = []
    current_year = start.year
    current_month = start.month

    while (current_year, current_month) <= (end.year, end.month):
        months.append((current_year, current_month))
        current_month += 1
        if current_month > 12:
            current_month = 1
            current_year += 1

    return months
