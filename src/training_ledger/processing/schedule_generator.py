"""Expand a weekly recurrence into concrete training sessions."""

from datetime import date, timedelta
from typing import Iterable

from training_ledger.models.training import Session
from training_ledger.utils.duration_utils import format_time_range, minutes_between
from training_ledger.utils.logging_config import get_logger

logger = get_logger(__name__)

# Days scanned from the start date before giving up on the target count
MAX_LOOKAHEAD_DAYS = 365

WEEKDAY_NAMES = ["mon", "tue", "wed", "thu", "fri", "sat", "sun"]


def parse_weekdays(raw: str) -> set[int]:
    """Parse "mon,wed" (or "0,2") into Python weekday numbers (Monday=0).

    Raises:
        ValueError: On an unknown day name or out-of-range number.
    """
    weekdays: set[int] = set()
    for part in raw.split(","):
        token = part.strip().lower()
        if not token:
            continue
        if token.isdigit():
            value = int(token)
            if not 0 <= value <= 6:
                raise ValueError(f"Weekday number must be 0-6, got {token}")
            weekdays.add(value)
        elif token[:3] in WEEKDAY_NAMES:
            weekdays.add(WEEKDAY_NAMES.index(token[:3]))
        else:
            raise ValueError(f"Unknown weekday: '{part.strip()}'")
    return weekdays


def generate_schedule_sessions(
    start_date: date,
    weekdays: Iterable[int],
    start_time: str,
    end_time: str,
    target_count: int,
    training_id: str = "",
) -> list[Session]:
    """Generate sessions on the selected weekdays starting at start_date.

    Days are scanned one at a time; generation stops once target_count
    sessions exist or MAX_LOOKAHEAD_DAYS days have been scanned, in which
    case fewer sessions than requested are returned.

    Args:
        start_date: First day considered (included if its weekday matches).
        weekdays: Python weekday numbers (Monday=0 ... Sunday=6).
        start_time: Session start, "HH:MM".
        end_time: Session end, "HH:MM".
        target_count: Number of sessions wanted.
        training_id: Prefix for generated session ids.

    Returns:
        Sessions in chronological order.

    Raises:
        ValueError: If a time of day cannot be parsed.
    """
    selected = set(weekdays)
    duration = minutes_between(start_time, end_time)
    time_label = format_time_range(start_time, end_time)
    prefix = training_id or "session"

    sessions: list[Session] = []
    if not selected or target_count <= 0:
        return sessions

    current = start_date
    scanned = 0
    while len(sessions) < target_count and scanned < MAX_LOOKAHEAD_DAYS:
        if current.weekday() in selected:
            sessions.append(
                Session(
                    id=f"{prefix}-s{len(sessions)}",
                    date=current,
                    time=time_label,
                    duration_minutes=duration,
                )
            )
        current += timedelta(days=1)
        scanned += 1

    if len(sessions) < target_count:
        logger.info(
            f"Schedule lookahead exhausted: generated {len(sessions)} of "
            f"{target_count} sessions from {start_date}"
        )
    return sessions
