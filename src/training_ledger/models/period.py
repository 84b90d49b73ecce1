"""Period selection and resolved date range models."""

from dataclasses import dataclass
from datetime import date
from enum import Enum

from training_ledger.utils.date_utils import format_year_month, is_date_in_range


class PeriodMode(Enum):
    """How the analysed period is chosen."""

    MONTH = "month"  # The calendar month currently viewed
    CUSTOM = "custom"  # An explicit start/end month range


class RangeStatus(Enum):
    """Outcome of resolving a period selection."""

    OK = "ok"
    INVERTED = "inverted"  # End month precedes start month


@dataclass(frozen=True)
class PeriodSelection:
    """The period currently being analysed.

    In MONTH mode only viewed_date matters; in CUSTOM mode start_month and
    end_month are (year, month) tuples with no day component.
    """

    mode: PeriodMode
    viewed_date: date | None = None
    start_month: tuple[int, int] | None = None
    end_month: tuple[int, int] | None = None

    @classmethod
    def for_month(cls, viewed_date: date) -> "PeriodSelection":
        return cls(mode=PeriodMode.MONTH, viewed_date=viewed_date)

    @classmethod
    def custom(
        cls, start_month: tuple[int, int], end_month: tuple[int, int]
    ) -> "PeriodSelection":
        return cls(mode=PeriodMode.CUSTOM, start_month=start_month, end_month=end_month)

    def describe(self) -> str:
        """Human-readable form, e.g. "2026-03" or "2026-01 .. 2026-06"."""
        if self.mode is PeriodMode.MONTH:
            if self.viewed_date is None:
                return "month (unset)"
            return format_year_month((self.viewed_date.year, self.viewed_date.month))
        start = format_year_month(self.start_month) if self.start_month else "?"
        end = format_year_month(self.end_month) if self.end_month else "?"
        return f"{start} .. {end}"


@dataclass(frozen=True)
class DateRange:
    """Inclusive [start, end] range of calendar days.

    An INVERTED range keeps the requested bounds for reporting but contains
    no days.
    """

    start: date
    end: date
    status: RangeStatus = RangeStatus.OK

    @property
    def is_empty(self) -> bool:
        return self.status is RangeStatus.INVERTED or self.end < self.start

    def contains(self, d: date) -> bool:
        if self.is_empty:
            return False
        return is_date_in_range(d, self.start, self.end)

    @property
    def display(self) -> str:
        text = f"{self.start.isoformat()} to {self.end.isoformat()}"
        if self.is_empty:
            text += " (empty)"
        return text
