"""Training and session data models."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from training_ledger.utils.duration_utils import format_duration, whole_hours


@dataclass
class Session:
    """A single dated occurrence of a training.

    Attributes:
        id: Identifier, unique within the owning training.
        date: Calendar day of the session. Time of day is display-only.
        time: Display time slot, e.g. "15:00 - 17:00".
        duration_minutes: Session length in minutes.
        validated: Whether the trainer has confirmed the session took place.
    """

    id: str
    date: date
    time: str
    duration_minutes: int
    validated: bool = False

    @property
    def hours(self) -> int:
        """Whole hours counted for workload and income (truncated)."""
        return whole_hours(self.duration_minutes)

    @property
    def duration_label(self) -> str:
        return format_duration(self.duration_minutes)

    def __repr__(self) -> str:
        return f"Session(id={self.id!r}, date={self.date}, duration={self.duration_label})"


@dataclass
class Training:
    """A recurring or one-off course with its own hourly rate.

    The session list is authoritative for every figure; total_sessions is the
    count declared when the course was booked and is informational only.

    Attributes:
        id: Unique identifier.
        name: Course name.
        instructor: Contact or co-instructor shown next to the course.
        hourly_rate: Rate paid per whole session hour.
        color: Presentation tag for calendars and charts.
        extra_value: Optional flat payment (travel stipend, lump sum).
        sessions: Sessions owned by this training.
        total_sessions: Declared number of sessions.
        schedule: Free-text description of the recurrence.
    """

    id: str
    name: str
    instructor: str = ""
    hourly_rate: Decimal = field(default_factory=lambda: Decimal("0"))
    color: str = ""
    extra_value: Decimal | None = None
    sessions: list[Session] = field(default_factory=list)
    total_sessions: int = 0
    schedule: str = ""

    @property
    def has_extra(self) -> bool:
        """True when a non-zero flat extra is attached."""
        return bool(self.extra_value)

    def get_session(self, session_id: str) -> Session | None:
        for session in self.sessions:
            if session.id == session_id:
                return session
        return None

    def next_session_id(self) -> str:
        """Generate a session id that is not yet used by this training."""
        used = {s.id for s in self.sessions}
        index = len(self.sessions)
        while f"{self.id}-s{index}" in used:
            index += 1
        return f"{self.id}-s{index}"

    def __repr__(self) -> str:
        return (
            f"Training(id={self.id!r}, name={self.name!r}, "
            f"rate={self.hourly_rate}, sessions={len(self.sessions)})"
        )
