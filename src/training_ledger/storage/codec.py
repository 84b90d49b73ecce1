"""Typed serialization of ledger state.

Decoding never raises: every decoder returns a LoadResult whose status says
whether the value was present, valid, or unusable, so the caller decides
whether to fall back to defaults.
"""

import json
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from training_ledger.models.adjustment import FinancialAdjustment
from training_ledger.models.period import PeriodMode, PeriodSelection
from training_ledger.models.training import Session, Training
from training_ledger.utils.date_utils import format_year_month, parse_date, parse_year_month
from training_ledger.utils.duration_utils import parse_duration


class LoadStatus(Enum):
    """Outcome of decoding a stored blob."""

    OK = "ok"
    MISSING = "missing"  # Nothing stored under the key
    INVALID = "invalid"  # Stored but unparseable


@dataclass
class LoadResult:
    """Decoded value plus status and diagnostics.

    Attributes:
        status: Whether decoding succeeded.
        value: Decoded value (None unless status is OK).
        errors: Why an INVALID payload was rejected.
        warnings: Non-fatal issues, such as malformed durations read as zero.
    """

    status: LoadStatus
    value: Any = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is LoadStatus.OK

    @classmethod
    def missing(cls) -> "LoadResult":
        return cls(status=LoadStatus.MISSING)

    @classmethod
    def invalid(cls, error: str) -> "LoadResult":
        return cls(status=LoadStatus.INVALID, errors=[error])


class SchemaError(ValueError):
    """Raised inside the codec when a payload does not match the schema."""

    pass


def _first(data: dict[str, Any], *names: str, default: Any = None) -> Any:
    """Value of the first present key (snake_case first, legacy camelCase after)."""
    for name in names:
        if name in data:
            return data[name]
    return default


def _require(data: dict[str, Any], *names: str) -> Any:
    value = _first(data, *names)
    if value is None:
        raise SchemaError(f"missing field '{names[0]}'")
    return value


def _decimal(value: Any, field_name: str) -> Decimal:
    if isinstance(value, bool):
        raise SchemaError(f"'{field_name}' must be a number")
    try:
        result = Decimal(str(value))
    except InvalidOperation as e:
        raise SchemaError(f"'{field_name}' must be a number, got {value!r}") from e
    if not result.is_finite():
        raise SchemaError(f"'{field_name}' must be finite, got {value!r}")
    return result


def _date(value: Any, field_name: str) -> date:
    # Offset timestamps land on the local calendar day they were written for
    try:
        return parse_date(str(value))
    except ValueError as e:
        raise SchemaError(f"'{field_name}': {e}") from e


def _object(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise SchemaError(f"{what} must be an object, got {type(value).__name__}")
    return value


def _list(value: Any, what: str) -> list[Any]:
    if not isinstance(value, list):
        raise SchemaError(f"{what} must be a list, got {type(value).__name__}")
    return value


def _parse_json(text: Optional[str]) -> Any:
    try:
        return json.loads(text or "")
    except json.JSONDecodeError as e:
        raise SchemaError(f"not valid JSON: {e}") from e


# --- Trainings -------------------------------------------------------------


def session_to_dict(session: Session) -> dict[str, Any]:
    return {
        "id": session.id,
        "date": session.date.isoformat(),
        "time": session.time,
        "duration_minutes": session.duration_minutes,
        "validated": session.validated,
    }


def training_to_dict(training: Training) -> dict[str, Any]:
    return {
        "id": training.id,
        "name": training.name,
        "instructor": training.instructor,
        "hourly_rate": str(training.hourly_rate),
        "color": training.color,
        "extra_value": None if training.extra_value is None else str(training.extra_value),
        "total_sessions": training.total_sessions,
        "schedule": training.schedule,
        "sessions": [session_to_dict(s) for s in training.sessions],
    }


def _session_from_dict(data: dict[str, Any], training_id: str, index: int, warnings: list[str]) -> Session:
    session_id = str(_first(data, "id", default=f"{training_id}-s{index}"))

    minutes = _first(data, "duration_minutes")
    if minutes is None:
        parsed = parse_duration(_first(data, "duration"))
        if parsed.is_malformed:
            warnings.append(
                f"Session {session_id}: malformed duration {parsed.raw!r}, counted as 0h"
            )
        minutes = parsed.minutes
    elif isinstance(minutes, bool) or not isinstance(minutes, int):
        raise SchemaError(f"session {session_id}: 'duration_minutes' must be an integer")

    return Session(
        id=session_id,
        date=_date(_require(data, "date"), f"session {session_id} date"),
        time=str(_first(data, "time", default="")),
        duration_minutes=minutes,
        validated=bool(_first(data, "validated", default=False)),
    )


def training_from_dict(data: dict[str, Any], warnings: list[str]) -> Training:
    """Build a Training from a stored dict.

    Raises:
        SchemaError: If required fields are missing or mistyped.
    """
    training_id = str(_require(data, "id"))
    raw_sessions = _list(_first(data, "sessions", default=[]), f"training {training_id} sessions")
    sessions = [
        _session_from_dict(_object(s, f"training {training_id} session"), training_id, i, warnings)
        for i, s in enumerate(raw_sessions)
    ]

    extra = _first(data, "extra_value", "extraValue")
    return Training(
        id=training_id,
        name=str(_first(data, "name", default=training_id)),
        instructor=str(_first(data, "instructor", default="")),
        hourly_rate=_decimal(_first(data, "hourly_rate", "hourlyRate", default=0), "hourly_rate"),
        color=str(_first(data, "color", default="")),
        extra_value=None if extra is None else _decimal(extra, "extra_value"),
        sessions=sessions,
        total_sessions=int(_first(data, "total_sessions", "totalSessions", default=len(sessions))),
        schedule=str(_first(data, "schedule", default="")),
    )


def _check_unique(ids: list[str], what: str) -> None:
    seen: set[str] = set()
    for item_id in ids:
        if item_id in seen:
            raise SchemaError(f"duplicate {what} id '{item_id}'")
        seen.add(item_id)


def _check_trainings(trainings: list[Training], warnings: list[str]) -> None:
    """Reject duplicate ids; flag values the ledger would refuse on edit.

    Duplicate training ids, or duplicate session ids within a training,
    raise SchemaError. Negative rates and durations are kept and reported
    as warnings.
    """
    _check_unique([t.id for t in trainings], "training")
    for training in trainings:
        _check_unique([s.id for s in training.sessions], f"session (training {training.id})")
        if training.hourly_rate < 0:
            warnings.append(f"Training {training.id}: negative hourly rate {training.hourly_rate}")
        for session in training.sessions:
            if session.duration_minutes < 0:
                warnings.append(
                    f"Session {session.id}: negative duration {session.duration_minutes} min"
                )


def encode_trainings(trainings: list[Training]) -> str:
    return json.dumps([training_to_dict(t) for t in trainings], indent=2, ensure_ascii=False)


def decode_trainings(text: Optional[str]) -> LoadResult:
    """Decode the trainings blob (all-or-nothing)."""
    if text is None:
        return LoadResult.missing()
    warnings: list[str] = []
    try:
        payload = _list(_parse_json(text), "trainings payload")
        trainings = [training_from_dict(_object(t, "training"), warnings) for t in payload]
        _check_trainings(trainings, warnings)
    except (SchemaError, TypeError, ValueError) as e:
        return LoadResult.invalid(str(e))
    return LoadResult(status=LoadStatus.OK, value=trainings, warnings=warnings)


# --- Adjustments -----------------------------------------------------------


def adjustment_to_dict(adjustment: FinancialAdjustment) -> dict[str, Any]:
    return {
        "id": adjustment.id,
        "description": adjustment.description,
        "value": str(adjustment.value),
        "date": adjustment.date.isoformat(),
    }


def adjustment_from_dict(data: dict[str, Any]) -> FinancialAdjustment:
    """Build a FinancialAdjustment from a stored dict.

    Raises:
        SchemaError: If required fields are missing or mistyped.
    """
    adjustment_id = str(_require(data, "id"))
    return FinancialAdjustment(
        id=adjustment_id,
        description=str(_first(data, "description", default="")),
        value=_decimal(_require(data, "value"), f"adjustment {adjustment_id} value"),
        date=_date(_require(data, "date"), f"adjustment {adjustment_id} date"),
    )


def encode_adjustments(adjustments: list[FinancialAdjustment]) -> str:
    return json.dumps([adjustment_to_dict(a) for a in adjustments], indent=2, ensure_ascii=False)


def decode_adjustments(text: Optional[str]) -> LoadResult:
    if text is None:
        return LoadResult.missing()
    try:
        payload = _list(_parse_json(text), "adjustments payload")
        adjustments = [adjustment_from_dict(_object(a, "adjustment")) for a in payload]
        _check_unique([a.id for a in adjustments], "adjustment")
    except (SchemaError, TypeError, ValueError) as e:
        return LoadResult.invalid(str(e))
    return LoadResult(status=LoadStatus.OK, value=adjustments)


# --- Tax rate --------------------------------------------------------------


def encode_tax_rate(rate: Decimal) -> str:
    return str(rate)


def decode_tax_rate(text: Optional[str]) -> LoadResult:
    """Decode the withholding percentage, stored as plain numeric text."""
    if text is None:
        return LoadResult.missing()
    try:
        rate = _decimal(text.strip(), "tax_rate")
    except SchemaError as e:
        return LoadResult.invalid(str(e))
    if not Decimal("0") <= rate <= Decimal("100"):
        return LoadResult.invalid(f"tax rate out of range 0-100: {rate}")
    return LoadResult(status=LoadStatus.OK, value=rate)


# --- Analysis settings -----------------------------------------------------


def encode_analysis_settings(selection: PeriodSelection) -> str:
    data: dict[str, Any] = {"mode": selection.mode.value}
    if selection.viewed_date is not None:
        data["viewed_date"] = selection.viewed_date.isoformat()
    if selection.start_month is not None:
        data["start_month"] = format_year_month(selection.start_month)
    if selection.end_month is not None:
        data["end_month"] = format_year_month(selection.end_month)
    return json.dumps(data, indent=2)


def decode_analysis_settings(text: Optional[str]) -> LoadResult:
    """Decode {mode, start_month, end_month[, viewed_date]} into a PeriodSelection."""
    if text is None:
        return LoadResult.missing()
    try:
        data = _object(_parse_json(text), "analysis settings")
        try:
            mode = PeriodMode(str(_require(data, "mode")))
        except ValueError as e:
            raise SchemaError(f"unknown period mode: {data.get('mode')!r}") from e

        viewed = _first(data, "viewed_date", "viewedDate")
        start = _first(data, "start_month", "startMonth")
        end = _first(data, "end_month", "endMonth")
        selection = PeriodSelection(
            mode=mode,
            viewed_date=None if viewed is None else _date(viewed, "viewed_date"),
            start_month=None if start is None else parse_year_month(str(start)),
            end_month=None if end is None else parse_year_month(str(end)),
        )
        if mode is PeriodMode.MONTH and selection.viewed_date is None:
            raise SchemaError("month mode requires 'viewed_date'")
        if mode is PeriodMode.CUSTOM and (selection.start_month is None or selection.end_month is None):
            raise SchemaError("custom mode requires 'start_month' and 'end_month'")
    except (SchemaError, ValueError) as e:
        return LoadResult.invalid(str(e))
    return LoadResult(status=LoadStatus.OK, value=selection)


# --- Auth flag -------------------------------------------------------------


def encode_auth_flag(authenticated: bool) -> str:
    return json.dumps({"authenticated": authenticated})


def decode_auth_flag(text: Optional[str]) -> LoadResult:
    if text is None:
        return LoadResult.missing()
    try:
        data = _object(_parse_json(text), "auth flag")
    except SchemaError as e:
        return LoadResult.invalid(str(e))
    return LoadResult(status=LoadStatus.OK, value=data.get("authenticated") is True)
