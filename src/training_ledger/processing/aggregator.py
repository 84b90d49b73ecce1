"""Period-based financial aggregation.

Every figure is recomputed from the trainings and adjustments passed in; no
state survives between calls.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Iterable

from training_ledger.models.adjustment import FinancialAdjustment
from training_ledger.models.period import DateRange
from training_ledger.models.report import FinancialSummary, MonthlyBucket, TrainingBreakdown
from training_ledger.models.training import Session, Training
from training_ledger.utils.date_utils import generate_month_range
from training_ledger.utils.logging_config import get_logger

logger = get_logger(__name__)


class ExtrasAttributionMode(Enum):
    """How a training's flat extra is counted within a period.

    PER_MONTH counts the extra once for every calendar month in which the
    training has a session (a recurring monthly fee). ONCE_PER_RANGE counts
    it a single time if the training has any session in the period.
    """

    PER_MONTH = "per_month"
    ONCE_PER_RANGE = "once_per_range"


def sessions_in_range(
    trainings: Iterable[Training], date_range: DateRange
) -> list[tuple[Training, Session]]:
    """Flatten sessions falling inside the range, in date order.

    Args:
        trainings: Trainings to scan.
        date_range: Inclusive range; an empty range yields nothing.

    Returns:
        (owning training, session) pairs sorted by session date.
    """
    pairs = [
        (training, session)
        for training in trainings
        for session in training.sessions
        if date_range.contains(session.date)
    ]
    return sorted(pairs, key=lambda pair: pair[1].date)


def adjustments_in_range(
    adjustments: Iterable[FinancialAdjustment], date_range: DateRange
) -> list[FinancialAdjustment]:
    """Adjustments dated inside the range, in date order."""
    return sorted(
        (a for a in adjustments if date_range.contains(a.date)),
        key=lambda a: a.date,
    )


def _extras_key(training: Training, session: Session, mode: ExtrasAttributionMode) -> tuple:
    if mode is ExtrasAttributionMode.PER_MONTH:
        return (training.id, session.date.year, session.date.month)
    return (training.id,)


@dataclass
class _Accumulation:
    """Running totals collected in a single pass over in-range sessions."""

    hours: int = 0
    session_count: int = 0
    training_income: Decimal = field(default_factory=lambda: Decimal("0"))
    extras_total: Decimal = field(default_factory=lambda: Decimal("0"))
    months: dict[tuple[int, int], MonthlyBucket] = field(default_factory=dict)
    by_training: dict[str, TrainingBreakdown] = field(default_factory=dict)


class AggregationEngine:
    """Computes hours, income and withholding figures for date ranges.

    Both extras rules go through the same pass; only the key used to decide
    whether an extra was already counted differs.
    """

    def __init__(
        self,
        trainings: Iterable[Training],
        adjustments: Iterable[FinancialAdjustment] | None = None,
    ):
        """Initialize the engine.

        Args:
            trainings: Trainings with their sessions.
            adjustments: Standalone adjustments (optional).
        """
        self.trainings = list(trainings)
        self.adjustments = list(adjustments or [])

    def _accumulate(self, date_range: DateRange, mode: ExtrasAttributionMode) -> _Accumulation:
        acc = _Accumulation()

        # Every month of the range gets a bucket, even without sessions
        if not date_range.is_empty:
            for year, month in generate_month_range(date_range.start, date_range.end):
                acc.months[(year, month)] = MonthlyBucket(year=year, month=month)

        counted_extras: set[tuple] = set()

        for training, session in sessions_in_range(self.trainings, date_range):
            hours = session.hours
            income = training.hourly_rate * hours

            acc.hours += hours
            acc.session_count += 1
            acc.training_income += income

            bucket = acc.months[(session.date.year, session.date.month)]
            bucket.hours += hours
            bucket.session_count += 1
            bucket.training_income += income

            row = acc.by_training.get(training.id)
            if row is None:
                row = TrainingBreakdown(
                    training_id=training.id,
                    name=training.name,
                    hourly_rate=training.hourly_rate,
                    color=training.color,
                )
                acc.by_training[training.id] = row
            row.hours += hours
            row.session_count += 1
            row.session_income += income

            if training.has_extra:
                key = _extras_key(training, session, mode)
                if key not in counted_extras:
                    counted_extras.add(key)
                    acc.extras_total += training.extra_value
                    bucket.extras += training.extra_value
                    row.extras += training.extra_value

        return acc

    def summarize(
        self,
        date_range: DateRange,
        tax_rate_percent: Decimal,
        extras_mode: ExtrasAttributionMode = ExtrasAttributionMode.PER_MONTH,
    ) -> FinancialSummary:
        """Compute the financial summary for a range.

        Args:
            date_range: Inclusive period to aggregate.
            tax_rate_percent: Withholding percentage (0-100).
            extras_mode: Extras rule; the period summary uses PER_MONTH.

        Returns:
            FinancialSummary with totals, monthly buckets and adjustments.
        """
        acc = self._accumulate(date_range, extras_mode)
        period_adjustments = adjustments_in_range(self.adjustments, date_range)

        summary = FinancialSummary(
            date_range=date_range,
            tax_rate_percent=Decimal(str(tax_rate_percent)),
            hours=acc.hours,
            session_count=acc.session_count,
            training_income=acc.training_income,
            extras_total=acc.extras_total,
            adjustments_total=sum((a.value for a in period_adjustments), Decimal("0")),
            months=list(acc.months.values()),
            adjustments=period_adjustments,
        )

        logger.debug(
            f"Aggregated {date_range.display}: {summary.session_count} sessions, "
            f"{summary.hours}h, gross={summary.gross}, net={summary.net}"
        )
        return summary

    def monthly_buckets(
        self,
        date_range: DateRange,
        extras_mode: ExtrasAttributionMode = ExtrasAttributionMode.PER_MONTH,
    ) -> list[MonthlyBucket]:
        """Per-month figures for every month of the range, in order."""
        return list(self._accumulate(date_range, extras_mode).months.values())

    def breakdown(
        self,
        date_range: DateRange,
        extras_mode: ExtrasAttributionMode = ExtrasAttributionMode.ONCE_PER_RANGE,
    ) -> list[TrainingBreakdown]:
        """Per-training totals for trainings active in the range.

        Sorted by revenue, highest first.
        """
        rows = self._accumulate(date_range, extras_mode).by_training.values()
        return sorted(rows, key=lambda r: r.revenue, reverse=True)


def aggregate(
    trainings: Iterable[Training],
    adjustments: Iterable[FinancialAdjustment],
    date_range: DateRange,
    tax_rate_percent: Decimal,
) -> FinancialSummary:
    """Convenience function: financial summary with monthly extras.

    Args:
        trainings: Trainings with their sessions.
        adjustments: Standalone adjustments.
        date_range: Inclusive period.
        tax_rate_percent: Withholding percentage.

    Returns:
        FinancialSummary for the range.
    """
    return AggregationEngine(trainings, adjustments).summarize(date_range, tax_rate_percent)


def per_training_breakdown(
    trainings: Iterable[Training],
    date_range: DateRange,
    extras_mode: ExtrasAttributionMode = ExtrasAttributionMode.ONCE_PER_RANGE,
) -> list[TrainingBreakdown]:
    """Convenience function: per-training totals, extras counted once by default."""
    return AggregationEngine(trainings).breakdown(date_range, extras_mode)
