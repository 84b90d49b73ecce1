"""Mutation layer: the single owner of trainings, adjustments and app state.

Queries always recompute from the current collections, so a mutation is
visible to the very next summary.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Optional

from training_ledger.config import DEFAULT_TAX_RATE, WithholdingConfig
from training_ledger.models.adjustment import FinancialAdjustment
from training_ledger.models.period import DateRange, PeriodSelection
from training_ledger.models.report import FinancialSummary, TrainingBreakdown, WithholdingPayment
from training_ledger.models.training import Session, Training
from training_ledger.processing.aggregator import AggregationEngine, ExtrasAttributionMode
from training_ledger.processing.period_resolver import resolve_period, year_to_date_range
from training_ledger.processing.withholding import simulate_withholding
from training_ledger.seed import seed_trainings
from training_ledger.storage import codec
from training_ledger.storage.blob_store import (
    ADJUSTMENTS_KEY,
    ANALYSIS_SETTINGS_KEY,
    TAX_RATE_KEY,
    TRAININGS_KEY,
    BlobStore,
)
from training_ledger.storage.codec import LoadResult, LoadStatus
from training_ledger.utils.duration_utils import minutes_between, split_time_range
from training_ledger.utils.logging_config import LogContext, get_logger

logger = get_logger(__name__)

# Training fields that update_training may change
EDITABLE_TRAINING_FIELDS = {
    "name",
    "instructor",
    "hourly_rate",
    "color",
    "extra_value",
    "total_sessions",
    "schedule",
}


class LedgerError(Exception):
    """Base exception for rejected ledger mutations."""

    pass


class RecordNotFoundError(LedgerError):
    """Raised when a training, session or adjustment id does not exist."""

    pass


class LedgerValidationError(LedgerError):
    """Raised when a mutation carries invalid values."""

    pass


@dataclass
class AppState:
    """Process-wide settings passed explicitly into every query.

    Attributes:
        tax_rate_percent: Withholding percentage (0-100) applied to gross.
        period: The period currently being analysed.
    """

    tax_rate_percent: Decimal = field(default_factory=lambda: DEFAULT_TAX_RATE)
    period: PeriodSelection = field(default_factory=lambda: PeriodSelection.for_month(date.today()))


def _validate_rate(rate: Decimal) -> Decimal:
    rate = Decimal(str(rate))
    if not rate.is_finite() or not Decimal("0") <= rate <= Decimal("100"):
        raise LedgerValidationError(f"Tax rate must be between 0 and 100, got {rate}")
    return rate


def _validate_session(session: Session) -> None:
    if session.duration_minutes < 0:
        raise LedgerValidationError(
            f"Session {session.id} has a negative duration ({session.duration_minutes} min)"
        )


def _validate_training(training: Training) -> None:
    if not training.id:
        raise LedgerValidationError("Training id is required")
    if not training.name:
        raise LedgerValidationError(f"Training {training.id} needs a name")
    if training.hourly_rate < 0:
        raise LedgerValidationError(
            f"Training {training.id} has a negative hourly rate ({training.hourly_rate})"
        )
    seen: set[str] = set()
    for session in training.sessions:
        if session.id in seen:
            raise LedgerValidationError(
                f"Training {training.id} has duplicate session id {session.id}"
            )
        seen.add(session.id)
        _validate_session(session)


class TrainingLedger:
    """Owns the domain collections and persists them as whole snapshots.

    When a BlobStore is attached, each mutation rewrites the entry it
    touched (trainings, adjustments, tax rate or analysis settings).
    """

    def __init__(
        self,
        trainings: Optional[list[Training]] = None,
        adjustments: Optional[list[FinancialAdjustment]] = None,
        state: Optional[AppState] = None,
        store: Optional[BlobStore] = None,
    ):
        """Initialize the ledger.

        Args:
            trainings: Initial trainings (empty if None).
            adjustments: Initial adjustments (empty if None).
            state: Tax rate and period selection (defaults if None).
            store: Optional store receiving a snapshot after each mutation.
        """
        self.trainings: list[Training] = list(trainings or [])
        self.adjustments: list[FinancialAdjustment] = list(adjustments or [])
        self.state = state or AppState()
        self.store = store
        self.load_results: dict[str, LoadResult] = {}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def open(
        cls,
        store: BlobStore,
        default_tax_rate: Decimal = DEFAULT_TAX_RATE,
        today: Optional[date] = None,
    ) -> "TrainingLedger":
        """Load every entry from the store once, falling back per entry.

        Missing entries get the built-in seed data or defaults. Unparseable
        entries are logged and replaced the same way; the bad blob is left
        untouched until the next mutation of that entry overwrites it.

        Args:
            store: Blob store to read from and write to.
            default_tax_rate: Rate used when none is stored.
            today: Date used for the default month selection.

        Returns:
            A ledger bound to the store.
        """
        today = today or date.today()
        with LogContext(logger, "ledger load", data_dir=store.data_dir):
            results = {
                TRAININGS_KEY: codec.decode_trainings(store.get(TRAININGS_KEY)),
                ADJUSTMENTS_KEY: codec.decode_adjustments(store.get(ADJUSTMENTS_KEY)),
                TAX_RATE_KEY: codec.decode_tax_rate(store.get(TAX_RATE_KEY)),
                ANALYSIS_SETTINGS_KEY: codec.decode_analysis_settings(store.get(ANALYSIS_SETTINGS_KEY)),
            }

        for key, result in results.items():
            if result.status is LoadStatus.INVALID:
                logger.error(f"Could not load '{key}', using defaults: {'; '.join(result.errors)}")
            for warning in result.warnings:
                logger.warning(f"{key}: {warning}")

        def loaded(key: str, default: object) -> object:
            result = results[key]
            return result.value if result.ok else default

        trainings = results[TRAININGS_KEY].value if results[TRAININGS_KEY].ok else seed_trainings()
        ledger = cls(
            trainings=trainings,
            adjustments=loaded(ADJUSTMENTS_KEY, []),
            state=AppState(
                tax_rate_percent=loaded(TAX_RATE_KEY, default_tax_rate),
                period=loaded(ANALYSIS_SETTINGS_KEY, PeriodSelection.for_month(today)),
            ),
            store=store,
        )
        ledger.load_results = results
        logger.info(
            f"Ledger loaded: {len(ledger.trainings)} trainings, "
            f"{len(ledger.adjustments)} adjustments"
        )
        return ledger

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _save(self, key: str) -> None:
        if self.store is None:
            return
        if key == TRAININGS_KEY:
            text = codec.encode_trainings(self.trainings)
        elif key == ADJUSTMENTS_KEY:
            text = codec.encode_adjustments(self.adjustments)
        elif key == TAX_RATE_KEY:
            text = codec.encode_tax_rate(self.state.tax_rate_percent)
        else:
            text = codec.encode_analysis_settings(self.state.period)
        self.store.put(key, text)

    def save_all(self) -> None:
        """Write every entry to the store."""
        for key in (TRAININGS_KEY, ADJUSTMENTS_KEY, TAX_RATE_KEY, ANALYSIS_SETTINGS_KEY):
            self._save(key)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_training(self, training_id: str) -> Training:
        for training in self.trainings:
            if training.id == training_id:
                return training
        raise RecordNotFoundError(f"Unknown training: {training_id}")

    def get_session(self, training_id: str, session_id: str) -> Session:
        session = self.get_training(training_id).get_session(session_id)
        if session is None:
            raise RecordNotFoundError(f"Unknown session {session_id} in training {training_id}")
        return session

    def get_adjustment(self, adjustment_id: str) -> FinancialAdjustment:
        for adjustment in self.adjustments:
            if adjustment.id == adjustment_id:
                return adjustment
        raise RecordNotFoundError(f"Unknown adjustment: {adjustment_id}")

    # ------------------------------------------------------------------
    # Training mutations
    # ------------------------------------------------------------------

    def add_training(self, training: Training) -> Training:
        _validate_training(training)
        if any(t.id == training.id for t in self.trainings):
            raise LedgerValidationError(f"Training id already exists: {training.id}")
        self.trainings.append(training)
        logger.info(f"Added training {training.id} with {len(training.sessions)} sessions")
        self._save(TRAININGS_KEY)
        return training

    def update_training(self, training_id: str, **changes: object) -> Training:
        """Replace selected fields of a training.

        Raises:
            LedgerValidationError: On unknown fields or invalid values.
            RecordNotFoundError: If the training does not exist.
        """
        unknown = set(changes) - EDITABLE_TRAINING_FIELDS
        if unknown:
            raise LedgerValidationError(f"Cannot update training fields: {', '.join(sorted(unknown))}")

        current = self.get_training(training_id)
        updated = replace(current, **changes)  # type: ignore[arg-type]
        _validate_training(updated)

        index = self.trainings.index(current)
        self.trainings[index] = updated
        logger.info(f"Updated training {training_id}: {', '.join(sorted(changes))}")
        self._save(TRAININGS_KEY)
        return updated

    def delete_training(self, training_id: str) -> Training:
        """Remove a training together with all of its sessions."""
        training = self.get_training(training_id)
        self.trainings.remove(training)
        logger.info(f"Deleted training {training_id} ({len(training.sessions)} sessions)")
        self._save(TRAININGS_KEY)
        return training

    # ------------------------------------------------------------------
    # Session mutations
    # ------------------------------------------------------------------

    def add_session(self, training_id: str, session: Session) -> Session:
        training = self.get_training(training_id)
        if training.get_session(session.id) is not None:
            raise LedgerValidationError(f"Session id already exists in {training_id}: {session.id}")
        _validate_session(session)
        training.sessions.append(session)
        logger.info(f"Added session {session.id} on {session.date} to {training_id}")
        self._save(TRAININGS_KEY)
        return session

    def update_session(
        self,
        training_id: str,
        session_id: str,
        session_date: Optional[date] = None,
        time: Optional[str] = None,
        duration_minutes: Optional[int] = None,
        validated: Optional[bool] = None,
    ) -> Session:
        """Move, retime or (in)validate a session.

        A new time slot without an explicit duration recomputes the duration
        from the slot's start and end.
        """
        training = self.get_training(training_id)
        current = self.get_session(training_id, session_id)

        if time is not None and duration_minutes is None:
            start, end = split_time_range(time)
            duration_minutes = minutes_between(start, end)

        updated = replace(
            current,
            date=current.date if session_date is None else session_date,
            time=current.time if time is None else time,
            duration_minutes=current.duration_minutes if duration_minutes is None else duration_minutes,
            validated=current.validated if validated is None else validated,
        )
        _validate_session(updated)

        training.sessions[training.sessions.index(current)] = updated
        logger.info(f"Updated session {session_id} of {training_id}")
        self._save(TRAININGS_KEY)
        return updated

    def delete_session(self, training_id: str, session_id: str) -> Session:
        training = self.get_training(training_id)
        session = self.get_session(training_id, session_id)
        training.sessions.remove(session)
        logger.info(f"Deleted session {session_id} of {training_id}")
        self._save(TRAININGS_KEY)
        return session

    # ------------------------------------------------------------------
    # Adjustments and settings
    # ------------------------------------------------------------------

    def add_adjustment(self, adjustment: FinancialAdjustment) -> FinancialAdjustment:
        if not adjustment.description:
            raise LedgerValidationError("Adjustment needs a description")
        if any(a.id == adjustment.id for a in self.adjustments):
            raise LedgerValidationError(f"Adjustment id already exists: {adjustment.id}")
        self.adjustments.append(adjustment)
        logger.info(f"Added adjustment {adjustment.id}: {adjustment.value} on {adjustment.date}")
        self._save(ADJUSTMENTS_KEY)
        return adjustment

    def delete_adjustment(self, adjustment_id: str) -> FinancialAdjustment:
        adjustment = self.get_adjustment(adjustment_id)
        self.adjustments.remove(adjustment)
        logger.info(f"Deleted adjustment {adjustment_id}")
        self._save(ADJUSTMENTS_KEY)
        return adjustment

    def set_tax_rate(self, rate: Decimal) -> Decimal:
        self.state.tax_rate_percent = _validate_rate(rate)
        logger.info(f"Tax rate set to {self.state.tax_rate_percent}%")
        self._save(TAX_RATE_KEY)
        return self.state.tax_rate_percent

    def set_period(self, selection: PeriodSelection) -> DateRange:
        """Change the analysed period and return its resolved range."""
        date_range = resolve_period(selection)
        self.state.period = selection
        logger.info(f"Period set to {selection.describe()}")
        self._save(ANALYSIS_SETTINGS_KEY)
        return date_range

    def reset(self) -> None:
        """Restore the built-in trainings and drop all adjustments."""
        self.trainings = seed_trainings()
        self.adjustments = []
        logger.info("Ledger reset to seed data")
        self._save(TRAININGS_KEY)
        self._save(ADJUSTMENTS_KEY)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def current_range(self) -> DateRange:
        return resolve_period(self.state.period)

    def summary(self, selection: Optional[PeriodSelection] = None) -> FinancialSummary:
        """Financial summary for a selection (default: the stored period)."""
        date_range = resolve_period(selection or self.state.period)
        engine = AggregationEngine(self.trainings, self.adjustments)
        return engine.summarize(date_range, self.state.tax_rate_percent)

    def breakdown(
        self,
        date_range: Optional[DateRange] = None,
        today: Optional[date] = None,
        extras_mode: ExtrasAttributionMode = ExtrasAttributionMode.ONCE_PER_RANGE,
    ) -> list[TrainingBreakdown]:
        """Per-training totals; defaults to the year-to-date window."""
        if date_range is None:
            date_range = year_to_date_range(today or date.today())
        return AggregationEngine(self.trainings).breakdown(date_range, extras_mode)

    def withholding(self, schedule: WithholdingConfig) -> list[WithholdingPayment]:
        return simulate_withholding(self.trainings, schedule)
