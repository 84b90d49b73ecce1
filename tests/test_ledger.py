"""Tests for the mutation layer and its snapshot persistence."""

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from training_ledger.config import WithholdingConfig
from training_ledger.ledger import (
    AppState,
    LedgerValidationError,
    RecordNotFoundError,
    TrainingLedger,
)
from training_ledger.models.adjustment import FinancialAdjustment
from training_ledger.models.period import PeriodSelection
from training_ledger.models.training import Session, Training
from training_ledger.seed import seed_trainings
from training_ledger.storage import codec
from training_ledger.storage.blob_store import (
    ADJUSTMENTS_KEY,
    ANALYSIS_SETTINGS_KEY,
    TAX_RATE_KEY,
    TRAININGS_KEY,
    BlobStore,
)
from training_ledger.storage.codec import LoadStatus

MARCH = PeriodSelection.for_month(date(2026, 3, 1))


def create_session(session_id: str, session_date: date, minutes: int = 120) -> Session:
    """Helper to create a Session for testing."""
    return Session(id=session_id, date=session_date, time="10:00 - 12:00", duration_minutes=minutes)


def create_training(training_id: str = "excel", rate: str = "35", extra: str | None = None) -> Training:
    """Helper: a training with two March sessions."""
    return Training(
        id=training_id,
        name="Excel Avançado",
        hourly_rate=Decimal(rate),
        extra_value=None if extra is None else Decimal(extra),
        sessions=[
            create_session(f"{training_id}-s0", date(2026, 3, 2)),
            create_session(f"{training_id}-s1", date(2026, 3, 4)),
        ],
    )


def create_ledger(store: BlobStore | None = None) -> TrainingLedger:
    """Helper: ledger looking at March 2026 with a 25% rate."""
    return TrainingLedger(
        trainings=[create_training()],
        state=AppState(tax_rate_percent=Decimal("25"), period=MARCH),
        store=store,
    )


class TestTrainingMutations:
    def test_add_training_visible_in_summary(self) -> None:
        ledger = create_ledger()
        ledger.add_training(create_training("word", rate="20"))

        assert ledger.summary().training_income == Decimal("140") + Decimal("80")

    def test_duplicate_training_id_rejected(self) -> None:
        ledger = create_ledger()

        with pytest.raises(LedgerValidationError, match="already exists"):
            ledger.add_training(create_training())

    def test_negative_rate_rejected(self) -> None:
        ledger = create_ledger()

        with pytest.raises(LedgerValidationError, match="negative hourly rate"):
            ledger.add_training(create_training("bad", rate="-5"))

    def test_duplicate_session_ids_rejected(self) -> None:
        training = create_training("dup")
        training.sessions.append(create_session("dup-s0", date(2026, 3, 9)))

        with pytest.raises(LedgerValidationError, match="duplicate session id"):
            create_ledger().add_training(training)

    def test_delete_training_reflected_in_next_query(self) -> None:
        ledger = create_ledger()
        assert ledger.summary().hours == 4

        removed = ledger.delete_training("excel")

        assert removed.id == "excel"
        assert ledger.summary().hours == 0
        assert ledger.summary().gross == Decimal("0")

    def test_delete_unknown_training(self) -> None:
        with pytest.raises(RecordNotFoundError):
            create_ledger().delete_training("nope")

    def test_update_training_fields(self) -> None:
        ledger = create_ledger()
        ledger.update_training("excel", hourly_rate=Decimal("40"), extra_value=Decimal("100"))

        summary = ledger.summary()
        assert summary.training_income == Decimal("160")
        assert summary.extras_total == Decimal("100")

    def test_update_training_rejects_unknown_field(self) -> None:
        with pytest.raises(LedgerValidationError, match="sessions"):
            create_ledger().update_training("excel", sessions=[])

    def test_update_training_rejects_negative_rate(self) -> None:
        ledger = create_ledger()

        with pytest.raises(LedgerValidationError):
            ledger.update_training("excel", hourly_rate=Decimal("-1"))
        assert ledger.get_training("excel").hourly_rate == Decimal("35")


class TestSessionMutations:
    def test_add_session(self) -> None:
        ledger = create_ledger()
        ledger.add_session("excel", create_session("excel-s2", date(2026, 3, 9), minutes=180))

        assert ledger.summary().hours == 7

    def test_add_session_with_existing_id(self) -> None:
        with pytest.raises(LedgerValidationError):
            create_ledger().add_session("excel", create_session("excel-s0", date(2026, 3, 9)))

    def test_add_session_negative_duration(self) -> None:
        with pytest.raises(LedgerValidationError, match="negative duration"):
            create_ledger().add_session("excel", create_session("excel-s2", date(2026, 3, 9), minutes=-60))

    def test_add_session_unknown_training(self) -> None:
        with pytest.raises(RecordNotFoundError):
            create_ledger().add_session("nope", create_session("x", date(2026, 3, 9)))

    def test_move_session_out_of_period(self) -> None:
        ledger = create_ledger()
        ledger.update_session("excel", "excel-s1", session_date=date(2026, 4, 1))

        assert ledger.summary().hours == 2

    def test_new_time_recomputes_duration(self) -> None:
        ledger = create_ledger()
        session = ledger.update_session("excel", "excel-s0", time="09:00 - 13:00")

        assert session.duration_minutes == 240
        assert session.time == "09:00 - 13:00"
        assert ledger.summary().hours == 6

    def test_validate_session(self) -> None:
        ledger = create_ledger()
        session = ledger.update_session("excel", "excel-s0", validated=True)

        assert session.validated is True
        assert ledger.get_session("excel", "excel-s0").validated is True
        assert ledger.get_session("excel", "excel-s1").validated is False

    def test_delete_session(self) -> None:
        ledger = create_ledger()
        ledger.delete_session("excel", "excel-s0")

        assert ledger.summary().session_count == 1

    def test_delete_unknown_session(self) -> None:
        with pytest.raises(RecordNotFoundError):
            create_ledger().delete_session("excel", "excel-s9")


class TestAdjustmentsAndSettings:
    def test_add_and_delete_adjustment(self) -> None:
        ledger = create_ledger()
        adjustment = ledger.add_adjustment(
            FinancialAdjustment(description="Bónus", value=Decimal("60"), date=date(2026, 3, 20))
        )
        assert ledger.summary().gross == Decimal("200")

        ledger.delete_adjustment(adjustment.id)

        assert ledger.summary().gross == Decimal("140")

    def test_adjustment_needs_description(self) -> None:
        with pytest.raises(LedgerValidationError):
            create_ledger().add_adjustment(
                FinancialAdjustment(description="", value=Decimal("1"), date=date(2026, 3, 1))
            )

    def test_delete_unknown_adjustment(self) -> None:
        with pytest.raises(RecordNotFoundError):
            create_ledger().delete_adjustment("missing")

    def test_set_tax_rate(self) -> None:
        ledger = create_ledger()
        ledger.set_tax_rate(Decimal("10"))

        assert ledger.summary().tax == Decimal("14")

    @pytest.mark.parametrize("rate", ["-1", "100.5"])
    def test_tax_rate_out_of_range(self, rate: str) -> None:
        ledger = create_ledger()

        with pytest.raises(LedgerValidationError):
            ledger.set_tax_rate(Decimal(rate))
        assert ledger.state.tax_rate_percent == Decimal("25")

    def test_set_period(self) -> None:
        ledger = create_ledger()
        date_range = ledger.set_period(PeriodSelection.custom((2026, 4), (2026, 6)))

        assert date_range.start == date(2026, 4, 1)
        assert ledger.summary().hours == 0

    def test_summary_with_explicit_selection(self) -> None:
        ledger = create_ledger()
        summary = ledger.summary(PeriodSelection.custom((2026, 1), (2026, 12)))

        assert summary.hours == 4
        assert len(summary.months) == 12
        assert ledger.state.period == MARCH

    def test_reset_restores_seed(self) -> None:
        ledger = create_ledger()
        ledger.add_adjustment(
            FinancialAdjustment(description="x", value=Decimal("1"), date=date(2026, 3, 1))
        )
        ledger.reset()

        assert [t.id for t in ledger.trainings] == [t.id for t in seed_trainings()]
        assert ledger.adjustments == []


class TestQueries:
    def test_breakdown_defaults_to_year_to_date(self) -> None:
        ledger = create_ledger()
        ledger.add_session("excel", create_session("excel-s2", date(2026, 11, 2)))

        rows = ledger.breakdown(today=date(2026, 10, 18))

        assert rows[0].hours == 4

    def test_withholding_ignores_adjustments(self) -> None:
        ledger = create_ledger()
        before = ledger.withholding(WithholdingConfig())
        ledger.add_adjustment(
            FinancialAdjustment(description="x", value=Decimal("500"), date=date(2026, 3, 1))
        )
        after = ledger.withholding(WithholdingConfig())

        assert [p.revenue for p in before] == [p.revenue for p in after]
        assert after[1].revenue == Decimal("140")


class TestPersistence:
    def test_mutations_write_snapshots(self, tmp_path: Path) -> None:
        store = BlobStore(tmp_path)
        ledger = create_ledger(store)

        ledger.add_session("excel", create_session("excel-s2", date(2026, 3, 9)))
        ledger.set_tax_rate(Decimal("30"))
        ledger.set_period(PeriodSelection.custom((2026, 1), (2026, 3)))
        ledger.add_adjustment(
            FinancialAdjustment(id="a1", description="x", value=Decimal("5"), date=date(2026, 3, 1))
        )

        assert len(codec.decode_trainings(store.get(TRAININGS_KEY)).value[0].sessions) == 3
        assert store.get(TAX_RATE_KEY) == "30"
        assert codec.decode_analysis_settings(store.get(ANALYSIS_SETTINGS_KEY)).value.start_month == (2026, 1)
        assert codec.decode_adjustments(store.get(ADJUSTMENTS_KEY)).value[0].id == "a1"

    def test_reopen_restores_state(self, tmp_path: Path) -> None:
        store = BlobStore(tmp_path)
        ledger = create_ledger(store)
        ledger.save_all()
        ledger.delete_session("excel", "excel-s1")
        ledger.set_tax_rate(Decimal("20"))

        reopened = TrainingLedger.open(store)

        assert [t.id for t in reopened.trainings] == ["excel"]
        assert len(reopened.trainings[0].sessions) == 1
        assert reopened.state.tax_rate_percent == Decimal("20")
        assert reopened.state.period == MARCH

    def test_open_empty_store_uses_seed_and_defaults(self, tmp_path: Path) -> None:
        ledger = TrainingLedger.open(BlobStore(tmp_path), today=date(2026, 5, 10))

        assert len(ledger.trainings) == len(seed_trainings())
        assert ledger.adjustments == []
        assert ledger.state.tax_rate_percent == Decimal("25")
        assert ledger.state.period == PeriodSelection.for_month(date(2026, 5, 10))
        assert ledger.load_results[TRAININGS_KEY].status is LoadStatus.MISSING

    def test_open_with_corrupt_blob_falls_back(self, tmp_path: Path) -> None:
        store = BlobStore(tmp_path)
        store.put(TRAININGS_KEY, "{broken")
        store.put(TAX_RATE_KEY, "999")

        ledger = TrainingLedger.open(store, default_tax_rate=Decimal("23"))

        assert len(ledger.trainings) == len(seed_trainings())
        assert ledger.state.tax_rate_percent == Decimal("23")
        assert ledger.load_results[TRAININGS_KEY].status is LoadStatus.INVALID
        # The unreadable blob stays until the next write of that entry
        assert store.get(TRAININGS_KEY) == "{broken"

    def test_empty_stored_list_is_kept(self, tmp_path: Path) -> None:
        store = BlobStore(tmp_path)
        store.put(TRAININGS_KEY, "[]")

        assert TrainingLedger.open(store).trainings == []
