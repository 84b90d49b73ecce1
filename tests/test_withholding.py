"""Tests for the withholding payment simulation."""

from datetime import date
from decimal import Decimal

from training_ledger.config import WithholdingConfig, WithholdingPeriodConfig
from training_ledger.models.report import WithholdingPayment
from training_ledger.models.training import Session, Training
from training_ledger.processing.withholding import (
    WithholdingSimulator,
    next_payment_due,
    simulate_withholding,
)


def create_training(session_dates: list[date], rate: str = "50", extra: str | None = None) -> Training:
    """Helper: one 2h session per date."""
    return Training(
        id="t1",
        name="Formação",
        hourly_rate=Decimal(rate),
        extra_value=None if extra is None else Decimal(extra),
        sessions=[
            Session(id=f"t1-s{i}", date=d, time="10:00 - 12:00", duration_minutes=120)
            for i, d in enumerate(session_dates)
        ],
    )


class TestDefaultSchedule:
    """Default schedule: Jan+Feb paid in March, Mar-May paid in June, 25% each."""

    def test_revenue_per_lump(self) -> None:
        training = create_training(
            [date(2026, 1, 5), date(2026, 2, 2), date(2026, 3, 2), date(2026, 6, 1)]
        )
        jan_feb, mar_may = simulate_withholding([training], WithholdingConfig())

        assert jan_feb.label == "Jan+Feb"
        assert jan_feb.revenue == Decimal("200")
        assert jan_feb.tax == Decimal("50")
        assert mar_may.label == "Mar-May"
        assert mar_may.revenue == Decimal("100")
        assert mar_may.tax == Decimal("25")

    def test_due_dates(self) -> None:
        jan_feb, mar_may = simulate_withholding([], WithholdingConfig())

        assert jan_feb.due_date == date(2026, 3, 31)
        assert mar_may.due_date == date(2026, 6, 30)

    def test_extras_follow_monthly_rule(self) -> None:
        training = create_training([date(2026, 1, 5), date(2026, 2, 2)], rate="0", extra="400")
        jan_feb, _ = simulate_withholding([training], WithholdingConfig())

        assert jan_feb.revenue == Decimal("800")

    def test_other_years_ignored(self) -> None:
        training = create_training([date(2025, 1, 6), date(2027, 2, 1)])
        payments = simulate_withholding([training], WithholdingConfig())

        assert all(p.revenue == Decimal("0") for p in payments)


class TestCustomSchedule:
    def test_configured_periods_and_rates(self) -> None:
        schedule = WithholdingConfig(
            year=2025,
            periods=[
                WithholdingPeriodConfig(
                    label="Q1", months=(1, 2, 3), payment_month=4, tax_rate=Decimal("20")
                ),
            ],
        )
        training = create_training([date(2025, 1, 6), date(2025, 3, 3), date(2026, 1, 5)])

        payments = WithholdingSimulator(schedule).simulate([training])

        assert len(payments) == 1
        assert payments[0].revenue == Decimal("200")
        assert payments[0].tax == Decimal("40")
        assert payments[0].due_date == date(2025, 4, 30)

    def test_payment_month_rolls_into_next_year(self) -> None:
        payment = WithholdingPayment(
            label="Nov+Dec",
            year=2026,
            months=(11, 12),
            payment_month=2,
            tax_rate_percent=Decimal("25"),
        )

        assert payment.due_date == date(2027, 2, 28)


class TestNextPaymentDue:
    def test_picks_first_upcoming(self) -> None:
        payments = simulate_withholding([], WithholdingConfig())

        upcoming = next_payment_due(payments, date(2026, 4, 1))

        assert upcoming is not None
        assert upcoming.label == "Mar-May"

    def test_due_day_itself_counts(self) -> None:
        payments = simulate_withholding([], WithholdingConfig())

        assert next_payment_due(payments, date(2026, 3, 31)).label == "Jan+Feb"

    def test_none_after_last_payment(self) -> None:
        payments = simulate_withholding([], WithholdingConfig())

        assert next_payment_due(payments, date(2026, 7, 1)) is None
