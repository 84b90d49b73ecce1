"""Withholding payment simulation.

Revenue for each lump of the schedule is the sum of the monthly buckets it
covers, so flat extras follow the per-month rule. Standalone adjustments are
not part of the simulation.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from training_ledger.config import WithholdingConfig
from training_ledger.models.report import WithholdingPayment
from training_ledger.models.training import Training
from training_ledger.processing.aggregator import AggregationEngine, ExtrasAttributionMode
from training_ledger.processing.period_resolver import year_range
from training_ledger.utils.logging_config import get_logger

logger = get_logger(__name__)


class WithholdingSimulator:
    """Projects the withholding owed for each lump of a payment schedule."""

    def __init__(self, schedule: WithholdingConfig):
        """Initialize simulator.

        Args:
            schedule: Year and payment lumps to simulate.
        """
        self.schedule = schedule

    def simulate(self, trainings: Iterable[Training]) -> list[WithholdingPayment]:
        """Compute revenue and tax for every lump of the schedule.

        Args:
            trainings: Trainings with their sessions.

        Returns:
            One WithholdingPayment per configured period, in schedule order.
        """
        engine = AggregationEngine(trainings)
        buckets = engine.monthly_buckets(
            year_range(self.schedule.year), ExtrasAttributionMode.PER_MONTH
        )
        revenue_by_month = {b.month: b.revenue for b in buckets}

        payments = []
        for period in self.schedule.periods:
            revenue = sum(
                (revenue_by_month.get(m, Decimal("0")) for m in period.months),
                Decimal("0"),
            )
            payments.append(
                WithholdingPayment(
                    label=period.label,
                    year=self.schedule.year,
                    months=period.months,
                    payment_month=period.payment_month,
                    tax_rate_percent=period.tax_rate,
                    revenue=revenue,
                )
            )

        logger.debug(
            f"Simulated {len(payments)} withholding payments for {self.schedule.year}"
        )
        return payments


def simulate_withholding(
    trainings: Iterable[Training],
    schedule: WithholdingConfig,
) -> list[WithholdingPayment]:
    """Convenience function to simulate a withholding schedule."""
    return WithholdingSimulator(schedule).simulate(trainings)


def next_payment_due(
    payments: list[WithholdingPayment], today: date
) -> Optional[WithholdingPayment]:
    """First payment, by due date, that is due on or after today."""
    upcoming = [p for p in payments if p.due_date >= today]
    if not upcoming:
        return None
    return min(upcoming, key=lambda p: p.due_date)
