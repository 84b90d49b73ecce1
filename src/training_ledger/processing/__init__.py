"""Period resolution, aggregation and scheduling."""

from training_ledger.processing.aggregator import (
    AggregationEngine,
    ExtrasAttributionMode,
    aggregate,
    per_training_breakdown,
)
from training_ledger.processing.period_resolver import resolve_period, year_to_date_range
from training_ledger.processing.schedule_generator import generate_schedule_sessions
from training_ledger.processing.withholding import (
    WithholdingSimulator,
    next_payment_due,
    simulate_withholding,
)

__all__ = [
    "AggregationEngine",
    "ExtrasAttributionMode",
    "aggregate",
    "per_training_breakdown",
    "resolve_period",
    "year_to_date_range",
    "generate_schedule_sessions",
    "WithholdingSimulator",
    "simulate_withholding",
    "next_payment_due",
]
