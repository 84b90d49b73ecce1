"""Data models for trainings, sessions, adjustments and reports."""

from training_ledger.models.adjustment import FinancialAdjustment
from training_ledger.models.period import DateRange, PeriodMode, PeriodSelection, RangeStatus
from training_ledger.models.report import (
    FinancialSummary,
    MonthlyBucket,
    TrainingBreakdown,
    WithholdingPayment,
    WorkloadLevel,
)
from training_ledger.models.training import Session, Training

__all__ = [
    "Session",
    "Training",
    "FinancialAdjustment",
    "DateRange",
    "PeriodMode",
    "PeriodSelection",
    "RangeStatus",
    "FinancialSummary",
    "MonthlyBucket",
    "TrainingBreakdown",
    "WithholdingPayment",
    "WorkloadLevel",
]
