"""Report data models produced by the aggregation engine."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from training_ledger.models.adjustment import FinancialAdjustment
from training_ledger.models.period import DateRange
from training_ledger.utils.date_utils import last_day_of_month, month_label
from training_ledger.utils.decimal_utils import ZERO, percent_of

# Workload thresholds relative to the average month of the period
HIGH_WORKLOAD_FACTOR = Decimal("1.2")
LOW_WORKLOAD_FACTOR = Decimal("0.5")

# Breakdown rows shorten long course names for charts and tables
SHORT_NAME_LENGTH = 20


class WorkloadLevel(Enum):
    """Classification of a month against the period average."""

    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"


@dataclass
class MonthlyBucket:
    """Figures for one calendar month of a period.

    Attributes:
        year: Calendar year.
        month: Calendar month (1-12).
        hours: Whole session hours in the month.
        session_count: Number of sessions in the month.
        training_income: Sum of hours * hourly rate.
        extras: Flat extras attributed to this month.
    """

    year: int
    month: int
    hours: int = 0
    session_count: int = 0
    training_income: Decimal = field(default_factory=lambda: Decimal("0"))
    extras: Decimal = field(default_factory=lambda: Decimal("0"))

    @property
    def key(self) -> tuple[int, int]:
        return (self.year, self.month)

    @property
    def revenue(self) -> Decimal:
        """Session income plus extras for the month."""
        return self.training_income + self.extras

    def label(self, reference_year: int | None = None) -> str:
        return month_label(self.year, self.month, reference_year)


@dataclass
class FinancialSummary:
    """Hours, income and withholding for a resolved period.

    Single source of truth for the console report and both exporters.

    Attributes:
        date_range: The period the figures cover.
        tax_rate_percent: Withholding rate applied to gross income.
        hours: Whole session hours in the period.
        session_count: Sessions in the period.
        training_income: Sum of hours * hourly rate.
        extras_total: Flat extras, attributed once per training per month.
        adjustments_total: Signed sum of in-period adjustments.
        months: One bucket per calendar month of the period, in order.
        adjustments: The in-period adjustments themselves.
    """

    date_range: DateRange
    tax_rate_percent: Decimal
    hours: int = 0
    session_count: int = 0
    training_income: Decimal = field(default_factory=lambda: Decimal("0"))
    extras_total: Decimal = field(default_factory=lambda: Decimal("0"))
    adjustments_total: Decimal = field(default_factory=lambda: Decimal("0"))
    months: list[MonthlyBucket] = field(default_factory=list)
    adjustments: list[FinancialAdjustment] = field(default_factory=list)

    @property
    def gross(self) -> Decimal:
        """Training income + extras + adjustments."""
        return self.training_income + self.extras_total + self.adjustments_total

    @property
    def tax(self) -> Decimal:
        """Withholding on gross income."""
        return percent_of(self.gross, self.tax_rate_percent)

    @property
    def net(self) -> Decimal:
        return self.gross - self.tax

    @property
    def average_hours_per_month(self) -> Decimal:
        if not self.months:
            return ZERO
        return Decimal(sum(m.hours for m in self.months)) / len(self.months)

    @property
    def peak_month(self) -> MonthlyBucket | None:
        """Busiest month by hours (earliest wins ties)."""
        if not self.months:
            return None
        return max(self.months, key=lambda m: m.hours)

    @property
    def low_month(self) -> MonthlyBucket | None:
        """Quietest month by hours (earliest wins ties)."""
        if not self.months:
            return None
        return min(self.months, key=lambda m: m.hours)

    @property
    def peak_revenue_month(self) -> MonthlyBucket | None:
        if not self.months:
            return None
        return max(self.months, key=lambda m: m.revenue)

    def workload_level(self, bucket: MonthlyBucket) -> WorkloadLevel:
        """Classify a month against the period's average monthly hours.

        A period without any hours has no meaningful average, so every month
        in it is NORMAL.
        """
        average = self.average_hours_per_month
        if average <= 0:
            return WorkloadLevel.NORMAL
        if bucket.hours >= average * HIGH_WORKLOAD_FACTOR:
            return WorkloadLevel.HIGH
        if bucket.hours <= average * LOW_WORKLOAD_FACTOR:
            return WorkloadLevel.LOW
        return WorkloadLevel.NORMAL


@dataclass
class TrainingBreakdown:
    """Per-training totals for a reporting window.

    Attributes:
        training_id: Training identifier.
        name: Full training name.
        hourly_rate: Rate of the training.
        color: Presentation tag.
        hours: Whole session hours in the window.
        session_count: Sessions in the window.
        session_income: hours * hourly_rate.
        extras: Extras attributed under the breakdown's attribution mode.
    """

    training_id: str
    name: str
    hourly_rate: Decimal
    color: str = ""
    hours: int = 0
    session_count: int = 0
    session_income: Decimal = field(default_factory=lambda: Decimal("0"))
    extras: Decimal = field(default_factory=lambda: Decimal("0"))

    @property
    def revenue(self) -> Decimal:
        return self.session_income + self.extras

    @property
    def short_name(self) -> str:
        if len(self.name) > SHORT_NAME_LENGTH:
            return self.name[:SHORT_NAME_LENGTH] + "..."
        return self.name


@dataclass
class WithholdingPayment:
    """One lump of the withholding payment schedule.

    Attributes:
        label: Display label, e.g. "Jan+Feb".
        year: Year the months belong to.
        months: Calendar months covered by the lump.
        payment_month: Month in which the withholding is paid.
        tax_rate_percent: Rate applied to this lump.
        revenue: Session income plus monthly extras for the covered months.
    """

    label: str
    year: int
    months: tuple[int, ...]
    payment_month: int
    tax_rate_percent: Decimal
    revenue: Decimal = field(default_factory=lambda: Decimal("0"))

    @property
    def tax(self) -> Decimal:
        return percent_of(self.revenue, self.tax_rate_percent)

    @property
    def due_date(self) -> date:
        """Last day of the payment month.

        A payment month earlier than the covered months falls in the
        following year (e.g. November+December paid in February).
        """
        pay_year = self.year
        if self.months and self.payment_month < max(self.months):
            pay_year += 1
        return last_day_of_month(pay_year, self.payment_month)
