"""Standalone financial adjustment model."""

import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal


@dataclass
class FinancialAdjustment:
    """An ad-hoc income or deduction not tied to any training.

    Attributes:
        description: What the entry is for (bonus, travel, refund...).
        value: Signed amount; positive is income, negative a deduction.
        date: Used only to place the entry within a period.
        id: Unique identifier.
    """

    description: str
    value: Decimal
    date: date
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
