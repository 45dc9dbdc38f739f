"""
Off-clock money inputs: manual payments and tip records.

Pure, frozen value objects.  All amounts are non-negative ``int`` cents.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from payroll_kernel.domain.values import require_cents


@dataclass(frozen=True)
class ManualPayment:
    """
    A one-off payment recorded by a manager (per-job contractor work,
    bonuses, corrections).  Added to gross pay as supplied.
    """
    payment_date: date
    amount_cents: int
    description: str | None = None
    payment_id: str | None = None

    def __post_init__(self):
        require_cents(self.amount_cents, "amount_cents")


@dataclass(frozen=True)
class TipSplitItem:
    """One employee's share of an approved tip split."""
    employee_id: str
    amount_cents: int
    split_date: date | None = None

    def __post_init__(self):
        require_cents(self.amount_cents, "amount_cents")


@dataclass(frozen=True)
class TipRecord:
    """A per-employee tip entry from the older tip tracking flow."""
    employee_id: str
    tip_amount_cents: int
    tip_date: date | None = None

    def __post_init__(self):
        require_cents(self.tip_amount_cents, "tip_amount_cents")
