"""
Compensation Resolver (``payroll_engines.compensation``).

Responsibility
--------------
Turns a ``Compensation`` plus the worked time of a period into pay, one
formula per compensation model:

* hourly      -- per week ``round(regular_h * rate) + round(ot_h * rate * 1.5)``,
                 then summed across weeks
* salary      -- ``round(salary / days_per_pay_period)`` per calendar day of
                 the requested period; zero when not allocated daily
* contractor  -- ``round(amount / days_per_interval)`` per calendar day;
                 per-job contractors are paid only through manual payments
* daily_rate  -- ``round(weekly_reference / standard_days)`` per distinct
                 date actually worked

Also the calendar helpers used to size pay periods.

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O, ZERO clock reads.

Invariants enforced
-------------------
* Inputs and outputs are ``int`` cents; intermediate values are
  ``Decimal`` rounded ROUND_HALF_UP exactly once per formula step.
* Hourly rounding happens at the week boundary, never once globally.
* Exactly one of the model-specific pay components is non-zero.

Failure modes
-------------
* ``ValueError`` for programming errors: ``standard_days <= 0``, a period
  that ends before it starts, hourly cost requested without hours.

Audit relevance
---------------
The semi-monthly (15.22) and monthly (30.44) day counts are the average
days per period over a year of 365.25 days.  They are approximations: a
31-day month of daily salary allocations does not sum to exactly one
month of salary.  They are kept because downstream reports were built on
them.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from payroll_kernel.domain.compensation import (
    Compensation,
    ContractorCompensation,
    ContractorInterval,
    DailyRateCompensation,
    HourlyCompensation,
    PayPeriodType,
    SalaryCompensation,
)
from payroll_kernel.domain.values import cents_for_seconds, round_cents
from payroll_kernel.logging_config import get_logger

from payroll_engines.overtime import OVERTIME_MULTIPLIER, WeeklyHours, week_start_for
from payroll_engines.tracer import traced_engine

logger = get_logger("engines.compensation")

# Average calendar days per pay period (365.25 / paychecks per year for the
# two month-based periods).
DAYS_PER_PAY_PERIOD: dict[PayPeriodType, Decimal] = {
    PayPeriodType.WEEKLY: Decimal("7"),
    PayPeriodType.BI_WEEKLY: Decimal("14"),
    PayPeriodType.SEMI_MONTHLY: Decimal("15.22"),
    PayPeriodType.MONTHLY: Decimal("30.44"),
}

DAYS_PER_CONTRACTOR_INTERVAL: dict[ContractorInterval, Decimal] = {
    ContractorInterval.WEEKLY: Decimal("7"),
    ContractorInterval.BI_WEEKLY: Decimal("14"),
    ContractorInterval.MONTHLY: Decimal("30.44"),
}

PAYCHECKS_PER_YEAR: dict[PayPeriodType, int] = {
    PayPeriodType.WEEKLY: 52,
    PayPeriodType.BI_WEEKLY: 26,
    PayPeriodType.SEMI_MONTHLY: 24,
    PayPeriodType.MONTHLY: 12,
}

WEEKS_PER_YEAR = 52

# Bi-weekly periods are aligned to this Monday.
BI_WEEKLY_ANCHOR = date(2024, 1, 1)


# ---------------------------------------------------------------------------
# Daily allocations
# ---------------------------------------------------------------------------


def daily_salary_allocation(salary_amount_cents: int, pay_period_type: PayPeriodType) -> int:
    """Salary cost of one calendar day."""
    return round_cents(
        Decimal(salary_amount_cents) / DAYS_PER_PAY_PERIOD[PayPeriodType(pay_period_type)]
    )


def daily_contractor_allocation(payment_amount_cents: int, interval: ContractorInterval) -> int:
    """Contractor cost of one calendar day; 0 for per-job contractors."""
    interval = ContractorInterval(interval)
    if interval is ContractorInterval.PER_JOB:
        return 0
    return round_cents(Decimal(payment_amount_cents) / DAYS_PER_CONTRACTOR_INTERVAL[interval])


def daily_rate_from_weekly(weekly_reference_cents: int, standard_days: int) -> int:
    """Pay for one worked day, derived from a weekly reference amount.

    Example: $1000 over 6 standard days -> 16667 cents per day.
    """
    if standard_days <= 0:
        raise ValueError(f"standard_days must be positive, got {standard_days}")
    return round_cents(Decimal(weekly_reference_cents) / Decimal(standard_days))


def effective_hourly_rate(
    salary_amount_cents: int,
    pay_period_type: PayPeriodType,
    hours_per_week: int = 40,
) -> int:
    """Hourly equivalent of a salary, in cents.

    ``annual = salary * paychecks_per_year``; ``rate = annual / (hours * 52)``.
    """
    if hours_per_week <= 0:
        raise ValueError(f"hours_per_week must be positive, got {hours_per_week}")
    annual = salary_amount_cents * PAYCHECKS_PER_YEAR[PayPeriodType(pay_period_type)]
    return round_cents(Decimal(annual) / Decimal(hours_per_week * WEEKS_PER_YEAR))


def daily_labor_cost(compensation: Compensation, seconds_worked: int | None = None) -> int:
    """
    Cost of one day of labor for a single employee.

    Hourly employees need ``seconds_worked``.  Daily-rate employees cost
    their daily rate; the caller only asks for days they worked.
    """
    if isinstance(compensation, HourlyCompensation):
        if seconds_worked is None:
            raise ValueError("seconds_worked is required for hourly employees")
        return cents_for_seconds(seconds_worked, compensation.hourly_rate_cents)
    if isinstance(compensation, SalaryCompensation):
        if not compensation.allocate_daily:
            return 0
        return daily_salary_allocation(
            compensation.salary_amount_cents, compensation.pay_period_type,
        )
    if isinstance(compensation, ContractorCompensation):
        return daily_contractor_allocation(
            compensation.payment_amount_cents, compensation.interval,
        )
    return daily_rate_from_weekly(
        compensation.weekly_reference_cents, compensation.standard_days,
    )


# ---------------------------------------------------------------------------
# Pay period calendar
# ---------------------------------------------------------------------------


def days_in_period(start: date, end: date) -> int:
    """Inclusive day count of ``[start, end]``."""
    if end < start:
        raise ValueError(f"Period end {end} is before period start {start}")
    return (end - start).days + 1


def pay_period_bounds(
    day: date,
    pay_period_type: PayPeriodType,
    start_weekday: int | str = "sunday",
) -> tuple[date, date]:
    """
    The pay period containing ``day`` as an inclusive ``(start, end)``.

    weekly        -- seven days beginning on ``start_weekday``
    bi-weekly     -- fourteen days aligned to ``BI_WEEKLY_ANCHOR``
    semi-monthly  -- the 1st to the 15th, or the 16th to month end
    monthly       -- the calendar month
    """
    pay_period_type = PayPeriodType(pay_period_type)

    if pay_period_type is PayPeriodType.WEEKLY:
        start = week_start_for(day, start_weekday)
        return start, start + timedelta(days=6)

    if pay_period_type is PayPeriodType.BI_WEEKLY:
        start = day - timedelta(days=(day - BI_WEEKLY_ANCHOR).days % 14)
        return start, start + timedelta(days=13)

    last_day = calendar.monthrange(day.year, day.month)[1]
    if pay_period_type is PayPeriodType.SEMI_MONTHLY:
        if day.day <= 15:
            return day.replace(day=1), day.replace(day=15)
        return day.replace(day=16), day.replace(day=last_day)

    return day.replace(day=1), day.replace(day=last_day)


# ---------------------------------------------------------------------------
# Period pay
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CompensationBreakdown:
    """Pay components for one employee over one period, in cents."""
    regular_pay_cents: int = 0
    overtime_pay_cents: int = 0
    salary_pay_cents: int = 0
    contractor_pay_cents: int = 0
    daily_rate_pay_cents: int = 0

    @property
    def total_cents(self) -> int:
        return (
            self.regular_pay_cents
            + self.overtime_pay_cents
            + self.salary_pay_cents
            + self.contractor_pay_cents
            + self.daily_rate_pay_cents
        )


def hourly_pay(
    weekly_hours: Iterable[WeeklyHours],
    hourly_rate_cents: int,
) -> tuple[int, int]:
    """(regular_pay, overtime_pay) in cents, rounded per week then summed."""
    regular = overtime = 0
    for week in weekly_hours:
        regular += cents_for_seconds(week.regular_seconds, hourly_rate_cents)
        overtime += cents_for_seconds(
            week.overtime_seconds, hourly_rate_cents, OVERTIME_MULTIPLIER,
        )
    return regular, overtime


@traced_engine(
    "compensation", "1.0",
    fingerprint_fields=("compensation", "period_start", "period_end", "days_worked"),
)
def resolve_compensation(
    compensation: Compensation,
    weekly_hours: Iterable[WeeklyHours],
    period_start: date,
    period_end: date,
    days_worked: int = 0,
) -> CompensationBreakdown:
    """
    Pay for one employee over ``[period_start, period_end]``.

    Args:
        compensation: The employee's compensation model.
        weekly_hours: Worked time per calendar week (hourly only).
        period_start: First day of the period (inclusive).
        period_end: Last day of the period (inclusive).
        days_worked: Distinct calendar dates worked (daily rate only).
    """
    period_days = days_in_period(period_start, period_end)

    if isinstance(compensation, HourlyCompensation):
        regular, overtime = hourly_pay(weekly_hours, compensation.hourly_rate_cents)
        return CompensationBreakdown(regular_pay_cents=regular, overtime_pay_cents=overtime)

    if isinstance(compensation, SalaryCompensation):
        if not compensation.allocate_daily:
            return CompensationBreakdown()
        daily = daily_salary_allocation(
            compensation.salary_amount_cents, compensation.pay_period_type,
        )
        return CompensationBreakdown(salary_pay_cents=daily * period_days)

    if isinstance(compensation, ContractorCompensation):
        daily = daily_contractor_allocation(
            compensation.payment_amount_cents, compensation.interval,
        )
        return CompensationBreakdown(contractor_pay_cents=daily * period_days)

    if isinstance(compensation, DailyRateCompensation):
        if days_worked < 0:
            raise ValueError(f"days_worked cannot be negative, got {days_worked}")
        daily = daily_rate_from_weekly(
            compensation.weekly_reference_cents, compensation.standard_days,
        )
        return CompensationBreakdown(daily_rate_pay_cents=daily * days_worked)

    raise TypeError(f"Unsupported compensation {type(compensation).__name__}")
