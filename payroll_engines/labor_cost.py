"""
Actual labor cost by day (``payroll_engines.labor_cost``).

Responsibility
--------------
Spreads the labor cost implied by historical punches over the calendar
days of a date range, split by compensation model, for dashboards that
compare labor against sales day by day.

* hourly      -- worked time times rate, on the start date of each work period
* salary      -- the daily salary allocation on every date the employee was
                 on the clock (an overnight period touches both dates);
                 nothing when the salary is not allocated daily
* contractor  -- the daily contractor allocation, same dates as salary;
                 nothing for per-job contractors
* daily rate  -- the daily rate on every date with a clock-in

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O, ZERO clock reads.

Invariants enforced
-------------------
* Only active employees contribute.
* Every date of ``[start_date, end_date]`` appears exactly once in the
  report, in ascending order, even when nothing was spent on it.
* All costs are ``int`` cents.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from payroll_config.schema import PayrollPolicy
from payroll_kernel.domain.compensation import (
    CompensationType,
    ContractorCompensation,
    DailyRateCompensation,
    Employee,
    HourlyCompensation,
    SalaryCompensation,
)
from payroll_kernel.domain.punches import PunchType, TimePunch
from payroll_kernel.domain.values import hours_from_seconds
from payroll_kernel.logging_config import get_logger

from payroll_engines.compensation import daily_labor_cost, days_in_period
from payroll_engines.punch_sequencer import parse_work_periods
from payroll_engines.tracer import traced_engine

logger = get_logger("engines.labor_cost")


@dataclass(frozen=True)
class DailyLaborCost:
    """Labor cost of one calendar day."""
    day: date
    hourly_cost_cents: int = 0
    salary_cost_cents: int = 0
    contractor_cost_cents: int = 0
    daily_rate_cost_cents: int = 0
    hourly_seconds_worked: int = 0

    @property
    def total_cost_cents(self) -> int:
        return (
            self.hourly_cost_cents
            + self.salary_cost_cents
            + self.contractor_cost_cents
            + self.daily_rate_cost_cents
        )

    @property
    def hours_worked(self) -> Decimal:
        """Hours worked by hourly employees on this day."""
        return hours_from_seconds(self.hourly_seconds_worked)


@dataclass(frozen=True)
class LaborCostBreakdown:
    """Range totals per compensation model."""
    hourly_cost_cents: int
    hourly_seconds_worked: int
    salary_cost_cents: int
    salary_employees: int
    salary_days: int
    contractor_cost_cents: int
    contractor_employees: int
    contractor_days: int
    daily_rate_cost_cents: int
    daily_rate_employees: int
    daily_rate_days: int

    @property
    def hourly_hours_worked(self) -> Decimal:
        return hours_from_seconds(self.hourly_seconds_worked)

    @property
    def total_cost_cents(self) -> int:
        return (
            self.hourly_cost_cents
            + self.salary_cost_cents
            + self.contractor_cost_cents
            + self.daily_rate_cost_cents
        )


@dataclass(frozen=True)
class LaborCostReport:
    start_date: date
    end_date: date
    daily_costs: tuple[DailyLaborCost, ...]
    breakdown: LaborCostBreakdown

    @property
    def total_cost_cents(self) -> int:
        return self.breakdown.total_cost_cents


def _date_range(start: date, end: date) -> list[date]:
    return [start + timedelta(days=i) for i in range(days_in_period(start, end))]


def _touched_dates(start: date, end: date) -> Iterable[date]:
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


@traced_engine(
    "labor_cost", "1.0",
    fingerprint_fields=("start_date", "end_date", "employees"),
)
def calculate_actual_labor_cost(
    employees: Sequence[Employee],
    punches: Iterable[TimePunch],
    start_date: date,
    end_date: date,
    policy: PayrollPolicy | None = None,
) -> LaborCostReport:
    """
    Daily labor cost for ``[start_date, end_date]`` from historical punches.

    ``punches`` may mix employees; punches of unknown or inactive
    employees are ignored.
    """
    dates = _date_range(start_date, end_date)
    in_range = set(dates)
    by_id = {e.employee_id: e for e in employees if e.is_active}

    punches_by_employee: dict[str, list[TimePunch]] = defaultdict(list)
    for punch in punches:
        if punch.employee_id in by_id:
            punches_by_employee[punch.employee_id].append(punch)

    hourly_cost: dict[date, int] = defaultdict(int)
    hourly_seconds: dict[date, int] = defaultdict(int)
    salary_cost: dict[date, int] = defaultdict(int)
    contractor_cost: dict[date, int] = defaultdict(int)
    daily_rate_cost: dict[date, int] = defaultdict(int)

    for employee_id, employee_punches in punches_by_employee.items():
        compensation = by_id[employee_id].compensation
        sequence = parse_work_periods(employee_punches, policy)

        seconds_by_date: dict[date, int] = defaultdict(int)
        on_clock: set[date] = set()
        for period in sequence.work_periods:
            seconds_by_date[period.work_date] += period.duration_seconds
            on_clock.update(_touched_dates(period.work_date, period.end_time.date()))

        if isinstance(compensation, HourlyCompensation):
            for day, seconds in seconds_by_date.items():
                if day in in_range and seconds > 0:
                    hourly_cost[day] += daily_labor_cost(compensation, seconds)
                    hourly_seconds[day] += seconds

        elif isinstance(compensation, (SalaryCompensation, ContractorCompensation)):
            target = salary_cost if isinstance(compensation, SalaryCompensation) else contractor_cost
            per_day = daily_labor_cost(compensation)
            if per_day:
                for day in on_clock & in_range:
                    target[day] += per_day

        elif isinstance(compensation, DailyRateCompensation):
            per_day = daily_labor_cost(compensation)
            clock_in_dates = {
                p.work_date for p in employee_punches
                if p.punch_type is PunchType.CLOCK_IN
            }
            for day in clock_in_dates & in_range:
                daily_rate_cost[day] += per_day

    daily_costs = tuple(
        DailyLaborCost(
            day=day,
            hourly_cost_cents=hourly_cost[day],
            salary_cost_cents=salary_cost[day],
            contractor_cost_cents=contractor_cost[day],
            daily_rate_cost_cents=daily_rate_cost[day],
            hourly_seconds_worked=hourly_seconds[day],
        )
        for day in dates
    )

    def _active(comp_type: CompensationType) -> int:
        return sum(1 for e in by_id.values() if e.compensation_type is comp_type)

    breakdown = LaborCostBreakdown(
        hourly_cost_cents=sum(d.hourly_cost_cents for d in daily_costs),
        hourly_seconds_worked=sum(d.hourly_seconds_worked for d in daily_costs),
        salary_cost_cents=sum(d.salary_cost_cents for d in daily_costs),
        salary_employees=_active(CompensationType.SALARY),
        salary_days=sum(1 for d in daily_costs if d.salary_cost_cents > 0),
        contractor_cost_cents=sum(d.contractor_cost_cents for d in daily_costs),
        contractor_employees=_active(CompensationType.CONTRACTOR),
        contractor_days=sum(1 for d in daily_costs if d.contractor_cost_cents > 0),
        daily_rate_cost_cents=sum(d.daily_rate_cost_cents for d in daily_costs),
        daily_rate_employees=_active(CompensationType.DAILY_RATE),
        daily_rate_days=sum(1 for d in daily_costs if d.daily_rate_cost_cents > 0),
    )

    logger.info(
        "labor_cost_calculated",
        extra={
            "start_date": start_date,
            "end_date": end_date,
            "employee_count": len(punches_by_employee),
            "total_cost_cents": breakdown.total_cost_cents,
        },
    )
    return LaborCostReport(
        start_date=start_date,
        end_date=end_date,
        daily_costs=daily_costs,
        breakdown=breakdown,
    )
