"""
Payroll Aggregator (``payroll_engines.payroll``).

Responsibility
--------------
Per employee: sequence punches, allocate weekly overtime, resolve
compensation, add manual payments and reconcile tips into an
``EmployeePayroll``.  Per period: apply the inclusion rule for deactivated
employees and fold every ``EmployeePayroll`` into a ``PayrollPeriod``.

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O, ZERO clock reads.
Employees are independent of each other, so the period computation can be
fanned out over a caller-supplied ``concurrent.futures.Executor``; totals
are always folded in employee order.

Invariants enforced
-------------------
* ``gross = regular + overtime + salary + contractor + daily_rate + manual``.
* Only hourly employees have overtime; other models report every worked
  second as regular time.
* ``tips_owed = max(0, tips_earned - tips_paid_out)``; cash tips already
  handed out are never paid twice.
* ``total_pay = gross + tips_owed``.
* Only work periods starting, and anomalies anchored, inside
  ``[period_start, period_end]`` count; punches outside the period are
  there only to close overnight shifts.
* Identical inputs produce identical cent totals.

Failure modes
-------------
* ``ValueError`` for negative tip amounts, negative manual payments or a
  period that ends before it starts.
* Punch problems are never raised; they appear in ``incomplete_shifts``.
"""

from __future__ import annotations

import contextvars
from collections.abc import Iterable, Mapping, Sequence
from concurrent.futures import Executor
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from payroll_config.schema import PayrollPolicy
from payroll_kernel.domain.compensation import CompensationType, Employee
from payroll_kernel.domain.payments import ManualPayment
from payroll_kernel.domain.punches import IncompleteShift, TimePunch, WorkPeriod
from payroll_kernel.domain.values import hours_from_seconds, require_cents
from payroll_kernel.logging_config import LogContext, get_logger

from payroll_engines.compensation import days_in_period, resolve_compensation
from payroll_engines.overtime import WeeklyHours, allocate_weekly_hours, week_end_for
from payroll_engines.punch_sequencer import parse_work_periods
from payroll_engines.tracer import traced_engine

logger = get_logger("engines.payroll")


@dataclass(frozen=True)
class EmployeePayroll:
    """Everything payroll knows about one employee for one period."""

    employee_id: str
    employee_name: str
    position: str
    compensation_type: CompensationType
    hourly_rate_cents: int

    # Hours
    regular_seconds: int
    overtime_seconds: int
    weekly_hours: tuple[WeeklyHours, ...]
    work_periods: tuple[WorkPeriod, ...]
    break_periods: tuple[WorkPeriod, ...]

    # Pay components
    regular_pay_cents: int
    overtime_pay_cents: int
    salary_pay_cents: int
    contractor_pay_cents: int
    daily_rate_pay_cents: int
    days_worked: int
    manual_payments: tuple[ManualPayment, ...]
    manual_payments_total_cents: int
    gross_pay_cents: int

    # Tips
    total_tips_cents: int
    tips_paid_out_cents: int
    tips_owed_cents: int

    incomplete_shifts: tuple[IncompleteShift, ...]

    @property
    def regular_hours(self) -> Decimal:
        return hours_from_seconds(self.regular_seconds)

    @property
    def overtime_hours(self) -> Decimal:
        return hours_from_seconds(self.overtime_seconds)

    @property
    def total_hours(self) -> Decimal:
        return hours_from_seconds(self.regular_seconds + self.overtime_seconds)

    @property
    def total_pay_cents(self) -> int:
        return self.gross_pay_cents + self.tips_owed_cents

    @property
    def has_anomalies(self) -> bool:
        return bool(self.incomplete_shifts)


@dataclass(frozen=True)
class PayrollPeriod:
    """Rollup of every included employee for one pay period."""

    start_date: date
    end_date: date
    employees: tuple[EmployeePayroll, ...]
    total_regular_seconds: int
    total_overtime_seconds: int
    total_gross_pay_cents: int
    total_tips_cents: int
    total_tips_paid_out_cents: int
    total_tips_owed_cents: int

    @property
    def total_regular_hours(self) -> Decimal:
        return hours_from_seconds(self.total_regular_seconds)

    @property
    def total_overtime_hours(self) -> Decimal:
        return hours_from_seconds(self.total_overtime_seconds)

    @property
    def total_pay_cents(self) -> int:
        return self.total_gross_pay_cents + self.total_tips_owed_cents

    @property
    def anomaly_count(self) -> int:
        return sum(len(e.incomplete_shifts) for e in self.employees)


# ---------------------------------------------------------------------------
# Employee
# ---------------------------------------------------------------------------


def _distinct_punch_dates(
    punches: Iterable[TimePunch], period_start: date, period_end: date,
) -> int:
    return len({p.work_date for p in punches if period_start <= p.work_date <= period_end})


@traced_engine(
    "payroll_employee", "1.0",
    fingerprint_fields=(
        "employee", "period_start", "period_end",
        "tips_earned_cents", "tips_paid_out_cents",
    ),
)
def compute_employee_pay(
    employee: Employee,
    punches: Sequence[TimePunch],
    tips_earned_cents: int,
    period_start: date,
    period_end: date,
    manual_payments: Sequence[ManualPayment] = (),
    tips_paid_out_cents: int = 0,
    policy: PayrollPolicy | None = None,
) -> EmployeePayroll:
    """
    Compute one employee's pay for ``[period_start, period_end]``.

    ``punches`` may extend past either end of the period so that overnight
    shifts can be closed; only time starting inside the period is paid.
    Manual payments are added to gross pay as supplied.
    """
    require_cents(tips_earned_cents, "tips_earned_cents")
    require_cents(tips_paid_out_cents, "tips_paid_out_cents")
    days_in_period(period_start, period_end)
    policy = policy or PayrollPolicy()
    punches = tuple(punches)
    manual_payments = tuple(manual_payments)

    with LogContext.bind(employee_id=employee.employee_id):
        sequence = parse_work_periods(punches, policy)

        periods = tuple(
            p for p in sequence.periods
            if period_start <= p.work_date <= period_end
        )
        anomalies = tuple(
            a for a in sequence.anomalies
            if period_start <= a.anchor_date <= period_end
        )
        work_periods = tuple(p for p in periods if not p.is_break)
        weekly = allocate_weekly_hours(
            work_periods,
            policy.week_starts_on,
            split_overtime=employee.compensation_type is CompensationType.HOURLY,
        )
        days_worked = _distinct_punch_dates(punches, period_start, period_end)

        breakdown = resolve_compensation(
            employee.compensation, weekly, period_start, period_end, days_worked,
        )

        manual_total = sum(m.amount_cents for m in manual_payments)
        gross = breakdown.total_cents + manual_total
        tips_owed = max(0, tips_earned_cents - tips_paid_out_cents)

        result = EmployeePayroll(
            employee_id=employee.employee_id,
            employee_name=employee.name,
            position=employee.position,
            compensation_type=employee.compensation_type,
            hourly_rate_cents=employee.hourly_rate_cents,
            regular_seconds=sum(w.regular_seconds for w in weekly),
            overtime_seconds=sum(w.overtime_seconds for w in weekly),
            weekly_hours=weekly,
            work_periods=work_periods,
            break_periods=tuple(p for p in periods if p.is_break),
            regular_pay_cents=breakdown.regular_pay_cents,
            overtime_pay_cents=breakdown.overtime_pay_cents,
            salary_pay_cents=breakdown.salary_pay_cents,
            contractor_pay_cents=breakdown.contractor_pay_cents,
            daily_rate_pay_cents=breakdown.daily_rate_pay_cents,
            days_worked=days_worked,
            manual_payments=manual_payments,
            manual_payments_total_cents=manual_total,
            gross_pay_cents=gross,
            total_tips_cents=tips_earned_cents,
            tips_paid_out_cents=tips_paid_out_cents,
            tips_owed_cents=tips_owed,
            incomplete_shifts=anomalies,
        )

        logger.info(
            "employee_pay_computed",
            extra={
                "compensation_type": employee.compensation_type.value,
                "regular_seconds": result.regular_seconds,
                "overtime_seconds": result.overtime_seconds,
                "gross_pay_cents": result.gross_pay_cents,
                "tips_owed_cents": result.tips_owed_cents,
                "anomaly_count": len(anomalies),
            },
        )
    return result


# ---------------------------------------------------------------------------
# Period
# ---------------------------------------------------------------------------


def should_include_employee(
    employee: Employee,
    period_start: date,
    week_starts_on: int | str = "sunday",
) -> bool:
    """
    Whether an employee belongs in a payroll period starting on ``period_start``.

    Active employees always do.  A deactivated employee does while the period
    starts no later than the end of the week containing the deactivation, so
    the final partial week is paid exactly once.  A deactivated employee
    with no recorded deactivation date is kept, so nobody drops off payroll
    because of missing data.
    """
    if employee.is_active:
        return True
    if employee.deactivated_at is None:
        return True
    return period_start <= week_end_for(employee.deactivated_at, week_starts_on)


@traced_engine(
    "payroll_period", "1.0",
    fingerprint_fields=("period_start", "period_end", "employees"),
)
def compute_payroll_period(
    period_start: date,
    period_end: date,
    employees: Sequence[Employee],
    punches_by_employee: Mapping[str, Sequence[TimePunch]],
    tips_by_employee: Mapping[str, int],
    manual_payments_by_employee: Mapping[str, Sequence[ManualPayment]] | None = None,
    tips_paid_out_by_employee: Mapping[str, int] | None = None,
    policy: PayrollPolicy | None = None,
    executor: Executor | None = None,
    run_id: str | None = None,
) -> PayrollPeriod:
    """
    Compute payroll for every included employee.

    Args:
        executor: Optional executor to compute employees concurrently.
            Results are collected in ``employees`` order either way.
        run_id: Payroll run identifier, bound as ``payroll_run_id`` on
            every log record of the run, worker threads included.
    """
    days_in_period(period_start, period_end)
    policy = policy or PayrollPolicy()
    manual_payments_by_employee = manual_payments_by_employee or {}
    tips_paid_out_by_employee = tips_paid_out_by_employee or {}

    included = [
        e for e in employees
        if should_include_employee(e, period_start, policy.week_starts_on)
    ]
    excluded = len(employees) - len(included)

    def _args(employee: Employee) -> tuple:
        eid = employee.employee_id
        return (
            employee,
            punches_by_employee.get(eid, ()),
            tips_by_employee.get(eid, 0),
            period_start,
            period_end,
            manual_payments_by_employee.get(eid, ()),
            tips_paid_out_by_employee.get(eid, 0),
            policy,
        )

    with LogContext.bind(payroll_run_id=run_id):
        if executor is None:
            results = [compute_employee_pay(*_args(e)) for e in included]
        else:
            # Each task runs in a copy of this context so run fields reach the workers.
            futures = [
                executor.submit(contextvars.copy_context().run, compute_employee_pay, *_args(e))
                for e in included
            ]
            results = [f.result() for f in futures]
        return _fold_period(period_start, period_end, results, excluded)


def _fold_period(
    period_start: date,
    period_end: date,
    results: Sequence[EmployeePayroll],
    excluded: int,
) -> PayrollPeriod:
    period = PayrollPeriod(
        start_date=period_start,
        end_date=period_end,
        employees=tuple(results),
        total_regular_seconds=sum(r.regular_seconds for r in results),
        total_overtime_seconds=sum(r.overtime_seconds for r in results),
        total_gross_pay_cents=sum(r.gross_pay_cents for r in results),
        total_tips_cents=sum(r.total_tips_cents for r in results),
        total_tips_paid_out_cents=sum(r.tips_paid_out_cents for r in results),
        total_tips_owed_cents=sum(r.tips_owed_cents for r in results),
    )

    logger.info(
        "payroll_period_computed",
        extra={
            "period_start": period_start,
            "period_end": period_end,
            "employee_count": len(results),
            "excluded_count": excluded,
            "total_gross_pay_cents": period.total_gross_pay_cents,
            "total_pay_cents": period.total_pay_cents,
            "anomaly_count": period.anomaly_count,
        },
    )
    return period
