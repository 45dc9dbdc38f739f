"""
Module: payroll_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    payroll calculation engines.  This is the canonical import surface for
    callers (API handlers, report jobs).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import payroll_kernel and payroll_config.schema (and sibling
    engine modules).

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Period bounds and punch times are always passed in.
    - Integer cents at every boundary; Decimal in between, never float.
    - Determinism: identical inputs always produce identical outputs.

Failure modes:
    - ValueError from individual engines on programming errors.
    - PayrollValidationError from ``validate_payroll_inputs``.

Audit relevance:
    Engine entry points are traced via ``@traced_engine`` (see
    ``payroll_engines.tracer``), emitting PAYROLL_ENGINE_TRACE records with
    engine name, version, input fingerprint and duration.

Usage:
    from payroll_engines import compute_payroll_period, export_payroll_csv
"""

from payroll_kernel.logging_config import get_logger

logger = get_logger("engines")

from payroll_engines.compensation import (
    BI_WEEKLY_ANCHOR,
    DAYS_PER_CONTRACTOR_INTERVAL,
    DAYS_PER_PAY_PERIOD,
    PAYCHECKS_PER_YEAR,
    CompensationBreakdown,
    daily_contractor_allocation,
    daily_labor_cost,
    daily_rate_from_weekly,
    daily_salary_allocation,
    days_in_period,
    effective_hourly_rate,
    hourly_pay,
    pay_period_bounds,
    resolve_compensation,
)
from payroll_engines.export import CSV_HEADER, export_filename, export_payroll_csv
from payroll_engines.labor_cost import (
    DailyLaborCost,
    LaborCostBreakdown,
    LaborCostReport,
    calculate_actual_labor_cost,
)
from payroll_engines.overtime import (
    OVERTIME_MULTIPLIER,
    OVERTIME_THRESHOLD_HOURS,
    WeeklyHours,
    allocate_weekly_hours,
    split_regular_overtime,
    week_end_for,
    week_start_for,
)
from payroll_engines.payroll import (
    EmployeePayroll,
    PayrollPeriod,
    compute_employee_pay,
    compute_payroll_period,
    should_include_employee,
)
from payroll_engines.punch_sequencer import (
    PunchSequence,
    SequencerPhase,
    SequencerState,
    SequencerStep,
    calculate_worked_hours,
    calculate_worked_hours_with_anomalies,
    deduplicate_punches,
    finish_sequence,
    parse_work_periods,
    sequence_step,
)
from payroll_engines.tips import aggregate_tips
from payroll_engines.tracer import compute_input_fingerprint, traced_engine
from payroll_engines.validation import (
    validate_compensation_fields,
    validate_payroll_inputs,
)

__all__ = [
    # Compensation
    "BI_WEEKLY_ANCHOR",
    "DAYS_PER_CONTRACTOR_INTERVAL",
    "DAYS_PER_PAY_PERIOD",
    "PAYCHECKS_PER_YEAR",
    "CompensationBreakdown",
    "daily_contractor_allocation",
    "daily_labor_cost",
    "daily_rate_from_weekly",
    "daily_salary_allocation",
    "days_in_period",
    "effective_hourly_rate",
    "hourly_pay",
    "pay_period_bounds",
    "resolve_compensation",
    # Export
    "CSV_HEADER",
    "export_filename",
    "export_payroll_csv",
    # Labor cost
    "DailyLaborCost",
    "LaborCostBreakdown",
    "LaborCostReport",
    "calculate_actual_labor_cost",
    # Overtime
    "OVERTIME_MULTIPLIER",
    "OVERTIME_THRESHOLD_HOURS",
    "WeeklyHours",
    "allocate_weekly_hours",
    "split_regular_overtime",
    "week_end_for",
    "week_start_for",
    # Payroll
    "EmployeePayroll",
    "PayrollPeriod",
    "compute_employee_pay",
    "compute_payroll_period",
    "should_include_employee",
    # Punch sequencer
    "PunchSequence",
    "SequencerPhase",
    "SequencerState",
    "SequencerStep",
    "calculate_worked_hours",
    "calculate_worked_hours_with_anomalies",
    "deduplicate_punches",
    "finish_sequence",
    "parse_work_periods",
    "sequence_step",
    # Tips
    "aggregate_tips",
    # Tracer
    "compute_input_fingerprint",
    "traced_engine",
    # Validation
    "validate_compensation_fields",
    "validate_payroll_inputs",
]
