"""
Pre-run validation of employee compensation setup.

Invalid setup is rejected before a payroll run starts, never discovered
half-way through one.  Two entry points:

* ``validate_compensation_fields`` -- human-readable messages for one record,
  for form validation; never raises.
* ``validate_payroll_inputs`` -- parses a whole roster and raises one
  ``PayrollValidationError`` listing every bad record.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from payroll_kernel.domain.compensation import (
    CompensationType,
    ContractorInterval,
    Employee,
    PayPeriodType,
    employee_from_record,
)
from payroll_kernel.exceptions import CompensationConfigError, PayrollValidationError
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.validation")


def _positive(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _member(enum_cls, value: Any) -> bool:
    return value in {m.value for m in enum_cls}


def validate_compensation_fields(record: Mapping[str, Any]) -> list[str]:
    """Messages describing what is wrong with a record's compensation fields."""
    comp_type = record.get("compensation_type")
    if not comp_type:
        return ["Compensation type is required"]

    errors: list[str] = []
    if comp_type == CompensationType.HOURLY.value:
        if not _positive(record.get("hourly_rate")):
            errors.append("Hourly rate must be greater than 0")

    elif comp_type == CompensationType.SALARY.value:
        if not _positive(record.get("salary_amount")):
            errors.append("Salary amount must be greater than 0")
        period = record.get("pay_period_type")
        if not period:
            errors.append("Pay period type is required for salaried employees")
        elif not _member(PayPeriodType, period):
            errors.append(f"Unknown pay period type '{period}'")

    elif comp_type == CompensationType.CONTRACTOR.value:
        if not _positive(record.get("contractor_payment_amount")):
            errors.append("Payment amount must be greater than 0")
        interval = record.get("contractor_payment_interval")
        if not interval:
            errors.append("Payment interval is required for contractors")
        elif not _member(ContractorInterval, interval):
            errors.append(f"Unknown payment interval '{interval}'")

    elif comp_type == CompensationType.DAILY_RATE.value:
        if not _positive(record.get("daily_rate_reference_weekly")):
            errors.append("Weekly reference amount must be greater than 0")
        days = record.get("daily_rate_reference_days")
        if not (_positive(days) and days <= 7):
            errors.append("Standard days per week must be between 1 and 7")

    else:
        errors.append(f"Unknown compensation type '{comp_type}'")

    return errors


def validate_payroll_inputs(records: Iterable[Mapping[str, Any]]) -> tuple[Employee, ...]:
    """
    Parse every employee record, or fail with all problems at once.

    Returns:
        The parsed employees, in input order.

    Raises:
        PayrollValidationError: one or more records have invalid
            compensation setup; ``failures`` holds each typed error.
    """
    employees: list[Employee] = []
    failures: list[CompensationConfigError] = []
    for record in records:
        try:
            employees.append(employee_from_record(record))
        except CompensationConfigError as exc:
            failures.append(exc)

    if failures:
        logger.warning(
            "payroll_validation_failed",
            extra={
                "failure_count": len(failures),
                "failure_codes": sorted({f.code for f in failures}),
                "employee_ids": [getattr(f, "employee_id", None) for f in failures],
            },
        )
        raise PayrollValidationError(tuple(failures))

    logger.info("payroll_inputs_validated", extra={"employee_count": len(employees)})
    return tuple(employees)
