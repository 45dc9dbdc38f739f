"""
Typed Exception Hierarchy for the Payroll Engine.

===============================================================================
TWO FAILURE CLASSES
===============================================================================

Payroll has to be computable even when the time clock is full of noise, so
malformed punch sequences are NOT errors. They come back as
``IncompleteShift`` records next to a best-effort result and are routed to a
manager-review queue.

What IS an error is invalid setup: an hourly employee without a rate, a
salaried employee without a pay period type, a compensation type nobody
knows about. Those are rejected eagerly, before a payroll run starts, and are
never discovered half-way through a computation.

Every exception below:
  1. Has a TYPED class (catch by type, not by message)
  2. Has a CODE class attribute (machine-readable, API-safe)
  3. Carries structured DATA as attributes (not just a message string)

Example:
    try:
        employee = employee_from_record(row)
    except MissingCompensationField as e:
        api_response(code=e.code, employee=e.employee_id, field=e.field_name)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    PayrollKernelError (base)
    |
    +-- CompensationConfigError
    |   +-- MissingCompensationField
    |   +-- InvalidCompensationType
    |   +-- InvalidCompensationValue
    |
    +-- PayrollValidationError
    |
    +-- PolicyConfigError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Compensation    | MISSING_COMPENSATION_FIELD  | Required field for the type is absent
                | INVALID_COMPENSATION_TYPE   | Unknown / absent compensation_type
                | INVALID_COMPENSATION_VALUE  | Field present but out of range
----------------|-----------------------------|-----------------------------------------
Validation      | PAYROLL_VALIDATION_FAILED   | Roster pre-run check found failures
----------------|-----------------------------|-----------------------------------------
Policy          | POLICY_CONFIG_ERROR         | Payroll policy file is unusable

``ValueError`` is reserved for programming errors (negative cents, period end
before period start, an unknown punch type string).
"""

from __future__ import annotations

from typing import Any


class PayrollKernelError(Exception):
    """
    Base exception for all payroll engine errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "PAYROLL_KERNEL_ERROR"


# Compensation configuration exceptions


class CompensationConfigError(PayrollKernelError):
    """Base exception for invalid employee compensation setup."""

    code: str = "COMPENSATION_CONFIG_ERROR"


class MissingCompensationField(CompensationConfigError):
    """A field required by the employee's compensation type is missing."""

    code: str = "MISSING_COMPENSATION_FIELD"

    def __init__(
        self,
        compensation_type: str,
        field_name: str,
        employee_id: str | None = None,
    ):
        self.compensation_type = compensation_type
        self.field_name = field_name
        self.employee_id = employee_id
        who = f" for employee {employee_id}" if employee_id else ""
        super().__init__(
            f"{compensation_type} compensation requires '{field_name}'{who}"
        )


class InvalidCompensationType(CompensationConfigError):
    """The compensation type is absent or not one of the supported models."""

    code: str = "INVALID_COMPENSATION_TYPE"

    def __init__(self, compensation_type: Any, employee_id: str | None = None):
        self.compensation_type = compensation_type
        self.employee_id = employee_id
        who = f" for employee {employee_id}" if employee_id else ""
        super().__init__(
            f"Invalid compensation type {compensation_type!r}{who}"
        )


class InvalidCompensationValue(CompensationConfigError):
    """A compensation field is present but outside its allowed range."""

    code: str = "INVALID_COMPENSATION_VALUE"

    def __init__(
        self,
        compensation_type: str,
        field_name: str,
        value: Any,
        reason: str,
        employee_id: str | None = None,
    ):
        self.compensation_type = compensation_type
        self.field_name = field_name
        self.value = value
        self.reason = reason
        self.employee_id = employee_id
        super().__init__(
            f"Invalid {field_name}={value!r} for {compensation_type} "
            f"compensation: {reason}"
        )


# Pre-run validation


class PayrollValidationError(PayrollKernelError):
    """
    One or more employee records failed validation before a payroll run.

    Carries every failure so that the whole roster can be fixed in one pass.
    """

    code: str = "PAYROLL_VALIDATION_FAILED"

    def __init__(self, failures: tuple[CompensationConfigError, ...]):
        self.failures = failures
        super().__init__(
            f"Payroll validation failed: {len(failures)} employee record(s) "
            f"with invalid compensation setup"
        )


# Policy configuration


class PolicyConfigError(PayrollKernelError):
    """The payroll policy could not be loaded or failed validation."""

    code: str = "POLICY_CONFIG_ERROR"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid payroll policy ({source}): {reason}")
