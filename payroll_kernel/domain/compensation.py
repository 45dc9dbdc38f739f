"""
Compensation Domain Models (``payroll_kernel.domain.compensation``).

Responsibility
--------------
The compensation sum type -- exactly one of ``HourlyCompensation``,
``SalaryCompensation``, ``ContractorCompensation`` or
``DailyRateCompensation`` per employee -- and the ``Employee`` record that
carries it.  Also the translation from the flat, many-optional-fields row
the data backend stores into that sum type, which is where invalid setup is
rejected.

Architecture position
---------------------
**Kernel > Domain** -- pure data definitions with ZERO I/O.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* All money fields are positive ``int`` cents.
* Only the sub-shape matching ``compensation_type`` is ever read from a
  flat record; the other fields are ignored.

Failure modes
-------------
* ``MissingCompensationField`` -- required field for the type is absent.
* ``InvalidCompensationType`` -- type absent or unknown.
* ``InvalidCompensationValue`` -- field present but zero / negative / wrong type.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, ClassVar, TypeAlias

from payroll_kernel.exceptions import (
    InvalidCompensationType,
    InvalidCompensationValue,
    MissingCompensationField,
)
from payroll_kernel.logging_config import get_logger

logger = get_logger("domain.compensation")


class CompensationType(Enum):
    """Compensation models."""
    HOURLY = "hourly"
    SALARY = "salary"
    CONTRACTOR = "contractor"
    DAILY_RATE = "daily_rate"

    @property
    def label(self) -> str:
        return _COMPENSATION_LABELS[self]


class PayPeriodType(Enum):
    """How often a salaried employee is paid."""
    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    SEMI_MONTHLY = "semi-monthly"
    MONTHLY = "monthly"

    @property
    def label(self) -> str:
        return _PERIOD_LABELS[self.value]


class ContractorInterval(Enum):
    """How often a contractor is paid."""
    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    MONTHLY = "monthly"
    PER_JOB = "per-job"

    @property
    def label(self) -> str:
        return _PERIOD_LABELS[self.value]


class EmployeeStatus(Enum):
    """Employee lifecycle states."""
    ACTIVE = "active"
    INACTIVE = "inactive"


_COMPENSATION_LABELS = {
    CompensationType.HOURLY: "Hourly",
    CompensationType.SALARY: "Salaried",
    CompensationType.CONTRACTOR: "Contractor",
    CompensationType.DAILY_RATE: "Daily Rate",
}

_PERIOD_LABELS = {
    "weekly": "Weekly",
    "bi-weekly": "Bi-Weekly",
    "semi-monthly": "Semi-Monthly",
    "monthly": "Monthly",
    "per-job": "Per Job",
}


def _require_positive_cents(
    compensation_type: CompensationType, field_name: str, value: Any,
) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidCompensationValue(
            compensation_type.value, field_name, value,
            "must be an integer number of cents",
        )
    if value <= 0:
        raise InvalidCompensationValue(
            compensation_type.value, field_name, value, "must be greater than 0",
        )


# ---------------------------------------------------------------------------
# Sum type
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HourlyCompensation:
    """Paid per hour worked, with weekly overtime."""
    compensation_type: ClassVar[CompensationType] = CompensationType.HOURLY

    hourly_rate_cents: int

    def __post_init__(self):
        _require_positive_cents(self.compensation_type, "hourly_rate", self.hourly_rate_cents)


@dataclass(frozen=True)
class SalaryCompensation:
    """
    Fixed amount per pay period.

    ``allocate_daily=False`` means the salary is recognized on the paycheck
    date instead of being spread over days, so it contributes nothing to
    daily or period rollups.
    """
    compensation_type: ClassVar[CompensationType] = CompensationType.SALARY

    salary_amount_cents: int
    pay_period_type: PayPeriodType
    allocate_daily: bool = True

    def __post_init__(self):
        _require_positive_cents(self.compensation_type, "salary_amount", self.salary_amount_cents)
        if not isinstance(self.pay_period_type, PayPeriodType):
            object.__setattr__(self, "pay_period_type", PayPeriodType(self.pay_period_type))


@dataclass(frozen=True)
class ContractorCompensation:
    """Fixed amount per interval, or per job (paid through manual payments)."""
    compensation_type: ClassVar[CompensationType] = CompensationType.CONTRACTOR

    payment_amount_cents: int
    interval: ContractorInterval

    def __post_init__(self):
        _require_positive_cents(
            self.compensation_type, "contractor_payment_amount", self.payment_amount_cents,
        )
        if not isinstance(self.interval, ContractorInterval):
            object.__setattr__(self, "interval", ContractorInterval(self.interval))

    @property
    def is_per_job(self) -> bool:
        return self.interval is ContractorInterval.PER_JOB


@dataclass(frozen=True)
class DailyRateCompensation:
    """Fixed amount for each calendar day actually worked."""
    compensation_type: ClassVar[CompensationType] = CompensationType.DAILY_RATE

    weekly_reference_cents: int
    standard_days: int

    def __post_init__(self):
        _require_positive_cents(
            self.compensation_type, "daily_rate_reference_weekly", self.weekly_reference_cents,
        )
        if isinstance(self.standard_days, bool) or not isinstance(self.standard_days, int):
            raise InvalidCompensationValue(
                self.compensation_type.value, "daily_rate_reference_days",
                self.standard_days, "must be a whole number of days",
            )
        if not 1 <= self.standard_days <= 7:
            raise InvalidCompensationValue(
                self.compensation_type.value, "daily_rate_reference_days",
                self.standard_days, "must be between 1 and 7",
            )


Compensation: TypeAlias = (
    HourlyCompensation
    | SalaryCompensation
    | ContractorCompensation
    | DailyRateCompensation
)


# ---------------------------------------------------------------------------
# Employee
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Employee:
    """An employee (or contractor) for payroll purposes."""
    employee_id: str
    name: str
    compensation: Compensation
    position: str = ""
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    deactivated_at: date | None = None
    requires_time_punch: bool | None = None

    def __post_init__(self):
        if not isinstance(self.status, EmployeeStatus):
            object.__setattr__(self, "status", EmployeeStatus(self.status))
        if isinstance(self.deactivated_at, datetime):
            object.__setattr__(self, "deactivated_at", self.deactivated_at.date())

    @property
    def compensation_type(self) -> CompensationType:
        return self.compensation.compensation_type

    @property
    def is_active(self) -> bool:
        return self.status is EmployeeStatus.ACTIVE

    @property
    def hourly_rate_cents(self) -> int:
        """Hourly rate for reporting; 0 for non-hourly employees."""
        if isinstance(self.compensation, HourlyCompensation):
            return self.compensation.hourly_rate_cents
        return 0

    @property
    def punches_required(self) -> bool:
        """Explicit setting wins; otherwise only hourly employees must punch."""
        if self.requires_time_punch is not None:
            return self.requires_time_punch
        return self.compensation_type is CompensationType.HOURLY


# ---------------------------------------------------------------------------
# Flat record translation
# ---------------------------------------------------------------------------


def _field(
    record: Mapping[str, Any],
    compensation_type: CompensationType,
    field_name: str,
    employee_id: str | None,
) -> Any:
    value = record.get(field_name)
    if value is None or value == "":
        raise MissingCompensationField(compensation_type.value, field_name, employee_id)
    return value


def _enum_field(enum_cls, value, compensation_type, field_name, employee_id):
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidCompensationValue(
            compensation_type.value, field_name, value,
            f"must be one of {[m.value for m in enum_cls]}",
            employee_id,
        ) from None


def compensation_from_record(
    record: Mapping[str, Any],
    employee_id: str | None = None,
) -> Compensation:
    """
    Build the compensation sum type from a flat employee row.

    Only the fields of the row's ``compensation_type`` are read.

    Raises:
        InvalidCompensationType: absent or unknown ``compensation_type``.
        MissingCompensationField: a field the type needs is absent.
        InvalidCompensationValue: a field is present but unusable.
    """
    raw_type = record.get("compensation_type")
    try:
        comp_type = CompensationType(raw_type)
    except ValueError:
        raise InvalidCompensationType(raw_type, employee_id) from None

    try:
        if comp_type is CompensationType.HOURLY:
            return HourlyCompensation(
                hourly_rate_cents=_field(record, comp_type, "hourly_rate", employee_id),
            )

        if comp_type is CompensationType.SALARY:
            amount = _field(record, comp_type, "salary_amount", employee_id)
            period = _field(record, comp_type, "pay_period_type", employee_id)
            allocate_daily = record.get("allocate_daily")
            return SalaryCompensation(
                salary_amount_cents=amount,
                pay_period_type=_enum_field(
                    PayPeriodType, period, comp_type, "pay_period_type", employee_id,
                ),
                allocate_daily=True if allocate_daily is None else bool(allocate_daily),
            )

        if comp_type is CompensationType.CONTRACTOR:
            amount = _field(record, comp_type, "contractor_payment_amount", employee_id)
            interval = _field(record, comp_type, "contractor_payment_interval", employee_id)
            return ContractorCompensation(
                payment_amount_cents=amount,
                interval=_enum_field(
                    ContractorInterval, interval, comp_type,
                    "contractor_payment_interval", employee_id,
                ),
            )

        return DailyRateCompensation(
            weekly_reference_cents=_field(
                record, comp_type, "daily_rate_reference_weekly", employee_id,
            ),
            standard_days=_field(record, comp_type, "daily_rate_reference_days", employee_id),
        )
    except InvalidCompensationValue as exc:
        if exc.employee_id is None and employee_id is not None:
            exc.employee_id = employee_id
        raise


def employee_from_record(record: Mapping[str, Any]) -> Employee:
    """
    Build an ``Employee`` from a flat row.

    Expected keys: ``id``, ``name``, optional ``position``, ``status``,
    ``deactivated_at`` (date, datetime or ISO string), ``requires_time_punch``
    and the compensation fields read by ``compensation_from_record``.
    """
    employee_id = str(record["id"])
    compensation = compensation_from_record(record, employee_id)

    deactivated_at = record.get("deactivated_at")
    if isinstance(deactivated_at, str):
        deactivated_at = datetime.fromisoformat(deactivated_at).date()

    employee = Employee(
        employee_id=employee_id,
        name=record.get("name") or "",
        position=record.get("position") or "",
        compensation=compensation,
        status=EmployeeStatus(record.get("status") or EmployeeStatus.ACTIVE.value),
        deactivated_at=deactivated_at,
        requires_time_punch=record.get("requires_time_punch"),
    )
    logger.debug(
        "employee_record_parsed",
        extra={
            "employee_id": employee_id,
            "compensation_type": employee.compensation_type.value,
            "status": employee.status.value,
        },
    )
    return employee
