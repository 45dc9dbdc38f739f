"""
Pure domain layer.

This module contains pure data objects and arithmetic helpers
with NO dependencies on:
- Database
- Time/clock
- I/O

All domain objects are immutable and deterministic.
"""

from payroll_kernel.domain.compensation import (
    Compensation,
    CompensationType,
    ContractorCompensation,
    ContractorInterval,
    DailyRateCompensation,
    Employee,
    EmployeeStatus,
    HourlyCompensation,
    PayPeriodType,
    SalaryCompensation,
    compensation_from_record,
    employee_from_record,
)
from payroll_kernel.domain.payments import ManualPayment, TipRecord, TipSplitItem
from payroll_kernel.domain.punches import (
    AnomalyKind,
    IncompleteShift,
    PunchType,
    TimePunch,
    WorkPeriod,
)

__all__ = [
    "AnomalyKind",
    "Compensation",
    "CompensationType",
    "ContractorCompensation",
    "ContractorInterval",
    "DailyRateCompensation",
    "Employee",
    "EmployeeStatus",
    "HourlyCompensation",
    "IncompleteShift",
    "ManualPayment",
    "PayPeriodType",
    "PunchType",
    "SalaryCompensation",
    "TimePunch",
    "TipRecord",
    "TipSplitItem",
    "WorkPeriod",
    "compensation_from_record",
    "employee_from_record",
]
