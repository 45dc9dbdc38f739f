"""
Tests for the compensation sum type and flat-record parsing
(payroll_kernel/domain/compensation.py).

Invalid compensation setup must be rejected eagerly with a typed error,
before any payroll computation begins.
"""

from datetime import date

import pytest

from payroll_kernel.domain.compensation import (
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
from payroll_kernel.exceptions import (
    CompensationConfigError,
    InvalidCompensationType,
    InvalidCompensationValue,
    MissingCompensationField,
    PayrollKernelError,
)


def _record(**overrides) -> dict:
    record = {
        "id": "emp-1",
        "name": "Dana Cook",
        "position": "Line Cook",
        "status": "active",
        "compensation_type": "hourly",
        "hourly_rate": 1500,
    }
    record.update(overrides)
    return record


class TestCompensationFromRecord:

    def test_hourly(self):
        comp = compensation_from_record(_record())
        assert comp == HourlyCompensation(hourly_rate_cents=1500)
        assert comp.compensation_type is CompensationType.HOURLY

    def test_salary(self):
        comp = compensation_from_record(
            _record(
                compensation_type="salary",
                salary_amount=200000,
                pay_period_type="bi-weekly",
                allocate_daily=False,
            )
        )
        assert comp == SalaryCompensation(
            salary_amount_cents=200000,
            pay_period_type=PayPeriodType.BI_WEEKLY,
            allocate_daily=False,
        )

    def test_salary_allocates_daily_by_default(self):
        comp = compensation_from_record(
            _record(compensation_type="salary", salary_amount=100000, pay_period_type="monthly")
        )
        assert comp.allocate_daily is True

    def test_contractor_per_job(self):
        comp = compensation_from_record(
            _record(
                compensation_type="contractor",
                contractor_payment_amount=50000,
                contractor_payment_interval="per-job",
            )
        )
        assert isinstance(comp, ContractorCompensation)
        assert comp.is_per_job

    def test_daily_rate(self):
        comp = compensation_from_record(
            _record(
                compensation_type="daily_rate",
                daily_rate_reference_weekly=100000,
                daily_rate_reference_days=5,
            )
        )
        assert comp == DailyRateCompensation(weekly_reference_cents=100000, standard_days=5)

    def test_fields_of_other_types_ignored(self):
        comp = compensation_from_record(
            _record(salary_amount=999, pay_period_type="weekly")
        )
        assert comp == HourlyCompensation(hourly_rate_cents=1500)


class TestCompensationErrors:

    def test_hourly_missing_rate(self):
        record = _record()
        del record["hourly_rate"]
        with pytest.raises(MissingCompensationField) as exc_info:
            compensation_from_record(record, "emp-1")
        assert exc_info.value.code == "MISSING_COMPENSATION_FIELD"
        assert exc_info.value.field_name == "hourly_rate"
        assert exc_info.value.employee_id == "emp-1"

    def test_salary_missing_pay_period_type(self):
        with pytest.raises(MissingCompensationField) as exc_info:
            compensation_from_record(
                _record(compensation_type="salary", salary_amount=100000)
            )
        assert exc_info.value.field_name == "pay_period_type"

    def test_contractor_missing_interval(self):
        with pytest.raises(MissingCompensationField):
            compensation_from_record(
                _record(compensation_type="contractor", contractor_payment_amount=1000)
            )

    def test_unknown_type(self):
        with pytest.raises(InvalidCompensationType) as exc_info:
            compensation_from_record(_record(compensation_type="commission"))
        assert exc_info.value.code == "INVALID_COMPENSATION_TYPE"

    def test_absent_type(self):
        record = _record()
        del record["compensation_type"]
        with pytest.raises(InvalidCompensationType):
            compensation_from_record(record)

    def test_zero_rate(self):
        with pytest.raises(InvalidCompensationValue) as exc_info:
            compensation_from_record(_record(hourly_rate=0), "emp-1")
        assert exc_info.value.code == "INVALID_COMPENSATION_VALUE"
        assert exc_info.value.employee_id == "emp-1"

    def test_float_rate_rejected(self):
        with pytest.raises(InvalidCompensationValue):
            compensation_from_record(_record(hourly_rate=15.0))

    def test_unknown_pay_period_type(self):
        with pytest.raises(InvalidCompensationValue):
            compensation_from_record(
                _record(
                    compensation_type="salary",
                    salary_amount=100000,
                    pay_period_type="quarterly",
                )
            )

    @pytest.mark.parametrize("days", [0, 8])
    def test_daily_rate_days_out_of_range(self, days):
        with pytest.raises(InvalidCompensationValue):
            DailyRateCompensation(weekly_reference_cents=100000, standard_days=days)

    def test_all_are_kernel_errors(self):
        for cls in (MissingCompensationField, InvalidCompensationType, InvalidCompensationValue):
            assert issubclass(cls, CompensationConfigError)
            assert issubclass(cls, PayrollKernelError)


class TestLabels:

    def test_compensation_labels(self):
        assert CompensationType.SALARY.label == "Salaried"
        assert CompensationType.DAILY_RATE.label == "Daily Rate"

    def test_period_labels(self):
        assert PayPeriodType.SEMI_MONTHLY.label == "Semi-Monthly"
        assert ContractorInterval.PER_JOB.label == "Per Job"


class TestEmployee:

    def test_from_record(self):
        employee = employee_from_record(
            _record(status="inactive", deactivated_at="2024-01-17T15:30:00")
        )
        assert employee.employee_id == "emp-1"
        assert employee.status is EmployeeStatus.INACTIVE
        assert employee.deactivated_at == date(2024, 1, 17)
        assert employee.hourly_rate_cents == 1500

    def test_hourly_employees_punch_by_default(self):
        employee = Employee("e", "E", HourlyCompensation(1500))
        assert employee.punches_required

    def test_salaried_employees_do_not_punch_by_default(self):
        employee = Employee(
            "e", "E", SalaryCompensation(100000, PayPeriodType.WEEKLY),
        )
        assert not employee.punches_required
        assert employee.hourly_rate_cents == 0

    def test_explicit_punch_setting_wins(self):
        employee = Employee(
            "e", "E", SalaryCompensation(100000, PayPeriodType.WEEKLY),
            requires_time_punch=True,
        )
        assert employee.punches_required
