"""
Tests for pre-run compensation validation (payroll_engines/validation.py).

Form-level messages first, then whole-roster validation raising one
PayrollValidationError with every typed failure.
"""

import pytest

from payroll_engines.validation import (
    validate_compensation_fields,
    validate_payroll_inputs,
)
from payroll_kernel.domain.compensation import CompensationType
from payroll_kernel.exceptions import (
    InvalidCompensationType,
    InvalidCompensationValue,
    MissingCompensationField,
    PayrollValidationError,
)


def _record(employee_id: str = "emp-1", **fields) -> dict:
    record = {"id": employee_id, "name": f"Employee {employee_id}"}
    record.update(fields)
    return record


class TestValidateCompensationFields:

    def test_type_required(self):
        assert validate_compensation_fields({}) == ["Compensation type is required"]

    def test_valid_hourly(self):
        assert validate_compensation_fields(
            {"compensation_type": "hourly", "hourly_rate": 1500},
        ) == []

    def test_hourly_rate_zero(self):
        assert validate_compensation_fields(
            {"compensation_type": "hourly", "hourly_rate": 0},
        ) == ["Hourly rate must be greater than 0"]

    def test_salary_missing_everything(self):
        assert validate_compensation_fields({"compensation_type": "salary"}) == [
            "Salary amount must be greater than 0",
            "Pay period type is required for salaried employees",
        ]

    def test_salary_unknown_period(self):
        assert validate_compensation_fields({
            "compensation_type": "salary",
            "salary_amount": 100000,
            "pay_period_type": "fortnightly",
        }) == ["Unknown pay period type 'fortnightly'"]

    def test_contractor(self):
        assert validate_compensation_fields({"compensation_type": "contractor"}) == [
            "Payment amount must be greater than 0",
            "Payment interval is required for contractors",
        ]
        assert validate_compensation_fields({
            "compensation_type": "contractor",
            "contractor_payment_amount": 50000,
            "contractor_payment_interval": "per-job",
        }) == []

    @pytest.mark.parametrize("days", [0, 8, None])
    def test_daily_rate_days_out_of_range(self, days):
        errors = validate_compensation_fields({
            "compensation_type": "daily_rate",
            "daily_rate_reference_weekly": 100000,
            "daily_rate_reference_days": days,
        })
        assert errors == ["Standard days per week must be between 1 and 7"]

    def test_unknown_type(self):
        assert validate_compensation_fields({"compensation_type": "commission"}) == [
            "Unknown compensation type 'commission'",
        ]


class TestValidatePayrollInputs:

    def test_valid_roster_parsed_in_order(self):
        employees = validate_payroll_inputs([
            _record("emp-1", compensation_type="hourly", hourly_rate=1500),
            _record(
                "emp-2", compensation_type="salary",
                salary_amount=100000, pay_period_type="bi-weekly",
            ),
        ])
        assert [e.employee_id for e in employees] == ["emp-1", "emp-2"]
        assert employees[1].compensation_type is CompensationType.SALARY

    def test_all_failures_collected(self):
        with pytest.raises(PayrollValidationError) as exc_info:
            validate_payroll_inputs([
                _record("emp-1", compensation_type="hourly", hourly_rate=1500),
                _record("emp-2", compensation_type="hourly"),
                _record("emp-3"),
                _record(
                    "emp-4", compensation_type="daily_rate",
                    daily_rate_reference_weekly=100000, daily_rate_reference_days=9,
                ),
            ])

        failures = exc_info.value.failures
        assert [type(f) for f in failures] == [
            MissingCompensationField,
            InvalidCompensationType,
            InvalidCompensationValue,
        ]
        assert [f.employee_id for f in failures] == ["emp-2", "emp-3", "emp-4"]
        assert failures[0].field_name == "hourly_rate"
        assert exc_info.value.code == "PAYROLL_VALIDATION_FAILED"

    def test_failure_logged(self, captured_logs):
        with pytest.raises(PayrollValidationError):
            validate_payroll_inputs([_record("emp-1", compensation_type="bogus")])
        records = [r for r in captured_logs() if r["message"] == "payroll_validation_failed"]
        assert records[0]["failure_count"] == 1
        assert records[0]["failure_codes"] == ["INVALID_COMPENSATION_TYPE"]
