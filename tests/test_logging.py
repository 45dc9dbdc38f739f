"""
Tests for structured logging (payroll_kernel/logging_config.py).

Validates:
- One JSON object per line with run context and extra fields
- ISO dates, exact Decimals and Enum values in payloads
- Exception code and structured attributes
- LogContext binding and restoration
- Idempotent configuration
"""

import json
import logging
from datetime import date, datetime
from decimal import Decimal
from io import StringIO

import pytest

from payroll_engines.punch_sequencer import parse_work_periods
from payroll_kernel.domain.punches import AnomalyKind, PunchType, TimePunch
from payroll_kernel.exceptions import MissingCompensationField
from payroll_kernel.logging_config import (
    LogContext,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture
def log_stream():
    """A fresh configuration writing to an in-memory stream."""
    reset_logging()
    stream = StringIO()
    configure_logging(stream=stream, level=logging.DEBUG)
    yield stream
    reset_logging()
    configure_logging(level=logging.DEBUG)


def _records(stream: StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line]


class TestRecordLayout:

    def test_standard_fields(self, log_stream):
        get_logger("engines.payroll").info("employee_pay_computed", extra={"gross_pay_cents": 30000})

        (record,) = _records(log_stream)
        assert record["level"] == "INFO"
        assert record["logger"] == "payroll_kernel.engines.payroll"
        assert record["message"] == "employee_pay_computed"
        assert record["gross_pay_cents"] == 30000
        assert "ts" in record

    def test_run_context_stamped(self, log_stream):
        with LogContext.bind(payroll_run_id="run-2024-01", employee_id="emp-1"):
            get_logger("test").info("inside")
        get_logger("test").info("outside")

        inside, outside = _records(log_stream)
        assert inside["payroll_run_id"] == "run-2024-01"
        assert inside["employee_id"] == "emp-1"
        assert "payroll_run_id" not in outside
        assert "employee_id" not in outside

    def test_payload_values_serialized(self, log_stream):
        get_logger("test").info(
            "values",
            extra={
                "day": date(2024, 1, 15),
                "at": datetime(2024, 1, 15, 9, 30),
                "hours": Decimal("7.50"),
                "kind": AnomalyKind.SHIFT_TOO_LONG,
            },
        )

        (record,) = _records(log_stream)
        assert record["day"] == "2024-01-15"
        assert record["at"] == "2024-01-15T09:30:00"
        assert record["hours"] == "7.50"
        assert record["kind"] == "shift_too_long"

    def test_anomaly_record_uses_iso_anchor(self, log_stream):
        parse_work_periods([TimePunch("emp-1", PunchType.CLOCK_IN, datetime(2024, 1, 15, 9))])

        anomaly = next(r for r in _records(log_stream) if r["message"] == "punch_anomaly_detected")
        assert anomaly["anchor_time"] == "2024-01-15T09:00:00"
        assert anomaly["anomaly_kind"] == "missing_clock_out"

    def test_unknown_objects_fall_back_to_str(self, log_stream):
        get_logger("test").info("opaque", extra={"thing": object})
        (record,) = _records(log_stream)
        assert record["thing"] == str(object)

    def test_payroll_error_fields(self, log_stream):
        try:
            raise MissingCompensationField("hourly", "hourly_rate", "emp-9")
        except MissingCompensationField:
            get_logger("test").error("setup_error", exc_info=True)

        (record,) = _records(log_stream)
        assert record["exc_type"] == "MissingCompensationField"
        assert record["exc_code"] == "MISSING_COMPENSATION_FIELD"
        assert record["exc_field_name"] == "hourly_rate"
        assert record["exc_employee_id"] == "emp-9"
        assert "traceback" in record

    def test_plain_exception_has_no_code(self, log_stream):
        try:
            raise ValueError("boom")
        except ValueError:
            get_logger("test").error("failed", exc_info=True)

        (record,) = _records(log_stream)
        assert record["exc_message"] == "boom"
        assert "exc_code" not in record


class TestLogContext:

    def test_fields(self):
        assert LogContext.FIELDS == ("payroll_run_id", "employee_id")

    def test_set_ignores_none(self):
        LogContext.set(payroll_run_id="run-1", employee_id=None)
        assert LogContext.get_all() == {"payroll_run_id": "run-1"}

    def test_clear(self):
        LogContext.set(payroll_run_id="run-1", employee_id="emp-1")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_nests_and_restores(self):
        with LogContext.bind(payroll_run_id="run-1"):
            with LogContext.bind(employee_id="emp-1"):
                assert LogContext.get_all() == {
                    "payroll_run_id": "run-1", "employee_id": "emp-1",
                }
            assert LogContext.get_all() == {"payroll_run_id": "run-1"}
        assert LogContext.get_all() == {}

    def test_bind_restores_after_error(self):
        with pytest.raises(RuntimeError):
            with LogContext.bind(employee_id="emp-1"):
                raise RuntimeError("stop")
        assert LogContext.get_all() == {}

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError, match="Unknown log context field"):
            LogContext.set(tenant_id="t-1")
        with pytest.raises(ValueError):
            with LogContext.bind(employee_id="emp-1", tenant_id="t-1"):
                pass
        assert LogContext.get_all() == {}


class TestConfigureLogging:

    def test_idempotent(self, log_stream):
        configure_logging(stream=StringIO())
        assert len(logging.getLogger("payroll_kernel").handlers) == 1

    def test_level_filters(self):
        reset_logging()
        stream = StringIO()
        configure_logging(stream=stream)
        try:
            get_logger("test").debug("hidden")
            get_logger("test").info("shown")
            assert [r["message"] for r in _records(stream)] == ["shown"]
        finally:
            reset_logging()
            configure_logging(level=logging.DEBUG)

    def test_reset_restores_propagation(self):
        reset_logging()
        root = logging.getLogger("payroll_kernel")
        assert root.propagate is True
        assert root.handlers == []
        configure_logging(level=logging.DEBUG)
