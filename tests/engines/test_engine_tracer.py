"""Tests for the engine invocation tracer (payroll_engines/tracer.py)."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from payroll_engines.tracer import compute_input_fingerprint, traced_engine


@dataclass(frozen=True)
class _Shift:
    employee_id: str
    hours: Decimal


@traced_engine("sample", "2.1", fingerprint_fields=("day", "shifts"))
def _sample_engine(day, shifts, note=None):
    return len(shifts)


def _traces(captured_logs) -> list[dict]:
    return [r for r in captured_logs() if r["message"] == "PAYROLL_ENGINE_TRACE"]


class TestFingerprint:

    def test_deterministic(self):
        args = {"day": date(2024, 1, 15), "shifts": [_Shift("emp-1", Decimal("8"))]}
        first = compute_input_fingerprint(("day", "shifts"), args)
        second = compute_input_fingerprint(("day", "shifts"), dict(args))
        assert first == second
        assert len(first) == 16

    def test_mapping_order_irrelevant(self):
        a = compute_input_fingerprint(("tips",), {"tips": {"emp-1": 100, "emp-2": 200}})
        b = compute_input_fingerprint(("tips",), {"tips": {"emp-2": 200, "emp-1": 100}})
        assert a == b

    def test_value_change_changes_fingerprint(self):
        a = compute_input_fingerprint(("day",), {"day": date(2024, 1, 15)})
        b = compute_input_fingerprint(("day",), {"day": date(2024, 1, 16)})
        assert a != b

    def test_missing_field_treated_as_null(self):
        assert compute_input_fingerprint(("day",), {}) == compute_input_fingerprint(
            ("day",), {"day": None},
        )


class TestTracedEngine:

    def test_result_unchanged(self):
        assert _sample_engine(date(2024, 1, 15), [1, 2, 3]) == 3

    def test_trace_record(self, captured_logs):
        _sample_engine(date(2024, 1, 15), [])
        traces = _traces(captured_logs)
        assert len(traces) == 1
        assert traces[0]["engine_name"] == "sample"
        assert traces[0]["engine_version"] == "2.1"
        assert traces[0]["trace_type"] == "PAYROLL_ENGINE_TRACE"
        assert traces[0]["duration_ms"] >= 0

    def test_positional_and_keyword_fingerprint_equal(self, captured_logs):
        shifts = [_Shift("emp-1", Decimal("8"))]
        _sample_engine(date(2024, 1, 15), shifts)
        _sample_engine(shifts=shifts, day=date(2024, 1, 15))
        _sample_engine(date(2024, 1, 15), shifts, note="ignored")
        fingerprints = {t["input_fingerprint"] for t in _traces(captured_logs)}
        assert len(fingerprints) == 1
