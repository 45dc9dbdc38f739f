"""
Pytest fixtures for the payroll engine test suite.

Provides:
- Structured logging configured once per session
- LogContext isolation between tests
- A ``captured_logs`` fixture returning parsed JSON log records
- The default ``PayrollPolicy``

No database or network is needed: every engine is pure.
"""

import json
import logging
from io import StringIO

import pytest

from payroll_config.schema import PayrollPolicy
from payroll_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture payroll_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            compute_payroll_period(...)
            logs = captured_logs()
            assert any(r["message"] == "payroll_period_computed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("payroll_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Policy fixtures
# =============================================================================


@pytest.fixture
def default_policy() -> PayrollPolicy:
    return PayrollPolicy()
