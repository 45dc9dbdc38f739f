"""
payroll_config -- single public entrypoint for payroll policy.

Responsibility:
    Provides the ONLY way to obtain a ``PayrollPolicy`` at runtime through
    ``get_active_policy()``.  Engines never read files themselves; they
    accept a policy argument and fall back to ``PayrollPolicy()`` defaults.

Architecture position:
    Configuration -- sits above ``payroll_kernel``.  ``payroll_engines`` may
    import ``payroll_config.schema`` for the policy type only.

Failure modes:
    - ``FileNotFoundError`` -- the requested policy file does not exist.
    - ``PolicyConfigError`` -- malformed YAML or invalid policy values.

Audit relevance:
    Every successful ``get_active_policy()`` call emits a
    ``PAYROLL_POLICY_TRACE`` log entry with the source path and a checksum
    of the effective policy, tying a payroll run to the exact thresholds
    that governed it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from payroll_config.loader import compute_checksum, load_policy_file
from payroll_config.schema import PayrollPolicy

_logger = logging.getLogger("payroll_kernel.config")

DEFAULT_POLICY_PATH = Path(__file__).parent / "defaults" / "payroll_policy.yaml"

__all__ = [
    "DEFAULT_POLICY_PATH",
    "PayrollPolicy",
    "get_active_policy",
]


def get_active_policy(path: Path | str | None = None) -> PayrollPolicy:
    """The ONLY public policy entrypoint.

    Args:
        path: Policy YAML file. Defaults to the shipped
            ``payroll_config/defaults/payroll_policy.yaml``.

    Returns:
        Frozen ``PayrollPolicy``.

    Raises:
        FileNotFoundError: If the file does not exist.
        PolicyConfigError: If the file is malformed or fails validation.
    """
    source = Path(path) if path is not None else DEFAULT_POLICY_PATH
    policy = load_policy_file(source)

    _logger.info(
        "PAYROLL_POLICY_TRACE",
        extra={
            "trace_type": "PAYROLL_POLICY_TRACE",
            "source": str(source),
            "checksum": compute_checksum(policy.to_dict()),
            "week_starts_on": policy.week_starts_on,
            "max_shift_hours": policy.max_shift_hours,
            "max_shift_gap_hours": policy.max_shift_gap_hours,
        },
    )
    return policy
