"""
Payroll policy schema.

The tunable knobs of the punch sequencer and the weekly calendar.  Parsed
from YAML by the loader, consumed read-only by the engines.

The 40-hour overtime threshold and the 1.5x overtime multiplier are NOT
policy: they are constants in ``payroll_engines.overtime``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Self

from payroll_kernel.logging_config import get_logger

logger = get_logger("config.schema")

WEEKDAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


@dataclass(frozen=True)
class PayrollPolicy:
    """
    Configuration for a payroll run.

    Punch thresholds:
        dedup_window_minutes: consecutive same-type punches closer
            together than this collapse to the later one.
        max_shift_hours: shifts longer than this are counted but flagged
            ``shift_too_long``.
        max_shift_gap_hours: shifts longer than this are treated as a
            forgotten clock-out and excluded.
    """

    dedup_window_minutes: int = 5
    max_shift_hours: int = 16
    max_shift_gap_hours: int = 18

    # Calendar
    week_starts_on: str = "sunday"

    def __post_init__(self):
        for name in ("dedup_window_minutes", "max_shift_hours", "max_shift_gap_hours"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        if self.dedup_window_minutes < 0:
            raise ValueError("dedup_window_minutes cannot be negative")
        if self.max_shift_hours <= 0:
            raise ValueError("max_shift_hours must be positive")
        if self.max_shift_gap_hours < self.max_shift_hours:
            raise ValueError(
                "max_shift_gap_hours must be greater than or equal to max_shift_hours"
            )
        normalized = str(self.week_starts_on).strip().lower()
        if normalized not in WEEKDAYS:
            raise ValueError(
                f"week_starts_on must be a weekday name, got {self.week_starts_on!r}"
            )
        object.__setattr__(self, "week_starts_on", normalized)

    @property
    def week_start_weekday(self) -> int:
        """``date.weekday()`` value of the first day of the week (Monday=0)."""
        return WEEKDAYS.index(self.week_starts_on)

    @property
    def dedup_window_seconds(self) -> int:
        return self.dedup_window_minutes * 60

    @property
    def max_shift_seconds(self) -> int:
        return self.max_shift_hours * 3600

    @property
    def max_shift_gap_seconds(self) -> int:
        return self.max_shift_gap_hours * 3600

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def with_defaults(cls) -> Self:
        """Create policy with standard defaults."""
        logger.info("payroll_policy_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Create policy from dictionary. Unknown keys are rejected."""
        unknown = sorted(set(data) - set(cls.__dataclass_fields__))
        if unknown:
            raise ValueError(f"Unknown payroll policy keys: {unknown}")
        logger.info(
            "payroll_policy_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)
