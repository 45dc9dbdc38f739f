"""
Time-clock domain objects (``payroll_kernel.domain.punches``).

Responsibility
--------------
Frozen value objects for the raw clock events an employee produces, the
work / break intervals reconstructed from them, and the anomaly records
emitted when a punch sequence is malformed.

Architecture position
---------------------
**Kernel > Domain** -- pure data definitions with ZERO I/O.  Punches are
created by an external time-tracking surface and consumed read-only.

Invariants enforced
-------------------
* All objects are ``frozen=True``.
* A ``WorkPeriod`` never ends before it starts.
* Durations are whole seconds; hours are derived on demand.

Failure modes
-------------
* Unknown punch type strings raise ``ValueError``.
* ``WorkPeriod`` with ``end_time < start_time`` raises ``ValueError``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from payroll_kernel.domain.values import hours_from_seconds, seconds_between


class PunchType(Enum):
    """Kinds of clock event."""
    CLOCK_IN = "clock_in"
    CLOCK_OUT = "clock_out"
    BREAK_START = "break_start"
    BREAK_END = "break_end"


class AnomalyKind(Enum):
    """Irregularities the punch sequencer reports for manager review."""
    MISSING_CLOCK_OUT = "missing_clock_out"
    MISSING_CLOCK_IN = "missing_clock_in"
    SHIFT_TOO_LONG = "shift_too_long"


@dataclass(frozen=True)
class TimePunch:
    """A single clock event."""
    employee_id: str
    punch_type: PunchType
    punch_time: datetime
    punch_id: str | None = None

    def __post_init__(self):
        if not isinstance(self.punch_type, PunchType):
            object.__setattr__(self, "punch_type", PunchType(self.punch_type))

    @property
    def work_date(self) -> date:
        return self.punch_time.date()


@dataclass(frozen=True)
class WorkPeriod:
    """One contiguous interval of work or break."""
    start_time: datetime
    end_time: datetime
    is_break: bool = False

    def __post_init__(self):
        if self.end_time < self.start_time:
            raise ValueError(
                f"WorkPeriod cannot end before it starts "
                f"({self.end_time.isoformat()} < {self.start_time.isoformat()})"
            )

    @property
    def duration_seconds(self) -> int:
        return seconds_between(self.start_time, self.end_time)

    @property
    def hours(self) -> Decimal:
        return hours_from_seconds(self.duration_seconds)

    @property
    def work_date(self) -> date:
        """Calendar date the period is credited to (its start date)."""
        return self.start_time.date()


@dataclass(frozen=True)
class IncompleteShift:
    """
    A structured, non-fatal flag on a punch sequence.

    ``anchor_time`` is the punch the problem is attached to: the dangling
    clock-in for ``missing_clock_out``, the orphan clock-out for
    ``missing_clock_in``, and the clock-in of an overlong shift.
    """
    kind: AnomalyKind
    anchor_time: datetime
    punch_type: PunchType
    message: str
    employee_id: str | None = None

    @property
    def anchor_date(self) -> date:
        return self.anchor_time.date()
