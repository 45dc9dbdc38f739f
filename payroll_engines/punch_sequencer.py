"""
Punch Sequencer (``payroll_engines.punch_sequencer``).

Responsibility
--------------
Turns one employee's raw clock events into work and break periods, plus
``IncompleteShift`` anomalies for every malformed part of the sequence.

* sort by punch time (stable)
* collapse near-simultaneous same-type punches (double taps, corrections)
* fold the punches through a three-state reducer
  (IDLE -> CLOCKED_IN <-> ON_BREAK)

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O, ZERO clock reads.
``sequence_step`` is a pure reducer ``(state, punch) -> (state, periods,
anomalies)`` and can be driven one event at a time.

Invariants enforced
-------------------
* Never raises on malformed input: dirty time-clock data degrades to
  anomalies, never to exceptions.
* A shift longer than ``max_shift_gap_hours`` is excluded from paid hours
  (``missing_clock_out``); one longer than ``max_shift_hours`` is still
  counted but flagged (``shift_too_long``).
* Every emitted ``WorkPeriod`` has ``end_time >= start_time``.

Failure modes
-------------
* None for punch content.  ``ValueError`` only for programming errors
  (e.g. a punch whose type cannot be coerced, raised by ``TimePunch``).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum

from payroll_config.schema import PayrollPolicy
from payroll_kernel.domain.punches import (
    AnomalyKind,
    IncompleteShift,
    PunchType,
    TimePunch,
    WorkPeriod,
)
from payroll_kernel.domain.values import hours_from_seconds, seconds_between
from payroll_kernel.logging_config import get_logger

from payroll_engines.tracer import traced_engine

logger = get_logger("engines.punch_sequencer")


class SequencerPhase(Enum):
    IDLE = "idle"
    CLOCKED_IN = "clocked_in"
    ON_BREAK = "on_break"


@dataclass(frozen=True)
class SequencerState:
    """
    Reducer state between two punches.

    ``clock_in`` is the start of the current work segment: the clock-in
    itself, or the end of the most recent break.
    """
    clock_in: datetime | None = None
    break_start: datetime | None = None
    employee_id: str | None = None

    @property
    def phase(self) -> SequencerPhase:
        if self.clock_in is None:
            return SequencerPhase.IDLE
        if self.break_start is None:
            return SequencerPhase.CLOCKED_IN
        return SequencerPhase.ON_BREAK


IDLE = SequencerState()


@dataclass(frozen=True)
class SequencerStep:
    """Result of feeding one punch to the reducer."""
    state: SequencerState
    periods: tuple[WorkPeriod, ...] = ()
    anomalies: tuple[IncompleteShift, ...] = ()


@dataclass(frozen=True)
class PunchSequence:
    """Work/break periods and anomalies for one employee's punches."""
    periods: tuple[WorkPeriod, ...]
    anomalies: tuple[IncompleteShift, ...]

    @property
    def work_periods(self) -> tuple[WorkPeriod, ...]:
        return tuple(p for p in self.periods if not p.is_break)

    @property
    def break_periods(self) -> tuple[WorkPeriod, ...]:
        return tuple(p for p in self.periods if p.is_break)

    @property
    def worked_seconds(self) -> int:
        return sum(p.duration_seconds for p in self.work_periods)

    @property
    def worked_hours(self) -> Decimal:
        return hours_from_seconds(self.worked_seconds)


# ---------------------------------------------------------------------------
# Deduplication
# ---------------------------------------------------------------------------


def sort_punches(punches: Iterable[TimePunch]) -> list[TimePunch]:
    """Stable sort by punch time."""
    return sorted(punches, key=lambda p: p.punch_time)


def deduplicate_punches(
    punches: Iterable[TimePunch],
    window_seconds: int = 300,
) -> list[TimePunch]:
    """
    Collapse runs of same-type punches less than ``window_seconds`` apart.

    Input must already be sorted.  Each run keeps its LAST punch, which is
    treated as a correction of the earlier ones.  Distance is measured from
    the most recent punch of the run, so a chain of taps each under the
    window collapses entirely.

    Re-running on the output is a no-op, and so is adding a duplicate that
    falls inside the window *before* a kept punch.  A duplicate added
    *after* a kept punch replaces it, moving the period boundary to the
    later time (a 09:03 re-tap turns 09:00-17:00 into 09:03-17:00).
    """
    result: list[TimePunch] = []
    for punch in punches:
        if result:
            last = result[-1]
            if (
                punch.punch_type is last.punch_type
                and abs(seconds_between(last.punch_time, punch.punch_time)) < window_seconds
            ):
                result[-1] = punch
                continue
        result.append(punch)
    return result


# ---------------------------------------------------------------------------
# Reducer
# ---------------------------------------------------------------------------


def _fmt(moment: datetime) -> str:
    return moment.isoformat(timespec="minutes")


def _missing_clock_out(clock_in: datetime, employee_id: str | None, message: str) -> IncompleteShift:
    return IncompleteShift(
        kind=AnomalyKind.MISSING_CLOCK_OUT,
        anchor_time=clock_in,
        punch_type=PunchType.CLOCK_IN,
        message=message,
        employee_id=employee_id,
    )


def _close_segment(
    start: datetime,
    end: datetime,
    employee_id: str | None,
    policy: PayrollPolicy,
) -> tuple[tuple[WorkPeriod, ...], tuple[IncompleteShift, ...]]:
    """Apply the shift-length thresholds to one work segment."""
    span = seconds_between(start, end)

    if span > policy.max_shift_gap_seconds:
        return (), (
            _missing_clock_out(
                start,
                employee_id,
                f"Shift from {_fmt(start)} to {_fmt(end)} lasts "
                f"{hours_from_seconds(span):.2f}h, more than "
                f"{policy.max_shift_gap_hours}h; likely a forgotten clock-out, "
                f"excluded until reviewed",
            ),
        )

    periods = (WorkPeriod(start, end),) if span > 0 else ()

    if span > policy.max_shift_seconds:
        return periods, (
            IncompleteShift(
                kind=AnomalyKind.SHIFT_TOO_LONG,
                anchor_time=start,
                punch_type=PunchType.CLOCK_IN,
                message=(
                    f"Shift from {_fmt(start)} to {_fmt(end)} lasts "
                    f"{hours_from_seconds(span):.2f}h, more than "
                    f"{policy.max_shift_hours}h; counted, needs review"
                ),
                employee_id=employee_id,
            ),
        )

    return periods, ()


def sequence_step(
    state: SequencerState,
    punch: TimePunch,
    policy: PayrollPolicy | None = None,
) -> SequencerStep:
    """Feed one punch to the sequencer. Pure; never raises on punch content."""
    policy = policy or PayrollPolicy()
    at = punch.punch_time
    employee_id = punch.employee_id

    if punch.punch_type is PunchType.CLOCK_IN:
        anomalies: tuple[IncompleteShift, ...] = ()
        if state.clock_in is not None:
            anomalies = (
                _missing_clock_out(
                    state.clock_in,
                    state.employee_id or employee_id,
                    f"Clock-in at {_fmt(state.clock_in)} has no clock-out "
                    f"before the next clock-in at {_fmt(at)}",
                ),
            )
        return SequencerStep(
            SequencerState(clock_in=at, employee_id=employee_id), anomalies=anomalies,
        )

    if punch.punch_type is PunchType.CLOCK_OUT:
        if state.clock_in is None:
            return SequencerStep(
                IDLE,
                anomalies=(
                    IncompleteShift(
                        kind=AnomalyKind.MISSING_CLOCK_IN,
                        anchor_time=at,
                        punch_type=PunchType.CLOCK_OUT,
                        message=f"Clock-out at {_fmt(at)} has no matching clock-in",
                        employee_id=employee_id,
                    ),
                ),
            )
        if state.break_start is not None:
            # Pre-break segment was already recorded at break_start.
            return SequencerStep(
                IDLE, periods=(WorkPeriod(state.break_start, at, is_break=True),),
            )
        periods, anomalies = _close_segment(state.clock_in, at, employee_id, policy)
        return SequencerStep(IDLE, periods=periods, anomalies=anomalies)

    if punch.punch_type is PunchType.BREAK_START:
        if state.phase is not SequencerPhase.CLOCKED_IN:
            return SequencerStep(state)
        periods, anomalies = _close_segment(state.clock_in, at, employee_id, policy)
        return SequencerStep(
            replace(state, break_start=at), periods=periods, anomalies=anomalies,
        )

    # BREAK_END
    if state.break_start is None:
        return SequencerStep(state)
    return SequencerStep(
        SequencerState(clock_in=at, employee_id=state.employee_id),
        periods=(WorkPeriod(state.break_start, at, is_break=True),),
    )


def finish_sequence(state: SequencerState) -> tuple[IncompleteShift, ...]:
    """Anomalies for whatever is still open once the punches run out."""
    if state.clock_in is None:
        return ()
    return (
        _missing_clock_out(
            state.clock_in,
            state.employee_id,
            f"Clock-in at {_fmt(state.clock_in)} has no matching clock-out",
        ),
    )


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


@traced_engine("punch_sequencer", "1.0")
def parse_work_periods(
    punches: Iterable[TimePunch],
    policy: PayrollPolicy | None = None,
) -> PunchSequence:
    """
    Sequence a punch list into work periods and anomalies.

    The list may be empty, unordered, duplicated or missing pairs; the
    result is always a best-effort ``PunchSequence``.
    """
    policy = policy or PayrollPolicy()
    ordered = deduplicate_punches(sort_punches(punches), policy.dedup_window_seconds)

    state = IDLE
    periods: list[WorkPeriod] = []
    anomalies: list[IncompleteShift] = []
    for punch in ordered:
        step = sequence_step(state, punch, policy)
        state = step.state
        periods.extend(step.periods)
        anomalies.extend(step.anomalies)
    anomalies.extend(finish_sequence(state))

    for anomaly in anomalies:
        logger.warning(
            "punch_anomaly_detected",
            extra={
                "employee_id": anomaly.employee_id,
                "anomaly_kind": anomaly.kind.value,
                "anchor_time": anomaly.anchor_time,
            },
        )

    return PunchSequence(periods=tuple(periods), anomalies=tuple(anomalies))


def calculate_worked_hours(
    punches: Iterable[TimePunch],
    policy: PayrollPolicy | None = None,
) -> Decimal:
    """Total non-break hours in a punch list."""
    return parse_work_periods(punches, policy).worked_hours


def calculate_worked_hours_with_anomalies(
    punches: Iterable[TimePunch],
    policy: PayrollPolicy | None = None,
) -> tuple[Decimal, tuple[IncompleteShift, ...]]:
    """Total non-break hours plus the anomalies found on the way."""
    sequence = parse_work_periods(punches, policy)
    return sequence.worked_hours, sequence.anomalies
