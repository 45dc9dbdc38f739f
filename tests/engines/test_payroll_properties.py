"""
Property-based tests for payroll invariants.

Properties:
- Weekly split: regular + overtime == total, regular capped at 40h,
  for every total; non-hourly weeks never carry overtime
- Dedup: re-running on its own output changes nothing, and a double tap
  landing before a kept punch is absorbed by it
- Re-run identity: the same roster computed twice yields equal results and
  byte-identical CSV
"""

from datetime import date, datetime, timedelta

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from hypothesis.strategies import composite

from payroll_engines.export import export_payroll_csv
from payroll_engines.overtime import (
    OVERTIME_THRESHOLD_SECONDS,
    allocate_weekly_hours,
    split_regular_overtime,
)
from payroll_engines.payroll import compute_payroll_period
from payroll_engines.punch_sequencer import (
    deduplicate_punches,
    parse_work_periods,
    sort_punches,
)
from payroll_kernel.domain.compensation import Employee, HourlyCompensation
from payroll_kernel.domain.punches import PunchType, TimePunch, WorkPeriod

ORIGIN = datetime(2024, 1, 14, 6, 0)
PERIOD_START = date(2024, 1, 14)
PERIOD_END = date(2024, 1, 27)
DEDUP_WINDOW = 300

PROPERTY_SETTINGS = settings(
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


@composite
def shift_timelines(draw, employee_id: str = "emp-1") -> list[TimePunch]:
    """Alternating clock-in / clock-out punches at least the dedup window apart."""
    gaps = draw(st.lists(
        st.integers(min_value=DEDUP_WINDOW, max_value=14 * 3600),
        min_size=1, max_size=10,
    ))
    punches = []
    at = ORIGIN
    for i, gap in enumerate(gaps):
        at += timedelta(seconds=gap)
        punch_type = PunchType.CLOCK_IN if i % 2 == 0 else PunchType.CLOCK_OUT
        punches.append(TimePunch(employee_id, punch_type, at))
    return punches


@composite
def raw_punches(draw) -> list[TimePunch]:
    """Any punch types at any times over three days, sorted."""
    entries = draw(st.lists(
        st.tuples(st.sampled_from(list(PunchType)), st.integers(0, 3 * 86400)),
        max_size=30,
    ))
    return sort_punches(
        TimePunch("emp-1", punch_type, ORIGIN + timedelta(seconds=offset))
        for punch_type, offset in entries
    )


@composite
def hourly_rosters(draw):
    size = draw(st.integers(min_value=1, max_value=3))
    employees, punches, tips = [], {}, {}
    for i in range(size):
        employee_id = f"emp-{i}"
        rate = draw(st.integers(min_value=725, max_value=5000))
        employees.append(
            Employee(employee_id, f"Employee {i}", HourlyCompensation(rate), position="Line Cook")
        )
        punches[employee_id] = draw(shift_timelines(employee_id))
        tips[employee_id] = draw(st.integers(min_value=0, max_value=50_000))
    return employees, punches, tips


# ---------------------------------------------------------------------------
# Weekly split
# ---------------------------------------------------------------------------


class TestWeeklySplitProperties:

    @PROPERTY_SETTINGS
    @given(total=st.integers(min_value=0, max_value=168 * 3600))
    def test_split_invariant(self, total):
        regular, overtime = split_regular_overtime(total)
        assert regular + overtime == total
        assert regular == min(total, OVERTIME_THRESHOLD_SECONDS)
        assert overtime == max(0, total - OVERTIME_THRESHOLD_SECONDS)

    @PROPERTY_SETTINGS
    @given(hours=st.lists(st.integers(min_value=1, max_value=16), min_size=1, max_size=7))
    def test_straight_time_never_has_overtime(self, hours):
        periods = [
            WorkPeriod(ORIGIN + timedelta(days=i), ORIGIN + timedelta(days=i, hours=h))
            for i, h in enumerate(hours)
        ]
        for week in allocate_weekly_hours(periods, split_overtime=False):
            assert week.overtime_seconds == 0
            assert week.regular_seconds == week.total_seconds


# ---------------------------------------------------------------------------
# Deduplication
# ---------------------------------------------------------------------------


class TestDedupProperties:

    @PROPERTY_SETTINGS
    @given(punches=raw_punches())
    def test_dedup_is_idempotent(self, punches):
        once = deduplicate_punches(punches, DEDUP_WINDOW)
        assert deduplicate_punches(once, DEDUP_WINDOW) == once

    @PROPERTY_SETTINGS
    @given(timeline=shift_timelines(), data=st.data())
    def test_earlier_double_tap_absorbed(self, timeline, data):
        index = data.draw(st.integers(min_value=0, max_value=len(timeline) - 1))
        lead = data.draw(st.integers(min_value=1, max_value=DEDUP_WINDOW - 1))
        kept = timeline[index]
        double_tap = TimePunch(
            kept.employee_id, kept.punch_type, kept.punch_time - timedelta(seconds=lead),
        )
        with_double_tap = timeline[:index] + [double_tap] + timeline[index:]

        assert deduplicate_punches(with_double_tap) == deduplicate_punches(timeline)
        assert parse_work_periods(with_double_tap) == parse_work_periods(timeline)


# ---------------------------------------------------------------------------
# Re-run identity
# ---------------------------------------------------------------------------


class TestRerunProperties:

    @settings(
        max_examples=25,
        deadline=None,
        suppress_health_check=[HealthCheck.function_scoped_fixture],
    )
    @given(roster=hourly_rosters())
    def test_recompute_is_byte_identical(self, roster):
        employees, punches, tips = roster
        first = compute_payroll_period(PERIOD_START, PERIOD_END, employees, punches, tips)
        second = compute_payroll_period(PERIOD_START, PERIOD_END, employees, punches, tips)

        assert first == second
        assert export_payroll_csv(first).encode() == export_payroll_csv(second).encode()
        assert all(
            e.regular_seconds + e.overtime_seconds
            == sum(p.duration_seconds for p in e.work_periods)
            for e in first.employees
        )
