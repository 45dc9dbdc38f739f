"""
Weekly overtime allocation.

Hours are split into regular and overtime per calendar week, never per pay
period: a two-week period of 45 + 35 hours carries 5 overtime hours.  Only
hourly employees are split; every other compensation model reports its
worked time as straight time.  All arithmetic is on integer seconds so
that ``regular + overtime == total`` holds exactly.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from payroll_config.schema import WEEKDAYS
from payroll_kernel.domain.punches import WorkPeriod
from payroll_kernel.domain.values import SECONDS_PER_HOUR, hours_from_seconds

OVERTIME_THRESHOLD_HOURS = 40
OVERTIME_THRESHOLD_SECONDS = OVERTIME_THRESHOLD_HOURS * SECONDS_PER_HOUR
OVERTIME_MULTIPLIER = Decimal("1.5")


def _weekday_index(week_starts_on: int | str) -> int:
    if isinstance(week_starts_on, int):
        if not 0 <= week_starts_on <= 6:
            raise ValueError(f"week start weekday must be 0-6, got {week_starts_on}")
        return week_starts_on
    name = week_starts_on.strip().lower()
    if name not in WEEKDAYS:
        raise ValueError(f"Unknown weekday {week_starts_on!r}")
    return WEEKDAYS.index(name)


def week_start_for(day: date, week_starts_on: int | str = "sunday") -> date:
    """First day of the calendar week containing ``day``.

    ``week_starts_on`` is a weekday name or a ``date.weekday()`` index
    (Monday=0).
    """
    offset = (day.weekday() - _weekday_index(week_starts_on)) % 7
    return day - timedelta(days=offset)


def week_end_for(day: date, week_starts_on: int | str = "sunday") -> date:
    """Last day of the calendar week containing ``day``."""
    return week_start_for(day, week_starts_on) + timedelta(days=6)


def split_regular_overtime(total_seconds: int) -> tuple[int, int]:
    """Split a week's worked seconds into (regular, overtime)."""
    if total_seconds < 0:
        raise ValueError(f"total_seconds cannot be negative, got {total_seconds}")
    regular = min(total_seconds, OVERTIME_THRESHOLD_SECONDS)
    return regular, total_seconds - regular


@dataclass(frozen=True)
class WeeklyHours:
    """Worked time in one calendar week, split at the overtime threshold."""
    week_start: date
    total_seconds: int
    regular_seconds: int
    overtime_seconds: int

    def __post_init__(self):
        if self.regular_seconds + self.overtime_seconds != self.total_seconds:
            raise ValueError(
                f"Week {self.week_start}: regular + overtime "
                f"({self.regular_seconds} + {self.overtime_seconds}) != "
                f"total ({self.total_seconds})"
            )

    @classmethod
    def from_total(cls, week_start: date, total_seconds: int) -> WeeklyHours:
        regular, overtime = split_regular_overtime(total_seconds)
        return cls(week_start, total_seconds, regular, overtime)

    @classmethod
    def straight_time(cls, week_start: date, total_seconds: int) -> WeeklyHours:
        """A week with no overtime split, for non-hourly compensation."""
        if total_seconds < 0:
            raise ValueError(f"total_seconds cannot be negative, got {total_seconds}")
        return cls(week_start, total_seconds, total_seconds, 0)

    @property
    def week_end(self) -> date:
        return self.week_start + timedelta(days=6)

    @property
    def total_hours(self) -> Decimal:
        return hours_from_seconds(self.total_seconds)

    @property
    def regular_hours(self) -> Decimal:
        return hours_from_seconds(self.regular_seconds)

    @property
    def overtime_hours(self) -> Decimal:
        return hours_from_seconds(self.overtime_seconds)


def allocate_weekly_hours(
    periods: Iterable[WorkPeriod],
    week_starts_on: int | str = "sunday",
    split_overtime: bool = True,
) -> tuple[WeeklyHours, ...]:
    """
    Group non-break periods by the week of their start date.

    Returns one ``WeeklyHours`` per week that has any worked time,
    ascending by ``week_start``.  Overnight periods are credited whole to
    the week they start in.  With ``split_overtime=False`` every week is
    straight time (``overtime_seconds == 0``).
    """
    build = WeeklyHours.from_total if split_overtime else WeeklyHours.straight_time
    seconds_by_week: dict[date, int] = defaultdict(int)
    for period in periods:
        if period.is_break:
            continue
        seconds_by_week[week_start_for(period.work_date, week_starts_on)] += (
            period.duration_seconds
        )

    return tuple(
        build(week, seconds_by_week[week])
        for week in sorted(seconds_by_week)
    )
