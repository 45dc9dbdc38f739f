"""
Values -- Cent and hour arithmetic shared by every payroll engine.

Responsibility:
    Provides the only sanctioned conversions between integer cents,
    integer seconds and Decimal hours, plus the display formatting used at
    the output boundary (CSV export, log lines).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by the engines. No outward dependencies.

Invariants enforced:
    - Money crosses component boundaries as a non-negative ``int`` of cents.
    - Intermediate money arithmetic is ``Decimal`` rounded ROUND_HALF_UP to
      whole cents, never ``float``.
    - Durations are whole seconds; Decimal hours are derived, never stored.

Failure modes:
    - ValueError when a money input is negative, a float, or not an int.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

SECONDS_PER_HOUR = 3600
DEFAULT_ROUNDING = ROUND_HALF_UP

_ONE = Decimal("1")
_HUNDREDTH = Decimal("0.01")


def round_cents(value: Decimal, rounding: str = DEFAULT_ROUNDING) -> int:
    """
    Round a Decimal amount of cents to a whole number of cents.

    This is the ONLY rounding point for money in the engine. All other code
    delegates here so every component rounds the same way.

    Postconditions: Returns an ``int``.
    """
    return int(value.quantize(_ONE, rounding=rounding))


def require_cents(value: int, field_name: str) -> int:
    """
    Validate a money input at a component boundary.

    Raises:
        ValueError: if value is not an int (bools and floats included) or
            is negative.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(
            f"{field_name} must be an integer number of cents, got {value!r}"
        )
    if value < 0:
        raise ValueError(f"{field_name} cannot be negative, got {value}")
    return value


def seconds_between(start: datetime, end: datetime) -> int:
    """Whole seconds from start to end (floor). Negative if end < start."""
    return (end - start) // timedelta(seconds=1)


def hours_from_seconds(seconds: int) -> Decimal:
    """Convert whole seconds to Decimal hours."""
    return Decimal(seconds) / Decimal(SECONDS_PER_HOUR)


def seconds_from_hours(hours: Decimal | int) -> int:
    """Convert whole or Decimal hours to whole seconds (rounded half-up)."""
    return int((Decimal(hours) * SECONDS_PER_HOUR).quantize(_ONE, rounding=DEFAULT_ROUNDING))


def cents_for_seconds(
    seconds: int,
    rate_cents: int,
    multiplier: Decimal = _ONE,
) -> int:
    """
    Pay for a duration at an hourly rate, rounded to whole cents.

    The product is formed in integers before the single division so that
    the result does not depend on how the duration was accumulated.
    """
    return round_cents(
        Decimal(seconds * rate_cents) * multiplier / Decimal(SECONDS_PER_HOUR)
    )


def format_currency(cents: int) -> str:
    """
    Render cents as en-US dollars.

    Examples:
        1500 -> "$15.00", 123456 -> "$1,234.56", -1500 -> "-$15.00"
    """
    dollars = (Decimal(abs(cents)) / 100).quantize(_HUNDREDTH)
    sign = "-" if cents < 0 else ""
    return f"{sign}${dollars:,.2f}"


def format_hours(hours: Decimal | int) -> str:
    """Render hours with two decimals, e.g. ``Decimal("7.5") -> "7.50"``."""
    return f"{Decimal(hours).quantize(_HUNDREDTH, rounding=DEFAULT_ROUNDING):.2f}"
