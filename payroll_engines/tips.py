"""
Tip aggregation.

Tips reach payroll from two sources: approved tip splits, and the older
per-employee tip records that predate splitting.  Both are summed per
employee, in cents.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from payroll_kernel.domain.payments import TipRecord, TipSplitItem
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.tips")


def aggregate_tips(
    split_items: Iterable[TipSplitItem] = (),
    legacy_tips: Iterable[TipRecord] = (),
) -> dict[str, int]:
    """Total tips per employee id, in cents."""
    totals: dict[str, int] = defaultdict(int)
    split_count = legacy_count = 0
    for item in split_items:
        totals[item.employee_id] += item.amount_cents
        split_count += 1
    for record in legacy_tips:
        totals[record.employee_id] += record.tip_amount_cents
        legacy_count += 1

    logger.debug(
        "tips_aggregated",
        extra={
            "split_items": split_count,
            "legacy_records": legacy_count,
            "employee_count": len(totals),
        },
    )
    return dict(totals)
