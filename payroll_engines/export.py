"""
CSV export of a computed payroll period.

One row per employee in period order, then a ``TOTAL`` row.  Money is
rendered as en-US dollars (``$1,234.56``), hours with two decimals.
"""

from __future__ import annotations

import csv
import io

from payroll_kernel.domain.values import format_currency, format_hours
from payroll_kernel.logging_config import get_logger

from payroll_engines.payroll import EmployeePayroll, PayrollPeriod

logger = get_logger("engines.export")

CSV_HEADER: tuple[str, ...] = (
    "Employee Name",
    "Position",
    "Hourly Rate",
    "Regular Hours",
    "Overtime Hours",
    "Regular Pay",
    "Overtime Pay",
    "Gross Pay",
    "Tips Earned",
    "Tips Paid",
    "Tips Owed",
    "Total Pay",
)


def _money_columns(
    regular_pay: int,
    overtime_pay: int,
    gross_pay: int,
    tips: int,
    tips_paid: int,
    tips_owed: int,
    total_pay: int,
) -> list[str]:
    return [
        format_currency(regular_pay),
        format_currency(overtime_pay),
        format_currency(gross_pay),
        format_currency(tips),
        format_currency(tips_paid),
        format_currency(tips_owed),
        format_currency(total_pay),
    ]


def employee_row(employee: EmployeePayroll) -> list[str]:
    return [
        employee.employee_name,
        employee.position,
        format_currency(employee.hourly_rate_cents),
        format_hours(employee.regular_hours),
        format_hours(employee.overtime_hours),
        *_money_columns(
            employee.regular_pay_cents,
            employee.overtime_pay_cents,
            employee.gross_pay_cents,
            employee.total_tips_cents,
            employee.tips_paid_out_cents,
            employee.tips_owed_cents,
            employee.total_pay_cents,
        ),
    ]


def total_row(period: PayrollPeriod) -> list[str]:
    employees = period.employees
    return [
        "TOTAL",
        "",
        "",
        format_hours(period.total_regular_hours),
        format_hours(period.total_overtime_hours),
        *_money_columns(
            sum(e.regular_pay_cents for e in employees),
            sum(e.overtime_pay_cents for e in employees),
            period.total_gross_pay_cents,
            period.total_tips_cents,
            period.total_tips_paid_out_cents,
            period.total_tips_owed_cents,
            period.total_pay_cents,
        ),
    ]


def export_payroll_csv(period: PayrollPeriod) -> str:
    """Render a ``PayrollPeriod`` as CSV text (``\\r\\n`` line endings)."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_HEADER)
    for employee in period.employees:
        writer.writerow(employee_row(employee))
    writer.writerow(total_row(period))

    logger.info(
        "payroll_csv_exported",
        extra={
            "period_start": period.start_date,
            "period_end": period.end_date,
            "row_count": len(period.employees),
        },
    )
    return buffer.getvalue()


def export_filename(period: PayrollPeriod) -> str:
    """Suggested download name, e.g. ``payroll_2024-01-07_to_2024-01-13.csv``."""
    return f"payroll_{period.start_date.isoformat()}_to_{period.end_date.isoformat()}.csv"


__all__ = [
    "CSV_HEADER",
    "employee_row",
    "export_filename",
    "export_payroll_csv",
    "total_row",
]
