"""Pure monthly folding.

``fold_monthly_balance`` and ``combine_balances`` only add non-negative
counters, so folding days in any order, or folding sub-ranges separately and
combining them, gives the same balance. Incremental recomputation relies on
this.
"""

from __future__ import annotations

from functools import reduce
from typing import Iterable

from ..attendance.model import DailyAttendance
from ..common.datetime_utils import YearMonth
from ..core.enums import DayStatus
from ..core.exceptions import ValidationError
from .model import MonthlyBalance


def fold_monthly_balance(existing: MonthlyBalance, day: DailyAttendance) -> MonthlyBalance:
    if day.employee_id != existing.employee_id:
        raise ValidationError(f"Day belongs to employee {day.employee_id}, not {existing.employee_id}")
    if not existing.year_month.contains(day.work_date):
        raise ValidationError(f"{day.work_date} is outside {existing.year_month}")

    delta = day.delta_minutes
    return MonthlyBalance(
        employee_id=existing.employee_id,
        year_month=existing.year_month,
        overtime_minutes=existing.overtime_minutes + max(delta, 0),
        deficit_minutes=existing.deficit_minutes + max(-delta, 0),
        absence_days=existing.absence_days + (1 if day.status == DayStatus.ABSENT else 0),
        days_counted=existing.days_counted + (1 if day.is_counted else 0),
        anomalous_days=existing.anomalous_days + (1 if day.anomalous_minutes > 0 else 0),
    )


def combine_balances(left: MonthlyBalance, right: MonthlyBalance) -> MonthlyBalance:
    """Merge two partial folds of the same employee-month."""

    if left.employee_id != right.employee_id or left.year_month != right.year_month:
        raise ValidationError("Only balances of the same employee and month can be combined")

    return MonthlyBalance(
        employee_id=left.employee_id,
        year_month=left.year_month,
        overtime_minutes=left.overtime_minutes + right.overtime_minutes,
        deficit_minutes=left.deficit_minutes + right.deficit_minutes,
        absence_days=left.absence_days + right.absence_days,
        days_counted=left.days_counted + right.days_counted,
        anomalous_days=left.anomalous_days + right.anomalous_days,
    )


def fold_days(employee_id: int, year_month: YearMonth, days: Iterable[DailyAttendance]) -> MonthlyBalance:
    return reduce(fold_monthly_balance, days, MonthlyBalance.empty(employee_id, year_month))
