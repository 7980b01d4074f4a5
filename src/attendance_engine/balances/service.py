from __future__ import annotations

from datetime import date, timedelta
from functools import reduce
from typing import Optional

from ..attendance.service import AttendanceService
from ..common.datetime_utils import YearMonth
from .fold import combine_balances, fold_days
from .model import MonthlyBalance


class BalanceService:
    """Monthly overtime/deficit balances built from closed days.

    A month is folded in chunks of ``chunk_days``; each chunk is cached on
    its own, so a late punch only recomputes the chunk holding its day.
    """

    def __init__(self, attendance: AttendanceService, *, chunk_days: int = 7):
        self._attendance = attendance
        self._chunk_days = max(int(chunk_days), 1)

    def monthly_balance(self, employee_id: int, year_month: YearMonth, *, through: Optional[date] = None) -> MonthlyBalance:
        """Balance from the first of the month through ``through``.

        By default only closed days count: the month ends yesterday at the latest.
        """

        last = through or (self._attendance.today() - timedelta(days=1))
        last = min(last, year_month.last_day)
        empty = MonthlyBalance.empty(employee_id, year_month)
        if last < year_month.first_day:
            return empty

        partials = []
        chunk_start = year_month.first_day
        while chunk_start <= last:
            chunk_end = min(chunk_start + timedelta(days=self._chunk_days - 1), last)
            days = self._attendance.attendance_range(employee_id, chunk_start, chunk_end)
            partials.append(fold_days(employee_id, year_month, days))
            chunk_start = chunk_end + timedelta(days=1)

        return reduce(combine_balances, partials, empty)
