from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from ..attendance.model import DailyAttendance
from ..attendance.service import AttendanceService
from ..balances.model import MonthlyBalance
from ..balances.service import BalanceService
from ..common.datetime_utils import YearMonth, now_utc
from ..core.enums import DayStatus
from ..employees.repository import RosterProvider
from ..requests.repository import ApprovalProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class DashboardSnapshot:
    as_of: datetime
    total_employees: int
    present_today: int
    absent_today: int
    pending_requests: int
    overtime_minutes_month: int
    deficit_minutes_month: int

    def to_dict(self) -> dict:
        return {
            "as_of": self.as_of.isoformat(),
            "total_employees": self.total_employees,
            "present_today": self.present_today,
            "absent_today": self.absent_today,
            "pending_requests": self.pending_requests,
            "overtime_minutes_month": self.overtime_minutes_month,
            "deficit_minutes_month": self.deficit_minutes_month,
            "overtime_hours_month": round(self.overtime_minutes_month / 60, 1),
            "deficit_hours_month": round(self.deficit_minutes_month / 60, 1),
        }


def is_present(day: DailyAttendance, previous: Optional[DailyAttendance] = None) -> bool:
    """``previous`` is the day before; its night shift may still be running."""
    if previous is not None and previous.in_progress:
        return True
    return day.status in (DayStatus.PRESENT, DayStatus.PARTIAL) or day.in_progress


def is_absent(day: DailyAttendance, now: datetime, previous: Optional[DailyAttendance] = None) -> bool:
    """Absent only once the scheduled start plus grace has passed."""
    if day.status != DayStatus.ABSENT:
        return False
    if previous is not None and previous.in_progress:
        return False
    return day.due_at is None or now >= day.due_at


class MetricsPublisher:
    """Read-only dashboard projections over the attendance engine.

    Every query is scoped to the roster's active employees and has no side
    effects beyond the read-through cache. Per-employee work runs on a
    thread pool; any collaborator error aborts the query and propagates.
    """

    def __init__(
        self,
        attendance: AttendanceService,
        balances: BalanceService,
        roster: RosterProvider,
        approvals: ApprovalProvider,
        *,
        max_workers: int = 1,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._attendance = attendance
        self._balances = balances
        self._roster = roster
        self._approvals = approvals
        self._max_workers = max(int(max_workers), 1)
        self._clock = clock

    def present_today(self) -> int:
        return sum(1 for previous, day in self._today_attendance() if is_present(day, previous))

    def absent_today(self) -> int:
        now = self._clock()
        return sum(1 for previous, day in self._today_attendance() if is_absent(day, now, previous))

    def month_to_date_overtime(self) -> int:
        return sum(b.overtime_minutes for b in self._month_to_date_balances())

    def month_to_date_deficit(self) -> int:
        return sum(b.deficit_minutes for b in self._month_to_date_balances())

    def pending_requests(self) -> int:
        return int(self._approvals.pending_count())

    def dashboard_snapshot(self) -> DashboardSnapshot:
        now = self._clock()
        employees = self._active_employees()
        today = self._today_attendance(employees)
        balances = self._month_to_date_balances(employees)
        logger.debug("Dashboard snapshot for %d active employees at %s", len(employees), now.isoformat())

        return DashboardSnapshot(
            as_of=now,
            total_employees=len(employees),
            present_today=sum(1 for previous, day in today if is_present(day, previous)),
            absent_today=sum(1 for previous, day in today if is_absent(day, now, previous)),
            pending_requests=self.pending_requests(),
            overtime_minutes_month=sum(b.overtime_minutes for b in balances),
            deficit_minutes_month=sum(b.deficit_minutes for b in balances),
        )

    def _active_employees(self) -> List[int]:
        today = self._attendance.today()
        return sorted(e for e in self._roster.list_active_employees() if self._roster.active_as_of(e, today))

    def _today_attendance(self, employees: Optional[Sequence[int]] = None) -> List[Tuple[DailyAttendance, DailyAttendance]]:
        """(yesterday, today) per employee, read as one range."""
        today = self._attendance.today()
        if employees is None:
            employees = self._active_employees()
        return self._map(lambda e: self._attendance.attendance_range(e, today - timedelta(days=1), today), employees)

    def _month_to_date_balances(self, employees: Optional[Sequence[int]] = None) -> List[MonthlyBalance]:
        yesterday = self._attendance.today() - timedelta(days=1)
        month = YearMonth.of(self._attendance.today())
        if employees is None:
            employees = self._active_employees()
        return self._map(lambda e: self._balances.monthly_balance(e, month, through=yesterday), employees)

    def _map(self, fn: Callable[[int], T], employees: Sequence[int]) -> List[T]:
        if self._max_workers == 1 or len(employees) <= 1:
            return [fn(e) for e in employees]
        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            return list(pool.map(fn, employees))
