from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional

from ..core.enums import ScheduleTier


@dataclass(frozen=True)
class ScheduleEntry:
    """Expected work window for an employee (or the whole org).

    Exactly one of ``work_date`` / ``weekday`` may be set; neither means a
    default entry. ``employee_id=None`` means an organisation-wide entry.
    An ``end_time`` not after ``start_time`` crosses midnight.
    """

    entry_id: int
    start_time: time
    end_time: time
    employee_id: Optional[int] = None
    work_date: Optional[date] = None
    weekday: Optional[int] = None
    break_minutes: int = 0
    expected_minutes: Optional[int] = None
    grace_minutes: Optional[int] = None
    is_day_off: bool = False

    def __post_init__(self):
        if self.work_date is not None and self.weekday is not None:
            raise ValueError("A schedule entry is either date-exact or a weekday pattern, not both")
        if self.weekday is not None and not 0 <= self.weekday <= 6:
            raise ValueError(f"Invalid weekday: {self.weekday}")

    @property
    def tier(self) -> ScheduleTier:
        org = self.employee_id is None
        if self.work_date is not None:
            return ScheduleTier.ORG_DATE if org else ScheduleTier.EMPLOYEE_DATE
        if self.weekday is not None:
            return ScheduleTier.ORG_WEEKDAY if org else ScheduleTier.EMPLOYEE_WEEKDAY
        return ScheduleTier.ORG_DEFAULT if org else ScheduleTier.EMPLOYEE_DEFAULT

    @property
    def slot_key(self) -> tuple:
        """Two entries with the same slot key may never coexist."""
        return (self.tier, self.work_date, self.weekday)

    def matches(self, work_date: date) -> bool:
        if self.work_date is not None:
            return self.work_date == work_date
        if self.weekday is not None:
            return self.weekday == work_date.weekday()
        return True

    @property
    def crosses_midnight(self) -> bool:
        return self.end_time <= self.start_time

    def expected_window(self, work_date: date, tz: tzinfo) -> tuple[datetime, datetime]:
        start = datetime.combine(work_date, self.start_time, tzinfo=tz)
        end_day = work_date + timedelta(days=1) if self.crosses_midnight else work_date
        end = datetime.combine(end_day, self.end_time, tzinfo=tz)
        return start, end

    def expected_duration_minutes(self) -> int:
        if self.is_day_off:
            return 0
        if self.expected_minutes is not None:
            return int(self.expected_minutes)
        # Wall-clock arithmetic; DST shifts are not applied to expected hours.
        start = datetime.combine(date.min, self.start_time)
        end = datetime.combine(date.min, self.end_time)
        if self.crosses_midnight:
            end += timedelta(days=1)
        minutes = int((end - start).total_seconds() // 60) - int(self.break_minutes or 0)
        return max(minutes, 0)

    def effective_grace(self, default: int) -> int:
        return int(default if self.grace_minutes is None else self.grace_minutes)


@dataclass(frozen=True)
class NoSchedule:
    """Resolution result for a day without expected work.

    Not an absence: nothing was expected.
    """

    reason: str = "unscheduled"


DAY_OFF = NoSchedule(reason="day_off")
UNSCHEDULED = NoSchedule(reason="unscheduled")
