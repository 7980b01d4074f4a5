from __future__ import annotations

from datetime import timedelta, tzinfo
from typing import Sequence, Union

from ...core.enums import IntervalQuality
from ...schedules.model import NoSchedule, ScheduleEntry
from ..model import WorkInterval
from .base import WorkedTimeCalculator

COUNTED = frozenset({IntervalQuality.COMPLETE, IntervalQuality.INFERRED, IntervalQuality.ANOMALOUS})


class StandardWorkedTimeCalculator(WorkedTimeCalculator):
    """Standard rule: sum of closed intervals minus any unpunched break, not below 0.

    The scheduled break is only deducted for the part the employee did not
    already punch out for (gaps between intervals inside the shift window).
    """

    def __init__(self, tz: tzinfo, *, deduct_breaks: bool = True):
        self._tz = tz
        self._deduct_breaks = deduct_breaks

    def worked(self, intervals: Sequence[WorkInterval], schedule: Union[ScheduleEntry, NoSchedule]) -> timedelta:
        closed = sorted((i for i in intervals if i.quality in COUNTED), key=lambda i: i.start)
        total = sum((i.duration for i in closed), timedelta(0))

        if self._deduct_breaks and isinstance(schedule, ScheduleEntry) and schedule.break_minutes and closed:
            total -= self._unpunched_break(closed, schedule)

        return max(total, timedelta(0))

    def _unpunched_break(self, closed: Sequence[WorkInterval], schedule: ScheduleEntry) -> timedelta:
        window_start, window_end = schedule.expected_window(closed[0].work_date, self._tz)
        taken = timedelta(0)
        for prev, nxt in zip(closed, closed[1:]):
            gap_start = max(prev.end, window_start)
            gap_end = min(nxt.start, window_end)
            if gap_end > gap_start:
                taken += gap_end - gap_start

        owed = timedelta(minutes=int(schedule.break_minutes)) - taken
        return max(owed, timedelta(0))
