from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..schedules.model import NoSchedule, ScheduleEntry
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import DayStatusStrategy
from .strategies.day_off_strategy import DayOffStrategy
from .strategies.excused_strategy import ExcusedStrategy
from .strategies.scheduled_strategy import ScheduledStrategy
from .strategies.unscheduled_strategy import UnscheduledWorkStrategy


@dataclass
class DayStatusStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_day(self, *, schedule: Union[ScheduleEntry, NoSchedule], worked_minutes: int, excused: bool = False) -> DayStatusStrategy:
        if isinstance(schedule, NoSchedule) or excused:
            if worked_minutes > 0:
                return UnscheduledWorkStrategy()
            return ExcusedStrategy() if excused and isinstance(schedule, ScheduleEntry) else DayOffStrategy()

        if worked_minutes <= 0:
            return AbsentStrategy()
        return ScheduledStrategy()
