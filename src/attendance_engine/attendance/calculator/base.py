from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Sequence, Union

from ...schedules.model import NoSchedule, ScheduleEntry
from ..model import WorkInterval


class WorkedTimeCalculator(ABC):
    """Calculator interface (Strategy Pattern for worked time)."""

    @abstractmethod
    def worked(self, intervals: Sequence[WorkInterval], schedule: Union[ScheduleEntry, NoSchedule]) -> timedelta:
        raise NotImplementedError
