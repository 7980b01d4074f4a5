from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ...core.enums import DayStatus


@dataclass(frozen=True)
class DayFacts:
    worked_minutes: int
    expected_minutes: int
    grace_minutes: int = 0
    in_progress: bool = False


@dataclass(frozen=True)
class StatusDecision:
    status: DayStatus
    expected_minutes: int
    delta_minutes: int


class DayStatusStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide a day's attendance status."""

    @abstractmethod
    def decide(self, facts: DayFacts) -> StatusDecision:
        raise NotImplementedError
