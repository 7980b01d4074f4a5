from __future__ import annotations

from ...core.enums import DayStatus
from .base import DayFacts, DayStatusStrategy, StatusDecision


class UnscheduledWorkStrategy(DayStatusStrategy):
    """Work on a day with nothing expected: all of it is overtime."""

    def decide(self, facts: DayFacts) -> StatusDecision:
        return StatusDecision(status=DayStatus.PRESENT, expected_minutes=0, delta_minutes=facts.worked_minutes)
