from __future__ import annotations

from ...core.enums import DayStatus
from .base import DayFacts, DayStatusStrategy, StatusDecision


class ExcusedStrategy(DayStatusStrategy):
    """Approved leave on a scheduled day without any work."""

    def decide(self, facts: DayFacts) -> StatusDecision:
        return StatusDecision(status=DayStatus.EXCUSED, expected_minutes=0, delta_minutes=0)
