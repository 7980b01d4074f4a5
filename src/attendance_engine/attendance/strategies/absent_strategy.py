from __future__ import annotations

from ...core.enums import DayStatus
from .base import DayFacts, DayStatusStrategy, StatusDecision


class AbsentStrategy(DayStatusStrategy):
    """Scheduled day with no worked time.

    Absence is counted on its own, so the delta stays 0 (no deficit on top).
    An interval still running today means the employee is at work.
    """

    def decide(self, facts: DayFacts) -> StatusDecision:
        status = DayStatus.PARTIAL if facts.in_progress else DayStatus.ABSENT
        return StatusDecision(status=status, expected_minutes=facts.expected_minutes, delta_minutes=0)
