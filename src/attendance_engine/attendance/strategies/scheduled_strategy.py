from __future__ import annotations

from ...core.enums import DayStatus
from .base import DayFacts, DayStatusStrategy, StatusDecision


class ScheduledStrategy(DayStatusStrategy):
    """Scheduled day with some work: present within grace, partial below it."""

    def decide(self, facts: DayFacts) -> StatusDecision:
        threshold = facts.expected_minutes - facts.grace_minutes
        status = DayStatus.PRESENT if facts.worked_minutes >= threshold else DayStatus.PARTIAL
        return StatusDecision(
            status=status,
            expected_minutes=facts.expected_minutes,
            delta_minutes=facts.worked_minutes - facts.expected_minutes,
        )
