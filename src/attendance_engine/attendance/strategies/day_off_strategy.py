from __future__ import annotations

from ...core.enums import DayStatus
from .base import DayFacts, DayStatusStrategy, StatusDecision


class DayOffStrategy(DayStatusStrategy):
    """No schedule and no work: excluded from present/absent counts."""

    def decide(self, facts: DayFacts) -> StatusDecision:
        return StatusDecision(status=DayStatus.DAY_OFF, expected_minutes=0, delta_minutes=0)
