from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import PunchDirection


@dataclass(frozen=True)
class PunchEvent:
    """Thực thể miền (domain): Một lần chấm công vào/ra.

    ``punched_at`` and ``recorded_at`` are aware instants. Punches are never
    edited; corrections arrive as new punches from outside the engine.
    """

    employee_id: int
    punched_at: datetime
    direction: PunchDirection
    recorded_at: datetime
    source: Optional[str] = None
    punch_id: Optional[int] = None

    @property
    def sort_key(self) -> tuple[datetime, datetime]:
        return (self.punched_at, self.recorded_at)
