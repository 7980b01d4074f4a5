from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Optional

from ..core.enums import DayStatus, IntervalQuality


@dataclass(frozen=True)
class WorkInterval:
    """Khoảng làm việc sau khi ghép cặp vào/ra.

    Derived data: recomputed from punches, never the source of truth.
    """

    employee_id: int
    work_date: date
    start: datetime
    end: Optional[datetime]
    quality: IntervalQuality
    note: Optional[str] = None

    def __post_init__(self):
        if self.end is not None and self.end <= self.start:
            raise ValueError(f"Interval end {self.end} is not after start {self.start}")
        if self.end is None and self.quality != IntervalQuality.OPEN:
            raise ValueError("Only open intervals may lack an end")

    @property
    def duration(self) -> timedelta:
        if self.end is None:
            return timedelta(0)
        return self.end - self.start

    @property
    def is_open(self) -> bool:
        return self.end is None


@dataclass(frozen=True)
class DailyAttendance:
    """Read-model: chuyên cần của một nhân viên trong một ngày."""

    employee_id: int
    work_date: date
    status: DayStatus
    worked_minutes: int
    expected_minutes: int
    delta_minutes: int
    anomalous_minutes: int = 0
    in_progress: bool = False
    due_at: Optional[datetime] = None
    warnings: tuple[str, ...] = ()
    intervals: tuple[WorkInterval, ...] = field(default=(), compare=False)

    @property
    def is_counted(self) -> bool:
        """False for days excluded from present/absent counts."""
        return self.status != DayStatus.DAY_OFF

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "status": self.status.value,
            "worked_minutes": self.worked_minutes,
            "expected_minutes": self.expected_minutes,
            "delta_minutes": self.delta_minutes,
            "anomalous_minutes": self.anomalous_minutes,
            "in_progress": self.in_progress,
            "due_at": self.due_at.isoformat() if self.due_at else None,
            "warnings": list(self.warnings),
            "intervals": [
                {
                    "start": i.start.isoformat(),
                    "end": i.end.isoformat() if i.end else None,
                    "quality": i.quality.value,
                    "minutes": int(i.duration.total_seconds() // 60),
                }
                for i in self.intervals
            ],
        }
