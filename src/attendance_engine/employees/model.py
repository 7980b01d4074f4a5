from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Thực thể miền (domain): Nhân viên.

    Owned by the HR/CRUD side; the engine only reads it.
    """

    employee_id: int
    full_name: str
    is_active: bool = True
    schedule_ref: Optional[str] = None
    hired_on: Optional[date] = None
    terminated_on: Optional[date] = None

    def active_on(self, work_date: date) -> bool:
        if not self.is_active:
            return False
        if self.hired_on and work_date < self.hired_on:
            return False
        if self.terminated_on and work_date > self.terminated_on:
            return False
        return True
