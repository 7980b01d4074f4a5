from __future__ import annotations

from datetime import date
from typing import Protocol, Set


class RosterProvider(Protocol):
    """Giao diện repository cho danh sách nhân viên đang làm việc.

    Lưu ý (DIP): tầng service phụ thuộc vào interface này, không phụ thuộc trực tiếp DB cụ thể.
    """

    def list_active_employees(self) -> Set[int]:
        raise NotImplementedError

    def active_as_of(self, employee_id: int, work_date: date) -> bool:
        raise NotImplementedError
