from __future__ import annotations

from datetime import date
from typing import Protocol, Set


class ApprovalProvider(Protocol):
    def pending_count(self) -> int:
        """Number of requests waiting for a decision (consumed verbatim)."""

        raise NotImplementedError

    def approved_leave_dates(self, employee_id: int, *, start: date, end: date) -> Set[date]:
        """Dates covered by approved leave between ``start`` and ``end`` inclusive."""

        raise NotImplementedError
