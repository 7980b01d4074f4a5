from __future__ import annotations

from typing import Protocol, Sequence

from .model import ScheduleEntry


class ScheduleSource(Protocol):
    def entries_for(self, employee_id: int) -> Sequence[ScheduleEntry]:
        """Raw entries for the employee plus organisation-wide ones.

        Unresolved; resolution is ScheduleCatalog's job.
        """

        raise NotImplementedError
