from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import PunchEvent


class PunchEventStore(Protocol):
    """Append-only punch source. The engine reads, never writes."""

    def punches_for(self, employee_id: int, *, start: datetime, end: datetime) -> Sequence[PunchEvent]:
        """Punches with ``start <= punched_at < end``, ordered by instant.

        Must not return events outside the requested range.
        """

        raise NotImplementedError
