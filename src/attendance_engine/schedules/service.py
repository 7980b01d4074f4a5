from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Iterable, Sequence, Union

from ..core.exceptions import ScheduleConflict
from .model import DAY_OFF, UNSCHEDULED, NoSchedule, ScheduleEntry
from .repository import ScheduleSource

logger = logging.getLogger(__name__)

Resolution = Union[ScheduleEntry, NoSchedule]


def assert_no_conflicts(entries: Iterable[ScheduleEntry]) -> None:
    """Write-time check: at most one entry per tier slot and employee.

    Call before persisting a new set of entries; raises ScheduleConflict
    naming the clashing entry ids.
    """

    slots: dict[tuple, list[ScheduleEntry]] = defaultdict(list)
    for entry in entries:
        slots[(entry.employee_id, *entry.slot_key)].append(entry)

    for (employee_id, tier, work_date, weekday), clashing in slots.items():
        if len(clashing) > 1:
            where = work_date.isoformat() if work_date else (f"weekday {weekday}" if weekday is not None else "default")
            raise ScheduleConflict(
                f"{len(clashing)} schedule entries share tier {tier.name} ({where})",
                employee_id=employee_id,
                work_date=work_date,
                entry_ids=[e.entry_id for e in clashing],
            )


def resolve_entries(entries: Sequence[ScheduleEntry], *, employee_id: int, work_date: date) -> Resolution:
    """Pick the most specific matching entry (pure)."""

    candidates = [
        e for e in entries
        if (e.employee_id is None or e.employee_id == employee_id) and e.matches(work_date)
    ]
    if not candidates:
        return UNSCHEDULED

    best_tier = min(e.tier for e in candidates)
    winners = [e for e in candidates if e.tier == best_tier]
    if len(winners) > 1:
        raise ScheduleConflict(
            f"{len(winners)} schedule entries match tier {best_tier.name} for employee {employee_id} on {work_date}",
            employee_id=employee_id,
            work_date=work_date,
            entry_ids=[e.entry_id for e in winners],
        )

    winner = winners[0]
    if winner.is_day_off:
        return DAY_OFF
    return winner


class ScheduleCatalog:
    def __init__(self, source: ScheduleSource):
        self._source = source

    def resolve(self, employee_id: int, work_date: date) -> Resolution:
        entries = self._source.entries_for(employee_id)
        try:
            return resolve_entries(entries, employee_id=employee_id, work_date=work_date)
        except ScheduleConflict:
            logger.error("Schedule conflict for employee_id=%s on %s", employee_id, work_date)
            raise

    def resolve_many(self, employee_id: int, days: Iterable[date]) -> dict[date, Resolution]:
        """Resolve several dates with a single read from the source."""

        entries = self._source.entries_for(employee_id)
        return {d: resolve_entries(entries, employee_id=employee_id, work_date=d) for d in days}
