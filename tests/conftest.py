from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

import pytest

from attendance_engine.container import build_engine
from attendance_engine.core.enums import PunchDirection
from attendance_engine.core.exceptions import StoreUnavailable
from attendance_engine.core.policy import EnginePolicy
from attendance_engine.punches.model import PunchEvent
from attendance_engine.schedules.model import ScheduleEntry

UTC = timezone.utc


def at(day: date, hh: int, mm: int = 0, tz=UTC) -> datetime:
    return datetime.combine(day, time(hh, mm), tzinfo=tz)


class PunchFactory:
    """Builds punches with increasing insertion timestamps."""

    def __init__(self):
        self._seq = 0

    def __call__(self, employee_id: int, when: datetime, direction: str, *, recorded_at: Optional[datetime] = None) -> PunchEvent:
        self._seq += 1
        return PunchEvent(
            punch_id=self._seq,
            employee_id=employee_id,
            punched_at=when.astimezone(UTC),
            direction=PunchDirection(direction),
            recorded_at=recorded_at or (when.astimezone(UTC) + timedelta(seconds=self._seq)),
            source="test-device",
        )


class InMemoryPunches:
    def __init__(self, punches=()):
        self.punches = list(punches)
        self.calls: list[tuple[int, datetime, datetime]] = []
        self.fail = False

    def add(self, *punches: PunchEvent) -> None:
        self.punches.extend(punches)

    def punches_for(self, employee_id: int, *, start: datetime, end: datetime):
        if self.fail:
            raise StoreUnavailable("punch store timed out")
        self.calls.append((employee_id, start, end))
        items = [p for p in self.punches if p.employee_id == employee_id and start <= p.punched_at < end]
        return sorted(items, key=lambda p: p.sort_key)


@dataclass
class InMemorySchedules:
    entries: list[ScheduleEntry] = field(default_factory=list)

    def entries_for(self, employee_id: int):
        return [e for e in self.entries if e.employee_id in (None, employee_id)]


@dataclass
class InMemoryRoster:
    active: set[int] = field(default_factory=set)
    inactive_on: dict[int, set[date]] = field(default_factory=dict)

    def list_active_employees(self):
        return set(self.active)

    def active_as_of(self, employee_id: int, work_date: date) -> bool:
        return employee_id in self.active and work_date not in self.inactive_on.get(employee_id, set())


@dataclass
class InMemoryApprovals:
    pending: int = 0
    leave: dict[int, set[date]] = field(default_factory=dict)

    def pending_count(self) -> int:
        return self.pending

    def approved_leave_dates(self, employee_id: int, *, start: date, end: date):
        return {d for d in self.leave.get(employee_id, set()) if start <= d <= end}


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def nine_to_five(entry_id: int = 1, *, employee_id: Optional[int] = None, grace: int = 0, **kwargs) -> ScheduleEntry:
    return ScheduleEntry(
        entry_id=entry_id,
        employee_id=employee_id,
        start_time=time(9, 0),
        end_time=time(17, 0),
        grace_minutes=grace,
        **kwargs,
    )


@pytest.fixture
def punch():
    return PunchFactory()


@pytest.fixture
def policy():
    return EnginePolicy(timezone="UTC", default_grace_minutes=0, cache_ttl_seconds=0, max_workers=1)


@dataclass
class Engine:
    punches: InMemoryPunches
    schedules: InMemorySchedules
    roster: InMemoryRoster
    approvals: InMemoryApprovals
    clock: FixedClock
    container: object

    @property
    def attendance(self):
        return self.container.attendance_service

    @property
    def balances(self):
        return self.container.balance_service

    @property
    def metrics(self):
        return self.container.metrics_publisher


@pytest.fixture
def make_engine(policy):
    def _make(*, now: datetime, employees=(1,), entries=(), policy_override: Optional[EnginePolicy] = None) -> Engine:
        punches = InMemoryPunches()
        schedules = InMemorySchedules(list(entries))
        roster = InMemoryRoster(set(employees))
        approvals = InMemoryApprovals()
        clock = FixedClock(now)
        container = build_engine(
            punches=punches,
            schedules=schedules,
            roster=roster,
            approvals=approvals,
            policy=policy_override or policy,
            clock=clock,
        )
        return Engine(punches, schedules, roster, approvals, clock, container)

    return _make
