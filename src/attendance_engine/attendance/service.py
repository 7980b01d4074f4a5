from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional, Sequence, Set, Tuple, Union

from ..common.cache import CacheKey, ReadThroughCache
from ..common.datetime_utils import day_bounds, iter_days, local_date, local_midnight, minutes_of, now_utc
from ..core.enums import IntervalQuality
from ..core.exceptions import MalformedPunchSequence, ValidationError
from ..core.policy import EnginePolicy
from ..employees.repository import RosterProvider
from ..punches.model import PunchEvent
from ..punches.repository import PunchEventStore
from ..requests.repository import ApprovalProvider
from ..schedules.model import NoSchedule, ScheduleEntry
from ..schedules.service import ScheduleCatalog
from .calculator.base import WorkedTimeCalculator
from .calculator.standard_calculator import StandardWorkedTimeCalculator
from .factory import DayStatusStrategyFactory
from .model import DailyAttendance, WorkInterval
from .reconciler import IntervalReconciler
from .strategies.base import DayFacts

logger = logging.getLogger(__name__)

INACTIVE = NoSchedule(reason="inactive")


class AttendanceService:
    """Turns punches and schedules into per-day attendance facts.

    Reads go through the collaborators (punch store, schedule catalog,
    roster, approvals); everything after the reads is pure. Store errors are
    not caught here: they abort the unit of work and reach the caller as-is.
    """

    def __init__(
        self,
        punches: PunchEventStore,
        catalog: ScheduleCatalog,
        roster: RosterProvider,
        approvals: Optional[ApprovalProvider] = None,
        *,
        policy: Optional[EnginePolicy] = None,
        cache: Optional[ReadThroughCache] = None,
        calculator: Optional[WorkedTimeCalculator] = None,
        strategy_factory: Optional[DayStatusStrategyFactory] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._punches = punches
        self._catalog = catalog
        self._roster = roster
        self._approvals = approvals
        self._policy = policy or EnginePolicy()
        self._tz = self._policy.tz
        self._cache = cache if cache is not None else ReadThroughCache(self._policy.cache_ttl_seconds)
        self._reconciler = IntervalReconciler(self._tz)
        self._calculator = calculator or StandardWorkedTimeCalculator(self._tz, deduct_breaks=self._policy.auto_deduct_breaks)
        self._factory = strategy_factory or DayStatusStrategyFactory()
        self._clock = clock

    @property
    def policy(self) -> EnginePolicy:
        return self._policy

    @property
    def cache(self) -> ReadThroughCache:
        return self._cache

    def today(self) -> date:
        return local_date(self._clock(), self._tz)

    def compute_daily_attendance(
        self,
        employee_id: int,
        work_date: date,
        intervals: Sequence[WorkInterval],
        schedule: Union[ScheduleEntry, NoSchedule],
        *,
        excused: bool = False,
        today: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> DailyAttendance:
        """Pure: compare reconciled intervals with the resolved schedule.

        Open intervals of a day before ``today`` are closed as anomalous,
        unless ``now`` is still inside the scheduled window (night shift).
        """

        shift_end = schedule.expected_window(work_date, self._tz)[1] if isinstance(schedule, ScheduleEntry) else None
        shift_running = now is not None and shift_end is not None and now < shift_end
        if today is not None and work_date < today and not shift_running:
            intervals = [self._close_stale(i) if i.is_open else i for i in intervals]

        worked = minutes_of(self._calculator.worked(intervals, schedule))
        anomalous = minutes_of(
            sum((i.duration for i in intervals if i.quality == IntervalQuality.ANOMALOUS), timedelta(0))
        )
        in_progress = any(i.is_open for i in intervals)

        if isinstance(schedule, ScheduleEntry):
            expected = schedule.expected_duration_minutes()
            grace = schedule.effective_grace(self._policy.default_grace_minutes)
            due_at = schedule.expected_window(work_date, self._tz)[0] + timedelta(minutes=grace)
        else:
            expected, grace, due_at = 0, 0, None

        strategy = self._factory.for_day(schedule=schedule, worked_minutes=worked, excused=excused)
        decision = strategy.decide(
            DayFacts(worked_minutes=worked, expected_minutes=expected, grace_minutes=grace, in_progress=in_progress)
        )

        warnings = tuple(
            f"{i.quality.value} interval {i.start.astimezone(self._tz):%H:%M}-"
            f"{i.end.astimezone(self._tz):%H:%M}: {i.note or 'check punches'}"
            for i in intervals
            if i.quality in (IntervalQuality.ANOMALOUS, IntervalQuality.INFERRED)
        )

        return DailyAttendance(
            employee_id=employee_id,
            work_date=work_date,
            status=decision.status,
            worked_minutes=worked,
            expected_minutes=decision.expected_minutes,
            delta_minutes=decision.delta_minutes,
            anomalous_minutes=anomalous,
            in_progress=in_progress,
            due_at=due_at if decision.expected_minutes else None,
            warnings=warnings,
            intervals=tuple(intervals),
        )

    def daily_attendance(self, employee_id: int, work_date: date) -> DailyAttendance:
        return self.attendance_range(employee_id, work_date, work_date)[0]

    def attendance_range(self, employee_id: int, start: date, end: date) -> Tuple[DailyAttendance, ...]:
        """One DailyAttendance per day from ``start`` to ``end`` inclusive."""

        if end < start:
            raise ValidationError("End date must not be before start date")
        today = self.today()
        if end > today:
            raise ValidationError(f"Cannot compute attendance for future date {end}")

        key = CacheKey(int(employee_id), start, end)
        return self._cache.get_or_load(key, lambda: self._load_range(int(employee_id), start, end, today))

    def _load_range(self, employee_id: int, start: date, end: date, today: date) -> Tuple[DailyAttendance, ...]:
        days = list(iter_days(start, end))
        now = self._clock()
        schedules = self._catalog.resolve_many(employee_id, days)
        leave = self._leave_dates(employee_id, start, end)

        window_start = local_midnight(start, self._tz) - self._policy.lookback
        window_end = local_midnight(end + timedelta(days=1), self._tz) + self._policy.lookahead
        punches = self._fetch(employee_id, window_start, window_end)

        out: List[DailyAttendance] = []
        for day in days:
            schedule = schedules[day] if self._roster.active_as_of(employee_id, day) else INACTIVE
            expected_end = schedule.expected_window(day, self._tz)[1] if isinstance(schedule, ScheduleEntry) else None

            try:
                intervals = self._reconciler.reconcile(
                    employee_id,
                    day,
                    punches,
                    window_start=window_start,
                    is_today=day == today,
                    expected_end=expected_end,
                    now=now,
                )
            except MalformedPunchSequence as exc:
                window_start, punches, intervals = self._reconcile_widened(
                    employee_id, day, window_start, window_end, today=today, now=now, expected_end=expected_end, cause=exc
                )

            out.append(
                self.compute_daily_attendance(
                    employee_id, day, intervals, schedule, excused=day in leave, today=today, now=now
                )
            )
        return tuple(out)

    def _reconcile_widened(
        self,
        employee_id: int,
        day: date,
        window_start: datetime,
        window_end: datetime,
        *,
        today: date,
        now: datetime,
        expected_end: Optional[datetime],
        cause: MalformedPunchSequence,
    ) -> Tuple[datetime, Sequence[PunchEvent], List[WorkInterval]]:
        widened = window_start - self._policy.lookback - timedelta(days=1)
        logger.warning(
            "Widening lookback for employee_id=%s on %s to %s (%s)", employee_id, day, widened.isoformat(), cause
        )
        punches = self._fetch(employee_id, widened, window_end)
        try:
            intervals = self._reconciler.reconcile(
                employee_id,
                day,
                punches,
                window_start=widened,
                is_today=day == today,
                expected_end=expected_end,
                now=now,
            )
        except MalformedPunchSequence:
            logger.warning("Lookback still unresolved for employee_id=%s on %s; keeping slice as anomalous", employee_id, day)
            intervals = self._reconciler.reconcile(
                employee_id,
                day,
                punches,
                window_start=widened,
                is_today=day == today,
                expected_end=expected_end,
                now=now,
                strict=False,
            )
        return widened, punches, intervals

    def _fetch(self, employee_id: int, start: datetime, end: datetime) -> Sequence[PunchEvent]:
        punches = self._punches.punches_for(employee_id, start=start, end=end)
        return [p for p in punches if start <= p.punched_at < end]

    def _leave_dates(self, employee_id: int, start: date, end: date) -> Set[date]:
        if self._approvals is None:
            return set()
        return set(self._approvals.approved_leave_dates(employee_id, start=start, end=end))

    def _close_stale(self, interval: WorkInterval) -> WorkInterval:
        day_end = day_bounds(interval.work_date, self._tz)[1]
        logger.warning("Open interval on past date %s closed as anomalous", interval.work_date)
        return WorkInterval(
            employee_id=interval.employee_id,
            work_date=interval.work_date,
            start=interval.start,
            end=day_end,
            quality=IntervalQuality.ANOMALOUS,
            note="never punched out",
        )
