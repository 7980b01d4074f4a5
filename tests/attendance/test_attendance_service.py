from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

import pytest

from conftest import at, nine_to_five

from attendance_engine.common.datetime_utils import YearMonth
from attendance_engine.core.enums import DayStatus, IntervalQuality
from attendance_engine.core.exceptions import ScheduleConflict, StoreUnavailable, ValidationError
from attendance_engine.core.policy import EnginePolicy
from attendance_engine.schedules.model import ScheduleEntry

DAY = date(2026, 3, 10)
AFTER_MONTH = datetime(2026, 4, 2, 12, 0, tzinfo=timezone.utc)


def only_on(day: date, entry_id: int = 1, **kwargs) -> ScheduleEntry:
    return nine_to_five(entry_id, employee_id=1, work_date=day, **kwargs)


def test_full_day_matches_schedule(make_engine, punch):
    engine = make_engine(now=AFTER_MONTH, entries=[only_on(DAY)])
    engine.punches.add(punch(1, at(DAY, 9), "in"), punch(1, at(DAY, 17), "out"))

    day = engine.attendance.daily_attendance(1, DAY)

    assert day.status == DayStatus.PRESENT
    assert (day.worked_minutes, day.expected_minutes, day.delta_minutes) == (480, 480, 0)


def test_short_day_is_partial_with_deficit(make_engine, punch):
    engine = make_engine(now=AFTER_MONTH, entries=[only_on(DAY)])
    engine.punches.add(punch(1, at(DAY, 9), "in"), punch(1, at(DAY, 13), "out"))

    day = engine.attendance.daily_attendance(1, DAY)
    balance = engine.balances.monthly_balance(1, YearMonth(2026, 3))

    assert (day.status, day.worked_minutes, day.delta_minutes) == (DayStatus.PARTIAL, 240, -240)
    assert (balance.deficit_minutes, balance.overtime_minutes) == (240, 0)


def test_long_day_is_overtime(make_engine, punch):
    engine = make_engine(now=AFTER_MONTH, entries=[only_on(DAY)])
    engine.punches.add(punch(1, at(DAY, 8), "in"), punch(1, at(DAY, 18), "out"))

    day = engine.attendance.daily_attendance(1, DAY)
    balance = engine.balances.monthly_balance(1, YearMonth(2026, 3))

    assert (day.status, day.delta_minutes) == (DayStatus.PRESENT, 120)
    assert (balance.overtime_minutes, balance.deficit_minutes) == (120, 0)


def test_scheduled_day_without_punches_is_absent(make_engine):
    engine = make_engine(now=AFTER_MONTH, entries=[only_on(DAY)])

    day = engine.attendance.daily_attendance(1, DAY)
    balance = engine.balances.monthly_balance(1, YearMonth(2026, 3))

    assert (day.status, day.delta_minutes) == (DayStatus.ABSENT, 0)
    assert balance.absence_days == 1
    assert (balance.overtime_minutes, balance.deficit_minutes) == (0, 0)


def test_unscheduled_work_is_all_overtime(make_engine, punch):
    engine = make_engine(now=AFTER_MONTH)
    engine.punches.add(punch(1, at(DAY, 10), "in"), punch(1, at(DAY, 12), "out"))

    day = engine.attendance.daily_attendance(1, DAY)

    assert (day.status, day.expected_minutes, day.delta_minutes) == (DayStatus.PRESENT, 0, 120)


def test_day_off_without_work_is_not_counted(make_engine):
    day_off = ScheduleEntry(entry_id=2, employee_id=1, work_date=DAY, start_time=time(0), end_time=time(0), is_day_off=True)
    engine = make_engine(now=AFTER_MONTH, entries=[nine_to_five(1), day_off])

    day = engine.attendance.daily_attendance(1, DAY)

    assert day.status == DayStatus.DAY_OFF
    assert not day.is_counted
    assert day.delta_minutes == 0


def test_approved_leave_is_excused(make_engine):
    engine = make_engine(now=AFTER_MONTH, entries=[nine_to_five(1)])
    engine.approvals.leave[1] = {DAY}

    day = engine.attendance.daily_attendance(1, DAY)

    assert (day.status, day.delta_minutes) == (DayStatus.EXCUSED, 0)


def test_inactive_employee_day_is_not_absent(make_engine):
    engine = make_engine(now=AFTER_MONTH, entries=[nine_to_five(1)])
    engine.roster.inactive_on[1] = {DAY}

    assert engine.attendance.daily_attendance(1, DAY).status == DayStatus.DAY_OFF


def test_night_shift_across_lookback_widens_window_once(make_engine, punch):
    previous = DAY - timedelta(days=1)
    engine = make_engine(now=AFTER_MONTH, entries=[only_on(DAY)])
    # The in punch sits before the default 12h lookback.
    engine.punches.add(
        punch(1, at(previous, 10), "in"),
        punch(1, at(DAY, 2), "out"),
        punch(1, at(DAY, 9), "in"),
        punch(1, at(DAY, 17), "out"),
    )

    day = engine.attendance.daily_attendance(1, DAY)

    assert len(engine.punches.calls) == 2
    assert engine.punches.calls[1][1] < engine.punches.calls[0][1]
    assert day.worked_minutes == 480
    assert day.anomalous_minutes == 0


def test_unresolved_leading_out_is_reported_as_anomalous(make_engine, punch):
    engine = make_engine(now=AFTER_MONTH, entries=[only_on(DAY)])
    engine.punches.add(punch(1, at(DAY, 2), "out"), punch(1, at(DAY, 9), "in"), punch(1, at(DAY, 17), "out"))

    day = engine.attendance.daily_attendance(1, DAY)

    assert day.anomalous_minutes == 120
    assert day.worked_minutes == 600
    assert day.warnings
    assert day.intervals[0].quality == IntervalQuality.ANOMALOUS


def test_forgotten_out_on_past_day_counts_until_scheduled_end(make_engine, punch):
    engine = make_engine(now=AFTER_MONTH, entries=[only_on(DAY)])
    engine.punches.add(punch(1, at(DAY, 9), "in"))

    day = engine.attendance.daily_attendance(1, DAY)

    assert day.worked_minutes == 480
    assert day.anomalous_minutes == 480
    assert not day.in_progress


def test_running_interval_today_is_in_progress(make_engine, punch):
    engine = make_engine(now=at(DAY, 11), entries=[only_on(DAY)])
    engine.punches.add(punch(1, at(DAY, 9), "in"))

    day = engine.attendance.daily_attendance(1, DAY)

    assert day.in_progress
    assert day.status == DayStatus.PARTIAL
    assert day.worked_minutes == 0


def test_future_date_is_rejected(make_engine):
    engine = make_engine(now=at(DAY, 11))

    with pytest.raises(ValidationError):
        engine.attendance.daily_attendance(1, DAY + timedelta(days=1))


def test_store_errors_propagate_untouched(make_engine):
    engine = make_engine(now=AFTER_MONTH, entries=[only_on(DAY)])
    engine.punches.fail = True

    with pytest.raises(StoreUnavailable):
        engine.attendance.daily_attendance(1, DAY)


def test_schedule_conflict_is_surfaced(make_engine):
    engine = make_engine(now=AFTER_MONTH, entries=[only_on(DAY, 1), only_on(DAY, 2)])

    with pytest.raises(ScheduleConflict) as excinfo:
        engine.attendance.daily_attendance(1, DAY)

    assert set(excinfo.value.entry_ids) == {1, 2}


def test_compute_daily_attendance_closes_stale_open_interval(make_engine, punch):
    from attendance_engine.attendance.model import WorkInterval

    engine = make_engine(now=AFTER_MONTH)
    open_interval = WorkInterval(employee_id=1, work_date=DAY, start=at(DAY, 20), end=None, quality=IntervalQuality.OPEN)

    day = engine.attendance.compute_daily_attendance(1, DAY, [open_interval], only_on(DAY), today=AFTER_MONTH.date())

    assert not day.in_progress
    assert day.intervals[0].quality == IntervalQuality.ANOMALOUS
    assert day.anomalous_minutes == 240


def test_next_day_shift_does_not_change_forgotten_out_day(make_engine, punch):
    following = DAY + timedelta(days=1)
    engine = make_engine(now=AFTER_MONTH, entries=[nine_to_five(1)])
    engine.punches.add(punch(1, at(DAY, 9), "in"))
    before = engine.attendance.daily_attendance(1, DAY)

    engine.punches.add(punch(1, at(following, 9), "in"), punch(1, at(following, 17), "out"))
    after = engine.attendance.daily_attendance(1, DAY)

    assert before.worked_minutes == after.worked_minutes == 480
    assert after.delta_minutes == 0


def test_engine_shares_one_cache_with_container(make_engine):
    engine = make_engine(now=AFTER_MONTH)

    assert engine.container.cache is engine.attendance.cache


def test_invalidation_after_new_punch_serves_fresh_day(make_engine, punch):
    policy = EnginePolicy(timezone="UTC", default_grace_minutes=0, cache_ttl_seconds=300, max_workers=1)
    engine = make_engine(now=AFTER_MONTH, entries=[only_on(DAY)], policy_override=policy)
    engine.punches.add(punch(1, at(DAY, 9), "in"))
    assert engine.attendance.daily_attendance(1, DAY).worked_minutes == 480

    engine.punches.add(punch(1, at(DAY, 13), "out"))
    dropped = engine.container.cache.invalidate(1, DAY)

    assert dropped == 1
    assert engine.attendance.daily_attendance(1, DAY).worked_minutes == 240


def test_night_shift_from_yesterday_is_still_in_progress(make_engine, punch):
    night = ScheduleEntry(entry_id=1, start_time=time(22), end_time=time(6))
    engine = make_engine(now=at(DAY, 2), entries=[night])
    previous = DAY - timedelta(days=1)
    engine.punches.add(punch(1, at(previous, 22), "in"))

    day = engine.attendance.daily_attendance(1, previous)

    assert day.in_progress
    assert day.intervals[0].quality == IntervalQuality.OPEN
