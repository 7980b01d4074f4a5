from datetime import date, time

import pytest

from attendance_engine.core.enums import ScheduleTier
from attendance_engine.core.exceptions import ScheduleConflict
from attendance_engine.schedules.model import DAY_OFF, UNSCHEDULED, ScheduleEntry
from attendance_engine.schedules.service import ScheduleCatalog, assert_no_conflicts, resolve_entries

# 2026-03-10 is a Tuesday (weekday 1).
DAY = date(2026, 3, 10)


def entry(entry_id, start=9, end=17, **kwargs) -> ScheduleEntry:
    return ScheduleEntry(entry_id=entry_id, start_time=time(start), end_time=time(end), **kwargs)


class ListSource:
    def __init__(self, entries):
        self.entries = list(entries)
        self.reads = 0

    def entries_for(self, employee_id):
        self.reads += 1
        return [e for e in self.entries if e.employee_id in (None, employee_id)]


@pytest.mark.parametrize(
    "kwargs, tier",
    [
        ({"employee_id": 1, "work_date": DAY}, ScheduleTier.EMPLOYEE_DATE),
        ({"work_date": DAY}, ScheduleTier.ORG_DATE),
        ({"employee_id": 1, "weekday": 1}, ScheduleTier.EMPLOYEE_WEEKDAY),
        ({"weekday": 1}, ScheduleTier.ORG_WEEKDAY),
        ({"employee_id": 1}, ScheduleTier.EMPLOYEE_DEFAULT),
        ({}, ScheduleTier.ORG_DEFAULT),
    ],
)
def test_tier_follows_scope_and_specificity(kwargs, tier):
    assert entry(1, **kwargs).tier == tier


def test_most_specific_entry_wins():
    entries = [
        entry(1),
        entry(2, 8, 12, weekday=1),
        entry(3, 10, 14, employee_id=1, work_date=DAY),
    ]

    assert resolve_entries(entries, employee_id=1, work_date=DAY).entry_id == 3
    assert resolve_entries(entries, employee_id=1, work_date=date(2026, 3, 17)).entry_id == 2
    assert resolve_entries(entries, employee_id=1, work_date=date(2026, 3, 11)).entry_id == 1


def test_entries_of_other_employees_are_ignored():
    entries = [entry(1, employee_id=2, work_date=DAY), entry(2)]

    assert resolve_entries(entries, employee_id=1, work_date=DAY).entry_id == 2


def test_day_off_override_hides_default():
    entries = [entry(1), entry(2, 0, 0, employee_id=1, work_date=DAY, is_day_off=True)]

    assert resolve_entries(entries, employee_id=1, work_date=DAY) is DAY_OFF


def test_no_matching_entry_is_unscheduled():
    entries = [entry(1, weekday=4)]

    assert resolve_entries(entries, employee_id=1, work_date=DAY) is UNSCHEDULED


def test_two_entries_on_the_winning_tier_conflict():
    entries = [entry(1, employee_id=1, weekday=1), entry(2, 10, 18, employee_id=1, weekday=1)]

    with pytest.raises(ScheduleConflict) as excinfo:
        resolve_entries(entries, employee_id=1, work_date=DAY)

    assert sorted(excinfo.value.entry_ids) == [1, 2]
    assert excinfo.value.work_date == DAY


def test_conflict_on_a_shadowed_tier_does_not_matter():
    entries = [entry(1), entry(2, 10, 18), entry(3, employee_id=1, work_date=DAY)]

    assert resolve_entries(entries, employee_id=1, work_date=DAY).entry_id == 3


def test_write_time_check_rejects_duplicate_slot():
    with pytest.raises(ScheduleConflict):
        assert_no_conflicts([entry(1, weekday=2), entry(2, 7, 15, weekday=2)])


def test_write_time_check_allows_distinct_slots():
    assert_no_conflicts([entry(1), entry(2, weekday=2), entry(3, employee_id=1), entry(4, employee_id=2)])


def test_entry_cannot_be_both_dated_and_weekly():
    with pytest.raises(ValueError):
        entry(1, work_date=DAY, weekday=1)


def test_overnight_entry_expected_duration_and_window():
    from datetime import timezone

    night = entry(1, 22, 6, break_minutes=30)

    start, end = night.expected_window(DAY, timezone.utc)

    assert night.crosses_midnight
    assert night.expected_duration_minutes() == 450
    assert (end - start).total_seconds() == 8 * 3600
    assert end.date() == date(2026, 3, 11)


def test_explicit_expected_minutes_override_window():
    assert entry(1, expected_minutes=360).expected_duration_minutes() == 360


def test_grace_falls_back_to_default():
    assert entry(1).effective_grace(5) == 5
    assert entry(1, grace_minutes=0).effective_grace(5) == 0


def test_catalog_resolve_many_reads_source_once():
    source = ListSource([entry(1), entry(2, employee_id=1, work_date=DAY, is_day_off=True)])
    catalog = ScheduleCatalog(source)

    resolved = catalog.resolve_many(1, [DAY, date(2026, 3, 11)])

    assert source.reads == 1
    assert resolved[DAY] is DAY_OFF
    assert resolved[date(2026, 3, 11)].entry_id == 1


def test_catalog_resolve_reraises_conflict():
    catalog = ScheduleCatalog(ListSource([entry(1), entry(2, 10, 18)]))

    with pytest.raises(ScheduleConflict):
        catalog.resolve(1, DAY)
