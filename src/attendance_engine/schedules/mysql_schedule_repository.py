from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_time
from .model import ScheduleEntry
from .repository import ScheduleSource
from .service import assert_no_conflicts


class MySQLScheduleRepository(ScheduleSource):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def entries_for(self, employee_id: int) -> Sequence[ScheduleEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT entry_id, employee_id, work_date, weekday, start_time, end_time,
                       break_minutes, expected_minutes, grace_minutes, is_day_off
                FROM schedule_entries
                WHERE employee_id=%s OR employee_id IS NULL
                ORDER BY entry_id
                """,
                (int(employee_id),),
            )
            rows = fetchall(cur)
            return [
                ScheduleEntry(
                    entry_id=int(r["entry_id"]),
                    employee_id=int(r["employee_id"]) if r.get("employee_id") is not None else None,
                    work_date=r.get("work_date"),
                    weekday=int(r["weekday"]) if r.get("weekday") is not None else None,
                    start_time=normalize_mysql_time(r["start_time"]),
                    end_time=normalize_mysql_time(r["end_time"]),
                    break_minutes=int(r.get("break_minutes") or 0),
                    expected_minutes=int(r["expected_minutes"]) if r.get("expected_minutes") is not None else None,
                    grace_minutes=int(r["grace_minutes"]) if r.get("grace_minutes") is not None else None,
                    is_day_off=bool(r.get("is_day_off")),
                )
                for r in rows
            ]

    def add_entry(self, entry: ScheduleEntry) -> int:
        """Insert an entry after checking it against the existing ones.

        Returns entry_id. Raises ScheduleConflict if the tier slot is taken.
        """

        scope = [e for e in self.entries_for(entry.employee_id or 0) if e.employee_id == entry.employee_id]
        assert_no_conflicts([*scope, entry])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO schedule_entries(
                    employee_id, work_date, weekday, start_time, end_time,
                    break_minutes, expected_minutes, grace_minutes, is_day_off
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    entry.employee_id,
                    entry.work_date,
                    entry.weekday,
                    entry.start_time,
                    entry.end_time,
                    int(entry.break_minutes),
                    entry.expected_minutes,
                    entry.grace_minutes,
                    int(entry.is_day_off),
                ),
            )
            return int(cur.lastrowid)
