from __future__ import annotations

from datetime import date, timedelta
from typing import Set

from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .repository import ApprovalProvider


class MySQLRequestRepository(ApprovalProvider):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def pending_count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    (SELECT COUNT(*) FROM leave_requests WHERE status=%s)
                  + (SELECT COUNT(*) FROM timesheet_adjustment_requests WHERE status=%s) AS pending
                """,
                (RequestStatus.PENDING.value, RequestStatus.PENDING.value),
            )
            r = fetchone(cur)
            return int(r["pending"]) if r else 0

    def approved_leave_dates(self, employee_id: int, *, start: date, end: date) -> Set[date]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT start_date, end_date
                FROM leave_requests
                WHERE employee_id=%s AND status=%s AND start_date <= %s AND end_date >= %s
                """,
                (int(employee_id), RequestStatus.APPROVED.value, end, start),
            )
            rows = fetchall(cur)

        out: Set[date] = set()
        for r in rows:
            day = max(r["start_date"], start)
            last = min(r["end_date"], end)
            while day <= last:
                out.add(day)
                day += timedelta(days=1)
        return out
