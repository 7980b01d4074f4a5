from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..core.enums import PunchDirection
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_utc, db_cursor, fetchall, to_db_utc
from .model import PunchEvent
from .repository import PunchEventStore


class MySQLPunchRepository(PunchEventStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def punches_for(self, employee_id: int, *, start: datetime, end: datetime) -> Sequence[PunchEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT punch_id, employee_id, punched_at, direction, source, recorded_at
                FROM punches
                WHERE employee_id=%s AND punched_at >= %s AND punched_at < %s
                ORDER BY punched_at ASC, recorded_at ASC
                """,
                (int(employee_id), to_db_utc(start), to_db_utc(end)),
            )
            rows = fetchall(cur)
            return [
                PunchEvent(
                    punch_id=int(r["punch_id"]),
                    employee_id=int(r["employee_id"]),
                    punched_at=as_utc(r["punched_at"]),
                    direction=PunchDirection(r["direction"]),
                    source=r.get("source"),
                    recorded_at=as_utc(r["recorded_at"]),
                )
                for r in rows
            ]
