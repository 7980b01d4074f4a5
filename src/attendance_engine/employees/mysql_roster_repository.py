from __future__ import annotations

from datetime import date
from typing import Optional, Set

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import RosterProvider


class MySQLRosterRepository(RosterProvider):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active_employees(self) -> Set[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT employee_id FROM employees WHERE is_active=1")
            return {int(r["employee_id"]) for r in fetchall(cur)}

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, full_name, is_active, schedule_ref, hired_on, terminated_on
                FROM employees
                WHERE employee_id=%s
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Employee(
                employee_id=int(r["employee_id"]),
                full_name=r["full_name"],
                is_active=bool(r.get("is_active")),
                schedule_ref=r.get("schedule_ref"),
                hired_on=r.get("hired_on"),
                terminated_on=r.get("terminated_on"),
            )

    def active_as_of(self, employee_id: int, work_date: date) -> bool:
        employee = self.get_by_id(employee_id)
        return bool(employee and employee.active_on(work_date))
