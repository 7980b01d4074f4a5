from __future__ import annotations

from dataclasses import dataclass

from ..common.datetime_utils import YearMonth


@dataclass(frozen=True)
class MonthlyBalance:
    """Overtime/deficit accumulated over one month for one employee.

    Both totals are non-negative; each day feeds at most one of them.
    """

    employee_id: int
    year_month: YearMonth
    overtime_minutes: int = 0
    deficit_minutes: int = 0
    absence_days: int = 0
    days_counted: int = 0
    anomalous_days: int = 0

    @classmethod
    def empty(cls, employee_id: int, year_month: YearMonth) -> "MonthlyBalance":
        return cls(employee_id=employee_id, year_month=year_month)

    @property
    def net_minutes(self) -> int:
        return self.overtime_minutes - self.deficit_minutes

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "month": str(self.year_month),
            "overtime_minutes": self.overtime_minutes,
            "deficit_minutes": self.deficit_minutes,
            "net_minutes": self.net_minutes,
            "absence_days": self.absence_days,
            "days_counted": self.days_counted,
            "anomalous_days": self.anomalous_days,
        }
