from __future__ import annotations

from enum import Enum


class PunchDirection(str, Enum):
    """Chiều của một lần chấm công (vào/ra)."""

    IN = "in"
    OUT = "out"


class IntervalQuality(str, Enum):
    """Chất lượng dữ liệu của một khoảng làm việc sau khi ghép cặp."""

    COMPLETE = "complete"
    OPEN = "open"
    INFERRED = "inferred"
    ANOMALOUS = "anomalous"


class DayStatus(str, Enum):
    """Trạng thái chuyên cần của một ngày.

    DAY_OFF: ngày nghỉ (không có lịch, không làm), không tính vào có mặt/vắng.
    """

    PRESENT = "present"
    ABSENT = "absent"
    PARTIAL = "partial"
    EXCUSED = "excused"
    DAY_OFF = "day_off"


class ScheduleTier(int, Enum):
    """Specificity levels for schedule resolution; lower value wins."""

    EMPLOYEE_DATE = 1
    ORG_DATE = 2
    EMPLOYEE_WEEKDAY = 3
    ORG_WEEKDAY = 4
    EMPLOYEE_DEFAULT = 5
    ORG_DEFAULT = 6


class RequestStatus(str, Enum):
    """Trạng thái luồng duyệt yêu cầu (nghỉ phép/điều chỉnh/đổi lịch)."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
