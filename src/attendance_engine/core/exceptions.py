from __future__ import annotations

from datetime import date
from typing import Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class StoreUnavailable(DomainError):
    """Raised when a backing store failed or timed out.

    Transient: callers surface it as "data temporarily unavailable". The
    engine never retries it internally.
    """


class ScheduleConflict(DomainError):
    """Raised when more than one schedule entry occupies the same tier."""

    def __init__(self, message: str, *, employee_id: Optional[int] = None, work_date: Optional[date] = None, entry_ids: Sequence[int] = ()):
        super().__init__(message)
        self.employee_id = employee_id
        self.work_date = work_date
        self.entry_ids = tuple(entry_ids)


class MalformedPunchSequence(DomainError):
    """Raised when a reconciliation window starts with an unmatched ``out``."""

    def __init__(self, message: str, *, punch=None):
        super().__init__(message)
        self.punch = punch
