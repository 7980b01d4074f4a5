from __future__ import annotations

from datetime import date
from typing import Any

from ..core.exceptions import ValidationError
from .datetime_utils import YearMonth, parse_iso_date


def require_positive_id(value: Any, field_name: str) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is not a valid id") from None
    if parsed <= 0:
        raise ValidationError(f"{field_name} is not a valid id")
    return parsed


def require_date(value: str | None, field_name: str) -> date:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required (YYYY-MM-DD)")
    try:
        return parse_iso_date(value.strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD") from None


def require_year_month(value: str | None, field_name: str) -> YearMonth:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required (YYYY-MM)")
    try:
        return YearMonth.parse(value.strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM") from None
