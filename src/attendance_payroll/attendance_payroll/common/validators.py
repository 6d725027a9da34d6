from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_value(value: float, field_name: str, min_value: float) -> float:
    if value is None or value < min_value:
        raise ValidationError(f"{field_name} must be >= {min_value}")
    return value


def require_month(year: int, month: int) -> tuple[int, int]:
    if int(year) <= 0:
        raise ValidationError("year must be positive")
    if not 1 <= int(month) <= 12:
        raise ValidationError("month must be between 1 and 12")
    return int(year), int(month)
