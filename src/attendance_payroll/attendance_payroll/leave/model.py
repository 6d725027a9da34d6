from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.exceptions import ValidationError

QUARTER_MONTHS = {
    1: "Jan–Mar",
    2: "Apr–Jun",
    3: "Jul–Sep",
    4: "Oct–Dec",
}

# Unused allocation only moves Q1 -> Q2 and Q3 -> Q4, never across years.
CARRY_FORWARD_SOURCE = {2: 1, 4: 3}


def _check_quarter(quarter: int) -> int:
    if int(quarter) not in QUARTER_MONTHS:
        raise ValidationError(f"quarter must be between 1 and 4, got {quarter!r}")
    return int(quarter)


def quarter_of(day: date) -> tuple[int, int]:
    return day.year, (day.month - 1) // 3 + 1


def quarter_range(year: int, quarter: int) -> tuple[date, date]:
    quarter = _check_quarter(quarter)
    start_month = (quarter - 1) * 3 + 1
    end_month = start_month + 2
    last_day = calendar.monthrange(year, end_month)[1]
    return date(year, start_month, 1), date(year, end_month, last_day)


def quarter_label(year: int, quarter: int) -> str:
    """E.g. "Q2 (Apr–Jun) 2026"."""
    quarter = _check_quarter(quarter)
    return f"Q{quarter} ({QUARTER_MONTHS[quarter]}) {year}"


def carry_source(quarter: int) -> Optional[int]:
    return CARRY_FORWARD_SOURCE.get(_check_quarter(quarter))


@dataclass(frozen=True, order=True)
class QuarterKey:
    employee_code: str
    year: int
    quarter: int

    def __post_init__(self) -> None:
        _check_quarter(self.quarter)

    @classmethod
    def for_date(cls, employee_code: str, day: date) -> "QuarterKey":
        year, quarter = quarter_of(day)
        return cls(employee_code=employee_code, year=year, quarter=quarter)

    @property
    def label(self) -> str:
        return quarter_label(self.year, self.quarter)


@dataclass(frozen=True)
class LeaveQuarterBalance:
    """Stored ledger row. ``allocated`` is the base only; carry-in is never persisted."""

    employee_code: str
    year: int
    quarter: int
    allocated: int
    taken: int = 0
    version: int = 0

    @property
    def key(self) -> QuarterKey:
        return QuarterKey(self.employee_code, self.year, self.quarter)

    @property
    def unused(self) -> int:
        return max(0, self.allocated - self.taken)


@dataclass(frozen=True)
class LeaveRecord:
    """Audit entry for one granted paid leave; unique per (employee, date)."""

    employee_code: str
    leave_date: date
    leave_type: str = "paid"
    reason: Optional[str] = None
    record_id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class QuarterBalanceView:
    employee_code: str
    year: int
    quarter: int
    base: int
    carried_in: int
    taken: int

    @property
    def label(self) -> str:
        return quarter_label(self.year, self.quarter)

    @property
    def allocated(self) -> int:
        return self.base + self.carried_in

    @property
    def remaining(self) -> int:
        return max(0, self.allocated - self.taken)

    def to_dict(self) -> dict:
        return {
            "employeeCode": self.employee_code,
            "year": self.year,
            "quarter": self.quarter,
            "label": self.label,
            "base": self.base,
            "carriedIn": self.carried_in,
            "allocated": self.allocated,
            "taken": self.taken,
            "remaining": self.remaining,
        }


@dataclass(frozen=True)
class ReconciliationReport:
    employee_code: str
    year: int
    duplicates_removed: tuple[LeaveRecord, ...] = field(default_factory=tuple)
    orphans_removed: tuple[LeaveRecord, ...] = field(default_factory=tuple)
    taken_by_quarter: dict[int, int] = field(default_factory=dict)

    @property
    def changed(self) -> bool:
        return bool(self.duplicates_removed or self.orphans_removed)
