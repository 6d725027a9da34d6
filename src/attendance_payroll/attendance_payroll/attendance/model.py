from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class PunchEvent:
    """A single device scan. Read-only to the engine."""

    employee_code: str
    instant: datetime
    outcome_valid: bool = True


@dataclass(frozen=True)
class DayOverride:
    """What HR recorded by hand for one employee and date.

    ``excused`` is the legacy combined flag; ``late_excused``/``early_excused``
    win when set. ``check_in``/``check_out`` are wall-clock corrections.
    """

    employee_code: str
    work_date: date
    status: Optional[AttendanceStatus] = None
    reason: Optional[str] = None
    excused: bool = False
    late_excused: Optional[bool] = None
    early_excused: Optional[bool] = None
    check_in: Optional[time] = None
    check_out: Optional[time] = None


@dataclass(frozen=True)
class DayAdjudication:
    """One employee x one date. Superseded, never merged, on recompute."""

    date: date
    shift_code: str
    status: Optional[AttendanceStatus]
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    late: bool = False
    early_leave: bool = False
    late_minutes: int = 0
    early_minutes: int = 0
    late_excused: bool = False
    early_excused: bool = False
    is_future: bool = False
    is_off_day: bool = False
    reason: Optional[str] = None

    @property
    def excused(self) -> bool:
        return self.late_excused or self.early_excused

    @property
    def unexcused_late(self) -> bool:
        return self.late and not self.late_excused

    @property
    def unexcused_early(self) -> bool:
        return self.early_leave and not self.early_excused

    @property
    def violation_minutes(self) -> int:
        total = 0
        if self.unexcused_late:
            total += self.late_minutes
        if self.unexcused_early:
            total += self.early_minutes
        return total

    @property
    def has_violation(self) -> bool:
        return self.unexcused_late or self.unexcused_early

    @property
    def both_missing(self) -> bool:
        return self.check_in is None and self.check_out is None

    @property
    def partial_punch(self) -> bool:
        return (self.check_in is None) != (self.check_out is None)
