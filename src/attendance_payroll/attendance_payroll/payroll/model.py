from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..attendance.model import DayAdjudication
from ..core.enums import short_code
from ..violations.model import EscalationResult


@dataclass(frozen=True)
class MonthlyPayrollSummary:
    """Derived, never stored: recomputed from day records, rules and salary."""

    employee_code: str
    employee_name: str
    year: int
    month: int
    days: tuple[DayAdjudication, ...]
    escalation: EscalationResult
    late_count: int
    early_count: int
    total_late_minutes: int
    total_early_minutes: int
    unpaid_leave_days: float
    absent_days: float
    half_days: float
    paid_leave_count: int
    salary_deduct_days: float
    gross_salary: float
    per_day_salary: float
    salary_deduct_amount: float
    net_salary: float
    unresolved_dates: tuple[date, ...] = field(default_factory=tuple)

    @property
    def violation_count(self) -> int:
        return self.escalation.count

    @property
    def violation_full_days(self) -> float:
        return self.escalation.full_days

    @property
    def per_minute_fine_days(self) -> float:
        return self.escalation.per_minute_days

    @property
    def violation_days(self) -> float:
        return self.escalation.total_days

    def to_dict(self) -> dict:
        return {
            "empCode": self.employee_code,
            "name": self.employee_name,
            "year": self.year,
            "month": self.month,
            "lateCount": self.late_count,
            "earlyCount": self.early_count,
            "totalLateMinutes": self.total_late_minutes,
            "totalEarlyMinutes": self.total_early_minutes,
            "violationCount": self.violation_count,
            "violationFullDays": self.violation_full_days,
            "perMinuteFineDays": self.per_minute_fine_days,
            "violationDays": self.violation_days,
            "unpaidLeaveDays": self.unpaid_leave_days,
            "absentDays": self.absent_days,
            "halfDays": self.half_days,
            "paidLeaveCount": self.paid_leave_count,
            "salaryDeductDays": self.salary_deduct_days,
            "grossSalary": self.gross_salary,
            "perDaySalary": self.per_day_salary,
            "salaryDeductAmount": self.salary_deduct_amount,
            "netSalary": self.net_salary,
            "unresolvedDates": [d.isoformat() for d in self.unresolved_dates],
            "days": [_day_to_dict(d) for d in self.days],
        }


def _day_to_dict(d: DayAdjudication) -> dict:
    return {
        "date": d.date.isoformat(),
        "shift": d.shift_code,
        "status": d.status.value if d.status else None,
        "code": short_code(d.status),
        "checkIn": d.check_in.isoformat() if d.check_in else None,
        "checkOut": d.check_out.isoformat() if d.check_out else None,
        "late": d.late,
        "earlyLeave": d.early_leave,
        "lateMinutes": d.late_minutes,
        "earlyMinutes": d.early_minutes,
        "lateExcused": d.late_excused,
        "earlyExcused": d.early_excused,
        "isFuture": d.is_future,
        "isOffDay": d.is_off_day,
        "reason": d.reason,
    }


@dataclass(frozen=True)
class PayrollBatchResult:
    year: int
    month: int
    summaries: tuple[MonthlyPayrollSummary, ...] = field(default_factory=tuple)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures

    def get(self, employee_code: str) -> Optional[MonthlyPayrollSummary]:
        for s in self.summaries:
            if s.employee_code == employee_code:
                return s
        return None
