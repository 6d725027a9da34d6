from __future__ import annotations

import calendar
from typing import Sequence

from ...attendance.model import DayAdjudication
from ...core.enums import AttendanceStatus, is_manual_status
from ...employees.model import Employee
from ...violations.calculator import escalate
from ...violations.model import ViolationDay, ViolationRulesConfig
from ..model import MonthlyPayrollSummary
from .base import DeductionCalculator


def salary_amounts(gross_salary: float, deduct_days: float, days_in_month: int) -> tuple[float, float, float]:
    """(per-day salary, deduction amount, net salary). Net may go negative."""
    per_day = gross_salary / days_in_month if days_in_month > 0 else 0.0
    amount = per_day * deduct_days
    return round(per_day, 2), round(amount, 2), round(gross_salary - amount, 2)


def counts_as_violation(day: DayAdjudication) -> bool:
    return (
        day.has_violation
        and day.status == AttendanceStatus.PRESENT
        and day.check_in is not None
        and day.check_out is not None
    )


def absent_equivalent(day: DayAdjudication, rules: ViolationRulesConfig) -> float:
    # A status set by hand (leave, holiday, WFH, half day) is never also an absence.
    if day.is_off_day or day.excused or is_manual_status(day.status):
        return 0.0
    if day.both_missing:
        return rules.both_missing_days
    if day.partial_punch:
        return rules.partial_punch_days
    return 0.0


class StandardDeductionCalculator(DeductionCalculator):
    """Violations + unpaid leave + absences + half days, against the real month length."""

    def summarize(
        self,
        *,
        employee: Employee,
        year: int,
        month: int,
        days: Sequence[DayAdjudication],
        rules: ViolationRulesConfig,
    ) -> MonthlyPayrollSummary:
        past = [d for d in sorted(days, key=lambda d: d.date) if not d.is_future]

        escalation = escalate(
            (ViolationDay(date=d.date, minutes=d.violation_minutes) for d in past if counts_as_violation(d)),
            rules,
        )

        unpaid = absent = half = 0.0
        paid_leave_count = 0
        for d in past:
            absent += absent_equivalent(d, rules)
            if d.status == AttendanceStatus.UNPAID_LEAVE:
                unpaid += rules.unpaid_leave_days
            elif d.status == AttendanceStatus.SICK_LEAVE:
                unpaid += rules.effective_sick_leave_days
            elif d.status == AttendanceStatus.LEAVE_WITHOUT_INFORM:
                absent += rules.leave_without_inform_days
            elif d.status == AttendanceStatus.HALF_DAY:
                half += rules.half_day_days
            elif d.status == AttendanceStatus.PAID_LEAVE:
                paid_leave_count += 1

        deduct_days = round(escalation.full_days + escalation.per_minute_days + unpaid + absent + half, 3)
        days_in_month = calendar.monthrange(year, month)[1]
        gross = float(employee.monthly_salary or 0)
        per_day, amount, net = salary_amounts(gross, deduct_days, days_in_month)

        return MonthlyPayrollSummary(
            employee_code=employee.code,
            employee_name=employee.name,
            year=year,
            month=month,
            days=tuple(sorted(days, key=lambda d: d.date)),
            escalation=escalation,
            late_count=sum(1 for d in past if d.unexcused_late),
            early_count=sum(1 for d in past if d.unexcused_early),
            total_late_minutes=sum(d.late_minutes for d in past if d.unexcused_late),
            total_early_minutes=sum(d.early_minutes for d in past if d.unexcused_early),
            unpaid_leave_days=round(unpaid, 3),
            absent_days=round(absent, 3),
            half_days=round(half, 3),
            paid_leave_count=paid_leave_count,
            salary_deduct_days=deduct_days,
            gross_salary=gross,
            per_day_salary=per_day,
            salary_deduct_amount=amount,
            net_salary=net,
        )
