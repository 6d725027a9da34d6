from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from src.attendance_payroll.attendance_payroll.attendance.model import DayAdjudication
from src.attendance_payroll.attendance_payroll.core.enums import AttendanceStatus
from src.attendance_payroll.attendance_payroll.employees.model import Employee
from src.attendance_payroll.attendance_payroll.payroll.calculator.standard_calculator import (
    StandardDeductionCalculator,
    absent_equivalent,
    salary_amounts,
)
from src.attendance_payroll.attendance_payroll.violations.model import ViolationRulesConfig

TZ = timezone(timedelta(hours=5))


def _at(day: date, hh: int, mm: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hh, mm, tzinfo=TZ)


def _late_day(d: int, minutes: int) -> DayAdjudication:
    day = date(2026, 3, d)
    return DayAdjudication(
        date=day,
        shift_code="D1",
        status=AttendanceStatus.PRESENT,
        check_in=_at(day, 9, 30),
        check_out=_at(day, 18),
        late=True,
        late_minutes=minutes,
    )


def _status_day(d: int, status, *, month: int = 3, **kw) -> DayAdjudication:
    return DayAdjudication(date=date(2026, month, d), shift_code="D1", status=status, **kw)


@pytest.fixture
def employee() -> Employee:
    return Employee(code="E1", name="Test Employee", shift_code="D1", monthly_salary=31000)


@pytest.fixture
def march_days() -> list[DayAdjudication]:
    days = [_late_day(d, m) for d, m in zip((2, 3, 4, 5, 6), (15, 20, 10, 30, 45))]
    days += [
        _status_day(9, AttendanceStatus.UNPAID_LEAVE),
        _status_day(10, AttendanceStatus.SICK_LEAVE),
        _status_day(11, AttendanceStatus.LEAVE_WITHOUT_INFORM),
        _status_day(12, AttendanceStatus.ABSENT),
        _status_day(13, AttendanceStatus.PRESENT, check_in=_at(date(2026, 3, 13), 9)),
        _status_day(16, AttendanceStatus.HALF_DAY),
        _status_day(17, AttendanceStatus.HALF_DAY),
        _status_day(18, AttendanceStatus.PAID_LEAVE),
        _status_day(22, AttendanceStatus.HOLIDAY, is_off_day=True),
        _status_day(
            19,
            AttendanceStatus.PRESENT,
            check_in=_at(date(2026, 3, 19), 9),
            late_excused=True,
        ),
        _status_day(30, None, is_future=True),
    ]
    return days


def test_march_deduction_example(employee, march_days):
    summary = StandardDeductionCalculator().summarize(
        employee=employee, year=2026, month=3, days=march_days, rules=ViolationRulesConfig()
    )

    assert summary.violation_count == 5
    assert summary.violation_full_days == 1.0
    assert summary.per_minute_fine_days == pytest.approx(0.525)
    assert summary.violation_days == pytest.approx(1.525)
    assert summary.unpaid_leave_days == 2.0
    assert summary.absent_days == 3.5
    assert summary.half_days == 1.0
    assert summary.paid_leave_count == 1
    assert summary.salary_deduct_days == pytest.approx(8.025)
    assert summary.per_day_salary == 1000.0
    assert summary.salary_deduct_amount == pytest.approx(8025.0)
    assert summary.net_salary == pytest.approx(22975.0)
    assert summary.late_count == 5
    assert summary.total_late_minutes == 120


def test_days_are_reported_in_date_order(employee, march_days):
    summary = StandardDeductionCalculator().summarize(
        employee=employee, year=2026, month=3, days=list(reversed(march_days)), rules=ViolationRulesConfig()
    )
    dates = [d.date for d in summary.days]
    assert dates == sorted(dates)
    assert summary.to_dict()["days"][0]["date"] == "2026-03-02"


def test_future_days_do_not_count(employee):
    days = [_status_day(d, AttendanceStatus.ABSENT, is_future=True) for d in range(20, 32)]
    summary = StandardDeductionCalculator().summarize(
        employee=employee, year=2026, month=3, days=days, rules=ViolationRulesConfig()
    )
    assert summary.salary_deduct_days == 0
    assert summary.net_salary == 31000.0


def test_net_salary_can_go_negative():
    employee = Employee(code="E2", name="Short Month", shift_code="D1", monthly_salary=2800)
    days = [_status_day(d, AttendanceStatus.LEAVE_WITHOUT_INFORM, month=2) for d in range(1, 29)]

    summary = StandardDeductionCalculator().summarize(
        employee=employee, year=2026, month=2, days=days, rules=ViolationRulesConfig()
    )

    assert summary.per_day_salary == 100.0
    assert summary.salary_deduct_days == 42.0
    assert summary.net_salary == pytest.approx(-1400.0)


@pytest.mark.parametrize("sick_days,expected", [(None, 1.0), (0.5, 0.5), (0.0, 0.0)])
def test_sick_leave_weight(employee, sick_days, expected):
    rules = ViolationRulesConfig(sick_leave_days=sick_days)
    summary = StandardDeductionCalculator().summarize(
        employee=employee, year=2026, month=3, days=[_status_day(9, AttendanceStatus.SICK_LEAVE)], rules=rules
    )
    assert summary.unpaid_leave_days == expected


def test_violations_need_both_punches_and_present_status(employee):
    day = date(2026, 3, 2)
    wfh = DayAdjudication(
        date=day,
        shift_code="D1",
        status=AttendanceStatus.WORK_FROM_HOME,
        check_in=_at(day, 10),
        check_out=_at(day, 18),
        late=True,
        late_minutes=45,
    )
    rules = ViolationRulesConfig(free_violations=0)
    summary = StandardDeductionCalculator().summarize(employee=employee, year=2026, month=3, days=[wfh], rules=rules)
    assert summary.violation_count == 0


def test_absent_equivalent_uses_rule_weights():
    rules = ViolationRulesConfig(both_missing_days=2.0, partial_punch_days=0.25)
    day = date(2026, 3, 2)
    assert absent_equivalent(_status_day(2, AttendanceStatus.ABSENT), rules) == 2.0
    assert absent_equivalent(_status_day(2, AttendanceStatus.PRESENT, check_out=_at(day, 18)), rules) == 0.25
    assert absent_equivalent(_status_day(2, AttendanceStatus.HALF_DAY), rules) == 0.0
    assert absent_equivalent(_status_day(1, AttendanceStatus.ABSENT, is_off_day=True), rules) == 0.0


@pytest.mark.parametrize(
    "status",
    [
        AttendanceStatus.HOLIDAY,
        AttendanceStatus.PAID_LEAVE,
        AttendanceStatus.UNPAID_LEAVE,
        AttendanceStatus.SICK_LEAVE,
        AttendanceStatus.HALF_DAY,
        AttendanceStatus.LEAVE_WITHOUT_INFORM,
        AttendanceStatus.WORK_FROM_HOME,
    ],
)
def test_hand_set_statuses_are_never_absences(status):
    assert absent_equivalent(_status_day(2, status), ViolationRulesConfig()) == 0.0


def test_salary_amounts_rounding():
    assert salary_amounts(30000, 1.525, 31) == (967.74, 1475.81, 28524.19)
    assert salary_amounts(0, 3, 30) == (0.0, 0.0, 0.0)
