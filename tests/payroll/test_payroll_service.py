from __future__ import annotations

import logging
from datetime import date, time

import pytest

from src.attendance_payroll.attendance_payroll.attendance.model import DayOverride
from src.attendance_payroll.attendance_payroll.attendance.weekend import WeekendPolicy
from src.attendance_payroll.attendance_payroll.core.enums import AttendanceStatus
from src.attendance_payroll.attendance_payroll.core.exceptions import NotFoundError, ValidationError
from src.attendance_payroll.attendance_payroll.employees.model import Employee
from src.attendance_payroll.attendance_payroll.payroll.service import PayrollService
from src.attendance_payroll.attendance_payroll.violations.service import ViolationRulesService

WORKING_DAYS = [2, 3, 4, 5, 6, 9, 10, 11, 12, 13, 16]
LATE_ARRIVALS = {3: (9, 20), 4: (9, 30), 5: (9, 40)}


def _employee(code: str = "E1", shift_code: str = "D1") -> Employee:
    return Employee(code=code, name=f"Employee {code}", shift_code=shift_code, monthly_salary=31000, department="Ops")


@pytest.fixture
def march_punches(make_punch):
    def _for(code: str):
        punches = []
        for d in WORKING_DAYS:
            day = date(2026, 3, d)
            hh, mm = LATE_ARRIVALS.get(d, (9, 0))
            punches.append(make_punch(code, day, hh, mm))
            if d != 16:
                punches.append(make_punch(code, day, 18, 0))
        return punches

    return _for


@pytest.fixture
def build_service(clock, standard_shifts, fake_repos):
    def _build(employees, punches, *, overrides=(), broken_codes=(), max_workers=1, inactive=()):
        shifts = fake_repos.shifts(standard_shifts)
        for code in inactive:
            shifts.deactivate(code)
        return PayrollService(
            fake_repos.employees(employees),
            shifts,
            fake_repos.punches(punches, broken_codes=broken_codes),
            fake_repos.overrides(overrides),
            ViolationRulesService(fake_repos.rules()),
            clock=clock,
            weekend=WeekendPolicy({"Ops": "all_off"}),
            max_workers=max_workers,
        )

    return _build


def test_month_to_date_payroll(build_service, march_punches, fixed_now):
    service = build_service([_employee()], march_punches("E1"))

    summary = service.build_month("E1", 2026, 3, now=fixed_now)

    assert summary.violation_count == 3
    assert summary.violation_days == 1.0
    assert summary.absent_days == 1.0
    assert summary.salary_deduct_days == 2.0
    assert summary.net_salary == 29000.0
    assert len(summary.days) == 31
    assert sum(1 for d in summary.days if d.is_future) == 15
    assert [m for m in (d.late_minutes for d in summary.days) if m] == [5, 15, 25]
    assert summary.unresolved_dates == ()


def test_weekends_are_off_days(build_service, march_punches, fixed_now):
    summary = build_service([_employee()], march_punches("E1")).build_month("E1", 2026, 3, now=fixed_now)
    by_date = {d.date: d for d in summary.days}
    assert by_date[date(2026, 3, 7)].is_off_day
    assert by_date[date(2026, 3, 7)].status == AttendanceStatus.HOLIDAY
    assert not by_date[date(2026, 3, 9)].is_off_day


def test_hr_overrides_flow_into_the_summary(build_service, march_punches, fixed_now):
    overrides = [
        DayOverride(employee_code="E1", work_date=date(2026, 3, 5), excused=True, reason="traffic"),
        DayOverride(employee_code="E1", work_date=date(2026, 3, 16), check_out=time(18, 0)),
    ]
    service = build_service([_employee()], march_punches("E1"), overrides=overrides)

    summary = service.build_month("E1", 2026, 3, now=fixed_now)

    assert summary.violation_count == 2
    assert summary.violation_days == 0.0
    assert summary.absent_days == 0.0
    assert summary.net_salary == 31000.0


def test_unknown_employee(build_service, fixed_now):
    with pytest.raises(NotFoundError):
        build_service([], []).build_month("NOPE", 2026, 3, now=fixed_now)


def test_bad_month(build_service, fixed_now):
    with pytest.raises(ValidationError):
        build_service([_employee()], []).build_month("E1", 2026, 13, now=fixed_now)


@pytest.mark.parametrize("max_workers", [1, 4])
def test_batch_isolates_failures(build_service, march_punches, fixed_now, caplog, max_workers):
    employees = [_employee("E1"), _employee("E2", shift_code="ZZ"), _employee("E3")]
    punches = march_punches("E1") + march_punches("E2") + march_punches("E3")
    service = build_service(employees, punches, broken_codes={"E3"}, max_workers=max_workers)

    with caplog.at_level(logging.WARNING, logger="attendance_payroll"):
        result = service.build_month_for_all(2026, 3, now=fixed_now)

    assert not result.ok
    assert set(result.failures) == {"E3"}
    assert result.failures["E3"].startswith("RuntimeError:")

    e1 = result.get("E1")
    assert e1.net_salary == 29000.0

    # Unknown shift degrades to punch-only adjudication.
    e2 = result.get("E2")
    assert len(e2.unresolved_dates) == 31
    assert e2.violation_count == 0
    assert e2.absent_days == 1.0
    assert any(r.levelno == logging.ERROR and "payroll failed" in r.getMessage() for r in caplog.records)


def test_deactivated_shift_is_not_used(build_service, march_punches, fixed_now):
    service = build_service([_employee()], march_punches("E1"), inactive=("D1",))

    summary = service.build_month("E1", 2026, 3, now=fixed_now)

    assert len(summary.unresolved_dates) == 31
    assert summary.violation_count == 0
    assert all(not d.late for d in summary.days)


def test_batch_summary_serializes(build_service, march_punches, fixed_now):
    result = build_service([_employee()], march_punches("E1")).build_month_for_all(2026, 3, now=fixed_now)
    payload = result.get("E1").to_dict()
    assert payload["empCode"] == "E1"
    assert payload["salaryDeductDays"] == 2.0
    assert payload["days"][15]["code"] == "P"
