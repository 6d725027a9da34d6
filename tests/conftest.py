from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time, timezone
from typing import Optional

import pytest

from src.attendance_payroll.attendance_payroll.attendance.model import DayOverride, PunchEvent
from src.attendance_payroll.attendance_payroll.common.datetime_utils import CompanyClock
from src.attendance_payroll.attendance_payroll.common.logging_config import reset_logging
from src.attendance_payroll.attendance_payroll.core.exceptions import DuplicateLeaveError
from src.attendance_payroll.attendance_payroll.employees.model import Employee
from src.attendance_payroll.attendance_payroll.leave.model import LeaveQuarterBalance, LeaveRecord, QuarterKey
from src.attendance_payroll.attendance_payroll.shifts.model import ShiftDefinition
from src.attendance_payroll.attendance_payroll.violations.model import ViolationRulesConfig


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def fixed_now() -> datetime:
    # Monday 2026-03-16 11:00 company time (+05:00).
    return datetime(2026, 3, 16, 6, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock() -> CompanyClock:
    return CompanyClock.from_settings("+05:00", "08:55")


@pytest.fixture
def standard_shifts() -> list[ShiftDefinition]:
    return [
        ShiftDefinition(code="D1", name="Day", start_time=time(9, 0), end_time=time(18, 0)),
        ShiftDefinition(code="N1", name="Night", start_time=time(20, 0), end_time=time(5, 0), crosses_midnight=True),
        ShiftDefinition(
            code="N2", name="Night (late)", start_time=time(21, 0), end_time=time(6, 0), crosses_midnight=True
        ),
    ]


class InMemoryShifts:
    def __init__(self, shifts):
        self._shifts = {s.code: s for s in shifts}
        self.list_calls = 0

    def list_all(self, *, active_only: bool = False):
        self.list_calls += 1
        return [s for s in self._shifts.values() if s.active or not active_only]

    def get_by_code(self, code: str) -> Optional[ShiftDefinition]:
        return self._shifts.get(code)

    def save(self, shift: ShiftDefinition) -> ShiftDefinition:
        self._shifts[shift.code] = shift
        return shift

    def deactivate(self, code: str) -> bool:
        shift = self._shifts.get(code)
        if not shift:
            return False
        self._shifts[code] = replace(shift, active=False)
        return True


class InMemoryEmployees:
    def __init__(self, employees):
        self._by_code = {e.code: e for e in employees}

    def get_by_code(self, code: str) -> Optional[Employee]:
        return self._by_code.get(code)

    def list_active(self):
        return [e for e in self._by_code.values() if e.active]


class InMemoryPunches:
    def __init__(self, punches=(), *, broken_codes=()):
        self._punches = list(punches)
        self._broken = set(broken_codes)

    def list_for_employee(self, employee_code: str, start: datetime, end: datetime):
        if employee_code in self._broken:
            raise RuntimeError("punch device export unreadable")
        return [p for p in self._punches if p.employee_code == employee_code and start <= p.instant < end]


class InMemoryOverrides:
    def __init__(self, overrides=()):
        self._by_key = {(o.employee_code, o.work_date): o for o in overrides}

    def list_for_employee(self, employee_code: str, start_date: date, end_date: date):
        return sorted(
            (o for (code, d), o in self._by_key.items() if code == employee_code and start_date <= d <= end_date),
            key=lambda o: o.work_date,
        )

    def upsert(self, override: DayOverride) -> None:
        self._by_key[(override.employee_code, override.work_date)] = override

    def get(self, employee_code: str, work_date: date) -> Optional[DayOverride]:
        return self._by_key.get((employee_code, work_date))


class InMemoryRules:
    def __init__(self, active: Optional[ViolationRulesConfig] = None):
        self._history: list[ViolationRulesConfig] = []
        if active is not None:
            self._history.append(replace(active, rules_id=1, active=True))

    def get_active(self) -> Optional[ViolationRulesConfig]:
        actives = [r for r in self._history if r.active]
        return actives[-1] if actives else None

    def activate(self, config: ViolationRulesConfig) -> ViolationRulesConfig:
        self._history = [replace(r, active=False) for r in self._history]
        stored = replace(config, rules_id=len(self._history) + 1, active=True)
        self._history.append(stored)
        return stored

    def list_history(self, *, limit: int = 20):
        return list(reversed(self._history))[:limit]


class InMemoryLeaves:
    def __init__(self):
        self._balances: dict[QuarterKey, LeaveQuarterBalance] = {}
        self._records: dict[int, LeaveRecord] = {}
        self._next_id = 1

    def get_balance(self, key: QuarterKey) -> Optional[LeaveQuarterBalance]:
        return self._balances.get(key)

    def create_balance(self, key: QuarterKey, *, allocated: int) -> LeaveQuarterBalance:
        if key not in self._balances:
            self._balances[key] = LeaveQuarterBalance(key.employee_code, key.year, key.quarter, allocated=allocated)
        return self._balances[key]

    def compare_and_set_taken(self, key: QuarterKey, *, expected_version: int, new_taken: int) -> bool:
        current = self._balances.get(key)
        if current is None or current.version != expected_version:
            return False
        self._balances[key] = replace(current, taken=new_taken, version=current.version + 1)
        return True

    def seed_record(self, record: LeaveRecord) -> LeaveRecord:
        """Store a record without the uniqueness check, like legacy imported data."""
        stored = replace(record, record_id=self._next_id)
        self._records[self._next_id] = stored
        self._next_id += 1
        return stored

    def add_record(self, record: LeaveRecord) -> LeaveRecord:
        if self.get_record(record.employee_code, record.leave_date):
            raise DuplicateLeaveError("duplicate")
        return self.seed_record(replace(record, created_at=datetime(2026, 1, 1) if record.created_at is None else record.created_at))

    def get_record(self, employee_code: str, leave_date: date) -> Optional[LeaveRecord]:
        matches = [r for r in self._records.values() if r.employee_code == employee_code and r.leave_date == leave_date]
        return matches[0] if matches else None

    def delete_record(self, record_id: int) -> bool:
        return self._records.pop(record_id, None) is not None

    def list_records(self, employee_code: str, start_date: date, end_date: date):
        return sorted(
            (r for r in self._records.values() if r.employee_code == employee_code and start_date <= r.leave_date <= end_date),
            key=lambda r: (r.leave_date, r.record_id),
        )


@pytest.fixture
def make_punch(clock):
    def _make(employee_code: str, day: date, hh: int, mm: int, ss: int = 0, *, valid: bool = True) -> PunchEvent:
        instant = clock.to_instant(day, hh * 60 + mm).replace(second=ss)
        return PunchEvent(employee_code=employee_code, instant=instant, outcome_valid=valid)

    return _make


@pytest.fixture
def fake_repos():
    class _Fakes:
        shifts = InMemoryShifts
        employees = InMemoryEmployees
        punches = InMemoryPunches
        overrides = InMemoryOverrides
        rules = InMemoryRules
        leaves = InMemoryLeaves

    return _Fakes
