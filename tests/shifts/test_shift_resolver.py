from __future__ import annotations

import logging
from datetime import date, time

import pytest

from src.attendance_payroll.attendance_payroll.common.cache import ReadThroughCache
from src.attendance_payroll.attendance_payroll.core.exceptions import ShiftNotFoundError, ShiftUnresolvedError
from src.attendance_payroll.attendance_payroll.shifts.cached_shift_repository import CachedShiftRepository
from src.attendance_payroll.attendance_payroll.shifts.model import ShiftDefinition
from src.attendance_payroll.attendance_payroll.shifts.resolver import ShiftWindowResolver

MONDAY = date(2026, 3, 9)
SATURDAY = date(2026, 3, 14)


def test_overnight_shift_end_runs_past_midnight(standard_shifts):
    window = ShiftWindowResolver(standard_shifts).resolve("N2", MONDAY)
    assert (window.start_minute, window.end_minute) == (1260, 1800)
    assert window.crosses_midnight
    assert window.grace_period_minutes == 15


def test_day_shift_is_plain(standard_shifts):
    window = ShiftWindowResolver(standard_shifts).resolve("D1", MONDAY)
    assert (window.start_minute, window.end_minute, window.crosses_midnight) == (540, 1080, False)


def test_saturday_override_borrows_other_shift_timing(standard_shifts):
    resolver = ShiftWindowResolver(standard_shifts, saturday_overrides={"N2": "N1"})

    weekday = resolver.resolve("N2", MONDAY)
    saturday = resolver.resolve("N2", SATURDAY)

    assert weekday.timing_code == "N2"
    assert saturday.shift_code == "N2"
    assert saturday.timing_code == "N1"
    assert (saturday.start_minute, saturday.end_minute) == (1200, 1740)


def test_saturday_override_is_data_driven(standard_shifts):
    saturday = ShiftWindowResolver(standard_shifts).resolve("N2", SATURDAY)
    assert saturday.timing_code == "N2"


def test_missing_override_target_keeps_own_timing(standard_shifts, caplog):
    resolver = ShiftWindowResolver(standard_shifts, saturday_overrides={"N2": "X9"})
    with caplog.at_level(logging.WARNING):
        window = resolver.resolve("N2", SATURDAY)
    assert window.timing_code == "N2"
    assert "override target missing" in caplog.text


def test_resolution_is_deterministic(standard_shifts):
    resolver = ShiftWindowResolver(standard_shifts, saturday_overrides={"N2": "N1"})
    assert resolver.resolve("N2", SATURDAY) == resolver.resolve("N2", SATURDAY)


def test_shift_without_times_is_unresolvable():
    broken = ShiftDefinition(code="B1", name="Broken", start_time=None, end_time=time(17, 0))
    with pytest.raises(ShiftUnresolvedError) as exc:
        ShiftWindowResolver([broken]).resolve("B1", MONDAY)
    assert exc.value.shift_code == "B1"


def test_unknown_code_raises_shift_not_found(standard_shifts):
    resolver = ShiftWindowResolver(standard_shifts)
    with pytest.raises(ShiftNotFoundError):
        resolver.resolve("Z9", MONDAY)
    # formatted labels are accepted
    assert resolver.get("– N1 (20:00–05:00)").code == "N1"


def test_cached_repository_invalidates_on_write(standard_shifts, fake_repos):
    inner = fake_repos.shifts(standard_shifts)
    repo = CachedShiftRepository(inner, ReadThroughCache(ttl_seconds=300))

    repo.list_all()
    repo.get_by_code("D1")
    repo.list_all(active_only=True)
    assert inner.list_calls == 1

    repo.deactivate("D1")
    assert repo.get_by_code("D1").active is False
    assert [s.code for s in repo.list_all(active_only=True)] == ["N1", "N2"]
    assert inner.list_calls == 2
