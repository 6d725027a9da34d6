from __future__ import annotations

import pytest

from src.attendance_payroll.attendance_payroll.core.enums import (
    AttendanceStatus,
    extract_shift_code,
    is_manual_status,
    normalize_status,
    short_code,
)
from src.attendance_payroll.attendance_payroll.core.exceptions import ValidationError


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Present", AttendanceStatus.PRESENT),
        ("p", AttendanceStatus.PRESENT),
        ("off", AttendanceStatus.HOLIDAY),
        ("no punch", AttendanceStatus.ABSENT),
        ("paid leave", AttendanceStatus.PAID_LEAVE),
        ("UPL", AttendanceStatus.UNPAID_LEAVE),
        ("Unpaid Leave", AttendanceStatus.UNPAID_LEAVE),
        ("Sick Leave", AttendanceStatus.SICK_LEAVE),
        ("leave without info", AttendanceStatus.LEAVE_WITHOUT_INFORM),
        ("WFH", AttendanceStatus.WORK_FROM_HOME),
        ("  half  ", AttendanceStatus.HALF_DAY),
    ],
)
def test_normalize_status_aliases(raw, expected):
    assert normalize_status(raw) == expected


def test_normalize_status_empty_and_unknown():
    assert normalize_status(None) is None
    assert normalize_status("   ") is None
    with pytest.raises(ValidationError):
        normalize_status("vacation")


def test_status_groups():
    assert is_manual_status(AttendanceStatus.HALF_DAY)
    assert not is_manual_status(AttendanceStatus.PRESENT)
    assert not is_manual_status(AttendanceStatus.ABSENT)
    assert is_manual_status(AttendanceStatus.WORK_FROM_HOME)
    assert short_code(AttendanceStatus.LEAVE_WITHOUT_INFORM) == "LWI"
    assert short_code(None) == "-"


def test_extract_shift_code_from_display_label():
    assert extract_shift_code("– S2 (21:00–06:00)") == "S2"
    assert extract_shift_code("N1") == "N1"
    assert extract_shift_code("") == ""
