from __future__ import annotations

import re
from enum import Enum
from typing import Optional

from .exceptions import ValidationError


class AttendanceStatus(str, Enum):
    """Closed set of day statuses. Values are the labels HR sees."""

    PRESENT = "Present"
    ABSENT = "Absent"
    HOLIDAY = "Holiday"
    PAID_LEAVE = "Paid Leave"
    UNPAID_LEAVE = "Un Paid Leave"
    SICK_LEAVE = "Sick Leave"
    HALF_DAY = "Half Day"
    LEAVE_WITHOUT_INFORM = "Leave Without Inform"
    WORK_FROM_HOME = "Work From Home"


class ChargeKind(str, Enum):
    """How a single violation was charged by the escalation schedule."""

    FREE = "FREE"
    MILESTONE = "MILESTONE"
    PER_MINUTE = "PER_MINUTE"


class SaturdayPolicy(str, Enum):
    ALL_OFF = "all_off"
    ALTERNATE = "alternate"


class SaturdayGroup(str, Enum):
    """A: off on 2nd/4th Saturday. B: off on 1st/3rd Saturday."""

    A = "A"
    B = "B"


_STATUS_ALIASES: dict[str, AttendanceStatus] = {
    "present": AttendanceStatus.PRESENT,
    "p": AttendanceStatus.PRESENT,
    "holiday": AttendanceStatus.HOLIDAY,
    "h": AttendanceStatus.HOLIDAY,
    "off": AttendanceStatus.HOLIDAY,
    "absent": AttendanceStatus.ABSENT,
    "a": AttendanceStatus.ABSENT,
    "no punch": AttendanceStatus.ABSENT,
    "sick leave": AttendanceStatus.SICK_LEAVE,
    "sl": AttendanceStatus.SICK_LEAVE,
    "paid leave": AttendanceStatus.PAID_LEAVE,
    "pl": AttendanceStatus.PAID_LEAVE,
    "un paid leave": AttendanceStatus.UNPAID_LEAVE,
    "unpaid leave": AttendanceStatus.UNPAID_LEAVE,
    "upl": AttendanceStatus.UNPAID_LEAVE,
    "leave without inform": AttendanceStatus.LEAVE_WITHOUT_INFORM,
    "leave without info": AttendanceStatus.LEAVE_WITHOUT_INFORM,
    "lwi": AttendanceStatus.LEAVE_WITHOUT_INFORM,
    "work from home": AttendanceStatus.WORK_FROM_HOME,
    "wfh": AttendanceStatus.WORK_FROM_HOME,
    "half day": AttendanceStatus.HALF_DAY,
    "half": AttendanceStatus.HALF_DAY,
}

_SHORT_CODES = {
    AttendanceStatus.PRESENT: "P",
    AttendanceStatus.HOLIDAY: "H",
    AttendanceStatus.ABSENT: "A",
    AttendanceStatus.SICK_LEAVE: "SL",
    AttendanceStatus.PAID_LEAVE: "PL",
    AttendanceStatus.UNPAID_LEAVE: "UPL",
    AttendanceStatus.LEAVE_WITHOUT_INFORM: "LWI",
    AttendanceStatus.WORK_FROM_HOME: "WFH",
    AttendanceStatus.HALF_DAY: "Half",
}

# Statuses HR sets by hand. A day carrying one is never counted as absent.
MANUAL_STATUSES = frozenset(
    {
        AttendanceStatus.HOLIDAY,
        AttendanceStatus.PAID_LEAVE,
        AttendanceStatus.UNPAID_LEAVE,
        AttendanceStatus.SICK_LEAVE,
        AttendanceStatus.HALF_DAY,
        AttendanceStatus.LEAVE_WITHOUT_INFORM,
        AttendanceStatus.WORK_FROM_HOME,
    }
)


def normalize_status(raw: Optional[str]) -> Optional[AttendanceStatus]:
    """Map a stored or typed status label onto the enum.

    Returns None for an empty value, raises ValidationError for an unknown one.
    """
    if isinstance(raw, AttendanceStatus):
        return raw
    value = (raw or "").strip()
    if not value:
        return None
    status = _STATUS_ALIASES.get(value.lower())
    if status is None:
        raise ValidationError(f"Unknown attendance status: {value!r}")
    return status


def is_manual_status(status: Optional[AttendanceStatus]) -> bool:
    return status in MANUAL_STATUSES


def short_code(status: Optional[AttendanceStatus]) -> str:
    if status is None:
        return "-"
    return _SHORT_CODES[status]


_SHIFT_CODE_RE = re.compile(r"^[A-Z]\d+$")
_FORMATTED_SHIFT_RE = re.compile(r"(?:–\s*)?([A-Z]\d+)(?:\s*\([^)]+\))?")


def extract_shift_code(value: Optional[str]) -> str:
    """Pull the short code out of labels like "– S2 (21:00–06:00)"."""
    if not value:
        return ""
    value = value.strip()
    if _SHIFT_CODE_RE.match(value):
        return value
    m = _FORMATTED_SHIFT_RE.search(value)
    if m:
        return m.group(1)
    return value
