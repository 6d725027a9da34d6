from __future__ import annotations

from datetime import date, time
from typing import Optional, Union

from ..common.datetime_utils import parse_hhmm, parse_iso_date
from ..common.logging_config import get_logger
from ..common.validators import require_non_empty
from ..core.enums import AttendanceStatus, normalize_status
from ..core.exceptions import NotFoundError, PolicyViolationError
from ..employees.repository import EmployeeRepository
from .model import DayOverride
from .repository import DayOverrideRepository

logger = get_logger(__name__)


def _optional_time(value: Union[str, time, None]) -> Optional[time]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_hhmm(value)


def _optional_bool(value) -> Optional[bool]:
    return None if value is None else bool(value)


class DayCorrectionService:
    """HR corrections and annotations for one employee-day.

    A correction replaces whatever HR recorded before for that day. Clock
    times are stored as entered; the adjudicator anchors them to the business
    day (overnight check-outs before 08:00 land on the next morning).
    Paid leave belongs to the leave ledger: it cannot be set here, and a day
    holding a granted leave keeps that status until the leave is revoked.
    """

    def __init__(self, employees: EmployeeRepository, overrides: DayOverrideRepository):
        self._employees = employees
        self._overrides = overrides

    def correct(
        self,
        employee_code: str,
        day: Union[str, date],
        *,
        status: Union[str, AttendanceStatus, None] = None,
        reason: Optional[str] = None,
        check_in: Union[str, time, None] = None,
        check_out: Union[str, time, None] = None,
        excused: bool = False,
        late_excused: Optional[bool] = None,
        early_excused: Optional[bool] = None,
    ) -> DayOverride:
        employee_code = require_non_empty(employee_code, "employee_code")
        day = parse_iso_date(day)
        if self._employees.get_by_code(employee_code) is None:
            raise NotFoundError(f"Employee not found: {employee_code}")

        new_status = normalize_status(status)
        existing = self._overrides.list_for_employee(employee_code, day, day)
        on_leave = bool(existing) and existing[0].status == AttendanceStatus.PAID_LEAVE

        if new_status == AttendanceStatus.PAID_LEAVE and not on_leave:
            raise PolicyViolationError("Paid leave is granted through the leave ledger")
        if on_leave:
            if new_status not in (None, AttendanceStatus.PAID_LEAVE):
                raise PolicyViolationError(
                    f"{employee_code} has paid leave on {day.isoformat()}; revoke it before changing the status"
                )
            new_status = AttendanceStatus.PAID_LEAVE

        override = DayOverride(
            employee_code=employee_code,
            work_date=day,
            status=new_status,
            reason=(reason or "").strip() or None,
            excused=bool(excused),
            late_excused=_optional_bool(late_excused),
            early_excused=_optional_bool(early_excused),
            check_in=_optional_time(check_in),
            check_out=_optional_time(check_out),
        )
        self._overrides.upsert(override)
        logger.info(
            "attendance day corrected",
            extra={
                "employee_code": employee_code,
                "date": day.isoformat(),
                "status": new_status.value if new_status else None,
            },
        )
        return override
