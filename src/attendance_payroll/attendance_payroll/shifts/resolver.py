from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping, Optional, Union

from ..common.datetime_utils import minute_of_day
from ..common.logging_config import get_logger
from ..core.constants import MINUTES_PER_DAY
from ..core.enums import extract_shift_code
from ..core.exceptions import ShiftNotFoundError, ShiftUnresolvedError
from .model import ShiftDefinition, ShiftWindow

logger = get_logger(__name__)

SATURDAY = 5


class ShiftWindowResolver:
    """Resolve a shift definition into an absolute window for a calendar date.

    ``saturday_overrides`` maps a shift code to the code whose timing it uses on
    Saturdays (e.g. ``{"N2": "N1"}``). Both sides come from configuration.
    """

    def __init__(
        self,
        shifts: Union[Mapping[str, ShiftDefinition], Iterable[ShiftDefinition]],
        *,
        saturday_overrides: Optional[Mapping[str, str]] = None,
    ):
        if isinstance(shifts, Mapping):
            self._shifts = {str(k).upper(): v for k, v in shifts.items()}
        else:
            self._shifts = {s.code.upper(): s for s in shifts}
        self._saturday_overrides = {k.upper(): v.upper() for k, v in (saturday_overrides or {}).items()}

    def get(self, code: str) -> ShiftDefinition:
        key = extract_shift_code(code).upper()
        shift = self._shifts.get(key)
        if not shift:
            raise ShiftNotFoundError(f"Shift not found: {code!r}", shift_code=key)
        return shift

    def _timing_for(self, shift: ShiftDefinition, day: date) -> ShiftDefinition:
        if day.weekday() != SATURDAY:
            return shift
        substitute_code = self._saturday_overrides.get(shift.code.upper())
        if not substitute_code:
            return shift
        substitute = self._shifts.get(substitute_code)
        if substitute is None or not substitute.has_valid_times:
            logger.warning(
                "saturday override target missing, keeping own timing",
                extra={"shift_code": shift.code, "override_code": substitute_code, "date": day.isoformat()},
            )
            return shift
        return substitute

    def resolve(self, shift: Union[ShiftDefinition, str], day: date) -> ShiftWindow:
        if isinstance(shift, str):
            shift = self.get(shift)

        timing = self._timing_for(shift, day)
        if not timing.has_valid_times:
            raise ShiftUnresolvedError(f"Shift {timing.code} has no valid start/end time", shift_code=shift.code)

        start = minute_of_day(timing.start_time)
        end = minute_of_day(timing.end_time)
        if timing.crosses_midnight and end < start:
            end += MINUTES_PER_DAY

        return ShiftWindow(
            shift_code=shift.code,
            timing_code=timing.code,
            start_minute=start,
            end_minute=end,
            crosses_midnight=bool(timing.crosses_midnight),
            grace_period_minutes=int(timing.grace_period_minutes),
        )
