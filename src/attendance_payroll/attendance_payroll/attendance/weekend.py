from __future__ import annotations

from datetime import date
from typing import Mapping, Optional

from ..core.enums import SaturdayGroup, SaturdayPolicy

SATURDAY = 5
SUNDAY = 6

_OFF_SATURDAYS = {
    SaturdayGroup.A: (2, 4),
    SaturdayGroup.B: (1, 3),
}


def saturday_index_in_month(day: date) -> Optional[int]:
    """1..5 for the first..fifth Saturday of the month, None for other weekdays."""
    if day.weekday() != SATURDAY:
        return None
    return (day.day - 1) // 7 + 1


class WeekendPolicy:
    """Sundays are off. Saturdays follow the department policy.

    Under ``alternate`` group A is off on the 2nd and 4th Saturday, group B on
    the 1st and 3rd; the 5th Saturday is a working day for everyone.
    """

    def __init__(
        self,
        department_policies: Optional[Mapping[str, str]] = None,
        *,
        default_policy: SaturdayPolicy = SaturdayPolicy.ALTERNATE,
    ):
        self._policies = {
            (name or "").strip().lower(): SaturdayPolicy(value)
            for name, value in (department_policies or {}).items()
        }
        self._default = default_policy

    def policy_for(self, department: Optional[str]) -> SaturdayPolicy:
        return self._policies.get((department or "").strip().lower(), self._default)

    def is_off_day(
        self,
        day: date,
        *,
        department: Optional[str] = None,
        saturday_group: Optional[SaturdayGroup] = None,
    ) -> bool:
        weekday = day.weekday()
        if weekday == SUNDAY:
            return True
        if weekday != SATURDAY:
            return False

        if self.policy_for(department) == SaturdayPolicy.ALL_OFF:
            return True

        index = saturday_index_in_month(day)
        return index in _OFF_SATURDAYS[saturday_group or SaturdayGroup.A]
