from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..core.constants import DEFAULT_GRACE_MINUTES


@dataclass(frozen=True)
class ShiftDefinition:
    """Domain entity: a named work shift. Read-only to the engine."""

    code: str
    name: str
    start_time: Optional[time]
    end_time: Optional[time]
    crosses_midnight: bool = False
    grace_period_minutes: int = DEFAULT_GRACE_MINUTES
    active: bool = True
    description: Optional[str] = None
    shift_id: Optional[int] = None

    @property
    def has_valid_times(self) -> bool:
        return self.start_time is not None and self.end_time is not None

    def label(self) -> str:
        if not self.has_valid_times:
            return self.code
        return f"{self.code} ({self.start_time:%H:%M}–{self.end_time:%H:%M})"


@dataclass(frozen=True)
class ShiftWindow:
    """A shift resolved for one date, in minutes since company-local midnight.

    ``end_minute`` exceeds 1440 when the shift ends the next morning.
    ``timing_code`` differs from ``shift_code`` when a day-of-week override
    borrowed another shift's timing.
    """

    shift_code: str
    timing_code: str
    start_minute: int
    end_minute: int
    crosses_midnight: bool
    grace_period_minutes: int
