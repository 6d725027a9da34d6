from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional

from ..common.datetime_utils import CompanyClock
from ..core.constants import MINUTES_PER_DAY, NIGHT_SHIFT_CHECKOUT_CUTOFF
from ..shifts.model import ShiftWindow
from .model import PunchEvent


def business_window(anchor: date, window: Optional[ShiftWindow], clock: CompanyClock) -> tuple[datetime, datetime]:
    """Half-open [start, end) span of instants whose punches belong to ``anchor``.

    Day shifts use the calendar day. Midnight-crossing shifts run from 08:00 on
    the anchor date to 08:00 the morning after, so the overnight check-out is
    attributed to the day the shift began.
    """
    if window is not None and window.crosses_midnight:
        start = NIGHT_SHIFT_CHECKOUT_CUTOFF
    else:
        start = 0
    return clock.to_instant(anchor, start), clock.to_instant(anchor, start + MINUTES_PER_DAY)


def first_and_last_punch(
    punches: Iterable[PunchEvent], start: datetime, end: datetime
) -> tuple[Optional[datetime], Optional[datetime]]:
    """Earliest valid scan is the check-in; the latest is the check-out only if there are two or more."""
    instants = sorted(p.instant for p in punches if p.outcome_valid and start <= p.instant < end)
    if not instants:
        return None, None
    if len(instants) == 1:
        return instants[0], None
    return instants[0], instants[-1]
