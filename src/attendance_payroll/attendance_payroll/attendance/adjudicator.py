from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional

from ..common.datetime_utils import CompanyClock
from ..common.logging_config import get_logger
from ..core.constants import (
    EARLY_MORNING_CHECKIN_CUTOFF,
    NIGHT_SHIFT_CHECKOUT_CUTOFF,
    SAME_PUNCH_TOLERANCE_SECONDS,
)
from ..shifts.model import ShiftWindow
from .factory import AdjudicationStrategyFactory
from .model import DayAdjudication, DayOverride, PunchEvent
from .punches import business_window, first_and_last_punch
from .strategies.base import DayFacts

logger = get_logger(__name__)


def _beyond_grace(total: int, grace: int) -> tuple[bool, int]:
    if total > grace:
        return True, total - grace
    return False, 0


class DayAdjudicator:
    """Derive one DayAdjudication from a day's punches, shift window and override.

    Pure: the same inputs (including ``now``) always give the same record.
    A ``window`` of None means the shift could not be resolved; status is still
    inferred from punches but late/early is not evaluated.
    """

    def __init__(self, clock: CompanyClock, *, strategy_factory: Optional[AdjudicationStrategyFactory] = None):
        self._clock = clock
        self._factory = strategy_factory or AdjudicationStrategyFactory()

    @property
    def clock(self) -> CompanyClock:
        return self._clock

    def adjudicate(
        self,
        *,
        day: date,
        window: Optional[ShiftWindow],
        punches: Iterable[PunchEvent] = (),
        override: Optional[DayOverride] = None,
        is_off_day: bool = False,
        now: Optional[datetime] = None,
    ) -> DayAdjudication:
        shift_code = window.shift_code if window else ""
        if self._clock.is_future(day, now):
            return DayAdjudication(date=day, shift_code=shift_code, status=None, is_future=True, is_off_day=is_off_day)

        start, end = business_window(day, window, self._clock)
        check_in, check_out = first_and_last_punch(punches, start, end)
        check_in, check_out = self._apply_corrections(day, window, override, check_in, check_out)

        if check_in and check_out and abs((check_out - check_in).total_seconds()) < SAME_PUNCH_TOLERANCE_SECONDS:
            logger.debug("same-instant punches, dropping check-out", extra={"date": day.isoformat()})
            check_out = None

        facts = DayFacts(
            has_check_in=check_in is not None,
            has_check_out=check_out is not None,
            is_off_day=is_off_day,
            override_status=override.status if override else None,
        )
        decision = self._factory.for_day(facts).decide(facts)

        late = early = False
        late_minutes = early_minutes = 0
        if decision.evaluate_timing and window is not None and check_in and check_out:
            in_minute = self._clock.minutes_since_anchor(check_in, day)
            out_minute = self._clock.minutes_since_anchor(check_out, day)
            grace = window.grace_period_minutes
            late, late_minutes = _beyond_grace(max(0, in_minute - window.start_minute), grace)
            early, early_minutes = _beyond_grace(max(0, window.end_minute - out_minute), grace)

        late_excused, early_excused = self._excuses(override, late=late, early=early)

        return DayAdjudication(
            date=day,
            shift_code=shift_code,
            status=decision.status,
            check_in=check_in,
            check_out=check_out,
            late=late,
            early_leave=early,
            late_minutes=late_minutes,
            early_minutes=early_minutes,
            late_excused=late_excused,
            early_excused=early_excused,
            is_off_day=is_off_day,
            reason=override.reason if override else None,
        )

    def _apply_corrections(
        self,
        day: date,
        window: Optional[ShiftWindow],
        override: Optional[DayOverride],
        check_in: Optional[datetime],
        check_out: Optional[datetime],
    ) -> tuple[Optional[datetime], Optional[datetime]]:
        if override is None:
            return check_in, check_out

        overnight = window is not None and window.crosses_midnight
        if override.check_in is not None:
            check_in = self._clock.anchor_clock_time(
                day, override.check_in, rollover_before=EARLY_MORNING_CHECKIN_CUTOFF if overnight else None
            )
        if override.check_out is not None:
            check_out = self._clock.anchor_clock_time(
                day, override.check_out, rollover_before=NIGHT_SHIFT_CHECKOUT_CUTOFF if overnight else None
            )
        return check_in, check_out

    @staticmethod
    def _excuses(override: Optional[DayOverride], *, late: bool, early: bool) -> tuple[bool, bool]:
        if override is None:
            return False, False
        # Explicit per-kind flags win; the legacy flag only excuses what actually happened.
        late_excused = override.late_excused if override.late_excused is not None else (override.excused and late)
        early_excused = override.early_excused if override.early_excused is not None else (override.excused and early)
        return bool(late_excused), bool(early_excused)
