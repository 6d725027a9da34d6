from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import AdjudicationStrategy, DayFacts, StatusDecision


class PunchInferenceStrategy(AdjudicationStrategy):
    """No manual status: infer it from punches and the weekend rule."""

    def decide(self, facts: DayFacts) -> StatusDecision:
        if facts.has_punch:
            return StatusDecision(status=AttendanceStatus.PRESENT, evaluate_timing=True)
        if facts.is_off_day:
            return StatusDecision(status=AttendanceStatus.HOLIDAY)
        return StatusDecision(status=AttendanceStatus.ABSENT)
