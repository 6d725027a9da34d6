from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import AdjudicationStrategy, DayFacts, StatusDecision


class ManualStatusStrategy(AdjudicationStrategy):
    """HR already set a status: keep it verbatim.

    Only a manual ``Present`` still gets late/early evaluation.
    """

    def decide(self, facts: DayFacts) -> StatusDecision:
        if facts.override_status is None:
            raise ValueError("ManualStatusStrategy needs an override status")
        status = facts.override_status
        return StatusDecision(status=status, evaluate_timing=status == AttendanceStatus.PRESENT)
