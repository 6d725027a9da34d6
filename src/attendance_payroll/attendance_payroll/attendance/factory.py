from __future__ import annotations

from dataclasses import dataclass, field

from .strategies.base import AdjudicationStrategy, DayFacts
from .strategies.manual_status_strategy import ManualStatusStrategy
from .strategies.punch_inference_strategy import PunchInferenceStrategy


@dataclass
class AdjudicationStrategyFactory:
    """Factory Pattern: a status on record always beats punch inference."""

    manual: AdjudicationStrategy = field(default_factory=ManualStatusStrategy)
    inferred: AdjudicationStrategy = field(default_factory=PunchInferenceStrategy)

    def for_day(self, facts: DayFacts) -> AdjudicationStrategy:
        if facts.override_status is not None:
            return self.manual
        return self.inferred
