from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...core.enums import AttendanceStatus


@dataclass(frozen=True)
class DayFacts:
    """What is known about a day before its status is decided."""

    has_check_in: bool
    has_check_out: bool
    is_off_day: bool
    override_status: Optional[AttendanceStatus] = None

    @property
    def has_punch(self) -> bool:
        return self.has_check_in or self.has_check_out


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    evaluate_timing: bool = False


class AdjudicationStrategy(ABC):
    """Strategy Pattern: encapsulate how a day's status is decided."""

    @abstractmethod
    def decide(self, facts: DayFacts) -> StatusDecision:
        raise NotImplementedError
