from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ...attendance.model import DayAdjudication
from ...employees.model import Employee
from ...violations.model import ViolationRulesConfig
from ..model import MonthlyPayrollSummary


class DeductionCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll deductions)."""

    @abstractmethod
    def summarize(
        self,
        *,
        employee: Employee,
        year: int,
        month: int,
        days: Sequence[DayAdjudication],
        rules: ViolationRulesConfig,
    ) -> MonthlyPayrollSummary:
        raise NotImplementedError
