from __future__ import annotations

from datetime import date, datetime
from typing import Protocol, Sequence

from .model import DayOverride, PunchEvent


class PunchRepository(Protocol):
    def list_for_employee(self, employee_code: str, start: datetime, end: datetime) -> Sequence[PunchEvent]:
        """Punches with ``start <= instant < end``; instants are timezone-aware."""

        raise NotImplementedError


class DayOverrideRepository(Protocol):
    def list_for_employee(self, employee_code: str, start_date: date, end_date: date) -> Sequence[DayOverride]:
        """Overrides with ``start_date <= work_date <= end_date``."""

        raise NotImplementedError

    def upsert(self, override: DayOverride) -> None:
        raise NotImplementedError
