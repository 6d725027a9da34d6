from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import LeaveQuarterBalance, LeaveRecord, QuarterKey


class LeaveRepository(Protocol):
    def get_balance(self, key: QuarterKey) -> Optional[LeaveQuarterBalance]:
        raise NotImplementedError

    def create_balance(self, key: QuarterKey, *, allocated: int) -> LeaveQuarterBalance:
        """Insert the row if missing and return what is stored (existing rows win)."""

        raise NotImplementedError

    def compare_and_set_taken(self, key: QuarterKey, *, expected_version: int, new_taken: int) -> bool:
        """Set ``taken`` and bump ``version`` only if ``version`` is still ``expected_version``."""

        raise NotImplementedError

    def add_record(self, record: LeaveRecord) -> LeaveRecord:
        """Raise DuplicateLeaveError when (employee, date) already has a record."""

        raise NotImplementedError

    def get_record(self, employee_code: str, leave_date: date) -> Optional[LeaveRecord]:
        raise NotImplementedError

    def delete_record(self, record_id: int) -> bool:
        raise NotImplementedError

    def list_records(self, employee_code: str, start_date: date, end_date: date) -> Sequence[LeaveRecord]:
        raise NotImplementedError
