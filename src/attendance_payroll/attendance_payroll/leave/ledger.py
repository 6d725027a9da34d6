from __future__ import annotations

from collections import defaultdict
from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, Optional, Sequence, Union

from ..attendance.model import DayOverride
from ..attendance.repository import DayOverrideRepository
from ..common.datetime_utils import parse_iso_date
from ..common.logging_config import get_logger
from ..common.validators import require_min_value, require_non_empty
from ..core.constants import DEFAULT_LEAVES_PER_QUARTER, LEAVE_CAS_RETRIES
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    ConcurrentUpdateError,
    DuplicateLeaveError,
    InconsistentLedgerError,
    NotFoundError,
    PolicyViolationError,
)
from ..employees.repository import EmployeeRepository
from .locks import KeyedLocks
from .model import (
    LeaveQuarterBalance,
    LeaveRecord,
    QuarterBalanceView,
    QuarterKey,
    ReconciliationReport,
    carry_source,
    quarter_of,
)
from .repository import LeaveRepository

logger = get_logger(__name__)
reconciliation_logger = get_logger("attendance_payroll.leave.reconciliation")

_EPOCH = datetime.min


def _record_order(record: LeaveRecord):
    created = record.created_at.replace(tzinfo=None) if record.created_at else _EPOCH
    return created, record.record_id or 0


class LeaveLedgerService:
    """Quarterly paid-leave entitlement.

    Effective allocation is always recomputed from the stored base plus the
    source quarter's unused balance; it is never written back.
    Grant and revoke are serialized per (employee, year, quarter): an
    in-process lock plus an optimistic version check on the stored row.
    """

    def __init__(
        self,
        leaves: LeaveRepository,
        *,
        overrides: Optional[DayOverrideRepository] = None,
        employees: Optional[EmployeeRepository] = None,
        per_quarter: int = DEFAULT_LEAVES_PER_QUARTER,
        locks: Optional[KeyedLocks] = None,
        max_retries: int = LEAVE_CAS_RETRIES,
    ):
        self._leaves = leaves
        self._overrides = overrides
        self._employees = employees
        self._per_quarter = int(require_min_value(per_quarter, "per_quarter", 0))
        self._locks = locks or KeyedLocks()
        self._max_retries = int(max_retries)

    # ----- balances -----

    def _require_employee(self, employee_code: str) -> str:
        employee_code = require_non_empty(employee_code, "employee_code")
        if self._employees is not None and self._employees.get_by_code(employee_code) is None:
            raise NotFoundError(f"Employee not found: {employee_code}")
        return employee_code

    def _ensure_balance(self, key: QuarterKey) -> LeaveQuarterBalance:
        balance = self._leaves.get_balance(key)
        if balance is None:
            balance = self._leaves.create_balance(key, allocated=self._per_quarter)
        return balance

    def _carried_in(self, key: QuarterKey) -> int:
        source = carry_source(key.quarter)
        if source is None:
            return 0
        return self._ensure_balance(replace(key, quarter=source)).unused

    def effective_allocation(self, employee_code: str, year: int, quarter: int) -> int:
        key = QuarterKey(require_non_empty(employee_code, "employee_code"), int(year), int(quarter))
        return self._ensure_balance(key).allocated + self._carried_in(key)

    def quarter_balance(self, employee_code: str, year: int, quarter: int) -> QuarterBalanceView:
        key = QuarterKey(require_non_empty(employee_code, "employee_code"), int(year), int(quarter))
        balance = self._ensure_balance(key)
        return QuarterBalanceView(
            employee_code=key.employee_code,
            year=key.year,
            quarter=key.quarter,
            base=balance.allocated,
            carried_in=self._carried_in(key),
            taken=balance.taken,
        )

    def year_balances(self, employee_code: str, year: int) -> list[QuarterBalanceView]:
        employee_code = self._require_employee(employee_code)
        return [self.quarter_balance(employee_code, year, q) for q in (1, 2, 3, 4)]

    # ----- grant / revoke -----

    def grant(
        self,
        employee_code: str,
        day: Union[str, date],
        *,
        reason: Optional[str] = None,
        leave_type: str = "paid",
    ) -> QuarterBalanceView:
        employee_code = self._require_employee(employee_code)
        day = parse_iso_date(day)
        key = QuarterKey.for_date(employee_code, day)

        with self._locks.hold(key):
            if self._leaves.get_record(employee_code, day) is not None:
                raise DuplicateLeaveError(
                    f"Leave already recorded for {employee_code} on {day.isoformat()}",
                    year=key.year,
                    quarter=key.quarter,
                )
            self._check_cap(key, self._ensure_balance(key))

            # The unique (employee, date) record is the idempotency boundary.
            record = self._leaves.add_record(
                LeaveRecord(employee_code=employee_code, leave_date=day, leave_type=leave_type, reason=reason)
            )
            try:
                self._update_taken(key, lambda bal: bal.taken + 1, check_cap=True)
            except Exception:
                if record.record_id is not None:
                    self._leaves.delete_record(record.record_id)
                raise

        self._mark_day(employee_code, day, AttendanceStatus.PAID_LEAVE, reason=reason)
        logger.info(
            "leave granted",
            extra={"employee_code": employee_code, "date": day.isoformat(), "quarter": key.label},
        )
        return self.quarter_balance(employee_code, key.year, key.quarter)

    def revoke(self, employee_code: str, day: Union[str, date]) -> QuarterBalanceView:
        employee_code = require_non_empty(employee_code, "employee_code")
        day = parse_iso_date(day)
        key = QuarterKey.for_date(employee_code, day)

        with self._locks.hold(key):
            records = [r for r in self._leaves.list_records(employee_code, day, day) if r.record_id is not None]
            if not records:
                raise NotFoundError(f"No leave recorded for {employee_code} on {day.isoformat()}")
            # Balance first: a lost update must leave the audit record in place.
            self._update_taken(key, lambda bal: max(0, bal.taken - 1))
            for r in records:
                self._leaves.delete_record(r.record_id)

        self._mark_day(employee_code, day, None)
        logger.info(
            "leave revoked",
            extra={"employee_code": employee_code, "date": day.isoformat(), "quarter": key.label},
        )
        return self.quarter_balance(employee_code, key.year, key.quarter)

    def _check_cap(self, key: QuarterKey, balance: LeaveQuarterBalance) -> None:
        cap = balance.allocated + self._carried_in(key)
        if balance.taken >= cap:
            raise PolicyViolationError(
                f"Paid leave limit reached for {key.label}: {balance.taken} of {cap} used",
                year=key.year,
                quarter=key.quarter,
                cap=cap,
            )

    def _update_taken(self, key: QuarterKey, compute, *, check_cap: bool = False) -> LeaveQuarterBalance:
        for _ in range(self._max_retries):
            balance = self._ensure_balance(key)
            if check_cap:
                self._check_cap(key, balance)
            new_taken = compute(balance)
            if self._leaves.compare_and_set_taken(key, expected_version=balance.version, new_taken=new_taken):
                return replace(balance, taken=new_taken, version=balance.version + 1)
            logger.debug("leave balance version moved, retrying", extra={"quarter": key.label})
        raise ConcurrentUpdateError(f"Could not update leave balance for {key.employee_code} {key.label}")

    def _mark_day(
        self,
        employee_code: str,
        day: date,
        status: Optional[AttendanceStatus],
        *,
        reason: Optional[str] = None,
    ) -> None:
        if self._overrides is None:
            return
        existing = self._overrides.list_for_employee(employee_code, day, day)
        current = existing[0] if existing else DayOverride(employee_code=employee_code, work_date=day)
        if status is None and current.status != AttendanceStatus.PAID_LEAVE:
            return
        self._overrides.upsert(replace(current, status=status, reason=reason if status else current.reason))

    # ----- consistency -----

    def approved_paid_leave_dates(self, employee_code: str, year: int) -> set[date]:
        if self._overrides is None:
            raise NotFoundError("No attendance overrides source configured")
        rows = self._overrides.list_for_employee(employee_code, date(year, 1, 1), date(year, 12, 31))
        return {o.work_date for o in rows if o.status == AttendanceStatus.PAID_LEAVE}

    def _split(
        self, records: Sequence[LeaveRecord], approved: set[date]
    ) -> tuple[list[LeaveRecord], list[LeaveRecord], list[LeaveRecord]]:
        by_date: dict[date, list[LeaveRecord]] = defaultdict(list)
        for r in records:
            by_date[r.leave_date].append(r)

        survivors: list[LeaveRecord] = []
        duplicates: list[LeaveRecord] = []
        for day in sorted(by_date):
            ordered = sorted(by_date[day], key=_record_order)
            survivors.append(ordered[0])
            duplicates.extend(ordered[1:])

        orphans = [r for r in survivors if r.leave_date not in approved]
        survivors = [r for r in survivors if r.leave_date in approved]
        return survivors, duplicates, orphans

    def check_consistency(
        self,
        employee_code: str,
        year: int,
        approved_dates: Optional[Iterable[date]] = None,
    ) -> None:
        approved = set(approved_dates) if approved_dates is not None else self.approved_paid_leave_dates(employee_code, year)
        records = self._leaves.list_records(employee_code, date(year, 1, 1), date(year, 12, 31))
        _, duplicates, orphans = self._split(records, approved)
        if duplicates or orphans:
            raise InconsistentLedgerError(
                f"Leave ledger for {employee_code} {year} has {len(duplicates)} duplicate(s) "
                f"and {len(orphans)} orphan(s)",
                duplicates=[(r.employee_code, r.leave_date) for r in duplicates],
                orphans=[(r.employee_code, r.leave_date) for r in orphans],
            )

    def reconcile(
        self,
        employee_code: str,
        year: int,
        approved_dates: Optional[Iterable[date]] = None,
    ) -> ReconciliationReport:
        """Data-hygiene pass: drop duplicate and orphan records, then recount ``taken``."""
        employee_code = self._require_employee(employee_code)
        approved = set(approved_dates) if approved_dates is not None else self.approved_paid_leave_dates(employee_code, year)
        keys = [QuarterKey(employee_code, int(year), q) for q in (1, 2, 3, 4)]

        with self._locks.hold_many(keys):
            records = self._leaves.list_records(employee_code, date(year, 1, 1), date(year, 12, 31))
            survivors, duplicates, orphans = self._split(records, approved)

            for kind, doomed in (("duplicate", duplicates), ("orphan", orphans)):
                for r in doomed:
                    if r.record_id is not None:
                        self._leaves.delete_record(r.record_id)
                    reconciliation_logger.warning(
                        "deleted %s leave record",
                        kind,
                        extra={"employee_code": employee_code, "date": r.leave_date.isoformat(), "record_id": r.record_id},
                    )

            counts = {q: 0 for q in (1, 2, 3, 4)}
            for r in survivors:
                counts[quarter_of(r.leave_date)[1]] += 1
            for key in keys:
                self._update_taken(key, lambda _bal, n=counts[key.quarter]: n)

        if duplicates or orphans:
            reconciliation_logger.info(
                "leave ledger reconciled",
                extra={
                    "employee_code": employee_code,
                    "year": year,
                    "duplicates": len(duplicates),
                    "orphans": len(orphans),
                },
            )
        return ReconciliationReport(
            employee_code=employee_code,
            year=int(year),
            duplicates_removed=tuple(duplicates),
            orphans_removed=tuple(orphans),
            taken_by_quarter=counts,
        )
