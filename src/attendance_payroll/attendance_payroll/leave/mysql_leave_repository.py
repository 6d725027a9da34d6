from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from mysql.connector import errorcode, errors

from ..core.exceptions import DuplicateLeaveError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveQuarterBalance, LeaveRecord, QuarterKey, quarter_of
from .repository import LeaveRepository

_BALANCE_COLUMNS = "employee_code, year, quarter, allocated, taken, version"
_RECORD_COLUMNS = "record_id, employee_code, leave_date, leave_type, reason, created_at"


def _row_to_balance(r: dict) -> LeaveQuarterBalance:
    return LeaveQuarterBalance(
        employee_code=r["employee_code"],
        year=int(r["year"]),
        quarter=int(r["quarter"]),
        allocated=int(r["allocated"]),
        taken=int(r["taken"]),
        version=int(r["version"]),
    )


def _row_to_record(r: dict) -> LeaveRecord:
    return LeaveRecord(
        record_id=int(r["record_id"]),
        employee_code=r["employee_code"],
        leave_date=r["leave_date"],
        leave_type=r.get("leave_type") or "paid",
        reason=r.get("reason"),
        created_at=r.get("created_at"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_balance(self, key: QuarterKey) -> Optional[LeaveQuarterBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_BALANCE_COLUMNS} FROM leave_quarter_balances WHERE employee_code=%s AND year=%s AND quarter=%s",
                (key.employee_code, key.year, key.quarter),
            )
            r = fetchone(cur)
            return _row_to_balance(r) if r else None

    def create_balance(self, key: QuarterKey, *, allocated: int) -> LeaveQuarterBalance:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO leave_quarter_balances(employee_code, year, quarter, allocated, taken, version)
                VALUES(%s,%s,%s,%s,0,0)
                """,
                (key.employee_code, key.year, key.quarter, int(allocated)),
            )
            cur.execute(
                f"SELECT {_BALANCE_COLUMNS} FROM leave_quarter_balances WHERE employee_code=%s AND year=%s AND quarter=%s",
                (key.employee_code, key.year, key.quarter),
            )
            return _row_to_balance(fetchone(cur))

    def compare_and_set_taken(self, key: QuarterKey, *, expected_version: int, new_taken: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_quarter_balances
                SET taken=%s, version=version+1
                WHERE employee_code=%s AND year=%s AND quarter=%s AND version=%s
                """,
                (int(new_taken), key.employee_code, key.year, key.quarter, int(expected_version)),
            )
            return cur.rowcount == 1

    def add_record(self, record: LeaveRecord) -> LeaveRecord:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO leave_records(employee_code, leave_date, leave_type, reason)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (record.employee_code, record.leave_date, record.leave_type, record.reason),
                )
                cur.execute(f"SELECT {_RECORD_COLUMNS} FROM leave_records WHERE record_id=%s", (int(cur.lastrowid),))
                return _row_to_record(fetchone(cur))
        except errors.IntegrityError as exc:
            if exc.errno != errorcode.ER_DUP_ENTRY:
                raise
            year, quarter = quarter_of(record.leave_date)
            raise DuplicateLeaveError(
                f"Leave already recorded for {record.employee_code} on {record.leave_date.isoformat()}",
                year=year,
                quarter=quarter,
            ) from exc

    def get_record(self, employee_code: str, leave_date: date) -> Optional[LeaveRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS} FROM leave_records
                WHERE employee_code=%s AND leave_date=%s
                ORDER BY created_at, record_id
                LIMIT 1
                """,
                (employee_code, leave_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def delete_record(self, record_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leave_records WHERE record_id=%s", (int(record_id),))
            return cur.rowcount > 0

    def list_records(self, employee_code: str, start_date: date, end_date: date) -> Sequence[LeaveRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS} FROM leave_records
                WHERE employee_code=%s AND leave_date BETWEEN %s AND %s
                ORDER BY leave_date, created_at, record_id
                """,
                (employee_code, start_date, end_date),
            )
            return [_row_to_record(r) for r in fetchall(cur)]
