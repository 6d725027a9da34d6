from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import normalize_status
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, from_utc_naive, normalize_mysql_time, to_utc_naive
from .model import DayOverride, PunchEvent
from .repository import DayOverrideRepository, PunchRepository


def _optional_bool(value) -> Optional[bool]:
    return None if value is None else bool(value)


class MySQLPunchRepository(PunchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_employee(self, employee_code: str, start: datetime, end: datetime) -> Sequence[PunchEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_code, punched_at, outcome_valid
                FROM punch_events
                WHERE employee_code=%s AND punched_at >= %s AND punched_at < %s
                ORDER BY punched_at
                """,
                (employee_code, to_utc_naive(start), to_utc_naive(end)),
            )
            return [
                PunchEvent(
                    employee_code=r["employee_code"],
                    instant=from_utc_naive(r["punched_at"]),
                    outcome_valid=bool(r["outcome_valid"]),
                )
                for r in fetchall(cur)
            ]


class MySQLDayOverrideRepository(DayOverrideRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_employee(self, employee_code: str, start_date: date, end_date: date) -> Sequence[DayOverride]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_code, work_date, status, reason, excused, late_excused, early_excused,
                       check_in, check_out
                FROM day_overrides
                WHERE employee_code=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date
                """,
                (employee_code, start_date, end_date),
            )
            return [
                DayOverride(
                    employee_code=r["employee_code"],
                    work_date=r["work_date"],
                    status=normalize_status(r.get("status")),
                    reason=r.get("reason"),
                    excused=bool(r.get("excused")),
                    late_excused=_optional_bool(r.get("late_excused")),
                    early_excused=_optional_bool(r.get("early_excused")),
                    check_in=normalize_mysql_time(r.get("check_in")),
                    check_out=normalize_mysql_time(r.get("check_out")),
                )
                for r in fetchall(cur)
            ]

    def upsert(self, override: DayOverride) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO day_overrides(employee_code, work_date, status, reason, excused,
                                          late_excused, early_excused, check_in, check_out)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status), reason=VALUES(reason), excused=VALUES(excused),
                    late_excused=VALUES(late_excused), early_excused=VALUES(early_excused),
                    check_in=VALUES(check_in), check_out=VALUES(check_out)
                """,
                (
                    override.employee_code,
                    override.work_date,
                    override.status.value if override.status else None,
                    override.reason,
                    int(override.excused),
                    None if override.late_excused is None else int(override.late_excused),
                    None if override.early_excused is None else int(override.early_excused),
                    override.check_in,
                    override.check_out,
                ),
            )
