from __future__ import annotations

from typing import Any, Optional, Sequence

from ..common.logging_config import get_logger
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import ShiftDefinition
from .repository import ShiftRepository

logger = get_logger(__name__)

_COLUMNS = "shift_id, code, name, start_time, end_time, crosses_midnight, grace_period_minutes, is_active, description"


def _safe_time(value: Any, *, code: str):
    # A broken TIME value makes the shift unresolvable instead of failing the whole list.
    try:
        return normalize_mysql_time(value)
    except (TypeError, ValueError):
        logger.warning("unparseable shift time", extra={"shift_code": code, "value": value})
        return None


def _row_to_shift(r: dict) -> ShiftDefinition:
    code = str(r["code"]).upper()
    return ShiftDefinition(
        shift_id=int(r["shift_id"]),
        code=code,
        name=r["name"],
        start_time=_safe_time(r.get("start_time"), code=code),
        end_time=_safe_time(r.get("end_time"), code=code),
        crosses_midnight=bool(r.get("crosses_midnight")),
        grace_period_minutes=int(r["grace_period_minutes"] if r.get("grace_period_minutes") is not None else 15),
        active=bool(r.get("is_active")),
        description=r.get("description"),
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self, *, active_only: bool = False) -> Sequence[ShiftDefinition]:
        where = "WHERE is_active=1" if active_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM shifts {where} ORDER BY code")
            return [_row_to_shift(r) for r in fetchall(cur)]

    def get_by_code(self, code: str) -> Optional[ShiftDefinition]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM shifts WHERE code=%s", ((code or "").strip().upper(),))
            r = fetchone(cur)
            return _row_to_shift(r) if r else None

    def save(self, shift: ShiftDefinition) -> ShiftDefinition:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO shifts(code, name, start_time, end_time, crosses_midnight, grace_period_minutes, is_active, description)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    name=VALUES(name), start_time=VALUES(start_time), end_time=VALUES(end_time),
                    crosses_midnight=VALUES(crosses_midnight), grace_period_minutes=VALUES(grace_period_minutes),
                    is_active=VALUES(is_active), description=VALUES(description)
                """,
                (
                    shift.code.upper(),
                    shift.name,
                    shift.start_time,
                    shift.end_time,
                    int(shift.crosses_midnight),
                    int(shift.grace_period_minutes),
                    int(shift.active),
                    shift.description,
                ),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM shifts WHERE code=%s", (shift.code.upper(),))
            return _row_to_shift(fetchone(cur))

    def deactivate(self, code: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE shifts SET is_active=0 WHERE code=%s", ((code or "").strip().upper(),))
            return cur.rowcount > 0
