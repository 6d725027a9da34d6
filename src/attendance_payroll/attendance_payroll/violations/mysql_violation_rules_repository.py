from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ViolationRulesConfig
from .repository import ViolationRulesRepository

_COLUMNS = (
    "rules_id, free_violations, milestone_interval, per_minute_rate, max_per_minute_fine, "
    "both_missing_days, partial_punch_days, leave_without_inform_days, unpaid_leave_days, "
    "sick_leave_days, half_day_days, paid_leave_days, days_per_month, description, updated_by, "
    "is_active, created_at"
)


def _row_to_rules(r: dict) -> ViolationRulesConfig:
    return ViolationRulesConfig(
        rules_id=int(r["rules_id"]),
        free_violations=int(r["free_violations"]),
        milestone_interval=int(r["milestone_interval"]),
        per_minute_rate=float(r["per_minute_rate"]),
        max_per_minute_fine=float(r["max_per_minute_fine"]),
        both_missing_days=float(r["both_missing_days"]),
        partial_punch_days=float(r["partial_punch_days"]),
        leave_without_inform_days=float(r["leave_without_inform_days"]),
        unpaid_leave_days=float(r["unpaid_leave_days"]),
        sick_leave_days=None if r.get("sick_leave_days") is None else float(r["sick_leave_days"]),
        half_day_days=float(r["half_day_days"]),
        paid_leave_days=float(r["paid_leave_days"]),
        days_per_month=int(r["days_per_month"]),
        description=r.get("description") or "",
        updated_by=r.get("updated_by") or "HR",
        active=bool(r["is_active"]),
        created_at=r.get("created_at"),
    )


class MySQLViolationRulesRepository(ViolationRulesRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active(self) -> Optional[ViolationRulesConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM violation_rules WHERE is_active=1 ORDER BY rules_id DESC LIMIT 1")
            r = fetchone(cur)
            return _row_to_rules(r) if r else None

    def activate(self, config: ViolationRulesConfig) -> ViolationRulesConfig:
        # db_cursor commits once at the end, so both statements land together or not at all.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE violation_rules SET is_active=0 WHERE is_active=1")
            cur.execute(
                """
                INSERT INTO violation_rules(
                    free_violations, milestone_interval, per_minute_rate, max_per_minute_fine,
                    both_missing_days, partial_punch_days, leave_without_inform_days, unpaid_leave_days,
                    sick_leave_days, half_day_days, paid_leave_days, days_per_month, description,
                    updated_by, is_active
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,1)
                """,
                (
                    config.free_violations,
                    config.milestone_interval,
                    config.per_minute_rate,
                    config.max_per_minute_fine,
                    config.both_missing_days,
                    config.partial_punch_days,
                    config.leave_without_inform_days,
                    config.unpaid_leave_days,
                    config.sick_leave_days,
                    config.half_day_days,
                    config.paid_leave_days,
                    config.days_per_month,
                    config.description,
                    config.updated_by,
                ),
            )
            new_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM violation_rules WHERE rules_id=%s", (new_id,))
            return _row_to_rules(fetchone(cur))

    def list_history(self, *, limit: int = 20) -> Sequence[ViolationRulesConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM violation_rules ORDER BY rules_id DESC LIMIT %s", (int(limit),))
            return [_row_to_rules(r) for r in fetchall(cur)]
