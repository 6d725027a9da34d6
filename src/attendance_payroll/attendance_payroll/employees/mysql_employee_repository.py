from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import SaturdayGroup, extract_shift_code
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = "employee_id, emp_code, full_name, shift_code, monthly_salary, department, saturday_group, is_active"


def _row_to_employee(r: dict) -> Employee:
    group = (r.get("saturday_group") or "").strip().upper()
    return Employee(
        employee_id=int(r["employee_id"]),
        code=r["emp_code"],
        name=r["full_name"],
        shift_code=extract_shift_code(r.get("shift_code")).upper(),
        monthly_salary=float(r.get("monthly_salary") or 0),
        department=r.get("department"),
        saturday_group=SaturdayGroup(group) if group in ("A", "B") else None,
        active=bool(r.get("is_active")),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_code(self, code: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE emp_code=%s", ((code or "").strip(),))
            r = fetchone(cur)
            return _row_to_employee(r) if r else None

    def list_active(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE is_active=1 ORDER BY emp_code")
            return [_row_to_employee(r) for r in fetchall(cur)]
