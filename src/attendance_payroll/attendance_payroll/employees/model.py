from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import SaturdayGroup


@dataclass(frozen=True)
class Employee:
    """Employee master data the engine needs: assigned shift and gross salary."""

    code: str
    name: str
    shift_code: str
    monthly_salary: float
    department: Optional[str] = None
    saturday_group: Optional[SaturdayGroup] = None
    active: bool = True
    employee_id: Optional[int] = None
