from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Mapping, Optional

from ..common.validators import require_min_value
from ..core.enums import ChargeKind
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ViolationRulesConfig:
    """One version of the deduction rules. At most one version is active.

    ``sick_leave_days`` of None means sick leave costs the same as unpaid leave.
    ``days_per_month`` is kept for display and ad-hoc conversions; monthly
    payroll divides by the real month length.
    """

    free_violations: int = 2
    milestone_interval: int = 3
    per_minute_rate: float = 0.007
    max_per_minute_fine: float = 1.0
    both_missing_days: float = 1.0
    partial_punch_days: float = 1.0
    leave_without_inform_days: float = 1.5
    unpaid_leave_days: float = 1.0
    sick_leave_days: Optional[float] = None
    half_day_days: float = 0.5
    paid_leave_days: float = 0.0
    days_per_month: int = 30
    description: str = "Default rules"
    updated_by: str = "HR"
    active: bool = True
    rules_id: Optional[int] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        require_min_value(self.free_violations, "free_violations", 0)
        require_min_value(self.milestone_interval, "milestone_interval", 1)
        for name in (
            "per_minute_rate",
            "max_per_minute_fine",
            "both_missing_days",
            "partial_punch_days",
            "leave_without_inform_days",
            "unpaid_leave_days",
            "half_day_days",
            "paid_leave_days",
        ):
            require_min_value(getattr(self, name), name, 0)
        if self.sick_leave_days is not None:
            require_min_value(self.sick_leave_days, "sick_leave_days", 0)
        if not 1 <= int(self.days_per_month) <= 31:
            raise ValidationError("days_per_month must be between 1 and 31")

    @property
    def effective_sick_leave_days(self) -> float:
        if self.sick_leave_days is None:
            return self.unpaid_leave_days
        return self.sick_leave_days

    def to_dict(self) -> dict:
        return {
            "violationConfig": {
                "freeViolations": self.free_violations,
                "milestoneInterval": self.milestone_interval,
                "perMinuteRate": self.per_minute_rate,
                "maxPerMinuteFine": self.max_per_minute_fine,
            },
            "absentConfig": {
                "bothMissingDays": self.both_missing_days,
                "partialPunchDays": self.partial_punch_days,
                "leaveWithoutInformDays": self.leave_without_inform_days,
            },
            "leaveConfig": {
                "unpaidLeaveDays": self.unpaid_leave_days,
                "sickLeaveDays": self.effective_sick_leave_days,
                "halfDayDays": self.half_day_days,
                "paidLeaveDays": self.paid_leave_days,
            },
            "salaryConfig": {"daysPerMonth": self.days_per_month},
            "description": self.description,
            "updatedBy": self.updated_by,
            "isActive": self.active,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ViolationRulesConfig":
        """Build from the sectioned JSON shape; missing keys fall back to defaults."""
        sections = ("violationConfig", "absentConfig", "leaveConfig", "salaryConfig")
        missing = [s for s in sections if not isinstance(payload.get(s), Mapping)]
        if missing:
            raise ValidationError(f"All configuration sections are required (missing: {', '.join(missing)})")

        v, a, lv, s = (payload[name] for name in sections)
        defaults = cls()

        def pick(section: Mapping[str, Any], key: str, default: Any, cast=float):
            value = section.get(key)
            if value is None:
                return default
            try:
                return cast(value)
            except (TypeError, ValueError):
                raise ValidationError(f"{key} must be a number")

        return cls(
            free_violations=pick(v, "freeViolations", defaults.free_violations, int),
            milestone_interval=pick(v, "milestoneInterval", defaults.milestone_interval, int),
            per_minute_rate=pick(v, "perMinuteRate", defaults.per_minute_rate),
            max_per_minute_fine=pick(v, "maxPerMinuteFine", defaults.max_per_minute_fine),
            both_missing_days=pick(a, "bothMissingDays", defaults.both_missing_days),
            partial_punch_days=pick(a, "partialPunchDays", defaults.partial_punch_days),
            leave_without_inform_days=pick(a, "leaveWithoutInformDays", defaults.leave_without_inform_days),
            unpaid_leave_days=pick(lv, "unpaidLeaveDays", defaults.unpaid_leave_days),
            sick_leave_days=pick(lv, "sickLeaveDays", None),
            half_day_days=pick(lv, "halfDayDays", defaults.half_day_days),
            paid_leave_days=pick(lv, "paidLeaveDays", defaults.paid_leave_days),
            days_per_month=pick(s, "daysPerMonth", defaults.days_per_month, int),
            description=str(payload.get("description") or "Violation and salary deduction rules"),
            updated_by=str(payload.get("updatedBy") or "HR"),
        )


@dataclass(frozen=True)
class ViolationDay:
    """An unexcused late/early day and its minutes beyond grace (late + early)."""

    date: date
    minutes: int


@dataclass(frozen=True)
class ViolationCharge:
    number: int
    date: date
    minutes: int
    kind: ChargeKind
    days: float


@dataclass(frozen=True)
class EscalationResult:
    charges: tuple[ViolationCharge, ...] = field(default_factory=tuple)
    full_days: float = 0.0
    per_minute_days: float = 0.0

    @property
    def count(self) -> int:
        return len(self.charges)

    @property
    def total_days(self) -> float:
        return round(self.full_days + self.per_minute_days, 3)
