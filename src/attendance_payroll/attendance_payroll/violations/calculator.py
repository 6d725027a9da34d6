from __future__ import annotations

from typing import Iterable

from ..core.enums import ChargeKind
from ..core.exceptions import ValidationError
from .model import EscalationResult, ViolationCharge, ViolationDay, ViolationRulesConfig


def charge_for(number: int, minutes: int, rules: ViolationRulesConfig) -> tuple[ChargeKind, float]:
    """How the ``number``-th violation of a month is charged."""
    if number <= rules.free_violations:
        return ChargeKind.FREE, 0.0
    if number % rules.milestone_interval == 0:
        return ChargeKind.MILESTONE, 1.0
    return ChargeKind.PER_MINUTE, min(minutes * rules.per_minute_rate, rules.max_per_minute_fine)


def escalate(violations: Iterable[ViolationDay], rules: ViolationRulesConfig) -> EscalationResult:
    """Turn a month's unexcused violations into deduction days.

    Violations are numbered in ascending date order. The grand total is not
    capped and may exceed the number of days in the month.
    """
    ordered = sorted(violations, key=lambda v: v.date)
    seen = set()
    for v in ordered:
        if v.date in seen:
            raise ValidationError(f"More than one violation record for {v.date.isoformat()}")
        seen.add(v.date)

    charges = []
    full_days = 0.0
    per_minute_days = 0.0
    for number, v in enumerate(ordered, start=1):
        kind, days = charge_for(number, v.minutes, rules)
        if kind == ChargeKind.MILESTONE:
            full_days += days
        elif kind == ChargeKind.PER_MINUTE:
            per_minute_days += days
        charges.append(ViolationCharge(number=number, date=v.date, minutes=v.minutes, kind=kind, days=days))

    return EscalationResult(
        charges=tuple(charges),
        full_days=full_days,
        per_minute_days=round(per_minute_days, 3),
    )
