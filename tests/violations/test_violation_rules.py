from __future__ import annotations

import pytest

from src.attendance_payroll.attendance_payroll.core.exceptions import ValidationError
from src.attendance_payroll.attendance_payroll.violations.model import ViolationRulesConfig
from src.attendance_payroll.attendance_payroll.violations.service import ViolationRulesService


def _payload(**violation):
    return {
        "violationConfig": {"freeViolations": 2, "milestoneInterval": 3, **violation},
        "absentConfig": {},
        "leaveConfig": {"sickLeaveDays": 0.5},
        "salaryConfig": {"daysPerMonth": 26},
        "updatedBy": "hr.lead",
    }


def test_defaults():
    rules = ViolationRulesConfig()
    assert (rules.free_violations, rules.milestone_interval, rules.per_minute_rate) == (2, 3, 0.007)
    assert rules.leave_without_inform_days == 1.5
    assert rules.effective_sick_leave_days == rules.unpaid_leave_days


@pytest.mark.parametrize(
    "kwargs",
    [
        {"milestone_interval": 0},
        {"per_minute_rate": -0.1},
        {"free_violations": -1},
        {"days_per_month": 0},
        {"days_per_month": 32},
    ],
)
def test_invalid_rules_are_rejected(kwargs):
    with pytest.raises(ValidationError):
        ViolationRulesConfig(**kwargs)


def test_from_dict_fills_missing_keys_with_defaults():
    rules = ViolationRulesConfig.from_dict(_payload(perMinuteRate=0.01))
    assert rules.per_minute_rate == 0.01
    assert rules.max_per_minute_fine == 1.0
    assert rules.both_missing_days == 1.0
    assert rules.effective_sick_leave_days == 0.5
    assert rules.days_per_month == 26
    assert rules.updated_by == "hr.lead"


def test_from_dict_requires_all_sections():
    with pytest.raises(ValidationError):
        ViolationRulesConfig.from_dict({"violationConfig": {}})


def test_service_returns_defaults_when_nothing_active(fake_repos):
    service = ViolationRulesService(fake_repos.rules())
    assert service.get_active() == ViolationRulesConfig()


def test_activate_leaves_exactly_one_active_version(fake_repos):
    repo = fake_repos.rules(ViolationRulesConfig())
    service = ViolationRulesService(repo)

    stored = service.activate(_payload(perMinuteRate=0.02), updated_by="payroll")

    assert service.get_active() == stored
    assert stored.per_minute_rate == 0.02
    assert stored.updated_by == "payroll"
    assert [r.active for r in service.history()] == [True, False]


def test_round_trip_through_dict():
    rules = ViolationRulesConfig(per_minute_rate=0.01, sick_leave_days=0.75)
    again = ViolationRulesConfig.from_dict(rules.to_dict())
    assert again.per_minute_rate == 0.01
    assert again.effective_sick_leave_days == 0.75
