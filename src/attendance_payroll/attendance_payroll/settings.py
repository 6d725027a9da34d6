from __future__ import annotations

from dataclasses import dataclass, field
from types import ModuleType
from typing import Any, Mapping

from .common.datetime_utils import CompanyClock
from .core.constants import (
    DEFAULT_COMPANY_DAY_CUTOFF,
    DEFAULT_LEAVES_PER_QUARTER,
    DEFAULT_SATURDAY_SHIFT_OVERRIDES,
    DEFAULT_SHIFT_CACHE_TTL_SECONDS,
    DEFAULT_TIMEZONE_OFFSET,
)
from .core.enums import SaturdayPolicy
from .core.exceptions import ValidationError


@dataclass(frozen=True)
class EngineSettings:
    """Everything the engine reads from a ``config.*`` settings module."""

    db_config: Mapping[str, Any]
    clock: CompanyClock = field(default_factory=CompanyClock)
    debug: bool = False
    log_level: str = "INFO"
    leaves_per_quarter: int = DEFAULT_LEAVES_PER_QUARTER
    saturday_shift_overrides: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_SATURDAY_SHIFT_OVERRIDES))
    department_saturday_policy: Mapping[str, str] = field(default_factory=dict)
    shift_cache_ttl_seconds: int = DEFAULT_SHIFT_CACHE_TTL_SECONDS
    payroll_max_workers: int = 1
    auto_init_db: bool = False
    auto_seed_db: bool = False

    @classmethod
    def from_module(cls, settings: ModuleType) -> "EngineSettings":
        db_config = getattr(settings, "DB_CONFIG", None)
        if not isinstance(db_config, Mapping):
            raise ValidationError("DB_CONFIG must be a mapping")

        policies = dict(getattr(settings, "DEPARTMENT_SATURDAY_POLICY", {}) or {})
        for dept, policy in policies.items():
            try:
                SaturdayPolicy(policy)
            except ValueError:
                raise ValidationError(f"Unknown Saturday policy {policy!r} for department {dept!r}")

        leaves = int(getattr(settings, "LEAVES_PER_QUARTER", DEFAULT_LEAVES_PER_QUARTER))
        if leaves < 0:
            raise ValidationError("LEAVES_PER_QUARTER must be >= 0")

        return cls(
            db_config=dict(db_config),
            clock=CompanyClock.from_settings(
                getattr(settings, "TIMEZONE_OFFSET", DEFAULT_TIMEZONE_OFFSET),
                getattr(settings, "COMPANY_DAY_CUTOFF", DEFAULT_COMPANY_DAY_CUTOFF),
            ),
            debug=bool(getattr(settings, "DEBUG", False)),
            log_level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
            leaves_per_quarter=leaves,
            saturday_shift_overrides={
                str(k).upper(): str(v).upper()
                for k, v in (getattr(settings, "SATURDAY_SHIFT_OVERRIDES", DEFAULT_SATURDAY_SHIFT_OVERRIDES) or {}).items()
            },
            department_saturday_policy=policies,
            shift_cache_ttl_seconds=int(getattr(settings, "SHIFT_CACHE_TTL_SECONDS", DEFAULT_SHIFT_CACHE_TTL_SECONDS)),
            payroll_max_workers=max(1, int(getattr(settings, "PAYROLL_MAX_WORKERS", 1))),
            auto_init_db=bool(getattr(settings, "AUTO_INIT_DB", False)),
            auto_seed_db=bool(getattr(settings, "AUTO_SEED_DB", False)),
        )
