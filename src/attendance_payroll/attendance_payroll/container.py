from __future__ import annotations

from dataclasses import dataclass

from .attendance.adjudicator import DayAdjudicator
from .attendance.factory import AdjudicationStrategyFactory
from .attendance.mysql_attendance_repository import MySQLDayOverrideRepository, MySQLPunchRepository
from .attendance.service import DayCorrectionService
from .attendance.weekend import WeekendPolicy
from .common.cache import ReadThroughCache
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .leave.ledger import LeaveLedgerService
from .leave.locks import KeyedLocks
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .payroll.service import PayrollService
from .settings import EngineSettings
from .shifts.cached_shift_repository import CachedShiftRepository
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .violations.mysql_violation_rules_repository import MySQLViolationRulesRepository
from .violations.service import ViolationRulesService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    settings: EngineSettings

    shifts_repo: CachedShiftRepository
    employees_repo: MySQLEmployeeRepository
    punches_repo: MySQLPunchRepository
    overrides_repo: MySQLDayOverrideRepository
    rules_repo: MySQLViolationRulesRepository
    leave_repo: MySQLLeaveRepository

    rules_service: ViolationRulesService
    corrections_service: DayCorrectionService
    leave_service: LeaveLedgerService
    payroll_service: PayrollService


def build_container(*, settings: EngineSettings) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(dict(settings.db_config)))

    shifts_repo = CachedShiftRepository(
        MySQLShiftRepository(conn),
        ReadThroughCache(ttl_seconds=settings.shift_cache_ttl_seconds),
    )
    employees_repo = MySQLEmployeeRepository(conn)
    punches_repo = MySQLPunchRepository(conn)
    overrides_repo = MySQLDayOverrideRepository(conn)
    rules_repo = MySQLViolationRulesRepository(conn)
    leave_repo = MySQLLeaveRepository(conn)

    rules_service = ViolationRulesService(rules_repo)
    corrections_service = DayCorrectionService(employees_repo, overrides_repo)
    leave_service = LeaveLedgerService(
        leave_repo,
        overrides=overrides_repo,
        employees=employees_repo,
        per_quarter=settings.leaves_per_quarter,
        locks=KeyedLocks(),
    )
    payroll_service = PayrollService(
        employees_repo,
        shifts_repo,
        punches_repo,
        overrides_repo,
        rules_service,
        clock=settings.clock,
        weekend=WeekendPolicy(settings.department_saturday_policy),
        saturday_overrides=settings.saturday_shift_overrides,
        adjudicator=DayAdjudicator(settings.clock, strategy_factory=AdjudicationStrategyFactory()),
        max_workers=settings.payroll_max_workers,
    )

    return Container(
        conn=conn,
        settings=settings,
        shifts_repo=shifts_repo,
        employees_repo=employees_repo,
        punches_repo=punches_repo,
        overrides_repo=overrides_repo,
        rules_repo=rules_repo,
        leave_repo=leave_repo,
        rules_service=rules_service,
        corrections_service=corrections_service,
        leave_service=leave_service,
        payroll_service=payroll_service,
    )
