from __future__ import annotations

import calendar
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Mapping, Optional

from ..attendance.adjudicator import DayAdjudicator
from ..attendance.repository import DayOverrideRepository, PunchRepository
from ..attendance.weekend import WeekendPolicy
from ..common.datetime_utils import CompanyClock, now_utc
from ..common.logging_config import get_logger
from ..common.validators import require_month, require_non_empty
from ..core.constants import MINUTES_PER_DAY, NIGHT_SHIFT_CHECKOUT_CUTOFF
from ..core.exceptions import NotFoundError, ShiftUnresolvedError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..shifts.repository import ShiftRepository
from ..shifts.resolver import ShiftWindowResolver
from ..violations.model import ViolationRulesConfig
from ..violations.service import ViolationRulesService
from .calculator.base import DeductionCalculator
from .calculator.standard_calculator import StandardDeductionCalculator
from .model import MonthlyPayrollSummary, PayrollBatchResult

logger = get_logger(__name__)


class PayrollService:
    """Monthly payroll: resolve shift -> adjudicate each day -> escalate -> aggregate.

    Inputs are fetched up front; everything after that is pure, so employees
    can be computed in parallel (``max_workers`` > 1).
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        shifts: ShiftRepository,
        punches: PunchRepository,
        overrides: DayOverrideRepository,
        rules: ViolationRulesService,
        *,
        clock: CompanyClock,
        weekend: Optional[WeekendPolicy] = None,
        saturday_overrides: Optional[Mapping[str, str]] = None,
        calculator: Optional[DeductionCalculator] = None,
        adjudicator: Optional[DayAdjudicator] = None,
        max_workers: int = 1,
    ):
        self._employees = employees
        self._shifts = shifts
        self._punches = punches
        self._overrides = overrides
        self._rules = rules
        self._clock = clock
        self._weekend = weekend or WeekendPolicy()
        self._saturday_overrides = dict(saturday_overrides or {})
        self._calculator = calculator or StandardDeductionCalculator()
        self._adjudicator = adjudicator or DayAdjudicator(clock)
        self._max_workers = max(1, int(max_workers))

    def _resolver(self) -> ShiftWindowResolver:
        # A deactivated shift resolves as unknown.
        return ShiftWindowResolver(
            self._shifts.list_all(active_only=True),
            saturday_overrides=self._saturday_overrides,
        )

    def build_month(
        self,
        employee_code: str,
        year: int,
        month: int,
        *,
        now: Optional[datetime] = None,
    ) -> MonthlyPayrollSummary:
        year, month = require_month(year, month)
        employee_code = require_non_empty(employee_code, "employee_code")
        employee = self._employees.get_by_code(employee_code)
        if not employee:
            raise NotFoundError(f"Employee not found: {employee_code}")

        return self._build(
            employee,
            year,
            month,
            resolver=self._resolver(),
            rules=self._rules.get_active(),
            now=now or now_utc(),
        )

    def build_month_for_all(self, year: int, month: int, *, now: Optional[datetime] = None) -> PayrollBatchResult:
        year, month = require_month(year, month)
        now = now or now_utc()
        resolver = self._resolver()
        rules = self._rules.get_active()
        employees = list(self._employees.list_active())

        def run(emp: Employee):
            try:
                return emp, self._build(emp, year, month, resolver=resolver, rules=rules, now=now), None
            except Exception as exc:
                # One employee's bad data must not sink the batch.
                logger.exception(
                    "payroll failed for employee",
                    extra={"employee_code": emp.code, "year": year, "month": month},
                )
                return emp, None, f"{type(exc).__name__}: {exc}"

        if self._max_workers > 1 and len(employees) > 1:
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                results = list(pool.map(run, employees))
        else:
            results = [run(emp) for emp in employees]

        summaries = tuple(s for _, s, _ in results if s is not None)
        failures = {emp.code: err for emp, _, err in results if err is not None}
        logger.info(
            "payroll batch finished",
            extra={"year": year, "month": month, "ok": len(summaries), "failed": len(failures)},
        )
        return PayrollBatchResult(year=year, month=month, summaries=summaries, failures=failures)

    def _build(
        self,
        employee: Employee,
        year: int,
        month: int,
        *,
        resolver: ShiftWindowResolver,
        rules: ViolationRulesConfig,
        now: datetime,
    ) -> MonthlyPayrollSummary:
        first = date(year, month, 1)
        last = date(year, month, calendar.monthrange(year, month)[1])

        # The last night's check-out lands on the morning after the month ends.
        punches = self._punches.list_for_employee(
            employee.code,
            self._clock.to_instant(first, 0),
            self._clock.to_instant(last, MINUTES_PER_DAY + NIGHT_SHIFT_CHECKOUT_CUTOFF),
        )
        overrides = {o.work_date: o for o in self._overrides.list_for_employee(employee.code, first, last)}

        records = []
        unresolved = []
        day = first
        while day <= last:
            window = None
            try:
                window = resolver.resolve(employee.shift_code, day)
            except ShiftUnresolvedError as exc:
                unresolved.append(day)
                logger.warning(
                    "shift unresolved, skipping late/early",
                    extra={"employee_code": employee.code, "date": day.isoformat(), "shift_code": exc.shift_code},
                )

            records.append(
                self._adjudicator.adjudicate(
                    day=day,
                    window=window,
                    punches=punches,
                    override=overrides.get(day),
                    is_off_day=self._weekend.is_off_day(
                        day, department=employee.department, saturday_group=employee.saturday_group
                    ),
                    now=now,
                )
            )
            day += timedelta(days=1)

        summary = self._calculator.summarize(employee=employee, year=year, month=month, days=records, rules=rules)
        return replace(summary, unresolved_dates=tuple(unresolved))
