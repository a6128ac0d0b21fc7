"""
PayrollBatchRunner -- parallel month-end payroll over all employees.

Contract:
    Each employee is calculated in its own session and transaction on a
    worker thread.  A failure is recorded for that employee and never
    affects the others.  Ineligible employees are reported as skipped.

Architecture: workforce_modules/payroll.  Uses ``PayrollService`` per
    employee; the session factory comes from ``workforce_kernel.db.engine``.

Non-goals:
    - NOT a scheduler; callers decide when a month is run.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable
from uuid import UUID

from sqlalchemy.orm import Session

from workforce_engines.proration import parse_salary_month
from workforce_kernel.domain.clock import Clock, SystemClock
from workforce_kernel.logging_config import LogContext, get_logger
from workforce_kernel.services.base import SYSTEM_ACTOR_ID
from workforce_modules.directory import EmployeeDirectory
from workforce_modules.payroll.approval import ApprovalWorkflow, ConfigApprovalWorkflow
from workforce_modules.payroll.config import PayrollConfig
from workforce_modules.payroll.models import EmployeePayrollOutcome, PayrollBatchResult
from workforce_modules.payroll.service import PayrollService

logger = get_logger("modules.payroll.batch")


class PayrollBatchRunner:
    """Runs ``PayrollService.calculate`` for every eligible employee."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        employees: EmployeeDirectory,
        *,
        config: PayrollConfig | None = None,
        approvals: ApprovalWorkflow | None = None,
        clock: Clock | None = None,
        max_workers: int | None = None,
    ):
        self._session_factory = session_factory
        self._employees = employees
        self._config = config or PayrollConfig.with_defaults()
        self._approvals = approvals or ConfigApprovalWorkflow()
        self._clock = clock or SystemClock()
        self._max_workers = max_workers or self._config.batch_max_workers

    def _service(self, session: Session) -> PayrollService:
        return PayrollService(
            session,
            self._employees,
            config=self._config,
            approvals=self._approvals,
            clock=self._clock,
        )

    def _run_one(self, employee_no: str, salary_month: str, actor_id: UUID) -> EmployeePayrollOutcome:
        session = self._session_factory()
        try:
            with LogContext.bind(actor_id=str(actor_id)):
                return self._service(session).calculate_outcome(employee_no, salary_month, actor_id)
        finally:
            session.close()

    def run(self, salary_month: str, actor_id: UUID = SYSTEM_ACTOR_ID) -> PayrollBatchResult:
        """Calculate ``salary_month`` for all employees.

        Raises:
            InvalidMonthError: ``salary_month`` is not "YYYY-MM".
        """
        month = parse_salary_month(salary_month)
        eligible: list[str] = []
        skipped: list[str] = []
        for employee in self._employees.list_employees():
            if self._config.is_eligible_contract(
                employee.contract_type
            ) and self._config.is_eligible_status(employee.employment_status):
                eligible.append(employee.employee_no)
            else:
                skipped.append(employee.employee_no)

        logger.info(
            "payroll_batch_started",
            extra={
                "salary_month": month.value,
                "eligible": len(eligible),
                "skipped": len(skipped),
                "max_workers": self._max_workers,
            },
        )

        with ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix="payroll"
        ) as pool:
            outcomes = list(
                pool.map(lambda no: self._run_one(no, month.value, actor_id), eligible)
            )

        result = PayrollBatchResult(
            salary_month=month.value,
            outcomes=tuple(outcomes),
            skipped=tuple(skipped),
        )
        logger.info(
            "payroll_batch_completed",
            extra={
                "salary_month": month.value,
                "succeeded": len(result.succeeded),
                "failed": len(result.failed),
                "skipped": len(result.skipped),
            },
        )
        return result
