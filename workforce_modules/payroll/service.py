"""
Payroll Module Service (``workforce_modules.payroll.service``).

Responsibility
--------------
Monthly payroll per employee: eligibility, proration, salary-breakdown
expansion, aggregation of active allowances and deductions, loan
installment consumption, totals, versioning and the approval hand-off.
Also the approve/reject progression and read access to versions.

Architecture position
---------------------
**Modules layer** -- ``PayrollService`` is the sole public entry point for
payroll writes.  Pure computation lives in ``workforce_engines.proration``
and ``workforce_engines.pay_lines``; loans in ``LoanLedger``; monthly
entries in ``MonthlyEntryService``.

Invariants enforced
-------------------
* Each public method owns the transaction boundary (``commit`` on success,
  ``rollback`` on rejection or exception).
* One latest header per (employee, month).  A second ``calculate`` is
  rejected; ``recalculate`` creates version N+1 and flips version N.
  Under concurrency the partial unique index decides the winner and the
  loser is reported as a duplicate calculation.
* Loan installments are marked paid in the same commit as the header that
  deducted them.
* ``net_salary == total_allowances - total_deductions``.  Negative net is
  logged, never rejected.

Failure modes
-------------
* Business-rule violation  -> ``PayrollResult`` with ``is_success == False``.
* ``ValidationError`` / ``NotFoundError`` / ``ConcurrencyError``  -> session
  rolled back, raised.

Usage::

    service = PayrollService(session, employees, approvals=workflow, clock=clock)
    result = service.calculate("E100", "2024-01")
    header = result.unwrap()
"""

from __future__ import annotations

from uuid import UUID, uuid4

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from workforce_engines.approval import ApprovalStatus, reject_chain
from workforce_engines.pay_lines import PayCategory, PayLine, TransactionType, compute_totals
from workforce_engines.proration import (
    BreakdownRow,
    SalaryMonth,
    expand_breakdown,
    parse_salary_month,
    prorate_salary,
)
from workforce_kernel.domain.clock import Clock, SystemClock
from workforce_kernel.domain.results import ServiceResult
from workforce_kernel.exceptions import (
    ApproverNotAuthorizedError,
    BusinessRuleViolation,
    DuplicatePayrollCalculationError,
    EmployeeNotFoundError,
    IneligibleContractTypeError,
    IneligibleEmploymentStatusError,
    InvalidApprovalStateError,
    RecalculationReasonRequiredError,
    RejectionReasonRequiredError,
    SalaryHeaderNotFoundError,
    StaleSalaryHeaderError,
)
from workforce_kernel.logging_config import LogContext, get_logger
from workforce_kernel.services.base import SYSTEM_ACTOR_ID
from workforce_modules._service_helpers import reject
from workforce_modules.directory import EmployeeDirectory, EmployeeProfile
from workforce_modules.entries.service import MonthlyEntryService
from workforce_modules.loans.service import LoanLedger
from workforce_modules.payroll.approval import ApprovalWorkflow, ConfigApprovalWorkflow
from workforce_modules.payroll.config import PayrollConfig
from workforce_modules.payroll.models import (
    EmployeePayrollOutcome,
    PayrollBatchResult,
    PayrollResult,
    SalaryDetail,
    SalaryHeader,
    SalaryType,
)
from workforce_modules.payroll.orm import (
    SalaryBreakdownPercentageModel,
    SalaryHeaderModel,
)

logger = get_logger("modules.payroll.service")


class PayrollService:
    """
    Orchestrates payroll calculation, versioning and approval.

    Contract:
        Every public write method commits on success and rolls back on
        rejection or error.  ``LoanLedger`` and ``MonthlyEntryService`` are
        flush-only and participate in this service's transaction.
    """

    def __init__(
        self,
        session: Session,
        employees: EmployeeDirectory,
        *,
        config: PayrollConfig | None = None,
        approvals: ApprovalWorkflow | None = None,
        clock: Clock | None = None,
        loans: LoanLedger | None = None,
        entries: MonthlyEntryService | None = None,
    ):
        self._session = session
        self._employees = employees
        self._config = config or PayrollConfig.with_defaults()
        self._approvals = approvals or ConfigApprovalWorkflow()
        self._clock = clock or SystemClock()
        self._loans = loans or LoanLedger(session)
        self._entries = entries or MonthlyEntryService(session)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _require_employee(self, employee_no: str) -> EmployeeProfile:
        employee = self._employees.get(employee_no)
        if employee is None:
            raise EmployeeNotFoundError(employee_no)
        return employee

    def _check_eligibility(self, employee: EmployeeProfile) -> None:
        if not self._config.is_eligible_contract(employee.contract_type):
            raise IneligibleContractTypeError(
                employee.employee_no,
                employee.contract_type,
                tuple(self._config.eligible_contract_types),
            )
        if not self._config.is_eligible_status(employee.employment_status):
            raise IneligibleEmploymentStatusError(
                employee.employee_no, employee.employment_status.value
            )

    def is_eligible(self, employee: EmployeeProfile) -> bool:
        return self._config.is_eligible_contract(
            employee.contract_type
        ) and self._config.is_eligible_status(employee.employment_status)

    def _latest_row(self, employee_no: str, salary_month: str) -> SalaryHeaderModel | None:
        return self._session.scalars(
            select(SalaryHeaderModel).where(
                SalaryHeaderModel.employee_no == employee_no,
                SalaryHeaderModel.salary_month == salary_month,
                SalaryHeaderModel.is_latest == "Y",
            )
        ).first()

    def _breakdown_rows(self, category: str) -> list[BreakdownRow]:
        rows = self._session.scalars(
            select(SalaryBreakdownPercentageModel)
            .where(
                SalaryBreakdownPercentageModel.employee_category == category,
                SalaryBreakdownPercentageModel.is_active.is_(True),
            )
            .order_by(SalaryBreakdownPercentageModel.trans_type_code)
        ).all()
        return [
            BreakdownRow(trans_type_code=r.trans_type_code, percentage=r.salary_percentage)
            for r in rows
        ]

    def _build_lines(
        self,
        employee: EmployeeProfile,
        month: SalaryMonth,
        actor_id: UUID,
    ):
        gross = prorate_salary(
            monthly_salary=employee.monthly_salary,
            salary_month=month,
            hire_date=employee.hire_date,
            termination_date=employee.termination_date,
            divisor=self._config.proration_divisor,
        )

        breakdown = self._breakdown_rows(employee.category)
        if not breakdown:
            logger.info(
                "payroll_breakdown_missing",
                extra={"employee_no": employee.employee_no, "category": employee.category},
            )
        lines: list[PayLine] = list(expand_breakdown(gross, breakdown))

        entries = self._entries.list_active_for_month(employee.employee_no, month)
        lines.extend(entry.to_pay_line() for entry in entries)

        # Installments an earlier version of this month already deducted
        for paid in self._loans.installments_paid_for_month(employee.employee_no, month):
            lines.append(
                PayLine(
                    trans_type_code=int(TransactionType.LOAN_INSTALLMENT),
                    amount=paid.amount,
                    category=PayCategory.DEDUCTION,
                    reference_table="loan_installments",
                    reference_id=str(paid.id),
                )
            )
        consumed = self._loans.consume_due_installments(
            employee.employee_no, month, paid_on=self._clock.today(), actor_id=actor_id
        )
        for installment in consumed:
            lines.append(
                PayLine(
                    trans_type_code=int(TransactionType.LOAN_INSTALLMENT),
                    amount=installment.amount,
                    category=PayCategory.DEDUCTION,
                    reference_table="loan_installments",
                    reference_id=str(installment.installment_id),
                )
            )
        return gross, lines

    def _compute_and_persist(
        self,
        employee: EmployeeProfile,
        month: SalaryMonth,
        *,
        version: int,
        salary_type: SalaryType,
        recalculation_reason: str | None,
        actor_id: UUID,
    ) -> SalaryHeader:
        gross, lines = self._build_lines(employee, month, actor_id)
        totals = compute_totals(gross, lines)

        if totals.net_salary < 0:
            logger.warning(
                "payroll_negative_net_salary",
                extra={
                    "employee_no": employee.employee_no,
                    "salary_month": month.value,
                    "net_salary": str(totals.net_salary),
                    "total_loans": str(totals.total_loans),
                },
            )

        today = self._clock.today()
        decision = self._approvals.initialize(
            self._config.approval_request_type,
            employee.employee_no,
            totals.net_salary,
            today,
        )

        header = SalaryHeader(
            id=uuid4(),
            employee_no=employee.employee_no,
            salary_month=month.value,
            salary_version=version,
            salary_type=salary_type,
            gross_salary=totals.gross_salary,
            total_allowances=totals.total_allowances,
            total_deductions=totals.total_deductions,
            total_overtime=totals.total_overtime,
            total_absence=totals.total_absence,
            total_loans=totals.total_loans,
            net_salary=totals.net_salary,
            trans_status=decision.status,
            is_latest=True,
            calculation_date=today,
            next_approver_id=decision.next_approver_id,
            next_approval_level=decision.next_level,
            recalculation_reason=recalculation_reason,
            approved_at=self._clock.now() if decision.status is ApprovalStatus.APPROVED else None,
            details=tuple(
                SalaryDetail(
                    line_no=line_no,
                    trans_type_code=line.trans_type_code,
                    trans_amount=line.amount,
                    trans_category=line.category,
                    reference_table=line.reference_table,
                    reference_id=line.reference_id,
                )
                for line_no, line in enumerate(lines, start=1)
            ),
        )
        self._session.add(SalaryHeaderModel.from_dto(header, created_by_id=actor_id))
        try:
            self._session.flush()
        except IntegrityError as exc:
            raise DuplicatePayrollCalculationError(employee.employee_no, month.value) from exc
        return header

    # =========================================================================
    # Calculation
    # =========================================================================

    def calculate(
        self,
        employee_no: str,
        salary_month: str,
        actor_id: UUID = SYSTEM_ACTOR_ID,
        salary_type: SalaryType = SalaryType.REGULAR,
    ) -> PayrollResult:
        """
        Calculate version 1 of the payroll for (employee, month).

        Returns:
            ``PayrollResult`` carrying the new ``SalaryHeader``, or the
            ``BusinessRuleViolation`` (ineligible, duplicate) that refused it.

        Raises:
            InvalidMonthError: ``salary_month`` is not "YYYY-MM".
            EmployeeNotFoundError: Unknown employee.
        """
        extra = {"employee_no": employee_no, "salary_month": salary_month}
        with LogContext.bind(employee_no=employee_no, salary_month=salary_month):
            try:
                logger.info("payroll_calculation_started", extra=extra)
                month = parse_salary_month(salary_month)
                employee = self._require_employee(employee_no)
                self._check_eligibility(employee)

                existing = self._latest_row(employee_no, month.value)
                if existing is not None:
                    raise DuplicatePayrollCalculationError(
                        employee_no, month.value, existing.salary_version
                    )

                header = self._compute_and_persist(
                    employee,
                    month,
                    version=1,
                    salary_type=salary_type,
                    recalculation_reason=None,
                    actor_id=actor_id,
                )
                self._session.commit()

                logger.info(
                    "payroll_calculated",
                    extra={
                        **extra,
                        "salary_id": str(header.id),
                        "salary_version": header.salary_version,
                        "gross_salary": str(header.gross_salary),
                        "net_salary": str(header.net_salary),
                        "detail_lines": len(header.details),
                        "trans_status": header.trans_status.value,
                    },
                )
                return ServiceResult.ok(header)

            except BusinessRuleViolation as exc:
                return reject(self._session, logger, "payroll_calculation_rejected", exc, extra)
            except Exception:
                self._session.rollback()
                raise

    def recalculate(
        self,
        employee_no: str,
        salary_month: str,
        reason: str,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> PayrollResult:
        """
        Calculate version N+1 and supersede version N.

        Raises:
            SalaryHeaderNotFoundError: No version exists yet.
            StaleSalaryHeaderError: A concurrent recalculation superseded
                version N first.
        """
        extra = {"employee_no": employee_no, "salary_month": salary_month, "reason": reason}
        with LogContext.bind(employee_no=employee_no, salary_month=salary_month):
            try:
                logger.info("payroll_recalculation_started", extra=extra)
                month = parse_salary_month(salary_month)
                if not reason or not reason.strip():
                    raise RecalculationReasonRequiredError(employee_no, month.value)
                employee = self._require_employee(employee_no)
                self._check_eligibility(employee)

                current = self._latest_row(employee_no, month.value)
                if current is None:
                    raise SalaryHeaderNotFoundError(f"{employee_no}/{month.value}")
                previous_version = current.salary_version
                salary_type = SalaryType(current.salary_type)

                flipped = self._session.execute(
                    update(SalaryHeaderModel)
                    .where(
                        SalaryHeaderModel.id == current.id,
                        SalaryHeaderModel.is_latest == "Y",
                    )
                    .values(is_latest="N", updated_by_id=actor_id)
                    .execution_options(synchronize_session=False)
                )
                if flipped.rowcount != 1:
                    raise StaleSalaryHeaderError(str(current.id))
                self._session.flush()
                self._session.expire(current)

                header = self._compute_and_persist(
                    employee,
                    month,
                    version=previous_version + 1,
                    salary_type=salary_type,
                    recalculation_reason=reason.strip(),
                    actor_id=actor_id,
                )
                self._session.commit()

                logger.info(
                    "payroll_recalculated",
                    extra={
                        **extra,
                        "salary_id": str(header.id),
                        "previous_version": previous_version,
                        "salary_version": header.salary_version,
                        "net_salary": str(header.net_salary),
                    },
                )
                return ServiceResult.ok(header)

            except BusinessRuleViolation as exc:
                return reject(self._session, logger, "payroll_recalculation_rejected", exc, extra)
            except Exception:
                self._session.rollback()
                raise

    def calculate_for_all(
        self,
        salary_month: str,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> PayrollBatchResult:
        """Calculate every eligible employee; one failure never stops the batch."""
        month = parse_salary_month(salary_month)
        outcomes: list[EmployeePayrollOutcome] = []
        skipped: list[str] = []
        employees = self._employees.list_employees()
        logger.info(
            "payroll_batch_started",
            extra={"salary_month": month.value, "employees": len(employees)},
        )

        for employee in employees:
            if not self.is_eligible(employee):
                skipped.append(employee.employee_no)
                continue
            outcomes.append(self.calculate_outcome(employee.employee_no, month.value, actor_id))

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

    def calculate_outcome(
        self,
        employee_no: str,
        salary_month: str,
        actor_id: UUID,
    ) -> EmployeePayrollOutcome:
        try:
            result = self.calculate(employee_no, salary_month, actor_id=actor_id)
        except Exception as exc:
            logger.error(
                "payroll_batch_employee_failed",
                extra={"employee_no": employee_no, "salary_month": salary_month},
                exc_info=True,
            )
            return EmployeePayrollOutcome(
                employee_no=employee_no,
                succeeded=False,
                error_code=getattr(exc, "code", type(exc).__name__),
                reason=str(exc),
            )
        if result.is_success:
            return EmployeePayrollOutcome(
                employee_no=employee_no,
                succeeded=True,
                salary_id=result.value.id,
                net_salary=result.value.net_salary,
            )
        return EmployeePayrollOutcome(
            employee_no=employee_no,
            succeeded=False,
            error_code=result.error_code,
            reason=result.message,
        )

    # =========================================================================
    # Approval
    # =========================================================================

    def _pending_latest(self, salary_id: UUID) -> SalaryHeaderModel:
        row = self._session.get(SalaryHeaderModel, salary_id)
        if row is None:
            raise SalaryHeaderNotFoundError(str(salary_id))
        if row.trans_status != ApprovalStatus.PENDING.value or row.is_latest != "Y":
            raise InvalidApprovalStateError(str(salary_id), row.trans_status)
        return row

    def approve(
        self,
        salary_id: UUID,
        approver_id: str,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> PayrollResult:
        """Approve at the current level; the last level makes the header APPROVED."""
        extra = {"salary_id": str(salary_id), "approver_id": approver_id}
        try:
            row = self._pending_latest(salary_id)
            if not self._approvals.can_approve(row.next_approver_id, approver_id):
                raise ApproverNotAuthorizedError(str(salary_id), approver_id)

            decision = self._approvals.move_to_next_level(
                self._config.approval_request_type, row.next_approval_level
            )
            row.trans_status = decision.status.value
            row.next_approver_id = decision.next_approver_id
            row.next_approval_level = decision.next_level
            row.updated_by_id = actor_id
            if decision.status is ApprovalStatus.APPROVED:
                row.approved_by = approver_id
                row.approved_at = self._clock.now()
            self._session.commit()

            logger.info(
                "payroll_approval_recorded",
                extra={
                    **extra,
                    "employee_no": row.employee_no,
                    "salary_month": row.salary_month,
                    "trans_status": row.trans_status,
                    "next_level": row.next_approval_level,
                },
            )
            return ServiceResult.ok(row.to_dto())

        except BusinessRuleViolation as exc:
            return reject(self._session, logger, "payroll_approval_rejected", exc, extra)
        except Exception:
            self._session.rollback()
            raise

    def reject(
        self,
        salary_id: UUID,
        approver_id: str,
        reason: str,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> PayrollResult:
        """Reject the header; the chain stops."""
        extra = {"salary_id": str(salary_id), "approver_id": approver_id}
        try:
            if not reason or not reason.strip():
                raise RejectionReasonRequiredError(str(salary_id))
            row = self._pending_latest(salary_id)
            if not self._approvals.can_approve(row.next_approver_id, approver_id):
                raise ApproverNotAuthorizedError(str(salary_id), approver_id)

            decision = reject_chain()
            row.trans_status = decision.status.value
            row.next_approver_id = None
            row.next_approval_level = None
            row.rejection_reason = reason.strip()
            row.updated_by_id = actor_id
            self._session.commit()

            logger.info(
                "payroll_rejected",
                extra={
                    **extra,
                    "employee_no": row.employee_no,
                    "salary_month": row.salary_month,
                    "reason": row.rejection_reason,
                },
            )
            return ServiceResult.ok(row.to_dto())

        except BusinessRuleViolation as exc:
            return reject(self._session, logger, "payroll_rejection_refused", exc, extra)
        except Exception:
            self._session.rollback()
            raise

    # =========================================================================
    # Queries
    # =========================================================================

    def get_latest(self, employee_no: str, salary_month: str) -> SalaryHeader | None:
        month = parse_salary_month(salary_month)
        row = self._latest_row(employee_no, month.value)
        return row.to_dto() if row is not None else None

    def list_versions(self, employee_no: str, salary_month: str) -> list[SalaryHeader]:
        month = parse_salary_month(salary_month)
        rows = self._session.scalars(
            select(SalaryHeaderModel)
            .where(
                SalaryHeaderModel.employee_no == employee_no,
                SalaryHeaderModel.salary_month == month.value,
            )
            .order_by(SalaryHeaderModel.salary_version)
        ).all()
        return [row.to_dto() for row in rows]

    def get_header(self, salary_id: UUID) -> SalaryHeader:
        row = self._session.get(SalaryHeaderModel, salary_id)
        if row is None:
            raise SalaryHeaderNotFoundError(str(salary_id))
        return row.to_dto()
