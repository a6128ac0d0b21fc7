"""
Loan Ledger (``workforce_modules.loans.service``).

Responsibility
--------------
Selects the installments payroll must deduct for a salary month and
consumes them: each installment is marked paid and its loan balance is
decremented inside the payroll transaction.  Also creates loans with an
evenly split schedule and postpones installments.

Architecture position
---------------------
**Modules layer** -- flush-only collaborator (``BaseService``).  The payroll
service owns commit/rollback, so a consumed installment is durable only
together with the salary header that deducted it.

Invariants enforced
-------------------
* An installment becomes PAID exactly once: the UPDATE is conditional on
  ``payment_status != 'PAID'`` and its rowcount is checked.
* The balance decrement is a SQL expression, clamped at zero; a loan whose
  balance reaches zero is deactivated.

Failure modes
-------------
* ``InstallmentAlreadyPaidError`` -- a concurrent run consumed the same
  installment first.  The caller's transaction must roll back.
* ``LoanNotFoundError`` / ``InstallmentNotFoundError`` -- unknown reference.
"""

from __future__ import annotations

import calendar
from datetime import date
from decimal import ROUND_DOWN, Decimal
from uuid import UUID, uuid4

from sqlalchemy import case, select, update

from workforce_engines.proration import SalaryMonth
from workforce_kernel.db.types import ZERO_MONEY, round_money
from workforce_kernel.exceptions import (
    InstallmentAlreadyPaidError,
    InstallmentNotFoundError,
    LoanNotFoundError,
)
from workforce_kernel.logging_config import get_logger
from workforce_kernel.services.base import SYSTEM_ACTOR_ID, BaseService
from workforce_modules.loans.models import (
    ConsumedInstallment,
    InstallmentStatus,
    Loan,
    LoanInstallment,
)
from workforce_modules.loans.orm import LoanInstallmentModel, LoanModel

logger = get_logger("modules.loans.service")

_OPEN_STATUSES = (InstallmentStatus.UNPAID.value, InstallmentStatus.POSTPONED.value)


def _add_months(start: date, months: int) -> date:
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


class LoanLedger(BaseService):
    """Loan and installment persistence for payroll."""

    def create_loan(
        self,
        *,
        employee_no: str,
        loan_amount: Decimal,
        installment_count: int,
        first_due_date: date,
        actor_id: UUID = SYSTEM_ACTOR_ID,
        description: str | None = None,
    ) -> Loan:
        """Create a loan repaid in ``installment_count`` monthly installments.

        The amount is split evenly at 4 dp; the last installment absorbs the
        rounding remainder so the schedule sums to ``loan_amount``.
        """
        if loan_amount <= 0:
            raise ValueError(f"loan_amount must be positive, got {loan_amount}")
        if installment_count <= 0:
            raise ValueError(f"installment_count must be positive, got {installment_count}")

        loan_amount = round_money(loan_amount)
        base = round_money(loan_amount / installment_count, rounding=ROUND_DOWN)
        amounts = [base] * (installment_count - 1)
        amounts.append(loan_amount - base * (installment_count - 1))

        loan = Loan(
            id=uuid4(),
            employee_no=employee_no,
            loan_amount=loan_amount,
            remaining_balance=loan_amount,
            installment_amount=base,
            installment_count=installment_count,
            start_date=first_due_date,
            description=description,
        )
        orm_loan = LoanModel.from_dto(loan, created_by_id=actor_id)
        self.session.add(orm_loan)
        for seq, amount in enumerate(amounts, start=1):
            installment = LoanInstallment(
                id=uuid4(),
                loan_id=loan.id,
                employee_no=employee_no,
                sequence_no=seq,
                due_date=_add_months(first_due_date, seq - 1),
                amount=amount,
            )
            orm_loan.installments.append(
                LoanInstallmentModel.from_dto(installment, created_by_id=actor_id)
            )
        self.session.flush()

        logger.info(
            "loan_created",
            extra={
                "loan_id": str(loan.id),
                "employee_no": employee_no,
                "loan_amount": str(loan_amount),
                "installment_count": installment_count,
                "first_due_date": first_due_date.isoformat(),
            },
        )
        return loan

    def get_loan(self, loan_id: UUID) -> Loan:
        orm_loan = self.session.get(LoanModel, loan_id)
        if orm_loan is None:
            raise LoanNotFoundError(str(loan_id))
        return orm_loan.to_dto()

    def list_installments(self, loan_id: UUID) -> list[LoanInstallment]:
        rows = self.session.scalars(
            select(LoanInstallmentModel)
            .where(LoanInstallmentModel.loan_id == loan_id)
            .order_by(LoanInstallmentModel.sequence_no)
        ).all()
        return [row.to_dto() for row in rows]

    def find_due_installments(self, employee_no: str, month: SalaryMonth) -> list[LoanInstallment]:
        """Unpaid or postponed installments of active loans due within ``month``."""
        rows = self.session.scalars(
            select(LoanInstallmentModel)
            .join(LoanModel, LoanModel.id == LoanInstallmentModel.loan_id)
            .where(
                LoanInstallmentModel.employee_no == employee_no,
                LoanInstallmentModel.payment_status.in_(_OPEN_STATUSES),
                LoanInstallmentModel.due_date >= month.start,
                LoanInstallmentModel.due_date <= month.end,
                LoanModel.is_active.is_(True),
            )
            .order_by(LoanInstallmentModel.due_date, LoanInstallmentModel.sequence_no)
        ).all()
        return [row.to_dto() for row in rows]

    def installments_paid_for_month(self, employee_no: str, month: SalaryMonth) -> list[LoanInstallment]:
        """Installments already deducted by an earlier version of ``month``."""
        rows = self.session.scalars(
            select(LoanInstallmentModel)
            .where(
                LoanInstallmentModel.employee_no == employee_no,
                LoanInstallmentModel.payment_status == InstallmentStatus.PAID.value,
                LoanInstallmentModel.salary_month == month.value,
            )
            .order_by(LoanInstallmentModel.due_date, LoanInstallmentModel.sequence_no)
        ).all()
        return [row.to_dto() for row in rows]

    def consume_due_installments(
        self,
        employee_no: str,
        month: SalaryMonth,
        paid_on: date,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> list[ConsumedInstallment]:
        """Mark every due installment paid and decrement its loan balance.

        Flush-only; must run inside the payroll transaction.

        Raises:
            InstallmentAlreadyPaidError: Another transaction paid one of
                the installments after it was selected.
        """
        consumed: list[ConsumedInstallment] = []
        for installment in self.find_due_installments(employee_no, month):
            marked = self.session.execute(
                update(LoanInstallmentModel)
                .where(
                    LoanInstallmentModel.id == installment.id,
                    LoanInstallmentModel.payment_status != InstallmentStatus.PAID.value,
                )
                .values(
                    payment_status=InstallmentStatus.PAID.value,
                    paid_date=paid_on,
                    paid_amount=installment.amount,
                    salary_month=month.value,
                    updated_by_id=actor_id,
                )
                .execution_options(synchronize_session=False)
            )
            if marked.rowcount != 1:
                raise InstallmentAlreadyPaidError(str(installment.id))

            decremented = LoanModel.remaining_balance - installment.amount
            self.session.execute(
                update(LoanModel)
                .where(LoanModel.id == installment.loan_id)
                .values(
                    remaining_balance=case((decremented < 0, ZERO_MONEY), else_=decremented),
                    updated_by_id=actor_id,
                )
                .execution_options(synchronize_session=False)
            )
            balance = self.session.scalar(
                select(LoanModel.remaining_balance).where(LoanModel.id == installment.loan_id)
            )
            if balance is not None and balance <= 0:
                self.session.execute(
                    update(LoanModel)
                    .where(LoanModel.id == installment.loan_id)
                    .values(is_active=False)
                    .execution_options(synchronize_session=False)
                )
                logger.info(
                    "loan_fully_repaid",
                    extra={"loan_id": str(installment.loan_id), "employee_no": employee_no},
                )

            consumed.append(
                ConsumedInstallment(
                    installment_id=installment.id,
                    loan_id=installment.loan_id,
                    amount=installment.amount,
                    due_date=installment.due_date,
                    remaining_balance=round_money(balance if balance is not None else ZERO_MONEY),
                )
            )

        self.session.flush()
        self.session.expire_all()
        if consumed:
            logger.info(
                "loan_installments_consumed",
                extra={
                    "employee_no": employee_no,
                    "salary_month": month.value,
                    "count": len(consumed),
                    "total": str(sum((c.amount for c in consumed), ZERO_MONEY)),
                },
            )
        return consumed

    def postpone_installment(
        self,
        installment_id: UUID,
        new_due_date: date,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> LoanInstallment:
        """Move an unpaid installment to ``new_due_date``."""
        row = self.session.get(LoanInstallmentModel, installment_id)
        if row is None:
            raise InstallmentNotFoundError(str(installment_id))
        if row.payment_status == InstallmentStatus.PAID.value:
            raise InstallmentAlreadyPaidError(str(installment_id))

        old_due = row.due_date
        row.due_date = new_due_date
        row.payment_status = InstallmentStatus.POSTPONED.value
        row.updated_by_id = actor_id
        self.session.flush()

        logger.info(
            "loan_installment_postponed",
            extra={
                "installment_id": str(installment_id),
                "old_due_date": old_due.isoformat(),
                "new_due_date": new_due_date.isoformat(),
            },
        )
        return row.to_dto()
