"""
Loan ORM Persistence Models (``workforce_modules.loans.orm``).

Responsibility:
    SQLAlchemy ORM models for ``loans`` and ``loan_installments`` with
    ``to_dto()`` / ``from_dto()`` conversion.

Architecture position:
    **Modules layer** -- persistence companion to
    ``workforce_modules.loans.models``.  Inherits ``TrackedBase``.

Invariants enforced:
    - ``remaining_balance`` never goes below zero (CHECK constraint and
      clamped decrement in ``LoanLedger``).
    - ``(loan_id, sequence_no)`` is unique.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce_kernel.db.base import TrackedBase

# ---------------------------------------------------------------------------
# LoanModel
# ---------------------------------------------------------------------------

class LoanModel(TrackedBase):
    """
    ORM model for ``Loan``.

    Contract:
        ``remaining_balance`` starts at ``loan_amount`` and is decremented
        only by ``LoanLedger.consume_due_installments``.  A loan whose
        balance reaches zero is deactivated.
    """

    __tablename__ = "loans"

    employee_no: Mapped[str] = mapped_column(String(50), nullable=False)
    loan_amount: Mapped[Decimal] = mapped_column(Numeric(18, 4), nullable=False)
    remaining_balance: Mapped[Decimal] = mapped_column(Numeric(18, 4), nullable=False)
    installment_amount: Mapped[Decimal] = mapped_column(Numeric(18, 4), nullable=False)
    installment_count: Mapped[int] = mapped_column(nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    description: Mapped[str | None] = mapped_column(String(4000), nullable=True)

    installments: Mapped[list["LoanInstallmentModel"]] = relationship(
        back_populates="loan",
        order_by="LoanInstallmentModel.sequence_no",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint("remaining_balance >= 0", name="ck_loan_balance_non_negative"),
        Index("idx_loan_employee_active", "employee_no", "is_active"),
    )

    def to_dto(self):
        from workforce_modules.loans.models import Loan

        return Loan(
            id=self.id,
            employee_no=self.employee_no,
            loan_amount=self.loan_amount,
            remaining_balance=self.remaining_balance,
            installment_amount=self.installment_amount,
            installment_count=self.installment_count,
            start_date=self.start_date,
            is_active=self.is_active,
            description=self.description,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "LoanModel":
        return cls(
            id=dto.id,
            employee_no=dto.employee_no,
            loan_amount=dto.loan_amount,
            remaining_balance=dto.remaining_balance,
            installment_amount=dto.installment_amount,
            installment_count=dto.installment_count,
            start_date=dto.start_date,
            is_active=dto.is_active,
            description=dto.description,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return (
            f"<LoanModel {self.employee_no}: {self.loan_amount} "
            f"remaining={self.remaining_balance}>"
        )


# ---------------------------------------------------------------------------
# LoanInstallmentModel
# ---------------------------------------------------------------------------

class LoanInstallmentModel(TrackedBase):
    """
    ORM model for ``LoanInstallment``.

    Contract:
        Transitions to PAID exactly once, through a conditional UPDATE in
        the same transaction as the salary header that consumed it.
    """

    __tablename__ = "loan_installments"

    loan_id: Mapped[UUID] = mapped_column(ForeignKey("loans.id"), nullable=False)
    employee_no: Mapped[str] = mapped_column(String(50), nullable=False)
    sequence_no: Mapped[int] = mapped_column(nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 4), nullable=False)
    payment_status: Mapped[str] = mapped_column(String(20), default="UNPAID", nullable=False)
    paid_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    paid_amount: Mapped[Decimal | None] = mapped_column(Numeric(18, 4), nullable=True)
    salary_month: Mapped[str | None] = mapped_column(String(7), nullable=True)

    loan: Mapped[LoanModel] = relationship(back_populates="installments")

    __table_args__ = (
        UniqueConstraint("loan_id", "sequence_no", name="uq_loan_installment_sequence"),
        Index("idx_installment_employee_due", "employee_no", "due_date"),
        Index("idx_installment_status", "payment_status"),
    )

    def to_dto(self):
        from workforce_modules.loans.models import InstallmentStatus, LoanInstallment

        return LoanInstallment(
            id=self.id,
            loan_id=self.loan_id,
            employee_no=self.employee_no,
            sequence_no=self.sequence_no,
            due_date=self.due_date,
            amount=self.amount,
            payment_status=InstallmentStatus(self.payment_status),
            paid_date=self.paid_date,
            paid_amount=self.paid_amount,
            salary_month=self.salary_month,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "LoanInstallmentModel":
        return cls(
            id=dto.id,
            loan_id=dto.loan_id,
            employee_no=dto.employee_no,
            sequence_no=dto.sequence_no,
            due_date=dto.due_date,
            amount=dto.amount,
            payment_status=(
                dto.payment_status.value
                if hasattr(dto.payment_status, "value")
                else dto.payment_status
            ),
            paid_date=dto.paid_date,
            paid_amount=dto.paid_amount,
            salary_month=dto.salary_month,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return (
            f"<LoanInstallmentModel #{self.sequence_no} {self.due_date} "
            f"{self.amount} [{self.payment_status}]>"
        )
