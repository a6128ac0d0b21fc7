"""
Monthly Entry ORM Persistence Models (``workforce_modules.entries.orm``).

Responsibility:
    SQLAlchemy ORM models for ``monthly_allowances`` and
    ``monthly_deductions``.  Both tables share one column layout; the
    category is implied by the table.

Architecture position:
    **Modules layer** -- persistence companion to
    ``workforce_modules.entries.models``.  Inherits ``TrackedBase``.

Invariants enforced:
    - ``amount`` is Numeric(18, 4) money, never float.
    - ``status`` stores the ``EntryStatus`` value ("N", "A", "S").
    - System-generated rows carry the attendance record they came from in
      ``attendance_id``; manual rows leave it NULL.
"""

from datetime import date
from decimal import Decimal
from typing import ClassVar
from uuid import UUID

from sqlalchemy import Boolean, Date, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from workforce_engines.pay_lines import PayCategory
from workforce_kernel.db.base import TrackedBase, UUIDString


class _MonthlyEntryColumns:
    """Columns shared by allowances and deductions."""

    employee_no: Mapped[str] = mapped_column(String(50), nullable=False)
    trans_type_code: Mapped[int] = mapped_column(nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 4), nullable=False)
    effective_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(1), nullable=False, default="A")
    is_manual: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    attendance_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)
    hours_basis: Mapped[Decimal | None] = mapped_column(Numeric(9, 2), nullable=True)
    reason: Mapped[str | None] = mapped_column(String(4000), nullable=True)

    CATEGORY: ClassVar[PayCategory]

    def to_dto(self):
        from workforce_modules.entries.models import EntryStatus, MonthlyEntry

        return MonthlyEntry(
            id=self.id,
            employee_no=self.employee_no,
            trans_type_code=self.trans_type_code,
            amount=self.amount,
            category=self.CATEGORY,
            effective_date=self.effective_date,
            end_date=self.end_date,
            status=EntryStatus(self.status),
            is_manual=self.is_manual,
            attendance_id=self.attendance_id,
            hours_basis=self.hours_basis,
            reason=self.reason,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID):
        return cls(
            id=dto.id,
            employee_no=dto.employee_no,
            trans_type_code=dto.trans_type_code,
            amount=dto.amount,
            effective_date=dto.effective_date,
            end_date=dto.end_date,
            status=dto.status.value if hasattr(dto.status, "value") else dto.status,
            is_manual=dto.is_manual,
            attendance_id=dto.attendance_id,
            hours_basis=dto.hours_basis,
            reason=dto.reason,
            created_by_id=created_by_id,
        )


# ---------------------------------------------------------------------------
# MonthlyAllowanceModel
# ---------------------------------------------------------------------------

class MonthlyAllowanceModel(_MonthlyEntryColumns, TrackedBase):
    """
    ORM model for an allowance line (overtime, manual bonuses, ...).

    Guarantees:
        - Read by payroll when ``status == "A"`` and the entry's date range
          overlaps the salary month.
    """

    __tablename__ = "monthly_allowances"

    CATEGORY: ClassVar[PayCategory] = PayCategory.ALLOWANCE

    __table_args__ = (
        Index("idx_monthly_allowance_employee_date", "employee_no", "effective_date"),
        Index("idx_monthly_allowance_status", "status"),
        Index("idx_monthly_allowance_attendance", "attendance_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<MonthlyAllowanceModel {self.employee_no} "
            f"type={self.trans_type_code} {self.amount} [{self.status}]>"
        )


# ---------------------------------------------------------------------------
# MonthlyDeductionModel
# ---------------------------------------------------------------------------

class MonthlyDeductionModel(_MonthlyEntryColumns, TrackedBase):
    """
    ORM model for a deduction line (lateness, absence, manual penalties, ...).
    """

    __tablename__ = "monthly_deductions"

    CATEGORY: ClassVar[PayCategory] = PayCategory.DEDUCTION

    __table_args__ = (
        Index("idx_monthly_deduction_employee_date", "employee_no", "effective_date"),
        Index("idx_monthly_deduction_status", "status"),
        Index("idx_monthly_deduction_attendance", "attendance_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<MonthlyDeductionModel {self.employee_no} "
            f"type={self.trans_type_code} {self.amount} [{self.status}]>"
        )


def model_for(category: PayCategory) -> type[MonthlyAllowanceModel] | type[MonthlyDeductionModel]:
    """ORM class that stores entries of ``category``."""
    if category is PayCategory.ALLOWANCE:
        return MonthlyAllowanceModel
    return MonthlyDeductionModel
