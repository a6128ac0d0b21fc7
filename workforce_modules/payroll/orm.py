"""
Payroll ORM Persistence Models (``workforce_modules.payroll.orm``).

Responsibility:
    SQLAlchemy ORM models that persist salary headers, their detail lines
    and the per-category salary breakdown percentages.

Architecture position:
    **Modules layer** -- persistence companions to
    ``workforce_modules.payroll.models``.  Inherits ``TrackedBase``.

Invariants enforced:
    - All monetary fields are Numeric(18, 4) -- NEVER float.
    - At most one ``is_latest = 'Y'`` header per (employee_no,
      salary_month): partial unique index ``uq_salary_header_latest``
      (PostgreSQL and SQLite).  This is the serialization point for
      concurrent payroll calculations.
    - ``(employee_no, salary_month, salary_version)`` is unique.
    - ``trans_status`` stores "N" / "A" / "R"; ``trans_category`` stores
      "A" / "D".  Enum conversion happens only in ``to_dto()`` /
      ``from_dto()``.

Audit relevance:
    Superseded versions are never deleted; the version chain with its
    recalculation reasons is the payroll audit trail.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce_kernel.db.base import TrackedBase

# ---------------------------------------------------------------------------
# SalaryHeaderModel
# ---------------------------------------------------------------------------

class SalaryHeaderModel(TrackedBase):
    """
    ORM model for ``SalaryHeader``.

    Contract:
        Versions for an (employee, month) start at 1 and increase by 1.
        Recalculation flips the prior version's ``is_latest`` to "N" before
        the new version is inserted.
    """

    __tablename__ = "salary_headers"

    employee_no: Mapped[str] = mapped_column(String(50), nullable=False)
    salary_month: Mapped[str] = mapped_column(String(7), nullable=False)
    salary_version: Mapped[int] = mapped_column(nullable=False)
    salary_type: Mapped[str] = mapped_column(String(1), default="W", nullable=False)
    calculation_date: Mapped[date] = mapped_column(Date, nullable=False)

    gross_salary: Mapped[Decimal] = mapped_column(Numeric(18, 4), nullable=False)
    total_allowances: Mapped[Decimal] = mapped_column(Numeric(18, 4), nullable=False)
    total_deductions: Mapped[Decimal] = mapped_column(Numeric(18, 4), nullable=False)
    total_overtime: Mapped[Decimal] = mapped_column(Numeric(18, 4), nullable=False)
    total_absence: Mapped[Decimal] = mapped_column(Numeric(18, 4), nullable=False)
    total_loans: Mapped[Decimal] = mapped_column(Numeric(18, 4), nullable=False)
    net_salary: Mapped[Decimal] = mapped_column(Numeric(18, 4), nullable=False)

    trans_status: Mapped[str] = mapped_column(String(1), default="N", nullable=False)
    is_latest: Mapped[str] = mapped_column(String(1), default="Y", nullable=False)
    next_approver_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    next_approval_level: Mapped[int | None] = mapped_column(nullable=True)
    recalculation_reason: Mapped[str | None] = mapped_column(String(4000), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(String(4000), nullable=True)
    approved_by: Mapped[str | None] = mapped_column(String(50), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)

    details: Mapped[list["SalaryDetailModel"]] = relationship(
        back_populates="header",
        order_by="SalaryDetailModel.line_no",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint(
            "employee_no", "salary_month", "salary_version",
            name="uq_salary_header_version",
        ),
        Index(
            "uq_salary_header_latest",
            "employee_no",
            "salary_month",
            unique=True,
            sqlite_where=text("is_latest = 'Y'"),
            postgresql_where=text("is_latest = 'Y'"),
        ),
        Index("idx_salary_header_month_status", "salary_month", "trans_status"),
    )

    def to_dto(self):
        from workforce_engines.approval import ApprovalStatus
        from workforce_modules.payroll.models import SalaryHeader, SalaryType

        return SalaryHeader(
            id=self.id,
            employee_no=self.employee_no,
            salary_month=self.salary_month,
            salary_version=self.salary_version,
            salary_type=SalaryType(self.salary_type),
            gross_salary=self.gross_salary,
            total_allowances=self.total_allowances,
            total_deductions=self.total_deductions,
            total_overtime=self.total_overtime,
            total_absence=self.total_absence,
            total_loans=self.total_loans,
            net_salary=self.net_salary,
            trans_status=ApprovalStatus(self.trans_status),
            is_latest=self.is_latest == "Y",
            calculation_date=self.calculation_date,
            next_approver_id=self.next_approver_id,
            next_approval_level=self.next_approval_level,
            recalculation_reason=self.recalculation_reason,
            rejection_reason=self.rejection_reason,
            approved_by=self.approved_by,
            approved_at=self.approved_at,
            details=tuple(d.to_dto() for d in self.details),
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "SalaryHeaderModel":
        header = cls(
            id=dto.id,
            employee_no=dto.employee_no,
            salary_month=dto.salary_month,
            salary_version=dto.salary_version,
            salary_type=dto.salary_type.value if hasattr(dto.salary_type, "value") else dto.salary_type,
            calculation_date=dto.calculation_date,
            gross_salary=dto.gross_salary,
            total_allowances=dto.total_allowances,
            total_deductions=dto.total_deductions,
            total_overtime=dto.total_overtime,
            total_absence=dto.total_absence,
            total_loans=dto.total_loans,
            net_salary=dto.net_salary,
            trans_status=dto.trans_status.value if hasattr(dto.trans_status, "value") else dto.trans_status,
            is_latest="Y" if dto.is_latest else "N",
            next_approver_id=dto.next_approver_id,
            next_approval_level=dto.next_approval_level,
            recalculation_reason=dto.recalculation_reason,
            rejection_reason=dto.rejection_reason,
            approved_by=dto.approved_by,
            approved_at=dto.approved_at,
            created_by_id=created_by_id,
        )
        header.details = [
            SalaryDetailModel.from_dto(d, created_by_id=created_by_id) for d in dto.details
        ]
        return header

    def __repr__(self) -> str:
        return (
            f"<SalaryHeaderModel {self.employee_no} {self.salary_month} "
            f"v{self.salary_version} net={self.net_salary} "
            f"[{self.trans_status}, latest={self.is_latest}]>"
        )


# ---------------------------------------------------------------------------
# SalaryDetailModel
# ---------------------------------------------------------------------------

class SalaryDetailModel(TrackedBase):
    """
    ORM model for ``SalaryDetail`` -- a header-owned line item.

    Contract:
        Σ allowance lines − Σ deduction lines equals the header's
        ``net_salary`` within 0.0001.
    """

    __tablename__ = "salary_details"

    salary_id: Mapped[UUID] = mapped_column(ForeignKey("salary_headers.id"), nullable=False)
    line_no: Mapped[int] = mapped_column(nullable=False)
    trans_type_code: Mapped[int] = mapped_column(nullable=False)
    trans_amount: Mapped[Decimal] = mapped_column(Numeric(18, 4), nullable=False)
    trans_category: Mapped[str] = mapped_column(String(1), nullable=False)
    reference_table: Mapped[str | None] = mapped_column(String(100), nullable=True)
    reference_id: Mapped[str | None] = mapped_column(String(50), nullable=True)

    header: Mapped[SalaryHeaderModel] = relationship(back_populates="details")

    __table_args__ = (
        UniqueConstraint("salary_id", "line_no", name="uq_salary_detail_line"),
    )

    def to_dto(self):
        from workforce_engines.pay_lines import PayCategory
        from workforce_modules.payroll.models import SalaryDetail

        return SalaryDetail(
            id=self.id,
            line_no=self.line_no,
            trans_type_code=self.trans_type_code,
            trans_amount=self.trans_amount,
            trans_category=PayCategory(self.trans_category),
            reference_table=self.reference_table,
            reference_id=self.reference_id,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "SalaryDetailModel":
        kwargs = {}
        if dto.id is not None:
            kwargs["id"] = dto.id
        return cls(
            line_no=dto.line_no,
            trans_type_code=dto.trans_type_code,
            trans_amount=dto.trans_amount,
            trans_category=(
                dto.trans_category.value
                if hasattr(dto.trans_category, "value")
                else dto.trans_category
            ),
            reference_table=dto.reference_table,
            reference_id=dto.reference_id,
            created_by_id=created_by_id,
            **kwargs,
        )

    def __repr__(self) -> str:
        return (
            f"<SalaryDetailModel #{self.line_no} type={self.trans_type_code} "
            f"{self.trans_category} {self.trans_amount}>"
        )


# ---------------------------------------------------------------------------
# SalaryBreakdownPercentageModel
# ---------------------------------------------------------------------------

class SalaryBreakdownPercentageModel(TrackedBase):
    """
    ORM model for a salary breakdown row: the fraction of gross paid under
    ``trans_type_code`` for employees of ``employee_category``.

    Contract:
        Percentages for a category are expected, not enforced, to sum to 1.
    """

    __tablename__ = "salary_breakdown_percentages"

    employee_category: Mapped[str] = mapped_column(String(50), nullable=False)
    trans_type_code: Mapped[int] = mapped_column(nullable=False)
    salary_percentage: Mapped[Decimal] = mapped_column(Numeric(9, 6), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "employee_category", "trans_type_code",
            name="uq_breakdown_category_type",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<SalaryBreakdownPercentageModel {self.employee_category} "
            f"type={self.trans_type_code} {self.salary_percentage}>"
        )
