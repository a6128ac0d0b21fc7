"""
Payroll Domain Models.

A salary header is one version of an employee's payroll for a month; its
detail lines are owned by index.  Only the latest version is
authoritative.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from workforce_engines.approval import ApprovalStatus
from workforce_engines.pay_lines import PayCategory
from workforce_kernel.domain.results import ServiceResult


class SalaryType(Enum):
    """Regular monthly payroll or final settlement; persisted as "W" / "F"."""

    REGULAR = "W"
    FINAL_SETTLEMENT = "F"


@dataclass(frozen=True)
class SalaryDetail:
    """One salary line."""

    line_no: int
    trans_type_code: int
    trans_amount: Decimal
    trans_category: PayCategory
    reference_table: str | None = None
    reference_id: str | None = None
    id: UUID | None = None


@dataclass(frozen=True)
class SalaryHeader:
    """A payroll version for (employee, month)."""

    id: UUID
    employee_no: str
    salary_month: str
    salary_version: int
    salary_type: SalaryType
    gross_salary: Decimal
    total_allowances: Decimal
    total_deductions: Decimal
    total_overtime: Decimal
    total_absence: Decimal
    total_loans: Decimal
    net_salary: Decimal
    trans_status: ApprovalStatus
    is_latest: bool
    calculation_date: date
    next_approver_id: str | None = None
    next_approval_level: int | None = None
    recalculation_reason: str | None = None
    rejection_reason: str | None = None
    approved_by: str | None = None
    approved_at: datetime | None = None
    details: tuple[SalaryDetail, ...] = field(default_factory=tuple)

    @property
    def is_approved(self) -> bool:
        return self.trans_status is ApprovalStatus.APPROVED


@dataclass(frozen=True)
class EmployeePayrollOutcome:
    """Per-employee result inside a batch run."""

    employee_no: str
    succeeded: bool
    salary_id: UUID | None = None
    net_salary: Decimal | None = None
    error_code: str | None = None
    reason: str | None = None


@dataclass(frozen=True)
class PayrollBatchResult:
    """Outcome of ``calculate_for_all``."""

    salary_month: str
    outcomes: tuple[EmployeePayrollOutcome, ...] = ()
    skipped: tuple[str, ...] = ()

    @property
    def succeeded(self) -> tuple[EmployeePayrollOutcome, ...]:
        return tuple(o for o in self.outcomes if o.succeeded)

    @property
    def failed(self) -> tuple[EmployeePayrollOutcome, ...]:
        return tuple(o for o in self.outcomes if not o.succeeded)


# Payroll outcome: a ``SalaryHeader``, or the business rule that refused it.
PayrollResult = ServiceResult
