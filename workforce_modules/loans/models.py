"""
Loan Domain Models.

An employee loan is repaid through installments that payroll deducts in
their due month.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID


class InstallmentStatus(Enum):
    UNPAID = "UNPAID"
    PAID = "PAID"
    POSTPONED = "POSTPONED"


@dataclass(frozen=True)
class Loan:
    """An employee loan."""

    id: UUID
    employee_no: str
    loan_amount: Decimal
    remaining_balance: Decimal
    installment_amount: Decimal
    installment_count: int
    start_date: date
    is_active: bool = True
    description: str | None = None


@dataclass(frozen=True)
class LoanInstallment:
    """One scheduled repayment."""

    id: UUID
    loan_id: UUID
    employee_no: str
    sequence_no: int
    due_date: date
    amount: Decimal
    payment_status: InstallmentStatus = InstallmentStatus.UNPAID
    paid_date: date | None = None
    paid_amount: Decimal | None = None
    salary_month: str | None = None

    @property
    def is_paid(self) -> bool:
        return self.payment_status is InstallmentStatus.PAID


@dataclass(frozen=True)
class ConsumedInstallment:
    """An installment marked paid by a payroll run."""

    installment_id: UUID
    loan_id: UUID
    amount: Decimal
    due_date: date
    remaining_balance: Decimal
