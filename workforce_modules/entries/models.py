"""
Monthly Entry Domain Models.

Allowances and deductions that feed a salary month.  System-generated
entries are written by the attendance synchronizer and rewritten whenever
the underlying attendance record changes; manual entries belong to HR.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from workforce_engines.pay_lines import PayCategory, PayLine


class EntryStatus(Enum):
    """Lifecycle of a monthly entry; persisted as "N" / "A" / "S"."""

    PENDING = "N"
    ACTIVE = "A"
    SUPERSEDED = "S"


@dataclass(frozen=True)
class MonthlyEntry:
    """A monthly allowance or deduction line."""

    id: UUID
    employee_no: str
    trans_type_code: int
    amount: Decimal
    category: PayCategory
    effective_date: date
    end_date: date | None = None
    status: EntryStatus = EntryStatus.ACTIVE
    is_manual: bool = False
    attendance_id: UUID | None = None
    hours_basis: Decimal | None = None
    reason: str | None = None

    @property
    def is_recurring(self) -> bool:
        return self.is_manual and self.end_date is None

    def to_pay_line(self) -> PayLine:
        table = (
            "monthly_allowances"
            if self.category is PayCategory.ALLOWANCE
            else "monthly_deductions"
        )
        return PayLine(
            trans_type_code=self.trans_type_code,
            amount=self.amount,
            category=self.category,
            reference_table=table,
            reference_id=str(self.id),
        )
