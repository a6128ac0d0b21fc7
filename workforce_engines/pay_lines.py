"""
Pay lines and header totals (``workforce_engines.pay_lines``).

Responsibility
--------------
Fixed transaction-type codes, the allowance/deduction line value object and
the totals roll-up that every salary header is derived from.

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O.

Invariants enforced
-------------------
* ``net = total_allowances - total_deductions`` exactly (all amounts are
  already 4 dp, so the sum is exact).
* Overtime, absence and loan totals are sub-totals of allowances /
  deductions selected by transaction-type code.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, IntEnum

from workforce_kernel.db.types import ZERO_MONEY, round_money


class TransactionType(IntEnum):
    """Fixed salary transaction-type codes."""

    BASIC_SALARY = 1
    OVERTIME = 9
    LATE_ARRIVAL = 20
    ABSENCE = 21
    EARLY_DEPARTURE = 22
    SHORTAGE = 23
    UNPAID_LEAVE = 24
    LOAN_INSTALLMENT = 30


ABSENCE_TYPES = frozenset({
    TransactionType.LATE_ARRIVAL,
    TransactionType.ABSENCE,
    TransactionType.EARLY_DEPARTURE,
    TransactionType.SHORTAGE,
    TransactionType.UNPAID_LEAVE,
})


class PayCategory(Enum):
    """Allowance or deduction; persisted as "A" / "D"."""

    ALLOWANCE = "A"
    DEDUCTION = "D"


@dataclass(frozen=True)
class PayLine:
    """One salary detail line before persistence."""

    trans_type_code: int
    amount: Decimal
    category: PayCategory
    reference_table: str | None = None
    reference_id: str | None = None

    def __post_init__(self):
        if self.amount < 0:
            raise ValueError(f"Pay line amount cannot be negative: {self.amount}")


@dataclass(frozen=True)
class PayrollTotals:
    gross_salary: Decimal
    total_allowances: Decimal
    total_deductions: Decimal
    total_overtime: Decimal
    total_absence: Decimal
    total_loans: Decimal
    net_salary: Decimal


def compute_totals(gross_salary: Decimal, lines: Iterable[PayLine]) -> PayrollTotals:
    """Roll lines up into header totals.

    Postconditions:
        ``net_salary == total_allowances - total_deductions``; may be negative.
    """
    allowances = deductions = overtime = absence = loans = ZERO_MONEY
    for line in lines:
        if line.category is PayCategory.ALLOWANCE:
            allowances += line.amount
            if line.trans_type_code == TransactionType.OVERTIME:
                overtime += line.amount
        else:
            deductions += line.amount
            if line.trans_type_code in ABSENCE_TYPES:
                absence += line.amount
            elif line.trans_type_code == TransactionType.LOAN_INSTALLMENT:
                loans += line.amount

    return PayrollTotals(
        gross_salary=round_money(gross_salary),
        total_allowances=round_money(allowances),
        total_deductions=round_money(deductions),
        total_overtime=round_money(overtime),
        total_absence=round_money(absence),
        total_loans=round_money(loans),
        net_salary=round_money(allowances - deductions),
    )
