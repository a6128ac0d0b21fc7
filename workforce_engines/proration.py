"""
Payroll Proration Engine (``workforce_engines.proration``).

Responsibility
--------------
Month parsing, active-day counting, prorated gross salary and expansion of
the gross into per-category breakdown lines.

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O, ZERO clock reads.

Invariants enforced
-------------------
* Proration uses a flat 30-day divisor regardless of month length.
* Prorated gross and breakdown lines are 4 dp HALF_UP.
* An employee employed for the whole month receives exactly the monthly
  salary, even in a 31-day month.

Failure modes
-------------
* ``InvalidMonthError`` for a salary month not in YYYY-MM form.
* ``ValueError`` for a non-positive divisor (programming error).
"""

from __future__ import annotations

import calendar
import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from workforce_engines.pay_lines import PayCategory, PayLine, TransactionType
from workforce_engines.tracer import traced_engine
from workforce_kernel.db.types import ZERO_MONEY, round_money
from workforce_kernel.exceptions import InvalidMonthError

PRORATION_DIVISOR = 30

_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True)
class SalaryMonth:
    """A salary month with its first and last calendar day."""

    value: str
    start: date
    end: date

    @property
    def mid_month(self) -> date:
        return self.start.replace(day=15)


@dataclass(frozen=True)
class BreakdownRow:
    """Fraction of gross paid under a transaction type for a category."""

    trans_type_code: int
    percentage: Decimal


def parse_salary_month(value: str) -> SalaryMonth:
    """Parse "YYYY-MM" into its calendar bounds."""
    match = _MONTH_PATTERN.match(value or "")
    if match is None:
        raise InvalidMonthError(value)
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise InvalidMonthError(value)
    last_day = calendar.monthrange(year, month)[1]
    return SalaryMonth(value=value, start=date(year, month, 1), end=date(year, month, last_day))


def count_active_days(
    month: SalaryMonth,
    hire_date: date | None,
    termination_date: date | None,
) -> int:
    """Days in ``month`` between hire and termination, inclusive, clamped at 0."""
    if hire_date is not None and hire_date > month.end:
        return 0
    if termination_date is not None and termination_date < month.start:
        return 0
    if hire_date is not None and termination_date is not None and termination_date < hire_date:
        return 0
    start = max(month.start, hire_date) if hire_date is not None else month.start
    end = min(month.end, termination_date) if termination_date is not None else month.end
    return max(0, (end - start).days + 1)


@traced_engine(
    "payroll_proration",
    "1.0",
    fingerprint_fields=("monthly_salary", "salary_month", "hire_date", "termination_date"),
)
def prorate_salary(
    *,
    monthly_salary: Decimal,
    salary_month: SalaryMonth,
    hire_date: date | None,
    termination_date: date | None,
    divisor: int = PRORATION_DIVISOR,
) -> Decimal:
    """Monthly salary scaled by active days / ``divisor``.

    Returns:
        Full ``monthly_salary`` for a whole month, zero when the employee was
        not employed at all during the month, else
        ``monthly_salary * active_days / divisor`` at 4 dp.
    """
    if divisor <= 0:
        raise ValueError(f"divisor must be positive, got {divisor}")

    days = count_active_days(salary_month, hire_date, termination_date)
    if days == 0:
        return ZERO_MONEY

    hired_before = hire_date is None or hire_date <= salary_month.start
    still_employed = termination_date is None or termination_date >= salary_month.end
    if hired_before and still_employed:
        return round_money(monthly_salary)

    return round_money(monthly_salary * Decimal(days) / Decimal(divisor))


def expand_breakdown(
    gross_salary: Decimal,
    rows: Sequence[BreakdownRow],
) -> list[PayLine]:
    """Split gross into allowance lines, one per breakdown row.

    With no rows the whole gross becomes a single basic-salary line.
    Percentages are not required to sum to 1.
    """
    if not rows:
        return [
            PayLine(
                trans_type_code=int(TransactionType.BASIC_SALARY),
                amount=round_money(gross_salary),
                category=PayCategory.ALLOWANCE,
            )
        ]
    return [
        PayLine(
            trans_type_code=row.trans_type_code,
            amount=round_money(gross_salary * row.percentage),
            category=PayCategory.ALLOWANCE,
            reference_table="salary_breakdown_percentages",
        )
        for row in rows
    ]
