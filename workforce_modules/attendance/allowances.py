"""
Allowance/Deduction Synchronizer (``workforce_modules.attendance.allowances``).

Responsibility
--------------
Turns a closed (or absent) attendance record into system-generated monthly
entries: at most one overtime allowance and zero or more deductions for
lateness, early departure, shortage and absence.

Architecture position
---------------------
**Modules layer** -- flush-only collaborator called by ``AttendanceService``
inside its transaction.

Invariants enforced
-------------------
* Only system-generated entries for the record's date are superseded;
  manual entries are never touched.
* Re-running for an unchanged record writes nothing.
* Amounts are money at 4 dp: hours x hourly rate, where the hourly rate is
  ``monthly_salary / rate_divisor_days / scheduled_hours``.  An absence
  deducts one daily rate.
* Shortage is charged only for hours not already deducted as lateness or
  early departure.

Non-goals
---------
Payroll recalculation after an approved month is the caller's concern.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from workforce_engines.pay_lines import PayCategory, TransactionType
from workforce_kernel.db.types import ZERO_HOURS, round_money
from workforce_kernel.exceptions import EmployeeNotFoundError
from workforce_kernel.logging_config import get_logger
from workforce_kernel.services.base import SYSTEM_ACTOR_ID, BaseService
from workforce_modules.attendance.config import AttendanceConfig
from workforce_modules.attendance.models import AttendanceRecord, AttendanceState
from workforce_modules.directory import EmployeeDirectory
from workforce_modules.entries.models import MonthlyEntry
from workforce_modules.entries.service import MonthlyEntryService

logger = get_logger("modules.attendance.allowances")


@dataclass(frozen=True)
class _DesiredLine:
    category: PayCategory
    trans_type_code: int
    amount: Decimal
    hours_basis: Decimal | None
    reason: str


@dataclass(frozen=True)
class SyncOutcome:
    employee_no: str
    attendance_date: date
    created: tuple[MonthlyEntry, ...] = ()
    superseded: int = 0
    unchanged: bool = False


class AllowanceDeductionSynchronizer(BaseService):
    """Keeps system-generated monthly entries in step with attendance."""

    def __init__(
        self,
        session: Session,
        employees: EmployeeDirectory,
        config: AttendanceConfig | None = None,
    ):
        super().__init__(session)
        self._employees = employees
        self._config = config or AttendanceConfig.with_defaults()
        self._entries = MonthlyEntryService(session)

    # ------------------------------------------------------------------
    # Rates
    # ------------------------------------------------------------------

    def _daily_rate(self, monthly_salary: Decimal) -> Decimal:
        return monthly_salary / Decimal(self._config.rate_divisor_days)

    def _hourly_rate(self, monthly_salary: Decimal, scheduled_hours: Decimal | None) -> Decimal:
        hours = scheduled_hours if scheduled_hours and scheduled_hours > 0 else None
        if hours is None:
            hours = self._config.fallback_daily_hours
        return self._daily_rate(monthly_salary) / hours

    def _desired_lines(self, record: AttendanceRecord) -> list[_DesiredLine]:
        employee = self._employees.get(record.employee_no)
        if employee is None:
            raise EmployeeNotFoundError(record.employee_no)

        if record.state is AttendanceState.ABSENT:
            return [
                _DesiredLine(
                    category=PayCategory.DEDUCTION,
                    trans_type_code=int(TransactionType.ABSENCE),
                    amount=round_money(self._daily_rate(employee.monthly_salary)),
                    hours_basis=record.scheduled_hours,
                    reason=record.absence_reason or "absence",
                )
            ]
        if record.state is not AttendanceState.CLOSED:
            return []

        rate = self._hourly_rate(employee.monthly_salary, record.scheduled_hours)
        delay = record.delayed_calc or ZERO_HOURS
        early_out = record.early_out_calc or ZERO_HOURS
        shortage = (record.shortage_hours or ZERO_HOURS) - delay - early_out

        lines: list[_DesiredLine] = []
        candidates = (
            (PayCategory.ALLOWANCE, TransactionType.OVERTIME, record.overtime_calc, "overtime"),
            (PayCategory.DEDUCTION, TransactionType.LATE_ARRIVAL, delay, "late arrival"),
            (PayCategory.DEDUCTION, TransactionType.EARLY_DEPARTURE, early_out, "early departure"),
            (PayCategory.DEDUCTION, TransactionType.SHORTAGE, shortage, "shortage"),
        )
        for category, trans_type, hours, reason in candidates:
            if hours is None or hours <= 0:
                continue
            amount = round_money(rate * hours)
            if amount <= 0:
                continue
            lines.append(
                _DesiredLine(
                    category=category,
                    trans_type_code=int(trans_type),
                    amount=amount,
                    hours_basis=hours,
                    reason=reason,
                )
            )
        return lines

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def synchronize(self, record: AttendanceRecord, actor_id: UUID = SYSTEM_ACTOR_ID) -> SyncOutcome:
        """Rewrite the system entries for ``record``'s employee and date."""
        desired = self._desired_lines(record)
        existing = self._entries.active_system_entries(record.employee_no, record.attendance_date)

        wanted = Counter((d.category, d.trans_type_code, d.amount) for d in desired)
        present = Counter((row.CATEGORY, row.trans_type_code, row.amount) for row in existing)
        if wanted == present:
            logger.debug(
                "attendance_entries_unchanged",
                extra={
                    "employee_no": record.employee_no,
                    "attendance_date": record.attendance_date.isoformat(),
                    "entries": len(existing),
                },
            )
            return SyncOutcome(
                employee_no=record.employee_no,
                attendance_date=record.attendance_date,
                unchanged=True,
            )

        superseded = self._entries.supersede(existing, actor_id=actor_id)
        created = tuple(
            self._entries.add_entry(
                employee_no=record.employee_no,
                trans_type_code=line.trans_type_code,
                amount=line.amount,
                category=line.category,
                effective_date=record.attendance_date,
                end_date=record.attendance_date,
                is_manual=False,
                attendance_id=record.id,
                hours_basis=line.hours_basis,
                reason=line.reason,
                actor_id=actor_id,
            )
            for line in desired
        )

        logger.info(
            "attendance_entries_synchronized",
            extra={
                "employee_no": record.employee_no,
                "attendance_date": record.attendance_date.isoformat(),
                "transaction_id": str(record.id),
                "entries_created": len(created),
                "superseded": superseded,
            },
        )
        return SyncOutcome(
            employee_no=record.employee_no,
            attendance_date=record.attendance_date,
            created=created,
            superseded=superseded,
        )

    def clear(self, employee_no: str, attendance_date: date, actor_id: UUID = SYSTEM_ACTOR_ID) -> int:
        """Supersede every system entry for the date."""
        existing = self._entries.active_system_entries(employee_no, attendance_date)
        superseded = self._entries.supersede(existing, actor_id=actor_id)
        logger.info(
            "attendance_entries_cleared",
            extra={
                "employee_no": employee_no,
                "attendance_date": attendance_date.isoformat(),
                "superseded": superseded,
            },
        )
        return superseded
