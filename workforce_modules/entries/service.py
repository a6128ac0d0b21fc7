"""
Monthly Entry Service (``workforce_modules.entries.service``).

Responsibility
--------------
Reads and writes monthly allowances and deductions: HR manual entries,
the system-generated rows the attendance synchronizer maintains, and the
month selection payroll aggregates.

Architecture position
---------------------
**Modules layer** -- flush-only collaborator.  The attendance and payroll
services own the transaction boundary.

Invariants enforced
-------------------
* Manual entries are never superseded by the system-entry paths.
* An entry applies to a salary month when it is ACTIVE, its effective date
  is on or before the month end, and it has no end date or ends on or after
  the month start.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import or_, select

from workforce_engines.pay_lines import PayCategory
from workforce_engines.proration import SalaryMonth
from workforce_kernel.db.types import round_money
from workforce_kernel.logging_config import get_logger
from workforce_kernel.services.base import SYSTEM_ACTOR_ID, BaseService
from workforce_modules.entries.models import EntryStatus, MonthlyEntry
from workforce_modules.entries.orm import (
    MonthlyAllowanceModel,
    MonthlyDeductionModel,
    model_for,
)

logger = get_logger("modules.entries.service")

_MODELS = (MonthlyAllowanceModel, MonthlyDeductionModel)


class MonthlyEntryService(BaseService):
    """Flush-only access to ``monthly_allowances`` / ``monthly_deductions``."""

    def add_entry(
        self,
        *,
        employee_no: str,
        trans_type_code: int,
        amount: Decimal,
        category: PayCategory,
        effective_date: date,
        end_date: date | None = None,
        is_manual: bool = True,
        attendance_id: UUID | None = None,
        hours_basis: Decimal | None = None,
        reason: str | None = None,
        status: EntryStatus = EntryStatus.ACTIVE,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> MonthlyEntry:
        """Insert one entry and flush.

        Raises:
            ValueError: Negative amount, or an end date before the effective date.
        """
        if amount < 0:
            raise ValueError(f"Entry amount cannot be negative: {amount}")
        if end_date is not None and end_date < effective_date:
            raise ValueError(
                f"end_date {end_date} is before effective_date {effective_date}"
            )

        dto = MonthlyEntry(
            id=uuid4(),
            employee_no=employee_no,
            trans_type_code=trans_type_code,
            amount=round_money(amount),
            category=category,
            effective_date=effective_date,
            end_date=end_date,
            status=status,
            is_manual=is_manual,
            attendance_id=attendance_id,
            hours_basis=hours_basis,
            reason=reason,
        )
        self.session.add(model_for(category).from_dto(dto, created_by_id=actor_id))
        self.session.flush()

        logger.info(
            "monthly_entry_added",
            extra={
                "entry_id": str(dto.id),
                "employee_no": employee_no,
                "category": category.value,
                "trans_type_code": trans_type_code,
                "amount": str(dto.amount),
                "effective_date": effective_date.isoformat(),
                "is_manual": is_manual,
            },
        )
        return dto

    def list_active_for_month(self, employee_no: str, month: SalaryMonth) -> list[MonthlyEntry]:
        """Active entries of both categories that apply to ``month``."""
        entries: list[MonthlyEntry] = []
        for model in _MODELS:
            rows = self.session.scalars(
                select(model)
                .where(
                    model.employee_no == employee_no,
                    model.status == EntryStatus.ACTIVE.value,
                    model.effective_date <= month.end,
                    or_(model.end_date.is_(None), model.end_date >= month.start),
                )
                .order_by(model.effective_date, model.trans_type_code, model.created_at)
            ).all()
            entries.extend(row.to_dto() for row in rows)
        return entries

    def active_system_entries(
        self,
        employee_no: str,
        attendance_date: date,
    ) -> list[MonthlyAllowanceModel | MonthlyDeductionModel]:
        """Active system-generated rows for one attendance day."""
        rows: list = []
        for model in _MODELS:
            rows.extend(
                self.session.scalars(
                    select(model).where(
                        model.employee_no == employee_no,
                        model.effective_date == attendance_date,
                        model.is_manual.is_(False),
                        model.status == EntryStatus.ACTIVE.value,
                    )
                ).all()
            )
        return rows

    def supersede(
        self,
        rows: Sequence[MonthlyAllowanceModel | MonthlyDeductionModel],
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> int:
        """Mark system-generated rows superseded.  Manual rows are skipped."""
        count = 0
        for row in rows:
            if row.is_manual:
                logger.warning(
                    "manual_entry_supersede_skipped",
                    extra={"entry_id": str(row.id), "employee_no": row.employee_no},
                )
                continue
            row.status = EntryStatus.SUPERSEDED.value
            row.updated_by_id = actor_id
            count += 1
        self.session.flush()
        return count
