"""
Attendance collaborators (``workforce_modules.attendance.calendar``).

Responsibility
--------------
Schedule resolution, holiday/weekend classification and day closure.
The attendance service depends on the ``ScheduleResolver``,
``WorkCalendar`` and ``DayClosureService`` protocols; SQL-backed
implementations over the attendance reference tables are provided here.

Architecture position
---------------------
**Modules layer** -- flush-only collaborators (``BaseService``).

Invariants enforced
-------------------
* Schedule priority: project > department > company default row >
  configured default.  Resolution never returns ``None``.
* Weekend classification falls back to the configured ISO weekdays only
  when the ``weekend_days`` table has no rows.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import Protocol, runtime_checkable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from workforce_engines.time_metrics import ShiftSchedule
from workforce_kernel.domain.clock import Clock, SystemClock
from workforce_kernel.logging_config import get_logger
from workforce_kernel.services.base import SYSTEM_ACTOR_ID, BaseService
from workforce_modules.attendance.orm import (
    AttendanceDayClosureModel,
    HolidayModel,
    TimeScheduleModel,
    WeekendDayModel,
)

logger = get_logger("modules.attendance.calendar")


@runtime_checkable
class ScheduleResolver(Protocol):
    def resolve(self, dept_id: str | None, project_code: str | None) -> ShiftSchedule: ...


@runtime_checkable
class WorkCalendar(Protocol):
    def is_holiday(self, day: date) -> bool: ...

    def is_weekend(self, day: date) -> bool: ...


@runtime_checkable
class DayClosureService(Protocol):
    def is_closed(self, day: date) -> bool: ...


class SqlScheduleResolver(BaseService):
    """Resolves the governing schedule from ``time_schedules``."""

    def __init__(self, session: Session, default_schedule: ShiftSchedule):
        super().__init__(session)
        self._default = default_schedule

    def _first_active(self, *criteria) -> TimeScheduleModel | None:
        return self.session.scalars(
            select(TimeScheduleModel)
            .where(TimeScheduleModel.is_active.is_(True), *criteria)
            .order_by(TimeScheduleModel.created_at, TimeScheduleModel.schedule_name)
            .limit(1)
        ).first()

    def resolve(self, dept_id: str | None, project_code: str | None) -> ShiftSchedule:
        row = None
        source = "config_default"
        if project_code:
            row = self._first_active(TimeScheduleModel.project_code == project_code)
            source = "project"
        if row is None and dept_id:
            row = self._first_active(TimeScheduleModel.dept_id == dept_id)
            source = "department"
        if row is None:
            row = self._first_active(
                TimeScheduleModel.project_code.is_(None),
                TimeScheduleModel.dept_id.is_(None),
            )
            source = "company_default"
        if row is None:
            logger.debug(
                "schedule_resolved",
                extra={"dept_id": dept_id, "project_code": project_code, "source": "config_default"},
            )
            return self._default

        logger.debug(
            "schedule_resolved",
            extra={
                "dept_id": dept_id,
                "project_code": project_code,
                "source": source,
                "schedule_name": row.schedule_name,
            },
        )
        return row.to_schedule()


class SqlWorkCalendar(BaseService):
    """Holiday and weekend classification from ``holidays`` / ``weekend_days``."""

    def __init__(self, session: Session, default_weekend_days: Iterable[int] = (5, 6)):
        super().__init__(session)
        self._default_weekend_days = frozenset(default_weekend_days)

    def is_holiday(self, day: date) -> bool:
        exact = self.session.scalar(
            select(HolidayModel.id).where(
                HolidayModel.is_active.is_(True),
                HolidayModel.holiday_date == day,
            ).limit(1)
        )
        if exact is not None:
            return True
        recurring = self.session.scalars(
            select(HolidayModel.holiday_date).where(
                HolidayModel.is_active.is_(True),
                HolidayModel.is_recurring.is_(True),
            )
        ).all()
        return any(h.month == day.month and h.day == day.day for h in recurring)

    def weekend_days(self) -> frozenset[int]:
        rows = self.session.scalars(
            select(WeekendDayModel)
        ).all()
        if not rows:
            return self._default_weekend_days
        return frozenset(r.iso_weekday for r in rows if r.is_active)

    def is_weekend(self, day: date) -> bool:
        return day.isoweekday() in self.weekend_days()


class SqlDayClosureService(BaseService):
    """Closed attendance days in ``attendance_day_closures``."""

    def __init__(self, session: Session, clock: Clock | None = None):
        super().__init__(session)
        self._clock = clock or SystemClock()

    def _row(self, day: date) -> AttendanceDayClosureModel | None:
        return self.session.scalars(
            select(AttendanceDayClosureModel).where(
                AttendanceDayClosureModel.attendance_date == day
            )
        ).first()

    def is_closed(self, day: date) -> bool:
        row = self._row(day)
        return row is not None and row.is_closed

    def close_date(self, day: date, actor_id: UUID = SYSTEM_ACTOR_ID, notes: str | None = None) -> None:
        row = self._row(day)
        if row is None:
            row = AttendanceDayClosureModel(attendance_date=day, created_by_id=actor_id)
            self.session.add(row)
        row.is_closed = True
        row.closed_at = self._clock.now()
        row.notes = notes
        row.updated_by_id = actor_id
        self.session.flush()
        logger.info("attendance_day_closed", extra={"attendance_date": day.isoformat()})

    def reopen_date(self, day: date, actor_id: UUID = SYSTEM_ACTOR_ID) -> None:
        row = self._row(day)
        if row is None or not row.is_closed:
            logger.info("attendance_day_already_open", extra={"attendance_date": day.isoformat()})
            return
        row.is_closed = False
        row.reopened_at = self._clock.now()
        row.updated_by_id = actor_id
        self.session.flush()
        logger.info("attendance_day_reopened", extra={"attendance_date": day.isoformat()})
