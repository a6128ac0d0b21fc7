"""
Attendance ORM Persistence Models (``workforce_modules.attendance.orm``).

Responsibility:
    SQLAlchemy ORM models for attendance transactions and the read-mostly
    reference data the attendance engine consults: time schedules,
    holidays, weekend days and closed attendance days.

Architecture position:
    **Modules layer** -- persistence companions to
    ``workforce_modules.attendance.models``.  Inherits ``TrackedBase``.

Invariants enforced:
    - One attendance row per (employee_no, attendance_date)
      (``uq_attendance_employee_date``).  This constraint is what
      serializes concurrent check-ins for the same employee and day.
    - Flags are persisted as "Y" / "N" and converted to ``bool`` only in
      ``to_dto()`` / ``from_dto()``.
    - Hour columns are Numeric(9, 2); coordinates Numeric(12, 8).
"""

from datetime import date, datetime, time
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Index,
    Numeric,
    String,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from workforce_kernel.db.base import TrackedBase


def _yn(flag: bool) -> str:
    return "Y" if flag else "N"


def _flag(value: str | None) -> bool:
    return value == "Y"


# ---------------------------------------------------------------------------
# AttendanceTransactionModel
# ---------------------------------------------------------------------------

class AttendanceTransactionModel(TrackedBase):
    """
    ORM model for ``AttendanceRecord``.

    Contract:
        A row with ``entry_time`` and no ``exit_time`` is open.  Check-out
        and manual HR edits mutate the row in place; only the administrative
        delete path removes it.
    """

    __tablename__ = "attendance_transactions"

    employee_no: Mapped[str] = mapped_column(String(50), nullable=False)
    attendance_date: Mapped[date] = mapped_column(Date, nullable=False)
    project_code: Mapped[str | None] = mapped_column(String(50), nullable=True)

    entry_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    exit_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)

    entry_latitude: Mapped[Decimal | None] = mapped_column(Numeric(12, 8), nullable=True)
    entry_longitude: Mapped[Decimal | None] = mapped_column(Numeric(12, 8), nullable=True)
    entry_distance_meters: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    exit_latitude: Mapped[Decimal | None] = mapped_column(Numeric(12, 8), nullable=True)
    exit_longitude: Mapped[Decimal | None] = mapped_column(Numeric(12, 8), nullable=True)
    exit_distance_meters: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)

    scheduled_hours: Mapped[Decimal | None] = mapped_column(Numeric(9, 2), nullable=True)
    working_hours: Mapped[Decimal | None] = mapped_column(Numeric(9, 2), nullable=True)
    overtime_calc: Mapped[Decimal | None] = mapped_column(Numeric(9, 2), nullable=True)
    delayed_calc: Mapped[Decimal | None] = mapped_column(Numeric(9, 2), nullable=True)
    early_out_calc: Mapped[Decimal | None] = mapped_column(Numeric(9, 2), nullable=True)
    shortage_hours: Mapped[Decimal | None] = mapped_column(Numeric(9, 2), nullable=True)

    absence_flag: Mapped[str] = mapped_column(String(1), default="N", nullable=False)
    absence_reason: Mapped[str | None] = mapped_column(String(4000), nullable=True)
    is_holiday_work: Mapped[str] = mapped_column(String(1), default="N", nullable=False)
    is_weekend_work: Mapped[str] = mapped_column(String(1), default="N", nullable=False)
    is_manual_entry: Mapped[str] = mapped_column(String(1), default="N", nullable=False)
    is_auto_checkout: Mapped[str] = mapped_column(String(1), default="N", nullable=False)
    notes: Mapped[str | None] = mapped_column(String(4000), nullable=True)

    __table_args__ = (
        UniqueConstraint("employee_no", "attendance_date", name="uq_attendance_employee_date"),
        Index("idx_attendance_date", "attendance_date"),
        Index("idx_attendance_project", "project_code"),
    )

    def to_dto(self):
        from workforce_modules.attendance.models import AttendanceRecord

        return AttendanceRecord(
            id=self.id,
            employee_no=self.employee_no,
            attendance_date=self.attendance_date,
            project_code=self.project_code,
            entry_time=self.entry_time,
            exit_time=self.exit_time,
            entry_latitude=self.entry_latitude,
            entry_longitude=self.entry_longitude,
            entry_distance_meters=self.entry_distance_meters,
            exit_latitude=self.exit_latitude,
            exit_longitude=self.exit_longitude,
            exit_distance_meters=self.exit_distance_meters,
            scheduled_hours=self.scheduled_hours,
            working_hours=self.working_hours,
            overtime_calc=self.overtime_calc,
            delayed_calc=self.delayed_calc,
            early_out_calc=self.early_out_calc,
            shortage_hours=self.shortage_hours,
            absence_flag=_flag(self.absence_flag),
            absence_reason=self.absence_reason,
            is_holiday_work=_flag(self.is_holiday_work),
            is_weekend_work=_flag(self.is_weekend_work),
            is_manual_entry=_flag(self.is_manual_entry),
            is_auto_checkout=_flag(self.is_auto_checkout),
            notes=self.notes,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "AttendanceTransactionModel":
        return cls(
            id=dto.id,
            employee_no=dto.employee_no,
            attendance_date=dto.attendance_date,
            project_code=dto.project_code,
            entry_time=dto.entry_time,
            exit_time=dto.exit_time,
            entry_latitude=dto.entry_latitude,
            entry_longitude=dto.entry_longitude,
            entry_distance_meters=dto.entry_distance_meters,
            exit_latitude=dto.exit_latitude,
            exit_longitude=dto.exit_longitude,
            exit_distance_meters=dto.exit_distance_meters,
            scheduled_hours=dto.scheduled_hours,
            working_hours=dto.working_hours,
            overtime_calc=dto.overtime_calc,
            delayed_calc=dto.delayed_calc,
            early_out_calc=dto.early_out_calc,
            shortage_hours=dto.shortage_hours,
            absence_flag=_yn(dto.absence_flag),
            absence_reason=dto.absence_reason,
            is_holiday_work=_yn(dto.is_holiday_work),
            is_weekend_work=_yn(dto.is_weekend_work),
            is_manual_entry=_yn(dto.is_manual_entry),
            is_auto_checkout=_yn(dto.is_auto_checkout),
            notes=dto.notes,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return (
            f"<AttendanceTransactionModel {self.employee_no} {self.attendance_date} "
            f"in={self.entry_time} out={self.exit_time}>"
        )


# ---------------------------------------------------------------------------
# TimeScheduleModel
# ---------------------------------------------------------------------------

class TimeScheduleModel(TrackedBase):
    """
    ORM model for a working schedule.

    Contract:
        Scoped to a project, a department, or neither (company default).
        ``scheduled_end_time`` earlier than ``scheduled_start_time`` marks a
        midnight-crossing shift.
    """

    __tablename__ = "time_schedules"

    schedule_name: Mapped[str] = mapped_column(String(200), nullable=False)
    dept_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    project_code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    scheduled_start_time: Mapped[time] = mapped_column(Time, nullable=False)
    scheduled_end_time: Mapped[time] = mapped_column(Time, nullable=False)
    required_hours: Mapped[Decimal] = mapped_column(Numeric(9, 2), nullable=False)
    grace_period_minutes: Mapped[int | None] = mapped_column(nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index("idx_schedule_project", "project_code", "is_active"),
        Index("idx_schedule_dept", "dept_id", "is_active"),
    )

    def to_schedule(self):
        from workforce_engines.time_metrics import ShiftSchedule

        return ShiftSchedule(
            start_time=self.scheduled_start_time,
            end_time=self.scheduled_end_time,
            required_hours=self.required_hours,
            grace_period_minutes=self.grace_period_minutes,
            name=self.schedule_name,
        )

    def __repr__(self) -> str:
        return (
            f"<TimeScheduleModel {self.schedule_name} "
            f"{self.scheduled_start_time}-{self.scheduled_end_time}>"
        )


# ---------------------------------------------------------------------------
# HolidayModel
# ---------------------------------------------------------------------------

class HolidayModel(TrackedBase):
    """
    ORM model for a public holiday.

    Contract:
        A recurring holiday matches every year on the same month and day.
    """

    __tablename__ = "holidays"

    holiday_date: Mapped[date] = mapped_column(Date, nullable=False)
    holiday_name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_paid: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_recurring: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index("idx_holiday_date", "holiday_date"),
    )

    def __repr__(self) -> str:
        return f"<HolidayModel {self.holiday_date} {self.holiday_name}>"


# ---------------------------------------------------------------------------
# WeekendDayModel
# ---------------------------------------------------------------------------

class WeekendDayModel(TrackedBase):
    """ORM model for a weekend day, stored as an ISO weekday (Monday=1)."""

    __tablename__ = "weekend_days"

    iso_weekday: Mapped[int] = mapped_column(nullable=False)
    day_name: Mapped[str | None] = mapped_column(String(20), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        UniqueConstraint("iso_weekday", name="uq_weekend_iso_weekday"),
    )

    def __repr__(self) -> str:
        return f"<WeekendDayModel {self.iso_weekday} active={self.is_active}>"


# ---------------------------------------------------------------------------
# AttendanceDayClosureModel
# ---------------------------------------------------------------------------

class AttendanceDayClosureModel(TrackedBase):
    """
    ORM model for an administratively closed attendance day.

    Contract:
        While ``is_closed`` is true, no attendance row for
        ``attendance_date`` may be created, edited or deleted.
    """

    __tablename__ = "attendance_day_closures"

    attendance_date: Mapped[date] = mapped_column(Date, nullable=False)
    is_closed: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    closed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    reopened_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    notes: Mapped[str | None] = mapped_column(String(4000), nullable=True)

    __table_args__ = (
        UniqueConstraint("attendance_date", name="uq_day_closure_date"),
    )

    def __repr__(self) -> str:
        return f"<AttendanceDayClosureModel {self.attendance_date} closed={self.is_closed}>"
