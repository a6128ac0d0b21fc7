"""
Attendance Domain Models.

The attendance record moves through none -> open (entry, no exit) ->
closed (entry and exit).  Records created by HR may skip the open state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from workforce_engines.time_metrics import ShiftSchedule
from workforce_kernel.domain.results import ServiceResult

__all__ = [
    "AttendanceRecord",
    "AttendanceResult",
    "AttendanceState",
    "AutoCheckoutSummary",
    "CheckInResult",
    "CheckOutResult",
    "ManualAttendanceInput",
    "MonthlyTimesheet",
    "ShiftSchedule",
    "TimesheetDay",
    "AbsenceSummary",
]


class AttendanceState(Enum):
    OPEN = "open"
    CLOSED = "closed"
    ABSENT = "absent"


@dataclass(frozen=True)
class AttendanceRecord:
    """One employee's attendance for one calendar date."""

    id: UUID
    employee_no: str
    attendance_date: date
    project_code: str | None = None
    entry_time: datetime | None = None
    exit_time: datetime | None = None
    entry_latitude: Decimal | None = None
    entry_longitude: Decimal | None = None
    entry_distance_meters: Decimal | None = None
    exit_latitude: Decimal | None = None
    exit_longitude: Decimal | None = None
    exit_distance_meters: Decimal | None = None
    scheduled_hours: Decimal | None = None
    working_hours: Decimal | None = None
    overtime_calc: Decimal | None = None
    delayed_calc: Decimal | None = None
    early_out_calc: Decimal | None = None
    shortage_hours: Decimal | None = None
    absence_flag: bool = False
    absence_reason: str | None = None
    is_holiday_work: bool = False
    is_weekend_work: bool = False
    is_manual_entry: bool = False
    is_auto_checkout: bool = False
    notes: str | None = None

    @property
    def state(self) -> AttendanceState:
        if self.absence_flag and self.entry_time is None:
            return AttendanceState.ABSENT
        if self.exit_time is None:
            return AttendanceState.OPEN
        return AttendanceState.CLOSED

    @property
    def is_open(self) -> bool:
        return self.state is AttendanceState.OPEN


@dataclass(frozen=True)
class CheckInResult:
    transaction_id: UUID
    attendance_date: date
    entry_time: datetime
    distance_meters: float | None
    minutes_late: int
    is_holiday_work: bool = False
    is_weekend_work: bool = False


@dataclass(frozen=True)
class CheckOutResult:
    transaction_id: UUID
    exit_time: datetime
    working_hours: Decimal | None
    overtime_calc: Decimal
    delayed_calc: Decimal
    early_out_calc: Decimal
    shortage_hours: Decimal | None
    distance_meters: float | None = None


@dataclass(frozen=True)
class ManualAttendanceInput:
    """An HR-entered attendance record.

    Metric fields left as ``None`` are computed from the timestamps and the
    resolved schedule.
    """

    employee_no: str
    attendance_date: date
    project_code: str | None = None
    entry_time: datetime | None = None
    exit_time: datetime | None = None
    scheduled_hours: Decimal | None = None
    working_hours: Decimal | None = None
    overtime_calc: Decimal | None = None
    delayed_calc: Decimal | None = None
    early_out_calc: Decimal | None = None
    shortage_hours: Decimal | None = None
    absence_flag: bool = False
    absence_reason: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class AutoCheckoutSummary:
    closed: tuple[UUID, ...] = ()
    failed: tuple[tuple[UUID, str], ...] = ()


@dataclass(frozen=True)
class AbsenceSummary:
    attendance_date: date
    marked: tuple[str, ...] = ()
    already_present: int = 0
    skipped_reason: str | None = None


@dataclass(frozen=True)
class TimesheetDay:
    attendance_date: date
    entry_time: datetime | None
    exit_time: datetime | None
    working_hours: Decimal | None
    overtime_calc: Decimal | None
    delayed_calc: Decimal | None
    is_absent: bool
    is_holiday: bool
    is_weekend: bool


@dataclass(frozen=True)
class MonthlyTimesheet:
    """Per-employee attendance roll-up for a salary month."""

    employee_no: str
    salary_month: str
    days: tuple[TimesheetDay, ...] = field(default_factory=tuple)
    present_days: int = 0
    absent_days: int = 0
    late_days: int = 0
    weekend_days_worked: int = 0
    holiday_days_worked: int = 0
    total_working_hours: Decimal = Decimal("0.00")
    total_overtime_hours: Decimal = Decimal("0.00")
    total_delay_hours: Decimal = Decimal("0.00")
    total_early_out_hours: Decimal = Decimal("0.00")
    total_shortage_hours: Decimal = Decimal("0.00")


# Check-in/out outcome: the value, or the business rule that refused it.
AttendanceResult = ServiceResult
