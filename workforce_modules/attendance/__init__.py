"""
Attendance Module.

Check-in/check-out with geofence validation, HR manual entries, schedule
resolution, holiday/weekend classification, day closure and the
synchronization of attendance metrics into monthly allowances and
deductions.
"""

from workforce_modules.attendance.allowances import AllowanceDeductionSynchronizer, SyncOutcome
from workforce_modules.attendance.calendar import (
    DayClosureService,
    ScheduleResolver,
    SqlDayClosureService,
    SqlScheduleResolver,
    SqlWorkCalendar,
    WorkCalendar,
)
from workforce_modules.attendance.config import AttendanceConfig
from workforce_modules.attendance.models import (
    AbsenceSummary,
    AttendanceRecord,
    AttendanceResult,
    AttendanceState,
    AutoCheckoutSummary,
    CheckInResult,
    CheckOutResult,
    ManualAttendanceInput,
    MonthlyTimesheet,
    TimesheetDay,
)
from workforce_modules.attendance.service import AttendanceService

__all__ = [
    "AbsenceSummary",
    "AllowanceDeductionSynchronizer",
    "AttendanceConfig",
    "AttendanceRecord",
    "AttendanceResult",
    "AttendanceService",
    "AttendanceState",
    "AutoCheckoutSummary",
    "CheckInResult",
    "CheckOutResult",
    "DayClosureService",
    "ManualAttendanceInput",
    "MonthlyTimesheet",
    "ScheduleResolver",
    "SqlDayClosureService",
    "SqlScheduleResolver",
    "SqlWorkCalendar",
    "SyncOutcome",
    "TimesheetDay",
    "WorkCalendar",
]
