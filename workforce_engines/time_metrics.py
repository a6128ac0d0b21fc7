"""
Time-Metrics Calculator (``workforce_engines.time_metrics``).

Responsibility
--------------
Pure calculations that turn entry/exit timestamps and a shift schedule
into pay-relevant hour quantities:

* working hours
* overtime (holiday / weekend premium or hours beyond schedule)
* lateness past the grace boundary
* early departure before scheduled end
* shortage against required hours
* hours <-> minutes conversion, quarter-hour rounding
* midnight-crossing shift handling

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O, ZERO database,
ZERO clock reads.  All dates and times are passed as explicit parameters.

Invariants enforced
-------------------
* Decimal only, HALF_UP, 2 decimal places for hours.
* Durations are counted in whole minutes (seconds are truncated).
* Results are never negative.
* Missing timestamps yield ``None`` (working hours) or zero, never an
  exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal, ROUND_HALF_UP

from workforce_kernel.db.types import ZERO_HOURS, round_hours

OVERTIME_MULTIPLIER = Decimal("1.5")
DEFAULT_GRACE_MINUTES = 15
SHORTAGE_FLOOR_HOURS = Decimal("0.25")

_SIXTY = Decimal(60)


@dataclass(frozen=True)
class ShiftSchedule:
    """A resolved working schedule for one day.

    ``end_time`` earlier than ``start_time`` means the shift crosses midnight.
    """

    start_time: time
    end_time: time
    required_hours: Decimal
    grace_period_minutes: int | None = DEFAULT_GRACE_MINUTES
    name: str = "default"

    @property
    def crosses_midnight(self) -> bool:
        return is_midnight_crossing(self.start_time, self.end_time)


@dataclass(frozen=True)
class AttendanceMetrics:
    """All hour quantities derived for one attendance day."""

    scheduled_hours: Decimal
    working_hours: Decimal | None
    overtime_hours: Decimal
    delay_hours: Decimal
    early_out_hours: Decimal
    shortage_hours: Decimal | None


# ---------------------------------------------------------------------------
# Unit conversion
# ---------------------------------------------------------------------------


def _whole_minutes(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds() // 60)


def minutes_to_hours(minutes: int | None) -> Decimal:
    """Minutes as hours, 2 dp HALF_UP.  ``None`` is zero."""
    if not minutes:
        return ZERO_HOURS
    return (Decimal(minutes) / _SIXTY).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def hours_to_minutes(hours: Decimal | None) -> int:
    """Hours as whole minutes, HALF_UP.  ``None`` is zero."""
    if hours is None:
        return 0
    return int((hours * _SIXTY).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def round_to_quarter_hour(hours: Decimal | None) -> Decimal:
    """Round to the nearest 15 minutes (7.5 minutes rounds up)."""
    if hours is None:
        return ZERO_HOURS
    quarters = (Decimal(hours_to_minutes(hours)) / Decimal(15)).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP
    )
    return minutes_to_hours(int(quarters) * 15)


def format_hours(hours: Decimal | None, long_format: bool = False) -> str:
    """Render as "8.50 hours", or "8h 30m" / "8h" in long format."""
    if hours is None:
        return "0 hours"
    if not long_format:
        return f"{round_hours(hours)} hours"
    hrs, mins = divmod(hours_to_minutes(hours), 60)
    return f"{hrs}h" if mins == 0 else f"{hrs}h {mins}m"


# ---------------------------------------------------------------------------
# Schedule shape
# ---------------------------------------------------------------------------


def is_midnight_crossing(start_time: time | None, end_time: time | None) -> bool:
    if start_time is None or end_time is None:
        return False
    return end_time < start_time


def calculate_scheduled_duration(start_time: time | None, end_time: time | None) -> Decimal:
    """Length of a shift in hours; crossing shifts count (start->24:00)+(00:00->end)."""
    if start_time is None or end_time is None:
        return ZERO_HOURS
    anchor = date(2000, 1, 1)
    start = datetime.combine(anchor, start_time)
    end = datetime.combine(anchor, end_time)
    if is_midnight_crossing(start_time, end_time):
        end += timedelta(days=1)
    return minutes_to_hours(_whole_minutes(start, end))


def scheduled_end_for(
    attendance_date: date,
    start_time: time | None,
    end_time: time,
) -> datetime:
    """Absolute scheduled end; crossing shifts end on the following day."""
    end = datetime.combine(attendance_date, end_time)
    if is_midnight_crossing(start_time, end_time):
        end += timedelta(days=1)
    return end


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------


def calculate_working_hours(
    entry_time: datetime | None,
    exit_time: datetime | None,
) -> Decimal | None:
    """Elapsed hours between entry and exit.

    Returns:
        ``None`` when either timestamp is missing, ``0`` when exit does not
        follow entry, otherwise whole minutes / 60 at 2 dp.
    """
    if entry_time is None or exit_time is None:
        return None
    if exit_time <= entry_time:
        return ZERO_HOURS
    return minutes_to_hours(_whole_minutes(entry_time, exit_time))


def calculate_overtime(
    working_hours: Decimal | None,
    scheduled_hours: Decimal | None,
    is_holiday: bool = False,
    is_weekend: bool = False,
    multiplier: Decimal = OVERTIME_MULTIPLIER,
) -> Decimal:
    """Holiday/weekend work is all overtime at the premium; otherwise hours past schedule."""
    if working_hours is None or scheduled_hours is None:
        return ZERO_HOURS
    if is_holiday or is_weekend:
        return round_hours(working_hours * multiplier)
    excess = working_hours - scheduled_hours
    if excess <= 0:
        return ZERO_HOURS
    return round_hours(excess)


def calculate_delay(
    entry_time: datetime | None,
    scheduled_start: time | None,
    grace_period_minutes: int | None,
    attendance_date: date | None,
) -> Decimal:
    """Hours late past ``scheduled_start + grace`` (grace defaults to 15 minutes)."""
    if entry_time is None or scheduled_start is None or attendance_date is None:
        return ZERO_HOURS
    grace = DEFAULT_GRACE_MINUTES if grace_period_minutes is None else grace_period_minutes
    boundary = datetime.combine(attendance_date, scheduled_start) + timedelta(minutes=grace)
    if entry_time <= boundary:
        return ZERO_HOURS
    return minutes_to_hours(_whole_minutes(boundary, entry_time))


def calculate_minutes_late(
    entry_time: datetime | None,
    scheduled_start: time | None,
    attendance_date: date | None,
) -> int:
    """Raw minutes after scheduled start, ignoring grace."""
    return hours_to_minutes(calculate_delay(entry_time, scheduled_start, 0, attendance_date))


def calculate_early_departure(
    exit_time: datetime | None,
    scheduled_end: time | None,
    scheduled_start: time | None,
    attendance_date: date | None,
) -> Decimal:
    """Hours left before scheduled end.

    An exit at or before the scheduled start means work never started and
    yields zero.  A crossing shift's end moves to the following day only
    when the exit itself falls after the attendance date.
    """
    if exit_time is None or scheduled_end is None or attendance_date is None:
        return ZERO_HOURS
    end = datetime.combine(attendance_date, scheduled_end)
    if is_midnight_crossing(scheduled_start, scheduled_end) and exit_time.date() > attendance_date:
        end += timedelta(days=1)
    if scheduled_start is not None:
        start = datetime.combine(attendance_date, scheduled_start)
        if exit_time <= start:
            return ZERO_HOURS
    if exit_time >= end:
        return ZERO_HOURS
    return minutes_to_hours(_whole_minutes(exit_time, end))


def calculate_shortage(
    working_hours: Decimal | None,
    scheduled_hours: Decimal | None,
    floor_hours: Decimal = SHORTAGE_FLOOR_HOURS,
) -> Decimal:
    """Required hours not worked; zero for schedules under the 15-minute floor."""
    if working_hours is None or scheduled_hours is None:
        return ZERO_HOURS
    if scheduled_hours < floor_hours:
        return ZERO_HOURS
    shortage = scheduled_hours - working_hours
    if shortage <= 0:
        return ZERO_HOURS
    return round_hours(shortage)


def compute_attendance_metrics(
    *,
    attendance_date: date,
    entry_time: datetime | None,
    exit_time: datetime | None,
    schedule: ShiftSchedule,
    is_holiday: bool,
    is_weekend: bool,
    overtime_multiplier: Decimal = OVERTIME_MULTIPLIER,
    shortage_floor_hours: Decimal = SHORTAGE_FLOOR_HOURS,
) -> AttendanceMetrics:
    """Derive every metric for a day.

    Working hours, overtime and shortage need both timestamps; on an open
    record they are ``None`` / 0 / ``None``.  Delay needs only the entry and
    early departure only the exit.
    """
    scheduled = schedule.required_hours
    if entry_time is not None and exit_time is not None:
        working = calculate_working_hours(entry_time, exit_time)
        overtime = calculate_overtime(
            working, scheduled, is_holiday, is_weekend, multiplier=overtime_multiplier
        )
        shortage = calculate_shortage(working, scheduled, floor_hours=shortage_floor_hours)
    else:
        working, overtime, shortage = None, ZERO_HOURS, None

    delay = calculate_delay(
        entry_time, schedule.start_time, schedule.grace_period_minutes, attendance_date
    )
    early_out = calculate_early_departure(
        exit_time, schedule.end_time, schedule.start_time, attendance_date
    )
    return AttendanceMetrics(
        scheduled_hours=scheduled,
        working_hours=working,
        overtime_hours=overtime,
        delay_hours=delay,
        early_out_hours=early_out,
        shortage_hours=shortage,
    )
