"""
Attendance settings: the fallback shift, overtime and shortage rules, the
geofence toggle, and the rate basis for attendance-derived entries.

The ``attendance`` section of the engine YAML feeds ``from_dict``.
"""

from dataclasses import dataclass, field
from datetime import time
from decimal import Decimal
from typing import Self

from workforce_engines.time_metrics import ShiftSchedule
from workforce_kernel.logging_config import get_logger

logger = get_logger("modules.attendance.config")

VALID_ISO_WEEKDAYS = {1, 2, 3, 4, 5, 6, 7}


def _parse_time(value) -> time:
    if isinstance(value, time):
        return value
    # YAML 1.1 reads an unquoted 17:00 as the sexagesimal integer 1020
    if not isinstance(value, str):
        raise ValueError(f"time must be a quoted 'HH:MM' string, got {value!r}")
    return time.fromisoformat(value)


@dataclass
class AttendanceConfig:
    """
    Field defaults describe a standard 08:00-17:00 day with an 8-hour
    requirement and a Friday/Saturday weekend.  Override at instantiation:

        config = AttendanceConfig(
            default_grace_minutes=10,
            enforce_location_check=False,
        )
    """

    # Fallback schedule when neither project nor department has one
    default_start_time: time = time(8, 0)
    default_end_time: time = time(17, 0)
    default_required_hours: Decimal = Decimal("8.00")
    default_grace_minutes: int = 15

    # Metrics
    overtime_multiplier: Decimal = Decimal("1.5")
    shortage_floor_hours: Decimal = Decimal("0.25")

    # Check-in policy
    enforce_location_check: bool = True
    reject_check_in_after_shift_end: bool = True

    # Allowance/deduction amounts
    rate_divisor_days: int = 30
    fallback_daily_hours: Decimal = Decimal("8")

    # ISO weekdays used when no weekend_days rows are configured
    default_weekend_days: tuple[int, ...] = field(default_factory=lambda: (5, 6))

    def __post_init__(self):
        if self.default_required_hours < 0:
            raise ValueError("default_required_hours cannot be negative")
        if self.default_grace_minutes < 0:
            raise ValueError("default_grace_minutes cannot be negative")
        if self.overtime_multiplier <= 0:
            raise ValueError("overtime_multiplier must be positive")
        if self.shortage_floor_hours < 0:
            raise ValueError("shortage_floor_hours cannot be negative")
        if self.rate_divisor_days <= 0:
            raise ValueError("rate_divisor_days must be positive")
        if self.fallback_daily_hours <= 0:
            raise ValueError("fallback_daily_hours must be positive")
        invalid = set(self.default_weekend_days) - VALID_ISO_WEEKDAYS
        if invalid:
            raise ValueError(
                f"default_weekend_days must be ISO weekdays 1-7, got {sorted(invalid)}"
            )

        logger.info(
            "attendance_settings_validated",
            extra={
                "default_start_time": self.default_start_time.isoformat(),
                "default_end_time": self.default_end_time.isoformat(),
                "default_required_hours": str(self.default_required_hours),
                "default_grace_minutes": self.default_grace_minutes,
                "overtime_multiplier": str(self.overtime_multiplier),
                "enforce_location_check": self.enforce_location_check,
                "reject_check_in_after_shift_end": self.reject_check_in_after_shift_end,
            },
        )

    @property
    def default_schedule(self) -> ShiftSchedule:
        return ShiftSchedule(
            start_time=self.default_start_time,
            end_time=self.default_end_time,
            required_hours=self.default_required_hours,
            grace_period_minutes=self.default_grace_minutes,
            name="default",
        )

    @classmethod
    def with_defaults(cls) -> Self:
        return cls()

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Build from the ``attendance`` YAML section.

        A nested ``default_schedule`` mapping overrides the flat fields; times
        must be quoted strings.
        """
        data = dict(data)
        schedule = data.pop("default_schedule", None)
        if schedule:
            if "start_time" in schedule:
                data["default_start_time"] = schedule["start_time"]
            if "end_time" in schedule:
                data["default_end_time"] = schedule["end_time"]
            if "required_hours" in schedule:
                data["default_required_hours"] = schedule["required_hours"]
            if "grace_period_minutes" in schedule:
                data["default_grace_minutes"] = schedule["grace_period_minutes"]
        for key in ("default_start_time", "default_end_time"):
            if key in data:
                data[key] = _parse_time(data[key])
        for key in (
            "default_required_hours",
            "overtime_multiplier",
            "shortage_floor_hours",
            "fallback_daily_hours",
        ):
            if key in data:
                data[key] = Decimal(str(data[key]))
        if "default_weekend_days" in data:
            data["default_weekend_days"] = tuple(int(d) for d in data["default_weekend_days"])
        return cls(**data)
