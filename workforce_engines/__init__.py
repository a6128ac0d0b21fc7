"""
Module: workforce_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for
    ``workforce_modules``.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import ``workforce_kernel`` (types, exceptions, logging).
    MUST NOT import ``workforce_modules`` or ``workforce_config``.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
    - Decimal-only arithmetic for money and hours.  Distances are floats.
    - Determinism: identical inputs always produce identical outputs.
"""

from workforce_engines.approval import (
    ApprovalDecision,
    ApprovalLevel,
    ApprovalStatus,
    advance_chain,
    can_act,
    reject_chain,
    start_chain,
)
from workforce_engines.geo import (
    LocationCheck,
    calculate_distance,
    check_location,
    format_distance,
    is_valid_coordinates,
    is_within_radius,
    validate_coordinates,
)
from workforce_engines.pay_lines import (
    PayCategory,
    PayLine,
    PayrollTotals,
    TransactionType,
    compute_totals,
)
from workforce_engines.proration import (
    BreakdownRow,
    SalaryMonth,
    count_active_days,
    expand_breakdown,
    parse_salary_month,
    prorate_salary,
)
from workforce_engines.time_metrics import (
    AttendanceMetrics,
    ShiftSchedule,
    calculate_delay,
    calculate_early_departure,
    calculate_minutes_late,
    calculate_overtime,
    calculate_scheduled_duration,
    calculate_shortage,
    calculate_working_hours,
    compute_attendance_metrics,
    format_hours,
    hours_to_minutes,
    is_midnight_crossing,
    minutes_to_hours,
    round_to_quarter_hour,
)

__all__ = [
    "ApprovalDecision",
    "ApprovalLevel",
    "ApprovalStatus",
    "advance_chain",
    "can_act",
    "reject_chain",
    "start_chain",
    "LocationCheck",
    "calculate_distance",
    "check_location",
    "format_distance",
    "is_valid_coordinates",
    "is_within_radius",
    "validate_coordinates",
    "PayCategory",
    "PayLine",
    "PayrollTotals",
    "TransactionType",
    "compute_totals",
    "BreakdownRow",
    "SalaryMonth",
    "count_active_days",
    "expand_breakdown",
    "parse_salary_month",
    "prorate_salary",
    "AttendanceMetrics",
    "ShiftSchedule",
    "calculate_delay",
    "calculate_early_departure",
    "calculate_minutes_late",
    "calculate_overtime",
    "calculate_scheduled_duration",
    "calculate_shortage",
    "calculate_working_hours",
    "compute_attendance_metrics",
    "format_hours",
    "hours_to_minutes",
    "is_midnight_crossing",
    "minutes_to_hours",
    "round_to_quarter_hour",
]
