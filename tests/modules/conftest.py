"""
Shared fixtures for module tests.

Provides the employee and project directories, reference-data seeders
(schedules, holidays, breakdown rows) and wired services.

DESIGN RULE: Every fixture is opt-in.  No autouse.  Each test explicitly
declares what it depends on in its function signature.
"""

from datetime import date, datetime, time
from decimal import Decimal

import pytest

from workforce_engines.approval import ApprovalLevel
from workforce_modules.attendance import AttendanceConfig, AttendanceService
from workforce_modules.attendance.calendar import SqlDayClosureService
from workforce_modules.attendance.orm import HolidayModel, TimeScheduleModel
from workforce_modules.directory import (
    EmployeeProfile,
    EmploymentStatus,
    InMemoryEmployeeDirectory,
    InMemoryProjectDirectory,
    ProjectSite,
)
from workforce_modules.entries import MonthlyEntryService
from workforce_modules.loans import LoanLedger
from workforce_modules.payroll import ConfigApprovalWorkflow, PayrollService
from workforce_modules.payroll.orm import SalaryBreakdownPercentageModel

# ---------------------------------------------------------------------------
# Well-known reference data
# ---------------------------------------------------------------------------

SITE_LAT = Decimal("24.71360000")
SITE_LON = Decimal("46.67530000")

# ~1.1 km north of the site
FAR_LAT = Decimal("24.72360000")

MONDAY = date(2024, 1, 15)
FRIDAY = date(2024, 1, 19)


def at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime.combine(day, time(hour, minute))


def make_employee(
    employee_no: str = "E100",
    monthly_salary: Decimal = Decimal("9000"),
    **overrides,
) -> EmployeeProfile:
    values = dict(
        employee_no=employee_no,
        monthly_salary=monthly_salary,
        category="STAFF",
        contract_type="TECHNO",
        hire_date=date(2020, 1, 1),
        dept_id="D1",
        project_code="PRJ-1",
        employment_status=EmploymentStatus.ACTIVE,
    )
    values.update(overrides)
    return EmployeeProfile(**values)


# ---------------------------------------------------------------------------
# Directories
# ---------------------------------------------------------------------------


@pytest.fixture
def employees():
    """Directory holding E100 (9000/month, hourly rate 37.5)."""
    return InMemoryEmployeeDirectory([make_employee()])


@pytest.fixture
def projects():
    return InMemoryProjectDirectory([
        ProjectSite(
            project_code="PRJ-1",
            latitude=SITE_LAT,
            longitude=SITE_LON,
            radius_meters=Decimal("100"),
            name="Head office",
        ),
        ProjectSite(
            project_code="REMOTE",
            latitude=SITE_LAT,
            longitude=SITE_LON,
            radius_meters=Decimal("100"),
            require_location_check=False,
            name="Field work",
        ),
        ProjectSite(
            project_code="NIGHT",
            latitude=SITE_LAT,
            longitude=SITE_LON,
            radius_meters=Decimal("100"),
            name="Night depot",
        ),
    ])


# ---------------------------------------------------------------------------
# Reference data seeders
# ---------------------------------------------------------------------------


@pytest.fixture
def add_schedule(session, test_actor_id):
    def _add(
        name: str,
        start: time,
        end: time,
        required_hours: Decimal = Decimal("8.00"),
        grace: int | None = 15,
        dept_id: str | None = None,
        project_code: str | None = None,
    ) -> TimeScheduleModel:
        row = TimeScheduleModel(
            schedule_name=name,
            dept_id=dept_id,
            project_code=project_code,
            scheduled_start_time=start,
            scheduled_end_time=end,
            required_hours=required_hours,
            grace_period_minutes=grace,
            is_active=True,
            created_by_id=test_actor_id,
        )
        session.add(row)
        session.commit()
        return row

    return _add


@pytest.fixture
def add_holiday(session, test_actor_id):
    def _add(day: date, name: str = "Holiday", recurring: bool = False) -> HolidayModel:
        row = HolidayModel(
            holiday_date=day,
            holiday_name=name,
            is_paid=True,
            is_recurring=recurring,
            is_active=True,
            created_by_id=test_actor_id,
        )
        session.add(row)
        session.commit()
        return row

    return _add


@pytest.fixture
def add_breakdown(session, test_actor_id):
    def _add(category: str, rows: dict[int, str]) -> None:
        for trans_type_code, percentage in rows.items():
            session.add(
                SalaryBreakdownPercentageModel(
                    employee_category=category,
                    trans_type_code=trans_type_code,
                    salary_percentage=Decimal(percentage),
                    is_active=True,
                    created_by_id=test_actor_id,
                )
            )
        session.commit()

    return _add


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


@pytest.fixture
def attendance_config():
    return AttendanceConfig.with_defaults()


@pytest.fixture
def attendance_service(session, employees, projects, attendance_config, deterministic_clock):
    return AttendanceService(
        session,
        employees,
        projects,
        config=attendance_config,
        clock=deterministic_clock,
    )


@pytest.fixture
def day_closures(session, deterministic_clock):
    return SqlDayClosureService(session, deterministic_clock)


@pytest.fixture
def entry_service(session):
    return MonthlyEntryService(session)


@pytest.fixture
def loan_ledger(session):
    return LoanLedger(session)


@pytest.fixture
def approval_workflow():
    """Two-level payroll chain: HR manager, then finance manager."""
    return ConfigApprovalWorkflow({
        "PAYROLL": (
            ApprovalLevel(level_no=1, approver_id="HR_MANAGER", title="HR Manager"),
            ApprovalLevel(level_no=2, approver_id="FINANCE_MANAGER", title="Finance Manager"),
        ),
    })


@pytest.fixture
def payroll_service(session, employees, approval_workflow, deterministic_clock):
    return PayrollService(
        session,
        employees,
        approvals=approval_workflow,
        clock=deterministic_clock,
    )
