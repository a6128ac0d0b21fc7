"""
Employee and project directories (``workforce_modules.directory``).

Responsibility
--------------
Read-only master data consumed by the attendance and payroll services.
Identity management lives outside this system; callers plug in their own
directory by satisfying the ``EmployeeDirectory`` / ``ProjectDirectory``
protocols.  In-memory implementations are provided for embedding and
tests.

Architecture position
---------------------
**Modules layer** -- collaborator interfaces.  No persistence.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Protocol, runtime_checkable

from workforce_kernel.logging_config import get_logger

logger = get_logger("modules.directory")


class EmploymentStatus(Enum):
    ACTIVE = "ACTIVE"
    ON_LEAVE = "ON_LEAVE"
    SUSPENDED = "SUSPENDED"
    TERMINATED = "TERMINATED"


@dataclass(frozen=True)
class EmployeeProfile:
    """Payroll-relevant view of an employee."""

    employee_no: str
    monthly_salary: Decimal
    category: str
    contract_type: str
    hire_date: date | None = None
    termination_date: date | None = None
    dept_id: str | None = None
    project_code: str | None = None
    employment_status: EmploymentStatus = EmploymentStatus.ACTIVE

    def __post_init__(self):
        if self.monthly_salary < 0:
            raise ValueError(
                f"monthly_salary cannot be negative for employee {self.employee_no}"
            )
        if (
            self.hire_date is not None
            and self.termination_date is not None
            and self.termination_date < self.hire_date
        ):
            logger.warning(
                "employee_termination_before_hire",
                extra={
                    "employee_no": self.employee_no,
                    "hire_date": self.hire_date.isoformat(),
                    "termination_date": self.termination_date.isoformat(),
                },
            )


@dataclass(frozen=True)
class ProjectSite:
    """Geofence of a project site."""

    project_code: str
    latitude: Decimal | None
    longitude: Decimal | None
    radius_meters: Decimal | None
    require_location_check: bool = True
    name: str = ""


@runtime_checkable
class EmployeeDirectory(Protocol):
    def get(self, employee_no: str) -> EmployeeProfile | None: ...

    def list_employees(self) -> list[EmployeeProfile]: ...


@runtime_checkable
class ProjectDirectory(Protocol):
    def get(self, project_code: str) -> ProjectSite | None: ...


class InMemoryEmployeeDirectory:
    """Dictionary-backed ``EmployeeDirectory``."""

    def __init__(self, employees: Iterable[EmployeeProfile] = ()):
        self._employees = {e.employee_no: e for e in employees}

    def add(self, employee: EmployeeProfile) -> None:
        self._employees[employee.employee_no] = employee

    def get(self, employee_no: str) -> EmployeeProfile | None:
        return self._employees.get(employee_no)

    def list_employees(self) -> list[EmployeeProfile]:
        return sorted(self._employees.values(), key=lambda e: e.employee_no)


class InMemoryProjectDirectory:
    """Dictionary-backed ``ProjectDirectory``."""

    def __init__(self, projects: Iterable[ProjectSite] = ()):
        self._projects = {p.project_code: p for p in projects}

    def add(self, project: ProjectSite) -> None:
        self._projects[project.project_code] = project

    def get(self, project_code: str) -> ProjectSite | None:
        return self._projects.get(project_code)
