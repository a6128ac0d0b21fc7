"""
Typed Exception Hierarchy for the Workforce Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Attendance and payroll callers need to branch on the kind of failure, not on
message wording.  Every error therefore has:
  1. A TYPED exception class (catch by type, not message)
  2. A CODE class attribute (machine-readable, API-safe)
  3. Structured DATA stored as attributes (not just a message string)

Example - WRONG way to handle errors:
    try:
        service.check_in(...)
    except Exception as e:
        if "outside" in str(e):  # FRAGILE - message might change
            ask_user_to_move()

Example - RIGHT way (what this module enables):
    try:
        service.check_in(...)
    except OutsideGeofenceError as e:
        log.warning("outside by %s m", e.distance_meters - e.radius_meters)
        api_response(code=e.code, project=e.project_code)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from WorkforceKernelError:

    WorkforceKernelError (base)
    |
    +-- ValidationError
    |   +-- InvalidCoordinatesError
    |   +-- InvalidRadiusError
    |   +-- InvalidMonthError
    |   +-- MissingFieldError
    |
    +-- BusinessRuleViolation
    |   +-- DuplicateCheckInError
    |   +-- AlreadyCheckedOutError
    |   +-- AttendanceOwnershipError
    |   +-- DayClosedError
    |   +-- OutsideGeofenceError
    |   +-- CheckInAfterShiftEndError
    |   +-- IneligibleContractTypeError
    |   +-- IneligibleEmploymentStatusError
    |   +-- DuplicatePayrollCalculationError
    |   +-- RecalculationReasonRequiredError
    |   +-- InvalidApprovalStateError
    |   +-- ApproverNotAuthorizedError
    |   +-- RejectionReasonRequiredError
    |
    +-- NotFoundError
    |   +-- EmployeeNotFoundError
    |   +-- ProjectNotFoundError
    |   +-- AttendanceRecordNotFoundError
    |   +-- OpenAttendanceNotFoundError
    |   +-- SalaryHeaderNotFoundError
    |   +-- LoanNotFoundError
    |   +-- InstallmentNotFoundError
    |
    +-- ConcurrencyError
        +-- InstallmentAlreadyPaidError
        +-- StaleSalaryHeaderError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                          | When Raised
----------------|-------------------------------|---------------------------------------
Validation      | INVALID_COORDINATES           | Missing / out-of-range lat or lon
                | INVALID_RADIUS                | Missing or negative geofence radius
                | INVALID_MONTH                 | Salary month not "YYYY-MM"
                | MISSING_FIELD                 | Required input field absent
----------------|-------------------------------|---------------------------------------
Business rule   | DUPLICATE_CHECK_IN            | Record exists for employee/date
                | ALREADY_CHECKED_OUT           | Record already has an exit time
                | ATTENDANCE_OWNERSHIP          | Record belongs to another employee
                | DAY_CLOSED                    | Attendance date administratively closed
                | OUTSIDE_GEOFENCE              | Distance to site exceeds radius
                | CHECK_IN_AFTER_SHIFT_END      | Check-in after scheduled end
                | INELIGIBLE_CONTRACT_TYPE      | Contract type not payroll-eligible
                | INELIGIBLE_EMPLOYMENT_STATUS  | Employee not active / on leave
                | DUPLICATE_PAYROLL_CALCULATION | Latest header already exists
                | RECALCULATION_REASON_REQUIRED | Recalculation without a reason
                | INVALID_APPROVAL_STATE        | Header not pending
                | APPROVER_NOT_AUTHORIZED       | Approver not next in chain
                | REJECTION_REASON_REQUIRED     | Rejection without a reason
----------------|-------------------------------|---------------------------------------
Not found       | EMPLOYEE_NOT_FOUND            | Unknown employee number
                | PROJECT_NOT_FOUND             | Unknown project code
                | ATTENDANCE_RECORD_NOT_FOUND   | Unknown attendance transaction id
                | OPEN_ATTENDANCE_NOT_FOUND     | No record to check out from
                | SALARY_HEADER_NOT_FOUND       | No header for id / employee-month
                | LOAN_NOT_FOUND                | Unknown loan id
                | INSTALLMENT_NOT_FOUND         | Unknown installment id
----------------|-------------------------------|---------------------------------------
Concurrency     | INSTALLMENT_ALREADY_PAID      | Installment consumed concurrently
                | STALE_SALARY_HEADER           | Header changed between read and write

===============================================================================
DESIGN DECISIONS
===============================================================================

1. ValidationError and NotFoundError propagate as exceptions.  Business rule
   violations are raised inside the services and caught at the module
   service boundary, where they are returned inside a result object so
   callers can branch without try/except.

2. Negative net salary, missing breakdown rows and loan installments that
   exceed net pay are NOT errors.  They are logged outcomes.

===============================================================================
"""

from datetime import date
from decimal import Decimal


class WorkforceKernelError(Exception):
    """
    Base exception for all workforce kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "WORKFORCE_KERNEL_ERROR"


# Validation exceptions


class ValidationError(WorkforceKernelError):
    """Malformed or out-of-range input, rejected before any persistence."""

    code: str = "VALIDATION_ERROR"


class InvalidCoordinatesError(ValidationError):
    """A latitude/longitude is missing or outside its valid range."""

    code: str = "INVALID_COORDINATES"

    def __init__(self, latitude, longitude, reason: str):
        self.latitude = latitude
        self.longitude = longitude
        self.reason = reason
        super().__init__(
            f"Invalid coordinates ({latitude}, {longitude}): {reason}"
        )


class InvalidRadiusError(ValidationError):
    """Geofence radius is missing or negative."""

    code: str = "INVALID_RADIUS"

    def __init__(self, radius_meters):
        self.radius_meters = radius_meters
        super().__init__(
            f"Radius must be a non-negative number of meters, got {radius_meters}"
        )


class InvalidMonthError(ValidationError):
    """Salary month is not in YYYY-MM form."""

    code: str = "INVALID_MONTH"

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid salary month {value!r}: expected YYYY-MM")


class MissingFieldError(ValidationError):
    """A required input field was not supplied."""

    code: str = "MISSING_FIELD"

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Required field missing: {field_name}")


# Business rule exceptions


class BusinessRuleViolation(WorkforceKernelError):
    """
    Request is well-formed but not allowed in the current state.

    The caller must change intent (for example use the recalculation path)
    rather than blindly retry.
    """

    code: str = "BUSINESS_RULE_VIOLATION"


class DuplicateCheckInError(BusinessRuleViolation):
    """An attendance record already exists for the employee and date."""

    code: str = "DUPLICATE_CHECK_IN"

    def __init__(self, employee_no: str, attendance_date: date):
        self.employee_no = employee_no
        self.attendance_date = attendance_date
        super().__init__(
            f"Employee {employee_no} already has an attendance record "
            f"for {attendance_date.isoformat()}"
        )


class AlreadyCheckedOutError(BusinessRuleViolation):
    """The attendance record is already closed."""

    code: str = "ALREADY_CHECKED_OUT"

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Attendance {transaction_id} is already checked out")


class AttendanceOwnershipError(BusinessRuleViolation):
    """The referenced attendance record belongs to a different employee."""

    code: str = "ATTENDANCE_OWNERSHIP"

    def __init__(self, transaction_id: str, employee_no: str):
        self.transaction_id = transaction_id
        self.employee_no = employee_no
        super().__init__(
            f"Attendance {transaction_id} does not belong to employee {employee_no}"
        )


class DayClosedError(BusinessRuleViolation):
    """The attendance date has been administratively closed."""

    code: str = "DAY_CLOSED"

    def __init__(self, attendance_date: date):
        self.attendance_date = attendance_date
        super().__init__(
            f"Attendance date {attendance_date.isoformat()} is closed for edits"
        )


class OutsideGeofenceError(BusinessRuleViolation):
    """The reported location is farther from the site than its radius allows."""

    code: str = "OUTSIDE_GEOFENCE"

    def __init__(self, project_code: str, distance_meters: float, radius_meters: Decimal):
        self.project_code = project_code
        self.distance_meters = distance_meters
        self.radius_meters = radius_meters
        super().__init__(
            f"Location is {distance_meters:.0f} m from project {project_code}; "
            f"allowed radius is {radius_meters} m"
        )


class CheckInAfterShiftEndError(BusinessRuleViolation):
    """Check-in attempted after the scheduled end of the shift."""

    code: str = "CHECK_IN_AFTER_SHIFT_END"

    def __init__(self, employee_no: str, scheduled_end):
        self.employee_no = employee_no
        self.scheduled_end = scheduled_end
        super().__init__(
            f"Cannot check in after scheduled end time {scheduled_end}"
        )


class IneligibleContractTypeError(BusinessRuleViolation):
    """The employee's contract type is not on the payroll whitelist."""

    code: str = "INELIGIBLE_CONTRACT_TYPE"

    def __init__(self, employee_no: str, contract_type: str | None, required: tuple[str, ...]):
        self.employee_no = employee_no
        self.contract_type = contract_type
        self.required = required
        super().__init__(
            f"Employee {employee_no} has contract type {contract_type!r}; "
            f"payroll requires one of: {', '.join(required)}"
        )


class IneligibleEmploymentStatusError(BusinessRuleViolation):
    """The employee is not in a payroll-eligible employment status."""

    code: str = "INELIGIBLE_EMPLOYMENT_STATUS"

    def __init__(self, employee_no: str, status: str):
        self.employee_no = employee_no
        self.status = status
        super().__init__(
            f"Employee {employee_no} is not eligible for payroll (status {status})"
        )


class DuplicatePayrollCalculationError(BusinessRuleViolation):
    """A latest salary header already exists for the employee and month."""

    code: str = "DUPLICATE_PAYROLL_CALCULATION"

    def __init__(self, employee_no: str, salary_month: str, existing_version: int | None = None):
        self.employee_no = employee_no
        self.salary_month = salary_month
        self.existing_version = existing_version
        super().__init__(
            f"Payroll for employee {employee_no} month {salary_month} already "
            f"calculated; use recalculate with a reason"
        )


class RecalculationReasonRequiredError(BusinessRuleViolation):
    """Recalculation requested without a reason."""

    code: str = "RECALCULATION_REASON_REQUIRED"

    def __init__(self, employee_no: str, salary_month: str):
        self.employee_no = employee_no
        self.salary_month = salary_month
        super().__init__(
            f"Recalculating payroll for {employee_no} {salary_month} requires a reason"
        )


class InvalidApprovalStateError(BusinessRuleViolation):
    """Approval action attempted on a header that is not pending."""

    code: str = "INVALID_APPROVAL_STATE"

    def __init__(self, salary_id: str, current_status: str):
        self.salary_id = salary_id
        self.current_status = current_status
        super().__init__(
            f"Salary header {salary_id} is {current_status}; only pending "
            f"headers can be approved or rejected"
        )


class ApproverNotAuthorizedError(BusinessRuleViolation):
    """The approver is not the next approver in the chain."""

    code: str = "APPROVER_NOT_AUTHORIZED"

    def __init__(self, salary_id: str, approver_id: str):
        self.salary_id = salary_id
        self.approver_id = approver_id
        super().__init__(
            f"Approver {approver_id} is not authorized to act on salary header {salary_id}"
        )


class RejectionReasonRequiredError(BusinessRuleViolation):
    """Rejection without a reason."""

    code: str = "REJECTION_REASON_REQUIRED"

    def __init__(self, salary_id: str):
        self.salary_id = salary_id
        super().__init__(f"Rejecting salary header {salary_id} requires a reason")


# Not-found exceptions


class NotFoundError(WorkforceKernelError):
    """Referenced entity does not exist."""

    code: str = "NOT_FOUND"


class EmployeeNotFoundError(NotFoundError):
    """Employee number is unknown to the directory."""

    code: str = "EMPLOYEE_NOT_FOUND"

    def __init__(self, employee_no: str):
        self.employee_no = employee_no
        super().__init__(f"Employee not found: {employee_no}")


class ProjectNotFoundError(NotFoundError):
    """Project code is unknown to the directory."""

    code: str = "PROJECT_NOT_FOUND"

    def __init__(self, project_code: str):
        self.project_code = project_code
        super().__init__(f"Project not found: {project_code}")


class AttendanceRecordNotFoundError(NotFoundError):
    """Attendance transaction id does not exist."""

    code: str = "ATTENDANCE_RECORD_NOT_FOUND"

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Attendance record not found: {transaction_id}")


class OpenAttendanceNotFoundError(NotFoundError):
    """No attendance record exists to check out from."""

    code: str = "OPEN_ATTENDANCE_NOT_FOUND"

    def __init__(self, employee_no: str, attendance_date: date):
        self.employee_no = employee_no
        self.attendance_date = attendance_date
        super().__init__(
            f"No check-in found for employee {employee_no} on "
            f"{attendance_date.isoformat()}"
        )


class SalaryHeaderNotFoundError(NotFoundError):
    """No salary header for the given id or employee/month."""

    code: str = "SALARY_HEADER_NOT_FOUND"

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(f"Salary header not found: {reference}")


class LoanNotFoundError(NotFoundError):
    """Loan id does not exist."""

    code: str = "LOAN_NOT_FOUND"

    def __init__(self, loan_id: str):
        self.loan_id = loan_id
        super().__init__(f"Loan not found: {loan_id}")


class InstallmentNotFoundError(NotFoundError):
    """Loan installment id does not exist."""

    code: str = "INSTALLMENT_NOT_FOUND"

    def __init__(self, installment_id: str):
        self.installment_id = installment_id
        super().__init__(f"Loan installment not found: {installment_id}")


# Concurrency exceptions


class ConcurrencyError(WorkforceKernelError):
    """Base exception for concurrency-related errors."""

    code: str = "CONCURRENCY_ERROR"


class InstallmentAlreadyPaidError(ConcurrencyError):
    """The installment was consumed by another transaction first."""

    code: str = "INSTALLMENT_ALREADY_PAID"

    def __init__(self, installment_id: str):
        self.installment_id = installment_id
        super().__init__(
            f"Loan installment {installment_id} was already paid by another transaction"
        )


class StaleSalaryHeaderError(ConcurrencyError):
    """The salary header changed between read and conditional write."""

    code: str = "STALE_SALARY_HEADER"

    def __init__(self, salary_id: str):
        self.salary_id = salary_id
        super().__init__(
            f"Salary header {salary_id} was modified by another transaction"
        )
