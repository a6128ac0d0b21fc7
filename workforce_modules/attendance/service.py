"""
Attendance Module Service (``workforce_modules.attendance.service``).

Responsibility
--------------
The attendance engine: check-in and check-out with geofence validation,
HR manual entries, administrative deletes, auto check-out of forgotten
records, no-show absence marking and the monthly timesheet roll-up.
Pure computation is delegated to ``workforce_engines.geo`` and
``workforce_engines.time_metrics``; monthly entries are kept in step by
``AllowanceDeductionSynchronizer``.

Architecture position
---------------------
**Modules layer** -- ``AttendanceService`` is the sole public entry point for
attendance writes.

Invariants enforced
-------------------
* Each public method owns the transaction boundary (``commit`` on success,
  ``rollback`` on rejection or exception).
* At most one record per (employee, date); the unique constraint turns a
  lost check-in race into ``DuplicateCheckInError``.
* No write touches a closed attendance day.
* The synchronizer runs in the same transaction as the record change.

Failure modes
-------------
* Business-rule violation  -> ``AttendanceResult`` with ``is_success ==
  False``; session rolled back.
* ``ValidationError`` / ``NotFoundError``  -> session rolled back, raised.
* Unexpected exception  -> session rolled back, re-raised.

Usage::

    service = AttendanceService(session, employees, projects, clock=clock)
    result = service.check_in("E100", "PRJ-1", Decimal("24.7136"), Decimal("46.6753"))
    if result.is_success:
        print(result.value.minutes_late)
"""

from __future__ import annotations

from datetime import date, time, timedelta
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from workforce_engines.geo import (
    calculate_distance,
    check_location,
    is_valid_coordinates,
    validate_coordinates,
)
from workforce_engines.proration import parse_salary_month
from workforce_engines.time_metrics import (
    ShiftSchedule,
    calculate_delay,
    calculate_minutes_late,
    compute_attendance_metrics,
    scheduled_end_for,
)
from workforce_kernel.db.types import ZERO_HOURS, round_hours
from workforce_kernel.domain.clock import Clock, SystemClock
from workforce_kernel.domain.results import ServiceResult
from workforce_kernel.exceptions import (
    AlreadyCheckedOutError,
    AttendanceOwnershipError,
    AttendanceRecordNotFoundError,
    BusinessRuleViolation,
    CheckInAfterShiftEndError,
    DayClosedError,
    DuplicateCheckInError,
    EmployeeNotFoundError,
    MissingFieldError,
    NotFoundError,
    OpenAttendanceNotFoundError,
    OutsideGeofenceError,
    ProjectNotFoundError,
)
from workforce_kernel.logging_config import LogContext, get_logger
from workforce_kernel.services.base import SYSTEM_ACTOR_ID
from workforce_modules._service_helpers import reject
from workforce_modules.attendance.allowances import AllowanceDeductionSynchronizer
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
    AutoCheckoutSummary,
    CheckInResult,
    CheckOutResult,
    ManualAttendanceInput,
    MonthlyTimesheet,
    TimesheetDay,
)
from workforce_modules.attendance.orm import AttendanceTransactionModel
from workforce_modules.directory import (
    EmployeeDirectory,
    EmployeeProfile,
    EmploymentStatus,
    ProjectDirectory,
    ProjectSite,
)

logger = get_logger("modules.attendance.service")

NO_SHOW_REASON = "No show - marked by system"


def _distance_decimal(distance: float | None) -> Decimal | None:
    if distance is None:
        return None
    return Decimal(f"{distance:.2f}")


def _after_shift_end(at: time, schedule: ShiftSchedule) -> bool:
    """Check-in time falls after the shift has ended.

    For a midnight-crossing shift the dead window is between its end and
    the next start.
    """
    if schedule.crosses_midnight:
        return schedule.end_time < at < schedule.start_time
    return at > schedule.end_time


class AttendanceService:
    """
    Orchestrates the attendance lifecycle for employees.

    Contract:
        Every public method commits its own transaction on success and rolls
        back on rejection or error.  Collaborators (schedule resolver,
        calendar, day closure, synchronizer) are flush-only.
    """

    def __init__(
        self,
        session: Session,
        employees: EmployeeDirectory,
        projects: ProjectDirectory,
        *,
        config: AttendanceConfig | None = None,
        clock: Clock | None = None,
        schedules: ScheduleResolver | None = None,
        calendar: WorkCalendar | None = None,
        closures: DayClosureService | None = None,
        synchronizer: AllowanceDeductionSynchronizer | None = None,
    ):
        self._session = session
        self._employees = employees
        self._projects = projects
        self._config = config or AttendanceConfig.with_defaults()
        self._clock = clock or SystemClock()
        self._schedules = schedules or SqlScheduleResolver(session, self._config.default_schedule)
        self._calendar = calendar or SqlWorkCalendar(session, self._config.default_weekend_days)
        self._closures = closures or SqlDayClosureService(session, self._clock)
        self._synchronizer = synchronizer or AllowanceDeductionSynchronizer(
            session, employees, self._config
        )

    # =========================================================================
    # Lookups
    # =========================================================================

    def _require_employee(self, employee_no: str) -> EmployeeProfile:
        employee = self._employees.get(employee_no)
        if employee is None:
            raise EmployeeNotFoundError(employee_no)
        return employee

    def _project(self, project_code: str | None) -> ProjectSite | None:
        if not project_code:
            return None
        project = self._projects.get(project_code)
        if project is None:
            raise ProjectNotFoundError(project_code)
        return project

    def _record_for(self, employee_no: str, day: date) -> AttendanceTransactionModel | None:
        return self._session.scalars(
            select(AttendanceTransactionModel).where(
                AttendanceTransactionModel.employee_no == employee_no,
                AttendanceTransactionModel.attendance_date == day,
            )
        ).first()

    def _open_record_for(self, employee_no: str, today: date) -> AttendanceTransactionModel:
        """Today's open record, else yesterday's (night shifts)."""
        for day in (today, today - timedelta(days=1)):
            row = self._record_for(employee_no, day)
            if row is not None and row.entry_time is not None and row.exit_time is None:
                return row
        raise OpenAttendanceNotFoundError(employee_no, today)

    def _ensure_day_open(self, day: date) -> None:
        if self._closures.is_closed(day):
            raise DayClosedError(day)

    def _classify(self, day: date) -> tuple[bool, bool]:
        return self._calendar.is_holiday(day), self._calendar.is_weekend(day)

    def _verify_location(
        self,
        project: ProjectSite | None,
        latitude: Decimal | None,
        longitude: Decimal | None,
    ) -> float | None:
        """Distance to site; rejects a point outside a required geofence."""
        required = (
            project is not None
            and project.require_location_check
            and self._config.enforce_location_check
        )
        if not required:
            if (
                project is not None
                and is_valid_coordinates(latitude, longitude)
                and is_valid_coordinates(project.latitude, project.longitude)
            ):
                return calculate_distance(latitude, longitude, project.latitude, project.longitude)
            return None

        check = check_location(
            latitude, longitude, project.latitude, project.longitude, project.radius_meters
        )
        if not check.within_radius:
            raise OutsideGeofenceError(project.project_code, check.distance_meters, check.radius_meters)
        return check.distance_meters

    def _apply_metrics(
        self,
        row: AttendanceTransactionModel,
        employee: EmployeeProfile,
    ) -> None:
        schedule = self._schedules.resolve(employee.dept_id, row.project_code)
        is_holiday, is_weekend = self._classify(row.attendance_date)
        metrics = compute_attendance_metrics(
            attendance_date=row.attendance_date,
            entry_time=row.entry_time,
            exit_time=row.exit_time,
            schedule=schedule,
            is_holiday=is_holiday,
            is_weekend=is_weekend,
            overtime_multiplier=self._config.overtime_multiplier,
            shortage_floor_hours=self._config.shortage_floor_hours,
        )
        row.scheduled_hours = metrics.scheduled_hours
        row.working_hours = metrics.working_hours
        row.overtime_calc = metrics.overtime_hours
        row.delayed_calc = metrics.delay_hours
        row.early_out_calc = metrics.early_out_hours
        row.shortage_hours = metrics.shortage_hours
        row.is_holiday_work = "Y" if is_holiday else "N"
        row.is_weekend_work = "Y" if is_weekend else "N"

    def get_record(self, transaction_id: UUID) -> AttendanceRecord:
        row = self._session.get(AttendanceTransactionModel, transaction_id)
        if row is None:
            raise AttendanceRecordNotFoundError(str(transaction_id))
        return row.to_dto()

    # =========================================================================
    # Check-in
    # =========================================================================

    def check_in(
        self,
        employee_no: str,
        project_code: str | None,
        latitude: Decimal | None,
        longitude: Decimal | None,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> AttendanceResult:
        """
        Open today's attendance record for ``employee_no``.

        Returns:
            ``AttendanceResult`` carrying ``CheckInResult`` on success, or the
            ``BusinessRuleViolation`` that refused the check-in.

        Raises:
            ValidationError: Malformed coordinates.
            NotFoundError: Unknown employee or project.
        """
        now = self._clock.now()
        today = now.date()
        extra = {"employee_no": employee_no, "project_code": project_code, "attendance_date": today.isoformat()}

        with LogContext.bind(employee_no=employee_no, actor_id=str(actor_id)):
            try:
                logger.info("attendance_check_in_started", extra=extra)

                employee = self._require_employee(employee_no)
                project_code = project_code or employee.project_code
                project = self._project(project_code)
                if latitude is not None or longitude is not None:
                    validate_coordinates(latitude, longitude)

                self._ensure_day_open(today)
                if self._record_for(employee_no, today) is not None:
                    raise DuplicateCheckInError(employee_no, today)

                schedule = self._schedules.resolve(employee.dept_id, project_code)
                if self._config.reject_check_in_after_shift_end and _after_shift_end(now.time(), schedule):
                    raise CheckInAfterShiftEndError(employee_no, schedule.end_time)

                distance = self._verify_location(project, latitude, longitude)
                is_holiday, is_weekend = self._classify(today)

                record = AttendanceRecord(
                    id=uuid4(),
                    employee_no=employee_no,
                    attendance_date=today,
                    project_code=project_code,
                    entry_time=now,
                    entry_latitude=latitude,
                    entry_longitude=longitude,
                    entry_distance_meters=_distance_decimal(distance),
                    scheduled_hours=schedule.required_hours,
                    delayed_calc=calculate_delay(
                        now, schedule.start_time, schedule.grace_period_minutes, today
                    ),
                    is_holiday_work=is_holiday,
                    is_weekend_work=is_weekend,
                )
                self._session.add(AttendanceTransactionModel.from_dto(record, created_by_id=actor_id))
                try:
                    self._session.flush()
                except IntegrityError as exc:
                    raise DuplicateCheckInError(employee_no, today) from exc

                self._session.commit()

                minutes_late = calculate_minutes_late(now, schedule.start_time, today)
                logger.info(
                    "attendance_checked_in",
                    extra={
                        **extra,
                        "transaction_id": str(record.id),
                        "distance_meters": distance,
                        "minutes_late": minutes_late,
                        "delayed_calc": str(record.delayed_calc),
                    },
                )
                return ServiceResult.ok(
                    CheckInResult(
                        transaction_id=record.id,
                        attendance_date=today,
                        entry_time=now,
                        distance_meters=distance,
                        minutes_late=minutes_late,
                        is_holiday_work=is_holiday,
                        is_weekend_work=is_weekend,
                    )
                )

            except BusinessRuleViolation as exc:
                return reject(self._session, logger, "attendance_check_in_rejected", exc, extra)
            except Exception:
                self._session.rollback()
                raise

    # =========================================================================
    # Check-out
    # =========================================================================

    def check_out(
        self,
        employee_no: str,
        latitude: Decimal | None,
        longitude: Decimal | None,
        transaction_id: UUID | None = None,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> AttendanceResult:
        """
        Close the referenced (or today's) open record and compute its metrics.

        Returns:
            ``AttendanceResult`` carrying ``CheckOutResult``.

        Raises:
            ValidationError: Malformed coordinates.
            NotFoundError: Unknown employee, unknown record, or no open record.
        """
        now = self._clock.now()
        extra = {
            "employee_no": employee_no,
            "transaction_id": str(transaction_id) if transaction_id else None,
        }

        with LogContext.bind(employee_no=employee_no, actor_id=str(actor_id)):
            try:
                logger.info("attendance_check_out_started", extra=extra)

                employee = self._require_employee(employee_no)
                if latitude is not None or longitude is not None:
                    validate_coordinates(latitude, longitude)

                if transaction_id is not None:
                    row = self._session.get(AttendanceTransactionModel, transaction_id)
                    if row is None:
                        raise AttendanceRecordNotFoundError(str(transaction_id))
                    if row.employee_no != employee_no:
                        raise AttendanceOwnershipError(str(transaction_id), employee_no)
                    if row.entry_time is None:
                        raise OpenAttendanceNotFoundError(employee_no, row.attendance_date)
                    if row.exit_time is not None:
                        raise AlreadyCheckedOutError(str(transaction_id))
                else:
                    row = self._open_record_for(employee_no, now.date())

                extra["transaction_id"] = str(row.id)
                self._ensure_day_open(row.attendance_date)
                distance = self._verify_location(self._project(row.project_code), latitude, longitude)

                row.exit_time = now
                row.exit_latitude = latitude
                row.exit_longitude = longitude
                row.exit_distance_meters = _distance_decimal(distance)
                row.updated_by_id = actor_id
                self._apply_metrics(row, employee)
                self._session.flush()

                self._synchronizer.synchronize(row.to_dto(), actor_id=actor_id)
                self._session.commit()

                result = CheckOutResult(
                    transaction_id=row.id,
                    exit_time=now,
                    working_hours=row.working_hours,
                    overtime_calc=row.overtime_calc,
                    delayed_calc=row.delayed_calc,
                    early_out_calc=row.early_out_calc,
                    shortage_hours=row.shortage_hours,
                    distance_meters=distance,
                )
                logger.info(
                    "attendance_checked_out",
                    extra={
                        **extra,
                        "working_hours": str(result.working_hours),
                        "overtime_calc": str(result.overtime_calc),
                        "early_out_calc": str(result.early_out_calc),
                        "shortage_hours": str(result.shortage_hours),
                    },
                )
                return ServiceResult.ok(result)

            except BusinessRuleViolation as exc:
                return reject(self._session, logger, "attendance_check_out_rejected", exc, extra)
            except Exception:
                self._session.rollback()
                raise

    # =========================================================================
    # Manual entry (HR)
    # =========================================================================

    def record_manual_attendance(
        self,
        data: ManualAttendanceInput,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> AttendanceResult:
        """
        Create or overwrite a record outside the check-in/out flow.

        No geofence check.  Metric fields left unset are computed from the
        timestamps and the resolved schedule.
        """
        extra = {
            "employee_no": data.employee_no,
            "attendance_date": data.attendance_date.isoformat(),
            "absence_flag": data.absence_flag,
        }
        try:
            logger.info("attendance_manual_entry_started", extra=extra)

            employee = self._require_employee(data.employee_no)
            if not data.absence_flag and data.entry_time is None:
                raise MissingFieldError("entry_time")
            if data.exit_time is not None and data.entry_time is None:
                raise MissingFieldError("entry_time")
            self._ensure_day_open(data.attendance_date)

            project_code = data.project_code or employee.project_code
            schedule = self._schedules.resolve(employee.dept_id, project_code)
            is_holiday, is_weekend = self._classify(data.attendance_date)
            metrics = compute_attendance_metrics(
                attendance_date=data.attendance_date,
                entry_time=data.entry_time,
                exit_time=data.exit_time,
                schedule=schedule,
                is_holiday=is_holiday,
                is_weekend=is_weekend,
                overtime_multiplier=self._config.overtime_multiplier,
                shortage_floor_hours=self._config.shortage_floor_hours,
            )

            def pick(supplied, computed):
                return supplied if supplied is not None else computed

            row = self._record_for(data.employee_no, data.attendance_date)
            created = row is None
            if created:
                row = AttendanceTransactionModel(
                    id=uuid4(),
                    employee_no=data.employee_no,
                    attendance_date=data.attendance_date,
                    created_by_id=actor_id,
                )
                self._session.add(row)
            else:
                row.updated_by_id = actor_id

            row.project_code = project_code
            row.entry_time = data.entry_time
            row.exit_time = data.exit_time
            row.scheduled_hours = pick(data.scheduled_hours, metrics.scheduled_hours)
            row.working_hours = pick(data.working_hours, metrics.working_hours)
            row.overtime_calc = pick(data.overtime_calc, metrics.overtime_hours)
            row.delayed_calc = pick(data.delayed_calc, metrics.delay_hours)
            row.early_out_calc = pick(data.early_out_calc, metrics.early_out_hours)
            row.shortage_hours = pick(data.shortage_hours, metrics.shortage_hours)
            row.absence_flag = "Y" if data.absence_flag else "N"
            row.absence_reason = data.absence_reason
            row.is_holiday_work = "Y" if is_holiday else "N"
            row.is_weekend_work = "Y" if is_weekend else "N"
            row.is_manual_entry = "Y"
            row.is_auto_checkout = "N"
            row.notes = data.notes
            try:
                self._session.flush()
            except IntegrityError as exc:
                raise DuplicateCheckInError(data.employee_no, data.attendance_date) from exc

            record = row.to_dto()
            self._synchronizer.synchronize(record, actor_id=actor_id)
            self._session.commit()

            logger.info(
                "attendance_manual_entry_recorded",
                extra={**extra, "transaction_id": str(record.id), "record_created": created},
            )
            return ServiceResult.ok(record)

        except BusinessRuleViolation as exc:
            return reject(self._session, logger, "attendance_manual_entry_rejected", exc, extra)
        except Exception:
            self._session.rollback()
            raise

    # =========================================================================
    # Administrative delete
    # =========================================================================

    def delete_attendance(
        self,
        transaction_id: UUID,
        reason: str,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> AttendanceResult:
        """Remove a record and supersede its system-generated entries."""
        extra = {"transaction_id": str(transaction_id), "reason": reason}
        try:
            if not reason or not reason.strip():
                raise MissingFieldError("reason")
            row = self._session.get(AttendanceTransactionModel, transaction_id)
            if row is None:
                raise AttendanceRecordNotFoundError(str(transaction_id))
            self._ensure_day_open(row.attendance_date)

            record = row.to_dto()
            self._synchronizer.clear(record.employee_no, record.attendance_date, actor_id=actor_id)
            self._session.delete(row)
            self._session.commit()

            logger.warning(
                "attendance_deleted",
                extra={
                    **extra,
                    "employee_no": record.employee_no,
                    "attendance_date": record.attendance_date.isoformat(),
                    "actor_id": str(actor_id),
                },
            )
            return ServiceResult.ok(record)

        except BusinessRuleViolation as exc:
            return reject(self._session, logger, "attendance_delete_rejected", exc, extra)
        except Exception:
            self._session.rollback()
            raise

    # =========================================================================
    # Scheduled jobs
    # =========================================================================

    def auto_checkout_open_records(
        self,
        as_of: date | None = None,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> AutoCheckoutSummary:
        """Close open records whose scheduled end has passed.

        The exit time is set to the scheduled end and the record is flagged
        ``is_auto_checkout``.  A record that cannot be processed is reported
        in ``failed`` without stopping the others.
        """
        now = self._clock.now()
        as_of = as_of or now.date()
        closed: list[UUID] = []
        failed: list[tuple[UUID, str]] = []
        try:
            rows = self._session.scalars(
                select(AttendanceTransactionModel)
                .where(
                    AttendanceTransactionModel.attendance_date <= as_of,
                    AttendanceTransactionModel.entry_time.is_not(None),
                    AttendanceTransactionModel.exit_time.is_(None),
                )
                .order_by(AttendanceTransactionModel.attendance_date, AttendanceTransactionModel.employee_no)
            ).all()
            logger.info("attendance_auto_checkout_started", extra={"as_of": as_of.isoformat(), "open_records": len(rows)})

            for row in rows:
                try:
                    employee = self._require_employee(row.employee_no)
                    self._ensure_day_open(row.attendance_date)
                    schedule = self._schedules.resolve(employee.dept_id, row.project_code)
                    exit_time = scheduled_end_for(row.attendance_date, schedule.start_time, schedule.end_time)
                    if exit_time > now:
                        continue
                    if exit_time <= row.entry_time:
                        exit_time = row.entry_time
                except (BusinessRuleViolation, NotFoundError) as exc:
                    failed.append((row.id, str(exc)))
                    logger.warning(
                        "attendance_auto_checkout_failed",
                        extra={"transaction_id": str(row.id), "employee_no": row.employee_no, "reason": str(exc)},
                    )
                    continue

                row.exit_time = exit_time
                row.is_auto_checkout = "Y"
                row.updated_by_id = actor_id
                self._apply_metrics(row, employee)
                self._session.flush()
                self._synchronizer.synchronize(row.to_dto(), actor_id=actor_id)
                closed.append(row.id)

            self._session.commit()
            logger.info(
                "attendance_auto_checkout_completed",
                extra={"closed": len(closed), "failed": len(failed)},
            )
            return AutoCheckoutSummary(closed=tuple(closed), failed=tuple(failed))

        except Exception:
            self._session.rollback()
            raise

    def mark_absences(
        self,
        for_date: date | None = None,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ) -> ServiceResult[AbsenceSummary]:
        """Create absence records for active employees with no record on a working day."""
        day = for_date or self._clock.today()
        extra = {"attendance_date": day.isoformat()}
        try:
            logger.info("attendance_mark_absences_started", extra=extra)
            is_holiday, is_weekend = self._classify(day)
            if is_holiday or is_weekend:
                reason = "holiday" if is_holiday else "weekend"
                logger.info("attendance_mark_absences_skipped", extra={**extra, "reason": reason})
                return ServiceResult.ok(AbsenceSummary(attendance_date=day, skipped_reason=reason))
            self._ensure_day_open(day)

            marked: list[str] = []
            present = 0
            for employee in self._employees.list_employees():
                if employee.employment_status is not EmploymentStatus.ACTIVE:
                    continue
                if employee.hire_date is not None and employee.hire_date > day:
                    continue
                if employee.termination_date is not None and employee.termination_date < day:
                    continue
                if self._record_for(employee.employee_no, day) is not None:
                    present += 1
                    continue

                schedule = self._schedules.resolve(employee.dept_id, employee.project_code)
                record = AttendanceRecord(
                    id=uuid4(),
                    employee_no=employee.employee_no,
                    attendance_date=day,
                    project_code=employee.project_code,
                    scheduled_hours=schedule.required_hours,
                    overtime_calc=ZERO_HOURS,
                    delayed_calc=ZERO_HOURS,
                    early_out_calc=ZERO_HOURS,
                    absence_flag=True,
                    absence_reason=NO_SHOW_REASON,
                )
                self._session.add(AttendanceTransactionModel.from_dto(record, created_by_id=actor_id))
                self._session.flush()
                self._synchronizer.synchronize(record, actor_id=actor_id)
                marked.append(employee.employee_no)

            self._session.commit()
            logger.info(
                "attendance_absences_marked",
                extra={**extra, "marked": len(marked), "already_present": present},
            )
            return ServiceResult.ok(
                AbsenceSummary(attendance_date=day, marked=tuple(marked), already_present=present)
            )

        except BusinessRuleViolation as exc:
            return reject(self._session, logger, "attendance_mark_absences_rejected", exc, extra)
        except Exception:
            self._session.rollback()
            raise

    # =========================================================================
    # Queries
    # =========================================================================

    def get_monthly_timesheet(self, employee_no: str, salary_month: str) -> MonthlyTimesheet:
        """Attendance roll-up for one employee and month (read-only)."""
        month = parse_salary_month(salary_month)
        rows = self._session.scalars(
            select(AttendanceTransactionModel)
            .where(
                AttendanceTransactionModel.employee_no == employee_no,
                AttendanceTransactionModel.attendance_date >= month.start,
                AttendanceTransactionModel.attendance_date <= month.end,
            )
            .order_by(AttendanceTransactionModel.attendance_date)
        ).all()

        days: list[TimesheetDay] = []
        present = absent = late = weekend_worked = holiday_worked = 0
        totals = {
            "working": ZERO_HOURS,
            "overtime": ZERO_HOURS,
            "delay": ZERO_HOURS,
            "early_out": ZERO_HOURS,
            "shortage": ZERO_HOURS,
        }
        for row in rows:
            record = row.to_dto()
            if record.entry_time is not None:
                present += 1
                if record.is_weekend_work:
                    weekend_worked += 1
                if record.is_holiday_work:
                    holiday_worked += 1
            if record.absence_flag:
                absent += 1
            if record.delayed_calc and record.delayed_calc > 0:
                late += 1
            totals["working"] += record.working_hours or ZERO_HOURS
            totals["overtime"] += record.overtime_calc or ZERO_HOURS
            totals["delay"] += record.delayed_calc or ZERO_HOURS
            totals["early_out"] += record.early_out_calc or ZERO_HOURS
            totals["shortage"] += record.shortage_hours or ZERO_HOURS
            days.append(
                TimesheetDay(
                    attendance_date=record.attendance_date,
                    entry_time=record.entry_time,
                    exit_time=record.exit_time,
                    working_hours=record.working_hours,
                    overtime_calc=record.overtime_calc,
                    delayed_calc=record.delayed_calc,
                    is_absent=record.absence_flag,
                    is_holiday=record.is_holiday_work,
                    is_weekend=record.is_weekend_work,
                )
            )

        return MonthlyTimesheet(
            employee_no=employee_no,
            salary_month=month.value,
            days=tuple(days),
            present_days=present,
            absent_days=absent,
            late_days=late,
            weekend_days_worked=weekend_worked,
            holiday_days_worked=holiday_worked,
            total_working_hours=round_hours(totals["working"]),
            total_overtime_hours=round_hours(totals["overtime"]),
            total_delay_hours=round_hours(totals["delay"]),
            total_early_out_hours=round_hours(totals["early_out"]),
            total_shortage_hours=round_hours(totals["shortage"]),
        )
