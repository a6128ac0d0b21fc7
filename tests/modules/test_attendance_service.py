"""
Tests for the Attendance Module Service.

Validates:
- Check-in: geofence, duplicates, closed days, shift end, lateness, day type
- Check-out: metrics, ownership, double check-out, night shifts
- Monthly entries generated from closed records
- Structured logging of accepted and rejected requests
"""

from datetime import date, datetime, time
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import select

from workforce_engines.pay_lines import PayCategory, TransactionType
from workforce_engines.proration import parse_salary_month
from workforce_kernel.exceptions import (
    AttendanceRecordNotFoundError,
    EmployeeNotFoundError,
    InvalidCoordinatesError,
    MissingFieldError,
    OpenAttendanceNotFoundError,
    ProjectNotFoundError,
)
from workforce_modules.attendance import AttendanceConfig, AttendanceService, ManualAttendanceInput
from workforce_modules.attendance.orm import AttendanceTransactionModel
from workforce_modules.directory import EmploymentStatus
from tests.modules.conftest import (
    FAR_LAT,
    FRIDAY,
    MONDAY,
    SITE_LAT,
    SITE_LON,
    at,
    make_employee,
)

JAN = parse_salary_month("2024-01")


def _entries_by_code(entry_service, employee_no="E100"):
    return {
        entry.trans_type_code: entry
        for entry in entry_service.list_active_for_month(employee_no, JAN)
    }


# =============================================================================
# Check-in
# =============================================================================


class TestCheckIn:

    def test_on_time_inside_geofence(self, attendance_service, session):
        result = attendance_service.check_in("E100", "PRJ-1", SITE_LAT, SITE_LON)

        assert result.is_success
        check_in = result.value
        assert check_in.attendance_date == MONDAY
        assert check_in.entry_time == at(MONDAY, 8)
        assert check_in.minutes_late == 0
        assert check_in.distance_meters == pytest.approx(0.0, abs=0.01)
        assert not check_in.is_weekend_work
        assert not check_in.is_holiday_work

        record = attendance_service.get_record(check_in.transaction_id)
        assert record.is_open
        assert record.delayed_calc == Decimal("0")
        assert record.scheduled_hours == Decimal("8.00")

    def test_late_arrival_reports_raw_minutes_and_stores_delay(
        self, attendance_service, deterministic_clock,
    ):
        deterministic_clock.set_time(at(MONDAY, 8, 30))
        result = attendance_service.check_in("E100", "PRJ-1", SITE_LAT, SITE_LON)

        assert result.value.minutes_late == 30
        record = attendance_service.get_record(result.value.transaction_id)
        assert record.delayed_calc == Decimal("0.25")

    def test_defaults_to_employee_project(self, attendance_service):
        result = attendance_service.check_in("E100", None, SITE_LAT, SITE_LON)
        assert result.is_success
        assert attendance_service.get_record(result.value.transaction_id).project_code == "PRJ-1"

    def test_duplicate_rejected(self, attendance_service, deterministic_clock, session):
        assert attendance_service.check_in("E100", "PRJ-1", SITE_LAT, SITE_LON).is_success
        deterministic_clock.advance(600)

        result = attendance_service.check_in("E100", "PRJ-1", SITE_LAT, SITE_LON)

        assert not result.is_success
        assert result.error_code == "DUPLICATE_CHECK_IN"
        assert len(session.scalars(select(AttendanceTransactionModel)).all()) == 1

    def test_outside_geofence_rejected(self, attendance_service, session):
        result = attendance_service.check_in("E100", "PRJ-1", FAR_LAT, SITE_LON)

        assert not result.is_success
        assert result.error_code == "OUTSIDE_GEOFENCE"
        assert result.error.distance_meters > 1000
        assert session.scalars(select(AttendanceTransactionModel)).first() is None

    def test_location_check_not_required(self, attendance_service):
        result = attendance_service.check_in("E100", "REMOTE", FAR_LAT, SITE_LON)

        assert result.is_success
        assert result.value.distance_meters > 1000

    def test_location_enforcement_switched_off(
        self, session, employees, projects, deterministic_clock,
    ):
        service = AttendanceService(
            session,
            employees,
            projects,
            config=AttendanceConfig(enforce_location_check=False),
            clock=deterministic_clock,
        )
        assert service.check_in("E100", "PRJ-1", FAR_LAT, SITE_LON).is_success

    def test_missing_coordinates_for_required_check(self, attendance_service):
        with pytest.raises(InvalidCoordinatesError):
            attendance_service.check_in("E100", "PRJ-1", None, None)

    def test_out_of_range_coordinates(self, attendance_service):
        with pytest.raises(InvalidCoordinatesError):
            attendance_service.check_in("E100", "PRJ-1", Decimal("91"), SITE_LON)

    def test_unknown_employee(self, attendance_service):
        with pytest.raises(EmployeeNotFoundError):
            attendance_service.check_in("NOBODY", "PRJ-1", SITE_LAT, SITE_LON)

    def test_unknown_project(self, attendance_service):
        with pytest.raises(ProjectNotFoundError):
            attendance_service.check_in("E100", "NOPE", SITE_LAT, SITE_LON)

    def test_closed_day_rejected(self, attendance_service, day_closures, session):
        day_closures.close_date(MONDAY, notes="month-end")
        session.commit()

        result = attendance_service.check_in("E100", "PRJ-1", SITE_LAT, SITE_LON)

        assert not result.is_success
        assert result.error_code == "DAY_CLOSED"

    def test_reopened_day_accepts_check_in(self, attendance_service, day_closures, session):
        day_closures.close_date(MONDAY)
        day_closures.reopen_date(MONDAY)
        session.commit()

        assert attendance_service.check_in("E100", "PRJ-1", SITE_LAT, SITE_LON).is_success

    def test_after_shift_end_rejected(self, attendance_service, deterministic_clock):
        deterministic_clock.set_time(at(MONDAY, 18))

        result = attendance_service.check_in("E100", "PRJ-1", SITE_LAT, SITE_LON)

        assert not result.is_success
        assert result.error_code == "CHECK_IN_AFTER_SHIFT_END"

    def test_weekend_flagged(self, attendance_service, deterministic_clock):
        deterministic_clock.set_time(at(FRIDAY, 8))
        result = attendance_service.check_in("E100", "PRJ-1", SITE_LAT, SITE_LON)
        assert result.value.is_weekend_work

    def test_holiday_flagged(self, attendance_service, add_holiday):
        add_holiday(MONDAY, "Founding Day")
        result = attendance_service.check_in("E100", "PRJ-1", SITE_LAT, SITE_LON)
        assert result.value.is_holiday_work

    def test_recurring_holiday_matches_other_years(self, attendance_service, add_holiday):
        add_holiday(date(2019, 1, 15), "Anniversary", recurring=True)
        result = attendance_service.check_in("E100", "PRJ-1", SITE_LAT, SITE_LON)
        assert result.value.is_holiday_work

    def test_project_schedule_takes_priority(self, attendance_service, add_schedule, deterministic_clock):
        add_schedule("Dept", time(7), time(15), dept_id="D1")
        add_schedule("Project", time(9), time(18), project_code="PRJ-1")
        deterministic_clock.set_time(at(MONDAY, 9, 5))

        result = attendance_service.check_in("E100", "PRJ-1", SITE_LAT, SITE_LON)

        assert result.value.minutes_late == 5

    def test_department_schedule_used_without_project_schedule(
        self, attendance_service, add_schedule, deterministic_clock,
    ):
        add_schedule("Dept", time(7), time(15), dept_id="D1")
        deterministic_clock.set_time(at(MONDAY, 8))

        result = attendance_service.check_in("E100", "PRJ-1", SITE_LAT, SITE_LON)

        assert result.value.minutes_late == 60

    def test_logs_check_in(self, attendance_service, captured_logs):
        attendance_service.check_in("E100", "PRJ-1", SITE_LAT, SITE_LON)

        records = [r for r in captured_logs() if r["message"] == "attendance_checked_in"]
        assert len(records) == 1
        assert records[0]["employee_no"] == "E100"
        assert records[0]["minutes_late"] == 0

    def test_logs_rejection_with_error_code(self, attendance_service, captured_logs):
        attendance_service.check_in("E100", "PRJ-1", FAR_LAT, SITE_LON)

        rejected = [r for r in captured_logs() if r["message"] == "attendance_check_in_rejected"]
        assert rejected
        assert rejected[0]["error_code"] == "OUTSIDE_GEOFENCE"
        assert rejected[0]["level"] == "WARNING"


# =============================================================================
# Check-out
# =============================================================================


class TestCheckOut:

    def _check_in(self, service, clock, hour=8, minute=0, day=MONDAY, project="PRJ-1"):
        clock.set_time(at(day, hour, minute))
        result = service.check_in("E100", project, SITE_LAT, SITE_LON)
        assert result.is_success, result.message
        return result.value.transaction_id

    def test_overtime_day(self, attendance_service, deterministic_clock, entry_service):
        self._check_in(attendance_service, deterministic_clock)
        deterministic_clock.set_time(at(MONDAY, 18))

        result = attendance_service.check_out("E100", SITE_LAT, SITE_LON)

        assert result.is_success
        out = result.value
        assert out.working_hours == Decimal("10.00")
        assert out.overtime_calc == Decimal("2.00")
        assert out.early_out_calc == Decimal("0")
        assert out.shortage_hours == Decimal("0")

        entries = _entries_by_code(entry_service)
        assert set(entries) == {int(TransactionType.OVERTIME)}
        overtime = entries[int(TransactionType.OVERTIME)]
        # 9000 / 30 / 8 = 37.5 per hour
        assert overtime.amount == Decimal("75.0000")
        assert overtime.category is PayCategory.ALLOWANCE
        assert not overtime.is_manual
        assert overtime.effective_date == MONDAY
        assert overtime.end_date == MONDAY

    def test_early_departure(self, attendance_service, deterministic_clock, entry_service):
        self._check_in(attendance_service, deterministic_clock)
        deterministic_clock.set_time(at(MONDAY, 16))

        out = attendance_service.check_out("E100", SITE_LAT, SITE_LON).value

        assert out.working_hours == Decimal("8.00")
        assert out.early_out_calc == Decimal("1.00")
        entries = _entries_by_code(entry_service)
        assert entries[int(TransactionType.EARLY_DEPARTURE)].amount == Decimal("37.5000")
        assert int(TransactionType.SHORTAGE) not in entries

    def test_late_and_early_do_not_double_charge_shortage(
        self, attendance_service, deterministic_clock, entry_service,
    ):
        self._check_in(attendance_service, deterministic_clock, hour=9)
        deterministic_clock.set_time(at(MONDAY, 16))

        out = attendance_service.check_out("E100", SITE_LAT, SITE_LON).value

        assert out.delayed_calc == Decimal("0.75")
        assert out.early_out_calc == Decimal("1.00")
        assert out.shortage_hours == Decimal("1.00")
        entries = _entries_by_code(entry_service)
        assert entries[int(TransactionType.LATE_ARRIVAL)].amount == Decimal("28.1250")
        assert entries[int(TransactionType.EARLY_DEPARTURE)].amount == Decimal("37.5000")
        assert int(TransactionType.SHORTAGE) not in entries

    def test_shortage_beyond_lateness(
        self, attendance_service, deterministic_clock, entry_service, add_schedule,
    ):
        # 10 hours required inside an 08:00-17:00 window
        add_schedule("Long", time(8), time(17), required_hours=Decimal("10.00"), project_code="PRJ-1")
        self._check_in(attendance_service, deterministic_clock)
        deterministic_clock.set_time(at(MONDAY, 17))

        out = attendance_service.check_out("E100", SITE_LAT, SITE_LON).value

        assert out.shortage_hours == Decimal("1.00")
        entries = _entries_by_code(entry_service)
        # 9000 / 30 / 10 = 30 per hour
        assert entries[int(TransactionType.SHORTAGE)].amount == Decimal("30.0000")

    def test_explicit_transaction_id(self, attendance_service, deterministic_clock):
        transaction_id = self._check_in(attendance_service, deterministic_clock)
        deterministic_clock.set_time(at(MONDAY, 17))

        result = attendance_service.check_out("E100", SITE_LAT, SITE_LON, transaction_id=transaction_id)

        assert result.is_success
        assert result.value.transaction_id == transaction_id

    def test_already_checked_out(self, attendance_service, deterministic_clock):
        transaction_id = self._check_in(attendance_service, deterministic_clock)
        deterministic_clock.set_time(at(MONDAY, 17))
        attendance_service.check_out("E100", SITE_LAT, SITE_LON, transaction_id=transaction_id)

        result = attendance_service.check_out("E100", SITE_LAT, SITE_LON, transaction_id=transaction_id)

        assert not result.is_success
        assert result.error_code == "ALREADY_CHECKED_OUT"

    def test_other_employees_record(self, attendance_service, deterministic_clock, employees):
        employees.add(make_employee("E200"))
        transaction_id = self._check_in(attendance_service, deterministic_clock)
        deterministic_clock.set_time(at(MONDAY, 17))

        result = attendance_service.check_out("E200", SITE_LAT, SITE_LON, transaction_id=transaction_id)

        assert not result.is_success
        assert result.error_code == "ATTENDANCE_OWNERSHIP"

    def test_unknown_transaction(self, attendance_service):
        with pytest.raises(AttendanceRecordNotFoundError):
            attendance_service.check_out("E100", SITE_LAT, SITE_LON, transaction_id=uuid4())

    def test_no_open_record(self, attendance_service):
        with pytest.raises(OpenAttendanceNotFoundError):
            attendance_service.check_out("E100", SITE_LAT, SITE_LON)

    def test_outside_geofence_rejected(self, attendance_service, deterministic_clock):
        transaction_id = self._check_in(attendance_service, deterministic_clock)
        deterministic_clock.set_time(at(MONDAY, 17))

        result = attendance_service.check_out("E100", FAR_LAT, SITE_LON)

        assert result.error_code == "OUTSIDE_GEOFENCE"
        assert attendance_service.get_record(transaction_id).is_open

    def test_closed_day_rejected(self, attendance_service, deterministic_clock, day_closures, session):
        self._check_in(attendance_service, deterministic_clock)
        day_closures.close_date(MONDAY)
        session.commit()
        deterministic_clock.set_time(at(MONDAY, 17))

        result = attendance_service.check_out("E100", SITE_LAT, SITE_LON)

        assert result.error_code == "DAY_CLOSED"

    def test_night_shift_checks_out_next_morning(
        self, attendance_service, deterministic_clock, add_schedule,
    ):
        add_schedule("Night", time(22), time(6), project_code="NIGHT")
        transaction_id = self._check_in(attendance_service, deterministic_clock, hour=22, project="NIGHT")
        deterministic_clock.set_time(datetime(2024, 1, 16, 6, 30))

        result = attendance_service.check_out("E100", SITE_LAT, SITE_LON)

        assert result.is_success
        assert result.value.transaction_id == transaction_id
        assert result.value.working_hours == Decimal("8.50")
        assert result.value.overtime_calc == Decimal("0.50")
        assert result.value.early_out_calc == Decimal("0")
        assert attendance_service.get_record(transaction_id).attendance_date == MONDAY

    def test_weekend_work_is_all_overtime(self, attendance_service, deterministic_clock, entry_service):
        self._check_in(attendance_service, deterministic_clock, day=FRIDAY)
        deterministic_clock.set_time(at(FRIDAY, 12))

        out = attendance_service.check_out("E100", SITE_LAT, SITE_LON).value

        assert out.working_hours == Decimal("4.00")
        assert out.overtime_calc == Decimal("6.00")
        assert _entries_by_code(entry_service)[int(TransactionType.OVERTIME)].amount == Decimal("225.0000")

    def test_exit_distance_recorded(self, attendance_service, deterministic_clock):
        transaction_id = self._check_in(attendance_service, deterministic_clock)
        deterministic_clock.set_time(at(MONDAY, 17))
        attendance_service.check_out("E100", Decimal("24.71370000"), SITE_LON)

        record = attendance_service.get_record(transaction_id)
        assert record.exit_distance_meters == Decimal("11.12")
        assert record.exit_time == at(MONDAY, 17)


# =============================================================================
# Manual entry and delete
# =============================================================================


class TestManualAttendance:

    def test_absence_deducts_one_daily_rate(self, attendance_service, entry_service):
        result = attendance_service.record_manual_attendance(
            ManualAttendanceInput(
                employee_no="E100",
                attendance_date=MONDAY,
                absence_flag=True,
                absence_reason="Sick, no certificate",
            )
        )

        assert result.is_success
        assert result.value.absence_flag
        assert result.value.is_manual_entry
        entries = _entries_by_code(entry_service)
        assert set(entries) == {int(TransactionType.ABSENCE)}
        assert entries[int(TransactionType.ABSENCE)].amount == Decimal("300.0000")

    def test_overwrite_replaces_system_entries(self, attendance_service, entry_service, session):
        attendance_service.record_manual_attendance(
            ManualAttendanceInput(employee_no="E100", attendance_date=MONDAY, absence_flag=True)
        )

        result = attendance_service.record_manual_attendance(
            ManualAttendanceInput(
                employee_no="E100",
                attendance_date=MONDAY,
                entry_time=at(MONDAY, 8),
                exit_time=at(MONDAY, 17),
            )
        )

        assert result.value.working_hours == Decimal("9.00")
        assert result.value.overtime_calc == Decimal("1.00")
        assert len(session.scalars(select(AttendanceTransactionModel)).all()) == 1
        entries = _entries_by_code(entry_service)
        assert set(entries) == {int(TransactionType.OVERTIME)}
        assert entries[int(TransactionType.OVERTIME)].amount == Decimal("37.5000")

    def test_supplied_metrics_win_over_computed(self, attendance_service, entry_service):
        result = attendance_service.record_manual_attendance(
            ManualAttendanceInput(
                employee_no="E100",
                attendance_date=MONDAY,
                entry_time=at(MONDAY, 8),
                exit_time=at(MONDAY, 17),
                overtime_calc=Decimal("3.00"),
            )
        )

        assert result.value.overtime_calc == Decimal("3.00")
        assert _entries_by_code(entry_service)[int(TransactionType.OVERTIME)].amount == Decimal("112.5000")

    def test_manual_entry_skips_geofence(self, attendance_service):
        result = attendance_service.record_manual_attendance(
            ManualAttendanceInput(
                employee_no="E100",
                attendance_date=MONDAY,
                project_code="PRJ-1",
                entry_time=at(MONDAY, 8),
                exit_time=at(MONDAY, 17),
            )
        )
        assert result.is_success

    def test_entry_time_required_unless_absent(self, attendance_service):
        with pytest.raises(MissingFieldError):
            attendance_service.record_manual_attendance(
                ManualAttendanceInput(employee_no="E100", attendance_date=MONDAY)
            )

    def test_exit_without_entry(self, attendance_service):
        with pytest.raises(MissingFieldError):
            attendance_service.record_manual_attendance(
                ManualAttendanceInput(
                    employee_no="E100",
                    attendance_date=MONDAY,
                    absence_flag=True,
                    exit_time=at(MONDAY, 17),
                )
            )

    def test_closed_day_rejected(self, attendance_service, day_closures, session):
        day_closures.close_date(MONDAY)
        session.commit()

        result = attendance_service.record_manual_attendance(
            ManualAttendanceInput(employee_no="E100", attendance_date=MONDAY, absence_flag=True)
        )

        assert result.error_code == "DAY_CLOSED"

    def test_insert_losing_to_concurrent_check_in_is_rejected(
        self, attendance_service, session, monkeypatch,
    ):
        assert attendance_service.check_in("E100", "PRJ-1", SITE_LAT, SITE_LON).is_success
        # The lookup misses the row a concurrent check-in has just committed.
        monkeypatch.setattr(attendance_service, "_record_for", lambda employee_no, day: None)

        result = attendance_service.record_manual_attendance(
            ManualAttendanceInput(employee_no="E100", attendance_date=MONDAY, absence_flag=True)
        )

        assert not result.is_success
        assert result.error_code == "DUPLICATE_CHECK_IN"
        (row,) = session.scalars(select(AttendanceTransactionModel)).all()
        assert row.is_manual_entry == "N"


class TestDeleteAttendance:

    def test_delete_removes_record_and_system_entries(
        self, attendance_service, deterministic_clock, entry_service, captured_logs,
    ):
        transaction_id = attendance_service.check_in("E100", "PRJ-1", SITE_LAT, SITE_LON).value.transaction_id
        deterministic_clock.set_time(at(MONDAY, 18))
        attendance_service.check_out("E100", SITE_LAT, SITE_LON)
        assert _entries_by_code(entry_service)

        result = attendance_service.delete_attendance(transaction_id, reason="Duplicate badge scan")

        assert result.is_success
        with pytest.raises(AttendanceRecordNotFoundError):
            attendance_service.get_record(transaction_id)
        assert _entries_by_code(entry_service) == {}
        deleted = [r for r in captured_logs() if r["message"] == "attendance_deleted"]
        assert deleted[0]["level"] == "WARNING"
        assert deleted[0]["reason"] == "Duplicate badge scan"

    def test_delete_keeps_manual_entries(self, attendance_service, entry_service, session):
        entry_service.add_entry(
            employee_no="E100",
            trans_type_code=50,
            amount=Decimal("200"),
            category=PayCategory.ALLOWANCE,
            effective_date=MONDAY,
            end_date=MONDAY,
        )
        session.commit()
        record = attendance_service.record_manual_attendance(
            ManualAttendanceInput(employee_no="E100", attendance_date=MONDAY, absence_flag=True)
        ).value

        attendance_service.delete_attendance(record.id, reason="Entered in error")

        assert set(_entries_by_code(entry_service)) == {50}

    def test_reason_required(self, attendance_service):
        record = attendance_service.check_in("E100", "PRJ-1", SITE_LAT, SITE_LON).value
        with pytest.raises(MissingFieldError):
            attendance_service.delete_attendance(record.transaction_id, reason="  ")
        assert attendance_service.get_record(record.transaction_id).is_open

    def test_unknown_record(self, attendance_service):
        with pytest.raises(AttendanceRecordNotFoundError):
            attendance_service.delete_attendance(uuid4(), reason="cleanup")


# =============================================================================
# Scheduled jobs
# =============================================================================


class TestAutoCheckout:

    def test_closes_record_at_scheduled_end(self, attendance_service, deterministic_clock, entry_service):
        transaction_id = attendance_service.check_in("E100", "PRJ-1", SITE_LAT, SITE_LON).value.transaction_id
        deterministic_clock.set_time(at(MONDAY, 20))

        summary = attendance_service.auto_checkout_open_records()

        assert summary.closed == (transaction_id,)
        assert summary.failed == ()
        record = attendance_service.get_record(transaction_id)
        assert record.exit_time == at(MONDAY, 17)
        assert record.is_auto_checkout
        assert record.working_hours == Decimal("9.00")
        assert _entries_by_code(entry_service)[int(TransactionType.OVERTIME)].amount == Decimal("37.5000")

    def test_leaves_shift_in_progress_open(self, attendance_service, deterministic_clock):
        transaction_id = attendance_service.check_in("E100", "PRJ-1", SITE_LAT, SITE_LON).value.transaction_id
        deterministic_clock.set_time(at(MONDAY, 16))

        summary = attendance_service.auto_checkout_open_records()

        assert summary.closed == ()
        assert attendance_service.get_record(transaction_id).is_open

    def test_closed_day_reported_as_failure(
        self, attendance_service, deterministic_clock, day_closures, session,
    ):
        transaction_id = attendance_service.check_in("E100", "PRJ-1", SITE_LAT, SITE_LON).value.transaction_id
        day_closures.close_date(MONDAY)
        session.commit()
        deterministic_clock.set_time(at(MONDAY, 20))

        summary = attendance_service.auto_checkout_open_records()

        assert summary.closed == ()
        assert [failed_id for failed_id, _ in summary.failed] == [transaction_id]


class TestMarkAbsences:

    def test_marks_active_employees_without_record(
        self, attendance_service, employees, entry_service, deterministic_clock,
    ):
        employees.add(make_employee("E200", employment_status=EmploymentStatus.TERMINATED))
        employees.add(make_employee("E300", hire_date=date(2024, 2, 1)))
        employees.add(make_employee("E400"))
        attendance_service.check_in("E400", "PRJ-1", SITE_LAT, SITE_LON)
        deterministic_clock.set_time(at(MONDAY, 23))

        result = attendance_service.mark_absences(MONDAY)

        summary = result.value
        assert summary.marked == ("E100",)
        assert summary.already_present == 1
        assert summary.skipped_reason is None
        entries = _entries_by_code(entry_service)
        assert entries[int(TransactionType.ABSENCE)].amount == Decimal("300.0000")

    def test_second_run_marks_nobody(self, attendance_service):
        attendance_service.mark_absences(MONDAY)
        summary = attendance_service.mark_absences(MONDAY).value
        assert summary.marked == ()
        assert summary.already_present == 1

    def test_weekend_skipped(self, attendance_service):
        summary = attendance_service.mark_absences(FRIDAY).value
        assert summary.skipped_reason == "weekend"
        assert summary.marked == ()

    def test_holiday_skipped(self, attendance_service, add_holiday):
        add_holiday(MONDAY)
        assert attendance_service.mark_absences(MONDAY).value.skipped_reason == "holiday"


# =============================================================================
# Timesheet
# =============================================================================


class TestMonthlyTimesheet:

    def test_roll_up(self, attendance_service, deterministic_clock):
        deterministic_clock.set_time(at(MONDAY, 8, 30))
        attendance_service.check_in("E100", "PRJ-1", SITE_LAT, SITE_LON)
        deterministic_clock.set_time(at(MONDAY, 18))
        attendance_service.check_out("E100", SITE_LAT, SITE_LON)
        attendance_service.record_manual_attendance(
            ManualAttendanceInput(employee_no="E100", attendance_date=date(2024, 1, 16), absence_flag=True)
        )
        attendance_service.record_manual_attendance(
            ManualAttendanceInput(
                employee_no="E100",
                attendance_date=FRIDAY,
                entry_time=at(FRIDAY, 8),
                exit_time=at(FRIDAY, 12),
            )
        )

        sheet = attendance_service.get_monthly_timesheet("E100", "2024-01")

        assert sheet.salary_month == "2024-01"
        assert [d.attendance_date for d in sheet.days] == [MONDAY, date(2024, 1, 16), FRIDAY]
        assert sheet.present_days == 2
        assert sheet.absent_days == 1
        assert sheet.late_days == 1
        assert sheet.weekend_days_worked == 1
        assert sheet.total_working_hours == Decimal("13.50")
        assert sheet.total_overtime_hours == Decimal("7.50")
        assert sheet.total_delay_hours == Decimal("0.25")

    def test_other_month_excluded(self, attendance_service):
        attendance_service.record_manual_attendance(
            ManualAttendanceInput(employee_no="E100", attendance_date=date(2024, 2, 5), absence_flag=True)
        )
        sheet = attendance_service.get_monthly_timesheet("E100", "2024-01")
        assert sheet.days == ()
        assert sheet.total_working_hours == Decimal("0.00")
