"""
Tests for the SQL-backed schedule resolver, work calendar and day closures.
"""

from datetime import date, time
from decimal import Decimal

import pytest

from workforce_engines.time_metrics import ShiftSchedule
from workforce_modules.attendance.calendar import (
    DayClosureService,
    SqlScheduleResolver,
    SqlWorkCalendar,
)
from workforce_modules.attendance.orm import WeekendDayModel
from tests.modules.conftest import FRIDAY, MONDAY

CONFIG_DEFAULT = ShiftSchedule(
    start_time=time(9, 0),
    end_time=time(18, 0),
    required_hours=Decimal("8.00"),
    name="config",
)


@pytest.fixture
def resolver(session):
    return SqlScheduleResolver(session, CONFIG_DEFAULT)


@pytest.fixture
def calendar(session):
    return SqlWorkCalendar(session)


class TestScheduleResolver:

    def test_config_default_when_table_empty(self, resolver):
        assert resolver.resolve("D1", "PRJ-1") is CONFIG_DEFAULT

    def test_company_default_row(self, resolver, add_schedule):
        add_schedule("Company", time(7, 0), time(15, 0))
        assert resolver.resolve("D1", "PRJ-1").name == "Company"

    def test_department_beats_company_default(self, resolver, add_schedule):
        add_schedule("Company", time(7, 0), time(15, 0))
        add_schedule("Dept", time(8, 30), time(17, 30), dept_id="D1")

        assert resolver.resolve("D1", "PRJ-1").name == "Dept"
        assert resolver.resolve("D2", None).name == "Company"

    def test_project_beats_department(self, resolver, add_schedule):
        add_schedule("Dept", time(8, 30), time(17, 30), dept_id="D1")
        add_schedule("Night", time(22, 0), time(6, 0), project_code="NIGHT")

        schedule = resolver.resolve("D1", "NIGHT")

        assert schedule.name == "Night"
        assert schedule.crosses_midnight
        assert resolver.resolve("D1", "PRJ-1").name == "Dept"


class TestWorkCalendar:

    def test_default_weekend_is_friday_saturday(self, calendar):
        assert calendar.is_weekend(FRIDAY)
        assert calendar.is_weekend(date(2024, 1, 20))
        assert not calendar.is_weekend(MONDAY)

    def test_weekend_rows_replace_default(self, session, calendar, test_actor_id):
        for iso_weekday in (6, 7):
            session.add(WeekendDayModel(iso_weekday=iso_weekday, created_by_id=test_actor_id))
        session.commit()

        assert calendar.weekend_days() == frozenset({6, 7})
        assert not calendar.is_weekend(FRIDAY)
        assert calendar.is_weekend(date(2024, 1, 21))

    def test_exact_holiday(self, calendar, add_holiday):
        add_holiday(MONDAY, "Founding Day")

        assert calendar.is_holiday(MONDAY)
        assert not calendar.is_holiday(date(2025, 1, 15))

    def test_recurring_holiday_matches_month_and_day(self, calendar, add_holiday):
        add_holiday(date(2020, 9, 23), "National Day", recurring=True)

        assert calendar.is_holiday(date(2024, 9, 23))
        assert not calendar.is_holiday(date(2024, 9, 24))


class TestDayClosures:

    def test_protocol(self, day_closures):
        assert isinstance(day_closures, DayClosureService)

    def test_close_and_reopen(self, day_closures):
        assert not day_closures.is_closed(MONDAY)

        day_closures.close_date(MONDAY, notes="payroll cut-off")
        assert day_closures.is_closed(MONDAY)

        day_closures.reopen_date(MONDAY)
        assert not day_closures.is_closed(MONDAY)

    def test_reopen_open_day_is_noop(self, day_closures, captured_logs):
        day_closures.reopen_date(MONDAY)

        assert not day_closures.is_closed(MONDAY)
        assert any(r["message"] == "attendance_day_already_open" for r in captured_logs())

    def test_close_twice_keeps_one_row(self, day_closures, session):
        day_closures.close_date(MONDAY)
        day_closures.close_date(MONDAY)
        session.commit()

        assert day_closures.is_closed(MONDAY)
