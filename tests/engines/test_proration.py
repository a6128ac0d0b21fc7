"""
Tests for the payroll proration engine.

Covers:
- Salary month parsing and calendar bounds
- Active-day counting for hires, terminations and out-of-month employment
- Flat 30-day proration and the whole-month rule
- Breakdown expansion into allowance lines
- The engine trace emitted by prorate_salary
"""

from datetime import date
from decimal import Decimal

import pytest

from workforce_engines.pay_lines import PayCategory, TransactionType
from workforce_engines.proration import (
    BreakdownRow,
    count_active_days,
    expand_breakdown,
    parse_salary_month,
    prorate_salary,
)
from workforce_kernel.exceptions import InvalidMonthError

JAN = parse_salary_month("2024-01")
FEB = parse_salary_month("2024-02")


class TestParseSalaryMonth:

    def test_bounds(self):
        assert JAN.start == date(2024, 1, 1)
        assert JAN.end == date(2024, 1, 31)
        assert JAN.value == "2024-01"

    def test_leap_february(self):
        assert FEB.end == date(2024, 2, 29)

    def test_mid_month(self):
        assert JAN.mid_month == date(2024, 1, 15)

    @pytest.mark.parametrize("value", ["2024-13", "2024-00", "2024-1", "24-01", "", "January"])
    def test_invalid(self, value):
        with pytest.raises(InvalidMonthError):
            parse_salary_month(value)


class TestCountActiveDays:

    def test_whole_month(self):
        assert count_active_days(JAN, date(2020, 1, 1), None) == 31

    def test_hired_mid_month(self):
        assert count_active_days(JAN, date(2024, 1, 16), None) == 16

    def test_terminated_mid_month(self):
        assert count_active_days(JAN, None, date(2024, 1, 10)) == 10

    def test_hired_after_month(self):
        assert count_active_days(JAN, date(2024, 2, 1), None) == 0

    def test_terminated_before_month(self):
        assert count_active_days(JAN, None, date(2023, 12, 31)) == 0

    def test_termination_before_hire(self):
        assert count_active_days(JAN, date(2024, 1, 20), date(2024, 1, 10)) == 0


class TestProrateSalary:

    def test_whole_31_day_month_pays_full_salary(self):
        assert prorate_salary(
            monthly_salary=Decimal("9000"),
            salary_month=JAN,
            hire_date=date(2020, 1, 1),
            termination_date=None,
        ) == Decimal("9000.0000")

    def test_whole_february_pays_full_salary(self):
        assert prorate_salary(
            monthly_salary=Decimal("9000"),
            salary_month=FEB,
            hire_date=None,
            termination_date=None,
        ) == Decimal("9000.0000")

    def test_hired_mid_month(self):
        # 16 active days / 30
        assert prorate_salary(
            monthly_salary=Decimal("9000"),
            salary_month=JAN,
            hire_date=date(2024, 1, 16),
            termination_date=None,
        ) == Decimal("4800.0000")

    def test_terminated_mid_month(self):
        assert prorate_salary(
            monthly_salary=Decimal("10000"),
            salary_month=JAN,
            hire_date=date(2020, 1, 1),
            termination_date=date(2024, 1, 7),
        ) == Decimal("2333.3333")

    def test_not_employed(self):
        assert prorate_salary(
            monthly_salary=Decimal("9000"),
            salary_month=JAN,
            hire_date=date(2024, 3, 1),
            termination_date=None,
        ) == Decimal("0")

    def test_custom_divisor(self):
        assert prorate_salary(
            monthly_salary=Decimal("3100"),
            salary_month=JAN,
            hire_date=date(2024, 1, 22),
            termination_date=None,
            divisor=31,
        ) == Decimal("1000.0000")

    def test_non_positive_divisor_rejected(self):
        with pytest.raises(ValueError):
            prorate_salary(
                monthly_salary=Decimal("9000"),
                salary_month=JAN,
                hire_date=None,
                termination_date=None,
                divisor=0,
            )

    def test_emits_engine_trace(self, captured_logs):
        prorate_salary(
            monthly_salary=Decimal("9000"),
            salary_month=JAN,
            hire_date=None,
            termination_date=None,
        )
        traces = [r for r in captured_logs() if r["message"] == "WORKFORCE_ENGINE_TRACE"]
        assert traces
        assert traces[-1]["engine_name"] == "payroll_proration"
        assert len(traces[-1]["input_fingerprint"]) == 16


class TestExpandBreakdown:

    def test_no_rows_gives_basic_salary_line(self):
        lines = expand_breakdown(Decimal("9000"), [])
        assert len(lines) == 1
        assert lines[0].trans_type_code == TransactionType.BASIC_SALARY
        assert lines[0].amount == Decimal("9000.0000")
        assert lines[0].category is PayCategory.ALLOWANCE

    def test_percentage_split(self):
        rows = [
            BreakdownRow(trans_type_code=1, percentage=Decimal("0.60")),
            BreakdownRow(trans_type_code=2, percentage=Decimal("0.25")),
            BreakdownRow(trans_type_code=3, percentage=Decimal("0.15")),
        ]
        lines = expand_breakdown(Decimal("9000"), rows)
        assert [line.amount for line in lines] == [
            Decimal("5400.0000"),
            Decimal("2250.0000"),
            Decimal("1350.0000"),
        ]
        assert all(line.reference_table == "salary_breakdown_percentages" for line in lines)

    def test_rounding_is_half_up_to_four_places(self):
        lines = expand_breakdown(
            Decimal("1000"), [BreakdownRow(trans_type_code=1, percentage=Decimal("0.333335"))]
        )
        assert lines[0].amount == Decimal("333.3350")
