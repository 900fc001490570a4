"""
Haulpay - Payroll Aggregation Tests

Unit tests for ISO week keys, labels and grouping totals.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

import pytest

from app.services.payroll_aggregation import (
    PayrollTotals,
    find_week,
    format_amount,
    group_by_employee,
    group_by_week,
    overall_totals,
    parse_week_key,
    week_bounds,
    week_in_range,
    week_key,
    week_label,
)


@dataclass
class FakeEmployee:
    id: int
    first_name: str
    last_name: str
    email: str


@dataclass
class FakeRecord:
    employee_id: int
    pay_period: date
    base_salary: Decimal
    total_allowances: Decimal = Decimal("0")
    deductions: Decimal = Decimal("0")
    net_pay: Decimal = None
    id: int = 0
    employee: FakeEmployee = None

    def __post_init__(self):
        if self.net_pay is None:
            self.net_pay = self.base_salary + self.total_allowances - self.deductions


class TestWeekKey:
    """ISO-8601 week numbering."""

    def test_monday_and_sunday_share_a_week(self):
        assert week_key(date(2024, 1, 1)) == "2024-W01"
        assert week_key(date(2024, 1, 7)) == "2024-W01"

    def test_next_monday_starts_new_week(self):
        assert week_key(date(2024, 1, 8)) == "2024-W02"

    def test_week_is_zero_padded(self):
        assert week_key(date(2024, 3, 1)) == "2024-W09"

    def test_late_december_can_belong_to_next_year(self):
        # Thursday of that week is 2025-01-02
        assert week_key(date(2024, 12, 30)) == "2025-W01"

    def test_early_january_can_belong_to_previous_year(self):
        # Friday 2021-01-01 sits in the week whose Thursday is 2020-12-31
        assert week_key(date(2021, 1, 1)) == "2020-W53"
        assert week_key(date(2023, 1, 1)) == "2022-W52"

    @pytest.mark.parametrize("day", [
        date(2019, 12, 30), date(2020, 6, 15), date(2021, 1, 3),
        date(2024, 2, 29), date(2026, 12, 31), date(2027, 1, 1),
    ])
    def test_matches_isocalendar(self, day):
        iso = day.isocalendar()
        assert week_key(day) == f"{iso[0]}-W{iso[1]:02d}"


class TestWeekLabel:
    """Monday to Sunday display labels."""

    def test_bounds_run_monday_to_sunday(self):
        monday, sunday = week_bounds(date(2024, 1, 3))
        assert monday == date(2024, 1, 1)
        assert sunday == date(2024, 1, 7)

    def test_label_format(self):
        assert week_label(date(2024, 1, 3)) == "Jan 01, 2024 - Jan 07, 2024"

    def test_label_spans_years_while_key_uses_thursday_year(self):
        day = date(2024, 12, 31)
        assert week_key(day) == "2025-W01"
        assert week_label(day) == "Dec 30, 2024 - Jan 05, 2025"


class TestParseWeekKey:

    def test_returns_monday_of_week(self):
        assert parse_week_key("2024-W01") == date(2024, 1, 1)
        assert parse_week_key("2025-W01") == date(2024, 12, 30)

    def test_round_trips_with_week_key(self):
        monday = parse_week_key("2020-W53")
        assert week_key(monday) == "2020-W53"

    @pytest.mark.parametrize("key", ["2024-1", "2024-W1", "W01-2024", "", "2024-W00", "2024-W53"])
    def test_rejects_malformed_or_missing_weeks(self, key):
        with pytest.raises(ValueError):
            parse_week_key(key)

    @pytest.mark.parametrize("key", ["9999-W52", "9999-W53", "0001-W00"])
    def test_rejects_weeks_past_the_calendar(self, key):
        with pytest.raises(ValueError):
            parse_week_key(key)

    def test_last_full_week_is_accepted(self):
        assert parse_week_key("9999-W51") == date(9999, 12, 20)

    def test_week_in_range_stops_at_last_full_week(self):
        assert week_in_range(date(9999, 12, 26)) is True
        assert week_in_range(date(9999, 12, 27)) is False
        assert week_in_range(date(9999, 12, 31)) is False
        assert week_in_range(date(2024, 1, 2)) is True


class TestTotals:

    def test_earnings_is_base_plus_allowances(self):
        totals = PayrollTotals(base=Decimal("100"), allowances=Decimal("25.50"))
        assert totals.earnings == Decimal("125.50")

    def test_to_dict_rounds_for_display(self):
        totals = PayrollTotals(net=Decimal("10.005"))
        assert totals.to_dict()["net"] == Decimal("10.01")

    def test_format_amount(self):
        assert format_amount(Decimal("1500.5")) == "$1,500.50"
        assert format_amount(Decimal("-20")) == "-$20.00"
        assert format_amount(Decimal("3"), "€") == "€3.00"


class TestGroupByWeek:

    def test_same_week_records_share_a_bucket(self):
        records = [
            FakeRecord(1, date(2024, 1, 1), Decimal("100.00")),
            FakeRecord(1, date(2024, 1, 7), Decimal("200.00")),
            FakeRecord(1, date(2024, 1, 8), Decimal("50.00")),
        ]

        weeks = group_by_week(records)

        assert [w.key for w in weeks] == ["2024-W02", "2024-W01"]
        first_week = find_week(weeks, "2024-W01")
        assert len(first_week.records) == 2
        assert first_week.totals.net == Decimal("300.00")
        assert find_week(weeks, "2024-W02").totals.net == Decimal("50.00")

    def test_buckets_sorted_descending_across_years(self):
        records = [
            FakeRecord(1, date(2023, 6, 5), Decimal("1")),
            FakeRecord(1, date(2024, 12, 30), Decimal("1")),
            FakeRecord(1, date(2024, 3, 4), Decimal("1")),
        ]
        assert [w.key for w in group_by_week(records)] == ["2025-W01", "2024-W10", "2023-W23"]

    def test_records_keep_input_order_within_bucket(self):
        late = FakeRecord(1, date(2024, 1, 5), Decimal("1"), id=1)
        early = FakeRecord(1, date(2024, 1, 2), Decimal("1"), id=2)
        week = group_by_week([late, early])[0]
        assert week.records == [late, early]

    def test_totals_track_every_component(self):
        records = [
            FakeRecord(1, date(2024, 1, 2), Decimal("100.00"), Decimal("20.00"), Decimal("5.00")),
            FakeRecord(1, date(2024, 1, 3), Decimal("50.00"), Decimal("10.00"), Decimal("2.50")),
        ]
        totals = group_by_week(records)[0].totals
        assert totals.base == Decimal("150.00")
        assert totals.allowances == Decimal("30.00")
        assert totals.deductions == Decimal("7.50")
        assert totals.net == Decimal("172.50")
        assert totals.earnings == Decimal("180.00")

    def test_empty_input(self):
        assert group_by_week([]) == []
        assert find_week([], "2024-W01") is None


class TestGroupByEmployee:

    def test_week_and_employee_totals(self):
        employee_a = FakeEmployee(1, "Ann", "Zimmer", "ann@haulpay.com")
        records = [
            FakeRecord(1, date(2024, 1, 2), Decimal("1000.00"), employee=employee_a),
            FakeRecord(1, date(2024, 1, 4), Decimal("500.50"), employee=employee_a),
            FakeRecord(1, date(2024, 1, 10), Decimal("250.25"), employee=employee_a),
        ]

        summary = group_by_employee(records)[0]

        assert summary.employee_name == "Ann Zimmer"
        assert summary.email == "ann@haulpay.com"
        assert find_week(summary.weeks, "2024-W01").totals.net == Decimal("1500.50")
        week_sum = sum((w.totals.net for w in summary.weeks), Decimal("0"))
        assert summary.totals.net == week_sum == Decimal("1750.75")

    def test_first_encountered_order(self):
        records = [
            FakeRecord(2, date(2024, 1, 2), Decimal("1")),
            FakeRecord(1, date(2024, 1, 2), Decimal("1")),
            FakeRecord(2, date(2024, 1, 9), Decimal("1")),
        ]
        assert [s.employee_id for s in group_by_employee(records)] == [2, 1]

    def test_employee_list_fixes_order_and_includes_empty(self):
        employees = [
            FakeEmployee(3, "Cleo", "Young", "cleo@haulpay.com"),
            FakeEmployee(1, "Ann", "Zimmer", "ann@haulpay.com"),
        ]
        records = [FakeRecord(1, date(2024, 1, 2), Decimal("10"))]

        summaries = group_by_employee(records, employees=employees)

        assert [s.employee_id for s in summaries] == [3, 1]
        assert summaries[0].weeks == []
        assert summaries[0].totals.net == Decimal("0")
        assert summaries[1].totals.net == Decimal("10")

    def test_sort_by_name(self):
        zed = FakeEmployee(1, "Zed", "Adams", "zed@haulpay.com")
        amy = FakeEmployee(2, "Amy", "Brown", "amy@haulpay.com")
        records = [
            FakeRecord(1, date(2024, 1, 2), Decimal("1"), employee=zed),
            FakeRecord(2, date(2024, 1, 2), Decimal("1"), employee=amy),
        ]
        summaries = group_by_employee(records, sort_by_name=True)
        assert [s.employee_name for s in summaries] == ["Amy Brown", "Zed Adams"]

    def test_grouping_is_idempotent(self):
        records = [
            FakeRecord(1, date(2024, 1, 2), Decimal("10.10")),
            FakeRecord(2, date(2024, 1, 9), Decimal("20.20")),
            FakeRecord(1, date(2024, 2, 6), Decimal("30.30")),
        ]
        assert group_by_employee(records) == group_by_employee(records)
        assert group_by_week(records) == group_by_week(records)

    def test_overall_totals_sum_weeks(self):
        records = [
            FakeRecord(1, date(2024, 1, 2), Decimal("10.10")),
            FakeRecord(1, date(2024, 2, 6), Decimal("30.30")),
        ]
        assert overall_totals(group_by_week(records)).net == Decimal("40.40")
