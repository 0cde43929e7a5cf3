"""Tests for turning the schedule table into shifts."""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from schedule_sync.extraction.table import to_csv
from schedule_sync.schedule.interpreter import (
    EmployeeNotFoundError,
    ShiftTimeError,
    build_shift,
    end_label_for,
    interpret_schedule,
    is_on_call,
    parse_schedule_csv,
)
from schedule_sync.schedule.models import Weekday

NEW_YORK = ZoneInfo("America/New_York")

HEADER = [
    "",
    "10/9/2023",
    "10/10/2023",
    "10/11/2023",
    "10/12/2023",
    "10/13/2023",
    "10/14/2023",
    "10/15/2023",
]
SCHEDULE = [
    HEADER,
    ["Doe,Jane", "8:30am", "", "", "", "", "", ""],
    ["", "", "5:00pm", "", "", "", "", ""],
    ["Ney,Conor", "", "", "", "", "", "8:30am", ""],
    ["", "", "", "", "", "", "4:00pm", "5:00pm"],
]


class TestEndTimes:
    def test_fixed_end_times(self):
        assert end_label_for("8:30am", Weekday.MONDAY) == "3:00pm"
        assert end_label_for("11:00am", Weekday.MONDAY) == "4:00pm"
        assert end_label_for("3:45pm", Weekday.MONDAY) == "10:00pm"
        assert end_label_for("4:00pm", Weekday.MONDAY) == "10:00pm"

    def test_late_shift_depends_on_day(self):
        assert end_label_for("5:00pm", Weekday.FRIDAY) == "11:30pm"
        assert end_label_for("5:00pm", Weekday.SATURDAY) == "11:30pm"
        assert end_label_for("5:00pm", Weekday.SUNDAY) == "10:15pm"
        assert end_label_for("5:00pm", Weekday.TUESDAY) == "10:15pm"

    def test_unknown_start(self):
        assert end_label_for("9:00am", Weekday.MONDAY) is None


class TestBuildShift:
    def test_morning_shift(self):
        shift = build_shift("8:30am", "10/14/2023")
        assert shift.day == Weekday.SATURDAY
        assert shift.start_time == datetime(2023, 10, 14, 8, 30, tzinfo=NEW_YORK)
        assert shift.end_time == datetime(2023, 10, 14, 15, 0, tzinfo=NEW_YORK)

    def test_late_shift_on_saturday(self):
        shift = build_shift("5:00pm", "10/14/2023")
        assert shift.end_time.hour == 23
        assert shift.end_time.minute == 30

    def test_late_shift_on_tuesday(self):
        shift = build_shift("5:00pm", "10/10/2023")
        assert shift.day == Weekday.TUESDAY
        assert (shift.end_time.hour, shift.end_time.minute) == (22, 15)

    def test_spaced_and_uppercase_label(self):
        shift = build_shift("3:45 PM", "10/12/2023")
        assert shift.start_time.hour == 15
        assert shift.end_time.hour == 22

    def test_times_are_zone_aware(self):
        shift = build_shift("8:30am", "10/14/2023")
        assert shift.start_time.utcoffset() == timedelta(hours=-4)

    def test_other_timezone(self):
        chicago = ZoneInfo("America/Chicago")
        shift = build_shift("8:30am", "10/14/2023", chicago)
        assert shift.start_time.tzinfo == chicago

    def test_unknown_start_raises(self):
        with pytest.raises(ShiftTimeError, match="No end time known"):
            build_shift("9:00am", "10/14/2023")

    def test_unparseable_cell_raises(self):
        with pytest.raises(ShiftTimeError, match="Could not parse"):
            build_shift("REQUESTOFF", "10/14/2023")

    def test_missing_date_raises(self):
        with pytest.raises(ShiftTimeError):
            build_shift("8:30am", "")


class TestInterpretSchedule:
    """Tests for interpret_schedule."""

    def test_two_rows_three_shifts(self):
        schedule = interpret_schedule(SCHEDULE, "Ney,Conor")

        assert schedule.employee == "Ney,Conor"
        assert len(schedule.shifts) == 3
        first, second, third = schedule.shifts
        assert first.day == Weekday.SATURDAY
        assert (first.start_time.hour, first.end_time.hour) == (8, 15)
        assert second.day == Weekday.SATURDAY
        assert (second.start_time.hour, second.end_time.hour) == (16, 22)
        assert third.day == Weekday.SUNDAY
        assert (third.end_time.hour, third.end_time.minute) == (22, 15)

    def test_other_employee(self):
        schedule = interpret_schedule(SCHEDULE, "Doe,Jane")
        assert [s.day for s in schedule.shifts] == [Weekday.MONDAY, Weekday.TUESDAY]

    def test_missing_employee_names_key(self):
        with pytest.raises(EmployeeNotFoundError) as exc_info:
            interpret_schedule(SCHEDULE, "Smith,Alex")
        assert exc_info.value.key == "Smith,Alex"
        assert "Smith,Alex" in str(exc_info.value)

    def test_name_match_is_exact(self):
        with pytest.raises(EmployeeNotFoundError):
            interpret_schedule(SCHEDULE, "Ney, Conor")

    def test_on_call_cells_are_skipped(self):
        table = [
            HEADER,
            ["Ney,Conor", "oncall", "", "", "", "", "", ""],
            ["", "", "on call", "", "", "", "", "8:30am"],
        ]
        schedule = interpret_schedule(table, "Ney,Conor")
        assert len(schedule.shifts) == 1
        assert schedule.shifts[0].day == Weekday.SUNDAY

    def test_last_row_employee(self):
        table = [HEADER, ["Ney,Conor", "8:30am", "", "", "", "", "", ""]]
        schedule = interpret_schedule(table, "Ney,Conor")
        assert len(schedule.shifts) == 1

    def test_first_matching_row_wins(self):
        table = SCHEDULE + [
            ["Ney,Conor", "11:00am", "", "", "", "", "", ""],
            ["", "", "", "", "", "", "", ""],
        ]
        schedule = interpret_schedule(table, "Ney,Conor")
        assert [s.day for s in schedule.shifts] == [
            Weekday.SATURDAY,
            Weekday.SATURDAY,
            Weekday.SUNDAY,
        ]

    def test_bad_cell_fails_whole_week(self):
        table = [HEADER, ["Ney,Conor", "8:30am", "REQUESTOFF", "", "", "", "", ""]]
        with pytest.raises(ShiftTimeError):
            interpret_schedule(table, "Ney,Conor")

    def test_is_on_call(self):
        assert is_on_call("oncall")
        assert is_on_call("On Call")
        assert not is_on_call("8:30am")


class TestParseScheduleCSV:
    def test_clean_table(self):
        schedule = parse_schedule_csv(to_csv(SCHEDULE), "Ney,Conor")
        assert len(schedule.shifts) == 3

    def test_merged_table_is_repaired(self):
        merged = [
            ["", "10/9/2023", "10/10/2023", "10/11/2023", "10/12/2023", "10/13/2023 10/14/2023", "10/15/2023"],
            ["Ney,Conor", "", "", "", "", "3:45pm5:00pm", ""],
            ["", "", "", "", "", "", "5:00pm"],
        ]
        schedule = parse_schedule_csv(to_csv(merged), "Ney,Conor")

        assert [s.day for s in schedule.shifts] == [
            Weekday.FRIDAY,
            Weekday.SATURDAY,
            Weekday.SUNDAY,
        ]
        assert schedule.shifts[1].end_time.hour == 23
