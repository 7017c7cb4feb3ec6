"""Tests for shared utility functions."""

from datetime import date, datetime, time

from vendor_calendar.utils import (
    format_date,
    format_time,
    format_time_12h,
    is_blank,
    parse_date,
    parse_time_of_day,
)


class TestParseDate:
    def test_iso_date(self):
        assert parse_date("2025-03-10") == date(2025, 3, 10)

    def test_strips_whitespace(self):
        assert parse_date("  2025-03-10 ") == date(2025, 3, 10)

    def test_wrong_format_is_none(self):
        assert parse_date("10/03/2025") is None

    def test_unpadded_parts_rejected(self):
        assert parse_date("2025-3-10") is None
        assert parse_date("2025-03-1") is None

    def test_impossible_date_is_none(self):
        assert parse_date("2025-02-30") is None

    def test_none_and_date_values(self):
        assert parse_date(None) is None
        assert parse_date(date(2025, 3, 10)) == date(2025, 3, 10)
        assert parse_date(datetime(2025, 3, 10, 8, 0)) == date(2025, 3, 10)


class TestParseTimeOfDay:
    def test_hours_and_minutes(self):
        assert parse_time_of_day("09:30") == time(9, 30)

    def test_seconds_rejected(self):
        assert parse_time_of_day("18:00:45") is None

    def test_single_digit_parts_rejected(self):
        assert parse_time_of_day("9:05") is None
        assert parse_time_of_day("09:5") is None

    def test_out_of_range_is_none(self):
        assert parse_time_of_day("25:00") is None

    def test_garbage_is_none(self):
        assert parse_time_of_day("nine") is None

    def test_time_value_truncated(self):
        assert parse_time_of_day(time(9, 15, 59)) == time(9, 15)


class TestFormatting:
    def test_format_date(self):
        assert format_date(date(2025, 3, 1)) == "2025-03-01"

    def test_format_time(self):
        assert format_time(time(9, 5)) == "09:05"

    def test_12h_morning(self):
        assert format_time_12h(time(9, 0)) == "9:00 AM"

    def test_12h_noon_and_midnight(self):
        assert format_time_12h(time(12, 0)) == "12:00 PM"
        assert format_time_12h(time(0, 30)) == "12:30 AM"

    def test_12h_evening(self):
        assert format_time_12h(time(18, 45)) == "6:45 PM"

    def test_12h_none(self):
        assert format_time_12h(None) == ""


class TestIsBlank:
    def test_blank_values(self):
        assert is_blank(None)
        assert is_blank("")
        assert is_blank("   ")

    def test_filled_values(self):
        assert not is_blank("2025-03-10")
        assert not is_blank(date(2025, 3, 10))
