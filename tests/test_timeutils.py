"""
Tests for time arithmetic helpers.
"""

from datetime import date

import pendulum
import pytest

from lashbook.domain.exceptions import InvalidFormatError
from lashbook.domain.timeutils import (
    MINUTES_PER_DAY,
    calendar_day,
    day_bounds,
    to_minutes,
    to_time_string,
    weekday_index,
)


class TestToMinutes:
    """Tests for parsing HH:MM strings."""

    @pytest.mark.parametrize("value,expected", [
        ("00:00", 0),
        ("09:30", 570),
        ("9:30", 570),
        ("12:00", 720),
        ("23:59", 1439),
    ])
    def test_valid_times(self, value, expected):
        assert to_minutes(value) == expected

    @pytest.mark.parametrize("value", [
        "24:00", "12:60", "1230", "12:5", "ab:cd", "", " 10:00", "10:00 ", "-1:00", "123:00",
    ])
    def test_invalid_times(self, value):
        """Malformed strings raise InvalidFormatError."""
        with pytest.raises(InvalidFormatError):
            to_minutes(value)

    def test_non_string_rejected(self):
        with pytest.raises(InvalidFormatError):
            to_minutes(930)

    def test_invalid_format_is_a_value_error(self):
        """Callers catching ValueError also catch format errors."""
        with pytest.raises(ValueError):
            to_minutes("25:00")


class TestToTimeString:
    """Tests for formatting minutes."""

    def test_zero_padded(self):
        assert to_time_string(0) == "00:00"
        assert to_time_string(65) == "01:05"
        assert to_time_string(1439) == "23:59"

    @pytest.mark.parametrize("minutes", [-1, MINUTES_PER_DAY, 5000])
    def test_out_of_range(self, minutes):
        with pytest.raises(ValueError):
            to_time_string(minutes)

    def test_every_minute_round_trips(self):
        """Formatting and parsing are inverse over the whole day."""
        for minutes in range(MINUTES_PER_DAY):
            text = to_time_string(minutes)
            assert to_minutes(text) == minutes
            assert to_time_string(to_minutes(text)) == text

    @pytest.mark.parametrize("value,expected", [("9:00", "09:00"), ("0:05", "00:05"), ("7:30", "07:30")])
    def test_unpadded_input_normalized(self, value, expected):
        """Single-digit hours parse, but always format back zero-padded."""
        assert to_time_string(to_minutes(value)) == expected


class TestCalendarDay:
    """Tests for calendar day normalization."""

    def test_from_string(self):
        assert calendar_day("2026-10-20") == pendulum.date(2026, 10, 20)

    def test_from_date(self):
        assert calendar_day(date(2026, 10, 20)) == pendulum.date(2026, 10, 20)

    def test_time_component_dropped(self):
        day = calendar_day(pendulum.datetime(2026, 10, 20, 18, 45, tz="UTC"))
        assert day == pendulum.date(2026, 10, 20)

    def test_datetime_converted_to_timezone(self):
        """02:00 UTC is still the previous evening in Santiago."""
        moment = pendulum.datetime(2026, 10, 21, 2, 0, tz="UTC")
        assert calendar_day(moment, "America/Santiago") == pendulum.date(2026, 10, 20)

    @pytest.mark.parametrize("value", ["not-a-date", "2026-13-01"])
    def test_invalid_strings(self, value):
        with pytest.raises(InvalidFormatError):
            calendar_day(value)

    @pytest.mark.parametrize("value", ["10:00", "23:59", "P1D"])
    def test_time_or_duration_strings_rejected(self, value):
        """A string without a calendar date is not read as today."""
        with pytest.raises(InvalidFormatError):
            calendar_day(value, "America/Santiago")

    def test_string_with_offset_converted_to_timezone(self):
        """01:00 UTC on the 21st is the evening of the 20th in Santiago."""
        assert calendar_day("2026-10-21T01:00:00Z", "America/Santiago") == pendulum.date(2026, 10, 20)

    def test_naive_datetime_string_read_in_timezone(self):
        assert calendar_day("2026-10-20T23:30:00", "America/Santiago") == pendulum.date(2026, 10, 20)

    def test_unsupported_type(self):
        with pytest.raises(InvalidFormatError):
            calendar_day(20261020)


class TestDayBounds:
    """Tests for day boundaries."""

    def test_bounds_cover_the_day(self):
        start, end = day_bounds(pendulum.date(2026, 10, 20), "America/Santiago")

        assert start == pendulum.datetime(2026, 10, 20, tz="America/Santiago")
        assert end.to_date_string() == "2026-10-20"
        assert (end.hour, end.minute, end.second) == (23, 59, 59)
        assert start.timezone_name == "America/Santiago"


class TestWeekdayIndex:
    """Weekdays are numbered from Sunday."""

    @pytest.mark.parametrize("value,expected", [
        ("2026-10-18", 0),  # Sunday
        ("2026-10-19", 1),  # Monday
        ("2026-10-20", 2),
        ("2026-10-24", 6),  # Saturday
    ])
    def test_weekday_numbering(self, value, expected):
        assert weekday_index(calendar_day(value)) == expected
