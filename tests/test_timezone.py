"""
Tests for timezone helpers.
"""

from datetime import date, datetime, time, timezone

import pendulum
import pytest

from bookable.domain.exceptions import InvalidTimezoneError, MalformedTimeError
from bookable.domain.timezone import (
    DEFAULT_TIMEZONE,
    day_name,
    day_of_week,
    ensure_timezone,
    localize,
    now,
    parse_wall_clock,
    to_date,
    validate_timezone,
)


class TestTimezoneValidation:
    """Tests for zone lookups."""

    def test_known_zones(self):
        assert validate_timezone("Africa/Lagos")
        assert validate_timezone("Europe/Berlin")
        assert validate_timezone(DEFAULT_TIMEZONE)

    @pytest.mark.parametrize("name", ["Mars/Olympus_Mons", "", "   ", None, 1])
    def test_unknown_zones(self, name):
        assert not validate_timezone(name)

    def test_ensure_timezone_raises_descriptive_error(self):
        with pytest.raises(InvalidTimezoneError, match="Mars/Olympus_Mons"):
            ensure_timezone("Mars/Olympus_Mons")

    def test_ensure_timezone_returns_zone(self):
        assert ensure_timezone("Africa/Lagos").name == "Africa/Lagos"


class TestParseWallClock:
    """Tests for wall-clock parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("09:00", time(9, 0)),
            ("9:05", time(9, 5)),
            ("17:30:00", time(17, 30)),
            ("23:59:59", time(23, 59)),
            (" 08:15 ", time(8, 15)),
            (time(10, 45, 30), time(10, 45)),
        ],
    )
    def test_valid_values(self, value, expected):
        assert parse_wall_clock(value) == expected

    @pytest.mark.parametrize("value", ["", "nine", "24:00", "12:60", "12:00:61", "1200", 540, None])
    def test_invalid_values(self, value):
        with pytest.raises(MalformedTimeError):
            parse_wall_clock(value)

    def test_zone_aware_time_rejected(self):
        with pytest.raises(MalformedTimeError, match="timezone"):
            parse_wall_clock(time(9, 0, tzinfo=timezone.utc))


class TestDayOfWeek:
    """Weekdays are numbered Sunday=0 ... Saturday=6."""

    def test_sunday_is_zero(self):
        assert day_of_week(date(2024, 11, 24)) == 0
        assert day_name(date(2024, 11, 24)) == "Sunday"

    def test_monday_is_one(self):
        assert day_of_week(date(2024, 11, 25)) == 1
        assert day_name(date(2024, 11, 25)) == "Monday"

    def test_saturday_is_six(self):
        assert day_of_week(pendulum.date(2024, 11, 30)) == 6


class TestLocalize:
    """Tests for turning a date and wall-clock time into an instant."""

    def test_localize_in_schedule_zone(self):
        instant = localize(date(2024, 11, 25), time(9, 0), "Africa/Lagos")

        assert instant == pendulum.datetime(2024, 11, 25, 8, 0, tz="UTC")
        assert instant.timezone_name == "Africa/Lagos"

    def test_localize_accepts_zone_object(self):
        zone = ensure_timezone("Europe/Berlin")

        instant = localize(date(2024, 7, 1), time(9, 0), zone)

        assert instant == pendulum.datetime(2024, 7, 1, 7, 0, tz="UTC")

    def test_localize_invalid_zone(self):
        with pytest.raises(InvalidTimezoneError):
            localize(date(2024, 11, 25), time(9, 0), "Nowhere/Special")


class TestToDate:
    """Tests for calendar date coercion."""

    def test_from_string(self):
        assert to_date("2024-11-25") == date(2024, 11, 25)

    def test_from_datetime_drops_time(self):
        assert to_date(datetime(2024, 11, 25, 23, 30)) == date(2024, 11, 25)

    def test_from_pendulum_date(self):
        assert to_date(pendulum.date(2024, 11, 25)) == date(2024, 11, 25)

    @pytest.mark.parametrize("value", ["25.11.2024", "2024-13-01", "", 20241125])
    def test_invalid(self, value):
        with pytest.raises(MalformedTimeError):
            to_date(value)


def test_now_is_in_requested_zone():
    instant = now("Europe/Berlin")

    assert instant.timezone_name == "Europe/Berlin"
    assert abs((pendulum.now("UTC") - instant).total_seconds()) < 60
