"""
Tests for timezone parsing and offset resolution.

IANA offsets depend on the reference instant, so DST-sensitive tests either
pass it explicitly or pin the wall clock with time_machine.
"""

from datetime import datetime

import pytest
import pytz
import time_machine

from jetlag.errors import ValidationError
from jetlag.timezones import (
    AIRPORT_TIMEZONES,
    airport_timezone,
    calculate_timezone_difference,
    get_utc_offset_hours,
    parse_timezone,
    to_local,
    validate_utc_offset,
)
from jetlag.types import FixedOffset, IanaName

WINTER = datetime(2026, 1, 15, 12, 0, tzinfo=pytz.UTC)
SUMMER = datetime(2026, 7, 15, 12, 0, tzinfo=pytz.UTC)


class TestParseTimezone:
    """Offset strings and IANA names parse into the Timezone union."""

    def test_positive_offset(self):
        assert parse_timezone("+05:30") == FixedOffset(minutes=330)

    def test_negative_offset(self):
        assert parse_timezone("-08:00") == FixedOffset(minutes=-480)

    def test_iana_name(self):
        assert parse_timezone("Asia/Tokyo") == IanaName(name="Asia/Tokyo")

    @pytest.mark.parametrize("value", ["Mars/Olympus_Mons", "+25:00", "0800", ""])
    def test_invalid_identifier(self, value):
        with pytest.raises(ValidationError) as exc_info:
            parse_timezone(value)
        assert exc_info.value.field == "timezone"

    def test_validate_utc_offset(self):
        assert validate_utc_offset("+00:00")
        assert validate_utc_offset("-03:30")
        assert not validate_utc_offset("Europe/London")


class TestOffsetResolution:
    """UTC offsets at a reference instant."""

    def test_fixed_offset_ignores_date(self):
        assert get_utc_offset_hours("+05:30", WINTER) == 5.5
        assert get_utc_offset_hours("+05:30", SUMMER) == 5.5

    def test_iana_standard_and_daylight_time(self):
        assert get_utc_offset_hours("America/Los_Angeles", WINTER) == -8.0
        assert get_utc_offset_hours("America/Los_Angeles", SUMMER) == -7.0

    def test_difference_is_destination_minus_origin(self):
        assert calculate_timezone_difference("America/Los_Angeles", "Europe/London", WINTER) == 8.0
        assert calculate_timezone_difference("Europe/London", "America/Los_Angeles", WINTER) == -8.0

    def test_difference_not_folded_across_date_line(self):
        """Raw difference is kept even beyond 12h."""
        assert calculate_timezone_difference("-10:00", "+12:00", WINTER) == 22.0

    def test_to_local(self):
        local = to_local(WINTER, "Asia/Tokyo")
        assert (local.hour, local.minute) == (21, 0)


class TestWallClockDependence:
    """Without an explicit instant, IANA offsets follow the wall clock."""

    @time_machine.travel("2026-01-15T12:00:00Z", tick=False)
    def test_winter_wall_clock(self):
        assert calculate_timezone_difference("America/Los_Angeles", "Europe/London") == 8.0

    @time_machine.travel("2026-03-15T12:00:00Z", tick=False)
    def test_between_us_and_uk_dst_changes(self):
        """US springs forward on March 8, the UK on March 29."""
        assert calculate_timezone_difference("America/Los_Angeles", "Europe/London") == 7.0


class TestAirportTimezones:
    """Static airport lookup."""

    def test_known_airport(self):
        assert airport_timezone("SFO") == "America/Los_Angeles"

    def test_lookup_is_case_insensitive(self):
        assert airport_timezone("nrt") == "Asia/Tokyo"

    def test_unknown_airport(self):
        with pytest.raises(ValidationError, match="Unknown airport code: XXX"):
            airport_timezone("XXX")

    def test_table_entries_are_valid_zones(self):
        for tz_name in AIRPORT_TIMEZONES.values():
            assert tz_name in pytz.all_timezones_set
