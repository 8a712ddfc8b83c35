"""
Tests for input validation and normalization.
"""

from datetime import datetime

import pytest

from jetlag.errors import ValidationError
from jetlag.types import Airport, CircadianPhase, Flight, Layover
from jetlag.validation import (
    INVALID_LAYOVER,
    INVALID_PHASE_TIME,
    INVALID_SLEEP_DURATION,
    MISSING_FLIGHT_INFO,
    validate_flight,
    validate_phase,
    validate_profile,
)

from helpers import make_flight, make_profile


class TestValidatePhase:
    """Habitual phase checks."""

    def test_valid_phase(self, default_phase):
        assert validate_phase(default_phase) is default_phase

    @pytest.mark.parametrize(
        "bed_time,wake_time",
        [("23:00", "25:00"), ("11pm", "07:00"), ("23:00", "7"), ("23:00", "7:00"), ("9:30", "07:00")],
    )
    def test_malformed_times(self, bed_time, wake_time):
        with pytest.raises(ValidationError) as exc_info:
            validate_phase(CircadianPhase(bed_time=bed_time, wake_time=wake_time))
        assert exc_info.value.message == INVALID_PHASE_TIME

    @pytest.mark.parametrize("bed_time,wake_time", [("00:00", "06:59"), ("22:00", "07:01")])
    def test_duration_out_of_range(self, bed_time, wake_time):
        with pytest.raises(ValidationError, match=INVALID_SLEEP_DURATION):
            validate_phase(CircadianPhase(bed_time=bed_time, wake_time=wake_time))

    @pytest.mark.parametrize("bed_time,wake_time", [("00:00", "07:00"), ("22:00", "07:00")])
    def test_duration_bounds_inclusive(self, bed_time, wake_time):
        validate_phase(CircadianPhase(bed_time=bed_time, wake_time=wake_time))


class TestValidateFlight:
    """Flight checks and normalization."""

    def test_missing_fields(self):
        flight = make_flight("+00:00", "+01:00", "2026-03-10T10:00:00Z", None)
        with pytest.raises(ValidationError) as exc_info:
            validate_flight(flight)
        assert exc_info.value.message == MISSING_FLIGHT_INFO

    def test_missing_origin(self):
        flight = Flight(
            origin=None,
            destination=Airport(code="LHR", timezone="Europe/London"),
            departure_time="2026-03-10T10:00:00Z",
            arrival_time="2026-03-10T12:00:00Z",
        )
        with pytest.raises(ValidationError, match="Missing required flight information"):
            validate_flight(flight)

    def test_none_flight(self):
        with pytest.raises(ValidationError, match="Missing required flight information"):
            validate_flight(None)

    def test_invalid_timezone(self):
        flight = make_flight("Nowhere/Land", "+01:00", "2026-03-10T10:00:00Z", "2026-03-10T12:00:00Z")
        with pytest.raises(ValidationError, match="Invalid timezone format"):
            validate_flight(flight)

    def test_normalizes_times_and_duration(self, eastward_flight):
        flight = validate_flight(eastward_flight)

        assert isinstance(flight.departure_time, datetime)
        assert flight.departure_time.tzinfo is not None
        assert flight.duration == 600

    def test_caller_flight_not_mutated(self, eastward_flight):
        validate_flight(eastward_flight)
        assert eastward_flight.departure_time == "2026-03-10T16:00:00-08:00"
        assert eastward_flight.duration is None

    def test_explicit_duration_kept(self, eastward_flight):
        eastward_flight.duration = 615
        assert validate_flight(eastward_flight).duration == 615

    def test_layover_duration_derived(self):
        flight = make_flight(
            "+00:00",
            "+04:00",
            "2026-03-10T08:00:00Z",
            "2026-03-10T20:00:00Z",
            layovers=[Layover(airport="IST", arrival_time="2026-03-10T12:00:00Z", departure_time="2026-03-10T14:30:00Z")],
        )
        validated = validate_flight(flight)
        assert validated.layovers[0].duration == 150
        assert validated.total_layover_minutes == 150

    def test_layover_departing_before_arrival(self):
        flight = make_flight(
            "+00:00",
            "+04:00",
            "2026-03-10T08:00:00Z",
            "2026-03-10T20:00:00Z",
            layovers=[Layover(airport="IST", arrival_time="2026-03-10T14:00:00Z", departure_time="2026-03-10T14:00:00Z")],
        )
        with pytest.raises(ValidationError) as exc_info:
            validate_flight(flight)
        assert exc_info.value.message == INVALID_LAYOVER
        assert exc_info.value.field == "layovers"


class TestValidateProfile:
    """Profile enumeration checks."""

    def test_valid_profile(self):
        profile = make_profile()
        assert validate_profile(profile) is profile

    def test_unknown_chronotype(self):
        with pytest.raises(ValidationError, match="Invalid chronotype"):
            validate_profile(make_profile(chronotype="night_owl"))

    def test_unknown_sleep_quality(self):
        with pytest.raises(ValidationError, match="Invalid sleep quality"):
            validate_profile(make_profile(sleep_quality="terrible"))

    def test_malformed_sleep_times(self):
        with pytest.raises(ValidationError, match="Invalid time format"):
            validate_profile(make_profile(bed_time="late"))
