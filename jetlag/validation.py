"""
Input validation for schedule generation.

Validators raise ValidationError with a user-facing message and return
normalized copies of their input; caller-owned objects are never mutated.
"""

from dataclasses import replace

from .config import MAX_SLEEP_DURATION, MIN_SLEEP_DURATION
from .errors import ValidationError
from .time_math import calculate_sleep_duration, is_valid_time, parse_iso_datetime
from .timezones import parse_timezone
from .types import CircadianPhase, Flight, Layover, UserProfile

MISSING_FLIGHT_INFO = (
    "Missing required flight information: origin, destination, departure time, or arrival time"
)
INVALID_LAYOVER = "Layover departure time must be after arrival time"
INVALID_PHASE_TIME = "Invalid time format in circadian phase. Expected format: HH:MM"
INVALID_SLEEP_DURATION = "Sleep duration must be between 7 and 9 hours"

VALID_CHRONOTYPES = {
    "early_morning",
    "moderate_morning",
    "neutral",
    "moderate_evening",
    "late_evening",
}
VALID_SLEEP_QUALITIES = {"excellent", "good", "fair", "poor"}


def validate_phase(phase: CircadianPhase) -> CircadianPhase:
    """
    Validate a habitual sleep phase.

    Raises:
        ValidationError: on malformed times or a sleep duration outside 7-9h
    """
    if not is_valid_time(phase.bed_time) or not is_valid_time(phase.wake_time):
        raise ValidationError(INVALID_PHASE_TIME, field="phase")

    duration = calculate_sleep_duration(phase.bed_time, phase.wake_time)
    if not MIN_SLEEP_DURATION <= duration <= MAX_SLEEP_DURATION:
        raise ValidationError(INVALID_SLEEP_DURATION, field="phase")

    return phase


def _validate_layover(layover: Layover) -> Layover:
    arrival = parse_iso_datetime(layover.arrival_time)
    departure = parse_iso_datetime(layover.departure_time)
    if departure <= arrival:
        raise ValidationError(INVALID_LAYOVER, field="layovers")

    duration = layover.duration
    if duration is None:
        duration = int((departure - arrival).total_seconds() // 60)

    return replace(layover, arrival_time=arrival, departure_time=departure, duration=duration)


def validate_flight(flight: Flight) -> Flight:
    """
    Validate a flight and normalize its timestamps and durations.

    Args:
        flight: Caller-supplied flight

    Returns:
        Copy with aware datetimes and with duration and layover
        durations filled in

    Raises:
        ValidationError: on missing fields, unknown timezones, or layovers
            that depart before they arrive
    """
    if (
        flight is None
        or not flight.origin
        or not flight.destination
        or not flight.departure_time
        or not flight.arrival_time
    ):
        raise ValidationError(MISSING_FLIGHT_INFO, field="flight")

    parse_timezone(flight.origin.timezone)
    parse_timezone(flight.destination.timezone)

    departure = parse_iso_datetime(flight.departure_time)
    arrival = parse_iso_datetime(flight.arrival_time)

    layovers = [_validate_layover(layover) for layover in flight.layovers]

    duration = flight.duration
    if duration is None:
        duration = max(0, int((arrival - departure).total_seconds() // 60))

    return replace(
        flight,
        departure_time=departure,
        arrival_time=arrival,
        duration=duration,
        layovers=layovers,
    )


def validate_profile(profile: UserProfile) -> UserProfile:
    """Check profile enumerations and habitual times."""
    if profile.chronotype not in VALID_CHRONOTYPES:
        raise ValidationError(f"Invalid chronotype: {profile.chronotype}", field="chronotype")

    sleep_profile = profile.sleep_profile
    if sleep_profile.sleep_quality not in VALID_SLEEP_QUALITIES:
        raise ValidationError(
            f"Invalid sleep quality: {sleep_profile.sleep_quality}", field="sleep_quality"
        )
    if not is_valid_time(sleep_profile.typical_bed_time) or not is_valid_time(
        sleep_profile.typical_wake_time
    ):
        raise ValidationError(INVALID_PHASE_TIME, field="sleep_profile")
    if profile.age < 0:
        raise ValidationError(f"Invalid age: {profile.age}", field="age")

    return profile
