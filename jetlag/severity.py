"""
Jet lag severity estimation.

Combines timezone difference, travel direction, flight duration, layovers
and local departure/arrival times into a 0-10 score plus an estimate of
how many days adaptation takes.

Scientific basis:
- Eastward travel (phase advance) is harder than westward (Aschoff 1975;
  Eastman & Burgess 2009)
- Late chronotypes struggle more with advances, early types with delays
- Arriving during habitual sleep hours compounds sleep loss
"""

import math
from datetime import datetime

from .config import AVERAGE_ADJUSTMENT_RATE, get_direction_config
from .circadian_model import determine_direction
from .time_math import parse_iso_datetime
from .timezones import calculate_timezone_difference, to_local
from .types import Chronotype, Flight, Layover, SeverityAssessment, SeverityFactors

MAX_SEVERITY_SCORE = 10

# Layover bands (hours)
SHORT_LAYOVER_HOURS = 3
LONG_LAYOVER_HOURS = 6


def resolve_timezone_offset(flight: Flight, at: datetime | None = None) -> float:
    """
    Hours between origin and destination clocks for a flight.

    An explicit Flight.timezone_offset wins; otherwise both endpoint zones are
    resolved at the reference instant.

    Args:
        flight: Validated flight
        at: Reference instant for IANA zones (defaults to now)

    Returns:
        Destination minus origin offset in hours
    """
    if flight.timezone_offset is not None:
        return float(flight.timezone_offset)
    return calculate_timezone_difference(flight.origin.timezone, flight.destination.timezone, at)


def calculate_direction_factor(offset_hours: float, chronotype: Chronotype | None = None) -> float:
    """
    Multiplier on timezone impact for travel direction and chronotype.

    Eastward 1.2, westward 1.0; late chronotypes going east get a further
    1.2x, early chronotypes going west a further 1.1x.
    """
    config = get_direction_config(determine_direction(offset_hours))
    factor = config.severity_factor
    if chronotype is not None and chronotype in config.penalized_chronotypes:
        factor *= config.chronotype_penalty
    return factor


def calculate_duration_impact(duration_minutes: float) -> float:
    """Longer flights add up to 2 points (saturating at 24h)."""
    hours = duration_minutes / 60
    return min(hours / 24, 1) * 2


def calculate_layover_impact(layovers: list[Layover]) -> float:
    """
    Sum layover contributions.

    Short layovers (<3h) are disruptive, up to 0.8 each. Long layovers (>6h)
    allow some adaptation and count up to 0.3. Mid-range scales up to 0.5.
    """
    impact = 0.0
    for layover in layovers:
        hours = (layover.duration or 0) / 60
        if hours < SHORT_LAYOVER_HOURS:
            impact += (hours / SHORT_LAYOVER_HOURS) * 0.8
        elif hours > LONG_LAYOVER_HOURS:
            impact += min((hours - LONG_LAYOVER_HOURS) / 6, 1) * 0.3
        else:
            impact += min(hours / SHORT_LAYOVER_HOURS, 1) * 0.5
    return impact


def calculate_time_of_day_impact(departure_local: datetime, arrival_local: datetime) -> float:
    """
    Penalty for arriving during sleep hours and for very early/late departures.

    Args:
        departure_local: Departure in origin local time
        arrival_local: Arrival in destination local time

    Returns:
        0.0 to 1.0
    """
    impact = 0.0

    arrival_hour = arrival_local.hour
    if arrival_hour >= 22 or arrival_hour <= 6:
        impact += 0.5

    departure_hour = departure_local.hour
    if departure_hour <= 4 or departure_hour >= 23:
        impact += 0.5
    elif departure_hour <= 6 or departure_hour >= 21:
        impact += 0.3

    return impact


def calculate_adaptation_days(offset_hours: float) -> int:
    """Days to adapt at the average rate of 60 minutes per day."""
    return math.ceil(round(abs(offset_hours) * 60 / AVERAGE_ADJUSTMENT_RATE, 6))


def assess_severity(
    flight: Flight,
    offset_hours: float,
    chronotype: Chronotype | None = None,
) -> SeverityAssessment:
    """
    Score the expected jet lag burden of a flight.

    Args:
        flight: Validated flight (aware timestamps, durations filled in)
        offset_hours: Destination minus origin, in hours
        chronotype: Traveler chronotype, if known

    Returns:
        SeverityAssessment with a 0-10 score rounded to one decimal
    """
    direction_factor = calculate_direction_factor(offset_hours, chronotype)
    timezone_impact = abs(offset_hours) * direction_factor
    duration_impact = calculate_duration_impact(flight.duration or 0)
    layover_impact = calculate_layover_impact(flight.layovers)

    departure_local = to_local(parse_iso_datetime(flight.departure_time), flight.origin.timezone)
    arrival_local = to_local(parse_iso_datetime(flight.arrival_time), flight.destination.timezone)
    time_of_day_impact = calculate_time_of_day_impact(departure_local, arrival_local)

    total = timezone_impact + duration_impact + layover_impact + time_of_day_impact
    score = min(total / 3, MAX_SEVERITY_SCORE)

    return SeverityAssessment(
        score=round(score, 1),
        timezone_difference=offset_hours,
        direction=determine_direction(offset_hours),
        adaptation_days=calculate_adaptation_days(offset_hours),
        factors=SeverityFactors(
            timezone_impact=timezone_impact,
            direction_factor=direction_factor,
            duration_impact=duration_impact,
            layover_impact=layover_impact,
            time_of_day_impact=time_of_day_impact,
        ),
    )
