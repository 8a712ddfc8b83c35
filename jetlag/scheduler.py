"""
Adaptation schedule generation.

Architecture:
1. Validation normalizes the flight, phase and profile (validation)
2. The timezone offset is resolved once and passed explicitly to every step
3. Severity is scored for the flight (severity)
4. DayPlanner plans pre-flight, arrival and adaptation days (scheduling/)
5. ConflictResolver fits each day under the 21:30 ceiling without overlaps
   (scheduling/)

The generator holds no per-request state, so one instance can serve
concurrent requests.
"""

import logging
from datetime import datetime

import pytz

from .activities import build_in_flight_activities
from .circadian_model import calculate_total_adaptation_days, determine_direction
from .errors import ValidationError
from .personalization import calculate_expected_recovery_days, melatonin_dose
from .scheduling.conflict_resolver import ConflictResolver
from .scheduling.day_planner import DayPlanner
from .severity import assess_severity, resolve_timezone_offset
from .types import (
    ActivitySchedule,
    AdaptationDay,
    CircadianPhase,
    Flight,
    SchedulePreferences,
    UserProfile,
)
from .validation import validate_flight, validate_phase, validate_profile

logger = logging.getLogger(__name__)


class ScheduleGenerator:
    """
    Day-based adaptation schedule generator.

    Days:
    - Pre-flight: up to 3 days of gradual pre-shifting (origin clock)
    - In-flight: sleep, light and meals while airborne (destination clock)
    - Arrival: day 0 on the habitual phase
    - Adaptation: days 1..N with sleep shifting toward the destination
    """

    def generate_activity_schedule(
        self,
        flight: Flight,
        phase: CircadianPhase | None = None,
        profile: UserProfile | None = None,
        preferences: SchedulePreferences | None = None,
        now: datetime | None = None,
    ) -> ActivitySchedule:
        """
        Generate a complete adaptation schedule for a flight.

        Args:
            flight: The journey (timestamps as ISO strings or datetimes)
            phase: Habitual sleep phase, defaults to the profile's phase or
                23:00-07:00
            profile: Optional personalization
            preferences: Schedule options
            now: Reference instant for IANA offset lookup (defaults to now)

        Returns:
            ActivitySchedule

        Raises:
            ValidationError: for invalid input, or wrapping any unexpected
                failure during generation
        """
        try:
            return self._generate(flight, phase, profile, preferences, now)
        except ValidationError:
            raise
        except Exception as exc:
            logger.exception("Schedule generation failed")
            raise ValidationError(f"Schedule generation failed: {exc}") from exc

    def _generate(
        self,
        flight: Flight,
        phase: CircadianPhase | None,
        profile: UserProfile | None,
        preferences: SchedulePreferences | None,
        now: datetime | None,
    ) -> ActivitySchedule:
        # 1. Validate
        flight = validate_flight(flight)
        if profile is not None:
            profile = validate_profile(profile)
        if phase is not None:
            phase = validate_phase(phase)
        elif profile is not None:
            # Habitual duration outside 7-9h is clamped by the model
            phase = profile.phase
        else:
            phase = CircadianPhase()
        preferences = preferences or SchedulePreferences()

        # 2. Resolve the offset once
        if now is None:
            now = datetime.now(pytz.UTC)
        offset_hours = resolve_timezone_offset(flight, now)
        direction = determine_direction(offset_hours)
        logger.debug("Flight %s: offset %+.2fh (%s)", flight.id, offset_hours, direction)

        # 3. Severity
        chronotype = profile.chronotype if profile is not None else None
        severity = assess_severity(flight, offset_hours, chronotype)

        # 4. Plan and resolve each day
        planner = DayPlanner(offset_hours, phase, profile, preferences)
        resolver = ConflictResolver()

        pre_flight_days = []
        for day_index in range(-planner.pre_flight_day_count(), 0):
            planned = planner.plan_pre_flight_day(day_index)
            pre_flight_days.append(
                AdaptationDay(day_index=day_index, activities=resolver.resolve_day(planned.activities))
            )

        in_flight = build_in_flight_activities(
            flight, direction, preferences, melatonin_dose(profile)
        )

        arrival = planner.plan_day(0)
        arrival_activities = resolver.resolve_day(arrival.activities)

        adaptation_days = []
        for day_index in range(1, calculate_total_adaptation_days(offset_hours) + 1):
            planned = planner.plan_day(day_index)
            adaptation_days.append(
                AdaptationDay(day_index=day_index, activities=resolver.resolve_day(planned.activities))
            )

        expected_recovery = None
        if profile is not None:
            expected_recovery = calculate_expected_recovery_days(offset_hours, profile)

        # 5. Build response
        return ActivitySchedule(
            arrival_day_activities=arrival_activities,
            adaptation_days=adaptation_days,
            pre_flight_days=pre_flight_days,
            in_flight_activities=in_flight,
            direction=direction,
            timezone_offset_hours=offset_hours,
            severity=severity,
            expected_recovery_days=expected_recovery,
            adjustments=resolver.adjustments,
        )


def generate_activity_schedule(
    flight: Flight,
    phase: CircadianPhase | None = None,
    profile: UserProfile | None = None,
    preferences: SchedulePreferences | None = None,
    now: datetime | None = None,
) -> ActivitySchedule:
    """
    Convenience function to generate a schedule.

    Args:
        flight: The journey
        phase: Habitual sleep phase (optional)
        profile: Personalization (optional)
        preferences: Schedule options (optional)
        now: Reference instant for IANA offset lookup (defaults to now)

    Returns:
        ActivitySchedule
    """
    generator = ScheduleGenerator()
    return generator.generate_activity_schedule(flight, phase, profile, preferences, now)
