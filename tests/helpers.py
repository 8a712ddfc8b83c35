"""
Test helper functions for adaptation schedule validation.

These functions can be imported by test modules for schedule analysis.
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from jetlag.config import DAILY_CEILING
from jetlag.time_math import time_to_minutes
from jetlag.types import (
    Activity,
    ActivitySchedule,
    Airport,
    Flight,
    SleepProfile,
    UserProfile,
)

# Pinned wall clock for IANA offset lookups
FROZEN_NOW = "2026-01-15T12:00:00Z"


def time_diff_minutes(time1: str, time2: str) -> int:
    """
    Signed minutes from time1 to time2, taking the shorter way around midnight.

    Args:
        time1: First time in "HH:MM" format
        time2: Second time in "HH:MM" format

    Returns:
        Minutes between times (positive if time2 is after time1)
    """
    diff = time_to_minutes(time2) - time_to_minutes(time1)
    if diff < -12 * 60:
        diff += 24 * 60
    elif diff > 12 * 60:
        diff -= 24 * 60
    return diff


def all_days(schedule: ActivitySchedule) -> list[tuple[int, list[Activity]]]:
    """(day_index, activities) for every pre-flight, arrival and adaptation day."""
    days = [(d.day_index, d.activities) for d in schedule.pre_flight_days]
    days.append((0, schedule.arrival_day_activities))
    days.extend((d.day_index, d.activities) for d in schedule.adaptation_days)
    return days


def get_activities_by_type(
    schedule: ActivitySchedule, activity_type: str, day: int | None = None
) -> list[Activity]:
    """
    Extract all activities of a specific type from a schedule.

    Args:
        schedule: ActivitySchedule from generator
        activity_type: Type to filter (e.g., "bright_light", "nap")
        day: Optional day filter (0 for arrival day, negative for pre-flight)

    Returns:
        List of matching Activity objects
    """
    results = []
    for day_index, activities in all_days(schedule):
        if day is not None and day_index != day:
            continue
        results.extend(a for a in activities if a.type == activity_type)
    return results


def occupied_intervals(activity: Activity) -> list[tuple[int, int]]:
    """Minute intervals an activity covers on the day line, split at midnight."""
    start = time_to_minutes(activity.time_window.start)
    end = time_to_minutes(activity.time_window.end)
    if end < start:
        return [(start, 24 * 60), (0, end)]
    return [(start, end)]


def assert_day_is_valid(activities: list[Activity]) -> None:
    """No activity ends after the ceiling and no two activities overlap."""
    ceiling = time_to_minutes(DAILY_CEILING)

    for activity in activities:
        if activity.time_window.wraps_midnight:
            assert activity.type == "sleep", f"{activity.id} wraps midnight"
        else:
            end = time_to_minutes(activity.time_window.end)
            assert end <= ceiling, f"{activity.id} ends at {activity.time_window.end}"

    for i, a in enumerate(activities):
        for b in activities[i + 1:]:
            for a_start, a_end in occupied_intervals(a):
                for b_start, b_end in occupied_intervals(b):
                    assert max(a_start, b_start) >= min(a_end, b_end), (
                        f"{a.id} {a.time_window} overlaps {b.id} {b.time_window}"
                    )


def make_flight(
    origin_tz: str,
    dest_tz: str,
    departure: str,
    arrival: str,
    **kwargs,
) -> Flight:
    """Flight between two timezones with placeholder airport codes."""
    return Flight(
        origin=Airport(code="ORG", timezone=origin_tz),
        destination=Airport(code="DST", timezone=dest_tz),
        departure_time=departure,
        arrival_time=arrival,
        **kwargs,
    )


def make_profile(
    age: int = 35,
    chronotype: str = "neutral",
    sleep_quality: str = "good",
    can_nap: bool = False,
    bed_time: str = "23:00",
    wake_time: str = "07:00",
    **kwargs,
) -> UserProfile:
    return UserProfile(
        age=age,
        chronotype=chronotype,
        sleep_profile=SleepProfile(
            typical_bed_time=bed_time,
            typical_wake_time=wake_time,
            sleep_quality=sleep_quality,
            can_nap=can_nap,
        ),
        **kwargs,
    )
