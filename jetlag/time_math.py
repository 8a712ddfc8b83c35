"""
Clock-time arithmetic.

All operations work in minutes since midnight with explicit modulo-1440
wraparound, so "23:30" + 60 minutes is "00:30". Durations between clock
times are always measured forward and never negative.
"""

import re
from datetime import datetime, time

import pytz

from .errors import ValidationError

MINUTES_PER_DAY = 24 * 60

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def is_valid_time(time_str: str) -> bool:
    """Check "HH:MM" format (hours 0-23, minutes 0-59)."""
    return isinstance(time_str, str) and TIME_PATTERN.match(time_str) is not None


def parse_time(time_str: str) -> time:
    """Parse "HH:MM" string to time object."""
    match = TIME_PATTERN.match(time_str) if isinstance(time_str, str) else None
    if match is None:
        raise ValidationError(f"Invalid time format: {time_str!r}. Expected format: HH:MM")
    return time(int(match.group(1)), int(match.group(2)))


def time_to_minutes(t: str | time) -> int:
    """Convert "HH:MM" (or a time) to minutes since midnight."""
    if isinstance(t, str):
        t = parse_time(t)
    return t.hour * 60 + t.minute


def minutes_to_time(minutes: int | float) -> str:
    """Convert minutes since midnight to "HH:MM" (handles wrap-around)."""
    minutes = int(round(minutes)) % MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_time_12h(time_str: str) -> str:
    """Format "HH:MM" as "H:MM AM/PM" for user-facing text."""
    t = parse_time(time_str)
    hour = t.hour
    period = "AM" if hour < 12 else "PM"
    if hour == 0:
        hour = 12
    elif hour > 12:
        hour -= 12
    return f"{hour}:{t.minute:02d} {period}"


def add_minutes(time_str: str, minutes: int | float) -> str:
    """Add minutes to a clock time, wrapping past midnight."""
    return minutes_to_time(time_to_minutes(time_str) + minutes)


def subtract_minutes(time_str: str, minutes: int | float) -> str:
    """Subtract minutes from a clock time, wrapping past midnight."""
    return minutes_to_time(time_to_minutes(time_str) - minutes)


def add_hours(time_str: str, hours: float) -> str:
    return add_minutes(time_str, hours * 60)


def subtract_hours(time_str: str, hours: float) -> str:
    return subtract_minutes(time_str, hours * 60)


def calculate_time_difference(start: str, end: str) -> int:
    """
    Forward duration from one clock time to another.

    If end appears "before" start it is taken to be on the next day, so the
    result is always in [0, 1440).

    Args:
        start: "HH:MM" start time
        end: "HH:MM" end time

    Returns:
        Minutes from start to end (e.g., 23:00 -> 07:00 is 480)
    """
    return (time_to_minutes(end) - time_to_minutes(start)) % MINUTES_PER_DAY


def calculate_sleep_duration(bed_time: str, wake_time: str) -> int:
    """Minutes asleep between bed time and the following wake time."""
    return calculate_time_difference(bed_time, wake_time)


def is_time_in_range(time_str: str, start: str, end: str) -> bool:
    """
    Check whether a clock time falls in [start, end).

    Handles ranges that cross midnight (e.g., 22:00 to 06:00).
    """
    t = time_to_minutes(time_str)
    start_minutes = time_to_minutes(start)
    end_minutes = time_to_minutes(end)

    if start_minutes <= end_minutes:
        return start_minutes <= t < end_minutes
    return t >= start_minutes or t < end_minutes


def round_to_nearest_thirty_minutes(time_str: str) -> str:
    """Round a clock time to the nearest half hour (ties round up)."""
    minutes = time_to_minutes(time_str)
    return minutes_to_time(((minutes + 15) // 30) * 30)


def parse_iso_datetime(value: datetime | str) -> datetime:
    """
    Parse an ISO 8601 datetime into an aware datetime.

    Accepts a trailing "Z". Naive values are read as UTC.

    Args:
        value: datetime or ISO string (e.g., "2024-01-15T08:00:00Z")

    Returns:
        Timezone-aware datetime
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as exc:
            raise ValidationError(f"Invalid datetime format: {value!r}") from exc

    if value.tzinfo is None:
        value = pytz.UTC.localize(value)
    return value
