"""
Timezone identifiers and UTC offset resolution.

A flight endpoint's timezone is either a fixed UTC offset ("+05:30") or an
IANA zone name ("Asia/Tokyo"). Both are parsed into a Timezone tagged union
and resolved to a pytz tzinfo by a single function.

IANA offsets depend on the reference instant (DST). Callers that need a
deterministic result should pin the instant or use fixed offsets.
"""

import logging
import re
from datetime import datetime

import pytz

from .errors import ValidationError
from .types import FixedOffset, IanaName, Timezone

logger = logging.getLogger(__name__)

UTC_OFFSET_PATTERN = re.compile(r"^([+-])([01]\d|2[0-3]):([0-5]\d)$")

# Major airports, used when a flight record carries only an IATA code
AIRPORT_TIMEZONES: dict[str, str] = {
    "SFO": "America/Los_Angeles",
    "LHR": "Europe/London",
    "JFK": "America/New_York",
    "NRT": "Asia/Tokyo",
    "DXB": "Asia/Dubai",
    "SYD": "Australia/Sydney",
    "TPE": "Asia/Taipei",
    "YVR": "America/Vancouver",
    "YYZ": "America/Toronto",
    "GRU": "America/Sao_Paulo",
    "EZE": "America/Argentina/Buenos_Aires",
}


def validate_utc_offset(offset: str) -> bool:
    """Validate UTC offset format like '+05:30' or '-08:00'."""
    return isinstance(offset, str) and UTC_OFFSET_PATTERN.match(offset) is not None


def parse_timezone(identifier: str) -> Timezone:
    """
    Parse a timezone identifier.

    Args:
        identifier: "±HH:MM" offset or IANA zone name

    Returns:
        FixedOffset or IanaName

    Raises:
        ValidationError: if the identifier is neither
    """
    if not identifier or not isinstance(identifier, str):
        raise ValidationError(f"Invalid timezone format: {identifier!r}", field="timezone")

    match = UTC_OFFSET_PATTERN.match(identifier)
    if match:
        sign = -1 if match.group(1) == "-" else 1
        return FixedOffset(minutes=sign * (int(match.group(2)) * 60 + int(match.group(3))))

    if identifier not in pytz.all_timezones_set:
        raise ValidationError(f"Invalid timezone format: {identifier}", field="timezone")
    return IanaName(name=identifier)


def resolve_tzinfo(tz: Timezone | str):
    """Resolve a Timezone (or identifier string) to a pytz tzinfo."""
    if isinstance(tz, str):
        tz = parse_timezone(tz)

    if isinstance(tz, FixedOffset):
        return pytz.FixedOffset(tz.minutes)
    return pytz.timezone(tz.name)


def get_utc_offset_hours(tz: Timezone | str, at: datetime | None = None) -> float:
    """
    Get UTC offset in hours for a timezone at a given instant.

    Args:
        tz: Timezone or identifier string
        at: Reference instant (for DST), defaults to now

    Returns:
        Offset in hours (e.g., -8.0 for PST, -7.0 for PDT)
    """
    if at is None:
        at = datetime.now(pytz.UTC)
    elif at.tzinfo is None:
        at = pytz.UTC.localize(at)

    local = at.astimezone(resolve_tzinfo(tz))
    return local.utcoffset().total_seconds() / 3600


def calculate_timezone_difference(
    origin_tz: Timezone | str, dest_tz: Timezone | str, at: datetime | None = None
) -> float:
    """
    Hours between origin and destination clocks.

    Positive = destination is ahead (eastward), negative = behind (westward).
    The raw difference is returned; crossings beyond 12h are not folded back.

    Args:
        origin_tz: Origin timezone
        dest_tz: Destination timezone
        at: Reference instant for DST-aware zones, defaults to now

    Returns:
        Destination offset minus origin offset, in hours
    """
    if at is None:
        at = datetime.now(pytz.UTC)

    origin_offset = get_utc_offset_hours(origin_tz, at)
    dest_offset = get_utc_offset_hours(dest_tz, at)
    difference = dest_offset - origin_offset
    logger.debug(
        "Resolved timezone difference %s -> %s at %s: %+.2fh",
        origin_tz, dest_tz, at.isoformat(), difference,
    )
    return difference


def to_local(instant: datetime, tz: Timezone | str) -> datetime:
    """Convert an aware instant to local wall time in a timezone."""
    if instant.tzinfo is None:
        instant = pytz.UTC.localize(instant)
    return instant.astimezone(resolve_tzinfo(tz))


def airport_timezone(code: str) -> str:
    """
    Look up the IANA timezone for an airport code.

    Raises:
        ValidationError: for codes missing from AIRPORT_TIMEZONES
    """
    tz_name = AIRPORT_TIMEZONES.get((code or "").upper())
    if tz_name is None:
        raise ValidationError(f"Unknown airport code: {code}", field="airport")
    return tz_name
