"""
Circadian timing rules: CBTmin estimate, light timing, sleep phase shifting.

Scientific basis:
- CBTmin (core body temperature nadir) sits ~2h before habitual wake
  (Czeisler & Gooley 2007)
- Light after CBTmin advances the clock, light before it delays
  (Khalsa et al. 2003 PRC)
- Advances are harder than delays: ~1h/day eastward vs ~1.5h/day westward

Sleep-aware adjustments:
- ADVANCE light_seek: never earlier than 2h after waking
- DELAY light_seek: the PRC window falls during sleep for any normal phase,
  so it moves to late afternoon
- light_avoid: slid out of the pre-bed wind-down, and re-anchored to the
  2h before wake when it would land near wake, inside sleep, or when the
  trip crosses the date line
"""

import math

from .config import (
    AVERAGE_ADJUSTMENT_RATE,
    AVOID_WINDOW_DURATION,
    DATE_LINE_THRESHOLD_HOURS,
    LIGHT_WINDOW_DURATION,
    MAX_SHIFT_PER_DAY,
    MAX_SLEEP_DURATION,
    MIN_SLEEP_DURATION,
    NADIR_BEFORE_WAKE,
    get_direction_config,
)
from .time_math import (
    add_minutes,
    calculate_sleep_duration,
    calculate_time_difference,
    is_time_in_range,
    subtract_minutes,
)
from .types import CircadianPhase, Direction, LightExposureWindow, SleepTiming, TimeWindow

# Light timing relative to CBTmin
ADVANCE_LIGHT_AFTER_NADIR = 180  # Bright light starts 3h after CBTmin
DELAY_LIGHT_BEFORE_NADIR = 120  # Bright light ends 2h before CBTmin

# Practical constraints
POST_WAKE_LIGHT_BUFFER = 120  # Morning light starts at least 2h after waking
EVENING_LIGHT_BEFORE_BED = 270  # Relocated delay light ends 4.5h before bed
WIND_DOWN_BEFORE_BED = 210  # Evening avoid-light ends 3.5h before bed
WAKE_PROXIMITY = 180  # Avoid windows this close to wake are re-anchored


def calculate_nadir(phase: CircadianPhase) -> str:
    """
    Estimate CBTmin (core body temperature nadir) from a habitual phase.

    Args:
        phase: Habitual bed/wake times

    Returns:
        "HH:MM" (e.g., "05:00" for a 07:00 wake)
    """
    return subtract_minutes(phase.wake_time, NADIR_BEFORE_WAKE)


def determine_direction(offset_hours: float) -> Direction:
    """Eastward when the destination clock is ahead, otherwise westward."""
    return "eastward" if offset_hours > 0 else "westward"


def is_date_line_crossing(offset_hours: float) -> bool:
    """Crossings of 12h or more get the conservative date-line rules."""
    return abs(offset_hours) >= DATE_LINE_THRESHOLD_HOURS


def _windows_overlap(a_start: str, a_end: str, b_start: str, b_end: str) -> bool:
    """Check whether two clock windows (either may wrap midnight) overlap."""
    return is_time_in_range(a_start, b_start, b_end) or is_time_in_range(b_start, a_start, a_end)


def _minutes_from_window(window: TimeWindow, anchor: str) -> int:
    """Shortest clock distance between an anchor time and a window."""
    if is_time_in_range(anchor, window.start, window.end):
        return 0
    return min(
        calculate_time_difference(window.end, anchor),
        calculate_time_difference(anchor, window.start),
    )


def _advance_light_window(phase: CircadianPhase, nadir: str) -> TimeWindow:
    """Morning bright light for eastward travel."""
    start = add_minutes(nadir, ADVANCE_LIGHT_AFTER_NADIR)

    during_sleep = is_time_in_range(start, phase.bed_time, phase.wake_time)
    if during_sleep or calculate_time_difference(phase.wake_time, start) < POST_WAKE_LIGHT_BUFFER:
        start = add_minutes(phase.wake_time, POST_WAKE_LIGHT_BUFFER)

    return TimeWindow(start=start, end=add_minutes(start, LIGHT_WINDOW_DURATION))


def _delay_light_window(phase: CircadianPhase, nadir: str) -> TimeWindow:
    """Evening bright light for westward travel."""
    end = subtract_minutes(nadir, DELAY_LIGHT_BEFORE_NADIR)
    start = subtract_minutes(end, LIGHT_WINDOW_DURATION)

    if _windows_overlap(start, end, phase.bed_time, phase.wake_time):
        end = subtract_minutes(phase.bed_time, EVENING_LIGHT_BEFORE_BED)
        start = subtract_minutes(end, LIGHT_WINDOW_DURATION)

    return TimeWindow(start=start, end=end)


def _avoid_light_window(
    bright: TimeWindow, phase: CircadianPhase, offset_hours: float
) -> TimeWindow:
    """
    Light avoidance window opposite the bright-light window.

    Re-anchored to the 2h before wake when the window would fall within 3h of
    wake, overlap sleep, or when the trip crosses the date line.
    """
    start = add_minutes(bright.start, 12 * 60)
    end = add_minutes(bright.end, 12 * 60)

    wind_down_start = subtract_minutes(phase.bed_time, WIND_DOWN_BEFORE_BED)
    if _windows_overlap(start, end, wind_down_start, phase.bed_time):
        end = wind_down_start
        start = subtract_minutes(end, AVOID_WINDOW_DURATION)

    window = TimeWindow(start=start, end=end)

    near_wake = _minutes_from_window(window, phase.wake_time) < WAKE_PROXIMITY
    overlaps_sleep = _windows_overlap(start, end, phase.bed_time, phase.wake_time)
    if near_wake or overlaps_sleep or is_date_line_crossing(offset_hours):
        window = TimeWindow(
            start=subtract_minutes(phase.wake_time, AVOID_WINDOW_DURATION),
            end=phase.wake_time,
        )

    return window


def calculate_light_timing(
    offset_hours: float, phase: CircadianPhase, day_index: int = 0
) -> LightExposureWindow:
    """
    Calculate bright-light and light-avoidance windows.

    Windows are anchored to the phase's CBTmin. day_index is accepted for
    call-site symmetry with calculate_sleep_timing but does not change the
    windows: adaptation days pass the original phase so light targets stay
    put while sleep catches up.

    Args:
        offset_hours: Destination minus origin, in hours
        phase: Habitual phase to anchor on
        day_index: Adaptation day (unused for window placement)

    Returns:
        LightExposureWindow with 2h bright and avoid windows
    """
    direction = determine_direction(offset_hours)
    nadir = calculate_nadir(phase)

    if direction == "eastward":
        bright = _advance_light_window(phase, nadir)
        description = "Seek bright light exposure to advance your circadian rhythm"
    else:
        bright = _delay_light_window(phase, nadir)
        description = "Seek bright light exposure to delay your circadian rhythm"

    return LightExposureWindow(
        bright_light=bright,
        avoid_light=_avoid_light_window(bright, phase, offset_hours),
        intensity="bright",
        type="advance" if direction == "eastward" else "delay",
        priority="critical",
        natural_light=True,
        description=description,
    )


def per_day_shift_minutes(offset_hours: float) -> int:
    """Bedtime shift per adaptation day (date-line trips are capped)."""
    if is_date_line_crossing(offset_hours):
        return MAX_SHIFT_PER_DAY
    return get_direction_config(determine_direction(offset_hours)).sleep_shift_per_day


def calculate_total_adaptation_days(offset_hours: float) -> int:
    """
    Days needed to fully adapt at the nominal rate.

    Independent of the per-day shift used for bed times; date-line trips are
    recomputed against the capped shift.
    """
    rate = MAX_SHIFT_PER_DAY if is_date_line_crossing(offset_hours) else AVERAGE_ADJUSTMENT_RATE
    # Rounded first so float noise (8.000000001) doesn't add a day
    return math.ceil(round(abs(offset_hours) * 60 / rate, 6))


def calculate_sleep_timing(
    offset_hours: float, phase: CircadianPhase, day_index: int
) -> SleepTiming:
    """
    Shift the sleep phase for one adaptation day.

    Bedtime moves earlier eastward (60 min/day) and later westward
    (90 min/day), cumulatively by day. Wake time is bedtime plus the habitual
    sleep duration clamped to 7-9h, so duration is preserved.

    Args:
        offset_hours: Destination minus origin, in hours
        phase: Habitual phase
        day_index: 0 on arrival, 1..N during adaptation

    Returns:
        SleepTiming for the day
    """
    duration = calculate_sleep_duration(phase.bed_time, phase.wake_time)
    duration = max(MIN_SLEEP_DURATION, min(duration, MAX_SLEEP_DURATION))

    shift = per_day_shift_minutes(offset_hours) * day_index
    if determine_direction(offset_hours) == "eastward":
        shift = -shift

    bed_time = add_minutes(phase.bed_time, shift)
    return SleepTiming(
        bed_time=bed_time,
        wake_time=add_minutes(bed_time, duration),
        total_days=calculate_total_adaptation_days(offset_hours),
    )


def shift_phase(phase: CircadianPhase, minutes: int) -> CircadianPhase:
    """Move both ends of a phase by the same number of minutes."""
    return CircadianPhase(
        bed_time=add_minutes(phase.bed_time, minutes),
        wake_time=add_minutes(phase.wake_time, minutes),
    )
