"""
Personalization of the adaptation schedule.

Adjusts light and sleep timing for chronotype, estimates recovery time from
age, sleep quality and past trips, and schedules naps for travelers who can
nap. Also classifies chronotype from a short questionnaire or from a
habitual sleep profile.

Scientific basis:
- Chronotype shifts preferred sleep and light timing by up to ~2h
  (Roenneberg et al. 2003, mid-sleep on free days)
- Older travelers adapt more slowly (Monk et al. 2000)
- Short afternoon naps around the post-lunch dip limit sleep debt without
  delaying main sleep (Borbély 1982, Two-Process Model)
"""

import math

from .config import (
    DEFAULT_SUNRISE,
    DEFAULT_SUNSET,
    MELATONIN_BEFORE_BED,
    MELATONIN_LEAD_PER_HOUR,
    MELATONIN_MAX_LEAD,
    MELATONIN_MIN_LEAD,
    get_chronotype_config,
)
from .time_math import (
    add_minutes,
    calculate_sleep_duration,
    calculate_time_difference,
    is_time_in_range,
    time_to_minutes,
)
from .types import (
    Chronotype,
    JetlagHistory,
    LightExposureWindow,
    SleepProfile,
    TimeWindow,
    UserProfile,
)

NAP_DURATION = 30
# Nap windows after the solar midpoint: early, mid and late afternoon
NAP_OFFSETS_AFTER_MIDPOINT = (60, 150, 240)

# Age bands for recovery estimates
OLDER_TRAVELER_AGE = 60
YOUNGER_TRAVELER_AGE = 25
AGE_MID_SLEEP_ADJUSTMENT = 60  # Young skew later, older skew earlier

# Mid-sleep upper bounds (minutes after midnight) for each chronotype
MID_SLEEP_CHRONOTYPE_BOUNDS: list[tuple[int, Chronotype]] = [
    (2 * 60, "early_morning"),
    (3 * 60, "moderate_morning"),
    (4 * 60, "neutral"),
    (5 * 60, "moderate_evening"),
]

STRONG_CHRONOTYPE_MARGIN = 4


def personalize_light_timing(
    light: LightExposureWindow, profile: UserProfile | None
) -> LightExposureWindow:
    """
    Shift light windows by the traveler's chronotype.

    Early types get light earlier (up to 1h), late types later.
    """
    if profile is None:
        return light

    shift = get_chronotype_config(profile.chronotype).light_shift
    if shift == 0:
        return light

    avoid = light.avoid_light
    if avoid is not None:
        avoid = TimeWindow(start=add_minutes(avoid.start, shift), end=add_minutes(avoid.end, shift))

    return LightExposureWindow(
        bright_light=TimeWindow(
            start=add_minutes(light.bright_light.start, shift),
            end=add_minutes(light.bright_light.end, shift),
        ),
        avoid_light=avoid,
        intensity=light.intensity,
        type=light.type,
        priority=light.priority,
        natural_light=light.natural_light,
        description=light.description,
    )


def personalize_sleep_window(window: TimeWindow, profile: UserProfile | None) -> TimeWindow:
    """
    Shift a sleep window by chronotype, keeping its duration.

    Late-evening types never get a bedtime earlier than 22:00.
    """
    if profile is None:
        return window

    config = get_chronotype_config(profile.chronotype)
    duration = calculate_time_difference(window.start, window.end)
    bed_time = add_minutes(window.start, config.sleep_shift)

    floor = config.earliest_bed_time
    if floor is not None and is_time_in_range(bed_time, "12:00", floor):
        bed_time = floor

    return TimeWindow(start=bed_time, end=add_minutes(bed_time, duration))


def calculate_expected_recovery_days(offset_hours: float, profile: UserProfile) -> int:
    """
    Estimate days until the traveler feels recovered.

    Baseline ~2 timezones per day, adjusted for age and sleep quality. A
    previous trip's recovery (less one day) sets a floor.

    Args:
        offset_hours: Destination minus origin, in hours
        profile: Traveler profile

    Returns:
        Days to recover (at least 1)
    """
    days = math.ceil(abs(offset_hours) / 2)

    if profile.age > OLDER_TRAVELER_AGE:
        days += 1
    if profile.age < YOUNGER_TRAVELER_AGE:
        days -= 1

    quality = profile.sleep_profile.sleep_quality
    if quality == "poor":
        days += 1
    elif quality == "excellent":
        days -= 1

    if profile.previous_jetlag_recovery is not None:
        days = max(days, profile.previous_jetlag_recovery.days_to_recover - 1)

    return max(1, days)


def solar_midpoint(sunrise: str = DEFAULT_SUNRISE, sunset: str = DEFAULT_SUNSET) -> str:
    """Clock time halfway between sunrise and sunset."""
    day_length = calculate_time_difference(sunrise, sunset)
    return add_minutes(sunrise, day_length // 2)


def generate_nap_windows(profile: UserProfile | None, midpoint: str | None = None) -> list[TimeWindow]:
    """
    Afternoon nap windows for travelers who can nap.

    Three candidates follow the solar midpoint (early, mid, late afternoon).
    Poor sleepers get all three; everyone else only the mid-afternoon one.

    Args:
        profile: Traveler profile (no naps without one)
        midpoint: Solar midpoint, defaults to the 06:00-18:00 daylight midpoint

    Returns:
        List of 30-minute nap windows (empty for non-nappers)
    """
    if profile is None or not profile.sleep_profile.can_nap:
        return []

    if midpoint is None:
        midpoint = solar_midpoint()

    windows = []
    for offset in NAP_OFFSETS_AFTER_MIDPOINT:
        start = add_minutes(midpoint, offset)
        windows.append(TimeWindow(start=start, end=add_minutes(start, NAP_DURATION)))

    if profile.sleep_profile.sleep_quality == "poor":
        return windows
    return [windows[1]]


def calculate_melatonin_lead(offset_hours: float, profile: UserProfile | None = None) -> int:
    """
    Minutes before bedtime to take melatonin.

    With a profile the lead scales with the crossing, 30 + 15 min per hour,
    clamped to 30-300 minutes.
    """
    if profile is None:
        return MELATONIN_BEFORE_BED
    lead = MELATONIN_MIN_LEAD + MELATONIN_LEAD_PER_HOUR * abs(offset_hours)
    return int(max(MELATONIN_MIN_LEAD, min(lead, MELATONIN_MAX_LEAD)))


def melatonin_dose(profile: UserProfile | None) -> str:
    """0.5mg is the physiological dose; poor sleepers get 1mg."""
    if profile is not None and profile.sleep_profile.sleep_quality == "poor":
        return "1mg"
    return "0.5mg"


def generate_sleep_notes(profile: UserProfile | None) -> str | None:
    if profile is None:
        return None

    notes = []
    if profile.sleep_profile.sleep_latency > 30:
        notes.append("Allow extra time to fall asleep")
    if not profile.sleep_profile.consistent_schedule:
        notes.append("Try to maintain consistent sleep times")
    return ". ".join(notes) or None


def determine_chronotype(answers: dict[str, str]) -> Chronotype:
    """
    Classify chronotype from questionnaire answers.

    Recognized questions:
    - natural_bedtime: "HH:MM" (before 22:00 = morning, after midnight = evening)
    - natural_waketime: "HH:MM" (before 06:00 = morning, after 09:00 = evening)
    - weekend_sleep_diff: "SIMILAR" means a stable, stronger chronotype

    Args:
        answers: Mapping of question id to answer

    Returns:
        Chronotype category
    """
    morning_score = 0
    evening_score = 0

    bedtime = answers.get("natural_bedtime")
    if bedtime:
        if is_time_in_range(bedtime, "12:00", "22:00"):
            morning_score += 2
        elif is_time_in_range(bedtime, "00:00", "12:00"):
            evening_score += 2

    waketime = answers.get("natural_waketime")
    if waketime:
        wake_minutes = time_to_minutes(waketime)
        if wake_minutes < 6 * 60:
            morning_score += 2
        elif wake_minutes > 9 * 60:
            evening_score += 2

    if answers.get("weekend_sleep_diff") == "SIMILAR":
        morning_score += 1
        evening_score += 1

    margin = morning_score - evening_score
    if margin >= STRONG_CHRONOTYPE_MARGIN:
        return "early_morning"
    if margin > 0:
        return "moderate_morning"
    if margin <= -STRONG_CHRONOTYPE_MARGIN:
        return "late_evening"
    if margin < 0:
        return "moderate_evening"
    return "neutral"


def _mid_sleep_minutes(bed_time: str, wake_time: str) -> int:
    """Mid-sleep relative to midnight (negative when before midnight)."""
    duration = calculate_sleep_duration(bed_time, wake_time)
    mid = (time_to_minutes(bed_time) + duration // 2) % (24 * 60)
    if mid >= 12 * 60:
        mid -= 24 * 60
    return mid


def create_user_profile(
    age: int,
    sleep_profile: SleepProfile,
    previous_recovery: JetlagHistory | None = None,
) -> UserProfile:
    """
    Build a profile, inferring chronotype from habitual mid-sleep.

    Younger travelers skew later and older travelers earlier, so mid-sleep
    is adjusted by an hour at either end before classification.
    """
    mid_sleep = _mid_sleep_minutes(sleep_profile.typical_bed_time, sleep_profile.typical_wake_time)

    if age < YOUNGER_TRAVELER_AGE:
        mid_sleep += AGE_MID_SLEEP_ADJUSTMENT
    elif age > OLDER_TRAVELER_AGE:
        mid_sleep -= AGE_MID_SLEEP_ADJUSTMENT

    chronotype: Chronotype = "late_evening"
    for upper_bound, category in MID_SLEEP_CHRONOTYPE_BOUNDS:
        if mid_sleep < upper_bound:
            chronotype = category
            break

    return UserProfile(
        age=age,
        chronotype=chronotype,
        sleep_profile=sleep_profile,
        previous_jetlag_recovery=previous_recovery,
    )
