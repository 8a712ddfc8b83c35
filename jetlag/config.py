"""
Engine constants and rule tables.

Direction- and chronotype-dependent rules live in lookup tables rather than
nested conditionals; each table entry is a small config dataclass.
"""

from dataclasses import dataclass

from .types import Chronotype, Direction, LightSensitivity

# =============================================================================
# Circadian constants (minutes unless noted)
# =============================================================================

MINUTES_PER_DAY = 24 * 60

MIN_SLEEP_DURATION = 420  # 7h
MAX_SLEEP_DURATION = 540  # 9h
MAX_SHIFT_PER_DAY = 60  # Date-line cap
AVERAGE_ADJUSTMENT_RATE = 60  # Nominal adaptation, minutes per day

NADIR_BEFORE_WAKE = 120  # CBTmin ~2h before habitual wake
LIGHT_WINDOW_DURATION = 120
AVOID_WINDOW_DURATION = 120
MAX_LIGHT_INTENSITY = 10000  # Lux

DATE_LINE_THRESHOLD_HOURS = 12

MELATONIN_WINDOW = 30
MELATONIN_BEFORE_BED = 60  # Lead time without a profile
MELATONIN_MIN_LEAD = 30
MELATONIN_MAX_LEAD = 300
MELATONIN_LEAD_PER_HOUR = 15

CAFFEINE_MARKER_DURATION = 30

# Daily activity ceiling: nothing may end later than this
DAILY_CEILING = "21:30"
MIN_LIGHT_ACTIVITY_DURATION = 60
MIN_ACTIVITY_DURATION = 30

PRE_FLIGHT_MAX_DAYS = 3
PRE_FLIGHT_SHIFT_PER_DAY = 30

EXERCISE_AFTER_WAKE = 120
EXERCISE_DURATION = 30

# Without weather data, daylight is assumed to run 06:00-18:00
DEFAULT_SUNRISE = "06:00"
DEFAULT_SUNSET = "18:00"


# =============================================================================
# Direction rules
# =============================================================================


@dataclass
class DirectionConfig:
    """Rules that depend on travel direction."""

    sleep_shift_per_day: int  # Minutes of bedtime shift per adaptation day
    severity_factor: float  # Baseline multiplier on timezone impact
    dinner_time: str
    chronotype_penalty: float  # Extra multiplier for the disadvantaged chronotype
    penalized_chronotypes: frozenset[str]


# Advances (eastward) are harder than delays (westward): smaller daily shift,
# larger severity factor. Late types struggle with advances, early types
# with delays.
DIRECTION_CONFIGS: dict[Direction, DirectionConfig] = {
    "eastward": DirectionConfig(
        sleep_shift_per_day=60,
        severity_factor=1.2,
        dinner_time="18:00",
        chronotype_penalty=1.2,
        penalized_chronotypes=frozenset({"moderate_evening", "late_evening"}),
    ),
    "westward": DirectionConfig(
        sleep_shift_per_day=90,
        severity_factor=1.0,
        dinner_time="19:00",
        chronotype_penalty=1.1,
        penalized_chronotypes=frozenset({"early_morning", "moderate_morning"}),
    ),
}


# =============================================================================
# Chronotype rules
# =============================================================================


@dataclass
class ChronotypeConfig:
    """Personalization offsets for a chronotype."""

    light_shift: int  # Minutes added to light windows
    sleep_shift: int  # Minutes added to the sleep window
    earliest_bed_time: str | None = None  # Floor for the shifted bedtime


CHRONOTYPE_CONFIGS: dict[Chronotype, ChronotypeConfig] = {
    "early_morning": ChronotypeConfig(light_shift=-60, sleep_shift=-120),
    "moderate_morning": ChronotypeConfig(light_shift=-30, sleep_shift=-60),
    "neutral": ChronotypeConfig(light_shift=0, sleep_shift=0),
    "moderate_evening": ChronotypeConfig(light_shift=30, sleep_shift=60),
    "late_evening": ChronotypeConfig(light_shift=60, sleep_shift=120, earliest_bed_time="22:00"),
}


# Brightness needed relative to MAX_LIGHT_INTENSITY
LIGHT_SENSITIVITY_MULTIPLIERS: dict[LightSensitivity, float] = {
    "low": 1.2,
    "normal": 1.0,
    "high": 0.8,
}


def get_direction_config(direction: Direction) -> DirectionConfig:
    """Get the rule set for a travel direction."""
    return DIRECTION_CONFIGS[direction]


def get_chronotype_config(chronotype: Chronotype) -> ChronotypeConfig:
    """Get the personalization offsets for a chronotype."""
    return CHRONOTYPE_CONFIGS[chronotype]
