"""
Data structures for adaptation schedule generation.

Clock times are "HH:MM" strings (a habitual daily time, no date or timezone).
Instants are timezone-aware datetimes.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from .time_math import calculate_time_difference, time_to_minutes

# =============================================================================
# Enumerations
# =============================================================================

Direction = Literal["eastward", "westward"]

ActivityType = Literal[
    "sleep",
    "bright_light",
    "avoid_light",
    "supplement",
    "nap",
    "meal",
    "caffeine",
    "exercise",
]

# Ordered: critical > high > medium > low (see PRIORITY_RANK)
Priority = Literal["critical", "high", "medium", "low"]

PRIORITY_RANK: dict[str, int] = {
    "critical": 0,
    "high": 1,
    "medium": 2,
    "low": 3,
}

SupplementType = Literal["melatonin"]

MealType = Literal["breakfast", "lunch", "dinner"]

LightIntensity = Literal["bright", "dim"]

LightAction = Literal["advance", "delay", "avoid"]

LightSensitivity = Literal["low", "normal", "high"]

SleepQuality = Literal["excellent", "good", "fair", "poor"]

Chronotype = Literal[
    "early_morning",
    "moderate_morning",
    "neutral",
    "moderate_evening",
    "late_evening",
]


# =============================================================================
# Timezones
# =============================================================================


@dataclass(frozen=True)
class FixedOffset:
    """A fixed UTC offset, e.g. "+05:30"."""

    minutes: int  # Signed offset from UTC


@dataclass(frozen=True)
class IanaName:
    """An IANA zone name, e.g. "Europe/London" (DST-aware)."""

    name: str


Timezone = FixedOffset | IanaName


# =============================================================================
# Inputs
# =============================================================================


@dataclass
class CircadianPhase:
    """Habitual daily sleep phase."""

    bed_time: str = "23:00"
    wake_time: str = "07:00"


@dataclass
class Airport:
    """Flight endpoint."""

    code: str  # IATA code (e.g., "SFO")
    timezone: str  # IANA name ("America/Los_Angeles") or UTC offset ("-08:00")
    name: str | None = None


@dataclass
class Layover:
    """Connection between two flight segments."""

    airport: str
    arrival_time: datetime | str
    departure_time: datetime | str
    duration: int | None = None  # Minutes; derived from timestamps when absent


@dataclass
class Flight:
    """
    A complete journey from origin to final destination.

    Timestamps may be aware datetimes or ISO 8601 strings; validation
    normalizes them to aware datetimes (naive values are read as UTC).
    """

    origin: Airport | None
    destination: Airport | None
    departure_time: datetime | str | None
    arrival_time: datetime | str | None
    duration: int | None = None  # Minutes; derived from timestamps when absent
    layovers: list[Layover] = field(default_factory=list)
    timezone_offset: float | None = None  # Hours; overrides zone lookup when set
    id: str | None = None

    @property
    def total_layover_minutes(self) -> int:
        """Ground time across all layovers."""
        return sum(layover.duration or 0 for layover in self.layovers)


@dataclass
class SleepProfile:
    """Traveler's habitual sleep."""

    typical_bed_time: str
    typical_wake_time: str
    sleep_quality: SleepQuality = "good"
    sleep_latency: int = 15  # Minutes to fall asleep
    can_nap: bool = False
    consistent_schedule: bool = True


@dataclass
class JetlagHistory:
    """How a previous trip went."""

    days_to_recover: int
    symptoms: list[str] = field(default_factory=list)


@dataclass
class UserProfile:
    """Optional personalization input. Never mutated by the engine."""

    age: int
    chronotype: Chronotype
    sleep_profile: SleepProfile
    previous_jetlag_recovery: JetlagHistory | None = None

    @property
    def phase(self) -> CircadianPhase:
        """Habitual phase from the sleep profile."""
        return CircadianPhase(
            bed_time=self.sleep_profile.typical_bed_time,
            wake_time=self.sleep_profile.typical_wake_time,
        )


@dataclass
class SchedulePreferences:
    """Per-request schedule options."""

    uses_melatonin: bool = True
    uses_caffeine: bool = True
    uses_exercise: bool = False
    include_meals: bool = True
    light_sensitivity: LightSensitivity = "normal"
    caffeine_cutoff_minutes: int = 360  # Stop caffeine this long before bed


# =============================================================================
# Circadian model outputs
# =============================================================================


@dataclass
class TimeWindow:
    """Clock-time window. end < start means the window runs past midnight."""

    start: str
    end: str

    @property
    def wraps_midnight(self) -> bool:
        return time_to_minutes(self.end) < time_to_minutes(self.start)


@dataclass
class SleepTiming:
    """Shifted sleep phase for one adaptation day."""

    bed_time: str
    wake_time: str
    total_days: int  # Days needed to fully adapt


@dataclass
class LightExposureWindow:
    """Light seek/avoid recommendation for one day."""

    bright_light: TimeWindow
    avoid_light: TimeWindow | None
    intensity: LightIntensity
    type: LightAction
    priority: Priority
    natural_light: bool
    description: str


@dataclass
class SeverityFactors:
    """Individual contributions to the severity score."""

    timezone_impact: float
    direction_factor: float
    duration_impact: float
    layover_impact: float
    time_of_day_impact: float


@dataclass
class SeverityAssessment:
    """Expected jet lag burden for a flight (0-10)."""

    score: float
    timezone_difference: float  # Hours, destination minus origin
    direction: Direction
    adaptation_days: int
    factors: SeverityFactors


# =============================================================================
# Schedule output
# =============================================================================


@dataclass
class Activity:
    """
    Single recommended activity.

    Created fresh per schedule; the conflict resolver may adjust the window
    before the schedule is returned.
    """

    id: str
    type: ActivityType
    time_window: TimeWindow
    priority: Priority
    supplement_type: SupplementType | None = None
    notes: str | None = None
    intensity: int | None = None  # Lux, bright_light only
    dose: str | None = None  # Supplements only (e.g., "0.5mg")
    meal_type: MealType | None = None

    @property
    def duration_minutes(self) -> int:
        return calculate_time_difference(self.time_window.start, self.time_window.end)


@dataclass
class AdaptationDay:
    """Activities for one day. day_index < 0 before departure, 0 on arrival."""

    day_index: int
    activities: list[Activity] = field(default_factory=list)


@dataclass
class ScheduleAdjustment:
    """Record of a change the conflict resolver made."""

    activity_id: str
    activity_type: ActivityType
    original_window: str  # "HH:MM-HH:MM"
    action_taken: Literal["removed", "moved", "shortened"]
    reason: str


@dataclass
class ActivitySchedule:
    """The engine's output."""

    arrival_day_activities: list[Activity]
    adaptation_days: list[AdaptationDay]
    pre_flight_days: list[AdaptationDay] = field(default_factory=list)
    in_flight_activities: list[Activity] = field(default_factory=list)
    direction: Direction = "eastward"
    timezone_offset_hours: float = 0.0
    severity: SeverityAssessment | None = None
    expected_recovery_days: int | None = None  # Only with a UserProfile
    adjustments: list[ScheduleAdjustment] = field(default_factory=list)
