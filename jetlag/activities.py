"""
Activity construction.

Turns circadian-model outputs (sleep timing, light windows, melatonin lead
times) into typed Activity records with priorities and notes.

Priorities:
- critical: bright light (the primary zeitgeber)
- high: sleep, light avoidance, melatonin
- medium: meals, caffeine cutoff, exercise, naps for poor sleepers
- low: optional naps
"""

from collections import Counter
from dataclasses import replace
from datetime import datetime, timedelta

from .config import (
    CAFFEINE_MARKER_DURATION,
    EXERCISE_AFTER_WAKE,
    EXERCISE_DURATION,
    LIGHT_SENSITIVITY_MULTIPLIERS,
    MAX_LIGHT_INTENSITY,
    MELATONIN_WINDOW,
    MIN_LIGHT_ACTIVITY_DURATION,
    MIN_SLEEP_DURATION,
    get_direction_config,
)
from .time_math import add_minutes, format_time_12h, subtract_minutes
from .timezones import to_local
from .types import (
    Activity,
    ActivityType,
    Direction,
    Flight,
    LightExposureWindow,
    LightSensitivity,
    MealType,
    Priority,
    SchedulePreferences,
    SleepQuality,
    TimeWindow,
)

BREAKFAST_DURATION = 30
MEAL_DURATION = 45
LUNCH_TIME = "13:00"

# In-flight timing (minutes)
FLIGHT_MEALS_MIN_DURATION = 4 * 60  # No meal/caffeine plan for shorter flights
FLIGHT_MID_MEAL_MIN_DURATION = 8 * 60
EASTWARD_FLIGHT_SLEEP_BEFORE_MIDPOINT = 210  # Sleep centered on the midpoint
WESTWARD_FLIGHT_SLEEP_AFTER_DEPARTURE = 120  # Sleep early in the flight
FLIGHT_LIGHT_WINDOW = 240
FLIGHT_MELATONIN_FROM_MIDPOINT = 120


def _sleep_notes(window: TimeWindow) -> str:
    return f"Sleep from {format_time_12h(window.start)} to {format_time_12h(window.end)}"


def _avoid_light_notes(window: TimeWindow) -> str:
    return (
        f"Wear sunglasses or stay indoors until {format_time_12h(window.end)}. "
        "Light now would shift your clock the wrong direction."
    )


def _caffeine_notes(window: TimeWindow) -> str:
    return (
        f"No caffeine after {format_time_12h(window.end)}. "
        "Caffeine has a 3-5 hour half-life and can disrupt sleep quality."
    )


# Notes that quote the activity's own clock times
TIMED_NOTES = {
    "sleep": _sleep_notes,
    "avoid_light": _avoid_light_notes,
    "caffeine": _caffeine_notes,
}


def retime(activity: Activity, window: TimeWindow) -> Activity:
    """
    Copy an activity into a new window.

    Generated notes that quote the old clock times are rewritten; custom
    notes are kept as they are.
    """
    notes = activity.notes
    describe = TIMED_NOTES.get(activity.type)
    if describe is not None and notes == describe(activity.time_window):
        notes = describe(window)
    return replace(activity, time_window=window, notes=notes)


class ActivityBuilder:
    """
    Build activities for a single day.

    Ids are deterministic ("day2-bright_light", "day2-meal-1") so identical
    inputs produce identical schedules.
    """

    def __init__(self, id_prefix: str) -> None:
        self.id_prefix = id_prefix
        self._counts: Counter[str] = Counter()

    def _next_id(self, activity_type: ActivityType) -> str:
        count = self._counts[activity_type]
        self._counts[activity_type] += 1
        if count == 0:
            return f"{self.id_prefix}-{activity_type}"
        return f"{self.id_prefix}-{activity_type}-{count}"

    def make(
        self,
        activity_type: ActivityType,
        start: str,
        end: str,
        priority: Priority,
        **extra,
    ) -> Activity:
        return Activity(
            id=self._next_id(activity_type),
            type=activity_type,
            time_window=TimeWindow(start=start, end=end),
            priority=priority,
            **extra,
        )

    def sleep(self, window: TimeWindow, notes: str | None = None) -> Activity:
        return self.make(
            "sleep",
            window.start,
            window.end,
            "high",
            notes=notes or _sleep_notes(window),
        )

    def light(
        self, light: LightExposureWindow, sensitivity: LightSensitivity = "normal"
    ) -> list[Activity]:
        """
        Bright-light and light-avoidance activities.

        Less light-sensitive travelers need brighter exposure (10,000 lux
        scaled by 1.2 / 1.0 / 0.8 for low / normal / high sensitivity).
        """
        intensity = int(MAX_LIGHT_INTENSITY * LIGHT_SENSITIVITY_MULTIPLIERS[sensitivity])
        activities = [
            self.make(
                "bright_light",
                light.bright_light.start,
                light.bright_light.end,
                light.priority,
                intensity=intensity,
                notes=f"{light.description}. Get outdoor light or use a {intensity:,} lux lightbox.",
            )
        ]

        if light.avoid_light is not None:
            avoid = light.avoid_light
            activities.append(
                self.make(
                    "avoid_light",
                    avoid.start,
                    avoid.end,
                    "high",
                    notes=_avoid_light_notes(avoid),
                )
            )

        return activities

    def melatonin(self, bed_time: str, lead_minutes: int, dose: str = "0.5mg") -> Activity:
        """Melatonin taken lead_minutes before bed."""
        start = subtract_minutes(bed_time, lead_minutes)
        return self.make(
            "supplement",
            start,
            add_minutes(start, MELATONIN_WINDOW),
            "high",
            supplement_type="melatonin",
            dose=dose,
            notes=f"Take {dose} fast-release melatonin",
        )

    def caffeine_cutoff(self, bed_time: str, cutoff_minutes: int) -> Activity:
        """Last-caffeine marker ending cutoff_minutes before bed."""
        cutoff = subtract_minutes(bed_time, cutoff_minutes)
        window = TimeWindow(start=subtract_minutes(cutoff, CAFFEINE_MARKER_DURATION), end=cutoff)
        return self.make(
            "caffeine",
            window.start,
            window.end,
            "medium",
            notes=_caffeine_notes(window),
        )

    def meals(self, wake_time: str, direction: Direction) -> list[Activity]:
        """Breakfast at wake, lunch at 13:00, dinner earlier eastward than westward."""
        dinner = get_direction_config(direction).dinner_time
        plan: list[tuple[MealType, str, int]] = [
            ("breakfast", wake_time, BREAKFAST_DURATION),
            ("lunch", LUNCH_TIME, MEAL_DURATION),
            ("dinner", dinner, MEAL_DURATION),
        ]
        return [
            self.make(
                "meal",
                start,
                add_minutes(start, duration),
                "medium",
                meal_type=meal_type,
                notes=meal_type.capitalize(),
            )
            for meal_type, start, duration in plan
        ]

    def naps(self, windows: list[TimeWindow], sleep_quality: SleepQuality) -> list[Activity]:
        priority: Priority = "medium" if sleep_quality == "poor" else "low"
        return [
            self.make(
                "nap",
                window.start,
                window.end,
                priority,
                notes="Short nap. Set an alarm to avoid deep sleep.",
            )
            for window in windows
        ]

    def exercise(self, wake_time: str) -> Activity:
        start = add_minutes(wake_time, EXERCISE_AFTER_WAKE)
        return self.make(
            "exercise",
            start,
            add_minutes(start, EXERCISE_DURATION),
            "medium",
            notes="Moderate exercise, outdoors if possible",
        )


def _clock(instant: datetime, tz: str) -> str:
    local = to_local(instant, tz)
    return f"{local.hour:02d}:{local.minute:02d}"


def build_in_flight_activities(
    flight: Flight,
    direction: Direction,
    preferences: SchedulePreferences,
    dose: str = "0.5mg",
) -> list[Activity]:
    """
    Activities while airborne, in destination clock time.

    Eastward flights sleep around the midpoint and seek light before landing;
    westward flights sleep early and avoid light after takeoff. Meals that
    fall inside the in-flight sleep are dropped.

    Args:
        flight: Validated flight (aware datetimes, duration filled in)
        direction: Travel direction
        preferences: Melatonin/caffeine/meal options
        dose: Melatonin dose

    Returns:
        Activities ordered by start instant
    """
    departure = flight.departure_time
    arrival = flight.arrival_time
    midpoint = departure + (arrival - departure) / 2
    dest_tz = flight.destination.timezone
    airborne = (flight.duration or 0) - flight.total_layover_minutes

    planned: list[tuple[datetime, datetime, ActivityType, Priority, dict]] = []

    sleep: tuple[datetime, datetime] | None = None
    if airborne >= MIN_SLEEP_DURATION:
        if direction == "eastward":
            sleep_start = midpoint - timedelta(minutes=EASTWARD_FLIGHT_SLEEP_BEFORE_MIDPOINT)
        else:
            sleep_start = departure + timedelta(minutes=WESTWARD_FLIGHT_SLEEP_AFTER_DEPARTURE)
        sleep_end = min(sleep_start + timedelta(minutes=MIN_SLEEP_DURATION), arrival)
        sleep = (sleep_start, sleep_end)
        planned.append((sleep_start, sleep_end, "sleep", "high", {"notes": "In-flight sleep"}))

    if direction == "eastward":
        light_start = max(arrival - timedelta(minutes=FLIGHT_LIGHT_WINDOW), departure)
        if sleep is not None:
            light_start = max(light_start, sleep[1])
        if arrival - light_start >= timedelta(minutes=MIN_LIGHT_ACTIVITY_DURATION):
            planned.append((
                light_start, arrival, "bright_light", "high",
                {"notes": "Cabin lights or screen brightness up before landing",
                 "intensity": MAX_LIGHT_INTENSITY},
            ))
    else:
        light_end = min(departure + timedelta(minutes=FLIGHT_LIGHT_WINDOW), arrival)
        if sleep is not None:
            light_end = min(light_end, sleep[0])
        if light_end - departure >= timedelta(minutes=MIN_LIGHT_ACTIVITY_DURATION):
            planned.append((
                departure, light_end, "avoid_light", "high",
                {"notes": "Eye mask or window shade down after takeoff"},
            ))

    if preferences.uses_melatonin:
        if sleep is not None:
            melatonin_start = sleep[0] - timedelta(minutes=MELATONIN_WINDOW)
        elif direction == "eastward":
            melatonin_start = midpoint - timedelta(minutes=FLIGHT_MELATONIN_FROM_MIDPOINT)
        else:
            melatonin_start = midpoint + timedelta(minutes=FLIGHT_MELATONIN_FROM_MIDPOINT)
        planned.append((
            melatonin_start, melatonin_start + timedelta(minutes=MELATONIN_WINDOW),
            "supplement", "high",
            {"supplement_type": "melatonin", "dose": dose, "notes": "In-flight melatonin"},
        ))

    long_flight = (flight.duration or 0) > FLIGHT_MEALS_MIN_DURATION

    if preferences.uses_caffeine and long_flight and sleep is not None:
        cutoff = sleep[0] - timedelta(minutes=preferences.caffeine_cutoff_minutes)
        if cutoff > departure:
            planned.append((
                cutoff - timedelta(minutes=CAFFEINE_MARKER_DURATION), cutoff, "caffeine", "medium",
                {"notes": "No caffeine after this point in the flight"},
            ))

    if preferences.include_meals and long_flight:
        meal_starts: list[tuple[MealType, datetime]] = [("breakfast", departure + timedelta(hours=1))]
        if (flight.duration or 0) > FLIGHT_MID_MEAL_MIN_DURATION:
            meal_starts.append(("lunch", midpoint))
        meal_starts.append(("dinner", arrival - timedelta(hours=2)))

        for meal_type, start in meal_starts:
            end = start + timedelta(minutes=MEAL_DURATION)
            if sleep is not None and start < sleep[1] and end > sleep[0]:
                continue
            planned.append((start, end, "meal", "medium", {"meal_type": meal_type, "notes": "In-flight meal"}))

    # Only what fits between takeoff and landing
    planned = [item for item in planned if departure <= item[0] and item[1] <= arrival]
    planned.sort(key=lambda item: item[0])

    builder = ActivityBuilder("flight")
    return [
        builder.make(activity_type, _clock(start, dest_tz), _clock(end, dest_tz), priority, **extra)
        for start, end, activity_type, priority, extra in planned
    ]
