"""
Day planner for adaptation schedules.

Plans each day's activities by:
1. Querying the circadian model for that day's sleep and light timing
2. Applying chronotype personalization
3. Building activities from the traveler's preferences

Overlaps and the daily ceiling are handled afterward by ConflictResolver.

Days:
- Pre-flight (day_index < 0): origin clock, sleep pre-shifted toward the
  destination
- Arrival (day_index 0): unshifted phase
- Adaptation (1..N): sleep shifted cumulatively; light stays anchored to
  the habitual phase
"""

import logging
import math
from dataclasses import dataclass

from ..activities import ActivityBuilder
from ..circadian_model import (
    calculate_light_timing,
    calculate_sleep_timing,
    determine_direction,
    shift_phase,
)
from ..config import PRE_FLIGHT_MAX_DAYS, PRE_FLIGHT_SHIFT_PER_DAY
from ..personalization import (
    calculate_melatonin_lead,
    generate_nap_windows,
    generate_sleep_notes,
    melatonin_dose,
    personalize_light_timing,
    personalize_sleep_window,
)
from ..types import (
    Activity,
    AdaptationDay,
    CircadianPhase,
    Direction,
    LightExposureWindow,
    SchedulePreferences,
    TimeWindow,
    UserProfile,
)

logger = logging.getLogger(__name__)


@dataclass
class PlannerContext:
    """Per-request inputs shared by every day."""

    offset_hours: float
    direction: Direction
    phase: CircadianPhase
    profile: UserProfile | None
    preferences: SchedulePreferences


class DayPlanner:
    """
    Plan the activities for each day of a trip.

    Separates "when does the body clock want this?" from "what fits?"
    Fitting is done by ConflictResolver afterward.
    """

    def __init__(
        self,
        offset_hours: float,
        phase: CircadianPhase,
        profile: UserProfile | None = None,
        preferences: SchedulePreferences | None = None,
    ) -> None:
        """
        Initialize planner.

        Args:
            offset_hours: Destination minus origin, in hours
            phase: Habitual sleep phase
            profile: Optional personalization
            preferences: Schedule options (defaults when omitted)
        """
        self.context = PlannerContext(
            offset_hours=offset_hours,
            direction=determine_direction(offset_hours),
            phase=phase,
            profile=profile,
            preferences=preferences or SchedulePreferences(),
        )

    def pre_flight_day_count(self) -> int:
        """Up to 3 days of pre-shifting, one per 2h crossed."""
        return min(math.ceil(abs(self.context.offset_hours) / 2), PRE_FLIGHT_MAX_DAYS)

    def plan_pre_flight_day(self, day_index: int) -> AdaptationDay:
        """
        Plan a day before departure.

        Sleep moves 30 min/day toward the destination (earlier eastward,
        later westward), most on the day before the flight.

        Args:
            day_index: -N (first pre-flight day) through -1

        Returns:
            AdaptationDay in origin clock time
        """
        ctx = self.context
        steps = self.pre_flight_day_count() + day_index + 1
        shift = PRE_FLIGHT_SHIFT_PER_DAY * steps
        if ctx.direction == "eastward":
            shift = -shift

        shifted = shift_phase(ctx.phase, shift)
        sleep_window = personalize_sleep_window(
            TimeWindow(start=shifted.bed_time, end=shifted.wake_time), ctx.profile
        )
        light = personalize_light_timing(
            calculate_light_timing(ctx.offset_hours, shifted, day_index), ctx.profile
        )

        logger.debug("Pre-flight day %d: phase shifted %+d min", day_index, shift)
        return AdaptationDay(
            day_index=day_index,
            activities=self._build(f"pre{abs(day_index)}", sleep_window, light),
        )

    def plan_day(self, day_index: int) -> AdaptationDay:
        """
        Plan the arrival day (0) or an adaptation day (1..N).

        Args:
            day_index: Days since arrival

        Returns:
            AdaptationDay in destination clock time
        """
        ctx = self.context
        timing = calculate_sleep_timing(ctx.offset_hours, ctx.phase, day_index)
        sleep_window = personalize_sleep_window(
            TimeWindow(start=timing.bed_time, end=timing.wake_time), ctx.profile
        )
        light = personalize_light_timing(
            calculate_light_timing(ctx.offset_hours, ctx.phase, day_index), ctx.profile
        )

        logger.debug(
            "Day %d: sleep %s-%s, light %s-%s",
            day_index,
            sleep_window.start,
            sleep_window.end,
            light.bright_light.start,
            light.bright_light.end,
        )
        return AdaptationDay(
            day_index=day_index,
            activities=self._build(f"day{day_index}", sleep_window, light),
        )

    def _build(
        self, id_prefix: str, sleep_window: TimeWindow, light: LightExposureWindow
    ) -> list[Activity]:
        ctx = self.context
        prefs = ctx.preferences
        profile = ctx.profile
        builder = ActivityBuilder(id_prefix)

        activities = [builder.sleep(sleep_window, generate_sleep_notes(profile))]
        activities.extend(builder.light(light, prefs.light_sensitivity))

        if prefs.uses_melatonin:
            activities.append(
                builder.melatonin(
                    sleep_window.start,
                    calculate_melatonin_lead(ctx.offset_hours, profile),
                    melatonin_dose(profile),
                )
            )

        if prefs.include_meals:
            activities.extend(builder.meals(sleep_window.end, ctx.direction))

        if prefs.uses_caffeine:
            activities.append(builder.caffeine_cutoff(sleep_window.start, prefs.caffeine_cutoff_minutes))

        if profile is not None:
            activities.extend(
                builder.naps(generate_nap_windows(profile), profile.sleep_profile.sleep_quality)
            )

        if prefs.uses_exercise:
            activities.append(builder.exercise(sleep_window.end))

        return activities
