"""
Jetlag Circadian Adaptation Scheduling

Computes personalized, multi-day adaptation schedules for travelers
crossing time zones: sleep, light exposure and avoidance, melatonin,
meals, caffeine, naps and exercise, fitted so that no day's activities
overlap or run past 21:30.

Main entry point: generate_activity_schedule
"""

from .errors import ValidationError
from .personalization import create_user_profile, determine_chronotype
from .scheduler import ScheduleGenerator, generate_activity_schedule
from .severity import assess_severity
from .types import (
    Activity,
    ActivitySchedule,
    AdaptationDay,
    Airport,
    CircadianPhase,
    Flight,
    JetlagHistory,
    Layover,
    ScheduleAdjustment,
    SchedulePreferences,
    SeverityAssessment,
    SleepProfile,
    TimeWindow,
    UserProfile,
)

__all__ = [
    # Types
    "Airport",
    "Layover",
    "Flight",
    "CircadianPhase",
    "SleepProfile",
    "JetlagHistory",
    "UserProfile",
    "SchedulePreferences",
    "TimeWindow",
    "Activity",
    "AdaptationDay",
    "ScheduleAdjustment",
    "SeverityAssessment",
    "ActivitySchedule",
    # Errors
    "ValidationError",
    # Scheduler
    "ScheduleGenerator",
    "generate_activity_schedule",
    # Assessment
    "assess_severity",
    "determine_chronotype",
    "create_user_profile",
]
