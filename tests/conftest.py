"""
Pytest fixtures for adaptation schedule tests.
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from jetlag.scheduler import ScheduleGenerator
from jetlag.types import Airport, CircadianPhase, Flight, JetlagHistory

from helpers import make_flight, make_profile


@pytest.fixture
def generator():
    """ScheduleGenerator instance."""
    return ScheduleGenerator()


@pytest.fixture
def default_phase():
    """Habitual 23:00-07:00 sleep."""
    return CircadianPhase(bed_time="23:00", wake_time="07:00")


@pytest.fixture
def eastward_flight():
    """Fixed-offset +8h flight (UTC-8 -> UTC), 10h in the air."""
    return make_flight(
        "-08:00",
        "+00:00",
        "2026-03-10T16:00:00-08:00",
        "2026-03-11T10:00:00+00:00",
        id="east-8",
    )


@pytest.fixture
def westward_flight():
    """Fixed-offset -8h flight (UTC -> UTC-8), 11h in the air."""
    return make_flight(
        "+00:00",
        "-08:00",
        "2026-03-10T11:00:00+00:00",
        "2026-03-10T14:00:00-08:00",
        id="west-8",
    )


@pytest.fixture
def date_line_flight():
    """Fixed-offset +12h flight (UTC -> UTC+12), 12h in the air."""
    return make_flight(
        "+00:00",
        "+12:00",
        "2026-03-10T10:00:00+00:00",
        "2026-03-11T10:00:00+12:00",
        id="date-line",
    )


@pytest.fixture
def sfo_to_lhr_flight():
    """SFO -> LHR with IANA zones (offset depends on the reference date)."""
    return Flight(
        origin=Airport(code="SFO", timezone="America/Los_Angeles"),
        destination=Airport(code="LHR", timezone="Europe/London"),
        departure_time="2026-01-20T16:30:00-08:00",
        arrival_time="2026-01-21T10:45:00+00:00",
        id="BA286",
    )


@pytest.fixture
def challenging_profile():
    """Older poor sleeper with a slow previous recovery."""
    return make_profile(
        age=65,
        chronotype="late_evening",
        sleep_quality="poor",
        can_nap=True,
        previous_jetlag_recovery=JetlagHistory(days_to_recover=7, symptoms=["fatigue"]),
    )
