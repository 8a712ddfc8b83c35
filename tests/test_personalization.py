"""
Tests for chronotype, age and sleep-quality personalization.
"""

import pytest

from jetlag.circadian_model import calculate_light_timing
from jetlag.personalization import (
    calculate_expected_recovery_days,
    calculate_melatonin_lead,
    create_user_profile,
    determine_chronotype,
    generate_nap_windows,
    generate_sleep_notes,
    melatonin_dose,
    personalize_light_timing,
    personalize_sleep_window,
    solar_midpoint,
)
from jetlag.types import JetlagHistory, SleepProfile, TimeWindow

from helpers import make_profile


class TestChronotypeShifts:
    """Light and sleep windows move with chronotype."""

    def test_no_profile_is_identity(self, default_phase):
        light = calculate_light_timing(8, default_phase)
        assert personalize_light_timing(light, None) is light

    @pytest.mark.parametrize(
        "chronotype,expected_start",
        [
            ("early_morning", "08:00"),
            ("moderate_morning", "08:30"),
            ("neutral", "09:00"),
            ("moderate_evening", "09:30"),
            ("late_evening", "10:00"),
        ],
    )
    def test_light_shift(self, default_phase, chronotype, expected_start):
        light = calculate_light_timing(8, default_phase)
        shifted = personalize_light_timing(light, make_profile(chronotype=chronotype))
        assert shifted.bright_light.start == expected_start

    def test_light_shift_moves_avoid_window(self, default_phase):
        light = calculate_light_timing(8, default_phase)
        shifted = personalize_light_timing(light, make_profile(chronotype="late_evening"))
        assert (shifted.avoid_light.start, shifted.avoid_light.end) == ("18:30", "20:30")

    def test_early_sleep_shift(self):
        window = personalize_sleep_window(
            TimeWindow(start="23:00", end="07:00"), make_profile(chronotype="early_morning")
        )
        assert (window.start, window.end) == ("21:00", "05:00")

    def test_late_sleep_shift(self):
        window = personalize_sleep_window(
            TimeWindow(start="23:00", end="07:00"), make_profile(chronotype="late_evening")
        )
        assert (window.start, window.end) == ("01:00", "09:00")

    def test_late_evening_bedtime_floor(self):
        """Late types never go to bed before 22:00."""
        window = personalize_sleep_window(
            TimeWindow(start="19:00", end="03:00"), make_profile(chronotype="late_evening")
        )
        assert (window.start, window.end) == ("22:00", "06:00")


class TestRecoveryDays:
    """Expected recovery estimate."""

    def test_baseline(self):
        assert calculate_expected_recovery_days(8, make_profile()) == 4

    def test_older_poor_sleeper(self):
        assert calculate_expected_recovery_days(8, make_profile(age=65, sleep_quality="poor")) == 6

    def test_younger_excellent_sleeper(self):
        assert calculate_expected_recovery_days(-8, make_profile(age=20, sleep_quality="excellent")) == 2

    def test_history_sets_floor(self):
        profile = make_profile(previous_jetlag_recovery=JetlagHistory(days_to_recover=7))
        assert calculate_expected_recovery_days(8, profile) == 6

    def test_never_below_one(self):
        profile = make_profile(age=20, sleep_quality="excellent")
        assert calculate_expected_recovery_days(1, profile) == 1

    def test_challenging_profile(self, challenging_profile):
        assert calculate_expected_recovery_days(8, challenging_profile) > 5


class TestNaps:
    """Afternoon nap windows."""

    def test_solar_midpoint(self):
        assert solar_midpoint() == "12:00"
        assert solar_midpoint("05:00", "21:00") == "13:00"

    def test_no_naps_without_profile(self):
        assert generate_nap_windows(None) == []

    def test_no_naps_when_cannot_nap(self):
        assert generate_nap_windows(make_profile(can_nap=False)) == []

    def test_good_sleeper_gets_mid_afternoon_nap(self):
        windows = generate_nap_windows(make_profile(can_nap=True))
        assert windows == [TimeWindow(start="14:30", end="15:00")]

    def test_poor_sleeper_gets_three_naps(self):
        windows = generate_nap_windows(make_profile(can_nap=True, sleep_quality="poor"))
        assert [w.start for w in windows] == ["13:00", "14:30", "16:00"]


class TestMelatonin:
    """Melatonin lead time and dose."""

    def test_lead_without_profile(self):
        assert calculate_melatonin_lead(8) == 60

    def test_lead_scales_with_offset(self):
        assert calculate_melatonin_lead(8, make_profile()) == 150
        assert calculate_melatonin_lead(-12, make_profile()) == 210

    def test_lead_clamped(self):
        assert calculate_melatonin_lead(0, make_profile()) == 30
        assert calculate_melatonin_lead(20, make_profile()) == 300

    def test_dose(self):
        assert melatonin_dose(None) == "0.5mg"
        assert melatonin_dose(make_profile(sleep_quality="poor")) == "1mg"


class TestSleepNotes:
    def test_no_notes_for_default_profile(self):
        assert generate_sleep_notes(make_profile()) is None

    def test_slow_and_irregular_sleeper(self):
        profile = make_profile()
        profile.sleep_profile.sleep_latency = 45
        profile.sleep_profile.consistent_schedule = False

        notes = generate_sleep_notes(profile)
        assert "Allow extra time to fall asleep" in notes
        assert "Try to maintain consistent sleep times" in notes


class TestDetermineChronotype:
    """Questionnaire classification."""

    def test_strong_morning(self):
        answers = {"natural_bedtime": "21:00", "natural_waketime": "05:30", "weekend_sleep_diff": "SIMILAR"}
        assert determine_chronotype(answers) == "early_morning"

    def test_moderate_morning(self):
        assert determine_chronotype({"natural_bedtime": "21:30"}) == "moderate_morning"

    def test_strong_evening(self):
        answers = {"natural_bedtime": "01:00", "natural_waketime": "10:00"}
        assert determine_chronotype(answers) == "late_evening"

    def test_moderate_evening(self):
        assert determine_chronotype({"natural_bedtime": "00:30"}) == "moderate_evening"

    def test_neutral(self):
        answers = {"natural_bedtime": "23:00", "natural_waketime": "07:00"}
        assert determine_chronotype(answers) == "neutral"

    def test_empty_answers(self):
        assert determine_chronotype({}) == "neutral"

    def test_margin_of_four_is_strong(self):
        """Early bed and wake without weekend stability already counts as strong."""
        answers = {"natural_bedtime": "21:00", "natural_waketime": "05:30"}
        assert determine_chronotype(answers) == "early_morning"

    @pytest.mark.parametrize("bed_time", ["22:00", "23:30"])
    def test_late_evening_bedtime_scores_neither_way(self, bed_time):
        assert determine_chronotype({"natural_bedtime": bed_time}) == "neutral"


class TestCreateUserProfile:
    """Chronotype inferred from habitual mid-sleep."""

    @pytest.mark.parametrize(
        "bed_time,wake_time,expected",
        [
            ("21:00", "05:00", "early_morning"),
            ("22:00", "06:00", "moderate_morning"),
            ("23:00", "07:00", "neutral"),
            ("00:00", "08:00", "moderate_evening"),
            ("02:00", "10:00", "late_evening"),
        ],
    )
    def test_mid_sleep_classification(self, bed_time, wake_time, expected):
        profile = create_user_profile(35, SleepProfile(typical_bed_time=bed_time, typical_wake_time=wake_time))
        assert profile.chronotype == expected

    def test_mid_sleep_before_midnight(self):
        profile = create_user_profile(35, SleepProfile(typical_bed_time="19:00", typical_wake_time="03:00"))
        assert profile.chronotype == "early_morning"

    def test_age_adjustment(self):
        sleep = SleepProfile(typical_bed_time="23:00", typical_wake_time="07:00")
        assert create_user_profile(20, sleep).chronotype == "moderate_evening"
        assert create_user_profile(70, sleep).chronotype == "moderate_morning"

    def test_history_kept(self):
        history = JetlagHistory(days_to_recover=3)
        sleep = SleepProfile(typical_bed_time="23:00", typical_wake_time="07:00")
        assert create_user_profile(35, sleep, history).previous_jetlag_recovery is history
