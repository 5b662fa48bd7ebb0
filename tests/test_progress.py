"""
Tests for experience points and streak bookkeeping
"""

from datetime import date, datetime, timedelta

import pytest

from vocab_quiz.models import AttemptOutcome, LearnerProgress
from vocab_quiz.progress import ProgressAccumulator, apply_outcomes

TODAY = date(2026, 3, 10)

CORRECT = AttemptOutcome(item_id="1", is_correct=True)
WRONG = AttemptOutcome(item_id="2", is_correct=False)


class TestProgressAccumulator:
    """Test XP accrual and streak transitions"""

    @pytest.fixture
    def accumulator(self):
        return ProgressAccumulator()

    def test_first_submission_starts_streak(self, accumulator):
        result = accumulator.apply_outcomes(LearnerProgress(), [CORRECT], 10, TODAY)

        assert result.experience_points == 10
        assert result.current_streak == 1
        assert result.longest_streak == 1
        assert result.last_studied_date == TODAY

    def test_xp_counts_only_correct_answers(self, accumulator):
        progress = LearnerProgress(experience_points=50)
        result = accumulator.apply_outcomes(progress, [CORRECT, WRONG, CORRECT], 10, TODAY)
        assert result.experience_points == 70

    def test_consecutive_day_increments_streak(self, accumulator):
        progress = LearnerProgress(
            current_streak=3, longest_streak=5, last_studied_date=TODAY - timedelta(days=1)
        )
        result = accumulator.apply_outcomes(progress, [CORRECT], 10, TODAY)

        assert result.current_streak == 4
        assert result.longest_streak == 5

    def test_gap_resets_streak(self, accumulator):
        progress = LearnerProgress(
            current_streak=6, longest_streak=6, last_studied_date=TODAY - timedelta(days=2)
        )
        result = accumulator.apply_outcomes(progress, [CORRECT], 10, TODAY)

        assert result.current_streak == 1
        assert result.longest_streak == 6

    def test_same_day_keeps_streak(self, accumulator):
        progress = LearnerProgress(current_streak=2, longest_streak=2, last_studied_date=TODAY)
        result = accumulator.apply_outcomes(progress, [CORRECT], 10, TODAY)
        assert result.current_streak == 2

    def test_clock_skew_keeps_streak(self, accumulator):
        """A last-studied date in the future leaves the streak unchanged"""
        progress = LearnerProgress(
            current_streak=2, longest_streak=2, last_studied_date=TODAY + timedelta(days=1)
        )
        result = accumulator.apply_outcomes(progress, [CORRECT], 10, TODAY)

        assert result.current_streak == 2
        assert result.last_studied_date == TODAY

    def test_zero_correct_still_counts_as_studied(self, accumulator):
        progress = LearnerProgress(
            experience_points=20, current_streak=1, longest_streak=1,
            last_studied_date=TODAY - timedelta(days=1),
        )
        result = accumulator.apply_outcomes(progress, [WRONG, WRONG], 10, TODAY)

        assert result.experience_points == 20
        assert result.current_streak == 2
        assert result.longest_streak == 2

    def test_empty_submission(self, accumulator):
        result = accumulator.apply_outcomes(LearnerProgress(), [], 10, TODAY)
        assert result.experience_points == 0
        assert result.current_streak == 1

    def test_longest_streak_tracks_new_record(self, accumulator):
        progress = LearnerProgress(
            current_streak=4, longest_streak=4, last_studied_date=TODAY - timedelta(days=1)
        )
        result = accumulator.apply_outcomes(progress, [], 10, TODAY)
        assert result.longest_streak == 5

    def test_streak_computed_once_per_submission(self, accumulator):
        """Many questions in one submission add at most one day"""
        progress = LearnerProgress(
            current_streak=1, longest_streak=1, last_studied_date=TODAY - timedelta(days=1)
        )
        result = accumulator.apply_outcomes(progress, [CORRECT] * 10, 10, TODAY)
        assert result.current_streak == 2

    def test_datetime_inputs_compare_by_calendar_day(self, accumulator):
        """23:59 yesterday to 00:01 today is one day"""
        progress = LearnerProgress(
            current_streak=1, longest_streak=1, last_studied_date=datetime(2026, 3, 9, 23, 59)
        )
        result = accumulator.apply_outcomes(progress, [CORRECT], 10, datetime(2026, 3, 10, 0, 1))

        assert result.current_streak == 2
        assert result.last_studied_date == TODAY

    def test_invariants_over_a_month(self, accumulator):
        """longest >= current after every update, and longest never decreases"""
        progress = LearnerProgress()
        day = TODAY
        previous_longest = 0
        for gap in [1, 1, 3, 1, 0, 1, 1, 1, 5, 1, 2, 1]:
            day = day + timedelta(days=gap)
            progress = accumulator.apply_outcomes(progress, [CORRECT], 5, day)
            assert progress.longest_streak >= progress.current_streak
            assert progress.longest_streak >= previous_longest
            previous_longest = progress.longest_streak


def test_apply_outcomes_convenience():
    result = apply_outcomes(LearnerProgress(), [CORRECT, CORRECT], 15, TODAY)
    assert result.experience_points == 30
