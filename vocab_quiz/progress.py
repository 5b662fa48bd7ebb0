"""
Experience points and study streak bookkeeping
"""

import logging
from collections.abc import Sequence
from dataclasses import replace
from datetime import date, datetime

from .models import AttemptOutcome, LearnerProgress
from .utils import days_between, to_date

logger = logging.getLogger(__name__)


class ProgressAccumulator:
    """Applies a graded submission to a learner's XP and streak counters"""

    def apply_outcomes(
        self,
        progress: LearnerProgress,
        outcomes: Sequence[AttemptOutcome],
        xp_per_correct: int,
        today: date | datetime,
    ) -> LearnerProgress:
        """
        Update progress once for a whole submission

        Args:
            progress: Current learner progress
            outcomes: Verdicts for every question in the submission
            xp_per_correct: Experience awarded per correct answer
            today: Submission date supplied by the caller

        Returns:
            New progress; the streak counts the day as studied even when
            nothing was answered correctly
        """
        study_date = to_date(today)
        correct_count = sum(1 for outcome in outcomes if outcome.is_correct)
        experience_points = progress.experience_points + xp_per_correct * correct_count

        current_streak = self._next_streak(progress, study_date)
        longest_streak = max(progress.longest_streak, current_streak)

        logger.debug(
            f"Progress update: +{xp_per_correct * correct_count} xp, "
            f"streak {progress.current_streak} -> {current_streak}"
        )

        return replace(
            progress,
            experience_points=experience_points,
            current_streak=current_streak,
            longest_streak=longest_streak,
            last_studied_date=study_date,
        )

    def _next_streak(self, progress: LearnerProgress, study_date: date) -> int:
        if progress.last_studied_date is None:
            return 1

        diff_days = days_between(progress.last_studied_date, study_date)
        if diff_days == 1:
            return progress.current_streak + 1
        if diff_days > 1:
            return 1
        # Same day or clock skew
        return progress.current_streak


# Global instance
_accumulator = None


def get_progress_accumulator() -> ProgressAccumulator:
    """Get global progress accumulator instance"""
    global _accumulator
    if _accumulator is None:
        _accumulator = ProgressAccumulator()
    return _accumulator


def apply_outcomes(
    progress: LearnerProgress,
    outcomes: Sequence[AttemptOutcome],
    xp_per_correct: int,
    today: date | datetime,
) -> LearnerProgress:
    """Convenience function to apply outcomes to progress"""
    return get_progress_accumulator().apply_outcomes(
        progress, outcomes, xp_per_correct, today
    )
