"""
Grading of a completed quiz submission
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime

from .evaluator import AnswerEvaluator, get_answer_evaluator
from .models import AttemptOutcome, LearnerProgress, QuestionResult, VocabularySet
from .progress import ProgressAccumulator, get_progress_accumulator
from .spaced_repetition import SpacedRepetitionSystem, get_srs_system

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GradingResult:
    """Next state of the set and learner plus per-question verdicts"""

    graded_set: VocabularySet
    graded_progress: LearnerProgress
    outcomes: tuple[AttemptOutcome, ...]
    items_changed: bool = False

    @property
    def score(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.is_correct)

    @property
    def total(self) -> int:
        return len(self.outcomes)


class SubmissionGrader:
    """Stateless façade wiring evaluation, SRS and progress together"""

    def __init__(
        self,
        evaluator: AnswerEvaluator | None = None,
        srs_system: SpacedRepetitionSystem | None = None,
        accumulator: ProgressAccumulator | None = None,
    ):
        self.evaluator = evaluator or get_answer_evaluator()
        self.srs_system = srs_system or get_srs_system()
        self.accumulator = accumulator or get_progress_accumulator()

    def grade_submission(
        self,
        vocab_set: VocabularySet,
        progress: LearnerProgress,
        questions: Sequence[QuestionResult],
        xp_per_correct: int,
        today: date | datetime,
    ) -> GradingResult:
        """
        Grade a submission and compute the next set and progress state

        Nothing is persisted here; the caller saves graded_set and
        graded_progress together.
        """
        outcomes = tuple(self.evaluator.evaluate_all(list(questions)))
        graded_set = self.srs_system.advance_set(vocab_set, outcomes, today)
        graded_progress = self.accumulator.apply_outcomes(
            progress, outcomes, xp_per_correct, today
        )

        result = GradingResult(
            graded_set=graded_set,
            graded_progress=graded_progress,
            outcomes=outcomes,
            items_changed=graded_set.items != vocab_set.items,
        )

        logger.info(
            f"Graded submission for set {vocab_set.set_id}: "
            f"{result.score}/{result.total} correct"
        )
        return result


def grade_submission(
    vocab_set: VocabularySet,
    progress: LearnerProgress,
    questions: Sequence[QuestionResult],
    xp_per_correct: int,
    today: date | datetime,
) -> GradingResult:
    """Convenience function using the global grading components"""
    return SubmissionGrader().grade_submission(
        vocab_set, progress, questions, xp_per_correct, today
    )
