"""
End-to-end tests for grading a quiz submission
"""

from datetime import date, timedelta

import pytest

from vocab_quiz.config import DEFAULT_SRS_INTERVALS
from vocab_quiz.grading import SubmissionGrader, grade_submission
from vocab_quiz.models import (
    LearnerProgress,
    QuestionResult,
    QuestionType,
    VocabularyItem,
    VocabularySet,
)
from vocab_quiz.spaced_repetition import SpacedRepetitionSystem

TODAY = date(2026, 3, 10)


@pytest.fixture
def fresh_set():
    return VocabularySet(
        set_id=7,
        owner_id=1,
        title="Animals",
        items=(
            VocabularyItem.new("cat", "猫", "māo", "cat", today=TODAY),
            VocabularyItem.new("dog", "狗", "gǒu", "dog", today=TODAY),
        ),
    )


@pytest.fixture
def grader():
    return SubmissionGrader(srs_system=SpacedRepetitionSystem(DEFAULT_SRS_INTERVALS))


class TestSubmissionGrader:
    """Test the combined evaluate / SRS / progress flow"""

    def test_one_correct_one_incorrect(self, grader, fresh_set):
        questions = [
            QuestionResult("cat", QuestionType.PINYIN, "mao1", "māo"),
            QuestionResult("dog", QuestionType.MEANING, "Dog", "dog"),
        ]
        result = grader.grade_submission(fresh_set, LearnerProgress(), questions, 10, TODAY)

        assert result.graded_progress.experience_points == 10
        assert result.graded_progress.current_streak == 1

        cat = result.graded_set.find_item("cat")
        assert cat.srs_level == 1
        assert cat.interval_days == 1
        assert cat.next_review_date == TODAY + timedelta(days=1)

        dog = result.graded_set.find_item("dog")
        assert dog.srs_level == 0
        assert dog.interval_days == 0
        assert dog.next_review_date == TODAY

        assert [o.is_correct for o in result.outcomes] == [True, False]
        assert result.score == 1
        assert result.total == 2
        assert result.items_changed is True

    def test_inputs_are_not_modified(self, grader, fresh_set):
        progress = LearnerProgress()
        questions = [QuestionResult("cat", QuestionType.PINYIN, "mao1", "māo")]
        grader.grade_submission(fresh_set, progress, questions, 10, TODAY)

        assert fresh_set.find_item("cat").srs_level == 0
        assert progress.experience_points == 0

    def test_unknown_item_still_graded(self, grader, fresh_set):
        """Outcome and XP count, but no item changes"""
        questions = [QuestionResult("ghost", QuestionType.MEANING, "bird", "bird")]
        result = grader.grade_submission(fresh_set, LearnerProgress(), questions, 10, TODAY)

        assert result.outcomes[0].is_correct is True
        assert result.graded_progress.experience_points == 10
        assert result.graded_set.items == fresh_set.items
        assert result.items_changed is False

    def test_same_item_twice(self, grader, fresh_set):
        questions = [
            QuestionResult("cat", QuestionType.PINYIN, "mao1", "māo"),
            QuestionResult("cat", QuestionType.HANZI, "猫", "猫"),
        ]
        result = grader.grade_submission(fresh_set, LearnerProgress(), questions, 10, TODAY)

        assert result.graded_set.find_item("cat").srs_level == 2
        assert result.graded_progress.experience_points == 20

    def test_empty_submission_updates_streak_only(self, grader, fresh_set):
        result = grader.grade_submission(fresh_set, LearnerProgress(), [], 10, TODAY)

        assert result.outcomes == ()
        assert result.graded_progress.current_streak == 1
        assert result.graded_progress.experience_points == 0


def test_grade_submission_convenience(fresh_set):
    questions = [QuestionResult("dog", QuestionType.PINYIN, "gou3", "gǒu")]
    result = grade_submission(fresh_set, LearnerProgress(), questions, 5, TODAY)

    assert result.graded_progress.experience_points == 5
    assert result.graded_set.find_item("dog").srs_level == 1
