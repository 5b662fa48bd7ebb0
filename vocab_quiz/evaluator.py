"""
Answer evaluation for quiz questions
"""

import logging

from .models import AttemptOutcome, QuestionResult, QuestionType
from .pinyin import PinyinNormalizer, get_pinyin_normalizer

logger = logging.getLogger(__name__)


class AnswerEvaluator:
    """Judges a single answered question"""

    def __init__(self, normalizer: PinyinNormalizer | None = None):
        self.normalizer = normalizer or get_pinyin_normalizer()

    def evaluate(self, result: QuestionResult) -> AttemptOutcome:
        """
        Decide whether the submitted answer is correct

        Pinyin answers are normalized from tone digits and compared
        case-insensitively against the (already toned) expected answer.
        Every other question type requires an exact match.
        """
        user_answer = result.user_answer or ""
        expected = result.expected_answer or ""

        if result.question_type == QuestionType.PINYIN:
            is_correct = self.normalizer.normalize(user_answer).lower() == expected.lower()
        else:
            is_correct = user_answer == expected

        logger.debug(
            f"Evaluated item {result.item_id} ({result.question_type}): correct={is_correct}"
        )
        return AttemptOutcome(item_id=result.item_id, is_correct=is_correct)

    def evaluate_all(self, results: list[QuestionResult]) -> list[AttemptOutcome]:
        """Evaluate every question in submission order"""
        return [self.evaluate(result) for result in results]


# Global evaluator instance
_evaluator = None


def get_answer_evaluator() -> AnswerEvaluator:
    """Get global answer evaluator instance"""
    global _evaluator
    if _evaluator is None:
        _evaluator = AnswerEvaluator()
    return _evaluator


def evaluate_answer(result: QuestionResult) -> AttemptOutcome:
    """Convenience function to evaluate one question"""
    return get_answer_evaluator().evaluate(result)
