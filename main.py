#!/usr/bin/env python3
"""
Vocabulary Quiz Service
Grade a quiz submission file and persist the results
"""

import json
import logging
import sys
from datetime import date
from pathlib import Path

from vocab_quiz.config import get_settings
from vocab_quiz.core.database.database_manager import get_db_manager
from vocab_quiz.core.service.quiz_service import QuizService
from vocab_quiz.exceptions import QuizServiceError
from vocab_quiz.models import QuestionResult, QuestionType
from vocab_quiz.utils import format_progress_stats


def load_submission(path: str) -> tuple[int, int, list[QuestionResult], date | None]:
    """Read a submission JSON file"""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    questions = [
        QuestionResult(
            item_id=str(question["item_id"]),
            question_type=QuestionType(question["question_type"]),
            user_answer=question.get("user_answer"),
            expected_answer=question["expected_answer"],
        )
        for question in data.get("questions", [])
    ]
    today = date.fromisoformat(data["today"]) if data.get("today") else None
    return int(data["learner_id"]), int(data["set_id"]), questions, today


def main() -> int:
    """Main application entry point"""
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger = logging.getLogger(__name__)

    if len(sys.argv) != 2:
        print("Usage: python main.py <submission.json>")
        return 1

    submission_path = sys.argv[1]
    if not Path(submission_path).exists():
        logger.error(f"Submission file not found: {submission_path}")
        return 1

    db_manager = get_db_manager()
    db_manager.init_database()
    service = QuizService(db_manager, settings)

    learner_id, set_id, questions, today = load_submission(submission_path)
    logger.info(f"Grading {len(questions)} questions for learner {learner_id}, set {set_id}")

    try:
        result = service.submit_quiz(learner_id, set_id, questions, today)
    except QuizServiceError as e:
        logger.error(f"Submission rejected: {e}")
        return 1

    progress = result.graded_progress
    output = {
        "score": result.score,
        "total": result.total,
        "outcomes": [
            {"item_id": outcome.item_id, "is_correct": outcome.is_correct}
            for outcome in result.outcomes
        ],
        "progress": {
            "experience_points": progress.experience_points,
            "current_streak": progress.current_streak,
            "longest_streak": progress.longest_streak,
            "last_studied_date": (
                progress.last_studied_date.isoformat() if progress.last_studied_date else None
            ),
        },
    }
    print(json.dumps(output, ensure_ascii=False, indent=2))
    logger.info(format_progress_stats(output["progress"]))
    return 0


if __name__ == "__main__":
    sys.exit(main())
