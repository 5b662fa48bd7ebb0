"""
Domain records for quiz grading and spaced repetition

These are plain data structures. The grading core never mutates them in place,
it returns updated copies built with dataclasses.replace().
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum


class QuestionType(str, Enum):
    """Supported quiz question types"""

    PINYIN = "pinyin"  # Phonetic answer, typed with tone digits
    MEANING = "meaning"
    HANZI = "hanzi"
    MULTIPLE_CHOICE = "multiple_choice"


class Difficulty(str, Enum):
    """Author-assigned difficulty of a set"""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


@dataclass(frozen=True)
class VocabularyItem:
    """
    A single vocabulary entry within a set.

    Attributes:
        item_id: Stable id, unique within its set.
        script: Written form (e.g. hanzi).
        romanization: Canonical toned romanization.
        meaning: Translation shown to the learner.
        next_review_date: Date on or after which the item is due.
        example: Optional example sentence.
        srs_level: Retention tier, 0 means never correctly reviewed.
        interval_days: Days until next review, derived from srs_level.
        needs_review: Learner flagged the item for extra practice.
    """

    item_id: str
    script: str
    romanization: str
    meaning: str
    next_review_date: date
    example: str = ""
    srs_level: int = 0
    interval_days: int = 0
    needs_review: bool = False

    @classmethod
    def new(
        cls,
        item_id: str,
        script: str,
        romanization: str,
        meaning: str,
        example: str = "",
        *,
        today: date,
    ) -> "VocabularyItem":
        """Create an item with default SRS state, due on the given day"""
        return cls(
            item_id=item_id,
            script=script,
            romanization=romanization,
            meaning=meaning,
            next_review_date=today,
            example=example,
        )


@dataclass(frozen=True)
class VocabularySet:
    """A learner-owned collection of vocabulary items"""

    set_id: int
    owner_id: int
    title: str
    items: tuple[VocabularyItem, ...] = ()
    description: str = ""
    difficulty: Difficulty = Difficulty.MEDIUM
    is_public: bool = False
    clone_count: int = 0
    original_set_id: int | None = None  # Set this one was cloned from
    version: int = 0  # Only used by the persistence layer

    def find_item(self, item_id: str) -> VocabularyItem | None:
        for item in self.items:
            if item.item_id == item_id:
                return item
        return None


@dataclass(frozen=True)
class LearnerProgress:
    """Gamification counters stored on a learner record"""

    experience_points: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    last_studied_date: date | None = None


@dataclass(frozen=True)
class QuestionResult:
    """One answered question submitted by the caller"""

    item_id: str
    question_type: QuestionType
    user_answer: str | None
    expected_answer: str


@dataclass(frozen=True)
class AttemptOutcome:
    """Verdict for a single question"""

    item_id: str
    is_correct: bool
