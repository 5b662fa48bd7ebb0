"""
Spaced repetition system using a fixed level-to-interval ladder
"""

import logging
from collections.abc import Sequence
from dataclasses import replace
from datetime import date, datetime, timedelta

from .config import DEFAULT_SRS_INTERVALS, get_settings, validate_srs_intervals
from .models import AttemptOutcome, VocabularyItem, VocabularySet
from .utils import to_date

logger = logging.getLogger(__name__)

# Levels lost on a wrong answer; a correct answer only gains one
INCORRECT_PENALTY = 2


class SpacedRepetitionSystem:
    """Level-based SRS: each level maps to a review interval in days"""

    def __init__(self, intervals: Sequence[int] | None = None):
        if intervals is None:
            intervals = get_settings().srs_intervals
        self.intervals = tuple(validate_srs_intervals(list(intervals)))

    @property
    def max_level(self) -> int:
        """Highest level with its own interval entry"""
        return len(self.intervals) - 1

    def interval_for_level(self, level: int) -> int:
        """Interval in days for a level, clamped to the last table entry"""
        return self.intervals[min(max(level, 0), self.max_level)]

    def next_level(self, level: int, is_correct: bool) -> int:
        if is_correct:
            return level + 1
        return max(0, level - INCORRECT_PENALTY)

    def advance(
        self, item: VocabularyItem, is_correct: bool, today: date | datetime
    ) -> VocabularyItem:
        """
        Advance an item's schedule after a graded answer

        Args:
            item: Current item state
            is_correct: Whether the learner answered correctly
            today: Review date supplied by the caller

        Returns:
            New item with updated level, interval and next review date
        """
        new_level = self.next_level(item.srs_level, is_correct)
        new_interval = self.interval_for_level(new_level)
        next_review_date = to_date(today) + timedelta(days=new_interval)

        logger.debug(
            f"Advanced item {item.item_id}: level {item.srs_level} -> {new_level}, "
            f"interval={new_interval}, next={next_review_date}"
        )

        return replace(
            item,
            srs_level=new_level,
            interval_days=new_interval,
            next_review_date=next_review_date,
        )

    def advance_set(
        self,
        vocab_set: VocabularySet,
        outcomes: Sequence[AttemptOutcome],
        today: date | datetime,
    ) -> VocabularySet:
        """
        Fold outcomes into a set in submission order

        Repeated references to the same item compose, each one advancing the
        latest state. Outcomes for items not in the set are skipped.
        """
        items = list(vocab_set.items)
        positions = {item.item_id: index for index, item in enumerate(items)}

        for outcome in outcomes:
            index = positions.get(outcome.item_id)
            if index is None:
                logger.debug(
                    f"Skipping unknown item {outcome.item_id} in set {vocab_set.set_id}"
                )
                continue
            items[index] = self.advance(items[index], outcome.is_correct, today)

        return replace(vocab_set, items=tuple(items))

    def due_items(
        self,
        vocab_set: VocabularySet,
        today: date | datetime,
        limit: int | None = None,
    ) -> list[VocabularyItem]:
        """Items whose next review date is on or before today, most overdue first"""
        review_date = to_date(today)
        due = [item for item in vocab_set.items if to_date(item.next_review_date) <= review_date]
        due.sort(key=lambda item: (to_date(item.next_review_date), item.srs_level))
        if limit is not None:
            due = due[:limit]
        return due


# Global instance
_srs_system = None


def get_srs_system() -> SpacedRepetitionSystem:
    """Get global SRS system instance"""
    global _srs_system
    if _srs_system is None:
        _srs_system = SpacedRepetitionSystem()
    return _srs_system


def advance_item(
    item: VocabularyItem,
    is_correct: bool,
    today: date | datetime,
    intervals: Sequence[int] = DEFAULT_SRS_INTERVALS,
) -> VocabularyItem:
    """Convenience function to advance a single item"""
    return SpacedRepetitionSystem(intervals).advance(item, is_correct, today)
