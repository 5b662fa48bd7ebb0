"""
Unit tests for the level-based spaced repetition system
"""

from datetime import date, datetime, timedelta

import pytest

from vocab_quiz.config import DEFAULT_SRS_INTERVALS
from vocab_quiz.models import AttemptOutcome, VocabularyItem, VocabularySet
from vocab_quiz.spaced_repetition import (
    SpacedRepetitionSystem,
    advance_item,
    get_srs_system,
)

TODAY = date(2026, 3, 10)


def make_item(item_id="1", level=0, interval=0, next_review=TODAY):
    return VocabularyItem(
        item_id=item_id,
        script="猫",
        romanization="māo",
        meaning="cat",
        srs_level=level,
        interval_days=interval,
        next_review_date=next_review,
    )


class TestSpacedRepetitionSystem:
    """Test SRS level and interval transitions"""

    @pytest.fixture
    def srs(self):
        return SpacedRepetitionSystem(DEFAULT_SRS_INTERVALS)

    def test_default_interval_table(self, srs):
        assert srs.intervals == (0, 1, 3, 7, 14, 30, 90, 180)
        assert srs.max_level == 7

    def test_correct_from_new(self, srs):
        """A first correct answer schedules review tomorrow"""
        result = srs.advance(make_item(level=0), True, TODAY)

        assert result.srs_level == 1
        assert result.interval_days == 1
        assert result.next_review_date == TODAY + timedelta(days=1)

    def test_incorrect_floors_at_zero(self, srs):
        result = srs.advance(make_item(level=1, interval=1), False, TODAY)

        assert result.srs_level == 0
        assert result.interval_days == 0
        assert result.next_review_date == TODAY

    def test_incorrect_drops_two_levels(self, srs):
        result = srs.advance(make_item(level=5, interval=30), False, TODAY)

        assert result.srs_level == 3
        assert result.interval_days == 7
        assert result.next_review_date == TODAY + timedelta(days=7)

    def test_interval_clamped_at_table_end(self, srs):
        """Levels past the table reuse the last interval"""
        result = srs.advance(make_item(level=7, interval=180), True, TODAY)
        assert result.srs_level == 8
        assert result.interval_days == 180

        result = srs.advance(result, True, TODAY)
        assert result.srs_level == 9
        assert result.interval_days == 180

    def test_interval_matches_level_after_every_step(self, srs):
        """interval_days always comes from the table for the current level"""
        item = make_item()
        for is_correct in [True, True, False, True, True, True, False, False, True]:
            item = srs.advance(item, is_correct, TODAY)
            assert item.interval_days == srs.interval_for_level(item.srs_level)
            assert item.next_review_date == TODAY + timedelta(days=item.interval_days)

    def test_consecutive_correct_never_decreases_level(self, srs):
        for start in range(0, 10):
            first = srs.advance(make_item(level=start), True, TODAY)
            second = srs.advance(first, True, TODAY)
            assert start <= first.srs_level <= second.srs_level

    def test_datetime_is_normalized_to_midnight(self, srs):
        result = srs.advance(make_item(), True, datetime(2026, 3, 10, 23, 59))
        assert result.next_review_date == date(2026, 3, 11)

    def test_input_item_is_not_modified(self, srs):
        item = make_item()
        srs.advance(item, True, TODAY)
        assert item.srs_level == 0

    def test_static_content_is_preserved(self, srs):
        result = srs.advance(make_item(), True, TODAY)
        assert (result.script, result.romanization, result.meaning) == ("猫", "māo", "cat")

    def test_custom_interval_table(self):
        srs = SpacedRepetitionSystem([0, 2, 5])
        item = srs.advance(make_item(), True, TODAY)
        assert item.interval_days == 2
        item = srs.advance(item, True, TODAY)
        assert item.interval_days == 5
        item = srs.advance(item, True, TODAY)
        assert item.interval_days == 5

    @pytest.mark.parametrize("intervals", [[], [0, -1, 3], [0, 7, 3]])
    def test_invalid_interval_table_rejected(self, intervals):
        """Injected tables follow the same rules as the SRS_INTERVALS setting"""
        with pytest.raises(ValueError):
            SpacedRepetitionSystem(intervals)


class TestAdvanceSet:
    """Test folding outcomes into a vocabulary set"""

    @pytest.fixture
    def srs(self):
        return SpacedRepetitionSystem(DEFAULT_SRS_INTERVALS)

    @pytest.fixture
    def vocab_set(self):
        return VocabularySet(
            set_id=1,
            owner_id=1,
            title="HSK 1",
            items=(make_item("a"), make_item("b")),
        )

    def test_outcomes_update_matching_items(self, srs, vocab_set):
        outcomes = [
            AttemptOutcome(item_id="a", is_correct=True),
            AttemptOutcome(item_id="b", is_correct=False),
        ]
        result = srs.advance_set(vocab_set, outcomes, TODAY)

        assert result.find_item("a").srs_level == 1
        assert result.find_item("b").srs_level == 0
        assert [item.item_id for item in result.items] == ["a", "b"]

    def test_repeated_item_composes_sequentially(self, srs, vocab_set):
        """Two outcomes for one item advance it twice"""
        outcomes = [
            AttemptOutcome(item_id="a", is_correct=True),
            AttemptOutcome(item_id="a", is_correct=True),
        ]
        result = srs.advance_set(vocab_set, outcomes, TODAY)

        assert result.find_item("a").srs_level == 2
        assert result.find_item("a").interval_days == 3

    def test_unknown_item_is_skipped(self, srs, vocab_set):
        result = srs.advance_set(
            vocab_set, [AttemptOutcome(item_id="missing", is_correct=True)], TODAY
        )
        assert result.items == vocab_set.items

    def test_set_metadata_is_kept(self, srs, vocab_set):
        result = srs.advance_set(vocab_set, [], TODAY)
        assert result.set_id == 1
        assert result.title == "HSK 1"


class TestDueItems:
    """Test selection of items due for review"""

    def test_due_items_ordered_by_date_then_level(self):
        srs = SpacedRepetitionSystem(DEFAULT_SRS_INTERVALS)
        vocab_set = VocabularySet(
            set_id=1,
            owner_id=1,
            title="Set",
            items=(
                make_item("future", level=3, next_review=TODAY + timedelta(days=2)),
                make_item("today", level=1, next_review=TODAY),
                make_item("overdue", level=4, next_review=TODAY - timedelta(days=5)),
                make_item("today-new", level=0, next_review=TODAY),
            ),
        )

        due = srs.due_items(vocab_set, TODAY)
        assert [item.item_id for item in due] == ["overdue", "today-new", "today"]

        assert [item.item_id for item in srs.due_items(vocab_set, TODAY, limit=1)] == ["overdue"]


def test_advance_item_convenience():
    result = advance_item(make_item(), True, TODAY)
    assert result.srs_level == 1
    assert result.interval_days == 1


def test_global_srs_system_uses_settings_table():
    assert get_srs_system() is get_srs_system()
    assert get_srs_system().intervals == tuple(DEFAULT_SRS_INTERVALS)
