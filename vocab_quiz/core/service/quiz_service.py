"""
Quiz submission service: load, grade, persist
"""

import logging
from collections.abc import Callable, Sequence
from datetime import date

from ...config import Settings, get_settings
from ...exceptions import (
    ConcurrentModificationError,
    LearnerNotFoundError,
    SetCloneError,
    SetNotFoundError,
    SubmissionInProgressError,
)
from ...grading import GradingResult, SubmissionGrader
from ...models import QuestionResult, VocabularyItem, VocabularySet
from ...spaced_repetition import SpacedRepetitionSystem
from ...utils import today_in_timezone
from ..cache.set_cache import SetListingCache
from ..database.database_manager import DatabaseManager
from ..database.models import LeaderboardEntry, PublicSetRow, QuizHistory, VocabSetRow
from ..database.repositories.learner_repository import progress_from_row
from ..locks.submission_lock_manager import SubmissionLockManager

logger = logging.getLogger(__name__)

InvalidationCallback = Callable[[int], object]


class QuizService:
    """Grades quiz submissions and persists the results atomically"""

    def __init__(
        self,
        db_manager: DatabaseManager,
        settings: Settings | None = None,
        lock_manager: SubmissionLockManager | None = None,
        set_cache: SetListingCache | None = None,
    ):
        self.db_manager = db_manager
        self.settings = settings or get_settings()
        self.srs_system = SpacedRepetitionSystem(self.settings.srs_intervals)
        self.grader = SubmissionGrader(srs_system=self.srs_system)
        self.lock_manager = lock_manager or SubmissionLockManager(
            self.settings.submission_lock_timeout_minutes
        )
        self.set_cache = set_cache or SetListingCache(self.settings.set_cache_ttl_seconds)
        self._invalidation_callbacks: list[InvalidationCallback] = [self.set_cache.invalidate]

    def add_invalidation_callback(self, callback: InvalidationCallback) -> None:
        """Register a callback run with the learner id after items change"""
        self._invalidation_callbacks.append(callback)

    def today(self) -> date:
        return today_in_timezone(self.settings.timezone)

    def submit_quiz(
        self,
        learner_id: int,
        set_id: int,
        questions: Sequence[QuestionResult],
        today: date | None = None,
    ) -> GradingResult:
        """
        Grade a completed quiz and save set, progress and history together

        Raises:
            SubmissionInProgressError: learner already has a submission in flight
            LearnerNotFoundError: no learner record
            SetNotFoundError: set missing or owned by someone else
            ConcurrentModificationError: set or learner changed since loading
        """
        review_date = today or self.today()

        with self.lock_manager.hold(learner_id, "submit_quiz") as acquired:
            if not acquired:
                raise SubmissionInProgressError(learner_id)

            learner = self.db_manager.get_learner(learner_id)
            if learner is None:
                raise LearnerNotFoundError(learner_id)

            vocab_set = self.db_manager.get_set(set_id)
            if vocab_set is None or vocab_set.owner_id != learner_id:
                raise SetNotFoundError(set_id, learner_id)

            result = self.grader.grade_submission(
                vocab_set,
                progress_from_row(learner),
                questions,
                self.settings.xp_per_correct,
                review_date,
            )

            self._persist(learner_id, learner["version"], vocab_set.version, result)

        if result.items_changed:
            self._run_invalidation_callbacks(learner_id)

        logger.info(
            f"Learner {learner_id} scored {result.score}/{result.total} on set {set_id}; "
            f"streak={result.graded_progress.current_streak}, "
            f"xp={result.graded_progress.experience_points}"
        )
        return result

    def _persist(
        self,
        learner_id: int,
        learner_version: int,
        set_version: int,
        result: GradingResult,
    ) -> None:
        """Write everything in one transaction or nothing at all"""
        graded_set = result.graded_set

        with self.db_manager.get_connection() as conn:
            if not self.db_manager.set_repo.save_graded_set(conn, graded_set, set_version):
                raise ConcurrentModificationError("VocabularySet", graded_set.set_id)

            if not self.db_manager.learner_repo.save_progress(
                conn, learner_id, result.graded_progress, learner_version
            ):
                raise ConcurrentModificationError("Learner", learner_id)

            self.db_manager.history_repo.add_quiz_result(
                conn, learner_id, graded_set.set_id, result.score, result.total
            )
            conn.commit()

    def _run_invalidation_callbacks(self, learner_id: int) -> None:
        for callback in self._invalidation_callbacks:
            try:
                callback(learner_id)
            except Exception as e:
                # Results are already committed; a failed invalidation only leaves stale cache
                logger.error(f"Invalidation callback failed for learner {learner_id}: {e}")

    def list_sets(self, learner_id: int) -> list[VocabSetRow]:
        """Learner's set listing, served from cache when fresh"""
        cached = self.set_cache.get(learner_id)
        if cached is not None:
            return cached

        sets = self.db_manager.list_sets(learner_id)
        self.set_cache.set(learner_id, sets)
        return sets

    def get_due_items(
        self,
        learner_id: int,
        set_id: int,
        today: date | None = None,
        limit: int | None = None,
    ) -> list[VocabularyItem]:
        """Items of a learner's set that are due for review"""
        vocab_set = self.db_manager.get_set(set_id)
        if vocab_set is None or vocab_set.owner_id != learner_id:
            raise SetNotFoundError(set_id, learner_id)
        return self.srs_system.due_items(vocab_set, today or self.today(), limit)

    def get_quiz_history(self, learner_id: int) -> list[QuizHistory]:
        return self.db_manager.get_quiz_history(learner_id, self.settings.history_limit)

    def get_leaderboard(self) -> list[LeaderboardEntry]:
        return self.db_manager.get_leaderboard(self.settings.leaderboard_limit)

    def publish_set(self, learner_id: int, set_id: int, is_public: bool = True) -> None:
        """Share one of the learner's sets with the community, or withdraw it"""
        if not self.db_manager.publish_set(set_id, learner_id, is_public):
            raise SetNotFoundError(set_id, learner_id)
        self._run_invalidation_callbacks(learner_id)

    def list_public_sets(self, learner_id: int, search: str | None = None) -> list[PublicSetRow]:
        """Community sets the learner could clone"""
        return self.db_manager.list_public_sets(
            learner_id, search, self.settings.public_sets_limit
        )

    def clone_set(self, learner_id: int, set_id: int, today: date | None = None) -> VocabularySet:
        """
        Copy a public set into the learner's collection with fresh SRS state

        Raises:
            LearnerNotFoundError: no learner record
            SetNotFoundError: set missing or not public
            SetCloneError: learner owns the set or already cloned it
        """
        if self.db_manager.get_learner(learner_id) is None:
            raise LearnerNotFoundError(learner_id)

        source = self.db_manager.get_set(set_id)
        if source is None or not source.is_public:
            raise SetNotFoundError(set_id, learner_id)
        if source.owner_id == learner_id:
            raise SetCloneError(set_id, learner_id, "cannot clone your own set")
        if self.db_manager.set_repo.has_clone(learner_id, set_id):
            raise SetCloneError(set_id, learner_id, "set already cloned")

        clone = self.db_manager.set_repo.clone_set(source, learner_id, today or self.today())
        if clone is None:
            raise SetCloneError(set_id, learner_id, "copy could not be saved")

        self._run_invalidation_callbacks(learner_id)
        return clone

    def flag_item_for_review(
        self, learner_id: int, set_id: int, item_id: str, needs_review: bool = True
    ) -> bool:
        """Mark an item for extra practice; False if the set has no such item"""
        vocab_set = self.db_manager.get_set(set_id)
        if vocab_set is None or vocab_set.owner_id != learner_id:
            raise SetNotFoundError(set_id, learner_id)
        return self.db_manager.set_repo.set_needs_review(set_id, item_id, needs_review)
