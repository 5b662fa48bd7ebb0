"""
Unified database manager that coordinates all repositories
"""

import logging

from ...models import Difficulty, LearnerProgress, VocabularyItem, VocabularySet
from .connection import DatabaseConnection
from .models import Learner, LeaderboardEntry, PublicSetRow, QuizHistory, VocabSetRow
from .repositories.history_repository import HistoryRepository
from .repositories.learner_repository import LearnerRepository
from .repositories.set_repository import SetRepository

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Unified database manager that coordinates all repositories"""

    def __init__(self, db_path: str | None = None):
        self.db_connection = DatabaseConnection(db_path)
        self.learner_repo = LearnerRepository(self.db_connection)
        self.set_repo = SetRepository(self.db_connection)
        self.history_repo = HistoryRepository(self.db_connection)

    def init_database(self) -> None:
        """Initialize database tables and indexes"""
        self.db_connection.init_database()

    # Learner methods
    def create_learner(self, name: str) -> Learner | None:
        """Create a new learner with zero progress"""
        return self.learner_repo.create_learner(name)

    def get_learner(self, learner_id: int) -> Learner | None:
        return self.learner_repo.get_learner(learner_id)

    def get_learner_by_name(self, name: str) -> Learner | None:
        return self.learner_repo.get_learner_by_name(name)

    def get_progress(self, learner_id: int) -> LearnerProgress | None:
        return self.learner_repo.get_progress(learner_id)

    def get_leaderboard(self, limit: int = 10) -> list[LeaderboardEntry]:
        return self.learner_repo.get_leaderboard(limit)

    # Set methods
    def create_set(
        self,
        owner_id: int,
        title: str,
        items: list[VocabularyItem],
        description: str = "",
        difficulty: Difficulty = Difficulty.MEDIUM,
        is_public: bool = False,
    ) -> VocabularySet | None:
        """Create a vocabulary set owned by a learner"""
        return self.set_repo.create_set(owner_id, title, items, description, difficulty, is_public)

    def get_set(self, set_id: int) -> VocabularySet | None:
        return self.set_repo.get_set(set_id)

    def list_sets(self, owner_id: int) -> list[VocabSetRow]:
        return self.set_repo.list_sets(owner_id)

    def publish_set(self, set_id: int, owner_id: int, is_public: bool = True) -> bool:
        return self.set_repo.publish_set(set_id, owner_id, is_public)

    def list_public_sets(
        self, exclude_owner_id: int, search: str | None = None, limit: int = 9
    ) -> list[PublicSetRow]:
        return self.set_repo.list_public_sets(exclude_owner_id, search, limit)

    # History methods
    def get_quiz_history(self, learner_id: int, limit: int = 20) -> list[QuizHistory]:
        return self.history_repo.get_quiz_history(learner_id, limit)

    def get_connection(self):
        """Get database connection for transactional writes"""
        return self.db_connection.get_connection()


# Global instance
_db_manager = None


def get_db_manager(db_path: str | None = None) -> DatabaseManager:
    """Get global database manager instance"""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager(db_path)
    return _db_manager
