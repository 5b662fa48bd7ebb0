"""
Quiz history repository
"""

import logging
import sqlite3
from datetime import datetime

from ..connection import DatabaseConnection
from ..models import QuizHistory

logger = logging.getLogger(__name__)


class HistoryRepository:
    """Repository for completed quiz records"""

    def __init__(self, db_connection: DatabaseConnection):
        self.db_connection = db_connection

    def add_quiz_result(
        self,
        conn: sqlite3.Connection,
        learner_id: int,
        set_id: int,
        score: int,
        total: int,
        created_at: datetime | None = None,
    ) -> int:
        """Record a graded quiz inside the caller's transaction, returning its id"""
        cursor = conn.execute(
            """
            INSERT INTO quiz_history (learner_id, set_id, score, total, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (learner_id, set_id, score, total, created_at or datetime.now()),
        )
        return cursor.lastrowid

    def get_quiz_history(self, learner_id: int, limit: int = 20) -> list[QuizHistory]:
        """Most recent quiz results for a learner, with set titles"""
        try:
            with self.db_connection.get_connection() as conn:
                cursor = conn.execute(
                    """
                    SELECT qh.id, qh.learner_id, qh.set_id, vs.title AS set_title,
                           qh.score, qh.total, qh.created_at
                    FROM quiz_history qh
                    JOIN vocab_sets vs ON vs.id = qh.set_id
                    WHERE qh.learner_id = ?
                    ORDER BY qh.created_at DESC, qh.id DESC
                    LIMIT ?
                    """,
                    (learner_id, limit),
                )
                return [dict(row) for row in cursor.fetchall()]
        except Exception as e:
            logger.error(f"Error getting quiz history: {e}")
            return []
