"""
Learner repository for progress and leaderboard operations
"""

import logging
import sqlite3
from datetime import datetime

from ....models import LearnerProgress
from ..connection import DatabaseConnection
from ..models import Learner, LeaderboardEntry

logger = logging.getLogger(__name__)


def progress_from_row(row: Learner) -> LearnerProgress:
    """Build the domain progress record from a learner row"""
    return LearnerProgress(
        experience_points=row["experience_points"],
        current_streak=row["current_streak"],
        longest_streak=row["longest_streak"],
        last_studied_date=row["last_studied_date"],
    )


class LearnerRepository:
    """Repository for learner records"""

    def __init__(self, db_connection: DatabaseConnection):
        self.db_connection = db_connection

    def create_learner(self, name: str) -> Learner | None:
        """Create a learner with zeroed progress"""
        try:
            with self.db_connection.get_connection() as conn:
                cursor = conn.execute(
                    "INSERT INTO learners (name) VALUES (?)",
                    (name,),
                )
                conn.commit()
                learner_id = cursor.lastrowid
            return self.get_learner(learner_id)
        except Exception as e:
            logger.error(f"Error creating learner: {e}")
            return None

    def get_learner(self, learner_id: int) -> Learner | None:
        """Get learner by ID"""
        try:
            with self.db_connection.get_connection() as conn:
                cursor = conn.execute(
                    "SELECT * FROM learners WHERE id = ?",
                    (learner_id,),
                )
                row = cursor.fetchone()
                return dict(row) if row else None
        except Exception as e:
            logger.error(f"Error getting learner {learner_id}: {e}")
            return None

    def get_learner_by_name(self, name: str) -> Learner | None:
        """Get learner by unique name"""
        try:
            with self.db_connection.get_connection() as conn:
                cursor = conn.execute("SELECT * FROM learners WHERE name = ?", (name,))
                row = cursor.fetchone()
                return dict(row) if row else None
        except Exception as e:
            logger.error(f"Error getting learner {name}: {e}")
            return None

    def get_progress(self, learner_id: int) -> LearnerProgress | None:
        """Get the learner's progress counters"""
        learner = self.get_learner(learner_id)
        return progress_from_row(learner) if learner else None

    def save_progress(
        self,
        conn: sqlite3.Connection,
        learner_id: int,
        progress: LearnerProgress,
        expected_version: int,
    ) -> bool:
        """
        Write progress inside the caller's transaction

        Returns:
            False if the stored version no longer matches expected_version
        """
        cursor = conn.execute(
            """
            UPDATE learners
            SET experience_points = ?,
                current_streak = ?,
                longest_streak = ?,
                last_studied_date = ?,
                version = version + 1,
                updated_at = ?
            WHERE id = ? AND version = ?
            """,
            (
                progress.experience_points,
                progress.current_streak,
                progress.longest_streak,
                progress.last_studied_date,
                datetime.now(),
                learner_id,
                expected_version,
            ),
        )
        if cursor.rowcount == 0:
            logger.warning(
                f"Version mismatch saving progress for learner {learner_id} "
                f"(expected version {expected_version})"
            )
            return False
        return True

    def get_leaderboard(self, limit: int = 10) -> list[LeaderboardEntry]:
        """Top learners by experience points"""
        try:
            with self.db_connection.get_connection() as conn:
                cursor = conn.execute(
                    """
                    SELECT name, experience_points, created_at
                    FROM learners
                    ORDER BY experience_points DESC, created_at ASC, id ASC
                    LIMIT ?
                    """,
                    (limit,),
                )
                return [dict(row) for row in cursor.fetchall()]
        except Exception as e:
            logger.error(f"Error getting leaderboard: {e}")
            return []
