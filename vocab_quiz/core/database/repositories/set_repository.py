"""
Vocabulary set repository
"""

import logging
import sqlite3
from collections.abc import Sequence
from datetime import date, datetime

from ....models import Difficulty, VocabularyItem, VocabularySet
from ..connection import DatabaseConnection
from ..models import PublicSetRow, VocabItemRow, VocabSetRow

logger = logging.getLogger(__name__)


def item_from_row(row: VocabItemRow) -> VocabularyItem:
    return VocabularyItem(
        item_id=row["item_id"],
        script=row["script"],
        romanization=row["romanization"],
        meaning=row["meaning"],
        next_review_date=row["next_review_date"],
        example=row["example"],
        srs_level=row["srs_level"],
        interval_days=row["interval_days"],
        needs_review=bool(row["needs_review"]),
    )


def _insert_items(
    conn: sqlite3.Connection, set_id: int, items: Sequence[VocabularyItem]
) -> None:
    conn.executemany(
        """
        INSERT INTO vocab_items (
            set_id, item_id, position, script, romanization, meaning, example,
            srs_level, interval_days, next_review_date, needs_review
        )
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [
            (
                set_id,
                item.item_id,
                position,
                item.script,
                item.romanization,
                item.meaning,
                item.example,
                item.srs_level,
                item.interval_days,
                item.next_review_date,
                item.needs_review,
            )
            for position, item in enumerate(items)
        ],
    )


class SetRepository:
    """Repository for vocabulary sets and their items"""

    def __init__(self, db_connection: DatabaseConnection):
        self.db_connection = db_connection

    def create_set(
        self,
        owner_id: int,
        title: str,
        items: Sequence[VocabularyItem],
        description: str = "",
        difficulty: Difficulty = Difficulty.MEDIUM,
        is_public: bool = False,
    ) -> VocabularySet | None:
        """Create a set with its items"""
        try:
            with self.db_connection.get_connection() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO vocab_sets
                        (owner_id, title, description, difficulty, is_public, published_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        owner_id,
                        title,
                        description,
                        Difficulty(difficulty).value,
                        is_public,
                        datetime.now() if is_public else None,
                    ),
                )
                set_id = cursor.lastrowid
                _insert_items(conn, set_id, items)
                conn.commit()

            logger.info(f"Created set {set_id} '{title}' with {len(items)} items")
            return self.get_set(set_id)
        except Exception as e:
            logger.error(f"Error creating set: {e}")
            return None

    def get_set(self, set_id: int) -> VocabularySet | None:
        """Load a set with its items in their stored order"""
        try:
            with self.db_connection.get_connection() as conn:
                row = conn.execute(
                    "SELECT * FROM vocab_sets WHERE id = ?", (set_id,)
                ).fetchone()
                if not row:
                    return None

                item_rows = conn.execute(
                    "SELECT * FROM vocab_items WHERE set_id = ? ORDER BY position, id",
                    (set_id,),
                ).fetchall()

                return VocabularySet(
                    set_id=row["id"],
                    owner_id=row["owner_id"],
                    title=row["title"],
                    description=row["description"],
                    difficulty=Difficulty(row["difficulty"]),
                    is_public=bool(row["is_public"]),
                    clone_count=row["clone_count"],
                    original_set_id=row["original_set_id"],
                    version=row["version"],
                    items=tuple(item_from_row(dict(item)) for item in item_rows),
                )
        except Exception as e:
            logger.error(f"Error getting set {set_id}: {e}")
            return None

    def list_sets(self, owner_id: int) -> list[VocabSetRow]:
        """List a learner's sets, newest first (items not included)"""
        try:
            with self.db_connection.get_connection() as conn:
                cursor = conn.execute(
                    """
                    SELECT * FROM vocab_sets
                    WHERE owner_id = ?
                    ORDER BY created_at DESC, id DESC
                    """,
                    (owner_id,),
                )
                return [dict(row) for row in cursor.fetchall()]
        except Exception as e:
            logger.error(f"Error listing sets for learner {owner_id}: {e}")
            return []

    def publish_set(self, set_id: int, owner_id: int, is_public: bool = True) -> bool:
        """
        Share a set with other learners, or withdraw it

        The publication date is kept from the first time the set went public.
        """
        now = datetime.now()
        try:
            with self.db_connection.get_connection() as conn:
                cursor = conn.execute(
                    """
                    UPDATE vocab_sets
                    SET is_public = ?,
                        published_at = COALESCE(published_at, CASE WHEN ? THEN ? END),
                        updated_at = ?
                    WHERE id = ? AND owner_id = ?
                    """,
                    (is_public, is_public, now, now, set_id, owner_id),
                )
                conn.commit()
                return cursor.rowcount > 0
        except Exception as e:
            logger.error(f"Error publishing set {set_id}: {e}")
            return False

    def list_public_sets(
        self,
        exclude_owner_id: int,
        search: str | None = None,
        limit: int = 9,
    ) -> list[PublicSetRow]:
        """Published sets of other learners, most cloned first"""
        query = """
            SELECT vs.*, l.name AS creator_name
            FROM vocab_sets vs
            JOIN learners l ON l.id = vs.owner_id
            WHERE vs.is_public = 1 AND vs.owner_id != ?
        """
        params: list = [exclude_owner_id]
        if search:
            pattern = f"%{search}%"
            query += " AND (vs.title LIKE ? OR vs.description LIKE ? OR l.name LIKE ?)"
            params.extend([pattern, pattern, pattern])
        query += " ORDER BY vs.clone_count DESC, vs.published_at DESC, vs.id DESC LIMIT ?"
        params.append(limit)

        try:
            with self.db_connection.get_connection() as conn:
                return [dict(row) for row in conn.execute(query, params).fetchall()]
        except Exception as e:
            logger.error(f"Error listing public sets: {e}")
            return []

    def has_clone(self, owner_id: int, original_set_id: int) -> bool:
        """Whether the learner already holds a copy of the set"""
        with self.db_connection.get_connection() as conn:
            row = conn.execute(
                "SELECT 1 FROM vocab_sets WHERE owner_id = ? AND original_set_id = ?",
                (owner_id, original_set_id),
            ).fetchone()
            return row is not None

    def clone_set(
        self, source: VocabularySet, owner_id: int, today: date
    ) -> VocabularySet | None:
        """
        Copy a set into another learner's collection

        Items keep their content but start over with default SRS state, the
        copy is private, and the source's clone count goes up by one.
        """
        items = [
            VocabularyItem.new(
                item.item_id,
                item.script,
                item.romanization,
                item.meaning,
                item.example,
                today=today,
            )
            for item in source.items
        ]

        try:
            with self.db_connection.get_connection() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO vocab_sets
                        (owner_id, title, description, difficulty, original_set_id)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        owner_id,
                        source.title,
                        source.description,
                        Difficulty(source.difficulty).value,
                        source.set_id,
                    ),
                )
                clone_id = cursor.lastrowid
                _insert_items(conn, clone_id, items)
                conn.execute(
                    "UPDATE vocab_sets SET clone_count = clone_count + 1 WHERE id = ?",
                    (source.set_id,),
                )
                conn.commit()

            logger.info(f"Learner {owner_id} cloned set {source.set_id} as set {clone_id}")
            return self.get_set(clone_id)
        except Exception as e:
            logger.error(f"Error cloning set {source.set_id} for learner {owner_id}: {e}")
            return None

    def set_needs_review(self, set_id: int, item_id: str, needs_review: bool) -> bool:
        """Flag or unflag one item for extra practice"""
        try:
            with self.db_connection.get_connection() as conn:
                cursor = conn.execute(
                    "UPDATE vocab_items SET needs_review = ? WHERE set_id = ? AND item_id = ?",
                    (needs_review, set_id, item_id),
                )
                conn.commit()
                return cursor.rowcount > 0
        except Exception as e:
            logger.error(f"Error flagging item {item_id} in set {set_id}: {e}")
            return False

    def save_graded_set(
        self,
        conn: sqlite3.Connection,
        vocab_set: VocabularySet,
        expected_version: int,
    ) -> bool:
        """
        Write SRS fields of every item inside the caller's transaction

        Returns:
            False if the set's stored version no longer matches expected_version
        """
        cursor = conn.execute(
            """
            UPDATE vocab_sets
            SET version = version + 1, updated_at = ?
            WHERE id = ? AND version = ?
            """,
            (datetime.now(), vocab_set.set_id, expected_version),
        )
        if cursor.rowcount == 0:
            logger.warning(
                f"Version mismatch saving set {vocab_set.set_id} "
                f"(expected version {expected_version})"
            )
            return False

        conn.executemany(
            """
            UPDATE vocab_items
            SET srs_level = ?, interval_days = ?, next_review_date = ?
            WHERE set_id = ? AND item_id = ?
            """,
            [
                (
                    item.srs_level,
                    item.interval_days,
                    item.next_review_date,
                    vocab_set.set_id,
                    item.item_id,
                )
                for item in vocab_set.items
            ],
        )
        return True
