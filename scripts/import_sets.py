#!/usr/bin/env python3
"""
Import learners, vocabulary sets and quiz history from JSON into the quiz database

Reads the layout written by scripts/export_sets.py. Learners are matched by
name: a new learner gets the exported progress counters, an existing one keeps
its own and only receives the sets. History rows follow their learner and set.
Clone links between sets are not carried over.
"""

import json
import os
import sys
from dataclasses import replace
from datetime import date, datetime

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from vocab_quiz.config import get_settings  # noqa: E402
from vocab_quiz.core.database.database_manager import DatabaseManager  # noqa: E402
from vocab_quiz.models import Difficulty, LearnerProgress, VocabularyItem  # noqa: E402
from vocab_quiz.spaced_repetition import SpacedRepetitionSystem  # noqa: E402


def _parse_date(value: str | None) -> date | None:
    return date.fromisoformat(value[:10]) if value else None


def build_item(
    raw: dict, today: date, srs_system: SpacedRepetitionSystem | None = None
) -> VocabularyItem:
    """Create an item, keeping the exported SRS level and review date when present"""
    item = VocabularyItem.new(
        item_id=str(raw["item_id"]),
        script=raw["script"],
        romanization=raw["romanization"],
        meaning=raw["meaning"],
        example=raw.get("example") or "",
        today=today,
    )
    item = replace(item, needs_review=bool(raw.get("needs_review", False)))
    if "srs_level" not in raw:
        return item

    srs_system = srs_system or SpacedRepetitionSystem(get_settings().srs_intervals)
    level = max(int(raw["srs_level"]), 0)
    # Interval always follows the level under the active table
    return replace(
        item,
        srs_level=level,
        interval_days=srs_system.interval_for_level(level),
        next_review_date=_parse_date(raw.get("next_review_date")) or today,
    )


def build_progress(raw: dict) -> LearnerProgress:
    return LearnerProgress(
        experience_points=int(raw.get("experience_points", 0)),
        current_streak=int(raw.get("current_streak", 0)),
        longest_streak=int(raw.get("longest_streak", 0)),
        last_studied_date=_parse_date(raw.get("last_studied_date")),
    )


def import_sets_data(json_path: str, db_path: str) -> bool:
    """Import learners with their sets and quiz history"""
    try:
        print(f"📖 Loading data from {json_path}")
        with open(json_path, encoding="utf-8") as f:
            data = json.load(f)

        learners = data.get("learners", [])
        history = data.get("quiz_history", [])
        print(f"  👥 Loaded {len(learners)} learners, {len(history)} history records")

        db_manager = DatabaseManager(db_path)
        db_manager.init_database()
        print("  ✅ Database schema initialized")

        srs_system = SpacedRepetitionSystem(get_settings().srs_intervals)
        today = date.today()
        learner_ids: dict = {}
        set_ids: dict = {}
        set_count = 0

        for learner_data in learners:
            name = learner_data["name"]
            learner = db_manager.get_learner_by_name(name)
            if learner is None:
                learner = db_manager.create_learner(name)
                if learner is None:
                    print(f"  ⚠️  Failed to import learner {name}")
                    continue
                with db_manager.get_connection() as conn:
                    db_manager.learner_repo.save_progress(
                        conn, learner["id"], build_progress(learner_data), learner["version"]
                    )
                    conn.commit()
            else:
                print(f"  ↪️  Learner {name} exists, keeping current progress")

            if "id" in learner_data:
                learner_ids[learner_data["id"]] = learner["id"]

            for set_data in learner_data.get("sets", []):
                items = [build_item(raw, today, srs_system) for raw in set_data.get("items", [])]
                created = db_manager.create_set(
                    learner["id"],
                    set_data["title"],
                    items,
                    set_data.get("description") or "",
                    Difficulty(set_data.get("difficulty", Difficulty.MEDIUM)),
                    bool(set_data.get("is_public", False)),
                )
                if created is None:
                    print(f"  ⚠️  Failed to import set {set_data['title']}")
                    continue
                if "id" in set_data:
                    set_ids[set_data["id"]] = created.set_id
                set_count += 1

        history_count = 0
        with db_manager.get_connection() as conn:
            for record in history:
                learner_id = learner_ids.get(record.get("learner_id"))
                set_id = set_ids.get(record.get("set_id"))
                if learner_id is None or set_id is None:
                    continue
                created_at = record.get("created_at")
                db_manager.history_repo.add_quiz_result(
                    conn,
                    learner_id,
                    set_id,
                    int(record["score"]),
                    int(record["total"]),
                    datetime.fromisoformat(created_at) if created_at else None,
                )
                history_count += 1
            conn.commit()

        print(f"  ✅ Imported {set_count} sets and {history_count} history records")
        return True

    except Exception as e:
        print(f"❌ Import failed: {e}")
        return False


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage: python scripts/import_sets.py <input.json> <database.db>")
        sys.exit(1)

    success = import_sets_data(sys.argv[1], sys.argv[2])
    sys.exit(0 if success else 1)
