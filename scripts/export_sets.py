#!/usr/bin/env python3
"""
Export learners, vocabulary sets and quiz history from the quiz database to JSON

The output uses the learner -> sets -> items layout that scripts/import_sets.py
reads, so SRS state, progress counters and quiz history survive a round trip.
"""

import json
import sqlite3
import sys
from datetime import datetime
from pathlib import Path


def export_sets_data(db_path: str, output_path: str) -> bool:
    """Export learners with their sets and items, plus quiz history"""
    try:
        conn = sqlite3.connect(db_path)
        conn.row_factory = sqlite3.Row

        print(f"📖 Exporting data from {db_path}")

        learners = []
        for learner in conn.execute("SELECT * FROM learners ORDER BY id").fetchall():
            learner_data = dict(learner)
            learner_data["sets"] = []

            set_rows = conn.execute(
                "SELECT * FROM vocab_sets WHERE owner_id = ? ORDER BY id",
                (learner["id"],),
            ).fetchall()
            for set_row in set_rows:
                set_data = dict(set_row)
                set_data["items"] = [
                    dict(item)
                    for item in conn.execute(
                        "SELECT * FROM vocab_items WHERE set_id = ? ORDER BY position, id",
                        (set_row["id"],),
                    ).fetchall()
                ]
                learner_data["sets"].append(set_data)

            learners.append(learner_data)

        history = [
            dict(row)
            for row in conn.execute("SELECT * FROM quiz_history ORDER BY id").fetchall()
        ]
        conn.close()

        print(f"  👥 Found {len(learners)} learners")
        print(f"  📈 Found {len(history)} quiz history records")

        export_data = {
            "export_info": {
                "exported_at": datetime.now().isoformat(),
                "database_path": db_path,
            },
            "learners": learners,
            "quiz_history": history,
        }

        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(export_data, f, ensure_ascii=False, indent=2, default=str)

        print(f"✅ Export written to {output_path}")
        return True

    except Exception as e:
        print(f"❌ Export failed: {e}")
        return False


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage: python scripts/export_sets.py <database.db> <output.json>")
        sys.exit(1)

    success = export_sets_data(sys.argv[1], sys.argv[2])
    sys.exit(0 if success else 1)
