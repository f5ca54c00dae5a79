#!/usr/bin/env python3
"""
Migration: add the profile columns the child form writes
(icon, additional_themes, theme) to `children`.

Run:
    python tools/migrate_add_child_fields.py
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from aiaio_core.db.database import get_db_session
from aiaio_core.db.schema import CHILD_PROFILE_COLUMNS, ensure_columns


def migrate():
    with get_db_session() as session:
        print("Checking columns on 'children'...")
        added = ensure_columns(session, "children", CHILD_PROFILE_COLUMNS)

    for name in CHILD_PROFILE_COLUMNS:
        marker = "added" if name in added else "already exists"
        print(f"  ✓ {name}: {marker}")
    print("\n✅ Migration complete")


if __name__ == "__main__":
    try:
        migrate()
    except Exception as e:
        print(f"\n❌ Migration failed: {e}")
        sys.exit(1)
