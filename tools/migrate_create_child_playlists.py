#!/usr/bin/env python3
"""
Migration: create `child_playlists` and fill it from the approved videos.

Run:
    python tools/migrate_create_child_playlists.py [--skip-refresh]
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from aiaio_core.config import configure_logging
from aiaio_core.db.client import get_supabase_client
from aiaio_core.db.database import get_db_session
from aiaio_core.db.schema import ensure_child_playlists_table
from aiaio_core.videos.playlists import update_child_playlists


def migrate(refresh: bool = True):
    with get_db_session() as session:
        created = ensure_child_playlists_table(session)
    print("  ✓ child_playlists created" if created else "  ✓ child_playlists already exists")

    if refresh:
        print("Filling playlists...")
        written = update_child_playlists(get_supabase_client())
        print(f"  ✓ {len(written)} playlist(s) written")

    print("\n✅ Migration complete")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--skip-refresh", action="store_true", help="only create the table")
    args = parser.parse_args()
    configure_logging()
    try:
        migrate(refresh=not args.skip_refresh)
    except Exception as e:
        print(f"\n❌ Migration failed: {e}")
        sys.exit(1)
