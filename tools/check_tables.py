#!/usr/bin/env python3
"""
Check which of the tables the admin tools rely on are reachable.

Uses the anon key by default so the result matches what the web app sees
under row level security. Pass --admin to use the service-role key.

Run: python tools/check_tables.py [--admin]
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from aiaio_core.db import repository as repo
from aiaio_core.db.client import execute, get_supabase_client
from aiaio_core.errors import AdminError

TABLES = (
    repo.ASSETS,
    repo.CHILDREN,
    repo.USERS,
    repo.APPROVED_VIDEOS,
    repo.ASSIGNMENTS,
    repo.PLAYLISTS,
    repo.RENDER_JOBS,
    repo.PROMPTS,
)


def check_tables(admin: bool = False) -> int:
    client = get_supabase_client(admin=admin)
    missing = 0

    print(f"🔍 Checking tables ({'service role' if admin else 'anon'} key)\n")
    for table in TABLES:
        try:
            rows = execute(client.table(table).select("*").limit(1), table)
        except AdminError as e:
            missing += 1
            print(f"   ❌ {table}: {e}")
            continue
        sample = ", ".join(sorted(rows[0].keys())) if rows else "(empty)"
        print(f"   ✅ {table}: {sample}")

    print()
    if missing:
        print(f"⚠️  {missing} table(s) not reachable")
    else:
        print("✅ All tables reachable")
    return 1 if missing else 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--admin", action="store_true", help="use the service-role key")
    args = parser.parse_args()
    sys.exit(check_tables(admin=args.admin))
