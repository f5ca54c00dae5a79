#!/usr/bin/env python3
"""
Create (or promote) an admin user.

Creates the account in Supabase Auth when it does not exist yet, then writes
the matching `users` row with role `admin`.

Run:
    python tools/create_admin_user.py --email admin@example.com [--yes]
"""

import argparse
import secrets
import string
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from aiaio_core.db import repository as repo
from aiaio_core.db.client import execute, get_supabase_client
from aiaio_core.errors import AdminError


def _temporary_password(length: int = 16) -> str:
    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def find_auth_user(client, email: str):
    for user in client.auth.admin.list_users():
        if (user.email or "").lower() == email.lower():
            return user
    return None


def create_admin_user(email: str, name: str = "", assume_yes: bool = False) -> int:
    print("=" * 60)
    print("  CREATE ADMIN USER")
    print("=" * 60)

    client = get_supabase_client()
    password = None

    user = find_auth_user(client, email)
    if user is not None:
        print(f"⚠️  {email} already exists in Supabase Auth (id {user.id})")
    else:
        if not assume_yes:
            answer = input(f"Create auth user {email}? (y/n): ").strip().lower()
            if answer != "y":
                print("❌ Cancelled")
                return 1
        password = _temporary_password()
        response = client.auth.admin.create_user(
            {"email": email, "password": password, "email_confirm": True}
        )
        user = response.user
        print(f"✅ Auth user created (id {user.id})")

    try:
        execute(
            client.table(repo.USERS).upsert(
                {"id": user.id, "email": email, "name": name or email.split("@")[0], "role": "admin"}
            ),
            repo.USERS,
        )
    except AdminError as e:
        print(f"❌ Could not write users row: {e}")
        return 1

    print(f"✅ {email} has role admin")
    if password:
        print(f"🔑 Temporary password: {password}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", default="")
    parser.add_argument("--yes", action="store_true", help="do not ask for confirmation")
    args = parser.parse_args()
    sys.exit(create_admin_user(args.email, args.name, args.yes))
