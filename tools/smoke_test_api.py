#!/usr/bin/env python3
"""
Hit the running API's read-only routes and report the status codes.

Run (API started with run_api.py):
    python tools/smoke_test_api.py [--base-url http://localhost:8000] [--token JWT]
"""

import argparse
import sys
from pathlib import Path

import requests

sys.path.insert(0, str(Path(__file__).parent.parent))

PUBLIC_ROUTES = ("/", "/health")
ADMIN_ROUTES = (
    "/api/assets/stats",
    "/api/assets?page=1",
    "/api/admin/missing-videos?daysThreshold=30",
    "/api/admin/misassigned-videos",
    "/api/videos/storage",
    "/api/s3/list",
)


def check(session: requests.Session, base_url: str, path: str, expected: int) -> bool:
    try:
        response = session.get(f"{base_url}{path}", timeout=30)
    except requests.RequestException as e:
        print(f"   ❌ {path}: {e}")
        return False
    ok = response.status_code == expected
    print(f"   {'✅' if ok else '❌'} {path}: {response.status_code}")
    return ok


def smoke_test(base_url: str, token: str = "") -> int:
    session = requests.Session()
    failures = 0

    print(f"🔍 {base_url}\n\nPublic routes:")
    for path in PUBLIC_ROUTES:
        failures += not check(session, base_url, path, 200)

    print("\nAdmin routes without a token (expect 401):")
    for path in ADMIN_ROUTES:
        failures += not check(session, base_url, path, 401)

    if token:
        session.headers["Authorization"] = f"Bearer {token}"
        print("\nAdmin routes with token:")
        for path in ADMIN_ROUTES:
            failures += not check(session, base_url, path, 200)

    print()
    print("✅ All checks passed" if not failures else f"❌ {failures} check(s) failed")
    return 1 if failures else 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--base-url", default="http://localhost:8000")
    parser.add_argument("--token", default="", help="admin JWT for the authenticated pass")
    args = parser.parse_args()
    sys.exit(smoke_test(args.base_url.rstrip("/"), args.token))
