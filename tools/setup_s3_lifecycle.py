#!/usr/bin/env python3
"""
Create the video and asset buckets if needed and apply their lifecycle rules.

Run:
    python tools/setup_s3_lifecycle.py [--yes]
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from aiaio_core.config import configure_logging, get_settings
from aiaio_core.errors import StorageError
from aiaio_core.storage.lifecycle import (
    ASSET_LIFECYCLE_RULES,
    VIDEO_LIFECYCLE_RULES,
    apply_lifecycle,
    ensure_bucket,
)
from aiaio_core.storage.s3 import create_s3_client


def setup(assume_yes: bool = False) -> int:
    settings = get_settings()
    plan = (
        (settings.video_bucket, VIDEO_LIFECYCLE_RULES),
        (settings.asset_bucket, ASSET_LIFECYCLE_RULES),
    )

    print("🪣 Buckets:")
    for bucket, rules in plan:
        print(f"   {bucket}: {', '.join(r['ID'] for r in rules)}")

    if not assume_yes:
        answer = input("\nApply these lifecycle rules? (y/n): ").strip().lower()
        if answer != "y":
            print("❌ Cancelled")
            return 1

    s3 = create_s3_client(settings.aws_region)
    try:
        for bucket, rules in plan:
            created = ensure_bucket(s3, bucket, settings.aws_region)
            print(f"  ✓ {bucket} {'created' if created else 'exists'}")
            apply_lifecycle(s3, bucket, rules)
            print(f"  ✓ {bucket} lifecycle applied")
    except StorageError as e:
        print(f"\n❌ {e}")
        return 1

    print("\n✅ S3 setup complete")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--yes", action="store_true", help="do not ask for confirmation")
    args = parser.parse_args()
    configure_logging()
    sys.exit(setup(args.yes))
