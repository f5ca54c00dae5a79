"""
Cross-checking `child_approved_videos` against the public bucket.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ..config import get_settings
from ..db import repository as repo
from ..storage.s3 import S3VideoManager

logger = logging.getLogger(__name__)

RENDER_URL_MARKER = "remotionlambda"


@dataclass
class SyncReport:
    total_videos: int
    total_objects: int
    by_source: Dict[str, int] = field(default_factory=dict)
    by_url_kind: Dict[str, int] = field(default_factory=dict)
    published: List[Dict[str, Any]] = field(default_factory=list)
    missing_in_bucket: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def in_sync(self) -> bool:
        return not self.missing_in_bucket


def url_kind(url: str, public_bucket: str) -> str:
    if RENDER_URL_MARKER in url:
        return "render"
    if public_bucket in url:
        return "public"
    return "other"


def s3_database_sync_report(
    videos: Iterable[Dict[str, Any]],
    object_keys: Iterable[str],
    public_bucket: str,
) -> SyncReport:
    videos = list(videos)
    keys = set(object_keys)
    prefix = f"https://{public_bucket}.s3.amazonaws.com/"

    report = SyncReport(
        total_videos=len(videos),
        total_objects=len(keys),
        by_source=dict(Counter(v.get("video_source") or "unknown" for v in videos)),
        by_url_kind=dict(Counter(url_kind(v.get("video_url") or "", public_bucket) for v in videos)),
        published=[v for v in videos if v.get("is_published") is True],
    )

    for video in videos:
        url = video.get("video_url") or ""
        if url_kind(url, public_bucket) != "public":
            continue
        key = url.replace(prefix, "", 1)
        if key not in keys:
            report.missing_in_bucket.append({**video, "expected_key": key})

    return report


def check_s3_database_sync(client, s3=None, bucket: Optional[str] = None) -> SyncReport:
    bucket = bucket or get_settings().public_video_bucket
    manager = S3VideoManager(client=s3, bucket=bucket)

    videos = repo.list_approved_videos(client)
    keys = list(manager.list_keys())
    logger.info("Comparing %d videos with %d objects in %s", len(videos), len(keys), bucket)
    return s3_database_sync_report(videos, keys, bucket)
