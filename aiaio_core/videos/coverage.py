"""
Which children are due for a new video.

A child needs a video when nothing was ever made for them, or when their
latest video is older than the threshold (in whole days).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Dict, Iterable, List, Optional

from ..db import repository as repo
from .playlists import parse_timestamp

logger = logging.getLogger(__name__)

COUNTED_APPROVAL_STATUSES = ["approved", "pending_review"]
CHILD_COLUMNS = "id, name, age, primary_interest, parent_id, users!parent_id(email)"


@dataclass
class MissingVideoChild:
    id: str
    name: str
    missing_reason: str
    total_videos: int
    last_video_date: Optional[str] = None
    age: Optional[int] = None
    primary_interest: Optional[str] = None
    parent_email: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "age": self.age,
            "primary_interest": self.primary_interest,
            "parent_email": self.parent_email,
            "missingReason": self.missing_reason,
            "lastVideoDate": self.last_video_date,
            "totalVideos": self.total_videos,
        }


@dataclass
class CoverageReport:
    total_children: int
    days_threshold: int
    template_type: str = "all"
    missing: List[MissingVideoChild] = field(default_factory=list)

    @property
    def total_with_no_videos(self) -> int:
        return sum(1 for c in self.missing if c.total_videos == 0)

    @property
    def total_with_old_videos(self) -> int:
        return sum(1 for c in self.missing if c.total_videos > 0)

    @property
    def summary(self) -> str:
        if not self.total_children:
            return "No children found in database"
        return f"{len(self.missing)} of {self.total_children} children need videos"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "templateType": self.template_type,
            "daysThreshold": self.days_threshold,
            "totalChildren": self.total_children,
            "childrenMissingVideos": [c.to_dict() for c in self.missing],
            "summary": self.summary,
            "stats": {
                "totalWithNoVideos": self.total_with_no_videos,
                "totalWithOldVideos": self.total_with_old_videos,
            },
        }


def videos_for_child(child: Dict[str, Any], videos: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Videos linked by `child_id`, or by name when the video has no `child_id`."""
    name = (child.get("name") or "").lower()
    matched = []
    for video in videos:
        if video.get("child_id") == child["id"]:
            matched.append(video)
        elif not video.get("child_id") and (video.get("child_name") or "").lower() == name:
            matched.append(video)
    return matched


def find_children_missing_videos(
    children: Iterable[Dict[str, Any]],
    videos: Iterable[Dict[str, Any]],
    days_threshold: int = 30,
    now: Optional[datetime] = None,
    template_type: Optional[str] = None,
) -> CoverageReport:
    now = now or datetime.now(UTC)
    children = list(children)
    videos = list(videos)
    report = CoverageReport(
        total_children=len(children),
        days_threshold=days_threshold,
        template_type=template_type or "all",
    )

    for child in children:
        own = videos_for_child(child, videos)
        reason = ""
        last_date = None

        if not own:
            reason = "No videos found"
        else:
            latest = max(own, key=lambda v: parse_timestamp(v.get("created_at")))
            last_date = latest.get("created_at")
            days = (now - parse_timestamp(last_date)).days
            if days > days_threshold:
                reason = f"Last video {days} days ago"

        if reason:
            parent = child.get("users") or {}
            report.missing.append(
                MissingVideoChild(
                    id=child["id"],
                    name=child.get("name") or "",
                    missing_reason=reason,
                    total_videos=len(own),
                    last_video_date=last_date,
                    age=child.get("age"),
                    primary_interest=child.get("primary_interest"),
                    parent_email=parent.get("email") if isinstance(parent, dict) else None,
                )
            )

    return report


def check_missing_videos(
    client,
    template_type: Optional[str] = None,
    days_threshold: int = 30,
) -> CoverageReport:
    if template_type == "all":
        template_type = None

    children = repo.list_children(client, columns=CHILD_COLUMNS)
    videos = repo.list_approved_videos(
        client,
        statuses=COUNTED_APPROVAL_STATUSES,
        template_type=template_type,
        columns="id, child_id, child_name, template_type, approval_status, created_at, video_url",
    )
    logger.info("Checking %d children against %d videos", len(children), len(videos))
    return find_children_missing_videos(
        children, videos, days_threshold=days_threshold, template_type=template_type
    )
