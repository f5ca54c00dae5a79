"""
aiaio_core.videos.playlists
===========================

Builds the per-child playlists stored in `child_playlists.videos`.

A child's playlist is the union of:
- videos assigned to the child,
- general videos (assignment with no child),
- theme videos for the child's primary interest that are published,

restricted to videos that still have an active (published or pending)
assignment. Entries are newest first by publish date.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any, Dict, Iterable, List, Optional

from ..db import repository as repo
from ..domain_models import PlaylistEntry
from ..errors import AdminError

logger = logging.getLogger(__name__)

ACTIVE_ASSIGNMENT_STATUSES = ("published", "pending")


def _active_assignments(video: Dict[str, Any]) -> List[Dict[str, Any]]:
    assignments = video.get("video_assignments")
    if not isinstance(assignments, list):
        return []
    return [a for a in assignments if a.get("status") in ACTIVE_ASSIGNMENT_STATUSES]


def _has_assignments(video: Dict[str, Any]) -> bool:
    return isinstance(video.get("video_assignments"), list)


def pick_assignment(video: Dict[str, Any], child_id: str) -> Optional[Dict[str, Any]]:
    """The child's own active assignment, else a general one, else any active one."""
    active = _active_assignments(video)
    for assignment in active:
        if assignment.get("child_id") == child_id:
            return assignment
    for assignment in active:
        if assignment.get("child_id") is None:
            return assignment
    return active[0] if active else None


def _dedupe(videos: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Keep a video unless an earlier one shares its URL or its id."""
    seen_urls = set()
    seen_ids = set()
    unique = []
    for video in videos:
        url = video.get("video_url")
        video_id = video.get("id")
        if url not in seen_urls and (video_id is None or video_id not in seen_ids):
            unique.append(video)
        seen_urls.add(url)
        if video_id is not None:
            seen_ids.add(video_id)
    return unique


def parse_timestamp(value: Optional[str]) -> datetime:
    """Parse an ISO timestamp as UTC; unparseable values sort oldest."""
    try:
        parsed = datetime.fromisoformat(value or "")
    except ValueError:
        return datetime.min.replace(tzinfo=UTC)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def _publish_sort_key(entry: PlaylistEntry) -> datetime:
    return parse_timestamp(entry.publish_date)


def _entry(video: Dict[str, Any], assignment: Dict[str, Any]) -> PlaylistEntry:
    metadata: Dict[str, Any] = {
        "source": repo.APPROVED_VIDEOS,
        "assignment_status": assignment.get("status"),
    }
    metadata.update(video.get("template_data") or {})
    metadata["assignment_metadata"] = assignment.get("metadata") or {}

    return PlaylistEntry(
        id=video["id"],
        title=video.get("consumer_title") or video.get("video_title"),
        description=video.get("consumer_description") or "",
        parent_tip=video.get("parent_tip") or "",
        display_image=video.get("display_image_url") or "",
        video_url=video.get("video_url"),
        publish_date=assignment.get("publish_date") or video.get("created_at"),
        personalization_level=video.get("personalization_level"),
        child_theme=video.get("child_theme"),
        duration_seconds=video.get("duration_seconds"),
        is_published=bool(video.get("is_published")),
        metadata=metadata,
    )


def build_child_playlist(child: Dict[str, Any], videos: Iterable[Dict[str, Any]]) -> List[PlaylistEntry]:
    """
    Build one child's playlist from approved, active videos that carry
    their embedded `video_assignments`.
    """
    videos = [v for v in videos if _has_assignments(v)]
    child_id = child["id"]

    child_specific = [
        v for v in videos if any(a.get("child_id") == child_id for a in _active_assignments(v))
    ]
    general = [
        v for v in videos if any(a.get("child_id") is None for a in _active_assignments(v))
    ]
    themed = [
        v
        for v in videos
        if v.get("personalization_level") == "theme_specific"
        and v.get("child_theme") == child.get("primary_interest")
        and v.get("is_published") is True
        and _active_assignments(v)
    ]

    entries = []
    for video in _dedupe(child_specific + general + themed):
        assignment = pick_assignment(video, child_id)
        if assignment is not None:
            entries.append(_entry(video, assignment))

    entries.sort(key=_publish_sort_key, reverse=True)
    return entries


def update_child_playlists(client) -> Dict[str, int]:
    """
    Rebuild and upsert every child's playlist.

    A failure for one child is logged and the remaining children are still
    processed. Returns `{child_id: number_of_entries}` for the ones written.
    """
    children = repo.list_children(client)
    videos = repo.list_approved_videos(
        client,
        statuses=["approved"],
        with_assignments=True,
        active_only=True,
    )
    logger.info("Updating playlists for %d children from %d videos", len(children), len(videos))

    written: Dict[str, int] = {}
    for child in children:
        playlist = build_child_playlist(child, videos)
        try:
            repo.upsert_playlist(client, child["id"], [e.to_dict() for e in playlist])
        except AdminError as e:
            logger.error("Error upserting playlist for child %s: %s", child.get("name"), e)
            continue
        written[child["id"]] = len(playlist)
    return written
