"""
Finding letter videos that were published as general assignments.

Letter videos are made for one child; assigning them as general puts
another child's name in every playlist.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ..assets.matching import has_letter_reference
from ..db import repository as repo

logger = logging.getLogger(__name__)


@dataclass
class SuspiciousAssignment:
    assignment_id: Optional[str]
    video_id: Optional[str]
    video_title: Optional[str]
    child_name: Optional[str]
    template_type: Optional[str]
    reasons: List[str] = field(default_factory=list)


def find_misassigned_letter_videos(assignments: Iterable[Dict[str, Any]]) -> List[SuspiciousAssignment]:
    """
    Flag general assignments whose video looks child specific.

    Expects rows with the embedded `child_approved_videos` record.
    """
    suspicious = []
    for assignment in assignments:
        video = assignment.get(repo.APPROVED_VIDEOS)
        if not video:
            continue

        child_name = (video.get("child_name") or "").lower()
        letter_in_title = has_letter_reference(video.get("video_title"))
        specific_child = bool(child_name) and child_name != "general"
        letter_in_data = "letter" in json.dumps(video.get("template_data") or {}).lower()

        if not (letter_in_title or (specific_child and letter_in_data)):
            continue

        reasons = []
        if letter_in_title:
            reasons.append("Title contains letter reference")
        if specific_child:
            reasons.append("Has specific child name")
        if letter_in_data:
            reasons.append("Template data contains letter reference")

        suspicious.append(
            SuspiciousAssignment(
                assignment_id=assignment.get("id"),
                video_id=assignment.get("video_id"),
                video_title=video.get("video_title"),
                child_name=video.get("child_name"),
                template_type=video.get("template_type"),
                reasons=reasons,
            )
        )
    return suspicious


def check_misassigned_videos(client) -> List[SuspiciousAssignment]:
    assignments = repo.list_assignments(
        client,
        assignment_type="general",
        general_only=True,
        status="published",
        with_video=True,
    )
    logger.info("Found %d general assignments", len(assignments))
    return find_misassigned_letter_videos(assignments)
