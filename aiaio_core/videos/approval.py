"""
aiaio_core.videos.approval
==========================

Approving a rendered video publishes it.

Render outputs live in the render service's bucket under
`renders/<render_id>/<file>` and are not publicly readable. On approval the
file is copied to the public bucket under a dated key, and the database row
is pointed at the new URL. The original URL is kept in
`template_data.migration` so a bad copy can be traced back.
"""

from __future__ import annotations

import logging
import re
from datetime import UTC, date, datetime
from typing import Any, Dict, Optional, Tuple

from botocore.exceptions import ClientError

from ..config import get_settings
from ..db import repository as repo
from ..errors import StorageError

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def render_location(original_url: str) -> Tuple[str, str]:
    """(render_id, file_name) from `.../renders/<render_id>/<file_name>`."""
    parts = original_url.rstrip("/").split("/")
    if len(parts) < 2:
        raise StorageError(f"Not a render URL: {original_url}")
    return parts[-2], parts[-1]


def public_video_key(video_id: str, child_name: Optional[str], file_name: str, today: Optional[date] = None) -> str:
    today = today or datetime.now(UTC).date()
    safe_name = _NON_ALNUM.sub("", child_name or "")
    return f"approved-videos/{today:%Y/%m/%d}/{video_id}-{safe_name}-{file_name}"


def copy_render_to_public_bucket(
    s3,
    original_url: str,
    video_id: str,
    child_name: Optional[str],
    today: Optional[date] = None,
) -> str:
    """
    Copy a render output into the public bucket.

    Returns
    -------
    str
        The public URL of the copy.
    """
    settings = get_settings()
    render_id, file_name = render_location(original_url)
    key = public_video_key(video_id, child_name, file_name, today)

    try:
        s3.copy_object(
            CopySource=f"{settings.render_bucket}/renders/{render_id}/{file_name}",
            Bucket=settings.public_video_bucket,
            Key=key,
            MetadataDirective="REPLACE",
            Metadata={
                "original-url": original_url,
                "video-id": video_id,
                "child-name": child_name or "",
                "approved-date": datetime.now(UTC).isoformat(),
            },
        )
    except ClientError as e:
        raise StorageError(f"Failed to copy video to public bucket: {e}") from e

    public_url = f"https://{settings.public_video_bucket}.s3.amazonaws.com/{key}"
    logger.info("Video copied to public bucket: %s", public_url)
    return public_url


def approve_video_with_migration(client, s3, video_id: str) -> Dict[str, Any]:
    """
    Copy the video to the public bucket and mark it approved.

    The database is only updated after the copy succeeded.
    """
    video = repo.get_approved_video(client, video_id)
    public_url = copy_render_to_public_bucket(
        s3, video["video_url"], video["id"], video.get("child_name")
    )

    now = repo.utc_now_iso()
    template_data = dict(video.get("template_data") or {})
    template_data["migration"] = {
        "originalUrl": video["video_url"],
        "migratedAt": now,
        "migrationType": "auto-on-approval",
    }

    repo.update_approved_video(
        client,
        video_id,
        {
            "video_url": public_url,
            "approval_status": "approved",
            "reviewed_at": now,
            "template_data": template_data,
        },
    )
    logger.info("Video %s approved and migrated to public bucket", video_id)
    return {"success": True, "new_url": public_url}
