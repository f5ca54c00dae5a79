"""
Parent dashboard.

- GET /api/dashboard/videos?child_id=: the child's playlist, with video URLs
  served through the CDN when one is configured.

The caller must be the child's parent.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from aiaio_core.db import repository as repo
from aiaio_core.errors import AdminError, RecordNotFound
from aiaio_core.storage.cdn import video_url
from aiaio_core.videos.playlists import build_child_playlist

from ..dependencies import get_current_user_id, get_supabase, http_error

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/videos")
async def child_videos(
    child_id: str = Query(..., min_length=1),
    user_id: str = Depends(get_current_user_id),
    client=Depends(get_supabase),
):
    try:
        child = repo.get_child(client, child_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=403, detail="Access denied to this child") from e
    except AdminError as e:
        raise http_error(e) from e

    if child.get("parent_id") != user_id:
        raise HTTPException(status_code=403, detail="Access denied to this child")

    try:
        videos = repo.list_approved_videos(
            client,
            statuses=["approved"],
            with_assignments=True,
            active_only=True,
        )
    except AdminError as e:
        raise http_error(e) from e

    entries = []
    for entry in build_child_playlist(child, videos):
        item = entry.to_dict()
        item["video_url"] = video_url(item["video_url"])
        entries.append(item)

    return {"child": {"id": child["id"], "name": child.get("name")}, "videos": entries}
