"""
Admin dashboards.

- GET  /api/admin/missing-videos
- GET  /api/admin/misassigned-videos
- POST /api/admin/playlists/refresh
"""

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, Query

from aiaio_core.errors import AdminError
from aiaio_core.videos import assignments, coverage, playlists

from ..dependencies import get_supabase, http_error, require_admin

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/missing-videos")
async def missing_videos(
    templateType: Optional[str] = None,
    daysThreshold: int = Query(30, ge=0),
    client=Depends(get_supabase),
    admin: dict = Depends(require_admin),
):
    try:
        report = coverage.check_missing_videos(
            client,
            template_type=templateType,
            days_threshold=daysThreshold,
        )
    except AdminError as e:
        raise http_error(e) from e
    return {"success": True, **report.to_dict()}


@router.get("/misassigned-videos")
async def misassigned_videos(client=Depends(get_supabase), admin: dict = Depends(require_admin)):
    try:
        suspicious = assignments.check_misassigned_videos(client)
    except AdminError as e:
        raise http_error(e) from e
    return {"count": len(suspicious), "videos": [asdict(s) for s in suspicious]}


@router.post("/playlists/refresh")
async def refresh_playlists(client=Depends(get_supabase), admin: dict = Depends(require_admin)):
    try:
        written = playlists.update_child_playlists(client)
    except AdminError as e:
        raise http_error(e) from e
    return {"updated": len(written), "playlists": written}
