"""
Video endpoints.

- POST /api/videos/webhook: render-service callback (no auth)
- POST /api/videos/{video_id}/approve: copy to the public bucket and approve
- GET  /api/videos/storage: video bucket usage and cost estimate
- GET  /api/videos/status/{render_id}: render job status and timestamps
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from aiaio_core.errors import AdminError, RecordNotFound
from aiaio_core.storage.s3 import S3VideoManager
from aiaio_core.videos import approval, render_jobs

from ..dependencies import get_s3, get_supabase, http_error, require_admin
from ..models.requests import RenderWebhookRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/videos", tags=["videos"])


@router.post("/webhook")
async def render_webhook(request: RenderWebhookRequest, client=Depends(get_supabase)):
    if not request.renderId:
        raise HTTPException(status_code=400, detail="Missing renderId")

    try:
        result = render_jobs.apply_render_result(
            client,
            request.renderId,
            output_file=request.outputFile,
            error=request.error,
        )
    except RecordNotFound as e:
        logger.error("Job not found for renderId %s", request.renderId)
        raise HTTPException(status_code=404, detail="Job not found") from e
    except AdminError as e:
        raise http_error(e) from e

    return {"success": True, **result}


@router.post("/{video_id}/approve")
async def approve_video(
    video_id: str,
    client=Depends(get_supabase),
    s3=Depends(get_s3),
    admin: dict = Depends(require_admin),
):
    try:
        return approval.approve_video_with_migration(client, s3, video_id)
    except AdminError as e:
        raise http_error(e) from e


@router.get("/status/{render_id}")
async def job_status(render_id: str, client=Depends(get_supabase), admin: dict = Depends(require_admin)):
    try:
        return {"success": True, **render_jobs.get_job_status(client, render_id)}
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail="Job not found") from e
    except AdminError as e:
        raise http_error(e) from e


@router.get("/storage")
async def storage_stats(s3=Depends(get_s3), admin: dict = Depends(require_admin)):
    try:
        return S3VideoManager(client=s3).storage_stats()
    except AdminError as e:
        raise http_error(e) from e
