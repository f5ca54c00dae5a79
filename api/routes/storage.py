"""
Bucket browser for the public video bucket.

- GET /api/s3/list?prefix=: one folder level with presigned file URLs
"""

from fastapi import APIRouter, Depends

from aiaio_core.config import get_settings
from aiaio_core.errors import AdminError
from aiaio_core.storage.s3 import S3VideoManager

from ..dependencies import get_s3, http_error, require_admin

router = APIRouter(prefix="/api/s3", tags=["storage"])


@router.get("/list")
async def list_objects(prefix: str = "", s3=Depends(get_s3), admin: dict = Depends(require_admin)):
    manager = S3VideoManager(client=s3, bucket=get_settings().public_video_bucket)
    try:
        listing = manager.browse(prefix)
    except AdminError as e:
        raise http_error(e) from e
    return {**listing, "source": "s3"}
