"""
Copying provider-hosted images into our own storage.

Image providers return short-lived URLs; the asset row must point at a
copy in the Supabase `assets` bucket instead.
"""

from __future__ import annotations

import logging
import random
import string
import time
from typing import Any, Dict, Optional

import requests

from ..errors import StorageError

logger = logging.getLogger(__name__)

STORAGE_BUCKET = "assets"
IMAGE_PREFIX = "assets/images"
_URL_EXTENSIONS = ("jpg", "jpeg", "png", "webp")


def image_extension(content_type: Optional[str], image_url: str) -> str:
    if content_type:
        if "png" in content_type:
            return "png"
        if "webp" in content_type:
            return "webp"
        return "jpg"

    url_ext = image_url.rsplit(".", 1)[-1].lower()
    return url_ext if url_ext in _URL_EXTENSIONS else "jpg"


def image_storage_path(generation_method: str, extension: str) -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    millis = int(time.time() * 1000)
    return f"{IMAGE_PREFIX}/{generation_method}_{millis}_{suffix}.{extension}"


def download_and_upload_image(
    client,
    image_url: str,
    generation_method: str = "fal.ai",
    timeout: int = 60,
) -> Dict[str, Any]:
    """
    Download `image_url` and upload it to the `assets` storage bucket.

    Returns `{supabase_url, original_url, file_size}`.

    Raises
    ------
    StorageError
        If the download fails.
    """
    logger.info("Downloading image from %s", image_url)
    try:
        response = requests.get(image_url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise StorageError(f"Failed to download image: {e}") from e

    data = response.content
    content_type = response.headers.get("content-type")
    path = image_storage_path(generation_method, image_extension(content_type, image_url))

    bucket = client.storage.from_(STORAGE_BUCKET)
    bucket.upload(
        path,
        data,
        {"content-type": content_type or "image/jpeg", "upsert": "true"},
    )
    public_url = bucket.get_public_url(path)
    logger.info("Image uploaded to %s (%d bytes)", public_url, len(data))

    return {
        "supabase_url": public_url,
        "original_url": image_url,
        "file_size": len(data),
    }
