"""Copying provider images into the assets bucket."""

import re
from unittest import mock

import pytest
import requests

from aiaio_core.assets import ingest
from aiaio_core.errors import StorageError


def test_image_extension():
    assert ingest.image_extension("image/png", "https://x/a.jpg") == "png"
    assert ingest.image_extension("image/webp", "https://x/a") == "webp"
    assert ingest.image_extension("image/jpeg", "https://x/a.png") == "jpg"
    assert ingest.image_extension(None, "https://x/a.WEBP") == "webp"
    assert ingest.image_extension(None, "https://x/a.gif") == "jpg"


def test_image_storage_path():
    path = ingest.image_storage_path("fal.ai", "png")
    assert re.fullmatch(r"assets/images/fal\.ai_\d+_[a-z0-9]{9}\.png", path)


def test_download_and_upload_image(db):
    response = mock.Mock(content=b"png-bytes", headers={"content-type": "image/png"})
    response.raise_for_status.return_value = None

    with mock.patch.object(ingest.requests, "get", return_value=response) as get:
        result = ingest.download_and_upload_image(db, "https://fal.media/files/abc.png")

    get.assert_called_once_with("https://fal.media/files/abc.png", timeout=60)
    bucket = db.storage.from_("assets")
    (path, upload), = bucket.uploads.items()
    assert path.endswith(".png")
    assert upload["data"] == b"png-bytes"
    assert upload["options"] == {"content-type": "image/png", "upsert": "true"}
    assert result == {
        "supabase_url": bucket.get_public_url(path),
        "original_url": "https://fal.media/files/abc.png",
        "file_size": 9,
    }


def test_download_failure_raises_storage_error(db):
    response = mock.Mock()
    response.raise_for_status.side_effect = requests.HTTPError("404 Client Error")

    with mock.patch.object(ingest.requests, "get", return_value=response):
        with pytest.raises(StorageError, match="Failed to download image"):
            ingest.download_and_upload_image(db, "https://fal.media/files/gone.png")
    assert db.storage.buckets == {}
