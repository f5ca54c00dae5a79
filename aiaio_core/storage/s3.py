"""
aiaio_core.storage.s3
=====================

Thin manager over the private video bucket (boto3).

Key layout
----------
- videos/user-generated/YYYY-MM-DD/<id>/<file>
- videos/remotion/YYYY-MM-DD/<id>/<file>
- videos/temp/<id>/<file>      (removed by `cleanup_temp_videos`)
- videos/misc/<id>/<file>

Every boto3 `ClientError` is re-raised as `StorageError`, except a 404 on
`get_video_info`, which means "no such video" and returns None.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from typing import Any, Dict, Iterator, List, Optional

import boto3
from botocore.exceptions import ClientError

from ..config import get_settings
from ..errors import StorageError

logger = logging.getLogger(__name__)

DEFAULT_EXPIRATION = 3600
GB = 1024 ** 3

# USD per GB-month, us-east-1
COST_PER_GB = {
    "STANDARD": 0.023,
    "STANDARD_IA": 0.0125,
    "GLACIER": 0.004,
    "DEEP_ARCHIVE": 0.00099,
}

KEY_PREFIXES = {
    "user-generated": "videos/user-generated",
    "remotion": "videos/remotion",
}

_UNSAFE_FILENAME = re.compile(r"[^a-zA-Z0-9.-]")


def create_s3_client(region: Optional[str] = None):
    """boto3 S3 client from settings; empty credentials fall back to the default chain."""
    settings = get_settings()
    return boto3.client(
        "s3",
        region_name=region or settings.aws_region,
        aws_access_key_id=settings.aws_access_key_id or None,
        aws_secret_access_key=settings.aws_secret_access_key or None,
    )


def format_file_size(size_bytes: float) -> str:
    units = ["B", "KB", "MB", "GB", "TB"]
    size = float(size_bytes)
    unit = 0
    while size >= 1024 and unit < len(units) - 1:
        size /= 1024
        unit += 1
    return f"{round(size, 2):g} {units[unit]}"


@dataclass
class VideoInfo:
    key: str
    size: int
    last_modified: Optional[datetime]
    storage_class: str
    url: str
    metadata: Dict[str, str] = field(default_factory=dict)


class S3VideoManager:
    def __init__(self, client=None, bucket: Optional[str] = None, region: Optional[str] = None):
        settings = get_settings()
        self.region = region or settings.aws_region
        self.bucket = bucket or settings.video_bucket
        self.client = client or create_s3_client(self.region)

    # --------------------------------------------------------
    # URLs / keys
    # --------------------------------------------------------

    def object_url(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    @staticmethod
    def generate_video_key(
        kind: str,
        video_id: str,
        filename: Optional[str] = None,
        today: Optional[date] = None,
    ) -> str:
        stamp = (today or datetime.now(UTC).date()).isoformat()
        if filename:
            name = _UNSAFE_FILENAME.sub("_", filename)
        else:
            name = f"video-{int(time.time() * 1000)}.mp4"

        if kind in KEY_PREFIXES:
            return f"{KEY_PREFIXES[kind]}/{stamp}/{video_id}/{name}"
        if kind == "temp":
            return f"videos/temp/{video_id}/{name}"
        return f"videos/misc/{video_id}/{name}"

    # --------------------------------------------------------
    # Single objects
    # --------------------------------------------------------

    def _put_params(
        self,
        key: str,
        content_type: str,
        metadata: Optional[Dict[str, str]],
        storage_class: str,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "Bucket": self.bucket,
            "Key": key,
            "ContentType": content_type,
            "StorageClass": storage_class,
        }
        if metadata:
            params["Metadata"] = metadata
        return params

    def upload_url(
        self,
        key: str,
        content_type: str = "video/mp4",
        metadata: Optional[Dict[str, str]] = None,
        storage_class: str = "STANDARD",
        expires_in: int = DEFAULT_EXPIRATION,
    ) -> str:
        """Presigned PUT URL so browsers can upload large files directly."""
        try:
            return self.client.generate_presigned_url(
                "put_object",
                Params=self._put_params(key, content_type, metadata, storage_class),
                ExpiresIn=expires_in,
            )
        except ClientError as e:
            raise StorageError(f"Could not presign upload for {key}: {e}") from e

    def upload_video(
        self,
        body: bytes,
        key: str,
        content_type: str = "video/mp4",
        metadata: Optional[Dict[str, str]] = None,
        storage_class: str = "STANDARD",
    ) -> Dict[str, str]:
        params = self._put_params(key, content_type, metadata, storage_class)
        try:
            self.client.put_object(Body=body, **params)
        except ClientError as e:
            raise StorageError(f"Upload of {key} failed: {e}") from e
        logger.info("Uploaded %s (%s)", key, format_file_size(len(body)))
        return {"key": key, "url": self.object_url(key)}

    def delete_video(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            raise StorageError(f"Delete of {key} failed: {e}") from e

    def get_video_info(self, key: str) -> Optional[VideoInfo]:
        try:
            response = self.client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("404", "NotFound", "NoSuchKey"):
                return None
            raise StorageError(f"Could not read {key}: {e}") from e

        return VideoInfo(
            key=key,
            size=response.get("ContentLength", 0),
            last_modified=response.get("LastModified"),
            storage_class=response.get("StorageClass", "STANDARD"),
            url=self.object_url(key),
            metadata=response.get("Metadata") or {},
        )

    def view_url(self, key: str, expires_in: int = DEFAULT_EXPIRATION) -> str:
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except ClientError as e:
            raise StorageError(f"Could not presign view for {key}: {e}") from e

    # --------------------------------------------------------
    # Listings
    # --------------------------------------------------------

    def list_videos(self, prefix: str = "videos/", max_keys: int = 100) -> List[VideoInfo]:
        """One page of `.mp4` objects under `prefix`."""
        try:
            response = self.client.list_objects_v2(Bucket=self.bucket, Prefix=prefix, MaxKeys=max_keys)
        except ClientError as e:
            raise StorageError(f"Listing {self.bucket}/{prefix} failed: {e}") from e

        return [
            VideoInfo(
                key=obj["Key"],
                size=obj.get("Size", 0),
                last_modified=obj.get("LastModified"),
                storage_class=obj.get("StorageClass", "STANDARD"),
                url=self.object_url(obj["Key"]),
            )
            for obj in response.get("Contents", [])
            if obj.get("Key", "").endswith(".mp4")
        ]

    def browse(self, prefix: str = "", max_keys: int = 1000) -> Dict[str, Any]:
        """
        One folder level under `prefix`: sub-folders and files, each file
        with a presigned view URL.
        """
        try:
            response = self.client.list_objects_v2(
                Bucket=self.bucket, Prefix=prefix, Delimiter="/", MaxKeys=max_keys
            )
        except ClientError as e:
            raise StorageError(f"Listing {self.bucket}/{prefix} failed: {e}") from e

        folders = [p.get("Prefix", "") for p in response.get("CommonPrefixes", [])]
        objects = []
        for obj in response.get("Contents", []):
            if obj["Key"] == prefix:
                continue
            modified = obj.get("LastModified")
            objects.append(
                {
                    "key": obj["Key"],
                    "last_modified": modified.isoformat() if modified else "",
                    "size": obj.get("Size", 0),
                    "url": self.view_url(obj["Key"]),
                }
            )
        return {"prefix": prefix, "folders": folders, "objects": objects}

    def list_keys(self, prefix: str = "") -> Iterator[str]:
        """Every key under `prefix`, following pagination."""
        paginator = self.client.get_paginator("list_objects_v2")
        try:
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                for obj in page.get("Contents", []):
                    yield obj["Key"]
        except ClientError as e:
            raise StorageError(f"Listing {self.bucket}/{prefix} failed: {e}") from e

    def storage_stats(self, max_keys: int = 1000) -> Dict[str, Any]:
        videos = self.list_videos("", max_keys)
        breakdown: Dict[str, Dict[str, int]] = {}
        total_size = 0

        for video in videos:
            total_size += video.size
            stats = breakdown.setdefault(video.storage_class or "STANDARD", {"count": 0, "size": 0})
            stats["count"] += 1
            stats["size"] += video.size

        cost = 0.0
        for storage_class, stats in breakdown.items():
            rate = COST_PER_GB.get(storage_class, COST_PER_GB["STANDARD"])
            cost += stats["size"] / GB * rate

        return {
            "total_objects": len(videos),
            "total_size": total_size,
            "estimated_monthly_cost": round(cost, 2),
            "storage_breakdown": breakdown,
        }

    def expired_temp_videos(self, older_than_days: int = 7, now: Optional[datetime] = None) -> List[VideoInfo]:
        """Videos under `videos/temp/` last modified before the cutoff."""
        cutoff = (now or datetime.now(UTC)) - timedelta(days=older_than_days)
        return [
            video
            for video in self.list_videos("videos/temp/", 1000)
            if video.last_modified and video.last_modified < cutoff
        ]

    def cleanup_temp_videos(self, older_than_days: int = 7, now: Optional[datetime] = None) -> int:
        deleted = 0
        for video in self.expired_temp_videos(older_than_days, now):
            self.delete_video(video.key)
            deleted += 1
        logger.info("Deleted %d temp videos older than %d days", deleted, older_than_days)
        return deleted
