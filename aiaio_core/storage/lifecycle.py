"""
Bucket creation and lifecycle rules.

Videos are never expired by lifecycle; they only move to cheaper storage
classes. Assets under `temp/` are the only objects S3 deletes for us.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from botocore.exceptions import ClientError

from ..errors import StorageError

logger = logging.getLogger(__name__)

_ABORT_MULTIPART = {
    "ID": "DeleteIncompleteMultipartUploads",
    "Status": "Enabled",
    "Filter": {},
    "AbortIncompleteMultipartUpload": {"DaysAfterInitiation": 7},
}

VIDEO_LIFECYCLE_RULES: List[Dict[str, Any]] = [
    {
        "ID": "TransitionToIA",
        "Status": "Enabled",
        "Filter": {"Prefix": "videos/"},
        "Transitions": [
            {"Days": 30, "StorageClass": "STANDARD_IA"},
            {"Days": 90, "StorageClass": "GLACIER"},
        ],
    },
    _ABORT_MULTIPART,
]

ASSET_LIFECYCLE_RULES: List[Dict[str, Any]] = [
    {
        "ID": "TransitionAssetsToIA",
        "Status": "Enabled",
        "Filter": {},
        "Transitions": [
            {"Days": 90, "StorageClass": "STANDARD_IA"},
            {"Days": 180, "StorageClass": "GLACIER"},
        ],
    },
    {
        "ID": "DeleteOldTempAssets",
        "Status": "Enabled",
        "Filter": {"Prefix": "temp/"},
        "Expiration": {"Days": 30},
    },
    _ABORT_MULTIPART,
]


def bucket_exists(s3, name: str) -> bool:
    try:
        s3.head_bucket(Bucket=name)
    except ClientError as e:
        error = e.response.get("Error", {})
        status = e.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        if error.get("Code") in ("404", "NotFound", "NoSuchBucket") or status == 404:
            return False
        raise StorageError(f"Could not check bucket {name}: {e}") from e
    return True


def ensure_bucket(s3, name: str, region: str) -> bool:
    """Create the bucket when missing. Returns True if it was created."""
    if bucket_exists(s3, name):
        logger.info("Bucket %s already exists", name)
        return False

    params: Dict[str, Any] = {"Bucket": name}
    # us-east-1 rejects an explicit location constraint
    if region != "us-east-1":
        params["CreateBucketConfiguration"] = {"LocationConstraint": region}

    try:
        s3.create_bucket(**params)
    except ClientError as e:
        raise StorageError(f"Could not create bucket {name}: {e}") from e
    logger.info("Created bucket %s in %s", name, region)
    return True


def apply_lifecycle(s3, bucket: str, rules: List[Dict[str, Any]]) -> None:
    try:
        s3.put_bucket_lifecycle_configuration(
            Bucket=bucket,
            LifecycleConfiguration={"Rules": rules},
        )
    except ClientError as e:
        raise StorageError(f"Could not set lifecycle on {bucket}: {e}") from e
    logger.info("Applied %d lifecycle rules to %s", len(rules), bucket)
