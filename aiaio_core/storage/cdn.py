"""CloudFront URL rewriting for the public video bucket."""

from __future__ import annotations

from typing import Optional

from ..config import Settings, get_settings


def _public_key(url: str, bucket: str) -> Optional[str]:
    for marker in (f"{bucket}.s3.amazonaws.com/", f"s3.amazonaws.com/{bucket}/"):
        if marker in url:
            return url.split(marker, 1)[1]
    return None


def optimized_video_url(url: str, domain: Optional[str], bucket: str) -> str:
    """Serve a public-bucket S3 URL through the CDN; anything else is returned as is."""
    if not domain or not url:
        return url
    key = _public_key(url, bucket)
    if key is None:
        return url
    return f"https://{domain}/{key}"


def original_s3_url(url: str, domain: Optional[str], bucket: str) -> str:
    if not domain or f"{domain}/" not in url:
        return url
    key = url.split(f"{domain}/", 1)[1]
    return f"https://{bucket}.s3.amazonaws.com/{key}"


def video_url(url: str, use_cdn: bool = True, settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    if not use_cdn or not settings.cloudfront_domain:
        return url
    return optimized_video_url(url, settings.cloudfront_domain, settings.public_video_bucket)
