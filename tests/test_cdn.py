from aiaio_core.config import get_settings
from aiaio_core.storage import cdn

BUCKET = "test-public-videos"
DOMAIN = "d111.cloudfront.net"


def test_optimized_video_url_rewrites_public_bucket_urls():
    url = f"https://{BUCKET}.s3.amazonaws.com/approved-videos/a.mp4"
    assert cdn.optimized_video_url(url, DOMAIN, BUCKET) == f"https://{DOMAIN}/approved-videos/a.mp4"

    path_style = f"https://s3.amazonaws.com/{BUCKET}/approved-videos/a.mp4"
    assert cdn.optimized_video_url(path_style, DOMAIN, BUCKET) == f"https://{DOMAIN}/approved-videos/a.mp4"


def test_other_urls_untouched():
    render = "https://remotionlambda-test.s3.amazonaws.com/renders/r1/out.mp4"
    assert cdn.optimized_video_url(render, DOMAIN, BUCKET) == render
    assert cdn.optimized_video_url("", DOMAIN, BUCKET) == ""
    assert cdn.optimized_video_url(render, "", BUCKET) == render


def test_original_s3_url_round_trip():
    url = f"https://{BUCKET}.s3.amazonaws.com/approved-videos/a.mp4"
    cdn_url = cdn.optimized_video_url(url, DOMAIN, BUCKET)
    assert cdn.original_s3_url(cdn_url, DOMAIN, BUCKET) == url
    assert cdn.original_s3_url(url, DOMAIN, BUCKET) == url


def test_video_url_uses_settings(monkeypatch):
    url = f"https://{BUCKET}.s3.amazonaws.com/a.mp4"
    assert cdn.video_url(url) == url

    monkeypatch.setenv("CLOUDFRONT_DISTRIBUTION_DOMAIN", DOMAIN)
    get_settings.cache_clear()
    assert cdn.video_url(url) == f"https://{DOMAIN}/a.mp4"
    assert cdn.video_url(url, use_cdn=False) == url
