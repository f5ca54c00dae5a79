"""Shared fixtures: deterministic settings and an in-memory database."""

import pytest

from aiaio_core.config import get_settings
from aiaio_core.db.client import get_supabase_client
from fakes import FakeSupabase

TEST_ENV = {
    "SUPABASE_URL": "https://project.supabase.co",
    "SUPABASE_SERVICE_ROLE_KEY": "service-key",
    "SUPABASE_ANON_KEY": "anon-key",
    "DATABASE_URL": "",
    "AWS_REGION": "us-east-1",
    "AWS_ACCESS_KEY_ID": "testing",
    "AWS_SECRET_ACCESS_KEY": "testing",
    "AWS_S3_VIDEO_BUCKET": "test-videos",
    "AWS_S3_ASSET_BUCKET": "test-assets",
    "PUBLIC_VIDEO_BUCKET": "test-public-videos",
    "REMOTION_BUCKET": "remotionlambda-test",
    "CLOUDFRONT_DISTRIBUTION_DOMAIN": "",
    "NEXT_PUBLIC_CLOUDFRONT_DOMAIN": "",
    "OPENAI_API_KEY": "sk-test",
    "OPENAI_MODEL_TEXT": "gpt-4o",
    "LOG_LEVEL": "INFO",
}


@pytest.fixture(autouse=True)
def settings_env(monkeypatch):
    """Every test sees the same configuration regardless of local .env files."""
    for name, value in TEST_ENV.items():
        monkeypatch.setenv(name, value)
    get_settings.cache_clear()
    get_supabase_client.cache_clear()
    yield get_settings()
    get_settings.cache_clear()
    get_supabase_client.cache_clear()


@pytest.fixture
def db():
    return FakeSupabase()


def make_asset(asset_id, **overrides):
    row = {
        "id": asset_id,
        "type": "image",
        "status": "pending",
        "theme": "Bedtime",
        "title": None,
        "file_url": f"https://cdn.example.com/{asset_id}.png",
        "tags": [],
        "created_at": "2024-01-01T00:00:00+00:00",
        "metadata": {},
    }
    row.update(overrides)
    return row


def make_video(video_id, assignments=None, **overrides):
    row = {
        "id": video_id,
        "video_url": f"https://test-public-videos.s3.amazonaws.com/approved-videos/{video_id}.mp4",
        "child_id": None,
        "child_name": None,
        "video_title": f"Video {video_id}",
        "template_type": "lullaby",
        "approval_status": "approved",
        "is_active": True,
        "is_published": False,
        "personalization_level": "generic",
        "child_theme": None,
        "template_data": {},
        "created_at": "2024-01-01T00:00:00+00:00",
    }
    row.update(overrides)
    if assignments is not None:
        row["video_assignments"] = assignments
    return row
