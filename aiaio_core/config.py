# aiaio_core/config.py
from dataclasses import dataclass
from functools import lru_cache
import logging
import os

from dotenv import load_dotenv

"""
aiaio_core.config
=================

Centralized configuration for the admin tooling.

This module defines:
- The configuration structure (`Settings`)
- How values are loaded from the environment (.env.local / .env)
- A single cached accessor (`get_settings`)

Conventions
-----------
- `.env.local` is read first (the web app's file), then `.env`.
  Variables already set in the process environment always win.
- Defaults match the production bucket names so that read-only
  diagnostics work with only Supabase credentials configured.
- A missing credential is not an error here. The error is raised
  where the credential is used (`ConfigurationError`).
"""

load_dotenv(".env.local")
load_dotenv()


def _env(*names: str, default: str = "") -> str:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


@dataclass
class Settings:
    """
    Typed container for the global configuration.

    Attributes
    ----------
    supabase_url:
        Project URL of the hosted database.
    supabase_service_role_key:
        Service-role key. Bypasses row level security; admin scripts use it.
    supabase_anon_key:
        Public key, used by read-only checks that must see what the app sees.
    database_url:
        Direct Postgres connection string, only needed by the schema tools.
    video_bucket / asset_bucket:
        Private buckets for uploaded videos and generated assets.
    public_video_bucket:
        Bucket that serves approved videos to the playback pages.
    render_bucket:
        Bucket where the render service writes its output.
    cloudfront_domain:
        CDN domain in front of `public_video_bucket`. Empty disables rewriting.
    """

    # Supabase
    supabase_url: str
    supabase_service_role_key: str
    supabase_anon_key: str
    database_url: str

    # AWS
    aws_region: str = "us-east-1"
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    video_bucket: str = "aiaio-videos"
    asset_bucket: str = "aiaio-assets"
    public_video_bucket: str = "aiaio3-public-videos"
    render_bucket: str = "remotionlambda-useast1-3pwoq46nsa"
    cloudfront_domain: str = ""

    # OpenAI
    openai_api_key: str = ""
    openai_model_text: str = "gpt-4o"

    # Misc
    app_base_url: str = "http://localhost:3000"
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """
    Return the single cached `Settings` instance.

    Environment variables
    ---------------------
    - SUPABASE_URL (or NEXT_PUBLIC_SUPABASE_URL)
    - SUPABASE_SERVICE_ROLE_KEY
    - SUPABASE_ANON_KEY (or NEXT_PUBLIC_SUPABASE_ANON_KEY)
    - DATABASE_URL
    - AWS_REGION, AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY
    - AWS_S3_VIDEO_BUCKET, AWS_S3_ASSET_BUCKET, PUBLIC_VIDEO_BUCKET, REMOTION_BUCKET
    - CLOUDFRONT_DISTRIBUTION_DOMAIN (or NEXT_PUBLIC_CLOUDFRONT_DOMAIN)
    - OPENAI_API_KEY, OPENAI_MODEL_TEXT
    - APP_BASE_URL, LOG_LEVEL
    """
    return Settings(
        supabase_url=_env("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL"),
        supabase_service_role_key=_env("SUPABASE_SERVICE_ROLE_KEY"),
        supabase_anon_key=_env("SUPABASE_ANON_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY"),
        database_url=_env("DATABASE_URL"),
        aws_region=_env("AWS_REGION", default="us-east-1"),
        aws_access_key_id=_env("AWS_ACCESS_KEY_ID"),
        aws_secret_access_key=_env("AWS_SECRET_ACCESS_KEY"),
        video_bucket=_env("AWS_S3_VIDEO_BUCKET", default="aiaio-videos"),
        asset_bucket=_env("AWS_S3_ASSET_BUCKET", default="aiaio-assets"),
        public_video_bucket=_env("PUBLIC_VIDEO_BUCKET", default="aiaio3-public-videos"),
        render_bucket=_env("REMOTION_BUCKET", default="remotionlambda-useast1-3pwoq46nsa"),
        cloudfront_domain=_env("CLOUDFRONT_DISTRIBUTION_DOMAIN", "NEXT_PUBLIC_CLOUDFRONT_DOMAIN"),
        openai_api_key=_env("OPENAI_API_KEY"),
        openai_model_text=_env("OPENAI_MODEL_TEXT", default="gpt-4o"),
        app_base_url=_env("APP_BASE_URL", default="http://localhost:3000"),
        log_level=_env("LOG_LEVEL", default="INFO").upper(),
    )


def configure_logging(level: str | None = None) -> None:
    """Apply the shared log format. Safe to call more than once."""
    level_name = (level or get_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
