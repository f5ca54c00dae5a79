"""API routes."""

from . import admin, assets, dashboard, prompts, storage, videos

__all__ = ["admin", "assets", "dashboard", "prompts", "storage", "videos"]
