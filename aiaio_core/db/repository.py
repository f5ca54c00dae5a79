"""
Query helpers for the tables the admin tooling touches.

Every function takes the Supabase client as its first argument so that
scripts, API routes and tests can hand in whichever client they hold.
Rows are returned as plain dicts; wrap them with `domain_models` when
attribute access is more convenient.
"""

from __future__ import annotations

from datetime import datetime, UTC
from typing import Any, Dict, Iterable, List, Optional

from ..errors import RecordNotFound
from .client import execute, first

ASSETS = "assets"
CHILDREN = "children"
USERS = "users"
APPROVED_VIDEOS = "child_approved_videos"
ASSIGNMENTS = "video_assignments"
PLAYLISTS = "child_playlists"
RENDER_JOBS = "video_generation_jobs"
PROMPTS = "prompts"


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


# ============================================================
# Assets
# ============================================================

def get_asset(client, asset_id: str, columns: str = "*") -> Dict[str, Any]:
    rows = execute(
        client.table(ASSETS).select(columns).eq("id", asset_id).limit(1),
        ASSETS,
    )
    row = first(rows)
    if row is None:
        raise RecordNotFound(ASSETS, asset_id)
    return row


def list_assets(
    client,
    status: Optional[str] = None,
    asset_type: Optional[str] = None,
    template: Optional[str] = None,
    child_name: Optional[str] = None,
    target_letter: Optional[str] = None,
    image_type: Optional[str] = None,
    audio_class: Optional[str] = None,
    theme_like: Optional[str] = None,
    file_url_like: Optional[str] = None,
    limit: Optional[int] = None,
    offset: int = 0,
    newest_first: bool = True,
) -> List[Dict[str, Any]]:
    """
    List assets filtered on columns and on metadata JSON fields.

    Metadata filters compare `metadata->>field` as text, the same way the
    web app queries them.
    """
    query = client.table(ASSETS).select("*")

    if status:
        query = query.eq("status", status)
    if asset_type:
        query = query.eq("type", asset_type)
    if template:
        query = query.eq("metadata->>template", template)
    if child_name:
        query = query.eq("metadata->>child_name", child_name)
    if target_letter:
        query = query.eq("metadata->>targetLetter", target_letter)
    if image_type:
        query = query.eq("metadata->>imageType", image_type)
    if audio_class:
        query = query.eq("metadata->>audio_class", audio_class)
    if theme_like:
        query = query.like("theme", theme_like)
    if file_url_like:
        query = query.like("file_url", file_url_like)

    query = query.order("created_at", desc=newest_first)
    if limit is not None:
        query = query.range(offset, offset + limit - 1)

    return execute(query, ASSETS)


def update_asset(client, asset_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    rows = execute(client.table(ASSETS).update(fields).eq("id", asset_id), ASSETS)
    row = first(rows)
    if row is None:
        raise RecordNotFound(ASSETS, asset_id)
    return row


# ============================================================
# Children / users
# ============================================================

def list_children(client, columns: str = "*", order_by: str = "name") -> List[Dict[str, Any]]:
    return execute(client.table(CHILDREN).select(columns).order(order_by), CHILDREN)


def get_child(client, child_id: str) -> Dict[str, Any]:
    row = first(execute(client.table(CHILDREN).select("*").eq("id", child_id).limit(1), CHILDREN))
    if row is None:
        raise RecordNotFound(CHILDREN, child_id)
    return row


def delete_children(client, ids: Iterable[str]) -> int:
    ids = list(ids)
    if not ids:
        return 0
    execute(client.table(CHILDREN).delete().in_("id", ids), CHILDREN)
    return len(ids)


def list_user_ids(client) -> List[str]:
    return [row["id"] for row in execute(client.table(USERS).select("id"), USERS)]


def get_user(client, user_id: str) -> Optional[Dict[str, Any]]:
    return first(execute(client.table(USERS).select("*").eq("id", user_id).limit(1), USERS))


# ============================================================
# Approved videos / assignments / playlists
# ============================================================

def list_approved_videos(
    client,
    statuses: Optional[List[str]] = None,
    template_type: Optional[str] = None,
    with_assignments: bool = False,
    active_only: bool = False,
    columns: str = "*",
) -> List[Dict[str, Any]]:
    select = f"{columns}, {ASSIGNMENTS}(*)" if with_assignments else columns
    query = client.table(APPROVED_VIDEOS).select(select)

    if statuses:
        query = query.in_("approval_status", statuses)
    if template_type:
        query = query.eq("template_type", template_type)
    if active_only:
        query = query.eq("is_active", True)

    return execute(query.order("created_at", desc=True), APPROVED_VIDEOS)


def get_approved_video(client, video_id: str) -> Dict[str, Any]:
    rows = execute(
        client.table(APPROVED_VIDEOS).select("*").eq("id", video_id).limit(1),
        APPROVED_VIDEOS,
    )
    row = first(rows)
    if row is None:
        raise RecordNotFound(APPROVED_VIDEOS, video_id)
    return row


def update_approved_video(client, video_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    rows = execute(
        client.table(APPROVED_VIDEOS).update(fields).eq("id", video_id),
        APPROVED_VIDEOS,
    )
    row = first(rows)
    if row is None:
        raise RecordNotFound(APPROVED_VIDEOS, video_id)
    return row


def list_assignments(
    client,
    assignment_type: Optional[str] = None,
    general_only: bool = False,
    status: Optional[str] = None,
    limit: Optional[int] = None,
    with_video: bool = False,
) -> List[Dict[str, Any]]:
    select = (
        f"*, {APPROVED_VIDEOS}(video_title, child_name, template_type, template_data)"
        if with_video
        else "*"
    )
    query = client.table(ASSIGNMENTS).select(select)

    if assignment_type:
        query = query.eq("assignment_type", assignment_type)
    if general_only:
        query = query.is_("child_id", "null")
    if status:
        query = query.eq("status", status)

    query = query.order("created_at", desc=True)
    if limit is not None:
        query = query.limit(limit)

    return execute(query, ASSIGNMENTS)


def upsert_playlist(client, child_id: str, videos: List[Dict[str, Any]]) -> None:
    execute(
        client.table(PLAYLISTS).upsert(
            {"child_id": child_id, "videos": videos, "updated_at": utc_now_iso()}
        ),
        PLAYLISTS,
    )


# ============================================================
# Render jobs / prompts
# ============================================================

def find_job_by_render_id(client, render_id: str) -> Dict[str, Any]:
    row = first(
        execute(
            client.table(RENDER_JOBS).select("*").eq("lambda_request_id", render_id).limit(1),
            RENDER_JOBS,
        )
    )
    if row is None:
        raise RecordNotFound(RENDER_JOBS, render_id)
    return row


def latest_job(client) -> Dict[str, Any]:
    row = first(
        execute(
            client.table(RENDER_JOBS).select("*").order("created_at", desc=True).limit(1),
            RENDER_JOBS,
        )
    )
    if row is None:
        raise RecordNotFound(RENDER_JOBS, "latest")
    return row


def update_job(client, job_id: str, fields: Dict[str, Any]) -> None:
    execute(client.table(RENDER_JOBS).update(fields).eq("id", job_id), RENDER_JOBS)


def insert_prompts(client, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    if not rows:
        return []
    return execute(client.table(PROMPTS).insert(rows), PROMPTS)
