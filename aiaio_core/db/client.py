"""
aiaio_core.db.client
====================

Access to the hosted database through the Supabase REST client.

- `get_supabase_client()` creates (once per role) the client.
- `execute()` runs a query builder and turns client errors into `QueryError`,
  so callers only ever deal with plain lists of dicts.

Admin scripts use the service-role key. Checks that must reproduce what the
web app sees (row level security applies) pass `admin=False` to get the
anon-key client.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional

from postgrest.exceptions import APIError
from supabase import Client, create_client

from ..config import get_settings
from ..errors import ConfigurationError, QueryError

logger = logging.getLogger(__name__)


@lru_cache
def get_supabase_client(admin: bool = True) -> Client:
    """
    Return a cached Supabase client.

    Parameters
    ----------
    admin:
        True for the service-role client, False for the anon client.

    Raises
    ------
    ConfigurationError
        If the URL or the requested key is not configured.
    """
    settings = get_settings()
    key = settings.supabase_service_role_key if admin else settings.supabase_anon_key

    if not settings.supabase_url or not key:
        missing = "SUPABASE_SERVICE_ROLE_KEY" if admin else "SUPABASE_ANON_KEY"
        raise ConfigurationError(
            f"Missing Supabase credentials: SUPABASE_URL and {missing} must be set in .env.local"
        )

    logger.debug("Creating Supabase client (admin=%s)", admin)
    return create_client(settings.supabase_url, key)


def execute(query: Any, table: str) -> List[Dict[str, Any]]:
    """
    Execute a postgrest query builder and return its rows.

    Single-row responses are normalized to a one-element list and empty
    responses to an empty list.

    Raises
    ------
    QueryError
        If the client reports an error.
    """
    try:
        response = query.execute()
    except APIError as e:
        message = getattr(e, "message", None) or str(e)
        logger.error("Query on %s failed: %s", table, message)
        raise QueryError(table, message) from e

    data = getattr(response, "data", None)
    if data is None:
        return []
    if isinstance(data, dict):
        return [data]
    return list(data)


def first(rows: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    return rows[0] if rows else None
