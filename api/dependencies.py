"""
FastAPI dependencies for data access and authorization.

- `get_supabase` / `get_s3`: clients for the hosted database and S3
- `get_current_user_id`: the `sub` claim of the bearer JWT
- `require_admin`: the `users` row of the caller, which must have role `admin`
- `http_error`: maps core exceptions to HTTP errors
"""

import logging
from typing import Any, Dict, Optional

import jwt  # pyjwt
from fastapi import Depends, Header, HTTPException

from aiaio_core.db import repository as repo
from aiaio_core.db.client import get_supabase_client
from aiaio_core.errors import AdminError, ConfigurationError, RecordNotFound, ValidationFailed
from aiaio_core.storage.s3 import create_s3_client

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


def http_error(error: AdminError) -> HTTPException:
    if isinstance(error, RecordNotFound):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, ValidationFailed):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, ConfigurationError):
        return HTTPException(status_code=500, detail=f"Server misconfigured: {error}")
    return HTTPException(status_code=500, detail=str(error))


def get_supabase():
    try:
        return get_supabase_client()
    except ConfigurationError as e:
        raise http_error(e) from e


def get_s3():
    return create_s3_client()


async def get_current_user_id(
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> str:
    """
    Read the user id from the bearer token.

    The signature is not verified here; tokens are issued and checked by
    Supabase Auth in front of this API. Only the `sub` claim is used.
    """
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing Authorization header")

    if not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=401,
            detail="Invalid Authorization header format. Expected 'Bearer <token>'",
        )

    token = authorization.replace("Bearer ", "", 1).strip()
    try:
        decoded = jwt.decode(token, options={"verify_signature": False})
    except jwt.DecodeError as e:
        logger.warning("Could not decode JWT: %s", e)
        raise HTTPException(status_code=401, detail=f"Invalid token format: {e}") from e

    user_id = decoded.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token: no user ID found")
    return user_id


async def require_admin(
    user_id: str = Depends(get_current_user_id),
    client=Depends(get_supabase),
) -> Dict[str, Any]:
    try:
        user = repo.get_user(client, user_id)
    except AdminError as e:
        raise http_error(e) from e

    if not user or user.get("role") != ADMIN_ROLE:
        logger.warning("User %s denied admin access", user_id)
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
