"""
API Key Authentication
======================
FastAPI dependency that resolves the X-API-Key header to the current user.
Registering issues a key (login); logout rotates it so the old key stops working.
"""

import secrets
import threading
import uuid
from typing import Any, Dict, Optional

import sqlalchemy
from fastapi import Header, HTTPException, Query

from cachetools import TTLCache

from concert_buddy.config import AUTH_ENABLED
from concert_buddy.database import database, users
from concert_buddy.helpers import utcnow
from concert_buddy.store import store

DEV_USER = {"id": "__dev__", "email": "dev@localhost", "display_name": "Dev User"}

_cache: TTLCache = TTLCache(maxsize=1000, ttl=300)
_lock = threading.Lock()


def _check_cache(api_key: str) -> Optional[Dict[str, Any]]:
    with _lock:
        return _cache.get(api_key)


def _set_cache(api_key: str, user: Dict[str, Any]):
    with _lock:
        _cache[api_key] = user


def _evict_cache(api_key: str):
    with _lock:
        _cache.pop(api_key, None)


def public_user(row) -> Dict[str, Any]:
    return {"id": row["id"], "email": row["email"], "display_name": row["display_name"]}


async def lookup_user(api_key: Optional[str]) -> Optional[Dict[str, Any]]:
    """Return the user owning `api_key`, or None."""
    if not AUTH_ENABLED:
        return DEV_USER
    if not api_key:
        return None

    cached = _check_cache(api_key)
    if cached is not None:
        return cached

    # Cache miss, query DB
    row = await database.fetch_one(
        sqlalchemy.select(users.c.id, users.c.email, users.c.display_name).where(users.c.api_key == api_key)
    )
    if not row:
        return None

    user = public_user(row)
    _set_cache(api_key, user)
    return user


async def require_user(x_api_key: str = Header(default=None)) -> Dict[str, Any]:
    """
    Validate API key and return the current user.
    Raises 401 if key is missing or invalid.
    When AUTH_ENABLED=False, returns a dev user for local testing.
    """
    user = await lookup_user(x_api_key)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid or missing API key")
    return user


async def require_ws_user(api_key: str = Query(default=None)) -> Optional[Dict[str, Any]]:
    """WebSocket variant: browsers cannot set headers, so the key comes as a query param."""
    return await lookup_user(api_key)


async def register_user(email: str, display_name: Optional[str] = None) -> Dict[str, Any]:
    """Create a user and issue its first API key."""
    user_id = uuid.uuid4().hex[:16]
    api_key = secrets.token_hex(32)
    await store.create("users", {
        "id": user_id,
        "email": email,
        "display_name": display_name,
        "api_key": api_key,
        "created_at": utcnow(),
    })
    return {"user_id": user_id, "api_key": api_key}


async def revoke_api_key(user_id: str, api_key: Optional[str]) -> None:
    """Logout: replace the user's key with a fresh unpublished one."""
    if api_key:
        _evict_cache(api_key)
    await database.execute(
        users.update().where(users.c.id == user_id).values(api_key=secrets.token_hex(32))
    )
