"""
Auth Endpoints
==============
Register (issue an API key), whoami, and logout (revoke the key).
"""

import logging

from fastapi import APIRouter, Depends, Header, HTTPException

from concert_buddy.auth import register_user, require_user, revoke_api_key
from concert_buddy.responses import success_response
from concert_buddy.schemas import UserRegister
from concert_buddy.store import store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth")


@router.post("/register")
async def register(body: UserRegister):
    """Create an account. The API key is only shown once."""
    email = body.email.strip().lower()
    if await store.list("users", where={"email": email}, limit=1):
        logger.warning("Registration rejected, email already in use: %s", email)
        raise HTTPException(status_code=400, detail="User with this email already exists")

    issued = await register_user(email, body.display_name)
    logger.info("Registered user %s", issued["user_id"])

    return success_response({
        **issued,
        "message": "Save this API key - it won't be shown again"
    })


@router.get("/me")
async def me(user: dict = Depends(require_user)):
    return success_response(user)


@router.post("/logout")
async def logout(user: dict = Depends(require_user), x_api_key: str = Header(default=None)):
    """Invalidate the current API key."""
    await revoke_api_key(user["id"], x_api_key)
    return success_response({"message": "Signed out"})
