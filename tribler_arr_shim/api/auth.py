"""
qBittorrent authentication endpoints.

Sonarr/Radarr log in before anything else and replay the SID cookie. The
shim hands out a cookie so that handshake succeeds; credentials are not
checked and the cookie is not enforced.
"""
import secrets
from typing import Optional

from fastapi import APIRouter, Form
from fastapi.responses import PlainTextResponse
from loguru import logger

from tribler_arr_shim.constants import SESSION_COOKIE_NAME

router = APIRouter(prefix="/api/v2/auth", tags=["auth"])


@router.get("/login")
@router.post("/login")
async def login(username: Optional[str] = Form(None), password: Optional[str] = Form(None)):
    """Issue a session cookie."""
    sid = secrets.token_urlsafe(24)
    logger.debug(f"Login from {username or '<anonymous>'}")

    response = PlainTextResponse("Ok.")
    response.set_cookie(SESSION_COOKIE_NAME, sid, path="/", httponly=True)
    return response


@router.get("/logout")
@router.post("/logout")
async def logout():
    response = PlainTextResponse("Ok.")
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
    return response
