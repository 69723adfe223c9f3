"""
Helpers for the bearer credential forwarded to the account service.

Sessions live in the account service; this app only passes the token along.
"""
from __future__ import annotations

from typing import Optional

from fastapi import Request

from app.engine import get_engine
from core.proximity import Identity


def get_bearer_token(request: Request) -> Optional[str]:
    """Return the token from `Authorization: Bearer <token>`, or None."""
    header = request.headers.get("authorization") or ""
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


async def get_current_identity(request: Request) -> tuple[Identity, Optional[str]]:
    """
    Resolve the caller through the account service.

    Returns (identity, token); raises Unauthorized when the token is missing or rejected.
    """
    token = get_bearer_token(request)
    identity = await get_engine().accounts.resolve_identity(token)
    return identity, token
