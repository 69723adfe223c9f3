"""
Client for the remote account service.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from core.clients.http import ServiceClient
from core.proximity.errors import FetchFailed, Unauthorized
from core.proximity.models import Identity


class AccountClient(ServiceClient):
    async def resolve_identity(self, token: Optional[str]) -> Identity:
        """Resolve a bearer credential to {user_id, username, email}."""
        if not token:
            raise Unauthorized("Missing bearer credential")
        data = await self._read("/api/auth/user", token=token)
        if not isinstance(data, dict):
            raise FetchFailed("Account service returned an unexpected payload")
        try:
            return Identity.from_dict(data)
        except ValueError as exc:
            raise FetchFailed(str(exc)) from exc

    async def update_account(
        self,
        token: Optional[str],
        *,
        username: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> Identity:
        payload: Dict[str, Any] = {}
        if username is not None:
            payload["username"] = username
        if email is not None:
            payload["email"] = email
        # Empty password means "keep the current one".
        if password:
            payload["password"] = password

        data = await self._mutate("PUT", "/api/auth/user/update", token=token, json=payload)
        try:
            return Identity.from_dict(data)
        except ValueError as exc:
            raise FetchFailed(str(exc)) from exc


__all__ = ["AccountClient"]
