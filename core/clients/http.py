"""
Shared httpx plumbing for the remote job directory and account service.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from core.config import API_BASE_URL, HTTP_CONNECT_TIMEOUT, HTTP_READ_TIMEOUT
from core.proximity.errors import FetchFailed, RejectedByServer, Unauthorized

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {"Accept": "application/json"}


def build_client(
    base_url: str = API_BASE_URL,
    *,
    connect_timeout: float = HTTP_CONNECT_TIMEOUT,
    read_timeout: float = HTTP_READ_TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    timeout = httpx.Timeout(
        connect=connect_timeout,
        read=read_timeout,
        write=read_timeout,
        pool=connect_timeout,
    )
    return httpx.AsyncClient(
        base_url=base_url,
        headers=DEFAULT_HEADERS,
        timeout=timeout,
        transport=transport,
    )


def auth_headers(token: Optional[str]) -> dict[str, str]:
    if not token:
        return {}
    return {"Authorization": f"Bearer {token}"}


def server_message(response: httpx.Response) -> str:
    """Best-effort human message from an error response."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        for key in ("message", "detail", "error"):
            value = data.get(key)
            if isinstance(value, str) and value.strip():
                return value
    text = (response.text or "").strip()
    return text or f"HTTP {response.status_code}"


class ServiceClient:
    """Base for the remote service clients; owns one AsyncClient."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None, *, base_url: str = API_BASE_URL):
        self._client = client or build_client(base_url)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, *, token: Optional[str] = None, json: Any = None) -> httpx.Response:
        try:
            return await self._client.request(method, url, headers=auth_headers(token), json=json)
        except httpx.HTTPError as exc:
            logger.debug("Request error for %s %s: %s", method, url, exc)
            raise FetchFailed(f"{method} {url} failed: {exc}") from exc

    async def _read(self, url: str, *, token: Optional[str] = None) -> Any:
        """GET url and return decoded JSON; 401/403 -> Unauthorized, anything else non-2xx -> FetchFailed."""
        response = await self._request("GET", url, token=token)
        if response.status_code in (401, 403):
            raise Unauthorized(server_message(response))
        if response.status_code >= 400:
            raise FetchFailed(f"GET {url} returned {response.status_code}: {server_message(response)}")
        try:
            return response.json()
        except ValueError as exc:
            raise FetchFailed(f"GET {url} returned invalid JSON") from exc

    async def _mutate(self, method: str, url: str, *, token: Optional[str], json: Any = None) -> Any:
        """Send a write; 4xx validation errors surface the server message verbatim."""
        response = await self._request(method, url, token=token, json=json)
        if response.status_code in (401, 403):
            raise Unauthorized(server_message(response))
        if 400 <= response.status_code < 500:
            raise RejectedByServer(server_message(response), status_code=response.status_code)
        if response.status_code >= 500:
            raise FetchFailed(f"{method} {url} returned {response.status_code}: {server_message(response)}")
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {"message": response.text}


__all__ = ["build_client", "auth_headers", "server_message", "ServiceClient"]
