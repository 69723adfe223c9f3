"""
Location tracking on top of a pluggable location provider.
"""
from __future__ import annotations

import logging
from typing import Optional, Protocol

from core.proximity.errors import LocationPermissionDenied, ProviderUnavailable
from core.proximity.models import Position

log = logging.getLogger(__name__)


class LocationProvider(Protocol):
    async def request_permission(self) -> bool:
        ...

    async def get_position(self) -> Position:
        ...


class LocationTracker:
    """
    Produces the current position on demand.

    Permission is requested at most once per process. A denial is remembered
    and short-circuits later calls until reset_permission() is called after an
    external re-grant. Positions are never cached.
    """

    def __init__(self, provider: LocationProvider):
        self._provider = provider
        self._permission: Optional[bool] = None

    @property
    def permission(self) -> Optional[bool]:
        return self._permission

    def reset_permission(self) -> None:
        self._permission = None

    def deny_permission(self) -> None:
        """Record a revocation reported outside of acquire()."""
        self._permission = False

    async def acquire(self) -> Position:
        if self._permission is None:
            self._permission = bool(await self._provider.request_permission())
            log.info("Location permission answered", extra={"granted": self._permission})

        if not self._permission:
            raise LocationPermissionDenied()

        try:
            return await self._provider.get_position()
        except ProviderUnavailable:
            raise
        except LocationPermissionDenied:
            self._permission = False
            raise
        except (OSError, ValueError) as exc:
            raise ProviderUnavailable(str(exc)) from exc


__all__ = ["LocationProvider", "LocationTracker"]
