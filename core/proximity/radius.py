"""
Notification radius preference, persisted in the key-value store.
"""
from __future__ import annotations

import logging
import math
from typing import Optional, Protocol

from core.config import DEFAULT_RADIUS_KM

log = logging.getLogger(__name__)

RADIUS_KEY = "job_radius_km"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


def parse_radius(raw) -> float:
    """
    Parse a user-entered radius in kilometers.

    Raises ValueError unless raw is a finite number greater than zero.
    """
    if isinstance(raw, bool):
        raise ValueError("Please enter a valid number")
    try:
        value = float(str(raw).strip())
    except (TypeError, ValueError):
        raise ValueError("Please enter a valid number")
    if not math.isfinite(value) or value <= 0:
        raise ValueError("Please enter a valid number")
    return value


class RadiusConfig:
    """Reads and writes the user's notification radius (km)."""

    def __init__(self, store: KeyValueStore, default_km: float = DEFAULT_RADIUS_KM):
        self._store = store
        self.default_km = default_km

    def get_radius_km(self) -> float:
        raw = self._store.get(RADIUS_KEY)
        if raw is None:
            return self.default_km
        try:
            return parse_radius(raw)
        except ValueError:
            log.warning("Ignoring unreadable radius preference", extra={"value": raw})
            return self.default_km

    def set_radius_km(self, raw) -> float:
        """Validate and persist a new radius; returns the stored value."""
        value = parse_radius(raw)
        self._store.set(RADIUS_KEY, repr(value))
        log.info("Notification radius updated", extra={"radius_km": value})
        return value


__all__ = ["RADIUS_KEY", "KeyValueStore", "RadiusConfig", "parse_radius"]
