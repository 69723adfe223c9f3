"""
Location provider fed by device reports.

The device posts its coordinates and its permission answer over HTTP; the
tracker reads them back through the LocationProvider interface.
"""
from __future__ import annotations

import threading
from datetime import datetime, timedelta
from typing import Optional

from core.config import LOCATION_MAX_AGE_SECONDS
from core.proximity.errors import ProviderUnavailable
from core.proximity.models import Position


def validate_coordinates(latitude, longitude) -> tuple[float, float]:
    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError):
        raise ValueError("latitude and longitude must be numbers")
    if not -90.0 <= lat <= 90.0:
        raise ValueError("latitude must be between -90 and 90")
    if not -180.0 <= lon <= 180.0:
        raise ValueError("longitude must be between -180 and 180")
    return lat, lon


class ReportedLocationProvider:
    def __init__(self, max_age_seconds: float = LOCATION_MAX_AGE_SECONDS, clock=datetime.utcnow):
        self._lock = threading.Lock()
        self._latest: Optional[Position] = None
        self._granted: Optional[bool] = None
        self._max_age = timedelta(seconds=max_age_seconds)
        self._clock = clock

    @property
    def granted(self) -> Optional[bool]:
        return self._granted

    def set_permission(self, granted: bool) -> None:
        with self._lock:
            self._granted = bool(granted)
            if not self._granted:
                self._latest = None

    def report(self, latitude, longitude, captured_at: Optional[datetime] = None) -> Position:
        lat, lon = validate_coordinates(latitude, longitude)
        position = Position(latitude=lat, longitude=lon, captured_at=captured_at or self._clock())
        with self._lock:
            self._latest = position
        return position

    async def request_permission(self) -> bool:
        return self._granted is True

    async def get_position(self) -> Position:
        with self._lock:
            position = self._latest
        if position is None:
            raise ProviderUnavailable("No location has been reported yet")
        if self._clock() - position.captured_at > self._max_age:
            raise ProviderUnavailable("Last reported location is too old")
        return position


__all__ = ["ReportedLocationProvider", "validate_coordinates"]
