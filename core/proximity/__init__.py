"""
Proximity job-alert engine.

Tracks the user's position, mirrors the remote job directory and schedules one
alert per posting that comes within the configured radius.
"""
from core.proximity.cache import JobCache
from core.proximity.coordinator import RefreshCoordinator, RefreshOutcome, RefreshState, RefreshStatus
from core.proximity.dispatcher import AlertDispatcher
from core.proximity.errors import (
    FetchFailed,
    LocationError,
    LocationPermissionDenied,
    ProviderUnavailable,
    ProximityError,
    RefreshTimeout,
    RejectedByServer,
    SinkUnavailable,
    Unauthorized,
)
from core.proximity.location import LocationProvider, LocationTracker
from core.proximity.matcher import haversine_km, match
from core.proximity.models import (
    Address,
    CacheEntry,
    Creator,
    Identity,
    JobPosting,
    NotificationIntent,
    Position,
)
from core.proximity.radius import RadiusConfig

__all__ = [
    "JobCache",
    "RefreshCoordinator",
    "RefreshOutcome",
    "RefreshStatus",
    "RefreshState",
    "AlertDispatcher",
    "ProximityError",
    "LocationError",
    "LocationPermissionDenied",
    "ProviderUnavailable",
    "FetchFailed",
    "RejectedByServer",
    "SinkUnavailable",
    "RefreshTimeout",
    "Unauthorized",
    "LocationProvider",
    "LocationTracker",
    "haversine_km",
    "match",
    "Address",
    "CacheEntry",
    "Creator",
    "Identity",
    "JobPosting",
    "NotificationIntent",
    "Position",
    "RadiusConfig",
]
