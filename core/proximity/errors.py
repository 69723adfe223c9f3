"""
Errors raised by the proximity alert engine and its collaborators.

All of them are scoped to a single refresh cycle or request; none is fatal to
the process.
"""
from __future__ import annotations


class ProximityError(RuntimeError):
    code = "proximity_error"


class LocationError(ProximityError):
    code = "location_error"


class LocationPermissionDenied(LocationError):
    code = "permission_denied"

    def __init__(self, message: str = "Location permission was denied"):
        super().__init__(message)


class ProviderUnavailable(LocationError):
    code = "provider_unavailable"


class FetchFailed(ProximityError):
    code = "fetch_failed"


class RejectedByServer(ProximityError):
    """A posting mutation the directory refused; message is the server's, verbatim."""

    code = "rejected_by_server"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SinkUnavailable(ProximityError):
    code = "sink_unavailable"


class RefreshTimeout(ProximityError):
    code = "timeout"


class Unauthorized(ProximityError):
    code = "unauthorized"

    def __init__(self, message: str = "Credential was rejected by the account service"):
        super().__init__(message)


__all__ = [
    "ProximityError",
    "LocationError",
    "LocationPermissionDenied",
    "ProviderUnavailable",
    "FetchFailed",
    "RejectedByServer",
    "SinkUnavailable",
    "RefreshTimeout",
    "Unauthorized",
]
