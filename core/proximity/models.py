"""
Value objects shared by the proximity alert engine.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


def _first(raw: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return default


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True, slots=True)
class Position:
    """A device location captured for one refresh cycle."""

    latitude: float
    longitude: float
    captured_at: datetime


@dataclass(frozen=True, slots=True)
class Address:
    street: str = ""
    city: str = ""
    province: str = ""
    postal_code: str = ""

    @classmethod
    def from_dict(cls, raw: Optional[Dict[str, Any]]) -> "Address":
        raw = raw or {}
        return cls(
            street=str(_first(raw, "street", default="")),
            city=str(_first(raw, "city", default="")),
            province=str(_first(raw, "province", default="")),
            postal_code=str(_first(raw, "postalCode", "postal_code", default="")),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "street": self.street,
            "city": self.city,
            "province": self.province,
            "postalCode": self.postal_code,
        }


@dataclass(frozen=True, slots=True)
class Creator:
    user_id: str = ""
    email: str = ""

    @classmethod
    def from_dict(cls, raw: Optional[Dict[str, Any]]) -> "Creator":
        raw = raw or {}
        return cls(
            user_id=str(_first(raw, "userId", "user_id", "_id", default="")),
            email=str(_first(raw, "email", default="")),
        )

    def to_dict(self) -> Dict[str, str]:
        return {"userId": self.user_id, "email": self.email}


@dataclass(frozen=True, slots=True)
class JobPosting:
    """
    Read-only mirror of a posting held by the remote job directory.

    Latitude and longitude are None when the directory has no coordinates
    for the posting.
    """

    id: str
    title: str = ""
    employer_name: str = ""
    job_type: str = ""
    description: str = ""
    employer_email: str = ""
    employer_contact: str = ""
    number_of_positions: int = 1
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Address = field(default_factory=Address)
    created_by: Creator = field(default_factory=Creator)

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def coordinates(self) -> tuple[Optional[float], Optional[float]]:
        return (self.latitude, self.longitude)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "JobPosting":
        """Build a posting from a directory JSON object (camelCase or snake_case keys)."""
        job_id = _first(raw, "id", "_id")
        if job_id is None or str(job_id).strip() == "":
            raise ValueError("job posting is missing an id")

        positions = _first(raw, "numberOfPositions", "number_of_positions", default=1)
        try:
            positions = max(0, int(positions))
        except (TypeError, ValueError):
            positions = 1

        return cls(
            id=str(job_id),
            title=str(_first(raw, "title", default="")),
            employer_name=str(_first(raw, "employerName", "employer_name", default="")),
            job_type=str(_first(raw, "jobType", "job_type", default="")),
            description=str(_first(raw, "description", default="")),
            employer_email=str(_first(raw, "employerEmail", "employer_email", default="")),
            employer_contact=str(_first(raw, "employerContact", "employer_contact", default="")),
            number_of_positions=positions,
            latitude=_optional_float(_first(raw, "latitude", "lat")),
            longitude=_optional_float(_first(raw, "longitude", "lng", "lon")),
            address=Address.from_dict(_first(raw, "address")),
            created_by=Creator.from_dict(_first(raw, "createdBy", "created_by")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "employerName": self.employer_name,
            "jobType": self.job_type,
            "description": self.description,
            "employerEmail": self.employer_email,
            "employerContact": self.employer_contact,
            "numberOfPositions": self.number_of_positions,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "address": self.address.to_dict(),
            "createdBy": self.created_by.to_dict(),
        }


@dataclass(slots=True)
class CacheEntry:
    posting: JobPosting
    notified: bool = False


@dataclass(frozen=True, slots=True)
class NotificationIntent:
    """A scheduled alert handed to the notification sink; not retained after dispatch."""

    title: str
    body: str
    payload: Dict[str, str]
    deliver_at: datetime

    @property
    def job_id(self) -> str:
        return self.payload["jobId"]


@dataclass(frozen=True, slots=True)
class Identity:
    user_id: str
    username: str
    email: str

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Identity":
        user_id = _first(raw, "user_id", "userId", "id", "_id")
        if user_id is None:
            raise ValueError("account response is missing a user id")
        return cls(
            user_id=str(user_id),
            username=str(_first(raw, "username", default="")),
            email=str(_first(raw, "email", default="")),
        )


__all__ = [
    "Position",
    "Address",
    "Creator",
    "JobPosting",
    "CacheEntry",
    "NotificationIntent",
    "Identity",
]
