"""
Radius matching using great-circle (haversine) distance.
"""
from __future__ import annotations

import math
from typing import List, Sequence

from core.proximity.models import JobPosting, Position

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometers between two (lat, lon) points in degrees."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Rounding can push a slightly above 1 for antipodal points.
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def match(origin: Position, radius_km: float, postings: Sequence[JobPosting]) -> List[JobPosting]:
    """
    Return the postings within radius_km of origin, boundary inclusive, in input order.

    A radius <= 0 matches nothing. Postings without coordinates never match.
    """
    if not postings or not math.isfinite(radius_km) or radius_km <= 0:
        return []

    matched: List[JobPosting] = []
    for posting in postings:
        if not posting.has_coordinates:
            continue
        distance = haversine_km(origin.latitude, origin.longitude, posting.latitude, posting.longitude)
        if distance <= radius_km:
            matched.append(posting)
    return matched


__all__ = ["EARTH_RADIUS_KM", "haversine_km", "match"]
