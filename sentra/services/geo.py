# sentra/services/geo.py
from __future__ import annotations

import math
from typing import Optional

from ..models.incident import Location

EARTH_RADIUS_KM = 6371.0

# (name, min_lat, max_lat, min_lng, max_lng); first match wins
REGIONS: list[tuple[str, float, float, float, float]] = [
    ("Delhi NCR", 28.4, 28.9, 76.8, 77.4),
    ("Mumbai Metropolitan", 18.8, 19.4, 72.7, 73.1),
    ("Bengaluru Urban", 12.8, 13.2, 77.4, 77.8),
    ("Chennai City", 12.9, 13.3, 80.1, 80.4),
    ("Kolkata City", 22.4, 22.7, 88.2, 88.5),
    ("Hyderabad Region", 17.2, 17.6, 78.2, 78.7),
    ("Pune City", 18.4, 18.7, 73.7, 74.0),
]
FALLBACK_REGION = "Regional Jurisdiction"
UNKNOWN_REGION = "Unknown Region"


def distance_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle (haversine) distance in km."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def region_label(location: Optional[Location]) -> str:
    """
    Coarse jurisdiction name for display. Never returns raw coordinates.
    """
    if location is None:
        return UNKNOWN_REGION
    for name, min_lat, max_lat, min_lng, max_lng in REGIONS:
        if min_lat <= location.lat <= max_lat and min_lng <= location.lng <= max_lng:
            return name
    return FALLBACK_REGION
