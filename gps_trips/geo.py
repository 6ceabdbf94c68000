"""Geospatial utilities (no external dependencies)."""

from __future__ import annotations

import math
from typing import Final, Protocol

EARTH_RADIUS_KM: Final[float] = 6371.0088  # mean Earth radius


class HasLatLon(Protocol):
    """Anything with read-only `lat`/`lon` in degrees, such as a Point."""

    @property
    def lat(self) -> float: ...

    @property
    def lon(self) -> float: ...


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute Haversine distance in kilometers between two lat/lon points.

    Args:
        lat1: Latitude 1 in degrees.
        lon1: Longitude 1 in degrees.
        lat2: Latitude 2 in degrees.
        lon2: Longitude 2 in degrees.

    Returns:
        Distance in kilometers (never negative).
    """

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    # rounding can push `a` slightly outside [0, 1] near antipodes
    a = min(1.0, max(0.0, a))
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_KM * c


def point_distance_km(p1: HasLatLon, p2: HasLatLon) -> float:
    """Distance between two objects exposing `lat`/`lon`."""

    return haversine_km(p1.lat, p1.lon, p2.lat, p2.lon)
