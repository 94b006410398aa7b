"""Great-circle distance between two coordinates."""

from __future__ import annotations

import math
from typing import Protocol, Union

# Mean Earth radius in kilometers (for Haversine).
EARTH_RADIUS_KM = 6371.0


class HasCoordinates(Protocol):
    latitude: float
    longitude: float


Coordinate = Union[HasCoordinates, tuple[float, float]]


def _lat_lon(point: Coordinate) -> tuple[float, float]:
    if isinstance(point, tuple):
        return point[0], point[1]
    return point.latitude, point.longitude


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometers between two points in degrees."""
    rlat1, rlat2 = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = math.sin(dlat / 2) ** 2 + math.cos(rlat1) * math.cos(rlat2) * math.sin(dlon / 2) ** 2
    # Rounding can push ``a`` a hair past 1 for antipodal points.
    a = min(1.0, a)
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Distance in kilometers between two fixes or (lat, lon) pairs."""
    lat1, lon1 = _lat_lon(a)
    lat2, lon2 = _lat_lon(b)
    return haversine_km(lat1, lon1, lat2, lon2)
