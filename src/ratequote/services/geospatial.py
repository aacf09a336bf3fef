"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Iterator

from shapely.geometry import Point, box
from shapely.geometry.base import BaseGeometry

EARTH_RADIUS_MILES = 3959.0
# Typical ratio of road distance to great-circle distance for US freight lanes.
ROAD_FACTOR = 1.3
AVERAGE_SPEED_MPH = 50.0


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def road_distance_estimate(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Straight-line distance inflated to approximate road miles."""
    return haversine_miles(lat1, lon1, lat2, lon2) * ROAD_FACTOR


def interpolate(
    lat1: float, lon1: float, lat2: float, lon2: float, step_miles: float = 10.0
) -> Iterator[tuple[float, float]]:
    """Yield evenly spaced (lat, lon) points from start to end, both inclusive."""

    distance = haversine_miles(lat1, lon1, lat2, lon2)
    steps = max(1, int(math.ceil(distance / step_miles)))
    for index in range(steps + 1):
        fraction = index / steps
        yield lat1 + (lat2 - lat1) * fraction, lon1 + (lon2 - lon1) * fraction


def bounding_box(lat_min: float, lat_max: float, lon_min: float, lon_max: float) -> BaseGeometry:
    """Polygon for a lat/lon bounding box in shapely's (x=lon, y=lat) order."""
    return box(lon_min, lat_min, lon_max, lat_max)


def contains(geometry: BaseGeometry, lat: float, lon: float) -> bool:
    """Return True if the point lies inside or on the boundary of ``geometry``."""
    return geometry.covers(Point(lon, lat))
