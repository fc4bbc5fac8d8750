from __future__ import annotations

from math import asin, atan2, cos, degrees, radians, sin, sqrt
from typing import Protocol

"""
Geospatial primitives.

Pure spherical math used by kinematics derivation: great-circle distance, initial
bearing and circular heading difference. Inputs are assumed finite and in range;
validation happens at the ingestion boundary.
"""

EARTH_RADIUS_M = 6_371_000


class LatLng(Protocol):
    """Anything with `lat`/`lng` in decimal degrees (e.g. `pingguard.domain.models.GeoPoint`)."""

    lat: float
    lng: float


def distance_meters(a: LatLng, b: LatLng) -> float:
    """Compute haversine great-circle distance in meters between two points."""
    lat1 = radians(a.lat)
    lat2 = radians(b.lat)
    dlat = radians(b.lat - a.lat)
    dlng = radians(b.lng - a.lng)

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlng / 2) ** 2
    # Rounding can push sqrt(h) just above 1 for antipodal points.
    return 2 * EARTH_RADIUS_M * asin(min(1.0, sqrt(h)))


def bearing_deg(a: LatLng, b: LatLng) -> float:
    """Initial compass bearing from `a` to `b`, normalized to [0, 360)."""
    lat1 = radians(a.lat)
    lat2 = radians(b.lat)
    dlng = radians(b.lng - a.lng)

    y = sin(dlng) * cos(lat2)
    x = cos(lat1) * sin(lat2) - sin(lat1) * cos(lat2) * cos(dlng)
    return (degrees(atan2(y, x)) + 360) % 360


def angular_diff_deg(a: float, b: float) -> float:
    """Smallest absolute difference between two headings, in [0, 180]."""
    return abs(((a - b + 540) % 360) - 180)
