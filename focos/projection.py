"""Inverse spherical Web Mercator (EPSG:3857 -> geographic degrees)."""

from __future__ import annotations

import math
from dataclasses import dataclass

EARTH_RADIUS_METERS = 6378137.0
ORIGIN_SHIFT = math.pi * EARTH_RADIUS_METERS


@dataclass(frozen=True, slots=True)
class PlanarPoint:
    """Web Mercator coordinate in meters from the projection origin."""

    x: float
    y: float


@dataclass(frozen=True, slots=True)
class GeoPoint:
    latitude: float
    longitude: float


def _exp(value: float) -> float:
    # JavaScript-style exp: overflow saturates instead of raising.
    try:
        return math.exp(value)
    except OverflowError:
        return math.inf


def to_geographic(x: float, y: float) -> GeoPoint:
    """Convert a Web Mercator ``(x, y)`` pair in meters to latitude/longitude.

    Spherical inverse with R = 6378137 m and no datum correction, matching the
    projection the WFS serves. Non-finite input propagates as NaN/inf rather
    than raising.
    """
    longitude = (x / ORIGIN_SHIFT) * 180.0
    lat_temp = (y / ORIGIN_SHIFT) * 180.0
    latitude = (180.0 / math.pi) * (2.0 * math.atan(_exp(lat_temp * math.pi / 180.0)) - math.pi / 2.0)
    return GeoPoint(latitude=latitude, longitude=longitude)


def to_geographic_point(point: PlanarPoint) -> GeoPoint:
    return to_geographic(point.x, point.y)
