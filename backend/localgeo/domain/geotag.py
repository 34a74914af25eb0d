from __future__ import annotations

import pygeohash

from .geo import GeoPoint

# 6 characters ~= 1.2 km x 0.6 km cell
GEO_TAG_PRECISION = 6


def tag(point: GeoPoint, precision: int = GEO_TAG_PRECISION) -> str:
    return pygeohash.encode(point.latitude, point.longitude, precision=precision)
