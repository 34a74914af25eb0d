from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

from .errors import ValidationError

EARTH_RADIUS_MILES = 3958.8
# Effective speeds (mph) behind the travel estimates
DRIVE_SPEED_MPH = 25.0
WALK_SPEED_MPH = 3.0
MIN_DRIVE_MINUTES = 2
MIN_WALK_MINUTES = 1


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    def __post_init__(self):
        lat = _coerce(self.latitude, "latitude")
        lon = _coerce(self.longitude, "longitude")
        if not -90.0 <= lat <= 90.0:
            raise ValidationError(f"latitude must be between -90 and 90, got {lat}")
        if not -180.0 <= lon <= 180.0:
            raise ValidationError(f"longitude must be between -180 and 180, got {lon}")
        object.__setattr__(self, "latitude", lat)
        object.__setattr__(self, "longitude", lon)

    @classmethod
    def maybe(cls, latitude: Any, longitude: Any) -> Optional["GeoPoint"]:
        """Build a point from loosely typed payload values, or ``None`` if unusable."""
        if latitude is None or longitude is None:
            return None
        try:
            return cls(latitude, longitude)
        except ValidationError:
            return None


def _coerce(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be numeric")
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValidationError(f"{name} must be numeric, got {value!r}") from exc
    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"{name} must be finite")
    return number


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def distance_miles(a: GeoPoint, b: GeoPoint) -> float:
    phi1, phi2 = math.radians(a.latitude), math.radians(b.latitude)
    dphi = math.radians(b.latitude - a.latitude)
    dlambda = math.radians(b.longitude - a.longitude)
    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_MILES * c


def estimate_drive_minutes(miles: float) -> int:
    return max(MIN_DRIVE_MINUTES, int(round_half_up(miles / DRIVE_SPEED_MPH * 60)))


def estimate_walk_minutes(miles: float) -> int:
    return max(MIN_WALK_MINUTES, int(round_half_up(miles / WALK_SPEED_MPH * 60)))
