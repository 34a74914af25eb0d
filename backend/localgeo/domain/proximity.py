from __future__ import annotations

from typing import Iterable, List, Optional, Protocol, TypeVar

from .errors import ValidationError
from .geo import GeoPoint, distance_miles

T = TypeVar("T")


class ProximityIndex(Protocol):
    """Contract for radius lookups over records exposing a ``point`` attribute."""

    def nearby(self, center: GeoPoint, radius_miles: Optional[float], source: Iterable[T]) -> List[T]:
        """Return the records of ``source`` within ``radius_miles`` of ``center``.

        The boundary is inclusive and the source order is kept; ordering and
        paging belong to the caller. ``radius_miles=None`` disables the
        distance filter.
        """
        raise NotImplementedError


class ScanProximityIndex:
    """Full scan over whatever the record store returned."""

    def nearby(self, center: GeoPoint, radius_miles: Optional[float], source: Iterable[T]) -> List[T]:
        if radius_miles is None:
            return list(source)
        if radius_miles < 0:
            raise ValidationError("radius_miles must be >= 0")
        matches: List[T] = []
        for record in source:
            if distance_miles(center, record.point) <= radius_miles:
                matches.append(record)
        return matches


_default_index = ScanProximityIndex()


def nearby(center: GeoPoint, radius_miles: Optional[float], source: Iterable[T]) -> List[T]:
    return _default_index.nearby(center, radius_miles, source)
