from __future__ import annotations

from typing import Optional, Protocol

from localgeo.domain.geo import GeoPoint
from localgeo.domain.models import PlaceRecord, ResolvedPlace

DEFAULT_PLACES_RADIUS_M = 5000


class PlacesSource(Protocol):
    """Contract for restaurant / attraction lookups around a region."""

    def fetch_restaurants(
        self, region: str, point: Optional[GeoPoint] = None, radius_m: int = DEFAULT_PLACES_RADIUS_M
    ) -> list[PlaceRecord]:
        raise NotImplementedError

    def fetch_attractions(
        self, region: str, point: Optional[GeoPoint] = None, radius_m: int = DEFAULT_PLACES_RADIUS_M
    ) -> list[PlaceRecord]:
        raise NotImplementedError


    def get_place(self, place_id: str) -> Optional[PlaceRecord]:
        raise NotImplementedError


class PlaceResolver(Protocol):
    """Resolves a place identifier chosen by the user into coordinates."""

    def resolve(self, place_id: str) -> ResolvedPlace:
        raise NotImplementedError


class EmptyPlacesSource:
    def fetch_restaurants(self, region, point=None, radius_m=DEFAULT_PLACES_RADIUS_M) -> list[PlaceRecord]:
        return []

    def fetch_attractions(self, region, point=None, radius_m=DEFAULT_PLACES_RADIUS_M) -> list[PlaceRecord]:
        return []

    def get_place(self, place_id: str) -> Optional[PlaceRecord]:
        return None
