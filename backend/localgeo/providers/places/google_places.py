from __future__ import annotations

import logging
import os
from typing import List, Optional

import httpx

from localgeo.domain.errors import CollaboratorError
from localgeo.domain.geo import GeoPoint
from localgeo.domain.models import PlaceRecord

from .base import DEFAULT_PLACES_RADIUS_M

logger = logging.getLogger(__name__)

# Used when geocoding the region fails
FALLBACK_CITY_POINTS = {
    "new york": GeoPoint(40.7128, -74.0060),
    "los angeles": GeoPoint(34.0522, -118.2437),
    "chicago": GeoPoint(41.8781, -87.6298),
    "houston": GeoPoint(29.7604, -95.3698),
    "san francisco": GeoPoint(37.7749, -122.4194),
}
DEFAULT_POINT = FALLBACK_CITY_POINTS["new york"]

RESTAURANTS_CATEGORY = "Food/Restaurants"
ATTRACTIONS_CATEGORY = "Parks/Museums/Nature"
DETAILS_CATEGORY = "Place Details"


class GooglePlacesSource:
    BASE_URL = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"
    GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
    DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"
    DETAILS_FIELDS = "place_id,name,rating,formatted_address,geometry"

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key or os.getenv("GOOGLE_PLACES_API_KEY")
        if not self.api_key:
            raise RuntimeError("GOOGLE_PLACES_API_KEY is required for GooglePlacesSource")
        self.timeout = timeout or float(os.getenv("LOCALGEO_HTTP_TIMEOUT", "10"))
        self._transport = transport

    def fetch_restaurants(
        self, region: str, point: Optional[GeoPoint] = None, radius_m: int = DEFAULT_PLACES_RADIUS_M
    ) -> List[PlaceRecord]:
        return self._nearby(region, point, radius_m, "restaurant", RESTAURANTS_CATEGORY)

    def fetch_attractions(
        self, region: str, point: Optional[GeoPoint] = None, radius_m: int = DEFAULT_PLACES_RADIUS_M
    ) -> List[PlaceRecord]:
        return self._nearby(region, point, radius_m, "tourist_attraction", ATTRACTIONS_CATEGORY)

    def _nearby(
        self, region: str, point: Optional[GeoPoint], radius_m: int, place_type: str, category: str
    ) -> List[PlaceRecord]:
        center = point or self.geocode(region)
        params = {
            "location": f"{center.latitude},{center.longitude}",
            "radius": radius_m,
            "type": place_type,
            "key": self.api_key,
        }
        data = self._get(self.BASE_URL, params)
        status = data.get("status")
        if status == "ZERO_RESULTS":
            return []
        if status != "OK":
            raise CollaboratorError("google_places", f"nearbysearch status {status}")
        places = [self._map_place(item, category) for item in data.get("results") or []]
        logger.info("Google Places returned %d %s near %s", len(places), category, region or center)
        return places

    def get_place(self, place_id: str) -> Optional[PlaceRecord]:
        params = {"place_id": place_id, "fields": self.DETAILS_FIELDS, "key": self.api_key}
        data = self._get(self.DETAILS_URL, params)
        result = data.get("result")
        if data.get("status") != "OK" or not isinstance(result, dict):
            logger.info("No place details for %s (status %s)", place_id, data.get("status"))
            return None
        return self._map_place({"place_id": place_id, **result}, DETAILS_CATEGORY)

    def geocode(self, region: str) -> GeoPoint:
        try:
            data = self._get(self.GEOCODE_URL, {"address": region, "key": self.api_key})
            results = data.get("results") or []
            if data.get("status") == "OK" and results:
                location = results[0].get("geometry", {}).get("location", {})
                point = GeoPoint.maybe(location.get("lat"), location.get("lng"))
                if point is not None:
                    return point
        except CollaboratorError as exc:
            logger.warning("Geocoding %r failed, using fallback coordinates: %s", region, exc)
        lowered = (region or "").lower()
        for city, fallback in FALLBACK_CITY_POINTS.items():
            if city in lowered:
                return fallback
        return DEFAULT_POINT

    def _get(self, url: str, params: dict) -> dict:
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                resp = client.get(url, params=params)
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPError as exc:
            raise CollaboratorError("google_places", str(exc)) from exc
        except ValueError as exc:
            raise CollaboratorError("google_places", f"invalid JSON: {exc}") from exc

    @staticmethod
    def _map_place(payload: dict, category: str) -> PlaceRecord:
        location = (payload.get("geometry") or {}).get("location") or {}
        rating = payload.get("rating")
        return PlaceRecord(
            id=payload.get("place_id"),
            name=payload.get("name", ""),
            category=category,
            source="google_places",
            address=payload.get("formatted_address") or payload.get("vicinity"),
            point=GeoPoint.maybe(location.get("lat"), location.get("lng")),
            rating=float(rating) if isinstance(rating, (int, float)) else None,
        )
