from __future__ import annotations

import logging
import os
import uuid
from typing import Optional

import httpx

from localgeo.domain.errors import CollaboratorError, ValidationError
from localgeo.domain.geo import GeoPoint
from localgeo.domain.models import ResolvedPlace

logger = logging.getLogger(__name__)


class MapboxPlaceResolver:
    RETRIEVE_URL = "https://api.mapbox.com/search/searchbox/v1/retrieve/{place_id}"

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key or os.getenv("MAPBOX_API_KEY")
        if not self.api_key:
            raise RuntimeError("MAPBOX_API_KEY is required for MapboxPlaceResolver")
        self.timeout = timeout or float(os.getenv("LOCALGEO_HTTP_TIMEOUT", "10"))
        self._transport = transport

    def resolve(self, place_id: str) -> ResolvedPlace:
        if not place_id:
            raise ValidationError("place_id is required")
        params = {"access_token": self.api_key, "session_token": str(uuid.uuid4())}
        url = self.RETRIEVE_URL.format(place_id=place_id)
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                resp = client.get(url, params=params)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPError as exc:
            logger.error("Mapbox retrieve failed for %s: %s", place_id, exc)
            raise CollaboratorError("mapbox", str(exc)) from exc
        except ValueError as exc:
            raise CollaboratorError("mapbox", f"invalid JSON: {exc}") from exc
        features = data.get("features") or []
        if not features:
            raise CollaboratorError("mapbox", f"no feature for place {place_id}")
        properties = features[0].get("properties") or {}
        coordinates = properties.get("coordinates") or {}
        return ResolvedPlace(
            place_id=place_id,
            point=GeoPoint(coordinates.get("latitude"), coordinates.get("longitude")),
            display_name=properties.get("place_formatted"),
            feature_type=properties.get("feature_type"),
        )
