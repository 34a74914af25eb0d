from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional

from .errors import ValidationError
from .geo import GeoPoint
from .geotag import tag

MAX_CONTENT_LENGTH = 200
MAX_TYPE_LENGTH = 50
PIN_CATEGORY = "pin"


@dataclass
class PinRecord:
    id: str
    owner_id: str
    point: GeoPoint
    content: str
    category: str = PIN_CATEGORY
    shared: bool = False
    type: Optional[str] = None
    city: Optional[str] = None
    place_id: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    geo_tag: str = field(init=False, default="")

    def __post_init__(self):
        if not self.id or not self.owner_id:
            raise ValidationError("id and owner_id are required")
        if not isinstance(self.point, GeoPoint):
            raise ValidationError("point must be a GeoPoint")
        validate_content(self.content, self.type)
        if self.created_at.tzinfo is None:
            self.created_at = self.created_at.replace(tzinfo=timezone.utc)
        self.geo_tag = tag(self.point)

    def relocate(self, point: GeoPoint, city: Optional[str] = None, place_id: Optional[str] = None) -> None:
        self.point = point
        self.geo_tag = tag(point)
        if city is not None:
            self.city = city
        if place_id is not None:
            self.place_id = place_id

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "latitude": self.point.latitude,
            "longitude": self.point.longitude,
            "geo_tag": self.geo_tag,
            "category": self.category,
            "shared": self.shared,
            "type": self.type,
            "content": self.content,
            "city": self.city,
            "place_id": self.place_id,
            "created_at": self.created_at.isoformat(),
        }


def validate_content(content: Optional[str], type_label: Optional[str]) -> None:
    if content is None or not content.strip():
        raise ValidationError("content cannot be empty")
    if len(content) > MAX_CONTENT_LENGTH:
        raise ValidationError(f"content must be {MAX_CONTENT_LENGTH} characters or less")
    if type_label is not None and len(type_label) > MAX_TYPE_LENGTH:
        raise ValidationError(f"type must be {MAX_TYPE_LENGTH} characters or less")


@dataclass(frozen=True)
class RawEventRecord:
    id: Optional[str]
    name: str
    venue: str
    start_time_utc: str
    source_id: str
    point: Optional[GeoPoint] = None
    image_url: Optional[str] = None
    url: Optional[str] = None
    city: Optional[str] = None

    @property
    def dedupe_key(self) -> str:
        return f"{self.name.lower()}|{self.start_time_utc}|{self.venue.lower()}"


@dataclass(frozen=True)
class EnrichedEvent:
    event: RawEventRecord
    distance_miles: Optional[float] = None
    drive_time_minutes: Optional[int] = None
    walk_time_minutes: Optional[int] = None

    @property
    def name(self) -> str:
        return self.event.name

    @property
    def start_time_utc(self) -> str:
        return self.event.start_time_utc

    def with_distance(self, miles: float, drive: int, walk: int) -> "EnrichedEvent":
        return replace(self, distance_miles=miles, drive_time_minutes=drive, walk_time_minutes=walk)

    def to_dict(self) -> dict:
        event = self.event
        payload = {
            "id": event.id,
            "name": event.name,
            "venue": event.venue,
            "start_time_utc": event.start_time_utc,
            "url": event.url,
            "image_url": event.image_url,
            "city": event.city,
            "source_id": event.source_id,
            "latitude": event.point.latitude if event.point else None,
            "longitude": event.point.longitude if event.point else None,
        }
        if self.distance_miles is not None:
            payload["distance_miles"] = self.distance_miles
            payload["drive_time_minutes"] = self.drive_time_minutes
            payload["walk_time_minutes"] = self.walk_time_minutes
        return payload


@dataclass(frozen=True)
class ViewerQuery:
    point: Optional[GeoPoint] = None
    radius_miles: Optional[float] = None
    mood: Optional[str] = None


@dataclass(frozen=True)
class PlaceRecord:
    id: Optional[str]
    name: str
    category: str
    source: str
    address: Optional[str] = None
    point: Optional[GeoPoint] = None
    rating: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "address": self.address,
            "latitude": self.point.latitude if self.point else None,
            "longitude": self.point.longitude if self.point else None,
            "rating": self.rating,
            "source": self.source,
        }


@dataclass(frozen=True)
class ResolvedPlace:
    place_id: str
    point: GeoPoint
    display_name: Optional[str] = None
    feature_type: Optional[str] = None

    @property
    def is_poi(self) -> bool:
        return self.feature_type == "poi"
