from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from localgeo.domain.errors import PinNotFound, ValidationError
from localgeo.domain.geo import GeoPoint
from localgeo.domain.models import PIN_CATEGORY, PinRecord, ResolvedPlace, validate_content
from localgeo.domain.proximity import ProximityIndex, ScanProximityIndex
from localgeo.infra.db.pins_repository import PinsRepository
from localgeo.providers.places.base import PlaceResolver

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20


class PinService:
    def __init__(
        self,
        repository: PinsRepository,
        resolver: Optional[PlaceResolver] = None,
        index: Optional[ProximityIndex] = None,
    ):
        self.repository = repository
        self.resolver = resolver
        self.index = index or ScanProximityIndex()

    def create_pin(
        self,
        owner_id: str,
        place_id: str,
        content: str,
        shared: bool = False,
        type_label: Optional[str] = None,
    ) -> PinRecord:
        validate_content(content, type_label)
        place = self._resolve(place_id)
        pin = PinRecord(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            point=place.point,
            content=content,
            category=PIN_CATEGORY,
            shared=shared,
            type=type_label,
            city=place.display_name,
            place_id=place.place_id,
            created_at=datetime.now(timezone.utc),
        )
        self.repository.save(pin)
        logger.info("Created pin %s for %s at %s", pin.id, owner_id, pin.geo_tag)
        return pin

    def update_pin(
        self,
        pin_id: str,
        owner_id: str,
        place_id: str,
        content: str,
        shared: bool = False,
        type_label: Optional[str] = None,
    ) -> PinRecord:
        pin = self._owned_pin(pin_id, owner_id)
        validate_content(content, type_label)
        place = self._resolve(place_id)
        pin.content = content
        pin.shared = shared
        if type_label is not None:
            pin.type = type_label
        pin.relocate(place.point, city=place.display_name, place_id=place.place_id)
        self.repository.save(pin)
        logger.info("Updated pin %s, geo tag now %s", pin.id, pin.geo_tag)
        return pin

    def delete_pin(self, pin_id: str, owner_id: str) -> None:
        self._owned_pin(pin_id, owner_id)
        self.repository.delete(pin_id)
        logger.info("Deleted pin %s", pin_id)

    def my_pins(self, owner_id: str) -> List[PinRecord]:
        pins = [pin for pin in self.repository.list_by_owner(owner_id) if pin.category == PIN_CATEGORY]
        pins.sort(key=lambda pin: pin.created_at, reverse=True)
        return pins

    def shared_feed(
        self,
        center: GeoPoint,
        radius_miles: Optional[float] = None,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE,
        type_label: str = "all",
    ) -> List[PinRecord]:
        if page < 0 or size < 1:
            raise ValidationError("page must be >= 0 and size >= 1")
        candidates = self.index.nearby(center, radius_miles, self.repository.scan_all())
        pins = [
            pin
            for pin in candidates
            if pin.category == PIN_CATEGORY and pin.shared and (type_label == "all" or pin.type == type_label)
        ]
        pins.sort(key=lambda pin: pin.created_at, reverse=True)
        window = pins[page * size : (page + 1) * size]
        logger.info("Returning %d shared pins for page %d (radius=%s)", len(window), page, radius_miles)
        return window

    def _resolve(self, place_id: str) -> ResolvedPlace:
        if not place_id:
            raise ValidationError("place_id is required")
        if self.resolver is None:
            raise RuntimeError("no place resolver configured")
        place = self.resolver.resolve(place_id)
        if not place.is_poi:
            raise ValidationError("only public locations (POIs) can be pinned")
        return place

    def _owned_pin(self, pin_id: str, owner_id: str) -> PinRecord:
        pin = self.repository.get(pin_id)
        if pin is None or pin.owner_id != owner_id:
            raise PinNotFound(f"pin {pin_id} not found or not owned by caller")
        return pin
