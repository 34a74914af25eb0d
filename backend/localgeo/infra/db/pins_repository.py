from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Engine

from localgeo.domain.geo import GeoPoint
from localgeo.domain.models import PinRecord

from .tables import pins_table


class PinsRepository:
    def __init__(self, engine: Engine):
        if engine is None:
            raise ValueError("engine is required")
        self.engine = engine

    def scan_all(self) -> List[PinRecord]:
        with self.engine.begin() as conn:
            rows = conn.execute(select(pins_table)).mappings().all()
        return [self._to_record(row) for row in rows]

    def list_by_owner(self, owner_id: str) -> List[PinRecord]:
        with self.engine.begin() as conn:
            rows = conn.execute(select(pins_table).where(pins_table.c.owner_id == owner_id)).mappings().all()
        return [self._to_record(row) for row in rows]

    def get(self, pin_id: str) -> Optional[PinRecord]:
        with self.engine.begin() as conn:
            row = conn.execute(select(pins_table).where(pins_table.c.id == pin_id)).mappings().first()
        return self._to_record(row) if row else None

    def save(self, pin: PinRecord) -> None:
        values = self._to_row(pin)
        now = datetime.now(timezone.utc)
        with self.engine.begin() as conn:
            existing = conn.execute(
                select(pins_table.c.id).where(pins_table.c.id == pin.id)
            ).scalar_one_or_none()
            if existing is not None:
                conn.execute(
                    update(pins_table).where(pins_table.c.id == pin.id).values(**values, updated_at=now)
                )
            else:
                conn.execute(insert(pins_table).values(**values, updated_at=now))

    def delete(self, pin_id: str) -> int:
        with self.engine.begin() as conn:
            result = conn.execute(delete(pins_table).where(pins_table.c.id == pin_id))
        return result.rowcount or 0

    @staticmethod
    def _to_row(pin: PinRecord) -> dict:
        return {
            "id": pin.id,
            "owner_id": pin.owner_id,
            "content": pin.content,
            "lat": pin.point.latitude,
            "lon": pin.point.longitude,
            "geo_tag": pin.geo_tag,
            "category": pin.category,
            "shared": pin.shared,
            "type": pin.type,
            "city": pin.city,
            "place_id": pin.place_id,
            "created_at": pin.created_at,
        }

    @staticmethod
    def _to_record(row: Mapping[str, Any]) -> PinRecord:
        # geo_tag is re-derived from the stored coordinates
        created_at = row["created_at"]
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return PinRecord(
            id=row["id"],
            owner_id=row["owner_id"],
            point=GeoPoint(row["lat"], row["lon"]),
            content=row["content"],
            category=row["category"],
            shared=bool(row["shared"]),
            type=row.get("type"),
            city=row.get("city"),
            place_id=row.get("place_id"),
            created_at=created_at,
        )
