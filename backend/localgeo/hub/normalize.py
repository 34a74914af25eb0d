from __future__ import annotations

from typing import Any, Optional

from localgeo.domain.geo import GeoPoint
from localgeo.domain.models import RawEventRecord


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, dict):
        return _text(value.get("text"))
    text = str(value)
    return text if text else None


def _section(payload: dict, key: str) -> dict:
    value = payload.get(key)
    return value if isinstance(value, dict) else {}


def normalize_event(payload: Any, source_id: str) -> Optional[RawEventRecord]:
    """Map one raw event payload into a ``RawEventRecord``.

    Every upstream field is optional. Missing values stay ``None`` except the
    fields that make up the dedupe key (name, start, venue), which fall back
    to an empty string. Returns ``None`` only when the payload is not an
    object at all.
    """
    if not isinstance(payload, dict):
        return None
    start = _section(payload, "start")
    venue = _section(payload, "venue")
    address = _section(venue, "address")
    logo = _section(payload, "logo")
    return RawEventRecord(
        id=_text(payload.get("id")),
        name=_text(payload.get("name")) or "",
        venue=_text(venue.get("name")) or "",
        start_time_utc=_text(start.get("utc")) or _text(start.get("local")) or "",
        source_id=source_id,
        point=GeoPoint.maybe(address.get("latitude"), address.get("longitude")),
        image_url=_text(logo.get("url")),
        url=_text(payload.get("url")),
        city=_text(address.get("city")),
    )
