from __future__ import annotations

from typing import Iterable, List, Optional

from .geo import GeoPoint, distance_miles, estimate_drive_minutes, estimate_walk_minutes, round_half_up
from .models import EnrichedEvent, RawEventRecord


def enrich(events: Iterable[RawEventRecord], viewer: Optional[GeoPoint] = None) -> List[EnrichedEvent]:
    enriched: List[EnrichedEvent] = []
    for event in events:
        item = EnrichedEvent(event=event)
        if viewer is not None and event.point is not None:
            miles = distance_miles(viewer, event.point)
            item = item.with_distance(
                round_half_up(miles, 1),
                estimate_drive_minutes(miles),
                estimate_walk_minutes(miles),
            )
        enriched.append(item)
    return enriched
