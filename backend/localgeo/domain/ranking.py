from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from . import mood as mood_classifier
from .errors import AmbiguousParseError
from .models import EnrichedEvent

DEFAULT_RADIUS_MILES = 25.0
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _parse_iso(value: Optional[str]) -> datetime:
    if not value:
        raise AmbiguousParseError("missing start time")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError as exc:
        raise AmbiguousParseError(f"unparseable start time {value!r}") from exc
    if dt.tzinfo is None:
        raise AmbiguousParseError(f"start time {value!r} has no UTC offset")
    return dt.astimezone(timezone.utc)


def parse_start_time(value: Optional[str]) -> datetime:
    """Parse an event start; anything unparseable sorts first as the epoch."""
    try:
        return _parse_iso(value)
    except AmbiguousParseError:
        return EPOCH


def _sort_key(event: EnrichedEvent) -> tuple[datetime, float]:
    distance = event.distance_miles if event.distance_miles is not None else math.inf
    return parse_start_time(event.start_time_utc), distance


def select_and_rank(
    events: Iterable[EnrichedEvent],
    radius_miles: float = DEFAULT_RADIUS_MILES,
    mood: Optional[str] = None,
) -> List[EnrichedEvent]:
    kept = [
        event
        for event in events
        if (event.distance_miles is None or event.distance_miles <= radius_miles)
        and mood_classifier.matches(event, mood)
    ]
    # list.sort is stable: equal keys keep aggregator order
    kept.sort(key=_sort_key)
    return kept
