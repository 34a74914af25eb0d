from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from .models import EnrichedEvent, RawEventRecord


class Mood(str, Enum):
    CHILL = "chill"
    LOUD = "loud"
    DATE = "date"


# Evaluated in declaration order; the first bucket named in the mood wins
MOOD_KEYWORDS: Mapping[Mood, frozenset] = MappingProxyType(
    {
        Mood.CHILL: frozenset({"jazz", "acoustic", "open mic"}),
        Mood.LOUD: frozenset({"karaoke", "bar", "dj", "trivia"}),
        Mood.DATE: frozenset({"jazz", "dinner", "live"}),
    }
)


def classify(mood: Optional[str]) -> Optional[Mood]:
    if not mood:
        return None
    lowered = mood.lower()
    for bucket in MOOD_KEYWORDS:
        if bucket.value in lowered:
            return bucket
    return None


def matches(event: RawEventRecord | EnrichedEvent, mood: Optional[str]) -> bool:
    bucket = classify(mood)
    if bucket is None:
        return True
    name = (event.name or "").lower()
    return any(keyword in name for keyword in MOOD_KEYWORDS[bucket])
