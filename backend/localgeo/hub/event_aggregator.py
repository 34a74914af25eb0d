from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, List, Optional

from localgeo.domain.models import RawEventRecord

from .normalize import normalize_event
from .provider_registry import ProviderRegistry

logger = logging.getLogger(__name__)

TONIGHT_WINDOW = timedelta(hours=8)


class EventAggregator:
    def __init__(self, registry: ProviderRegistry) -> None:
        self._registry = registry
        self.errors: list[tuple[str, Exception]] = []
        self.last_stats: dict = {}

    def fetch_window(
        self,
        region: str,
        start_utc: datetime,
        end_utc: datetime,
        keyword: Optional[str] = None,
    ) -> List[RawEventRecord]:
        """Fetch, normalise and dedupe events starting inside the window.

        A failing source is logged and contributes nothing; this method does
        not raise for collaborator failures.
        """
        self.errors = []
        stats = {"fetched": 0, "normalized": 0, "skipped": 0, "duplicates": 0}
        unique: Dict[str, RawEventRecord] = {}
        for name in self._registry.list():
            provider = self._registry.get(name)
            try:
                payloads = list(provider.fetch(region, start_utc, end_utc, keyword))
            except Exception as exc:
                logger.error("Event source %s failed for %r: %s", name, region, exc)
                self.errors.append((name, exc))
                continue
            stats["fetched"] += len(payloads)
            for payload in payloads:
                try:
                    record = normalize_event(payload, source_id=name)
                except ValueError as exc:
                    logger.warning("Skipping malformed payload from %s: %s", name, exc)
                    record = None
                if record is None:
                    stats["skipped"] += 1
                    continue
                stats["normalized"] += 1
                key = record.dedupe_key
                if key in unique:
                    stats["duplicates"] += 1
                    continue
                unique[key] = record
        self.last_stats = stats
        logger.info(
            "Aggregated %d unique events for %r (fetched=%d duplicates=%d skipped=%d)",
            len(unique),
            region,
            stats["fetched"],
            stats["duplicates"],
            stats["skipped"],
        )
        return list(unique.values())

    def fetch_day(self, region: str, day: date, keyword: Optional[str] = None) -> List[RawEventRecord]:
        start = datetime.combine(day, time.min, tzinfo=timezone.utc)
        end = datetime.combine(day, time(23, 59, 59), tzinfo=timezone.utc)
        return self.fetch_window(region, start, end, keyword)

    def fetch_tonight(
        self, region: str, now: Optional[datetime] = None, keyword: Optional[str] = None
    ) -> List[RawEventRecord]:
        start = now or datetime.now(timezone.utc)
        return self.fetch_window(region, start, start + TONIGHT_WINDOW, keyword)
