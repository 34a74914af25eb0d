from __future__ import annotations

import logging
import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from datetime import date, datetime, timezone
from typing import Callable, Dict, List, Optional, Union

from localgeo.domain.enrichment import enrich
from localgeo.domain.errors import DiscoveryCancelled
from localgeo.domain.geo import GeoPoint
from localgeo.domain.models import EnrichedEvent, PlaceRecord, ViewerQuery
from localgeo.domain.ranking import DEFAULT_RADIUS_MILES, select_and_rank
from localgeo.hub.event_aggregator import EventAggregator
from localgeo.hub.normalize import normalize_event
from localgeo.hub.provider_registry import ProviderRegistry
from localgeo.providers.places.base import DEFAULT_PLACES_RADIUS_M, EmptyPlacesSource, PlacesSource

logger = logging.getLogger(__name__)

MAX_WORKERS = 3
CANCEL_POLL_SECONDS = 0.05
PLACES_SOURCE = "google_places"

CATEGORY_ALIASES = {
    "events": "events",
    "concerts": "events",
    "restaurants": "restaurants",
    "food": "restaurants",
    "dining": "restaurants",
    "attractions": "attractions",
    "parks": "attractions",
    "museums": "attractions",
    "nature": "attractions",
}


class DiscoveryService:
    """Discovery over the event and places collaborators.

    ``errors`` belongs to one request; the API hands each request its own
    instance through ``for_request``.
    """

    def __init__(
        self,
        events: ProviderRegistry,
        places: Optional[PlacesSource] = None,
        max_workers: int = MAX_WORKERS,
    ) -> None:
        self._events = events
        self._places = places or EmptyPlacesSource()
        self.max_workers = max_workers
        self.errors: list[tuple[str, Exception]] = []

    def for_request(self) -> "DiscoveryService":
        return DiscoveryService(self._events, self._places, self.max_workers)

    def tonight(
        self,
        region: str,
        query: Optional[ViewerQuery] = None,
        now: Optional[datetime] = None,
        keyword: Optional[str] = None,
    ) -> List[EnrichedEvent]:
        query = query or ViewerQuery()
        aggregator = EventAggregator(self._events)
        raw = aggregator.fetch_tonight(region, now=now, keyword=keyword)
        self.errors = list(aggregator.errors)
        radius = DEFAULT_RADIUS_MILES if query.radius_miles is None else query.radius_miles
        ranked = select_and_rank(enrich(raw, query.point), radius_miles=radius, mood=query.mood)
        logger.info("Tonight in %r: %d of %d events after filters", region, len(ranked), len(raw))
        return ranked

    def events_on(
        self,
        region: str,
        day: Optional[date] = None,
        keyword: Optional[str] = None,
        viewer: Optional[GeoPoint] = None,
    ) -> List[EnrichedEvent]:
        """Events for one UTC day, in aggregator order; ``keyword`` is passed to the sources."""
        aggregator = EventAggregator(self._events)
        raw = aggregator.fetch_day(region, day or datetime.now(timezone.utc).date(), keyword)
        self.errors = list(aggregator.errors)
        return enrich(raw, viewer)

    def search_by_keyword(self, keyword: str) -> List[EnrichedEvent]:
        """Upcoming events matching ``keyword`` (an artist, a band) in any region."""
        return self.events_on("", keyword=keyword)

    def fetch_all(
        self,
        region: str,
        viewer: Optional[GeoPoint] = None,
        day: Optional[date] = None,
        cancel: Optional[threading.Event] = None,
    ) -> Dict[str, list]:
        """Run every branch concurrently; a failing branch degrades to an empty list."""
        branches: Dict[str, Callable[[], list]] = {
            "events": lambda: self._events_branch(region, viewer, day),
            "restaurants": lambda: self._places.fetch_restaurants(region, viewer, DEFAULT_PLACES_RADIUS_M),
            "attractions": lambda: self._places.fetch_attractions(region, viewer, DEFAULT_PLACES_RADIUS_M),
        }
        return self._fan_out(branches, cancel)

    def fetch_category(
        self,
        category: str,
        region: str,
        viewer: Optional[GeoPoint] = None,
        day: Optional[date] = None,
    ) -> list:
        self.errors = []
        branch = CATEGORY_ALIASES.get((category or "").lower())
        if branch is None:
            logger.warning("Unknown category: %s", category)
            return []
        try:
            if branch == "events":
                return self._events_branch(region, viewer, day)
            if branch == "restaurants":
                return self._places.fetch_restaurants(region, viewer, DEFAULT_PLACES_RADIUS_M)
            return self._places.fetch_attractions(region, viewer, DEFAULT_PLACES_RADIUS_M)
        except Exception as exc:
            logger.error("Error fetching %s for %r: %s", branch, region, exc)
            self.errors = [(branch, exc)]
            return []

    def search_all(self, query: str, region: str, viewer: Optional[GeoPoint] = None) -> Dict[str, list]:
        results = self.fetch_all(region, viewer)
        needle = (query or "").lower()
        return {name: [item for item in items if _matches_query(item, needle)] for name, items in results.items()}

    def lookup(self, source: str, item_id: str) -> Optional[Union[EnrichedEvent, PlaceRecord]]:
        """Fetch one place or event by its upstream id; ``None`` when unknown or unreachable."""
        self.errors = []
        name = (source or "").lower()
        try:
            if name == PLACES_SOURCE:
                return self._places.get_place(item_id)
            if name in self._events.list():
                payload = self._events.get(name).fetch_event(item_id)
                record = normalize_event(payload, source_id=name) if payload is not None else None
                return EnrichedEvent(event=record) if record is not None else None
        except Exception as exc:
            logger.error("Error fetching %s from %s: %s", item_id, source, exc)
            self.errors = [(name, exc)]
            return None
        logger.warning("Unknown source: %s", source)
        return None

    def _events_branch(self, region: str, viewer: Optional[GeoPoint], day: Optional[date]) -> List[EnrichedEvent]:
        aggregator = EventAggregator(self._events)
        raw = aggregator.fetch_day(region, day or datetime.now(timezone.utc).date())
        return enrich(raw, viewer)

    def _fan_out(self, branches: Dict[str, Callable[[], list]], cancel: Optional[threading.Event]) -> Dict[str, list]:
        self.errors = []
        results: Dict[str, list] = {name: [] for name in branches}
        executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="discovery")
        try:
            futures: Dict[Future, str] = {executor.submit(fn): name for name, fn in branches.items()}
            pending = set(futures)
            while pending:
                if cancel is not None and cancel.is_set():
                    for future in pending:
                        future.cancel()
                    raise DiscoveryCancelled("discovery request cancelled")
                timeout = CANCEL_POLL_SECONDS if cancel is not None else None
                done, pending = wait(pending, timeout=timeout, return_when=FIRST_COMPLETED)
                for future in done:
                    name = futures[future]
                    try:
                        results[name] = list(future.result())
                    except Exception as exc:
                        logger.error("Error fetching %s: %s", name, exc)
                        self.errors.append((name, exc))
        finally:
            executor.shutdown(wait=cancel is None or not cancel.is_set(), cancel_futures=True)
        return results


def _matches_query(item, needle: str) -> bool:
    if not needle:
        return True
    if isinstance(item, PlaceRecord):
        fields = (item.name, item.address)
    else:
        fields = (item.name, item.event.venue)
    return any(value and needle in value.lower() for value in fields)
