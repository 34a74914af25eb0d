from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol


class EventSourceClient(Protocol):
    """Contract for external event sources."""

    def fetch(
        self,
        region: str,
        start_utc: datetime,
        end_utc: datetime,
        keyword: Optional[str] = None,
    ) -> list[dict]:
        """Return the raw payloads for events starting in ``[start_utc, end_utc]``.

        ``region`` is a free-form location (a city name). Implementations may
        page through the upstream API but must hand back a flat list; transport
        failures may be raised and are handled by the aggregator.
        """
        raise NotImplementedError

    def fetch_event(self, event_id: str) -> Optional[dict]:
        """Return one raw payload by upstream id, or ``None`` when it does not exist."""
        raise NotImplementedError


class EmptyEventSource:
    """Stand-in used when no event credentials are configured."""

    def fetch(self, region: str, start_utc: datetime, end_utc: datetime, keyword: Optional[str] = None) -> list[dict]:
        return []

    def fetch_event(self, event_id: str) -> Optional[dict]:
        return None


class StaticEventSource:
    """Serves a fixed list of raw payloads (offline runs, fixtures).

    The window is not applied; a keyword keeps payloads whose name contains it.
    """

    def __init__(self, payloads: list[dict]):
        self._payloads = list(payloads)

    def fetch(self, region: str, start_utc: datetime, end_utc: datetime, keyword: Optional[str] = None) -> list[dict]:
        if not keyword or not keyword.strip():
            return list(self._payloads)
        needle = keyword.strip().lower()
        return [payload for payload in self._payloads if needle in _payload_name(payload).lower()]

    def fetch_event(self, event_id: str) -> Optional[dict]:
        for payload in self._payloads:
            if isinstance(payload, dict) and str(payload.get("id")) == event_id:
                return payload
        return None


def _payload_name(payload) -> str:
    if not isinstance(payload, dict):
        return ""
    name = payload.get("name")
    if isinstance(name, dict):
        name = name.get("text")
    return str(name or "")
