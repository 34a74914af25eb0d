from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import List, Optional

import httpx

from localgeo.domain.errors import CollaboratorError

logger = logging.getLogger(__name__)


class EventbriteEventSource:
    BASE_URL = "https://www.eventbriteapi.com/v3/events/search/"
    EVENT_URL = "https://www.eventbriteapi.com/v3/events/{event_id}/"
    PAGE_SIZE = 200

    def __init__(
        self,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        max_pages: int = 5,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.token = token or os.getenv("EVENTBRITE_TOKEN")
        if not self.token:
            raise RuntimeError("EVENTBRITE_TOKEN is required for EventbriteEventSource")
        self.timeout = timeout or float(os.getenv("LOCALGEO_HTTP_TIMEOUT", "10"))
        self.max_pages = max(1, max_pages)
        self._transport = transport

    def fetch(
        self,
        region: str,
        start_utc: datetime,
        end_utc: datetime,
        keyword: Optional[str] = None,
    ) -> List[dict]:
        params = self._build_params(region, start_utc, end_utc, keyword)
        events: List[dict] = []
        headers = {"Authorization": f"Bearer {self.token}", "Accept": "application/json"}
        with httpx.Client(timeout=self.timeout, headers=headers, transport=self._transport) as client:
            for _ in range(self.max_pages):
                data = self._get_page(client, params)
                events.extend(data.get("events") or [])
                pagination = data.get("pagination") or {}
                continuation = pagination.get("continuation")
                if not pagination.get("has_more_items") or not continuation:
                    break
                params = {**params, "continuation": continuation}
            else:
                logger.warning("Eventbrite pagination stopped after %d pages for %s", self.max_pages, region)
        logger.info("Eventbrite returned %d raw events for %s", len(events), region or "<any>")
        return events

    def fetch_event(self, event_id: str) -> Optional[dict]:
        headers = {"Authorization": f"Bearer {self.token}", "Accept": "application/json"}
        url = self.EVENT_URL.format(event_id=event_id)
        with httpx.Client(timeout=self.timeout, headers=headers, transport=self._transport) as client:
            try:
                resp = client.get(url, params={"expand": "venue,logo"})
            except httpx.HTTPError as exc:
                raise CollaboratorError("eventbrite", str(exc)) from exc
            if resp.status_code == 404:
                return None
            return self._decode(resp)

    def _get_page(self, client: httpx.Client, params: dict) -> dict:
        try:
            resp = client.get(self.BASE_URL, params=params)
        except httpx.HTTPError as exc:
            raise CollaboratorError("eventbrite", str(exc)) from exc
        return self._decode(resp)

    @staticmethod
    def _decode(resp: httpx.Response) -> dict:
        try:
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as exc:
            raise CollaboratorError("eventbrite", str(exc)) from exc
        except ValueError as exc:
            raise CollaboratorError("eventbrite", f"invalid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise CollaboratorError("eventbrite", "unexpected payload shape")
        return data

    def _build_params(
        self, region: str, start_utc: datetime, end_utc: datetime, keyword: Optional[str]
    ) -> dict:
        params = {
            "expand": "venue,logo",
            "start_date.range_start": self._format_ts(start_utc),
            "start_date.range_end": self._format_ts(end_utc),
            "page_size": self.PAGE_SIZE,
        }
        if region:
            params["location.address"] = region
        if keyword and keyword.strip():
            params["q"] = keyword.strip()
        return params

    @staticmethod
    def _format_ts(value: datetime) -> str:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc).replace(microsecond=0)
        return value.strftime("%Y-%m-%dT%H:%M:%SZ")
