from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from localgeo.api.deps import get_engine
from localgeo.api.main import create_app
from localgeo.domain.errors import CollaboratorError
from localgeo.domain.geo import GeoPoint
from localgeo.domain.models import PlaceRecord, ResolvedPlace
from localgeo.hub.provider_registry import ProviderRegistry
from localgeo.infra.db.tables import metadata
from localgeo.providers.events.base import StaticEventSource
from localgeo.services.discovery import DiscoveryService

RESOLVED = {
    "poi-soho": ResolvedPlace("poi-soho", GeoPoint(40.7233, -74.0030), "SoHo, New York", "poi"),
    "poi-dumbo": ResolvedPlace("poi-dumbo", GeoPoint(40.7033, -73.9881), "DUMBO, Brooklyn", "poi"),
    "addr-home": ResolvedPlace("addr-home", GeoPoint(40.7300, -74.0100), "12 Some St", "address"),
}


class FakeResolver:
    def resolve(self, place_id):
        if place_id not in RESOLVED:
            raise CollaboratorError("mapbox", f"no feature for {place_id}")
        return RESOLVED[place_id]


class RecordingEventSource(StaticEventSource):
    def __init__(self, payloads):
        super().__init__(payloads)
        self.calls = []

    def fetch(self, region, start_utc, end_utc, keyword=None):
        self.calls.append((region, start_utc, end_utc, keyword))
        return super().fetch(region, start_utc, end_utc, keyword)


class FakePlaces:
    def fetch_restaurants(self, region, point=None, radius_m=5000):
        return [
            PlaceRecord(
                id="r1",
                name="Jazz Diner",
                category="Food/Restaurants",
                source="google_places",
                address="1 Main St",
                point=GeoPoint(40.7130, -74.0050),
                rating=4.5,
            )
        ]

    def fetch_attractions(self, region, point=None, radius_m=5000):
        raise CollaboratorError("google_places", "REQUEST_DENIED")

    def get_place(self, place_id):
        return self.fetch_restaurants("New York")[0] if place_id == "r1" else None


def _start(hours: float) -> str:
    moment = datetime.now(timezone.utc) + timedelta(hours=hours)
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


def event_payloads():
    return [
        {
            "id": "late",
            "name": {"text": "Late Karaoke"},
            "start": {"utc": _start(3)},
            "venue": {"name": "Bar One", "address": {"latitude": "40.7138", "longitude": "-74.0070"}},
            "url": "https://example.test/late",
        },
        {
            "id": "early",
            "name": {"text": "Acoustic Jazz"},
            "start": {"utc": _start(1)},
            "venue": {"name": "Cafe", "address": {"latitude": "40.7200", "longitude": "-74.0000"}},
        },
        {
            "id": "boston",
            "name": {"text": "Boston Jazz"},
            "start": {"utc": _start(1)},
            "venue": {"name": "Hall", "address": {"latitude": "42.3601", "longitude": "-71.0589"}},
        },
    ]


@pytest.fixture()
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'api_tests.db'}",
        connect_args={"check_same_thread": False},
        future=True,
    )
    metadata.create_all(engine)
    yield engine
    metadata.drop_all(engine)


@pytest.fixture()
def event_source():
    return RecordingEventSource(event_payloads())


@pytest.fixture()
def api_client(engine, event_source):
    discovery = DiscoveryService(
        ProviderRegistry.single("eventbrite", event_source),
        places=FakePlaces(),
    )
    app = create_app(engine=engine, discovery=discovery, resolver=FakeResolver())
    app.dependency_overrides[get_engine] = lambda: engine
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
