from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine

from localgeo.domain.errors import PinNotFound, ValidationError
from localgeo.domain.geo import GeoPoint
from localgeo.domain.geotag import tag
from localgeo.domain.models import PinRecord, ResolvedPlace
from localgeo.infra.db.pins_repository import PinsRepository
from localgeo.infra.db.tables import metadata
from localgeo.services.pins import PinService

PLACES = {
    "poi-soho": ResolvedPlace("poi-soho", GeoPoint(40.7233, -74.0030), "SoHo, New York", "poi"),
    "poi-dumbo": ResolvedPlace("poi-dumbo", GeoPoint(40.7033, -73.9881), "DUMBO, Brooklyn", "poi"),
    "addr-home": ResolvedPlace("addr-home", GeoPoint(40.7300, -74.0100), "12 Some St", "address"),
}


class _FakeResolver:
    def __init__(self):
        self.calls = []

    def resolve(self, place_id):
        self.calls.append(place_id)
        return PLACES[place_id]


@pytest.fixture()
def repository(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'pins.db'}",
        connect_args={"check_same_thread": False},
        future=True,
    )
    metadata.create_all(engine)
    yield PinsRepository(engine)
    metadata.drop_all(engine)


@pytest.fixture()
def service(repository):
    return PinService(repository, resolver=_FakeResolver())


def test_create_pin_stores_geo_tag_of_resolved_place(service, repository):
    pin = service.create_pin("alice", "poi-soho", "Great coffee", shared=True, type_label="food")

    stored = repository.get(pin.id)
    assert stored is not None
    assert stored.geo_tag == tag(PLACES["poi-soho"].point)
    assert stored.city == "SoHo, New York"
    assert stored.place_id == "poi-soho"
    assert stored.shared is True
    assert stored.type == "food"


def test_create_pin_rejects_non_poi(service, repository):
    with pytest.raises(ValidationError):
        service.create_pin("alice", "addr-home", "My flat")
    assert repository.scan_all() == []


@pytest.mark.parametrize("content", ["", "   ", "x" * 201])
def test_create_pin_validates_content(service, content):
    with pytest.raises(ValidationError):
        service.create_pin("alice", "poi-soho", content)


def test_create_pin_rejects_long_type(service):
    with pytest.raises(ValidationError):
        service.create_pin("alice", "poi-soho", "ok", type_label="t" * 51)


def test_update_relocates_and_retags(service, repository):
    pin = service.create_pin("alice", "poi-soho", "Coffee")
    old_tag = pin.geo_tag

    updated = service.update_pin(pin.id, "alice", "poi-dumbo", "Bridge views", shared=True)

    stored = repository.get(pin.id)
    assert updated.geo_tag == tag(PLACES["poi-dumbo"].point)
    assert stored.geo_tag == updated.geo_tag != old_tag
    assert stored.content == "Bridge views"
    assert stored.city == "DUMBO, Brooklyn"


def test_only_owner_can_update_or_delete(service, repository):
    pin = service.create_pin("alice", "poi-soho", "Coffee")

    with pytest.raises(PinNotFound):
        service.update_pin(pin.id, "bob", "poi-dumbo", "mine now")
    with pytest.raises(PinNotFound):
        service.delete_pin(pin.id, "bob")
    assert repository.get(pin.id).content == "Coffee"

    service.delete_pin(pin.id, "alice")
    assert repository.get(pin.id) is None


def test_unknown_pin_is_not_found(service):
    with pytest.raises(PinNotFound):
        service.delete_pin("missing", "alice")


def test_missing_resolver_is_reported(repository):
    with pytest.raises(RuntimeError):
        PinService(repository).create_pin("alice", "poi-soho", "Coffee")


def _seed(repository, pin_id, point, minutes_ago, shared=True, type_label=None, owner="alice"):
    pin = PinRecord(
        id=pin_id,
        owner_id=owner,
        point=point,
        content=f"pin {pin_id}",
        shared=shared,
        type=type_label,
        created_at=datetime(2025, 1, 2, 12, 0, tzinfo=timezone.utc) - timedelta(minutes=minutes_ago),
    )
    repository.save(pin)
    return pin


def test_shared_feed_filters_sorts_and_pages(service, repository):
    center = GeoPoint(40.7128, -74.0060)
    _seed(repository, "old", GeoPoint(40.7130, -74.0062), 30, type_label="food")
    _seed(repository, "new", GeoPoint(40.7140, -74.0070), 5, type_label="art")
    _seed(repository, "private", GeoPoint(40.7131, -74.0061), 1, shared=False)
    _seed(repository, "boston", GeoPoint(42.3601, -71.0589), 2)

    nearby = service.shared_feed(center, radius_miles=10)
    assert [pin.id for pin in nearby] == ["new", "old"]

    everywhere = service.shared_feed(center)
    assert [pin.id for pin in everywhere] == ["boston", "new", "old"]

    assert [pin.id for pin in service.shared_feed(center, radius_miles=10, type_label="food")] == ["old"]
    assert [pin.id for pin in service.shared_feed(center, size=1, page=1)] == ["new"]
    assert service.shared_feed(center, size=2, page=5) == []


def test_shared_feed_rejects_bad_paging(service):
    with pytest.raises(ValidationError):
        service.shared_feed(GeoPoint(0, 0), page=-1)


def test_my_pins_newest_first(service, repository):
    _seed(repository, "a", GeoPoint(40.0, -74.0), 10, shared=False)
    _seed(repository, "b", GeoPoint(40.0, -74.0), 1, shared=False)
    _seed(repository, "c", GeoPoint(40.0, -74.0), 1, owner="bob")

    assert [pin.id for pin in service.my_pins("alice")] == ["b", "a"]
