from __future__ import annotations

import pytest

from localgeo.hub.provider_registry import ProviderRegistry
from localgeo.providers.events.base import EmptyEventSource, StaticEventSource


def test_register_and_list_in_order():
    registry = ProviderRegistry()
    registry.register("b", EmptyEventSource())
    registry.register("a", StaticEventSource([]))
    assert registry.list() == ["b", "a"]


def test_get_unknown_provider_raises():
    with pytest.raises(KeyError):
        ProviderRegistry().get("missing")


def test_register_duplicate_name_raises():
    registry = ProviderRegistry.single("eventbrite", EmptyEventSource())
    with pytest.raises(ValueError):
        registry.register("eventbrite", EmptyEventSource())
