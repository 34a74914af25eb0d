from __future__ import annotations

from typing import Dict, List

from localgeo.providers.events.base import EventSourceClient


class ProviderRegistry:
    """Simple in-memory registry for event sources, kept in registration order."""

    def __init__(self) -> None:
        self._providers: Dict[str, EventSourceClient] = {}

    @classmethod
    def single(cls, name: str, provider: EventSourceClient) -> "ProviderRegistry":
        registry = cls()
        registry.register(name, provider)
        return registry

    def register(self, name: str, provider: EventSourceClient) -> None:
        if name in self._providers:
            raise ValueError(f"Provider '{name}' already registered")
        self._providers[name] = provider

    def get(self, name: str) -> EventSourceClient:
        try:
            return self._providers[name]
        except KeyError as exc:
            raise KeyError(f"Provider '{name}' is not registered") from exc

    def list(self) -> List[str]:
        return list(self._providers.keys())
