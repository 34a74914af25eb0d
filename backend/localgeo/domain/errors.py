from __future__ import annotations


class ValidationError(ValueError):
    """Invalid input for a single write or query (bad coordinates, oversized content)."""


class CollaboratorError(RuntimeError):
    """Transport or payload failure from an external source."""

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source


class AmbiguousParseError(ValueError):
    """A timestamp from an external payload could not be parsed."""


class PinNotFound(LookupError):
    """Pin does not exist or is not owned by the caller."""


class DiscoveryCancelled(RuntimeError):
    """The caller abandoned a discovery request; partial results are discarded."""
