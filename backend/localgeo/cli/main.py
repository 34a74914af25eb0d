import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer

from localgeo.domain.enrichment import enrich
from localgeo.domain.errors import ValidationError
from localgeo.domain.geo import GeoPoint, distance_miles
from localgeo.domain.geotag import tag
from localgeo.domain.models import PinRecord
from localgeo.domain.proximity import nearby
from localgeo.domain.ranking import DEFAULT_RADIUS_MILES, select_and_rank
from localgeo.hub.event_aggregator import EventAggregator
from localgeo.hub.provider_registry import ProviderRegistry
from localgeo.logging_setup import configure_logging
from localgeo.providers.events.base import StaticEventSource
from localgeo.providers.events.eventbrite import EventbriteEventSource

app = typer.Typer(help="CLI for nearby pins and tonight's events")


def _viewer(lat: Optional[float], lon: Optional[float]) -> Optional[GeoPoint]:
    if lat is None or lon is None:
        return None
    try:
        return GeoPoint(lat, lon)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _load_pins(path: Path) -> list[PinRecord]:
    payload = json.loads(path.read_text())
    pins = []
    for item in payload:
        created = item.get("created_at")
        pins.append(
            PinRecord(
                id=item["id"],
                owner_id=item.get("owner_id", "unknown"),
                point=GeoPoint(item["latitude"], item["longitude"]),
                content=item.get("content") or item["id"],
                shared=bool(item.get("shared", True)),
                type=item.get("type"),
                created_at=datetime.fromisoformat(created) if created else datetime.now(timezone.utc),
            )
        )
    return pins


@app.command("geotag")
def cli_geotag(
    lat: float = typer.Option(..., help="Latitude"),
    lon: float = typer.Option(..., help="Longitude"),
):
    point = _viewer(lat, lon)
    typer.echo(tag(point))


@app.command("nearby")
def cli_nearby(
    pins_file: Path = typer.Option(..., exists=True, dir_okay=False, help="JSON list of pins"),
    lat: float = typer.Option(..., help="Center latitude"),
    lon: float = typer.Option(..., help="Center longitude"),
    radius: Optional[float] = typer.Option(None, help="Radius in miles; omit to list every pin"),
):
    center = _viewer(lat, lon)
    matches = nearby(center, radius, _load_pins(pins_file))
    if not matches:
        typer.echo("No pins found")
        raise typer.Exit(code=0)
    typer.echo("id\tgeo_tag\tmiles")
    for pin in matches:
        typer.echo(f"{pin.id}\t{pin.geo_tag}\t{distance_miles(center, pin.point):.2f}")


@app.command("tonight")
def cli_tonight(
    city: str = typer.Option(..., help="City or region"),
    lat: Optional[float] = typer.Option(None, help="Viewer latitude"),
    lon: Optional[float] = typer.Option(None, help="Viewer longitude"),
    mood: Optional[str] = typer.Option(None, help="chill, loud, date"),
    radius: float = typer.Option(DEFAULT_RADIUS_MILES, help="Radius in miles"),
    keyword: Optional[str] = typer.Option(None, help="Only events matching this keyword (artist, band)"),
    events_file: Optional[Path] = typer.Option(
        None, exists=True, dir_okay=False, help="Raw event payloads (JSON) instead of Eventbrite"
    ),
):
    configure_logging("WARNING")
    viewer = _viewer(lat, lon)
    if events_file is not None:
        registry = ProviderRegistry.single("file", StaticEventSource(json.loads(events_file.read_text())))
    else:
        registry = ProviderRegistry.single("eventbrite", EventbriteEventSource())
    raw = EventAggregator(registry).fetch_tonight(city, keyword=keyword)
    events = select_and_rank(enrich(raw, viewer), radius_miles=radius, mood=mood)
    if not events:
        typer.echo("No events found for tonight")
        raise typer.Exit(code=0)
    typer.echo("start\tname\tvenue\tmiles")
    for event in events:
        miles = "-" if event.distance_miles is None else f"{event.distance_miles:.1f}"
        typer.echo(f"{event.start_time_utc}\t{event.name}\t{event.event.venue}\t{miles}")


if __name__ == "__main__":
    app()
