from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from localgeo.api.routers import events, pins, places
from localgeo.domain.errors import CollaboratorError, PinNotFound, ValidationError
from localgeo.hub.provider_registry import ProviderRegistry
from localgeo.infra.database import get_engine as build_engine
from localgeo.logging_setup import configure_logging
from localgeo.providers.events.base import EmptyEventSource
from localgeo.providers.events.eventbrite import EventbriteEventSource
from localgeo.providers.places.google_places import GooglePlacesSource
from localgeo.providers.places.mapbox import MapboxPlaceResolver
from localgeo.services.discovery import DiscoveryService

logger = logging.getLogger(__name__)


def build_discovery() -> DiscoveryService:
    event_source = EventbriteEventSource() if os.getenv("EVENTBRITE_TOKEN") else EmptyEventSource()
    places = GooglePlacesSource() if os.getenv("GOOGLE_PLACES_API_KEY") else None
    if places is None:
        logger.warning("GOOGLE_PLACES_API_KEY not set; restaurants and attractions will be empty")
    return DiscoveryService(ProviderRegistry.single("eventbrite", event_source), places=places)


def create_app(engine=None, discovery=None, resolver=None) -> FastAPI:
    configure_logging()
    app = FastAPI(title="Localgeo Discovery API", version="0.1.0")
    if engine is None:
        engine = build_engine() if os.getenv("DATABASE_URL") else None
    app.state.db_engine = engine
    app.state.discovery = discovery or build_discovery()
    if resolver is None and os.getenv("MAPBOX_API_KEY"):
        resolver = MapboxPlaceResolver()
    app.state.place_resolver = resolver

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[os.getenv("FRONTEND_ORIGIN", "http://localhost:5173")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ValidationError)
    def _validation_error(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(PinNotFound)
    def _pin_not_found(request: Request, exc: PinNotFound):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(CollaboratorError)
    def _collaborator_error(request: Request, exc: CollaboratorError):
        logger.error("Upstream failure: %s", exc)
        return JSONResponse(status_code=502, content={"detail": f"Upstream {exc.source} request failed"})

    app.include_router(pins.router, prefix="/api")
    app.include_router(events.router, prefix="/api")
    app.include_router(places.router, prefix="/api")
    return app


app = create_app()
