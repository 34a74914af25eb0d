from __future__ import annotations

from datetime import date as date_type
from typing import Optional

from fastapi import APIRouter, Depends, Query

from localgeo.api.deps import get_discovery
from localgeo.api.routers.places import viewer_point
from localgeo.domain.models import ViewerQuery
from localgeo.domain.ranking import DEFAULT_RADIUS_MILES
from localgeo.services.discovery import DiscoveryService

router = APIRouter(tags=["events"])


@router.get("/events")
def events_by_date(
    city: str = Query("New York"),
    date: Optional[date_type] = Query(None),
    q: Optional[str] = Query(None),
    lat: Optional[float] = Query(None),
    lon: Optional[float] = Query(None),
    discovery: DiscoveryService = Depends(get_discovery),
):
    events = discovery.events_on(city, day=date, keyword=q, viewer=viewer_point(lat, lon))
    return [event.to_dict() for event in events]


@router.get("/events/search")
def search_by_artist(
    artist: str = Query(..., min_length=1),
    discovery: DiscoveryService = Depends(get_discovery),
):
    return [event.to_dict() for event in discovery.search_by_keyword(artist)]


@router.get("/events/tonight")
def tonight(
    city: str = Query(...),
    lat: Optional[float] = Query(None),
    lon: Optional[float] = Query(None),
    mood: Optional[str] = Query(None),
    q: Optional[str] = Query(None),
    radius_miles: float = Query(DEFAULT_RADIUS_MILES, ge=0),
    discovery: DiscoveryService = Depends(get_discovery),
):
    query = ViewerQuery(point=viewer_point(lat, lon), radius_miles=radius_miles, mood=mood)
    events = discovery.tonight(city, query, keyword=q)
    return [event.to_dict() for event in events]
