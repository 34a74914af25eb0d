from __future__ import annotations

from datetime import date as date_type
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from localgeo.api.deps import get_discovery
from localgeo.domain.geo import GeoPoint
from localgeo.services.discovery import DiscoveryService

router = APIRouter(tags=["places"])


def viewer_point(lat: Optional[float], lon: Optional[float]) -> Optional[GeoPoint]:
    if lat is None or lon is None:
        return None
    return GeoPoint(lat, lon)


def _serialize(results: dict) -> dict:
    return {name: [item.to_dict() for item in items] for name, items in results.items()}


@router.get("/places/all")
def all_places(
    location: str = Query(...),
    latitude: Optional[float] = Query(None),
    longitude: Optional[float] = Query(None),
    date: Optional[date_type] = Query(None),
    discovery: DiscoveryService = Depends(get_discovery),
):
    results = discovery.fetch_all(location, viewer=viewer_point(latitude, longitude), day=date)
    return _serialize(results)


@router.get("/places/category/{category}")
def places_by_category(
    category: str,
    location: str = Query(...),
    latitude: Optional[float] = Query(None),
    longitude: Optional[float] = Query(None),
    date: Optional[date_type] = Query(None),
    discovery: DiscoveryService = Depends(get_discovery),
):
    items = discovery.fetch_category(category, location, viewer=viewer_point(latitude, longitude), day=date)
    return [item.to_dict() for item in items]


@router.get("/places/search")
def search_places(
    query: str = Query(..., min_length=1),
    location: str = Query(...),
    latitude: Optional[float] = Query(None),
    longitude: Optional[float] = Query(None),
    discovery: DiscoveryService = Depends(get_discovery),
):
    results = discovery.search_all(query, location, viewer=viewer_point(latitude, longitude))
    return _serialize(results)


@router.get("/places/{source}/{item_id}")
def place_by_id(
    source: str,
    item_id: str,
    discovery: DiscoveryService = Depends(get_discovery),
):
    item = discovery.lookup(source, item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"{source} item {item_id} not found")
    return item.to_dict()
