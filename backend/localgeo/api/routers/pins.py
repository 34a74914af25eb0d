from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from localgeo.api.deps import get_owner_id, get_pin_service
from localgeo.domain.geo import GeoPoint
from localgeo.services.pins import PinService

router = APIRouter(tags=["pins"])


class PinPayload(BaseModel):
    place_id: str
    content: str
    shared: bool = False
    type: Optional[str] = None


@router.get("/feed/shared")
def shared_feed(
    lat: float = Query(...),
    lon: float = Query(...),
    radius_miles: Optional[float] = Query(None, ge=0),
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=200),
    type: str = Query("all"),
    service: PinService = Depends(get_pin_service),
):
    center = GeoPoint(lat, lon)
    pins = service.shared_feed(center, radius_miles=radius_miles, page=page, size=size, type_label=type)
    return [pin.to_dict() for pin in pins]


@router.post("/pins")
def create_pin(
    payload: PinPayload,
    owner_id: str = Depends(get_owner_id),
    service: PinService = Depends(get_pin_service),
):
    pin = service.create_pin(
        owner_id,
        payload.place_id,
        payload.content,
        shared=payload.shared,
        type_label=payload.type,
    )
    return pin.to_dict()


@router.put("/pins/{pin_id}")
def update_pin(
    pin_id: str,
    payload: PinPayload,
    owner_id: str = Depends(get_owner_id),
    service: PinService = Depends(get_pin_service),
):
    pin = service.update_pin(
        pin_id,
        owner_id,
        payload.place_id,
        payload.content,
        shared=payload.shared,
        type_label=payload.type,
    )
    return pin.to_dict()


@router.delete("/pins/{pin_id}", status_code=204)
def delete_pin(
    pin_id: str,
    owner_id: str = Depends(get_owner_id),
    service: PinService = Depends(get_pin_service),
):
    service.delete_pin(pin_id, owner_id)


@router.get("/pins/mine")
def my_pins(owner_id: str = Depends(get_owner_id), service: PinService = Depends(get_pin_service)):
    return [pin.to_dict() for pin in service.my_pins(owner_id)]
