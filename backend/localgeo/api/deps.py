from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, Request
from sqlalchemy.engine import Engine

from localgeo.infra.db.pins_repository import PinsRepository
from localgeo.services.discovery import DiscoveryService
from localgeo.services.pins import PinService


def get_engine(request: Request) -> Engine:
    engine = getattr(request.app.state, "db_engine", None)
    if engine is None:
        raise HTTPException(status_code=500, detail="Database engine not configured")
    return engine


def get_discovery(request: Request) -> DiscoveryService:
    return request.app.state.discovery.for_request()


def get_pin_service(request: Request, engine: Engine = Depends(get_engine)) -> PinService:
    return PinService(PinsRepository(engine), resolver=request.app.state.place_resolver)


def get_owner_id(request: Request) -> str:
    owner_id: Optional[str] = request.headers.get("X-User-Id")
    if not owner_id:
        raise HTTPException(status_code=401, detail="X-User-Id header is required")
    return owner_id
