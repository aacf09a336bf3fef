"""Standalone distance endpoint."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...schemas.quotes import DistanceRequest, RouteModel
from ...services.quotes.engine import get_quote_engine
from ...services.routing.resolver import calculate_distance

router = APIRouter(tags=["distance"])


@router.post("/distance", response_model=RouteModel, status_code=status.HTTP_200_OK)
def distance(payload: DistanceRequest) -> RouteModel:
    specs = payload.vehicle.to_domain() if payload.vehicle else None
    route = calculate_distance(payload.origin, payload.destination, specs, resolver=get_quote_engine().resolver)
    return RouteModel.model_validate(route)
