"""Standalone toll endpoint."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...schemas.quotes import TollBreakdownModel, TollRequest
from ...services.geospatial import road_distance_estimate
from ...services.quotes.engine import get_quote_engine
from ...services.routing.state_locator import derive_states, locate_state, straight_path

router = APIRouter(tags=["tolls"])


@router.post("/tolls", response_model=TollBreakdownModel, status_code=status.HTTP_200_OK)
def tolls(payload: TollRequest) -> TollBreakdownModel:
    """TollGuru tolls between two points, or a state-average estimate."""
    estimator = get_quote_engine().tolls
    origin = (payload.origin_lat, payload.origin_lng)
    destination = (payload.dest_lat, payload.dest_lng)

    breakdown = estimator.calculate_tolls(*origin, *destination, payload.vehicle_type, payload.fuel_price)
    if breakdown is None:
        miles = payload.distance_miles or road_distance_estimate(*origin, *destination)
        states = [code.strip().upper() for code in payload.states_crossed if code.strip()]
        miles_by_state = None
        if not states:
            traversal = derive_states(
                straight_path(origin, destination), miles, locate_state(*origin), locate_state(*destination)
            )
            states, miles_by_state = list(traversal.states), traversal.miles_by_state
        breakdown = estimator.estimate_tolls_fallback(miles, states, miles_by_state)
    return TollBreakdownModel.model_validate(breakdown)
