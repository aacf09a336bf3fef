"""Lane market endpoints."""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Query, status

from ...schemas.quotes import LaneMarketModel
from ...services.market.benchmarks import calculate_market_rate, compare_to_market

router = APIRouter(prefix="/market", tags=["market"])


@router.get("/lane", response_model=LaneMarketModel, status_code=status.HTTP_200_OK)
def lane(
    origin_state: str = Query(..., min_length=2, max_length=2),
    destination_state: str = Query(..., min_length=2, max_length=2),
    miles: float = Query(..., gt=0),
    vehicle_type: str = Query("semi"),
    freight_class: Optional[str] = Query(None),
    pickup_date: Optional[date] = Query(None),
) -> LaneMarketModel:
    market = calculate_market_rate(origin_state, destination_state, miles, vehicle_type, freight_class, pickup_date)
    return LaneMarketModel.model_validate(market)


@router.get("/compare", status_code=status.HTTP_200_OK)
def compare(
    origin_state: str = Query(..., min_length=2, max_length=2),
    destination_state: str = Query(..., min_length=2, max_length=2),
    miles: float = Query(..., gt=0),
    rate: float = Query(..., gt=0),
    vehicle_type: str = Query("semi"),
) -> dict:
    """Where a quoted total sits in the lane's market range."""
    market = calculate_market_rate(origin_state, destination_state, miles, vehicle_type)
    return compare_to_market(rate, miles, market)
