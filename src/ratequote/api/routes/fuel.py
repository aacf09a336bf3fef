"""Diesel price endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...data.fuel import STATE_TO_PADD
from ...errors import ValidationError
from ...schemas.quotes import FuelPriceModel, FuelRefreshResponse
from ...services.quotes.engine import get_quote_engine

router = APIRouter(prefix="/fuel", tags=["fuel"])


@router.get("/{state}", response_model=FuelPriceModel, status_code=status.HTTP_200_OK)
def fuel_price(state: str) -> FuelPriceModel:
    code = state.strip().upper()
    if code != "US" and code not in STATE_TO_PADD:
        raise ValidationError(f"Unknown state code '{state}'.", field="state")
    return FuelPriceModel.model_validate(get_quote_engine().fuel.get_fuel_price_for_state(code))


@router.post("/refresh", response_model=FuelRefreshResponse, status_code=status.HTTP_200_OK)
def refresh() -> FuelRefreshResponse:
    """Refresh every PADD series into the price cache."""
    return FuelRefreshResponse.model_validate(get_quote_engine().fuel.update_all_fuel_prices())
