"""Toll estimation: TollGuru when available, per-state averages otherwise."""

from __future__ import annotations

import dataclasses
import logging
from typing import Mapping, Optional, Sequence

from ...config import ProviderConfig, Settings, settings
from ...data.tolls import (
    CASH_TOLL_PREMIUM,
    DEFAULT_STATE_TOLL_RATE,
    FREIGHT_VEHICLE_MAP,
    STATE_TOLL_RATES,
    TOLLGURU_VEHICLE_CLASSES,
    UNKNOWN_ROUTE_TOLL_RATE,
)
from ...errors import NON_FATAL_PROVIDER_ERRORS
from ...models.domain import RouteResult, TollBreakdown
from ..cache import TTLCache
from ..providers.chain import call_with_timeout
from .tollguru_client import TollGuruClient

NATIONAL = "US"

logger = logging.getLogger(__name__)


def axle_class_for(vehicle_type: str) -> str:
    if vehicle_type in TOLLGURU_VEHICLE_CLASSES:
        return vehicle_type
    return FREIGHT_VEHICLE_MAP.get(vehicle_type, "5axle")


def toll_cache_for(config: Settings = settings) -> TTLCache[TollBreakdown]:
    return TTLCache(ttl_seconds=config.toll_cache_ttl_hours * 3600)


def estimate_tolls_fallback(
    distance_miles: float,
    states_crossed: Sequence[str],
    miles_by_state: Optional[Mapping[str, float]] = None,
) -> TollBreakdown:
    """Average-rate toll estimate; always succeeds.

    Each state is charged its average rate for the miles driven in it, with
    miles split evenly when no per-state split is known. A route with no
    known states is charged a national rate attributed to ``US``.
    """
    states = list(dict.fromkeys(code.strip().upper() for code in states_crossed if code and code.strip()))
    if not states:
        by_state = {NATIONAL: int(round(distance_miles * UNKNOWN_ROUTE_TOLL_RATE * 100))}
    else:
        split = [float((miles_by_state or {}).get(code, 0.0)) for code in states]
        if sum(split) > 0:
            scale = distance_miles / sum(split)
            state_miles = [miles * scale for miles in split]
        else:
            state_miles = [distance_miles / len(states)] * len(states)
        by_state = {
            code: int(round(miles * STATE_TOLL_RATES.get(code, DEFAULT_STATE_TOLL_RATE) * 100))
            for code, miles in zip(states, state_miles)
        }

    total = sum(by_state.values()) / 100
    return TollBreakdown(
        total_tolls=total,
        tolls_by_state={code: cents / 100 for code, cents in by_state.items()},
        cash_tolls=round(total * CASH_TOLL_PREMIUM, 2),
        transponder_tolls=total,
        toll_count=0,
        source="fallback",
    )


class TollEstimator:
    def __init__(
        self,
        config: Settings = settings,
        cache: TTLCache[TollBreakdown] | None = None,
        client: TollGuruClient | None = None,
    ) -> None:
        self.timeout = config.toll_timeout_seconds
        self.cache = cache if cache is not None else toll_cache_for(config)
        if client is None and ProviderConfig.from_settings(config).tolls:
            client = TollGuruClient(config=config)
        self.client = client

    def calculate_tolls(
        self,
        origin_lat: float,
        origin_lng: float,
        dest_lat: float,
        dest_lng: float,
        vehicle_type: str,
        fuel_price: float | None = None,
    ) -> Optional[TollBreakdown]:
        """Plaza-level tolls from TollGuru, or None when it cannot answer."""
        if self.client is None:
            return None

        axle_class = axle_class_for(vehicle_type)
        key = (round(origin_lat, 3), round(origin_lng, 3), round(dest_lat, 3), round(dest_lng, 3), axle_class)
        cached = self.cache.get(key)
        if cached is not None:
            return dataclasses.replace(cached, source="cache")

        try:
            breakdown = call_with_timeout(
                lambda: self.client.route_tolls((origin_lat, origin_lng), (dest_lat, dest_lng), axle_class, fuel_price),
                self.timeout,
                provider="tollguru",
            )
        except NON_FATAL_PROVIDER_ERRORS as exc:
            logger.warning(f"TollGuru lookup failed: {exc}")
            return None

        if breakdown is not None:
            self.cache.set(key, breakdown)
        return breakdown

    def estimate_tolls_fallback(
        self,
        distance_miles: float,
        states_crossed: Sequence[str],
        miles_by_state: Optional[Mapping[str, float]] = None,
    ) -> TollBreakdown:
        return estimate_tolls_fallback(distance_miles, states_crossed, miles_by_state)

    def estimate_route_tolls(
        self, route: RouteResult, vehicle_type: str, fuel_price: float | None = None
    ) -> TollBreakdown:
        if route.has_coordinates:
            breakdown = self.calculate_tolls(
                route.origin_lat,
                route.origin_lng,
                route.destination_lat,
                route.destination_lng,
                vehicle_type,
                fuel_price,
            )
            if breakdown is not None:
                return breakdown
        logger.info(f"Estimating tolls from state averages for {route.origin_formatted} -> {route.destination_formatted}")
        return estimate_tolls_fallback(route.distance_miles, route.states_crossed, route.miles_by_state)
