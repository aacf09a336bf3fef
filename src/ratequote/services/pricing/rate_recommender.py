"""Bounded rate recommendation from trip cost and lane market signal."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Mapping, Optional

from ...data.vehicles import (
    BASE_RATES,
    FREIGHT_CLASS_MULTIPLIERS,
    LOAD_TYPE_MULTIPLIERS,
    SERVICE_MULTIPLIERS,
    WEATHER_MULTIPLIERS,
    WEIGHT_SURCHARGE_PER_LB,
    WEIGHT_SURCHARGE_THRESHOLD_LBS,
)
from ...models.domain import (
    CostBreakdown,
    FlowAnalysis,
    FuelPriceResult,
    LaneMarketResult,
    OperatingCostSettings,
    RouteResult,
    ServiceOptions,
    TollBreakdown,
)
from ..market.benchmarks import confidence_label, get_flow_multiplier, get_seasonal_multiplier
from ..routing.resolver import INTRA_STATE_PROVIDER

# Highest total_cost multiple the market will bear, by market temperature.
CEILING: dict[str, float] = {
    "hot": 1.60,
    "warm": 1.45,
    "balanced": 1.35,
    "cool": 1.25,
    "cold": 1.18,
}
COST_PLUS_MARGIN = 0.20

STRAIGHT_LINE_PENALTY = 15
FALLBACK_FUEL_PENALTY = 10
ESTIMATED_TOLLS_PENALTY = 5
INTRA_STATE_PENALTY = 10

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RateRecommendation:
    recommended_rate: float
    min_rate: float
    max_rate: float
    rate_per_mile: float
    estimated_profit: float
    profit_margin: float
    profit_per_mile: float
    confidence: str
    market_available: bool
    confidence_reasons: tuple[str, ...] = ()
    multipliers: Mapping[str, float] = field(default_factory=dict)


def weight_multiplier(load_weight_lbs: float) -> float:
    if load_weight_lbs > WEIGHT_SURCHARGE_THRESHOLD_LBS:
        return 1.0 + (load_weight_lbs - WEIGHT_SURCHARGE_THRESHOLD_LBS) * WEIGHT_SURCHARGE_PER_LB
    return 1.0


def service_multiplier(options: ServiceOptions) -> float:
    """Same-day, rush and expedite do not stack; team applies on top."""
    multiplier = 1.0
    if options.is_same_day:
        multiplier = SERVICE_MULTIPLIERS["same_day"]
    elif options.is_rush:
        multiplier = SERVICE_MULTIPLIERS["rush"]
    elif options.is_expedite:
        multiplier = SERVICE_MULTIPLIERS["expedite"]
    if options.is_team:
        multiplier *= SERVICE_MULTIPLIERS["team"]
    return multiplier


def rate_multipliers(
    weather_condition: str,
    load_type: str,
    freight_class: str,
    load_weight_lbs: float,
    pickup_date: Optional[date],
    options: ServiceOptions,
) -> dict[str, float]:
    return {
        "weather": WEATHER_MULTIPLIERS.get(weather_condition, 1.0),
        "load_type": LOAD_TYPE_MULTIPLIERS.get(load_type, 1.0),
        "freight_class": FREIGHT_CLASS_MULTIPLIERS.get(freight_class, 1.0),
        "weight": round(weight_multiplier(load_weight_lbs), 4),
        "season": get_seasonal_multiplier(pickup_date)[0],
        "service": service_multiplier(options),
    }


class RateRecommender:
    def recommend(
        self,
        costs: CostBreakdown,
        route: RouteResult,
        fuel: FuelPriceResult,
        tolls: TollBreakdown,
        flow: Optional[FlowAnalysis],
        lane: Optional[LaneMarketResult],
        operating_costs: OperatingCostSettings,
        multipliers: Mapping[str, float],
        vehicle_type: str,
    ) -> RateRecommendation:
        total_cost = costs.total_cost
        miles = route.distance_miles
        min_rate = total_cost * (1 + operating_costs.min_margin)
        applied = dict(multipliers)

        if flow is None:
            logger.info("No market data for this lane, pricing at cost plus margin")
            max_rate = max(min_rate, total_cost * CEILING["balanced"])
            recommended = min(max(total_cost * (1 + COST_PLUS_MARGIN), min_rate), max_rate)
            confidence = "low"
            reasons: list[str] = ["Market data unavailable, cost-plus pricing"]
        else:
            rate_multiplier = 1.0
            for value in multipliers.values():
                rate_multiplier *= value
            flow_multiplier, flow_label = get_flow_multiplier(flow)
            applied["market_flow"] = flow_multiplier

            target = total_cost / (1 - operating_costs.target_margin) * rate_multiplier * flow_multiplier
            floor = BASE_RATES.get(vehicle_type, BASE_RATES["semi"]) * miles * rate_multiplier
            target = max(target, floor)
            max_rate = max(min_rate, total_cost * CEILING[flow.market_temperature])
            recommended = min(max(target, min_rate), max_rate)
            confidence, reasons = self._confidence(route, fuel, tolls, lane)
            reasons.append(flow_label)

        recommended = round(recommended, 2)
        estimated_profit = recommended - total_cost
        return RateRecommendation(
            recommended_rate=recommended,
            min_rate=round(min_rate, 2),
            max_rate=round(max_rate, 2),
            rate_per_mile=round(recommended / miles, 2),
            estimated_profit=round(estimated_profit, 2),
            profit_margin=round(estimated_profit / recommended, 4) if recommended else 0.0,
            profit_per_mile=round(estimated_profit / miles, 2),
            confidence=confidence,
            market_available=flow is not None,
            confidence_reasons=tuple(reasons),
            multipliers=applied,
        )

    @staticmethod
    def _confidence(
        route: RouteResult,
        fuel: FuelPriceResult,
        tolls: TollBreakdown,
        lane: Optional[LaneMarketResult],
    ) -> tuple[str, list[str]]:
        score = lane.confidence if lane is not None else 70
        reasons = [lane.confidence_reason] if lane is not None else []
        if route.routing_provider == "fallback":
            score -= STRAIGHT_LINE_PENALTY
            reasons.append("Distance estimated from a straight line")
        if route.provider_name == INTRA_STATE_PROVIDER:
            score -= INTRA_STATE_PENALTY
            reasons.append("Endpoints placed at a state centre, distance is a minimum-haul estimate")
        if fuel.source == "fallback":
            score -= FALLBACK_FUEL_PENALTY
            reasons.append("Fuel price from the regional fallback table")
        if tolls.source == "fallback":
            score -= ESTIMATED_TOLLS_PENALTY
            reasons.append("Tolls estimated from state averages")
        return confidence_label(score), reasons
