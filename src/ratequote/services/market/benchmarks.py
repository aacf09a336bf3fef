"""Lane market rate estimates from static spot-market benchmarks."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ...data.lanes import (
    DEFAULT_BENCHMARK,
    DISTANCE_CURVES,
    EQUIPMENT_PREMIUMS,
    LANE_BENCHMARKS,
    MAJOR_DESTINATION_REGIONS,
    MAJOR_ORIGIN_REGIONS,
    SEASONAL_PERIODS,
)
from ...models.domain import FlowAnalysis, LaneMarketResult, MarketFactor
from .regions import (
    calculate_flow_direction,
    default_flow_analysis,
    get_region_display_name,
    get_region_from_state,
    get_return_load_potential,
)

logger = logging.getLogger(__name__)


def get_lane_benchmark(origin_region: Optional[str], destination_region: Optional[str]) -> tuple[float, float, float]:
    if not origin_region or not destination_region:
        return DEFAULT_BENCHMARK
    return LANE_BENCHMARKS.get(origin_region, {}).get(destination_region, DEFAULT_BENCHMARK)


def get_distance_multiplier(miles: float) -> tuple[float, str]:
    for max_miles, multiplier, label in DISTANCE_CURVES:
        if max_miles is None or miles <= max_miles:
            return multiplier, label
    return DISTANCE_CURVES[-1][1], DISTANCE_CURVES[-1][2]


def get_equipment_multiplier(vehicle_type: str | None, freight_class: str | None = None) -> tuple[float, str]:
    vehicle = (vehicle_type or "").lower()
    freight = (freight_class or "").lower()
    if "refrigerated" in freight or "reefer" in freight or "reefer" in vehicle:
        return EQUIPMENT_PREMIUMS["reefer"]
    if any(kind in freight for kind in ("flatbed", "step_deck", "lowboy")):
        return EQUIPMENT_PREMIUMS["flatbed"]
    if any(kind in freight for kind in ("oversized", "hazmat", "tanker", "specialized")):
        return EQUIPMENT_PREMIUMS["specialized"]
    return EQUIPMENT_PREMIUMS["dry_van"]


def get_seasonal_multiplier(pickup_date: date | None = None) -> tuple[float, str]:
    month = (pickup_date or date.today()).month
    return SEASONAL_PERIODS.get(month, (1.0, "Normal"))


def get_flow_multiplier(flow: FlowAnalysis) -> tuple[float, str]:
    if flow.direction == "headhaul":
        return 1.08 + (0.07 if flow.imbalance_score > 4 else 0.0), f"Headhaul ({flow.market_temperature} market)"
    if flow.direction == "backhaul":
        return 0.88 - (0.05 if flow.imbalance_score < -4 else 0.0), f"Backhaul ({flow.market_temperature} market)"
    return 1.0, f"Balanced ({flow.market_temperature} market)"


def calculate_confidence(
    origin_region: Optional[str], destination_region: Optional[str], miles: float
) -> tuple[int, str, str]:
    """Score how well the benchmarks cover a lane, 40 to 95."""
    score = 70
    reasons: list[str] = []

    if origin_region and destination_region:
        score += 15
        reasons.append("Known lane")
    else:
        score -= 15
        reasons.append("Unknown region")

    if origin_region in MAJOR_ORIGIN_REGIONS:
        score += 5
    if destination_region in MAJOR_DESTINATION_REGIONS:
        score += 5

    if 400 <= miles <= 1500:
        score += 5
        reasons.append("Standard distance")
    elif miles < 200 or miles > 2500:
        score -= 10
        reasons.append("Unusual distance")

    score = min(95, max(40, score))
    return score, confidence_label(score), ", ".join(reasons) or "Standard estimate"


def confidence_label(score: float) -> str:
    if score >= 75:
        return "high"
    if score >= 55:
        return "medium"
    return "low"


def calculate_market_rate(
    origin_state: str | None,
    destination_state: str | None,
    total_miles: float,
    vehicle_type: str | None = "semi",
    freight_class: str | None = None,
    pickup_date: date | None = None,
) -> LaneMarketResult:
    """Estimate the spot-market range for a lane.

    Unknown states do not fail: the default benchmark and a neutral flow are
    used and the confidence drops accordingly.
    """
    origin_region = get_region_from_state(origin_state)
    destination_region = get_region_from_state(destination_state)
    if origin_region is None or destination_region is None:
        logger.warning(f"Unknown region for lane {origin_state} -> {destination_state}; using default benchmark")

    low, mid, high = get_lane_benchmark(origin_region, destination_region)
    distance_multiplier, distance_label = get_distance_multiplier(total_miles)
    equipment_multiplier, equipment_label = get_equipment_multiplier(vehicle_type, freight_class)
    seasonal_multiplier, seasonal_label = get_seasonal_multiplier(pickup_date)

    if origin_region and destination_region:
        flow = calculate_flow_direction(origin_region, destination_region)
    else:
        flow = default_flow_analysis()
    flow_multiplier, flow_label = get_flow_multiplier(flow)

    total_multiplier = distance_multiplier * equipment_multiplier * seasonal_multiplier * flow_multiplier

    market_low = round(low * total_multiplier, 2)
    market_mid = round(mid * total_multiplier, 2)
    market_high = round(high * total_multiplier, 2)

    score, label, reason = calculate_confidence(origin_region, destination_region, total_miles)

    origin_name = get_region_display_name(origin_region) if origin_region else "Unknown"
    destination_name = get_region_display_name(destination_region) if destination_region else "Unknown"
    factors = (
        MarketFactor("Lane Base Rate", 1.0, f"{origin_name} -> {destination_name}"),
        MarketFactor("Distance", distance_multiplier, f"{round(total_miles)} mi ({distance_label})"),
        MarketFactor("Equipment", equipment_multiplier, equipment_label),
        MarketFactor("Season", seasonal_multiplier, seasonal_label),
        MarketFactor("Market Flow", flow_multiplier, flow_label),
    )

    return LaneMarketResult(
        market_low=market_low,
        market_mid=market_mid,
        market_high=market_high,
        total_low=round(market_low * total_miles),
        total_mid=round(market_mid * total_miles),
        total_high=round(market_high * total_miles),
        confidence=score,
        confidence_label=label,
        confidence_reason=reason,
        factors=factors,
        total_multiplier=round(total_multiplier, 3),
        origin_region=origin_region,
        destination_region=destination_region,
        flow=flow,
        return_load_potential=get_return_load_potential(destination_region, market_mid),
        market_spread=round(market_high - market_low, 2),
    )


def compare_to_market(rate: float, miles: float, market: LaneMarketResult) -> dict:
    """Place a total rate within the lane's market range."""
    if miles <= 0:
        raise ValueError("miles must be positive.")
    rate_per_mile = rate / miles

    if rate_per_mile < market.market_low:
        percentile = round(rate_per_mile / market.market_low * 25)
        return {
            "position": "below_market",
            "percentile": max(1, percentile),
            "recommendation": "Rate is below market. Consider negotiating higher.",
        }

    if rate_per_mile > market.market_high:
        overage = (rate_per_mile - market.market_high) / (market.market_high - market.market_mid)
        return {
            "position": "above_market",
            "percentile": min(99, 75 + round(overage * 25)),
            "recommendation": "Excellent rate! This is above typical market rates.",
        }

    spread = market.market_high - market.market_low
    offset = rate_per_mile - market.market_low
    return {
        "position": "at_market",
        "percentile": 25 + round(offset / spread * 50) if spread > 0 else 50,
        "recommendation": "Rate is within normal market range.",
    }
