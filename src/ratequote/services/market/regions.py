"""Region model: state to freight region mapping and lane flow analysis."""

from __future__ import annotations

import logging
from typing import Optional

from ...data.regions import REGION_CHARACTERISTICS, RETURN_LOAD_POTENTIAL, STATE_TO_REGION
from ...errors import UnknownStateError
from ...models.domain import FlowAnalysis, LaneAnalysis, ReturnLoadPotential

# Share of a region's inbound strength that becomes loads available to trucks.
LOAD_ESTIMATE_FACTOR = 0.4
HEADHAUL_THRESHOLD = 1.5
BACKHAUL_THRESHOLD = -1.5
# Market temperature bands on the imbalance score, symmetric around zero.
HOT_FLOOR = 3.0
WARM_FLOOR = 1.0
COOL_FLOOR = -3.0
BALANCED_FLOOR = -1.0

logger = logging.getLogger(__name__)


def get_region_from_state(state_code: str | None) -> Optional[str]:
    """Region for a two-letter state code, or None when the code is unmapped."""
    code = (state_code or "").strip().upper()
    region = STATE_TO_REGION.get(code)
    if region is None:
        logger.warning(f"No freight region for state code {state_code!r}")
    return region


def resolve_region(state_code: str | None) -> str:
    region = get_region_from_state(state_code)
    if region is None:
        raise UnknownStateError(state_code or "")
    return region


def get_region_display_name(region: str) -> str:
    characteristics = REGION_CHARACTERISTICS.get(region)
    return characteristics.name if characteristics else region


def _temperature(score: float) -> str:
    if score >= HOT_FLOOR:
        return "hot"
    if score >= WARM_FLOOR:
        return "warm"
    if score > BALANCED_FLOOR:
        return "balanced"
    if score > COOL_FLOOR:
        return "cool"
    return "cold"


def calculate_flow_direction(origin_region: str, destination_region: str) -> FlowAnalysis:
    """Classify a lane by how much the destination pulls against the origin's push.

    A positive imbalance means the destination consumes more freight than the
    origin generates (headhaul); negative means the truck runs against the
    dominant flow (backhaul).
    """
    try:
        origin = REGION_CHARACTERISTICS[origin_region]
        destination = REGION_CHARACTERISTICS[destination_region]
    except KeyError as exc:
        raise UnknownStateError(str(exc.args[0])) from exc

    imbalance_score = round(destination.inbound_strength - origin.outbound_strength, 1)
    truck_to_load_ratio = round(
        origin.truck_population / (destination.inbound_strength * LOAD_ESTIMATE_FACTOR), 2
    )

    if imbalance_score > HEADHAUL_THRESHOLD:
        direction = "headhaul"
    elif imbalance_score < BACKHAUL_THRESHOLD:
        direction = "backhaul"
    else:
        direction = "balanced"

    return FlowAnalysis(
        direction=direction,
        imbalance_score=imbalance_score,
        truck_to_load_ratio=truck_to_load_ratio,
        market_temperature=_temperature(imbalance_score),
    )


def default_flow_analysis() -> FlowAnalysis:
    """Neutral flow used for display when a lane's regions are unknown."""
    return FlowAnalysis(direction="balanced", imbalance_score=0.0, truck_to_load_ratio=2.0, market_temperature="balanced")


def get_return_load_potential(destination_region: str | None, market_mid_rate: float) -> ReturnLoadPotential:
    """Odds of a profitable reload out of the destination region."""
    potential = RETURN_LOAD_POTENTIAL.get(destination_region or "")
    if potential is None:
        return ReturnLoadPotential(
            score=5,
            rating="Unknown",
            loads_available=500,
            avg_return_rate=round(market_mid_rate * 0.85, 2),
        )

    outbound_strength = REGION_CHARACTERISTICS[destination_region].outbound_strength
    return_rate_multiplier = 0.70 + (outbound_strength / 10) * 0.25
    return ReturnLoadPotential(
        score=potential["score"],
        rating=potential["rating"],
        loads_available=potential["avg_loads_per_day"],
        avg_return_rate=round(market_mid_rate * return_rate_multiplier, 2),
    )


def analyze_lane(origin_state: str | None, destination_state: str | None) -> Optional[LaneAnalysis]:
    """Flow analysis for a state pair, or None when either state is unmapped."""
    origin_region = get_region_from_state(origin_state)
    destination_region = get_region_from_state(destination_state)
    if origin_region is None or destination_region is None:
        return None
    return LaneAnalysis(
        origin_state=origin_state.strip().upper(),
        destination_state=destination_state.strip().upper(),
        origin_region=origin_region,
        destination_region=destination_region,
        flow=calculate_flow_direction(origin_region, destination_region),
    )
