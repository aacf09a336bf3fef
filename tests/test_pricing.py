from datetime import datetime, timezone

import pytest

from src.ratequote.models.domain import (
    CostBreakdown,
    FlowAnalysis,
    FuelPriceResult,
    OperatingCostSettings,
    RouteResult,
    ServiceOptions,
    TollBreakdown,
    VehicleProfile,
    VehicleSpecs,
)
from src.ratequote.services.pricing.cost_model import CostModel, vehicle_mpg
from src.ratequote.services.pricing.rate_recommender import (
    RateRecommender,
    rate_multipliers,
    service_multiplier,
    weight_multiplier,
)

AS_OF = datetime(2025, 1, 6, tzinfo=timezone.utc)
NEUTRAL = {"weather": 1.0, "load_type": 1.0, "freight_class": 1.0, "weight": 1.0, "season": 1.0, "service": 1.0}


def _route(miles=500.0, hours=9.0, tier="secondary"):
    return RouteResult(
        distance_miles=miles,
        duration_hours=hours,
        origin_formatted="Chicago, IL",
        destination_formatted="Columbus, OH",
        routing_provider=tier,
        provider_name="google" if tier != "fallback" else "straight_line",
        states_crossed=("IL", "IN", "OH"),
        miles_by_state={"IL": 100.0, "IN": 150.0, "OH": 250.0},
    )


def _fuel(price=4.0, source="api"):
    return FuelPriceResult(price_per_gallon=price, region="PADD2", last_updated=AS_OF, source=source)


def _tolls(total=20.0, source="api"):
    return TollBreakdown(
        total_tolls=total,
        tolls_by_state={"IN": total},
        cash_tolls=total,
        transponder_tolls=total,
        toll_count=1,
        source=source,
    )


def _costs(total=1000.0):
    return CostBreakdown(
        fuel_cost=total,
        def_cost=0.0,
        maintenance_cost=0.0,
        tire_cost=0.0,
        fixed_cost_allocation=0.0,
        dc_fees=0.0,
        hotel_cost=0.0,
        toll_cost=0.0,
        service_fees=0.0,
        factoring_fee=0.0,
        total_cost=total,
    )


def _build(route=None, options=ServiceOptions(), vehicle=VehicleProfile(mpg=6.5), settings=OperatingCostSettings()):
    return CostModel.build(route or _route(), _fuel(), _tolls(), vehicle, settings, options)


def test_total_is_sum_of_components():
    costs = _build(options=ServiceOptions(is_dc_pickup=True, requires_liftgate=True, is_reefer=True))

    assert costs.total_cost == pytest.approx(sum(costs.components().values()), abs=0.001)
    assert all(value >= 0 for value in costs.components().values())


def test_fuel_cost_is_miles_over_mpg_times_price():
    costs = _build()

    assert costs.fuel_cost == pytest.approx(round(500 / 6.5 * 4.0, 2))
    assert costs.def_cost == pytest.approx(round(costs.fuel_cost * 0.02, 2), abs=0.01)
    assert costs.maintenance_cost == pytest.approx(175.0)
    assert costs.tire_cost == pytest.approx(25.0)
    assert costs.toll_cost == pytest.approx(20.0)


def test_missing_mpg_uses_vehicle_type_default():
    assert vehicle_mpg(VehicleProfile()) == 6.5
    assert vehicle_mpg(VehicleProfile(specs=VehicleSpecs(vehicle_type="box_truck"), mpg=0)) == 10.0
    assert vehicle_mpg(VehicleProfile(mpg=7.2)) == 7.2


def test_operating_cost_overrides_replace_defaults():
    costs = _build(settings=OperatingCostSettings(maintenance_cpm=0.5, tire_cpm=0.1))

    assert costs.maintenance_cost == pytest.approx(250.0)
    assert costs.tire_cost == pytest.approx(50.0)


@pytest.mark.parametrize(
    "miles, hours, expected",
    [
        (500.0, 9.0, 0.0),
        (1200.0, 23.0, 300.0),
        (600.0, 0.0, 150.0),
    ],
)
def test_hotel_nights(miles, hours, expected):
    assert _build(route=_route(miles=miles, hours=hours)).hotel_cost == pytest.approx(expected)


def test_dc_fees_per_stop():
    assert _build().dc_fees == 0.0
    assert _build(options=ServiceOptions(is_dc_pickup=True)).dc_fees == pytest.approx(75.0)
    assert _build(options=ServiceOptions(is_dc_pickup=True, is_dc_delivery=True)).dc_fees == pytest.approx(150.0)


def test_reefer_and_accessorials_land_in_service_fees():
    plain = _build()
    loaded = _build(options=ServiceOptions(is_reefer=True, requires_liftgate=True, requires_tracking=True))

    # 10 hours of reefer running time at $26.50/h, plus $75 liftgate and $25 tracking.
    assert loaded.service_fees - plain.service_fees == pytest.approx(265.0 + 75.0 + 25.0, abs=0.01)
    assert loaded.factoring_fee > plain.factoring_fee


def test_weight_multiplier():
    assert weight_multiplier(8_000) == 1.0
    assert weight_multiplier(20_000) == pytest.approx(1.2)


def test_service_multipliers_do_not_stack_except_team():
    assert service_multiplier(ServiceOptions()) == 1.0
    assert service_multiplier(ServiceOptions(is_same_day=True, is_rush=True, is_expedite=True)) == 2.0
    assert service_multiplier(ServiceOptions(is_expedite=True, is_team=True)) == pytest.approx(1.95)


def test_rate_multipliers_keys():
    multipliers = rate_multipliers("snow", "partial", "hazmat", 0, None, ServiceOptions())

    assert multipliers["weather"] == 1.25
    assert multipliers["load_type"] == 0.85
    assert multipliers["freight_class"] == 1.5
    assert multipliers["weight"] == 1.0
    assert set(multipliers) == {"weather", "load_type", "freight_class", "weight", "season", "service"}


def test_cost_plus_without_market_data():
    rec = RateRecommender().recommend(
        _costs(), _route(), _fuel(), _tolls(), None, None, OperatingCostSettings(), NEUTRAL, "semi"
    )

    assert rec.recommended_rate == pytest.approx(1200.0)
    assert rec.min_rate == pytest.approx(1100.0)
    assert rec.max_rate == pytest.approx(1350.0)
    assert rec.confidence == "low"
    assert rec.market_available is False
    assert rec.confidence_reasons == ("Market data unavailable, cost-plus pricing",)


def test_headhaul_target_price():
    flow = FlowAnalysis("headhaul", 2.0, 2.0, "warm")

    rec = RateRecommender().recommend(
        _costs(), _route(), _fuel(), _tolls(), flow, None, OperatingCostSettings(), NEUTRAL, "semi"
    )

    assert rec.recommended_rate == pytest.approx(1270.59)
    assert rec.multipliers["market_flow"] == pytest.approx(1.08)
    assert rec.market_available is True
    assert rec.confidence_reasons[-1] == "Headhaul (warm market)"
    assert rec.rate_per_mile == pytest.approx(round(1270.59 / 500, 2))


def test_recommendation_is_clamped_to_ceiling():
    flow = FlowAnalysis("headhaul", 2.0, 2.0, "warm")
    multipliers = dict(NEUTRAL, service=2.0)

    rec = RateRecommender().recommend(
        _costs(), _route(), _fuel(), _tolls(), flow, None, OperatingCostSettings(), multipliers, "semi"
    )

    assert rec.recommended_rate == pytest.approx(1450.0)
    assert rec.min_rate <= rec.recommended_rate <= rec.max_rate


def test_recommendation_never_below_min_margin():
    flow = FlowAnalysis("backhaul", -4.0, 0.5, "cold")
    multipliers = dict(NEUTRAL, load_type=0.75)

    rec = RateRecommender().recommend(
        _costs(), _route(miles=100.0, hours=2.0), _fuel(), _tolls(), flow, None, OperatingCostSettings(), multipliers, "semi"
    )

    assert rec.recommended_rate == pytest.approx(1100.0)
    assert rec.estimated_profit == pytest.approx(100.0)
    assert rec.profit_margin == pytest.approx(round(100 / 1100, 4))


def test_degraded_inputs_lower_confidence():
    flow = FlowAnalysis("balanced", 0.0, 1.0, "balanced")
    recommender = RateRecommender()
    settings = OperatingCostSettings()

    clean = recommender.recommend(_costs(), _route(), _fuel(), _tolls(), flow, None, settings, NEUTRAL, "semi")
    degraded = recommender.recommend(
        _costs(),
        _route(tier="fallback"),
        _fuel(source="fallback"),
        _tolls(source="fallback"),
        flow,
        None,
        settings,
        NEUTRAL,
        "semi",
    )

    assert clean.confidence == "medium"
    assert degraded.confidence == "low"
    assert "Distance estimated from a straight line" in degraded.confidence_reasons
    assert "Fuel price from the regional fallback table" in degraded.confidence_reasons
    assert "Tolls estimated from state averages" in degraded.confidence_reasons
