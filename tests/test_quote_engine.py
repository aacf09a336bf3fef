import threading
from datetime import date, datetime, timezone

import pytest

from src.ratequote.data.fuel import OVERRIDE_PRICE_AS_OF
from src.ratequote.errors import GeocodeError, QuoteCancelledError, ValidationError
from src.ratequote.models.domain import (
    OperatingCostSettings,
    QuoteRequest,
    RouteResult,
    TollBreakdown,
    VehicleProfile,
    VehicleSpecs,
)
from src.ratequote.services.cache import TTLCache
from src.ratequote.services.fuel.service import FuelPricingService
from src.ratequote.services.geospatial import haversine_miles
from src.ratequote.services.quotes.engine import QuoteEngine, validate_request
from src.ratequote.services.tolls.service import TollEstimator


def _request(**overrides):
    values = {
        "origin": "Chicago, IL",
        "destination": "Los Angeles, CA",
        "vehicle": VehicleProfile(mpg=6.5),
    }
    values.update(overrides)
    return QuoteRequest(**values)


class DummyResolver:
    def __init__(self, route):
        self.route = route
        self.calls = []

    def resolve(self, origin, destination, vehicle_specs=None):
        self.calls.append((origin, destination, vehicle_specs))
        return self.route


class DummyEIA:
    def __init__(self):
        self.calls = 0

    def latest_price(self, padd):
        self.calls += 1
        return 4.1


class DummyTollGuru:
    def __init__(self):
        self.calls = 0

    def route_tolls(self, origin, destination, axle_class, fuel_price=None):
        self.calls += 1
        return TollBreakdown(
            total_tolls=38.5,
            tolls_by_state={"IL": 12.0, "OK": 26.5},
            cash_tolls=44.0,
            transponder_tolls=38.5,
            toll_count=3,
            source="api",
        )


def test_zero_key_quote_chicago_to_los_angeles(offline_settings):
    quote = QuoteEngine(offline_settings).calculate_rate(_request())
    route = quote.route

    straight = haversine_miles(route.origin_lat, route.origin_lng, route.destination_lat, route.destination_lng)
    assert route.distance_miles == pytest.approx(straight * 1.3)
    assert route.routing_provider == "fallback"
    assert route.states_crossed[0] == "IL"
    assert route.states_crossed[-1] == "CA"

    assert quote.fuel.source == "fallback"
    assert quote.tolls.source == "fallback"
    assert not quote.weather.available
    assert quote.costs.fuel_cost == pytest.approx(
        round(route.distance_miles / 6.5 * quote.fuel.price_per_gallon, 2), abs=0.01
    )
    assert quote.costs.total_cost == pytest.approx(sum(quote.costs.components().values()), abs=0.001)
    assert quote.recommended_rate > quote.costs.total_cost
    assert quote.min_rate <= quote.recommended_rate <= quote.max_rate
    assert quote.market_available is True
    assert quote.flow is not None
    assert quote.lane is not None


def test_zero_key_quote_is_repeatable(offline_settings):
    engine = QuoteEngine(offline_settings)

    assert engine.calculate_rate(_request()) == engine.calculate_rate(_request())


def test_quote_is_repeatable_once_caches_are_warm(offline_settings):
    eia = DummyEIA()
    tollguru = DummyTollGuru()
    engine = QuoteEngine(
        offline_settings,
        fuel=FuelPricingService(offline_settings, cache=TTLCache(ttl_seconds=3600), client=eia),
        tolls=TollEstimator(offline_settings, cache=TTLCache(ttl_seconds=3600), client=tollguru),
    )
    warm = engine.calculate_rate(_request())
    fuel_calls, toll_calls = eia.calls, tollguru.calls

    first = engine.calculate_rate(_request())
    second = engine.calculate_rate(_request())

    assert warm.fuel.source == "api"
    assert warm.tolls.source == "api"
    assert first == second
    assert first.fuel.source == "cache"
    assert first.tolls.source == "cache"
    assert first.tolls.total_tolls == pytest.approx(38.5)
    assert (eia.calls, tollguru.calls) == (fuel_calls, toll_calls)


def test_unlisted_cities_in_one_state_still_quote(offline_settings):
    quote = QuoteEngine(offline_settings).calculate_rate(_request(origin="Springfield, IL", destination="Peoria, IL"))

    assert quote.route.provider_name == "intra_state_estimate"
    assert quote.route.routing_provider == "fallback"
    assert quote.route.distance_miles == pytest.approx(100.0)
    assert quote.confidence == "low"
    assert any("state centre" in reason for reason in quote.confidence_reasons)


def test_unmapped_state_quotes_cost_plus(offline_settings):
    route = RouteResult(
        distance_miles=400.0,
        duration_hours=8.0,
        origin_formatted="Somewhere",
        destination_formatted="Los Angeles, CA",
        routing_provider="secondary",
        provider_name="google",
        states_crossed=("XX", "CA"),
        miles_by_state={"XX": 100.0, "CA": 300.0},
    )
    engine = QuoteEngine(offline_settings, resolver=DummyResolver(route))

    quote = engine.calculate_rate(_request(origin="Somewhere"))

    assert quote.flow is None
    assert quote.lane is None
    assert quote.confidence == "low"
    assert quote.market_available is False
    assert quote.recommended_rate > quote.costs.total_cost


def test_truck_routing_passes_vehicle_specs(offline_settings):
    route = RouteResult(
        distance_miles=300.0,
        duration_hours=5.0,
        origin_formatted="Chicago, IL",
        destination_formatted="Detroit, MI",
        routing_provider="primary",
        provider_name="pcmiler",
        states_crossed=("IL", "IN", "MI"),
    )
    resolver = DummyResolver(route)
    specs = VehicleSpecs(height_inches=150)

    QuoteEngine(offline_settings, resolver=resolver).calculate_rate(
        _request(destination="Detroit, MI", vehicle=VehicleProfile(specs=specs, mpg=6.5))
    )
    QuoteEngine(offline_settings, resolver=resolver).calculate_rate(
        _request(destination="Detroit, MI", use_truck_routing=False)
    )

    assert resolver.calls[0][2] == specs
    assert resolver.calls[1][2] is None


def test_fuel_price_override(offline_settings):
    quote = QuoteEngine(offline_settings).calculate_rate(_request(fuel_price_override=5.0))

    assert quote.fuel.source == "override"
    assert quote.fuel.price_per_gallon == 5.0
    assert quote.costs.fuel_cost == pytest.approx(round(quote.route.distance_miles / 6.5 * 5.0, 2), abs=0.01)


def test_fuel_price_override_is_repeatable(offline_settings):
    engine = QuoteEngine(offline_settings)

    first = engine.calculate_rate(_request(fuel_price_override=5.0))
    second = engine.calculate_rate(_request(fuel_price_override=5.0))

    assert first == second
    assert first.fuel.last_updated == OVERRIDE_PRICE_AS_OF


def test_fuel_price_override_is_dated_by_pickup(offline_settings):
    quote = QuoteEngine(offline_settings).calculate_rate(
        _request(fuel_price_override=5.0, pickup_date=date(2025, 3, 10))
    )

    assert quote.fuel.last_updated == datetime(2025, 3, 10, tzinfo=timezone.utc)


def test_unknown_address_is_fatal(offline_settings):
    with pytest.raises(GeocodeError):
        QuoteEngine(offline_settings).calculate_rate(_request(origin="Nowhere Special"))


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"origin": "  "}, "origin"),
        ({"destination": "chicago, il"}, "destination"),
        ({"vehicle": VehicleProfile(mpg=-1)}, "mpg"),
        ({"load_type": "bulk"}, "load_type"),
        ({"freight_class": "livestock"}, "freight_class"),
        ({"load_weight_lbs": -5}, "load_weight_lbs"),
        ({"fuel_price_override": 0}, "fuel_price_override"),
        ({"operating_costs": OperatingCostSettings(target_margin=1.0)}, "target_margin"),
        ({"operating_costs": OperatingCostSettings(annual_miles=0)}, "annual_miles"),
        ({"operating_costs": OperatingCostSettings(liftgate_fee=-1)}, "liftgate_fee"),
    ],
)
def test_validation_errors(overrides, field):
    with pytest.raises(ValidationError) as excinfo:
        validate_request(_request(**overrides))
    assert excinfo.value.field == field
    assert excinfo.value.stage == "validation"


def test_unknown_vehicle_type_rejected():
    request = _request(vehicle=VehicleProfile(specs=VehicleSpecs(vehicle_type="bicycle")))

    with pytest.raises(ValidationError):
        validate_request(request)


def test_cancel_before_providers(offline_settings):
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(QuoteCancelledError):
        QuoteEngine(offline_settings).calculate_rate(_request(), cancel_event=cancel)


def test_cancel_while_providers_in_flight(offline_settings):
    release = threading.Event()

    class BlockingFuel(FuelPricingService):
        def get_route_fuel_price(self, states_crossed, miles_by_state=None):
            release.wait(5)
            return super().get_route_fuel_price(states_crossed, miles_by_state)

    cancel = threading.Event()
    timer = threading.Timer(0.1, cancel.set)
    engine = QuoteEngine(offline_settings, fuel=BlockingFuel(offline_settings))
    timer.start()
    try:
        with pytest.raises(QuoteCancelledError):
            engine.calculate_rate(_request(), cancel_event=cancel)
    finally:
        release.set()
        timer.cancel()
