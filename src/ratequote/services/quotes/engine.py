"""Quote orchestration.

Route first, then fuel, tolls and weather concurrently, then cost and rate.
Provider trouble never fails a quote; it lowers the quote's confidence.
"""

from __future__ import annotations

import functools
import logging
import math
import threading
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from datetime import datetime, time, timezone
from typing import Optional

from ...config import Settings, settings
from ...data.fuel import OVERRIDE_PRICE_AS_OF
from ...data.vehicles import FREIGHT_CLASS_MULTIPLIERS, LOAD_TYPE_MULTIPLIERS
from ...errors import QuoteCancelledError, ValidationError
from ...models.domain import (
    VEHICLE_TYPES,
    FuelPriceResult,
    Quote,
    QuoteRequest,
    RouteResult,
    TollBreakdown,
    WeatherData,
)
from ..fuel.service import FuelPricingService
from ..market.benchmarks import calculate_market_rate
from ..market.regions import analyze_lane
from ..pricing.cost_model import CostModel
from ..pricing.rate_recommender import RateRecommender, rate_multipliers
from ..routing.resolver import RouteResolver
from ..tolls.service import TollEstimator
from ..weather.service import WeatherRiskAssessor

CANCEL_POLL_SECONDS = 0.05

logger = logging.getLogger(__name__)


def _require_non_negative(value: float, name: str) -> None:
    if value is None or not math.isfinite(value) or value < 0:
        raise ValidationError(f"{name} must be a non-negative number.", field=name)


def validate_request(request: QuoteRequest) -> None:
    """Reject malformed input before any provider is called."""
    for name in ("origin", "destination"):
        value = getattr(request, name)
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"{name} is required.", field=name)
    if request.origin.strip().lower() == request.destination.strip().lower():
        raise ValidationError("Origin and destination must be different.", field="destination")

    if request.vehicle.vehicle_type not in VEHICLE_TYPES:
        raise ValidationError(f"Unknown vehicle type '{request.vehicle.vehicle_type}'.", field="vehicle_type")
    mpg = request.vehicle.mpg
    if mpg is not None and (not math.isfinite(mpg) or mpg <= 0):
        raise ValidationError("mpg must be positive.", field="mpg")
    if request.load_type not in LOAD_TYPE_MULTIPLIERS:
        raise ValidationError(f"Unknown load type '{request.load_type}'.", field="load_type")
    if request.freight_class not in FREIGHT_CLASS_MULTIPLIERS:
        raise ValidationError(f"Unknown freight class '{request.freight_class}'.", field="freight_class")
    _require_non_negative(request.load_weight_lbs, "load_weight_lbs")
    if request.fuel_price_override is not None and not (
        math.isfinite(request.fuel_price_override) and request.fuel_price_override > 0
    ):
        raise ValidationError("fuel_price_override must be positive.", field="fuel_price_override")

    costs = request.operating_costs
    if not (math.isfinite(costs.annual_miles) and costs.annual_miles > 0):
        raise ValidationError("annual_miles must be positive.", field="annual_miles")
    for name in ("target_margin", "min_margin"):
        margin = getattr(costs, name)
        if not (math.isfinite(margin) and 0 <= margin < 1):
            raise ValidationError(f"{name} must be between 0 and 1.", field=name)
    for name in (
        "annual_insurance",
        "monthly_vehicle_payment",
        "annual_licensing",
        "monthly_overhead",
        "def_fraction_of_fuel",
        "service_fee_rate",
        "factoring_rate",
        "liftgate_fee",
        "pallet_jack_fee",
        "driver_assist_fee",
        "white_glove_fee",
        "tracking_fee",
        "reefer_fuel_per_hour",
        "reefer_maintenance_per_hour",
    ):
        _require_non_negative(getattr(costs, name), name)
    for name in ("maintenance_cpm", "tire_cpm"):
        if getattr(costs, name) is not None:
            _require_non_negative(getattr(costs, name), name)


def _override_as_of(request: QuoteRequest) -> datetime:
    if request.pickup_date is None:
        return OVERRIDE_PRICE_AS_OF
    return datetime.combine(request.pickup_date, time(0, 0), tzinfo=timezone.utc)


class QuoteEngine:
    def __init__(
        self,
        config: Settings = settings,
        resolver: RouteResolver | None = None,
        fuel: FuelPricingService | None = None,
        tolls: TollEstimator | None = None,
        weather: WeatherRiskAssessor | None = None,
    ) -> None:
        self.resolver = resolver or RouteResolver(config)
        self.fuel = fuel or FuelPricingService(config)
        self.tolls = tolls or TollEstimator(config)
        self.weather = weather or WeatherRiskAssessor(config)
        self.cost_model = CostModel()
        self.recommender = RateRecommender()

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "QuoteEngine":
        return cls(config)

    def _fuel_price(self, request: QuoteRequest, route: RouteResult) -> FuelPriceResult:
        if request.fuel_price_override is not None:
            return FuelPriceResult(
                price_per_gallon=request.fuel_price_override,
                region="override",
                last_updated=_override_as_of(request),
                source="override",
            )
        return self.fuel.get_route_fuel_price(route.states_crossed, route.miles_by_state)

    def _route_weather(self, request: QuoteRequest, route: RouteResult) -> WeatherData:
        if not route.has_coordinates:
            return WeatherData(origin=None, destination=None, route_condition="normal", risk_level="low")
        return self.weather.get_route_weather(
            route.origin_lat,
            route.origin_lng,
            route.destination_lat,
            route.destination_lng,
            request.pickup_date,
        )

    def _gather(
        self, request: QuoteRequest, route: RouteResult, cancel_event: Optional[threading.Event]
    ) -> tuple[FuelPriceResult, TollBreakdown, WeatherData]:
        executor = ThreadPoolExecutor(max_workers=3, thread_name_prefix="quote")
        futures: dict[str, Future] = {
            "fuel": executor.submit(self._fuel_price, request, route),
            "tolls": executor.submit(
                self.tolls.estimate_route_tolls, route, request.vehicle.vehicle_type, request.fuel_price_override
            ),
            "weather": executor.submit(self._route_weather, request, route),
        }
        pending = set(futures.values())
        try:
            while pending:
                if cancel_event is not None and cancel_event.is_set():
                    logger.info("Quote cancelled while providers were in flight")
                    executor.shutdown(wait=False, cancel_futures=True)
                    raise QuoteCancelledError("Quote request was cancelled.")
                timeout = CANCEL_POLL_SECONDS if cancel_event is not None else None
                _, pending = wait(pending, timeout=timeout, return_when=FIRST_EXCEPTION)
                if any(future.exception() is not None for future in futures.values() if future.done()):
                    break
            return futures["fuel"].result(), futures["tolls"].result(), futures["weather"].result()
        finally:
            executor.shutdown(wait=False)

    def calculate_rate(self, request: QuoteRequest, cancel_event: Optional[threading.Event] = None) -> Quote:
        """Produce a fully costed quote.

        Raises:
            ValidationError: the request is malformed.
            GeocodeError: an endpoint cannot be located.
            RouteUnavailableError: no routing tier produced a route.
            QuoteCancelledError: ``cancel_event`` was set before the quote completed.
        """
        validate_request(request)
        vehicle = request.vehicle
        specs = vehicle.specs if request.use_truck_routing else None

        route = self.resolver.resolve(request.origin, request.destination, specs)
        if cancel_event is not None and cancel_event.is_set():
            raise QuoteCancelledError("Quote request was cancelled.")

        lane = analyze_lane(route.origin_state, route.destination_state)
        market = None
        if lane is not None:
            market = calculate_market_rate(
                lane.origin_state,
                lane.destination_state,
                route.distance_miles,
                vehicle.vehicle_type,
                request.freight_class,
                request.pickup_date,
            )
        else:
            logger.warning(
                f"No market intelligence for {route.origin_state} -> {route.destination_state}, quoting cost-plus"
            )

        fuel, tolls, weather = self._gather(request, route, cancel_event)

        costs = self.cost_model.build(route, fuel, tolls, vehicle, request.operating_costs, request.services)
        multipliers = rate_multipliers(
            weather.route_condition,
            request.load_type,
            request.freight_class,
            request.load_weight_lbs,
            request.pickup_date,
            request.services,
        )
        recommendation = self.recommender.recommend(
            costs,
            route,
            fuel,
            tolls,
            lane.flow if lane else None,
            market,
            request.operating_costs,
            multipliers,
            vehicle.vehicle_type,
        )

        logger.info(
            f"Quote {route.origin_formatted} -> {route.destination_formatted}: "
            f"${recommendation.recommended_rate:,.2f} on ${costs.total_cost:,.2f} cost "
            f"({recommendation.confidence} confidence)"
        )
        return Quote(
            route=route,
            fuel=fuel,
            tolls=tolls,
            weather=weather,
            flow=lane.flow if lane else None,
            costs=costs,
            recommended_rate=recommendation.recommended_rate,
            min_rate=recommendation.min_rate,
            max_rate=recommendation.max_rate,
            rate_per_mile=recommendation.rate_per_mile,
            estimated_profit=recommendation.estimated_profit,
            profit_margin=recommendation.profit_margin,
            profit_per_mile=recommendation.profit_per_mile,
            confidence=recommendation.confidence,
            market_available=recommendation.market_available,
            vehicle_type=vehicle.vehicle_type,
            confidence_reasons=recommendation.confidence_reasons,
            multipliers=recommendation.multipliers,
            lane=market,
        )


@functools.lru_cache(maxsize=1)
def get_quote_engine() -> QuoteEngine:
    """Process-wide engine; its fuel and toll caches live as long as the process."""
    return QuoteEngine.from_settings(settings)
