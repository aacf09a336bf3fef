"""Domain models for routes, provider results, costs and quotes."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from typing import Literal, Mapping, Optional

VehicleType = Literal["semi", "box_truck", "cargo_van", "sprinter", "reefer"]
HazmatType = Literal["none", "general", "explosive", "flammable", "corrosive", "radioactive"]
RoutingTier = Literal["primary", "secondary", "fallback"]
PriceSource = Literal["api", "cache", "fallback", "override"]
WeatherCondition = Literal[
    "normal", "fog", "light_rain", "heavy_rain", "snow", "ice", "extreme_weather"
]
RiskLevel = Literal["low", "moderate", "high", "severe"]
FlowDirection = Literal["headhaul", "backhaul", "balanced"]
MarketTemperature = Literal["hot", "warm", "balanced", "cool", "cold"]
Confidence = Literal["high", "medium", "low"]
LoadType = Literal["full_truckload", "partial", "ltl"]
FreightClass = Literal["dry_van", "refrigerated", "flatbed", "oversized", "hazmat", "tanker"]

VEHICLE_TYPES: tuple[str, ...] = ("semi", "box_truck", "cargo_van", "sprinter", "reefer")


@dataclass(frozen=True, slots=True)
class GeocodeResult:
    """A resolved address."""

    lat: float
    lng: float
    formatted: str
    state: Optional[str]
    precision: Literal["address", "city", "state"] = "city"


@dataclass(frozen=True, slots=True)
class VehicleSpecs:
    """Physical description of the vehicle, used for truck-legal routing."""

    vehicle_type: VehicleType = "semi"
    height_inches: Optional[float] = None
    weight_lbs: Optional[float] = None
    length_feet: Optional[float] = None
    width_inches: Optional[float] = None
    axles: Optional[int] = None
    hazmat: bool = False
    hazmat_type: HazmatType = "none"


@dataclass(frozen=True, slots=True)
class VehicleProfile:
    """The caller's vehicle record: specs plus the economics the cost model needs."""

    specs: VehicleSpecs = field(default_factory=VehicleSpecs)
    mpg: Optional[float] = None
    name: Optional[str] = None
    is_primary: bool = False

    @property
    def vehicle_type(self) -> str:
        return self.specs.vehicle_type


@dataclass(frozen=True, slots=True)
class RouteResult:
    distance_miles: float
    duration_hours: float
    origin_formatted: str
    destination_formatted: str
    routing_provider: RoutingTier
    provider_name: str
    states_crossed: tuple[str, ...] = ()
    miles_by_state: Mapping[str, float] = field(default_factory=dict)
    origin_lat: Optional[float] = None
    origin_lng: Optional[float] = None
    destination_lat: Optional[float] = None
    destination_lng: Optional[float] = None
    is_truck_route: bool = False
    polyline: Optional[str] = None

    def __post_init__(self) -> None:
        if not math.isfinite(self.distance_miles) or self.distance_miles <= 0:
            raise ValueError(f"Route distance must be positive, got {self.distance_miles!r}.")
        if not math.isfinite(self.duration_hours) or self.duration_hours < 0:
            raise ValueError(f"Route duration must be non-negative, got {self.duration_hours!r}.")

    @property
    def has_coordinates(self) -> bool:
        return None not in (self.origin_lat, self.origin_lng, self.destination_lat, self.destination_lng)

    @property
    def origin_state(self) -> Optional[str]:
        return self.states_crossed[0] if self.states_crossed else None

    @property
    def destination_state(self) -> Optional[str]:
        return self.states_crossed[-1] if self.states_crossed else None


@dataclass(frozen=True, slots=True)
class FuelPriceResult:
    price_per_gallon: float
    region: str
    last_updated: datetime
    source: PriceSource

    def __post_init__(self) -> None:
        if not math.isfinite(self.price_per_gallon) or self.price_per_gallon <= 0:
            raise ValueError(f"Fuel price must be positive, got {self.price_per_gallon!r}.")


@dataclass(frozen=True, slots=True)
class FuelUpdateSummary:
    updated: int
    failed: int


@dataclass(frozen=True, slots=True)
class TollPlaza:
    name: str
    state: str
    cash_cost: float
    transponder_cost: float
    lat: Optional[float] = None
    lng: Optional[float] = None


@dataclass(frozen=True, slots=True)
class TollBreakdown:
    total_tolls: float
    tolls_by_state: Mapping[str, float]
    cash_tolls: float
    transponder_tolls: float
    toll_count: int
    toll_plazas: tuple[TollPlaza, ...] = ()
    source: PriceSource = "fallback"

    def __post_init__(self) -> None:
        if any(value < 0 for value in self.tolls_by_state.values()):
            raise ValueError("Per-state toll amounts must be non-negative.")
        if self.toll_count < 0:
            raise ValueError("Toll count must be non-negative.")


@dataclass(frozen=True, slots=True)
class WeatherForecast:
    condition: WeatherCondition
    description: str
    temperature: float
    humidity: float
    wind_speed: float
    precipitation: float
    visibility: float
    forecast_time: datetime


@dataclass(frozen=True, slots=True)
class WeatherData:
    origin: Optional[WeatherForecast]
    destination: Optional[WeatherForecast]
    route_condition: WeatherCondition
    risk_level: RiskLevel
    advisories: tuple[str, ...] = ()

    @property
    def available(self) -> bool:
        return self.origin is not None or self.destination is not None


@dataclass(frozen=True, slots=True)
class FlowAnalysis:
    direction: FlowDirection
    imbalance_score: float
    truck_to_load_ratio: float
    market_temperature: MarketTemperature


@dataclass(frozen=True, slots=True)
class ReturnLoadPotential:
    score: int
    rating: str
    loads_available: int
    avg_return_rate: float


@dataclass(frozen=True, slots=True)
class LaneAnalysis:
    """Region-level view of a lane; only built when both states are mapped."""

    origin_state: str
    destination_state: str
    origin_region: str
    destination_region: str
    flow: FlowAnalysis


@dataclass(frozen=True, slots=True)
class MarketFactor:
    name: str
    multiplier: float
    description: str


@dataclass(frozen=True, slots=True)
class LaneMarketResult:
    market_low: float
    market_mid: float
    market_high: float
    total_low: float
    total_mid: float
    total_high: float
    confidence: int
    confidence_label: Confidence
    confidence_reason: str
    factors: tuple[MarketFactor, ...]
    total_multiplier: float
    origin_region: Optional[str]
    destination_region: Optional[str]
    flow: FlowAnalysis
    return_load_potential: ReturnLoadPotential
    market_spread: float


@dataclass(frozen=True, slots=True)
class CostBreakdown:
    """Trip cost components; ``total_cost`` is the sum of the other fields."""

    fuel_cost: float
    def_cost: float
    maintenance_cost: float
    tire_cost: float
    fixed_cost_allocation: float
    dc_fees: float
    hotel_cost: float
    toll_cost: float
    service_fees: float
    factoring_fee: float
    total_cost: float

    TOLERANCE = 0.005

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if not math.isfinite(value):
                raise ValueError(f"Cost component '{item.name}' is not a finite number: {value!r}.")
            if value < 0:
                raise ValueError(f"Cost component '{item.name}' is negative: {value!r}.")
        if abs(sum(self.components().values()) - self.total_cost) > self.TOLERANCE:
            raise ValueError("total_cost does not equal the sum of its components.")

    def components(self) -> dict[str, float]:
        return {item.name: getattr(self, item.name) for item in fields(self) if item.name != "total_cost"}


@dataclass(frozen=True, slots=True)
class OperatingCostSettings:
    """The carrier's operating-cost settings, supplied by the caller.

    ``None`` means "use the vehicle-type default".
    """

    annual_miles: float = 100_000
    annual_insurance: float = 12_000
    monthly_vehicle_payment: float = 1_500
    annual_licensing: float = 2_500
    monthly_overhead: float = 500
    maintenance_cpm: Optional[float] = None
    tire_cpm: Optional[float] = None
    def_fraction_of_fuel: float = 0.02
    service_fee_rate: float = 0.02
    factoring_rate: float = 0.03
    target_margin: float = 0.15
    min_margin: float = 0.10
    liftgate_fee: float = 75
    pallet_jack_fee: float = 50
    driver_assist_fee: float = 100
    white_glove_fee: float = 250
    tracking_fee: float = 25
    reefer_fuel_per_hour: float = 1.5
    reefer_maintenance_per_hour: float = 25

    @property
    def monthly_fixed_costs(self) -> float:
        return (
            self.annual_insurance / 12
            + self.monthly_vehicle_payment
            + self.annual_licensing / 12
            + self.monthly_overhead
        )

    @property
    def monthly_miles(self) -> float:
        return self.annual_miles / 12


@dataclass(frozen=True, slots=True)
class ServiceOptions:
    is_expedite: bool = False
    is_team: bool = False
    is_rush: bool = False
    is_same_day: bool = False
    is_reefer: bool = False
    is_dc_pickup: bool = False
    is_dc_delivery: bool = False
    requires_liftgate: bool = False
    requires_pallet_jack: bool = False
    requires_driver_assist: bool = False
    requires_white_glove: bool = False
    requires_tracking: bool = False


@dataclass(frozen=True, slots=True)
class QuoteRequest:
    origin: str
    destination: str
    vehicle: VehicleProfile = field(default_factory=VehicleProfile)
    operating_costs: OperatingCostSettings = field(default_factory=OperatingCostSettings)
    services: ServiceOptions = field(default_factory=ServiceOptions)
    load_weight_lbs: float = 0
    load_type: LoadType = "full_truckload"
    freight_class: FreightClass = "dry_van"
    pickup_date: Optional[date] = None
    fuel_price_override: Optional[float] = None
    use_truck_routing: bool = True


@dataclass(frozen=True, slots=True)
class Quote:
    route: RouteResult
    fuel: FuelPriceResult
    tolls: TollBreakdown
    weather: WeatherData
    flow: Optional[FlowAnalysis]
    costs: CostBreakdown
    recommended_rate: float
    min_rate: float
    max_rate: float
    rate_per_mile: float
    estimated_profit: float
    profit_margin: float
    profit_per_mile: float
    confidence: Confidence
    market_available: bool
    vehicle_type: str
    confidence_reasons: tuple[str, ...] = ()
    multipliers: Mapping[str, float] = field(default_factory=dict)
    lane: Optional[LaneMarketResult] = None
