"""Quote, distance, toll, fuel and market request/response schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.domain import (
    OperatingCostSettings,
    QuoteRequest,
    ServiceOptions,
    VehicleProfile,
    VehicleSpecs,
)

VehicleTypeField = Literal["semi", "box_truck", "cargo_van", "sprinter", "reefer"]


class VehicleSpecsModel(BaseModel):
    vehicle_type: VehicleTypeField = "semi"
    height_inches: Optional[float] = Field(None, gt=0)
    weight_lbs: Optional[float] = Field(None, gt=0)
    length_feet: Optional[float] = Field(None, gt=0)
    width_inches: Optional[float] = Field(None, gt=0)
    axles: Optional[int] = Field(None, ge=2)
    hazmat: bool = False
    hazmat_type: Literal["none", "general", "explosive", "flammable", "corrosive", "radioactive"] = "none"

    def to_domain(self) -> VehicleSpecs:
        return VehicleSpecs(**self.model_dump())


class VehicleModel(BaseModel):
    specs: VehicleSpecsModel = Field(default_factory=VehicleSpecsModel)
    mpg: Optional[float] = Field(None, description="Vehicle mpg; the type default is used when omitted.")
    name: Optional[str] = None
    is_primary: bool = False

    def to_domain(self) -> VehicleProfile:
        return VehicleProfile(specs=self.specs.to_domain(), mpg=self.mpg, name=self.name, is_primary=self.is_primary)


class OperatingCostsModel(BaseModel):
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

    def to_domain(self) -> OperatingCostSettings:
        return OperatingCostSettings(**self.model_dump())


class ServiceOptionsModel(BaseModel):
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

    def to_domain(self) -> ServiceOptions:
        return ServiceOptions(**self.model_dump())


class QuoteRequestModel(BaseModel):
    origin: str = Field(..., description="Pickup address, e.g. 'Chicago, IL'.")
    destination: str = Field(..., description="Delivery address.")
    vehicle: VehicleModel = Field(default_factory=VehicleModel)
    operating_costs: OperatingCostsModel = Field(default_factory=OperatingCostsModel)
    services: ServiceOptionsModel = Field(default_factory=ServiceOptionsModel)
    load_weight_lbs: float = 0
    load_type: str = "full_truckload"
    freight_class: str = "dry_van"
    pickup_date: Optional[date] = None
    fuel_price_override: Optional[float] = None
    use_truck_routing: bool = True

    def to_domain(self) -> QuoteRequest:
        return QuoteRequest(
            origin=self.origin,
            destination=self.destination,
            vehicle=self.vehicle.to_domain(),
            operating_costs=self.operating_costs.to_domain(),
            services=self.services.to_domain(),
            load_weight_lbs=self.load_weight_lbs,
            load_type=self.load_type,
            freight_class=self.freight_class,
            pickup_date=self.pickup_date,
            fuel_price_override=self.fuel_price_override,
            use_truck_routing=self.use_truck_routing,
        )


class DistanceRequest(BaseModel):
    origin: str
    destination: str
    vehicle: Optional[VehicleSpecsModel] = Field(
        default=None, description="Supply specs to allow truck-legal routing."
    )


class TollRequest(BaseModel):
    origin_lat: float = Field(..., ge=-90, le=90)
    origin_lng: float = Field(..., ge=-180, le=180)
    dest_lat: float = Field(..., ge=-90, le=90)
    dest_lng: float = Field(..., ge=-180, le=180)
    vehicle_type: VehicleTypeField = "semi"
    fuel_price: Optional[float] = Field(None, gt=0)
    distance_miles: Optional[float] = Field(None, gt=0, description="Used for the estimate when the API has no answer.")
    states_crossed: List[str] = Field(default_factory=list)


class _FromAttributes(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class RouteModel(_FromAttributes):
    distance_miles: float
    duration_hours: float
    origin_formatted: str
    destination_formatted: str
    routing_provider: str
    provider_name: str
    states_crossed: List[str]
    miles_by_state: Dict[str, float]
    origin_lat: Optional[float] = None
    origin_lng: Optional[float] = None
    destination_lat: Optional[float] = None
    destination_lng: Optional[float] = None
    is_truck_route: bool = False
    polyline: Optional[str] = None


class FuelPriceModel(_FromAttributes):
    price_per_gallon: float
    region: str
    last_updated: datetime
    source: str


class FuelRefreshResponse(_FromAttributes):
    updated: int
    failed: int


class TollPlazaModel(_FromAttributes):
    name: str
    state: str
    cash_cost: float
    transponder_cost: float
    lat: Optional[float] = None
    lng: Optional[float] = None


class TollBreakdownModel(_FromAttributes):
    total_tolls: float
    tolls_by_state: Dict[str, float]
    cash_tolls: float
    transponder_tolls: float
    toll_count: int
    toll_plazas: List[TollPlazaModel]
    source: str


class WeatherForecastModel(_FromAttributes):
    condition: str
    description: str
    temperature: float
    humidity: float
    wind_speed: float
    precipitation: float
    visibility: float
    forecast_time: datetime


class WeatherModel(_FromAttributes):
    origin: Optional[WeatherForecastModel] = None
    destination: Optional[WeatherForecastModel] = None
    route_condition: str
    risk_level: str
    advisories: List[str]


class FlowModel(_FromAttributes):
    direction: str
    imbalance_score: float
    truck_to_load_ratio: float
    market_temperature: str


class MarketFactorModel(_FromAttributes):
    name: str
    multiplier: float
    description: str


class ReturnLoadModel(_FromAttributes):
    score: int
    rating: str
    loads_available: int
    avg_return_rate: float


class LaneMarketModel(_FromAttributes):
    market_low: float
    market_mid: float
    market_high: float
    total_low: float
    total_mid: float
    total_high: float
    confidence: int
    confidence_label: str
    confidence_reason: str
    factors: List[MarketFactorModel]
    total_multiplier: float
    origin_region: Optional[str] = None
    destination_region: Optional[str] = None
    flow: FlowModel
    return_load_potential: ReturnLoadModel
    market_spread: float


class CostBreakdownModel(_FromAttributes):
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


class QuoteResponse(_FromAttributes):
    route: RouteModel
    fuel: FuelPriceModel
    tolls: TollBreakdownModel
    weather: WeatherModel
    flow: Optional[FlowModel] = None
    costs: CostBreakdownModel
    recommended_rate: float
    min_rate: float
    max_rate: float
    rate_per_mile: float
    estimated_profit: float
    profit_margin: float
    profit_per_mile: float
    confidence: str
    confidence_reasons: List[str]
    market_available: bool
    vehicle_type: str
    multipliers: Dict[str, float]
    lane: Optional[LaneMarketModel] = None
