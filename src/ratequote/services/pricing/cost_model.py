"""Trip cost breakdown from route, fuel, tolls and the carrier's operating costs."""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal

from ...data.vehicles import (
    AVERAGE_TRUCK_SPEED_MPH,
    DC_FEE,
    HOTEL_COST_PER_NIGHT,
    MAX_DRIVING_HOURS_PER_DAY,
    VEHICLE_COST_DEFAULTS,
)
from ...models.domain import (
    CostBreakdown,
    FuelPriceResult,
    OperatingCostSettings,
    RouteResult,
    ServiceOptions,
    TollBreakdown,
    VehicleProfile,
)

CENT = Decimal("0.01")

logger = logging.getLogger(__name__)


def to_cents(value: float | Decimal) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def vehicle_mpg(vehicle: VehicleProfile) -> float:
    """The vehicle's own mpg, or the default for its type."""
    if vehicle.mpg is not None and math.isfinite(vehicle.mpg) and vehicle.mpg > 0:
        return vehicle.mpg
    defaults = VEHICLE_COST_DEFAULTS.get(vehicle.vehicle_type, VEHICLE_COST_DEFAULTS["semi"])
    logger.info(f"No mpg on the vehicle record, using the {vehicle.vehicle_type} default of {defaults['mpg']}")
    return defaults["mpg"]


def drive_hours(route: RouteResult) -> float:
    if route.duration_hours > 0:
        return route.duration_hours
    return route.distance_miles / AVERAGE_TRUCK_SPEED_MPH


def accessorial_fees(options: ServiceOptions, costs: OperatingCostSettings, miles: float) -> Decimal:
    """Flat per-load fees for the requested services, plus reefer running time."""
    fees = Decimal(0)
    if options.requires_liftgate:
        fees += to_cents(costs.liftgate_fee)
    if options.requires_pallet_jack:
        fees += to_cents(costs.pallet_jack_fee)
    if options.requires_driver_assist:
        fees += to_cents(costs.driver_assist_fee)
    if options.requires_white_glove:
        fees += to_cents(costs.white_glove_fee)
    if options.requires_tracking:
        fees += to_cents(costs.tracking_fee)
    if options.is_reefer:
        reefer_hours = miles / AVERAGE_TRUCK_SPEED_MPH
        fees += to_cents(round((costs.reefer_fuel_per_hour + costs.reefer_maintenance_per_hour) * reefer_hours))
    return fees


class CostModel:
    """Builds a :class:`CostBreakdown`.

    Every component is rounded to cents before summation, so ``total_cost`` is
    the exact sum of the displayed components.
    """

    @staticmethod
    def build(
        route: RouteResult,
        fuel: FuelPriceResult,
        tolls: TollBreakdown,
        vehicle: VehicleProfile,
        settings: OperatingCostSettings,
        options: ServiceOptions,
    ) -> CostBreakdown:
        miles = route.distance_miles
        defaults = VEHICLE_COST_DEFAULTS.get(vehicle.vehicle_type, VEHICLE_COST_DEFAULTS["semi"])
        maintenance_cpm = settings.maintenance_cpm if settings.maintenance_cpm is not None else defaults["maintenance_cpm"]
        tire_cpm = settings.tire_cpm if settings.tire_cpm is not None else defaults["tire_cpm"]

        fuel_cost = to_cents(miles / vehicle_mpg(vehicle) * fuel.price_per_gallon)
        def_cost = to_cents(fuel_cost * Decimal(str(settings.def_fraction_of_fuel)))
        maintenance_cost = to_cents(maintenance_cpm * miles)
        tire_cost = to_cents(tire_cpm * miles)
        fixed_cost_allocation = to_cents(settings.monthly_fixed_costs / settings.monthly_miles * miles)

        dc_stops = int(options.is_dc_pickup) + int(options.is_dc_delivery)
        dc_fees = to_cents(DC_FEE * dc_stops)
        nights = math.floor(drive_hours(route) / MAX_DRIVING_HOURS_PER_DAY)
        hotel_cost = to_cents(HOTEL_COST_PER_NIGHT * nights)
        toll_cost = to_cents(tolls.total_tolls)

        subtotal = (
            fuel_cost + def_cost + maintenance_cost + tire_cost + fixed_cost_allocation + dc_fees + hotel_cost + toll_cost
        )
        service_fees = to_cents(subtotal * Decimal(str(settings.service_fee_rate))) + accessorial_fees(
            options, settings, miles
        )
        factoring_fee = to_cents((subtotal + service_fees) * Decimal(str(settings.factoring_rate)))
        total = subtotal + service_fees + factoring_fee

        return CostBreakdown(
            fuel_cost=float(fuel_cost),
            def_cost=float(def_cost),
            maintenance_cost=float(maintenance_cost),
            tire_cost=float(tire_cost),
            fixed_cost_allocation=float(fixed_cost_allocation),
            dc_fees=float(dc_fees),
            hotel_cost=float(hotel_cost),
            toll_cost=float(toll_cost),
            service_fees=float(service_fees),
            factoring_fee=float(factoring_fee),
            total_cost=float(total),
        )
