"""Per-vehicle-type defaults for routing dimensions, operating costs and rates."""

from __future__ import annotations

# Physical defaults for truck-legal routing.
VEHICLE_DIMENSIONS: dict[str, dict[str, float]] = {
    "semi": {"height_inches": 162, "weight_lbs": 80000, "length_feet": 75, "width_inches": 102, "axles": 5},
    "reefer": {"height_inches": 162, "weight_lbs": 80000, "length_feet": 75, "width_inches": 102, "axles": 5},
    "box_truck": {"height_inches": 132, "weight_lbs": 16000, "length_feet": 26, "width_inches": 96, "axles": 2},
    "sprinter": {"height_inches": 110, "weight_lbs": 9500, "length_feet": 24, "width_inches": 80, "axles": 2},
    "cargo_van": {"height_inches": 84, "weight_lbs": 6000, "length_feet": 18, "width_inches": 72, "axles": 2},
}

# mpg, maintenance $/mile, tire $/mile
VEHICLE_COST_DEFAULTS: dict[str, dict[str, float]] = {
    "semi": {"mpg": 6.5, "maintenance_cpm": 0.35, "tire_cpm": 0.05},
    "box_truck": {"mpg": 10.0, "maintenance_cpm": 0.20, "tire_cpm": 0.03},
    "cargo_van": {"mpg": 18.0, "maintenance_cpm": 0.15, "tire_cpm": 0.02},
    "sprinter": {"mpg": 20.0, "maintenance_cpm": 0.12, "tire_cpm": 0.02},
    "reefer": {"mpg": 5.5, "maintenance_cpm": 0.40, "tire_cpm": 0.06},
}

# Floor rate $/mile by vehicle type.
BASE_RATES: dict[str, float] = {
    "semi": 2.50,
    "box_truck": 2.00,
    "cargo_van": 1.75,
    "sprinter": 1.60,
    "reefer": 3.00,
}

DC_FEE = 75.0
HOTEL_COST_PER_NIGHT = 150.0
MAX_DRIVING_HOURS_PER_DAY = 11.0
AVERAGE_TRUCK_SPEED_MPH = 50.0

WEATHER_MULTIPLIERS: dict[str, float] = {
    "normal": 1.0,
    "light_rain": 1.05,
    "heavy_rain": 1.15,
    "snow": 1.25,
    "ice": 1.40,
    "extreme_weather": 1.50,
    "fog": 1.10,
}

LOAD_TYPE_MULTIPLIERS: dict[str, float] = {
    "full_truckload": 1.0,
    "partial": 0.85,
    "ltl": 0.75,
}

FREIGHT_CLASS_MULTIPLIERS: dict[str, float] = {
    "dry_van": 1.0,
    "refrigerated": 1.15,
    "flatbed": 1.10,
    "oversized": 1.35,
    "hazmat": 1.50,
    "tanker": 1.25,
}

SERVICE_MULTIPLIERS: dict[str, float] = {
    "expedite": 1.30,
    "rush": 1.50,
    "same_day": 2.00,
    "team": 1.50,
}

# Loads above this weight add WEIGHT_SURCHARGE_PER_LB per extra pound to the rate multiplier.
WEIGHT_SURCHARGE_THRESHOLD_LBS = 10_000
WEIGHT_SURCHARGE_PER_LB = 0.00002
