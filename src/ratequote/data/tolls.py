"""Toll reference data: vehicle class mappings and per-state average rates."""

from __future__ import annotations

# Internal vehicle type -> axle class.
FREIGHT_VEHICLE_MAP: dict[str, str] = {
    "semi": "5axle",
    "reefer": "5axle",
    "box_truck": "2axle",
    "cargo_van": "2axle",
    "sprinter": "2axle",
}

# Axle class -> TollGuru vehicle vocabulary.
TOLLGURU_VEHICLE_CLASSES: dict[str, str] = {
    "car": "2AxlesAuto",
    "2axle": "2AxlesTruck",
    "3axle": "3AxlesTruck",
    "4axle": "4AxlesTruck",
    "5axle": "5AxlesTruck",
}

# Average toll $/mile for a 5-axle truck.
STATE_TOLL_RATES: dict[str, float] = {
    "NJ": 0.15,
    "NY": 0.12,
    "PA": 0.10,
    "MA": 0.10,
    "IL": 0.08,
    "OH": 0.07,
    "FL": 0.06,
    "TX": 0.05,
    "CA": 0.05,
    "IN": 0.04,
    "KS": 0.04,
    "OK": 0.04,
    "WV": 0.03,
    "ME": 0.03,
}
DEFAULT_STATE_TOLL_RATE = 0.02
# Rate applied when the route's states are unknown.
UNKNOWN_ROUTE_TOLL_RATE = 0.03
# Cash tariffs run about 10% above transponder tariffs.
CASH_TOLL_PREMIUM = 1.10
