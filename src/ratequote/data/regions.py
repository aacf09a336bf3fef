"""Freight region tables: state membership and supply/demand characteristics."""

from __future__ import annotations

from dataclasses import dataclass

FREIGHT_REGIONS: tuple[str, ...] = (
    "northeast",
    "southeast",
    "midwest",
    "southwest",
    "west",
    "pacific_northwest",
    "mountain",
    "south_central",
)

STATE_TO_REGION: dict[str, str] = {
    # Northeast: ports, dense population, heavy inbound demand
    "CT": "northeast",
    "DE": "northeast",
    "MA": "northeast",
    "MD": "northeast",
    "ME": "northeast",
    "NH": "northeast",
    "NJ": "northeast",
    "NY": "northeast",
    "PA": "northeast",
    "RI": "northeast",
    "VT": "northeast",
    # Southeast
    "AL": "southeast",
    "FL": "southeast",
    "GA": "southeast",
    "KY": "southeast",
    "NC": "southeast",
    "SC": "southeast",
    "TN": "southeast",
    "VA": "southeast",
    "WV": "southeast",
    # Midwest
    "IL": "midwest",
    "IN": "midwest",
    "IA": "midwest",
    "MI": "midwest",
    "MN": "midwest",
    "MO": "midwest",
    "OH": "midwest",
    "WI": "midwest",
    # Southwest
    "AZ": "southwest",
    "NV": "southwest",
    "NM": "southwest",
    # West
    "CA": "west",
    "HI": "west",
    # Pacific Northwest
    "AK": "pacific_northwest",
    "OR": "pacific_northwest",
    "WA": "pacific_northwest",
    # Mountain: low density, pass-through
    "CO": "mountain",
    "ID": "mountain",
    "MT": "mountain",
    "ND": "mountain",
    "NE": "mountain",
    "SD": "mountain",
    "UT": "mountain",
    "WY": "mountain",
    # South Central: energy, high truck population
    "AR": "south_central",
    "KS": "south_central",
    "LA": "south_central",
    "MS": "south_central",
    "OK": "south_central",
    "TX": "south_central",
}


@dataclass(frozen=True, slots=True)
class RegionCharacteristics:
    name: str
    outbound_strength: int  # 1-10, freight generated
    inbound_strength: int  # 1-10, freight consumed
    truck_population: int  # 1-10, relative truck availability
    major_markets: tuple[str, ...]
    industries: tuple[str, ...]


REGION_CHARACTERISTICS: dict[str, RegionCharacteristics] = {
    "northeast": RegionCharacteristics(
        name="Northeast",
        outbound_strength=5,
        inbound_strength=9,
        truck_population=6,
        major_markets=("New York", "Philadelphia", "Boston", "Newark"),
        industries=("Consumer Goods", "Retail", "Pharmaceuticals"),
    ),
    "southeast": RegionCharacteristics(
        name="Southeast",
        outbound_strength=7,
        inbound_strength=7,
        truck_population=8,
        major_markets=("Atlanta", "Miami", "Charlotte", "Nashville"),
        industries=("Automotive", "Agriculture", "Manufacturing"),
    ),
    "midwest": RegionCharacteristics(
        name="Midwest",
        outbound_strength=8,
        inbound_strength=6,
        truck_population=8,
        major_markets=("Chicago", "Detroit", "Indianapolis", "Columbus"),
        industries=("Automotive", "Agriculture", "Steel", "Manufacturing"),
    ),
    "southwest": RegionCharacteristics(
        name="Southwest",
        outbound_strength=4,
        inbound_strength=6,
        truck_population=5,
        major_markets=("Phoenix", "Las Vegas", "Albuquerque", "Tucson"),
        industries=("Retail", "Construction", "Electronics"),
    ),
    "west": RegionCharacteristics(
        name="West (California)",
        outbound_strength=4,
        inbound_strength=10,
        truck_population=7,
        major_markets=("Los Angeles", "San Francisco", "San Diego", "Fresno"),
        industries=("Produce", "Imports", "Technology", "Entertainment"),
    ),
    "pacific_northwest": RegionCharacteristics(
        name="Pacific Northwest",
        outbound_strength=6,
        inbound_strength=5,
        truck_population=4,
        major_markets=("Seattle", "Portland", "Tacoma"),
        industries=("Lumber", "Agriculture", "Technology", "Ports"),
    ),
    "mountain": RegionCharacteristics(
        name="Mountain",
        outbound_strength=4,
        inbound_strength=4,
        truck_population=3,
        major_markets=("Denver", "Salt Lake City", "Boise"),
        industries=("Mining", "Agriculture", "Energy"),
    ),
    "south_central": RegionCharacteristics(
        name="South Central (Texas)",
        outbound_strength=8,
        inbound_strength=7,
        truck_population=9,
        major_markets=("Dallas", "Houston", "San Antonio", "Austin"),
        industries=("Energy", "Manufacturing", "Agriculture", "Imports"),
    ),
}

# Likelihood of finding a profitable return load out of the destination region.
# Display only; never feeds the cost model.
RETURN_LOAD_POTENTIAL: dict[str, dict] = {
    "northeast": {"score": 7, "rating": "Good", "avg_loads_per_day": 2500},
    "southeast": {"score": 8, "rating": "Very Good", "avg_loads_per_day": 3200},
    "midwest": {"score": 9, "rating": "Excellent", "avg_loads_per_day": 4100},
    "southwest": {"score": 5, "rating": "Moderate", "avg_loads_per_day": 800},
    "west": {"score": 4, "rating": "Below Average", "avg_loads_per_day": 1200},
    "pacific_northwest": {"score": 6, "rating": "Fair", "avg_loads_per_day": 650},
    "mountain": {"score": 4, "rating": "Below Average", "avg_loads_per_day": 350},
    "south_central": {"score": 9, "rating": "Excellent", "avg_loads_per_day": 3800},
}
