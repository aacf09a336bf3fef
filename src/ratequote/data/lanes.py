"""Lane rate benchmarks ($/mile, dry van spot market) and adjustment curves."""

from __future__ import annotations

# origin region -> destination region -> (low, mid, high) $/mile
LANE_BENCHMARKS: dict[str, dict[str, tuple[float, float, float]]] = {
    "midwest": {
        "northeast": (2.15, 2.50, 2.90),
        "southeast": (1.85, 2.15, 2.55),
        "midwest": (1.70, 2.00, 2.35),
        "southwest": (1.75, 2.10, 2.50),
        "west": (2.20, 2.55, 3.00),
        "pacific_northwest": (2.10, 2.45, 2.85),
        "mountain": (1.90, 2.25, 2.65),
        "south_central": (1.80, 2.10, 2.50),
    },
    "northeast": {
        "northeast": (1.85, 2.20, 2.60),
        "southeast": (2.00, 2.35, 2.75),
        "midwest": (1.90, 2.25, 2.65),
        "southwest": (2.05, 2.40, 2.85),
        "west": (2.30, 2.70, 3.20),
        "pacific_northwest": (2.25, 2.65, 3.10),
        "mountain": (2.10, 2.45, 2.90),
        "south_central": (2.00, 2.35, 2.80),
    },
    "southeast": {
        "northeast": (2.25, 2.60, 3.05),
        "southeast": (1.65, 1.95, 2.30),
        "midwest": (1.95, 2.30, 2.70),
        "southwest": (1.85, 2.20, 2.60),
        "west": (2.15, 2.50, 2.95),
        "pacific_northwest": (2.20, 2.55, 3.00),
        "mountain": (2.00, 2.35, 2.75),
        "south_central": (1.75, 2.05, 2.45),
    },
    "southwest": {
        "northeast": (2.10, 2.45, 2.90),
        "southeast": (1.95, 2.30, 2.70),
        "midwest": (2.00, 2.35, 2.75),
        "southwest": (1.60, 1.90, 2.25),
        "west": (1.85, 2.15, 2.55),
        "pacific_northwest": (2.05, 2.40, 2.80),
        "mountain": (1.70, 2.00, 2.40),
        "south_central": (1.80, 2.10, 2.50),
    },
    "west": {
        "northeast": (1.75, 2.10, 2.50),
        "southeast": (1.70, 2.00, 2.40),
        "midwest": (1.65, 1.95, 2.35),
        "southwest": (1.55, 1.85, 2.20),
        "west": (1.80, 2.15, 2.55),
        "pacific_northwest": (1.90, 2.25, 2.65),
        "mountain": (1.60, 1.90, 2.30),
        "south_central": (1.65, 1.95, 2.35),
    },
    "pacific_northwest": {
        "northeast": (2.00, 2.35, 2.75),
        "southeast": (1.95, 2.30, 2.70),
        "midwest": (1.90, 2.25, 2.65),
        "southwest": (1.85, 2.20, 2.60),
        "west": (2.10, 2.45, 2.90),
        "pacific_northwest": (1.70, 2.00, 2.40),
        "mountain": (1.80, 2.15, 2.55),
        "south_central": (1.95, 2.30, 2.70),
    },
    "mountain": {
        "northeast": (2.05, 2.40, 2.85),
        "southeast": (1.90, 2.25, 2.65),
        "midwest": (1.85, 2.20, 2.60),
        "southwest": (1.80, 2.15, 2.55),
        "west": (2.00, 2.35, 2.75),
        "pacific_northwest": (1.85, 2.20, 2.60),
        "mountain": (1.65, 1.95, 2.35),
        "south_central": (1.80, 2.15, 2.55),
    },
    "south_central": {
        "northeast": (2.20, 2.55, 3.00),
        "southeast": (1.95, 2.30, 2.70),
        "midwest": (2.00, 2.35, 2.75),
        "southwest": (1.85, 2.20, 2.60),
        "west": (2.10, 2.45, 2.90),
        "pacific_northwest": (2.15, 2.50, 2.95),
        "mountain": (1.90, 2.25, 2.65),
        "south_central": (1.60, 1.90, 2.25),
    },
}

DEFAULT_BENCHMARK: tuple[float, float, float] = (1.85, 2.20, 2.60)

# (max_miles or None, multiplier, label); shorter hauls carry more fixed cost per mile.
DISTANCE_CURVES: tuple[tuple[float | None, float, str], ...] = (
    (150, 1.50, "Local"),
    (250, 1.35, "Short Haul"),
    (500, 1.15, "Regional"),
    (800, 1.05, "Mid-Range"),
    (1200, 1.00, "Standard"),
    (1800, 0.95, "Long Haul"),
    (None, 0.90, "Super Long"),
)

EQUIPMENT_PREMIUMS: dict[str, tuple[float, str]] = {
    "dry_van": (1.00, "Dry Van (Base)"),
    "reefer": (1.20, "Refrigerated (+20%)"),
    "flatbed": (1.15, "Flatbed (+15%)"),
    "specialized": (1.45, "Specialized (+45%)"),
}

# month -> (multiplier, label)
SEASONAL_PERIODS: dict[int, tuple[float, str]] = {
    1: (0.88, "Q1 Slow Season"),
    2: (0.88, "Q1 Slow Season"),
    3: (0.95, "Early Spring"),
    4: (1.12, "Produce Season"),
    5: (1.12, "Produce Season"),
    6: (1.12, "Produce Season"),
    7: (1.02, "Summer Steady"),
    8: (1.02, "Summer Steady"),
    9: (1.02, "Summer Steady"),
    10: (1.08, "Fall Ramp-Up"),
    11: (1.22, "Holiday Peak"),
    12: (1.22, "Holiday Peak"),
}

MAJOR_ORIGIN_REGIONS: frozenset[str] = frozenset({"midwest", "southeast", "south_central", "west"})
MAJOR_DESTINATION_REGIONS: frozenset[str] = frozenset({"midwest", "southeast", "south_central", "northeast"})
