"""Diesel price reference data keyed by PADD region."""

from __future__ import annotations

from datetime import datetime, timezone

DEFAULT_DIESEL_PRICE = 4.00

# EIA weekly retail on-highway diesel series per PADD region.
PADD_SERIES: dict[str, str] = {
    "PADD1": "EMD_EPD2D_PTE_R10_DPG",
    "PADD1A": "EMD_EPD2D_PTE_R1X_DPG",
    "PADD1B": "EMD_EPD2D_PTE_R1Y_DPG",
    "PADD1C": "EMD_EPD2D_PTE_R1Z_DPG",
    "PADD2": "EMD_EPD2D_PTE_R20_DPG",
    "PADD3": "EMD_EPD2D_PTE_R30_DPG",
    "PADD4": "EMD_EPD2D_PTE_R40_DPG",
    "PADD5": "EMD_EPD2D_PTE_R50_DPG",
    "US": "EMD_EPD2D_PTE_NUS_DPG",
}

STATE_TO_PADD: dict[str, str] = {
    # PADD 1A - New England
    "CT": "PADD1A", "ME": "PADD1A", "MA": "PADD1A", "NH": "PADD1A", "RI": "PADD1A", "VT": "PADD1A",
    # PADD 1B - Central Atlantic
    "DE": "PADD1B", "MD": "PADD1B", "NJ": "PADD1B", "NY": "PADD1B", "PA": "PADD1B",
    # PADD 1C - Lower Atlantic
    "FL": "PADD1C", "GA": "PADD1C", "NC": "PADD1C", "SC": "PADD1C", "VA": "PADD1C", "WV": "PADD1C",
    # PADD 2 - Midwest
    "IL": "PADD2", "IN": "PADD2", "IA": "PADD2", "KS": "PADD2", "KY": "PADD2", "MI": "PADD2",
    "MN": "PADD2", "MO": "PADD2", "NE": "PADD2", "ND": "PADD2", "OH": "PADD2", "OK": "PADD2",
    "SD": "PADD2", "TN": "PADD2", "WI": "PADD2",
    # PADD 3 - Gulf Coast
    "AL": "PADD3", "AR": "PADD3", "LA": "PADD3", "MS": "PADD3", "NM": "PADD3", "TX": "PADD3",
    # PADD 4 - Rocky Mountain
    "CO": "PADD4", "ID": "PADD4", "MT": "PADD4", "UT": "PADD4", "WY": "PADD4",
    # PADD 5 - West Coast
    "AK": "PADD5", "AZ": "PADD5", "CA": "PADD5", "HI": "PADD5", "NV": "PADD5", "OR": "PADD5", "WA": "PADD5",
}

# Static $/gallon per region used when neither the cache nor the API can answer.
FALLBACK_PRICES: dict[str, float] = {
    "PADD1": 4.05,
    "PADD1A": 4.30,
    "PADD1B": 4.20,
    "PADD1C": 3.90,
    "PADD2": 3.85,
    "PADD3": 3.65,
    "PADD4": 4.00,
    "PADD5": 4.75,
    "US": DEFAULT_DIESEL_PRICE,
}

# Publication date of the fallback table; fallback results report this as last_updated.
FALLBACK_PRICES_AS_OF = datetime(2025, 1, 6, tzinfo=timezone.utc)

# Caller-supplied prices carry no publication date; undated overrides report this instant.
OVERRIDE_PRICE_AS_OF = datetime(1970, 1, 1, tzinfo=timezone.utc)


def padd_for_state(state: str) -> str:
    return STATE_TO_PADD.get(state.upper(), "US")


def states_in_padd(padd: str) -> list[str]:
    """State cache keys served by a PADD series; the PADD1 aggregate serves none."""
    if padd == "US":
        return ["US"]
    return [state for state, region in STATE_TO_PADD.items() if region == padd]
