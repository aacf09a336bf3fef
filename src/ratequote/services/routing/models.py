"""Intermediate routing structures shared by the provider clients."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional


@dataclass(slots=True)
class ProviderRoute:
    """A route as reported by one provider, before state derivation."""

    distance_miles: float
    duration_hours: float
    origin_formatted: Optional[str] = None
    destination_formatted: Optional[str] = None
    polyline: Optional[str] = None
    path: list[tuple[float, float]] = field(default_factory=list)
    miles_by_state: Mapping[str, float] = field(default_factory=dict)
    is_truck_route: bool = False


@dataclass(frozen=True, slots=True)
class StateTraversal:
    states: tuple[str, ...]
    miles_by_state: Mapping[str, float]
