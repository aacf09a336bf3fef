"""Derive the states a route crosses from its geometry.

States are approximated by bounding boxes, so points near a border can fall
in more than one box. Ties go to the previously located state, then to the
route's own endpoints, then to the nearest box center.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ...data.states import STATE_BOUNDS, state_center
from ..geospatial import bounding_box, contains, haversine_miles, interpolate
from .models import StateTraversal

SAMPLE_SPACING_MILES = 10.0

logger = logging.getLogger(__name__)

_STATE_SHAPES = {code: bounding_box(*bounds) for code, bounds in STATE_BOUNDS.items()}


def locate_state(lat: float, lng: float, prefer: Iterable[Optional[str]] = ()) -> Optional[str]:
    candidates = [code for code, shape in _STATE_SHAPES.items() if contains(shape, lat, lng)]
    if not candidates:
        return None
    for code in prefer:
        if code in candidates:
            return code
    return min(candidates, key=lambda code: haversine_miles(lat, lng, *state_center(code)))


def resample(points: Sequence[tuple[float, float]], spacing_miles: float = SAMPLE_SPACING_MILES) -> list[tuple[float, float]]:
    """Thin a dense path so consecutive points are roughly ``spacing_miles`` apart."""
    if len(points) <= 2:
        return list(points)
    kept = [points[0]]
    travelled = 0.0
    for previous, current in zip(points, points[1:]):
        travelled += haversine_miles(*previous, *current)
        if travelled >= spacing_miles:
            kept.append(current)
            travelled = 0.0
    if kept[-1] != points[-1]:
        kept.append(points[-1])
    return kept


def straight_path(
    origin: tuple[float, float], destination: tuple[float, float], spacing_miles: float = SAMPLE_SPACING_MILES
) -> list[tuple[float, float]]:
    return list(interpolate(*origin, *destination, step_miles=spacing_miles))


def derive_states(
    path: Sequence[tuple[float, float]],
    total_miles: float,
    origin_state: Optional[str] = None,
    destination_state: Optional[str] = None,
) -> StateTraversal:
    """Walk ``path`` and attribute each segment's miles to the state it lies in.

    Segment miles are scaled so ``miles_by_state`` sums to ``total_miles``.
    The origin state is listed first and the destination state last whenever
    they are known.
    """
    points = resample(path)
    miles: dict[str, float] = {}
    order: list[str] = []
    previous_state = origin_state
    raw_total = 0.0

    for start, end in zip(points, points[1:]):
        segment = haversine_miles(*start, *end)
        midpoint = ((start[0] + end[0]) / 2, (start[1] + end[1]) / 2)
        state = locate_state(*midpoint, prefer=(previous_state, origin_state, destination_state)) or previous_state
        if state is None:
            continue
        if state not in miles:
            order.append(state)
            miles[state] = 0.0
        miles[state] += segment
        raw_total += segment
        previous_state = state

    scale = total_miles / raw_total if raw_total > 0 else 0.0
    miles_by_state = {state: round(value * scale, 2) for state, value in miles.items()}

    endpoints = {origin_state, destination_state}
    middle = [state for state in order if state not in endpoints]
    order = ([origin_state] if origin_state else []) + middle
    if destination_state and destination_state != origin_state:
        order.append(destination_state)
    for state in endpoints:
        if state:
            miles_by_state.setdefault(state, 0.0)

    if not miles and total_miles > 0 and order:
        # Geometry fell outside every known state; split evenly across the endpoints.
        share = round(total_miles / len(order), 2)
        miles_by_state = {state: share for state in order}

    logger.debug(f"Derived {len(order)} state(s) along route: {order}")
    return StateTraversal(states=tuple(order), miles_by_state=miles_by_state)
