"""Resolve an origin/destination pair into a route.

Providers are tried in tier order and the first success wins:

1. ``primary``: PC*MILER truck-legal routing, when vehicle specs are supplied.
2. ``secondary``: Google Directions, then OSRM.
3. ``fallback``: great-circle distance times a road factor, or a fixed
   intra-state estimate when two different addresses share a state centre.

States crossed are always derived from the route geometry, with the geocoded
endpoint states pinned first and last.
"""

from __future__ import annotations

import logging
from typing import Optional

from ...config import ProviderConfig, Settings, settings
from ...errors import ProviderUnavailableError, RouteUnavailableError
from ...models.domain import GeocodeResult, RouteResult, VehicleSpecs
from ..geospatial import AVERAGE_SPEED_MPH, road_distance_estimate
from ..providers.chain import ProviderChain, ProviderTier
from .geocoding import Geocoder
from .google import GoogleMapsClient
from .models import ProviderRoute
from .osrm_client import OSRMClient
from .pcmiler import PCMilerClient
from .state_locator import derive_states, straight_path

INTRA_STATE_PROVIDER = "intra_state_estimate"
# Assumed haul when two different addresses can only be placed at the same state centre.
INTRA_STATE_ESTIMATE_MILES = 100.0

logger = logging.getLogger(__name__)


def straight_line_route(origin: tuple[float, float], destination: tuple[float, float]) -> ProviderRoute:
    miles = road_distance_estimate(*origin, *destination)
    if miles <= 0:
        raise ProviderUnavailableError("Origin and destination resolve to the same point.", provider="straight_line")
    return ProviderRoute(
        distance_miles=miles,
        duration_hours=miles / AVERAGE_SPEED_MPH,
        path=straight_path(origin, destination),
    )


def intra_state_route(state: Optional[str]) -> ProviderRoute:
    miles = INTRA_STATE_ESTIMATE_MILES
    return ProviderRoute(
        distance_miles=miles,
        duration_hours=miles / AVERAGE_SPEED_MPH,
        miles_by_state={state: miles} if state else {},
    )


def _normalized(address: str) -> str:
    return " ".join(address.lower().split())


def placed_at_same_centre(origin: str, destination: str, start: GeocodeResult, end: GeocodeResult) -> bool:
    """Different addresses that geocoding could only place at one shared state centre."""
    if (start.lat, start.lng) != (end.lat, end.lng):
        return False
    if "state" not in (start.precision, end.precision):
        return False
    return _normalized(origin) != _normalized(destination)


class RouteResolver:
    def __init__(
        self,
        config: Settings = settings,
        geocoder: Geocoder | None = None,
        pcmiler: PCMilerClient | None = None,
        google: GoogleMapsClient | None = None,
        osrm: OSRMClient | None = None,
    ) -> None:
        providers = ProviderConfig.from_settings(config)
        self.timeout = config.routing_timeout_seconds
        self.pcmiler = pcmiler or (PCMilerClient(config=config) if providers.truck_routing else None)
        self.google = google or (GoogleMapsClient(config=config) if providers.google_maps else None)
        self.osrm = osrm or (OSRMClient(config=config) if providers.osrm else None)
        self.geocoder = geocoder or Geocoder(config, google=self.google, pcmiler=self.pcmiler)

    def _tiers(
        self,
        origin: tuple[float, float],
        destination: tuple[float, float],
        vehicle_specs: Optional[VehicleSpecs],
        shared_state: Optional[str] = None,
        approximate: bool = False,
    ) -> list[ProviderTier[ProviderRoute]]:
        tiers: list[ProviderTier[ProviderRoute]] = []
        if vehicle_specs is not None and self.pcmiler is not None:
            tiers.append(
                ProviderTier("pcmiler", "primary", lambda: self.pcmiler.route(origin, destination, vehicle_specs), self.timeout)
            )
        if self.google is not None:
            tiers.append(ProviderTier("google", "secondary", lambda: self.google.directions(origin, destination), self.timeout))
        if self.osrm is not None:
            tiers.append(ProviderTier("osrm", "secondary", lambda: self.osrm.route([origin, destination]), self.timeout))
        if approximate:
            tiers.append(ProviderTier(INTRA_STATE_PROVIDER, "fallback", lambda: intra_state_route(shared_state)))
        else:
            tiers.append(ProviderTier("straight_line", "fallback", lambda: straight_line_route(origin, destination)))
        return tiers

    def resolve(self, origin: str, destination: str, vehicle_specs: VehicleSpecs | None = None) -> RouteResult:
        """Geocode both endpoints and route between them.

        Raises:
            GeocodeError: an endpoint cannot be resolved.
            RouteUnavailableError: every routing tier failed.
        """
        start = self.geocoder.geocode(origin)
        end = self.geocoder.geocode(destination)
        origin_point = (start.lat, start.lng)
        destination_point = (end.lat, end.lng)

        approximate = placed_at_same_centre(origin, destination, start, end)
        if approximate:
            logger.warning(
                f"'{origin}' and '{destination}' both resolve to the centre of {start.state or end.state}, "
                f"estimating a {INTRA_STATE_ESTIMATE_MILES:.0f}-mile haul"
            )
        tiers = self._tiers(origin_point, destination_point, vehicle_specs, start.state or end.state, approximate)
        chain = ProviderChain("routing", tiers)
        try:
            route, tier = chain.run()
        except ProviderUnavailableError as exc:
            raise RouteUnavailableError(f"No route between '{origin}' and '{destination}': {exc}") from exc

        return self._build_result(route, tier.tier, tier.name, start, end)

    def _build_result(
        self, route: ProviderRoute, tier: str, provider_name: str, start: GeocodeResult, end: GeocodeResult
    ) -> RouteResult:
        if route.miles_by_state:
            states = tuple(route.miles_by_state)
            miles_by_state = dict(route.miles_by_state)
        else:
            path = route.path or [(start.lat, start.lng), (end.lat, end.lng)]
            traversal = derive_states(path, route.distance_miles, start.state, end.state)
            states, miles_by_state = traversal.states, dict(traversal.miles_by_state)

        logger.info(
            f"Route {start.formatted} -> {end.formatted}: {route.distance_miles:.1f} mi via {provider_name} ({tier}), "
            f"states {list(states)}"
        )
        return RouteResult(
            distance_miles=route.distance_miles,
            duration_hours=route.duration_hours,
            origin_formatted=route.origin_formatted or start.formatted,
            destination_formatted=route.destination_formatted or end.formatted,
            routing_provider=tier,
            provider_name=provider_name,
            states_crossed=states,
            miles_by_state=miles_by_state,
            origin_lat=start.lat,
            origin_lng=start.lng,
            destination_lat=end.lat,
            destination_lng=end.lng,
            is_truck_route=route.is_truck_route,
            polyline=route.polyline,
        )


def calculate_distance(
    origin: str,
    destination: str,
    vehicle_specs: VehicleSpecs | None = None,
    resolver: RouteResolver | None = None,
) -> RouteResult:
    """Standalone distance lookup using the configured providers."""
    return (resolver or RouteResolver()).resolve(origin, destination, vehicle_specs)
