"""HTTP client for interacting with OSRM services."""

from __future__ import annotations

import logging
from typing import Sequence

import httpx

from ...config import Settings, settings
from ...errors import ProviderError, ProviderUnavailableError
from ..providers.http import MALFORMED_RESPONSE_ERRORS, JsonHttpClient
from .models import ProviderRoute

METERS_PER_MILE = 1609.34
PROVIDER = "osrm"

logger = logging.getLogger(__name__)


class OSRMClient:
    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        config: Settings = settings,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or config.osrm_base_url
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.profile = profile or config.osrm_profile
        self._http = JsonHttpClient(
            PROVIDER,
            self.base_url,
            timeout=config.routing_timeout_seconds,
            max_retries=config.provider_max_retries,
            backoff_seconds=config.provider_backoff_seconds,
            transport=transport,
        )

    def route(self, coordinates: Sequence[tuple[float, float]]) -> ProviderRoute:
        """Get the driving route through ``coordinates``.

        Args:
            coordinates: Sequence of (lat, lon) tuples for the route waypoints

        Returns:
            The route distance, duration and full polyline geometry.
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required for OSRM route.")

        # OSRM route endpoint expects coordinates as "lon,lat;lon,lat;..."
        coordinate_str = ";".join(f"{lon},{lat}" for lat, lon in coordinates)
        params = {
            "overview": "full",
            "geometries": "polyline",
            "steps": "false",
        }
        data = self._http.get_json(f"route/v1/{self.profile}/{coordinate_str}", params=params)

        try:
            if data.get("code") != "Ok" or not data.get("routes"):
                error_msg = data.get("message", "Unknown OSRM route error")
                raise ProviderUnavailableError(f"OSRM route request failed: {error_msg}", provider=PROVIDER)
            route = data["routes"][0]
            meters = float(route.get("distance") or 0.0)
            hours = float(route.get("duration") or 0.0) / 3600
            geometry = route.get("geometry")
            path = decode_polyline(geometry) if geometry else list(coordinates)
        except MALFORMED_RESPONSE_ERRORS as exc:
            raise ProviderUnavailableError(f"OSRM route response is malformed: {exc!r}", provider=PROVIDER) from exc
        if meters <= 0:
            raise ProviderUnavailableError("OSRM returned a zero-length route.", provider=PROVIDER)
        return ProviderRoute(
            distance_miles=meters / METERS_PER_MILE,
            duration_hours=hours,
            polyline=geometry,
            path=path,
        )


def decode_polyline(polyline: str) -> list[tuple[float, float]]:
    """Decode Google polyline string to list of (lat, lon) coordinates.

    OSRM and Google Directions both use this encoding for route geometry.
    """
    coordinates = []
    index = 0
    lat = 0
    lon = 0

    while index < len(polyline):
        # Decode latitude
        shift = 0
        result = 0
        while True:
            b = ord(polyline[index]) - 63
            index += 1
            result |= (b & 0x1f) << shift
            shift += 5
            if b < 0x20:
                break
        dlat = ~(result >> 1) if (result & 1) else (result >> 1)
        lat += dlat

        # Decode longitude
        shift = 0
        result = 0
        while True:
            b = ord(polyline[index]) - 63
            index += 1
            result |= (b & 0x1f) << shift
            shift += 5
            if b < 0x20:
                break
        dlon = ~(result >> 1) if (result & 1) else (result >> 1)
        lon += dlon

        coordinates.append((lat / 1e5, lon / 1e5))

    return coordinates


def check_health(base_url: str | None = None, config: Settings = settings) -> bool:
    """Check OSRM reachability with a minimal two-point route request."""
    base = base_url or config.osrm_base_url
    if not base:
        return False
    try:
        client = OSRMClient(base_url=base, config=config)
        client.route([(41.8781, -87.6298), (41.8500, -87.6500)])
        return True
    except ProviderError as exc:
        logger.info(f"OSRM health check failed: {exc}")
        return False
