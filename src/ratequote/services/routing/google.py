"""Google Maps Directions and Geocoding client."""

from __future__ import annotations

import logging

import httpx

from ...config import Settings, settings
from ...errors import ProviderUnavailableError
from ...models.domain import GeocodeResult
from ..providers.http import MALFORMED_RESPONSE_ERRORS, JsonHttpClient
from .models import ProviderRoute
from .osrm_client import decode_polyline

METERS_PER_MILE = 1609.34
PROVIDER = "google"

logger = logging.getLogger(__name__)


def _precision(types: list[str]) -> str:
    if {"street_address", "premise", "route", "subpremise"} & set(types):
        return "address"
    if {"locality", "postal_code", "sublocality", "neighborhood"} & set(types):
        return "city"
    return "state"


class GoogleMapsClient:
    def __init__(
        self,
        api_key: str | None = None,
        config: Settings = settings,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or config.google_maps_api_key
        if not self.api_key:
            raise ValueError("Google Maps API key is not configured.")
        self._routing = JsonHttpClient(
            PROVIDER,
            config.google_maps_base_url,
            timeout=config.routing_timeout_seconds,
            max_retries=config.provider_max_retries,
            backoff_seconds=config.provider_backoff_seconds,
            transport=transport,
        )
        self._geocoding = JsonHttpClient(
            PROVIDER,
            config.google_maps_base_url,
            timeout=config.geocode_timeout_seconds,
            max_retries=config.provider_max_retries,
            backoff_seconds=config.provider_backoff_seconds,
            transport=transport,
        )

    def geocode(self, address: str) -> GeocodeResult:
        data = self._geocoding.get_json(
            "geocode/json",
            params={"address": address, "components": "country:US", "key": self.api_key},
        )
        try:
            return parse_geocode(data, address)
        except MALFORMED_RESPONSE_ERRORS as exc:
            raise ProviderUnavailableError(
                f"Google geocoding response is malformed: {exc!r}", provider=PROVIDER
            ) from exc

    def directions(self, origin: tuple[float, float], destination: tuple[float, float]) -> ProviderRoute:
        data = self._routing.get_json(
            "directions/json",
            params={
                "origin": f"{origin[0]},{origin[1]}",
                "destination": f"{destination[0]},{destination[1]}",
                "mode": "driving",
                "units": "imperial",
                "key": self.api_key,
            },
        )
        try:
            return parse_directions(data)
        except MALFORMED_RESPONSE_ERRORS as exc:
            raise ProviderUnavailableError(
                f"Google directions response is malformed: {exc!r}", provider=PROVIDER
            ) from exc


def parse_geocode(data: dict, address: str) -> GeocodeResult:
    status = data.get("status")
    results = data.get("results") or []
    if status != "OK" or not results:
        raise ProviderUnavailableError(f"Google geocoding returned {status!r} for '{address}'.", provider=PROVIDER)

    result = results[0]
    location = result["geometry"]["location"]
    state = None
    for component in result.get("address_components", []):
        if "administrative_area_level_1" in component.get("types", []):
            state = component.get("short_name")
            break
    return GeocodeResult(
        lat=float(location["lat"]),
        lng=float(location["lng"]),
        formatted=result.get("formatted_address", address),
        state=state,
        precision=_precision(result.get("types", [])),
    )


def parse_directions(data: dict) -> ProviderRoute:
    status = data.get("status")
    routes = data.get("routes") or []
    if status != "OK" or not routes:
        raise ProviderUnavailableError(f"Google directions returned {status!r}.", provider=PROVIDER)

    route = routes[0]
    legs = route.get("legs") or []
    if not legs:
        raise ProviderUnavailableError("Google directions response has no legs.", provider=PROVIDER)
    meters = sum(leg["distance"]["value"] for leg in legs)
    seconds = sum(leg["duration"]["value"] for leg in legs)
    if meters <= 0:
        raise ProviderUnavailableError("Google directions returned a zero-length route.", provider=PROVIDER)

    polyline = (route.get("overview_polyline") or {}).get("points")
    if not polyline:
        logger.debug("Google directions returned no overview polyline, states will come from a straight path")
    return ProviderRoute(
        distance_miles=meters / METERS_PER_MILE,
        duration_hours=seconds / 3600,
        origin_formatted=legs[0].get("start_address"),
        destination_formatted=legs[-1].get("end_address"),
        polyline=polyline,
        path=decode_polyline(polyline) if polyline else [],
    )
