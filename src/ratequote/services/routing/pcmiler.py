"""PC*MILER REST client for truck-legal routing and geocoding."""

from __future__ import annotations

import dataclasses
import logging
import math
import re

import httpx

from ...config import Settings, settings
from ...data.vehicles import VEHICLE_DIMENSIONS
from ...errors import ProviderUnavailableError
from ...models.domain import GeocodeResult, VehicleSpecs
from ..providers.http import MALFORMED_RESPONSE_ERRORS, JsonHttpClient
from .models import ProviderRoute

PROVIDER = "pcmiler"

HAZMAT_TYPES = {
    "general": "General",
    "explosive": "Explosive",
    "flammable": "Flammable",
    "corrosive": "Corrosive",
    "radioactive": "Radioactive",
}

_ZIP_RE = re.compile(r"^\d{5}(-\d{4})?$")
_CITY_STATE_RE = re.compile(r"^(.+?),\s*([A-Za-z]{2})$")

logger = logging.getLogger(__name__)


def apply_vehicle_defaults(specs: VehicleSpecs) -> VehicleSpecs:
    """Fill unspecified dimensions from the vehicle type's defaults."""
    defaults = VEHICLE_DIMENSIONS.get(specs.vehicle_type, VEHICLE_DIMENSIONS["semi"])
    missing = {
        name: defaults[name]
        for name in ("height_inches", "weight_lbs", "length_feet", "width_inches", "axles")
        if getattr(specs, name) is None
    }
    if "axles" in missing:
        missing["axles"] = int(missing["axles"])
    return dataclasses.replace(specs, **missing) if missing else specs


def parse_hours(value: str | None) -> float:
    """Parse PC*MILER's "H:MM" duration strings."""
    if not value:
        return 0.0
    hours, _, minutes = str(value).partition(":")
    return int(hours or 0) + int(minutes or 0) / 60


class PCMilerClient:
    def __init__(
        self,
        api_key: str | None = None,
        config: Settings = settings,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or config.pcmiler_api_key
        if not self.api_key:
            raise ValueError("PC*MILER API key is not configured.")
        self._routing = JsonHttpClient(
            PROVIDER,
            config.pcmiler_base_url,
            timeout=config.routing_timeout_seconds,
            max_retries=config.provider_max_retries,
            backoff_seconds=config.provider_backoff_seconds,
            transport=transport,
        )
        self._geocoding = JsonHttpClient(
            PROVIDER,
            config.pcmiler_base_url,
            timeout=config.geocode_timeout_seconds,
            max_retries=config.provider_max_retries,
            backoff_seconds=config.provider_backoff_seconds,
            transport=transport,
        )

    def geocode(self, address: str) -> GeocodeResult:
        text = address.strip()
        params: dict[str, str] = {"authToken": self.api_key}
        match = _CITY_STATE_RE.match(text)
        if _ZIP_RE.match(text):
            params["postcode"] = text[:5]
        elif match:
            params["city"] = match.group(1).strip()
            params["state"] = match.group(2).upper()
        else:
            params["addr"] = text

        data = self._geocoding.get_json("locations", params=params)
        if not isinstance(data, list) or not data:
            raise ProviderUnavailableError(f"PC*MILER returned no location for '{text}'.", provider=PROVIDER)
        try:
            result = data[0]
            if result.get("Errors"):
                raise ProviderUnavailableError(f"PC*MILER geocode error: {result['Errors']}", provider=PROVIDER)
            coords = result.get("Coords") or {}
            address_data = result.get("Address") or {}
            lat, lng = float(coords["Lat"]), float(coords["Lon"])
        except MALFORMED_RESPONSE_ERRORS as exc:
            raise ProviderUnavailableError("PC*MILER location has no coordinates.", provider=PROVIDER) from exc

        city = address_data.get("City") or ""
        state = address_data.get("State") or None
        zip_code = address_data.get("Zip") or ""
        place = ", ".join(part for part in (city, state) if part)
        formatted = f"{place} {zip_code}".strip()
        return GeocodeResult(
            lat=lat,
            lng=lng,
            formatted=formatted or text,
            state=state,
            precision="address" if address_data.get("StreetAddress") else "city",
        )

    def route(
        self,
        origin: tuple[float, float],
        destination: tuple[float, float],
        vehicle_specs: VehicleSpecs,
    ) -> ProviderRoute:
        specs = apply_vehicle_defaults(vehicle_specs)
        params = {
            "authToken": self.api_key,
            # PC*MILER takes stops as "lon,lat;lon,lat"
            "stops": f"{origin[1]},{origin[0]};{destination[1]},{destination[0]}",
            "reports": "Mileage",
            "vehType": "1",
            "routeType": "Practical",
            "tollRoads": "2",
            "vehHeight": str(math.ceil(specs.height_inches / 12)),
            "vehWeight": str(round(specs.weight_lbs / 1000)),
            "vehLength": str(int(specs.length_feet)),
            "vehWidth": str(math.ceil(specs.width_inches / 12)),
            "axles": str(specs.axles),
        }
        if specs.hazmat and specs.hazmat_type != "none":
            params["hazMatType"] = HAZMAT_TYPES.get(specs.hazmat_type, "None")

        data = self._routing.get_json("route/routeReports", params=params)
        if not isinstance(data, list) or not data:
            raise ProviderUnavailableError("PC*MILER returned no route reports.", provider=PROVIDER)

        try:
            report = next((item for item in data if "MileageReport" in str(item.get("__type", ""))), None)
            lines = (report or {}).get("ReportLines") or []
            if len(lines) < 2:
                raise ProviderUnavailableError("PC*MILER mileage report is incomplete.", provider=PROVIDER)
            totals = lines[-1]
            miles = float(totals.get("TMiles") or 0)
            hours = parse_hours(totals.get("THours"))
        except MALFORMED_RESPONSE_ERRORS as exc:
            raise ProviderUnavailableError("PC*MILER mileage report is malformed.", provider=PROVIDER) from exc
        if miles <= 0:
            raise ProviderUnavailableError("PC*MILER returned a zero-length route.", provider=PROVIDER)

        logger.info(f"PC*MILER route: {miles:.1f} mi, {hours:.1f} h")
        return ProviderRoute(
            distance_miles=miles,
            duration_hours=hours,
            path=[origin, destination],
            is_truck_route=True,
        )
