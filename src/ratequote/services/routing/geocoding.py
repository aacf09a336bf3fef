"""Address geocoding with provider fallback to an offline gazetteer."""

from __future__ import annotations

import logging
import re
from typing import Optional

from ...config import ProviderConfig, Settings, settings
from ...data.states import CITY_ALIASES, MAJOR_CITIES, STATE_NAMES, normalize_state, state_center
from ...errors import GeocodeError, ProviderUnavailableError
from ...models.domain import GeocodeResult
from ..providers.chain import ProviderChain, ProviderTier
from .google import GoogleMapsClient
from .pcmiler import PCMilerClient

_ZIP_RE = re.compile(r"\b\d{5}(?:-\d{4})?\b")
_COUNTRY_SUFFIXES = {"us", "usa", "united states", "united states of america"}

logger = logging.getLogger(__name__)


def _split_city_state(address: str) -> tuple[Optional[str], Optional[str]]:
    """Split free text into (city, state code); either may be None."""
    text = _ZIP_RE.sub("", address)
    parts = [part.strip() for part in text.split(",") if part.strip()]
    if parts and parts[-1].lower() in _COUNTRY_SUFFIXES:
        parts.pop()
    if not parts:
        return None, None

    state = normalize_state(parts[-1])
    if state:
        return (parts[-2] if len(parts) >= 2 else None), state

    # "Chicago IL", "Dallas Texas", "Raleigh North Carolina"
    words = parts[-1].split()
    for size in (1, 2):
        if len(words) > size:
            state = normalize_state(" ".join(words[-size:]))
            if state:
                return " ".join(words[:-size]), state
    # Unrecognised trailing state: keep the city so the gazetteer can still place it.
    return (parts[-2] if len(parts) >= 2 else parts[-1]), None


def _canonical_city(city: str) -> str:
    name = " ".join(city.lower().split())
    return CITY_ALIASES.get(name, name)


def offline_geocode(address: str) -> GeocodeResult:
    """Resolve "City, ST", "City, State", or a bare state from static tables."""
    city, state = _split_city_state(address)

    if city:
        name = _canonical_city(city)
        if state and (name, state) in MAJOR_CITIES:
            lat, lng = MAJOR_CITIES[(name, state)]
            return GeocodeResult(lat=lat, lng=lng, formatted=f"{name.title()}, {state}", state=state, precision="city")
        if not state:
            matches = [key for key in MAJOR_CITIES if key[0] == name]
            if len(matches) == 1:
                lat, lng = MAJOR_CITIES[matches[0]]
                return GeocodeResult(
                    lat=lat, lng=lng, formatted=f"{name.title()}, {matches[0][1]}", state=matches[0][1], precision="city"
                )

    if state:
        lat, lng = state_center(state)
        formatted = f"{city.strip().title()}, {state}" if city else STATE_NAMES[state]
        return GeocodeResult(lat=lat, lng=lng, formatted=formatted, state=state, precision="state")

    raise GeocodeError(f"Could not resolve address '{address}'.", address=address)


class Geocoder:
    """Google, then PC*MILER, then the offline gazetteer."""

    def __init__(
        self,
        config: Settings = settings,
        google: GoogleMapsClient | None = None,
        pcmiler: PCMilerClient | None = None,
    ) -> None:
        providers = ProviderConfig.from_settings(config)
        self.timeout = config.geocode_timeout_seconds
        self.google = google or (GoogleMapsClient(config=config) if providers.google_maps else None)
        self.pcmiler = pcmiler or (PCMilerClient(config=config) if providers.truck_routing else None)

    def geocode(self, address: str) -> GeocodeResult:
        text = (address or "").strip()
        if not text:
            raise GeocodeError("Address is empty.", address=address or "")

        tiers: list[ProviderTier[GeocodeResult]] = []
        if self.google is not None:
            tiers.append(ProviderTier("google", "secondary", lambda: self.google.geocode(text), self.timeout))
        if self.pcmiler is not None:
            tiers.append(ProviderTier("pcmiler", "primary", lambda: self.pcmiler.geocode(text), self.timeout))

        if tiers:
            try:
                result, _ = ProviderChain("geocoding", tiers).run()
                return result
            except ProviderUnavailableError as exc:
                logger.info(f"Geocoding providers failed for '{text}', using offline gazetteer: {exc}")
        return offline_geocode(text)
