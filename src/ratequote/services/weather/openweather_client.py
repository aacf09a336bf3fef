"""OpenWeatherMap client for current conditions and the 5-day forecast."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

import httpx

from ...config import Settings, settings
from ...errors import ProviderUnavailableError
from ...models.domain import WeatherForecast
from ..providers.http import MALFORMED_RESPONSE_ERRORS, JsonHttpClient

PROVIDER = "openweathermap"
METERS_PER_MILE = 1609.34
DEFAULT_VISIBILITY_METERS = 10_000

# OpenWeatherMap condition ids; anything unlisted is treated as normal.
CONDITION_MAP: dict[int, str] = {
    # Thunderstorm
    200: "heavy_rain", 201: "heavy_rain", 202: "extreme_weather", 210: "heavy_rain", 211: "heavy_rain",
    212: "extreme_weather", 221: "heavy_rain", 230: "heavy_rain", 231: "heavy_rain", 232: "heavy_rain",
    # Drizzle
    300: "light_rain", 301: "light_rain", 302: "light_rain", 310: "light_rain", 311: "light_rain",
    312: "light_rain", 313: "light_rain", 314: "light_rain", 321: "light_rain",
    # Rain
    500: "light_rain", 501: "light_rain", 502: "heavy_rain", 503: "heavy_rain", 504: "extreme_weather",
    511: "ice", 520: "light_rain", 521: "heavy_rain", 522: "heavy_rain", 531: "heavy_rain",
    # Snow
    600: "snow", 601: "snow", 602: "snow", 611: "ice", 612: "ice", 613: "ice", 615: "snow", 616: "snow",
    620: "snow", 621: "snow", 622: "snow",
    # Atmosphere
    701: "fog", 711: "fog", 721: "fog", 731: "fog", 741: "fog", 751: "fog", 761: "fog",
    762: "extreme_weather", 771: "extreme_weather", 781: "extreme_weather",
    # Clear and clouds
    800: "normal", 801: "normal", 802: "normal", 803: "normal", 804: "normal",
}

logger = logging.getLogger(__name__)


def _check_status(data: dict) -> None:
    if str(data.get("cod")) != "200":
        raise ProviderUnavailableError(
            f"OpenWeatherMap error: {data.get('message', 'unknown error')}", provider=PROVIDER
        )


def _parse_entry(entry: dict, precipitation: float, when: datetime) -> WeatherForecast:
    weather = (entry.get("weather") or [{}])[0]
    main = entry.get("main") or {}
    condition = CONDITION_MAP.get(int(weather.get("id") or 800), "normal")
    visibility = entry.get("visibility") or DEFAULT_VISIBILITY_METERS
    return WeatherForecast(
        condition=condition,
        description=weather.get("description") or "Clear",
        temperature=round(float(main.get("temp", 70))),
        humidity=float(main.get("humidity", 50)),
        wind_speed=round(float((entry.get("wind") or {}).get("speed") or 0)),
        precipitation=precipitation,
        visibility=round(float(visibility) / METERS_PER_MILE, 1),
        forecast_time=when,
    )


def parse_current_weather(data: dict, when: datetime) -> WeatherForecast:
    rain_last_hour = (data.get("rain") or {}).get("1h")
    precipitation = 100.0 if rain_last_hour else float((data.get("clouds") or {}).get("all") or 0)
    return _parse_entry(data, precipitation, when)


def parse_forecast(data: dict, target: datetime) -> Optional[WeatherForecast]:
    """Pick the 3-hour slot closest to ``target``."""
    entries = data.get("list") or []
    if not entries:
        logger.warning("OpenWeatherMap forecast response has no entries")
        return None
    closest = min(entries, key=lambda entry: abs(entry["dt"] - target.timestamp()))
    when = datetime.fromtimestamp(closest["dt"], tz=timezone.utc)
    return _parse_entry(closest, round(float(closest.get("pop") or 0) * 100), when)


class OpenWeatherClient:
    def __init__(
        self,
        api_key: str | None = None,
        config: Settings = settings,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or config.weather_api_key
        if not self.api_key:
            raise ValueError("OpenWeatherMap API key is not configured.")
        self._http = JsonHttpClient(
            PROVIDER,
            config.weather_base_url,
            timeout=config.weather_timeout_seconds,
            max_retries=config.provider_max_retries,
            backoff_seconds=config.provider_backoff_seconds,
            transport=transport,
        )

    def _params(self, lat: float, lng: float) -> dict:
        return {"lat": lat, "lon": lng, "appid": self.api_key, "units": "imperial"}

    def current(self, lat: float, lng: float) -> WeatherForecast:
        data = self._http.get_json("weather", params=self._params(lat, lng))
        try:
            _check_status(data)
            return parse_current_weather(data, datetime.now(timezone.utc))
        except MALFORMED_RESPONSE_ERRORS as exc:
            raise ProviderUnavailableError(
                f"OpenWeatherMap current weather response is malformed: {exc!r}", provider=PROVIDER
            ) from exc

    def forecast(self, lat: float, lng: float, target: datetime) -> Optional[WeatherForecast]:
        data = self._http.get_json("forecast", params=self._params(lat, lng))
        try:
            _check_status(data)
            return parse_forecast(data, target)
        except MALFORMED_RESPONSE_ERRORS as exc:
            raise ProviderUnavailableError(
                f"OpenWeatherMap forecast response is malformed: {exc!r}", provider=PROVIDER
            ) from exc
