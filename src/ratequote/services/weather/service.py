"""Origin/destination forecasts and a route-level weather risk rating."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Callable, Iterable, Optional, Union

from ...config import ProviderConfig, Settings, settings
from ...errors import NON_FATAL_PROVIDER_ERRORS
from ...models.domain import WeatherData, WeatherForecast
from ..providers.chain import call_with_timeout, submit, wait_result
from .openweather_client import OpenWeatherClient

CONDITION_SEVERITY: tuple[str, ...] = (
    "normal",
    "fog",
    "light_rain",
    "heavy_rain",
    "snow",
    "ice",
    "extreme_weather",
)
RISK_ORDER: tuple[str, ...] = ("low", "moderate", "high", "severe")
CONDITION_RISK: dict[str, str] = {
    "extreme_weather": "severe",
    "ice": "high",
    "snow": "high",
    "heavy_rain": "moderate",
}

LOW_VISIBILITY_MILES = 1.0
REDUCED_VISIBILITY_MILES = 3.0
HEAVY_PRECIPITATION_PCT = 70
WINTER_PRECIPITATION_PCT = 50
FREEZING_F = 32
EXTREME_HEAT_F = 95
HIGH_WIND_MPH = 40
GUSTY_WIND_MPH = 25

CONDITION_ADVISORIES: dict[str, tuple[str, ...]] = {
    "extreme_weather": (
        "SEVERE WEATHER WARNING: Consider delaying shipment",
        "Check road closures before departure",
        "Ensure emergency supplies are on board",
    ),
    "ice": (
        "ICE WARNING: Extremely hazardous road conditions",
        "Chains may be required in mountain passes",
        "Allow significant extra travel time",
    ),
    "snow": (
        "Snow expected: Allow extra travel time",
        "Check chain requirements for mountain routes",
    ),
    "heavy_rain": (
        "Heavy rain: Reduced visibility and hydroplaning risk",
        "Maintain safe following distance",
    ),
    "fog": (
        "Fog advisory: Reduced visibility expected",
        "Use low-beam headlights",
    ),
    "light_rain": (
        "Light rain expected: Roads may be slick",
    ),
}

DateLike = Union[date, datetime, None]

logger = logging.getLogger(__name__)


def _as_datetime(target: DateLike) -> Optional[datetime]:
    if target is None:
        return None
    if isinstance(target, datetime):
        return target if target.tzinfo else target.replace(tzinfo=timezone.utc)
    return datetime.combine(target, time(12, 0), tzinfo=timezone.utc)


def worst_condition(forecasts: Iterable[Optional[WeatherForecast]]) -> str:
    conditions = [forecast.condition for forecast in forecasts if forecast is not None]
    if not conditions:
        return "normal"
    return max(conditions, key=CONDITION_SEVERITY.index)


def _at_least(level: str, floor: str) -> str:
    return level if RISK_ORDER.index(level) >= RISK_ORDER.index(floor) else floor


@dataclass(frozen=True, slots=True)
class WeatherCheck:
    """A forecast reading that sets a risk floor and carries its advisory."""

    applies: Callable[[WeatherForecast], bool]
    risk_floor: str
    advisory: str


# Advisories are emitted in this order, once per check, when any forecast trips it.
WEATHER_CHECKS: tuple[WeatherCheck, ...] = (
    WeatherCheck(
        lambda f: f.temperature <= FREEZING_F,
        "low",
        "Freezing temperatures: Watch for black ice",
    ),
    WeatherCheck(
        lambda f: f.temperature > EXTREME_HEAT_F,
        "low",
        "Extreme heat: Monitor tire pressure and engine temperature",
    ),
    WeatherCheck(
        lambda f: f.wind_speed > HIGH_WIND_MPH,
        "high",
        "High winds: Use caution with high-profile vehicles",
    ),
    WeatherCheck(
        lambda f: GUSTY_WIND_MPH < f.wind_speed <= HIGH_WIND_MPH,
        "low",
        "Gusty winds: Be prepared for crosswinds",
    ),
    WeatherCheck(
        lambda f: f.visibility < LOW_VISIBILITY_MILES,
        "high",
        "Very low visibility: Reduce speed significantly",
    ),
    WeatherCheck(
        lambda f: LOW_VISIBILITY_MILES <= f.visibility < REDUCED_VISIBILITY_MILES,
        "moderate",
        "Reduced visibility: Use headlights and increase following distance",
    ),
    WeatherCheck(
        lambda f: f.precipitation >= HEAVY_PRECIPITATION_PCT,
        "moderate",
        "Heavy precipitation likely: Reduce speed on wet roads",
    ),
    WeatherCheck(
        lambda f: f.temperature <= FREEZING_F and f.precipitation >= WINTER_PRECIPITATION_PCT,
        "high",
        "Winter precipitation: Roads may be snow or ice covered",
    ),
)


def triggered_checks(forecasts: Iterable[Optional[WeatherForecast]]) -> list[WeatherCheck]:
    available = [forecast for forecast in forecasts if forecast is not None]
    return [check for check in WEATHER_CHECKS if any(check.applies(forecast) for forecast in available)]


def assess_risk(condition: str, forecasts: Iterable[Optional[WeatherForecast]]) -> str:
    """Risk from the route condition, escalated by the forecast readings."""
    risk = CONDITION_RISK.get(condition, "low")
    for check in triggered_checks(forecasts):
        risk = _at_least(risk, check.risk_floor)
    return risk


def build_advisories(condition: str, forecasts: Iterable[Optional[WeatherForecast]]) -> tuple[str, ...]:
    advisories = list(CONDITION_ADVISORIES.get(condition, ()))
    advisories.extend(check.advisory for check in triggered_checks(forecasts))
    return tuple(advisories)


class WeatherRiskAssessor:
    def __init__(self, config: Settings = settings, client: OpenWeatherClient | None = None) -> None:
        self.timeout = config.weather_timeout_seconds
        self.horizon_days = config.weather_forecast_horizon_days
        if client is None and ProviderConfig.from_settings(config).weather:
            client = OpenWeatherClient(config=config)
        self.client = client

    def _in_horizon(self, target: Optional[datetime]) -> bool:
        if target is None:
            return True
        days_ahead = math.ceil((target - datetime.now(timezone.utc)).total_seconds() / 86400)
        if days_ahead > self.horizon_days:
            logger.info(f"Weather date {target.date()} is beyond the {self.horizon_days}-day forecast horizon")
            return False
        return True

    def _fetch(self, lat: float, lng: float, target: Optional[datetime]) -> Optional[WeatherForecast]:
        if target is None or target <= datetime.now(timezone.utc):
            return self.client.current(lat, lng)
        return self.client.forecast(lat, lng, target)

    def get_weather_forecast(self, lat: float, lng: float, date: DateLike = None) -> Optional[WeatherForecast]:
        """Forecast for a point, or None when it cannot be had."""
        target = _as_datetime(date)
        if self.client is None or not self._in_horizon(target):
            return None
        try:
            return call_with_timeout(lambda: self._fetch(lat, lng, target), self.timeout, provider="openweathermap")
        except NON_FATAL_PROVIDER_ERRORS as exc:
            logger.warning(f"Weather lookup failed for ({lat:.3f}, {lng:.3f}): {exc}")
            return None

    def get_route_weather(
        self,
        origin_lat: float,
        origin_lng: float,
        dest_lat: float,
        dest_lng: float,
        date: DateLike = None,
    ) -> WeatherData:
        target = _as_datetime(date)
        origin: Optional[WeatherForecast] = None
        destination: Optional[WeatherForecast] = None

        if self.client is not None and self._in_horizon(target):
            futures = {
                "origin": submit(self._fetch, origin_lat, origin_lng, target),
                "destination": submit(self._fetch, dest_lat, dest_lng, target),
            }
            results: dict[str, Optional[WeatherForecast]] = {}
            for end, future in futures.items():
                try:
                    results[end] = wait_result(future, self.timeout, provider="openweathermap")
                except NON_FATAL_PROVIDER_ERRORS as exc:
                    logger.warning(f"Weather lookup for {end} failed: {exc}")
                    results[end] = None
            origin, destination = results["origin"], results["destination"]

        forecasts = (origin, destination)
        condition = worst_condition(forecasts)
        return WeatherData(
            origin=origin,
            destination=destination,
            route_condition=condition,
            risk_level=assess_risk(condition, forecasts),
            advisories=build_advisories(condition, forecasts),
        )
