"""Application configuration and settings management."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="RATEQUOTE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Freight Rate Quote API"
    api_prefix: str = "/api"

    # Truck-legal routing (PC*MILER)
    pcmiler_api_key: Optional[str] = Field(default=None, description="PC*MILER REST API token.")
    pcmiler_base_url: str = Field(default="https://pcmiler.alk.com/apis/rest/v1.0/service.svc")

    # Generic mapping / geocoding
    google_maps_api_key: Optional[str] = Field(default=None, description="Google Maps Platform key.")
    google_maps_base_url: str = Field(default="https://maps.googleapis.com/maps/api")
    osrm_base_url: Optional[str] = Field(
        default=None,
        description="Base URL for an OSRM routing service (e.g., http://localhost:5000).",
    )
    osrm_profile: str = Field(default="driving", description="OSRM profile used for route requests.")

    # Fuel pricing (EIA)
    eia_api_key: Optional[str] = Field(default=None, description="EIA open data API key.")
    eia_base_url: str = Field(default="https://api.eia.gov/v2/petroleum/pri/gnd/data/")

    # Tolls (TollGuru)
    toll_api_key: Optional[str] = Field(default=None, description="TollGuru API key.")
    toll_base_url: str = Field(
        default="https://apis.tollguru.com/toll/v2/complete-polyline-from-mapping-service"
    )

    # Weather (OpenWeatherMap)
    weather_api_key: Optional[str] = Field(default=None, description="OpenWeatherMap API key.")
    weather_base_url: str = Field(default="https://api.openweathermap.org/data/2.5")
    weather_forecast_horizon_days: int = Field(default=5, ge=0)

    # Per-tier timeouts (seconds)
    routing_timeout_seconds: float = Field(default=12.0, gt=0.0)
    geocode_timeout_seconds: float = Field(default=8.0, gt=0.0)
    fuel_timeout_seconds: float = Field(default=8.0, gt=0.0)
    toll_timeout_seconds: float = Field(default=10.0, gt=0.0)
    weather_timeout_seconds: float = Field(default=8.0, gt=0.0)

    provider_max_retries: int = Field(default=1, ge=0)
    provider_backoff_seconds: float = Field(default=0.5, ge=0.0)

    fuel_cache_ttl_hours: float = Field(default=24.0, gt=0.0)
    toll_cache_ttl_hours: float = Field(default=24.0 * 7, gt=0.0)

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator(
        "pcmiler_api_key",
        "google_maps_api_key",
        "osrm_base_url",
        "eia_api_key",
        "toll_api_key",
        "weather_api_key",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, value: Any) -> Optional[str]:
        """Treat empty environment values as "not configured"."""
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    """Which provider tiers are usable, decided once from the settings.

    An absent key or base URL maps to "skip this tier"; nothing downstream
    inspects the raw settings to make that decision again.
    """

    truck_routing: bool
    google_maps: bool
    osrm: bool
    fuel_pricing: bool
    tolls: bool
    weather: bool

    @classmethod
    def from_settings(cls, config: Settings) -> "ProviderConfig":
        return cls(
            truck_routing=bool(config.pcmiler_api_key),
            google_maps=bool(config.google_maps_api_key),
            osrm=bool(config.osrm_base_url),
            fuel_pricing=bool(config.eia_api_key),
            tolls=bool(config.toll_api_key),
            weather=bool(config.weather_api_key),
        )

    def as_dict(self) -> dict[str, bool]:
        return {
            "truck_routing": self.truck_routing,
            "google_maps": self.google_maps,
            "osrm": self.osrm,
            "fuel_pricing": self.fuel_pricing,
            "tolls": self.tolls,
            "weather": self.weather,
        }


settings = Settings()
