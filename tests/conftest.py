import pytest

from src.ratequote.config import Settings


def _settings(**overrides) -> Settings:
    values = {
        "pcmiler_api_key": None,
        "google_maps_api_key": None,
        "osrm_base_url": None,
        "eia_api_key": None,
        "toll_api_key": None,
        "weather_api_key": None,
        "provider_max_retries": 0,
        "provider_backoff_seconds": 0.0,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def make_settings():
    """Build settings with every provider off unless switched on by keyword."""
    return _settings


@pytest.fixture
def offline_settings() -> Settings:
    return _settings()
