import threading
from datetime import date, datetime, timedelta, timezone

import httpx
import pytest

from src.ratequote.errors import ProviderUnavailableError
from src.ratequote.models.domain import WeatherForecast
from src.ratequote.services.weather.openweather_client import (
    OpenWeatherClient,
    parse_current_weather,
    parse_forecast,
)
from src.ratequote.services.weather.service import (
    WeatherRiskAssessor,
    assess_risk,
    build_advisories,
    worst_condition,
)

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def _forecast(condition="normal", temperature=60, wind=5, precipitation=10, visibility=10.0):
    return WeatherForecast(
        condition=condition,
        description=condition,
        temperature=temperature,
        humidity=50,
        wind_speed=wind,
        precipitation=precipitation,
        visibility=visibility,
        forecast_time=NOW,
    )


class DummyWeather:
    def __init__(self, by_lat=None, fail_lat=None):
        self.by_lat = by_lat or {}
        self.fail_lat = fail_lat
        self.calls = []

    def current(self, lat, lng):
        self.calls.append(("current", lat))
        if lat == self.fail_lat:
            raise ProviderUnavailableError("down", provider="openweathermap")
        return self.by_lat.get(lat, _forecast())

    def forecast(self, lat, lng, target):
        self.calls.append(("forecast", lat))
        return self.by_lat.get(lat, _forecast())


def test_parse_current_weather():
    data = {
        "cod": 200,
        "weather": [{"id": 601, "description": "snow"}],
        "main": {"temp": 28.4, "humidity": 85},
        "wind": {"speed": 12.6},
        "clouds": {"all": 90},
        "visibility": 1609.34,
    }
    forecast = parse_current_weather(data, NOW)

    assert forecast.condition == "snow"
    assert forecast.temperature == 28
    assert forecast.wind_speed == 13
    assert forecast.precipitation == 90
    assert forecast.visibility == pytest.approx(1.0)


def test_parse_current_weather_rain_means_full_precipitation():
    data = {"cod": 200, "weather": [{"id": 500}], "main": {}, "rain": {"1h": 0.4}}
    forecast = parse_current_weather(data, NOW)

    assert forecast.condition == "light_rain"
    assert forecast.precipitation == 100
    assert forecast.temperature == 70
    assert forecast.visibility == pytest.approx(6.2)


def test_parse_forecast_picks_the_closest_slot():
    base = int(NOW.timestamp())
    data = {
        "cod": "200",
        "list": [
            {"dt": base, "weather": [{"id": 800}], "main": {"temp": 50}, "pop": 0.1},
            {"dt": base + 3 * 3600, "weather": [{"id": 502}], "main": {"temp": 48}, "pop": 0.85},
        ],
    }
    forecast = parse_forecast(data, NOW + timedelta(hours=2))

    assert forecast.condition == "heavy_rain"
    assert forecast.precipitation == 85
    assert forecast.forecast_time == NOW + timedelta(hours=3)


def test_worst_condition_uses_severity_order():
    assert worst_condition([_forecast("fog"), _forecast("snow")]) == "snow"
    assert worst_condition([None, _forecast("light_rain")]) == "light_rain"
    assert worst_condition([None, None]) == "normal"


@pytest.mark.parametrize(
    "condition, forecasts, expected",
    [
        ("extreme_weather", [], "severe"),
        ("ice", [], "high"),
        ("heavy_rain", [], "moderate"),
        ("normal", [_forecast()], "low"),
        ("fog", [_forecast("fog", visibility=0.5)], "high"),
        ("fog", [_forecast("fog", visibility=2.0)], "moderate"),
        ("light_rain", [_forecast("light_rain", precipitation=75)], "moderate"),
        ("normal", [_forecast(wind=45)], "high"),
        ("light_rain", [_forecast("light_rain", temperature=30, precipitation=60)], "high"),
    ],
)
def test_assess_risk(condition, forecasts, expected):
    assert assess_risk(condition, forecasts) == expected


def test_escalation_never_lowers_risk():
    assert assess_risk("extreme_weather", [_forecast(visibility=2.0)]) == "severe"


def test_advisories_follow_check_order():
    forecasts = [_forecast("snow", temperature=20, wind=30, precipitation=80, visibility=0.5)]

    advisories = build_advisories("snow", forecasts)

    assert advisories[:2] == (
        "Snow expected: Allow extra travel time",
        "Check chain requirements for mountain routes",
    )
    assert advisories[2:] == (
        "Freezing temperatures: Watch for black ice",
        "Gusty winds: Be prepared for crosswinds",
        "Very low visibility: Reduce speed significantly",
        "Heavy precipitation likely: Reduce speed on wet roads",
        "Winter precipitation: Roads may be snow or ice covered",
    )


def test_every_risk_threshold_has_an_advisory():
    forecasts = [_forecast(visibility=2.0, precipitation=80)]

    assert assess_risk("normal", forecasts) == "moderate"
    assert build_advisories("normal", forecasts) == (
        "Reduced visibility: Use headlights and increase following distance",
        "Heavy precipitation likely: Reduce speed on wet roads",
    )


@pytest.mark.parametrize("temperature, expected", [(32, True), (33, False)])
def test_freezing_boundary_matches_risk(temperature, expected):
    forecasts = [_forecast(temperature=temperature, precipitation=60)]

    advisories = build_advisories("normal", forecasts)

    assert ("Freezing temperatures: Watch for black ice" in advisories) is expected
    assert (assess_risk("normal", forecasts) == "high") is expected


def test_light_rain_has_an_advisory():
    assert build_advisories("light_rain", [_forecast("light_rain")]) == ("Light rain expected: Roads may be slick",)


def test_advisories_empty_for_calm_weather():
    assert build_advisories("normal", [_forecast(), None]) == ()


def test_no_key_means_no_forecast(offline_settings):
    assessor = WeatherRiskAssessor(offline_settings)

    assert assessor.get_weather_forecast(41.0, -87.0) is None
    weather = assessor.get_route_weather(41.0, -87.0, 34.0, -118.0)
    assert weather.origin is None and weather.destination is None
    assert weather.route_condition == "normal"
    assert weather.risk_level == "low"
    assert not weather.available


def test_date_beyond_horizon_is_none(offline_settings):
    client = DummyWeather()
    assessor = WeatherRiskAssessor(offline_settings, client=client)

    assert assessor.get_weather_forecast(41.0, -87.0, date.today() + timedelta(days=30)) is None
    assert client.calls == []


def test_future_date_uses_forecast_endpoint(offline_settings):
    client = DummyWeather()
    assessor = WeatherRiskAssessor(offline_settings, client=client)

    assert assessor.get_weather_forecast(41.0, -87.0, datetime.now(timezone.utc) + timedelta(days=2)) is not None
    assert client.calls == [("forecast", 41.0)]


def test_route_weather_tolerates_one_failed_endpoint(offline_settings):
    client = DummyWeather(by_lat={34.0: _forecast("heavy_rain", precipitation=80)}, fail_lat=41.0)
    assessor = WeatherRiskAssessor(offline_settings, client=client)

    weather = assessor.get_route_weather(41.0, -87.0, 34.0, -118.0)

    assert weather.origin is None
    assert weather.destination.condition == "heavy_rain"
    assert weather.route_condition == "heavy_rain"
    assert weather.risk_level == "moderate"


def test_route_weather_abandons_slow_endpoint(make_settings):
    release = threading.Event()

    class SlowOrigin(DummyWeather):
        def current(self, lat, lng):
            if lat == 41.0:
                release.wait(5)
            return super().current(lat, lng)

    assessor = WeatherRiskAssessor(make_settings(weather_timeout_seconds=0.1), client=SlowOrigin())
    weather = assessor.get_route_weather(41.0, -87.0, 34.0, -118.0)
    release.set()

    assert weather.origin is None
    assert weather.destination is not None


def test_openweather_client_checks_cod(make_settings):
    def handler(request):
        assert request.url.params["units"] == "imperial"
        return httpx.Response(200, json={"cod": 401, "message": "Invalid API key"})

    client = OpenWeatherClient(config=make_settings(weather_api_key="key"), transport=httpx.MockTransport(handler))
    with pytest.raises(ProviderUnavailableError):
        client.current(41.0, -87.0)


def _forecast_without_dt(request):
    return httpx.Response(
        200,
        json={"cod": "200", "list": [{"weather": [{"id": 800}], "main": {"temp": 50}, "pop": 0.1}]},
    )


def test_openweather_forecast_rejects_malformed_slot(make_settings):
    client = OpenWeatherClient(
        config=make_settings(weather_api_key="key"), transport=httpx.MockTransport(_forecast_without_dt)
    )

    with pytest.raises(ProviderUnavailableError):
        client.forecast(41.0, -87.0, datetime.now(timezone.utc) + timedelta(days=1))


def test_malformed_forecast_means_no_weather(make_settings):
    config = make_settings(weather_api_key="key")
    client = OpenWeatherClient(config=config, transport=httpx.MockTransport(_forecast_without_dt))
    assessor = WeatherRiskAssessor(config, client=client)
    when = datetime.now(timezone.utc) + timedelta(days=2)

    assert assessor.get_weather_forecast(41.0, -87.0, when) is None
    weather = assessor.get_route_weather(41.0, -87.0, 34.0, -118.0, when)
    assert weather.origin is None and weather.destination is None
    assert weather.risk_level == "low"


def test_openweather_current_rejects_non_object_weather(make_settings):
    def handler(request):
        return httpx.Response(200, json={"cod": 200, "weather": "clear", "main": {"temp": 60}})

    client = OpenWeatherClient(config=make_settings(weather_api_key="key"), transport=httpx.MockTransport(handler))
    with pytest.raises(ProviderUnavailableError):
        client.current(41.0, -87.0)
