import threading

import httpx
import pytest

from src.ratequote.data.fuel import FALLBACK_PRICES, FALLBACK_PRICES_AS_OF, PADD_SERIES
from src.ratequote.errors import ProviderTimeoutError, ProviderUnavailableError
from src.ratequote.services.cache import TTLCache
from src.ratequote.services.fuel.eia_client import EIAClient
from src.ratequote.services.fuel.service import FuelPricingService


class DummyEIA:
    def __init__(self, prices=None, fail=()):
        self.prices = prices or {}
        self.fail = set(fail)
        self.calls = []

    def latest_price(self, padd):
        self.calls.append(padd)
        if padd in self.fail or "*" in self.fail:
            raise ProviderUnavailableError("EIA down", provider="eia")
        return self.prices.get(padd, 4.0)


def _service(settings, client=None):
    return FuelPricingService(settings, cache=TTLCache(ttl_seconds=3600), client=client)


def test_zero_key_lookup_uses_fallback_table(offline_settings):
    result = _service(offline_settings).get_fuel_price_for_state("CA")

    assert result.source == "fallback"
    assert result.region == "PADD5"
    assert result.price_per_gallon == FALLBACK_PRICES["PADD5"]
    assert result.last_updated == FALLBACK_PRICES_AS_OF


def test_api_result_is_cached_and_then_served_from_cache(offline_settings):
    client = DummyEIA({"PADD2": 3.911})
    service = _service(offline_settings, client)

    first = service.get_fuel_price_for_state("il")
    second = service.get_fuel_price_for_state("IL")

    assert first.source == "api"
    assert second.source == "cache"
    assert second.price_per_gallon == 3.911
    assert client.calls == ["PADD2"]


def test_api_failure_falls_back_without_raising(offline_settings):
    service = _service(offline_settings, DummyEIA(fail={"*"}))

    result = service.get_fuel_price_for_state("TX")

    assert result.source == "fallback"
    assert result.price_per_gallon == FALLBACK_PRICES["PADD3"]


def test_equal_weights_give_the_arithmetic_mean(offline_settings):
    service = _service(offline_settings)

    result = service.get_route_fuel_price(["IL", "TX", "CA"])

    expected = (FALLBACK_PRICES["PADD2"] + FALLBACK_PRICES["PADD3"] + FALLBACK_PRICES["PADD5"]) / 3
    assert result.price_per_gallon == pytest.approx(expected, abs=1e-6)
    assert result.region == "IL, TX, CA"


def test_route_price_is_weighted_by_miles(offline_settings):
    service = _service(offline_settings, DummyEIA({"PADD2": 3.0, "PADD5": 5.0}))

    result = service.get_route_fuel_price(["IL", "CA"], {"IL": 300.0, "CA": 100.0})

    assert result.price_per_gallon == pytest.approx((3.0 * 300 + 5.0 * 100) / 400)
    assert result.source == "api"


def test_zero_mileage_split_falls_back_to_equal_weights(offline_settings):
    service = _service(offline_settings, DummyEIA({"PADD2": 3.0, "PADD5": 5.0}))

    result = service.get_route_fuel_price(["IL", "CA"], {"IL": 0.0, "CA": 0.0})

    assert result.price_per_gallon == pytest.approx(4.0)


def test_route_source_reports_the_weakest_link(offline_settings):
    cache = TTLCache(ttl_seconds=3600)
    client = DummyEIA({"PADD2": 3.0})
    service = FuelPricingService(offline_settings, cache=cache, client=client)
    service.get_fuel_price_for_state("IL")

    cached_and_api = service.get_route_fuel_price(["IL", "IN"])
    assert cached_and_api.source == "cache"

    client.fail = {"PADD5"}
    with_fallback = service.get_route_fuel_price(["IL", "CA"])
    assert with_fallback.source == "fallback"
    assert with_fallback.last_updated == FALLBACK_PRICES_AS_OF


def test_route_lookup_stops_calling_the_api_after_a_failure(offline_settings):
    client = DummyEIA(fail={"PADD2"})
    service = _service(offline_settings, client)

    service.get_route_fuel_price(["IL", "TX", "CA"])

    assert client.calls == ["PADD2"]


def test_route_lookup_fetches_each_padd_once(offline_settings):
    client = DummyEIA({"PADD2": 3.9})
    service = _service(offline_settings, client)

    result = service.get_route_fuel_price(["IL", "IN", "OH"])

    assert client.calls == ["PADD2"]
    assert result.price_per_gallon == pytest.approx(3.9)


def test_empty_route_uses_national_price(offline_settings):
    result = _service(offline_settings).get_route_fuel_price([])
    assert result.region == "US"
    assert result.price_per_gallon == FALLBACK_PRICES["US"]


def test_update_all_counts_partial_failures(offline_settings):
    cache = TTLCache(ttl_seconds=3600)
    client = DummyEIA({"PADD3": 3.55}, fail={"PADD5", "PADD4"})
    service = FuelPricingService(offline_settings, cache=cache, client=client)

    summary = service.update_all_fuel_prices()

    assert summary.updated == len(PADD_SERIES) - 2
    assert summary.failed == 2
    assert cache.get("TX").price_per_gallon == 3.55
    assert cache.get("CA") is None


def test_update_all_without_key_is_a_no_op(offline_settings):
    summary = _service(offline_settings).update_all_fuel_prices()
    assert (summary.updated, summary.failed) == (0, 0)


def test_slow_api_times_out_to_fallback(make_settings):
    release = threading.Event()

    class SlowEIA:
        def latest_price(self, padd):
            release.wait(5)
            return 9.99

    settings = make_settings(fuel_timeout_seconds=0.05)
    result = _service(settings, SlowEIA()).get_fuel_price_for_state("CA")
    release.set()

    assert result.source == "fallback"


def test_eia_client_reads_latest_value(make_settings):
    seen = {}

    def handler(request):
        seen.update(dict(request.url.params))
        return httpx.Response(200, json={"response": {"data": [{"period": "2025-01-06", "value": "3.6789"}]}})

    client = EIAClient(config=make_settings(eia_api_key="key"), transport=httpx.MockTransport(handler))

    assert client.latest_price("PADD3") == pytest.approx(3.679)
    assert seen["facets[series][]"] == PADD_SERIES["PADD3"]
    assert seen["length"] == "1"


def test_eia_client_rejects_empty_response(make_settings):
    def handler(request):
        return httpx.Response(200, json={"response": {"data": []}})

    client = EIAClient(config=make_settings(eia_api_key="key"), transport=httpx.MockTransport(handler))
    with pytest.raises(ProviderUnavailableError):
        client.latest_price("US")


def test_eia_timeout_is_reported_as_timeout(make_settings):
    def handler(request):
        raise httpx.ConnectTimeout("slow", request=request)

    client = EIAClient(config=make_settings(eia_api_key="key"), transport=httpx.MockTransport(handler))
    with pytest.raises(ProviderTimeoutError):
        client.latest_price("US")


def test_eia_client_rejects_non_numeric_price(make_settings):
    def handler(request):
        return httpx.Response(200, json={"response": {"data": [{"period": "2025-03-03", "value": "n/a"}]}})

    client = EIAClient(config=make_settings(eia_api_key="key"), transport=httpx.MockTransport(handler))
    with pytest.raises(ProviderUnavailableError):
        client.latest_price("US")
