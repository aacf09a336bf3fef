import threading
import time

import httpx
import pytest

from src.ratequote.errors import GeocodeError, ProviderTimeoutError, ProviderUnavailableError
from src.ratequote.services.providers.chain import ProviderChain, ProviderTier, call_with_timeout
from src.ratequote.services.providers.http import JsonHttpClient


def _client(handler, max_retries=1):
    return JsonHttpClient(
        "test",
        "https://provider.example/api/",
        timeout=2.0,
        max_retries=max_retries,
        backoff_seconds=0.0,
        transport=httpx.MockTransport(handler),
    )


def test_get_json_joins_path_and_sends_params():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        return httpx.Response(200, json={"ok": True})

    assert _client(handler).get_json("route", params={"q": "1"}) == {"ok": True}
    assert seen["url"] == "https://provider.example/api/route?q=1"


def test_post_json_sends_payload_and_headers():
    seen = {}

    def handler(request):
        seen["key"] = request.headers.get("x-api-key")
        seen["body"] = request.read()
        return httpx.Response(200, json={"routes": []})

    _client(handler).post_json(payload={"a": 1}, headers={"x-api-key": "k"})
    assert seen["key"] == "k"
    assert b'"a"' in seen["body"]


def test_server_error_is_retried_then_succeeds():
    calls = {"count": 0}

    def handler(request):
        calls["count"] += 1
        if calls["count"] == 1:
            return httpx.Response(503)
        return httpx.Response(200, json={"ok": True})

    assert _client(handler).get_json() == {"ok": True}
    assert calls["count"] == 2


def test_client_error_is_not_retried():
    calls = {"count": 0}

    def handler(request):
        calls["count"] += 1
        return httpx.Response(401)

    with pytest.raises(ProviderUnavailableError) as excinfo:
        _client(handler, max_retries=3).get_json()
    assert calls["count"] == 1
    assert excinfo.value.provider == "test"


def test_timeout_maps_to_provider_timeout():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(ProviderTimeoutError):
        _client(handler, max_retries=0).get_json()


def test_connection_error_maps_to_unavailable():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ProviderUnavailableError):
        _client(handler, max_retries=0).get_json()


def test_non_json_body_is_unavailable():
    def handler(request):
        return httpx.Response(200, text="<html>maintenance</html>")

    with pytest.raises(ProviderUnavailableError):
        _client(handler).get_json()


def test_call_with_timeout_abandons_slow_call():
    release = threading.Event()

    def slow():
        release.wait(5)
        return "late"

    started = time.monotonic()
    with pytest.raises(ProviderTimeoutError):
        call_with_timeout(slow, 0.05, provider="slow")
    assert time.monotonic() - started < 1.0
    release.set()


def test_chain_returns_first_success_and_records_failures():
    def failing():
        raise ProviderUnavailableError("down", provider="first")

    chain = ProviderChain(
        "test",
        [
            ProviderTier("first", "primary", failing),
            ProviderTier("second", "secondary", lambda: "ok"),
            ProviderTier("third", "fallback", lambda: "unused"),
        ],
    )

    result, tier = chain.run()
    assert result == "ok"
    assert tier.name == "second"
    assert len(chain.errors) == 1


def test_chain_advances_past_timeouts():
    release = threading.Event()
    chain = ProviderChain(
        "test",
        [
            ProviderTier("slow", "primary", lambda: release.wait(5), timeout=0.05),
            ProviderTier("fast", "fallback", lambda: "ok"),
        ],
    )

    result, tier = chain.run()
    release.set()
    assert (result, tier.tier) == ("ok", "fallback")
    assert isinstance(chain.errors[0], ProviderTimeoutError)


def test_exhausted_chain_raises_unavailable():
    def failing():
        raise ProviderTimeoutError("slow", provider="only")

    with pytest.raises(ProviderUnavailableError):
        ProviderChain("test", [ProviderTier("only", "primary", failing)]).run()


def test_chain_does_not_swallow_fatal_errors():
    def fatal():
        raise GeocodeError("nope", address="?")

    chain = ProviderChain(
        "test",
        [ProviderTier("geo", "primary", fatal), ProviderTier("next", "fallback", lambda: "unused")],
    )
    with pytest.raises(GeocodeError):
        chain.run()
