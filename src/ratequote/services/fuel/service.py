"""Diesel price lookup: cache, then EIA, then a static regional table."""

from __future__ import annotations

import dataclasses
import logging
from datetime import datetime, timezone
from typing import Mapping, Optional, Sequence

from ...config import ProviderConfig, Settings, settings
from ...data.fuel import FALLBACK_PRICES, FALLBACK_PRICES_AS_OF, PADD_SERIES, padd_for_state, states_in_padd
from ...errors import NON_FATAL_PROVIDER_ERRORS
from ...models.domain import FuelPriceResult, FuelUpdateSummary
from ..cache import TTLCache
from ..providers.chain import call_with_timeout
from .eia_client import EIAClient

NATIONAL = "US"
# Higher rank is less trustworthy; a blended price reports its weakest input.
SOURCE_RANK = {"api": 0, "cache": 1, "fallback": 2}

logger = logging.getLogger(__name__)


def fuel_cache_for(config: Settings = settings) -> TTLCache[FuelPriceResult]:
    return TTLCache(ttl_seconds=config.fuel_cache_ttl_hours * 3600)


class FuelPricingService:
    """Per-state diesel prices.

    Never raises for provider trouble: every lookup ends in a price, with
    ``source`` recording whether it came from the API, the cache or the
    static fallback table.
    """

    def __init__(
        self,
        config: Settings = settings,
        cache: TTLCache[FuelPriceResult] | None = None,
        client: EIAClient | None = None,
    ) -> None:
        self.timeout = config.fuel_timeout_seconds
        self.cache = cache if cache is not None else fuel_cache_for(config)
        if client is None and ProviderConfig.from_settings(config).fuel_pricing:
            client = EIAClient(config=config)
        self.client = client

    def _fetch(self, padd: str) -> float:
        return call_with_timeout(lambda: self.client.latest_price(padd), self.timeout, provider="eia")

    def _fallback(self, padd: str) -> FuelPriceResult:
        return FuelPriceResult(
            price_per_gallon=FALLBACK_PRICES.get(padd, FALLBACK_PRICES[NATIONAL]),
            region=padd,
            last_updated=FALLBACK_PRICES_AS_OF,
            source="fallback",
        )

    def _lookup(
        self, state: str, use_api: bool = True, fetched: Optional[dict[str, FuelPriceResult]] = None
    ) -> tuple[FuelPriceResult, bool]:
        """Price for one state and whether an API call failed on the way."""
        code = (state or NATIONAL).strip().upper() or NATIONAL
        cached = self.cache.get(code)
        if cached is not None:
            return dataclasses.replace(cached, source="cache"), False

        padd = padd_for_state(code)
        if fetched is not None and padd in fetched:
            self.cache.set(code, fetched[padd])
            return fetched[padd], False

        if use_api and self.client is not None:
            try:
                price = self._fetch(padd)
            except NON_FATAL_PROVIDER_ERRORS as exc:
                logger.warning(f"EIA lookup for {code} ({padd}) failed, using fallback table: {exc}")
                return self._fallback(padd), True
            result = FuelPriceResult(
                price_per_gallon=price,
                region=padd,
                last_updated=datetime.now(timezone.utc),
                source="api",
            )
            self.cache.set(code, result)
            if fetched is not None:
                fetched[padd] = result
            return result, False

        return self._fallback(padd), False

    def get_fuel_price_for_state(self, state: str) -> FuelPriceResult:
        result, _ = self._lookup(state)
        return result

    def get_national_average_fuel_price(self) -> FuelPriceResult:
        return self.get_fuel_price_for_state(NATIONAL)

    def get_route_fuel_price(
        self,
        states_crossed: Sequence[str],
        miles_by_state: Optional[Mapping[str, float]] = None,
    ) -> FuelPriceResult:
        """Mileage-weighted diesel price along a route.

        Without a usable mileage split every state weighs the same, which
        makes the result the plain mean of the state prices.
        """
        states = list(dict.fromkeys(code.strip().upper() for code in states_crossed if code and code.strip()))
        if not states:
            return self.get_national_average_fuel_price()

        weights = [float((miles_by_state or {}).get(code, 0.0)) for code in states]
        if sum(weights) <= 0:
            weights = [1.0] * len(states)

        use_api = True
        fetched: dict[str, FuelPriceResult] = {}
        results: list[FuelPriceResult] = []
        for code in states:
            result, api_failed = self._lookup(code, use_api=use_api, fetched=fetched)
            if api_failed:
                use_api = False
            results.append(result)

        total_weight = sum(weights)
        price = sum(weight * result.price_per_gallon for weight, result in zip(weights, results)) / total_weight
        source = max((result.source for result in results), key=SOURCE_RANK.__getitem__)
        return FuelPriceResult(
            price_per_gallon=price,
            region=", ".join(states),
            last_updated=min(result.last_updated for result in results),
            source=source,
        )

    def update_all_fuel_prices(self) -> FuelUpdateSummary:
        """Refresh every PADD series into the cache.

        One region failing never stops the batch.
        """
        if self.client is None:
            logger.warning("EIA API key not configured, skipping fuel price update")
            return FuelUpdateSummary(updated=0, failed=0)

        updated = 0
        failed = 0
        for padd in PADD_SERIES:
            try:
                price = self._fetch(padd)
            except NON_FATAL_PROVIDER_ERRORS as exc:
                logger.warning(f"Fuel price refresh failed for {padd}: {exc}")
                failed += 1
                continue
            result = FuelPriceResult(
                price_per_gallon=price, region=padd, last_updated=datetime.now(timezone.utc), source="api"
            )
            for state in states_in_padd(padd):
                self.cache.set(state, result)
            updated += 1

        logger.info(f"Fuel prices updated: {updated} succeeded, {failed} failed")
        return FuelUpdateSummary(updated=updated, failed=failed)
