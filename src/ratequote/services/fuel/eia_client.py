"""EIA open data client for weekly retail diesel prices."""

from __future__ import annotations

import logging

import httpx

from ...config import Settings, settings
from ...data.fuel import PADD_SERIES
from ...errors import ProviderUnavailableError
from ..providers.http import MALFORMED_RESPONSE_ERRORS, JsonHttpClient

PROVIDER = "eia"

logger = logging.getLogger(__name__)


class EIAClient:
    def __init__(
        self,
        api_key: str | None = None,
        config: Settings = settings,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or config.eia_api_key
        if not self.api_key:
            raise ValueError("EIA API key is not configured.")
        self._http = JsonHttpClient(
            PROVIDER,
            config.eia_base_url,
            timeout=config.fuel_timeout_seconds,
            max_retries=config.provider_max_retries,
            backoff_seconds=config.provider_backoff_seconds,
            transport=transport,
        )

    def latest_price(self, padd: str) -> float:
        """Most recent weekly diesel price ($/gal) for a PADD region."""
        series = PADD_SERIES.get(padd, PADD_SERIES["US"])
        data = self._http.get_json(
            params={
                "api_key": self.api_key,
                "facets[series][]": series,
                "sort[0][column]": "period",
                "sort[0][direction]": "desc",
                "length": 1,
                "data[]": "value",
            }
        )
        try:
            rows = (data.get("response") or {}).get("data") or []
            if not rows:
                raise ProviderUnavailableError(f"EIA returned no rows for series {series}.", provider=PROVIDER)
            price = float(rows[0]["value"])
        except MALFORMED_RESPONSE_ERRORS as exc:
            raise ProviderUnavailableError(f"EIA returned a malformed price for {series}.", provider=PROVIDER) from exc
        if price <= 0:
            raise ProviderUnavailableError(f"EIA returned a non-positive price for {series}.", provider=PROVIDER)
        logger.debug(f"EIA {padd} diesel: ${price:.3f}")
        return round(price, 3)
