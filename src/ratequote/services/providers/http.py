"""Shared HTTP client for JSON provider APIs."""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping, Optional

import httpx

from ...config import settings
from ...errors import ProviderTimeoutError, ProviderUnavailableError

logger = logging.getLogger(__name__)

# Client errors that will not change on retry.
_NON_RETRYABLE_STATUS = frozenset({400, 401, 403, 404, 405, 410, 414, 422})


class JsonHttpClient:
    """Small JSON-over-HTTP client with retry and backoff.

    Every failure leaves this class as a ``ProviderTimeoutError`` or a
    ``ProviderUnavailableError`` tagged with the provider name, so callers
    only need to handle the provider taxonomy.
    """

    def __init__(
        self,
        provider: str,
        base_url: str,
        timeout: float,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise ValueError(f"{provider} base URL is not configured.")
        self.provider = provider
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries if max_retries is not None else settings.provider_max_retries
        self.backoff_seconds = (
            backoff_seconds if backoff_seconds is not None else settings.provider_backoff_seconds
        )
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        # A client per call; provider calls run on worker threads.
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)),
            transport=self._transport,
        )

    def url(self, path: str = "") -> str:
        if not path:
            return self.base_url
        return f"{self.base_url}/{path.lstrip('/')}"

    def get_json(
        self,
        path: str = "",
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        return self._request("GET", self.url(path), params=params, headers=headers)

    def post_json(
        self,
        path: str = "",
        payload: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        return self._request("POST", self.url(path), params=params, headers=headers, json=payload)

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.request(method, url, **kwargs)
                    response.raise_for_status()
                    return response.json()
                except httpx.HTTPStatusError as exc:
                    status_code = exc.response.status_code
                    attempt += 1
                    if status_code in _NON_RETRYABLE_STATUS or attempt > self.max_retries:
                        raise ProviderUnavailableError(
                            f"{self.provider} returned HTTP {status_code}.", provider=self.provider
                        ) from exc
                    time.sleep(self.backoff_seconds * attempt)
                except httpx.TimeoutException as exc:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"{self.provider} request timed out after {attempt} attempts: {exc}")
                        raise ProviderTimeoutError(
                            f"{self.provider} request timed out.", provider=self.provider
                        ) from exc
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(
                        f"{self.provider} timeout, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})"
                    )
                    time.sleep(wait_time)
                except (httpx.TransportError, OSError) as exc:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ProviderUnavailableError(
                            f"Failed to connect to {self.provider} at {self.base_url}: {exc}",
                            provider=self.provider,
                        ) from exc
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(
                        f"{self.provider} network error, retrying in {wait_time:.1f}s "
                        f"(attempt {attempt}/{self.max_retries}): {exc}"
                    )
                    time.sleep(wait_time)
                except ValueError as exc:
                    # Body was not JSON; a retry will not fix it.
                    raise ProviderUnavailableError(
                        f"{self.provider} returned a malformed response.", provider=self.provider
                    ) from exc
        finally:
            client.close()


# Raised while reading a decoded JSON body whose layout is not the documented one.
MALFORMED_RESPONSE_ERRORS: tuple[type[Exception], ...] = (
    KeyError,
    IndexError,
    TypeError,
    ValueError,
    AttributeError,
)
