"""Timeout-bounded provider calls and ordered fallback chains."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Callable, Generic, Optional, Sequence, TypeVar

from ...errors import NON_FATAL_PROVIDER_ERRORS, ProviderError, ProviderTimeoutError, ProviderUnavailableError

T = TypeVar("T")

DEFAULT_MAX_PROVIDER_WORKERS = 32

logger = logging.getLogger(__name__)

# Shared by every request. Tasks submitted here must not submit to it again.
_provider_pool = ThreadPoolExecutor(
    max_workers=DEFAULT_MAX_PROVIDER_WORKERS,
    thread_name_prefix="provider",
)


def submit(fn: Callable[..., T], *args, **kwargs) -> Future:
    return _provider_pool.submit(fn, *args, **kwargs)


def wait_result(future: Future, timeout: Optional[float], *, provider: str) -> T:
    """Wait for ``future`` up to ``timeout`` seconds.

    A future that runs out of time is abandoned: it is cancelled if it has not
    started and otherwise left to finish on its worker while the caller moves on.
    """
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError as exc:
        future.cancel()
        raise ProviderTimeoutError(
            f"{provider} did not answer within {timeout:.1f}s.", provider=provider
        ) from exc


def call_with_timeout(fn: Callable[[], T], timeout: Optional[float], *, provider: str) -> T:
    """Run ``fn`` on the provider pool; ``timeout=None`` runs it inline."""
    if timeout is None:
        return fn()
    return wait_result(submit(fn), timeout, provider=provider)


@dataclass(frozen=True, slots=True)
class ProviderTier(Generic[T]):
    """One provider attempt in a chain."""

    name: str
    tier: str
    call: Callable[[], T]
    timeout: Optional[float] = None


class ProviderChain(Generic[T]):
    """Try tiers in order; the first success wins.

    Only non-fatal provider errors advance the chain. Anything else, such as a
    geocoding failure, propagates to the caller unchanged.
    """

    def __init__(self, label: str, tiers: Sequence[ProviderTier[T]]) -> None:
        self.label = label
        self.tiers = list(tiers)
        self.errors: list[ProviderError] = []

    def run(self) -> tuple[T, ProviderTier[T]]:
        for tier in self.tiers:
            try:
                result = call_with_timeout(tier.call, tier.timeout, provider=tier.name)
            except NON_FATAL_PROVIDER_ERRORS as exc:
                logger.warning(f"{self.label}: {tier.name} ({tier.tier}) failed, trying next provider: {exc}")
                self.errors.append(exc)
                continue
            if self.errors:
                logger.info(f"{self.label}: served by {tier.name} ({tier.tier}) after {len(self.errors)} failure(s)")
            return result, tier
        names = ", ".join(tier.name for tier in self.tiers) or "none configured"
        raise ProviderUnavailableError(f"All {self.label} providers failed ({names}).", provider=self.label)
