"""Error taxonomy for the quote engine.

Provider errors are non-fatal: components catch them at their boundary and
degrade to the next tier, recording the degradation in a ``source`` or
``confidence`` tag. The remaining errors are fatal and reach the caller with
the stage that failed.
"""

from __future__ import annotations


class RateEngineError(Exception):
    """Base class for every error raised by the engine."""

    stage: str = "engine"

    def __init__(self, message: str, *, stage: str | None = None) -> None:
        super().__init__(message)
        if stage is not None:
            self.stage = stage

    @property
    def message(self) -> str:
        return str(self)


class ProviderError(RateEngineError):
    """An external provider could not produce a result."""

    stage = "provider"

    def __init__(self, message: str, *, provider: str, stage: str | None = None) -> None:
        super().__init__(message, stage=stage)
        self.provider = provider


class ProviderTimeoutError(ProviderError):
    """The provider did not answer within its tier timeout."""


class ProviderUnavailableError(ProviderError):
    """The provider is unreachable, unconfigured, or answered with unusable data."""


class GeocodeError(RateEngineError):
    """An address could not be resolved to coordinates."""

    stage = "geocoding"

    def __init__(self, message: str, *, address: str) -> None:
        super().__init__(message)
        self.address = address


class RouteUnavailableError(RateEngineError):
    """No routing tier produced a route."""

    stage = "routing"


class UnknownStateError(RateEngineError):
    """A state code has no region mapping; only market intelligence degrades."""

    stage = "market"

    def __init__(self, state: str) -> None:
        super().__init__(f"Unknown state or region code '{state}'.")
        self.state = state


class ValidationError(RateEngineError):
    """Caller input is malformed."""

    stage = "validation"

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class QuoteCancelledError(RateEngineError):
    """The caller aborted the quote request while providers were in flight."""

    stage = "cancelled"


NON_FATAL_PROVIDER_ERRORS: tuple[type[ProviderError], ...] = (
    ProviderTimeoutError,
    ProviderUnavailableError,
)
