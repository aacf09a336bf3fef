"""Map engine errors onto HTTP responses."""

from __future__ import annotations

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from ..errors import GeocodeError, RateEngineError, RouteUnavailableError, ValidationError

logger = logging.getLogger(__name__)


def status_for(exc: RateEngineError) -> int:
    if isinstance(exc, (ValidationError, GeocodeError)):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(exc, RouteUnavailableError):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def rate_engine_error_handler(request: Request, exc: RateEngineError) -> JSONResponse:
    code = status_for(exc)
    if code >= 500:
        logger.error(f"{request.method} {request.url.path} failed at {exc.stage}: {exc}")
    return JSONResponse(status_code=code, content={"detail": str(exc), "stage": exc.stage})
