"""FastAPI application entry point."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.errors import rate_engine_error_handler
from .api.routes import distance, fuel, health, market, quotes, tolls
from .config import ProviderConfig, settings
from .errors import RateEngineError

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        root_path="",
    )
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.add_exception_handler(RateEngineError, rate_engine_error_handler)

    # Root endpoint for diagnostics
    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(quotes.router, prefix=settings.api_prefix)
    app.include_router(distance.router, prefix=settings.api_prefix)
    app.include_router(tolls.router, prefix=settings.api_prefix)
    app.include_router(fuel.router, prefix=settings.api_prefix)
    app.include_router(market.router, prefix=settings.api_prefix)

    enabled = [name for name, on in ProviderConfig.from_settings(settings).as_dict().items() if on]
    logger.info(f"Providers enabled: {enabled or 'none, running on fallbacks'}")
    return app


app = create_app()
