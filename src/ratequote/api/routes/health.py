"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import ProviderConfig, settings
from ...services.routing.osrm_client import check_health as osrm_health_check

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/providers", status_code=status.HTTP_200_OK)
def health_providers() -> dict:
    """Which provider tiers are configured; OSRM is also probed when set."""
    providers = ProviderConfig.from_settings(settings)
    report: dict = {"providers": providers.as_dict(), "fallbacks_available": True}
    if providers.osrm:
        report["osrm_healthy"] = osrm_health_check()
    return report
