"""TollGuru client for plaza-level toll costs."""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

import httpx

from ...config import Settings, settings
from ...data.fuel import DEFAULT_DIESEL_PRICE
from ...data.tolls import TOLLGURU_VEHICLE_CLASSES
from ...errors import ProviderUnavailableError
from ...models.domain import TollBreakdown, TollPlaza
from ..providers.http import MALFORMED_RESPONSE_ERRORS, JsonHttpClient

PROVIDER = "tollguru"
# Plaza charges TollGuru could not tie to a state.
UNATTRIBUTED = "unattributed"

logger = logging.getLogger(__name__)


def _cents(value: Any) -> int:
    try:
        return int(round(float(value or 0) * 100))
    except (TypeError, ValueError):
        return 0


def parse_tollguru_response(data: dict) -> Optional[TollBreakdown]:
    """Convert a TollGuru route response into a breakdown.

    Returns None when the response carries no route. Amounts are summed in
    cents and the route total is the sum of the per-state amounts; any part
    of the provider's route total not explained by plazas is kept under
    ``unattributed``.
    """
    routes = data.get("routes") or []
    if not routes:
        return None

    route = routes[0]
    costs = route.get("costs") or {}
    route_tag = _cents(costs.get("tag") or costs.get("cash"))
    route_cash = _cents(costs.get("cash"))

    plazas: list[TollPlaza] = []
    by_state: dict[str, int] = {}
    plaza_cash = 0
    for toll in route.get("tolls") or []:
        transponder = _cents(toll.get("tagCost") or toll.get("cashCost"))
        cash = _cents(toll.get("cashCost") or toll.get("tagCost"))
        state = (toll.get("state") or UNATTRIBUTED).strip() or UNATTRIBUTED
        plazas.append(
            TollPlaza(
                name=toll.get("name") or "Toll Plaza",
                state=state,
                cash_cost=cash / 100,
                transponder_cost=transponder / 100,
                lat=toll.get("lat"),
                lng=toll.get("lng"),
            )
        )
        by_state[state] = by_state.get(state, 0) + transponder
        plaza_cash += cash

    residual = route_tag - sum(by_state.values())
    if residual > 0:
        by_state[UNATTRIBUTED] = by_state.get(UNATTRIBUTED, 0) + residual
    total = sum(by_state.values())

    return TollBreakdown(
        total_tolls=total / 100,
        tolls_by_state={state: cents / 100 for state, cents in by_state.items()},
        cash_tolls=(route_cash or plaza_cash or total) / 100,
        transponder_tolls=total / 100,
        toll_count=len(plazas),
        toll_plazas=tuple(plazas),
        source="api",
    )


class TollGuruClient:
    def __init__(
        self,
        api_key: str | None = None,
        config: Settings = settings,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or config.toll_api_key
        if not self.api_key:
            raise ValueError("TollGuru API key is not configured.")
        self._http = JsonHttpClient(
            PROVIDER,
            config.toll_base_url,
            timeout=config.toll_timeout_seconds,
            max_retries=config.provider_max_retries,
            backoff_seconds=config.provider_backoff_seconds,
            transport=transport,
        )

    def route_tolls(
        self,
        origin: tuple[float, float],
        destination: tuple[float, float],
        axle_class: str,
        fuel_price: float | None = None,
    ) -> Optional[TollBreakdown]:
        payload = {
            "from": {"lat": origin[0], "lng": origin[1]},
            "to": {"lat": destination[0], "lng": destination[1]},
            "vehicleType": TOLLGURU_VEHICLE_CLASSES.get(axle_class, "5AxlesTruck"),
            "departure_time": int(time.time()),
            "fuelPrice": fuel_price or DEFAULT_DIESEL_PRICE,
            "fuelEfficiency": {"city": 6.5, "highway": 8.0},
        }
        data = self._http.post_json(payload=payload, headers={"x-api-key": self.api_key})
        try:
            breakdown = parse_tollguru_response(data)
        except MALFORMED_RESPONSE_ERRORS as exc:
            raise ProviderUnavailableError(f"TollGuru response is malformed: {exc!r}", provider=PROVIDER) from exc
        if breakdown is None:
            logger.info("TollGuru returned no route for the requested lane")
        return breakdown
