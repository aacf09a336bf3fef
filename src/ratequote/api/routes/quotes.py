"""Quote endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...errors import RateEngineError
from ...schemas.quotes import QuoteRequestModel, QuoteResponse
from ...services.quotes.engine import get_quote_engine

router = APIRouter(prefix="/quotes", tags=["quotes"])

logger = logging.getLogger(__name__)


@router.post("/calculate", response_model=QuoteResponse, status_code=status.HTTP_200_OK)
def calculate(payload: QuoteRequestModel) -> QuoteResponse:
    try:
        quote = get_quote_engine().calculate_rate(payload.to_domain())
    except RateEngineError:
        raise
    except Exception as exc:
        logger.exception(f"Error calculating quote: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to calculate quote: {str(exc)}",
        ) from exc
    return QuoteResponse.model_validate(quote)
