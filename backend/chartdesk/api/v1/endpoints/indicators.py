"""
Indicator API Endpoints

Endpoints for chart indicator calculations.
"""

import logging

from fastapi import APIRouter, HTTPException, Query, Request

from chartdesk.core.config import settings
from chartdesk.schemas.indicators import IndicatorRequest, ChartIndicators, RSIMethod
from chartdesk.services.base import InvalidParameterError
from chartdesk.services.indicators import get_indicator_service

logger = logging.getLogger(__name__)

router = APIRouter()


async def _calculate(request: IndicatorRequest) -> ChartIndicators:
    indicator_service = get_indicator_service()
    try:
        return await indicator_service.execute(request)
    except InvalidParameterError as e:
        raise HTTPException(status_code=422, detail=e.message)


@router.post("/chart", response_model=ChartIndicators)
async def calculate_chart_indicators(request: IndicatorRequest):
    """
    Calculate chart overlays for a caller-supplied bar sequence.

    Returns one series per enabled overlay. An empty series means the bars
    do not cover the indicator's warm-up yet.
    """
    return await _calculate(request)


@router.get("/{symbol}", response_model=ChartIndicators)
async def get_chart_indicators(
    request: Request,
    symbol: str,
    days: int = Query(default=settings.default_history_days, ge=1, le=3650),
):
    """
    Fetch history for a symbol and calculate the default chart overlays:
    SMA 20/50/200, RSI 14, MACD 12/26/9, Bollinger 20/2 and volume.
    """
    symbol = symbol.upper().strip()
    client = request.app.state.market_data

    bars = await client.get_historical_data(symbol, days)
    if not bars:
        raise HTTPException(status_code=404, detail=f"No historical data for {symbol}")

    return await _calculate(
        IndicatorRequest(
            bars=bars,
            symbol=symbol,
            rsi_method=RSIMethod(settings.rsi_method),
        )
    )
