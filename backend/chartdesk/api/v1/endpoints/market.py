"""
Market Data API Endpoints

Quotes, history and symbol search, relayed from the market-data proxy.
"""

import logging

from fastapi import APIRouter, HTTPException, Query, Request

from chartdesk.schemas.market import Bar, MarketQuote, SymbolMatch

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/search", response_model=list[SymbolMatch])
async def search_symbols(request: Request, q: str = Query(..., min_length=1)):
    """Search symbols by ticker or company name."""
    return await request.app.state.market_data.search_symbols(q)


@router.get("/{symbol}/quote", response_model=MarketQuote)
async def get_quote(request: Request, symbol: str):
    """
    Latest quote for a symbol.

    Served from the realtime poller's cache when the symbol is being
    polled, otherwise fetched directly.
    """
    symbol = symbol.upper().strip()
    quote = await request.app.state.realtime.get_latest_quote(symbol)
    if quote is None:
        raise HTTPException(status_code=404, detail=f"No quote data for {symbol}")
    return quote


@router.get("/{symbol}/history", response_model=list[Bar])
async def get_history(
    request: Request,
    symbol: str,
    days: int = Query(default=30, ge=1, le=3650),
):
    """Daily bars for the last `days` days, oldest first."""
    symbol = symbol.upper().strip()
    return await request.app.state.market_data.get_historical_data(symbol, days)
