"""
CONTRACT 1: Market Data

Input: symbol / lookback from the chart screen
Output: Bar history, MarketQuote, SymbolMatch

Shapes returned by the hosted market-data proxy, normalized for the
indicator engine. The proxy speaks camelCase; aliases accept it as-is.
"""

from typing import Optional
from pydantic import BaseModel, Field


# Price magnitude bound. Deltas and squared deviations of prices up to this
# size stay finite in float64.
MAX_PRICE = 1e150


# =============================================================================
# OHLCV
# =============================================================================


class Bar(BaseModel):
    """
    One OHLCV observation.

    Bars in a sequence are ordered by timestamp, oldest first.
    low <= open/close <= high is expected but not enforced.
    """

    timestamp: int = Field(..., description="Bar open time (epoch)")
    open: float = Field(..., ge=-MAX_PRICE, le=MAX_PRICE, allow_inf_nan=False)
    high: float = Field(..., ge=-MAX_PRICE, le=MAX_PRICE, allow_inf_nan=False)
    low: float = Field(..., ge=-MAX_PRICE, le=MAX_PRICE, allow_inf_nan=False)
    close: float = Field(..., ge=-MAX_PRICE, le=MAX_PRICE, allow_inf_nan=False)
    volume: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    date: Optional[str] = Field(default=None, description="ISO date from the proxy")


# =============================================================================
# QUOTES
# =============================================================================


class MarketQuote(BaseModel):
    """Latest quote for a symbol, as polled by the realtime service."""

    symbol: str
    price: float
    change: float = 0.0
    change_percent: float = Field(default=0.0, alias="changePercent")
    volume: float = 0.0
    open: float = 0.0
    high: float = 0.0
    low: float = 0.0
    previous_close: float = Field(default=0.0, alias="previousClose")
    timestamp: int = 0

    class Config:
        populate_by_name = True


class SymbolMatch(BaseModel):
    """Symbol search hit."""

    symbol: str
    description: str = ""
