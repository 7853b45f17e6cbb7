"""
ChartDesk Schema Contracts

This module defines all JSON contracts between system components.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from chartdesk.schemas.market import (
    Bar,
    MarketQuote,
    SymbolMatch,
)
from chartdesk.schemas.indicators import (
    RSIMethod,
    SMAPoint,
    RSIPoint,
    MACDPoint,
    BollingerPoint,
    VolumePoint,
    IndicatorRequest,
    ChartIndicators,
)

__all__ = [
    # Market
    "Bar",
    "MarketQuote",
    "SymbolMatch",
    # Indicators
    "RSIMethod",
    "SMAPoint",
    "RSIPoint",
    "MACDPoint",
    "BollingerPoint",
    "VolumePoint",
    "IndicatorRequest",
    "ChartIndicators",
]
