"""
Indicator Engine Service

CONTRACT:
    Input:  IndicatorRequest (ordered OHLCV bars + overlay parameters)
    Output: ChartIndicators

RESPONSIBILITIES:
    - Moving averages (SMA, EMA)
    - RSI (windowed, or Wilder on request)
    - MACD with timestamp-aligned signal line
    - Bollinger Bands
    - Volume bars

PURE PYTHON - No I/O.
Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from chartdesk.services.indicators.engine import (
    calculate_sma,
    calculate_ema,
    calculate_rsi,
    calculate_macd,
    calculate_bollinger_bands,
    calculate_volume,
)
from chartdesk.services.indicators.interface import IndicatorServiceInterface
from chartdesk.services.indicators.service import IndicatorService, get_indicator_service

__all__ = [
    "calculate_sma",
    "calculate_ema",
    "calculate_rsi",
    "calculate_macd",
    "calculate_bollinger_bands",
    "calculate_volume",
    "IndicatorServiceInterface",
    "IndicatorService",
    "get_indicator_service",
]
