"""
CONTRACT 2: Indicator Engine

Input: IndicatorRequest (ordered Bar sequence + parameters)
Output: ChartIndicators

This module defines the series the chart overlays.
Pure Python/NumPy - every series is recomputed from the full bar sequence.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from chartdesk.schemas.market import Bar


# =============================================================================
# ENUMS
# =============================================================================


class RSIMethod(str, Enum):
    WINDOWED = "windowed"  # simple average recomputed per window
    WILDER = "wilder"  # canonical Wilder smoothing


# =============================================================================
# SERIES POINTS
# =============================================================================


class SMAPoint(BaseModel):
    """Moving average sample (simple or exponential)."""

    timestamp: int
    value: float


class RSIPoint(BaseModel):
    """Relative strength index sample."""

    timestamp: int
    value: float = Field(..., ge=0, le=100)


class MACDPoint(BaseModel):
    """MACD sample. histogram is macd - signal."""

    timestamp: int
    macd: float
    signal: float
    histogram: float


class BollingerPoint(BaseModel):
    """Bollinger Bands sample. lower <= middle <= upper."""

    timestamp: int
    upper: float
    middle: float
    lower: float


class VolumePoint(BaseModel):
    """Volume bar for the chart's volume pane."""

    timestamp: int
    volume: float


# =============================================================================
# INPUT: IndicatorRequest
# =============================================================================


class IndicatorRequest(BaseModel):
    """
    Request for chart indicator calculation.
    Sent by: API / chart screen
    Received by: Indicator Service

    Toggles mirror the chart's overlay buttons; defaults match the chart.
    """

    bars: list[Bar] = Field(..., description="Ordered OHLCV bars, oldest first")
    symbol: Optional[str] = None

    sma_periods: list[int] = Field(default=[20, 50, 200])
    calculate_rsi: bool = True
    rsi_period: int = 14
    rsi_method: RSIMethod = RSIMethod.WINDOWED
    calculate_macd: bool = True
    macd_fast: int = 12
    macd_slow: int = 26
    macd_signal: int = 9
    calculate_bollinger: bool = True
    bollinger_period: int = 20
    bollinger_std_dev: float = 2.0
    calculate_volume: bool = True


# =============================================================================
# OUTPUT: ChartIndicators
# =============================================================================


class ChartIndicators(BaseModel):
    """
    All series requested for one bar sequence.
    Returned by: Indicator Service
    Consumed by: chart rendering

    Empty lists mean "not enough history yet", not failure.
    """

    symbol: Optional[str] = None
    bar_count: int = Field(..., ge=0)
    sma: dict[int, list[SMAPoint]] = Field(
        default_factory=dict, description="Keyed by period"
    )
    rsi: Optional[list[RSIPoint]] = None
    macd: Optional[list[MACDPoint]] = None
    bollinger: Optional[list[BollingerPoint]] = None
    volume: Optional[list[VolumePoint]] = None

    class Config:
        json_schema_extra = {
            "example": {
                "symbol": "AAPL",
                "bar_count": 180,
                "sma": {"20": [{"timestamp": 1717200000, "value": 189.42}]},
                "rsi": [{"timestamp": 1717200000, "value": 61.8}],
                "macd": [
                    {
                        "timestamp": 1717200000,
                        "macd": 1.25,
                        "signal": 0.98,
                        "histogram": 0.27,
                    }
                ],
                "bollinger": [
                    {
                        "timestamp": 1717200000,
                        "upper": 195.1,
                        "middle": 189.42,
                        "lower": 183.74,
                    }
                ],
                "volume": [{"timestamp": 1717200000, "volume": 51230000}],
            }
        }
