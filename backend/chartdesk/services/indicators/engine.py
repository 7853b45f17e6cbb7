"""
Indicator Engine

Turns an ordered bar sequence into the point series the chart overlays.

Rules shared by every function:
- Output timestamps are a strictly increasing subset of the input's.
- Not enough history is an empty list, never an exception.
- Structurally invalid parameters raise InvalidParameterError before any
  computation.
- Inputs are never mutated.
"""

import math
from typing import Sequence, Union

import numpy as np

from chartdesk.schemas.market import Bar
from chartdesk.schemas.indicators import (
    RSIMethod,
    SMAPoint,
    RSIPoint,
    MACDPoint,
    BollingerPoint,
    VolumePoint,
)
from chartdesk.services.base import InvalidParameterError
from chartdesk.services.indicators.calculations import (
    sma,
    ema,
    rsi_windowed,
    rsi_wilder,
    bollinger_bands,
)


# =============================================================================
# PARAMETER VALIDATION
# =============================================================================


def _validate_period(parameter: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidParameterError(parameter, value, "period must be an integer")
    if value <= 0:
        raise InvalidParameterError(parameter, value, "period must be positive")


def _validate_multiplier(parameter: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float, np.number)):
        raise InvalidParameterError(parameter, value, "multiplier must be a number")
    if not math.isfinite(value) or value <= 0:
        raise InvalidParameterError(
            parameter, value, "multiplier must be positive and finite"
        )


# =============================================================================
# HELPERS
# =============================================================================


def _closes(bars: Sequence[Bar]) -> np.ndarray:
    """Close prices as a float array (copy; bars are left untouched)."""
    return np.array([bar.close for bar in bars], dtype=float)


def _index_by_timestamp(points: Sequence) -> dict:
    """Lookup by timestamp. The first point wins on duplicate timestamps."""
    index = {}
    for point in points:
        index.setdefault(point.timestamp, point)
    return index


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def calculate_sma(bars: Sequence[Bar], period: int) -> list[SMAPoint]:
    """Simple moving average of closes; n - period + 1 points."""
    _validate_period("period", period)
    if not bars or len(bars) < period:
        return []

    values = sma(_closes(bars), period).tolist()
    return [
        SMAPoint(timestamp=bars[i].timestamp, value=values[i])
        for i in range(period - 1, len(bars))
    ]


def calculate_ema(bars: Sequence[Bar], period: int) -> list[SMAPoint]:
    """
    Exponential moving average of closes.

    The first point is the simple mean of the first `period` closes, at
    bars[period - 1].timestamp; each later point applies k = 2 / (period + 1).
    """
    _validate_period("period", period)
    if not bars or len(bars) < period:
        return []

    values = ema(_closes(bars), period).tolist()
    return [
        SMAPoint(timestamp=bars[i].timestamp, value=values[i])
        for i in range(period - 1, len(bars))
    ]


# =============================================================================
# MOMENTUM
# =============================================================================


def calculate_rsi(
    bars: Sequence[Bar],
    period: int = 14,
    method: Union[RSIMethod, str] = RSIMethod.WINDOWED,
) -> list[RSIPoint]:
    """
    Relative Strength Index.

    WINDOWED (default) reproduces the values the chart has always shown:
    simple gain/loss averages recomputed per window, first point at
    bars[period + 1]. WILDER is the textbook smoothed RSI, first point at
    bars[period].
    """
    _validate_period("period", period)
    try:
        method = RSIMethod(method)
    except ValueError:
        raise InvalidParameterError("method", method, "unknown RSI method") from None

    if not bars:
        return []

    closes = _closes(bars)
    if method == RSIMethod.WILDER:
        values = rsi_wilder(closes, period)
    else:
        values = rsi_windowed(closes, period)

    return [
        RSIPoint(timestamp=bars[i].timestamp, value=value)
        for i, value in enumerate(values.tolist())
        if not math.isnan(value)
    ]


def calculate_macd(
    bars: Sequence[Bar],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> list[MACDPoint]:
    """
    MACD line, signal line and histogram.

    The two EMAs warm up over different lengths, so the MACD line is built
    by joining them on timestamp, and the signal (an EMA of the MACD line)
    is joined back the same way.
    """
    _validate_period("fast_period", fast_period)
    _validate_period("slow_period", slow_period)
    _validate_period("signal_period", signal_period)
    if fast_period >= slow_period:
        raise InvalidParameterError(
            "fast_period", fast_period, f"must be less than slow_period={slow_period}"
        )

    if not bars or len(bars) < slow_period:
        return []

    fast_by_ts = _index_by_timestamp(calculate_ema(bars, fast_period))
    macd_line = [
        SMAPoint(
            timestamp=slow.timestamp,
            value=fast_by_ts[slow.timestamp].value - slow.value,
        )
        for slow in calculate_ema(bars, slow_period)
        if slow.timestamp in fast_by_ts
    ]
    if len(macd_line) < signal_period:
        return []

    signal_values = ema(
        np.array([point.value for point in macd_line], dtype=float), signal_period
    ).tolist()
    signal_line = [
        SMAPoint(timestamp=macd_line[i].timestamp, value=signal_values[i])
        for i in range(signal_period - 1, len(macd_line))
    ]
    macd_by_ts = _index_by_timestamp(macd_line)

    result = []
    for signal in signal_line:
        macd = macd_by_ts[signal.timestamp].value
        result.append(
            MACDPoint(
                timestamp=signal.timestamp,
                macd=macd,
                signal=signal.value,
                histogram=macd - signal.value,
            )
        )
    return result


# =============================================================================
# VOLATILITY
# =============================================================================


def calculate_bollinger_bands(
    bars: Sequence[Bar], period: int = 20, std_dev: float = 2
) -> list[BollingerPoint]:
    """Bollinger Bands from the population standard deviation of each window."""
    _validate_period("period", period)
    _validate_multiplier("std_dev", std_dev)
    if not bars or len(bars) < period:
        return []

    upper, middle, lower = bollinger_bands(_closes(bars), period, float(std_dev))
    upper, middle, lower = upper.tolist(), middle.tolist(), lower.tolist()
    return [
        BollingerPoint(
            timestamp=bars[i].timestamp,
            upper=upper[i],
            middle=middle[i],
            lower=lower[i],
        )
        for i in range(period - 1, len(bars))
    ]


# =============================================================================
# VOLUME
# =============================================================================


def calculate_volume(bars: Sequence[Bar]) -> list[VolumePoint]:
    """Volume per bar, no warm-up."""
    return [VolumePoint(timestamp=bar.timestamp, volume=bar.volume) for bar in bars]
