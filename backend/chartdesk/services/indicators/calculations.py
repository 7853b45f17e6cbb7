"""
Technical Indicator Calculations

Pure Python/NumPy implementations of the chart indicators.
All math is deterministic.

Every function takes a price array and returns arrays of the same length,
NaN where the indicator has no value yet (warm-up). Trimming the warm-up and
attaching timestamps happens in the engine.
"""

import numpy as np

# Substituted for a zero average loss in the windowed RSI so RS stays finite.
RSI_LOSS_EPSILON = 0.0001


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data: np.ndarray, period: int) -> np.ndarray:
    """Simple Moving Average."""
    if len(data) < period:
        return np.full(len(data), np.nan)

    result = np.full(len(data), np.nan)
    for i in range(period - 1, len(data)):
        result[i] = np.mean(data[i - period + 1 : i + 1])
    return result


def ema(data: np.ndarray, period: int) -> np.ndarray:
    """Exponential Moving Average, seeded with the SMA of the first window."""
    if len(data) < period:
        return np.full(len(data), np.nan)

    result = np.full(len(data), np.nan)
    multiplier = 2 / (period + 1)

    # Start with SMA
    result[period - 1] = np.mean(data[:period])

    for i in range(period, len(data)):
        result[i] = (data[i] - result[i - 1]) * multiplier + result[i - 1]

    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def _split_deltas(closes: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Day-over-day changes split into gains and (positive) losses."""
    deltas = np.diff(closes)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)
    return gains, losses


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def rsi_windowed(closes: np.ndarray, period: int = 14) -> np.ndarray:
    """
    Relative Strength Index over independent windows.

    For each delta index i >= period, averages the `period` deltas before it
    (i - period .. i - 1) and writes the value at close index i + 1. There
    is no Wilder smoothing: every window is recomputed from scratch. A zero
    average loss becomes RSI_LOSS_EPSILON, so all-gain windows land just
    under 100 and flat windows at 0.
    """
    result = np.full(len(closes), np.nan)
    if len(closes) < period + 2:
        return result

    gains, losses = _split_deltas(closes)

    for i in range(period, len(gains)):
        avg_gain = np.sum(gains[i - period : i]) / period
        avg_loss = np.sum(losses[i - period : i]) / period
        if avg_loss == 0:
            avg_loss = RSI_LOSS_EPSILON
        result[i + 1] = _rsi_value(avg_gain, avg_loss)

    return result


def rsi_wilder(closes: np.ndarray, period: int = 14) -> np.ndarray:
    """Relative Strength Index with Wilder smoothing."""
    result = np.full(len(closes), np.nan)
    if len(closes) < period + 1:
        return result

    gains, losses = _split_deltas(closes)

    # First average
    avg_gain = np.mean(gains[:period])
    avg_loss = np.mean(losses[:period])
    result[period] = 100.0 if avg_loss == 0 else _rsi_value(avg_gain, avg_loss)

    # Subsequent RSI values using smoothed averages
    for i in range(period, len(gains)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        result[i + 1] = 100.0 if avg_loss == 0 else _rsi_value(avg_gain, avg_loss)

    return result


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


def rolling_std(data: np.ndarray, period: int) -> np.ndarray:
    """Population standard deviation over a trailing window."""
    result = np.full(len(data), np.nan)
    for i in range(period - 1, len(data)):
        result[i] = np.std(data[i - period + 1 : i + 1])
    return result


def bollinger_bands(
    closes: np.ndarray, period: int = 20, std_dev: float = 2.0
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Bollinger Bands.

    Returns: (upper, middle, lower)
    """
    middle = sma(closes, period)
    std = rolling_std(closes, period)

    upper = middle + (std_dev * std)
    lower = middle - (std_dev * std)

    return upper, middle, lower
