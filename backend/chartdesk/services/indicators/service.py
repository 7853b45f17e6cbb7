"""
Indicator Engine Service Implementation

Builds the chart's overlay set from one bar sequence.
Pure Python/NumPy calculations, no I/O.
"""

import logging
from typing import Optional

from chartdesk.schemas.indicators import IndicatorRequest, ChartIndicators
from chartdesk.services.indicators.interface import IndicatorServiceInterface
from chartdesk.services.indicators.engine import (
    calculate_sma,
    calculate_rsi,
    calculate_macd,
    calculate_bollinger_bands,
    calculate_volume,
)

logger = logging.getLogger(__name__)


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    Calculates chart overlays (SMA, RSI, MACD, Bollinger Bands, volume).
    All calculations are deterministic and reproducible.
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    async def execute(self, input_data: IndicatorRequest) -> ChartIndicators:
        """Calculate every overlay switched on in the request."""
        request = await self.validate_input(input_data)
        return self.calculate(request)

    def calculate(self, request: IndicatorRequest) -> ChartIndicators:
        """Synchronous core of execute(); raises InvalidParameterError."""
        bars = request.bars

        sma = {period: calculate_sma(bars, period) for period in request.sma_periods}

        rsi = None
        if request.calculate_rsi:
            rsi = calculate_rsi(bars, request.rsi_period, request.rsi_method)

        macd = None
        if request.calculate_macd:
            macd = calculate_macd(
                bars, request.macd_fast, request.macd_slow, request.macd_signal
            )

        bollinger = None
        if request.calculate_bollinger:
            bollinger = calculate_bollinger_bands(
                bars, request.bollinger_period, request.bollinger_std_dev
            )

        volume = calculate_volume(bars) if request.calculate_volume else None

        logger.debug(
            f"Indicators for {request.symbol or '<bars>'}: {len(bars)} bars, "
            f"sma={[len(points) for points in sma.values()]}, "
            f"rsi={len(rsi) if rsi is not None else '-'}, "
            f"macd={len(macd) if macd is not None else '-'}"
        )

        return ChartIndicators(
            symbol=request.symbol,
            bar_count=len(bars),
            sma=sma,
            rsi=rsi,
            macd=macd,
            bollinger=bollinger,
            volume=volume,
        )

    async def validate_input(self, input_data: IndicatorRequest) -> IndicatorRequest:
        """Warn on out-of-order bars; the engine assumes ascending timestamps."""
        timestamps = [bar.timestamp for bar in input_data.bars]
        if any(later < earlier for earlier, later in zip(timestamps, timestamps[1:])):
            logger.warning(
                f"Bars for {input_data.symbol or '<bars>'} are not ordered by timestamp"
            )
        return input_data

    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        return True


# Singleton instance
_service_instance: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = IndicatorService()
    return _service_instance
