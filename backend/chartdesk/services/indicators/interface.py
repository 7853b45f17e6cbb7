"""
Indicator Engine Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod

from chartdesk.services.base import BaseService
from chartdesk.schemas.indicators import IndicatorRequest, ChartIndicators


class IndicatorServiceInterface(BaseService[IndicatorRequest, ChartIndicators]):
    """
    Indicator Engine Service Contract.

    INPUT: IndicatorRequest
        - bars: ordered OHLCV bars for one symbol
        - overlay toggles and periods

    OUTPUT: ChartIndicators
        - one series per requested overlay, warm-up trimmed
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(self, input_data: IndicatorRequest) -> ChartIndicators:
        """Calculate the requested overlays for the bars in the request."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        pass
