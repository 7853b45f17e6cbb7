"""
Market data module for ChartDesk.

Async client for the hosted market-data proxy (quotes, history, search).
"""

from chartdesk.services.market_data.client import MarketDataClient

__all__ = ["MarketDataClient"]
