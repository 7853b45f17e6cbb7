"""
Realtime module for ChartDesk.

Polls the market-data proxy for subscribed symbols and fans quotes out.
"""

from chartdesk.services.realtime.poller import RealtimeQuoteService, QuoteCallback

__all__ = [
    "RealtimeQuoteService",
    "QuoteCallback",
]
