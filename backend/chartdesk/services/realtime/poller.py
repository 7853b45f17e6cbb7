"""
Realtime quote poller.

Keeps one polling task per subscribed symbol and fans each quote out to that
symbol's callbacks. Polling for a symbol stops when its last subscriber
leaves.

The service is owned by the application lifespan:
    realtime = RealtimeQuoteService(client)
    unsubscribe = realtime.subscribe("AAPL", on_quote)
    ...
    unsubscribe()
    await realtime.close()
"""

import asyncio
import logging
from typing import Callable, Dict, List, Optional

from chartdesk.core.config import settings
from chartdesk.schemas.market import MarketQuote
from chartdesk.services.market_data.client import MarketDataClient

logger = logging.getLogger(__name__)

QuoteCallback = Callable[[MarketQuote], None]


class RealtimeQuoteService:
    """Ref-counted per-symbol quote polling."""

    name = "RealtimeQuoteService"

    def __init__(
        self,
        client: MarketDataClient,
        refresh_interval: Optional[float] = None,
    ):
        self._client = client
        self._refresh_interval = refresh_interval or settings.quote_refresh_interval
        self._subscribers: Dict[str, List[QuoteCallback]] = {}
        self._tasks: Dict[str, asyncio.Task] = {}
        self._latest_quotes: Dict[str, MarketQuote] = {}

    @property
    def subscribed_symbols(self) -> List[str]:
        return list(self._subscribers)

    def subscriber_count(self, symbol: str) -> int:
        return len(self._subscribers.get(symbol.upper(), []))

    def is_polling(self, symbol: str) -> bool:
        return symbol.upper() in self._tasks

    def subscribe(self, symbol: str, callback: QuoteCallback) -> Callable[[], None]:
        """
        Register a callback for a symbol's quotes.

        Must be called from within a running event loop. Returns a function
        that removes this subscription.
        """
        # Raises RuntimeError outside a loop, before any state is touched
        loop = asyncio.get_running_loop()

        symbol = symbol.upper()
        callbacks = self._subscribers.setdefault(symbol, [])
        if callback not in callbacks:
            callbacks.append(callback)

        latest = self._latest_quotes.get(symbol)
        if latest is not None:
            self._notify_one(symbol, callback, latest)

        if symbol not in self._tasks:
            self._tasks[symbol] = loop.create_task(self._poll(symbol))
            logger.info(f"Started polling {symbol} every {self._refresh_interval}s")

        return lambda: self.unsubscribe(symbol, callback)

    def unsubscribe(self, symbol: str, callback: QuoteCallback) -> None:
        """Remove a callback; the last one out stops polling for the symbol."""
        symbol = symbol.upper()
        callbacks = self._subscribers.get(symbol)
        if not callbacks:
            return

        if callback in callbacks:
            callbacks.remove(callback)

        if not callbacks:
            self._stop_polling(symbol)
            del self._subscribers[symbol]
            self._latest_quotes.pop(symbol, None)

    async def get_latest_quote(self, symbol: str) -> Optional[MarketQuote]:
        """Cached quote if the symbol is being polled, else a direct fetch."""
        symbol = symbol.upper()
        cached = self._latest_quotes.get(symbol)
        if cached is not None:
            return cached
        return await self._client.get_realtime_quote(symbol)

    async def close(self) -> None:
        """Stop every polling task and forget all subscriptions."""
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        self._tasks.clear()
        self._subscribers.clear()
        self._latest_quotes.clear()
        logger.info("Realtime quote service stopped")

    # ============ Polling ============

    def _stop_polling(self, symbol: str) -> None:
        task = self._tasks.pop(symbol, None)
        if task is not None:
            task.cancel()
            logger.info(f"Stopped polling {symbol}")

    async def _poll(self, symbol: str) -> None:
        """Fetch immediately, then once per refresh interval until cancelled."""
        while True:
            await self._fetch_and_notify(symbol)
            await asyncio.sleep(self._refresh_interval)

    async def _fetch_and_notify(self, symbol: str) -> None:
        try:
            quote = await self._client.get_realtime_quote(symbol)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Error fetching quote for {symbol}: {e}")
            return

        if quote is None:
            return

        # Unsubscribed while the fetch was in flight.
        if symbol not in self._subscribers:
            return

        self._latest_quotes[symbol] = quote
        for callback in list(self._subscribers.get(symbol, [])):
            self._notify_one(symbol, callback, quote)

    def _notify_one(self, symbol: str, callback: QuoteCallback, quote: MarketQuote) -> None:
        try:
            callback(quote)
        except Exception as e:
            logger.error(f"Error in subscriber callback for {symbol}: {e}")
