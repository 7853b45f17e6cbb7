"""
Market Data Client

Talks to the hosted market-data proxy function:
    GET {market_data_url}?action=quote&symbol=...
    GET {market_data_url}?action=historical&symbol=...&days=...
    GET {market_data_url}?action=search&symbol=...

Upstream failures never raise to callers: they are logged and come back
as None / [] so the chart can keep rendering what it has.
"""

import asyncio
import logging
from typing import Any, Optional

import aiohttp
from pydantic import ValidationError as PydanticValidationError

from chartdesk.core.config import settings
from chartdesk.schemas.market import Bar, MarketQuote, SymbolMatch
from chartdesk.services.base import ExternalAPIError

logger = logging.getLogger(__name__)

# Transport failures, bad status, undecodable bodies.
UPSTREAM_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, ValueError, ExternalAPIError)


class MarketDataClient:
    """
    Async client for the market-data proxy.

    Usage:
        client = MarketDataClient()
        quote = await client.get_realtime_quote("AAPL")
        bars = await client.get_historical_data("AAPL", days=180)
        await client.close()
    """

    name = "MarketDataClient"

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self._base_url = base_url or settings.market_data_url
        self._api_key = api_key if api_key is not None else settings.market_data_api_key
        self._timeout = timeout or settings.market_data_timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active HTTP session."""
        if self._session is None or self._session.closed:
            headers = {}
            if self._api_key:
                headers["Authorization"] = f"Bearer {self._api_key}"
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout),
                headers=headers,
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _get_json(self, action: str, **params: Any) -> Any:
        """Call the proxy. Raises ExternalAPIError on non-200 responses."""
        session = await self._ensure_session()
        query = {"action": action, **{k: str(v) for k, v in params.items()}}

        async with session.get(self._base_url, params=query) as response:
            if response.status != 200:
                body = await response.text()
                raise ExternalAPIError(
                    self.name,
                    f"{action} returned status {response.status}",
                    {"status": response.status, "body": body[:200]},
                )
            return await response.json(content_type=None)

    async def get_realtime_quote(self, symbol: str) -> Optional[MarketQuote]:
        """Latest quote, or None when the proxy has nothing usable."""
        try:
            data = await self._get_json("quote", symbol=symbol)
        except UPSTREAM_ERRORS as e:
            logger.error(f"Quote fetch failed for {symbol}: {e}")
            return None

        if not isinstance(data, dict) or not data.get("price"):
            logger.warning(f"No valid quote data for {symbol}")
            return None

        data.setdefault("symbol", symbol)
        try:
            return MarketQuote.model_validate(data)
        except PydanticValidationError as e:
            logger.warning(f"Malformed quote for {symbol}: {e}")
            return None

    async def search_symbols(self, query: str) -> list[SymbolMatch]:
        """Symbol search; empty on any failure."""
        try:
            data = await self._get_json("search", symbol=query)
        except UPSTREAM_ERRORS as e:
            logger.error(f"Symbol search failed for {query!r}: {e}")
            return []

        if not isinstance(data, list):
            return []

        matches = []
        for item in data:
            try:
                matches.append(SymbolMatch.model_validate(item))
            except PydanticValidationError:
                logger.debug(f"Skipping malformed search hit: {item}")
        return matches

    async def get_historical_data(self, symbol: str, days: int = 30) -> list[Bar]:
        """
        Daily bars, oldest first.

        Records without a timestamp or close are dropped, as are records
        that fail validation.
        """
        try:
            data = await self._get_json("historical", symbol=symbol, days=days)
        except UPSTREAM_ERRORS as e:
            logger.error(f"Historical fetch failed for {symbol}: {e}")
            return []

        if not isinstance(data, list) or not data:
            logger.warning(f"No historical data available for {symbol}")
            return []

        bars = []
        for record in data:
            if not isinstance(record, dict):
                continue
            if not record.get("timestamp") or not record.get("close"):
                continue
            try:
                bars.append(Bar.model_validate(record))
            except PydanticValidationError as e:
                logger.debug(f"Skipping malformed bar for {symbol}: {e}")

        logger.info(f"Historical data for {symbol}: {len(bars)}/{len(data)} valid bars")
        return bars
