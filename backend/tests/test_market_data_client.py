"""
MarketDataClient Tests

Tests for proxy response handling. No network: the HTTP layer is mocked.
"""

import asyncio

import aiohttp
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from chartdesk.schemas.market import Bar, MarketQuote
from chartdesk.services.base import ExternalAPIError
from chartdesk.services.market_data import MarketDataClient


# ==================== FIXTURES ====================

@pytest.fixture
def client():
    """Client pointed at a dummy proxy URL"""
    return MarketDataClient(base_url="http://proxy.test/fn", api_key="anon-key", timeout=1)


def _fake_session(status: int, payload=None, text: str = ""):
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=payload)
    response.text = AsyncMock(return_value=text)

    session = MagicMock()
    session.closed = False
    session.get.return_value.__aenter__.return_value = response
    return session


QUOTE_PAYLOAD = {
    "symbol": "AAPL",
    "price": 190.5,
    "change": 1.5,
    "changePercent": 0.79,
    "volume": 51000000,
    "open": 189.0,
    "high": 191.2,
    "low": 188.4,
    "previousClose": 189.0,
    "timestamp": 1717200000,
}


# ==================== REQUEST TESTS ====================

@pytest.mark.asyncio
async def test_get_json_sends_action_and_params(client):
    session = _fake_session(200, payload=QUOTE_PAYLOAD)
    client._session = session

    data = await client._get_json("historical", symbol="AAPL", days=30)

    assert data == QUOTE_PAYLOAD
    session.get.assert_called_once_with(
        "http://proxy.test/fn",
        params={"action": "historical", "symbol": "AAPL", "days": "30"},
    )


@pytest.mark.asyncio
async def test_get_json_non_200_raises(client):
    client._session = _fake_session(500, text="upstream exploded")

    with pytest.raises(ExternalAPIError) as exc_info:
        await client._get_json("quote", symbol="AAPL")

    assert exc_info.value.details["status"] == 500


# ==================== QUOTE TESTS ====================

@pytest.mark.asyncio
async def test_get_realtime_quote(client):
    with patch.object(client, "_get_json", AsyncMock(return_value=dict(QUOTE_PAYLOAD))):
        quote = await client.get_realtime_quote("AAPL")

    assert isinstance(quote, MarketQuote)
    assert quote.price == 190.5
    assert quote.change_percent == 0.79
    assert quote.previous_close == 189.0


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [None, {}, {"price": 0}, [1, 2]])
async def test_get_realtime_quote_without_price_is_none(client, payload):
    with patch.object(client, "_get_json", AsyncMock(return_value=payload)):
        assert await client.get_realtime_quote("AAPL") is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        aiohttp.ClientError("connection reset"),
        asyncio.TimeoutError(),
        ExternalAPIError("MarketDataClient", "quote returned status 502"),
    ],
)
async def test_get_realtime_quote_upstream_failure_is_none(client, error):
    with patch.object(client, "_get_json", AsyncMock(side_effect=error)):
        assert await client.get_realtime_quote("AAPL") is None


# ==================== HISTORY TESTS ====================

@pytest.mark.asyncio
async def test_get_historical_data_filters_invalid_records(client):
    payload = [
        {"date": "2024-06-03", "timestamp": 1717372800, "open": 1, "high": 2, "low": 0.5, "close": 1.5, "volume": 10},
        {"date": "2024-06-04", "timestamp": 0, "open": 1, "high": 2, "low": 0.5, "close": 1.5, "volume": 10},
        {"date": "2024-06-05", "timestamp": 1717545600, "open": 1, "high": 2, "low": 0.5, "close": None, "volume": 10},
        {"date": "2024-06-06", "timestamp": 1717632000, "open": 1, "high": 2, "low": 0.5, "close": 1.7, "volume": -5},
        {"date": "2024-06-07", "timestamp": 1717718400, "open": 1.6, "high": 2, "low": 1.1, "close": 1.8, "volume": 12},
    ]

    with patch.object(client, "_get_json", AsyncMock(return_value=payload)):
        bars = await client.get_historical_data("AAPL", days=5)

    assert all(isinstance(bar, Bar) for bar in bars)
    assert [bar.timestamp for bar in bars] == [1717372800, 1717718400]
    assert bars[0].date == "2024-06-03"


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [[], {"error": "nope"}, None])
async def test_get_historical_data_unusable_payload(client, payload):
    with patch.object(client, "_get_json", AsyncMock(return_value=payload)):
        assert await client.get_historical_data("AAPL") == []


@pytest.mark.asyncio
async def test_get_historical_data_upstream_failure(client):
    with patch.object(client, "_get_json", AsyncMock(side_effect=aiohttp.ClientError("down"))):
        assert await client.get_historical_data("AAPL") == []


# ==================== SEARCH TESTS ====================

@pytest.mark.asyncio
async def test_search_symbols(client):
    payload = [
        {"symbol": "AAPL", "description": "Apple Inc."},
        {"description": "no symbol"},
        {"symbol": "AAPD"},
    ]

    with patch.object(client, "_get_json", AsyncMock(return_value=payload)):
        matches = await client.search_symbols("aap")

    assert [m.symbol for m in matches] == ["AAPL", "AAPD"]
    assert matches[1].description == ""


@pytest.mark.asyncio
async def test_search_symbols_non_list(client):
    with patch.object(client, "_get_json", AsyncMock(return_value={"symbol": "AAPL"})):
        assert await client.search_symbols("aapl") == []


# ==================== SESSION TESTS ====================

@pytest.mark.asyncio
async def test_close_closes_open_session(client):
    session = MagicMock()
    session.closed = False
    session.close = AsyncMock()
    client._session = session

    await client.close()

    session.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_close_without_session_is_noop(client):
    await client.close()
