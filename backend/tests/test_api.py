"""
API Tests

Endpoint tests against the FastAPI app with mocked market data.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from fastapi.testclient import TestClient

from chartdesk.core.config import settings
from chartdesk.main import app
from chartdesk.schemas.market import MarketQuote, SymbolMatch
from chartdesk.services.market_data import MarketDataClient
from chartdesk.services.realtime import RealtimeQuoteService


# ==================== FIXTURES ====================

@pytest.fixture
def market_data():
    """Mock market data client"""
    client = MagicMock(spec=MarketDataClient)
    client.get_historical_data = AsyncMock(return_value=[])
    client.search_symbols = AsyncMock(return_value=[])
    client.get_realtime_quote = AsyncMock(return_value=None)
    return client


@pytest.fixture
def api(market_data):
    """TestClient without lifespan; collaborators injected on app.state"""
    app.state.market_data = market_data
    app.state.realtime = RealtimeQuoteService(market_data)
    return TestClient(app)


def _bar_payload(closes):
    return [
        {"timestamp": i, "open": c, "high": c + 1, "low": c - 1, "close": c, "volume": 100}
        for i, c in enumerate(closes)
    ]


# ==================== ROOT ====================

def test_health(api):
    response = api.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_root(api):
    assert api.get("/").json()["docs"] == "/docs"


# ==================== LIFESPAN ====================

def test_lifespan_configures_logging_and_services():
    with patch("chartdesk.main.logging.basicConfig") as basic_config:
        with TestClient(app):
            basic_config.assert_called_once()
            assert basic_config.call_args.kwargs["level"] == settings.log_level.upper()
            assert isinstance(app.state.market_data, MarketDataClient)
            assert isinstance(app.state.realtime, RealtimeQuoteService)


# ==================== INDICATORS ====================

def test_post_chart_indicators(api):
    response = api.post(
        "/api/v1/indicators/chart",
        json={"bars": _bar_payload(range(10, 21)), "sma_periods": [5]},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["bar_count"] == 11
    sma = body["sma"]["5"]
    assert len(sma) == 7
    assert sma[0] == {"timestamp": 4, "value": 12.0}
    assert sma[-1] == {"timestamp": 10, "value": 18.0}
    assert body["macd"] == []
    assert len(body["volume"]) == 11


def test_post_chart_indicators_invalid_parameter(api):
    response = api.post(
        "/api/v1/indicators/chart",
        json={"bars": _bar_payload(range(40)), "macd_fast": 26, "macd_slow": 12},
    )

    assert response.status_code == 422
    assert "fast_period" in response.json()["detail"]


def test_post_chart_indicators_rejects_negative_volume(api):
    payload = _bar_payload([1, 2, 3])
    payload[1]["volume"] = -1

    response = api.post("/api/v1/indicators/chart", json={"bars": payload})

    assert response.status_code == 422


def test_get_symbol_indicators(api, market_data, wave_bars):
    market_data.get_historical_data.return_value = wave_bars

    response = api.get("/api/v1/indicators/aapl?days=60")

    assert response.status_code == 200
    body = response.json()
    assert body["symbol"] == "AAPL"
    assert body["bar_count"] == 60
    assert set(body["sma"]) == {"20", "50", "200"}
    assert len(body["rsi"]) == 45
    market_data.get_historical_data.assert_awaited_once_with("AAPL", 60)


def test_get_symbol_indicators_no_history(api):
    response = api.get("/api/v1/indicators/NOPE")

    assert response.status_code == 404


# ==================== MARKET ====================

def test_get_quote(api, market_data):
    market_data.get_realtime_quote.return_value = MarketQuote(symbol="AAPL", price=190.5)

    response = api.get("/api/v1/market/aapl/quote")

    assert response.status_code == 200
    assert response.json()["price"] == 190.5
    market_data.get_realtime_quote.assert_awaited_once_with("AAPL")


def test_get_quote_unavailable(api):
    assert api.get("/api/v1/market/AAPL/quote").status_code == 404


def test_get_history(api, market_data, bar_factory):
    market_data.get_historical_data.return_value = bar_factory([1.0, 2.0])

    response = api.get("/api/v1/market/AAPL/history?days=2")

    assert response.status_code == 200
    assert [bar["close"] for bar in response.json()] == [1.0, 2.0]


def test_search(api, market_data):
    market_data.search_symbols.return_value = [SymbolMatch(symbol="AAPL", description="Apple Inc.")]

    response = api.get("/api/v1/market/search?q=app")

    assert response.status_code == 200
    assert response.json() == [{"symbol": "AAPL", "description": "Apple Inc."}]
    market_data.search_symbols.assert_awaited_once_with("app")


def test_search_requires_query(api):
    assert api.get("/api/v1/market/search").status_code == 422
