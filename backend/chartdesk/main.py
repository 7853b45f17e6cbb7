"""
ChartDesk Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chartdesk.core.config import settings
from chartdesk.api.v1 import router as api_v1_router
from chartdesk.services.market_data import MarketDataClient
from chartdesk.services.realtime import RealtimeQuoteService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    market_data = MarketDataClient()
    realtime = RealtimeQuoteService(market_data)
    app.state.market_data = market_data
    app.state.realtime = realtime
    logger.info(f"Market data proxy: {settings.market_data_url}")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await realtime.close()
    await market_data.close()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    ChartDesk Paper-Trading Chart API

    ## Architecture
    - **Market Data**: Quotes, history and search via the hosted market-data proxy
    - **Realtime**: Per-symbol quote polling, stopped when the last subscriber leaves
    - **Indicator Engine**: SMA, EMA, RSI, MACD, Bollinger Bands (pure Python/NumPy)

    ## Core Principles
    - Indicators are recomputed from the full bar sequence on every call
    - Not enough history is an empty series, not an error
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware - allow the dev frontend ports
cors_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
# Add any additional origins from settings
if settings.allowed_origins:
    cors_origins.extend([o for o in settings.allowed_origins if o not in cors_origins])

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "ChartDesk Backend API",
        "docs": "/docs",
        "health": "/health",
    }
