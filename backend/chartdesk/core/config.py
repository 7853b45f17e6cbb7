"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from typing import Literal, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "ChartDesk Backend"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS
    allowed_origins: list[str] = ["http://localhost:5173"]

    # Market data proxy (hosted serverless function)
    market_data_url: str = "http://localhost:54321/functions/v1/yahoo-finance-proxy"
    market_data_api_key: Optional[str] = None
    market_data_timeout: float = 10.0

    # Realtime quotes
    quote_refresh_interval: float = 60.0  # seconds between polls per symbol

    # Charting
    default_history_days: int = 180
    rsi_method: Literal["windowed", "wilder"] = "windowed"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
