"""
Settings Tests
"""

from chartdesk.core.config import Settings


# ==================== SETTINGS TESTS ====================

def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("ALLOWED_ORIGINS", raising=False)
    monkeypatch.delenv("RSI_METHOD", raising=False)

    config = Settings(_env_file=None)

    assert config.allowed_origins == ["http://localhost:5173"]
    assert config.rsi_method == "windowed"
    assert not hasattr(config, "frontend_url")


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("RSI_METHOD", "wilder")
    monkeypatch.setenv("QUOTE_REFRESH_INTERVAL", "5")

    config = Settings(_env_file=None)

    assert config.rsi_method == "wilder"
    assert config.quote_refresh_interval == 5.0
