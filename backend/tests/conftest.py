"""
Pytest configuration and shared fixtures.

Provides bar-sequence builders for the indicator tests.
"""

import pytest

from chartdesk.schemas.market import Bar


def make_bars(closes, start: int = 0, step: int = 1, volume: float = 1000.0) -> list[Bar]:
    """Bars whose open/high/low hug the close; timestamps start, start+step, ..."""
    return [
        Bar(
            timestamp=start + i * step,
            open=close,
            high=close + 1,
            low=close - 1,
            close=close,
            volume=volume + i,
        )
        for i, close in enumerate(closes)
    ]


@pytest.fixture
def rising_bars() -> list[Bar]:
    """Closes 10..20 at timestamps 0..10."""
    return make_bars(range(10, 21))


@pytest.fixture
def wave_bars() -> list[Bar]:
    """60 bars oscillating around 100 with a slow drift; daily timestamps."""
    closes = [100 + ((i * 7) % 11) - 5 + i * 0.25 for i in range(60)]
    return make_bars(closes, start=1_700_000_000, step=86_400)


@pytest.fixture
def bar_factory():
    """The make_bars builder, for tests that need custom closes."""
    return make_bars
