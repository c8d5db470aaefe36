"""Synthetic Bar Data Generation

Utilities for generating deterministic bar data for testing.
"""
import pytest
from datetime import datetime, timedelta
from typing import List, Sequence, Tuple

from chart_indicators.indicators import Bar


def create_test_bars(
    count: int = 50,
    base_price: float = 100.0,
    volatility: float = 1.0
) -> List[Bar]:
    """Create test bars with realistic OHLCV relationships.

    Args:
        count: Number of bars to create
        base_price: Starting price
        volatility: Price movement range

    Returns:
        List of Bar objects
    """
    bars = []
    current_price = base_price
    base_time = datetime(2025, 1, 2, 9, 30)

    for i in range(count):
        # Oscillating pattern with a mild drift
        price_change = (i % 5 - 2) * volatility + (0.3 if i % 7 == 0 else 0.0)
        current_price += price_change

        open_price = current_price
        close = open_price + price_change
        high = max(open_price, close) + volatility * 0.5
        low = min(open_price, close) - volatility * 0.5

        bars.append(Bar(
            time=(base_time + timedelta(minutes=i)).isoformat(),
            open=open_price,
            high=high,
            low=low,
            close=close,
            volume=1000000 + i * 10000,
        ))

    return bars


def bars_from_tuples(rows: Sequence[Tuple[float, float, float]]) -> List[Bar]:
    """Build bars from (high, low, close) rows; open = previous close."""
    bars = []
    previous_close = rows[0][2] if rows else 0.0
    for i, (high, low, close) in enumerate(rows):
        bars.append(Bar(time=f"t{i}", open=previous_close, high=high, low=low, close=close, volume=100.0))
        previous_close = close
    return bars


def flat_bars(count: int, price: float = 50.0) -> List[Bar]:
    """Bars where open == high == low == close."""
    return [Bar(time=f"t{i}", open=price, high=price, low=price, close=price, volume=10.0) for i in range(count)]


@pytest.fixture
def bar_data_generator():
    """Factory fixture for generating synthetic bar data."""
    return create_test_bars


@pytest.fixture
def sample_bars() -> List[Bar]:
    """Sixty oscillating bars, enough to warm up every default indicator."""
    return create_test_bars(60)


@pytest.fixture
def uptrend_bars() -> List[Bar]:
    """Thirty bars of strictly rising closes."""
    bars = []
    for i in range(30):
        price = 100.0 + i * 2.0
        bars.append(Bar(
            time=f"t{i}",
            open=price,
            high=price + 1,
            low=price - 0.5,
            close=price + 0.5,
            volume=1000000,
        ))
    return bars
