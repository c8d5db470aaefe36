"""Volatility indicators - calculated from OHLCV data."""

from typing import Dict, List, Sequence

from .base import ATRConfig, Bar, BollingerBands, BollingerConfig, Series, series_from_bars
from .registry import indicator
from .trend import sma
from .utils import absent, mean, population_std, round4, true_range, valid_period


def bollinger_bands(series: Sequence[float], period: int = 20, k: float = 2.0) -> BollingerBands:
    """Calculate Bollinger Bands.

    Formula:
    - Middle = SMA(x, period)
    - Upper = Middle + k * std
    - Lower = Middle - k * std

    std is the population standard deviation (divide by period) of the
    same trailing window, measured around the rounded middle band.

    Args:
        series: Input values, oldest first
        period: Window length
        k: Band width in standard deviations

    Returns:
        BollingerBands with upper, middle and lower series
    """
    n = len(series)
    middle = sma(series, period)
    if not valid_period(period, n):
        return BollingerBands(upper=absent(n), middle=middle, lower=absent(n))

    upper = absent(period - 1)
    lower = absent(period - 1)
    for i in range(period - 1, n):
        center = middle[i]
        if center is None:
            upper.append(None)
            lower.append(None)
            continue
        std = population_std(series[i - period + 1:i + 1], center)
        upper.append(round4(center + k * std))
        lower.append(round4(center - k * std))

    return BollingerBands(upper=upper, middle=middle, lower=lower)


def true_ranges(bars: Sequence[Bar]) -> List[float]:
    """True range of every bar; the first bar uses H - L."""
    return [true_range(bar, bars[i - 1] if i > 0 else None) for i, bar in enumerate(bars)]


def atr(bars: Sequence[Bar], period: int = 14) -> Series:
    """Calculate Average True Range.

    Seeded with the mean of the first ``period`` true ranges, then Wilder
    smoothing: ATR = (prev_ATR * (period - 1) + TR) / period, rounded to 4
    decimals at each step.

    Args:
        bars: Bars, oldest first
        period: Smoothing period

    Returns:
        Series with None for the first period-1 entries
    """
    n = len(bars)
    if not valid_period(period, n):
        return absent(n)

    ranges = true_ranges(bars)
    previous = round4(mean(ranges[:period]))

    result = absent(period - 1)
    result.append(previous)
    for tr in ranges[period:]:
        if previous is not None:
            previous = round4((previous * (period - 1) + tr) / period)
        result.append(previous)
    return result


@indicator("bollinger", "Bollinger Bands")
def calculate_bollinger(bars: Sequence[Bar], config: BollingerConfig) -> Dict[str, Series]:
    bands = bollinger_bands(series_from_bars(bars, config.source), config.period, config.k)
    upper_field, middle_field, lower_field = config.fields()
    return {
        upper_field: bands.upper,
        middle_field: bands.middle,
        lower_field: bands.lower,
    }


@indicator("atr", "Average True Range")
def calculate_atr(bars: Sequence[Bar], config: ATRConfig) -> Dict[str, Series]:
    return {"atr": atr(bars, config.period)}
