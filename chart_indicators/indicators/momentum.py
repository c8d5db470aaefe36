"""Momentum indicators - calculated from OHLCV data."""

from typing import Dict, List, Sequence

from chart_indicators.logger import logger
from .base import (
    Bar,
    MACDResult,
    MACDConfig,
    RSIConfig,
    Series,
    StochasticResult,
    StochasticConfig,
    series_from_bars,
)
from .registry import indicator
from .trend import ema, sma
from .utils import (
    IndexMap,
    absent,
    highest_high,
    lowest_low,
    mean,
    round2,
    round4,
    valid_period,
)


def rsi(series: Sequence[float], period: int = 14) -> Series:
    """Calculate Relative Strength Index.

    Formula: RSI = 100 - (100 / (1 + RS))
    where RS = mean(gains) / mean(losses) over the last ``period`` changes.
    The averages are a plain trailing window recomputed at every index,
    not Wilder's smoothing.

    Args:
        series: Input values, oldest first
        period: Number of price changes averaged

    Returns:
        Series (0-100, 2 decimals) starting at index ``period``
    """
    n = len(series)
    if period <= 0:
        return absent(n)

    gains: List[float] = []
    losses: List[float] = []
    result: Series = []

    for i in range(n):
        if i == 0:
            result.append(None)
            continue

        change = series[i] - series[i - 1]
        gains.append(change if change > 0 else 0.0)
        losses.append(-change if change < 0 else 0.0)

        if i < period:
            result.append(None)
            continue

        avg_gain = mean(gains[-period:])
        avg_loss = mean(losses[-period:])

        if avg_loss == 0:
            result.append(100.0)
        else:
            rs = avg_gain / avg_loss
            result.append(round2(100.0 - (100.0 / (1.0 + rs))))

    return result


def macd(
    series: Sequence[float],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9
) -> MACDResult:
    """Calculate MACD.

    Formula:
    - MACD = EMA(fast) - EMA(slow)
    - Signal = EMA(MACD, signal)
    - Histogram = MACD - Signal

    The signal EMA runs over the present MACD values only, so its warm-up
    counts from the first MACD value rather than from index 0.

    Args:
        series: Input values, oldest first
        fast: Fast EMA period
        slow: Slow EMA period
        signal: Signal EMA period

    Returns:
        MACDResult with macd, signal and histogram series
    """
    fast_ema = ema(series, fast)
    slow_ema = ema(series, slow)

    macd_line: Series = []
    for fast_value, slow_value in zip(fast_ema, slow_ema):
        if fast_value is None or slow_value is None:
            macd_line.append(None)
        else:
            macd_line.append(round4(fast_value - slow_value))

    index_map = IndexMap.compact(macd_line)
    signal_line = index_map.scatter(ema(index_map.values, signal))

    histogram: Series = []
    for macd_value, signal_value in zip(macd_line, signal_line):
        if macd_value is None or signal_value is None:
            histogram.append(None)
        else:
            histogram.append(round4(macd_value - signal_value))

    return MACDResult(macd=macd_line, signal=signal_line, histogram=histogram)


def stochastic(
    bars: Sequence[Bar],
    k_period: int = 14,
    d_period: int = 3
) -> StochasticResult:
    """Calculate Stochastic Oscillator.

    Formula:
    - %K = (close - lowest_low) / (highest_high - lowest_low) * 100
    - %D = SMA(%K, d_period)

    A flat window (highest_high == lowest_low) gives %K = 50. %D runs over
    the present %K values only, like the MACD signal line.

    Args:
        bars: Bars, oldest first
        k_period: %K lookback
        d_period: %D smoothing

    Returns:
        StochasticResult with k and d series (0-100)
    """
    n = len(bars)
    if not valid_period(k_period, n):
        return StochasticResult(k=absent(n), d=absent(n))

    k_line = absent(k_period - 1)
    for i in range(k_period - 1, n):
        window = bars[i - k_period + 1:i + 1]
        hh = highest_high(window)
        ll = lowest_low(window)

        if hh == ll:
            k_line.append(50.0)
            continue

        value = round2((bars[i].close - ll) / (hh - ll) * 100)
        if value is not None and not 0.0 <= value <= 100.0:
            logger.debug(f"%K {value} out of range at bar {i}: close outside high/low")
            value = min(max(value, 0.0), 100.0)
        k_line.append(value)

    index_map = IndexMap.compact(k_line)
    d_line = index_map.scatter(sma(index_map.values, d_period))

    return StochasticResult(k=k_line, d=d_line)


@indicator("rsi", "Relative Strength Index")
def calculate_rsi(bars: Sequence[Bar], config: RSIConfig) -> Dict[str, Series]:
    return {"rsi": rsi(series_from_bars(bars, config.source), config.period)}


@indicator("macd", "Moving Average Convergence Divergence")
def calculate_macd(bars: Sequence[Bar], config: MACDConfig) -> Dict[str, Series]:
    result = macd(series_from_bars(bars, config.source), config.fast, config.slow, config.signal)
    macd_field, signal_field, histogram_field = config.fields()
    return {
        macd_field: result.macd,
        signal_field: result.signal,
        histogram_field: result.histogram,
    }


@indicator("stochastic", "Stochastic Oscillator")
def calculate_stochastic(bars: Sequence[Bar], config: StochasticConfig) -> Dict[str, Series]:
    result = stochastic(bars, config.k_period, config.d_period)
    k_field, d_field = config.fields()
    return {k_field: result.k, d_field: result.d}
