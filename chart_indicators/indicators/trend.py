"""Trend indicators - moving averages and Parabolic SAR."""

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from chart_indicators.logger import logger
from .base import Bar, EMAConfig, SARConfig, Series, SMAConfig, series_from_bars
from .registry import indicator
from .utils import absent, mean, round4, valid_period


def sma(series: Sequence[float], period: int) -> Series:
    """Simple Moving Average.

    Formula: SUM(x[i-period+1..i]) / period, rounded to 4 decimals.

    Args:
        series: Input values, oldest first
        period: Window length

    Returns:
        Series with None for the first period-1 entries. All None when the
        period is not positive or longer than the series.
    """
    n = len(series)
    if not valid_period(period, n):
        return absent(n)

    result = absent(period - 1)
    for i in range(period - 1, n):
        result.append(round4(mean(series[i - period + 1:i + 1])))
    return result


def ema(series: Sequence[float], period: int) -> Series:
    """Exponential Moving Average.

    Seeded with the SMA of the first ``period`` values, then
    EMA = (x - prev_EMA) * k + prev_EMA with k = 2 / (period + 1).
    Each step is rounded to 4 decimals before feeding the next one.

    Args:
        series: Input values, oldest first
        period: EMA period

    Returns:
        Series with None for the first period-1 entries
    """
    n = len(series)
    if not valid_period(period, n):
        return absent(n)

    multiplier = 2.0 / (period + 1)
    previous = round4(mean(series[:period]))

    result = absent(period - 1)
    result.append(previous)
    for value in series[period:]:
        if previous is not None:
            previous = round4((value - previous) * multiplier + previous)
        result.append(previous)
    return result


@dataclass(frozen=True)
class SARState:
    """Parabolic SAR accumulator carried from one bar to the next."""
    sar: float
    uptrend: bool
    extreme_point: float
    acceleration: float


def sar_start(first: Bar, second: Bar, af0: float) -> SARState:
    """Initial state: trend direction from the first two closes."""
    if second.close > first.close:
        return SARState(sar=first.low, uptrend=True, extreme_point=first.high, acceleration=af0)
    return SARState(sar=first.high, uptrend=False, extreme_point=first.low, acceleration=af0)


def sar_step(
    state: SARState,
    current: Bar,
    previous: Bar,
    before_previous: Optional[Bar],
    af0: float = 0.02,
    af_max: float = 0.2,
) -> SARState:
    """Advance Parabolic SAR by one bar.

    The candidate stop moves toward the extreme point by the acceleration
    factor and may not cross the prior two bars' range. Price crossing the
    stop reverses the trend: the old extreme point becomes the stop and the
    acceleration factor resets.

    Args:
        state: State after the previous bar
        current: Bar being processed
        previous: Bar before ``current``
        before_previous: Bar two back, or None on the second bar
        af0: Acceleration factor start and increment
        af_max: Acceleration factor cap

    Returns:
        New state; ``state.sar`` is the stop to emit for ``current``
    """
    if before_previous is None:
        before_previous = previous

    candidate = state.sar + state.acceleration * (state.extreme_point - state.sar)

    if state.uptrend:
        candidate = min(candidate, previous.low, before_previous.low)
        if current.low < candidate:
            return SARState(sar=state.extreme_point, uptrend=False,
                            extreme_point=current.low, acceleration=af0)
        if current.high > state.extreme_point:
            return SARState(sar=candidate, uptrend=True, extreme_point=current.high,
                            acceleration=min(state.acceleration + af0, af_max))
        return SARState(candidate, True, state.extreme_point, state.acceleration)

    candidate = max(candidate, previous.high, before_previous.high)
    if current.high > candidate:
        return SARState(sar=state.extreme_point, uptrend=True,
                        extreme_point=current.high, acceleration=af0)
    if current.low < state.extreme_point:
        return SARState(sar=candidate, uptrend=False, extreme_point=current.low,
                        acceleration=min(state.acceleration + af0, af_max))
    return SARState(candidate, False, state.extreme_point, state.acceleration)


def parabolic_sar(bars: Sequence[Bar], af0: float = 0.02, af_max: float = 0.2) -> Series:
    """Parabolic Stop-And-Reverse.

    Args:
        bars: Bars, oldest first (needs at least 2)
        af0: Acceleration factor start and increment
        af_max: Acceleration factor cap

    Returns:
        Series with None at index 0; all None for fewer than 2 bars
    """
    n = len(bars)
    if n < 2:
        return absent(n)

    state = sar_start(bars[0], bars[1], af0)
    result: Series = [None]
    reversals = 0
    for i in range(1, n):
        before_previous = bars[i - 2] if i > 1 else None
        next_state = sar_step(state, bars[i], bars[i - 1], before_previous, af0, af_max)
        if next_state.uptrend != state.uptrend:
            reversals += 1
        state = next_state
        result.append(round4(state.sar))

    logger.trace(f"SAR over {n} bars: {reversals} reversals")
    return result


@indicator("sma", "Simple Moving Average")
def calculate_sma(bars: Sequence[Bar], config: SMAConfig) -> Dict[str, Series]:
    (field,) = config.fields()
    return {field: sma(series_from_bars(bars, config.source), config.period)}


@indicator("ema", "Exponential Moving Average")
def calculate_ema(bars: Sequence[Bar], config: EMAConfig) -> Dict[str, Series]:
    (field,) = config.fields()
    return {field: ema(series_from_bars(bars, config.source), config.period)}


@indicator("sar", "Parabolic SAR")
def calculate_sar(bars: Sequence[Bar], config: SARConfig) -> Dict[str, Series]:
    return {"sar": parabolic_sar(bars, config.af0, config.af_max)}
