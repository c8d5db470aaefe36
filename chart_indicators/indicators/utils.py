"""Utility functions for indicator calculations."""

import math
import operator
from dataclasses import dataclass, field
from decimal import Context, Decimal, ROUND_HALF_UP
from functools import reduce
from typing import Iterable, List, Optional, Sequence

from .base import Bar, Series

PRICE_DECIMALS = 4
OSCILLATOR_DECIMALS = 2

_QUANTUM = {places: Decimal(1).scaleb(-places) for places in range(0, 11)}
# Wide enough for any finite double at the quantum we round to
_CONTEXT = Context(prec=350, rounding=ROUND_HALF_UP)


def round_to(value: float, places: int = PRICE_DECIMALS) -> Optional[float]:
    """Round half away from zero at a fixed number of decimal places.

    The float's exact binary value is rounded, so 1.005 (stored as
    1.00499999...) rounds down to 1.0 at two places while 0.125 rounds up
    to 0.13. Recurrences round at every step, so this must be bit-exact.

    Args:
        value: Value to round
        places: Decimal places

    Returns:
        Rounded float, or None for NaN / infinity
    """
    if not math.isfinite(value):
        return None
    quantum = _QUANTUM.get(places) or Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP, context=_CONTEXT))


def round4(value: float) -> Optional[float]:
    return round_to(value, PRICE_DECIMALS)


def round2(value: float) -> Optional[float]:
    return round_to(value, OSCILLATOR_DECIMALS)


def absent(length: int) -> Series:
    """Series of the given length with no values yet."""
    return [None] * length


def valid_period(period: int, length: int) -> bool:
    """True when a trailing window of ``period`` fits at least once."""
    return 0 < period <= length


def left_sum(values: Iterable[float]) -> float:
    """Add values left to right from 0.0, without compensated summation.

    The built-in sum() compensates on Python 3.12+ and would round some
    windows differently from older interpreters.
    """
    return reduce(operator.add, values, 0.0)


def mean(values: Sequence[float]) -> float:
    return left_sum(values) / len(values)


def population_std(values: Sequence[float], center: float) -> float:
    """Standard deviation dividing by N, measured around ``center``.

    Args:
        values: Window values
        center: Mean to measure deviations from

    Returns:
        Standard deviation
    """
    variance = left_sum((x - center) ** 2 for x in values) / len(values)
    return math.sqrt(variance)


def true_range(current: Bar, previous: Optional[Bar]) -> float:
    """Calculate true range.

    TR = max(H - L, abs(H - prev_C), abs(L - prev_C))
    The first bar has no previous close, so its range is H - L.

    Args:
        current: Current bar
        previous: Previous bar (None for the first bar)

    Returns:
        True range value
    """
    hl_range = current.high - current.low
    if previous is None:
        return hl_range

    h_prev_close = abs(current.high - previous.close)
    l_prev_close = abs(current.low - previous.close)

    return max(hl_range, h_prev_close, l_prev_close)


def highest_high(bars: Sequence[Bar]) -> float:
    return max(b.high for b in bars)


def lowest_low(bars: Sequence[Bar]) -> float:
    return min(b.low for b in bars)


@dataclass
class IndexMap:
    """Maps a sparse parent series onto its dense present values.

    ``positions[i]`` is the index into ``values`` consumed at parent
    index i, or None where the parent was absent. A child calculation runs
    over ``values`` and ``scatter`` puts its results back in place.
    """
    positions: List[Optional[int]] = field(default_factory=list)
    values: List[float] = field(default_factory=list)

    @classmethod
    def compact(cls, series: Series) -> "IndexMap":
        index_map = cls()
        for value in series:
            if value is None:
                index_map.positions.append(None)
            else:
                index_map.positions.append(len(index_map.values))
                index_map.values.append(value)
        return index_map

    def scatter(self, child: Series) -> Series:
        """Place child results (aligned with ``values``) at parent indices."""
        return [None if pos is None else child[pos] for pos in self.positions]
