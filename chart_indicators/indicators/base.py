"""Base classes and types for the indicator framework."""

import math
from dataclasses import dataclass, fields as dataclass_fields
from enum import Enum
from typing import Any, ClassVar, Dict, Hashable, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from chart_indicators.core.exceptions import BarValidationError, ConfigurationError


# An indicator output: one entry per input bar, None while warming up
Series = List[Optional[float]]


@dataclass(frozen=True)
class Bar:
    """Single bar of OHLCV data.

    This is the ONLY input to all indicators. Bars are immutable so the
    same sequence can be shared by every indicator on a chart.
    """
    time: str
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0


class IndicatorType(Enum):
    """Indicator classification."""
    TREND = "trend"
    MOMENTUM = "momentum"
    VOLATILITY = "volatility"
    VOLUME = "volume"


class Placement(Enum):
    """Where a chart draws an indicator."""
    OVERLAY = "overlay"  # On top of the price series
    PANE = "pane"        # In its own sub-chart below price


PRICE_SOURCES = ("open", "high", "low", "close", "volume", "hl2", "hlc3")


def series_from_bars(bars: Sequence[Bar], source: str = "close") -> List[float]:
    """Extract one numeric series from bars.

    Args:
        bars: Bar sequence
        source: Bar field name, or "hl2" / "hlc3" for median / typical price

    Returns:
        List of floats, index-aligned with bars
    """
    if source == "hl2":
        return [(b.high + b.low) / 2.0 for b in bars]
    if source == "hlc3":
        return [(b.high + b.low + b.close) / 3.0 for b in bars]
    if source not in PRICE_SOURCES:
        raise ConfigurationError(f"Unknown price source: {source}. Choose from: {', '.join(PRICE_SOURCES)}")
    return [getattr(b, source) for b in bars]


def bars_from_records(records: Iterable[Mapping[str, Any]]) -> List[Bar]:
    """Convert dashboard-style records into bars.

    Each record needs ``time``, ``open``, ``high``, ``low`` and ``close``;
    ``volume`` defaults to 0.

    Raises:
        BarValidationError: On a missing field or a non-numeric price
    """
    bars = []
    for index, record in enumerate(records):
        if "time" not in record:
            raise BarValidationError(index, "missing field 'time'")
        if not isinstance(record["time"], Hashable):
            raise BarValidationError(index, f"field 'time' is not hashable: {record['time']!r}")
        values = {}
        for name in ("open", "high", "low", "close", "volume"):
            raw = record.get(name, 0.0 if name == "volume" else None)
            if raw is None:
                raise BarValidationError(index, f"missing field '{name}'")
            if isinstance(raw, bool):
                raise BarValidationError(index, f"field '{name}' is not numeric: {raw!r}")
            try:
                number = float(raw)
            except (TypeError, ValueError):
                raise BarValidationError(index, f"field '{name}' is not numeric: {raw!r}") from None
            if not math.isfinite(number):
                raise BarValidationError(index, f"field '{name}' is not finite: {raw!r}")
            values[name] = number
        bars.append(Bar(time=record["time"], **values))
    return bars


# ============================================================================
# Multi-series results
# ============================================================================

@dataclass(frozen=True)
class BollingerBands:
    upper: Series
    middle: Series
    lower: Series


@dataclass(frozen=True)
class MACDResult:
    macd: Series
    signal: Series
    histogram: Series


@dataclass(frozen=True)
class StochasticResult:
    k: Series
    d: Series


# ============================================================================
# Indicator configs (tagged variant: one frozen dataclass per kind)
# ============================================================================

class _ConfigMixin:
    """Shared helpers for config dataclasses."""

    name: ClassVar[str]
    type: ClassVar[IndicatorType]
    placement: ClassVar[Placement]

    def reference_levels(self) -> Tuple[float, ...]:
        """Horizontal guide lines drawn on the indicator's pane."""
        return ()

    def params(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in dataclass_fields(self)}

    def _check_source(self):
        source = getattr(self, "source", "close")
        if source not in PRICE_SOURCES:
            raise ConfigurationError(f"{self.name}: unknown price source '{source}'")


@dataclass(frozen=True)
class SMAConfig(_ConfigMixin):
    period: int = 20
    source: str = "close"

    name: ClassVar[str] = "sma"
    type: ClassVar[IndicatorType] = IndicatorType.TREND
    placement: ClassVar[Placement] = Placement.OVERLAY

    def __post_init__(self):
        self._check_source()

    def fields(self) -> Tuple[str, ...]:
        return (f"ma{self.period}",)

    def label(self) -> str:
        return f"MA({self.period})"

    def warmup_bars(self) -> int:
        return self.period


@dataclass(frozen=True)
class EMAConfig(_ConfigMixin):
    period: int = 20
    source: str = "close"

    name: ClassVar[str] = "ema"
    type: ClassVar[IndicatorType] = IndicatorType.TREND
    placement: ClassVar[Placement] = Placement.OVERLAY

    def __post_init__(self):
        self._check_source()

    def fields(self) -> Tuple[str, ...]:
        return (f"ema{self.period}",)

    def label(self) -> str:
        return f"EMA({self.period})"

    def warmup_bars(self) -> int:
        return self.period


@dataclass(frozen=True)
class BollingerConfig(_ConfigMixin):
    period: int = 20
    k: float = 2.0
    source: str = "close"

    name: ClassVar[str] = "bollinger"
    type: ClassVar[IndicatorType] = IndicatorType.VOLATILITY
    placement: ClassVar[Placement] = Placement.OVERLAY

    def __post_init__(self):
        self._check_source()

    def fields(self) -> Tuple[str, ...]:
        return ("bbUpper", "bbMiddle", "bbLower")

    def label(self) -> str:
        return f"BB({self.period},{self.k:g})"

    def warmup_bars(self) -> int:
        return self.period


@dataclass(frozen=True)
class SARConfig(_ConfigMixin):
    af0: float = 0.02
    af_max: float = 0.2

    name: ClassVar[str] = "sar"
    type: ClassVar[IndicatorType] = IndicatorType.TREND
    placement: ClassVar[Placement] = Placement.OVERLAY

    def fields(self) -> Tuple[str, ...]:
        return ("sar",)

    def label(self) -> str:
        return f"SAR({self.af0:g},{self.af_max:g})"

    def warmup_bars(self) -> int:
        return 2


@dataclass(frozen=True)
class RSIConfig(_ConfigMixin):
    period: int = 14
    source: str = "close"

    name: ClassVar[str] = "rsi"
    type: ClassVar[IndicatorType] = IndicatorType.MOMENTUM
    placement: ClassVar[Placement] = Placement.PANE

    def __post_init__(self):
        self._check_source()

    def fields(self) -> Tuple[str, ...]:
        return ("rsi",)

    def label(self) -> str:
        return f"RSI({self.period})"

    def reference_levels(self) -> Tuple[float, ...]:
        return (70.0, 30.0, 50.0)

    def warmup_bars(self) -> int:
        # First delta needs a previous close
        return self.period + 1


@dataclass(frozen=True)
class MACDConfig(_ConfigMixin):
    fast: int = 12
    slow: int = 26
    signal: int = 9
    source: str = "close"

    name: ClassVar[str] = "macd"
    type: ClassVar[IndicatorType] = IndicatorType.MOMENTUM
    placement: ClassVar[Placement] = Placement.PANE

    def __post_init__(self):
        self._check_source()

    def fields(self) -> Tuple[str, ...]:
        return ("macd", "macdSignal", "histogram")

    def label(self) -> str:
        return f"MACD({self.fast},{self.slow},{self.signal})"

    def reference_levels(self) -> Tuple[float, ...]:
        return (0.0,)

    def warmup_bars(self) -> int:
        # Signal warm-up starts at the first MACD value
        return max(self.fast, self.slow) + self.signal - 1


@dataclass(frozen=True)
class StochasticConfig(_ConfigMixin):
    k_period: int = 14
    d_period: int = 3

    name: ClassVar[str] = "stochastic"
    type: ClassVar[IndicatorType] = IndicatorType.MOMENTUM
    placement: ClassVar[Placement] = Placement.PANE

    def fields(self) -> Tuple[str, ...]:
        return ("stochK", "stochD")

    def label(self) -> str:
        return f"STOCH({self.k_period},{self.d_period})"

    def reference_levels(self) -> Tuple[float, ...]:
        return (80.0, 20.0)

    def warmup_bars(self) -> int:
        return self.k_period + self.d_period - 1


@dataclass(frozen=True)
class ATRConfig(_ConfigMixin):
    period: int = 14

    name: ClassVar[str] = "atr"
    type: ClassVar[IndicatorType] = IndicatorType.VOLATILITY
    placement: ClassVar[Placement] = Placement.PANE

    def fields(self) -> Tuple[str, ...]:
        return ("atr",)

    def label(self) -> str:
        return f"ATR({self.period})"

    def warmup_bars(self) -> int:
        return self.period


@dataclass(frozen=True)
class VolumeConfig(_ConfigMixin):
    name: ClassVar[str] = "volume"
    type: ClassVar[IndicatorType] = IndicatorType.VOLUME
    placement: ClassVar[Placement] = Placement.PANE

    def fields(self) -> Tuple[str, ...]:
        return ("volume", "volumeUp")

    def label(self) -> str:
        return "Volume"

    def warmup_bars(self) -> int:
        return 1


IndicatorConfig = Union[
    SMAConfig,
    EMAConfig,
    BollingerConfig,
    SARConfig,
    RSIConfig,
    MACDConfig,
    StochasticConfig,
    ATRConfig,
    VolumeConfig,
]

CONFIG_TYPES: Dict[str, type] = {
    config.name: config
    for config in (SMAConfig, EMAConfig, BollingerConfig, SARConfig, RSIConfig,
                 MACDConfig, StochasticConfig, ATRConfig, VolumeConfig)
}


def make_config(name: str, **params) -> IndicatorConfig:
    """Build a config from its kind name.

    Examples:
        make_config("rsi", period=9)
        make_config("macd", fast=8, slow=21, signal=5)

    Raises:
        ConfigurationError: Unknown kind or unknown parameter
    """
    config_type = CONFIG_TYPES.get(name.lower())
    if config_type is None:
        raise ConfigurationError(
            f"Unknown indicator kind: {name}. Choose from: {', '.join(sorted(CONFIG_TYPES))}"
        )
    try:
        return config_type(**params)
    except TypeError as e:
        raise ConfigurationError(f"{name}: {e}") from e
