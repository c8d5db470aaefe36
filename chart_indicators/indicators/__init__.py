"""Indicator calculation framework.

All indicators are whole-series transforms over OHLCV bars: every output
series has the input's length, with None until the lookback is filled.
"""

from .base import (
    Bar,
    Series,
    IndicatorType,
    Placement,
    BollingerBands,
    MACDResult,
    StochasticResult,
    SMAConfig,
    EMAConfig,
    BollingerConfig,
    SARConfig,
    RSIConfig,
    MACDConfig,
    StochasticConfig,
    ATRConfig,
    VolumeConfig,
    IndicatorConfig,
    make_config,
    bars_from_records,
    series_from_bars,
)
from .registry import (
    INDICATOR_REGISTRY,
    indicator,
    calculate_indicator,
    list_indicators,
)

# Import all indicators to trigger registration
from .trend import sma, ema, parabolic_sar, SARState, sar_start, sar_step
from .volatility import bollinger_bands, atr, true_ranges
from .momentum import rsi, macd, stochastic
from .volume import volume_direction

from .manager import IndicatorManager, default_chart_configs

__all__ = [
    "Bar",
    "Series",
    "IndicatorType",
    "Placement",
    "BollingerBands",
    "MACDResult",
    "StochasticResult",
    "SMAConfig",
    "EMAConfig",
    "BollingerConfig",
    "SARConfig",
    "RSIConfig",
    "MACDConfig",
    "StochasticConfig",
    "ATRConfig",
    "VolumeConfig",
    "IndicatorConfig",
    "make_config",
    "bars_from_records",
    "series_from_bars",
    "INDICATOR_REGISTRY",
    "indicator",
    "calculate_indicator",
    "list_indicators",
    "sma",
    "ema",
    "parabolic_sar",
    "SARState",
    "sar_start",
    "sar_step",
    "bollinger_bands",
    "atr",
    "true_ranges",
    "rsi",
    "macd",
    "stochastic",
    "volume_direction",
    "IndicatorManager",
    "default_chart_configs",
]
