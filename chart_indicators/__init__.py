"""Technical-indicator engine for OHLCV chart overlays and oscillator panes."""

from chart_indicators.indicators import (
    Bar,
    IndicatorManager,
    atr,
    bars_from_records,
    bollinger_bands,
    calculate_indicator,
    ema,
    macd,
    make_config,
    parabolic_sar,
    rsi,
    sma,
    stochastic,
)

__version__ = "1.0.0"

__all__ = [
    "Bar",
    "IndicatorManager",
    "atr",
    "bars_from_records",
    "bollinger_bands",
    "calculate_indicator",
    "ema",
    "macd",
    "make_config",
    "parabolic_sar",
    "rsi",
    "sma",
    "stochastic",
]
