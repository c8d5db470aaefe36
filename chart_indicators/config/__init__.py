"""
Configuration module
"""
from chart_indicators.config.settings import (
    settings,
    Settings,
    LoggerConfig,
    IndicatorDefaults,
    ChartConfig,
)

__all__ = [
    "settings",
    "Settings",
    "LoggerConfig",
    "IndicatorDefaults",
    "ChartConfig",
]
