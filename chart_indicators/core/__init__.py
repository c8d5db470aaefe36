"""Core library primitives."""
from chart_indicators.core.exceptions import (
    ChartIndicatorsError,
    ConfigurationError,
    UnknownIndicatorError,
    BarValidationError,
)

__all__ = [
    "ChartIndicatorsError",
    "ConfigurationError",
    "UnknownIndicatorError",
    "BarValidationError",
]
