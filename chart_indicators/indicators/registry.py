"""Indicator registry and calculation dispatcher."""

from typing import Callable, Dict, List, Optional, Sequence

from chart_indicators.core.exceptions import UnknownIndicatorError
from chart_indicators.logger import logger
from .base import Bar, IndicatorConfig, Series

# Calculator: full bar series + config -> {output field: series}
IndicatorCalculator = Callable[[Sequence[Bar], IndicatorConfig], Dict[str, Series]]


class IndicatorRegistry:
    """Central registry of all indicator calculators.

    This provides a single source of truth for all indicators.
    """

    def __init__(self):
        self._calculators: Dict[str, IndicatorCalculator] = {}
        self._metadata: Dict[str, Dict[str, str]] = {}

    def register(
        self,
        name: str,
        calculator: IndicatorCalculator,
        description: str = ""
    ):
        """Register an indicator calculator.

        Args:
            name: Indicator kind (e.g., "sma", "rsi")
            calculator: Function that calculates the indicator
            description: Brief description
        """
        if name in self._calculators:
            logger.warning(f"Overwriting existing indicator: {name}")

        self._calculators[name] = calculator
        self._metadata[name] = {"description": description}
        logger.trace(f"Registered indicator: {name}")

    def get(self, name: str) -> Optional[IndicatorCalculator]:
        return self._calculators.get(name)

    def list_all(self) -> List[str]:
        """List all registered indicators."""
        return sorted(self._calculators.keys())

    def is_registered(self, name: str) -> bool:
        return name in self._calculators

    def get_metadata(self, name: str) -> Optional[Dict[str, str]]:
        return self._metadata.get(name)


# Global registry instance
INDICATOR_REGISTRY = IndicatorRegistry()


def indicator(name: str, description: str = ""):
    """Decorator to register an indicator calculator.

    Usage:
        @indicator("sma", "Simple Moving Average")
        def calculate_sma(bars, config):
            ...
    """
    def decorator(func: IndicatorCalculator):
        INDICATOR_REGISTRY.register(name, func, description)
        return func
    return decorator


def calculate_indicator(
    bars: Sequence[Bar],
    config: IndicatorConfig,
) -> Dict[str, Series]:
    """Calculate every output series of one indicator.

    Args:
        bars: Full bar history, oldest first
        config: Indicator config (kind + parameters)

    Returns:
        Dict of {field name: series}, each series as long as ``bars``

    Raises:
        UnknownIndicatorError: If the config's kind is not registered
    """
    calculator = INDICATOR_REGISTRY.get(config.name)
    if calculator is None:
        raise UnknownIndicatorError(config.name, INDICATOR_REGISTRY.list_all())

    if len(bars) < config.warmup_bars():
        logger.debug(
            f"{config.label()}: warmup incomplete ({len(bars)}/{config.warmup_bars()} bars)"
        )

    return calculator(bars, config)


def list_indicators() -> List[str]:
    """List all registered indicators.

    Returns:
        Sorted list of indicator names
    """
    return INDICATOR_REGISTRY.list_all()
