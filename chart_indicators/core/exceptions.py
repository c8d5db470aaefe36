"""
Custom exceptions for the indicator library.

Indicator calculations themselves never raise: degenerate input degrades to
absent values. These exceptions belong to the outer surfaces (record
conversion, registry dispatch, chart layout configuration).
"""


class ChartIndicatorsError(Exception):
    """Base exception for all chart-indicators errors."""
    pass


class ConfigurationError(ChartIndicatorsError):
    """Raised when there's an error in configuration."""
    pass


class UnknownIndicatorError(ChartIndicatorsError, ValueError):
    """Raised when an indicator kind is not registered."""

    def __init__(self, name: str, known=None):
        self.name = name
        self.known = sorted(known or [])
        message = f"Unknown indicator: {name}"
        if self.known:
            message += f". Registered indicators: {self.known}"
        super().__init__(message)


class BarValidationError(ChartIndicatorsError, ValueError):
    """Raised when a raw record cannot be converted into a Bar."""

    def __init__(self, index: int, reason: str):
        self.index = index
        self.reason = reason
        super().__init__(f"Invalid bar record at index {index}: {reason}")
