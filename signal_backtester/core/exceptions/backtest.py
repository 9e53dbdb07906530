"""
Custom exception hierarchy for the backtesting engine.

This module defines domain-specific exceptions for better error handling.
Ordinary simulation outcomes (too little data, no signal) are never
reported through exceptions.
"""


class BacktestException(Exception):
    """Base exception for all backtesting-related errors."""

    pass


class ValidationError(BacktestException):
    """Raised when input validation fails."""

    pass


class DataError(BacktestException):
    """Raised when price data cannot be loaded or normalized."""

    pass


class CalculationError(BacktestException):
    """Raised when mathematical calculations fail."""

    pass


class ConfigurationError(BacktestException):
    """Raised when a strategy configuration is explicitly validated and found invalid."""

    def __init__(self, field: str, value: object, requirement: str):
        self.field = field
        self.value = value
        self.requirement = requirement
        super().__init__(f"Invalid {field}={value!r}: {requirement}")


class InvalidPriceError(ValidationError):
    """Raised when a price point violates the series contract."""

    def __init__(self, date: object, close: float, volume: float):
        self.date = date
        self.close = close
        self.volume = volume
        super().__init__(
            f"Invalid price point on {date}: close={close} (must be > 0), "
            f"volume={volume} (must be >= 0)"
        )
