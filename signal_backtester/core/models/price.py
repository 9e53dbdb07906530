"""
Price series domain model.
"""

from dataclasses import dataclass
from datetime import date

from signal_backtester.core.exceptions.backtest import InvalidPriceError


@dataclass(frozen=True)
class PricePoint:
    """One daily bar of the raw series: close price and traded volume."""

    date: date
    close: float
    volume: float

    def __post_init__(self) -> None:
        """Validate price point data after initialization."""
        if not self.close > 0 or not self.volume >= 0:
            raise InvalidPriceError(self.date, self.close, self.volume)

    def to_dict(self) -> dict:
        """Convert price point to dictionary."""
        return {
            "date": self.date.isoformat(),
            "close": self.close,
            "volume": self.volume,
        }
