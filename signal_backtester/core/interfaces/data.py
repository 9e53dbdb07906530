"""
Data access interfaces.
"""

from abc import ABC, abstractmethod
from datetime import date

import pandas as pd


class IPriceSource(ABC):
    """Abstract interface for daily price series providers."""

    @abstractmethod
    async def load_series(
        self, symbol: str, start: date | None = None, end: date | None = None
    ) -> pd.DataFrame:
        """Load a chronologically ascending, de-duplicated date/close/volume series."""
        pass
