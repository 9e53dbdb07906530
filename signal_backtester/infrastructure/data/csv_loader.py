"""
CSV Price Loader implementation.

This module loads daily price series from ``<data_dir>/<symbol>.csv`` files
with caching and normalization. Files need ``date`` and ``close`` columns;
``volume`` is optional and defaults to 0.
"""

import asyncio
import re
from datetime import date
from pathlib import Path
from threading import RLock

import pandas as pd
from cachetools import LRUCache
from loguru import logger

from signal_backtester.core.exceptions.backtest import DataError, ValidationError
from signal_backtester.core.interfaces.data import IPriceSource

from .price_series import PRICE_COLUMNS, PriceSeriesPreparer

DEFAULT_CACHE_SIZE = 32
MAX_SYMBOL_LENGTH = 50


def sanitize_symbol(symbol: str) -> str:
    """Reject symbols that are empty, too long or could escape the data directory."""
    if not symbol:
        raise ValidationError("Symbol cannot be empty")
    if ".." in symbol or "/" in symbol or "\\" in symbol:
        raise ValidationError("Invalid symbol: contains path traversal characters")
    if re.fullmatch(r"[a-zA-Z0-9_.-]+", symbol) is None:
        raise ValidationError(
            f"Invalid symbol: '{symbol}' contains invalid characters. "
            f"Only alphanumeric, underscore, dash, and dot are allowed."
        )
    if len(symbol) > MAX_SYMBOL_LENGTH:
        raise ValidationError(f"Symbol too long: maximum {MAX_SYMBOL_LENGTH} characters")
    return symbol


class CSVPriceLoader(IPriceSource):
    """
    CSV-based price source with caching.

    Features:
    - Non-blocking reads through the default executor
    - Thread-safe LRU cache keyed by file path and modification time
    - Optional inclusive date range filtering
    - Normalization through PriceSeriesPreparer
    """

    def __init__(self, data_directory: str | Path = "data", cache_size: int = DEFAULT_CACHE_SIZE):
        """
        Initialize the CSV price loader.

        Args:
            data_directory: Directory containing one CSV file per symbol
            cache_size: Maximum number of cached frames
        """
        if cache_size <= 0:
            raise ValueError("Cache size must be positive")

        self.data_dir = Path(data_directory)
        self.preparer = PriceSeriesPreparer()
        self.cache: LRUCache[str, pd.DataFrame] = LRUCache(maxsize=cache_size)
        self._cache_lock = RLock()

    async def load_series(
        self, symbol: str, start: date | None = None, end: date | None = None
    ) -> pd.DataFrame:
        """
        Load the daily series for a symbol.

        Args:
            symbol: File stem under the data directory
            start: First day to include (inclusive), None for no lower bound
            end: Last day to include (inclusive), None for no upper bound

        Returns:
            Normalized DataFrame with date, close and volume columns

        Raises:
            ValidationError: If the symbol or date range is invalid
            DataError: If the file is missing or cannot be parsed
        """
        if start is not None and end is not None and start > end:
            raise ValidationError(f"Start date {start} is after end date {end}")

        file_path = self.data_dir / f"{sanitize_symbol(symbol)}.csv"
        try:
            frame = await self.load_file(file_path)
        except (DataError, ValidationError):
            raise
        except Exception as e:
            logger.error(f"Price loading failed for {symbol}: {e}")
            raise DataError(f"Failed to load price series for {symbol}") from e

        frame = self._filter_by_date_range(frame, start, end)
        logger.info(f"Loaded {len(frame)} bars for {symbol}")
        return frame

    async def load_file(self, file_path: Path) -> pd.DataFrame:
        """Load and normalize a single CSV file with caching."""
        if not file_path.exists():
            raise DataError(f"Data file not found: {file_path}")

        cache_key = self._build_cache_key(file_path)
        with self._cache_lock:
            cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Cache hit for {file_path}")
            return cached.copy()

        logger.debug(f"Loading file: {file_path}")
        try:
            raw = await self._read_csv(file_path)
        except pd.errors.EmptyDataError:
            logger.warning(f"Empty data file: {file_path.name}")
            raw = pd.DataFrame(columns=PRICE_COLUMNS)
        except (pd.errors.ParserError, UnicodeDecodeError) as e:
            logger.error(f"CSV parsing error ({type(e).__name__}) in {file_path.name}: {e}")
            raise DataError(f"Failed to parse CSV file: {file_path.name}") from e
        except OSError as e:
            logger.error(f"File system error loading {file_path.name}: {e}")
            raise DataError(f"File system error loading {file_path.name}") from e

        if "volume" not in raw.columns:
            raw["volume"] = 0.0
        frame = self.preparer.prepare(raw)

        with self._cache_lock:
            self.cache[cache_key] = frame.copy()
        return frame

    def clear_cache(self) -> None:
        """Clear the data cache (thread-safe)."""
        with self._cache_lock:
            self.cache.clear()
        logger.debug("Price cache cleared")

    def _build_cache_key(self, file_path: Path) -> str:
        """Build cache key including file modification time."""
        return f"{file_path}:{file_path.stat().st_mtime_ns}"

    async def _read_csv(self, file_path: Path) -> pd.DataFrame:
        """Read a CSV file through the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, pd.read_csv, file_path)

    @staticmethod
    def _filter_by_date_range(
        frame: pd.DataFrame, start: date | None, end: date | None
    ) -> pd.DataFrame:
        """Keep rows with start <= date <= end."""
        if frame.empty:
            return frame

        mask = pd.Series(True, index=frame.index)
        if start is not None:
            mask &= frame["date"] >= start
        if end is not None:
            mask &= frame["date"] <= end
        return frame[mask].reset_index(drop=True)
