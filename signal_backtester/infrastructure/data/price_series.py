"""
Price series preparation module.

Normalizes raw daily series into the shape the indicator pipeline expects:
a DataFrame with ``date``, ``close`` and ``volume`` columns, sorted by date,
one row per calendar day, positive closes and non-negative volumes.
"""

from collections.abc import Sequence

import pandas as pd
from loguru import logger

from signal_backtester.core.exceptions.backtest import DataError
from signal_backtester.core.models.price import PricePoint

PRICE_COLUMNS = ["date", "close", "volume"]

PriceSeries = Sequence[PricePoint] | pd.DataFrame


class PriceSeriesPreparer:
    """
    Price series normalizer.

    Features:
    - Conversion from PricePoint sequences or DataFrames
    - Date parsing to calendar days
    - Duplicate removal (first occurrence wins) and chronological sorting
    - Missing volume filled with 0, negative volume clipped
    - Rejection of missing or non-positive closes
    """

    def prepare(self, series: PriceSeries) -> pd.DataFrame:
        """
        Build a normalized price frame.

        Args:
            series: PricePoint sequence or DataFrame with date/close/volume columns

        Returns:
            New DataFrame; the input is never modified

        Raises:
            DataError: If required columns are missing or closes are invalid
        """
        frame = self._to_frame(series)
        if frame.empty:
            return frame

        frame = self._normalize_dates(frame)
        frame = self._remove_duplicates_and_sort(frame)
        frame = self._clean_values(frame)
        return frame

    def _to_frame(self, series: PriceSeries) -> pd.DataFrame:
        """Convert supported inputs to a DataFrame copy with the price columns."""
        if isinstance(series, pd.DataFrame):
            missing_columns = set(PRICE_COLUMNS) - set(series.columns)
            if missing_columns:
                raise DataError(f"Missing required columns: {sorted(missing_columns)}")
            return series.loc[:, PRICE_COLUMNS].copy()

        return pd.DataFrame(
            {
                "date": [point.date for point in series],
                "close": [point.close for point in series],
                "volume": [point.volume for point in series],
            },
            columns=PRICE_COLUMNS,
        )

    def _normalize_dates(self, frame: pd.DataFrame) -> pd.DataFrame:
        """Parse the date column to calendar days."""
        try:
            frame["date"] = pd.to_datetime(frame["date"]).dt.date
        except (ValueError, TypeError) as e:
            raise DataError(f"Unparseable dates in price series: {e}") from e
        return frame

    def _remove_duplicates_and_sort(self, frame: pd.DataFrame) -> pd.DataFrame:
        """Remove duplicate days and sort data chronologically."""
        duplicate_mask = frame["date"].duplicated(keep="first")
        if duplicate_mask.any():
            logger.warning(f"Removing {int(duplicate_mask.sum())} duplicate days")
            frame = frame[~duplicate_mask]

        return frame.sort_values("date", kind="stable").reset_index(drop=True)

    def _clean_values(self, frame: pd.DataFrame) -> pd.DataFrame:
        """Coerce numeric columns and enforce the price/volume contract."""
        frame["close"] = pd.to_numeric(frame["close"], errors="coerce").astype("float64")
        frame["volume"] = pd.to_numeric(frame["volume"], errors="coerce").astype("float64")

        if frame["close"].isna().any():
            raise DataError("Price series contains missing close prices")
        if (frame["close"] <= 0).any():
            raise DataError("Price series contains non-positive close prices")

        if frame["volume"].isna().any():
            logger.warning("Found missing volume values, filling with 0")
            frame["volume"] = frame["volume"].fillna(0.0)
        if (frame["volume"] < 0).any():
            logger.warning("Found negative volume values, clipping to 0")
            frame["volume"] = frame["volume"].clip(lower=0.0)

        return frame


def prepare_price_frame(series: PriceSeries) -> pd.DataFrame:
    """Normalize a raw series with the default preparer."""
    return PriceSeriesPreparer().prepare(series)
