"""
Data infrastructure.

This module provides price series loading and normalization plus the
technical indicator pipeline.
"""

from .csv_loader import CSVPriceLoader
from .price_series import PriceSeriesPreparer, prepare_price_frame
from .technical_indicators import TechnicalIndicatorsCalculator, compute_indicators

__all__ = [
    "CSVPriceLoader",
    "PriceSeriesPreparer",
    "prepare_price_frame",
    "TechnicalIndicatorsCalculator",
    "compute_indicators",
]
