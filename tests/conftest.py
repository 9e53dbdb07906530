"""
Shared fixtures for the test suite.
"""

from collections.abc import Callable, Sequence
from datetime import date

import numpy as np
import pandas as pd
import pytest

PriceFrameFactory = Callable[..., pd.DataFrame]


def make_price_frame(
    closes: Sequence[float],
    volumes: Sequence[float] | None = None,
    start: date = date(2024, 1, 1),
) -> pd.DataFrame:
    """Build a daily date/close/volume frame with one row per consecutive day."""
    dates = pd.date_range(start=start, periods=len(closes), freq="D").date
    return pd.DataFrame(
        {
            "date": dates,
            "close": [float(close) for close in closes],
            "volume": [1000.0] * len(closes) if volumes is None else list(volumes),
        }
    )


@pytest.fixture
def price_frame() -> PriceFrameFactory:
    """Factory for small hand-written price frames."""
    return make_price_frame


@pytest.fixture
def random_walk_frame() -> pd.DataFrame:
    """250 days of a reproducible random walk with varying volume."""
    rng = np.random.default_rng(42)
    returns = rng.normal(0.0005, 0.02, 250)
    closes = 100.0 * np.cumprod(1 + returns)
    volumes = rng.uniform(500, 5000, 250)
    return make_price_frame(closes, volumes)
