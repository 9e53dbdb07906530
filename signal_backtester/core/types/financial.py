"""
Financial numeric helpers for backtesting calculations.

All simulation arithmetic is done in float64. Mathematically undefined
values (indicator warm-up, Sharpe of a flat equity curve) are carried as
NaN and must never be coerced to zero by callers.

Reported percentages are rounded half-up on the shortest decimal
representation of the float, which absorbs the binary representation
error: 2.345 is stored just below the midpoint but still rounds to 2.35.
"""

import math
from decimal import ROUND_HALF_DOWN, ROUND_HALF_UP, Decimal

# Financial calculation precision (number of decimal places)
PERCENTAGE_DECIMALS = 2  # 2 decimal places for reported percentages

# Common financial values as float constants
ZERO = 0.0
ONE = 1.0
HUNDRED = 100.0
UNDEFINED = math.nan


def is_undefined(value: float | None) -> bool:
    """Check whether a numeric value is missing or NaN.

    Args:
        value: Value to check

    Returns:
        True for None and NaN
    """
    return value is None or math.isnan(value)


def round_half_up(value: float, decimals: int = PERCENTAGE_DECIMALS) -> float:
    """Round half-up to a fixed number of decimals, breaking ties toward +infinity.

    Args:
        value: Value to round
        decimals: Number of decimal places

    Returns:
        Rounded value; NaN and infinities pass through unchanged

    Examples:
        >>> round_half_up(2.345)
        2.35
        >>> round_half_up(round_half_up(2.345))
        2.35
        >>> round_half_up(-2.345)
        -2.34
    """
    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-decimals)
    rounding = ROUND_HALF_UP if value >= 0 else ROUND_HALF_DOWN
    return float(Decimal(repr(value)).quantize(quantum, rounding=rounding))


def round_percentage(ratio: float) -> float:
    """Convert a ratio to a percentage rounded to two decimals.

    Args:
        ratio: Fractional value, e.g. 0.1234

    Returns:
        Percentage, e.g. 12.34; NaN stays NaN
    """
    return round_half_up(ratio * HUNDRED)


def pnl_percentage(proceeds: float, entry_price: float, shares: int) -> float:
    """Calculate realized P&L relative to the entry notional.

    Args:
        proceeds: Net exit proceeds after commission and tax
        entry_price: Fill price at entry
        shares: Number of shares held

    Returns:
        P&L in percent, rounded to two decimals
    """
    notional = entry_price * shares
    if notional <= ZERO:
        return ZERO
    return round_half_up((proceeds / notional - ONE) * HUNDRED)
