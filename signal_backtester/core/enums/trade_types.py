"""
Trade lifecycle enumerations.

This module defines position sides, trade status and exit reasons.
"""

from enum import StrEnum


class PositionType(StrEnum):
    """
    Position sides.

    Only LONG is ever opened by the simulation.
    """

    LONG = "LONG"
    SHORT = "SHORT"


class TradeStatus(StrEnum):
    """Trade lifecycle states."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"


class ExitReason(StrEnum):
    """
    Cause recorded when a trade is closed.

    Risk exits are evaluated in the order STOP_LOSS, TRAILING_STOP,
    TAKE_PROFIT, then STRATEGY (signal reversal).
    """

    STRATEGY = "STRATEGY"
    STOP_LOSS = "STOP_LOSS"
    TAKE_PROFIT = "TAKE_PROFIT"
    TRAILING_STOP = "TRAILING_STOP"
    FORCE_CLOSE = "FORCE_CLOSE"
