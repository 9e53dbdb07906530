"""
Core type definitions and utilities.
"""

# Re-export financial utilities for easy access
from .financial import (
    HUNDRED,
    ONE,
    PERCENTAGE_DECIMALS,
    UNDEFINED,
    ZERO,
    is_undefined,
    pnl_percentage,
    round_half_up,
    round_percentage,
)

__all__ = [
    # Utility functions
    "is_undefined",
    "round_half_up",
    "round_percentage",
    "pnl_percentage",
    # Constants
    "PERCENTAGE_DECIMALS",
    "UNDEFINED",
    "ZERO",
    "ONE",
    "HUNDRED",
]
