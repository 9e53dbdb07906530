"""
Trading mode enumerations.

This module defines the declared trading modes and the strategy selection
types for the backtesting engine.
"""

from enum import StrEnum


class TradingMode(StrEnum):
    """
    Declared trading modes.

    The simulation only ever opens long positions. Short and bidirectional
    modes are accepted in configuration but behave exactly like LONG_ONLY.
    """

    LONG_ONLY = "LONG_ONLY"
    SHORT_ONLY = "SHORT_ONLY"
    BOTH = "BOTH"

    @property
    def is_simulated(self) -> bool:
        """Check if the simulation honours this mode as declared."""
        return self == self.LONG_ONLY


class StrategyType(StrEnum):
    """
    Strategy selection.

    CUSTOM runs the configured indicator families once, AUTO_CONFIG scans
    the preset catalog and keeps the best scoring preset.
    """

    CUSTOM = "CUSTOM"
    AUTO_CONFIG = "AUTO_CONFIG"

    @property
    def is_auto(self) -> bool:
        """Check if the strategy type delegates to the preset optimizer."""
        return self == self.AUTO_CONFIG
