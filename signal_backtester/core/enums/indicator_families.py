"""
Indicator family enumerations.

Each member names one technical indicator family that a strategy can
enable and that casts at most one vote per simulated day.
"""

from enum import StrEnum


class IndicatorFamily(StrEnum):
    """
    Supported indicator families.

    ATR never votes; it only drives the trailing stop.
    """

    SMA = "SMA"
    EMA = "EMA"
    RSI = "RSI"
    MACD = "MACD"
    STOCH = "STOCH"  # Stochastic K/D
    VWMA = "VWMA"
    ATR = "ATR"

    @property
    def is_voting(self) -> bool:
        """Check if the family takes part in the signal consensus."""
        return self != self.ATR

    @property
    def columns(self) -> tuple[str, ...]:
        """Get the enriched series columns produced for this family."""
        family_columns = {
            IndicatorFamily.SMA: ("sma_short", "sma_long"),
            IndicatorFamily.EMA: ("ema_short", "ema_long"),
            IndicatorFamily.RSI: ("rsi",),
            IndicatorFamily.MACD: ("ema_fast", "ema_slow", "macd", "macd_signal", "macd_histogram"),
            IndicatorFamily.STOCH: ("stoch_k", "stoch_d"),
            IndicatorFamily.VWMA: ("vwma",),
            IndicatorFamily.ATR: ("atr",),
        }
        return family_columns[self]

    @classmethod
    def from_string(cls, value: str) -> "IndicatorFamily":
        """
        Convert a case-insensitive name to an indicator family.

        Args:
            value: Family name such as "sma" or "KD"

        Returns:
            Matching IndicatorFamily

        Raises:
            ValueError: If the name is not a known family
        """
        normalized = value.strip().upper()
        if normalized == "KD":
            return cls.STOCH
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unsupported indicator family: {value}") from None
