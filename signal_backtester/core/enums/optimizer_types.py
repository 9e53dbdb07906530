"""
Preset optimizer enumerations.
"""

from enum import StrEnum


class FrequencyTier(StrEnum):
    """Expected trading frequency of a preset."""

    HIGH = "HIGH"
    MID = "MID"
    LOW = "LOW"

    @property
    def style(self) -> str:
        """Get the human-readable trading style for the tier."""
        styles = {
            FrequencyTier.HIGH: "high-frequency trading",
            FrequencyTier.MID: "swing trading",
            FrequencyTier.LOW: "long-term holding",
        }
        return styles[self]


class PresetStatus(StrEnum):
    """Outcome of a preset in the optimizer ranking."""

    OPTIMAL = "OPTIMAL"
    REJECTED = "REJECTED"
