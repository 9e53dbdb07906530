"""
Strategy preset models for the optimizer catalog.
"""

from dataclasses import dataclass, replace
from typing import TypeVar

from signal_backtester.core.enums import FrequencyTier, IndicatorFamily

from .strategy_config import StrategyConfig


@dataclass(frozen=True)
class IndicatorOverrides:
    """Indicator sub-config that a preset forces over the base config.

    ``indicators`` replaces the enabled families entirely. Window and
    threshold fields left as None keep the base config value.
    """

    indicators: frozenset[IndicatorFamily]
    stop_loss_percentage: float
    sma_short_window: int | None = None
    sma_long_window: int | None = None
    ema_short_period: int | None = None
    ema_long_period: int | None = None
    rsi_period: int | None = None
    rsi_overbought: float | None = None
    rsi_oversold: float | None = None
    vwma_period: int | None = None

    def apply_to(self, base: StrategyConfig) -> StrategyConfig:
        """Build the effective config for this preset."""
        return replace(
            base,
            indicators=self.indicators,
            stop_loss_percentage=self.stop_loss_percentage,
            sma_short_window=_pick(self.sma_short_window, base.sma_short_window),
            sma_long_window=_pick(self.sma_long_window, base.sma_long_window),
            ema_short_period=_pick(self.ema_short_period, base.ema_short_period),
            ema_long_period=_pick(self.ema_long_period, base.ema_long_period),
            rsi_period=_pick(self.rsi_period, base.rsi_period),
            rsi_overbought=_pick(self.rsi_overbought, base.rsi_overbought),
            rsi_oversold=_pick(self.rsi_oversold, base.rsi_oversold),
            vwma_period=_pick(self.vwma_period, base.vwma_period),
        )


T = TypeVar("T")


def _pick(override: T | None, base: T) -> T:
    return base if override is None else override


@dataclass(frozen=True)
class StrategyPreset:
    """Immutable catalog entry evaluated by the optimizer.

    ``indicators`` and ``role_description`` are disclosed verbatim in the
    decision log so every ranked preset can be audited.
    """

    name: str
    frequency: FrequencyTier
    logic_type: str
    overrides: IndicatorOverrides
    indicators: tuple[str, ...]
    role_description: str

    def build_config(self, base: StrategyConfig) -> StrategyConfig:
        """Apply this preset's overrides to a base config."""
        return self.overrides.apply_to(base)

    def to_dict(self) -> dict:
        """Convert preset to dictionary."""
        return {
            "name": self.name,
            "frequency": self.frequency.value,
            "logic_type": self.logic_type,
            "indicators": list(self.indicators),
            "role_description": self.role_description,
            "families": sorted(family.value for family in self.overrides.indicators),
            "stop_loss_percentage": self.overrides.stop_loss_percentage,
        }
