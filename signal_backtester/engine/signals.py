"""
Signal scoring.

Converts one day's indicator values into a weighted bull/bear consensus.
Each enabled family with defined values is "active" and may cast a bull
vote, a bear vote, or (RSI inside its band) no vote at all.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass

from signal_backtester.core.constants import (
    CONSENSUS_THRESHOLD,
    RSI_VOTE_WEIGHT,
    SINGLE_FAMILY_THRESHOLD,
    STOCH_VOTE_WEIGHT,
    TREND_VOTE_WEIGHT,
)
from signal_backtester.core.enums import IndicatorFamily
from signal_backtester.core.models.strategy_config import StrategyConfig

Bar = Mapping[str, float]


def _defined(*values: float | None) -> bool:
    return all(value is not None and not math.isnan(value) for value in values)


@dataclass(frozen=True)
class Vote:
    """Weighted vote cast by one active family."""

    family: IndicatorFamily
    bull: float = 0.0
    bear: float = 0.0


@dataclass(frozen=True)
class SignalConsensus:
    """Aggregated votes for one day.

    ``is_bull`` and ``is_bear`` are evaluated independently against the
    same threshold, so both can be false.
    """

    bull_score: float
    bear_score: float
    active_families: int

    @property
    def threshold(self) -> float:
        """Consensus ratio needed for a signal."""
        return SINGLE_FAMILY_THRESHOLD if self.active_families == 1 else CONSENSUS_THRESHOLD

    @property
    def bull_ratio(self) -> float:
        """Bull score per active family (0 when nothing is active)."""
        return self.bull_score / self.active_families if self.active_families else 0.0

    @property
    def bear_ratio(self) -> float:
        """Bear score per active family (0 when nothing is active)."""
        return self.bear_score / self.active_families if self.active_families else 0.0

    @property
    def is_bull(self) -> bool:
        return self.active_families > 0 and self.bull_ratio >= self.threshold

    @property
    def is_bear(self) -> bool:
        return self.active_families > 0 and self.bear_ratio >= self.threshold


class SignalScorer:
    """Scores a bar of indicator values against a strategy configuration."""

    def __init__(self, config: StrategyConfig):
        self.config = config
        self._families = config.voting_families

    def vote(self, family: IndicatorFamily, bar: Bar) -> Vote | None:
        """
        Cast the vote of one family, or None if its values are undefined.

        Args:
            family: Voting indicator family
            bar: Indicator values of a single day

        Returns:
            The family's vote, or None when the family is not active
        """
        match family:
            case IndicatorFamily.SMA:
                return self._cross_vote(family, bar.get("sma_short"), bar.get("sma_long"))
            case IndicatorFamily.EMA:
                return self._cross_vote(family, bar.get("ema_short"), bar.get("ema_long"))
            case IndicatorFamily.MACD:
                return self._cross_vote(family, bar.get("macd_histogram"), 0.0)
            case IndicatorFamily.VWMA:
                return self._cross_vote(family, bar.get("close"), bar.get("vwma"))
            case IndicatorFamily.RSI:
                return self._rsi_vote(bar.get("rsi"))
            case IndicatorFamily.STOCH:
                return self._stochastic_vote(bar.get("stoch_k"), bar.get("stoch_d"))
        return None

    def score(self, bar: Bar) -> SignalConsensus:
        """Aggregate the votes of every enabled family for one day."""
        bull = bear = 0.0
        active = 0
        for family in self._families:
            cast = self.vote(family, bar)
            if cast is None:
                continue
            active += 1
            bull += cast.bull
            bear += cast.bear
        return SignalConsensus(bull_score=bull, bear_score=bear, active_families=active)

    @staticmethod
    def _cross_vote(family: IndicatorFamily, fast: float | None, slow: float | None) -> Vote | None:
        if not _defined(fast, slow):
            return None
        if fast > slow:
            return Vote(family, bull=TREND_VOTE_WEIGHT)
        return Vote(family, bear=TREND_VOTE_WEIGHT)

    def _rsi_vote(self, rsi: float | None) -> Vote | None:
        if not _defined(rsi):
            return None
        if rsi < self.config.rsi_oversold:
            return Vote(IndicatorFamily.RSI, bull=RSI_VOTE_WEIGHT)
        if rsi > self.config.rsi_overbought:
            return Vote(IndicatorFamily.RSI, bear=RSI_VOTE_WEIGHT)
        return Vote(IndicatorFamily.RSI)

    @staticmethod
    def _stochastic_vote(k: float | None, d: float | None) -> Vote | None:
        if not _defined(k, d):
            return None
        if k > d:
            return Vote(IndicatorFamily.STOCH, bull=STOCH_VOTE_WEIGHT)
        return Vote(IndicatorFamily.STOCH, bear=STOCH_VOTE_WEIGHT)
