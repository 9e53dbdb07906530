"""
Unit tests for signal scoring.
"""

import math

import pytest

from signal_backtester.core.enums import IndicatorFamily
from signal_backtester.core.models.strategy_config import StrategyConfig
from signal_backtester.engine.signals import SignalConsensus, SignalScorer

NAN = math.nan


def scorer_for(*families: IndicatorFamily) -> SignalScorer:
    return SignalScorer(StrategyConfig(indicators=set(families)))


class TestSignalScorer:
    """Test suite for SignalScorer votes and consensus."""

    def test_should_be_bullish_on_single_sma_cross(self) -> None:
        """Test that one active family needs a 0.9 ratio, reached by a full vote."""
        consensus = scorer_for(IndicatorFamily.SMA).score({"sma_short": 11.0, "sma_long": 10.0})

        assert consensus.active_families == 1
        assert consensus.threshold == 0.9
        assert consensus.is_bull
        assert not consensus.is_bear

    def test_should_be_bearish_when_short_average_not_above_long(self) -> None:
        consensus = scorer_for(IndicatorFamily.EMA).score({"ema_short": 10.0, "ema_long": 10.0})

        assert consensus.is_bear
        assert not consensus.is_bull

    def test_should_ignore_undefined_families(self) -> None:
        """Test that a family with NaN inputs is not active."""
        scorer = scorer_for(IndicatorFamily.SMA, IndicatorFamily.MACD)

        consensus = scorer.score({"sma_short": NAN, "sma_long": 10.0, "macd_histogram": 0.5})

        assert consensus.active_families == 1
        assert consensus.is_bull

    def test_should_produce_no_signal_without_active_families(self) -> None:
        consensus = scorer_for(IndicatorFamily.SMA).score({"sma_short": NAN, "sma_long": NAN})

        assert consensus.active_families == 0
        assert consensus.bull_ratio == 0.0
        assert not consensus.is_bull
        assert not consensus.is_bear

    def test_should_count_neutral_rsi_as_active_without_vote(self) -> None:
        """Test that RSI inside its band dilutes the consensus."""
        scorer = scorer_for(IndicatorFamily.SMA, IndicatorFamily.RSI)

        consensus = scorer.score({"sma_short": 11.0, "sma_long": 10.0, "rsi": 50.0})

        assert consensus.active_families == 2
        assert consensus.bull_ratio == pytest.approx(0.5)
        assert consensus.threshold == 0.35
        assert consensus.is_bull

    def test_should_not_signal_on_neutral_rsi_alone(self) -> None:
        consensus = scorer_for(IndicatorFamily.RSI).score({"rsi": 50.0})

        assert consensus.active_families == 1
        assert not consensus.is_bull
        assert not consensus.is_bear

    @pytest.mark.parametrize(
        ("rsi", "bull", "bear"), [(25.0, 1.2, 0.0), (75.0, 0.0, 1.2), (30.0, 0.0, 0.0)]
    )
    def test_should_weight_rsi_extremes(self, rsi: float, bull: float, bear: float) -> None:
        vote = scorer_for(IndicatorFamily.RSI).vote(IndicatorFamily.RSI, {"rsi": rsi})

        assert vote is not None
        assert (vote.bull, vote.bear) == (bull, bear)

    def test_should_weight_stochastic_cross(self) -> None:
        scorer = scorer_for(IndicatorFamily.STOCH)

        up = scorer.vote(IndicatorFamily.STOCH, {"stoch_k": 60.0, "stoch_d": 55.0})
        down = scorer.vote(IndicatorFamily.STOCH, {"stoch_k": 40.0, "stoch_d": 55.0})

        assert (up.bull, up.bear) == (0.8, 0.0)
        assert (down.bull, down.bear) == (0.0, 0.8)

    def test_should_compare_close_with_vwma(self) -> None:
        scorer = scorer_for(IndicatorFamily.VWMA)

        assert scorer.score({"close": 101.0, "vwma": 100.0}).is_bull
        assert scorer.score({"close": 99.0, "vwma": 100.0}).is_bear

    def test_should_evaluate_bull_and_bear_independently(self) -> None:
        """Test that mixed votes can satisfy both thresholds at once."""
        scorer = scorer_for(IndicatorFamily.SMA, IndicatorFamily.RSI)

        consensus = scorer.score({"sma_short": 9.0, "sma_long": 10.0, "rsi": 20.0})

        assert consensus.bull_ratio == pytest.approx(0.6)
        assert consensus.bear_ratio == pytest.approx(0.5)
        assert consensus.is_bull
        assert consensus.is_bear

    def test_should_never_count_atr_as_voter(self) -> None:
        consensus = scorer_for(IndicatorFamily.ATR).score({"atr": 1.5, "close": 10.0})

        assert consensus.active_families == 0
        assert not consensus.is_bull


class TestSignalConsensus:
    """Test suite for SignalConsensus thresholds."""

    def test_should_require_high_ratio_for_single_family(self) -> None:
        consensus = SignalConsensus(bull_score=0.8, bear_score=0.0, active_families=1)

        assert not consensus.is_bull

    def test_should_use_consensus_threshold_for_several_families(self) -> None:
        consensus = SignalConsensus(bull_score=0.8, bear_score=1.0, active_families=2)

        assert consensus.is_bull
        assert consensus.is_bear
