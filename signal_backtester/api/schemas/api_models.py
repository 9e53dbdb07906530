"""
Pydantic schemas for API request/response models.
"""

import datetime

from pydantic import BaseModel, Field, field_validator

from signal_backtester.core.constants import (
    DEFAULT_COMMISSION_RATE,
    DEFAULT_EMA_LONG_PERIOD,
    DEFAULT_EMA_SHORT_PERIOD,
    DEFAULT_INITIAL_CAPITAL,
    DEFAULT_RSI_OVERBOUGHT,
    DEFAULT_RSI_OVERSOLD,
    DEFAULT_RSI_PERIOD,
    DEFAULT_SMA_LONG_WINDOW,
    DEFAULT_SMA_SHORT_WINDOW,
    DEFAULT_STOP_LOSS_PERCENTAGE,
    DEFAULT_TAKE_PROFIT_PERCENTAGE,
    DEFAULT_TAX_RATE,
    DEFAULT_VWMA_PERIOD,
)
from signal_backtester.core.enums import IndicatorFamily, StrategyType, TradingMode
from signal_backtester.core.models.price import PricePoint
from signal_backtester.core.models.strategy_config import StrategyConfig


class PricePointModel(BaseModel):
    """One day of the submitted price series."""

    date: datetime.date
    close: float = Field(..., gt=0, description="Closing price")
    volume: float = Field(default=0.0, ge=0, description="Traded volume")

    def to_price_point(self) -> PricePoint:
        return PricePoint(date=self.date, close=self.close, volume=self.volume)


class StrategyConfigModel(BaseModel):
    """Strategy configuration accepted by the backtest endpoints."""

    indicators: list[IndicatorFamily] = Field(
        default_factory=lambda: [IndicatorFamily.SMA, IndicatorFamily.RSI],
        description="Enabled indicator families (KD is accepted for STOCH)",
    )
    sma_short_window: int = Field(default=DEFAULT_SMA_SHORT_WINDOW, gt=0)
    sma_long_window: int = Field(default=DEFAULT_SMA_LONG_WINDOW, gt=0)
    ema_short_period: int = Field(default=DEFAULT_EMA_SHORT_PERIOD, gt=0)
    ema_long_period: int = Field(default=DEFAULT_EMA_LONG_PERIOD, gt=0)
    rsi_period: int = Field(default=DEFAULT_RSI_PERIOD, gt=0)
    rsi_overbought: float = Field(default=DEFAULT_RSI_OVERBOUGHT, ge=0, le=100)
    rsi_oversold: float = Field(default=DEFAULT_RSI_OVERSOLD, ge=0, le=100)
    vwma_period: int = Field(default=DEFAULT_VWMA_PERIOD, gt=0)
    stop_loss_percentage: float = Field(default=DEFAULT_STOP_LOSS_PERCENTAGE, ge=0)
    take_profit_percentage: float = Field(default=DEFAULT_TAKE_PROFIT_PERCENTAGE, ge=0)
    commission_rate: float = Field(default=DEFAULT_COMMISSION_RATE, ge=0, lt=1)
    tax_rate: float = Field(default=DEFAULT_TAX_RATE, ge=0, lt=1)
    initial_capital: float = Field(default=DEFAULT_INITIAL_CAPITAL, gt=0)
    trading_mode: TradingMode = Field(default=TradingMode.LONG_ONLY)
    strategy_type: StrategyType = Field(default=StrategyType.CUSTOM)

    @field_validator("indicators", mode="before")
    @classmethod
    def parse_indicators(cls, v: object) -> object:
        """Accept family names case-insensitively."""
        if isinstance(v, list):
            return [
                IndicatorFamily.from_string(item) if isinstance(item, str) else item for item in v
            ]
        return v

    @field_validator("rsi_oversold")
    @classmethod
    def validate_rsi_band(cls, v: float, info) -> float:
        """Validate that oversold is below overbought."""
        if "rsi_overbought" in info.data and v >= info.data["rsi_overbought"]:
            raise ValueError("rsi_oversold must be below rsi_overbought")
        return v

    @field_validator("sma_long_window")
    @classmethod
    def validate_sma_windows(cls, v: int, info) -> int:
        """Validate that the long SMA window is not shorter than the short one."""
        if "sma_short_window" in info.data and v < info.data["sma_short_window"]:
            raise ValueError("sma_long_window must be >= sma_short_window")
        return v

    def to_config(self) -> StrategyConfig:
        """Convert to the engine configuration."""
        return StrategyConfig(**self.model_dump())


class BacktestRequest(BaseModel):
    """Request model for backtest and optimizer runs."""

    series: list[PricePointModel] = Field(..., description="Daily price series")
    config: StrategyConfigModel = Field(default_factory=StrategyConfigModel)

    def to_series(self) -> list[PricePoint]:
        return [point.to_price_point() for point in self.series]


class PresetsResponse(BaseModel):
    """Response model for the preset catalog."""

    presets: list[dict]


class ErrorResponse(BaseModel):
    """Response model for errors."""

    error: str
    message: str
