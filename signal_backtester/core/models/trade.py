"""
Trade domain model.
Optimized for high-performance backtesting with float operations.
"""

from dataclasses import dataclass
from datetime import date

from signal_backtester.core.enums import ExitReason, PositionType, TradeStatus
from signal_backtester.core.exceptions.backtest import ValidationError
from signal_backtester.core.types.financial import pnl_percentage, round_half_up


@dataclass
class Trade:
    """A round trip from entry fill to exit fill.

    The trade is created OPEN at entry and closed exactly once. Realized
    P&L and exit fields stay None until the trade is closed.
    """

    id: str
    entry_date: date
    entry_price: float
    shares: int
    position_type: PositionType = PositionType.LONG
    status: TradeStatus = TradeStatus.OPEN
    exit_date: date | None = None
    exit_price: float | None = None
    pnl: float | None = None
    exit_reason: ExitReason | None = None
    fees: float = 0.0
    tax: float = 0.0

    def __post_init__(self) -> None:
        """Validate trade data after initialization."""
        if self.shares <= 0:
            raise ValidationError(f"Shares must be positive, got {self.shares}")
        if self.entry_price <= 0:
            raise ValidationError(f"Entry price must be positive, got {self.entry_price}")
        if self.fees < 0:
            raise ValidationError(f"Fees must be non-negative, got {self.fees}")

    @property
    def is_open(self) -> bool:
        """Check if the trade still holds a position."""
        return self.status == TradeStatus.OPEN

    @property
    def is_winner(self) -> bool:
        """Check if the trade closed with a positive realized P&L."""
        return self.status == TradeStatus.CLOSED and (self.pnl or 0.0) > 0

    def close(
        self,
        exit_date: date,
        exit_price: float,
        proceeds: float,
        reason: ExitReason,
        exit_fee: float,
        tax: float,
    ) -> None:
        """Close the trade.

        Args:
            exit_date: Date of the exit fill
            exit_price: Exit fill price
            proceeds: Net proceeds after commission and tax
            reason: Rule that triggered the exit
            exit_fee: Commission paid on exit
            tax: Transaction tax paid on exit

        Raises:
            ValidationError: If the trade is already closed
        """
        if not self.is_open:
            raise ValidationError(f"Trade {self.id} is already closed")

        self.exit_date = exit_date
        self.exit_price = exit_price
        self.pnl = pnl_percentage(proceeds, self.entry_price, self.shares)
        self.exit_reason = reason
        self.fees += exit_fee
        self.tax += tax
        self.status = TradeStatus.CLOSED

    def to_dict(self) -> dict:
        """Convert trade to dictionary."""
        return {
            "id": self.id,
            "entry_date": self.entry_date.isoformat(),
            "entry_price": self.entry_price,
            "shares": self.shares,
            "position_type": self.position_type.value,
            "status": self.status.value,
            "exit_date": self.exit_date.isoformat() if self.exit_date else None,
            "exit_price": self.exit_price,
            "pnl": self.pnl,
            "exit_reason": self.exit_reason.value if self.exit_reason else None,
            "fees": round_half_up(self.fees),
            "tax": round_half_up(self.tax),
        }
