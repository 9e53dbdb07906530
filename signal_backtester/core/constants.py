"""
Core constants and limits.

Defines the fixed parameters of the indicator pipeline, the trade
simulation rules and the preset optimizer scoring.
"""

# Calendar
TRADING_DAYS_PER_YEAR = 252  # Annualization factor for daily Sharpe
MIN_SIMULATION_BARS = 2  # Seed day plus at least one simulated day

# Strategy Defaults
DEFAULT_INITIAL_CAPITAL = 1_000_000.0
DEFAULT_COMMISSION_RATE = 0.001425  # Broker commission per side
DEFAULT_TAX_RATE = 0.003  # Transaction tax charged on exit only
DEFAULT_STOP_LOSS_PERCENTAGE = 10.0
DEFAULT_TAKE_PROFIT_PERCENTAGE = 20.0
DEFAULT_SMA_SHORT_WINDOW = 5
DEFAULT_SMA_LONG_WINDOW = 20
DEFAULT_EMA_SHORT_PERIOD = 12
DEFAULT_EMA_LONG_PERIOD = 26
DEFAULT_RSI_PERIOD = 14
DEFAULT_RSI_OVERBOUGHT = 70.0
DEFAULT_RSI_OVERSOLD = 30.0
DEFAULT_VWMA_PERIOD = 20

# Fixed Indicator Parameters
MACD_FAST_PERIOD = 12
MACD_SLOW_PERIOD = 26
MACD_SIGNAL_PERIOD = 9
STOCH_PERIOD = 9
STOCH_SEED = 50.0  # Seed for K/D and raw value of a flat range
STOCH_SMOOTHING = 1 / 3  # Weight on the new sample
ATR_PERIOD = 14

# Signal Scoring
TREND_VOTE_WEIGHT = 1.0  # SMA / EMA / MACD / VWMA
RSI_VOTE_WEIGHT = 1.2
STOCH_VOTE_WEIGHT = 0.8
SINGLE_FAMILY_THRESHOLD = 0.9  # Consensus needed when only one family is active
CONSENSUS_THRESHOLD = 0.35

# Position Management
POSITION_SIZING_RATIO = 0.95  # Share of cash committed on entry
ATR_TRAILING_MULTIPLIER = 2.5

# Metrics
SHARPE_STDEV_EPSILON = 1e-6  # Below this the Sharpe ratio is undefined

# Optimizer Scoring
UNDEFINED_SHARPE_SCORE = -999.0
LOW_TRADE_COUNT = 5
MODERATE_TRADE_COUNT = 10
LOW_TRADE_PENALTY = 0.5
MODERATE_TRADE_PENALTY = 0.8
SEVERE_DRAWDOWN_RATIO = 0.40
SEVERE_DRAWDOWN_PENALTY = 0.6

# Optimizer Rejection Rules
MIN_QUALIFYING_TRADES = 10
MAX_ACCEPTABLE_DRAWDOWN_RATIO = 0.30
UNDERPERFORMANCE_RATIO = 0.5
