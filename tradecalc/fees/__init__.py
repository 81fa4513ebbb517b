"""Fee schedules and fee calculation.

Tiered maker/taker rates resolved from 30-day volume, discount-token
handling, built-in exchange schedules, and fee tracking.
"""

from .calculator import FEE_PRECISION, FeeCalculator
from .presets import (
    BNB_PAYMENT_DISCOUNT,
    EXCHANGE_SCHEDULES,
    binance_spot_schedule,
    bybit_spot_schedule,
    calculator_for_exchange,
    coinbase_schedule,
    kraken_schedule,
    schedule_for_exchange,
)
from .schedule import FeeScheduleProvider, validate_tiers
from .tracker import FeeTracker

__all__ = [
    # Calculation
    "FEE_PRECISION",
    "FeeCalculator",
    # Schedules
    "FeeScheduleProvider",
    "validate_tiers",
    # Built-in exchanges
    "BNB_PAYMENT_DISCOUNT",
    "EXCHANGE_SCHEDULES",
    "binance_spot_schedule",
    "coinbase_schedule",
    "kraken_schedule",
    "bybit_spot_schedule",
    "schedule_for_exchange",
    "calculator_for_exchange",
    # Tracking
    "FeeTracker",
]
