"""Risk module.

Exposure/concentration reporting, exposure limits, and volatility helpers.
"""

from .calculator import RiskCalculator
from .limits import ExposureChecker, ExposureLimits
from .volatility import has_price_spike, is_market_stressed, return_volatility, simple_returns

__all__ = [
    # Reporting
    "RiskCalculator",
    # Limits
    "ExposureLimits",
    "ExposureChecker",
    # Volatility
    "simple_returns",
    "return_volatility",
    "has_price_spike",
    "is_market_stressed",
]
