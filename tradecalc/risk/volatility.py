"""Variance-based volatility metrics over a price history.

Prices are ordered oldest first. Returns are simple returns
`(p[i+1] - p[i]) / p[i]`; volatility is their population standard deviation.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Sequence

VOLATILITY_SPIKE_THRESHOLD = Decimal("0.02")  # 2% move between consecutive prices
MARKET_STRESS_THRESHOLD = Decimal("0.05")  # 5% return volatility


def simple_returns(prices: Sequence[Decimal]) -> list[Decimal]:
    """Period-over-period simple returns.

    Raises:
        ValueError: If any price used as a base is not positive
    """
    returns = []
    for previous, current in zip(prices, prices[1:]):
        if previous <= 0:
            raise ValueError(f"Prices must be positive to compute returns, got {previous}")
        returns.append((current - previous) / previous)
    return returns


def return_volatility(prices: Sequence[Decimal]) -> Decimal:
    """Population standard deviation of simple returns (0 with < 2 prices)."""
    returns = simple_returns(prices)
    if not returns:
        return Decimal("0")

    mean = sum(returns, Decimal("0")) / len(returns)
    variance = sum(((r - mean) ** 2 for r in returns), Decimal("0")) / len(returns)
    return variance.sqrt()


def has_price_spike(prices: Sequence[Decimal], threshold: Decimal = VOLATILITY_SPIKE_THRESHOLD) -> bool:
    """True when the latest move exceeds threshold in either direction."""
    returns = simple_returns(prices)
    return bool(returns) and abs(returns[-1]) > threshold


def is_market_stressed(prices: Sequence[Decimal], threshold: Decimal = MARKET_STRESS_THRESHOLD) -> bool:
    return return_volatility(prices) > threshold
