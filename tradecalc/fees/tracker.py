"""Fee tracking and reporting.

Accumulates `FeeQuote`s produced by a `FeeCalculator` so a caller can report
totals per symbol/exchange and the savings from discounts.
"""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import Optional

from tradecalc.types import FeeQuote


class FeeTracker:
    """Records fee quotes for one session.

    Owned by the caller; nothing in the calculators writes to it.
    """

    def __init__(self) -> None:
        """Initialize an empty tracker."""
        self._fees: list[FeeQuote] = []
        self._by_symbol: dict[str, list[FeeQuote]] = defaultdict(list)
        self._by_exchange: dict[str, list[FeeQuote]] = defaultdict(list)

    def record(self, quote: FeeQuote) -> FeeQuote:
        """Track a fee quote and return it unchanged."""
        self._fees.append(quote)
        if quote.symbol:
            self._by_symbol[quote.symbol].append(quote)
        if quote.exchange:
            self._by_exchange[quote.exchange].append(quote)
        return quote

    @property
    def last(self) -> Optional[FeeQuote]:
        return self._fees[-1] if self._fees else None

    def all_fees(self) -> list[FeeQuote]:
        return list(self._fees)

    def total_fees(self) -> Decimal:
        return sum((q.fee for q in self._fees), Decimal("0"))

    def total_for_symbol(self, symbol: str) -> Decimal:
        return sum((q.fee for q in self._by_symbol.get(symbol, ())), Decimal("0"))

    def total_for_exchange(self, exchange: str) -> Decimal:
        return sum((q.fee for q in self._by_exchange.get(exchange, ())), Decimal("0"))

    def total_discount_savings(self) -> Decimal:
        return sum((q.discount_savings for q in self._fees), Decimal("0"))

    def average_rate(self) -> Decimal:
        """Mean effective rate across all tracked fees (0 when empty)."""
        if not self._fees:
            return Decimal("0")
        return sum((q.effective_rate for q in self._fees), Decimal("0")) / len(self._fees)

    def fees_by_symbol(self) -> dict[str, Decimal]:
        """Report of total fee paid per symbol."""
        return {symbol: sum((q.fee for q in quotes), Decimal("0")) for symbol, quotes in self._by_symbol.items()}
