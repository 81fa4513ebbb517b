"""Portfolio exposure, concentration and unrealized P&L."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Mapping, Sequence

from tradecalc.errors import InvalidInputError, MissingPriceError
from tradecalc.types import Position, PriceQuote, RiskReport

logger = logging.getLogger(__name__)


def _canonical(symbol: str) -> str:
    return symbol.strip().upper()


class RiskCalculator:
    """Computes a `RiskReport` for long positions against a price snapshot."""

    def compute_risk(self, positions: Sequence[Position], prices: Mapping[str, PriceQuote]) -> RiskReport:
        """Compute exposure metrics for positions at current prices.

        Args:
            positions: Caller-owned positions (not modified)
            prices: Quotes keyed by symbol; symbols on both sides are
                matched case-insensitively and reported upper-cased

        Returns:
            RiskReport with total and per-asset exposure, concentration ratio
            and unrealized P&L

        Raises:
            MissingPriceError: If any position symbol has no quote (lists
                every missing symbol; no partial report is produced)
            InvalidInputError: If a quantity or entry price is negative
        """
        quotes = {_canonical(symbol): quote for symbol, quote in prices.items()}
        symbols = [_canonical(p.symbol) for p in positions]

        missing = [symbol for symbol in symbols if symbol not in quotes]
        if missing:
            raise MissingPriceError(missing)

        for p in positions:
            if p.quantity < 0:
                raise InvalidInputError(f"Position quantity cannot be negative: {p.symbol} {p.quantity}")
            if p.entry_price < 0:
                raise InvalidInputError(f"Entry price cannot be negative: {p.symbol} {p.entry_price}")

        per_asset: dict[str, Decimal] = {}
        unrealized = Decimal("0")

        for symbol, p in zip(symbols, positions):
            price = quotes[symbol].price
            per_asset[symbol] = per_asset.get(symbol, Decimal("0")) + p.quantity * price
            unrealized += p.quantity * (price - p.entry_price)

        total = sum(per_asset.values(), Decimal("0"))

        largest_symbol = max(per_asset, key=per_asset.__getitem__) if per_asset else None
        if total == 0:
            concentration = Decimal("0")
        else:
            concentration = per_asset[largest_symbol] / total

        stale = sorted({symbol for symbol in symbols if quotes[symbol].source != "live"})
        if stale:
            logger.info(f"Risk computed with snapshot prices for: {', '.join(stale)}")

        return RiskReport(
            total_exposure=total,
            per_asset_exposure=per_asset,
            concentration_ratio=concentration,
            unrealized_pnl=unrealized,
            largest_symbol=largest_symbol,
        )
