from __future__ import annotations

import logging
from typing import Iterable

from tradecalc.errors import MarketDataError
from tradecalc.market_data.interfaces import PriceProvider
from tradecalc.types import PriceQuote

logger = logging.getLogger(__name__)


class FallbackPriceProvider:
    """Tries a live provider, substitutes a snapshot provider on failure.

    The substitution is never silent: it is logged, and every returned quote
    keeps the fallback's `source` tag and timestamp.
    """

    def __init__(self, primary: PriceProvider, fallback: PriceProvider) -> None:
        self.primary = primary
        self.fallback = fallback

    def fetch_prices(self, symbols: Iterable[str]) -> dict[str, PriceQuote]:
        wanted = list(symbols)
        try:
            return self.primary.fetch_prices(wanted)
        except MarketDataError as exc:
            logger.warning(f"Live prices unavailable ({exc}); using snapshot prices")
        return self.fallback.fetch_prices(wanted)
