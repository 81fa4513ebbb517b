from __future__ import annotations

from typing import Iterable, Protocol

from tradecalc.types import PriceQuote


class PriceProvider(Protocol):
    """Fetches the current price for each requested symbol."""

    def fetch_prices(self, symbols: Iterable[str]) -> dict[str, PriceQuote]:
        raise NotImplementedError
