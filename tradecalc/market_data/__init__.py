"""Market data: current prices from a live ticker or a configured snapshot."""

from tradecalc.market_data.fallback import FallbackPriceProvider
from tradecalc.market_data.ticker import HttpPriceProvider
from tradecalc.market_data.interfaces import PriceProvider
from tradecalc.market_data.payloads import PriceEntry, parse_quotes
from tradecalc.market_data.static import StaticPriceProvider

__all__ = [
    "PriceProvider",
    "HttpPriceProvider",
    "StaticPriceProvider",
    "FallbackPriceProvider",
    "PriceEntry",
    "parse_quotes",
]
