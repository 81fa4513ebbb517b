"""Error taxonomy.

Every failure surfaced by the calculators and providers derives from
`TradeCalcError`. The extra builtin bases keep callers that catch
`ValueError`/`RuntimeError`/`LookupError` working.
"""

from __future__ import annotations

from typing import Iterable


class TradeCalcError(Exception):
    """Base class for all tradecalc errors."""


class ConfigError(TradeCalcError, ValueError):
    """Malformed or invalid configuration (fee schedule, settings, documents)."""


class InvalidInputError(TradeCalcError, ValueError):
    """Caller-supplied input is out of range (negative amounts, volumes, ...)."""


class MarketDataError(TradeCalcError, RuntimeError):
    """Price fetch failed: transport error, timeout, or malformed payload."""


class MissingPriceError(TradeCalcError, LookupError):
    """A position references a symbol with no corresponding price quote."""

    def __init__(self, symbols: Iterable[str]) -> None:
        self.symbols = tuple(sorted(set(symbols)))
        super().__init__(f"No price quote for: {', '.join(self.symbols)}")
