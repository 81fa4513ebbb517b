"""Price payload parsing.

Accepted shapes, both from the HTTP ticker and from snapshot files:

- a list of `{"symbol": ..., "price": ..., "timestamp": ...}` objects
- a single such object
- `{"prices": [...]}`

`timestamp` is optional and may be epoch seconds, epoch milliseconds or an
ISO-8601 string.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from tradecalc.errors import MarketDataError
from tradecalc.types import PriceQuote, QuoteSource


class PriceEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    symbol: str = Field(min_length=1)
    price: Decimal = Field(gt=0)
    timestamp: Optional[datetime] = None

    @field_validator("symbol")
    @classmethod
    def _normalize_symbol(cls, value: str) -> str:
        s = value.strip().upper()
        if not s:
            raise ValueError("symbol is required")
        return s


def _entries(payload: Any) -> list[Any]:
    if isinstance(payload, dict) and "prices" in payload:
        payload = payload["prices"]
    if isinstance(payload, dict):
        return [payload]
    if isinstance(payload, list):
        return payload
    raise MarketDataError(f"Unexpected price payload type: {type(payload).__name__}")


def parse_quotes(
    payload: Any,
    *,
    source: QuoteSource,
    default_timestamp: datetime,
    symbols: Optional[Iterable[str]] = None,
) -> dict[str, PriceQuote]:
    """Validate a price payload and build quotes keyed by symbol.

    Args:
        payload: Decoded JSON/YAML document
        source: Tag stored on every quote ("live" or "snapshot")
        default_timestamp: Used for entries without a timestamp
        symbols: When given, only these symbols are kept

    Raises:
        MarketDataError: If the payload shape or any entry is invalid, or a
            symbol appears more than once
    """
    wanted = {s.strip().upper() for s in symbols} if symbols is not None else None
    quotes: dict[str, PriceQuote] = {}
    seen: set[str] = set()

    for raw in _entries(payload):
        try:
            entry = PriceEntry.model_validate(raw)
        except ValidationError as exc:
            raise MarketDataError(f"Malformed price entry {raw!r}: {exc}") from exc

        if entry.symbol in seen:
            raise MarketDataError(f"Duplicate price entry for {entry.symbol}")
        seen.add(entry.symbol)
        if wanted is not None and entry.symbol not in wanted:
            continue

        timestamp = entry.timestamp or default_timestamp
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)

        quotes[entry.symbol] = PriceQuote(
            symbol=entry.symbol,
            price=entry.price,
            timestamp=timestamp,
            source=source,
        )

    return quotes
