from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from tradecalc.documents import load_document
from tradecalc.errors import ConfigError, MarketDataError
from tradecalc.market_data.payloads import parse_quotes
from tradecalc.types import PriceQuote

logger = logging.getLogger(__name__)


class StaticPriceProvider:
    """Serves prices from a JSON/YAML snapshot file.

    Entries without a timestamp are stamped with the file's modification
    time, so the caller can always tell how old a snapshot price is.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def fetch_prices(self, symbols: Iterable[str]) -> dict[str, PriceQuote]:
        wanted = sorted({s.strip().upper() for s in symbols if s and s.strip()})
        if not wanted:
            return {}

        try:
            payload = load_document(self.path)
            modified = datetime.fromtimestamp(self.path.stat().st_mtime, tz=timezone.utc)
        except (ConfigError, OSError) as exc:
            raise MarketDataError(f"Cannot load price snapshot {self.path}: {exc}") from exc

        quotes = parse_quotes(payload, source="snapshot", default_timestamp=modified, symbols=wanted)
        logger.debug(f"Loaded {len(quotes)} snapshot quotes from {self.path}")
        return quotes
