"""HTTP price-ticker client.

Defaults to the Binance public `ticker/price` endpoint (no API key). A single
blocking GET per call; no retries. Callers decide whether to retry or fall
back to a snapshot.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional

import requests

from tradecalc.errors import MarketDataError
from tradecalc.market_data.payloads import parse_quotes
from tradecalc.types import PriceQuote

logger = logging.getLogger(__name__)


class HttpPriceProvider:
    """Fetches live prices from a JSON price-ticker endpoint."""

    DEFAULT_URL = "https://api.binance.com/api/v3/ticker/price"
    DEFAULT_TIMEOUT = 10  # seconds

    def __init__(
        self,
        url: str = DEFAULT_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": "tradecalc/0.1",
        })

    def fetch_prices(self, symbols: Iterable[str]) -> dict[str, PriceQuote]:
        """Fetch current prices for symbols.

        Args:
            symbols: Exchange symbols (e.g. "BTCUSDT")

        Returns:
            Mapping of symbol to quote tagged "live". Symbols the endpoint
            does not return are omitted.

        Raises:
            MarketDataError: On transport failure, timeout, non-2xx status,
                or a malformed payload
        """
        wanted = sorted({s.strip().upper() for s in symbols if s and s.strip()})
        if not wanted:
            return {}

        params = {"symbols": json.dumps(wanted, separators=(",", ":"))}
        fetched_at = datetime.now(timezone.utc)

        try:
            response = self.session.get(self.url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json(parse_float=Decimal)
        except requests.RequestException as exc:
            raise MarketDataError(f"Price request to {self.url} failed: {exc}") from exc
        except ValueError as exc:
            raise MarketDataError(f"Price response from {self.url} is not valid JSON: {exc}") from exc

        quotes = parse_quotes(payload, source="live", default_timestamp=fetched_at, symbols=wanted)

        missing = [s for s in wanted if s not in quotes]
        if missing:
            logger.warning(f"Price endpoint returned no quote for: {', '.join(missing)}")
        logger.debug(f"Fetched {len(quotes)} live quotes from {self.url}")
        return quotes

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()

    def __enter__(self) -> "HttpPriceProvider":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
