"""Shared test fixtures for pytest.

Provides fee schedules, accounts and quote helpers used across test files.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable

import pytest

from tradecalc.fees import FeeScheduleProvider, binance_spot_schedule
from tradecalc.types import FeeSchedule, PriceQuote

QUOTE_TIME = datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _clean_tradecalc_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep TRADECALC_* variables from the developer's shell out of tests."""
    for name in (
        "TRADECALC_PRICE_URL",
        "TRADECALC_HTTP_TIMEOUT",
        "TRADECALC_FEE_SCHEDULE",
        "TRADECALC_PRICE_SNAPSHOT",
        "TRADECALC_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def two_tier_schedule() -> FeeSchedule:
    """[0, 100) -> 0.1% taker / 0.08% maker; [100, inf) -> 0.08% taker / 0.06% maker.

    Both tiers carry a 25% discount-token rebate.
    """
    return FeeScheduleProvider().load(
        [
            {
                "minVolume": "0",
                "maxVolume": "100",
                "makerRate": "0.0008",
                "takerRate": "0.001",
                "discountRate": "0.25",
            },
            {
                "minVolume": "100",
                "maxVolume": None,
                "makerRate": "0.0006",
                "takerRate": "0.0008",
                "discountRate": "0.25",
            },
        ]
    )


@pytest.fixture
def binance_schedule() -> FeeSchedule:
    return binance_spot_schedule()


@pytest.fixture
def make_quote() -> Callable[..., PriceQuote]:
    """Factory for live price quotes stamped at QUOTE_TIME."""

    def _make(symbol: str, price: str, source: str = "live") -> PriceQuote:
        return PriceQuote(symbol=symbol, price=Decimal(price), timestamp=QUOTE_TIME, source=source)

    return _make
