#!/usr/bin/env python3
"""Risk calculator demo.

Computes exposure, concentration and unrealized P&L for a fixed demo
portfolio, checks it against demo exposure limits, and prints return
volatility for a fixed price history.

Prices come from the snapshot file by default; with --live the ticker
endpoint is queried and the snapshot is used only if it fails.

Usage:
    python scripts/risk_calculator_demo.py
    python scripts/risk_calculator_demo.py --live
    python scripts/risk_calculator_demo.py --prices config/price_snapshot.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from decimal import Decimal
from pathlib import Path
from typing import Optional, Sequence

# Add project root to path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tradecalc.config import Settings
from tradecalc.errors import TradeCalcError
from tradecalc.market_data import FallbackPriceProvider, HttpPriceProvider, PriceProvider, StaticPriceProvider
from tradecalc.risk import ExposureChecker, ExposureLimits, RiskCalculator, is_market_stressed, return_volatility
from tradecalc.types import Position, RiskReport

logger = logging.getLogger("risk_calculator_demo")

DEMO_POSITIONS = (
    Position(symbol="BTCUSDT", quantity=Decimal("1"), entry_price=Decimal("20000")),
    Position(symbol="BTCUSDT", quantity=Decimal("1"), entry_price=Decimal("22000")),
    Position(symbol="ETHUSDT", quantity=Decimal("10"), entry_price=Decimal("1800")),
    Position(symbol="SOLUSDT", quantity=Decimal("250"), entry_price=Decimal("18.50")),
)

DEMO_LIMITS = ExposureLimits(
    max_total_exposure=Decimal("100000"),
    max_asset_exposure=Decimal("40000"),
    max_concentration=Decimal("0.6"),
    max_positions=10,
)

DEMO_PRICE_HISTORY = {
    "BTCUSDT": [Decimal(p) for p in ("24100", "24350", "23900", "24800", "25000")],
    "ETHUSDT": [Decimal(p) for p in ("1550", "1580", "1495", "1620", "1600")],
}


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Portfolio risk report for a demo portfolio.")
    parser.add_argument("--live", action="store_true", help="Fetch live prices (snapshot used as fallback)")
    parser.add_argument("--prices", help="Price snapshot file (.json/.yaml)")
    return parser.parse_args(argv)


def build_provider(
    settings: Settings, *, live_provider: Optional[PriceProvider], prices_path: Optional[Path]
) -> PriceProvider:
    snapshot = StaticPriceProvider(prices_path or settings.price_snapshot_path)
    if live_provider is None:
        return snapshot
    return FallbackPriceProvider(live_provider, snapshot)


def print_report(report: RiskReport) -> None:
    print("===== RISK REPORT =====")
    print(f"  Total exposure: ${report.total_exposure:.2f}")
    for symbol, exposure in sorted(report.per_asset_exposure.items()):
        print(f"  {symbol:<10} exposure: ${exposure:.2f}")
    print(f"  Largest asset: {report.largest_symbol}")
    print(f"  Concentration ratio: {report.concentration_ratio * 100:.2f}%")
    print(f"  Unrealized P&L: ${report.unrealized_pnl:.2f}")


def run(provider: PriceProvider) -> RiskReport:
    prices = provider.fetch_prices({p.symbol for p in DEMO_POSITIONS})
    for quote in sorted(prices.values(), key=lambda q: q.symbol):
        print(f"{quote.symbol}: {quote.price} ({quote.source}, {quote.timestamp.isoformat()})")

    report = RiskCalculator().compute_risk(DEMO_POSITIONS, prices)
    print_report(report)

    ok, reasons = ExposureChecker(DEMO_LIMITS).check_report(report, position_count=len(DEMO_POSITIONS))
    print("\n===== LIMITS =====")
    print("  All limits OK" if ok else "\n".join(f"  BREACH: {reason}" for reason in reasons))

    print("\n===== VOLATILITY =====")
    for symbol, history in DEMO_PRICE_HISTORY.items():
        stressed = " (stressed)" if is_market_stressed(history) else ""
        print(f"  {symbol:<10} return volatility: {return_volatility(history) * 100:.3f}%{stressed}")
    return report


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    try:
        settings = Settings.from_env()
        logging.basicConfig(level=settings.log_level_value, format="%(asctime)s [%(levelname)s] %(message)s")
        prices_path = Path(args.prices) if args.prices else None
        if args.live:
            with HttpPriceProvider(settings.price_url, timeout=settings.http_timeout) as ticker:
                run(build_provider(settings, live_provider=ticker, prices_path=prices_path))
        else:
            run(build_provider(settings, live_provider=None, prices_path=prices_path))
    except TradeCalcError as exc:
        logger.error(f"Risk calculation failed: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
