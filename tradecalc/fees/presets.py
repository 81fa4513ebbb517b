"""Built-in fee schedules for exchanges we model out of the box."""

from __future__ import annotations

from decimal import Decimal
from typing import Callable, Optional, Sequence

from tradecalc.errors import ConfigError
from tradecalc.fees.calculator import FeeCalculator
from tradecalc.fees.schedule import FeeScheduleProvider
from tradecalc.types import FeeSchedule

BNB_PAYMENT_DISCOUNT = Decimal("0.25")

# (min 30-day volume in USD, maker rate, taker rate)
TierRow = tuple[str, str, str]

# VIP 0..9
_BINANCE_SPOT_VIP_TIERS: tuple[TierRow, ...] = (
    ("0", "0.001", "0.001"),
    ("1000000", "0.0009", "0.001"),
    ("5000000", "0.0008", "0.0009"),
    ("10000000", "0.0007", "0.0008"),
    ("50000000", "0.0006", "0.0007"),
    ("100000000", "0.0005", "0.0006"),
    ("500000000", "0.0004", "0.0005"),
    ("1000000000", "0.0003", "0.0004"),
    ("5000000000", "0.0002", "0.0003"),
    ("10000000000", "0.0001", "0.0002"),
)

_COINBASE_TIERS: tuple[TierRow, ...] = (
    ("0", "0.004", "0.006"),
    ("10000", "0.0035", "0.005"),
    ("50000", "0.0025", "0.0035"),
    ("100000", "0.002", "0.003"),
    ("1000000", "0.0018", "0.0027"),
    ("5000000", "0.0016", "0.0025"),
    ("15000000", "0.0012", "0.002"),
    ("75000000", "0.0008", "0.0018"),
    ("100000000", "0.0005", "0.0015"),
    ("400000000", "0", "0.001"),
)

_KRAKEN_TIERS: tuple[TierRow, ...] = (
    ("0", "0.0016", "0.0026"),
    ("50000", "0.0014", "0.0024"),
    ("100000", "0.0012", "0.0022"),
    ("250000", "0.001", "0.002"),
    ("500000", "0.0008", "0.0018"),
    ("1000000", "0.0006", "0.0016"),
    ("2500000", "0.0004", "0.0014"),
    ("5000000", "0.0002", "0.0012"),
    ("10000000", "0", "0.001"),
)

# Flat spot rate at every volume
_BYBIT_SPOT_TIERS: tuple[TierRow, ...] = (("0", "0.001", "0.001"),)


def _load(
    name: str,
    rows: Sequence[TierRow],
    *,
    discount_rate: Decimal = Decimal("0"),
    discount_token: Optional[str] = None,
    zero_fee_assets: Sequence[str] = (),
) -> FeeSchedule:
    bounds = [row[0] for row in rows[1:]] + [None]
    tiers = [
        {
            "minVolume": min_volume,
            "maxVolume": upper,
            "makerRate": maker,
            "takerRate": taker,
            "discountRate": discount_rate,
        }
        for (min_volume, maker, taker), upper in zip(rows, bounds)
    ]
    return FeeScheduleProvider().load(
        {
            "name": name,
            "discountToken": discount_token,
            "zeroFeeAssets": list(zero_fee_assets),
            "tiers": tiers,
        }
    )


def binance_spot_schedule(*, discount_rate: Decimal = BNB_PAYMENT_DISCOUNT) -> FeeSchedule:
    """Binance spot VIP schedule with BNB fee payment discount.

    Pairs quoted in or against BNB trade fee-free.
    """
    return _load(
        "binance-spot",
        _BINANCE_SPOT_VIP_TIERS,
        discount_rate=discount_rate,
        discount_token="BNB",
        zero_fee_assets=["BNB"],
    )


def coinbase_schedule() -> FeeSchedule:
    return _load("coinbase", _COINBASE_TIERS)


def kraken_schedule() -> FeeSchedule:
    return _load("kraken", _KRAKEN_TIERS)


def bybit_spot_schedule() -> FeeSchedule:
    return _load("bybit-spot", _BYBIT_SPOT_TIERS)


EXCHANGE_SCHEDULES: dict[str, Callable[[], FeeSchedule]] = {
    "binance": binance_spot_schedule,
    "coinbase": coinbase_schedule,
    "kraken": kraken_schedule,
    "bybit": bybit_spot_schedule,
}


def schedule_for_exchange(exchange: str) -> FeeSchedule:
    """Built-in schedule for an exchange name (case-insensitive).

    Raises:
        ConfigError: If no schedule is bundled for the exchange
    """
    try:
        factory = EXCHANGE_SCHEDULES[exchange.strip().lower()]
    except KeyError as exc:
        known = ", ".join(sorted(EXCHANGE_SCHEDULES))
        raise ConfigError(f"No built-in fee schedule for exchange {exchange!r} (known: {known})") from exc
    return factory()


def calculator_for_exchange(exchange: str) -> FeeCalculator:
    """FeeCalculator over the exchange's built-in schedule, tagged with its name."""
    return FeeCalculator(schedule_for_exchange(exchange), exchange=exchange.strip().lower())
