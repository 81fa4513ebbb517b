from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Literal, Mapping, Optional

QuoteSource = Literal["live", "snapshot"]


class OrderRole(str, Enum):
    """Order-book role that decides which fee rate applies."""

    MAKER = "maker"
    TAKER = "taker"


@dataclass(frozen=True)
class FeeTier:
    """One contiguous volume band of a fee schedule.

    Bounds are half-open: `[min_volume, max_volume)`. `max_volume=None` means
    the tier is unbounded above.
    """

    min_volume: Decimal
    max_volume: Optional[Decimal]
    maker_rate: Decimal
    taker_rate: Decimal
    discount_rate: Decimal = Decimal("0")

    def contains(self, volume: Decimal) -> bool:
        if volume < self.min_volume:
            return False
        return self.max_volume is None or volume < self.max_volume

    def rate_for(self, role: OrderRole) -> Decimal:
        return self.maker_rate if role == OrderRole.MAKER else self.taker_rate


@dataclass(frozen=True)
class FeeSchedule:
    """Immutable, validated tier table.

    Build through `FeeScheduleProvider.load`, which checks that the tiers
    start at zero and partition the volume axis without gaps or overlaps.
    """

    tiers: tuple[FeeTier, ...]
    name: str = "default"
    discount_token: Optional[str] = None
    zero_fee_assets: tuple[str, ...] = ()

    def is_zero_fee_pair(self, symbol: Optional[str]) -> bool:
        """Pairs quoted in or against a zero-fee asset (e.g. BNBUSDT, ETHBNB)."""
        if not symbol:
            return False
        s = symbol.strip().upper()
        return any(s.startswith(asset) or s.endswith(asset) for asset in self.zero_fee_assets)


@dataclass(frozen=True)
class Account:
    thirty_day_volume: Decimal
    uses_discount_token: bool = False


@dataclass(frozen=True)
class Position:
    symbol: str
    quantity: Decimal
    entry_price: Decimal


@dataclass(frozen=True)
class PriceQuote:
    """Price for one symbol, tagged with when and where it was observed."""

    symbol: str
    price: Decimal
    timestamp: datetime
    source: QuoteSource = "live"

    def age(self, now: Optional[datetime] = None) -> timedelta:
        current = now or datetime.now(timezone.utc)
        return current - self.timestamp


@dataclass(frozen=True)
class RiskReport:
    total_exposure: Decimal
    per_asset_exposure: Mapping[str, Decimal]
    concentration_ratio: Decimal
    unrealized_pnl: Decimal
    largest_symbol: Optional[str] = None


@dataclass(frozen=True)
class FeeQuote:
    """Breakdown of a single fee computation."""

    role: OrderRole
    trade_amount: Decimal
    base_rate: Decimal
    discount_rate: Decimal
    effective_rate: Decimal
    fee: Decimal
    symbol: Optional[str] = None
    exchange: Optional[str] = None
    description: str = ""

    @property
    def undiscounted_fee(self) -> Decimal:
        return self.trade_amount * self.base_rate

    @property
    def discount_savings(self) -> Decimal:
        """Amount saved relative to the undiscounted tier rate."""
        savings = self.undiscounted_fee - self.fee
        return savings if savings > 0 else Decimal("0")
