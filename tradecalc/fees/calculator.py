from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from tradecalc.errors import InvalidInputError
from tradecalc.types import Account, FeeQuote, FeeSchedule, FeeTier, OrderRole

FEE_PRECISION = Decimal("0.00000001")

Side = Union[OrderRole, str]


def _to_role(side: Side) -> OrderRole:
    if isinstance(side, OrderRole):
        return side
    try:
        return OrderRole(str(side).strip().lower())
    except ValueError as exc:
        raise InvalidInputError(f"Unknown order role: {side!r} (expected 'maker' or 'taker')") from exc


def _check_amount(value: Decimal, name: str) -> None:
    if isinstance(value, Decimal) and not value.is_finite():
        raise InvalidInputError(f"{name} must be a finite number: {value}")
    if value < 0:
        raise InvalidInputError(f"{name} cannot be negative: {value}")


@dataclass(frozen=True)
class FeeCalculator:
    """Resolves effective maker/taker rates from a tiered schedule.

    The schedule is an immutable snapshot handed in by the caller; the
    calculator holds no other state.
    """

    schedule: FeeSchedule
    exchange: Optional[str] = None
    _bounds: tuple[Decimal, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_bounds", tuple(t.min_volume for t in self.schedule.tiers))

    def resolve_tier(self, volume: Decimal) -> FeeTier:
        """Return the tier whose [min_volume, max_volume) contains volume."""
        _check_amount(volume, "Trading volume")
        index = bisect_right(self._bounds, volume) - 1
        return self.schedule.tiers[index]

    def quote_fee(
        self,
        account: Account,
        trade_amount: Decimal,
        side: Side,
        *,
        symbol: Optional[str] = None,
    ) -> FeeQuote:
        """Compute the fee for a trade and return the full breakdown.

        Raises:
            InvalidInputError: If trade_amount or the account volume is
                negative or not finite, the fee does not fit the decimal
                context, or side is not a known order role
        """
        _check_amount(trade_amount, "trade_amount")
        role = _to_role(side)
        tier = self.resolve_tier(account.thirty_day_volume)

        if self.schedule.is_zero_fee_pair(symbol):
            return FeeQuote(
                role=role,
                trade_amount=trade_amount,
                base_rate=Decimal("0"),
                discount_rate=Decimal("0"),
                effective_rate=Decimal("0"),
                fee=Decimal("0").quantize(FEE_PRECISION),
                symbol=symbol,
                exchange=self.exchange,
                description=f"Zero fee pair ({role.value})",
            )

        base_rate = tier.rate_for(role)
        discount = tier.discount_rate if account.uses_discount_token else Decimal("0")
        effective = base_rate * (Decimal("1") - discount)
        try:
            fee = (trade_amount * effective).quantize(FEE_PRECISION)
        except InvalidOperation as exc:
            raise InvalidInputError(f"trade_amount {trade_amount} is too large to quote to 8 decimal places") from exc

        description = f"{self.schedule.name} {role.value} fee, tier {tier.min_volume}+"
        if discount:
            token = self.schedule.discount_token or "discount token"
            description += f" with {token} payment discount ({float(discount * 100):g}%)"

        return FeeQuote(
            role=role,
            trade_amount=trade_amount,
            base_rate=base_rate,
            discount_rate=discount,
            effective_rate=effective,
            fee=fee,
            symbol=symbol,
            exchange=self.exchange,
            description=description,
        )

    def effective_rate(self, account: Account, side: Side, *, symbol: Optional[str] = None) -> Decimal:
        return self.quote_fee(account, Decimal("0"), side, symbol=symbol).effective_rate

    def compute_fee(
        self,
        account: Account,
        trade_amount: Decimal,
        side: Side,
        *,
        symbol: Optional[str] = None,
    ) -> Decimal:
        """Fee for trade_amount at the account's effective rate (8 dp)."""
        return self.quote_fee(account, trade_amount, side, symbol=symbol).fee

    def total_buy_cost(
        self,
        account: Account,
        *,
        price: Decimal,
        quantity: Decimal,
        side: Side = OrderRole.TAKER,
        symbol: Optional[str] = None,
    ) -> Decimal:
        """Notional plus fee for buying quantity at price."""
        notional = price * quantity
        return notional + self.compute_fee(account, notional, side, symbol=symbol)

    def net_sell_proceeds(
        self,
        account: Account,
        *,
        price: Decimal,
        quantity: Decimal,
        side: Side = OrderRole.TAKER,
        symbol: Optional[str] = None,
    ) -> Decimal:
        """Notional minus fee for selling quantity at price."""
        notional = price * quantity
        return notional - self.compute_fee(account, notional, side, symbol=symbol)

    def round_trip_profit(
        self,
        account: Account,
        *,
        buy_price: Decimal,
        sell_price: Decimal,
        quantity: Decimal,
        buy_side: Side = OrderRole.TAKER,
        sell_side: Side = OrderRole.TAKER,
        symbol: Optional[str] = None,
    ) -> Decimal:
        """Net profit of buying then selling quantity, fees on both legs."""
        cost = self.total_buy_cost(account, price=buy_price, quantity=quantity, side=buy_side, symbol=symbol)
        proceeds = self.net_sell_proceeds(account, price=sell_price, quantity=quantity, side=sell_side, symbol=symbol)
        return proceeds - cost
