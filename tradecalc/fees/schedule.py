"""Fee schedule loading and validation.

A schedule document is either a bare list of tiers or a mapping:

    name: binance-spot
    discountToken: BNB
    zeroFeeAssets: [BNB]
    tiers:
      - {minVolume: 0, maxVolume: 1000000, makerRate: 0.001, takerRate: 0.001, discountRate: 0.25}
      - {minVolume: 1000000, maxVolume: null, makerRate: 0.0009, takerRate: 0.001, discountRate: 0.25}

Tier keys may also be given in snake_case.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from tradecalc.documents import load_document
from tradecalc.errors import ConfigError
from tradecalc.types import FeeSchedule, FeeTier

logger = logging.getLogger(__name__)

ScheduleSource = Union[str, Path, Mapping[str, Any], Sequence[Mapping[str, Any]]]


class TierDocument(BaseModel):
    """Wire shape of one tier."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    min_volume: Decimal = Field(alias="minVolume", ge=0)
    max_volume: Optional[Decimal] = Field(default=None, alias="maxVolume")
    maker_rate: Decimal = Field(alias="makerRate", ge=0, le=1)
    taker_rate: Decimal = Field(alias="takerRate", ge=0, le=1)
    discount_rate: Decimal = Field(default=Decimal("0"), alias="discountRate", ge=0, le=1)


class ScheduleDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: str = "default"
    discount_token: Optional[str] = Field(default=None, alias="discountToken")
    zero_fee_assets: list[str] = Field(default_factory=list, alias="zeroFeeAssets")
    tiers: list[TierDocument] = Field(min_length=1)

    @field_validator("discount_token")
    @classmethod
    def _normalize_token(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        token = value.strip().upper()
        if not token:
            raise ValueError("discountToken must not be blank")
        return token

    @field_validator("zero_fee_assets")
    @classmethod
    def _normalize_assets(cls, value: list[str]) -> list[str]:
        assets = [asset.strip().upper() for asset in value]
        if not all(assets):
            raise ValueError("zeroFeeAssets entries must not be blank")
        return assets


def _describe(tier: FeeTier) -> str:
    upper = "inf" if tier.max_volume is None else str(tier.max_volume)
    return f"[{tier.min_volume}, {upper})"


def validate_tiers(tiers: Sequence[FeeTier]) -> tuple[FeeTier, ...]:
    """Order tiers by min_volume and check they partition [0, inf).

    Raises:
        ConfigError: On an empty table, a tier with max <= min, a gap,
            an overlap, or a bounded last tier
    """
    if not tiers:
        raise ConfigError("Fee schedule has no tiers")

    ordered = tuple(sorted(tiers, key=lambda t: t.min_volume))

    if ordered[0].min_volume != 0:
        raise ConfigError(f"First tier {_describe(ordered[0])} must start at volume 0")

    for tier in ordered:
        if tier.max_volume is not None and tier.max_volume <= tier.min_volume:
            raise ConfigError(f"Tier {_describe(tier)}: max_volume must exceed min_volume")

    for current, following in zip(ordered, ordered[1:]):
        if current.max_volume is None:
            raise ConfigError(f"Unbounded tier {_describe(current)} must be the last tier")
        if current.max_volume < following.min_volume:
            raise ConfigError(f"Gap between tiers {_describe(current)} and {_describe(following)}")
        if current.max_volume > following.min_volume:
            raise ConfigError(f"Tiers {_describe(current)} and {_describe(following)} overlap")

    if ordered[-1].max_volume is not None:
        raise ConfigError(f"Last tier {_describe(ordered[-1])} must be unbounded (maxVolume: null)")

    return ordered


class FeeScheduleProvider:
    """Loads a validated `FeeSchedule` from a JSON/YAML file or parsed data."""

    def load(self, source: ScheduleSource) -> FeeSchedule:
        """Load and validate a fee schedule.

        Args:
            source: Path to a .json/.yaml/.yml file, a schedule mapping,
                or a bare list of tier mappings

        Returns:
            Immutable FeeSchedule snapshot

        Raises:
            ConfigError: If the document is unreadable or the tiers are invalid
        """
        if isinstance(source, (str, Path)):
            raw = load_document(source)
            origin = str(source)
        else:
            raw = source
            origin = "<data>"

        if isinstance(raw, (list, tuple)):
            raw = {"tiers": list(raw)}
        if not isinstance(raw, Mapping):
            raise ConfigError(f"Fee schedule in {origin} must be a list of tiers or a mapping")

        try:
            doc = ScheduleDocument.model_validate(raw)
        except ValidationError as exc:
            raise ConfigError(f"Invalid fee schedule in {origin}: {exc}") from exc

        tiers = validate_tiers(
            [
                FeeTier(
                    min_volume=t.min_volume,
                    max_volume=t.max_volume,
                    maker_rate=t.maker_rate,
                    taker_rate=t.taker_rate,
                    discount_rate=t.discount_rate,
                )
                for t in doc.tiers
            ]
        )

        schedule = FeeSchedule(
            tiers=tiers,
            name=doc.name,
            discount_token=doc.discount_token,
            zero_fee_assets=tuple(doc.zero_fee_assets),
        )
        logger.info(f"Loaded fee schedule '{schedule.name}' with {len(tiers)} tiers from {origin}")
        return schedule
