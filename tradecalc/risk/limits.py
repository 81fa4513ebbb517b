"""Exposure limit checks over a computed risk report.

Flags over-concentration and oversized books; purely advisory.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from tradecalc.types import RiskReport


@dataclass(frozen=True)
class ExposureLimits:
    """Exposure limit configuration.

    Attributes:
        max_total_exposure: Maximum total exposure (in quote currency)
        max_asset_exposure: Maximum exposure to a single symbol (in quote currency)
        max_concentration: Maximum share of total exposure in one symbol (e.g. 0.6 for 60%)
        max_positions: Maximum number of open positions
    """

    max_total_exposure: Decimal | None = None
    max_asset_exposure: Decimal | None = None
    max_concentration: Decimal | None = None
    max_positions: int | None = None


class ExposureChecker:
    """Checks a `RiskReport` against exposure limits."""

    def __init__(self, limits: ExposureLimits) -> None:
        self.limits = limits

    def check_total_exposure(self, report: RiskReport) -> tuple[bool, str | None]:
        if self.limits.max_total_exposure is None:
            return True, None

        if report.total_exposure > self.limits.max_total_exposure:
            return False, f"Total exposure {report.total_exposure} exceeds max {self.limits.max_total_exposure}"

        return True, None

    def check_asset_exposure(self, report: RiskReport) -> tuple[bool, list[str]]:
        """Check every symbol's exposure against the per-asset cap.

        Returns:
            Tuple of (is_allowed, reasons_for_each_breaching_symbol)
        """
        if self.limits.max_asset_exposure is None:
            return True, []

        reasons = [
            f"Exposure {value} exceeds max {self.limits.max_asset_exposure} for {symbol}"
            for symbol, value in sorted(report.per_asset_exposure.items())
            if value > self.limits.max_asset_exposure
        ]
        return not reasons, reasons

    def check_concentration(self, report: RiskReport) -> tuple[bool, str | None]:
        if self.limits.max_concentration is None:
            return True, None

        if report.concentration_ratio > self.limits.max_concentration:
            return (
                False,
                f"Concentration {report.concentration_ratio * 100:.2f}% in {report.largest_symbol} "
                f"exceeds max {self.limits.max_concentration * 100:.2f}%",
            )

        return True, None

    def check_position_count(self, position_count: int) -> tuple[bool, str | None]:
        if self.limits.max_positions is None:
            return True, None

        if position_count > self.limits.max_positions:
            return False, f"{position_count} positions exceed max {self.limits.max_positions}"

        return True, None

    def check_report(self, report: RiskReport, position_count: int | None = None) -> tuple[bool, list[str]]:
        """Check all exposure limits.

        Args:
            report: Risk report to check
            position_count: Number of open positions (defaults to the number
                of symbols in the report)

        Returns:
            Tuple of (all_checks_passed, list_of_breach_reasons)
        """
        reasons: list[str] = []

        allowed, reason = self.check_total_exposure(report)
        if not allowed and reason:
            reasons.append(reason)

        _, asset_reasons = self.check_asset_exposure(report)
        reasons.extend(asset_reasons)

        allowed, reason = self.check_concentration(report)
        if not allowed and reason:
            reasons.append(reason)

        count = position_count if position_count is not None else len(report.per_asset_exposure)
        allowed, reason = self.check_position_count(count)
        if not allowed and reason:
            reasons.append(reason)

        return len(reasons) == 0, reasons
