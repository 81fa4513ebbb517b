"""Tests for risk reporting, exposure limits and volatility."""

from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest

from tradecalc.errors import InvalidInputError, MissingPriceError
from tradecalc.market_data import HttpPriceProvider
from tradecalc.risk import (
    ExposureChecker,
    ExposureLimits,
    RiskCalculator,
    has_price_spike,
    is_market_stressed,
    return_volatility,
    simple_returns,
)
from tradecalc.types import Position, RiskReport


def _position(symbol: str, quantity: str, entry: str) -> Position:
    return Position(symbol=symbol, quantity=Decimal(quantity), entry_price=Decimal(entry))


# ========== RiskCalculator ==========


class TestRiskCalculator:
    """Tests for exposure, concentration and P&L."""

    def test_positions_in_same_symbol_are_aggregated(self, make_quote) -> None:
        positions = [_position("BTC", "1", "20000"), _position("BTC", "1", "22000")]
        prices = {"BTC": make_quote("BTC", "25000")}

        report = RiskCalculator().compute_risk(positions, prices)

        assert report.per_asset_exposure == {"BTC": Decimal("50000")}
        assert report.total_exposure == Decimal("50000")
        assert report.unrealized_pnl == Decimal("8000")
        assert report.concentration_ratio == Decimal("1")
        assert report.largest_symbol == "BTC"

    def test_multi_asset_report(self, make_quote) -> None:
        positions = [_position("BTC", "1", "20000"), _position("ETH", "10", "1800")]
        prices = {"BTC": make_quote("BTC", "25000"), "ETH": make_quote("ETH", "1600")}

        report = RiskCalculator().compute_risk(positions, prices)

        assert report.per_asset_exposure == {"BTC": Decimal("25000"), "ETH": Decimal("16000")}
        assert report.total_exposure == Decimal("41000")
        # 5000 gain on BTC, 2000 loss on ETH
        assert report.unrealized_pnl == Decimal("3000")
        assert report.concentration_ratio == Decimal("25000") / Decimal("41000")
        assert report.largest_symbol == "BTC"

    @pytest.mark.parametrize(
        "holdings",
        [
            [("BTC", "0.5", "30000"), ("ETH", "3", "2000"), ("SOL", "100", "25")],
            [("BTC", "2", "10000"), ("BTC", "0.25", "40000")],
            [("ETH", "0", "1800"), ("SOL", "1", "20")],
        ],
    )
    def test_total_equals_sum_and_concentration_in_unit_interval(self, make_quote, holdings) -> None:
        prices = {
            "BTC": make_quote("BTC", "25000"),
            "ETH": make_quote("ETH", "1600"),
            "SOL": make_quote("SOL", "21.4"),
        }
        positions = [_position(*h) for h in holdings]

        report = RiskCalculator().compute_risk(positions, prices)

        assert report.total_exposure == sum(report.per_asset_exposure.values(), Decimal("0"))
        assert Decimal("0") <= report.concentration_ratio <= Decimal("1")

    def test_zero_exposure_has_zero_concentration(self, make_quote) -> None:
        positions = [_position("BTC", "0", "20000")]

        report = RiskCalculator().compute_risk(positions, {"BTC": make_quote("BTC", "25000")})

        assert report.total_exposure == Decimal("0")
        assert report.concentration_ratio == Decimal("0")

    def test_empty_portfolio(self) -> None:
        report = RiskCalculator().compute_risk([], {})

        assert report.total_exposure == Decimal("0")
        assert report.per_asset_exposure == {}
        assert report.concentration_ratio == Decimal("0")
        assert report.unrealized_pnl == Decimal("0")
        assert report.largest_symbol is None

    def test_missing_price_raises_without_partial_report(self, make_quote) -> None:
        positions = [_position("BTC", "1", "20000"), _position("ETH", "1", "1800"), _position("SOL", "1", "20")]

        with pytest.raises(MissingPriceError, match="ETH, SOL") as exc_info:
            RiskCalculator().compute_risk(positions, {"BTC": make_quote("BTC", "25000")})

        assert exc_info.value.symbols == ("ETH", "SOL")

    def test_symbols_match_quotes_case_insensitively(self, make_quote) -> None:
        positions = [_position("btcusdt", "1", "20000"), _position(" BTCUSDT ", "1", "22000")]
        prices = {"BTCUSDT": make_quote("BTCUSDT", "25000")}

        report = RiskCalculator().compute_risk(positions, prices)

        assert report.per_asset_exposure == {"BTCUSDT": Decimal("50000")}
        assert report.largest_symbol == "BTCUSDT"
        assert report.unrealized_pnl == Decimal("8000")

    @patch("tradecalc.market_data.ticker.requests.Session")
    def test_lowercase_positions_work_with_live_quotes(self, mock_session_class) -> None:
        response = MagicMock()
        response.json.return_value = [{"symbol": "BTCUSDT", "price": Decimal("25000")}]
        session = MagicMock()
        session.get.return_value = response
        mock_session_class.return_value = session
        positions = [_position("btcusdt", "1", "1")]

        prices = HttpPriceProvider().fetch_prices({p.symbol for p in positions})
        report = RiskCalculator().compute_risk(positions, prices)

        assert report.total_exposure == Decimal("25000")
        assert report.unrealized_pnl == Decimal("24999")

    def test_missing_price_reports_canonical_symbol(self) -> None:
        with pytest.raises(MissingPriceError) as exc_info:
            RiskCalculator().compute_risk([_position("ethusdt", "1", "1")], {})

        assert exc_info.value.symbols == ("ETHUSDT",)

    def test_missing_price_is_a_lookup_error(self) -> None:
        with pytest.raises(LookupError):
            RiskCalculator().compute_risk([_position("BTC", "1", "1")], {})

    def test_negative_quantity_raises(self, make_quote) -> None:
        with pytest.raises(InvalidInputError, match="quantity cannot be negative"):
            RiskCalculator().compute_risk([_position("BTC", "-1", "20000")], {"BTC": make_quote("BTC", "25000")})

    def test_negative_entry_price_raises(self, make_quote) -> None:
        with pytest.raises(InvalidInputError, match="Entry price cannot be negative"):
            RiskCalculator().compute_risk([_position("BTC", "1", "-1")], {"BTC": make_quote("BTC", "25000")})

    def test_inputs_are_not_mutated(self, make_quote) -> None:
        positions = [_position("BTC", "1", "20000"), _position("BTC", "1", "22000")]
        prices = {"BTC": make_quote("BTC", "25000")}
        before = (list(positions), dict(prices))

        RiskCalculator().compute_risk(positions, prices)

        assert (positions, prices) == before


# ========== Exposure limits ==========


def _report(per_asset: dict[str, str]) -> RiskReport:
    exposures = {symbol: Decimal(value) for symbol, value in per_asset.items()}
    total = sum(exposures.values(), Decimal("0"))
    largest = max(exposures, key=exposures.__getitem__)
    return RiskReport(
        total_exposure=total,
        per_asset_exposure=exposures,
        concentration_ratio=exposures[largest] / total,
        unrealized_pnl=Decimal("0"),
        largest_symbol=largest,
    )


class TestExposureChecker:
    """Tests for exposure limit checks."""

    def test_no_limits_always_passes(self) -> None:
        ok, reasons = ExposureChecker(ExposureLimits()).check_report(_report({"BTC": "1000000"}))

        assert ok is True
        assert reasons == []

    def test_within_limits(self) -> None:
        limits = ExposureLimits(
            max_total_exposure=Decimal("100000"),
            max_asset_exposure=Decimal("50000"),
            max_concentration=Decimal("0.6"),
            max_positions=5,
        )

        ok, reasons = ExposureChecker(limits).check_report(_report({"BTC": "50000", "ETH": "40000"}))

        assert ok is True
        assert reasons == []

    def test_reports_every_breach(self) -> None:
        limits = ExposureLimits(
            max_total_exposure=Decimal("50000"),
            max_asset_exposure=Decimal("30000"),
            max_concentration=Decimal("0.5"),
            max_positions=1,
        )

        ok, reasons = ExposureChecker(limits).check_report(_report({"BTC": "50000", "ETH": "16000"}))

        assert ok is False
        assert len(reasons) == 4
        assert "Total exposure 66000 exceeds max 50000" in reasons[0]
        assert "for BTC" in reasons[1]
        assert "Concentration" in reasons[2] and "BTC" in reasons[2]
        assert "2 positions exceed max 1" in reasons[3]

    def test_explicit_position_count_overrides_symbol_count(self) -> None:
        checker = ExposureChecker(ExposureLimits(max_positions=3))

        ok, reasons = checker.check_report(_report({"BTC": "100"}), position_count=4)

        assert ok is False
        assert reasons == ["4 positions exceed max 3"]

    def test_asset_check_lists_each_breaching_symbol(self) -> None:
        checker = ExposureChecker(ExposureLimits(max_asset_exposure=Decimal("100")))

        ok, reasons = checker.check_asset_exposure(_report({"ETH": "150", "BTC": "200", "SOL": "50"}))

        assert ok is False
        assert reasons == [
            "Exposure 200 exceeds max 100 for BTC",
            "Exposure 150 exceeds max 100 for ETH",
        ]


# ========== Volatility ==========


class TestVolatility:
    """Tests for return-based volatility helpers."""

    def test_simple_returns(self) -> None:
        prices = [Decimal("100"), Decimal("110"), Decimal("99")]

        assert simple_returns(prices) == [Decimal("0.1"), Decimal("-0.1")]

    def test_return_volatility_is_population_std_dev(self) -> None:
        prices = [Decimal("100"), Decimal("110"), Decimal("99")]

        # returns +0.1, -0.1 -> mean 0, variance 0.01
        assert return_volatility(prices) == Decimal("0.1")

    @pytest.mark.parametrize("prices", [[], [Decimal("100")]])
    def test_return_volatility_needs_two_prices(self, prices) -> None:
        assert return_volatility(prices) == Decimal("0")

    def test_constant_prices_have_zero_volatility(self) -> None:
        assert return_volatility([Decimal("50")] * 5) == Decimal("0")

    def test_price_spike_detection(self) -> None:
        assert has_price_spike([Decimal("100"), Decimal("100"), Decimal("103")]) is True
        assert has_price_spike([Decimal("100"), Decimal("97")]) is True
        assert has_price_spike([Decimal("100"), Decimal("101")]) is False
        assert has_price_spike([Decimal("100")]) is False

    def test_market_stress(self) -> None:
        assert is_market_stressed([Decimal("100"), Decimal("110"), Decimal("99")]) is True
        assert is_market_stressed([Decimal("100"), Decimal("101"), Decimal("100.5")]) is False

    def test_non_positive_price_raises(self) -> None:
        with pytest.raises(ValueError, match="Prices must be positive"):
            simple_returns([Decimal("0"), Decimal("10")])
