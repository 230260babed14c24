"""Unit tests for rates providers and implied forward FX rates."""

import math
from datetime import date

import pytest

from windowfx.core.currency import CurrencyPair, FxRate
from windowfx.exceptions import MarketDataError
from windowfx.market.curves import ZeroRateDiscountCurve
from windowfx.market.rates_provider import (
    DiscountFxForwardRates,
    ImmutableRatesProvider,
    RatesProvider,
)
from windowfx.market.sensitivity import (
    CurrencyParameterSensitivities,
    CurrencyParameterSensitivity,
    PointSensitivities,
    ZeroRateSensitivity,
)

FORWARD_DATE = date(2018, 6, 29)
EUR_USD = CurrencyPair.of("EUR", "USD")


class TestImmutableRatesProvider:
    """Test spot rates and curve lookup."""

    def test_satisfies_protocol(self, provider):
        assert isinstance(provider, RatesProvider)

    def test_fx_rate_both_directions(self, provider):
        assert provider.fx_rate("EUR", "USD") == 1.23
        assert provider.fx_rate("USD", "EUR") == pytest.approx(1 / 1.23)
        assert provider.fx_rate("EUR", "EUR") == 1.0

    def test_triangulation_through_usd(self, provider):
        with_jpy = provider.with_fx_rate(FxRate.of("USD", "JPY", 110.0))
        assert with_jpy.fx_rate("EUR", "JPY") == pytest.approx(1.23 * 110.0)
        assert with_jpy.fx_rate("JPY", "EUR") == pytest.approx(1 / (1.23 * 110.0))

    def test_missing_fx_rate(self, provider):
        with pytest.raises(MarketDataError, match="No FX rate available"):
            provider.fx_rate("GBP", "JPY")

    def test_with_fx_rate_replaces_inverse_quote(self, provider):
        updated = provider.with_fx_rate(FxRate.of("USD", "EUR", 0.8))
        assert updated.fx_rate("EUR", "USD") == pytest.approx(1.25)
        assert len(updated.fx_rates) == 1

    def test_missing_curve(self, provider):
        with pytest.raises(MarketDataError, match="Unable to find discount curve"):
            provider.discount_curve("GBP")

    def test_curve_currency_mismatch(self, eur_curve, valuation_date):
        with pytest.raises(ValueError, match="is in EUR, not USD"):
            ImmutableRatesProvider(valuation_date, {"USD": eur_curve})

    def test_curve_valuation_date_mismatch(self, eur_curve):
        with pytest.raises(ValueError, match="valuation date"):
            ImmutableRatesProvider(date(2018, 3, 29), {"EUR": eur_curve})

    def test_discount_factor(self, provider, usd_curve):
        assert provider.discount_factor("USD", FORWARD_DATE) == usd_curve.discount_factor(FORWARD_DATE)

    def test_parallel_shift(self, provider):
        shifted = provider.with_parallel_shift(0.01)
        assert shifted.discount_factor("USD", FORWARD_DATE) < provider.discount_factor("USD", FORWARD_DATE)
        assert shifted.fx_rate("EUR", "USD") == 1.23
        assert shifted.valuation_date == provider.valuation_date

    def test_parameter_sensitivity_by_curve(self, provider):
        points = [
            ZeroRateSensitivity("USD", 0.25, "USD", 10.0),
            ZeroRateSensitivity("USD", 0.5, "USD", 5.0),
            ZeroRateSensitivity("EUR", 0.25, "USD", -3.0),
        ]
        sens = provider.parameter_sensitivity(PointSensitivities.of(*points))
        assert sens.size() == 2
        assert sens.get("USD-Discount", "USD").total().amount == pytest.approx(15.0)
        assert sens.get("EUR-Discount", "USD").total().amount == pytest.approx(-3.0)

    def test_market_quote_sensitivity_unknown_curve(self, provider):
        sens = CurrencyParameterSensitivities.of(
            CurrencyParameterSensitivity("GBP-Discount", "GBP", ("1Y",), [1.0])
        )
        with pytest.raises(MarketDataError, match="Unable to find curve"):
            provider.market_quote_sensitivity(sens)


class TestDiscountFxForwardRates:
    """Test forward rates by interest rate parity."""

    def test_forward_rate(self, provider):
        forward = provider.fx_forward_rates(EUR_USD).rate("EUR", FORWARD_DATE)
        expected = (
            1.23
            * provider.discount_factor("EUR", FORWARD_DATE)
            / provider.discount_factor("USD", FORWARD_DATE)
        )
        assert forward == pytest.approx(expected, rel=1e-12)
        # USD rates above EUR rates
        assert forward > 1.23

    def test_inverse_rate(self, provider):
        rates = provider.fx_forward_rates(EUR_USD)
        assert rates.rate("USD", FORWARD_DATE) == pytest.approx(1 / rates.rate("EUR", FORWARD_DATE))

    def test_forward_at_valuation_date_is_spot(self, provider, valuation_date):
        assert provider.fx_forward_rates(EUR_USD).rate("EUR", valuation_date) == pytest.approx(1.23)

    def test_unknown_currency(self, provider):
        with pytest.raises(ValueError, match="not part of pair"):
            provider.fx_forward_rates(EUR_USD).rate("GBP", FORWARD_DATE)

    def test_curves_must_match_pair(self, eur_curve, usd_curve):
        with pytest.raises(ValueError, match="do not match pair"):
            DiscountFxForwardRates(EUR_USD, 1.23, usd_curve, eur_curve)

    def test_missing_spot(self, eur_curve, usd_curve, valuation_date):
        provider = ImmutableRatesProvider(valuation_date, {"EUR": eur_curve, "USD": usd_curve})
        with pytest.raises(MarketDataError):
            provider.fx_forward_rates(EUR_USD)

    def test_point_sensitivity_base(self, provider):
        rates = provider.fx_forward_rates(EUR_USD)
        forward = rates.rate("EUR", FORWARD_DATE)
        sens = rates.rate_point_sensitivity("EUR", FORWARD_DATE)
        base, counter = sens.sensitivities
        assert base.curve_currency == "EUR"
        assert counter.curve_currency == "USD"
        assert base.currency == counter.currency == "USD"
        assert base.sensitivity == pytest.approx(-base.year_fraction * forward, rel=1e-10)
        assert counter.sensitivity == pytest.approx(counter.year_fraction * forward, rel=1e-10)

    def test_point_sensitivity_inverse(self, provider):
        rates = provider.fx_forward_rates(EUR_USD)
        forward = rates.rate("EUR", FORWARD_DATE)
        base, counter = rates.rate_point_sensitivity("USD", FORWARD_DATE).sensitivities
        assert base.currency == counter.currency == "EUR"
        assert base.sensitivity == pytest.approx(base.year_fraction / forward, rel=1e-10)
        assert counter.sensitivity == pytest.approx(-counter.year_fraction / forward, rel=1e-10)

    @pytest.mark.parametrize("currency", ["EUR", "USD"])
    def test_spot_sensitivity_matches_bump(self, provider, currency):
        bump = 1e-6
        rates = provider.fx_forward_rates(EUR_USD)
        bumped = provider.with_fx_rate(FxRate.of("EUR", "USD", 1.23 + bump)).fx_forward_rates(EUR_USD)
        numeric = (bumped.rate(currency, FORWARD_DATE) - rates.rate(currency, FORWARD_DATE)) / bump
        assert rates.rate_fx_spot_sensitivity(currency, FORWARD_DATE) == pytest.approx(numeric, rel=1e-5)

    def test_valuation_date(self, provider, valuation_date):
        assert provider.fx_forward_rates(EUR_USD).valuation_date == valuation_date


def test_flat_curves_give_exponential_forward(valuation_date):
    provider = ImmutableRatesProvider(
        valuation_date,
        {
            "EUR": ZeroRateDiscountCurve.flat("EUR-Flat", "EUR", valuation_date, 0.0),
            "USD": ZeroRateDiscountCurve.flat("USD-Flat", "USD", valuation_date, 0.02),
        },
        [FxRate.of("EUR", "USD", 1.2)],
    )
    day = date(2019, 3, 28)
    assert provider.fx_forward_rates(EUR_USD).rate("EUR", day) == pytest.approx(1.2 * math.exp(0.02))
