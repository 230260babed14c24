"""Unit tests for price-to-worst pricing of window forwards.

Tests for:
- Selection of the worst window date
- Present value at the selected date, and its degenerate cases
- Measures tied to the contractual payment date
- Trade pricer delegation
"""

import math
from datetime import date

import pytest

from windowfx.core.amounts import CurrencyAmount, MultiCurrencyAmount
from windowfx.core.currency import CurrencyPair, FxRate
from windowfx.exceptions import MarketDataError
from windowfx.market.curves import ZeroRateDiscountCurve
from windowfx.market.rates_provider import ImmutableRatesProvider
from windowfx.pricers.price_to_worst import (
    DEFAULT_PRODUCT_PRICER,
    DEFAULT_TRADE_PRICER,
    PriceToWorstWindowForwardProductPricer,
    PriceToWorstWindowForwardTradePricer,
)
from windowfx.product.resolved import ResolvedWindowForward
from windowfx.product.trade import ResolvedWindowForwardTrade, TradeInfo

PAYMENT_DATE = date(2018, 7, 2)
WINDOW = (date(2018, 4, 2), date(2018, 5, 1), date(2018, 6, 1), date(2018, 6, 29))
EUR_PAY = CurrencyAmount.of("EUR", -125_000)
USD_RECEIVE = CurrencyAmount.of("USD", 150_000)

pricer = PriceToWorstWindowForwardProductPricer()


def flat_provider(valuation_date: date, eur_rate: float, usd_rate: float) -> ImmutableRatesProvider:
    return ImmutableRatesProvider(
        valuation_date,
        {
            "EUR": ZeroRateDiscountCurve.flat("EUR-Flat", "EUR", valuation_date, eur_rate),
            "USD": ZeroRateDiscountCurve.flat("USD-Flat", "USD", valuation_date, usd_rate),
        },
        [FxRate.of("EUR", "USD", 1.23)],
    )


@pytest.fixture
def fx() -> ResolvedWindowForward:
    return ResolvedWindowForward.of_amounts(USD_RECEIVE, EUR_PAY, PAYMENT_DATE, WINDOW)


def discounted_at(fx: ResolvedWindowForward, provider, day: date) -> MultiCurrencyAmount:
    return MultiCurrencyAmount.of(
        fx.base_payment.value.multiplied_by(provider.discount_factor("EUR", day)),
        fx.counter_payment.value.multiplied_by(provider.discount_factor("USD", day)),
    )


class TestWorstWindowDate:
    """Test selection of the window date with the lowest forward rate."""

    def test_rising_forward_selects_first_date(self, fx, provider):
        assert pricer.worst_window_date(fx, provider) == WINDOW[0]

    def test_falling_forward_selects_last_date(self, fx):
        provider = flat_provider(date(2018, 3, 28), 0.03, 0.01)
        assert pricer.worst_window_date(fx, provider) == WINDOW[-1]

    def test_tie_selects_first_date(self, fx):
        provider = flat_provider(date(2018, 3, 28), 0.02, 0.02)
        assert pricer.worst_window_date(fx, provider) == WINDOW[0]

    def test_past_dates_ignored(self, fx):
        provider = flat_provider(date(2018, 5, 15), 0.0, 0.02)
        assert pricer.worst_window_date(fx, provider) == date(2018, 6, 1)

    def test_date_on_valuation_date_included(self, fx):
        provider = flat_provider(date(2018, 5, 1), 0.0, 0.02)
        assert pricer.worst_window_date(fx, provider) == date(2018, 5, 1)

    def test_no_remaining_dates(self, fx):
        provider = flat_provider(date(2018, 6, 30), 0.0, 0.02)
        assert pricer.worst_window_date(fx, provider) is None

    def test_selection_ignores_which_leg_is_received(self, provider):
        # the minimum base/counter rate is taken for both directions
        receive_usd = ResolvedWindowForward.of_amounts(USD_RECEIVE, EUR_PAY, PAYMENT_DATE, WINDOW)
        receive_eur = ResolvedWindowForward.of_amounts(
            EUR_PAY.negated(), USD_RECEIVE.negated(), PAYMENT_DATE, WINDOW
        )
        assert pricer.worst_window_date(receive_usd, provider) == pricer.worst_window_date(
            receive_eur, provider
        )

    def test_forward_fx_rate_at(self, fx, provider):
        rate = pricer.forward_fx_rate_at(fx, provider, WINDOW[1])
        assert rate.pair == CurrencyPair.of("EUR", "USD")
        assert rate.rate == pytest.approx(provider.fx_forward_rates(fx.currency_pair).rate("EUR", WINDOW[1]))


class TestPresentValue:
    """Test the price-to-worst present value."""

    def test_discounted_at_selected_date(self, fx, provider):
        pv = pricer.present_value(fx, provider)
        expected = discounted_at(fx, provider, WINDOW[0])
        assert pv.get_amount("EUR").amount == pytest.approx(expected.get_amount("EUR").amount, rel=1e-12)
        assert pv.get_amount("USD").amount == pytest.approx(expected.get_amount("USD").amount, rel=1e-12)

    def test_not_discounted_at_payment_date(self, fx, provider):
        pv = pricer.present_value(fx, provider)
        at_payment = discounted_at(fx, provider, PAYMENT_DATE)
        assert pv.get_amount("USD").amount != pytest.approx(at_payment.get_amount("USD").amount)

    def test_falling_forward(self, fx):
        provider = flat_provider(date(2018, 3, 28), 0.03, 0.01)
        pv = pricer.present_value(fx, provider)
        expected = discounted_at(fx, provider, WINDOW[-1])
        assert pv.get_amount("EUR").amount == pytest.approx(expected.get_amount("EUR").amount)

    def test_expired_is_zero_in_both_currencies(self, fx):
        provider = flat_provider(date(2018, 7, 3), 0.0, 0.02)
        pv = pricer.present_value(fx, provider)
        assert pv.to_dict() == {"EUR": 0.0, "USD": 0.0}

    def test_no_remaining_window_date_is_zero(self, fx):
        provider = flat_provider(date(2018, 6, 30), 0.0, 0.02)
        assert pricer.present_value(fx, provider).to_dict() == {"EUR": 0.0, "USD": 0.0}

    def test_valuation_on_payment_date(self):
        fx = ResolvedWindowForward.of_amounts(USD_RECEIVE, EUR_PAY, PAYMENT_DATE, (PAYMENT_DATE,))
        provider = flat_provider(PAYMENT_DATE, 0.0, 0.02)
        pv = pricer.present_value(fx, provider)
        assert pv.get_amount("USD").amount == pytest.approx(150_000)
        assert pv.get_amount("EUR").amount == pytest.approx(-125_000)

    def test_missing_curve_propagates(self, fx, eur_curve, valuation_date):
        provider = ImmutableRatesProvider(
            valuation_date, {"EUR": eur_curve}, [FxRate.of("EUR", "USD", 1.23)]
        )
        with pytest.raises(MarketDataError):
            pricer.present_value(fx, provider)

    def test_currency_exposure_equals_present_value(self, fx, provider):
        assert pricer.currency_exposure(fx, provider) == pricer.present_value(fx, provider)


class TestPaymentDateMeasures:
    """Measures that use the contractual payment date."""

    def test_present_value_sensitivity(self, fx, provider, eur_curve, usd_curve):
        sens = pricer.present_value_sensitivity(fx, provider)
        eur_point, usd_point = sorted(sens.sensitivities, key=lambda s: s.curve_currency)
        t = usd_curve.relative_year_fraction(PAYMENT_DATE)
        assert eur_point.year_fraction == pytest.approx(t)
        assert eur_point.sensitivity == pytest.approx(
            125_000 * t * eur_curve.discount_factor(PAYMENT_DATE)
        )
        assert usd_point.sensitivity == pytest.approx(
            -150_000 * t * usd_curve.discount_factor(PAYMENT_DATE)
        )

    def test_present_value_sensitivity_expired(self, fx):
        provider = flat_provider(date(2018, 7, 3), 0.0, 0.02)
        assert pricer.present_value_sensitivity(fx, provider).is_empty()

    def test_par_spread(self, fx, provider):
        pv = pricer.present_value(fx, provider).converted_to("USD", provider).amount
        df = provider.discount_factor("USD", PAYMENT_DATE)
        assert pricer.par_spread(fx, provider) == pytest.approx(pv / (-125_000 * df))

    def test_par_spread_zero_notional_is_nan(self, provider):
        zero = ResolvedWindowForward.of_amounts(
            CurrencyAmount.of("EUR", 0.0), CurrencyAmount.of("USD", 0.0), PAYMENT_DATE, WINDOW
        )
        assert math.isnan(pricer.par_spread(zero, provider))

    def test_forward_fx_rate(self, fx, provider):
        rate = pricer.forward_fx_rate(fx, provider)
        assert rate == pricer.forward_fx_rate_at(fx, provider, PAYMENT_DATE)

    def test_forward_fx_rate_point_sensitivity_uses_receive_currency(self, fx, provider):
        sens = pricer.forward_fx_rate_point_sensitivity(fx, provider)
        expected = provider.fx_forward_rates(fx.currency_pair).rate_point_sensitivity("USD", PAYMENT_DATE)
        assert sens == expected
        assert {s.currency for s in sens} == {"EUR"}

    def test_forward_fx_rate_spot_sensitivity(self, fx, provider):
        expected = provider.fx_forward_rates(fx.currency_pair).rate_fx_spot_sensitivity(
            "USD", PAYMENT_DATE
        )
        assert pricer.forward_fx_rate_spot_sensitivity(fx, provider) == pytest.approx(expected)
        assert expected < 0.0

    def test_current_cash_on_payment_date(self, fx):
        cash = pricer.current_cash(fx, PAYMENT_DATE)
        assert cash.to_dict() == {"EUR": -125_000.0, "USD": 150_000.0}

    @pytest.mark.parametrize("day", [date(2018, 3, 28), date(2018, 7, 1), date(2018, 7, 3)])
    def test_current_cash_other_dates(self, fx, day):
        assert pricer.current_cash(fx, day).to_dict() == {"EUR": 0.0, "USD": 0.0}


class TestTradePricer:
    """Trade pricer delegates to the product pricer."""

    @pytest.fixture
    def trade(self, fx):
        return ResolvedWindowForwardTrade.of(TradeInfo.of(date(2018, 3, 28), "T1"), fx)

    def test_default_product_pricer(self):
        assert isinstance(PriceToWorstWindowForwardTradePricer().product_pricer, PriceToWorstWindowForwardProductPricer)
        assert DEFAULT_TRADE_PRICER.product_pricer is DEFAULT_PRODUCT_PRICER

    def test_delegation(self, trade, fx, provider):
        assert DEFAULT_TRADE_PRICER.present_value(trade, provider) == pricer.present_value(fx, provider)
        assert DEFAULT_TRADE_PRICER.currency_exposure(trade, provider) == pricer.currency_exposure(fx, provider)
        assert DEFAULT_TRADE_PRICER.par_spread(trade, provider) == pricer.par_spread(fx, provider)
        assert DEFAULT_TRADE_PRICER.forward_fx_rate(trade, provider) == pricer.forward_fx_rate(fx, provider)
        assert DEFAULT_TRADE_PRICER.present_value_sensitivity(trade, provider) == (
            pricer.present_value_sensitivity(fx, provider)
        )
        assert DEFAULT_TRADE_PRICER.forward_fx_rate_point_sensitivity(trade, provider) == (
            pricer.forward_fx_rate_point_sensitivity(fx, provider)
        )
        assert DEFAULT_TRADE_PRICER.forward_fx_rate_spot_sensitivity(trade, provider) == (
            pricer.forward_fx_rate_spot_sensitivity(fx, provider)
        )

    def test_current_cash_uses_provider_valuation_date(self, trade, provider):
        assert DEFAULT_TRADE_PRICER.current_cash(trade, provider).to_dict() == {"EUR": 0.0, "USD": 0.0}
        on_payment = flat_provider(PAYMENT_DATE, 0.0, 0.02)
        assert DEFAULT_TRADE_PRICER.current_cash(trade, on_payment).get_amount("USD").amount == 150_000
