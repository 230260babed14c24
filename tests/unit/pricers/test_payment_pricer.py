"""Unit tests for the discounting payment pricer."""

from datetime import date

import pytest

from windowfx.core.amounts import CurrencyAmount, Payment
from windowfx.pricers.payment import DEFAULT_PAYMENT_PRICER, DiscountingPaymentPricer

PAYMENT = Payment.of(CurrencyAmount.of("USD", 1_000_000), date(2018, 9, 28))


class TestDiscountingPaymentPricer:
    """Test payment discounting."""

    def test_present_value(self, provider):
        pv = DEFAULT_PAYMENT_PRICER.present_value(PAYMENT, provider)
        assert pv.currency == "USD"
        assert pv.amount == pytest.approx(1_000_000 * provider.discount_factor("USD", PAYMENT.date))

    def test_forecast_value(self, provider):
        assert DiscountingPaymentPricer().forecast_value(PAYMENT, provider) == PAYMENT.value

    def test_payment_on_valuation_date_is_not_discounted(self, provider, valuation_date):
        payment = PAYMENT.with_date(valuation_date)
        assert DEFAULT_PAYMENT_PRICER.present_value(payment, provider).amount == pytest.approx(1_000_000)

    def test_settled_payment(self, provider):
        payment = PAYMENT.with_date(date(2018, 3, 27))
        assert DEFAULT_PAYMENT_PRICER.present_value(payment, provider) == CurrencyAmount.zero("USD")
        assert DEFAULT_PAYMENT_PRICER.forecast_value(payment, provider) == CurrencyAmount.zero("USD")
        assert DEFAULT_PAYMENT_PRICER.present_value_sensitivity(payment, provider).is_empty()

    def test_present_value_sensitivity(self, provider, usd_curve):
        sens = DEFAULT_PAYMENT_PRICER.present_value_sensitivity(PAYMENT, provider)
        (point,) = sens.sensitivities
        t = usd_curve.relative_year_fraction(PAYMENT.date)
        assert point.year_fraction == pytest.approx(t)
        assert point.sensitivity == pytest.approx(-t * 1_000_000 * usd_curve.discount_factor(PAYMENT.date))

    def test_sensitivity_matches_bump(self, provider):
        bump = 1e-7
        base = DEFAULT_PAYMENT_PRICER.present_value(PAYMENT, provider).amount
        bumped = DEFAULT_PAYMENT_PRICER.present_value(PAYMENT, provider.with_parallel_shift(bump)).amount
        (point,) = DEFAULT_PAYMENT_PRICER.present_value_sensitivity(PAYMENT, provider).sensitivities
        assert point.sensitivity == pytest.approx((bumped - base) / bump, rel=1e-5)
