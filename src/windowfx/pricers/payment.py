"""Pricer for single payments discounted on a currency's discount curve."""

from __future__ import annotations

from windowfx.core.amounts import CurrencyAmount, Payment
from windowfx.market.rates_provider import RatesProvider
from windowfx.market.sensitivity import PointSensitivities


class DiscountingPaymentPricer:
    """Discounts a payment on the curve of its own currency.

    A payment dated before the valuation date has already been settled and
    is worth zero.
    """

    def present_value(self, payment: Payment, provider: RatesProvider) -> CurrencyAmount:
        """Present value of a payment in its own currency."""
        if provider.valuation_date > payment.date:
            return CurrencyAmount.zero(payment.currency)
        df = provider.discount_factor(payment.currency, payment.date)
        return payment.value.multiplied_by(df)

    def forecast_value(self, payment: Payment, provider: RatesProvider) -> CurrencyAmount:
        """Undiscounted value of a payment, zero once settled."""
        if provider.valuation_date > payment.date:
            return CurrencyAmount.zero(payment.currency)
        return payment.value

    def present_value_sensitivity(
        self, payment: Payment, provider: RatesProvider
    ) -> PointSensitivities:
        """Sensitivity of :meth:`present_value` to the zero rate at the payment date."""
        if provider.valuation_date > payment.date:
            return PointSensitivities.empty()
        point = provider.discount_curve(payment.currency).zero_rate_point_sensitivity(payment.date)
        return PointSensitivities.of(point.multiplied_by(payment.amount))


DEFAULT_PAYMENT_PRICER = DiscountingPaymentPricer()
