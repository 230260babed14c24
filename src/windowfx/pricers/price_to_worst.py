"""Price-to-worst pricing of window forwards.

The present value of a window forward is the value of its two payments as if
they were settled on the window date with the lowest forward rate. Everything
that describes the contract itself (point sensitivities, current cash, the
reported forward rate) uses the contractual payment date instead;
``selected_date`` below is only used by the present value.

Example:
    >>> pricer = PriceToWorstWindowForwardProductPricer()
    >>> pv = pricer.present_value(resolved, provider)
    >>> pv.get_amount("USD")
"""

from __future__ import annotations

import datetime as dt
import math

from windowfx.core.amounts import MultiCurrencyAmount, Payment
from windowfx.core.currency import FxRate
from windowfx.logging_config import get_logger
from windowfx.market.rates_provider import RatesProvider
from windowfx.market.sensitivity import PointSensitivities
from windowfx.pricers.payment import DEFAULT_PAYMENT_PRICER, DiscountingPaymentPricer
from windowfx.product.resolved import ResolvedWindowForward
from windowfx.product.trade import ResolvedWindowForwardTrade

logger = get_logger(__name__)


def _zero_amounts(fx: ResolvedWindowForward) -> MultiCurrencyAmount:
    return MultiCurrencyAmount.of(
        fx.base_payment.value.multiplied_by(0.0), fx.counter_payment.value.multiplied_by(0.0)
    )


class PriceToWorstWindowForwardProductPricer:
    """Pricer for resolved window forwards.

    Stateless; a single instance may be shared between threads.
    """

    def __init__(self, payment_pricer: DiscountingPaymentPricer = DEFAULT_PAYMENT_PRICER):
        self.payment_pricer = payment_pricer

    def forward_fx_rate_at(
        self, fx: ResolvedWindowForward, provider: RatesProvider, day: dt.date
    ) -> FxRate:
        """Forward rate of the contract's pair at ``day``, quoted base/counter.

        Raises:
            MarketDataError: If the provider lacks a curve or spot rate for the pair
        """
        forward_rates = provider.fx_forward_rates(fx.currency_pair)
        base = fx.base_payment.currency
        rate = forward_rates.rate(base, day)
        return FxRate.of(base, fx.counter_payment.currency, rate)

    def worst_window_date(
        self, fx: ResolvedWindowForward, provider: RatesProvider
    ) -> dt.date | None:
        """Window date with the minimum forward rate, ignoring dates already past.

        The first such date wins on ties. ``None`` if every window date is
        before the valuation date.
        """
        valuation_date = provider.valuation_date
        pair = fx.currency_pair
        forward_rates = provider.fx_forward_rates(pair)
        worst: tuple[dt.date, float] | None = None
        for day in fx.window_dates:
            if day < valuation_date:
                continue
            rate = forward_rates.rate(pair.base, day)
            if worst is None or rate < worst[1]:
                worst = (day, rate)
        if worst is None:
            return None
        logger.debug(
            "Selected worst window date",
            extra={"pair": str(pair), "date": worst[0].isoformat(), "rate": worst[1]},
        )
        return worst[0]

    def present_value(
        self, fx: ResolvedWindowForward, provider: RatesProvider
    ) -> MultiCurrencyAmount:
        """Present value, priced to the worst window date.

        Each payment is discounted in its own currency from the selected
        window date. Zero in both currencies once the payment date has passed
        or when no window date remains.
        """
        if provider.valuation_date > fx.payment_date:
            return _zero_amounts(fx)
        selected_date = self.worst_window_date(fx, provider)
        if selected_date is None:
            return _zero_amounts(fx)
        return MultiCurrencyAmount.of(
            self.payment_pricer.present_value(
                Payment.of(fx.base_payment.value, selected_date), provider
            ),
            self.payment_pricer.present_value(
                Payment.of(fx.counter_payment.value, selected_date), provider
            ),
        )

    def present_value_sensitivity(
        self, fx: ResolvedWindowForward, provider: RatesProvider
    ) -> PointSensitivities:
        """Zero-rate point sensitivity of the contractual payments.

        Uses the contractual payment date, not the worst window date.
        """
        if provider.valuation_date > fx.payment_date:
            return PointSensitivities.empty()
        base = self.payment_pricer.present_value_sensitivity(fx.base_payment, provider)
        counter = self.payment_pricer.present_value_sensitivity(fx.counter_payment, provider)
        return base.combined_with(counter)

    def par_spread(self, fx: ResolvedWindowForward, provider: RatesProvider) -> float:
        """Spread to the contract rate that would bring the present value to zero.

        NaN when the base amount is zero, as no spread is defined then.
        """
        counter_currency = fx.counter_payment.currency
        pv = self.present_value(fx, provider).converted_to(counter_currency, provider).amount
        df = provider.discount_factor(counter_currency, fx.payment_date)
        if fx.base_payment.amount == 0.0:
            return math.nan
        return pv / (fx.base_payment.amount * df)

    def currency_exposure(
        self, fx: ResolvedWindowForward, provider: RatesProvider
    ) -> MultiCurrencyAmount:
        return self.present_value(fx, provider)

    def current_cash(
        self, fx: ResolvedWindowForward, valuation_date: dt.date
    ) -> MultiCurrencyAmount:
        """The payments themselves on the payment date, zero on any other date."""
        if valuation_date == fx.payment_date:
            return MultiCurrencyAmount.of(fx.base_payment.value, fx.counter_payment.value)
        return _zero_amounts(fx)

    def forward_fx_rate(self, fx: ResolvedWindowForward, provider: RatesProvider) -> FxRate:
        """Forward rate at the contractual payment date."""
        return self.forward_fx_rate_at(fx, provider, fx.payment_date)

    def forward_fx_rate_point_sensitivity(
        self, fx: ResolvedWindowForward, provider: RatesProvider
    ) -> PointSensitivities:
        """Sensitivity of the receive-currency forward rate at the payment date."""
        forward_rates = provider.fx_forward_rates(fx.currency_pair)
        return forward_rates.rate_point_sensitivity(
            fx.receive_currency_amount.currency, fx.payment_date
        )

    def forward_fx_rate_spot_sensitivity(
        self, fx: ResolvedWindowForward, provider: RatesProvider
    ) -> float:
        """Sensitivity of the receive-currency forward rate to the spot rate."""
        forward_rates = provider.fx_forward_rates(fx.currency_pair)
        return forward_rates.rate_fx_spot_sensitivity(
            fx.receive_currency_amount.currency, fx.payment_date
        )


class PriceToWorstWindowForwardTradePricer:
    """Trade-level pricer, delegating to the product pricer."""

    def __init__(
        self,
        product_pricer: PriceToWorstWindowForwardProductPricer | None = None,
    ):
        self.product_pricer = product_pricer or PriceToWorstWindowForwardProductPricer()

    def present_value(
        self, trade: ResolvedWindowForwardTrade, provider: RatesProvider
    ) -> MultiCurrencyAmount:
        return self.product_pricer.present_value(trade.product, provider)

    def present_value_sensitivity(
        self, trade: ResolvedWindowForwardTrade, provider: RatesProvider
    ) -> PointSensitivities:
        return self.product_pricer.present_value_sensitivity(trade.product, provider)

    def par_spread(self, trade: ResolvedWindowForwardTrade, provider: RatesProvider) -> float:
        return self.product_pricer.par_spread(trade.product, provider)

    def currency_exposure(
        self, trade: ResolvedWindowForwardTrade, provider: RatesProvider
    ) -> MultiCurrencyAmount:
        return self.product_pricer.currency_exposure(trade.product, provider)

    def current_cash(
        self, trade: ResolvedWindowForwardTrade, provider: RatesProvider
    ) -> MultiCurrencyAmount:
        return self.product_pricer.current_cash(trade.product, provider.valuation_date)

    def forward_fx_rate(self, trade: ResolvedWindowForwardTrade, provider: RatesProvider) -> FxRate:
        return self.product_pricer.forward_fx_rate(trade.product, provider)

    def forward_fx_rate_point_sensitivity(
        self, trade: ResolvedWindowForwardTrade, provider: RatesProvider
    ) -> PointSensitivities:
        return self.product_pricer.forward_fx_rate_point_sensitivity(trade.product, provider)

    def forward_fx_rate_spot_sensitivity(
        self, trade: ResolvedWindowForwardTrade, provider: RatesProvider
    ) -> float:
        return self.product_pricer.forward_fx_rate_spot_sensitivity(trade.product, provider)


DEFAULT_PRODUCT_PRICER = PriceToWorstWindowForwardProductPricer()
DEFAULT_TRADE_PRICER = PriceToWorstWindowForwardTradePricer(DEFAULT_PRODUCT_PRICER)
