"""Resolved window forward, ready for pricing."""

from __future__ import annotations

import datetime as dt
from collections.abc import Sequence
from dataclasses import dataclass

from windowfx.core.amounts import CurrencyAmount, Payment
from windowfx.core.currency import CurrencyPair, FxRate
from windowfx.product.window_forward import normalize_currency_order


@dataclass(frozen=True)
class ResolvedWindowForward:
    """A window forward with all dates adjusted and the window expanded.

    The payments are re-ordered on construction so that ``base_payment`` is in
    the base currency of the conventional pair. Window dates are kept as given
    by :meth:`WindowForward.resolve`, which makes them ascending and distinct.

    Attributes:
        base_payment: Payment in the base currency
        counter_payment: Payment in the counter currency
        window_dates: Dates over which the worst forward rate is taken
    """

    base_payment: Payment
    counter_payment: Payment
    window_dates: tuple[dt.date, ...]

    def __post_init__(self) -> None:
        base, counter = normalize_currency_order(self.base_payment, self.counter_payment)
        object.__setattr__(self, "base_payment", base)
        object.__setattr__(self, "counter_payment", counter)
        object.__setattr__(self, "window_dates", tuple(self.window_dates))

        if base.currency == counter.currency:
            raise ValueError("Payments must have different currencies")
        if (base.amount != 0.0 or counter.amount != 0.0) and _sign(base.amount) != -_sign(
            counter.amount
        ):
            raise ValueError("Payments must have different signs")
        if base.date > counter.date:
            raise ValueError("basePayment.date must be on or before counterPayment.date")

    @classmethod
    def of(
        cls, payment1: Payment, payment2: Payment, window_dates: Sequence[dt.date]
    ) -> ResolvedWindowForward:
        """Create from two payments given in any currency order."""
        return cls(payment1, payment2, tuple(window_dates))

    @classmethod
    def of_amounts(
        cls,
        amount1: CurrencyAmount,
        amount2: CurrencyAmount,
        value_date: dt.date,
        window_dates: Sequence[dt.date],
    ) -> ResolvedWindowForward:
        """Create from two amounts both paid on ``value_date``."""
        return cls.of(Payment.of(amount1, value_date), Payment.of(amount2, value_date), window_dates)

    @classmethod
    def of_rate(
        cls,
        amount: CurrencyAmount,
        fx_rate: FxRate,
        payment_date: dt.date,
        window_dates: Sequence[dt.date],
    ) -> ResolvedWindowForward:
        """Create from one amount and the agreed rate; the other leg has the opposite sign.

        Raises:
            ValueError: If the rate's pair does not contain the amount currency
        """
        if not fx_rate.pair.contains(amount.currency):
            raise ValueError(
                f"FX rate {fx_rate.pair} does not contain currency {amount.currency}"
            )
        other = fx_rate.pair.other(amount.currency)
        return cls.of_amounts(
            amount, amount.converted_to(other, fx_rate).negated(), payment_date, window_dates
        )

    @property
    def currency_pair(self) -> CurrencyPair:
        return CurrencyPair.of(self.base_payment.currency, self.counter_payment.currency)

    @property
    def payment_date(self) -> dt.date:
        """Contractual payment date, shared by both payments."""
        return self.base_payment.date

    @property
    def receive_currency_amount(self) -> CurrencyAmount:
        """The received leg; the counter leg when both amounts are zero."""
        if self.base_payment.amount > 0.0:
            return self.base_payment.value
        return self.counter_payment.value


def _sign(value: float) -> int:
    return (value > 0.0) - (value < 0.0)
