"""Rates providers: the market data view used by the pricers.

A rates provider supplies, as of one valuation date, discount curves per
currency, spot FX rates and forward FX rates implied from both. Pricers only
ever talk to the :class:`RatesProvider` protocol.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable, Mapping
from typing import Protocol, runtime_checkable

import jax
import jax.numpy as jnp

from windowfx.core.currency import CurrencyPair, FxRate
from windowfx.exceptions import MarketDataError
from windowfx.logging_config import get_logger
from windowfx.market.curves import ZeroRateDiscountCurve
from windowfx.market.sensitivity import (
    CurrencyParameterSensitivities,
    PointSensitivities,
    ZeroRateSensitivity,
)

logger = get_logger(__name__)

# FX rates missing in the provider are triangulated through this currency.
TRIANGULATION_CURRENCY = "USD"


def _forward_rate(
    spot: jnp.ndarray,
    base_rate: jnp.ndarray,
    counter_rate: jnp.ndarray,
    base_t: jnp.ndarray,
    counter_t: jnp.ndarray,
) -> jnp.ndarray:
    """Forward of ``spot`` by interest parity: ``spot * DF_base / DF_counter``."""
    return spot * jnp.exp(-base_rate * base_t) / jnp.exp(-counter_rate * counter_t)


_forward_rate_zero_rate_gradient = jax.jit(jax.grad(_forward_rate, argnums=(1, 2)))


class DiscountFxForwardRates:
    """Forward FX rates for one pair, implied from spot and two discount curves.

    Example:
        >>> fwd = provider.fx_forward_rates(CurrencyPair.of("EUR", "USD"))
        >>> fwd.rate("EUR", date(2018, 6, 29))  # USD per EUR
        >>> fwd.rate("USD", date(2018, 6, 29))  # EUR per USD
    """

    def __init__(
        self,
        currency_pair: CurrencyPair,
        spot_rate: float,
        base_curve: ZeroRateDiscountCurve,
        counter_curve: ZeroRateDiscountCurve,
    ):
        if base_curve.currency != currency_pair.base or counter_curve.currency != currency_pair.counter:
            raise ValueError(
                f"Curves {base_curve.currency}/{counter_curve.currency} do not match pair {currency_pair}"
            )
        self.currency_pair = currency_pair
        self.spot_rate = float(spot_rate)
        self.base_curve = base_curve
        self.counter_curve = counter_curve

    @property
    def valuation_date(self) -> dt.date:
        return self.base_curve.valuation_date

    def _check_currency(self, base_currency: str) -> None:
        if not self.currency_pair.contains(base_currency):
            raise ValueError(
                f"Currency {base_currency} is not part of pair {self.currency_pair}"
            )

    def _inputs(self, day: dt.date) -> tuple[jnp.ndarray, ...]:
        base_t = self.base_curve.relative_year_fraction(day)
        counter_t = self.counter_curve.relative_year_fraction(day)
        return (
            jnp.asarray(self.spot_rate),
            jnp.asarray(self.base_curve.zero_rate(base_t)),
            jnp.asarray(self.counter_curve.zero_rate(counter_t)),
            jnp.asarray(base_t),
            jnp.asarray(counter_t),
        )

    def rate(self, base_currency: str, day: dt.date) -> float:
        """Forward rate at ``day``, quoted per unit of ``base_currency``.

        Args:
            base_currency: Either currency of the pair
            day: Date of the forward

        Returns:
            Counter units per base unit if ``base_currency`` is the pair's base,
            otherwise the inverse
        """
        self._check_currency(base_currency)
        forward = float(_forward_rate(*self._inputs(day)))
        if base_currency == self.currency_pair.base:
            return forward
        return 1.0 / forward

    def rate_point_sensitivity(self, base_currency: str, day: dt.date) -> PointSensitivities:
        """Sensitivity of :meth:`rate` to the zero rates of both curves at ``day``."""
        self._check_currency(base_currency)
        inputs = self._inputs(day)
        d_base, d_counter = _forward_rate_zero_rate_gradient(*inputs)
        d_base, d_counter = float(d_base), float(d_counter)
        currency = self.currency_pair.counter
        if base_currency != self.currency_pair.base:
            forward = float(_forward_rate(*inputs))
            scale = -1.0 / (forward * forward)
            d_base, d_counter = d_base * scale, d_counter * scale
            currency = self.currency_pair.base
        return PointSensitivities.of(
            ZeroRateSensitivity(self.base_curve.currency, float(inputs[3]), currency, d_base),
            ZeroRateSensitivity(self.counter_curve.currency, float(inputs[4]), currency, d_counter),
        )

    def rate_fx_spot_sensitivity(self, base_currency: str, day: dt.date) -> float:
        """Derivative of :meth:`rate` with respect to the spot rate of the pair."""
        self._check_currency(base_currency)
        ratio = self.base_curve.discount_factor(day) / self.counter_curve.discount_factor(day)
        if base_currency == self.currency_pair.base:
            return ratio
        forward = self.spot_rate * ratio
        return -ratio / (forward * forward)


@runtime_checkable
class RatesProvider(Protocol):
    """Market data needed to price window forwards."""

    @property
    def valuation_date(self) -> dt.date:
        """Date the market data is as of."""
        ...

    def fx_rate(self, base: str, counter: str) -> float:
        """Spot rate: counter units per unit of ``base``."""
        ...

    def discount_factor(self, currency: str, day: dt.date) -> float:
        """Discount factor in ``currency`` from ``day`` to the valuation date."""
        ...

    def discount_curve(self, currency: str) -> ZeroRateDiscountCurve:
        """The discount curve of ``currency``."""
        ...

    def fx_forward_rates(self, currency_pair: CurrencyPair) -> DiscountFxForwardRates:
        """Forward FX rates for a currency pair."""
        ...

    def parameter_sensitivity(
        self, sensitivities: PointSensitivities
    ) -> CurrencyParameterSensitivities:
        """Map point sensitivities onto curve parameters."""
        ...

    def market_quote_sensitivity(
        self, sensitivities: CurrencyParameterSensitivities
    ) -> CurrencyParameterSensitivities:
        """Convert parameter sensitivities into market quote sensitivities."""
        ...


class ImmutableRatesProvider:
    """Rates provider backed by discount curves and a table of spot FX rates.

    Spot rates may be given in either direction; the inverse is derived. A
    rate for a pair that is not in the table is triangulated through USD when
    both legs against USD are available.

    Example:
        >>> provider = ImmutableRatesProvider(
        ...     date(2018, 3, 28),
        ...     discount_curves={"EUR": eur_curve, "USD": usd_curve},
        ...     fx_rates=[FxRate.of("EUR", "USD", 1.23)],
        ... )
        >>> provider.fx_rate("USD", "EUR")
        0.8130081300813008
    """

    def __init__(
        self,
        valuation_date: dt.date,
        discount_curves: Mapping[str, ZeroRateDiscountCurve] | None = None,
        fx_rates: Iterable[FxRate] = (),
    ):
        self._valuation_date = valuation_date
        self._curves: dict[str, ZeroRateDiscountCurve] = dict(discount_curves or {})
        for currency, curve in self._curves.items():
            if curve.currency != currency:
                raise ValueError(f"Curve {curve.name} is in {curve.currency}, not {currency}")
            if curve.valuation_date != valuation_date:
                raise ValueError(
                    f"Curve {curve.name} valuation date {curve.valuation_date} "
                    f"differs from provider valuation date {valuation_date}"
                )
        self._fx_rates: dict[tuple[str, str], float] = {}
        for fx in fx_rates:
            self._fx_rates[(fx.pair.base, fx.pair.counter)] = fx.rate

    @property
    def valuation_date(self) -> dt.date:
        return self._valuation_date

    @property
    def discount_curves(self) -> dict[str, ZeroRateDiscountCurve]:
        return dict(self._curves)

    @property
    def fx_rates(self) -> tuple[FxRate, ...]:
        return tuple(FxRate.of(b, c, r) for (b, c), r in self._fx_rates.items())

    def _direct_fx_rate(self, base: str, counter: str) -> float | None:
        if base == counter:
            return 1.0
        if (base, counter) in self._fx_rates:
            return self._fx_rates[(base, counter)]
        if (counter, base) in self._fx_rates:
            return 1.0 / self._fx_rates[(counter, base)]
        return None

    def fx_rate(self, base: str, counter: str) -> float:
        """Spot FX rate.

        Raises:
            MarketDataError: If the rate is neither available nor triangulable
        """
        direct = self._direct_fx_rate(base, counter)
        if direct is not None:
            return direct
        via = TRIANGULATION_CURRENCY
        base_leg = self._direct_fx_rate(base, via)
        counter_leg = self._direct_fx_rate(via, counter)
        if base_leg is None or counter_leg is None:
            raise MarketDataError(
                "No FX rate available", context={"pair": f"{base}/{counter}"}
            )
        return base_leg * counter_leg

    def discount_curve(self, currency: str) -> ZeroRateDiscountCurve:
        """Discount curve for a currency.

        Raises:
            MarketDataError: If no curve is held for the currency
        """
        try:
            return self._curves[currency]
        except KeyError:
            raise MarketDataError(
                "Unable to find discount curve",
                context={"currency": currency, "available": ", ".join(sorted(self._curves))},
            ) from None

    def discount_factor(self, currency: str, day: dt.date) -> float:
        return self.discount_curve(currency).discount_factor(day)

    def fx_forward_rates(self, currency_pair: CurrencyPair) -> DiscountFxForwardRates:
        return DiscountFxForwardRates(
            currency_pair,
            self.fx_rate(currency_pair.base, currency_pair.counter),
            self.discount_curve(currency_pair.base),
            self.discount_curve(currency_pair.counter),
        )

    def parameter_sensitivity(
        self, sensitivities: PointSensitivities
    ) -> CurrencyParameterSensitivities:
        """Map each point sensitivity onto the nodes of its curve and sum per curve."""
        return CurrencyParameterSensitivities.of_iterable(
            self.discount_curve(point.curve_currency).parameter_sensitivity(point)
            for point in sensitivities
        )

    def market_quote_sensitivity(
        self, sensitivities: CurrencyParameterSensitivities
    ) -> CurrencyParameterSensitivities:
        """Apply each curve's quote Jacobian to its parameter sensitivity."""
        by_name = {curve.name: curve for curve in self._curves.values()}
        converted = []
        for sensitivity in sensitivities:
            curve = by_name.get(sensitivity.curve_name)
            if curve is None:
                raise MarketDataError(
                    "Unable to find curve for sensitivity",
                    context={"curve": sensitivity.curve_name},
                )
            converted.append(curve.market_quote_sensitivity(sensitivity))
        return CurrencyParameterSensitivities.of_iterable(converted)

    def with_parallel_shift(self, shift: float) -> ImmutableRatesProvider:
        """Provider with every discount curve shifted by ``shift`` in zero rate."""
        return ImmutableRatesProvider(
            self._valuation_date,
            {ccy: curve.with_parallel_shift(shift) for ccy, curve in self._curves.items()},
            self.fx_rates,
        )

    def with_fx_rate(self, fx_rate: FxRate) -> ImmutableRatesProvider:
        """Provider with one spot rate replaced or added."""
        rates = {
            pair: rate
            for pair, rate in self._fx_rates.items()
            if set(pair) != {fx_rate.pair.base, fx_rate.pair.counter}
        }
        rates[(fx_rate.pair.base, fx_rate.pair.counter)] = fx_rate.rate
        return ImmutableRatesProvider(
            self._valuation_date,
            self._curves,
            (FxRate.of(b, c, r) for (b, c), r in rates.items()),
        )

    def __repr__(self) -> str:
        return (
            f"ImmutableRatesProvider(valuation_date={self._valuation_date}, "
            f"curves={sorted(self._curves)}, fx_rates={len(self._fx_rates)})"
        )
