"""Discount curves.

Curves are defined by nodes (year fractions from the valuation date) and
continuously compounded zero rates. The zero rate is linearly interpolated
between nodes and held flat outside them, and discount factors follow as
``exp(-r(t) * t)``.

Sensitivities are computed with :func:`jax.grad`, so they always agree with
the interpolation actually used for pricing.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Sequence
from dataclasses import dataclass, field

import jax
import jax.numpy as jnp

from windowfx.core.types import DayCountConvention
from windowfx.market.sensitivity import CurrencyParameterSensitivity, ZeroRateSensitivity
from windowfx.utilities.conventions import year_fraction


def _zero_rate(t: jnp.ndarray, nodes: jnp.ndarray, rates: jnp.ndarray) -> jnp.ndarray:
    return jnp.interp(t, nodes, rates)


_zero_rate_node_weights = jax.jit(jax.grad(_zero_rate, argnums=2))


@dataclass(frozen=True, eq=False)
class ZeroRateDiscountCurve:
    """Discount curve in one currency, interpolated on zero rates.

    Attributes:
        name: Curve name, used to key parameter sensitivities
        currency: Currency of the cash flows the curve discounts
        valuation_date: Date at which the curve's time axis starts
        year_fractions: Node times, strictly increasing
        zero_rates: Continuously compounded zero rate at each node
        day_count: Day count used to turn dates into times
        parameter_labels: One label per node, used in sensitivity reports
        quote_jacobian: Optional ``d(zero rates)/d(market quotes)`` matrix;
            market quote sensitivities use the identity when it is absent

    Example:
        >>> curve = ZeroRateDiscountCurve.of(
        ...     "USD-Disc", "USD", date(2018, 3, 28),
        ...     [date(2018, 6, 28), date(2019, 3, 28)], [0.02, 0.025],
        ... )
        >>> round(curve.discount_factor(date(2018, 6, 28)), 6)
        0.994972
    """

    name: str
    currency: str
    valuation_date: dt.date
    year_fractions: jnp.ndarray
    zero_rates: jnp.ndarray
    day_count: DayCountConvention = DayCountConvention.ACT_365F
    parameter_labels: tuple[str, ...] = ()
    quote_jacobian: jnp.ndarray | None = field(default=None)

    def __post_init__(self) -> None:
        nodes = jnp.asarray(self.year_fractions, dtype=jnp.float64).reshape(-1)
        rates = jnp.asarray(self.zero_rates, dtype=jnp.float64).reshape(-1)
        if nodes.shape[0] == 0:
            raise ValueError(f"Curve {self.name} must have at least one node")
        if nodes.shape != rates.shape:
            raise ValueError(
                f"Curve {self.name} has {nodes.shape[0]} nodes but {rates.shape[0]} rates"
            )
        if nodes.shape[0] > 1 and bool(jnp.any(jnp.diff(nodes) <= 0.0)):
            raise ValueError(f"Curve {self.name} nodes must be strictly increasing")
        object.__setattr__(self, "year_fractions", nodes)
        object.__setattr__(self, "zero_rates", rates)

        labels = self.parameter_labels or tuple(f"{float(t):.4f}Y" for t in nodes)
        if len(labels) != nodes.shape[0]:
            raise ValueError(f"Curve {self.name} needs one parameter label per node")
        object.__setattr__(self, "parameter_labels", tuple(labels))

        if self.quote_jacobian is not None:
            jacobian = jnp.asarray(self.quote_jacobian, dtype=jnp.float64)
            if jacobian.shape != (nodes.shape[0], nodes.shape[0]):
                raise ValueError(
                    f"Quote Jacobian of curve {self.name} must be square with one row per node"
                )
            object.__setattr__(self, "quote_jacobian", jacobian)

    @classmethod
    def of(
        cls,
        name: str,
        currency: str,
        valuation_date: dt.date,
        node_dates: Sequence[dt.date],
        zero_rates: Sequence[float],
        day_count: DayCountConvention = DayCountConvention.ACT_365F,
        quote_jacobian: jnp.ndarray | None = None,
    ) -> ZeroRateDiscountCurve:
        """Create a curve from node dates.

        Args:
            name: Curve name
            currency: Curve currency
            valuation_date: Valuation date, time zero on the curve
            node_dates: Node dates, strictly increasing
            zero_rates: Zero rate at each node date
            day_count: Day count for converting dates to times
            quote_jacobian: Optional ``d(zero rates)/d(market quotes)`` matrix

        Returns:
            Discount curve labelled by node date
        """
        nodes = [year_fraction(valuation_date, d, day_count) for d in node_dates]
        return cls(
            name=name,
            currency=currency,
            valuation_date=valuation_date,
            year_fractions=jnp.asarray(nodes),
            zero_rates=jnp.asarray(zero_rates),
            day_count=day_count,
            parameter_labels=tuple(d.isoformat() for d in node_dates),
            quote_jacobian=quote_jacobian,
        )

    @classmethod
    def flat(
        cls, name: str, currency: str, valuation_date: dt.date, rate: float
    ) -> ZeroRateDiscountCurve:
        """A curve with a single node and therefore a constant zero rate."""
        return cls(name, currency, valuation_date, jnp.asarray([1.0]), jnp.asarray([rate]))

    def parameter_count(self) -> int:
        return int(self.zero_rates.shape[0])

    def relative_year_fraction(self, day: dt.date) -> float:
        return year_fraction(self.valuation_date, day, self.day_count)

    def zero_rate(self, t: float) -> float:
        return float(_zero_rate(jnp.asarray(t), self.year_fractions, self.zero_rates))

    def discount_factor(self, day: dt.date) -> float:
        return self.discount_factor_at(self.relative_year_fraction(day))

    def discount_factor_at(self, t: float) -> float:
        return float(jnp.exp(-self.zero_rate(t) * t))

    def zero_rate_point_sensitivity(
        self, day: dt.date, sensitivity_currency: str | None = None
    ) -> ZeroRateSensitivity:
        """Sensitivity of the discount factor at ``day`` to the zero rate there.

        ``dDF/dr = -t * DF``, for a unit amount.
        """
        t = self.relative_year_fraction(day)
        return ZeroRateSensitivity(
            self.currency,
            t,
            sensitivity_currency or self.currency,
            -t * self.discount_factor_at(t),
        )

    def parameter_sensitivity(self, point: ZeroRateSensitivity) -> CurrencyParameterSensitivity:
        """Spread a point sensitivity onto the curve nodes."""
        weights = _zero_rate_node_weights(
            jnp.asarray(point.year_fraction), self.year_fractions, self.zero_rates
        )
        return CurrencyParameterSensitivity(
            self.name, point.currency, self.parameter_labels, weights * point.sensitivity
        )

    def market_quote_sensitivity(
        self, sensitivity: CurrencyParameterSensitivity
    ) -> CurrencyParameterSensitivity:
        """Convert a sensitivity to zero rates into one to the curve's market quotes."""
        if self.quote_jacobian is None:
            return sensitivity
        return sensitivity.with_sensitivity(self.quote_jacobian.T @ sensitivity.sensitivity)

    def with_zero_rates(self, zero_rates: jnp.ndarray) -> ZeroRateDiscountCurve:
        return ZeroRateDiscountCurve(
            self.name,
            self.currency,
            self.valuation_date,
            self.year_fractions,
            zero_rates,
            self.day_count,
            self.parameter_labels,
            self.quote_jacobian,
        )

    def with_parallel_shift(self, shift: float) -> ZeroRateDiscountCurve:
        """Curve with every zero rate moved by ``shift``."""
        return self.with_zero_rates(self.zero_rates + shift)
