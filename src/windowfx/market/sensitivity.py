"""Point and parameter sensitivities.

A point sensitivity is the derivative of a value with respect to the zero
rate of one curve at one point in time. Parameter sensitivities spread point
sensitivities onto the nodes of the curve that produced them, so they can be
summed and bucketed per curve.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

import jax.numpy as jnp
import numpy as np
import pandas as pd

from windowfx.core.amounts import CurrencyAmount, MultiCurrencyAmount


@dataclass(frozen=True)
class ZeroRateSensitivity:
    """Sensitivity to the zero rate of a discount curve at one time.

    Attributes:
        curve_currency: Currency of the discount curve
        year_fraction: Time of the point on the curve
        currency: Currency the sensitivity is expressed in
        sensitivity: Value of the derivative
    """

    curve_currency: str
    year_fraction: float
    currency: str
    sensitivity: float

    def multiplied_by(self, factor: float) -> ZeroRateSensitivity:
        return ZeroRateSensitivity(
            self.curve_currency, self.year_fraction, self.currency, self.sensitivity * factor
        )

    def with_sensitivity(self, sensitivity: float) -> ZeroRateSensitivity:
        return ZeroRateSensitivity(self.curve_currency, self.year_fraction, self.currency, sensitivity)

    @property
    def key(self) -> tuple[str, float, str]:
        return (self.curve_currency, self.year_fraction, self.currency)


@dataclass(frozen=True)
class PointSensitivities:
    """An immutable collection of point sensitivities.

    Example:
        >>> s1 = ZeroRateSensitivity("USD", 0.5, "USD", -100.0)
        >>> PointSensitivities.of(s1).combined_with(PointSensitivities.of(s1)).normalized().size()
        1
    """

    sensitivities: tuple[ZeroRateSensitivity, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> PointSensitivities:
        return cls(())

    @classmethod
    def of(cls, *sensitivities: ZeroRateSensitivity) -> PointSensitivities:
        return cls(tuple(sensitivities))

    def size(self) -> int:
        return len(self.sensitivities)

    def is_empty(self) -> bool:
        return not self.sensitivities

    def combined_with(self, other: PointSensitivities) -> PointSensitivities:
        return PointSensitivities(self.sensitivities + other.sensitivities)

    def multiplied_by(self, factor: float) -> PointSensitivities:
        return PointSensitivities(tuple(s.multiplied_by(factor) for s in self.sensitivities))

    def normalized(self) -> PointSensitivities:
        """Merge sensitivities sharing curve, time and currency, in sorted order."""
        totals: dict[tuple[str, float, str], float] = {}
        for s in self.sensitivities:
            totals[s.key] = totals.get(s.key, 0.0) + s.sensitivity
        return PointSensitivities(
            tuple(ZeroRateSensitivity(*key, value) for key, value in sorted(totals.items()))
        )

    def __iter__(self) -> Iterator[ZeroRateSensitivity]:
        return iter(self.sensitivities)

    def __len__(self) -> int:
        return len(self.sensitivities)


@dataclass(frozen=True, eq=False)
class CurrencyParameterSensitivity:
    """Sensitivity of a value to each parameter of one curve.

    Attributes:
        curve_name: Name of the curve
        currency: Currency the sensitivity is expressed in
        parameter_labels: One label per curve parameter, e.g. node year fractions
        sensitivity: Array of sensitivities, one per parameter
    """

    curve_name: str
    currency: str
    parameter_labels: tuple[str, ...]
    sensitivity: jnp.ndarray

    def __post_init__(self) -> None:
        values = jnp.asarray(self.sensitivity, dtype=jnp.float64)
        if values.shape != (len(self.parameter_labels),):
            raise ValueError(
                f"Sensitivity shape {values.shape} does not match "
                f"{len(self.parameter_labels)} parameters of curve {self.curve_name}"
            )
        object.__setattr__(self, "sensitivity", values)

    @property
    def key(self) -> tuple[str, str]:
        return (self.curve_name, self.currency)

    def parameter_count(self) -> int:
        return len(self.parameter_labels)

    def total(self) -> CurrencyAmount:
        return CurrencyAmount(self.currency, float(jnp.sum(self.sensitivity)))

    def multiplied_by(self, factor: float) -> CurrencyParameterSensitivity:
        return CurrencyParameterSensitivity(
            self.curve_name, self.currency, self.parameter_labels, self.sensitivity * factor
        )

    def with_sensitivity(self, sensitivity: jnp.ndarray) -> CurrencyParameterSensitivity:
        return CurrencyParameterSensitivity(
            self.curve_name, self.currency, self.parameter_labels, sensitivity
        )

    def plus(self, other: CurrencyParameterSensitivity) -> CurrencyParameterSensitivity:
        if other.key != self.key or other.parameter_labels != self.parameter_labels:
            raise ValueError(f"Cannot add sensitivity {other.key} to {self.key}")
        return self.with_sensitivity(self.sensitivity + other.sensitivity)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CurrencyParameterSensitivity):
            return NotImplemented
        return (
            self.key == other.key
            and self.parameter_labels == other.parameter_labels
            and bool(jnp.array_equal(self.sensitivity, other.sensitivity))
        )


@dataclass(frozen=True, eq=False)
class CurrencyParameterSensitivities:
    """Parameter sensitivities for several curves, one entry per curve and currency."""

    sensitivities: tuple[CurrencyParameterSensitivity, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        merged: dict[tuple[str, str], CurrencyParameterSensitivity] = {}
        for s in self.sensitivities:
            merged[s.key] = merged[s.key].plus(s) if s.key in merged else s
        object.__setattr__(
            self, "sensitivities", tuple(merged[key] for key in sorted(merged))
        )

    @classmethod
    def empty(cls) -> CurrencyParameterSensitivities:
        return cls(())

    @classmethod
    def of(cls, *sensitivities: CurrencyParameterSensitivity) -> CurrencyParameterSensitivities:
        return cls(tuple(sensitivities))

    @classmethod
    def of_iterable(
        cls, sensitivities: Iterable[CurrencyParameterSensitivity]
    ) -> CurrencyParameterSensitivities:
        return cls(tuple(sensitivities))

    def size(self) -> int:
        return len(self.sensitivities)

    def is_empty(self) -> bool:
        return not self.sensitivities

    def get(self, curve_name: str, currency: str) -> CurrencyParameterSensitivity:
        """Find the sensitivity to one curve, raising ``KeyError`` if there is none."""
        for s in self.sensitivities:
            if s.key == (curve_name, currency):
                return s
        raise KeyError(f"No sensitivity for curve {curve_name} in {currency}")

    def combined_with(
        self, other: CurrencyParameterSensitivities | CurrencyParameterSensitivity
    ) -> CurrencyParameterSensitivities:
        if isinstance(other, CurrencyParameterSensitivity):
            return CurrencyParameterSensitivities(self.sensitivities + (other,))
        return CurrencyParameterSensitivities(self.sensitivities + other.sensitivities)

    def multiplied_by(self, factor: float) -> CurrencyParameterSensitivities:
        return CurrencyParameterSensitivities(
            tuple(s.multiplied_by(factor) for s in self.sensitivities)
        )

    def total(self) -> MultiCurrencyAmount:
        """Sum over all curves and parameters, per currency."""
        return MultiCurrencyAmount.of_iterable(s.total() for s in self.sensitivities)

    def to_dataframe(self) -> pd.DataFrame:
        """One row per curve parameter, columns ``curve``, ``currency``, ``parameter``, ``sensitivity``."""
        rows = [
            {
                "curve": s.curve_name,
                "currency": s.currency,
                "parameter": label,
                "sensitivity": float(value),
            }
            for s in self.sensitivities
            for label, value in zip(s.parameter_labels, np.asarray(s.sensitivity))
        ]
        return pd.DataFrame(rows, columns=["curve", "currency", "parameter", "sensitivity"])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CurrencyParameterSensitivities):
            return NotImplemented
        return self.sensitivities == other.sensitivities

    def __iter__(self) -> Iterator[CurrencyParameterSensitivity]:
        return iter(self.sensitivities)

    def __len__(self) -> int:
        return len(self.sensitivities)
