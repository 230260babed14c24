"""Currencies, currency pairs and FX rates.

Currencies are plain ISO 4217 code strings. A :class:`CurrencyPair` knows the
market convention for quoting, which decides which currency of a window
forward is stored as base and which as counter.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

# Pairs quoted this way round in the market. Anything not listed falls back
# to the currency priority below.
MARKET_CONVENTION_PAIRS: frozenset[tuple[str, str]] = frozenset(
    {
        ("EUR", "USD"),
        ("GBP", "USD"),
        ("AUD", "USD"),
        ("NZD", "USD"),
        ("EUR", "GBP"),
        ("EUR", "JPY"),
        ("EUR", "CHF"),
        ("GBP", "JPY"),
        ("USD", "JPY"),
        ("USD", "CAD"),
        ("USD", "CHF"),
        ("USD", "HKD"),
        ("USD", "KRW"),
        ("USD", "MYR"),
        ("USD", "INR"),
        ("USD", "BRL"),
        ("USD", "MXN"),
        ("USD", "NOK"),
        ("USD", "SEK"),
        ("USD", "DKK"),
        ("USD", "SGD"),
        ("USD", "CNY"),
    }
)

# Highest priority first.
CURRENCY_PRIORITY: tuple[str, ...] = (
    "EUR",
    "GBP",
    "AUD",
    "NZD",
    "USD",
    "CAD",
    "CHF",
    "NOK",
    "SEK",
    "JPY",
)


def validate_currency(code: str) -> str:
    """Validate a currency code is 3 uppercase letters and return it."""
    if not isinstance(code, str) or not code:
        raise ValueError("Currency code cannot be empty")
    if len(code) != 3 or not code.isalpha():
        raise ValueError(f"Currency code must be 3 letters, got '{code}'")
    if not code.isupper():
        raise ValueError(f"Currency code must be uppercase, got '{code}'")
    return code


def _priority(currency: str) -> int:
    if currency in CURRENCY_PRIORITY:
        return len(CURRENCY_PRIORITY) - CURRENCY_PRIORITY.index(currency)
    return 0


@dataclass(frozen=True)
class CurrencyPair:
    """An ordered pair of currencies, such as EUR/USD.

    Attributes:
        base: Base currency, the one a rate is quoted per unit of
        counter: Counter currency, the unit the rate is expressed in

    Example:
        >>> CurrencyPair.of("USD", "EUR").is_conventional()
        False
        >>> CurrencyPair.of("USD", "EUR").to_conventional()
        CurrencyPair(base='EUR', counter='USD')
    """

    base: str
    counter: str

    def __post_init__(self) -> None:
        validate_currency(self.base)
        validate_currency(self.counter)

    @classmethod
    def of(cls, base: str, counter: str) -> CurrencyPair:
        return cls(base, counter)

    @classmethod
    def parse(cls, text: str) -> CurrencyPair:
        """Parse a pair written as ``'EUR/USD'``."""
        parts = text.strip().split("/")
        if len(parts) != 2:
            raise ValueError(f"Currency pair must be in the format 'AAA/BBB', got '{text}'")
        return cls(parts[0].strip(), parts[1].strip())

    def inverse(self) -> CurrencyPair:
        return CurrencyPair(self.counter, self.base)

    def is_identity(self) -> bool:
        return self.base == self.counter

    def contains(self, currency: str) -> bool:
        return currency in (self.base, self.counter)

    def other(self, currency: str) -> str:
        """Return the currency of the pair that is not ``currency``."""
        if currency == self.base:
            return self.counter
        if currency == self.counter:
            return self.base
        raise ValueError(f"Currency {currency} is not part of pair {self}")

    def is_conventional(self) -> bool:
        """Check whether this pair follows the market quoting convention.

        Configured market pairs win. Otherwise the currency with the higher
        priority is the base, and currencies of equal priority are ordered
        alphabetically. An identity pair is never conventional.
        """
        if self.is_identity():
            return False
        if (self.base, self.counter) in MARKET_CONVENTION_PAIRS:
            return True
        if (self.counter, self.base) in MARKET_CONVENTION_PAIRS:
            return False
        base_priority = _priority(self.base)
        counter_priority = _priority(self.counter)
        if base_priority != counter_priority:
            return base_priority > counter_priority
        return self.base < self.counter

    def to_conventional(self) -> CurrencyPair:
        if self.is_identity() or self.is_conventional():
            return self
        return self.inverse()

    def __str__(self) -> str:
        return f"{self.base}/{self.counter}"


@runtime_checkable
class FxRateProvider(Protocol):
    """Anything able to quote an FX rate between two currencies."""

    def fx_rate(self, base: str, counter: str) -> float:
        """Return the number of ``counter`` units per unit of ``base``."""
        ...


@dataclass(frozen=True)
class FxRate:
    """A single FX rate for a currency pair.

    Example:
        >>> rate = FxRate.of("EUR", "USD", 1.20)
        >>> rate.fx_rate("USD", "EUR")
        0.8333333333333334
    """

    pair: CurrencyPair
    rate: float

    def __post_init__(self) -> None:
        if not math.isfinite(self.rate) or self.rate <= 0.0:
            raise ValueError(f"FX rate must be positive and finite, got {self.rate}")
        if self.pair.is_identity() and self.rate != 1.0:
            raise ValueError(f"Identity FX rate must be 1, got {self.rate}")

    @classmethod
    def of(cls, base: str, counter: str, rate: float) -> FxRate:
        return cls(CurrencyPair(base, counter), float(rate))

    @classmethod
    def of_pair(cls, pair: CurrencyPair, rate: float) -> FxRate:
        return cls(pair, float(rate))

    def inverse(self) -> FxRate:
        return FxRate(self.pair.inverse(), 1.0 / self.rate)

    def fx_rate(self, base: str, counter: str) -> float:
        if base == counter:
            return 1.0
        if base == self.pair.base and counter == self.pair.counter:
            return self.rate
        if base == self.pair.counter and counter == self.pair.base:
            return 1.0 / self.rate
        raise ValueError(f"No FX rate found for {base}/{counter} in {self}")

    def __str__(self) -> str:
        return f"{self.pair} {self.rate}"
