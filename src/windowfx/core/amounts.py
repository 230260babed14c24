"""Monetary amounts and payments.

Sign convention throughout windowfx: a positive amount is received, a
negative amount is paid.
"""

from __future__ import annotations

import datetime as dt
import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from windowfx.core.currency import FxRateProvider, validate_currency


@dataclass(frozen=True)
class CurrencyAmount:
    """A signed amount of money in a single currency.

    Example:
        >>> CurrencyAmount.of("USD", 150_000).negated()
        CurrencyAmount(currency='USD', amount=-150000.0)
    """

    currency: str
    amount: float

    def __post_init__(self) -> None:
        validate_currency(self.currency)
        if not math.isfinite(self.amount):
            raise ValueError(f"Amount must be finite, got {self.amount}")
        # normalise ints and -0.0
        object.__setattr__(self, "amount", float(self.amount) + 0.0)

    @classmethod
    def of(cls, currency: str, amount: float) -> CurrencyAmount:
        return cls(currency, amount)

    @classmethod
    def zero(cls, currency: str) -> CurrencyAmount:
        return cls(currency, 0.0)

    @classmethod
    def parse(cls, text: str) -> CurrencyAmount:
        """Parse an amount written as ``'USD 150000'``."""
        parts = text.split()
        if len(parts) != 2:
            raise ValueError(f"Currency amount must be in the format 'AAA 1.23', got '{text}'")
        return cls(parts[0], float(parts[1]))

    def is_zero(self) -> bool:
        return self.amount == 0.0

    def is_positive(self) -> bool:
        return self.amount > 0.0

    def is_negative(self) -> bool:
        return self.amount < 0.0

    def negated(self) -> CurrencyAmount:
        return CurrencyAmount(self.currency, -self.amount)

    def plus(self, other: CurrencyAmount | float) -> CurrencyAmount:
        if isinstance(other, CurrencyAmount):
            self._check_same_currency(other)
            return CurrencyAmount(self.currency, self.amount + other.amount)
        return CurrencyAmount(self.currency, self.amount + other)

    def minus(self, other: CurrencyAmount | float) -> CurrencyAmount:
        if isinstance(other, CurrencyAmount):
            self._check_same_currency(other)
            return CurrencyAmount(self.currency, self.amount - other.amount)
        return CurrencyAmount(self.currency, self.amount - other)

    def multiplied_by(self, factor: float) -> CurrencyAmount:
        return CurrencyAmount(self.currency, self.amount * factor)

    def converted_to(self, currency: str, rate_provider: FxRateProvider) -> CurrencyAmount:
        """Convert to another currency using ``rate_provider.fx_rate(self.currency, currency)``."""
        if currency == self.currency:
            return self
        return CurrencyAmount(currency, self.amount * rate_provider.fx_rate(self.currency, currency))

    def _check_same_currency(self, other: CurrencyAmount) -> None:
        if other.currency != self.currency:
            raise ValueError(
                f"Currency mismatch: cannot combine {self.currency} with {other.currency}"
            )

    def __neg__(self) -> CurrencyAmount:
        return self.negated()

    def __str__(self) -> str:
        return f"{self.currency} {self.amount}"


@dataclass(frozen=True)
class MultiCurrencyAmount:
    """A bundle of amounts, at most one per currency, sorted by currency code.

    Combining two amounts in the same currency sums them. Zero amounts are kept
    so that a result can say "zero in EUR and zero in USD".
    """

    amounts: tuple[CurrencyAmount, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        totals: dict[str, float] = {}
        for amount in self.amounts:
            totals[amount.currency] = totals.get(amount.currency, 0.0) + amount.amount
        merged = tuple(CurrencyAmount(ccy, totals[ccy]) for ccy in sorted(totals))
        object.__setattr__(self, "amounts", merged)

    @classmethod
    def of(cls, *amounts: CurrencyAmount) -> MultiCurrencyAmount:
        return cls(tuple(amounts))

    @classmethod
    def of_iterable(cls, amounts: Iterable[CurrencyAmount]) -> MultiCurrencyAmount:
        return cls(tuple(amounts))

    @classmethod
    def empty(cls) -> MultiCurrencyAmount:
        return cls(())

    @property
    def currencies(self) -> tuple[str, ...]:
        return tuple(amount.currency for amount in self.amounts)

    def size(self) -> int:
        return len(self.amounts)

    def is_empty(self) -> bool:
        return not self.amounts

    def contains(self, currency: str) -> bool:
        return currency in self.currencies

    def get_amount(self, currency: str) -> CurrencyAmount:
        """Return the amount in ``currency``, or zero if the bundle has none."""
        for amount in self.amounts:
            if amount.currency == currency:
                return amount
        return CurrencyAmount.zero(currency)

    def plus(self, other: MultiCurrencyAmount | CurrencyAmount) -> MultiCurrencyAmount:
        if isinstance(other, CurrencyAmount):
            return MultiCurrencyAmount(self.amounts + (other,))
        return MultiCurrencyAmount(self.amounts + other.amounts)

    def multiplied_by(self, factor: float) -> MultiCurrencyAmount:
        return MultiCurrencyAmount(tuple(a.multiplied_by(factor) for a in self.amounts))

    def converted_to(self, currency: str, rate_provider: FxRateProvider) -> CurrencyAmount:
        """Total the bundle in a single currency."""
        total = 0.0
        for amount in self.amounts:
            total += amount.converted_to(currency, rate_provider).amount
        return CurrencyAmount(currency, total)

    def to_dict(self) -> dict[str, float]:
        return {amount.currency: amount.amount for amount in self.amounts}

    def __iter__(self) -> Iterator[CurrencyAmount]:
        return iter(self.amounts)

    def __len__(self) -> int:
        return len(self.amounts)

    def __str__(self) -> str:
        return "[" + ", ".join(str(a) for a in self.amounts) + "]"


@dataclass(frozen=True)
class Payment:
    """A single payment of a currency amount on a date."""

    value: CurrencyAmount
    date: dt.date

    @classmethod
    def of(cls, value: CurrencyAmount, payment_date: dt.date) -> Payment:
        return cls(value, payment_date)

    @property
    def currency(self) -> str:
        return self.value.currency

    @property
    def amount(self) -> float:
        return self.value.amount

    def with_date(self, payment_date: dt.date) -> Payment:
        return Payment(self.value, payment_date)
