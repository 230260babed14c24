"""Window (flexible) FX forward product.

A window forward exchanges two fixed currency amounts on a payment date, but
the rate it is valued at is the worst forward rate observable over a window of
dates before that payment date. The window is given either as an explicit list
of dates or as an execution period ``[start, end)``.

References:
    OpenGamma Strata, FX flexible forward product definition
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field, field_validator, model_validator

from windowfx.core.amounts import CurrencyAmount, Payment
from windowfx.core.currency import CurrencyPair, FxRate
from windowfx.core.dates import DEFAULT_PAYMENT_ADJUSTMENT, BusinessDayAdjustment, ReferenceData
from windowfx.logging_config import get_logger

if TYPE_CHECKING:
    from windowfx.product.resolved import ResolvedWindowForward

logger = get_logger(__name__)


@dataclass(frozen=True, order=True)
class WindowDate:
    """A single date on which the forward may be executed."""

    date: dt.date

    @classmethod
    def of(cls, day: dt.date) -> WindowDate:
        return cls(day)


def normalize_currency_order(base: Any, counter: Any) -> tuple[Any, Any]:
    """Order two legs so that ``base``/``counter`` follows the market convention.

    Works on anything with a ``currency`` attribute (amounts, payments). The
    legs are swapped when the reverse pair is the conventional one.

    Example:
        >>> usd, eur = CurrencyAmount.of("USD", 150_000), CurrencyAmount.of("EUR", -125_000)
        >>> normalize_currency_order(usd, eur)[0].currency
        'EUR'
    """
    if CurrencyPair.of(counter.currency, base.currency).is_conventional():
        return counter, base
    return base, counter


def _currency_of(value: Any) -> str | None:
    """Currency code of a raw field value, if it can be read without validation."""
    if isinstance(value, CurrencyAmount):
        return value.currency
    if isinstance(value, Mapping):
        code = value.get("currency")
    elif isinstance(value, str):
        code = value.split()[0] if value.split() else None
    else:
        return None
    if isinstance(code, str) and len(code) == 3 and code.isalpha() and code.isupper():
        return code
    return None


def _window_date(value: Any) -> Any:
    if isinstance(value, str):
        return WindowDate(dt.date.fromisoformat(value))
    if isinstance(value, dt.date):
        return WindowDate(value)
    return value


def _distinct(dates: Iterable[dt.date]) -> list[dt.date]:
    seen: set[dt.date] = set()
    result = []
    for day in dates:
        if day not in seen:
            seen.add(day)
            result.append(day)
    return result


class WindowForward(BaseModel):
    """An FX forward settled at the worst rate over a window of dates.

    Sign convention: a positive amount is received, a negative amount is paid.
    ``base_currency_amount`` always holds the base currency of the market
    convention pair; the ordering is re-applied whenever the model is built,
    including from stored field values.

    The window is given either by ``execution_period_start`` and
    ``execution_period_end`` or by ``execution_period_dates``. When both are
    present the explicit dates are used.

    Example:
        >>> fwd = WindowForward.of_rate(
        ...     CurrencyAmount.of("USD", 150_000),
        ...     FxRate.of("EUR", "USD", 1.20),
        ...     date(2018, 6, 30),
        ...     execution_period_start=date(2018, 3, 30),
        ...     execution_period_end=date(2018, 6, 30),
        ... )
        >>> fwd.base_currency_amount
        CurrencyAmount(currency='EUR', amount=-125000.0)
    """

    base_currency_amount: CurrencyAmount = Field(..., description="Amount in the base currency")
    counter_currency_amount: CurrencyAmount = Field(
        ..., description="Amount in the counter currency"
    )
    payment_date: dt.date = Field(..., description="Unadjusted settlement date")
    payment_date_adjustment: BusinessDayAdjustment | None = Field(
        None, description="Business day adjustment of the payment and window dates"
    )
    execution_period_start: dt.date | None = Field(None, description="First window date")
    execution_period_end: dt.date | None = Field(
        None, description="End of the window, exclusive"
    )
    execution_period_dates: tuple[WindowDate, ...] | None = Field(
        None, description="Explicit window dates, ascending"
    )

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True,
    }

    @model_validator(mode="before")
    @classmethod
    def order_currencies(cls, data: Any) -> Any:
        """Swap the legs if the stored order is not the conventional one."""
        if not isinstance(data, Mapping):
            return data
        base = data.get("base_currency_amount")
        counter = data.get("counter_currency_amount")
        base_ccy, counter_ccy = _currency_of(base), _currency_of(counter)
        if base_ccy is None or counter_ccy is None or base_ccy == counter_ccy:
            return data
        if CurrencyPair.of(counter_ccy, base_ccy).is_conventional():
            return {**data, "base_currency_amount": counter, "counter_currency_amount": base}
        return data

    @field_validator("base_currency_amount", "counter_currency_amount", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> Any:
        if isinstance(v, str):
            return CurrencyAmount.parse(v)
        return v

    @field_validator("execution_period_dates", mode="before")
    @classmethod
    def wrap_window_dates(cls, v: Any) -> Any:
        """Accept plain dates and ISO date strings as well as :class:`WindowDate` values."""
        if v is None or isinstance(v, (str, bytes)):
            return v
        return tuple(_window_date(d) for d in v)

    @model_validator(mode="after")
    def validate_structure(self) -> WindowForward:
        """Validate amounts and window, in a fixed order so messages are predictable."""
        base = self.base_currency_amount
        counter = self.counter_currency_amount
        if base.currency == counter.currency:
            raise ValueError("Amounts must have different currencies")
        if (base.amount != 0.0 or counter.amount != 0.0) and _sign(base.amount) != -_sign(
            counter.amount
        ):
            raise ValueError("Amounts must have different signs")

        start = self.execution_period_start
        end = self.execution_period_end
        has_dates = bool(self.execution_period_dates)
        if start is None and end is None and not has_dates:
            raise ValueError("Window dates must be provided")
        if start is None and end is not None and not has_dates:
            raise ValueError("executionPeriodStart must be provided")
        if start is not None and end is None and not has_dates:
            raise ValueError("executionPeriodEnd must be provided")
        if start is not None and end is not None and start >= end:
            raise ValueError("executionPeriodStart must be before executionPeriodEnd")
        if end is not None and end > self.payment_date:
            raise ValueError("executionPeriodEnd must be before paymentDate")
        dates = self.execution_period_dates or ()
        if any(a > b for a, b in zip(dates, dates[1:])):
            raise ValueError("executionPeriodDates must be in ascending order")
        return self

    # ------------------------------------------------------------------
    # Factories

    @classmethod
    def of(
        cls,
        amount1: CurrencyAmount,
        amount2: CurrencyAmount,
        payment_date: dt.date,
        *,
        payment_date_adjustment: BusinessDayAdjustment | None = None,
        execution_period_start: dt.date | None = None,
        execution_period_end: dt.date | None = None,
        execution_period_dates: Sequence[WindowDate | dt.date] | None = None,
    ) -> WindowForward:
        """Create a window forward from two signed amounts.

        The amounts may be given in either order; the conventional base
        currency ends up in ``base_currency_amount``.

        Args:
            amount1: First amount, positive if received
            amount2: Second amount, of opposite sign
            payment_date: Unadjusted settlement date
            payment_date_adjustment: Adjustment of payment and window dates,
                "following, no holidays" when omitted
            execution_period_start: First day of the window
            execution_period_end: End of the window, exclusive
            execution_period_dates: Explicit window dates instead of a period

        Returns:
            Validated window forward

        Raises:
            ValueError: If the amounts or the window are invalid
        """
        return cls(
            base_currency_amount=amount1,
            counter_currency_amount=amount2,
            payment_date=payment_date,
            payment_date_adjustment=payment_date_adjustment,
            execution_period_start=execution_period_start,
            execution_period_end=execution_period_end,
            execution_period_dates=execution_period_dates,
        )

    @classmethod
    def of_rate(
        cls,
        amount: CurrencyAmount,
        fx_rate: FxRate,
        payment_date: dt.date,
        *,
        payment_date_adjustment: BusinessDayAdjustment | None = None,
        execution_period_start: dt.date | None = None,
        execution_period_end: dt.date | None = None,
        execution_period_dates: Sequence[WindowDate | dt.date] | None = None,
    ) -> WindowForward:
        """Create a window forward from one amount and the agreed FX rate.

        The other leg is ``amount`` converted at ``fx_rate`` with the opposite
        sign.

        Raises:
            ValueError: If the rate's pair does not contain the amount currency
        """
        pair = fx_rate.pair
        if not pair.contains(amount.currency):
            raise ValueError(f"FX rate {pair} does not contain currency {amount.currency}")
        other = pair.other(amount.currency)
        return cls.of(
            amount,
            amount.converted_to(other, fx_rate).negated(),
            payment_date,
            payment_date_adjustment=payment_date_adjustment,
            execution_period_start=execution_period_start,
            execution_period_end=execution_period_end,
            execution_period_dates=execution_period_dates,
        )

    @classmethod
    def rebuild(cls, **fields: Any) -> WindowForward:
        """Rebuild from stored field values, re-applying the currency ordering."""
        return cls.model_validate(fields)

    # ------------------------------------------------------------------
    # Derived values

    @property
    def currency_pair(self) -> CurrencyPair:
        """Currency pair of the two legs, always in conventional order."""
        return CurrencyPair.of(
            self.base_currency_amount.currency, self.counter_currency_amount.currency
        )

    @property
    def currencies(self) -> frozenset[str]:
        return frozenset(
            {self.base_currency_amount.currency, self.counter_currency_amount.currency}
        )

    @property
    def receive_currency_amount(self) -> CurrencyAmount:
        """The received leg; the counter leg when both amounts are zero."""
        if self.base_currency_amount.amount > 0.0:
            return self.base_currency_amount
        return self.counter_currency_amount

    @property
    def pay_currency_amount(self) -> CurrencyAmount:
        if self.base_currency_amount.amount > 0.0:
            return self.counter_currency_amount
        return self.base_currency_amount

    def window_dates(self, ref_data: ReferenceData) -> list[dt.date]:
        """Adjusted, ascending and distinct window dates."""
        adjustment = self.payment_date_adjustment or DEFAULT_PAYMENT_ADJUSTMENT
        if self.execution_period_dates:
            raw: Iterable[dt.date] = (w.date for w in self.execution_period_dates)
        else:
            if self.execution_period_start is None or self.execution_period_end is None:
                raise ValueError(
                    "executionPeriodStart and executionPeriodEnd are required "
                    "when executionPeriodDates is not set"
                )
            raw = _days_between(self.execution_period_start, self.execution_period_end)
        return _distinct(adjustment.adjust(day, ref_data) for day in raw)

    def resolve(self, ref_data: ReferenceData) -> ResolvedWindowForward:
        """Apply date adjustments and expand the window.

        Args:
            ref_data: Reference data used to look up holiday calendars

        Returns:
            Resolved forward with both payments on the adjusted payment date

        Raises:
            ReferenceDataError: If the adjustment names an unknown calendar
        """
        from windowfx.product.resolved import ResolvedWindowForward

        adjustment = self.payment_date_adjustment or DEFAULT_PAYMENT_ADJUSTMENT
        payment_date = adjustment.adjust(self.payment_date, ref_data)
        window_dates = self.window_dates(ref_data)
        logger.debug(
            "Resolved window forward",
            extra={
                "pair": str(self.currency_pair),
                "payment_date": payment_date.isoformat(),
                "window_dates": len(window_dates),
            },
        )
        return ResolvedWindowForward(
            Payment.of(self.base_currency_amount, payment_date),
            Payment.of(self.counter_currency_amount, payment_date),
            tuple(window_dates),
        )


def _days_between(start: dt.date, end: dt.date) -> Iterable[dt.date]:
    day = start
    while day < end:
        yield day
        day += dt.timedelta(days=1)


def _sign(value: float) -> int:
    return (value > 0.0) - (value < 0.0)
