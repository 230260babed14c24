"""Property-based tests for window forwards using Hypothesis.

Tests invariants that hold for any valid window forward:
- The base leg is always the conventional base currency
- Resolved window dates are ascending, distinct business days
- The price-to-worst date carries the lowest forward rate
- Present value scales linearly with the notional
"""

from datetime import date, timedelta

import pytest
from hypothesis import assume, given, settings
from hypothesis import strategies as st
from pydantic import ValidationError

from windowfx.core.amounts import CurrencyAmount
from windowfx.core.currency import CurrencyPair, FxRate
from windowfx.core.dates import BusinessDayAdjustment, ReferenceData
from windowfx.core.types import BusinessDayConvention
from windowfx.market.curves import ZeroRateDiscountCurve
from windowfx.market.rates_provider import ImmutableRatesProvider
from windowfx.pricers.price_to_worst import PriceToWorstWindowForwardProductPricer
from windowfx.product.resolved import ResolvedWindowForward
from windowfx.product.window_forward import WindowForward

CURRENCIES = ["EUR", "GBP", "AUD", "NZD", "USD", "CAD", "CHF", "NOK", "SEK", "JPY", "DKK", "HKD"]
VALUATION_DATE = date(2018, 3, 28)
REF_DATA = ReferenceData.empty()
WEEKDAYS_FOLLOWING = BusinessDayAdjustment.of(BusinessDayConvention.FOLLOWING, "Sat/Sun")

pricer = PriceToWorstWindowForwardProductPricer()


@st.composite
def currency_pairs(draw):
    """Two distinct currencies."""
    first = draw(st.sampled_from(CURRENCIES))
    second = draw(st.sampled_from([c for c in CURRENCIES if c != first]))
    return first, second


amounts = st.floats(min_value=1.0, max_value=1e9, allow_nan=False, allow_infinity=False)
rates = st.floats(min_value=-0.01, max_value=0.08, allow_nan=False, allow_infinity=False)


@st.composite
def windows(draw):
    """A window start, a window end after it and a payment date on or after the end."""
    start = VALUATION_DATE + timedelta(days=draw(st.integers(min_value=0, max_value=200)))
    end = start + timedelta(days=draw(st.integers(min_value=1, max_value=90)))
    payment = end + timedelta(days=draw(st.integers(min_value=0, max_value=30)))
    return start, end, payment


def flat_provider(base: str, counter: str, base_rate: float, counter_rate: float, spot: float):
    return ImmutableRatesProvider(
        VALUATION_DATE,
        {
            base: ZeroRateDiscountCurve.flat(f"{base}-Flat", base, VALUATION_DATE, base_rate),
            counter: ZeroRateDiscountCurve.flat(
                f"{counter}-Flat", counter, VALUATION_DATE, counter_rate
            ),
        },
        [FxRate.of(base, counter, spot)],
    )


class TestCurrencyOrdering:
    """The stored base currency does not depend on the input order."""

    @given(pair=currency_pairs(), amount1=amounts, amount2=amounts)
    def test_base_is_conventional(self, pair, amount1, amount2):
        ccy1, ccy2 = pair
        fwd = WindowForward.of(
            CurrencyAmount.of(ccy1, amount1),
            CurrencyAmount.of(ccy2, -amount2),
            date(2018, 6, 29),
            execution_period_dates=[date(2018, 6, 1)],
        )
        assert fwd.currency_pair.is_conventional()
        assert fwd.currency_pair == CurrencyPair.of(ccy1, ccy2).to_conventional()

    @given(pair=currency_pairs(), amount1=amounts, amount2=amounts)
    def test_input_order_irrelevant(self, pair, amount1, amount2):
        ccy1, ccy2 = pair
        leg1 = CurrencyAmount.of(ccy1, amount1)
        leg2 = CurrencyAmount.of(ccy2, -amount2)
        kwargs = {"execution_period_dates": [date(2018, 6, 1)]}
        assert WindowForward.of(leg1, leg2, date(2018, 6, 29), **kwargs) == WindowForward.of(
            leg2, leg1, date(2018, 6, 29), **kwargs
        )

    @given(pair=currency_pairs(), amount1=amounts, amount2=amounts)
    def test_same_sign_rejected(self, pair, amount1, amount2):
        ccy1, ccy2 = pair
        with pytest.raises(ValidationError, match="Amounts must have different signs"):
            WindowForward.of(
                CurrencyAmount.of(ccy1, amount1),
                CurrencyAmount.of(ccy2, amount2),
                date(2018, 6, 29),
                execution_period_dates=[date(2018, 6, 1)],
            )


class TestResolvedWindow:
    """Window expansion invariants."""

    @given(window=windows())
    @settings(deadline=None)
    def test_dates_ascending_distinct_business_days(self, window):
        start, end, payment = window
        fwd = WindowForward.of(
            CurrencyAmount.of("EUR", -1.0),
            CurrencyAmount.of("USD", 1.2),
            payment,
            payment_date_adjustment=WEEKDAYS_FOLLOWING,
            execution_period_start=start,
            execution_period_end=end,
        )
        resolved = fwd.resolve(REF_DATA)
        dates = resolved.window_dates
        assert dates
        assert all(a < b for a, b in zip(dates, dates[1:]))
        assert all(d.weekday() < 5 for d in dates)
        assert dates[0] >= start
        assert dates[-1] <= resolved.payment_date
        assert len(dates) <= (end - start).days

    @given(window=windows())
    @settings(deadline=None)
    def test_every_business_day_in_period_included(self, window):
        start, end, payment = window
        fwd = WindowForward.of(
            CurrencyAmount.of("EUR", -1.0),
            CurrencyAmount.of("USD", 1.2),
            payment,
            payment_date_adjustment=WEEKDAYS_FOLLOWING,
            execution_period_start=start,
            execution_period_end=end,
        )
        dates = set(fwd.resolve(REF_DATA).window_dates)
        day = start
        while day < end:
            if day.weekday() < 5:
                assert day in dates
            day += timedelta(days=1)

    @given(window=windows())
    @settings(deadline=None)
    def test_default_adjustment_keeps_every_calendar_day(self, window):
        start, end, payment = window
        fwd = WindowForward.of(
            CurrencyAmount.of("EUR", -1.0),
            CurrencyAmount.of("USD", 1.2),
            payment,
            execution_period_start=start,
            execution_period_end=end,
        )
        dates = fwd.resolve(REF_DATA).window_dates
        assert len(dates) == (end - start).days
        assert dates[0] == start


class TestPriceToWorst:
    """Price-to-worst selection invariants."""

    @given(
        window=windows(),
        base_rate=rates,
        counter_rate=rates,
        spot=st.floats(min_value=0.5, max_value=2.0),
    )
    @settings(max_examples=30, deadline=None)
    def test_selected_date_has_lowest_forward(self, window, base_rate, counter_rate, spot):
        start, end, payment = window
        fwd = WindowForward.of(
            CurrencyAmount.of("EUR", -100.0),
            CurrencyAmount.of("USD", 120.0),
            payment,
            execution_period_start=start,
            execution_period_end=end,
        ).resolve(REF_DATA)
        provider = flat_provider("EUR", "USD", base_rate, counter_rate, spot)
        selected = pricer.worst_window_date(fwd, provider)
        assert selected in fwd.window_dates
        forwards = provider.fx_forward_rates(fwd.currency_pair)
        worst = forwards.rate("EUR", selected)
        assert all(worst <= forwards.rate("EUR", d) for d in fwd.window_dates)
        assert all(worst < forwards.rate("EUR", d) for d in fwd.window_dates if d < selected)

    @given(
        notional=amounts,
        factor=st.floats(min_value=0.01, max_value=100.0),
        base_rate=rates,
        counter_rate=rates,
    )
    @settings(max_examples=30, deadline=None)
    def test_present_value_linear_in_notional(self, notional, factor, base_rate, counter_rate):
        window = (date(2018, 4, 2), date(2018, 5, 2), date(2018, 6, 1))
        provider = flat_provider("EUR", "USD", base_rate, counter_rate, 1.23)
        rate = FxRate.of("EUR", "USD", 1.2)
        small = ResolvedWindowForward.of_rate(
            CurrencyAmount.of("USD", notional), rate, date(2018, 6, 4), window
        )
        large = ResolvedWindowForward.of_rate(
            CurrencyAmount.of("USD", notional * factor), rate, date(2018, 6, 4), window
        )
        pv_small = pricer.present_value(small, provider)
        pv_large = pricer.present_value(large, provider)
        for currency in ("EUR", "USD"):
            assert pv_large.get_amount(currency).amount == pytest.approx(
                pv_small.get_amount(currency).amount * factor, rel=1e-9
            )

    @given(base_rate=rates, counter_rate=rates)
    @settings(max_examples=20, deadline=None)
    def test_present_value_not_above_undiscounted(self, base_rate, counter_rate):
        assume(base_rate >= 0.0 and counter_rate >= 0.0)
        fwd = ResolvedWindowForward.of_amounts(
            CurrencyAmount.of("USD", 150_000),
            CurrencyAmount.of("EUR", -125_000),
            date(2018, 7, 2),
            (date(2018, 4, 2), date(2018, 6, 29)),
        )
        provider = flat_provider("EUR", "USD", base_rate, counter_rate, 1.23)
        pv = pricer.present_value(fwd, provider)
        assert pv.get_amount("USD").amount <= 150_000 + 1e-9
        assert pv.get_amount("EUR").amount >= -125_000 - 1e-9
