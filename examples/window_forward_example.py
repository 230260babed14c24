"""EUR-USD Window Forward Example (Q2 2018)

This example prices a window forward where:
- The client pays EUR 125,000 and receives USD 150,000 (contract rate 1.20)
- Settlement is on 2018-06-30, rolled to the next New York business day
- The client may execute on any New York business day from 2018-03-30
  until the end of June

Because the execution date is the client's choice, the dealer values the
trade at the window date with the lowest EUR/USD forward rate.
"""

from datetime import date

from windowfx import configure_logging
from windowfx.core import BusinessDayAdjustment, CurrencyAmount, FxRate, ReferenceData
from windowfx.core.types import BusinessDayConvention
from windowfx.market import ImmutableRatesProvider, ZeroRateDiscountCurve
from windowfx.pricers import PriceToWorstWindowForwardProductPricer
from windowfx.product import WindowForward


def main():
    """Run EUR-USD window forward example."""
    configure_logging(level="WARNING")

    print("=" * 80)
    print("EUR-USD WINDOW FORWARD (Q2 2018)")
    print("=" * 80)
    print()

    # ==================== Contract Setup ====================

    forward = WindowForward.of_rate(
        CurrencyAmount.of("USD", 150_000),
        FxRate.of("EUR", "USD", 1.20),
        date(2018, 6, 30),
        payment_date_adjustment=BusinessDayAdjustment.of(BusinessDayConvention.FOLLOWING, "USNY"),
        execution_period_start=date(2018, 3, 30),
        execution_period_end=date(2018, 6, 30),
    )
    resolved = forward.resolve(ReferenceData.standard())

    print("Contract Parameters:")
    print("-" * 80)
    print(f"Base Leg:            {forward.base_currency_amount}")
    print(f"Counter Leg:         {forward.counter_currency_amount}")
    print(f"Payment Date:        {forward.payment_date} -> {resolved.payment_date}")
    print(f"Window:              {resolved.window_dates[0]} to {resolved.window_dates[-1]}")
    print(f"Window Dates:        {len(resolved.window_dates)}")
    print()

    # ==================== Market Data ====================

    valuation_date = date(2018, 3, 28)
    nodes = [date(2018, 4, 28), date(2018, 6, 28), date(2018, 9, 28), date(2019, 3, 28)]
    provider = ImmutableRatesProvider(
        valuation_date,
        discount_curves={
            "EUR": ZeroRateDiscountCurve.of(
                "EUR-Discount", "EUR", valuation_date, nodes, [-0.0035, -0.0033, -0.0030, -0.0025]
            ),
            "USD": ZeroRateDiscountCurve.of(
                "USD-Discount", "USD", valuation_date, nodes, [0.0180, 0.0200, 0.0220, 0.0250]
            ),
        },
        fx_rates=[FxRate.of("EUR", "USD", 1.23)],
    )

    print("Market Data:")
    print("-" * 80)
    print(f"Valuation Date:      {valuation_date}")
    print(f"Spot EUR/USD:        {provider.fx_rate('EUR', 'USD'):.4f}")
    print()

    # ==================== Valuation ====================

    pricer = PriceToWorstWindowForwardProductPricer()
    worst = pricer.worst_window_date(resolved, provider)
    pv = pricer.present_value(resolved, provider)

    print("Forward Rates Across the Window:")
    print("-" * 80)
    for day in resolved.window_dates[::13]:
        rate = pricer.forward_fx_rate_at(resolved, provider, day)
        print(f"  {day}:  {rate.rate:.6f}")
    print()

    print("Valuation Results:")
    print("-" * 80)
    print(f"Worst Window Date:   {worst}")
    print(f"Forward at Worst:    {pricer.forward_fx_rate_at(resolved, provider, worst).rate:.6f}")
    print(f"Forward at Payment:  {pricer.forward_fx_rate(resolved, provider).rate:.6f}")
    print(f"Present Value:       {pv}")
    print(f"PV in USD:           {pv.converted_to('USD', provider).amount:,.2f}")
    print(f"Par Spread:          {pricer.par_spread(resolved, provider):.6f}")
    print()
    print("=" * 80)


if __name__ == "__main__":
    main()
