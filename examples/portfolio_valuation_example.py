"""Window Forward Portfolio Valuation Example

This example runs a small book of window forwards through the calculation
runner:
- Three EUR/USD trades with different windows and notionals
- One trade booked against a calendar that is not in the reference data
- A parallel rate shift scenario set

Results come back as a grid of per-trade, per-measure results and are then
exported as a long-format pandas DataFrame.
"""

from datetime import date

from windowfx import configure_logging
from windowfx.core import BusinessDayAdjustment, CurrencyAmount, FxRate, ReferenceData
from windowfx.core.types import BusinessDayConvention
from windowfx.engine import CalculationRunner, Measure
from windowfx.market import ImmutableRatesProvider, ScenarioMarketData, ZeroRateDiscountCurve
from windowfx.product import TradeInfo, WindowForward, WindowForwardTrade


def make_trade(trade_id, usd_amount, start, end, calendar="USNY"):
    product = WindowForward.of_rate(
        CurrencyAmount.of("USD", usd_amount),
        FxRate.of("EUR", "USD", 1.20),
        date(2018, 6, 30),
        payment_date_adjustment=BusinessDayAdjustment.of(BusinessDayConvention.FOLLOWING, calendar),
        execution_period_start=start,
        execution_period_end=end,
    )
    return WindowForwardTrade.of(TradeInfo.of(date(2018, 3, 28), trade_id), product)


def main():
    """Run window forward portfolio example."""
    configure_logging(level="WARNING")

    print("=" * 80)
    print("WINDOW FORWARD PORTFOLIO VALUATION")
    print("=" * 80)
    print()

    trades = [
        make_trade("WF-001", 150_000, date(2018, 3, 30), date(2018, 6, 30)),
        make_trade("WF-002", -2_000_000, date(2018, 5, 1), date(2018, 6, 1)),
        make_trade("WF-003", 500_000, date(2018, 6, 1), date(2018, 6, 30)),
        make_trade("WF-004", 250_000, date(2018, 4, 2), date(2018, 5, 2), calendar="XXXX"),
    ]

    valuation_date = date(2018, 3, 28)
    nodes = [date(2018, 4, 28), date(2018, 6, 28), date(2018, 9, 28), date(2019, 3, 28)]
    base = ImmutableRatesProvider(
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
    ref_data = ReferenceData.standard()
    measures = [Measure.PRESENT_VALUE, Measure.PV01_CALIBRATED_SUM, Measure.PAR_SPREAD]

    # ==================== Base Valuation ====================

    results = CalculationRunner().calculate(trades, measures, base, ref_data)
    df = results.to_dataframe()

    print("Present Value by Trade:")
    print("-" * 80)
    pv = df[df.measure == "PresentValue"].pivot_table(
        index="trade", columns="key", values="value", aggfunc="sum"
    )
    print(pv.to_string(float_format=lambda v: f"{v:,.2f}"))
    print()

    print("Failures:")
    print("-" * 80)
    for row, measure, failure in results.failures():
        print(f"  {results.trade_ids[row]} {measure}: {failure}")
    print()

    # ==================== Scenarios ====================

    shifts = [-0.001, 0.0, 0.001]
    market_data = ScenarioMarketData.parallel_shifts(base, shifts)
    scenario_results = CalculationRunner(max_workers=2).calculate(
        trades[:3], [Measure.PAR_SPREAD], market_data, ref_data
    )
    spreads = scenario_results.to_dataframe().pivot_table(
        index="trade", columns="scenario", values="value"
    )
    spreads.columns = [f"{s * 1e4:+.0f}bp" for s in shifts]

    print("Par Spread under Parallel Shifts:")
    print("-" * 80)
    print(spreads.to_string(float_format=lambda v: f"{v:.6f}"))
    print()
    print("=" * 80)


if __name__ == "__main__":
    main()
