"""Calculation function for window forward trades.

Binds each supported :class:`Measure` to its calculation, resolves the trade
once per call and returns one :class:`Result` per requested measure.
Unsupported measures and failing calculations come back as failures instead
of raising, so a batch of measures can succeed partially.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from windowfx.core.currency import CurrencyPair
from windowfx.core.dates import ReferenceData
from windowfx.engine.measures import MarketData, Measure, WindowForwardMeasureCalculations
from windowfx.engine.results import FailureReason, Result
from windowfx.logging_config import get_logger
from windowfx.product.trade import ResolvedWindowForwardTrade, WindowForwardTrade

logger = get_logger(__name__)

SingleMeasureCalculation = Callable[
    [WindowForwardMeasureCalculations, ResolvedWindowForwardTrade, MarketData], Any
]

CALCULATORS: dict[Measure, SingleMeasureCalculation] = {
    Measure.PRESENT_VALUE: WindowForwardMeasureCalculations.present_value,
    Measure.PV01_CALIBRATED_SUM: WindowForwardMeasureCalculations.pv01_calibrated_sum,
    Measure.PV01_CALIBRATED_BUCKETED: WindowForwardMeasureCalculations.pv01_calibrated_bucketed,
    Measure.PV01_MARKET_QUOTE_SUM: WindowForwardMeasureCalculations.pv01_market_quote_sum,
    Measure.PV01_MARKET_QUOTE_BUCKETED: WindowForwardMeasureCalculations.pv01_market_quote_bucketed,
    Measure.PAR_SPREAD: WindowForwardMeasureCalculations.par_spread,
    Measure.CURRENCY_EXPOSURE: WindowForwardMeasureCalculations.currency_exposure,
    Measure.CURRENT_CASH: WindowForwardMeasureCalculations.current_cash,
    Measure.FORWARD_FX_RATE: WindowForwardMeasureCalculations.forward_fx_rate,
    Measure.FX_SWAP_RATE: WindowForwardMeasureCalculations.fx_swap_rate,
    Measure.RESOLVED_TARGET: lambda calcs, trade, market_data: trade,
}


@dataclass(frozen=True)
class FunctionRequirements:
    """Market data a calculation needs.

    Attributes:
        discount_currencies: Currencies needing a discount curve
        fx_pairs: Currency pairs needing a spot FX rate
    """

    discount_currencies: frozenset[str]
    fx_pairs: frozenset[CurrencyPair]


class WindowForwardTradeCalculationFunction:
    """Calculates measures for :class:`WindowForwardTrade`.

    Example:
        >>> function = WindowForwardTradeCalculationFunction()
        >>> results = function.calculate(
        ...     trade, {Measure.PRESENT_VALUE, Measure.PAR_SPREAD}, market_data, ref_data
        ... )
        >>> results[Measure.PRESENT_VALUE].get_value().get(0)
    """

    def __init__(self, calculations: WindowForwardMeasureCalculations | None = None):
        self.calculations = calculations or WindowForwardMeasureCalculations()

    def supported_measures(self) -> frozenset[Measure]:
        return frozenset(CALCULATORS)

    def identifier(self, trade: WindowForwardTrade) -> str | None:
        return trade.info.id

    def natural_currency(self, trade: WindowForwardTrade, _ref_data: ReferenceData) -> str:
        """Base currency of the market convention pair of the trade."""
        product = trade.product
        pair = CurrencyPair.of(
            product.base_currency_amount.currency, product.counter_currency_amount.currency
        )
        return pair.to_conventional().base

    def requirements(
        self, trade: WindowForwardTrade, _measures: Iterable[Measure]
    ) -> FunctionRequirements:
        """Discount curves for both currencies and the spot rate of the pair."""
        product = trade.product
        return FunctionRequirements(
            discount_currencies=frozenset(
                {product.base_currency_amount.currency, product.counter_currency_amount.currency}
            ),
            fx_pairs=frozenset({product.currency_pair}),
        )

    def calculate(
        self,
        trade: WindowForwardTrade,
        measures: Iterable[Measure],
        market_data: MarketData,
        ref_data: ReferenceData,
    ) -> dict[Measure, Result[Any]]:
        """Calculate measures for all scenarios of the market data.

        Args:
            trade: Trade to calculate
            measures: Measures wanted
            market_data: A rates provider, or scenario market data
            ref_data: Reference data used to resolve the trade

        Returns:
            One result per measure; scenario market data gives
            :class:`ScenarioArray` values

        Raises:
            ReferenceDataError: If the trade cannot be resolved
        """
        resolved = trade.resolve(ref_data)
        results: dict[Measure, Result[Any]] = {}
        for measure in measures:
            results[measure] = self._calculate(measure, resolved, market_data)
        return results

    def _calculate(
        self, measure: Measure, trade: ResolvedWindowForwardTrade, market_data: MarketData
    ) -> Result[Any]:
        calculator = CALCULATORS.get(measure)
        if calculator is None:
            return Result.failure_of(
                FailureReason.UNSUPPORTED,
                f"Unsupported measure for WindowForwardTrade: {measure}",
            )
        logger.debug(
            "Calculating measure", extra={"measure": str(measure), "trade_id": trade.info.id}
        )
        return Result.of(lambda: calculator(self.calculations, trade, market_data))
