"""Measures and their calculation for window forward trades.

Every measure can be calculated for a single rates provider, returning the
plain value, or for :class:`ScenarioMarketData`, returning a
:class:`ScenarioArray` with one value per scenario.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any, TypeVar

from windowfx.core.currency import FxRate
from windowfx.engine.results import ScenarioArray
from windowfx.market.rates_provider import RatesProvider
from windowfx.market.scenario import ScenarioMarketData
from windowfx.market.sensitivity import CurrencyParameterSensitivities
from windowfx.pricers.price_to_worst import (
    DEFAULT_TRADE_PRICER,
    PriceToWorstWindowForwardTradePricer,
)
from windowfx.product.trade import ResolvedWindowForwardTrade

T = TypeVar("T")

ONE_BASIS_POINT = 1e-4


class Measure(str, Enum):
    """Named quantities that can be calculated for a trade."""

    PRESENT_VALUE = "PresentValue"
    PV01_CALIBRATED_SUM = "PV01CalibratedSum"
    PV01_CALIBRATED_BUCKETED = "PV01CalibratedBucketed"
    PV01_MARKET_QUOTE_SUM = "PV01MarketQuoteSum"
    PV01_MARKET_QUOTE_BUCKETED = "PV01MarketQuoteBucketed"
    PAR_SPREAD = "ParSpread"
    CURRENCY_EXPOSURE = "CurrencyExposure"
    CURRENT_CASH = "CurrentCash"
    FORWARD_FX_RATE = "ForwardFxRate"
    RESOLVED_TARGET = "ResolvedTarget"
    # forward points: forward rate at the payment date minus spot
    FX_SWAP_RATE = "FxSwapRate"

    def __str__(self) -> str:
        return self.value


MarketData = RatesProvider | ScenarioMarketData


class WindowForwardMeasureCalculations:
    """Calculates each measure for one resolved trade.

    Args:
        trade_pricer: Pricer used for all measures
        max_workers: Thread pool size for scenario fan-out, defaults to
            ``WINDOWFX_MAX_WORKERS``

    Example:
        >>> calcs = WindowForwardMeasureCalculations()
        >>> calcs.present_value(resolved_trade, provider)            # one value
        >>> calcs.present_value(resolved_trade, scenario_market_data)  # ScenarioArray
    """

    def __init__(
        self,
        trade_pricer: PriceToWorstWindowForwardTradePricer = DEFAULT_TRADE_PRICER,
        max_workers: int | None = None,
    ):
        self.trade_pricer = trade_pricer
        self.max_workers = max_workers

    def _calculate(
        self, market_data: MarketData, calculation: Callable[[RatesProvider], T]
    ) -> T | ScenarioArray[T]:
        if isinstance(market_data, ScenarioMarketData):
            return ScenarioArray.of(
                market_data.scenario_count,
                lambda i: calculation(market_data.scenario(i)),
                self.max_workers,
            )
        return calculation(market_data)

    def present_value(self, trade: ResolvedWindowForwardTrade, market_data: MarketData) -> Any:
        return self._calculate(
            market_data, lambda provider: self.trade_pricer.present_value(trade, provider)
        )

    def pv01_calibrated_sum(
        self, trade: ResolvedWindowForwardTrade, market_data: MarketData
    ) -> Any:
        """Sum of the bucketed PV01 per currency."""
        return self._calculate(
            market_data,
            lambda provider: self._calibrated_bucketed(trade, provider)
            .total()
            .multiplied_by(ONE_BASIS_POINT),
        )

    def pv01_calibrated_bucketed(
        self, trade: ResolvedWindowForwardTrade, market_data: MarketData
    ) -> Any:
        """PV01 per curve node, from the zero-rate parameters of the curves."""
        return self._calculate(
            market_data,
            lambda provider: self._calibrated_bucketed(trade, provider).multiplied_by(
                ONE_BASIS_POINT
            ),
        )

    def pv01_market_quote_sum(
        self, trade: ResolvedWindowForwardTrade, market_data: MarketData
    ) -> Any:
        return self._calculate(
            market_data,
            lambda provider: self._market_quote_bucketed(trade, provider)
            .total()
            .multiplied_by(ONE_BASIS_POINT),
        )

    def pv01_market_quote_bucketed(
        self, trade: ResolvedWindowForwardTrade, market_data: MarketData
    ) -> Any:
        """PV01 per market quote of the curves."""
        return self._calculate(
            market_data,
            lambda provider: self._market_quote_bucketed(trade, provider).multiplied_by(
                ONE_BASIS_POINT
            ),
        )

    def par_spread(self, trade: ResolvedWindowForwardTrade, market_data: MarketData) -> Any:
        return self._calculate(
            market_data, lambda provider: self.trade_pricer.par_spread(trade, provider)
        )

    def currency_exposure(
        self, trade: ResolvedWindowForwardTrade, market_data: MarketData
    ) -> Any:
        return self._calculate(
            market_data, lambda provider: self.trade_pricer.currency_exposure(trade, provider)
        )

    def current_cash(self, trade: ResolvedWindowForwardTrade, market_data: MarketData) -> Any:
        return self._calculate(
            market_data, lambda provider: self.trade_pricer.current_cash(trade, provider)
        )

    def forward_fx_rate(self, trade: ResolvedWindowForwardTrade, market_data: MarketData) -> Any:
        return self._calculate(
            market_data, lambda provider: self.trade_pricer.forward_fx_rate(trade, provider)
        )

    def fx_swap_rate(self, trade: ResolvedWindowForwardTrade, market_data: MarketData) -> Any:
        """Forward points: forward rate at the payment date minus the spot rate."""
        return self._calculate(market_data, lambda provider: self._fx_swap_rate(trade, provider))

    # ------------------------------------------------------------------

    def _calibrated_bucketed(
        self, trade: ResolvedWindowForwardTrade, provider: RatesProvider
    ) -> CurrencyParameterSensitivities:
        points = self.trade_pricer.present_value_sensitivity(trade, provider)
        return provider.parameter_sensitivity(points)

    def _market_quote_bucketed(
        self, trade: ResolvedWindowForwardTrade, provider: RatesProvider
    ) -> CurrencyParameterSensitivities:
        return provider.market_quote_sensitivity(self._calibrated_bucketed(trade, provider))

    def _fx_swap_rate(self, trade: ResolvedWindowForwardTrade, provider: RatesProvider) -> float:
        pair = trade.product.currency_pair
        forward: FxRate = self.trade_pricer.forward_fx_rate(trade, provider)
        spot = provider.fx_rate(pair.base, pair.counter)
        return forward.fx_rate(pair.base, pair.counter) - spot
