"""Batch calculation of measures over many trades.

Example:
    >>> runner = CalculationRunner()
    >>> results = runner.calculate(trades, [Measure.PRESENT_VALUE], market_data, ref_data)
    >>> results.get(0, 0).get_value()
    >>> df = results.to_dataframe()
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from windowfx.config import get_max_workers
from windowfx.core.dates import ReferenceData
from windowfx.engine.calculation import WindowForwardTradeCalculationFunction
from windowfx.engine.measures import MarketData, Measure
from windowfx.engine.results import Failure, Result, ScenarioArray, flatten_value
from windowfx.logging_config import get_logger, get_performance_logger
from windowfx.product.trade import WindowForwardTrade

logger = get_logger(__name__)
perf_logger = get_performance_logger("engine.runner")


@dataclass
class CalculationResults:
    """Grid of results, one row per trade and one column per measure.

    Attributes:
        trade_ids: Identifier of each row's trade (``None`` if the trade has none)
        measures: Measure of each column
        cells: ``cells[row][column]`` result
        metadata: Batch information such as timing
    """

    trade_ids: list[str | None]
    measures: list[Measure]
    cells: list[list[Result[Any]]]
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def row_count(self) -> int:
        return len(self.cells)

    @property
    def column_count(self) -> int:
        return len(self.measures)

    def get(self, row: int, column: int) -> Result[Any]:
        return self.cells[row][column]

    def column(self, measure: Measure) -> list[Result[Any]]:
        index = self.measures.index(measure)
        return [row[index] for row in self.cells]

    def failures(self) -> list[tuple[int, Measure, Failure]]:
        return [
            (r, self.measures[c], cell.failure)
            for r, row in enumerate(self.cells)
            for c, cell in enumerate(row)
            if cell.failure is not None
        ]

    def to_dataframe(self) -> pd.DataFrame:
        """Long format: one row per trade, measure, scenario and value component.

        Columns are ``trade``, ``measure``, ``scenario``, ``key``, ``value``
        and ``error``. Single-provider results use scenario 0.

        Example:
            >>> df = results.to_dataframe()
            >>> df[df.measure == "PresentValue"].pivot_table(
            ...     index="trade", columns="key", values="value", aggfunc="sum"
            ... )
        """
        records = []
        for r, row in enumerate(self.cells):
            for c, cell in enumerate(row):
                base = {"trade": self.trade_ids[r], "measure": str(self.measures[c])}
                if cell.failure is not None:
                    records.append({**base, "scenario": None, "error": str(cell.failure)})
                    continue
                value = cell.value
                scenario_results = (
                    list(value) if isinstance(value, ScenarioArray) else [Result.success(value)]
                )
                for s, scenario_result in enumerate(scenario_results):
                    if scenario_result.failure is not None:
                        records.append(
                            {**base, "scenario": s, "error": str(scenario_result.failure)}
                        )
                        continue
                    for key, component in flatten_value(scenario_result.value).items():
                        records.append({**base, "scenario": s, "key": key, "value": component})
        return pd.DataFrame(
            records, columns=["trade", "measure", "scenario", "key", "value", "error"]
        )


class CalculationRunner:
    """Runs a calculation function over many trades.

    Trades are calculated independently, on a thread pool when
    ``max_workers`` (or ``WINDOWFX_MAX_WORKERS``) is above one. Row order
    always matches the input trade order.
    """

    def __init__(
        self,
        function: WindowForwardTradeCalculationFunction | None = None,
        max_workers: int | None = None,
    ):
        self.function = function or WindowForwardTradeCalculationFunction()
        self.max_workers = max_workers

    def calculate(
        self,
        trades: Sequence[WindowForwardTrade],
        measures: Sequence[Measure],
        market_data: MarketData,
        ref_data: ReferenceData,
    ) -> CalculationResults:
        """Calculate every measure for every trade.

        A trade that cannot be resolved gets the same failure in each column.
        """
        measure_list = list(measures)
        workers = self.max_workers if self.max_workers is not None else get_max_workers()
        start = time.perf_counter()

        def run(trade: WindowForwardTrade) -> list[Result[Any]]:
            outcome = Result.of(
                lambda: self.function.calculate(trade, measure_list, market_data, ref_data)
            )
            if outcome.failure is not None:
                logger.warning(
                    "Trade calculation failed",
                    extra={"trade_id": trade.info.id, "error": outcome.failure.message},
                )
                return [outcome for _ in measure_list]
            by_measure = outcome.value or {}
            return [by_measure[m] for m in measure_list]

        if workers <= 1 or len(trades) <= 1:
            cells = [run(trade) for trade in trades]
        else:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                cells = list(pool.map(run, trades))

        duration_ms = (time.perf_counter() - start) * 1000.0
        perf_logger.debug(
            "Calculation batch completed",
            extra={
                "trades": len(trades),
                "measures": len(measure_list),
                "duration_ms": duration_ms,
            },
        )
        return CalculationResults(
            trade_ids=[trade.info.id for trade in trades],
            measures=measure_list,
            cells=cells,
            metadata={"duration_ms": duration_ms, "max_workers": workers},
        )
