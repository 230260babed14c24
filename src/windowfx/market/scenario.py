"""Scenario market data: one rates provider per scenario."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from windowfx.market.rates_provider import ImmutableRatesProvider, RatesProvider


class ScenarioMarketData:
    """An indexed, immutable set of market data scenarios.

    Scenario ``i`` is the rates provider at index ``i``; calculations keep
    this indexing in their results.

    Example:
        >>> market_data = ScenarioMarketData.parallel_shifts(base, [-0.001, 0.0, 0.001])
        >>> market_data.scenario_count
        3
    """

    def __init__(self, providers: Iterable[RatesProvider]):
        self._providers: tuple[RatesProvider, ...] = tuple(providers)
        if not self._providers:
            raise ValueError("Scenario market data must contain at least one scenario")

    @classmethod
    def of(cls, providers: Iterable[RatesProvider]) -> ScenarioMarketData:
        return cls(providers)

    @classmethod
    def single(cls, provider: RatesProvider) -> ScenarioMarketData:
        return cls((provider,))

    @classmethod
    def parallel_shifts(
        cls, base: ImmutableRatesProvider, shifts: Sequence[float]
    ) -> ScenarioMarketData:
        """One scenario per shift, each moving every discount curve by that amount."""
        return cls(base.with_parallel_shift(shift) for shift in shifts)

    @property
    def scenario_count(self) -> int:
        return len(self._providers)

    def scenario(self, index: int) -> RatesProvider:
        """Rates provider of scenario ``index``.

        Raises:
            IndexError: If the index is out of range
        """
        if not 0 <= index < len(self._providers):
            raise IndexError(
                f"Scenario index {index} out of range for {len(self._providers)} scenarios"
            )
        return self._providers[index]

    def __iter__(self) -> Iterator[RatesProvider]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)
