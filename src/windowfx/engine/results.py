"""Calculation results: per-measure results and per-scenario arrays.

A :class:`Result` is either a value or a :class:`Failure`, so a batch of
measures can succeed partially. A :class:`ScenarioArray` holds one entry per
scenario and keeps failures per slot, so one bad scenario does not hide the
values of the others.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

import pandas as pd

from windowfx.config import get_max_workers
from windowfx.core.currency import FxRate
from windowfx.exceptions import CalculationError, MarketDataError, ReferenceDataError
from windowfx.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class FailureReason(str, Enum):
    """Why a calculation failed."""

    UNSUPPORTED = "Unsupported"
    MISSING_DATA = "MissingData"
    INVALID = "Invalid"
    CALCULATION_FAILED = "CalculationFailed"
    ERROR = "Error"


@dataclass(frozen=True)
class Failure:
    """Description of a failed calculation."""

    reason: FailureReason
    message: str
    exception_type: str | None = None

    @classmethod
    def of(cls, reason: FailureReason, message: str) -> Failure:
        return cls(reason, message)

    @classmethod
    def from_exception(cls, exc: Exception) -> Failure:
        """Classify an exception raised while calculating."""
        if isinstance(exc, MarketDataError):
            reason = FailureReason.MISSING_DATA
        elif isinstance(exc, ReferenceDataError):
            reason = FailureReason.INVALID
        elif isinstance(exc, CalculationError):
            reason = FailureReason.CALCULATION_FAILED
        else:
            reason = FailureReason.ERROR
        return cls(reason, str(exc), type(exc).__name__)

    def __str__(self) -> str:
        return f"{self.reason.value}: {self.message}"


@dataclass(frozen=True)
class Result(Generic[T]):
    """The outcome of one calculation, either a value or a failure.

    Example:
        >>> result = Result.of(lambda: pricer.present_value(trade, provider))
        >>> result.is_success
        True
    """

    value: T | None = None
    failure: Failure | None = None

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure_of(cls, reason: FailureReason, message: str) -> Result[Any]:
        return cls(failure=Failure.of(reason, message))

    @classmethod
    def of(cls, supplier: Callable[[], T]) -> Result[T]:
        """Run ``supplier`` and capture any exception it raises as a failure."""
        try:
            return cls(value=supplier())
        except Exception as exc:  # noqa: BLE001
            failure = Failure.from_exception(exc)
            logger.debug(
                "Calculation failed",
                extra={"reason": failure.reason.value, "error": failure.message},
            )
            return cls(failure=failure)

    @property
    def is_success(self) -> bool:
        return self.failure is None

    @property
    def is_failure(self) -> bool:
        return self.failure is not None

    def get_value(self) -> T:
        """The value of a successful result.

        Raises:
            CalculationError: If the result is a failure
        """
        if self.failure is not None:
            raise CalculationError(
                "Result is a failure",
                context={"reason": self.failure.reason.value, "message": self.failure.message},
            )
        return self.value  # type: ignore[return-value]


class ScenarioArray(Generic[T]):
    """One calculated value per scenario, in scenario order.

    Scenario ``i`` of the output always corresponds to scenario ``i`` of the
    input, also when scenarios are computed on a thread pool.

    Example:
        >>> array = ScenarioArray.of(3, lambda i: i * 10)
        >>> array.get(2)
        20
    """

    def __init__(self, results: list[Result[T]]):
        self._results = tuple(results)

    @classmethod
    def of(
        cls,
        scenario_count: int,
        calculation: Callable[[int], T],
        max_workers: int | None = None,
    ) -> ScenarioArray[T]:
        """Evaluate ``calculation`` for every scenario index.

        Args:
            scenario_count: Number of scenarios
            calculation: Function of the scenario index
            max_workers: Thread pool size, defaults to ``WINDOWFX_MAX_WORKERS``

        Returns:
            Array whose slot ``i`` holds the value, or the failure, of scenario ``i``
        """
        workers = max_workers if max_workers is not None else get_max_workers()

        def run(index: int) -> Result[T]:
            result: Result[T] = Result.of(lambda: calculation(index))
            if result.failure is not None:
                logger.warning(
                    "Scenario calculation failed",
                    extra={"scenario": index, "error": result.failure.message},
                )
            return result

        if workers <= 1 or scenario_count <= 1:
            return cls([run(i) for i in range(scenario_count)])
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return cls(list(pool.map(run, range(scenario_count))))

    @classmethod
    def of_values(cls, values: list[T]) -> ScenarioArray[T]:
        return cls([Result.success(v) for v in values])

    @property
    def scenario_count(self) -> int:
        return len(self._results)

    def result(self, index: int) -> Result[T]:
        return self._results[index]

    def get(self, index: int) -> T:
        """Value of scenario ``index``.

        Raises:
            CalculationError: If that scenario failed
        """
        result = self._results[index]
        if result.failure is not None:
            raise CalculationError(
                "Scenario calculation failed",
                context={"scenario": index, "reason": result.failure.reason.value,
                         "message": result.failure.message},
            )
        return result.value  # type: ignore[return-value]

    def is_success(self, index: int) -> bool:
        return self._results[index].is_success

    def has_failures(self) -> bool:
        return any(r.is_failure for r in self._results)

    def failures(self) -> dict[int, Failure]:
        return {i: r.failure for i, r in enumerate(self._results) if r.failure is not None}

    def values(self) -> list[T]:
        """All values, in scenario order.

        Raises:
            CalculationError: If any scenario failed
        """
        return [self.get(i) for i in range(len(self._results))]

    def map(self, fn: Callable[[T], Any]) -> ScenarioArray[Any]:
        """Apply ``fn`` to every successful value, keeping failures in place."""
        return ScenarioArray(
            [Result.of(lambda r=r: fn(r.value)) if r.is_success else r for r in self._results]
        )

    def to_dataframe(self) -> pd.DataFrame:
        """One row per scenario.

        Multi-currency values get one column per currency, FX rates a ``pair``
        and ``rate`` column, numbers a ``value`` column. Failed scenarios carry
        their message in ``error``.
        """
        records = []
        for i, result in enumerate(self._results):
            record: dict[str, Any] = {"scenario": i}
            if result.failure is not None:
                record["error"] = str(result.failure)
            else:
                record.update(flatten_value(result.value))
            records.append(record)
        return pd.DataFrame(records).set_index("scenario")

    def __iter__(self) -> Iterator[Result[T]]:
        return iter(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def __repr__(self) -> str:
        return f"ScenarioArray(scenarios={len(self._results)}, failures={len(self.failures())})"


def flatten_value(value: Any) -> dict[str, Any]:
    """Flatten a measure value into named components for tabular export.

    Bucketed sensitivities are reduced to their per-currency total.
    """
    if isinstance(value, FxRate):
        return {"pair": str(value.pair), "rate": value.rate}
    if isinstance(value, (int, float)):
        return {"value": float(value)}
    total = getattr(value, "total", None)
    if callable(total) and not hasattr(value, "to_dict"):
        value = total()
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return dict(to_dict())
    return {"value": str(value)}
