"""Measure calculation, scenario results and batch runner."""

from windowfx.engine.calculation import (
    CALCULATORS,
    FunctionRequirements,
    WindowForwardTradeCalculationFunction,
)
from windowfx.engine.measures import ONE_BASIS_POINT, Measure, WindowForwardMeasureCalculations
from windowfx.engine.results import Failure, FailureReason, Result, ScenarioArray
from windowfx.engine.runner import CalculationResults, CalculationRunner

__all__ = [
    # Results
    "Failure",
    "FailureReason",
    "Result",
    "ScenarioArray",
    # Measures
    "CALCULATORS",
    "Measure",
    "ONE_BASIS_POINT",
    "WindowForwardMeasureCalculations",
    # Calculation
    "FunctionRequirements",
    "WindowForwardTradeCalculationFunction",
    # Runner
    "CalculationResults",
    "CalculationRunner",
]
