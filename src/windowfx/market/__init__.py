"""Market data: discount curves, rates providers, sensitivities and scenarios."""

from windowfx.market.curves import ZeroRateDiscountCurve
from windowfx.market.rates_provider import (
    DiscountFxForwardRates,
    ImmutableRatesProvider,
    RatesProvider,
)
from windowfx.market.scenario import ScenarioMarketData
from windowfx.market.sensitivity import (
    CurrencyParameterSensitivities,
    CurrencyParameterSensitivity,
    PointSensitivities,
    ZeroRateSensitivity,
)

__all__ = [
    "CurrencyParameterSensitivities",
    "CurrencyParameterSensitivity",
    "DiscountFxForwardRates",
    "ImmutableRatesProvider",
    "PointSensitivities",
    "RatesProvider",
    "ScenarioMarketData",
    "ZeroRateDiscountCurve",
    "ZeroRateSensitivity",
]
