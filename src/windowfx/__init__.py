"""windowfx: price-to-worst valuation of window (flexible) FX forwards.

A window forward exchanges two fixed currency amounts on a payment date, and
is valued at the worst forward rate observable over a window of dates before
that payment date. Curve arithmetic and sensitivities use JAX.

Basic usage:
    >>> import windowfx
    >>> print(windowfx.__version__)
    0.1.0
"""

import jax

# Curve arithmetic needs double precision; must run before any array is created.
jax.config.update("jax_enable_x64", True)

__version__ = "0.1.0"
__license__ = "Apache-2.0"

from windowfx.exceptions import (  # noqa: E402
    CalculationError,
    ConfigurationError,
    ConventionError,
    MarketDataError,
    ReferenceDataError,
    WindowFxError,
)
from windowfx.logging_config import configure_logging, get_logger  # noqa: E402

# Public API
__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Exceptions
    "CalculationError",
    "ConfigurationError",
    "ConventionError",
    "MarketDataError",
    "ReferenceDataError",
    "WindowFxError",
    # Logging
    "configure_logging",
    "get_logger",
    # Main API (imported lazily)
    "CalculationRunner",
    "CurrencyAmount",
    "FxRate",
    "ImmutableRatesProvider",
    "Measure",
    "PriceToWorstWindowForwardProductPricer",
    "PriceToWorstWindowForwardTradePricer",
    "ReferenceData",
    "ScenarioMarketData",
    "WindowForward",
    "WindowForwardTrade",
    "ZeroRateDiscountCurve",
]

_LAZY_IMPORTS = {
    "CalculationRunner": "windowfx.engine.runner",
    "CurrencyAmount": "windowfx.core.amounts",
    "FxRate": "windowfx.core.currency",
    "ImmutableRatesProvider": "windowfx.market.rates_provider",
    "Measure": "windowfx.engine.measures",
    "PriceToWorstWindowForwardProductPricer": "windowfx.pricers.price_to_worst",
    "PriceToWorstWindowForwardTradePricer": "windowfx.pricers.price_to_worst",
    "ReferenceData": "windowfx.core.dates",
    "ScenarioMarketData": "windowfx.market.scenario",
    "WindowForward": "windowfx.product.window_forward",
    "WindowForwardTrade": "windowfx.product.trade",
    "ZeroRateDiscountCurve": "windowfx.market.curves",
}


def __getattr__(name: str) -> object:
    """Lazy import of the main API.

    Keeps ``import windowfx`` light; pricing modules load on first use.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    import importlib

    return getattr(importlib.import_module(module_name), name)
