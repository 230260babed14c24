"""Core value types: currencies, amounts, FX rates and date adjustment."""

from windowfx.core.amounts import CurrencyAmount, MultiCurrencyAmount, Payment
from windowfx.core.currency import (
    CURRENCY_PRIORITY,
    MARKET_CONVENTION_PAIRS,
    CurrencyPair,
    FxRate,
    FxRateProvider,
    validate_currency,
)
from windowfx.core.dates import (
    DEFAULT_PAYMENT_ADJUSTMENT,
    NO_ADJUSTMENT,
    BusinessDayAdjustment,
    DaysAdjustment,
    ReferenceData,
    adjust_to_business_day,
)
from windowfx.core.types import (
    # Type aliases
    Amount,
    # Enumerations
    BusinessDayConvention,
    Currency,
    DayCountConvention,
    Rate,
    YearFraction,
)

__all__ = [
    # Type aliases
    "Amount",
    "Currency",
    "Rate",
    "YearFraction",
    # Enumerations
    "BusinessDayConvention",
    "DayCountConvention",
    # Currencies and FX
    "CURRENCY_PRIORITY",
    "MARKET_CONVENTION_PAIRS",
    "CurrencyPair",
    "FxRate",
    "FxRateProvider",
    "validate_currency",
    # Amounts
    "CurrencyAmount",
    "MultiCurrencyAmount",
    "Payment",
    # Dates
    "DEFAULT_PAYMENT_ADJUSTMENT",
    "NO_ADJUSTMENT",
    "BusinessDayAdjustment",
    "DaysAdjustment",
    "ReferenceData",
    "adjust_to_business_day",
]
