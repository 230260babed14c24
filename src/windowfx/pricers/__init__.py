"""Pricers for payments and window forwards."""

from windowfx.pricers.payment import DEFAULT_PAYMENT_PRICER, DiscountingPaymentPricer
from windowfx.pricers.price_to_worst import (
    DEFAULT_PRODUCT_PRICER,
    DEFAULT_TRADE_PRICER,
    PriceToWorstWindowForwardProductPricer,
    PriceToWorstWindowForwardTradePricer,
)

__all__ = [
    "DEFAULT_PAYMENT_PRICER",
    "DEFAULT_PRODUCT_PRICER",
    "DEFAULT_TRADE_PRICER",
    "DiscountingPaymentPricer",
    "PriceToWorstWindowForwardProductPricer",
    "PriceToWorstWindowForwardTradePricer",
]
