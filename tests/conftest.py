"""Pytest configuration and shared fixtures for windowfx tests.

This module provides common market data, reference data and products used
across unit, property and integration tests.
"""

from datetime import date
from typing import Any

import jax
import pytest

from windowfx.core.amounts import CurrencyAmount
from windowfx.core.currency import FxRate
from windowfx.core.dates import BusinessDayAdjustment, ReferenceData
from windowfx.core.types import BusinessDayConvention
from windowfx.market.curves import ZeroRateDiscountCurve
from windowfx.market.rates_provider import ImmutableRatesProvider
from windowfx.product.window_forward import WindowForward

VALUATION_DATE = date(2018, 3, 28)
PAYMENT_DATE = date(2018, 6, 30)
SPOT_EUR_USD = 1.23


@pytest.fixture
def valuation_date() -> date:
    return VALUATION_DATE


@pytest.fixture
def ref_data() -> ReferenceData:
    """Reference data with the bundled holiday calendars."""
    return ReferenceData.standard()


@pytest.fixture
def eur_curve() -> ZeroRateDiscountCurve:
    return ZeroRateDiscountCurve.of(
        "EUR-Discount",
        "EUR",
        VALUATION_DATE,
        [date(2018, 4, 28), date(2018, 6, 28), date(2018, 9, 28), date(2019, 3, 28)],
        [-0.0035, -0.0033, -0.0030, -0.0025],
    )


@pytest.fixture
def usd_curve() -> ZeroRateDiscountCurve:
    return ZeroRateDiscountCurve.of(
        "USD-Discount",
        "USD",
        VALUATION_DATE,
        [date(2018, 4, 28), date(2018, 6, 28), date(2018, 9, 28), date(2019, 3, 28)],
        [0.0180, 0.0200, 0.0220, 0.0250],
    )


@pytest.fixture
def provider(eur_curve, usd_curve) -> ImmutableRatesProvider:
    """EUR/USD market with USD rates above EUR rates, so the forward rises over time."""
    return ImmutableRatesProvider(
        VALUATION_DATE,
        discount_curves={"EUR": eur_curve, "USD": usd_curve},
        fx_rates=[FxRate.of("EUR", "USD", SPOT_EUR_USD)],
    )


@pytest.fixture
def usny_following() -> BusinessDayAdjustment:
    return BusinessDayAdjustment.of(BusinessDayConvention.FOLLOWING, "USNY")


@pytest.fixture
def window_forward(usny_following) -> WindowForward:
    """Pay EUR 125,000, receive USD 150,000 on 2018-06-30, window over Q2 2018."""
    return WindowForward.of_rate(
        CurrencyAmount.of("USD", 150_000),
        FxRate.of("EUR", "USD", 1.20),
        PAYMENT_DATE,
        payment_date_adjustment=usny_following,
        execution_period_start=date(2018, 3, 30),
        execution_period_end=date(2018, 6, 30),
    )


@pytest.fixture
def tolerance() -> dict[str, float]:
    """Provide numerical tolerance values for float comparisons.

    Returns:
        Dictionary with different tolerance levels
    """
    return {
        "rtol": 1e-5,  # Relative tolerance
        "atol": 1e-8,  # Absolute tolerance
        "strict_rtol": 1e-10,  # Strict relative tolerance
        "strict_atol": 1e-12,  # Strict absolute tolerance
    }


@pytest.fixture(autouse=True)
def clear_jax_caches() -> None:
    """Drop compiled JAX functions after each test."""
    yield
    jax.clear_caches()


# Configure pytest markers
def pytest_configure(config: Any) -> None:
    """Configure custom pytest markers.

    Args:
        config: Pytest configuration object
    """
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")
