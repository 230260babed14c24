"""Market conventions for FX swaps and forwards.

A convention fixes how the spot date of a currency pair is derived from the
trade date: a number of business days in the joint calendar of both
currencies, then a business day adjustment.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass

from windowfx.core.currency import CurrencyPair
from windowfx.core.dates import BusinessDayAdjustment, DaysAdjustment, ReferenceData
from windowfx.core.types import BusinessDayConvention
from windowfx.exceptions import ConventionError
from windowfx.utilities.calendars import (
    AUSY,
    BRBD,
    CATO,
    CHZU,
    DKCO,
    EUTA,
    HKHK,
    INMU,
    JPTO,
    MXMC,
    MYKL,
    NOOS,
    NZAU,
    SEST,
    USNY,
    combined_calendar_id,
)


@dataclass(frozen=True)
class FxSwapConvention:
    """Spot date rules for a currency pair.

    Attributes:
        currency_pair: Conventional currency pair
        spot_date_offset: Business days from trade date to spot date
        business_day_adjustment: Adjustment applied to dates derived from spot

    Example:
        >>> FxSwapConvention.of("EUR/USD").spot_date(date(2018, 3, 28), ReferenceData.standard())
        datetime.date(2018, 4, 3)
    """

    currency_pair: CurrencyPair
    spot_date_offset: DaysAdjustment
    business_day_adjustment: BusinessDayAdjustment

    @property
    def name(self) -> str:
        return str(self.currency_pair)

    @classmethod
    def of(cls, name: str) -> FxSwapConvention:
        """Look up a standard convention by pair name, e.g. ``"EUR/USD"``.

        Raises:
            ConventionError: If no standard convention exists for the name
        """
        key = name.strip().upper().replace("_", "/")
        try:
            return STANDARD_FX_SWAP_CONVENTIONS[key]
        except KeyError:
            raise ConventionError(
                "Unknown FX swap convention",
                context={"name": name, "available": ", ".join(sorted(STANDARD_FX_SWAP_CONVENTIONS))},
            ) from None

    def spot_date(self, trade_date: dt.date, ref_data: ReferenceData) -> dt.date:
        """Spot date for a trade agreed on ``trade_date``."""
        return self.spot_date_offset.adjust(trade_date, ref_data)

    def adjust(self, day: dt.date, ref_data: ReferenceData) -> dt.date:
        """Adjust a date derived from spot, such as a forward payment date."""
        return self.business_day_adjustment.adjust(day, ref_data)


def _standard(base: str, counter: str, spot_days: int, *calendars: str) -> FxSwapConvention:
    calendar = combined_calendar_id(*calendars)
    return FxSwapConvention(
        CurrencyPair.of(base, counter),
        DaysAdjustment.of_business_days(spot_days, calendar),
        BusinessDayAdjustment.of(BusinessDayConvention.MODIFIED_FOLLOWING, calendar),
    )


EUR_USD = _standard("EUR", "USD", 2, EUTA, USNY)
AUD_USD = _standard("AUD", "USD", 2, AUSY, USNY)
NZD_USD = _standard("NZD", "USD", 2, NZAU, USNY)
USD_BRL = _standard("USD", "BRL", 2, USNY, BRBD)
# CAD settles T+1
USD_CAD = _standard("USD", "CAD", 1, USNY, CATO)
USD_CHF = _standard("USD", "CHF", 2, USNY, CHZU)
USD_DKK = _standard("USD", "DKK", 2, USNY, DKCO)
USD_JPY = _standard("USD", "JPY", 2, USNY, JPTO)
USD_HKD = _standard("USD", "HKD", 2, USNY, HKHK)
USD_INR = _standard("USD", "INR", 2, USNY, INMU)
USD_MXN = _standard("USD", "MXN", 2, USNY, MXMC)
USD_MYR = _standard("USD", "MYR", 2, USNY, MYKL)
USD_NOK = _standard("USD", "NOK", 2, USNY, NOOS)
USD_SEK = _standard("USD", "SEK", 2, USNY, SEST)

STANDARD_FX_SWAP_CONVENTIONS: dict[str, FxSwapConvention] = {
    c.name: c
    for c in (
        EUR_USD,
        AUD_USD,
        NZD_USD,
        USD_BRL,
        USD_CAD,
        USD_CHF,
        USD_DKK,
        USD_JPY,
        USD_HKD,
        USD_INR,
        USD_MXN,
        USD_MYR,
        USD_NOK,
        USD_SEK,
    )
}
