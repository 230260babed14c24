"""Business day adjustment and reference data.

Products never hold holiday calendars directly. They hold calendar ids inside
adjustment rules and resolve them against :class:`ReferenceData` when a date
is actually adjusted.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from functools import lru_cache
from importlib import resources

from windowfx.core.types import BusinessDayConvention
from windowfx.exceptions import ReferenceDataError
from windowfx.logging_config import get_logger
from windowfx.utilities.calendars import (
    NO_HOLIDAYS,
    SAT_SUN,
    HolidayCalendar,
    NoHolidayCalendar,
    WeekendCalendar,
    combined_calendar_id,
    load_holiday_calendars,
    parse_holiday_calendars,
)

logger = get_logger(__name__)

ENV_HOLIDAY_DATA = "WINDOWFX_HOLIDAY_DATA"


def adjust_to_business_day(
    day: date,
    convention: BusinessDayConvention,
    calendar: HolidayCalendar,
) -> date:
    """Adjust a date to a business day according to the given convention.

    Args:
        day: Date to adjust
        convention: Business day convention to use
        calendar: Holiday calendar deciding which days are business days

    Returns:
        Adjusted date (the same date if it is already a business day)

    Example:
        >>> adjust_to_business_day(date(2018, 6, 30), BusinessDayConvention.FOLLOWING, WeekendCalendar())
        datetime.date(2018, 7, 2)
    """
    if convention == BusinessDayConvention.NO_ADJUST or calendar.is_business_day(day):
        return day

    if convention == BusinessDayConvention.FOLLOWING:
        return calendar.next_or_same(day)
    if convention == BusinessDayConvention.MODIFIED_FOLLOWING:
        adjusted = calendar.next_or_same(day)
        if adjusted.month != day.month:
            adjusted = calendar.previous_or_same(day)
        return adjusted
    if convention == BusinessDayConvention.PRECEDING:
        return calendar.previous_or_same(day)
    if convention == BusinessDayConvention.MODIFIED_PRECEDING:
        adjusted = calendar.previous_or_same(day)
        if adjusted.month != day.month:
            adjusted = calendar.next_or_same(day)
        return adjusted
    if convention == BusinessDayConvention.NEAREST:
        # Sunday and Monday roll forward, other days roll back
        if day.weekday() in (6, 0):
            return calendar.next_or_same(day)
        return calendar.previous_or_same(day)
    raise ValueError(f"Unsupported business day convention: {convention}")


class ReferenceData:
    """Immutable lookup of holiday calendars by id.

    Combined ids such as ``"EUTA+USNY"`` are resolved by combining the
    component calendars. ``NoHolidays`` and ``Sat/Sun`` are always available.

    Example:
        >>> ref_data = ReferenceData.standard()
        >>> ref_data.holiday_calendar("USNY").is_holiday(date(2018, 5, 28))
        True
    """

    def __init__(self, calendars: Mapping[str, HolidayCalendar]):
        self._calendars: dict[str, HolidayCalendar] = {
            NO_HOLIDAYS: NoHolidayCalendar(),
            SAT_SUN: WeekendCalendar(),
        }
        self._calendars.update(calendars)

    @classmethod
    def of(cls, calendars: Mapping[str, HolidayCalendar]) -> ReferenceData:
        return cls(calendars)

    @classmethod
    def empty(cls) -> ReferenceData:
        """Reference data holding only the always-available calendars."""
        return cls({})

    @classmethod
    def standard(cls) -> ReferenceData:
        """Reference data with the bundled holiday calendars.

        A file named by ``WINDOWFX_HOLIDAY_DATA`` is merged over the bundled
        data. The result is cached per process.
        """
        return _standard_reference_data(os.getenv(ENV_HOLIDAY_DATA))

    @property
    def calendar_ids(self) -> tuple[str, ...]:
        return tuple(sorted(self._calendars))

    def contains(self, calendar_id: str) -> bool:
        try:
            self.holiday_calendar(calendar_id)
        except ReferenceDataError:
            return False
        return True

    def holiday_calendar(self, calendar_id: str) -> HolidayCalendar:
        """Resolve a calendar id.

        Raises:
            ReferenceDataError: If the id, or any component of a combined id, is unknown
        """
        if calendar_id in self._calendars:
            return self._calendars[calendar_id]
        parts = [p for p in calendar_id.split("+") if p]
        if len(parts) > 1:
            calendar = self.holiday_calendar(parts[0])
            for part in parts[1:]:
                calendar = calendar.combined_with(self.holiday_calendar(part))
            return calendar
        raise ReferenceDataError(
            "Reference data not found for holiday calendar", context={"calendar_id": calendar_id}
        )

    def combined_with(self, other: ReferenceData) -> ReferenceData:
        """Merge with another instance; calendars of ``other`` win on clashes."""
        merged = dict(self._calendars)
        merged.update(other._calendars)
        return ReferenceData(merged)

    def __repr__(self) -> str:
        return f"ReferenceData({', '.join(self.calendar_ids)})"


@lru_cache(maxsize=4)
def _standard_reference_data(extra_path: str | None) -> ReferenceData:
    bundled = resources.files("windowfx").joinpath("data/holiday_calendars.ini")
    calendars: dict[str, HolidayCalendar] = dict(
        parse_holiday_calendars(bundled.read_text(encoding="utf-8"))
    )
    if extra_path:
        calendars.update(load_holiday_calendars(extra_path))
    logger.debug("Loaded holiday calendars", extra={"calendars": sorted(calendars)})
    return ReferenceData(calendars)


@dataclass(frozen=True)
class BusinessDayAdjustment:
    """A business day convention together with the calendar it applies to.

    Example:
        >>> bda = BusinessDayAdjustment.of(BusinessDayConvention.FOLLOWING, "USNY")
        >>> bda.adjust(date(2018, 5, 28), ReferenceData.standard())
        datetime.date(2018, 5, 29)
    """

    convention: BusinessDayConvention
    calendar: str = NO_HOLIDAYS

    @classmethod
    def of(cls, convention: BusinessDayConvention, calendar: str = NO_HOLIDAYS) -> BusinessDayAdjustment:
        return cls(convention, calendar)

    def adjust(self, day: date, ref_data: ReferenceData) -> date:
        if self.convention == BusinessDayConvention.NO_ADJUST:
            return day
        return adjust_to_business_day(
            day, self.convention, ref_data.holiday_calendar(self.calendar)
        )

    def __str__(self) -> str:
        if self.convention == BusinessDayConvention.NO_ADJUST:
            return self.convention.value
        return f"{self.convention.value} using calendar {self.calendar}"


NO_ADJUSTMENT = BusinessDayAdjustment(BusinessDayConvention.NO_ADJUST, NO_HOLIDAYS)
DEFAULT_PAYMENT_ADJUSTMENT = BusinessDayAdjustment(BusinessDayConvention.FOLLOWING, NO_HOLIDAYS)


@dataclass(frozen=True)
class DaysAdjustment:
    """A shift of a number of business days, optionally followed by an adjustment.

    Used for spot lags, e.g. two ``EUTA+USNY`` business days for EUR/USD.
    """

    days: int
    calendar: str = NO_HOLIDAYS
    adjustment: BusinessDayAdjustment = field(default=NO_ADJUSTMENT)

    @classmethod
    def of_business_days(
        cls, days: int, calendar: str, adjustment: BusinessDayAdjustment = NO_ADJUSTMENT
    ) -> DaysAdjustment:
        return cls(days, combined_calendar_id(calendar), adjustment)

    def adjust(self, day: date, ref_data: ReferenceData) -> date:
        shifted = ref_data.holiday_calendar(self.calendar).add_business_days(day, self.days)
        return self.adjustment.adjust(shifted, ref_data)
