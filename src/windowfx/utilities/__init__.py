"""Holiday calendars and day count conventions."""

from windowfx.utilities.calendars import (
    EUTA,
    HKHK,
    INMU,
    KRSE,
    MYKL,
    NO_HOLIDAYS,
    SAT_SUN,
    USNY,
    CombinedCalendar,
    CustomCalendar,
    HolidayCalendar,
    NoHolidayCalendar,
    WeekendCalendar,
    combined_calendar_id,
    default_calendar_for_currency,
    is_weekend,
    load_holiday_calendars,
    parse_holiday_calendars,
)
from windowfx.utilities.conventions import year_fraction

__all__ = [
    # Calendar ids
    "EUTA",
    "HKHK",
    "INMU",
    "KRSE",
    "MYKL",
    "NO_HOLIDAYS",
    "SAT_SUN",
    "USNY",
    # Calendars
    "CombinedCalendar",
    "CustomCalendar",
    "HolidayCalendar",
    "NoHolidayCalendar",
    "WeekendCalendar",
    "combined_calendar_id",
    "default_calendar_for_currency",
    "is_weekend",
    "load_holiday_calendars",
    "parse_holiday_calendars",
    # Day count
    "year_fraction",
]
