"""Holiday calendar implementations.

This module provides holiday calendars for deciding which dates are business
days, helpers to navigate between business days, and a loader for holiday
data files in the ``[ID] / Weekend = Sat,Sun / 2018 = Jan01,...`` format.

Calendars are identified by short string ids such as ``USNY`` or ``EUTA``.
Two ids joined with ``+`` name the combination of both calendars, where a
date is a holiday if it is a holiday in either.
"""

from __future__ import annotations

import configparser
from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from pathlib import Path

from windowfx.exceptions import ReferenceDataError

# Standard calendar ids
NO_HOLIDAYS = "NoHolidays"
SAT_SUN = "Sat/Sun"
USNY = "USNY"
EUTA = "EUTA"
HKHK = "HKHK"
KRSE = "KRSE"
MYKL = "MYKL"
INMU = "INMU"

# Ids referenced by FX swap conventions; data must be supplied through
# WINDOWFX_HOLIDAY_DATA before they can be resolved.
AUSY = "AUSY"
BRBD = "BRBD"
CATO = "CATO"
CHZU = "CHZU"
DKCO = "DKCO"
JPTO = "JPTO"
MXMC = "MXMC"
NOOS = "NOOS"
NZAU = "NZAU"
SEST = "SEST"

_WEEKDAY_NAMES = {"MON": 0, "TUE": 1, "WED": 2, "THU": 3, "FRI": 4, "SAT": 5, "SUN": 6}
_DEFAULT_CALENDAR_BY_CURRENCY = {
    "USD": USNY,
    "EUR": EUTA,
    "HKD": HKHK,
    "KRW": KRSE,
    "MYR": MYKL,
    "INR": INMU,
}


class HolidayCalendar(ABC):
    """Abstract base class for holiday calendars.

    A holiday calendar determines which dates are business days and provides
    navigation functions for working with business days.
    """

    name: str = "HolidayCalendar"

    @abstractmethod
    def is_business_day(self, day: date) -> bool:
        """Check if a date is a business day.

        Args:
            day: Date to check

        Returns:
            True if the date is a business day

        Example:
            >>> cal = WeekendCalendar()
            >>> cal.is_business_day(date(2024, 1, 15))  # Monday
            True
        """

    def is_holiday(self, day: date) -> bool:
        """Check if a date is a holiday (not a business day)."""
        return not self.is_business_day(day)

    def next_or_same(self, day: date) -> date:
        """Get the next business day on or after the given date.

        Example:
            >>> cal = WeekendCalendar()
            >>> cal.next_or_same(date(2024, 1, 6))  # Saturday
            datetime.date(2024, 1, 8)
        """
        current = day
        while not self.is_business_day(current):
            current += timedelta(days=1)
        return current

    def previous_or_same(self, day: date) -> date:
        """Get the previous business day on or before the given date.

        Example:
            >>> cal = WeekendCalendar()
            >>> cal.previous_or_same(date(2024, 1, 7))  # Sunday
            datetime.date(2024, 1, 5)
        """
        current = day
        while not self.is_business_day(current):
            current -= timedelta(days=1)
        return current

    def next(self, day: date) -> date:
        """Get the first business day strictly after the given date."""
        return self.next_or_same(day + timedelta(days=1))

    def previous(self, day: date) -> date:
        """Get the last business day strictly before the given date."""
        return self.previous_or_same(day - timedelta(days=1))

    def add_business_days(self, day: date, days: int) -> date:
        """Add a number of business days to a date.

        Args:
            day: Starting date
            days: Number of business days to add (can be negative)

        Returns:
            Date after adding the specified business days

        Example:
            >>> cal = WeekendCalendar()
            >>> cal.add_business_days(date(2024, 1, 5), 1)  # Friday
            datetime.date(2024, 1, 8)
        """
        if days == 0:
            return day

        current = day
        direction = 1 if days > 0 else -1
        remaining = abs(days)

        while remaining > 0:
            current += timedelta(days=direction)
            if self.is_business_day(current):
                remaining -= 1

        return current

    def business_days_between(self, start: date, end: date, include_end: bool = False) -> int:
        """Count business days between two dates.

        Args:
            start: Start date (inclusive)
            end: End date (exclusive unless ``include_end``)
            include_end: Whether to include the end date in the count

        Returns:
            Number of business days

        Example:
            >>> cal = WeekendCalendar()
            >>> cal.business_days_between(date(2024, 1, 1), date(2024, 1, 5))
            4
        """
        if start > end:
            return -self.business_days_between(end, start, include_end)

        count = 0
        current = start
        while current < end:
            if self.is_business_day(current):
                count += 1
            current += timedelta(days=1)

        if include_end and self.is_business_day(end):
            count += 1

        return count

    def combined_with(self, other: HolidayCalendar) -> HolidayCalendar:
        """Combine with another calendar; holidays of either apply."""
        if isinstance(other, NoHolidayCalendar) or other is self:
            return self
        if isinstance(self, NoHolidayCalendar):
            return other
        return CombinedCalendar(self, other)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"


class NoHolidayCalendar(HolidayCalendar):
    """Calendar with no holidays - every day is a business day."""

    name = NO_HOLIDAYS

    def is_business_day(self, day: date) -> bool:  # noqa: ARG002
        return True


class WeekendCalendar(HolidayCalendar):
    """Calendar where only weekend days are holidays.

    Treats weekends (Saturday/Sunday by default) as non-business days but
    does not account for public holidays.
    """

    def __init__(self, weekend_days: Iterable[int] = (5, 6), name: str = SAT_SUN):
        """Initialize weekend calendar.

        Args:
            weekend_days: Weekday numbers treated as weekend (Monday=0, Sunday=6)
            name: Calendar id
        """
        self.weekend_days = frozenset(weekend_days)
        self.name = name

    def is_business_day(self, day: date) -> bool:
        return day.weekday() not in self.weekend_days


class CustomCalendar(WeekendCalendar):
    """Calendar with explicit holiday dates in addition to weekends.

    Example:
        >>> cal = CustomCalendar("TEST", holidays=[date(2018, 5, 28)])
        >>> cal.is_holiday(date(2018, 5, 28))
        True
    """

    def __init__(
        self,
        name: str,
        holidays: Iterable[date] | None = None,
        weekend_days: Iterable[int] = (5, 6),
    ):
        """Initialize custom calendar.

        Args:
            name: Calendar id
            holidays: Holiday dates (defaults to none)
            weekend_days: Weekday numbers treated as weekend (Monday=0, Sunday=6)
        """
        super().__init__(weekend_days, name)
        self.holidays: set[date] = set(holidays or ())

    def add_holiday(self, day: date) -> None:
        self.holidays.add(day)

    def remove_holiday(self, day: date) -> None:
        self.holidays.discard(day)

    def is_business_day(self, day: date) -> bool:
        """A business day is neither a weekend day nor a listed holiday."""
        if day in self.holidays:
            return False
        return super().is_business_day(day)


class CombinedCalendar(HolidayCalendar):
    """Union of two calendars: a business day must be open in both."""

    def __init__(self, first: HolidayCalendar, second: HolidayCalendar):
        self.first = first
        self.second = second
        self.name = combined_calendar_id(first.name, second.name)

    def is_business_day(self, day: date) -> bool:
        return self.first.is_business_day(day) and self.second.is_business_day(day)


def combined_calendar_id(*calendar_ids: str) -> str:
    """Build the id of a combined calendar.

    Component ids are de-duplicated and sorted, ``NoHolidays`` is dropped,
    so ``combined_calendar_id("USNY", "EUTA")`` is ``"EUTA+USNY"``.
    """
    parts: set[str] = set()
    for calendar_id in calendar_ids:
        parts.update(p for p in calendar_id.split("+") if p and p != NO_HOLIDAYS)
    if not parts:
        return NO_HOLIDAYS
    return "+".join(sorted(parts))


def default_calendar_for_currency(currency: str) -> str:
    """Get the default holiday calendar id for a currency.

    Raises:
        ReferenceDataError: If no default is known for the currency
    """
    try:
        return _DEFAULT_CALENDAR_BY_CURRENCY[currency]
    except KeyError:
        raise ReferenceDataError(
            "No default holiday calendar for currency", context={"currency": currency}
        ) from None


def _parse_weekend(value: str, calendar_id: str) -> frozenset[int]:
    days = set()
    for token in value.split(","):
        token = token.strip().upper()[:3]
        if not token:
            continue
        if token not in _WEEKDAY_NAMES:
            raise ReferenceDataError(
                "Invalid weekend day in holiday data",
                context={"calendar_id": calendar_id, "value": value},
            )
        days.add(_WEEKDAY_NAMES[token])
    return frozenset(days)


def _parse_year(year: int, value: str, calendar_id: str) -> set[date]:
    holidays = set()
    for token in value.split(","):
        token = token.strip()
        if not token:
            continue
        try:
            if "-" in token:
                holidays.add(date.fromisoformat(token))
            else:
                holidays.add(datetime.strptime(f"{year} {token}", "%Y %b%d").date())
        except ValueError as e:
            raise ReferenceDataError(
                f"Invalid holiday '{token}' in holiday data",
                context={"calendar_id": calendar_id, "year": year},
            ) from e
    return holidays


def parse_holiday_calendars(text: str) -> dict[str, CustomCalendar]:
    """Parse holiday calendar definitions from ini text.

    Args:
        text: Contents of a holiday data file

    Returns:
        Dictionary mapping calendar ids to calendars

    Raises:
        ReferenceDataError: If a section has no ``Weekend`` key or a value is malformed
    """
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    parser.read_string(text)

    calendars: dict[str, CustomCalendar] = {}
    for calendar_id in parser.sections():
        section = parser[calendar_id]
        if "Weekend" not in section:
            raise ReferenceDataError(
                "Holiday data must define 'Weekend'", context={"calendar_id": calendar_id}
            )
        weekend = _parse_weekend(section["Weekend"], calendar_id)

        by_year: dict[int, set[date]] = {}
        for key, value in section.items():
            if key == "Weekend":
                continue
            if key.isdigit():
                year = int(key)
                by_year[year] = _parse_year(year, value, calendar_id)
            else:
                try:
                    day = date.fromisoformat(key)
                except ValueError as e:
                    raise ReferenceDataError(
                        f"Invalid key '{key}' in holiday data", context={"calendar_id": calendar_id}
                    ) from e
                by_year.setdefault(day.year, set()).add(day)

        holidays = set().union(*by_year.values()) if by_year else set()
        calendars[calendar_id] = CustomCalendar(calendar_id, holidays, weekend)
    return calendars


def load_holiday_calendars(path: str | Path) -> dict[str, CustomCalendar]:
    """Load holiday calendar definitions from an ini file."""
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ReferenceDataError(
            "Unable to read holiday data file", context={"path": str(file_path)}
        ) from e
    return parse_holiday_calendars(text)


def is_weekend(day: date) -> bool:
    """Check if a date falls on a Saturday or Sunday."""
    return day.weekday() >= 5
