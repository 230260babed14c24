"""Day count convention implementations.

Year fractions are used to place dates on a curve's time axis relative to the
valuation date. They are signed: a date before the start gives a negative
fraction.

References:
    ISDA 2006 Definitions, Section 4.16
"""

from __future__ import annotations

import calendar
from datetime import date

from windowfx.core.types import DayCountConvention


def year_fraction(start: date, end: date, convention: DayCountConvention) -> float:
    """Calculate the year fraction between two dates.

    Args:
        start: Start date
        end: End date
        convention: Day count convention to use

    Returns:
        Year fraction, negative when ``end`` is before ``start``

    Example:
        >>> year_fraction(date(2018, 1, 1), date(2018, 7, 2), DayCountConvention.ACT_365F)
        0.4986301369863014
    """
    if end < start:
        return -year_fraction(end, start, convention)
    if convention == DayCountConvention.ACT_365F:
        return (end - start).days / 365.0
    if convention == DayCountConvention.ACT_360:
        return (end - start).days / 360.0
    if convention == DayCountConvention.ACT_ACT_ISDA:
        return _year_fraction_act_act_isda(start, end)
    raise ValueError(f"Unsupported day count convention: {convention}")


def _year_fraction_act_act_isda(start: date, end: date) -> float:
    """Actual/Actual ISDA: days in each calendar year over the length of that year."""
    if start == end:
        return 0.0

    total_fraction = 0.0
    current = start
    while current.year < end.year:
        next_year = date(current.year + 1, 1, 1)
        days_in_year = 366 if calendar.isleap(current.year) else 365
        total_fraction += (next_year - current).days / days_in_year
        current = next_year

    days_in_year = 366 if calendar.isleap(end.year) else 365
    total_fraction += (end - current).days / days_in_year
    return total_fraction
