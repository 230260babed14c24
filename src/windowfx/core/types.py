"""Type definitions and enumerations shared across windowfx.

All enumerations inherit from str for JSON serializability and easy comparison.
"""

from enum import Enum
from typing import TypeAlias

Currency: TypeAlias = str  # ISO 4217 code, e.g. 'USD'
Amount: TypeAlias = float  # Signed monetary amount, positive = receive
Rate: TypeAlias = float  # FX rate (counter units per base unit)
YearFraction: TypeAlias = float


class BusinessDayConvention(str, Enum):
    """Business day adjustment conventions.

    Defines how a date falling on a holiday or weekend is moved onto a
    business day.
    """

    NO_ADJUST = "NoAdjust"
    FOLLOWING = "Following"
    MODIFIED_FOLLOWING = "ModifiedFollowing"
    PRECEDING = "Preceding"
    MODIFIED_PRECEDING = "ModifiedPreceding"
    NEAREST = "Nearest"

    @classmethod
    def of(cls, name: str) -> "BusinessDayConvention":
        """Look up a convention by value or member name, ignoring case."""
        key = name.replace("_", "").replace("-", "").lower()
        for member in cls:
            if key in (member.value.lower(), member.name.replace("_", "").lower()):
                return member
        raise ValueError(f"Unknown business day convention: {name}")


class DayCountConvention(str, Enum):
    """Day count conventions used to turn dates into curve year fractions."""

    ACT_360 = "Act/360"
    ACT_365F = "Act/365F"
    ACT_ACT_ISDA = "Act/Act ISDA"
