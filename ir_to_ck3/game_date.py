"""
game_date.py - In-game calendar dates for Imperator and CK3 history.

Provides the GameDate class used for every dated value in the conversion:
    - Parsing "year.month.day" strings as written in save and history files
    - Day and month arithmetic on the 365-day game calendar (no leap years)
    - Fractional year differences (used for pregnancy windows)

Module: ir_to_ck3.game_date
"""

import re
from functools import total_ordering
from typing import Union

DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
DAYS_IN_YEAR = 365

# Cumulative day offsets of each month's first day.
_MONTH_OFFSETS = tuple(sum(DAYS_IN_MONTH[:i]) for i in range(12))


@total_ordering
class GameDate:
    """
    Immutable date on the Paradox game calendar.

    Attributes:
        year (int): Year (may be zero or negative for early Imperator dates).
        month (int): Month, 1-12.
        day (int): Day of month, 1-based.
    """
    __slots__ = ['year', 'month', 'day']

    DATE_RE = re.compile(r'^\s*(-?\d+)(?:\.(\d+))?(?:\.(\d+))?\s*$')

    def __init__(self, year: int, month: int = 1, day: int = 1):
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month {month} in date {year}.{month}.{day}")
        if not 1 <= day <= DAYS_IN_MONTH[month - 1]:
            raise ValueError(f"Invalid day {day} in date {year}.{month}.{day}")
        object.__setattr__(self, 'year', int(year))
        object.__setattr__(self, 'month', int(month))
        object.__setattr__(self, 'day', int(day))

    def __setattr__(self, name, value):
        raise AttributeError("GameDate is immutable")

    @classmethod
    def parse(cls, value: Union[str, "GameDate"]) -> "GameDate":
        """
        Parse a "Y.M.D" date string. Month and day default to 1.

        Args:
            value: Date string such as "867.1.1" or "450.10", or a GameDate.

        Returns:
            GameDate: The parsed date.

        Raises:
            ValueError: If the string is not a valid game date.
        """
        if isinstance(value, GameDate):
            return value
        match = cls.DATE_RE.match(str(value))
        if not match:
            raise ValueError(f"Unable to parse game date: '{value}'")
        year, month, day = match.groups()
        return cls(int(year), int(month or 1), int(day or 1))

    @classmethod
    def from_days(cls, days: int) -> "GameDate":
        """Build a date from a day count since year 0, day 1."""
        year, day_of_year = divmod(days, DAYS_IN_YEAR)
        month = 12
        while _MONTH_OFFSETS[month - 1] > day_of_year:
            month -= 1
        return cls(year, month, day_of_year - _MONTH_OFFSETS[month - 1] + 1)

    @property
    def days(self) -> int:
        """Day count since year 0, day 1."""
        return self.year * DAYS_IN_YEAR + _MONTH_OFFSETS[self.month - 1] + self.day - 1

    def change_by_days(self, days: int) -> "GameDate":
        return GameDate.from_days(self.days + days)

    def change_by_months(self, months: int) -> "GameDate":
        year, month_index = divmod(self.month - 1 + months, 12)
        month = month_index + 1
        day = min(self.day, DAYS_IN_MONTH[month - 1])
        return GameDate(self.year + year, month, day)

    def diff_in_years(self, other: "GameDate") -> float:
        """
        Return the difference self - other in (fractional) years.
        """
        return (self.days - other.days) / DAYS_IN_YEAR

    def _key(self):
        return (self.year, self.month, self.day)

    def __eq__(self, other) -> bool:
        if not isinstance(other, GameDate):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other) -> bool:
        if not isinstance(other, GameDate):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return f"{self.year}.{self.month}.{self.day}"

    def __repr__(self) -> str:
        return f"GameDate({self.year}, {self.month}, {self.day})"
