"""
Epoch (Compact Time) Module

Represents instants as a whole day number plus a fraction of a day. The day
number is the Plan13 general day number (Julian Day - 1721409.5), which keeps
all time arithmetic in small integers and a single float.

The calendar conversions treat January and February as months 13 and 14 of
the previous year so month lengths follow a simple 30.6-day rule. They are
exact between 1900 Mar 01 and 2100 Feb 28; dates outside that window raise
TimeRangeError.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Tuple

from .constants import MAX_CALENDAR_DATE, MEAN_YEAR_DAYS, MIN_CALENDAR_DATE, SECONDS_PER_DAY
from .exceptions import TimeRangeError

TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S"

# Fraction of an interval below a multiple that roundup() treats as on it
BOUNDARY_TOLERANCE = 1e-9


def day_number(year: int, month: int, day: int) -> int:
    """
    Convert a calendar date to a day number.

    Day 0 of a month is accepted, so ``day_number(y, 1, 0)`` is the last
    day of the previous year (used for TLE day-of-year epochs).
    """
    if month < 3:
        month += 12
        year -= 1
    return int(year * MEAN_YEAR_DAYS) + int((month + 1) * 30.6) + day - 428


def calendar_date(dn: int) -> Tuple[int, int, int]:
    """Convert a day number back to (year, month, day)."""
    dn += 428
    year = int((dn - 122.1) / MEAN_YEAR_DAYS)
    dn -= int(year * MEAN_YEAR_DAYS)
    month = int(dn / 30.61)
    dn -= int(month * 30.6)
    month -= 1
    if month > 12:
        month -= 12
        year += 1
    return year, month, dn


MIN_DAY_NUMBER = day_number(*MIN_CALENDAR_DATE)
MAX_DAY_NUMBER = day_number(*MAX_CALENDAR_DATE)


@dataclass(frozen=True, order=True)
class Epoch:
    """
    Instant in time as (day_number, day_fraction).

    The fraction is renormalised into [0, 1) on construction, carrying
    whole days into ``day_number``, so every Epoch compares correctly in
    lexicographic order.
    """

    day_number: int
    day_fraction: float = 0.0

    def __post_init__(self):
        whole = math.floor(self.day_fraction)
        fraction = self.day_fraction - whole
        dn = int(self.day_number) + int(whole)
        if fraction >= 1.0:
            fraction -= 1.0
            dn += 1
        object.__setattr__(self, "day_number", dn)
        object.__setattr__(self, "day_fraction", fraction)

    @classmethod
    def from_calendar(cls, year: int, month: int, day: int,
                      hour: int = 0, minute: int = 0, second: int = 0) -> "Epoch":
        """
        Build an Epoch from a UTC calendar date and time.

        Raises:
            TimeRangeError: If a field is invalid or the date lies outside
                1900 Mar 01 - 2100 Feb 28
        """
        try:
            datetime(year, month, day, hour, minute, second)
        except (TypeError, ValueError) as e:
            raise TimeRangeError(f"Invalid calendar time: {e}")

        if not MIN_CALENDAR_DATE <= (year, month, day) <= MAX_CALENDAR_DATE:
            raise TimeRangeError(
                f"Date {year:04d}/{month:02d}/{day:02d} outside supported range "
                f"{MIN_CALENDAR_DATE} - {MAX_CALENDAR_DATE}"
            )

        fraction = (hour + minute / 60.0 + second / 3600.0) / 24.0
        return cls(day_number(year, month, day), fraction)

    @classmethod
    def from_datetime(cls, dt: datetime) -> "Epoch":
        """Build an Epoch from a datetime; naive values are taken as UTC."""
        if dt.tzinfo is not None:
            dt = dt.astimezone(timezone.utc)
        epoch = cls.from_calendar(dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second)
        if dt.microsecond:
            epoch = epoch.advance(dt.microsecond / 1e6 / SECONDS_PER_DAY)
        return epoch

    @classmethod
    def parse(cls, text: str) -> "Epoch":
        """Parse a ``YYYY/MM/DD HH:MM:SS`` timestamp."""
        dt = datetime.strptime(text.strip(), TIMESTAMP_FORMAT)
        return cls.from_calendar(dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second)

    def to_calendar(self) -> Tuple[int, int, int, int, int, int]:
        """
        Convert back to (year, month, day, hour, minute, second).

        The day fraction is rounded to whole seconds; a fraction that rounds
        up to midnight rolls over into the next day.
        """
        dn = self.day_number
        seconds = int(round(self.day_fraction * SECONDS_PER_DAY))
        if seconds >= SECONDS_PER_DAY:
            seconds -= int(SECONDS_PER_DAY)
            dn += 1

        if not MIN_DAY_NUMBER <= dn <= MAX_DAY_NUMBER:
            raise TimeRangeError(f"Day number {dn} outside supported range")

        year, month, day = calendar_date(dn)
        hour, seconds = divmod(seconds, 3600)
        minute, second = divmod(seconds, 60)
        return year, month, day, hour, minute, second

    def to_datetime(self) -> datetime:
        """Convert to a timezone-aware UTC datetime (whole seconds)."""
        return datetime(*self.to_calendar(), tzinfo=timezone.utc)

    def advance(self, days: float) -> "Epoch":
        """Return a new Epoch offset by ``days`` (may be negative)."""
        return Epoch(self.day_number, self.day_fraction + days)

    def roundup(self, interval: float) -> "Epoch":
        """
        Round up to the next multiple of ``interval`` days.

        An Epoch already on a boundary moves to the following one, so
        repeated calls step forward by exactly one interval. The boundary is
        computed as a whole multiple of ``interval``; a fraction within
        BOUNDARY_TOLERANCE intervals below a multiple counts as on it.
        """
        if interval <= 0.0:
            raise ValueError(f"Rounding interval must be positive, got {interval}")
        count = math.floor(self.day_fraction / interval + BOUNDARY_TOLERANCE) + 1
        return Epoch(self.day_number, count * interval)

    def days_since(self, other: "Epoch") -> float:
        """Elapsed days from ``other`` to this Epoch."""
        return (self.day_number - other.day_number) + (self.day_fraction - other.day_fraction)

    def ascii(self) -> str:
        """Format as ``YYYY/MM/DD HH:MM:SS``."""
        year, month, day, hour, minute, second = self.to_calendar()
        return f"{year:4d}/{month:02d}/{day:02d} {hour:02d}:{minute:02d}:{second:02d}"

    def __str__(self) -> str:
        return self.ascii()
