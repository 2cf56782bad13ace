"""Conversion between minute counts and (value, unit) durations.

Minute sizes for months and years are averages (30.44 and 365.25 days).
They are only used for display and for storing a charge period as minutes;
stepping through a lease schedule walks the calendar instead (see
``add_duration``).
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Union

from dateutil.relativedelta import relativedelta


class DurationUnit(str, Enum):
    """Calendar unit for a charge period."""
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    YEARS = "years"


MINUTES_IN_HOUR = 60
MINUTES_IN_DAY = 60 * 24
MINUTES_IN_WEEK = 60 * 24 * 7
MINUTES_IN_MONTH = 60 * 24 * 30.44
MINUTES_IN_YEAR = 60 * 24 * 365.25

Number = Union[int, float]


def _unit_value(unit) -> str:
    return unit.value if isinstance(unit, DurationUnit) else str(unit)


def to_minutes(value: Number, unit) -> Number:
    """Convert ``value`` in ``unit`` to minutes.

    Months and years round to the nearest whole minute. An unknown unit
    returns ``value`` unchanged.
    """
    unit = _unit_value(unit)
    if unit == DurationUnit.MINUTES.value:
        return value
    if unit == DurationUnit.HOURS.value:
        return value * MINUTES_IN_HOUR
    if unit == DurationUnit.DAYS.value:
        return value * MINUTES_IN_DAY
    if unit == DurationUnit.WEEKS.value:
        return value * MINUTES_IN_WEEK
    if unit == DurationUnit.MONTHS.value:
        return round(value * MINUTES_IN_MONTH)
    if unit == DurationUnit.YEARS.value:
        return round(value * MINUTES_IN_YEAR)
    return value


def from_minutes(minutes: int) -> tuple[int, DurationUnit]:
    """Express ``minutes`` in the largest unit that divides it evenly.

    Months accept a residual of under one minute either side of a whole
    month, since ``to_minutes`` rounds them. Falls back to minutes.
    """
    if minutes >= MINUTES_IN_YEAR and minutes % MINUTES_IN_YEAR == 0:
        return int(minutes // MINUTES_IN_YEAR), DurationUnit.YEARS

    if minutes >= MINUTES_IN_MONTH - 1:
        months = round(minutes / MINUTES_IN_MONTH)
        if months >= 1 and abs(minutes - months * MINUTES_IN_MONTH) < 1:
            return months, DurationUnit.MONTHS

    for size, unit in (
        (MINUTES_IN_WEEK, DurationUnit.WEEKS),
        (MINUTES_IN_DAY, DurationUnit.DAYS),
        (MINUTES_IN_HOUR, DurationUnit.HOURS),
    ):
        if minutes >= size and minutes % size == 0:
            return minutes // size, unit

    return minutes, DurationUnit.MINUTES


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def format_minutes(minutes: int) -> str:
    """Render a duration with its two largest units, e.g. '1 year and 2 months'."""
    if minutes < 0:
        return "0 minutes"

    steps = (
        (MINUTES_IN_YEAR, "year", MINUTES_IN_MONTH, "month"),
        (MINUTES_IN_MONTH, "month", MINUTES_IN_WEEK, "week"),
        (MINUTES_IN_WEEK, "week", MINUTES_IN_DAY, "day"),
        (MINUTES_IN_DAY, "day", MINUTES_IN_HOUR, "hour"),
        (MINUTES_IN_HOUR, "hour", 1, "minute"),
    )
    for size, name, sub_size, sub_name in steps:
        if minutes >= size:
            major = int(minutes // size)
            minor = int((minutes % size) // sub_size)
            if minor > 0:
                return f"{_plural(major, name)} and {_plural(minor, sub_name)}"
            return _plural(major, name)

    return _plural(int(minutes), "minute")


def add_duration(moment: datetime, value: int, unit) -> datetime:
    """Add ``value`` units to ``moment`` walking the calendar.

    Months and years move the calendar fields (via relativedelta), so the
    first of one month lands on the first of the next. An unknown unit
    returns ``moment`` unchanged.
    """
    unit = _unit_value(unit)
    if unit == DurationUnit.MINUTES.value:
        return moment + timedelta(minutes=value)
    if unit == DurationUnit.HOURS.value:
        return moment + timedelta(hours=value)
    if unit == DurationUnit.DAYS.value:
        return moment + timedelta(days=value)
    if unit == DurationUnit.WEEKS.value:
        return moment + timedelta(weeks=value)
    if unit == DurationUnit.MONTHS.value:
        return moment + relativedelta(months=value)
    if unit == DurationUnit.YEARS.value:
        return moment + relativedelta(years=value)
    return moment
