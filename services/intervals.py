"""Billing interval generation for lease schedules."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from services.durations import DurationUnit, add_duration, from_minutes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Interval:
    """A half-open billing interval [start, end)."""
    start: datetime
    end: datetime


def generate_intervals(
    start_date: Optional[datetime],
    period_value: int,
    period_unit,
    frequency: int,
) -> list[Interval]:
    """Generate ``frequency`` contiguous intervals beginning at ``start_date``.

    Each interval starts where the previous one ended. Degenerate input
    (no start date, non-positive value or frequency, unknown unit) and a
    schedule running past the last representable date yield an empty list
    rather than raising.
    """
    if start_date is None or frequency is None or period_value is None:
        return []
    if frequency <= 0 or period_value <= 0:
        return []
    try:
        unit = DurationUnit(period_unit)
    except ValueError:
        logger.debug("Unknown period unit %r, no intervals generated", period_unit)
        return []

    intervals = []
    current = start_date
    try:
        for _ in range(int(frequency)):
            end = add_duration(current, period_value, unit)
            intervals.append(Interval(start=current, end=end))
            current = end
    except (OverflowError, ValueError):
        logger.debug(
            "Schedule of %s x %s %s from %s is out of range",
            frequency, period_value, unit.value, start_date,
        )
        return []
    return intervals


def generate_lease_intervals(
    start_date: Optional[datetime], charge_period_minutes: int, frequency: int
) -> list[Interval]:
    """Generate intervals for a charge period stored as minutes."""
    if not charge_period_minutes or charge_period_minutes <= 0:
        return []
    value, unit = from_minutes(charge_period_minutes)
    return generate_intervals(start_date, value, unit, frequency)


def calculate_lease_end_date(
    start_date: Optional[datetime], charge_period_minutes: int, frequency: int
) -> Optional[datetime]:
    """End of the last interval, or None when no schedule can be generated."""
    intervals = generate_lease_intervals(start_date, charge_period_minutes, frequency)
    if not intervals:
        return None
    return intervals[-1].end
