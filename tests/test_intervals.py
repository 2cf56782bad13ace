"""Tests for billing interval generation."""

from datetime import datetime, timezone

import pytest

from services.intervals import (
    calculate_lease_end_date,
    generate_intervals,
    generate_lease_intervals,
)

UTC = timezone.utc
START = datetime(2024, 1, 1, tzinfo=UTC)


def test_monthly_intervals_follow_the_calendar():
    """Test that monthly periods start on the same day of each month."""
    intervals = generate_intervals(START, 1, "months", 3)

    assert [i.start for i in intervals] == [
        datetime(2024, 1, 1, tzinfo=UTC),
        datetime(2024, 2, 1, tzinfo=UTC),
        datetime(2024, 3, 1, tzinfo=UTC),
    ]
    assert intervals[-1].end == datetime(2024, 4, 1, tzinfo=UTC)


@pytest.mark.parametrize(
    "value, unit, frequency",
    [
        (30, "minutes", 5),
        (730, "hours", 3),
        (7, "days", 10),
        (2, "weeks", 6),
        (1, "months", 12),
        (3, "months", 4),
        (1, "years", 3),
    ],
)
def test_intervals_are_contiguous(value, unit, frequency):
    """Test that each interval ends where the next begins."""
    intervals = generate_intervals(START, value, unit, frequency)

    assert len(intervals) == frequency
    assert intervals[0].start == START
    for current, following in zip(intervals, intervals[1:]):
        assert current.end == following.start
    assert all(i.start < i.end for i in intervals)


def test_month_end_start_steps_from_previous_end():
    """Test that a clamped month end carries into later periods."""
    intervals = generate_intervals(datetime(2024, 1, 31, tzinfo=UTC), 1, "months", 3)

    assert [i.end for i in intervals] == [
        datetime(2024, 2, 29, tzinfo=UTC),
        datetime(2024, 3, 29, tzinfo=UTC),
        datetime(2024, 4, 29, tzinfo=UTC),
    ]


@pytest.mark.parametrize(
    "start, value, unit, frequency",
    [
        (START, 1, "months", 0),
        (START, 1, "months", -2),
        (START, 0, "months", 3),
        (START, -1, "days", 3),
        (None, 1, "months", 3),
        (START, 1, "fortnights", 3),
    ],
)
def test_degenerate_input_gives_no_intervals(start, value, unit, frequency):
    """Test that bad input yields an empty schedule instead of raising."""
    assert generate_intervals(start, value, unit, frequency) == []


@pytest.mark.parametrize(
    "value, unit, frequency",
    [
        (1, "years", 10000),
        (1, "months", 120000),
    ],
)
def test_schedule_past_calendar_range_gives_no_intervals(value, unit, frequency):
    """Test that running past year 9999 yields an empty schedule."""
    assert generate_intervals(START, value, unit, frequency) == []


def test_lease_end_date_none_past_calendar_range():
    """Test that an out-of-range lease has no end date."""
    assert calculate_lease_end_date(START, 525960, 10000) is None


def test_lease_intervals_from_hour_based_minutes():
    """Test that 43800 minutes is stepped as 730 hours."""
    intervals = generate_lease_intervals(START, 43800, 3)

    assert intervals[0].end == datetime(2024, 1, 31, 10, tzinfo=UTC)
    assert intervals[2].start == datetime(2024, 3, 1, 20, tzinfo=UTC)
    assert intervals[2].end == datetime(2024, 4, 1, 6, tzinfo=UTC)


def test_lease_intervals_zero_minutes():
    """Test that a zero charge period gives no schedule."""
    assert generate_lease_intervals(START, 0, 3) == []


def test_lease_end_date_is_last_interval_end():
    """Test the lease end date for a month-based charge period."""
    assert calculate_lease_end_date(START, 43834, 12) == datetime(2025, 1, 1, tzinfo=UTC)


def test_lease_end_date_none_for_degenerate_schedule():
    """Test that no end date is produced without a schedule."""
    assert calculate_lease_end_date(None, 43834, 12) is None
    assert calculate_lease_end_date(START, 43834, 0) is None
