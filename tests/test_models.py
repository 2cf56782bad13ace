"""Tests for data models."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from models import (
    AdjustmentType,
    CollectionInterval,
    IntervalStatus,
    Lease,
    LeaseStatus,
    PeriodAdjustment,
    validate_adjustment,
    validate_lease,
)

UTC = timezone.utc


def make_lease(**overrides) -> Lease:
    fields = dict(
        id=1,
        start_date=datetime(2024, 1, 1, tzinfo=UTC),
        rent_amount=Decimal("1000"),
        charge_period_minutes=43834,
        frequency=6,
        deposit=Decimal("1000"),
    )
    fields.update(overrides)
    return Lease(**fields)


def test_lease_refresh_end_date():
    """Test that the end date follows the schedule fields."""
    lease = make_lease()
    assert lease.refresh_end_date() == datetime(2024, 7, 1, tzinfo=UTC)

    lease.frequency = 2
    lease.refresh_end_date()
    assert lease.end_date == datetime(2024, 3, 1, tzinfo=UTC)


def test_lease_is_active_at():
    """Test the active check against status and end date."""
    lease = make_lease()
    lease.refresh_end_date()

    assert lease.is_active_at(datetime(2024, 3, 1, tzinfo=UTC)) is True
    assert lease.is_active_at(datetime(2024, 7, 1, tzinfo=UTC)) is False
    lease.status = LeaseStatus.TERMINATED
    assert lease.is_active_at(datetime(2024, 3, 1, tzinfo=UTC)) is False


def test_remaining_deposit_never_negative():
    """Test remaining deposit."""
    assert make_lease(deposit_collected_amount=Decimal("400")).remaining_deposit == Decimal("600")
    assert make_lease(deposit=Decimal("0")).remaining_deposit == Decimal("0")


def test_interval_status():
    """Test paid, overdue and pending labels."""
    start = datetime(2024, 1, 1, tzinfo=UTC)
    end = datetime(2024, 2, 1, tzinfo=UTC)

    def interval(is_paid, is_incurred):
        return CollectionInterval(1, start, end, is_paid, is_incurred, Decimal("1000"))

    assert interval(True, True).status == IntervalStatus.PAID
    assert interval(True, False).status == IntervalStatus.PAID
    assert interval(False, True).status == IntervalStatus.OVERDUE
    assert interval(False, False).status == IntervalStatus.PENDING
    assert interval(False, True).is_overdue is True


def test_validate_lease_accepts_valid_lease():
    """Test that a well-formed lease passes."""
    result = validate_lease(make_lease())
    assert result.is_valid
    assert result.errors == []


@pytest.mark.parametrize(
    "overrides, code",
    [
        ({"start_date": None}, "start_date_missing"),
        ({"charge_period_minutes": 0}, "charge_period_invalid"),
        ({"frequency": 0}, "frequency_invalid"),
        ({"rent_amount": Decimal("-1")}, "rent_negative"),
        ({"deposit_collected_amount": Decimal("1500")}, "deposit_collected_exceeds"),
    ],
)
def test_validate_lease_rejects(overrides, code):
    """Test each lease validation error."""
    result = validate_lease(make_lease(**overrides))
    assert not result.is_valid
    assert code in [error["code"] for error in result.errors]


def test_validate_lease_rejects_schedule_past_year_9999():
    """Test that a schedule beyond the calendar range is rejected."""
    lease = make_lease(charge_period_minutes=525960, frequency=10000)

    result = validate_lease(lease)

    assert not result.is_valid
    assert [error["code"] for error in result.errors] == ["schedule_out_of_range"]
    assert lease.refresh_end_date() is None


def test_validate_lease_warns_on_zero_rent():
    """Test that zero rent is allowed with a warning."""
    result = validate_lease(make_lease(rent_amount=Decimal("0")))
    assert result.is_valid
    assert result.warnings[0]["code"] == "rent_zero"


def test_adjustment_note():
    """Test the audit note text."""
    adjustment = PeriodAdjustment(AdjustmentType.CANCEL, 3, Decimal("500"), "  Unit flooded ")
    assert adjustment.describe() == "Period 3 cancel: Unit flooded"


@pytest.mark.parametrize(
    "amount, reason, period, code",
    [
        (Decimal("0"), "ok", 1, "amount_not_positive"),
        (Decimal("1000.01"), "ok", 1, "amount_exceeds_rent"),
        (Decimal("100"), "   ", 1, "reason_missing"),
        (Decimal("100"), "ok", 0, "period_out_of_range"),
        (Decimal("100"), "ok", 7, "period_out_of_range"),
    ],
)
def test_validate_adjustment_rejects(amount, reason, period, code):
    """Test each adjustment validation error."""
    adjustment = PeriodAdjustment(AdjustmentType.REFUND, period, amount, reason)
    result = validate_adjustment(adjustment, make_lease())
    assert code in [error["code"] for error in result.errors]


def test_validate_adjustment_accepts_full_rent():
    """Test that an adjustment equal to the rent is allowed."""
    adjustment = PeriodAdjustment(AdjustmentType.REFUND, 6, Decimal("1000"), "Goodwill")
    assert validate_adjustment(adjustment, make_lease()).is_valid
