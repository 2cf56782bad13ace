"""Tests for database operations."""

import tempfile
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest

from database import Database
from exceptions import ConcurrentModificationError, ValidationError
from models import (
    Asset,
    AssetStatus,
    Lease,
    LeaseStatus,
    Payment,
    PaymentMethod,
    PaymentStatus,
    Tenant,
)

UTC = timezone.utc


@pytest.fixture
def db():
    """Create a test database."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test.db"
        database = Database(db_path, database_url="")
        database.initialize()
        yield database


def seed_lease(db, **overrides) -> int:
    asset_id = db.create_asset(Asset(name="Harbour View Flat 2", address="2 Quay St"))
    tenant_id = db.create_tenant(Tenant(name="Jordan Reyes", email="jordan@example.com"))
    fields = dict(
        asset_id=asset_id,
        tenant_id=tenant_id,
        start_date=datetime(2024, 1, 1, tzinfo=UTC),
        rent_amount=Decimal("1250.50"),
        charge_period_minutes=43834,
        frequency=12,
        deposit=Decimal("2000"),
    )
    fields.update(overrides)
    return db.create_lease(Lease(**fields))


def test_initialize_sets_schema_version(db):
    """Test that the schema version is recorded."""
    assert db.get_schema_version() == 1
    assert db.use_postgres is False


def test_initialize_is_repeatable(db):
    """Test that initializing twice keeps one version row."""
    db.initialize()
    assert db.get_schema_version() == 1


def test_asset_and_tenant_round_trip(db):
    """Test creating and reading assets and tenants."""
    asset_id = db.create_asset(Asset(name="Loft", address="9 Mill Lane"))
    tenant_id = db.create_tenant(Tenant(name="Priya Shah", phone="555-0101"))

    asset = db.get_asset(asset_id)
    tenant = db.get_tenant(tenant_id)
    assert asset.name == "Loft"
    assert asset.address == "9 Mill Lane"
    assert tenant.name == "Priya Shah"
    assert tenant.phone == "555-0101"
    assert asset.created_at.tzinfo is not None
    assert [a.id for a in db.list_assets()] == [asset_id]
    assert [t.id for t in db.list_tenants()] == [tenant_id]


def test_get_missing_rows_returns_none(db):
    """Test lookups of IDs that do not exist."""
    assert db.get_asset(99) is None
    assert db.get_tenant(99) is None
    assert db.get_lease(99) is None
    assert db.get_payment(99) is None


def test_create_lease_computes_end_date(db):
    """Test that the stored end date is derived from the schedule."""
    lease_id = seed_lease(db, end_date=datetime(2030, 1, 1, tzinfo=UTC))

    lease = db.get_lease(lease_id)
    assert lease.end_date == datetime(2025, 1, 1, tzinfo=UTC)
    assert lease.start_date == datetime(2024, 1, 1, tzinfo=UTC)
    assert lease.rent_amount == Decimal("1250.50")
    assert lease.deposit == Decimal("2000")
    assert lease.deposit_collected_amount == Decimal("0")
    assert lease.status == LeaseStatus.ACTIVE


def test_update_lease_recomputes_end_date(db):
    """Test that changing the frequency moves the end date."""
    lease = db.get_lease(seed_lease(db))
    lease.frequency = 6
    lease.notes = "Shortened by agreement"
    db.update_lease(lease)

    stored = db.get_lease(lease.id)
    assert stored.frequency == 6
    assert stored.end_date == datetime(2024, 7, 1, tzinfo=UTC)
    assert stored.notes == "Shortened by agreement"


def test_list_leases_by_status(db):
    """Test the status filter on lease listing."""
    seed_lease(db)
    seed_lease(db, status=LeaseStatus.EXPIRED)

    assert len(db.list_leases()) == 2
    assert [l.status for l in db.list_leases(LeaseStatus.EXPIRED)] == [LeaseStatus.EXPIRED]


def test_update_lease_frequency_guards_against_races(db):
    """Test that a stale expected frequency is rejected."""
    lease_id = seed_lease(db)
    new_end = datetime(2024, 5, 1, tzinfo=UTC)

    db.update_lease_frequency(lease_id, 4, new_end, expected_frequency=12)
    assert db.get_lease(lease_id).frequency == 4

    with pytest.raises(ConcurrentModificationError):
        db.update_lease_frequency(lease_id, 3, new_end, expected_frequency=12)
    assert db.get_lease(lease_id).frequency == 4


def test_payment_round_trip(db):
    """Test storing a ledger entry with every field."""
    lease = db.get_lease(seed_lease(db))
    when = datetime(2024, 2, 3, 14, 30, tzinfo=UTC)
    payment_id = db.create_payment(
        Payment(
            tenant_id=lease.tenant_id,
            asset_id=lease.asset_id,
            amount=Decimal("-125.25"),
            due_date=when,
            paid_date=when,
            status=PaymentStatus.REFUNDED,
            method=PaymentMethod.ADJUSTMENT,
            notes="Period 2 refund: boiler out",
            reference_code="ADJ-1",
        )
    )

    payment = db.get_payment(payment_id)
    assert payment.amount == Decimal("-125.25")
    assert payment.paid_date == when
    assert payment.status == PaymentStatus.REFUNDED
    assert payment.method == PaymentMethod.ADJUSTMENT
    assert payment.notes == "Period 2 refund: boiler out"
    assert payment.reference_code == "ADJ-1"


def test_list_payments_for_tenant_and_asset(db):
    """Test that the per-lease ledger only returns matching entries."""
    lease = db.get_lease(seed_lease(db))
    other = db.get_lease(seed_lease(db))
    db.create_payment(Payment(tenant_id=lease.tenant_id, asset_id=lease.asset_id, amount=Decimal("10"), status=PaymentStatus.PAID))
    db.create_payment(Payment(tenant_id=other.tenant_id, asset_id=other.asset_id, amount=Decimal("20"), status=PaymentStatus.PAID))

    mine = db.list_payments_for(lease.tenant_id, lease.asset_id)
    assert [p.amount for p in mine] == [Decimal("10")]
    assert len(db.list_payments()) == 2


def test_delete_payment_and_lease(db):
    """Test deleting rows."""
    lease = db.get_lease(seed_lease(db))
    payment_id = db.create_payment(Payment(tenant_id=lease.tenant_id, asset_id=lease.asset_id, amount=Decimal("10")))

    db.delete_payment(payment_id)
    db.delete_lease(lease.id)

    assert db.get_payment(payment_id) is None
    assert db.get_lease(lease.id) is None


def test_end_lease_updates_lease_and_asset(db):
    """Test ending a lease vacates its asset."""
    asset_id = db.create_asset(Asset(name="Loft", status=AssetStatus.OCCUPIED))
    lease_id = seed_lease(db, asset_id=asset_id)

    db.end_lease(lease_id, LeaseStatus.TERMINATED)

    assert db.get_lease(lease_id).status == LeaseStatus.TERMINATED
    assert db.get_asset(asset_id).status == AssetStatus.VACANT


def test_end_lease_requires_active_lease(db):
    """Test that an ended lease is not ended twice."""
    asset_id = db.create_asset(Asset(name="Loft", status=AssetStatus.OCCUPIED))
    lease_id = seed_lease(db, asset_id=asset_id, status=LeaseStatus.EXPIRED)

    with pytest.raises(ConcurrentModificationError):
        db.end_lease(lease_id, LeaseStatus.TERMINATED)

    assert db.get_lease(lease_id).status == LeaseStatus.EXPIRED
    assert db.get_asset(asset_id).status == AssetStatus.OCCUPIED


def test_update_lease_keeps_ended_status(db):
    """Test that an ended lease cannot be written back as active."""
    lease = db.get_lease(seed_lease(db, status=LeaseStatus.TERMINATED))
    lease.status = LeaseStatus.ACTIVE

    with pytest.raises(ValidationError):
        db.update_lease(lease)

    lease.status = LeaseStatus.TERMINATED
    lease.notes = "Keys returned"
    db.update_lease(lease)
    assert db.get_lease(lease.id).notes == "Keys returned"


def test_update_payment_keeps_amount_and_status(db):
    """Test that only bookkeeping fields of a ledger entry change."""
    lease = db.get_lease(seed_lease(db))
    payment_id = db.create_payment(
        Payment(tenant_id=lease.tenant_id, asset_id=lease.asset_id, amount=Decimal("500"), status=PaymentStatus.PAID)
    )
    payment = db.get_payment(payment_id)
    payment.amount = Decimal("1")
    payment.status = PaymentStatus.CANCELLED
    payment.method = PaymentMethod.CASH
    payment.reference_code = "RCPT-9"
    payment.notes = "Receipt found"

    db.update_payment(payment)

    stored = db.get_payment(payment_id)
    assert stored.amount == Decimal("500")
    assert stored.status == PaymentStatus.PAID
    assert stored.method == PaymentMethod.CASH
    assert stored.reference_code == "RCPT-9"
    assert stored.notes == "Receipt found"
