"""Database setup and connection management for SQLite and PostgreSQL."""

import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Generator, Optional, Any

from exceptions import ConcurrentModificationError, LeaseNotFoundError, ValidationError
from models import (
    Asset,
    AssetStatus,
    Lease,
    LeaseStatus,
    LeaseType,
    Payment,
    PaymentCollectionResult,
    PaymentMethod,
    PaymentStatus,
    Tenant,
    TenantStatus,
)

# Try to import psycopg2 for PostgreSQL support
try:
    import psycopg2
    import psycopg2.extras
    HAS_POSTGRES = True
except ImportError:
    HAS_POSTGRES = False

logger = logging.getLogger(__name__)

# Database schema version for migrations
SCHEMA_VERSION = 1

ENDED_LEASE_STATUSES = (LeaseStatus.EXPIRED, LeaseStatus.TERMINATED)

# SQLite schema. Instants are ISO-8601 text with UTC offset.
SQLITE_SCHEMA = """
-- Assets table
CREATE TABLE IF NOT EXISTS assets (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    address TEXT NOT NULL DEFAULT '',
    status TEXT NOT NULL DEFAULT 'vacant',
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);

-- Tenants table
CREATE TABLE IF NOT EXISTS tenants (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    email TEXT NOT NULL DEFAULT '',
    phone TEXT NOT NULL DEFAULT '',
    status TEXT NOT NULL DEFAULT 'active',
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);

-- Leases table
CREATE TABLE IF NOT EXISTS leases (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    asset_id INTEGER NOT NULL,
    tenant_id INTEGER NOT NULL,
    start_date TEXT NOT NULL,
    end_date TEXT,
    rent_amount DECIMAL(12,2) NOT NULL DEFAULT 0,
    charge_period_minutes INTEGER NOT NULL,
    frequency INTEGER NOT NULL DEFAULT 1 CHECK (frequency >= 1),
    deposit DECIMAL(12,2) NOT NULL DEFAULT 0,
    deposit_collected_amount DECIMAL(12,2) NOT NULL DEFAULT 0,
    status TEXT NOT NULL DEFAULT 'active',
    lease_type TEXT NOT NULL DEFAULT 'fixed_term',
    notes TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (asset_id) REFERENCES assets(id),
    FOREIGN KEY (tenant_id) REFERENCES tenants(id)
);

-- Payments ledger
CREATE TABLE IF NOT EXISTS payments (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    tenant_id INTEGER NOT NULL,
    asset_id INTEGER NOT NULL,
    amount DECIMAL(12,2) NOT NULL,
    due_date TEXT,
    paid_date TEXT,
    status TEXT NOT NULL DEFAULT 'pending',
    method TEXT,
    notes TEXT,
    reference_code TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (tenant_id) REFERENCES tenants(id),
    FOREIGN KEY (asset_id) REFERENCES assets(id)
);

-- Schema version tracking
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);
"""

# PostgreSQL schema
POSTGRES_SCHEMA = """
-- Assets table
CREATE TABLE IF NOT EXISTS assets (
    id SERIAL PRIMARY KEY,
    name TEXT NOT NULL,
    address TEXT NOT NULL DEFAULT '',
    status TEXT NOT NULL DEFAULT 'vacant',
    created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP
);

-- Tenants table
CREATE TABLE IF NOT EXISTS tenants (
    id SERIAL PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT NOT NULL DEFAULT '',
    phone TEXT NOT NULL DEFAULT '',
    status TEXT NOT NULL DEFAULT 'active',
    created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP
);

-- Leases table
CREATE TABLE IF NOT EXISTS leases (
    id SERIAL PRIMARY KEY,
    asset_id INTEGER NOT NULL REFERENCES assets(id),
    tenant_id INTEGER NOT NULL REFERENCES tenants(id),
    start_date TEXT NOT NULL,
    end_date TEXT,
    rent_amount DECIMAL(12,2) NOT NULL DEFAULT 0,
    charge_period_minutes INTEGER NOT NULL,
    frequency INTEGER NOT NULL DEFAULT 1 CHECK (frequency >= 1),
    deposit DECIMAL(12,2) NOT NULL DEFAULT 0,
    deposit_collected_amount DECIMAL(12,2) NOT NULL DEFAULT 0,
    status TEXT NOT NULL DEFAULT 'active',
    lease_type TEXT NOT NULL DEFAULT 'fixed_term',
    notes TEXT,
    created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP
);

-- Payments ledger
CREATE TABLE IF NOT EXISTS payments (
    id SERIAL PRIMARY KEY,
    tenant_id INTEGER NOT NULL REFERENCES tenants(id),
    asset_id INTEGER NOT NULL REFERENCES assets(id),
    amount DECIMAL(12,2) NOT NULL,
    due_date TEXT,
    paid_date TEXT,
    status TEXT NOT NULL DEFAULT 'pending',
    method TEXT,
    notes TEXT,
    reference_code TEXT,
    created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP
);

-- Schema version tracking
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);
"""


class Database:
    """Database manager supporting both SQLite and PostgreSQL."""

    def __init__(self, db_path: Path = None, database_url: Optional[str] = None):
        """Initialize database connection.

        ``database_url`` defaults to the DATABASE_URL environment variable;
        pass an empty string to force SQLite.
        """
        if database_url is None:
            database_url = os.environ.get("DATABASE_URL", "")
        self.database_url = database_url
        self.use_postgres = bool(self.database_url) and HAS_POSTGRES

        if self.use_postgres:
            # Fix Render's postgres:// URL to postgresql://
            if self.database_url.startswith("postgres://"):
                self.database_url = self.database_url.replace("postgres://", "postgresql://", 1)
        else:
            self.db_path = db_path
            if self.db_path:
                self._ensure_directory()

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists (SQLite only)."""
        if self.db_path:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def connection(self) -> Generator[Any, None, None]:
        """Context manager for database connections.

        Everything executed inside one ``with`` block commits together or
        rolls back together.
        """
        if self.use_postgres:
            conn = psycopg2.connect(self.database_url)
            conn.autocommit = False
            # Use RealDictCursor for dict-like row access
            cursor = conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor)
            try:
                yield _PostgresConnection(conn, cursor)
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                cursor.close()
                conn.close()
        else:
            conn = sqlite3.connect(
                self.db_path,
                detect_types=sqlite3.PARSE_DECLTYPES | sqlite3.PARSE_COLNAMES,
            )
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
            try:
                yield _SqliteConnection(conn)
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                conn.close()

    def initialize(self) -> None:
        """Initialize the database schema."""
        if self.use_postgres:
            with self.connection() as conn:
                # Execute each statement separately for PostgreSQL
                for statement in POSTGRES_SCHEMA.split(';'):
                    statement = statement.strip()
                    if statement:
                        conn.execute(statement)
                # Set schema version if not exists
                conn.execute("SELECT version FROM schema_version LIMIT 1")
                if conn.fetchone() is None:
                    conn.execute(
                        "INSERT INTO schema_version (version) VALUES (%s)",
                        (SCHEMA_VERSION,),
                    )
        else:
            with self.connection() as conn:
                conn.executescript(SQLITE_SCHEMA)
                cursor = conn.execute("SELECT version FROM schema_version LIMIT 1")
                if cursor.fetchone() is None:
                    conn.execute(
                        "INSERT INTO schema_version (version) VALUES (?)",
                        (SCHEMA_VERSION,),
                    )

    def _placeholder(self) -> str:
        """Return the appropriate placeholder for the database type."""
        return "%s" if self.use_postgres else "?"

    def _placeholders(self, count: int) -> str:
        """Return multiple placeholders."""
        p = self._placeholder()
        return ", ".join([p] * count)

    def _insert(self, conn, sql: str, params: tuple) -> int:
        """Run an INSERT and return the new row ID."""
        if self.use_postgres:
            conn.execute(f"{sql} RETURNING id", params)
            return conn.fetchone()["id"]
        cursor = conn.execute(sql, params)
        return cursor.lastrowid

    def get_schema_version(self) -> int:
        """Get current schema version."""
        with self.connection() as conn:
            conn.execute("SELECT version FROM schema_version LIMIT 1")
            row = conn.fetchone()
            return row["version"] if row else 0

    # Value conversion

    @staticmethod
    def _format_datetime(value: Optional[datetime]) -> Optional[str]:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat()

    def _parse_datetime(self, value) -> Optional[datetime]:
        """Parse an aware datetime from the database (string or datetime)."""
        if value is None:
            return None
        if not isinstance(value, datetime):
            value = datetime.fromisoformat(str(value))
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value

    @staticmethod
    def _parse_decimal(value) -> Decimal:
        if value is None:
            return Decimal("0")
        if isinstance(value, Decimal):
            return value
        return Decimal(str(value))

    # Asset operations

    def create_asset(self, asset: Asset) -> int:
        """Create a new asset and return its ID."""
        with self.connection() as conn:
            return self._insert(
                conn,
                f"INSERT INTO assets (name, address, status) VALUES ({self._placeholders(3)})",
                (asset.name, asset.address, asset.status.value),
            )

    def get_asset(self, asset_id: int) -> Optional[Asset]:
        """Get an asset by ID."""
        p = self._placeholder()
        with self.connection() as conn:
            conn.execute(f"SELECT * FROM assets WHERE id = {p}", (asset_id,))
            row = conn.fetchone()
            if row:
                return self._row_to_asset(row)
            return None

    def list_assets(self) -> list[Asset]:
        """List all assets."""
        with self.connection() as conn:
            conn.execute("SELECT * FROM assets ORDER BY name")
            return [self._row_to_asset(row) for row in conn.fetchall()]

    def _row_to_asset(self, row) -> Asset:
        """Convert database row to Asset object."""
        return Asset(
            id=row["id"],
            name=row["name"],
            address=row["address"] or "",
            status=AssetStatus(row["status"]),
            created_at=self._parse_datetime(row["created_at"]),
        )

    # Tenant operations

    def create_tenant(self, tenant: Tenant) -> int:
        """Create a new tenant and return its ID."""
        with self.connection() as conn:
            return self._insert(
                conn,
                f"INSERT INTO tenants (name, email, phone, status) VALUES ({self._placeholders(4)})",
                (tenant.name, tenant.email, tenant.phone, tenant.status.value),
            )

    def get_tenant(self, tenant_id: int) -> Optional[Tenant]:
        """Get a tenant by ID."""
        p = self._placeholder()
        with self.connection() as conn:
            conn.execute(f"SELECT * FROM tenants WHERE id = {p}", (tenant_id,))
            row = conn.fetchone()
            if row:
                return self._row_to_tenant(row)
            return None

    def list_tenants(self) -> list[Tenant]:
        """List all tenants."""
        with self.connection() as conn:
            conn.execute("SELECT * FROM tenants ORDER BY name")
            return [self._row_to_tenant(row) for row in conn.fetchall()]

    def _row_to_tenant(self, row) -> Tenant:
        """Convert database row to Tenant object."""
        return Tenant(
            id=row["id"],
            name=row["name"],
            email=row["email"] or "",
            phone=row["phone"] or "",
            status=TenantStatus(row["status"]),
            created_at=self._parse_datetime(row["created_at"]),
        )

    # Lease operations

    def create_lease(self, lease: Lease) -> int:
        """Create a new lease and return its ID. The end date is recomputed."""
        lease.refresh_end_date()
        with self.connection() as conn:
            return self._insert(
                conn,
                f"""INSERT INTO leases (
                    asset_id, tenant_id, start_date, end_date, rent_amount,
                    charge_period_minutes, frequency, deposit, deposit_collected_amount,
                    status, lease_type, notes
                ) VALUES ({self._placeholders(12)})""",
                (
                    lease.asset_id,
                    lease.tenant_id,
                    self._format_datetime(lease.start_date),
                    self._format_datetime(lease.end_date),
                    str(lease.rent_amount),
                    lease.charge_period_minutes,
                    lease.frequency,
                    str(lease.deposit),
                    str(lease.deposit_collected_amount),
                    lease.status.value,
                    lease.lease_type.value,
                    lease.notes,
                ),
            )

    def get_lease(self, lease_id: int) -> Optional[Lease]:
        """Get a lease by ID."""
        p = self._placeholder()
        with self.connection() as conn:
            conn.execute(f"SELECT * FROM leases WHERE id = {p}", (lease_id,))
            row = conn.fetchone()
            if row:
                return self._row_to_lease(row)
            return None

    def list_leases(self, status: Optional[LeaseStatus] = None) -> list[Lease]:
        """List leases, optionally filtered by status."""
        p = self._placeholder()
        with self.connection() as conn:
            if status is not None:
                conn.execute(
                    f"SELECT * FROM leases WHERE status = {p} ORDER BY start_date, id",
                    (status.value,),
                )
            else:
                conn.execute("SELECT * FROM leases ORDER BY start_date, id")
            return [self._row_to_lease(row) for row in conn.fetchall()]

    def update_lease(self, lease: Lease) -> None:
        """Replace a lease. The end date is recomputed from the schedule fields.

        An expired or terminated lease keeps its status.
        """
        lease.refresh_end_date()
        p = self._placeholder()
        with self.connection() as conn:
            conn.execute(f"SELECT status FROM leases WHERE id = {p}", (lease.id,))
            row = conn.fetchone()
            if row and LeaseStatus(row["status"]) in ENDED_LEASE_STATUSES:
                if lease.status != LeaseStatus(row["status"]):
                    raise ValidationError(
                        [f"Lease {lease.id} is {row['status']} and cannot change status"]
                    )
            conn.execute(
                f"""UPDATE leases SET
                    asset_id = {p}, tenant_id = {p}, start_date = {p}, end_date = {p},
                    rent_amount = {p}, charge_period_minutes = {p}, frequency = {p},
                    deposit = {p}, deposit_collected_amount = {p},
                    status = {p}, lease_type = {p}, notes = {p}
                WHERE id = {p}""",
                (
                    lease.asset_id,
                    lease.tenant_id,
                    self._format_datetime(lease.start_date),
                    self._format_datetime(lease.end_date),
                    str(lease.rent_amount),
                    lease.charge_period_minutes,
                    lease.frequency,
                    str(lease.deposit),
                    str(lease.deposit_collected_amount),
                    lease.status.value,
                    lease.lease_type.value,
                    lease.notes,
                    lease.id,
                ),
            )

    def update_lease_frequency(
        self,
        lease_id: int,
        frequency: int,
        end_date: Optional[datetime],
        expected_frequency: int,
    ) -> None:
        """Set frequency and end date, provided nobody changed the frequency meanwhile."""
        p = self._placeholder()
        with self.connection() as conn:
            cursor = conn.execute(
                f"""UPDATE leases SET frequency = {p}, end_date = {p}
                    WHERE id = {p} AND frequency = {p}""",
                (frequency, self._format_datetime(end_date), lease_id, expected_frequency),
            )
            if cursor.rowcount == 0:
                raise ConcurrentModificationError("lease", lease_id)

    def end_lease(self, lease_id: int, status: LeaseStatus) -> None:
        """Move an active lease to an ended status and free its asset.

        Both rows change in one transaction. Raises
        ConcurrentModificationError if the lease is no longer active.
        """
        p = self._placeholder()
        with self.connection() as conn:
            cursor = conn.execute(
                f"UPDATE leases SET status = {p} WHERE id = {p} AND status = {p}",
                (status.value, lease_id, LeaseStatus.ACTIVE.value),
            )
            if cursor.rowcount == 0:
                raise ConcurrentModificationError("lease", lease_id)
            conn.execute(
                f"UPDATE assets SET status = {p} WHERE id = (SELECT asset_id FROM leases WHERE id = {p})",
                (AssetStatus.VACANT.value, lease_id),
            )

    def delete_lease(self, lease_id: int) -> None:
        """Delete a lease. Its ledger entries are kept."""
        p = self._placeholder()
        with self.connection() as conn:
            conn.execute(f"DELETE FROM leases WHERE id = {p}", (lease_id,))

    def _row_to_lease(self, row) -> Lease:
        """Convert database row to Lease object."""
        return Lease(
            id=row["id"],
            asset_id=row["asset_id"],
            tenant_id=row["tenant_id"],
            start_date=self._parse_datetime(row["start_date"]),
            end_date=self._parse_datetime(row["end_date"]),
            rent_amount=self._parse_decimal(row["rent_amount"]),
            charge_period_minutes=int(row["charge_period_minutes"]),
            frequency=int(row["frequency"]),
            deposit=self._parse_decimal(row["deposit"]),
            deposit_collected_amount=self._parse_decimal(row["deposit_collected_amount"]),
            status=LeaseStatus(row["status"]),
            lease_type=LeaseType(row["lease_type"]),
            notes=row["notes"] or "",
            created_at=self._parse_datetime(row["created_at"]),
        )

    # Payment operations

    def _insert_payment(self, conn, payment: Payment) -> int:
        return self._insert(
            conn,
            f"""INSERT INTO payments (
                tenant_id, asset_id, amount, due_date, paid_date,
                status, method, notes, reference_code
            ) VALUES ({self._placeholders(9)})""",
            (
                payment.tenant_id,
                payment.asset_id,
                str(payment.amount),
                self._format_datetime(payment.due_date),
                self._format_datetime(payment.paid_date),
                payment.status.value,
                payment.method.value if payment.method else None,
                payment.notes or None,
                payment.reference_code or None,
            ),
        )

    def create_payment(self, payment: Payment) -> int:
        """Append a ledger entry and return its ID."""
        with self.connection() as conn:
            return self._insert_payment(conn, payment)

    def get_payment(self, payment_id: int) -> Optional[Payment]:
        """Get a payment by ID."""
        p = self._placeholder()
        with self.connection() as conn:
            conn.execute(f"SELECT * FROM payments WHERE id = {p}", (payment_id,))
            row = conn.fetchone()
            if row:
                return self._row_to_payment(row)
            return None

    def list_payments(self) -> list[Payment]:
        """List the whole ledger, newest first."""
        with self.connection() as conn:
            conn.execute("SELECT * FROM payments ORDER BY created_at DESC, id DESC")
            return [self._row_to_payment(row) for row in conn.fetchall()]

    def list_payments_for(self, tenant_id: int, asset_id: int) -> list[Payment]:
        """Ledger entries for one tenant and asset, oldest first."""
        p = self._placeholder()
        with self.connection() as conn:
            conn.execute(
                f"""SELECT * FROM payments WHERE tenant_id = {p} AND asset_id = {p}
                    ORDER BY created_at, id""",
                (tenant_id, asset_id),
            )
            return [self._row_to_payment(row) for row in conn.fetchall()]

    def update_payment(self, payment: Payment) -> None:
        """Update the bookkeeping fields of a ledger entry.

        Amount, status, tenant and asset are fixed once written; corrections
        are new entries.
        """
        p = self._placeholder()
        with self.connection() as conn:
            conn.execute(
                f"""UPDATE payments SET
                    due_date = {p}, paid_date = {p}, method = {p},
                    notes = {p}, reference_code = {p}
                WHERE id = {p}""",
                (
                    self._format_datetime(payment.due_date),
                    self._format_datetime(payment.paid_date),
                    payment.method.value if payment.method else None,
                    payment.notes or None,
                    payment.reference_code or None,
                    payment.id,
                ),
            )

    def delete_payment(self, payment_id: int) -> None:
        """Delete a ledger entry."""
        p = self._placeholder()
        with self.connection() as conn:
            conn.execute(f"DELETE FROM payments WHERE id = {p}", (payment_id,))

    def _row_to_payment(self, row) -> Payment:
        """Convert database row to Payment object."""
        return Payment(
            id=row["id"],
            tenant_id=row["tenant_id"],
            asset_id=row["asset_id"],
            amount=self._parse_decimal(row["amount"]),
            due_date=self._parse_datetime(row["due_date"]),
            paid_date=self._parse_datetime(row["paid_date"]),
            status=PaymentStatus(row["status"]),
            method=PaymentMethod(row["method"]) if row["method"] else None,
            notes=row["notes"] or "",
            reference_code=row["reference_code"] or "",
            created_at=self._parse_datetime(row["created_at"]),
        )

    # Payment collection (payment + deposit as one transaction)

    def _lock_lease(self, conn, lease_id: int):
        """Read a lease row, holding a write lock until the transaction ends."""
        p = self._placeholder()
        if self.use_postgres:
            conn.execute(f"SELECT * FROM leases WHERE id = {p} FOR UPDATE", (lease_id,))
        else:
            conn.execute("BEGIN IMMEDIATE")
            conn.execute(f"SELECT * FROM leases WHERE id = {p}", (lease_id,))
        return conn.fetchone()

    def _set_deposit_collected(self, conn, lease_id: int, amount: Decimal) -> None:
        p = self._placeholder()
        conn.execute(
            f"UPDATE leases SET deposit_collected_amount = {p} WHERE id = {p}",
            (str(amount), lease_id),
        )

    def collect_payment(
        self,
        payment: Payment,
        lease_id: Optional[int] = None,
        deposit_amount: Decimal = Decimal("0"),
    ) -> PaymentCollectionResult:
        """Insert a payment and apply any deposit portion to the lease atomically.

        The deposit collected never exceeds the lease deposit. If any
        statement fails, neither the payment nor the deposit change persists.
        """
        with self.connection() as conn:
            lease_row = None
            if lease_id is not None:
                lease_row = self._lock_lease(conn, lease_id)
                if lease_row is None:
                    raise LeaseNotFoundError(lease_id)

            payment_id = self._insert_payment(conn, payment)

            lease_updated = False
            collected = Decimal("0")
            if lease_row is not None:
                collected = self._parse_decimal(lease_row["deposit_collected_amount"])
                if deposit_amount > 0:
                    deposit = self._parse_decimal(lease_row["deposit"])
                    new_collected = min(deposit, collected + deposit_amount)
                    if new_collected != collected:
                        self._set_deposit_collected(conn, lease_id, new_collected)
                        lease_updated = True
                    collected = new_collected

        return PaymentCollectionResult(
            payment_id=payment_id,
            payment_amount=payment.amount,
            payment_status=payment.status,
            lease_updated=lease_updated,
            new_deposit_collected_amount=collected,
        )


class _SqliteConnection:
    """Wrapper to provide consistent interface for SQLite."""

    def __init__(self, conn):
        self._conn = conn
        self._cursor = None

    def execute(self, query: str, params: tuple = None):
        """Execute a query."""
        if params:
            self._cursor = self._conn.execute(query, params)
        else:
            self._cursor = self._conn.execute(query)
        return self._cursor

    def executescript(self, script: str):
        """Execute a SQL script."""
        return self._conn.executescript(script)

    def fetchone(self):
        """Fetch one row."""
        return self._cursor.fetchone() if self._cursor else None

    def fetchall(self):
        """Fetch all rows."""
        return self._cursor.fetchall() if self._cursor else []


class _PostgresConnection:
    """Wrapper to make psycopg2 cursor work like sqlite3 connection."""

    def __init__(self, conn, cursor):
        self._conn = conn
        self._cursor = cursor

    def execute(self, query: str, params: tuple = None):
        """Execute a query."""
        if params:
            self._cursor.execute(query, params)
        else:
            self._cursor.execute(query)
        return self._cursor

    def fetchone(self):
        """Fetch one row."""
        return self._cursor.fetchone()

    def fetchall(self):
        """Fetch all rows."""
        return self._cursor.fetchall()
