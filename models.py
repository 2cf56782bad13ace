"""Data models for rentledger."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from services.intervals import calculate_lease_end_date


def utcnow() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat a naive datetime as UTC; aware values pass through."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class AssetStatus(str, Enum):
    """Occupancy state of a rentable asset."""
    OCCUPIED = "occupied"
    VACANT = "vacant"
    MAINTENANCE = "maintenance"


class TenantStatus(str, Enum):
    """Whether a tenant is current."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class LeaseStatus(str, Enum):
    """Lifecycle state of a lease."""
    ACTIVE = "active"
    EXPIRED = "expired"
    PENDING = "pending"
    TERMINATED = "terminated"


class LeaseType(str, Enum):
    """Kind of lease agreement."""
    FIXED_TERM = "fixed_term"
    MONTH_TO_MONTH = "month_to_month"


class PaymentStatus(str, Enum):
    """Status of a ledger entry."""
    PAID = "paid"
    PENDING = "pending"
    OVERDUE = "overdue"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    """How a payment was made."""
    CASH = "cash"
    CHECK = "check"
    BANK_TRANSFER = "bank_transfer"
    ONLINE = "online"
    ADJUSTMENT = "adjustment"


class AdjustmentType(str, Enum):
    """Correction applied to a single billing period."""
    REFUND = "refund"
    CANCEL = "cancel"


class IntervalStatus(str, Enum):
    """Display state of a billing period."""
    PAID = "paid"
    OVERDUE = "overdue"
    PENDING = "pending"


@dataclass
class Asset:
    """A rentable asset."""
    id: Optional[int] = None
    name: str = ""
    address: str = ""
    status: AssetStatus = AssetStatus.VACANT
    created_at: datetime = field(default_factory=utcnow)

    def __str__(self) -> str:
        return f"{self.name}, {self.address}" if self.address else self.name


@dataclass
class Tenant:
    """A person or organisation renting an asset."""
    id: Optional[int] = None
    name: str = ""
    email: str = ""
    phone: str = ""
    status: TenantStatus = TenantStatus.ACTIVE
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class Lease:
    """A billing contract between a tenant and an asset.

    ``end_date`` is derived from ``start_date``, ``charge_period_minutes`` and
    ``frequency``; call ``refresh_end_date`` after changing any of them.
    """
    id: Optional[int] = None
    asset_id: int = 0
    tenant_id: int = 0
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    rent_amount: Decimal = Decimal("0.00")
    charge_period_minutes: int = 0
    frequency: int = 1
    deposit: Decimal = Decimal("0.00")
    deposit_collected_amount: Decimal = Decimal("0.00")
    status: LeaseStatus = LeaseStatus.ACTIVE
    lease_type: LeaseType = LeaseType.FIXED_TERM
    notes: str = ""
    created_at: datetime = field(default_factory=utcnow)

    def refresh_end_date(self) -> Optional[datetime]:
        """Recompute and store the end date from the schedule fields."""
        self.end_date = calculate_lease_end_date(
            as_utc(self.start_date), self.charge_period_minutes, self.frequency
        )
        return self.end_date

    def is_active_at(self, now: datetime) -> bool:
        """Active status and not yet ended at ``now``."""
        return (
            self.status == LeaseStatus.ACTIVE
            and self.end_date is not None
            and as_utc(self.end_date) > as_utc(now)
        )

    @property
    def remaining_deposit(self) -> Decimal:
        """Deposit still to be collected."""
        return max(Decimal("0"), self.deposit - self.deposit_collected_amount)


@dataclass
class Payment:
    """A ledger entry. Positive amounts are collections, negative are corrections."""
    id: Optional[int] = None
    tenant_id: int = 0
    asset_id: int = 0
    amount: Decimal = Decimal("0.00")
    due_date: Optional[datetime] = None
    paid_date: Optional[datetime] = None
    status: PaymentStatus = PaymentStatus.PENDING
    method: Optional[PaymentMethod] = None
    notes: str = ""
    reference_code: str = ""
    created_at: datetime = field(default_factory=utcnow)

    @property
    def is_adjustment(self) -> bool:
        return self.method == PaymentMethod.ADJUSTMENT


@dataclass
class PeriodAdjustment:
    """A refund or cancellation requested against one billing period."""
    type: AdjustmentType = AdjustmentType.REFUND
    period_number: int = 0
    amount: Decimal = Decimal("0.00")
    reason: str = ""

    def describe(self) -> str:
        """Audit note stored on the ledger entry."""
        return f"Period {self.period_number} {self.type.value}: {self.reason.strip()}"


@dataclass
class CollectionInterval:
    """One derived billing period of a lease."""
    period_number: int
    start_date: datetime
    end_date: datetime
    is_paid: bool
    is_incurred: bool
    amount: Decimal

    @property
    def status(self) -> IntervalStatus:
        if self.is_paid:
            return IntervalStatus.PAID
        if self.is_incurred:
            return IntervalStatus.OVERDUE
        return IntervalStatus.PENDING

    @property
    def is_overdue(self) -> bool:
        return self.is_incurred and not self.is_paid


@dataclass
class LeaseCollectionData:
    """Collection state of a lease derived from its schedule and ledger."""
    lease: Lease
    asset: Optional[Asset]
    tenant: Optional[Tenant]
    intervals: list[CollectionInterval] = field(default_factory=list)
    total_payments: Decimal = Decimal("0")
    total_periods_paid: Decimal = Decimal("0")
    current_period: int = 0
    periods_to_collect: Decimal = Decimal("0")
    amount_to_collect: Decimal = Decimal("0")
    is_active: bool = False

    @property
    def overdue_intervals(self) -> list[CollectionInterval]:
        return [interval for interval in self.intervals if interval.is_overdue]

    @property
    def has_overdue(self) -> bool:
        return any(interval.is_overdue for interval in self.intervals)

    @property
    def overdue_amount(self) -> Decimal:
        return sum((i.amount for i in self.overdue_intervals), Decimal("0"))


@dataclass
class CollectionSummary:
    """Portfolio totals over active leases."""
    total_leases: int = 0
    active_leases: int = 0
    total_amount_to_collect: Decimal = Decimal("0")
    total_overdue_amount: Decimal = Decimal("0")
    leases_with_overdue: int = 0


@dataclass
class PaymentCollectionResult:
    """Outcome of collecting a payment."""
    payment_id: int
    payment_amount: Decimal
    payment_status: PaymentStatus
    lease_updated: bool = False
    new_deposit_collected_amount: Decimal = Decimal("0")


@dataclass
class PeriodShrinkResult:
    """Outcome of shortening a lease schedule."""
    old_frequency: int
    new_frequency: int
    new_end_date: Optional[datetime]
    adjustment_applied: bool


@dataclass
class LeasePaymentSummary:
    """Ledger totals for a single lease."""
    lease_id: int
    payment_count: int = 0
    total_paid: Decimal = Decimal("0")
    total_refunded: Decimal = Decimal("0")
    total_cancelled: Decimal = Decimal("0")
    net_collected: Decimal = Decimal("0")
    deposit_collected: Decimal = Decimal("0")
    deposit_remaining: Decimal = Decimal("0")


@dataclass
class ValidationResult:
    """Result from validating engine input."""
    is_valid: bool = True
    errors: list = field(default_factory=list)
    warnings: list = field(default_factory=list)

    def add_error(self, message: str, code: str = "") -> None:
        """Add an error (input rejected)."""
        self.errors.append({"message": message, "code": code})
        self.is_valid = False

    def add_warning(self, message: str, code: str = "") -> None:
        """Add a warning (accepted, but worth surfacing)."""
        self.warnings.append({"message": message, "code": code})

    @property
    def messages(self) -> list[str]:
        return [error["message"] for error in self.errors]


def validate_lease(lease: Lease) -> ValidationResult:
    """Check the schedule and money fields of a lease."""
    result = ValidationResult()
    if lease.start_date is None:
        result.add_error("Start date is required", "start_date_missing")
    if lease.charge_period_minutes is None or lease.charge_period_minutes <= 0:
        result.add_error("Charge period must be greater than zero", "charge_period_invalid")
    if lease.frequency is None or lease.frequency < 1:
        result.add_error("Frequency must be at least 1", "frequency_invalid")
    if result.is_valid and calculate_lease_end_date(
        lease.start_date, lease.charge_period_minutes, lease.frequency
    ) is None:
        result.add_error("Schedule runs past the last supported date", "schedule_out_of_range")
    if lease.rent_amount < 0:
        result.add_error("Rent amount cannot be negative", "rent_negative")
    if lease.deposit < 0:
        result.add_error("Deposit cannot be negative", "deposit_negative")
    if lease.deposit_collected_amount < 0:
        result.add_error("Deposit collected cannot be negative", "deposit_collected_negative")
    elif lease.deposit_collected_amount > lease.deposit:
        result.add_error("Deposit collected cannot exceed the deposit", "deposit_collected_exceeds")
    if lease.rent_amount == 0:
        result.add_warning("Rent amount is zero; no period will ever be marked paid", "rent_zero")
    return result


def validate_adjustment(adjustment: PeriodAdjustment, lease: Lease) -> ValidationResult:
    """Check a period adjustment against the lease it applies to."""
    result = ValidationResult()
    if adjustment.amount <= 0:
        result.add_error("Adjustment amount must be greater than zero", "amount_not_positive")
    elif adjustment.amount > lease.rent_amount:
        result.add_error(
            f"Adjustment amount cannot exceed the rent amount ({lease.rent_amount})",
            "amount_exceeds_rent",
        )
    if not adjustment.reason or not adjustment.reason.strip():
        result.add_error("A reason is required for adjustments", "reason_missing")
    if not 1 <= adjustment.period_number <= lease.frequency:
        result.add_error(
            f"Period {adjustment.period_number} is outside 1..{lease.frequency}",
            "period_out_of_range",
        )
    return result
