"""Mutating collection operations: collect, adjust a period, shrink a schedule.

Each operation validates its input before touching storage and performs its
writes as one unit through ``Database``. Errors from storage propagate to the
caller unchanged; nothing here retries.
"""

import logging
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Optional

from database import Database
from exceptions import LeaseNotFoundError, ValidationError
from models import (
    AdjustmentType,
    Lease,
    LeaseCollectionData,
    LeasePaymentSummary,
    LeaseStatus,
    Payment,
    PaymentCollectionResult,
    PaymentMethod,
    PaymentStatus,
    PeriodAdjustment,
    PeriodShrinkResult,
    utcnow,
    validate_adjustment,
)
from services.collection import build_collections
from services.intervals import calculate_lease_end_date

logger = logging.getLogger(__name__)

ADJUSTMENT_STATUS = {
    AdjustmentType.REFUND: PaymentStatus.REFUNDED,
    AdjustmentType.CANCEL: PaymentStatus.CANCELLED,
}


def shrunk_frequency(period_number: int, adjustment_type: AdjustmentType) -> int:
    """Schedule length after adjusting ``period_number``.

    A cancelled period is dropped along with everything after it; a refunded
    period stays as the final one.
    """
    if AdjustmentType(adjustment_type) == AdjustmentType.CANCEL:
        return period_number - 1
    return period_number


class CollectionService:
    """Collection transactions against a Database."""

    def __init__(self, db: Database):
        self.db = db

    def _require_lease(self, lease_id: int) -> Lease:
        lease = self.db.get_lease(lease_id)
        if lease is None:
            raise LeaseNotFoundError(lease_id)
        return lease

    def collect_payment(
        self,
        draft: Payment,
        lease_id: Optional[int] = None,
        deposit_amount=Decimal("0"),
        now: Optional[datetime] = None,
    ) -> PaymentCollectionResult:
        """Record a paid ledger entry and apply any deposit portion to the lease.

        The deposit collected is clamped to the lease deposit. The payment
        and the deposit update commit together or not at all.
        """
        now = now or utcnow()
        amount = Decimal(str(draft.amount))
        deposit_amount = Decimal(str(deposit_amount or 0))

        errors = []
        if amount <= 0:
            errors.append("Payment amount must be greater than zero")
        if deposit_amount < 0:
            errors.append("Deposit amount cannot be negative")
        if lease_id is not None:
            lease = self._require_lease(lease_id)
            if lease.tenant_id != draft.tenant_id or lease.asset_id != draft.asset_id:
                errors.append(f"Payment tenant/asset does not match lease {lease_id}")
        if errors:
            raise ValidationError(errors)

        if lease_id is None and deposit_amount > 0:
            logger.info("Deposit amount %s ignored: no lease given", deposit_amount)
            deposit_amount = Decimal("0")

        record = replace(
            draft,
            id=None,
            amount=amount,
            status=PaymentStatus.PAID,
            due_date=draft.due_date or now,
            paid_date=draft.paid_date or now,
        )
        result = self.db.collect_payment(record, lease_id, deposit_amount)

        logger.info(
            "Collected payment %s of %s (lease=%s, deposit applied=%s, deposit collected=%s)",
            result.payment_id,
            result.payment_amount,
            lease_id,
            result.lease_updated,
            result.new_deposit_collected_amount,
        )
        return result

    def adjust_period(
        self,
        lease_id: int,
        adjustment: PeriodAdjustment,
        now: Optional[datetime] = None,
    ) -> Payment:
        """Append a negative ledger entry refunding or cancelling one period.

        Existing entries are never modified and the lease schedule is left
        alone; shortening the schedule is ``shrink_lease_periods``.
        """
        now = now or utcnow()
        lease = self._require_lease(lease_id)

        try:
            adjustment_type = AdjustmentType(adjustment.type)
        except ValueError:
            raise ValidationError([f"Unknown adjustment type: {adjustment.type}"])
        adjustment = replace(
            adjustment,
            type=adjustment_type,
            amount=Decimal(str(adjustment.amount)),
        )

        result = validate_adjustment(adjustment, lease)
        if not result.is_valid:
            raise ValidationError(result.messages)

        entry = Payment(
            tenant_id=lease.tenant_id,
            asset_id=lease.asset_id,
            amount=-adjustment.amount,
            due_date=now,
            paid_date=now,
            status=ADJUSTMENT_STATUS[adjustment_type],
            method=PaymentMethod.ADJUSTMENT,
            notes=adjustment.describe(),
        )
        entry.id = self.db.create_payment(entry)

        logger.info(
            "Recorded %s of %s for lease %s period %d",
            adjustment_type.value,
            adjustment.amount,
            lease_id,
            adjustment.period_number,
        )
        return entry

    def shrink_lease_periods(
        self, lease_id: int, period_number: int, adjustment_type
    ) -> PeriodShrinkResult:
        """Shorten a lease schedule after a period adjustment.

        Returns ``adjustment_applied=False`` without writing anything when the
        schedule would drop below one period or would not get shorter.
        """
        lease = self._require_lease(lease_id)

        try:
            adjustment_type = AdjustmentType(adjustment_type)
        except ValueError:
            raise ValidationError([f"Unknown adjustment type: {adjustment_type}"])
        if not 1 <= period_number <= lease.frequency:
            raise ValidationError([f"Period {period_number} is outside 1..{lease.frequency}"])

        old_frequency = lease.frequency
        new_frequency = shrunk_frequency(period_number, adjustment_type)

        if new_frequency < 1 or new_frequency >= old_frequency:
            logger.info(
                "Lease %s not shortened: %s of period %d leaves %d of %d periods",
                lease_id,
                adjustment_type.value,
                period_number,
                new_frequency,
                old_frequency,
            )
            return PeriodShrinkResult(
                old_frequency=old_frequency,
                new_frequency=old_frequency,
                new_end_date=lease.end_date,
                adjustment_applied=False,
            )

        new_end_date = calculate_lease_end_date(
            lease.start_date, lease.charge_period_minutes, new_frequency
        )
        self.db.update_lease_frequency(
            lease_id, new_frequency, new_end_date, expected_frequency=old_frequency
        )

        logger.info(
            "Lease %s shortened from %d to %d periods, now ends %s",
            lease_id,
            old_frequency,
            new_frequency,
            new_end_date.isoformat() if new_end_date else None,
        )
        return PeriodShrinkResult(
            old_frequency=old_frequency,
            new_frequency=new_frequency,
            new_end_date=new_end_date,
            adjustment_applied=True,
        )

    def end_lease(self, lease_id: int, status=LeaseStatus.TERMINATED) -> Lease:
        """Terminate or expire an active lease and mark its asset vacant.

        Ending is one-way: a lease that is not active is rejected.
        """
        try:
            status = LeaseStatus(status)
        except ValueError:
            raise ValidationError([f"Unknown lease status: {status}"])
        if status not in (LeaseStatus.TERMINATED, LeaseStatus.EXPIRED):
            raise ValidationError([f"A lease can only be ended as terminated or expired, not {status.value}"])

        lease = self._require_lease(lease_id)
        if lease.status != LeaseStatus.ACTIVE:
            raise ValidationError([f"Lease {lease_id} is {lease.status.value}, not active"])

        self.db.end_lease(lease_id, status)
        lease.status = status

        logger.info("Lease %s %s, asset %s now vacant", lease_id, status.value, lease.asset_id)
        return lease

    def get_lease_payment_summary(self, lease_id: int) -> LeasePaymentSummary:
        """Ledger totals for a lease's tenant and asset."""
        lease = self._require_lease(lease_id)
        payments = self.db.list_payments_for(lease.tenant_id, lease.asset_id)

        summary = LeasePaymentSummary(
            lease_id=lease_id,
            payment_count=len(payments),
            deposit_collected=lease.deposit_collected_amount,
            deposit_remaining=lease.remaining_deposit,
        )
        for payment in payments:
            summary.net_collected += payment.amount
            if payment.status == PaymentStatus.PAID:
                summary.total_paid += payment.amount
            elif payment.status == PaymentStatus.REFUNDED:
                summary.total_refunded += abs(payment.amount)
            elif payment.status == PaymentStatus.CANCELLED:
                summary.total_cancelled += abs(payment.amount)
        return summary

    def get_collections(self, now: datetime) -> list[LeaseCollectionData]:
        """Load every store and compute collection data as of ``now``."""
        return build_collections(
            self.db.list_leases(),
            self.db.list_payments(),
            self.db.list_assets(),
            self.db.list_tenants(),
            now,
        )
