"""Collection calculator: derives per-period and per-portfolio collection state.

Everything here is a pure function of its arguments. ``now`` is always passed
in; nothing reads the wall clock. Payments are not tagged to periods: the
running total of ``paid`` entries fills periods from period 1 forward.
"""

import logging
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional

from models import (
    Asset,
    CollectionInterval,
    CollectionSummary,
    Lease,
    LeaseCollectionData,
    Payment,
    PaymentStatus,
    Tenant,
    as_utc,
)
from services.intervals import generate_lease_intervals

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


class CollectionFilter(str, Enum):
    """Status filter for collection listings."""
    ALL = "all"
    ACTIVE = "active"
    OVERDUE = "overdue"


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def compute_collection_data(
    lease: Lease,
    payments: Iterable[Payment],
    asset: Optional[Asset],
    tenant: Optional[Tenant],
    now: datetime,
) -> LeaseCollectionData:
    """Combine a lease schedule with its ledger into collection state.

    Naive ``now`` and lease dates are taken as UTC.
    """
    now = as_utc(now)
    rent = _to_decimal(lease.rent_amount)
    schedule = generate_lease_intervals(
        as_utc(lease.start_date), lease.charge_period_minutes, lease.frequency
    )

    lease_payments = [
        p for p in payments
        if p.tenant_id == lease.tenant_id
        and p.asset_id == lease.asset_id
        and p.status == PaymentStatus.PAID
    ]
    total_payments = sum((_to_decimal(p.amount) for p in lease_payments), Decimal("0"))

    # Zero rent: nothing can be divided into periods, so none count as paid.
    if rent == 0:
        total_periods_paid = Decimal("0")
    else:
        total_periods_paid = total_payments / rent

    current_period = 0
    for index, interval in enumerate(schedule):
        if now >= interval.start:
            current_period = index + 1
        else:
            break

    intervals = [
        CollectionInterval(
            period_number=index + 1,
            start_date=interval.start,
            end_date=interval.end,
            is_paid=(index + 1) <= total_periods_paid,
            is_incurred=now >= interval.start,
            amount=rent,
        )
        for index, interval in enumerate(schedule)
    ]

    periods_to_collect = max(Decimal("0"), current_period - total_periods_paid)
    amount_to_collect = (periods_to_collect * rent).quantize(CENTS)
    is_active = lease.is_active_at(now)

    logger.debug(
        "Lease %s: %d payments totalling %s, %s periods paid, current period %d, "
        "%s to collect, active=%s",
        lease.id,
        len(lease_payments),
        total_payments,
        total_periods_paid,
        current_period,
        amount_to_collect,
        is_active,
    )

    return LeaseCollectionData(
        lease=lease,
        asset=asset,
        tenant=tenant,
        intervals=intervals,
        total_payments=total_payments,
        total_periods_paid=total_periods_paid,
        current_period=current_period,
        periods_to_collect=periods_to_collect,
        amount_to_collect=amount_to_collect,
        is_active=is_active,
    )


def compute_summary(data_list: Iterable[LeaseCollectionData]) -> CollectionSummary:
    """Roll collection data up into portfolio totals over active leases."""
    data_list = list(data_list)
    active = [data for data in data_list if data.is_active]

    return CollectionSummary(
        total_leases=len(data_list),
        active_leases=len(active),
        total_amount_to_collect=sum((d.amount_to_collect for d in active), Decimal("0")),
        total_overdue_amount=sum((d.overdue_amount for d in active), Decimal("0")),
        leases_with_overdue=sum(1 for d in active if d.has_overdue),
    )


def build_collections(
    leases: Iterable[Lease],
    payments: Iterable[Payment],
    assets: Iterable[Asset],
    tenants: Iterable[Tenant],
    now: datetime,
) -> list[LeaseCollectionData]:
    """Compute collection data for every lease whose asset and tenant are known."""
    payments = list(payments)
    assets_by_id = {asset.id: asset for asset in assets}
    tenants_by_id = {tenant.id: tenant for tenant in tenants}

    collections = []
    for lease in leases:
        asset = assets_by_id.get(lease.asset_id)
        tenant = tenants_by_id.get(lease.tenant_id)
        if asset is None or tenant is None:
            logger.debug("Skipping lease %s: asset or tenant missing", lease.id)
            continue
        collections.append(compute_collection_data(lease, payments, asset, tenant, now))
    return collections


def active_collections(data_list: Iterable[LeaseCollectionData]) -> list[LeaseCollectionData]:
    """Active leases with something to collect."""
    return [d for d in data_list if d.is_active and d.amount_to_collect > 0]


def overdue_collections(data_list: Iterable[LeaseCollectionData]) -> list[LeaseCollectionData]:
    """Active leases with at least one incurred, unpaid period."""
    return [d for d in data_list if d.is_active and d.has_overdue]


def filter_collections(
    data_list: Iterable[LeaseCollectionData],
    search: str = "",
    status: CollectionFilter = CollectionFilter.ALL,
) -> list[LeaseCollectionData]:
    """Filter by tenant/asset name and collection status."""
    term = search.strip().lower()
    status = CollectionFilter(status)

    def matches_search(data: LeaseCollectionData) -> bool:
        if not term:
            return True
        names = [
            data.tenant.name if data.tenant else "",
            data.asset.name if data.asset else "",
        ]
        return any(term in name.lower() for name in names)

    def matches_status(data: LeaseCollectionData) -> bool:
        if status == CollectionFilter.ACTIVE:
            return data.is_active and data.amount_to_collect > 0
        if status == CollectionFilter.OVERDUE:
            return data.has_overdue
        return True

    return [d for d in data_list if matches_search(d) and matches_status(d)]


def intervals_covered(amount, rent_amount) -> int:
    """Number of whole periods an amount pays for."""
    amount = _to_decimal(amount)
    rent_amount = _to_decimal(rent_amount)
    if amount <= 0 or rent_amount <= 0:
        return 0
    return int(amount // rent_amount)


def remaining_deposit(lease: Lease) -> Decimal:
    """Deposit still owed on a lease."""
    return lease.remaining_deposit
