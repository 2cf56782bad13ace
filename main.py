"""rentledger - CLI for lease collection tracking."""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Optional

import click
import typer
from dateutil import parser as date_parser
from rich.console import Console
from rich.table import Table

from config import get_config
from database import Database
from exceptions import RentLedgerError
from logging_config import configure_logging
from models import (
    AdjustmentType,
    Asset,
    IntervalStatus,
    Lease,
    LeaseStatus,
    LeaseType,
    Payment,
    PaymentMethod,
    PeriodAdjustment,
    Tenant,
    utcnow,
    validate_lease,
)
from services.collection import (
    CollectionFilter,
    compute_collection_data,
    compute_summary,
    filter_collections,
)
from services.durations import DurationUnit, format_minutes, from_minutes, to_minutes
from services.transactions import CollectionService

app = typer.Typer(
    name="rentledger",
    help="Track leases, rent collection and deposits.",
    no_args_is_help=True,
)
asset_app = typer.Typer(help="Manage assets")
tenant_app = typer.Typer(help="Manage tenants")
lease_app = typer.Typer(help="Manage leases")
payment_app = typer.Typer(help="Collect payments and record adjustments")
collections_app = typer.Typer(help="Review what is owed")
duration_app = typer.Typer(help="Duration helpers")
app.add_typer(asset_app, name="asset")
app.add_typer(tenant_app, name="tenant")
app.add_typer(lease_app, name="lease")
app.add_typer(payment_app, name="payment")
app.add_typer(collections_app, name="collections")
app.add_typer(duration_app, name="duration")

console = Console()

STATUS_STYLE = {
    IntervalStatus.PAID: "[green]Paid[/green]",
    IntervalStatus.OVERDUE: "[red]Overdue[/red]",
    IntervalStatus.PENDING: "[dim]Pending[/dim]",
}


@app.callback()
def main() -> None:
    """Configure logging before any command runs."""
    configure_logging(get_config().log_level)


def get_db() -> Database:
    """Get database instance."""
    config = get_config()
    return Database(config.database_path, config.database_url)


def money(amount) -> str:
    return f"{get_config().currency_symbol}{amount:,.2f}"


def parse_amount(value: str, label: str) -> Decimal:
    symbol = get_config().currency_symbol
    try:
        return Decimal(value.replace(",", "").replace(symbol, ""))
    except InvalidOperation:
        console.print(f"[red]Invalid {label}[/red]")
        raise typer.Exit(1)


def parse_instant(value: str) -> datetime:
    try:
        parsed = date_parser.isoparse(value)
    except ValueError:
        console.print("[red]Invalid date format. Use YYYY-MM-DD or an ISO timestamp[/red]")
        raise typer.Exit(1)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def fail(error: Exception) -> None:
    console.print(f"[red]{error}[/red]")
    raise typer.Exit(1)


@app.command()
def init():
    """Initialize the database and configuration."""
    config = get_config()
    config.ensure_directories()
    db = get_db()
    db.initialize()
    console.print(f"[green]Database initialized at {config.database_path}[/green]")


# Asset commands


@asset_app.command("add")
def asset_add(
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Asset name"),
    address: str = typer.Option("", "--address", "-a", help="Asset address"),
):
    """Add a new asset."""
    if not name:
        name = typer.prompt("Asset name")
    asset_id = get_db().create_asset(Asset(name=name, address=address))
    console.print(f"[green]Asset created with ID: {asset_id}[/green]")


@asset_app.command("list")
def asset_list():
    """List all assets."""
    assets = get_db().list_assets()
    if not assets:
        console.print("[yellow]No assets found. Add one with 'rentledger asset add'[/yellow]")
        return

    table = Table(title="Assets")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Name", style="white")
    table.add_column("Address", style="white")
    table.add_column("Status", style="white")
    for asset in assets:
        table.add_row(str(asset.id), asset.name, asset.address, asset.status.value)
    console.print(table)


# Tenant commands


@tenant_app.command("add")
def tenant_add(
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Tenant name"),
    email: str = typer.Option("", "--email", "-e", help="Email address"),
    phone: str = typer.Option("", "--phone", "-p", help="Phone number"),
):
    """Add a new tenant."""
    if not name:
        name = typer.prompt("Tenant name")
    tenant_id = get_db().create_tenant(Tenant(name=name, email=email, phone=phone))
    console.print(f"[green]Tenant created with ID: {tenant_id}[/green]")


@tenant_app.command("list")
def tenant_list():
    """List all tenants."""
    tenants = get_db().list_tenants()
    if not tenants:
        console.print("[yellow]No tenants found. Add one with 'rentledger tenant add'[/yellow]")
        return

    table = Table(title="Tenants")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Name", style="white")
    table.add_column("Email", style="white")
    table.add_column("Status", style="white")
    for tenant in tenants:
        table.add_row(str(tenant.id), tenant.name, tenant.email, tenant.status.value)
    console.print(table)


# Lease commands


@lease_app.command("add")
def lease_add(
    asset_id: int = typer.Argument(..., help="Asset ID"),
    tenant_id: int = typer.Argument(..., help="Tenant ID"),
    start: str = typer.Option(..., "--start", "-s", help="Start date (YYYY-MM-DD or ISO timestamp)"),
    rent: str = typer.Option(..., "--rent", "-r", help="Rent per period"),
    period_value: int = typer.Option(1, "--every", help="Charge period length"),
    period_unit: str = typer.Option(
        "months",
        "--unit",
        "-u",
        help="Charge period unit",
        click_type=click.Choice([unit.value for unit in DurationUnit]),
    ),
    frequency: int = typer.Option(12, "--periods", "-f", help="Number of periods"),
    deposit: str = typer.Option("0", "--deposit", "-d", help="Security deposit"),
    lease_type: str = typer.Option(
        "fixed_term",
        "--type",
        "-t",
        help="Lease type",
        click_type=click.Choice([t.value for t in LeaseType]),
    ),
):
    """Add a new lease."""
    db = get_db()
    if not db.get_asset(asset_id):
        fail(f"Asset {asset_id} not found")
    if not db.get_tenant(tenant_id):
        fail(f"Tenant {tenant_id} not found")

    lease = Lease(
        asset_id=asset_id,
        tenant_id=tenant_id,
        start_date=parse_instant(start),
        rent_amount=parse_amount(rent, "rent amount"),
        charge_period_minutes=to_minutes(period_value, period_unit),
        frequency=frequency,
        deposit=parse_amount(deposit, "deposit amount"),
        lease_type=LeaseType(lease_type),
    )
    result = validate_lease(lease)
    for warning in result.warnings:
        console.print(f"[yellow]{warning['message']}[/yellow]")
    if not result.is_valid:
        fail("; ".join(result.messages))

    lease_id = db.create_lease(lease)
    console.print(f"[green]Lease created with ID: {lease_id}[/green]")
    console.print(f"  Ends: {lease.end_date:%Y-%m-%d %H:%M} UTC")


@lease_app.command("list")
def lease_list():
    """List all leases."""
    db = get_db()
    leases = db.list_leases()
    if not leases:
        console.print("[yellow]No leases found[/yellow]")
        return

    table = Table(title="Leases")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Asset", style="white")
    table.add_column("Tenant", style="white")
    table.add_column("Start", style="white")
    table.add_column("End", style="white")
    table.add_column("Rent", style="white", justify="right")
    table.add_column("Period", style="white")
    table.add_column("Status", style="white")
    for lease in leases:
        asset = db.get_asset(lease.asset_id)
        tenant = db.get_tenant(lease.tenant_id)
        table.add_row(
            str(lease.id),
            asset.name if asset else f"#{lease.asset_id}",
            tenant.name if tenant else f"#{lease.tenant_id}",
            f"{lease.start_date:%Y-%m-%d}",
            f"{lease.end_date:%Y-%m-%d}" if lease.end_date else "-",
            money(lease.rent_amount),
            format_minutes(lease.charge_period_minutes),
            lease.status.value,
        )
    console.print(table)


@lease_app.command("show")
def lease_show(lease_id: int = typer.Argument(..., help="Lease ID")):
    """Show a lease with its billing schedule."""
    db = get_db()
    lease = db.get_lease(lease_id)
    if not lease:
        fail(f"Lease {lease_id} not found")

    asset = db.get_asset(lease.asset_id)
    tenant = db.get_tenant(lease.tenant_id)
    data = compute_collection_data(
        lease, db.list_payments_for(lease.tenant_id, lease.asset_id), asset, tenant, utcnow()
    )

    console.print(f"\n[bold]Lease #{lease.id}[/bold]")
    console.print(f"  Asset: {asset if asset else lease.asset_id}")
    console.print(f"  Tenant: {tenant.name if tenant else lease.tenant_id}")
    console.print(f"  Status: {lease.status.value} ({lease.lease_type.value})")
    console.print(f"  Rent: {money(lease.rent_amount)} every {format_minutes(lease.charge_period_minutes)}")
    console.print(f"  Deposit: {money(lease.deposit_collected_amount)} of {money(lease.deposit)} collected")
    console.print(f"  Paid so far: {money(data.total_payments)} ({data.total_periods_paid:.2f} periods)")
    console.print(f"  To collect: {money(data.amount_to_collect)}")

    table = Table(title="Schedule")
    table.add_column("Period", style="cyan", justify="right")
    table.add_column("Start", style="white")
    table.add_column("End", style="white")
    table.add_column("Amount", style="white", justify="right")
    table.add_column("Status", style="white")
    for interval in data.intervals:
        table.add_row(
            str(interval.period_number),
            f"{interval.start_date:%Y-%m-%d %H:%M}",
            f"{interval.end_date:%Y-%m-%d %H:%M}",
            money(interval.amount),
            STATUS_STYLE[interval.status],
        )
    console.print(table)


@lease_app.command("shrink")
def lease_shrink(
    lease_id: int = typer.Argument(..., help="Lease ID"),
    period: int = typer.Argument(..., help="Adjusted period number"),
    adjustment_type: str = typer.Option(
        "cancel",
        "--type",
        "-t",
        help="Adjustment type",
        click_type=click.Choice([t.value for t in AdjustmentType]),
    ),
):
    """Shorten a lease schedule from the given period."""
    service = CollectionService(get_db())
    try:
        result = service.shrink_lease_periods(lease_id, period, adjustment_type)
    except RentLedgerError as e:
        fail(e)

    if not result.adjustment_applied:
        console.print(
            f"[yellow]Lease unchanged: it keeps {result.old_frequency} period(s)[/yellow]"
        )
        return
    console.print(
        f"[green]Lease shortened from {result.old_frequency} to {result.new_frequency} periods, "
        f"now ends {result.new_end_date:%Y-%m-%d %H:%M} UTC[/green]"
    )


def _end_lease(lease_id: int, status: LeaseStatus) -> None:
    try:
        lease = CollectionService(get_db()).end_lease(lease_id, status)
    except RentLedgerError as e:
        fail(e)
    console.print(f"[green]Lease {lease.id} {lease.status.value}; asset {lease.asset_id} is now vacant[/green]")


@lease_app.command("terminate")
def lease_terminate(lease_id: int = typer.Argument(..., help="Lease ID")):
    """Terminate an active lease early."""
    _end_lease(lease_id, LeaseStatus.TERMINATED)


@lease_app.command("expire")
def lease_expire(lease_id: int = typer.Argument(..., help="Lease ID")):
    """Mark an active lease as expired."""
    _end_lease(lease_id, LeaseStatus.EXPIRED)


# Payment commands


@payment_app.command("collect")
def payment_collect(
    lease_id: int = typer.Argument(..., help="Lease ID"),
    amount: Optional[str] = typer.Option(None, "--amount", "-a", help="Rent amount (defaults to amount owed)"),
    deposit: str = typer.Option("0", "--deposit", "-d", help="Deposit portion to collect"),
    method: str = typer.Option(
        "bank_transfer",
        "--method",
        "-m",
        help="Payment method",
        click_type=click.Choice([m.value for m in PaymentMethod if m != PaymentMethod.ADJUSTMENT]),
    ),
    notes: str = typer.Option("", "--notes", help="Notes"),
    reference: str = typer.Option("", "--reference", help="Reference code"),
):
    """Collect a payment against a lease."""
    db = get_db()
    lease = db.get_lease(lease_id)
    if not lease:
        fail(f"Lease {lease_id} not found")

    now = utcnow()
    if amount is None:
        data = compute_collection_data(
            lease, db.list_payments_for(lease.tenant_id, lease.asset_id), None, None, now
        )
        rent_amount = data.amount_to_collect
    else:
        rent_amount = parse_amount(amount, "payment amount")

    draft = Payment(
        tenant_id=lease.tenant_id,
        asset_id=lease.asset_id,
        amount=rent_amount,
        method=PaymentMethod(method),
        notes=notes,
        reference_code=reference,
    )
    try:
        result = CollectionService(db).collect_payment(
            draft, lease_id, parse_amount(deposit, "deposit amount"), now=now
        )
    except RentLedgerError as e:
        fail(e)

    console.print(f"[green]Payment {result.payment_id} collected: {money(result.payment_amount)}[/green]")
    if result.lease_updated:
        console.print(f"  Deposit collected now {money(result.new_deposit_collected_amount)}")


@payment_app.command("adjust")
def payment_adjust(
    lease_id: int = typer.Argument(..., help="Lease ID"),
    period: int = typer.Argument(..., help="Period number"),
    adjustment_type: str = typer.Option(
        "refund",
        "--type",
        "-t",
        help="Adjustment type",
        click_type=click.Choice([t.value for t in AdjustmentType]),
    ),
    amount: Optional[str] = typer.Option(None, "--amount", "-a", help="Amount (defaults to the rent)"),
    reason: Optional[str] = typer.Option(None, "--reason", "-r", help="Reason for the adjustment"),
    shrink: bool = typer.Option(False, "--shrink", help="Also shorten the lease schedule"),
):
    """Refund or cancel a single billing period."""
    db = get_db()
    lease = db.get_lease(lease_id)
    if not lease:
        fail(f"Lease {lease_id} not found")
    if not reason:
        reason = typer.prompt("Reason")

    adjustment = PeriodAdjustment(
        type=AdjustmentType(adjustment_type),
        period_number=period,
        amount=parse_amount(amount, "adjustment amount") if amount else lease.rent_amount,
        reason=reason,
    )
    service = CollectionService(db)
    try:
        entry = service.adjust_period(lease_id, adjustment)
        console.print(f"[green]Recorded {entry.status.value} entry {entry.id}: {money(entry.amount)}[/green]")
        if shrink:
            result = service.shrink_lease_periods(lease_id, period, adjustment.type)
            if result.adjustment_applied:
                console.print(f"  Lease now has {result.new_frequency} period(s)")
            else:
                console.print("[yellow]  Lease schedule unchanged[/yellow]")
    except RentLedgerError as e:
        fail(e)


@payment_app.command("summary")
def payment_summary(lease_id: int = typer.Argument(..., help="Lease ID")):
    """Show ledger totals for a lease."""
    try:
        summary = CollectionService(get_db()).get_lease_payment_summary(lease_id)
    except RentLedgerError as e:
        fail(e)

    console.print(f"\n[bold]Ledger for lease #{lease_id}[/bold]")
    console.print(f"  Entries: {summary.payment_count}")
    console.print(f"  Paid: {money(summary.total_paid)}")
    console.print(f"  Refunded: {money(summary.total_refunded)}")
    console.print(f"  Cancelled: {money(summary.total_cancelled)}")
    console.print(f"  Net collected: {money(summary.net_collected)}")
    console.print(f"  Deposit: {money(summary.deposit_collected)} collected, {money(summary.deposit_remaining)} remaining")


# Collections commands


@collections_app.command("list")
def collections_list(
    search: str = typer.Option("", "--search", "-q", help="Match tenant or asset name"),
    status: str = typer.Option(
        "all",
        "--status",
        "-s",
        help="Filter",
        click_type=click.Choice([f.value for f in CollectionFilter]),
    ),
):
    """List collection state for every lease."""
    data = CollectionService(get_db()).get_collections(utcnow())
    data = filter_collections(data, search, CollectionFilter(status))
    if not data:
        console.print("[yellow]Nothing to show[/yellow]")
        return

    table = Table(title="Collections")
    table.add_column("Lease", style="cyan", justify="right")
    table.add_column("Tenant", style="white")
    table.add_column("Asset", style="white")
    table.add_column("Period", style="white", justify="right")
    table.add_column("Paid periods", style="white", justify="right")
    table.add_column("To collect", style="white", justify="right")
    table.add_column("Overdue", style="white", justify="right")
    for d in data:
        table.add_row(
            str(d.lease.id),
            d.tenant.name,
            d.asset.name,
            f"{d.current_period}/{d.lease.frequency}",
            f"{d.total_periods_paid:.2f}",
            money(d.amount_to_collect),
            f"[red]{money(d.overdue_amount)}[/red]" if d.has_overdue else "-",
        )
    console.print(table)


@collections_app.command("summary")
def collections_summary():
    """Show portfolio collection totals."""
    summary = compute_summary(CollectionService(get_db()).get_collections(utcnow()))

    console.print("\n[bold]Collections[/bold]")
    console.print(f"  Leases: {summary.total_leases} ({summary.active_leases} active)")
    console.print(f"  To collect: {money(summary.total_amount_to_collect)}")
    console.print(f"  Overdue: {money(summary.total_overdue_amount)}")
    console.print(f"  Leases with overdue periods: {summary.leases_with_overdue}")


# Duration commands


@duration_app.command("convert")
def duration_convert(
    minutes: Optional[int] = typer.Option(None, "--minutes", "-m", help="Minutes to describe"),
    value: Optional[float] = typer.Option(None, "--value", "-v", help="Value to convert to minutes"),
    unit: str = typer.Option(
        "hours",
        "--unit",
        "-u",
        help="Unit of --value",
        click_type=click.Choice([u.value for u in DurationUnit]),
    ),
):
    """Convert between minutes and calendar units."""
    if minutes is None and value is None:
        fail("Give --minutes or --value")
    if minutes is not None:
        best_value, best_unit = from_minutes(minutes)
        console.print(f"{minutes} minutes = {best_value} {best_unit.value} ({format_minutes(minutes)})")
    if value is not None:
        console.print(f"{value:g} {unit} = {to_minutes(value, unit)} minutes")


if __name__ == "__main__":
    app()
