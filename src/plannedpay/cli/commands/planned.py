"""Planned payment commands."""

from datetime import date

import click
from plannedpay.cli.account_resolution import resolve_account_or_exit, resolve_category_or_exit
from plannedpay.cli.error_handling import fail, handle_domain_error
from plannedpay.domain.account import AccountService
from plannedpay.domain.category import CategoryService
from plannedpay.domain.entities import (
    PlannedPayment,
    PAYMENT_TYPES,
    PAYMENT_METHODS,
    RECURRENCE_TYPES,
    ONE_TIME,
    RECURRENT,
    WEEKLY,
    MONTHLY,
)
from plannedpay.domain.errors import DomainError
from plannedpay.domain.planned_payment import PlannedPaymentService
from plannedpay.utils.amount_parser import parse_amount
from plannedpay.utils.date_parser import parse_date
from plannedpay.utils.weekday_parser import parse_weekdays, format_weekdays


def load_service(ctx) -> PlannedPaymentService:
    """Create a PlannedPaymentService with the current user's payments loaded."""
    service = PlannedPaymentService(ctx.obj["db"])
    if not service.load_planned_payments(ctx.obj["user_id"]):
        fail(ctx, service.last_error)
    return service


def describe_schedule(payment: PlannedPayment) -> str:
    """Describe when a planned payment occurs, e.g. 'monthly (every 2 months)'."""
    if payment.frequency == ONE_TIME:
        return f"once on {payment.scheduled_date}"

    schedule = payment.recurrence_type or "unknown"
    if payment.recurrence_type == WEEKLY and payment.weekly_days:
        schedule += f" on {format_weekdays(payment.weekly_days)}"
    elif payment.recurrence_type == MONTHLY and payment.monthly_interval > 1:
        schedule += f" (every {payment.monthly_interval} months)"
    if payment.start_date is not None:
        schedule += f" from {payment.start_date}"
    return schedule


def echo_payment_row(payment: PlannedPayment) -> None:
    """Print a planned payment as a single table row."""
    next_date = str(payment.next_execution_date or "-")
    status = "active" if payment.is_active else "paused"
    click.echo(
        f"{payment.id:<6} {payment.name[:24]:<24} {payment.type:<9} "
        f"{payment.amount:>12,.2f} {next_date:<12} {status:<7} {describe_schedule(payment)}"
    )


def echo_payment_table(payments: list[PlannedPayment]) -> None:
    """Print planned payments as a table."""
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<6} {'Name':<24} {'Type':<9} {'Amount':>12} {'Next':<12} {'Status':<7} Schedule"
    )
    click.echo("-" * 100)
    for payment in payments:
        echo_payment_row(payment)


def _parse_date_option(ctx, value: str | None, label: str) -> date | None:
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        fail(ctx, f"Invalid {label}: {e}")


def _parse_amount_option(ctx, value: str | None):
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        fail(ctx, f"Invalid amount: {e}")


def _parse_days_option(ctx, value: str | None):
    if value is None:
        return None
    try:
        return parse_weekdays(value)
    except ValueError as e:
        fail(ctx, f"Invalid weekdays: {e}")


@click.group()
def planned_group():
    """Manage planned payments."""
    pass


@planned_group.command("add")
@click.argument("name")
@click.option(
    "--type",
    "payment_type",
    type=click.Choice(PAYMENT_TYPES, case_sensitive=False),
    default="expense",
    show_default=True,
    help="Payment type",
)
@click.option("--amount", required=True, help="Amount (positive, e.g. 21000 or 49.99)")
@click.option("--account", help="Account name or ID (source for expenses, destination for income)")
@click.option("--to-account", help="Destination account name or ID (transfers only)")
@click.option("--category", help="Category name or ID")
@click.option("--payee", help="Payee")
@click.option("--method", type=click.Choice(PAYMENT_METHODS), help="Payment method")
@click.option("--note", help="Note copied to generated transactions")
@click.option("--on", "on_date", help="Date of a one-time payment")
@click.option(
    "--repeat",
    type=click.Choice(RECURRENCE_TYPES, case_sensitive=False),
    help="Repeat daily, weekly, monthly or yearly",
)
@click.option("--start", "start_date", help="First occurrence of a recurring payment (default: today)")
@click.option("--days", help="Weekdays for weekly payments (e.g. 'mon,wed')")
@click.option("--interval", type=click.IntRange(min=1), default=1, show_default=True, help="Months between monthly payments")
@click.pass_context
def add_payment(
    ctx,
    name: str,
    payment_type: str,
    amount: str,
    account: str | None,
    to_account: str | None,
    category: str | None,
    payee: str | None,
    method: str | None,
    note: str | None,
    on_date: str | None,
    repeat: str | None,
    start_date: str | None,
    days: str | None,
    interval: int,
):
    """Add a planned payment.

    Give --on for a one-time payment, or --repeat for a recurring one.

    Examples:
        plannedpay planned add "Rent" --amount 21000 --account Checking --repeat monthly --start 2024-01-01
        plannedpay planned add "Gym" --amount 30 --account Checking --repeat weekly --days mon,wed
        plannedpay planned add "Tax refund" --type income --amount 500 --account Checking --on 2024-04-15
    """
    if (on_date is None) == (repeat is None):
        fail(ctx, "Give either --on for a one-time payment or --repeat for a recurring one")
    if on_date is not None and (start_date or days):
        fail(ctx, "--start and --days only apply to recurring payments")

    db = ctx.obj["db"]
    account_service = AccountService(db)

    account_id = resolve_account_or_exit(ctx, account_service, account) if account else None
    destination_account_id = (
        resolve_account_or_exit(ctx, account_service, to_account) if to_account else None
    )
    category_id = (
        resolve_category_or_exit(ctx, CategoryService(db), category) if category else None
    )

    txn_amount = _parse_amount_option(ctx, amount)
    scheduled = _parse_date_option(ctx, on_date, "date")
    start = _parse_date_option(ctx, start_date, "start date")
    weekly_days = _parse_days_option(ctx, days)
    if repeat is not None and start is None:
        start = date.today()

    service = load_service(ctx)
    try:
        payment = service.add_planned_payment(
            user_id=ctx.obj["user_id"],
            name=name,
            type=payment_type.lower(),
            amount=txn_amount,
            frequency=ONE_TIME if repeat is None else RECURRENT,
            category_id=category_id,
            account_id=account_id,
            destination_account_id=destination_account_id,
            payee=payee,
            payment_method=method,
            note=note,
            scheduled_date=scheduled,
            start_date=start,
            recurrence_type=repeat.lower() if repeat else None,
            weekly_days=weekly_days,
            monthly_interval=interval,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    if payment is None:
        fail(ctx, service.last_error)

    click.echo(f"Created planned payment '{payment.name}' (ID: {payment.id})")
    click.echo(f"  Schedule: {describe_schedule(payment)}")
    click.echo(f"  Next execution: {payment.next_execution_date or '-'}")


@planned_group.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include paused payments")
@click.pass_context
def list_payments(ctx, show_all: bool):
    """List planned payments by next execution date."""
    service = load_service(ctx)
    payments = service.planned_payments if show_all else service.get_active_payments()

    if not payments:
        click.echo("No planned payments found.")
        return

    click.echo(f"\nFound {len(payments)} planned payment(s):")
    echo_payment_table(payments)


@planned_group.command("show")
@click.argument("payment_id", type=int)
@click.pass_context
def show_payment(ctx, payment_id: int):
    """Show all fields of a planned payment."""
    service = load_service(ctx)
    payment = service.get_payment_by_id(payment_id)
    if payment is None:
        fail(ctx, f"Planned payment {payment_id} not found")

    click.echo(f"\nPlanned payment ID: {payment.id}")
    click.echo(f"  Name: {payment.name}")
    click.echo(f"  Type: {payment.type}")
    click.echo(f"  Amount: {payment.amount:,.2f}")
    click.echo(f"  Schedule: {describe_schedule(payment)}")
    click.echo(f"  Status: {'active' if payment.is_active else 'paused'}")
    click.echo(f"  Next execution: {payment.next_execution_date or '-'}")
    click.echo(f"  Last executed: {payment.last_executed_at or 'never'}")
    if payment.account_id is not None:
        click.echo(f"  Account ID: {payment.account_id}")
    if payment.destination_account_id is not None:
        click.echo(f"  Destination account ID: {payment.destination_account_id}")
    if payment.category_id is not None:
        click.echo(f"  Category ID: {payment.category_id}")
    if payment.payee:
        click.echo(f"  Payee: {payment.payee}")
    if payment.payment_method:
        click.echo(f"  Payment method: {payment.payment_method}")
    if payment.note:
        click.echo(f"  Note: {payment.note}")


@planned_group.command("edit")
@click.argument("payment_id", type=int)
@click.option("--name", help="New name")
@click.option("--amount", help="New amount")
@click.option("--account", help="New account name or ID")
@click.option("--to-account", help="New destination account name or ID")
@click.option("--category", help="New category name or ID")
@click.option("--payee", help="New payee")
@click.option("--method", type=click.Choice(PAYMENT_METHODS), help="New payment method")
@click.option("--note", help="New note")
@click.option("--on", "on_date", help="Make it a one-time payment on this date")
@click.option(
    "--repeat",
    type=click.Choice(RECURRENCE_TYPES, case_sensitive=False),
    help="Make it a recurring payment",
)
@click.option("--start", "start_date", help="New first occurrence")
@click.option("--days", help="New weekdays for weekly payments")
@click.option("--interval", type=click.IntRange(min=1), help="New number of months between payments")
@click.pass_context
def edit_payment(
    ctx,
    payment_id: int,
    name: str | None,
    amount: str | None,
    account: str | None,
    to_account: str | None,
    category: str | None,
    payee: str | None,
    method: str | None,
    note: str | None,
    on_date: str | None,
    repeat: str | None,
    start_date: str | None,
    days: str | None,
    interval: int | None,
):
    """Edit a planned payment.

    Changing the schedule recalculates the next execution date.

    Examples:
        plannedpay planned edit 3 --interval 2
        plannedpay planned edit 3 --note "Landlord changed bank"
    """
    if on_date is not None and repeat is not None:
        fail(ctx, "--on and --repeat cannot be combined")

    db = ctx.obj["db"]
    account_service = AccountService(db)
    changes = {}

    if name is not None:
        changes["name"] = name
    if amount is not None:
        changes["amount"] = _parse_amount_option(ctx, amount)
    if account is not None:
        changes["account_id"] = resolve_account_or_exit(ctx, account_service, account)
    if to_account is not None:
        changes["destination_account_id"] = resolve_account_or_exit(ctx, account_service, to_account)
    if category is not None:
        changes["category_id"] = resolve_category_or_exit(ctx, CategoryService(db), category)
    if payee is not None:
        changes["payee"] = payee
    if method is not None:
        changes["payment_method"] = method
    if note is not None:
        changes["note"] = note
    if on_date is not None:
        changes["frequency"] = ONE_TIME
        changes["scheduled_date"] = _parse_date_option(ctx, on_date, "date")
    if repeat is not None:
        changes["frequency"] = RECURRENT
        changes["recurrence_type"] = repeat.lower()
    if start_date is not None:
        changes["start_date"] = _parse_date_option(ctx, start_date, "start date")
    if days is not None:
        changes["weekly_days"] = _parse_days_option(ctx, days)
    if interval is not None:
        changes["monthly_interval"] = interval

    if not changes:
        fail(ctx, "Nothing to change")

    service = load_service(ctx)
    try:
        updated = service.update_planned_payment(payment_id, changes)
    except DomainError as e:
        handle_domain_error(ctx, e)
    if not updated:
        fail(ctx, service.last_error)

    payment = service.get_payment_by_id(payment_id)
    click.echo(f"Updated planned payment {payment_id}")
    click.echo(f"  Next execution: {payment.next_execution_date or '-'}")


@planned_group.command("delete")
@click.argument("payment_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_payment(ctx, payment_id: int, yes: bool):
    """Delete a planned payment. Transactions it already created are kept."""
    service = load_service(ctx)
    payment = service.get_payment_by_id(payment_id)
    if payment is None:
        fail(ctx, f"Planned payment {payment_id} not found")

    if not yes:
        click.confirm(f"Delete planned payment '{payment.name}'?", abort=True)

    if not service.delete_planned_payment(payment_id):
        fail(ctx, service.last_error)
    click.echo(f"Deleted planned payment {payment_id}")


@planned_group.command("toggle")
@click.argument("payment_id", type=int)
@click.pass_context
def toggle_payment(ctx, payment_id: int):
    """Pause an active planned payment or resume a paused one."""
    service = load_service(ctx)
    if not service.toggle_active(payment_id):
        fail(ctx, service.last_error)

    payment = service.get_payment_by_id(payment_id)
    state = "resumed" if payment.is_active else "paused"
    click.echo(f"Planned payment {payment_id} {state}")


@planned_group.command("upcoming")
@click.option("--days", type=click.IntRange(min=0), default=30, show_default=True, help="Days ahead to look")
@click.pass_context
def upcoming_payments(ctx, days: int):
    """List active payments due in the next few days."""
    service = load_service(ctx)
    payments = service.get_upcoming_payments(days)

    if not payments:
        click.echo(f"No planned payments in the next {days} day(s).")
        return

    click.echo(f"\n{len(payments)} planned payment(s) in the next {days} day(s):")
    echo_payment_table(payments)


@planned_group.command("due")
@click.pass_context
def due_payments(ctx):
    """List active payments that are due now."""
    service = load_service(ctx)
    payments = service.get_due_payments()

    if not payments:
        click.echo("No planned payments are due.")
        return

    click.echo(f"\n{len(payments)} planned payment(s) due:")
    echo_payment_table(payments)


def register_commands(cli):
    """Register planned payment commands with main CLI."""
    cli.add_command(planned_group, name="planned")
