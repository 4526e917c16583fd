"""Transaction viewing commands."""

import click
from plannedpay.cli.error_handling import fail
from plannedpay.domain.transaction import TransactionService
from plannedpay.utils.date_parser import parse_date


@click.command("view")
@click.option("--start-date", help="Start date (YYYY-MM-DD)")
@click.option("--end-date", help="End date (YYYY-MM-DD)")
@click.option("--planned", "planned_payment_id", type=int, help="Only transactions created by this planned payment")
@click.option("--verbose", "-v", is_flag=True, help="Show all fields including accounts, payee and status")
@click.pass_context
def view_transactions(
    ctx, start_date: str, end_date: str, planned_payment_id: int, verbose: bool
):
    """View ledger transactions with optional filters."""
    service = TransactionService(ctx.obj["db"])

    # Parse dates
    start = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            fail(ctx, f"Invalid start date: {e}")

    end = None
    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            fail(ctx, f"Invalid end date: {e}")

    transactions = service.list_transactions(
        ctx.obj["user_id"],
        start_date=start,
        end_date=end,
        planned_payment_id=planned_payment_id,
    )

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    if verbose:
        click.echo("=" * 100)
        for txn in transactions:
            click.echo(f"\nTransaction ID: {txn.id}")
            click.echo(f"  Date: {txn.transaction_date}")
            click.echo(f"  Name: {txn.name or ''}")
            click.echo(f"  Type: {txn.type}")
            click.echo(f"  Amount: {txn.amount:,.2f}")
            click.echo(f"  Status: {txn.status}")
            if txn.source_account_id is not None:
                click.echo(f"  From account ID: {txn.source_account_id}")
            if txn.destination_account_id is not None:
                click.echo(f"  To account ID: {txn.destination_account_id}")
            if txn.category_id is not None:
                click.echo(f"  Category ID: {txn.category_id}")
            if txn.payee:
                click.echo(f"  Payee: {txn.payee}")
            if txn.payment_method:
                click.echo(f"  Payment method: {txn.payment_method}")
            if txn.planned_payment_id is not None:
                click.echo(f"  Planned payment ID: {txn.planned_payment_id}")
            if txn.note:
                click.echo(f"  Note: {txn.note}")
            click.echo("-" * 100)
    else:
        click.echo("-" * 90)
        click.echo(f"{'ID':<6} {'Date':<12} {'Type':<9} {'Amount':>12} {'Name':<24} {'Note':<24}")
        click.echo("-" * 90)
        for txn in transactions:
            click.echo(
                f"{txn.id:<6} {str(txn.transaction_date):<12} {txn.type:<9} "
                f"{txn.amount:>12,.2f} {(txn.name or '')[:24]:<24} {(txn.note or '')[:24]:<24}"
            )


def register_commands(cli):
    """Register view command with main CLI."""
    cli.add_command(view_transactions)
