"""Execute due planned payments."""

import click
from plannedpay.cli.commands.planned import load_service
from plannedpay.domain.transaction import TransactionService


@click.command("run")
@click.pass_context
def run_due_payments(ctx):
    """Record every due planned payment as a transaction.

    Payments whose transaction cannot be recorded stay due and are retried
    on the next run.
    """
    user_id = ctx.obj["user_id"]
    service = load_service(ctx)
    transaction_service = TransactionService(ctx.obj["db"])

    due_count = len(service.get_due_payments())
    if due_count == 0:
        click.echo("No planned payments are due.")
        return

    created = service.check_and_execute_due_payments(user_id, transaction_service.create_transaction)

    click.echo(f"Executed {len(created)} of {due_count} due planned payment(s).")
    for txn in created:
        click.echo(
            f"  Transaction {txn.id}: {txn.name} {txn.type} {txn.amount:,.2f} on {txn.transaction_date}"
        )
    if len(created) < due_count:
        click.echo(
            f"{due_count - len(created)} planned payment(s) could not be executed and remain due.",
            err=True,
        )
        ctx.exit(1)


def register_commands(cli):
    """Register run command with main CLI."""
    cli.add_command(run_due_payments)
