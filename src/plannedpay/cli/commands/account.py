"""Account management commands."""

import click
from plannedpay.cli.error_handling import handle_domain_error
from plannedpay.domain.account import AccountService
from plannedpay.domain.entities import ACCOUNT_TYPES
from plannedpay.domain.errors import DomainError


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    default="general",
    show_default=True,
    help="Account type",
)
@click.pass_context
def create_account(ctx, name: str, account_type: str):
    """Create a new account.

    Examples:
        plannedpay account create "Checking"
        plannedpay account create "Wallet" --type cash
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    try:
        account_id = service.create_account(
            user_id=ctx.obj["user_id"], name=name, account_type=account_type.lower()
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name}' (ID: {account_id})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts(ctx.obj["user_id"])
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        click.echo(f"ID: {acc.id:3d} | {acc.name:20s} | Type: {acc.account_type}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
