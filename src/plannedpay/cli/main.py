"""Main CLI entry point."""

import click
from plannedpay.database.factories import create_database
from plannedpay.logging_config import setup_logging

# Import and register all commands at module level
from plannedpay.cli.commands import (
    account,
    category,
    planned,
    run,
    view,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides PLANNEDPAY_DB_PATH environment variable)",
    envvar="PLANNEDPAY_DB_PATH",
)
@click.option(
    "--demo",
    is_flag=True,
    help=(
        "Run against an empty in-memory database. "
        "Every invocation starts fresh and nothing is saved"
    ),
)
@click.option(
    "--user",
    "user_id",
    default="local",
    show_default=True,
    help="User whose data is shown and changed",
    envvar="PLANNEDPAY_USER",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging level",
    envvar="PLANNEDPAY_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, demo: bool, user_id: str, log_level: str):
    """Plannedpay - planned and recurring payment tracker.

    Schedule one-time and recurring income, expenses and transfers, and turn
    them into ledger transactions when they come due.
    """
    ctx.ensure_object(dict)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        setup_logging(log_level)
        db = create_database(db_path, demo=demo)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["user_id"] = user_id
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
category.register_commands(cli)
planned.register_commands(cli)
run.register_commands(cli)
view.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
