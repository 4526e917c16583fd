"""CLI error handling helpers."""

import logging
from typing import NoReturn

import click

from plannedpay.domain.errors import DomainError

logger = logging.getLogger(__name__)


def echo_error(message: str) -> None:
    click.echo(f"Error: {message}", err=True)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> NoReturn:
    """Report a rejected operation and exit with status 1."""
    logger.debug("Command %s rejected: %r", ctx.info_name, error)
    echo_error(str(error))
    ctx.exit(1)


def fail(ctx: click.Context, message: str | None) -> NoReturn:
    """Report a failed operation and exit with status 1.

    Services leave ``last_error`` empty for some failures, hence the fallback text.
    """
    echo_error(message or "Operation failed")
    ctx.exit(1)
