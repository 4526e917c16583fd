"""CLI helpers for resolving account and category references."""

from __future__ import annotations

import click
from plannedpay.cli.error_handling import fail
from plannedpay.domain.account import AccountService
from plannedpay.domain.category import CategoryService
from plannedpay.domain.errors import account_not_found, category_not_found


def resolve_account(account_service: AccountService, user_id: str, account: str) -> int:
    """Resolve account name or ID to account ID.

    Args:
        account_service: AccountService instance
        user_id: Owner of the account
        account: Account name or ID (string representation of int)

    Returns:
        Account ID

    Raises:
        ValueError: If account is not found
    """
    try:
        account_id = int(account)
    except (ValueError, TypeError):
        # Not a number, treat as name
        pass
    else:
        account_obj = account_service.get_account(account_id)
        if account_obj is None or account_obj.user_id != user_id:
            raise ValueError(account_not_found(account_id))
        return account_id

    for acc in account_service.list_accounts(user_id):
        if acc.name == account:
            return acc.id

    raise ValueError(f"Account '{account}' not found")


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str
) -> int:
    """Resolve an account reference of the current user, or exit with status 1."""
    try:
        return resolve_account(account_service, ctx.obj["user_id"], account)
    except ValueError as exc:
        fail(ctx, str(exc))


def resolve_category_or_exit(
    ctx: click.Context, category_service: CategoryService, category: str
) -> int:
    """Resolve category name or ID, or exit with a CLI error."""
    user_id = ctx.obj["user_id"]
    if category.isdigit():
        category_obj = category_service.get_category(int(category))
        if category_obj is not None and category_obj.user_id == user_id:
            return category_obj.id
        fail(ctx, category_not_found(int(category)))
    else:
        category_obj = category_service.get_category_by_name(user_id, category)
        if category_obj is not None:
            return category_obj.id

    fail(ctx, f"Category '{category}' not found")
