"""Tests for accounts: service and commands."""

import pytest
from plannedpay.cli.main import cli
from plannedpay.domain.errors import ConflictError, ValidationError


def test_create_account(account_service, user_id):
    """Test creating an account through the service."""
    account_id = account_service.create_account(user_id, "Savings", "savings")

    account = account_service.get_account(account_id)
    assert account.name == "Savings"
    assert account.account_type == "savings"


def test_create_account_duplicate_name(account_service, sample_account, user_id):
    """Test that a user cannot have two accounts with the same name."""
    with pytest.raises(ConflictError):
        account_service.create_account(user_id, "Checking")


def test_same_name_for_other_user(account_service, sample_account):
    """Test that account names are only unique per user."""
    account_id = account_service.create_account("user-2", "Checking")
    assert account_id != sample_account.id


def test_create_account_invalid_type(account_service, user_id):
    with pytest.raises(ValidationError):
        account_service.create_account(user_id, "Odd", "piggy_bank")


def test_account_create_command(cli_runner, temp_db):
    """Test creating an account from the command line."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "create", "Wallet", "--type", "cash"]
    )

    assert result.exit_code == 0
    assert "Created account 'Wallet'" in result.output
    assert "ID:" in result.output


def test_account_list_empty(cli_runner, temp_db):
    """Test listing accounts when none exist."""
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list"])

    assert result.exit_code == 0
    assert "No accounts found" in result.output


def test_account_list_with_data(cli_runner, temp_db, sample_account, user_id):
    """Test listing accounts with data."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "--user", user_id, "account", "list"]
    )

    assert result.exit_code == 0
    assert "Checking" in result.output
    assert "general" in result.output


def test_account_list_hides_other_users(cli_runner, temp_db, sample_account):
    """Test that the default user does not see another user's accounts."""
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list"])

    assert result.exit_code == 0
    assert "No accounts found" in result.output


def test_account_create_duplicate(cli_runner, temp_db):
    """Test creating duplicate account name fails."""
    result1 = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "create", "Checking"]
    )
    assert result1.exit_code == 0

    result2 = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "create", "Checking"]
    )

    assert result2.exit_code == 1
    assert "already exists" in result2.output.lower()
